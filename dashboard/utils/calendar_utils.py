from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional

from website.models import Appointment, STATUSES
from dashboard.utils.time_utils import month_param, parse_timeslot

PREVIEW_LIMIT = 3
WEEK_DAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
STATUS_FILTERS = ["all"] + STATUSES


def _add_months(d: date, n: int) -> date:
    """Return a date n months from d (always day=1)."""
    y = d.year + (d.month - 1 + n) // 12
    m = (d.month - 1 + n) % 12 + 1
    return date(y, m, 1)


def month_start(d: date) -> date:
    return d.replace(day=1)


def previous_month(d: date) -> date:
    return _add_months(d, -1)


def next_month(d: date) -> date:
    return _add_months(d, 1)


def jump_to_today(today: date) -> date:
    return month_start(today)


def days_in_month(year: int, month: int) -> int:
    """Number of days in month (1-12) of year, leap years included."""
    first = date(year, month, 1)
    return (_add_months(first, 1) - timedelta(days=1)).day


def first_weekday(year: int, month: int) -> int:
    """Weekday of the 1st, 0=Sunday .. 6=Saturday (number of leading blanks)."""
    return (date(year, month, 1).weekday() + 1) % 7


def date_key(year: int, month: int, day: int) -> str:
    return f"{year:04d}-{month:02d}-{day:02d}"


def group_by_date(appointments: Iterable[Appointment]) -> Dict[str, List[Appointment]]:
    """preferred_date -> appointments, keeping the input order inside each day."""
    groups: Dict[str, List[Appointment]] = {}
    for appt in appointments:
        groups.setdefault(appt.preferred_date, []).append(appt)
    return groups


def sort_by_slot(appointments: Iterable[Appointment]) -> List[Appointment]:
    """Order by date, then by the real time of the slot label."""
    return sorted(appointments, key=lambda a: (a.preferred_date, parse_timeslot(a.preferred_time)))


def filter_by_status(appointments: Iterable[Appointment], status: str) -> List[Appointment]:
    if status not in STATUS_FILTERS:
        raise ValueError(f"Unknown status filter: {status!r}")
    if status == "all":
        return list(appointments)
    return [a for a in appointments if a.status == status]


def pending_count(appointments: Iterable[Appointment]) -> int:
    return len(filter_by_status(appointments, Appointment.STATUS_PENDING))


@dataclass(frozen=True)
class MonthGrid:
    year: int
    month: int
    days_in_month: int
    first_weekday: int
    by_date: Dict[str, List[Appointment]] = field(default_factory=dict)


def build_month(appointments: Iterable[Appointment], year: int, month: int) -> MonthGrid:
    """Index appointments for one month; rows dated outside it are dropped."""
    prefix = f"{year:04d}-{month:02d}-"
    in_month = [a for a in appointments if a.preferred_date.startswith(prefix)]
    return MonthGrid(
        year=year,
        month=month,
        days_in_month=days_in_month(year, month),
        first_weekday=first_weekday(year, month),
        by_date=group_by_date(in_month),
    )


@dataclass(frozen=True)
class DayCell:
    day: int
    date_key: str
    is_today: bool
    appointments: List[Appointment]

    @property
    def total(self) -> int:
        return len(self.appointments)

    @property
    def preview(self) -> List[Appointment]:
        return self.appointments[:PREVIEW_LIMIT]

    @property
    def overflow(self) -> int:
        return max(self.total - PREVIEW_LIMIT, 0)

    @property
    def overflow_label(self) -> Optional[str]:
        return f"+{self.overflow} more" if self.overflow else None


def build_day_cells(grid: MonthGrid, today: date) -> List[DayCell]:
    cells = []
    for day in range(1, grid.days_in_month + 1):
        key = date_key(grid.year, grid.month, day)
        cells.append(DayCell(
            day=day,
            date_key=key,
            is_today=(today.year, today.month, today.day) == (grid.year, grid.month, day),
            appointments=grid.by_date.get(key, []),
        ))
    return cells


def build_appointment_calendar(appointments: Iterable[Appointment], base: date, today: date):
    """
    Month grid for the admin calendar.

    ``today`` is captured once by the caller for the whole request so that a
    render never straddles midnight.
    """
    current = month_start(base)
    grid = build_month(appointments, current.year, current.month)
    cells = build_day_cells(grid, today)

    # pad with blanks so every week row has 7 slots
    slots: List[Optional[DayCell]] = [None] * grid.first_weekday + cells
    slots += [None] * (-len(slots) % 7)
    weeks = [slots[i:i + 7] for i in range(0, len(slots), 7)]

    return {
        "month_label": current.strftime("%B %Y"),
        "month": month_param(current),
        "prev_month": month_param(previous_month(current)),
        "next_month": month_param(next_month(current)),
        "today_month": month_param(jump_to_today(today)),
        "week_days": WEEK_DAYS,
        "leading_blanks": grid.first_weekday,
        "cells": cells,
        "weeks": weeks,
    }


def calendar_as_json(calendar: dict) -> dict:
    """Plain-JSON version of build_appointment_calendar's result."""
    data = {k: v for k, v in calendar.items() if k not in ("cells", "weeks")}
    data["days"] = [
        {
            "day": cell.day,
            "date": cell.date_key,
            "is_today": cell.is_today,
            "total": cell.total,
            "overflow": cell.overflow,
            "preview": [
                {
                    "id": a.id,
                    "customer_name": a.customer_name,
                    "preferred_time": a.preferred_time,
                    "status": a.status,
                }
                for a in cell.preview
            ],
        }
        for cell in calendar["cells"]
    ]
    return data
