from datetime import MAXYEAR, MINYEAR, date, datetime, time

INPUT_FORMATS = ("%I:%M %p", "%H:%M")  # what we accept in parse_timeslot


def parse_timeslot(ts: str) -> time:
    """
    Convert slot labels like '10:00 AM' or '09:30' into a time object,
    so we can sort appointments by time ('9:00 AM' sorts after '10:00 AM' as text).
    """
    if not ts:
        return time(0, 0)

    ts = ts.strip()
    for fmt in INPUT_FORMATS:
        try:
            return datetime.strptime(ts, fmt).time()
        except ValueError:
            continue

    return time(0, 0)


def parse_month(value):
    """
    'YYYY-MM' -> date for the first of that month, or None.
    The first and last supported years are refused: the calendar needs the
    month before and after.
    """
    if not value:
        return None
    try:
        month = datetime.strptime(value, "%Y-%m").date()
    except (TypeError, ValueError):
        return None
    if not MINYEAR < month.year < MAXYEAR:
        return None
    return month


def month_param(d: date) -> str:
    return d.strftime("%Y-%m")
