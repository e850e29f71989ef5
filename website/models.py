"""
Row types for the Supabase collections.

Nothing here is a Django model: every row is owned by Supabase and we only
keep short-lived copies while a page is being built.
"""
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from django.utils.dateparse import parse_date, parse_datetime

from .exceptions import InvalidStatusTransition


def _timestamp(value) -> Optional[datetime]:
    if not value or isinstance(value, datetime):
        return value or None
    try:
        return parse_datetime(value)
    except ValueError:
        return None


def _decimal(value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, TypeError):
        return Decimal("0")


@dataclass(frozen=True)
class Appointment:
    STATUS_PENDING = "pending"
    STATUS_CONFIRMED = "confirmed"
    STATUS_COMPLETED = "completed"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_CONFIRMED, "Confirmed"),
        (STATUS_COMPLETED, "Completed"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    id: str
    customer_name: str
    customer_phone: str
    service_type: str
    preferred_date: str  # 'YYYY-MM-DD', never converted between time zones
    preferred_time: str  # slot label, e.g. '10:00 AM'
    status: str = STATUS_PENDING
    customer_email: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "Appointment":
        return cls(
            id=str(row["id"]),
            customer_name=row.get("customer_name") or "",
            customer_phone=row.get("customer_phone") or "",
            service_type=row.get("service_type") or "",
            preferred_date=row.get("preferred_date") or "",
            preferred_time=row.get("preferred_time") or "",
            status=row.get("status") or cls.STATUS_PENDING,
            customer_email=row.get("customer_email") or None,
            notes=row.get("notes") or None,
            created_at=_timestamp(row.get("created_at")),
        )

    @property
    def preferred_day(self) -> Optional[date]:
        try:
            return parse_date(self.preferred_date)
        except ValueError:
            return None

    @property
    def status_label(self) -> str:
        return dict(self.STATUS_CHOICES).get(self.status, self.status.title())

    @property
    def next_statuses(self) -> List[str]:
        """Statuses an admin may move this appointment to."""
        return list(ALLOWED_TRANSITIONS.get(self.status, ()))

    def with_status(self, status: str) -> "Appointment":
        return replace(self, status=status)


STATUSES = [value for value, _label in Appointment.STATUS_CHOICES]

ALLOWED_TRANSITIONS = {
    Appointment.STATUS_PENDING: (Appointment.STATUS_CONFIRMED, Appointment.STATUS_CANCELLED),
    Appointment.STATUS_CONFIRMED: (Appointment.STATUS_COMPLETED,),
    Appointment.STATUS_COMPLETED: (),
    Appointment.STATUS_CANCELLED: (),
}


def check_transition(current: str, target: str) -> bool:
    """
    Validate a status change before it is sent to Supabase.

    Returns False when nothing has to change (target == current), True when
    the move is legal, and raises InvalidStatusTransition otherwise.
    Completed and cancelled appointments are terminal.
    """
    if target not in ALLOWED_TRANSITIONS:
        raise InvalidStatusTransition(current, target)
    if current == target:
        return False
    if target not in ALLOWED_TRANSITIONS.get(current, ()):
        raise InvalidStatusTransition(current, target)
    return True


@dataclass(frozen=True)
class GalleryStyle:
    id: str
    title: str
    category: str
    image_url: str
    description: Optional[str] = None
    is_featured: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "GalleryStyle":
        return cls(
            id=str(row["id"]),
            title=row.get("title") or "",
            category=row.get("category") or "",
            image_url=row.get("image_url") or "",
            description=row.get("description") or None,
            is_featured=bool(row.get("is_featured")),
            created_at=_timestamp(row.get("created_at")),
        )


@dataclass(frozen=True)
class PriceItem:
    id: str
    service_name: str
    category: str
    price: Decimal
    duration: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True

    @classmethod
    def from_row(cls, row: dict) -> "PriceItem":
        return cls(
            id=str(row["id"]),
            service_name=row.get("service_name") or "",
            category=row.get("category") or "",
            price=_decimal(row.get("price")),
            duration=row.get("duration") or None,
            description=row.get("description") or None,
            is_active=row.get("is_active", True) is not False,
        )


@dataclass(frozen=True)
class CustomerRecord:
    id: str
    customer_name: str
    style_done: str
    appointment_date: str
    customer_phone: Optional[str] = None
    notes: Optional[str] = None
    photos: List[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: dict) -> "CustomerRecord":
        return cls(
            id=str(row["id"]),
            customer_name=row.get("customer_name") or "",
            style_done=row.get("style_done") or "",
            appointment_date=row.get("appointment_date") or "",
            customer_phone=row.get("customer_phone") or None,
            notes=row.get("notes") or None,
            photos=list(row.get("photos") or []),
            created_at=_timestamp(row.get("created_at")),
            updated_at=_timestamp(row.get("updated_at")),
        )

    def matches(self, term: str) -> bool:
        """Admin search: name/style case-insensitive, phone as typed."""
        if not term:
            return True
        needle = term.lower()
        return (
            needle in self.customer_name.lower()
            or needle in self.style_done.lower()
            or bool(self.customer_phone and term in self.customer_phone)
        )
