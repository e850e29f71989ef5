import logging
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Iterable, List, Optional

import httpx
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from supabase import AuthError, Client, PostgrestAPIError, StorageException, create_client

from . import constants
from .exceptions import AuthenticationFailed, DataServiceError
from .models import Appointment, CustomerRecord, GalleryStyle, PriceItem

logger = logging.getLogger(__name__)

SERVICE_ERRORS = (PostgrestAPIError, StorageException, AuthError, httpx.HTTPError)

SESSION_KEY = "sb_admin"


@dataclass(frozen=True)
class AdminSession:
    """Supabase auth state for one signed-in browser, kept in the Django session."""

    access_token: str
    refresh_token: str
    user_id: str
    email: str
    is_admin: bool = False

    @classmethod
    def from_session(cls, session) -> Optional["AdminSession"]:
        data = session.get(SESSION_KEY)
        if not data:
            return None
        try:
            return cls(**data)
        except TypeError:
            # stale cookie from an older layout
            return None

    def store(self, session):
        session[SESSION_KEY] = {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "user_id": self.user_id,
            "email": self.email,
            "is_admin": self.is_admin,
        }

    @staticmethod
    def clear(session):
        session.pop(SESSION_KEY, None)


def path_from_public_url(url: str, bucket: str) -> str:
    """Object path inside ``bucket`` for a public storage URL."""
    marker = f"/public/{bucket}/"
    if marker in url:
        return url.split(marker, 1)[1].split("?", 1)[0]
    return url.rsplit("/", 1)[-1]


class SalonDataService:
    """
    Thin wrapper over the Supabase client.

    Every public method performs exactly one round trip (uploads: one per file)
    and raises DataServiceError when Supabase or the network fails, so callers
    never see driver exceptions.
    """

    def __init__(self, client: Client, url: str = "", key: str = "",
                 gallery_bucket: str = "styles", customer_bucket: str = "customer-photos"):
        self.client = client
        self.url = url
        self.key = key
        self.gallery_bucket = gallery_bucket
        self.customer_bucket = customer_bucket

    @classmethod
    def connect(cls, url: str, key: str, **buckets) -> "SalonDataService":
        return cls(create_client(url, key), url, key, **buckets)

    def for_session(self, admin: AdminSession) -> "SalonDataService":
        """A service whose requests run with the admin's JWT (row level security)."""
        client = self._new_client()
        try:
            client.auth.set_session(admin.access_token, admin.refresh_token)
        except SERVICE_ERRORS as e:
            logger.warning("Could not restore session for %s: %s", admin.email, e)
            raise AuthenticationFailed("Your session has expired. Please sign in again.") from e
        return SalonDataService(client, self.url, self.key, self.gallery_bucket, self.customer_bucket)

    # --- helpers ---
    def _new_client(self) -> Client:
        # auth calls mutate client state, so they never run on the shared client
        return create_client(self.url, self.key)

    def _execute(self, operation: str, query) -> List[dict]:
        try:
            response = query.execute()
        except SERVICE_ERRORS as e:
            logger.error("Supabase %s failed: %s", operation, e)
            raise DataServiceError(operation, e) from e
        return response.data or []

    def _table(self, name: str):
        return self.client.table(name)

    # --- Appointments ---
    def list_appointments(self) -> List[Appointment]:
        rows = self._execute(
            "list appointments",
            self._table(constants.TABLE_APPOINTMENTS)
            .select("*")
            .order("preferred_date")
            .order("preferred_time"),
        )
        return [Appointment.from_row(row) for row in rows]

    def find_appointments_by_phone(self, phone: str) -> List[Appointment]:
        """Exact match on customer_phone; no normalisation of the stored value."""
        rows = self._execute(
            "track appointments",
            self._table(constants.TABLE_APPOINTMENTS)
            .select("*")
            .eq("customer_phone", phone)
            .order("preferred_date", desc=True),
        )
        return [Appointment.from_row(row) for row in rows]

    def create_appointment(self, data: dict) -> Appointment:
        payload = dict(data, status=Appointment.STATUS_PENDING)
        rows = self._execute(
            "create appointment",
            self._table(constants.TABLE_APPOINTMENTS).insert(payload),
        )
        if not rows:
            raise DataServiceError("create appointment", "no row returned")
        appointment = Appointment.from_row(rows[0])
        logger.info("New appointment %s for %s on %s %s", appointment.id,
                    appointment.service_type, appointment.preferred_date, appointment.preferred_time)
        return appointment

    def update_appointment_status(self, appointment_id: str, status: str) -> List[dict]:
        rows = self._execute(
            f"update status of appointment {appointment_id}",
            self._table(constants.TABLE_APPOINTMENTS).update({"status": status}).eq("id", appointment_id),
        )
        logger.info("Appointment %s marked as %s", appointment_id, status)
        return rows

    # --- Gallery ---
    def list_gallery_styles(self, featured_only: bool = False) -> List[GalleryStyle]:
        query = self._table(constants.TABLE_GALLERY_STYLES).select("*")
        if featured_only:
            query = query.eq("is_featured", True)
        rows = self._execute("list gallery styles", query.order("created_at", desc=True))
        return [GalleryStyle.from_row(row) for row in rows]

    def create_gallery_style(self, data: dict) -> GalleryStyle:
        rows = self._execute(
            "create gallery style",
            self._table(constants.TABLE_GALLERY_STYLES).insert(data),
        )
        if not rows:
            raise DataServiceError("create gallery style", "no row returned")
        return GalleryStyle.from_row(rows[0])

    def set_featured(self, style_id: str, featured: bool):
        self._execute(
            f"update gallery style {style_id}",
            self._table(constants.TABLE_GALLERY_STYLES).update({"is_featured": featured}).eq("id", style_id),
        )

    def delete_gallery_style(self, style: GalleryStyle):
        self._execute(
            f"delete gallery style {style.id}",
            self._table(constants.TABLE_GALLERY_STYLES).delete().eq("id", style.id),
        )
        self._remove_orphans(self.gallery_bucket, [style.image_url])

    def get_gallery_style(self, style_id: str) -> Optional[GalleryStyle]:
        rows = self._execute(
            f"get gallery style {style_id}",
            self._table(constants.TABLE_GALLERY_STYLES).select("*").eq("id", style_id).limit(1),
        )
        return GalleryStyle.from_row(rows[0]) if rows else None

    # --- Price list ---
    def list_prices(self, active_only: bool = False) -> List[PriceItem]:
        query = self._table(constants.TABLE_PRICE_LIST).select("*")
        if active_only:
            query = query.eq("is_active", True)
        rows = self._execute("list prices", query.order("category").order("service_name"))
        return [PriceItem.from_row(row) for row in rows]

    def create_price(self, data: dict):
        self._execute("create price", self._table(constants.TABLE_PRICE_LIST).insert(data))

    def update_price(self, price_id: str, data: dict):
        self._execute(
            f"update price {price_id}",
            self._table(constants.TABLE_PRICE_LIST).update(data).eq("id", price_id),
        )

    def delete_price(self, price_id: str):
        self._execute(
            f"delete price {price_id}",
            self._table(constants.TABLE_PRICE_LIST).delete().eq("id", price_id),
        )

    # --- Customer records ---
    def list_customer_records(self) -> List[CustomerRecord]:
        rows = self._execute(
            "list customer records",
            self._table(constants.TABLE_CUSTOMER_RECORDS).select("*").order("appointment_date", desc=True),
        )
        return [CustomerRecord.from_row(row) for row in rows]

    def get_customer_record(self, record_id: str) -> Optional[CustomerRecord]:
        rows = self._execute(
            f"get customer record {record_id}",
            self._table(constants.TABLE_CUSTOMER_RECORDS).select("*").eq("id", record_id).limit(1),
        )
        return CustomerRecord.from_row(rows[0]) if rows else None

    def create_customer_record(self, data: dict) -> CustomerRecord:
        rows = self._execute(
            "create customer record",
            self._table(constants.TABLE_CUSTOMER_RECORDS).insert(data),
        )
        if not rows:
            raise DataServiceError("create customer record", "no row returned")
        return CustomerRecord.from_row(rows[0])

    def delete_customer_record(self, record: CustomerRecord):
        self._execute(
            f"delete customer record {record.id}",
            self._table(constants.TABLE_CUSTOMER_RECORDS).delete().eq("id", record.id),
        )
        self._remove_orphans(self.customer_bucket, record.photos)

    # --- Storage ---
    def _remove_orphans(self, bucket: str, urls: Iterable[str]):
        """Best-effort cleanup of blobs whose row is already gone."""
        paths = [path_from_public_url(url, bucket) for url in urls if url]
        if not paths:
            return
        try:
            self.remove_files(bucket, paths)
        except DataServiceError:
            logger.warning("Row deleted but files %s are still in %s", paths, bucket)

    def upload_file(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        """Store one blob and return its public URL."""
        store = self.client.storage.from_(bucket)
        try:
            store.upload(path, content, {"content-type": content_type})
        except SERVICE_ERRORS as e:
            logger.error("Upload of %s to %s failed: %s", path, bucket, e)
            raise DataServiceError(f"upload of {path}", e) from e
        logger.info("Uploaded %s to bucket %s", path, bucket)
        return store.get_public_url(path)

    def remove_files(self, bucket: str, paths: Iterable[str]):
        paths = list(paths)
        try:
            self.client.storage.from_(bucket).remove(paths)
        except SERVICE_ERRORS as e:
            logger.error("Removing %s from %s failed: %s", paths, bucket, e)
            raise DataServiceError(f"remove {len(paths)} file(s)", e) from e
        logger.info("Removed %s from bucket %s", paths, bucket)

    # --- Auth ---
    def sign_in(self, email: str, password: str) -> AdminSession:
        client = self._new_client()
        try:
            response = client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.info("Sign in refused for %s: %s", email, e)
            raise AuthenticationFailed("Invalid email or password") from e
        except SERVICE_ERRORS as e:
            raise DataServiceError("sign in", e) from e

        if not response.session or not response.user:
            raise AuthenticationFailed("Invalid email or password")

        admin = AdminSession(
            access_token=response.session.access_token,
            refresh_token=response.session.refresh_token,
            user_id=str(response.user.id),
            email=response.user.email or email,
        )
        signed_in = SalonDataService(client, self.url, self.key, self.gallery_bucket, self.customer_bucket)
        return replace(admin, is_admin=signed_in.is_admin(admin.user_id))

    def sign_up(self, email: str, password: str):
        try:
            self._new_client().auth.sign_up({"email": email, "password": password})
        except AuthError as e:
            message = str(e)
            if "already registered" in message.lower():
                raise AuthenticationFailed("This email is already registered. Please sign in instead.") from e
            raise AuthenticationFailed(message) from e
        except SERVICE_ERRORS as e:
            raise DataServiceError("sign up", e) from e
        logger.info("Account created for %s", email)

    def sign_out(self):
        try:
            self.client.auth.sign_out()
        except SERVICE_ERRORS as e:
            # the local session is dropped anyway
            logger.warning("Supabase sign out failed: %s", e)

    def current_tokens(self):
        """(access_token, refresh_token) currently held by the auth client, if any."""
        try:
            session = self.client.auth.get_session()
        except SERVICE_ERRORS as e:
            raise AuthenticationFailed("Your session has expired. Please sign in again.") from e
        if not session:
            return None
        return session.access_token, session.refresh_token

    def is_admin(self, user_id: str) -> bool:
        rows = self._execute(
            "role lookup",
            self._table(constants.TABLE_USER_ROLES)
            .select("role")
            .eq("user_id", user_id)
            .eq("role", constants.ADMIN_ROLE),
        )
        return bool(rows)


@lru_cache(maxsize=1)
def get_data_service() -> SalonDataService:
    """Process-wide anonymous client, built on first use from settings."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        raise ImproperlyConfigured("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
    return SalonDataService.connect(
        settings.SUPABASE_URL,
        settings.SUPABASE_ANON_KEY,
        gallery_bucket=settings.SUPABASE_GALLERY_BUCKET,
        customer_bucket=settings.SUPABASE_CUSTOMER_BUCKET,
    )
