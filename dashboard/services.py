import logging
import os
import time
import uuid
from typing import Dict, Iterable, List, Optional

from website.data_service import SalonDataService, path_from_public_url
from website.exceptions import AppointmentNotFound, DataServiceError, PhotoUploadError
from website.models import Appointment, CustomerRecord, GalleryStyle, check_transition
from dashboard.utils.calendar_utils import sort_by_slot

logger = logging.getLogger(__name__)


class AppointmentBoard:
    """
    Appointments held for one admin page view.

    Status changes go to Supabase first; only when the update succeeds is the
    matching local entry replaced, keyed by id, so a failed or out-of-order
    request never disturbs the other entries.
    """

    def __init__(self, service: SalonDataService, appointments: Iterable[Appointment]):
        self.service = service
        self._items: Dict[str, Appointment] = {a.id: a for a in appointments}

    @classmethod
    def load(cls, service: SalonDataService) -> "AppointmentBoard":
        return cls(service, sort_by_slot(service.list_appointments()))

    @property
    def appointments(self) -> List[Appointment]:
        return list(self._items.values())

    def get(self, appointment_id: str) -> Appointment:
        try:
            return self._items[appointment_id]
        except KeyError:
            raise AppointmentNotFound(appointment_id) from None

    def change_status(self, appointment_id: str, status: str) -> Appointment:
        current = self.get(appointment_id)
        if not check_transition(current.status, status):
            # already there; nothing to send
            return current

        self.service.update_appointment_status(appointment_id, status)
        updated = current.with_status(status)
        self._items[appointment_id] = updated
        return updated


def _storage_name(filename: str, prefix: str = "") -> str:
    ext = os.path.splitext(filename)[1].lower() or ".jpg"
    stamp = int(time.time() * 1000)
    return f"{prefix}{stamp}-{uuid.uuid4().hex[:8]}{ext}"


def upload_photos(service: SalonDataService, bucket: str, files, prefix: str = "") -> List[str]:
    """
    Upload files one after another and return their public URLs.

    The batch is all-or-nothing: if one upload fails the blobs stored so far
    are removed before PhotoUploadError is raised.
    """
    uploaded: List[str] = []
    urls: List[str] = []
    for f in files:
        path = _storage_name(f.name, prefix)
        try:
            urls.append(service.upload_file(bucket, path, f.read(), getattr(f, "content_type", None) or "image/jpeg"))
        except DataServiceError as e:
            _discard(service, bucket, uploaded)
            raise PhotoUploadError(f.name, e.detail) from e
        uploaded.append(path)
    return urls


def _discard(service: SalonDataService, bucket: str, paths: List[str]):
    if not paths:
        return
    logger.warning("Rolling back %d uploaded file(s) in %s", len(paths), bucket)
    try:
        service.remove_files(bucket, paths)
    except DataServiceError:
        logger.error("Could not remove orphaned files %s from %s", paths, bucket)


def publish_gallery_style(service: SalonDataService, data: dict, image) -> GalleryStyle:
    urls = upload_photos(service, service.gallery_bucket, [image])
    try:
        return service.create_gallery_style(dict(data, image_url=urls[0]))
    except DataServiceError:
        _discard_urls(service, service.gallery_bucket, urls)
        raise


def store_customer_record(service: SalonDataService, data: dict, photos=()) -> CustomerRecord:
    """Insert a customer record only once every photo is safely stored."""
    urls = upload_photos(service, service.customer_bucket, photos, prefix="records/")
    try:
        return service.create_customer_record(dict(data, photos=urls or None))
    except DataServiceError:
        _discard_urls(service, service.customer_bucket, urls)
        raise


def _discard_urls(service: SalonDataService, bucket: str, urls: List[str]):
    _discard(service, bucket, [path_from_public_url(u, bucket) for u in urls])


def search_customer_records(records: Iterable[CustomerRecord], term: Optional[str]) -> List[CustomerRecord]:
    term = (term or "").strip()
    return [r for r in records if r.matches(term)]
