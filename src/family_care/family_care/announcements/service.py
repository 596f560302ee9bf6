from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..common.app_logger import get_logger
from ..common.datetime_utils import now_local
from ..core.enums import AnnouncementType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Announcement
from .repository import AnnouncementRepository

logger = get_logger(__name__)


def check_window(start_date: Optional[datetime], end_date: Optional[datetime]) -> None:
    if start_date and end_date and start_date > end_date:
        raise ValidationError("Start date must be before or equal to end date")


class AnnouncementService:
    def __init__(self, announcements: AnnouncementRepository, clock=now_local):
        self._announcements = announcements
        self._clock = clock

    def list_all(self) -> Sequence[Announcement]:
        return self._announcements.list_all()

    def active(self) -> Sequence[Announcement]:
        return self._announcements.list_visible(self._clock())

    def for_login_page(self) -> Sequence[Announcement]:
        return self._announcements.list_visible(self._clock(), login_required=False)

    def for_dashboard(self) -> dict:
        """Announcements for signed-in staff; `major` drives the dashboard pop-up."""
        items = list(self._announcements.list_visible(self._clock(), login_required=True))
        return {
            "announcements": items,
            "major": [a for a in items if a.type == AnnouncementType.MAJOR],
        }

    def get(self, announcement_id: str) -> Announcement:
        found = self._announcements.get(announcement_id)
        if not found:
            raise NotFoundError("Announcement not found")
        return found

    def get_public(self, announcement_id: str) -> Announcement:
        found = self._announcements.get(announcement_id)
        if not found or not found.is_active or found.is_login_required:
            raise NotFoundError("Announcement not found")
        return found

    def create(self, *, created_by: str, fields: dict) -> Announcement:
        check_window(fields.get("start_date"), fields.get("end_date"))
        created = self._announcements.create(created_by=created_by, fields=fields)
        logger.info("Announcement %s (%s) created by %s", created.id, created.type.value, created_by)
        return created

    def update(self, announcement_id: str, changes: dict) -> Announcement:
        current = self.get(announcement_id)
        changes = {k: v for k, v in changes.items() if v is not None}
        check_window(changes.get("start_date", current.start_date), changes.get("end_date", current.end_date))
        updated = self._announcements.update(announcement_id, changes)
        if not updated:
            raise NotFoundError("Announcement not found")
        return updated

    def delete(self, announcement_id: str) -> None:
        if not self._announcements.delete(announcement_id):
            raise NotFoundError("Announcement not found")
        logger.info("Announcement %s deleted", announcement_id)
