from __future__ import annotations

from typing import Sequence

from ..common.app_logger import get_logger
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..families.model import FamilyFilters
from ..families.repository import FamilyRepository
from .attendance import attendance_stats, build_initial_attendance
from .model import Attendance, AttendanceStats, Event
from .repository import EventRepository

logger = get_logger(__name__)


class EventService:
    """Use case: events and their per-member roll call."""

    def __init__(self, events: EventRepository, families: FamilyRepository):
        self._events = events
        self._families = families

    def list_events(self, *, active_only: bool = False) -> Sequence[Event]:
        return self._events.list_events(active_only=active_only)

    def get(self, event_id: str) -> Event:
        event = self._events.get(event_id)
        if not event:
            raise NotFoundError("Event not found")
        return event

    def create(self, *, created_by: str, fields: dict) -> Event:
        families = self._families.search(FamilyFilters())
        rows = build_initial_attendance(families, created_by)
        event = self._events.create(created_by=created_by, fields=fields, attendance=rows)
        logger.info("Event %s created with %d attendance rows", event.id, len(rows))
        return event

    def update(self, event_id: str, changes: dict) -> Event:
        changes = {k: v for k, v in changes.items() if v is not None}
        updated = self._events.update(event_id, changes)
        if not updated:
            raise NotFoundError("Event not found")
        return updated

    def delete(self, event_id: str) -> None:
        if not self._events.delete(event_id):
            raise NotFoundError("Event not found")
        logger.info("Event %s deleted", event_id)

    def attendance(self, event_id: str) -> Sequence[Attendance]:
        self.get(event_id)
        return self._events.list_attendance(event_id)

    def initialize_missing(self, event_id: str, *, updated_by: str) -> int:
        """Add roll-call rows for families that have none yet (e.g. registered after the event)."""
        self.get(event_id)
        covered = self._events.families_with_attendance(event_id)
        missing = [f for f in self._families.search(FamilyFilters()) if f.id not in covered]
        added = self._events.add_attendance(event_id, build_initial_attendance(missing, updated_by))
        logger.info("Event %s: %d attendance rows added", event_id, added)
        return added

    def stats(self, event_id: str) -> AttendanceStats:
        return attendance_stats(self.attendance(event_id))

    def set_status(self, attendance_id: str, status: AttendanceStatus, *, updated_by: str) -> Attendance:
        if not self._events.get_attendance(attendance_id):
            raise NotFoundError("Attendance record not found")
        updated = self._events.set_attendance_status(attendance_id, status, updated_by=updated_by)
        if not updated:
            raise NotFoundError("Attendance record not found")
        return updated
