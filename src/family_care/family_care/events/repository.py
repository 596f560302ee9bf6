from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import Attendance, Event, NewAttendance


class EventRepository(Protocol):
    def list_events(self, *, active_only: bool = False) -> Sequence[Event]:
        """Newest first (date, then created_at)."""
        raise NotImplementedError

    def get(self, event_id: str) -> Optional[Event]:
        raise NotImplementedError

    def create(self, *, created_by: str, fields: dict, attendance: Sequence[NewAttendance]) -> Event:
        """Insert the event and its initial attendance rows in one transaction."""
        raise NotImplementedError

    def update(self, event_id: str, changes: dict) -> Optional[Event]:
        raise NotImplementedError

    def delete(self, event_id: str) -> bool:
        raise NotImplementedError

    def list_attendance(self, event_id: str) -> Sequence[Attendance]:
        """Rows with family, member and updater details, grouped by family."""
        raise NotImplementedError

    def families_with_attendance(self, event_id: str) -> set[str]:
        raise NotImplementedError

    def add_attendance(self, event_id: str, rows: Sequence[NewAttendance]) -> int:
        raise NotImplementedError

    def get_attendance(self, attendance_id: str) -> Optional[Attendance]:
        raise NotImplementedError

    def set_attendance_status(
        self, attendance_id: str, status: AttendanceStatus, *, updated_by: str
    ) -> Optional[Attendance]:
        raise NotImplementedError
