from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Announcement


class AnnouncementRepository(Protocol):
    def get(self, announcement_id: str) -> Optional[Announcement]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Announcement]:
        raise NotImplementedError

    def list_visible(self, now: datetime, *, login_required: Optional[bool] = None) -> Sequence[Announcement]:
        """Active announcements whose window contains `now`, newest first.

        login_required=None returns both audiences.
        """
        raise NotImplementedError

    def create(self, *, created_by: str, fields: dict) -> Announcement:
        raise NotImplementedError

    def update(self, announcement_id: str, changes: dict) -> Optional[Announcement]:
        raise NotImplementedError

    def delete(self, announcement_id: str) -> bool:
        raise NotImplementedError
