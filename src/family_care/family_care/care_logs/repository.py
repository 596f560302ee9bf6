from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CareLog


class CareLogRepository(Protocol):
    def get(self, care_log_id: str) -> Optional[CareLog]:
        raise NotImplementedError

    def list_for_family(self, family_id: str) -> Sequence[CareLog]:
        """Newest first (date, then created_at), each with its author."""
        raise NotImplementedError

    def create(self, *, family_id: str, staff_id: str, fields: dict) -> CareLog:
        raise NotImplementedError

    def update(self, care_log_id: str, changes: dict) -> Optional[CareLog]:
        raise NotImplementedError

    def delete(self, care_log_id: str) -> bool:
        raise NotImplementedError
