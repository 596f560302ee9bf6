from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Staff, StaffLoginLog


class StaffRepository(Protocol):
    """Repository interface for Staff.

    Note: services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, staff_id: str) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_nickname(self, nick_name: str, *, include_inactive: bool = False) -> Optional[Staff]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Staff]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Staff]:
        raise NotImplementedError

    def create(self, *, full_name: str, nick_name: str, pin_hash: str, group: str, email: Optional[str], display_order: int, is_active: bool = True) -> Staff:
        raise NotImplementedError

    def update(self, staff_id: str, changes: dict) -> Optional[Staff]:
        raise NotImplementedError

    def deactivate(self, staff_id: str) -> bool:
        raise NotImplementedError

    def set_display_order(self, staff_ids: Sequence[str]) -> None:
        raise NotImplementedError

    def touch_last_login(self, staff_id: str, at: datetime) -> None:
        raise NotImplementedError

    def add_login_log(
        self,
        *,
        staff_id: str,
        success: bool,
        at: datetime,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        failure_reason: Optional[str] = None,
    ) -> None:
        raise NotImplementedError

    def list_login_logs(self, staff_id: str, limit: int) -> Sequence[StaffLoginLog]:
        raise NotImplementedError
