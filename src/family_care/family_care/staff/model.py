from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import StaffGroup


@dataclass(frozen=True)
class Staff:
    """Domain entity: an application user.

    Note: pin_hash is flagged private and never leaves the service boundary.
    """

    id: str
    full_name: str
    nick_name: str
    group: StaffGroup
    email: Optional[str] = None
    display_order: int = 0
    is_active: bool = True
    last_login: Optional[datetime] = None
    pin_hash: str = field(default="", repr=False, metadata={"private": True})
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def summary(self) -> dict:
        return {
            "id": self.id,
            "full_name": self.full_name,
            "nick_name": self.nick_name,
            "group": self.group,
        }


@dataclass(frozen=True)
class StaffLoginLog:
    id: str
    staff_id: str
    login_time: datetime
    success: bool
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    failure_reason: Optional[str] = None


@dataclass(frozen=True)
class StaffRef:
    """Author/updater shown next to records other staff created."""

    id: str
    full_name: str
    nick_name: str
