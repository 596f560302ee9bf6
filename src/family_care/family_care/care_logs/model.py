from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import CareLogStatus
from ..staff.model import StaffRef


@dataclass(frozen=True)
class CareLog:
    id: str
    family_id: str
    staff_id: str
    date: date
    type: str
    description: str
    status: CareLogStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    staff: Optional[StaffRef] = None
