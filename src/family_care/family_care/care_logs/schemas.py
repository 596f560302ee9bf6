from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import Field

from ..common.schemas import APIModel
from ..core.enums import CareLogStatus


class CareLogCreate(APIModel):
    family_id: str = Field(min_length=1)
    date: dt.date
    type: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1)
    status: CareLogStatus = CareLogStatus.PENDING

    def fields(self) -> dict:
        return self.model_dump(exclude={"family_id"})


class CareLogUpdate(APIModel):
    date: Optional[dt.date] = None
    type: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1)
    status: Optional[CareLogStatus] = None
