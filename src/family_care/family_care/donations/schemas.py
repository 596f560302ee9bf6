from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..common.schemas import APIModel
from ..core.enums import DonationType


class DonationCreate(APIModel):
    family_id: str = Field(min_length=1)
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    type: DonationType = DonationType.REGULAR
    date: dt.date
    received: bool = True
    email_for_thank: bool = False
    email_for_tax: bool = False
    comment: Optional[str] = None


class DonationUpdate(APIModel):
    family_id: Optional[str] = Field(default=None, min_length=1)
    amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    type: Optional[DonationType] = None
    date: Optional[dt.date] = None
    received: Optional[bool] = None
    email_for_thank: Optional[bool] = None
    email_for_tax: Optional[bool] = None
    comment: Optional[str] = None
