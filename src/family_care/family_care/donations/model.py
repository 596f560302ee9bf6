from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import DonationType
from ..staff.model import StaffRef


@dataclass(frozen=True)
class Donation:
    id: str
    family_id: str
    amount: Decimal
    type: DonationType
    date: date
    created_by: str
    received: bool = True
    email_for_thank: bool = False
    email_for_tax: bool = False
    comment: Optional[str] = None
    family_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by_staff: Optional[StaffRef] = None


@dataclass(frozen=True)
class DonationFilters:
    """None means "any" for every field."""

    family_name: Optional[str] = None
    type: Optional[DonationType] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    received: Optional[bool] = None
    email_for_thank: Optional[bool] = None
    email_for_tax: Optional[bool] = None
