from __future__ import annotations

import re
from typing import Optional

from ..core.constants import GRADE_GROUPS

_NON_DIGITS = re.compile(r"\D")


def clean_phone(value: Optional[str]) -> str:
    return _NON_DIGITS.sub("", value or "")


def format_phone(value: Optional[str]) -> str:
    """Format digits as (XXX) XXX-XXXX, tolerating partial numbers."""
    digits = clean_phone(value)
    if len(digits) >= 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:10]}"
    if len(digits) >= 6:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"
    if len(digits) >= 3:
        return f"({digits[:3]}) {digits[3:]}"
    return digits


def grade_group_for(grade_level: Optional[str]) -> Optional[str]:
    if not grade_level:
        return None
    return GRADE_GROUPS.get(grade_level.strip())


def family_name_from_spouses(husband_name: Optional[str], wife_name: Optional[str]) -> str:
    husband_name = (husband_name or "").strip()
    wife_name = (wife_name or "").strip()
    if husband_name and wife_name:
        return f"{husband_name}・{wife_name}"
    return husband_name or wife_name


def full_address(address: Optional[str], city: Optional[str], state: Optional[str], zip_code: Optional[str]) -> str:
    parts = [p.strip() for p in (address, city, state, zip_code) if p and p.strip()]
    return ", ".join(parts)


def split_address(value: Optional[str]) -> dict:
    """Split '123 Main St, Frisco, TX 75034' into street/city/state/zip.

    Anything that does not match the pattern stays in the street part.
    """
    text = (value or "").strip()
    out = {"address": text, "city": "", "state": "", "zip_code": ""}
    parts = [p.strip() for p in text.split(",")]
    if len(parts) < 3:
        return out

    state_zip = parts[-1].split()
    if len(state_zip) == 2:
        out["state"], out["zip_code"] = state_zip
    elif len(state_zip) == 1:
        out["state"] = state_zip[0]
    out["city"] = parts[-2]
    out["address"] = ", ".join(parts[:-2])
    return out
