from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from ..common.app_logger import get_logger
from ..common.formatting import family_name_from_spouses, full_address, grade_group_for
from ..core.constants import FAMILY_CODE_ATTEMPTS, FAMILY_CODE_PREFIX, FAMILY_CODE_WIDTH
from ..core.enums import Relationship
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..organization.repository import OrganizationRepository
from .model import Family, FamilyFilters, FamilyMember
from .repository import DuplicateFamilyCodeError, FamilyRepository

logger = get_logger(__name__)

_CODE_RE = re.compile(rf"^{FAMILY_CODE_PREFIX}(\d+)$")
_ADDRESS_FIELDS = ("address", "city", "state", "zip_code")


def max_code_number(codes: Iterable[Optional[str]]) -> int:
    """Largest numeric suffix among FM codes; non-matching codes are ignored."""
    best = 0
    for code in codes:
        m = _CODE_RE.match(code or "")
        if m:
            best = max(best, int(m.group(1)))
    return best


def next_family_code(codes: Iterable[Optional[str]]) -> str:
    return f"{FAMILY_CODE_PREFIX}{max_code_number(codes) + 1:0{FAMILY_CODE_WIDTH}d}"


def spouse_completed_any(family: Family, courses: Sequence[str]) -> bool:
    wanted = set(courses)
    return any(m.is_spouse and wanted.intersection(m.courses) for m in family.members)


def exclude_course_completers(families: Sequence[Family], courses: Sequence[str]) -> list[Family]:
    """Keep families where neither husband nor wife completed any listed course."""
    if not courses:
        return list(families)
    return [f for f in families if not spouse_completed_any(f, courses)]


def normalize_members(members: Sequence[dict]) -> list[dict]:
    out = []
    for position, member in enumerate(members):
        m = dict(member)
        m["relationship"] = Relationship(m.get("relationship") or Relationship.OTHER)
        if m.get("grade_level") and not m.get("grade_group"):
            m["grade_group"] = grade_group_for(m["grade_level"])
        if m.get("display_order") is None:
            m["display_order"] = position
        m["courses"] = [c for c in (m.get("courses") or []) if c]
        out.append(m)
    return out


def _spouse_name(members: Sequence[dict], relationship: Relationship) -> str:
    for m in members:
        if m["relationship"] == relationship:
            return (m.get("korean_name") or m.get("english_name") or "").strip()
    return ""


def derive_family_name(members: Sequence[dict]) -> str:
    return family_name_from_spouses(
        _spouse_name(members, Relationship.HUSBAND),
        _spouse_name(members, Relationship.WIFE),
    )


class FamilyService:
    """Use case: family directory with nested members."""

    def __init__(self, families: FamilyRepository, organization: OrganizationRepository):
        self._families = families
        self._organization = organization

    def search(self, filters: FamilyFilters) -> list[Family]:
        found = self._families.search(filters)
        return exclude_course_completers(found, filters.courses)

    def get(self, family_id: str) -> Family:
        family = self._families.get(family_id)
        if not family:
            raise NotFoundError("Family not found")
        return family

    def members(self, family_id: str) -> Sequence[FamilyMember]:
        self.get(family_id)
        return self._families.list_members(family_id)

    def _check_team(self, team_id: Optional[str]) -> None:
        if team_id and not self._organization.get_team(team_id):
            raise ValidationError("Team not found")

    def create(self, fields: dict, members: Sequence[dict]) -> Family:
        fields = dict(fields)
        members = normalize_members(members)
        requested_code = fields.pop("family_code", None)

        if not (fields.get("family_name") or "").strip():
            fields["family_name"] = derive_family_name(members)
        if not fields["family_name"]:
            raise ValidationError("Family name is required")
        fields["full_address"] = full_address(*(fields.get(k) for k in _ADDRESS_FIELDS))
        self._check_team(fields.get("team_id"))

        if requested_code:
            try:
                return self._families.create(fields=fields, members=members, family_code=requested_code)
            except DuplicateFamilyCodeError:
                raise ConflictError("Family code already exists")

        for attempt in range(1, FAMILY_CODE_ATTEMPTS + 1):
            code = next_family_code(self._families.list_family_codes())
            try:
                created = self._families.create(fields=fields, members=members, family_code=code)
            except DuplicateFamilyCodeError:
                logger.warning("Family code %s taken (attempt %d/%d)", code, attempt, FAMILY_CODE_ATTEMPTS)
                continue
            logger.info("Family %s created as %s", created.id, code)
            return created

        raise ConflictError("Could not allocate a family code, please retry")

    def update(self, family_id: str, changes: dict, members: Optional[Sequence[dict]] = None) -> Family:
        current = self.get(family_id)
        changes = dict(changes)
        changes.pop("family_code", None)

        if members is not None:
            members = normalize_members(members)
        if "family_name" in changes and not (changes["family_name"] or "").strip():
            derived = derive_family_name(members) if members is not None else ""
            if not derived:
                raise ValidationError("Family name is required")
            changes["family_name"] = derived

        if any(k in changes for k in _ADDRESS_FIELDS):
            parts = [changes[k] if k in changes else getattr(current, k) for k in _ADDRESS_FIELDS]
            changes["full_address"] = full_address(*parts)
        if "team_id" in changes:
            self._check_team(changes["team_id"])

        updated = self._families.update(family_id, changes=changes, members=members)
        if not updated:
            raise NotFoundError("Family not found")
        return updated

    def delete(self, family_id: str) -> None:
        if not self._families.delete(family_id):
            raise NotFoundError("Family not found")
        logger.info("Family %s deleted", family_id)

    def reorder(self, team_id: Optional[str], family_ids: Sequence[str]) -> None:
        if len(set(family_ids)) != len(family_ids):
            raise ValidationError("Duplicate family ids in ordering")
        self._check_team(team_id)
        self._families.set_team_order(team_id or None, list(family_ids))
