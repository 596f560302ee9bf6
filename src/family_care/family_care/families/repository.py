from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.exceptions import ConflictError
from .model import Family, FamilyFilters, FamilyMember


class DuplicateFamilyCodeError(ConflictError):
    """Raised by repositories when family_code collides with an existing row."""


class FamilyRepository(Protocol):
    def get(self, family_id: str) -> Optional[Family]:
        raise NotImplementedError

    def search(self, filters: FamilyFilters) -> Sequence[Family]:
        """Apply the column filters (not the course filter); members included."""
        raise NotImplementedError

    def list_family_codes(self) -> Sequence[str]:
        raise NotImplementedError

    def find_by_name_and_phone(self, family_name: str, phone_number: str) -> Optional[Family]:
        raise NotImplementedError

    def create(self, *, fields: dict, members: Sequence[dict], family_code: str) -> Family:
        """Insert family + members atomically; raise DuplicateFamilyCodeError on a code clash."""
        raise NotImplementedError

    def update(self, family_id: str, *, changes: dict, members: Optional[Sequence[dict]]) -> Optional[Family]:
        """Update family fields and, when members is given, diff members by id (atomic)."""
        raise NotImplementedError

    def delete(self, family_id: str) -> bool:
        raise NotImplementedError

    def list_members(self, family_id: str) -> Sequence[FamilyMember]:
        raise NotImplementedError

    def set_team_order(self, team_id: Optional[str], family_ids: Sequence[str]) -> None:
        raise NotImplementedError
