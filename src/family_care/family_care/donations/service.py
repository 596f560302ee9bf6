from __future__ import annotations

from typing import Sequence

from ..common.app_logger import get_logger
from ..core.exceptions import NotFoundError, ValidationError
from ..families.repository import FamilyRepository
from .model import Donation, DonationFilters
from .repository import DonationRepository

logger = get_logger(__name__)

# the only nullable donation column
_NULLABLE = {"comment"}


class DonationService:
    def __init__(self, donations: DonationRepository, families: FamilyRepository):
        self._donations = donations
        self._families = families

    def search(self, filters: DonationFilters) -> Sequence[Donation]:
        return self._donations.search(filters)

    def get(self, donation_id: str) -> Donation:
        found = self._donations.get(donation_id)
        if not found:
            raise NotFoundError("Donation not found")
        return found

    def _check_family(self, family_id: str) -> None:
        if not self._families.get(family_id):
            raise ValidationError("Family not found")

    def create(self, *, created_by: str, fields: dict) -> Donation:
        self._check_family(fields["family_id"])
        created = self._donations.create(created_by=created_by, fields=fields)
        logger.info("Donation %s recorded for family %s", created.id, created.family_id)
        return created

    def update(self, donation_id: str, changes: dict) -> Donation:
        self.get(donation_id)
        changes = {k: v for k, v in changes.items() if v is not None or k in _NULLABLE}
        if "family_id" in changes:
            self._check_family(changes["family_id"])
        updated = self._donations.update(donation_id, changes)
        if not updated:
            raise NotFoundError("Donation not found")
        return updated

    def delete(self, donation_id: str) -> None:
        if not self._donations.delete(donation_id):
            raise NotFoundError("Donation not found")
        logger.info("Donation %s deleted", donation_id)
