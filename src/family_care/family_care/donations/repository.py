from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Donation, DonationFilters


class DonationRepository(Protocol):
    def search(self, filters: DonationFilters) -> Sequence[Donation]:
        """Newest first (date, then created_at), with family name."""
        raise NotImplementedError

    def get(self, donation_id: str) -> Optional[Donation]:
        raise NotImplementedError

    def create(self, *, created_by: str, fields: dict) -> Donation:
        raise NotImplementedError

    def update(self, donation_id: str, changes: dict) -> Optional[Donation]:
        raise NotImplementedError

    def delete(self, donation_id: str) -> bool:
        raise NotImplementedError
