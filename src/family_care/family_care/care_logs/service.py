from __future__ import annotations

from typing import Optional, Sequence

from ..common.app_logger import get_logger
from ..core.enums import StaffGroup
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..families.repository import FamilyRepository
from .model import CareLog
from .repository import CareLogRepository

logger = get_logger(__name__)


class CareLogService:
    """Use case: follow-up notes on a family. Only the author or an ADM may change one."""

    def __init__(self, care_logs: CareLogRepository, families: FamilyRepository):
        self._care_logs = care_logs
        self._families = families

    def list_for_family(self, family_id: str) -> Sequence[CareLog]:
        if not self._families.get(family_id):
            raise NotFoundError("Family not found")
        return self._care_logs.list_for_family(family_id)

    def create(self, *, staff_id: str, family_id: str, fields: dict) -> CareLog:
        if not self._families.get(family_id):
            raise ValidationError("Family not found")
        created = self._care_logs.create(family_id=family_id, staff_id=staff_id, fields=fields)
        logger.info("Care log %s added to family %s by %s", created.id, family_id, staff_id)
        return created

    def _owned(self, care_log_id: str, staff_id: str, group: Optional[StaffGroup]) -> CareLog:
        log = self._care_logs.get(care_log_id)
        if not log:
            raise NotFoundError("Care log not found")
        if log.staff_id != staff_id and group != StaffGroup.ADM:
            raise AuthorizationError("You can only modify your own care logs")
        return log

    def update(self, care_log_id: str, changes: dict, *, staff_id: str, group: Optional[StaffGroup]) -> CareLog:
        self._owned(care_log_id, staff_id, group)
        changes = {k: v for k, v in changes.items() if v is not None}
        updated = self._care_logs.update(care_log_id, changes)
        if not updated:
            raise NotFoundError("Care log not found")
        return updated

    def delete(self, care_log_id: str, *, staff_id: str, group: Optional[StaffGroup]) -> None:
        self._owned(care_log_id, staff_id, group)
        self._care_logs.delete(care_log_id)
        logger.info("Care log %s deleted by %s", care_log_id, staff_id)
