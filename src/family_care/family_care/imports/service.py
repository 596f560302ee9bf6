from __future__ import annotations

import io

import pandas as pd

from ..common.app_logger import get_logger
from ..common.datetime_utils import today_local
from ..common.formatting import clean_phone, split_address
from ..core.enums import MemberStatus, Relationship
from ..core.exceptions import DomainError, ValidationError
from ..families.repository import FamilyRepository
from ..families.service import FamilyService
from ..organization.service import OrganizationService
from .model import ImportResult, RowError

logger = get_logger(__name__)

CSV_COLUMNS = (
    "Department",
    "Team",
    "Korean Name",
    "English Name",
    "Phone",
    "Email",
    "Address",
    "Business Name",
    "Business Title",
)


def read_csv(raw: bytes) -> pd.DataFrame:
    """Parse upload bytes; every cell is a stripped string."""
    try:
        df = pd.read_csv(io.BytesIO(raw), dtype=str, keep_default_na=False, encoding="utf-8-sig")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ValidationError(f"Could not read CSV file: {e}")

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in CSV_COLUMNS if c not in df.columns]
    if missing:
        raise ValidationError(f"Missing columns: {', '.join(missing)}")
    return df[list(CSV_COLUMNS)].apply(lambda col: col.str.strip())


class CsvImportService:
    """Use case: bulk-load families from the department/team roster CSV."""

    def __init__(
        self,
        families: FamilyRepository,
        family_service: FamilyService,
        organization_service: OrganizationService,
    ):
        self._families = families
        self._family_service = family_service
        self._org = organization_service

    def import_csv(self, raw: bytes) -> ImportResult:
        df = read_csv(raw)
        result = ImportResult()

        # header is line 1
        for line_no, row in enumerate(df.to_dict("records"), start=2):
            try:
                self._import_row(row, result)
            except DomainError as e:
                result.errors.append(RowError(row=line_no, error=str(e), data=row))
            except Exception as e:
                logger.exception("CSV import: row %d failed", line_no)
                result.errors.append(RowError(row=line_no, error=f"Unexpected error: {e}", data=row))

        logger.info(
            "CSV import finished: %d ok, %d errors, %d created, %d updated",
            result.success,
            len(result.errors),
            len(result.created_families),
            len(result.updated_families),
        )
        return result

    def _import_row(self, row: dict, result: ImportResult) -> None:
        korean_name = row["Korean Name"]
        english_name = row["English Name"]
        family_name = korean_name or english_name
        if not family_name:
            raise ValidationError("Korean Name or English Name is required")
        if not row["Department"] or not row["Team"]:
            raise ValidationError("Department and Team are required")
        email = row["Email"] or None
        if email and "@" not in email:
            raise ValidationError(f"Invalid email: {email}")

        department, created = self._org.ensure_department(row["Department"])
        if created:
            result.created_departments.append(department.name)
        team, created = self._org.ensure_team(department.id, row["Team"])
        if created:
            result.created_teams.append(team.name)

        phone = clean_phone(row["Phone"])
        fields = {
            "phone_number": phone,
            "email": email,
            **split_address(row["Address"]),
            "biz_name": row["Business Name"] or None,
            "biz_title": row["Business Title"] or None,
            "team_id": team.id,
        }

        existing = self._families.find_by_name_and_phone(family_name, phone)
        if existing:
            self._family_service.update(existing.id, fields)
            result.updated_families.append(family_name)
        else:
            self._family_service.create(
                dict(fields, family_name=family_name, member_status=MemberStatus.MEMBER, visited_date=today_local()),
                [
                    {
                        "relationship": Relationship.HUSBAND,
                        "korean_name": korean_name,
                        "english_name": english_name,
                        "phone_number": phone or None,
                        "email": email,
                    }
                ],
            )
            result.created_families.append(family_name)
        result.success += 1
