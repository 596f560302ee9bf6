from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .announcements.mysql_announcement_repository import MySQLAnnouncementRepository
from .announcements.repository import AnnouncementRepository
from .announcements.service import AnnouncementService
from .care_logs.mysql_care_log_repository import MySQLCareLogRepository
from .care_logs.repository import CareLogRepository
from .care_logs.service import CareLogService
from .database.connection import DBConfig, DatabaseConnection
from .donations.mysql_donation_repository import MySQLDonationRepository
from .donations.repository import DonationRepository
from .donations.service import DonationService
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventRepository
from .events.service import EventService
from .families.mysql_family_repository import MySQLFamilyRepository
from .families.repository import FamilyRepository
from .families.service import FamilyService
from .imports.service import CsvImportService
from .organization.mysql_organization_repository import MySQLOrganizationRepository
from .organization.repository import OrganizationRepository
from .organization.service import OrganizationService
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffRepository
from .staff.service import AuthService, StaffService
from .uploads.service import UploadService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    staff_repo: StaffRepository
    families_repo: FamilyRepository
    care_logs_repo: CareLogRepository
    announcements_repo: AnnouncementRepository
    events_repo: EventRepository
    organization_repo: OrganizationRepository
    donations_repo: DonationRepository

    auth_service: AuthService
    staff_service: StaffService
    family_service: FamilyService
    care_log_service: CareLogService
    announcement_service: AnnouncementService
    event_service: EventService
    organization_service: OrganizationService
    donation_service: DonationService
    csv_import_service: CsvImportService
    upload_service: UploadService


def wire(
    *,
    staff_repo: StaffRepository,
    families_repo: FamilyRepository,
    care_logs_repo: CareLogRepository,
    announcements_repo: AnnouncementRepository,
    events_repo: EventRepository,
    organization_repo: OrganizationRepository,
    donations_repo: DonationRepository,
    upload_dir: str,
    object_dir: str,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Build services on top of whatever repositories are given (MySQL or in-memory)."""
    family_service = FamilyService(families_repo, organization_repo)
    organization_service = OrganizationService(organization_repo, families_repo)

    return Container(
        conn=conn,
        staff_repo=staff_repo,
        families_repo=families_repo,
        care_logs_repo=care_logs_repo,
        announcements_repo=announcements_repo,
        events_repo=events_repo,
        organization_repo=organization_repo,
        donations_repo=donations_repo,
        auth_service=AuthService(staff_repo),
        staff_service=StaffService(staff_repo),
        family_service=family_service,
        care_log_service=CareLogService(care_logs_repo, families_repo),
        announcement_service=AnnouncementService(announcements_repo),
        event_service=EventService(events_repo, families_repo),
        organization_service=organization_service,
        donation_service=DonationService(donations_repo, families_repo),
        csv_import_service=CsvImportService(families_repo, family_service, organization_service),
        upload_service=UploadService(upload_dir, object_dir),
    )


def build_container(*, db_config: dict, upload_dir: str, object_dir: str) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        conn=conn,
        staff_repo=MySQLStaffRepository(conn),
        families_repo=MySQLFamilyRepository(conn),
        care_logs_repo=MySQLCareLogRepository(conn),
        announcements_repo=MySQLAnnouncementRepository(conn),
        events_repo=MySQLEventRepository(conn),
        organization_repo=MySQLOrganizationRepository(conn),
        donations_repo=MySQLDonationRepository(conn),
        upload_dir=upload_dir,
        object_dir=object_dir,
    )
