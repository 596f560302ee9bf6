from __future__ import annotations

from collections import defaultdict
from typing import Optional, Sequence

from ..common.app_logger import get_logger
from ..common.validators import require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from ..families.model import FamilyFilters
from ..families.repository import FamilyRepository
from .model import Department, DepartmentBranch, Team, TeamBranch
from .repository import OrganizationRepository

logger = get_logger(__name__)


class OrganizationService:
    """Use case: departments, teams and the department/team/family tree."""

    def __init__(self, organization: OrganizationRepository, families: FamilyRepository):
        self._org = organization
        self._families = families

    # departments

    def list_departments(self) -> Sequence[Department]:
        return self._org.list_departments()

    def get_department(self, department_id: str) -> Department:
        department = self._org.get_department(department_id)
        if not department:
            raise NotFoundError("Department not found")
        return department

    def create_department(self, fields: dict) -> Department:
        fields = dict(fields, name=require_non_empty(fields.get("name"), "Department name"))
        created = self._org.create_department(fields)
        logger.info("Department %r created", created.name)
        return created

    def update_department(self, department_id: str, changes: dict) -> Department:
        changes = {k: v for k, v in changes.items() if not (k == "display_order" and v is None)}
        if "name" in changes:
            changes = dict(changes, name=require_non_empty(changes["name"], "Department name"))
        updated = self._org.update_department(department_id, changes)
        if not updated:
            raise NotFoundError("Department not found")
        return updated

    def delete_department(self, department_id: str) -> None:
        if not self._org.delete_department(department_id):
            raise NotFoundError("Department not found")
        logger.info("Department %s deleted", department_id)

    def ensure_department(self, name: str) -> tuple[Department, bool]:
        """Find a department by exact name or create it. Returns (department, created)."""
        name = require_non_empty(name, "Department")
        found = self._org.find_department_by_name(name)
        if found:
            return found, False
        return self._org.create_department({"name": name}), True

    # teams

    def list_teams(self, department_id: Optional[str] = None) -> Sequence[Team]:
        return self._org.list_teams(department_id)

    def get_team(self, team_id: str) -> Team:
        team = self._org.get_team(team_id)
        if not team:
            raise NotFoundError("Team not found")
        return team

    def _check_department(self, department_id: Optional[str]) -> None:
        if not department_id or not self._org.get_department(department_id):
            raise ValidationError("Department not found")

    def create_team(self, fields: dict, assigned_staff: Sequence[str] = ()) -> Team:
        fields = dict(fields, name=require_non_empty(fields.get("name"), "Team name"))
        self._check_department(fields.get("department_id"))
        created = self._org.create_team(fields, list(assigned_staff))
        logger.info("Team %r created in department %s", created.name, created.department_id)
        return created

    def update_team(self, team_id: str, changes: dict, assigned_staff: Optional[Sequence[str]] = None) -> Team:
        changes = dict(changes)
        if "name" in changes:
            changes["name"] = require_non_empty(changes["name"], "Team name")
        if "department_id" in changes:
            self._check_department(changes["department_id"])
        updated = self._org.update_team(
            team_id, changes, list(assigned_staff) if assigned_staff is not None else None
        )
        if not updated:
            raise NotFoundError("Team not found")
        return updated

    def delete_team(self, team_id: str) -> None:
        if not self._org.delete_team(team_id):
            raise NotFoundError("Team not found")
        logger.info("Team %s deleted", team_id)

    def ensure_team(self, department_id: str, name: str) -> tuple[Team, bool]:
        name = require_non_empty(name, "Team")
        found = self._org.find_team_by_name(department_id, name)
        if found:
            return found, False
        return self._org.create_team({"department_id": department_id, "name": name}, []), True

    # tree

    def tree(self) -> list[DepartmentBranch]:
        departments = self._org.list_departments()
        teams = self._org.list_teams()
        families = self._families.search(FamilyFilters())

        families_by_team: dict[str, list] = defaultdict(list)
        for family in families:
            if family.team_id:
                families_by_team[family.team_id].append(family)

        teams_by_department: dict[str, list[TeamBranch]] = defaultdict(list)
        for team in teams:
            ordered = sorted(families_by_team[team.id], key=lambda f: (f.display_order, f.family_name))
            teams_by_department[team.department_id].append(TeamBranch(team=team, families=tuple(ordered)))

        return [
            DepartmentBranch(department=d, teams=tuple(teams_by_department[d.id]))
            for d in departments
        ]
