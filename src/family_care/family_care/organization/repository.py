from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department, Team


class OrganizationRepository(Protocol):
    def list_departments(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_department(self, department_id: str) -> Optional[Department]:
        raise NotImplementedError

    def find_department_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def create_department(self, fields: dict) -> Department:
        raise NotImplementedError

    def update_department(self, department_id: str, changes: dict) -> Optional[Department]:
        raise NotImplementedError

    def delete_department(self, department_id: str) -> bool:
        """Teams go with the department; their families become unassigned."""
        raise NotImplementedError

    def list_teams(self, department_id: Optional[str] = None) -> Sequence[Team]:
        raise NotImplementedError

    def get_team(self, team_id: str) -> Optional[Team]:
        raise NotImplementedError

    def find_team_by_name(self, department_id: str, name: str) -> Optional[Team]:
        raise NotImplementedError

    def create_team(self, fields: dict, assigned_staff: Sequence[str]) -> Team:
        raise NotImplementedError

    def update_team(self, team_id: str, changes: dict, assigned_staff: Optional[Sequence[str]]) -> Optional[Team]:
        """assigned_staff=None leaves the staff set alone; a list replaces it."""
        raise NotImplementedError

    def delete_team(self, team_id: str) -> bool:
        raise NotImplementedError
