from __future__ import annotations

from typing import Optional

from pydantic import Field

from ..common.schemas import APIModel


class _Contact(APIModel):
    description: Optional[str] = None
    contact_person_name: Optional[str] = Field(default=None, max_length=255)
    contact_person_phone: Optional[str] = Field(default=None, max_length=20)
    contact_person_email: Optional[str] = Field(default=None, max_length=255)
    picture: Optional[str] = Field(default=None, max_length=500)


class DepartmentCreate(_Contact):
    name: str = Field(min_length=1, max_length=255)
    display_order: int = 0


class DepartmentUpdate(_Contact):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    display_order: Optional[int] = None


class TeamCreate(_Contact):
    department_id: str = Field(min_length=1)
    name: str = Field(min_length=1, max_length=255)
    display_order: int = 0
    assigned_staff: list[str] = Field(default_factory=list)

    def fields(self) -> dict:
        return self.model_dump(exclude={"assigned_staff"})


class TeamUpdate(_Contact):
    department_id: Optional[str] = Field(default=None, min_length=1)
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    display_order: Optional[int] = None
    assigned_staff: Optional[list[str]] = None

    def field_changes(self) -> dict:
        changes = self.changes()
        changes.pop("assigned_staff", None)
        for key in ("name", "department_id", "display_order"):
            if key in changes and changes[key] is None:
                changes.pop(key)
        return changes
