from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RowError:
    row: int
    error: str
    data: dict


@dataclass
class ImportResult:
    """Outcome of a best-effort CSV import; rows fail independently."""

    success: int = 0
    errors: list[RowError] = field(default_factory=list)
    created_departments: list[str] = field(default_factory=list)
    created_teams: list[str] = field(default_factory=list)
    created_families: list[str] = field(default_factory=list)
    updated_families: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        # row data keeps the CSV headers verbatim
        return {
            "success": self.success,
            "errors": [{"row": e.row, "error": e.error, "data": e.data} for e in self.errors],
            "created": {
                "departments": self.created_departments,
                "teams": self.created_teams,
                "families": self.created_families,
            },
            "updated": {"families": self.updated_families},
        }
