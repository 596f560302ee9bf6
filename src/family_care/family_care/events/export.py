from __future__ import annotations

import io
from typing import Sequence

import pandas as pd

from .model import Attendance, Event

EXCEL_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def attendance_frame(rows: Sequence[Attendance]) -> pd.DataFrame:
    data = []
    for r in rows:
        member = r.family_member
        data.append(
            {
                "Family": r.family.family_name if r.family else "",
                "Korean Name": member.korean_name if member else "",
                "English Name": member.english_name if member else "",
                "Relationship": member.relationship if member else "family",
                "Grade Group": (member.grade_group or "") if member else "",
                "Status": r.attendance_status.value,
                "Updated By": r.updated_by_staff.full_name if r.updated_by_staff else "",
            }
        )
    return pd.DataFrame(
        data,
        columns=["Family", "Korean Name", "English Name", "Relationship", "Grade Group", "Status", "Updated By"],
    )


def attendance_workbook(rows: Sequence[Attendance]) -> io.BytesIO:
    """Render the roll call as an in-memory .xlsx."""
    df = attendance_frame(rows)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Attendance")
    output.seek(0)
    return output


def export_filename(event: Event) -> str:
    safe = "".join(c if c.isalnum() else "_" for c in event.title).strip("_") or "event"
    return f"attendance_{safe}_{event.date.isoformat()}.xlsx"
