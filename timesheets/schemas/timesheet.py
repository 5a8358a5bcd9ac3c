# timesheets/schemas/timesheet.py
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field

from timesheets.schemas.employee import Employee

DAYS_IN_WEEK = 7
DAY_NAMES = ("Sat", "Sun", "Mon", "Tue", "Wed", "Thu", "Fri")


def _blank_week() -> List[float]:
    return [0.0] * DAYS_IN_WEEK


class TimesheetRow(BaseModel):
    """One project / work package line; hours are indexed Saturday..Friday."""

    line_no: int = 0
    project_id: int = 0
    work_package_id: str = ""
    hours: List[float] = Field(default_factory=_blank_week)
    notes: Optional[str] = None


class Timesheet(BaseModel):
    timesheet_id: Optional[int] = None
    owner: Employee
    week_ending: date
    overtime: float = 0.0
    flextime: float = 0.0
    rows: List[TimesheetRow] = Field(default_factory=list)

    def add_row(self) -> TimesheetRow:
        row = TimesheetRow(line_no=len(self.rows) + 1)
        self.rows.append(row)
        return row


class TimesheetOut(Timesheet):
    editable: bool = False


class TimesheetCreate(BaseModel):
    week_ending: Optional[date] = None


class TimesheetGrid(BaseModel):
    """Editable projection of a timesheet: one row of day strings per line plus notes."""

    hours: List[List[str]]
    notes: List[Optional[str]] = Field(default_factory=list)
    overtime: Optional[float] = None
    flextime: Optional[float] = None
