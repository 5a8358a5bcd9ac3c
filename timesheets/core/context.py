# timesheets/core/context.py
from dataclasses import dataclass
from typing import Optional

from timesheets.schemas.employee import Employee
from timesheets.schemas.timesheet import Timesheet


@dataclass
class CurrentCaller:
    """The authenticated employee plus the timesheet they last picked."""

    employee: Employee
    selected_timesheet: Optional[Timesheet] = None

    def select(self, timesheet: Optional[Timesheet]) -> None:
        self.selected_timesheet = timesheet

    def clear(self) -> None:
        self.selected_timesheet = None
