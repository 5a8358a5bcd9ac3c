# timesheets/core/errors.py
from typing import Any


class TimesheetError(Exception):
    """Base class for every error raised by the timesheet services."""


class ConflictError(TimesheetError):
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"{field} already exists: {value}")


class DuplicateUserName(ConflictError):
    def __init__(self, user_name: str):
        super().__init__("user_name", user_name)


class DuplicateNumber(ConflictError):
    def __init__(self, number: int):
        super().__init__("number", number)


class TimesheetNotFound(TimesheetError):
    def __init__(self, timesheet_id: int):
        self.timesheet_id = timesheet_id
        super().__init__(f"Timesheet not found for id={timesheet_id}")


class StorageError(TimesheetError):
    """A multi-statement write failed and was rolled back."""
