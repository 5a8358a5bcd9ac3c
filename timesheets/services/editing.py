# timesheets/services/editing.py
import math
from datetime import date
from typing import Callable, List, Optional

from loguru import logger

from timesheets.core.config import settings
from timesheets.core.context import CurrentCaller
from timesheets.core.errors import StorageError, TimesheetNotFound
from timesheets.schemas.timesheet import DAY_NAMES, DAYS_IN_WEEK, Timesheet, TimesheetRow
from timesheets.services import hours
from timesheets.services.directory import EmployeeDirectory
from timesheets.services.selector import is_open_week, week_ending
from timesheets.services.store import TimesheetStore

TOLERANCE = 1e-6


class TimesheetEditSession:
    """
    Editable grid over one timesheet.

    `init()` loads the timesheet (by id, from the caller's selection, or a fresh
    one for the current week) and projects its rows into `hours_grid`, one list
    of seven day strings per row, and `notes_grid`. Edits happen on the grids;
    `save()` validates them, copies them back into the rows and persists
    through the store.
    """

    def __init__(
        self,
        store: TimesheetStore,
        caller: CurrentCaller,
        report: Optional[Callable[[str], None]] = None,
    ):
        self.store = store
        self.caller = caller
        self.sheet: Optional[Timesheet] = None
        self.rows: List[TimesheetRow] = []
        self.hours_grid: List[List[str]] = []
        self.notes_grid: List[Optional[str]] = []
        self.messages: List[str] = []
        self._report = report or self.messages.append

    @property
    def loaded(self) -> bool:
        return self.sheet is not None

    def init(self, timesheet_id: Optional[int] = None, today: Optional[date] = None) -> Timesheet:
        if self.sheet is not None:
            return self.sheet

        if timesheet_id is not None:
            sheet = self.store.fetch_by_id(timesheet_id)
            if sheet is None:
                raise TimesheetNotFound(timesheet_id)
        else:
            sheet = self.caller.selected_timesheet
            if sheet is None:
                sheet = self._create_blank(today or date.today())
        self.caller.select(sheet)

        while len(sheet.rows) < settings.MIN_TIMESHEET_ROWS:
            sheet.add_row()

        self.sheet = sheet
        self.rows = list(sheet.rows)
        self.hours_grid = [self._week_strings(row) for row in self.rows]
        self.notes_grid = [row.notes for row in self.rows]
        return sheet

    def _create_blank(self, today: date) -> Timesheet:
        directory = EmployeeDirectory(self.store.db)
        owner_key = directory.resolve_key(self.caller.employee)
        timesheet_id = self.store.create(owner_key, week_ending(today))
        sheet = self.store.fetch_by_id(timesheet_id)
        if sheet is None:
            raise TimesheetNotFound(timesheet_id)
        return sheet

    @staticmethod
    def _week_strings(row: TimesheetRow) -> List[str]:
        values = list(row.hours or [])
        return [
            hours.format_hour(values[day] if day < len(values) else 0.0)
            for day in range(DAYS_IN_WEEK)
        ]

    def add_row(self) -> TimesheetRow:
        row = self.sheet.add_row()
        self.rows.append(row)
        self.hours_grid.append([""] * DAYS_IN_WEEK)
        self.notes_grid.append("")
        return row

    def day_totals(self) -> List[float]:
        totals = [0.0] * DAYS_IN_WEEK
        for week in self.hours_grid:
            if week is None:
                continue
            for day in range(DAYS_IN_WEEK):
                value = hours.parse_number(week[day] if day < len(week) else None)
                # a single cell above 24 h must still trip the day cap
                if math.isfinite(value):
                    value = hours.round_tenths(value) / 10
                totals[day] += value
        return totals

    def validate(self) -> bool:
        """Checks the per-day and weekly caps, reporting one message per violation."""
        self.messages.clear()
        totals = self.day_totals()
        valid = True
        for day, total in enumerate(totals):
            if total > hours.MAX_DAY_HOURS + TOLERANCE:
                valid = False
                self._report(f"Total for {DAY_NAMES[day]} exceeds 24 hours ({total:.1f} h).")
        week_total = sum(totals)
        if week_total > hours.MAX_WEEK_HOURS + TOLERANCE:
            valid = False
            self._report(f"Weekly total exceeds 168 hours ({week_total:.1f} h).")
        if not valid:
            logger.warning("Timesheet {} failed validation", self.sheet.timesheet_id if self.sheet else None)
        return valid

    def save(self) -> bool:
        if not self.validate():
            return False

        previous = [(row.hours, row.notes) for row in self.rows]
        for row, week, notes in zip(self.rows, self.hours_grid, self.notes_grid):
            row.hours = [
                hours.parse_hour(week[day] if day < len(week) else None) for day in range(DAYS_IN_WEEK)
            ]
            row.notes = notes

        try:
            self.store.save(self.sheet)
        except StorageError:
            # keep the selected sheet in step with what is stored
            for row, (week, notes) in zip(self.rows, previous):
                row.hours, row.notes = week, notes
            self._report("The timesheet could not be saved.")
            return False
        self.caller.select(self.sheet)
        return True

    def is_editable(self, today: Optional[date] = None) -> bool:
        """Past weeks are read-only."""
        if self.sheet is None or self.sheet.week_ending is None:
            return False
        return is_open_week(self.sheet.week_ending, today)

    # --- Display helpers ---

    def week_number(self) -> int:
        if self.sheet is None:
            return 0
        return self.sheet.week_ending.isocalendar()[1]

    def owner_number(self) -> str:
        return str(self.sheet.owner.number) if self.sheet else ""

    def owner_name(self) -> str:
        return (self.sheet.owner.name or "") if self.sheet else ""
