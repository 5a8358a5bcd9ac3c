# timesheets/services/store.py
from datetime import date
from typing import List, Optional, Sequence

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from timesheets.core.config import settings
from timesheets.core.errors import StorageError, TimesheetNotFound
from timesheets.db import models
from timesheets.schemas.employee import Employee
from timesheets.schemas.timesheet import Timesheet, TimesheetRow
from timesheets.services import hours
from timesheets.services.directory import EmployeeDirectory
from timesheets.services.selector import select_current


def _to_deci(value: float) -> int:
    return hours.round_tenths(value or 0.0)


def _to_schema(header: models.Timesheet) -> Timesheet:
    return Timesheet(
        timesheet_id=header.id,
        owner=Employee.model_validate(header.owner),
        week_ending=header.week_ending,
        overtime=header.overtime_deci / 10,
        flextime=header.flextime_deci / 10,
        rows=[
            TimesheetRow(
                line_no=row.line_no,
                project_id=row.project_id,
                work_package_id=row.work_package_id or "",
                hours=hours.unpack(row.packed_hours),
                notes=row.notes,
            )
            for row in header.rows
        ],
    )


class TimesheetStore:
    """
    Owns timesheet headers and their rows.

    Multi-statement writes (`create`, `save`) run as one unit of work on the
    session and either commit completely or roll back and raise
    `StorageError`. Reads degrade storage failures to "not found".
    """

    def __init__(self, db: Session, directory: Optional[EmployeeDirectory] = None):
        self.db = db
        self.directory = directory or EmployeeDirectory(db)

    def _query(self):
        return self.db.query(models.Timesheet).options(
            joinedload(models.Timesheet.owner), selectinload(models.Timesheet.rows)
        )

    def _insert_rows(self, timesheet_id: int, rows: Sequence[TimesheetRow]) -> None:
        for line_no, row in enumerate(rows, start=1):
            self.db.add(models.TimesheetRow(
                timesheet_id=timesheet_id,
                line_no=line_no,
                project_id=row.project_id or 0,
                work_package_id=row.work_package_id or "",
                packed_hours=hours.pack(row.hours),
                notes=row.notes,
            ))
        self.db.flush()

    # --- Writes ---

    def create(self, owner_key: int, week_ending: date) -> int:
        """Inserts a zeroed header with the minimum number of blank rows."""
        try:
            header = models.Timesheet(
                employee_id=owner_key, week_ending=week_ending, overtime_deci=0, flextime_deci=0
            )
            self.db.add(header)
            self.db.flush()
            timesheet_id = header.id
            self._insert_rows(timesheet_id, [TimesheetRow() for _ in range(settings.MIN_TIMESHEET_ROWS)])
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Creating timesheet for employee key {} failed: {}", owner_key, exc)
            raise StorageError("Creating timesheet failed") from exc
        logger.debug("Created timesheet {} ending {}", timesheet_id, week_ending)
        return timesheet_id

    def save(self, timesheet: Timesheet) -> int:
        """
        Upserts the header by id, then replaces its entire row set.

        On success the timesheet gets its (possibly new) id and positional line
        numbers; on failure both the store and the passed object are unchanged.
        """
        try:
            owner_key = self.directory.resolve_key(timesheet.owner, autocommit=False)
            if timesheet.timesheet_id is None:
                header = models.Timesheet(employee_id=owner_key)
                self.db.add(header)
            else:
                header = self.db.get(models.Timesheet, timesheet.timesheet_id)
                if header is None:
                    raise TimesheetNotFound(timesheet.timesheet_id)
            header.week_ending = timesheet.week_ending
            header.overtime_deci = _to_deci(timesheet.overtime)
            header.flextime_deci = _to_deci(timesheet.flextime)
            self.db.flush()
            timesheet_id = header.id

            self.db.query(models.TimesheetRow).filter(
                models.TimesheetRow.timesheet_id == timesheet_id
            ).delete()
            self._insert_rows(timesheet_id, timesheet.rows)
            self.db.commit()
        except TimesheetNotFound:
            self.db.rollback()
            raise
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error("Saving timesheet {} failed: {}", timesheet.timesheet_id, exc)
            raise StorageError("Saving timesheet failed") from exc

        timesheet.timesheet_id = timesheet_id
        for line_no, row in enumerate(timesheet.rows, start=1):
            row.line_no = line_no
        logger.debug("Saved timesheet {} with {} rows", timesheet_id, len(timesheet.rows))
        return timesheet_id

    # --- Reads ---

    def fetch_by_id(self, timesheet_id: int) -> Optional[Timesheet]:
        try:
            header = self._query().filter(models.Timesheet.id == timesheet_id).first()
        except SQLAlchemyError:
            logger.exception("Loading timesheet {} failed", timesheet_id)
            self.db.rollback()
            return None
        return _to_schema(header) if header else None

    def fetch_all_for_employee(self, owner_key: int) -> List[Timesheet]:
        try:
            headers = self._query().filter(models.Timesheet.employee_id == owner_key).order_by(
                models.Timesheet.week_ending.desc(), models.Timesheet.id.desc()
            ).all()
        except SQLAlchemyError:
            logger.exception("Loading timesheets of employee key {} failed", owner_key)
            self.db.rollback()
            return []
        return [_to_schema(h) for h in headers]

    def fetch_all(self) -> List[Timesheet]:
        try:
            headers = self._query().order_by(
                models.Timesheet.employee_id, models.Timesheet.week_ending.desc(), models.Timesheet.id.desc()
            ).all()
        except SQLAlchemyError:
            logger.exception("Loading all timesheets failed")
            self.db.rollback()
            return []
        return [_to_schema(h) for h in headers]

    def fetch_current(self, owner_key: int, today: Optional[date] = None) -> Optional[Timesheet]:
        return select_current(self.fetch_all_for_employee(owner_key), today)
