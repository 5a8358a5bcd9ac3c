# timesheets/api/v1/endpoints/timesheets.py
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from timesheets.core import security
from timesheets.core.context import CurrentCaller
from timesheets.core.errors import StorageError, TimesheetNotFound
from timesheets.db import session
from timesheets.schemas import timesheet as timesheet_schema
from timesheets.schemas.employee import Role
from timesheets.schemas.timesheet import DAYS_IN_WEEK
from timesheets.services.directory import EmployeeDirectory
from timesheets.services.editing import TimesheetEditSession
from timesheets.services.selector import is_open_week, week_ending
from timesheets.services.store import TimesheetStore

router = APIRouter()


def _out(sheet: timesheet_schema.Timesheet) -> timesheet_schema.TimesheetOut:
    return timesheet_schema.TimesheetOut(**sheet.model_dump(), editable=is_open_week(sheet.week_ending))


def _owner_key(db: Session, caller: CurrentCaller) -> int:
    return EmployeeDirectory(db).resolve_key(caller.employee)


def _check_access(sheet: timesheet_schema.Timesheet, caller: CurrentCaller) -> None:
    if sheet.owner.id != caller.employee.id and caller.employee.role != Role.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your timesheet")


@router.get("", response_model=List[timesheet_schema.TimesheetOut])
def read_my_timesheets(
    db: Session = Depends(session.get_db),
    caller: CurrentCaller = Depends(security.get_current_caller)
):
    """ All timesheets of the logged-in user, newest week first. """
    store = TimesheetStore(db)
    return [_out(ts) for ts in store.fetch_all_for_employee(_owner_key(db, caller))]


@router.get("/current", response_model=timesheet_schema.TimesheetOut)
def read_current_timesheet(
    db: Session = Depends(session.get_db),
    caller: CurrentCaller = Depends(security.get_current_caller)
):
    """ The timesheet whose week ends closest to today. """
    current = TimesheetStore(db).fetch_current(_owner_key(db, caller))
    if current is None:
        raise HTTPException(status_code=404, detail="No timesheets yet")
    return _out(current)


@router.post("", response_model=timesheet_schema.TimesheetOut, status_code=status.HTTP_201_CREATED)
def create_timesheet(
    timesheet_in: timesheet_schema.TimesheetCreate,
    db: Session = Depends(session.get_db),
    caller: CurrentCaller = Depends(security.get_current_caller)
):
    """ Creates a blank timesheet for the given week, or the current one. """
    store = TimesheetStore(db)
    ending = timesheet_in.week_ending or week_ending(date.today())
    try:
        timesheet_id = store.create(_owner_key(db, caller), ending)
    except StorageError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Timesheet could not be created")
    return _out(store.fetch_by_id(timesheet_id))


@router.get("/{timesheet_id}", response_model=timesheet_schema.TimesheetOut)
def read_timesheet(timesheet_id: int, db: Session = Depends(session.get_db),
                   caller: CurrentCaller = Depends(security.get_current_caller)):
    sheet = TimesheetStore(db).fetch_by_id(timesheet_id)
    if sheet is None:
        raise HTTPException(status_code=404, detail="Timesheet not found")
    _check_access(sheet, caller)
    return _out(sheet)


@router.put("/{timesheet_id}", response_model=timesheet_schema.TimesheetOut)
def edit_timesheet(
    timesheet_id: int,
    grid: timesheet_schema.TimesheetGrid,
    db: Session = Depends(session.get_db),
    caller: CurrentCaller = Depends(security.get_current_caller)
):
    """
    Writes an edited hours/notes grid back to the timesheet. Rows beyond the
    current ones are appended; past weeks are read-only.
    """
    editor = TimesheetEditSession(TimesheetStore(db), caller)
    try:
        sheet = editor.init(timesheet_id)
    except TimesheetNotFound:
        raise HTTPException(status_code=404, detail="Timesheet not found")
    _check_access(sheet, caller)
    if not editor.is_editable():
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Timesheet is no longer editable")

    while len(editor.hours_grid) < len(grid.hours):
        editor.add_row()
    for index, week in enumerate(grid.hours):
        editor.hours_grid[index] = (list(week) + [""] * DAYS_IN_WEEK)[:DAYS_IN_WEEK]
    for index, notes in enumerate(grid.notes[:len(editor.notes_grid)]):
        editor.notes_grid[index] = notes
    if grid.overtime is not None:
        sheet.overtime = grid.overtime
    if grid.flextime is not None:
        sheet.flextime = grid.flextime

    if not editor.save():
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=editor.messages)
    return _out(editor.sheet)
