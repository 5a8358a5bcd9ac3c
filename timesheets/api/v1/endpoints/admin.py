# timesheets/api/v1/endpoints/admin.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from timesheets.core import security
from timesheets.core.errors import ConflictError
from timesheets.db import session
from timesheets.schemas import employee as employee_schema
from timesheets.schemas import timesheet as timesheet_schema
from timesheets.services.directory import EmployeeDirectory
from timesheets.services.store import TimesheetStore

router = APIRouter()


@router.post("/employees", response_model=employee_schema.Employee, status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_in: employee_schema.EmployeeCreate,
    db: Session = Depends(session.get_db),
    admin: employee_schema.Employee = Depends(security.get_current_admin_user)
):
    """ Adds an employee with the default password. """
    try:
        return EmployeeDirectory(db).add(employee_in)
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail={"field": exc.field, "message": str(exc)})


@router.get("/employees", response_model=List[employee_schema.Employee])
def get_all_employees(
    db: Session = Depends(session.get_db),
    admin: employee_schema.Employee = Depends(security.get_current_admin_user)
):
    """ Retrieves a list of all employees. """
    return EmployeeDirectory(db).list_employees()


@router.put("/employees/{user_name}", response_model=employee_schema.Employee)
def update_employee(
    user_name: str,
    updates: employee_schema.EmployeeUpdate,
    db: Session = Depends(session.get_db),
    admin: employee_schema.Employee = Depends(security.get_current_admin_user)
):
    """ Updates an employee's name, number or role. """
    try:
        updated = EmployeeDirectory(db).update(user_name, updates)
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail={"field": exc.field, "message": str(exc)})
    if updated is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    return updated


@router.delete("/employees/{user_name}", status_code=status.HTTP_204_NO_CONTENT)
def remove_employee(
    user_name: str,
    db: Session = Depends(session.get_db),
    admin: employee_schema.Employee = Depends(security.get_current_admin_user)
):
    """
    Deletes an employee and their credential. The administrator account is silently kept.
    """
    EmployeeDirectory(db).delete(employee_schema.EmployeeBase(user_name=user_name))
    return


@router.get("/timesheets", response_model=List[timesheet_schema.Timesheet])
def get_all_timesheets(
    db: Session = Depends(session.get_db),
    admin: employee_schema.Employee = Depends(security.get_current_admin_user)
):
    """ Every timesheet, grouped by owner, newest week first. """
    return TimesheetStore(db).fetch_all()
