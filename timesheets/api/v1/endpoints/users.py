# timesheets/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from timesheets.core import security
from timesheets.db import session
from timesheets.schemas import employee as employee_schema
from timesheets.services.credentials import CredentialVerifier

router = APIRouter()


@router.get("/me", response_model=employee_schema.Employee)
def read_user_me(current_user: employee_schema.Employee = Depends(security.get_current_user)):
    """
    Get the details for the currently logged-in user.
    """
    return current_user


@router.put("/me/password", status_code=status.HTTP_204_NO_CONTENT)
def update_user_password(
    password_in: employee_schema.PasswordUpdate,
    db: Session = Depends(session.get_db),
    current_user: employee_schema.Employee = Depends(security.get_current_user)
):
    """
    Allows a logged-in user to change their own password.
    """
    CredentialVerifier(db).change_password(current_user.user_name, password_in.new_password)
    return
