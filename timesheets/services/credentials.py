# timesheets/services/credentials.py
from typing import Optional

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from timesheets.core.errors import StorageError
from timesheets.db import models
from timesheets.schemas.employee import Employee, Role
from timesheets.services.directory import EmployeeDirectory


class CredentialVerifier:
    def __init__(self, db: Session, directory: Optional[EmployeeDirectory] = None):
        self.db = db
        self.directory = directory or EmployeeDirectory(db)

    def _credential(self, user_name: str) -> Optional[models.Credential]:
        return self.db.query(models.Credential).join(models.Employee).filter(
            func.lower(models.Employee.user_name) == user_name.lower()
        ).first()

    def verify(self, user_name: str, password: str) -> bool:
        if not user_name or password is None:
            return False
        try:
            credential = self._credential(user_name)
        except SQLAlchemyError:
            logger.exception("Credential lookup for '{}' failed", user_name)
            self.db.rollback()
            return False
        return credential is not None and credential.password_value == password

    def change_password(self, user_name: str, new_password: str) -> None:
        """Replaces the stored password; unknown user names are ignored."""
        try:
            credential = self._credential(user_name)
            if credential is None:
                logger.debug("No credential for '{}', password unchanged", user_name)
                return
            credential.password_value = new_password
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Changing password of '{user_name}' failed") from exc
        logger.info("Password changed for '{}'", user_name)

    def authenticate(self, user_name: str, password: str) -> Optional[Employee]:
        """The matching employee, or None for a bad user name, bad password or storage failure."""
        if not self.verify(user_name, password):
            return None
        return self.directory.find_by_user_name(user_name)

    @staticmethod
    def is_admin(employee: Optional[Employee]) -> bool:
        return employee is not None and employee.role == Role.ADMIN
