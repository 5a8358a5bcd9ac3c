# timesheets/services/directory.py
# Employee lookups, provisioning and removal.
from typing import List, Optional

from loguru import logger
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from timesheets.core.config import settings
from timesheets.core.errors import DuplicateNumber, DuplicateUserName, StorageError
from timesheets.db import models
from timesheets.schemas.employee import Employee, EmployeeBase, EmployeeCreate, EmployeeUpdate, Role


def _is_protected(user_name: Optional[str]) -> bool:
    return (user_name or "").lower() == settings.ADMIN_USER_NAME.lower()


def seed_administrator(db: Session) -> None:
    """Insert the administrator account when the directory is empty."""
    if db.query(models.Employee).count() > 0:
        return
    admin = models.Employee(
        number=0, user_name=settings.ADMIN_USER_NAME, name="System Admin", role=Role.ADMIN.value
    )
    admin.credential = models.Credential(password_value=settings.ADMIN_PASSWORD)
    db.add(admin)
    db.commit()
    logger.info("Seeded administrator account '{}'", settings.ADMIN_USER_NAME)


class EmployeeDirectory:
    def __init__(self, db: Session):
        self.db = db

    # --- Lookups ---

    def _by_number(self, number: int) -> Optional[models.Employee]:
        return self.db.query(models.Employee).filter(models.Employee.number == number).first()

    def _by_user_name(self, user_name: Optional[str]) -> Optional[models.Employee]:
        if not user_name:
            return None
        return self.db.query(models.Employee).filter(
            func.lower(models.Employee.user_name) == user_name.lower()
        ).first()

    def _lookup(self, employee: EmployeeBase) -> Optional[models.Employee]:
        if employee.number:
            return self._by_number(employee.number)
        return self._by_user_name(employee.user_name)

    def find_by_number(self, number: int) -> Optional[Employee]:
        try:
            record = self._by_number(number)
        except SQLAlchemyError:
            logger.exception("Employee lookup by number {} failed", number)
            self.db.rollback()
            return None
        return Employee.model_validate(record) if record else None

    def find_by_user_name(self, user_name: str) -> Optional[Employee]:
        try:
            record = self._by_user_name(user_name)
        except SQLAlchemyError:
            logger.exception("Employee lookup by user name '{}' failed", user_name)
            self.db.rollback()
            return None
        return Employee.model_validate(record) if record else None

    def list_employees(self) -> List[Employee]:
        try:
            records = self.db.query(models.Employee).order_by(models.Employee.number).all()
        except SQLAlchemyError:
            logger.exception("Listing employees failed")
            self.db.rollback()
            return []
        return [Employee.model_validate(r) for r in records]

    def administrator(self) -> Optional[Employee]:
        """The seed administrator, or the lowest-numbered ADMIN if it has been renamed away."""
        admin = self.find_by_user_name(settings.ADMIN_USER_NAME)
        if admin and admin.role == Role.ADMIN:
            return admin
        try:
            record = self.db.query(models.Employee).filter(
                models.Employee.role == Role.ADMIN.value
            ).order_by(models.Employee.number, models.Employee.id).first()
        except SQLAlchemyError:
            logger.exception("Administrator lookup failed")
            self.db.rollback()
            return None
        return Employee.model_validate(record) if record else None

    def next_external_number(self) -> int:
        current = self.db.query(func.max(models.Employee.number)).scalar()
        return 1 if current is None else current + 1

    # --- Writes ---

    def resolve_key(self, employee: EmployeeBase, autocommit: bool = True) -> int:
        """
        Returns the storage key of `employee`, creating a minimal USER record if
        neither its number nor its user name is known yet.

        With `autocommit=False` the new record is only flushed, leaving the
        surrounding unit of work to commit or roll it back.
        """
        record = self._lookup(employee)
        if record is not None:
            return record.id

        number = employee.number or self.next_external_number()
        record = models.Employee(
            number=number,
            user_name=employee.user_name or f"user{number}",
            name=employee.name or f"User {number}",
            role=Role.USER.value,
        )
        self.db.add(record)
        self.db.flush()
        key = record.id
        logger.info("Provisioned directory record {} for employee #{}", key, number)
        if autocommit:
            self.db.commit()
        return key

    def add(self, employee: EmployeeCreate) -> Employee:
        if self._by_user_name(employee.user_name) is not None:
            raise DuplicateUserName(employee.user_name)
        if employee.number and self._by_number(employee.number) is not None:
            raise DuplicateNumber(employee.number)

        number = employee.number or self.next_external_number()
        record = models.Employee(
            number=number,
            user_name=employee.user_name,
            name=employee.name,
            role=employee.role.value,
        )
        record.credential = models.Credential(password_value=settings.DEFAULT_PASSWORD)
        try:
            self.db.add(record)
            self.db.commit()
        except IntegrityError as exc:
            # lost a race against a concurrent add
            self.db.rollback()
            if self._by_user_name(employee.user_name) is not None:
                raise DuplicateUserName(employee.user_name) from exc
            raise DuplicateNumber(number) from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Adding employee '{employee.user_name}' failed") from exc
        self.db.refresh(record)
        logger.info("Added employee '{}' as #{}", record.user_name, record.number)
        return Employee.model_validate(record)

    def update(self, user_name: str, changes: EmployeeUpdate) -> Optional[Employee]:
        record = self._by_user_name(user_name)
        if record is None:
            return None
        if changes.number and changes.number != record.number:
            if self._by_number(changes.number) is not None:
                raise DuplicateNumber(changes.number)
            record.number = changes.number
        if changes.name is not None:
            record.name = changes.name
        if changes.role is not None:
            record.role = changes.role.value
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Updating employee '{user_name}' failed") from exc
        self.db.refresh(record)
        return Employee.model_validate(record)

    def delete(self, employee: EmployeeBase) -> bool:
        """Removes the employee and its credential. The administrator account is never removed."""
        if _is_protected(employee.user_name):
            logger.warning("Refusing to delete the administrator account")
            return False
        record = self._lookup(employee)
        if record is None:
            return False
        if _is_protected(record.user_name):
            logger.warning("Refusing to delete the administrator account")
            return False
        user_name = record.user_name
        try:
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StorageError(f"Deleting employee '{user_name}' failed") from exc
        logger.info("Deleted employee '{}'", user_name)
        return True
