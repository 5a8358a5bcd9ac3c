# timesheets/db/models.py
from sqlalchemy import (
    BigInteger, CheckConstraint, Column, Date, DateTime, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint, func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class Employee(Base):
    __tablename__ = "employees"
    id = Column(Integer, primary_key=True, index=True)
    number = Column(Integer, unique=True, nullable=False, index=True)
    user_name = Column(String(64), nullable=False)
    name = Column(String(100))
    role = Column(String(10), nullable=False, default="USER")
    __table_args__ = (
        CheckConstraint("role IN ('USER', 'ADMIN')"),
        Index("ix_employees_user_name_lower", func.lower(user_name), unique=True),
    )
    credential = relationship(
        "Credential", back_populates="employee", uselist=False, cascade="all, delete-orphan"
    )
    timesheets = relationship("Timesheet", back_populates="owner", cascade="all, delete-orphan")


class Credential(Base):
    __tablename__ = "credentials"
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    password_value = Column(String(255), nullable=False)
    employee = relationship("Employee", back_populates="credential")


class Timesheet(Base):
    __tablename__ = "timesheets"
    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    week_ending = Column(Date, nullable=False, index=True)
    # tenths of an hour
    overtime_deci = Column(Integer, nullable=False, default=0)
    flextime_deci = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    owner = relationship("Employee", back_populates="timesheets")
    rows = relationship(
        "TimesheetRow", back_populates="timesheet", cascade="all, delete-orphan",
        order_by="TimesheetRow.line_no",
    )


class TimesheetRow(Base):
    __tablename__ = "timesheet_rows"
    id = Column(Integer, primary_key=True, index=True)
    timesheet_id = Column(Integer, ForeignKey("timesheets.id", ondelete="CASCADE"), nullable=False, index=True)
    line_no = Column(Integer, nullable=False)
    project_id = Column(Integer, nullable=False, default=0)
    work_package_id = Column(String(50), nullable=False, default="")
    packed_hours = Column(BigInteger, nullable=False, default=0)
    notes = Column(Text, nullable=True)
    __table_args__ = (UniqueConstraint("timesheet_id", "line_no"),)
    timesheet = relationship("Timesheet", back_populates="rows")
