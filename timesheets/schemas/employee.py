# timesheets/schemas/employee.py
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class EmployeeBase(BaseModel):
    # 0 means "unassigned": the directory hands out the next free number
    number: int = 0
    user_name: Optional[str] = None
    name: Optional[str] = None
    role: Role = Role.USER


class EmployeeCreate(EmployeeBase):
    user_name: str = Field(min_length=1)


class EmployeeUpdate(BaseModel):
    name: Optional[str] = None
    number: Optional[int] = None
    role: Optional[Role] = None


class Employee(EmployeeBase):
    id: Optional[int] = None

    class Config:
        from_attributes = True


class PasswordUpdate(BaseModel):
    new_password: str
