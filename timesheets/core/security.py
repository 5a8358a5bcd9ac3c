# timesheets/core/security.py
# Access tokens and the caller dependencies shared by the routers.
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from timesheets.core.config import settings
from timesheets.core.context import CurrentCaller
from timesheets.db import session
from timesheets.schemas import token as token_schema
from timesheets.schemas.employee import Employee, Role
from timesheets.services.directory import EmployeeDirectory


# --- JWT Creation ---
def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


# --- Caller Dependencies ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(session.get_db)) -> Employee:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        user_name: str = payload.get("sub")
        if user_name is None:
            raise credentials_exception
        token_data = token_schema.TokenData(user_name=user_name)
    except JWTError:
        raise credentials_exception

    user = EmployeeDirectory(db).find_by_user_name(token_data.user_name)
    if user is None:
        raise credentials_exception
    return user


def get_current_admin_user(current_user: Employee = Depends(get_current_user)) -> Employee:
    if current_user.role != Role.ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not enough permissions for this resource")
    return current_user


def get_current_caller(current_user: Employee = Depends(get_current_user)) -> CurrentCaller:
    return CurrentCaller(employee=current_user)
