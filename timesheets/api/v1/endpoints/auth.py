# timesheets/api/v1/endpoints/auth.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from timesheets.core import security
from timesheets.db import session
from timesheets.schemas import token as token_schema
from timesheets.services.credentials import CredentialVerifier

router = APIRouter()


@router.post("/token", response_model=token_schema.Token)
def login(db: Session = Depends(session.get_db), form_data: OAuth2PasswordRequestForm = Depends()):
    user = CredentialVerifier(db).authenticate(form_data.username, form_data.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect username or password")

    access_token = security.create_access_token(data={"sub": user.user_name})
    return {"access_token": access_token, "token_type": "bearer"}
