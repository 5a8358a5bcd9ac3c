# timesheets/api/v1/api.py
from fastapi import APIRouter
from timesheets.api.v1.endpoints import admin, timesheets, users

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["Users"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
api_router.include_router(timesheets.router, prefix="/timesheets", tags=["Timesheets"])
