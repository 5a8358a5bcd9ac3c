# timesheets/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from timesheets.api.v1.api import api_router
from timesheets.api.v1.endpoints import auth
from timesheets.core.config import configure_logging
from timesheets.db.session import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    init_db()
    yield


app = FastAPI(title="Timesheets API", lifespan=lifespan)

# Include the main router for all routes prefixed with /api/v1
app.include_router(api_router, prefix="/api/v1")

# Include the auth router separately for the /auth prefix
app.include_router(auth.router, prefix="/auth")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Timesheets API"}
