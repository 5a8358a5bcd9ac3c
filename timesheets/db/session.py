# timesheets/db/session.py
from typing import Iterator, Optional

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from timesheets.core.config import settings
from timesheets.db import models
from timesheets.services.directory import seed_administrator

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None, db: Optional[Session] = None) -> None:
    """Create the schema and seed the administrator account on an empty directory."""
    bind = bind or engine
    models.Base.metadata.create_all(bind=bind)
    logger.debug("Schema ready on {}", bind.url)

    owns_session = db is None
    db = db or SessionLocal(bind=bind)
    try:
        seed_administrator(db)
    finally:
        if owns_session:
            db.close()
