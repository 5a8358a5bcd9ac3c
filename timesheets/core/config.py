# timesheets/core/config.py
import sys
from typing import Optional

from dotenv import load_dotenv
from loguru import logger
from pydantic_settings import BaseSettings

load_dotenv()


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./timesheets.db"
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    DEFAULT_PASSWORD: str = "password"
    ADMIN_USER_NAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"
    MIN_TIMESHEET_ROWS: int = 5
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None


settings = Settings()


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> None:
    """Route loguru output to stderr and, if configured, a log file."""
    level = level or settings.LOG_LEVEL
    log_file = log_file or settings.LOG_FILE
    logger.remove()
    if log_file:
        logger.add(log_file, level=level)
    logger.add(sys.stderr, level=level)
