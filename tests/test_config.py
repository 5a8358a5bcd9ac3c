from loguru import logger

from timesheets.core.config import Settings, configure_logging


def test_defaults():
    settings = Settings()
    assert settings.DEFAULT_PASSWORD == "password"
    assert settings.ADMIN_USER_NAME == "admin"
    assert settings.MIN_TIMESHEET_ROWS == 5


def test_configure_logging_writes_log_file(tmp_path):
    log_file = tmp_path / "timesheets.log"
    configure_logging(level="DEBUG", log_file=str(log_file))
    try:
        logger.info("hello from the test")
    finally:
        configure_logging()
    assert "hello from the test" in log_file.read_text()
