import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# Module loggers use __name__, which includes whatever prefix this package was imported under.
_PACKAGE = __name__.rsplit(".common.", 1)[0]


def setup_logging(*, level: str = "INFO", log_dir: Optional[str] = "logs") -> Optional[Path]:
    """
    Configure logging for the time-clock service.

    Console output always; when ``log_dir`` is set, a rotating app log plus an
    error-only log. Clock/timesheet modules also get their own file since
    absorbed posting failures are only visible there.
    """
    formatter = logging.Formatter(LOG_FORMAT)
    level_no = logging.getLevelName(str(level).upper())
    if not isinstance(level_no, int):
        level_no = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level_no)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level_no)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("mysql.connector").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    if not log_dir:
        return None

    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    main_file_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "app.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    main_file_handler.setLevel(level_no)
    main_file_handler.setFormatter(formatter)
    root_logger.addHandler(main_file_handler)

    timesheet_file_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "timesheets.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    timesheet_file_handler.setLevel(logging.DEBUG)
    timesheet_file_handler.setFormatter(formatter)
    for module in ("clock.service", "timesheets.service"):
        module_logger = logging.getLogger(f"{_PACKAGE}.{module}")
        module_logger.handlers.clear()
        module_logger.addHandler(timesheet_file_handler)
        module_logger.setLevel(logging.DEBUG)

    error_file_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "errors.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    error_file_handler.setLevel(logging.ERROR)
    error_file_handler.setFormatter(formatter)
    root_logger.addHandler(error_file_handler)

    logger = logging.getLogger(__name__)
    logger.info("Logging configured, files in %s", logs_dir.absolute())
    return logs_dir
