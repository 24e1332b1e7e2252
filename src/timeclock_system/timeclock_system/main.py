from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .clock.controller import register as register_clock
from .common.http import error_response, status_for
from .common.logging_config import setup_logging
from .container import Container, build_container
from .core.exceptions import DomainError, RepositoryError
from .database.bootstrap import apply_schema, list_tables
from .leave.controller import register as register_leave
from .timesheets.controller import register as register_timesheets

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return error_response(e.code, str(e), status_for(e))

    @app.errorhandler(RepositoryError)
    def handle_repository_error(e: RepositoryError):
        logger.error("Storage failure on %s", app.name, exc_info=e)
        return error_response("storage_error", "The database is unavailable, try again later", 503)

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return error_response(e.name.lower().replace(" ", "_"), e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return error_response("internal_error", "Unexpected server error", 500)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory. Pass ``container`` to run on pre-built services."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if not app.config["TESTING"]:
        setup_logging(
            level=getattr(settings, "LOG_LEVEL", "INFO"),
            log_dir=getattr(settings, "LOG_DIR", "logs"),
        )

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        container = build_container(db_config=db_config)

    register_error_handlers(app)
    register_clock(app, container)
    register_timesheets(app, container)
    register_leave(app, container)

    return app
