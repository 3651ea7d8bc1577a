from __future__ import annotations

import importlib
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .attendance.controller import register as register_attendance
from .common.web import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_SESSION_DAYS, DEFAULT_TIMEZONE
from .core.logging import get_logger, setup_logging
from .database.bootstrap import apply_schema, ensure_demo_users, list_tables
from .database.connection import DBConfig
from .reports.controller import register as register_reports
from .settings import get_settings_module
from .users.controller import register as register_users

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"

logger = get_logger(__name__)


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "app.starting",
            settings=settings_module,
            db=DBConfig.from_dict(db_config).describe(),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("app.schema_ready", tables=len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_users(db_config)
            logger.info("app.demo_seed_ready")

        container = build_container(db_config=db_config, timezone=getattr(settings, "TIMEZONE", DEFAULT_TIMEZONE))

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_reports(app, container)

    return app
