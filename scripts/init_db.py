"""Create the database (if missing) and apply database/schema.sql.

Usage: APP_ENV=development python scripts/init_db.py
"""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from attendance_tracker.core.logging import get_logger, setup_logging
from attendance_tracker.database.bootstrap import apply_schema, list_tables
from attendance_tracker.database.connection import DBConfig
from attendance_tracker.main import SCHEMA_PATH
from attendance_tracker.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    log = get_logger("scripts.init_db")

    db_config = dict(settings.DB_CONFIG)
    statements = apply_schema(db_config, schema_path=SCHEMA_PATH)
    log.info(
        "init_db.done",
        target=DBConfig.from_dict(db_config).describe(),
        statements=statements,
        tables=sorted(list_tables(db_config)),
    )


if __name__ == "__main__":
    main()
