"""Upsert the demo accounts so a fresh install can be logged into."""

from __future__ import annotations

import importlib

from dotenv import load_dotenv

from attendance_tracker.core.logging import get_logger, setup_logging
from attendance_tracker.database.bootstrap import DEMO_ACCOUNTS, ensure_demo_users
from attendance_tracker.database.connection import DBConfig
from attendance_tracker.settings import get_settings_module


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    log = get_logger("scripts.seed_db")

    db_config = dict(settings.DB_CONFIG)
    ensure_demo_users(db_config)

    log.info("seed_db.done", target=DBConfig.from_dict(db_config).describe())
    for name, email, password, role in DEMO_ACCOUNTS:
        log.info("seed_db.account", role=role.value, email=email, password=password, name=name)


if __name__ == "__main__":
    main()
