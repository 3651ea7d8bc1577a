"""Schema and demo-data helpers used by ``create_app`` and ``scripts/``."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator
from uuid import uuid4

from werkzeug.security import generate_password_hash

from ..core.enums import Role
from ..core.logging import get_logger
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor

logger = get_logger(__name__)

DEMO_ACCOUNTS = (
    ("Admin Demo", "admin@example.com", "admin123", Role.ADMIN),
    ("Alex Employee", "alex@example.com", "employee123", Role.EMPLOYEE),
    ("Blair Employee", "blair@example.com", "employee123", Role.EMPLOYEE),
)

# CREATE DATABASE / USE lines are dropped: the target database comes from settings.
_DB_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")
# One statement: quoted strings may contain ';'.
_STATEMENT = re.compile(r"""(?:'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|[^;'"])+""")


def _factory(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def split_statements(sql: str) -> Iterator[str]:
    sql = _DB_SELECTION.sub("", _LINE_COMMENT.sub("", sql))
    for match in _STATEMENT.finditer(sql):
        stmt = match.group(0).strip()
        if stmt:
            yield stmt


def ensure_database_exists(db_config: dict) -> None:
    factory = _factory(db_config)
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every statement of the schema file."""

    ensure_database_exists(db_config)
    statements = list(split_statements(Path(schema_path).read_text(encoding="utf-8")))

    with db_cursor(_factory(db_config), dictionary=False) as (_, cur):
        for stmt in statements:
            cur.execute(stmt)

    logger.info("db.schema_applied", statements=len(statements), target=DBConfig.from_dict(db_config).describe())
    return len(statements)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert the demo accounts (by e-mail) with fresh password hashes."""

    with db_cursor(_factory(db_config)) as (_, cur):
        for name, email, password, role in DEMO_ACCOUNTS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    "UPDATE employees SET name=%s, password_hash=%s, role=%s, is_active=1 WHERE email=%s",
                    (name, password_hash, role.value, email),
                )
            else:
                cur.execute(
                    "INSERT INTO employees (employee_id, name, email, password_hash, role) VALUES (%s, %s, %s, %s, %s)",
                    (str(uuid4()), name, email, password_hash, role.value),
                )

    logger.info("db.demo_users_ready", accounts=len(DEMO_ACCOUNTS))


def list_tables(db_config: dict) -> list[str]:
    with db_cursor(_factory(db_config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
