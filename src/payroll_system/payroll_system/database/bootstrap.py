"""Schema and bootstrap-account helpers used at startup and by scripts/init_db.py."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

# CREATE DATABASE / USE lines are dropped so the schema lands in the configured database.
_DB_SELECTION_RE = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
# Quoted literals are matched whole so a ';' inside them does not end a statement.
_STATEMENT_TOKEN_RE = re.compile(r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"|;|[^'\";]+")


def _config(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "payroll_db")),
    )


def _connect(cfg: DBConfig, *, select_database: bool = True):
    params = {"host": cfg.host, "port": cfg.port, "user": cfg.user, "password": cfg.password, "use_pure": True}
    if select_database:
        params["database"] = cfg.database
    return mysql.connector.connect(**params)


def split_statements(sql: str) -> Iterator[str]:
    sql = "\n".join(ln for ln in sql.splitlines() if not ln.lstrip().startswith("--"))
    sql = _DB_SELECTION_RE.sub("", sql)

    current = []
    for token in _STATEMENT_TOKEN_RE.findall(sql):
        if token == ";":
            stmt = "".join(current).strip()
            current = []
            if stmt:
                yield stmt
        else:
            current.append(token)
    tail = "".join(current).strip()
    if tail:
        yield tail


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    """Create the database if needed and run every statement of ``schema_path``."""
    cfg = _config(db_config)

    server = _connect(cfg, select_database=False)
    try:
        server.cursor().execute(
            f"CREATE DATABASE IF NOT EXISTS `{cfg.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        server.commit()
    finally:
        server.close()

    conn = _connect(cfg)
    try:
        cur = conn.cursor()
        for stmt in split_statements(Path(schema_path).read_text(encoding="utf-8")):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_admin_user(db_config: dict, *, username: str, password: str, full_name: str = "Administrator") -> None:
    """Create the bootstrap admin account, or reset it to an active admin with ``password``."""
    conn = _connect(_config(db_config))
    try:
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO users (full_name, username, password_hash, role, employee_id, is_active)
            VALUES (%s, %s, %s, 'admin', NULL, 1)
            ON DUPLICATE KEY UPDATE
                full_name=VALUES(full_name),
                password_hash=VALUES(password_hash),
                role='admin',
                is_active=1
            """,
            (full_name, username, generate_password_hash(password)),
        )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_config(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
