from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_MANAGER = ("Amit Sharma", "manager@unolo.com")
DEMO_EMPLOYEES = (
    ("Rahul Kumar", "rahul@unolo.com"),
    ("Priya Singh", "priya@unolo.com"),
    ("Vikram Patel", "vikram@unolo.com"),
)
DEMO_CLIENTS = (
    ("ABC Corp", "Cyber City, Gurugram", 28.4946, 77.0887),
    ("XYZ Ltd", "Sector 44, Gurugram", 28.4595, 77.0266),
    ("Tech Solutions", "DLF Phase 3, Gurugram", 28.4947, 77.0952),
    ("Global Services", "Udyog Vihar, Gurugram", 28.5011, 77.0838),
    ("Innovate Inc", "Sector 18, Noida", 28.5707, 77.3219),
)
# (employee email, client name, assigned date)
DEMO_ASSIGNMENTS = (
    ("rahul@unolo.com", "ABC Corp", "2024-01-01"),
    ("rahul@unolo.com", "XYZ Ltd", "2024-01-01"),
    ("rahul@unolo.com", "Tech Solutions", "2024-01-15"),
    ("priya@unolo.com", "XYZ Ltd", "2024-01-01"),
    ("priya@unolo.com", "Global Services", "2024-01-01"),
    ("vikram@unolo.com", "ABC Corp", "2024-01-10"),
    ("vikram@unolo.com", "Innovate Inc", "2024-01-10"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _strip_create_db_and_use(_strip_comments(sql))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_data(db_config: dict) -> None:
    """Upsert the demo manager, employees, clients and assignments."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(DEMO_PASSWORD)

        def upsert_user(name: str, email: str, role: str, manager_id: int | None) -> int:
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE users SET name=%s, password_hash=%s, role=%s, manager_id=%s WHERE email=%s",
                    (name, password_hash, role, manager_id, email),
                )
                return int(existing["user_id"])
            cur.execute(
                "INSERT INTO users (name, email, password_hash, role, manager_id) VALUES (%s, %s, %s, %s, %s)",
                (name, email, password_hash, role, manager_id),
            )
            return int(cur.lastrowid)

        def upsert_client(name: str, address: str, latitude: float, longitude: float) -> int:
            cur.execute("SELECT client_id FROM clients WHERE name=%s", (name,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE clients SET address=%s, latitude=%s, longitude=%s WHERE client_id=%s",
                    (address, latitude, longitude, existing["client_id"]),
                )
                return int(existing["client_id"])
            cur.execute(
                "INSERT INTO clients (name, address, latitude, longitude) VALUES (%s, %s, %s, %s)",
                (name, address, latitude, longitude),
            )
            return int(cur.lastrowid)

        manager_id = upsert_user(*DEMO_MANAGER, "manager", None)
        user_ids = {email: upsert_user(name, email, "employee", manager_id) for name, email in DEMO_EMPLOYEES}
        client_ids = {c[0]: upsert_client(*c) for c in DEMO_CLIENTS}

        for email, client_name, assigned_date in DEMO_ASSIGNMENTS:
            cur.execute(
                """
                INSERT IGNORE INTO employee_clients (employee_id, client_id, assigned_date)
                VALUES (%s, %s, %s)
                """,
                (user_ids[email], client_ids[client_name], assigned_date),
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo data ready (%d employees, %d clients)", len(DEMO_EMPLOYEES), len(DEMO_CLIENTS))


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
