import sqlite3
import pytest
from pathlib import Path

from autofill_manager.audit import AuditLog
from autofill_manager.commands import CommandHandler
from autofill_manager.connection import ConnectionGuard
from autofill_manager.tables import TableAccessor

AUTOFILL_ROWS = [
    ("email", "alice@example.com", "alice@example.com", 1700000000, 3),
    ("email", "bob@example.com", "bob@example.com", 1700000100, 1),
    ("city", "Zürich", "zürich", 1700000200, 7),
]


@pytest.fixture()
def web_data(tmp_path) -> str:
    """A small Web Data style database on disk."""
    db_path = Path(tmp_path) / 'Web Data'
    conn = sqlite3.connect(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE autofill (name VARCHAR, value VARCHAR, value_lower VARCHAR,
                                   date_created INTEGER DEFAULT 0, count INTEGER DEFAULT 1);
            CREATE TABLE credentials (name TEXT, value TEXT);
            CREATE TABLE meta (key LONGVARCHAR NOT NULL UNIQUE PRIMARY KEY, value LONGVARCHAR);
            CREATE TABLE keywords (id INTEGER PRIMARY KEY AUTOINCREMENT, short_name VARCHAR);
            """
        )
        conn.executemany("INSERT INTO autofill VALUES (?, ?, ?, ?, ?)", AUTOFILL_ROWS)
        conn.execute("INSERT INTO credentials VALUES ('site.com', 'secret')")
        conn.execute("INSERT INTO meta VALUES ('version', '120')")
        conn.execute("INSERT INTO keywords (short_name) VALUES ('Bing')")
        conn.commit()
    finally:
        conn.close()
    return str(db_path)


@pytest.fixture()
def guard():
    return ConnectionGuard()


@pytest.fixture()
def accessor(guard, web_data):
    guard.ensure_open(web_data)
    return TableAccessor(guard)


@pytest.fixture()
def audit_path(tmp_path) -> str:
    return str(Path(tmp_path) / 'logs' / 'audit.log')


@pytest.fixture()
def handler(guard, web_data, audit_path):
    return CommandHandler(guard, web_data, AuditLog(audit_path))
