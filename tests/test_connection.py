import sqlite3
import threading
import pytest

from autofill_manager.connection import ConnectionGuard, ConnectionState
from autofill_manager.errors import NotConnectedError, NotFoundError, StorageEngineError


@pytest.fixture()
def open_calls(monkeypatch):
    """Record every sqlite3.connect call made while the test runs."""
    calls = []
    real_connect = sqlite3.connect

    def counting_connect(*args, **kwargs):
        calls.append(args[0])
        return real_connect(*args, **kwargs)

    monkeypatch.setattr(sqlite3, 'connect', counting_connect)
    return calls


def test_missing_file_leaves_guard_unopened(guard, tmp_path, open_calls):
    missing = str(tmp_path / 'nope.db')
    with pytest.raises(NotFoundError) as exc:
        guard.ensure_open(missing)
    assert exc.value.path == missing
    assert str(exc.value) == f"File not found: {missing}"
    assert guard.state is ConnectionState.UNOPENED
    assert open_calls == []


def test_empty_path_is_not_found(guard):
    with pytest.raises(NotFoundError):
        guard.ensure_open("")
    assert not guard.is_open()


def test_ensure_open_is_idempotent(guard, web_data, open_calls):
    guard.ensure_open(web_data)
    guard.ensure_open(web_data)
    assert open_calls == [web_data]
    assert guard.state is ConnectionState.OPEN
    assert guard.path == web_data


def test_ensure_open_keeps_first_connection(guard, web_data, tmp_path, open_calls):
    guard.ensure_open(web_data)
    guard.ensure_open(str(tmp_path / 'other.db'))
    assert guard.path == web_data
    assert len(open_calls) == 1


def test_concurrent_ensure_open_opens_once(guard, web_data, open_calls):
    barrier = threading.Barrier(8)
    errors = []

    def opener():
        barrier.wait()
        try:
            guard.ensure_open(web_data)
        except Exception as e:  # pragma: no cover - surfaced by the assert below
            errors.append(e)

    threads = [threading.Thread(target=opener) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert open_calls == [web_data]


def test_with_connection_requires_open(guard):
    with pytest.raises(NotConnectedError) as exc:
        guard.with_connection(lambda conn: conn.execute("SELECT 1"))
    assert str(exc.value) == "Database not connected"


def test_with_connection_returns_result(guard, web_data):
    guard.ensure_open(web_data)
    assert guard.with_connection(lambda conn: conn.execute("SELECT 41 + 1").fetchone()[0]) == 42


def test_with_connection_wraps_sqlite_errors(guard, web_data):
    guard.ensure_open(web_data)
    with pytest.raises(StorageEngineError) as exc:
        guard.with_connection(lambda conn: conn.execute("SELEC broken"))
    assert isinstance(exc.value.cause, sqlite3.OperationalError)
    assert isinstance(exc.value.__cause__, sqlite3.OperationalError)
    assert str(exc.value).startswith("Database error: ")


def test_with_connection_is_exclusive(guard, web_data):
    guard.ensure_open(web_data)
    active = []
    peak = []
    counter_lock = threading.Lock()

    def work(conn):
        with counter_lock:
            active.append(1)
            peak.append(len(active))
        conn.execute("SELECT count(*) FROM autofill").fetchone()
        with counter_lock:
            active.pop()

    threads = [threading.Thread(target=guard.with_connection, args=(work,)) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(peak) == 10
    assert max(peak) == 1
