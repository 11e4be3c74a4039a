"""
Connection guard for the browser's Web Data database.

Holds at most one open SQLite connection and serialises every use of it behind
a single lock. Opening happens lazily, once, on the first read request.
"""

import os
import sqlite3
import logging
import threading
from enum import Enum
from typing import Callable, Optional, TypeVar

from . import config
from .errors import NotConnectedError, NotFoundError, StorageEngineError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConnectionState(Enum):
    """Lifecycle of the guarded connection. There is no way back from OPEN."""
    UNOPENED = "unopened"
    OPEN = "open"


class ConnectionGuard:
    """Owns the single database connection."""

    def __init__(self, timeout: float = config.SQLITE_TIMEOUT_SECONDS):
        """
        Initialize an unopened guard.
        Args:
            timeout: Seconds SQLite waits on a locked database file
        """
        self._lock = threading.Lock()
        self._timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._path: Optional[str] = None

    @property
    def state(self) -> ConnectionState:
        with self._lock:
            return ConnectionState.OPEN if self._conn is not None else ConnectionState.UNOPENED

    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    @property
    def path(self) -> Optional[str]:
        """Path of the opened database, None while unopened."""
        return self._path

    def ensure_open(self, path: str) -> None:
        """
        Open the database at path unless a connection already exists.

        The existence check and the open run under the lock, so concurrent
        callers never open the file twice.

        Raises:
            NotFoundError: If no file exists at path
            StorageEngineError: If SQLite refuses to open the file
        """
        with self._lock:
            if self._conn is not None:
                if path != self._path:
                    logger.debug(f"Already connected to {self._path}; ignoring open request for {path}")
                return

            if not path or not os.path.exists(path):
                logger.warning(f"Database file not found: {path}")
                raise NotFoundError(path)

            try:
                # the connection is shared by worker threads, the lock serialises access
                conn = sqlite3.connect(path, timeout=self._timeout, check_same_thread=False)
            except sqlite3.Error as e:
                logger.error(f"Failed to open database {path}: {e}")
                raise StorageEngineError(e) from e

            self._conn = conn
            self._path = path
            logger.info(f"Opened database {path}")

    def with_connection(self, fn: Callable[[sqlite3.Connection], T]) -> T:
        """
        Run fn with exclusive access to the open connection.

        Args:
            fn: Callable receiving the sqlite3.Connection

        Returns:
            Whatever fn returns

        Raises:
            NotConnectedError: If ensure_open has not succeeded yet
            StorageEngineError: If fn raises a sqlite3.Error
        """
        with self._lock:
            if self._conn is None:
                raise NotConnectedError()
            try:
                return fn(self._conn)
            except sqlite3.Error as e:
                raise StorageEngineError(e) from e
