"""
Error types raised by the database accessor.

Every failure inside the accessor is a DatabaseError subclass. The command
boundary turns them into plain messages (plus a kind string) for the front-end.
"""

from typing import Any, Dict


class DatabaseError(Exception):
    """Base class for all accessor failures."""

    kind = "database"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_wire(self) -> Dict[str, Any]:
        """Convert to the error envelope sent to the front-end."""
        return {"ok": False, "error": self.message, "kind": self.kind}


class NotFoundError(DatabaseError):
    """The database file does not exist."""

    kind = "not_found"

    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


class TableNotFoundError(DatabaseError):
    """The requested table is not present in the live schema."""

    kind = "table_not_found"

    def __init__(self, name: str):
        super().__init__(f"Table not found: {name}")
        self.name = name


class NotConnectedError(DatabaseError):
    """An operation needed an open connection but none was established."""

    kind = "not_connected"

    def __init__(self):
        super().__init__("Database not connected")


class StorageEngineError(DatabaseError):
    """Wraps an error reported by SQLite itself."""

    kind = "storage_engine"

    def __init__(self, cause: Exception):
        super().__init__(f"Database error: {cause}")
        self.cause = cause


class MarshalingError(DatabaseError):
    """A value could not be converted to or from its external form."""

    kind = "marshaling"

    def __init__(self, detail: str):
        super().__init__(f"Serialization error: {detail}")
        self.detail = detail
