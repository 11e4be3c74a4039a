"""
Command boundary between the front-end and the database accessor.

The front-end talks to the accessor through named commands with string
arguments. Results come back as plain JSON-safe values; failures come back as
an envelope carrying the error message and its kind.
"""

import json
import inspect
import logging
from typing import Any, Callable, Dict, List, Optional

from . import config
from .audit import AuditLog
from .connection import ConnectionGuard
from .errors import DatabaseError, MarshalingError
from .tables import TableAccessor
from .values import record_set_to_wire

logger = logging.getLogger(__name__)


class CommandHandler:
    """Exposes the accessor operations to the front-end."""

    def __init__(self, guard: ConnectionGuard, target_path: Optional[str] = None,
                 audit: Optional[AuditLog] = None):
        """
        Args:
            guard: The application's single connection guard
            target_path: Database location, defaults to config.TARGET_PATH
            audit: Audit log for deletions, None to disable auditing
        """
        self.guard = guard
        self.accessor = TableAccessor(guard)
        self.target_path = config.TARGET_PATH if target_path is None else target_path
        self.audit = audit
        self._commands: Dict[str, Callable[..., Any]] = {
            "get_table_data": self.get_table_data,
            "delete_record": self.delete_record,
            "list_tables": self.list_tables,
            "get_table_view": self.get_table_view,
        }

    @property
    def command_names(self) -> List[str]:
        return sorted(self._commands)

    def get_table_data(self, table_name: str) -> List[Dict[str, Any]]:
        """Open the database if needed and return every row of table_name."""
        self.guard.ensure_open(self.target_path)
        return record_set_to_wire(self.accessor.read_table(table_name))

    def get_table_view(self, table_name: str) -> Dict[str, Any]:
        """
        Like get_table_data(), plus the introspected column list.

        Returns:
            {"columns": [...], "rows": [...]}, columns present even when
            the table is empty
        """
        self.guard.ensure_open(self.target_path)
        columns, records = self.accessor.read_table_with_columns(table_name)
        return {"columns": columns, "rows": record_set_to_wire(records)}

    def delete_record(self, table_name: str, name: str, value: str) -> bool:
        """Delete rows matching name and value. Requires an earlier read."""
        removed = self.accessor.delete_record(table_name, name, value)
        if self.audit is not None:
            # the value column may hold secrets, keep it out of the log
            action = "DELETE_RECORD" if removed else "DELETE_RECORD_NO_MATCH"
            self.audit.record(action, f"table={table_name} name={name}")
        return removed

    def list_tables(self) -> List[str]:
        self.guard.ensure_open(self.target_path)
        return self.accessor.list_tables()

    def invoke(self, command: str, args: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Run a command by name.

        Args:
            command: One of command_names
            args: Keyword arguments for the command, all strings

        Returns:
            {"ok": True, "result": ...} on success, otherwise
            {"ok": False, "error": message, "kind": kind}

        Raises:
            ValueError: If the command is unknown
        """
        handler = self._commands.get(command)
        if handler is None:
            raise ValueError(f"Unknown command: {command}")
        args = args or {}

        try:
            self._check_args(handler, args)
            result = handler(**args)
        except DatabaseError as e:
            logger.error(f"Command {command} failed ({e.kind}): {e.message}")
            return e.to_wire()
        return {"ok": True, "result": result}

    def invoke_json(self, command: str, args: Optional[Dict[str, Any]] = None) -> str:
        """Like invoke(), but returns the envelope serialized as strict JSON."""
        envelope = self.invoke(command, args)
        try:
            return to_json(envelope)
        except MarshalingError as e:
            logger.error(f"Command {command} result could not be serialized: {e.detail}")
            return to_json(e.to_wire())

    @staticmethod
    def _check_args(handler: Callable[..., Any], args: Dict[str, Any]) -> None:
        expected = list(inspect.signature(handler).parameters)
        missing = [name for name in expected if name not in args]
        unexpected = [name for name in args if name not in expected]
        if missing or unexpected:
            raise MarshalingError(f"bad arguments, missing={missing} unexpected={unexpected}")
        for name, value in args.items():
            if not isinstance(value, str):
                raise MarshalingError(f"argument {name} must be a string, got {type(value).__name__}")


def to_json(envelope: Dict[str, Any]) -> str:
    """
    Serialize an envelope as strict JSON.

    Raises:
        MarshalingError: If it holds values JSON cannot express (NaN, infinity)
    """
    try:
        return json.dumps(envelope, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise MarshalingError(str(e)) from e
