"""
Table access on top of the connection guard.

Reads whole tables as ordered rows of tagged cells and deletes autofill style
records by their name/value pair. Table names coming from the caller are only
ever used after they have been matched against the live schema, and then only
in quoted form.

LEGAL NOTICE:
This module reads and modifies the browser profile of the current user. Use it
only on devices you own or administer.
"""

import sqlite3
import logging
from dataclasses import dataclass
from typing import List, Tuple

from . import config
from .connection import ConnectionGuard
from .errors import MarshalingError, TableNotFoundError
from .values import CellValue, RecordSet, Row

logger = logging.getLogger(__name__)

TABLE_LOOKUP_SQL = "SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?"
LIST_TABLES_SQL = (
    "SELECT name FROM sqlite_master "
    "WHERE type = 'table' AND name NOT LIKE 'sqlite\\_%' ESCAPE '\\' "
    "ORDER BY name"
)
COLUMNS_SQL = "SELECT name FROM pragma_table_info(?) ORDER BY cid"


def quote_identifier(identifier: str) -> str:
    """Quote an SQL identifier, doubling embedded double quotes."""
    return '"' + identifier.replace('"', '""') + '"'


@dataclass(frozen=True)
class _TableName:
    """
    A table name confirmed to exist in the schema.

    Private to this module and built only by lookup_table(); holding one means
    the name was present when the lookup ran on the same locked connection.
    """
    name: str

    @property
    def quoted(self) -> str:
        return quote_identifier(self.name)


def lookup_table(conn: sqlite3.Connection, name: str) -> _TableName:
    """
    Match name exactly (case-sensitive) against the tables in sqlite_master.

    Raises:
        TableNotFoundError: If no table of that name exists
    """
    if conn.execute(TABLE_LOOKUP_SQL, (name,)).fetchone() is None:
        logger.warning(f"Table not found in schema: {name}")
        raise TableNotFoundError(name)
    return _TableName(name)


def table_columns(conn: sqlite3.Connection, table: _TableName) -> List[str]:
    """Column names of table in schema order."""
    return [row[0] for row in conn.execute(COLUMNS_SQL, (table.name,))]


class TableAccessor:
    """Validates, introspects and marshals table contents."""

    def __init__(self, guard: ConnectionGuard):
        self.guard = guard

    def list_tables(self) -> List[str]:
        """Names of the user tables, sorted. SQLite internal tables are left out."""
        def _list(conn: sqlite3.Connection) -> List[str]:
            return [row[0] for row in conn.execute(LIST_TABLES_SQL)]
        return self.guard.with_connection(_list)

    def read_table(self, name: str) -> RecordSet:
        """
        Read every row of a table.

        Args:
            name: Exact table name

        Returns:
            One Row per stored row, in storage order. Each Row maps the
            introspected column names, in schema order, to CellValues.

        Raises:
            NotConnectedError: If no connection has been opened
            TableNotFoundError: If the table is not in the schema
            StorageEngineError: If SQLite fails during the read
            MarshalingError: If a cell cannot be represented
        """
        _, records = self.read_table_with_columns(name)
        return records

    def read_table_with_columns(self, name: str) -> Tuple[List[str], RecordSet]:
        """
        Like read_table(), but also return the introspected column list.

        Both come from the same locked call, so an empty table still reports
        its columns.
        """
        def _read(conn: sqlite3.Connection) -> Tuple[List[str], RecordSet]:
            table = lookup_table(conn, name)
            columns = table_columns(conn, table)
            select_list = ", ".join(quote_identifier(c) for c in columns)
            cursor = conn.execute(f"SELECT {select_list} FROM {table.quoted}")

            records: RecordSet = []
            for raw in cursor:
                if len(raw) != len(columns):
                    raise MarshalingError(
                        f"row has {len(raw)} cells but table {name} has {len(columns)} columns"
                    )
                row: Row = {}
                for column, cell in zip(columns, raw):
                    row[column] = CellValue.from_native(cell)
                records.append(row)
            return columns, records

        columns, records = self.guard.with_connection(_read)
        logger.debug(f"Read {len(records)} rows from {name}")
        return columns, records

    def delete_record(self, table: str, name: str, value: str) -> bool:
        """
        Delete the rows of table whose name and value columns match.

        Does not open the database; a prior read must have done so.

        Returns:
            True if at least one row was removed, False otherwise

        Raises:
            NotConnectedError: If no connection has been opened
            TableNotFoundError: If the table is not in the schema
            StorageEngineError: If the table lacks the name/value columns or SQLite fails
        """
        return self.delete_matching(table, name, value) > 0

    def delete_matching(self, table: str, name: str, value: str) -> int:
        """Same as delete_record(), returning the number of rows removed."""
        name_column, value_column = config.DELETE_KEY_COLUMNS

        def _delete(conn: sqlite3.Connection) -> int:
            target = lookup_table(conn, table)
            columns = table_columns(conn, target)
            missing = [c for c in config.DELETE_KEY_COLUMNS if c not in columns]
            if missing:
                # unqualified, SQLite would read a missing "name" as the string 'name'
                raise sqlite3.OperationalError(f"no such column: {', '.join(missing)} in table {table}")
            sql = (
                f"DELETE FROM {target.quoted} "
                f"WHERE {target.quoted}.{quote_identifier(name_column)} = ? "
                f"AND {target.quoted}.{quote_identifier(value_column)} = ?"
            )
            try:
                cursor = conn.execute(sql, (name, value))
                conn.commit()
            except sqlite3.Error:
                conn.rollback()
                raise
            return cursor.rowcount

        removed = self.guard.with_connection(_delete)
        logger.info(f"Deleted {removed} rows from {table}")
        return removed
