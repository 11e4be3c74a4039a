"""
Cell values read from SQLite and their external representation.

SQLite stores every cell in one of five storage classes. A CellValue keeps the
class alongside the Python value so the front-end never has to guess.

External (wire) representation:
    NULL    -> None
    INTEGER -> int
    REAL    -> float
    TEXT    -> str
    BLOB    -> list of ints, one per byte (0..255), in storage order
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Union

from .errors import MarshalingError


class CellKind(Enum):
    """SQLite storage classes."""
    NULL = "null"
    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BLOB = "blob"


INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

NativeValue = Union[None, int, float, str, bytes]


@dataclass(frozen=True)
class CellValue:
    """A single cell, tagged with its storage class."""
    kind: CellKind
    value: NativeValue = None

    @classmethod
    def from_native(cls, raw: Any) -> 'CellValue':
        """
        Build a CellValue from what sqlite3 hands back for a cell.

        Args:
            raw: None, int, float, str, bytes or memoryview

        Raises:
            MarshalingError: If the value is not one of the storage classes
        """
        if raw is None:
            return cls(CellKind.NULL)
        # bool is an int subclass but sqlite3 never produces one for a cell
        if isinstance(raw, bool):
            raise MarshalingError(f"unexpected boolean cell value {raw!r}")
        if isinstance(raw, int):
            if raw < INT64_MIN or raw > INT64_MAX:
                raise MarshalingError(f"integer {raw} outside 64-bit range")
            return cls(CellKind.INTEGER, raw)
        if isinstance(raw, float):
            return cls(CellKind.REAL, raw)
        if isinstance(raw, str):
            return cls(CellKind.TEXT, raw)
        if isinstance(raw, (bytes, bytearray, memoryview)):
            return cls(CellKind.BLOB, bytes(raw))
        raise MarshalingError(f"unsupported cell type {type(raw).__name__}")

    @property
    def is_null(self) -> bool:
        return self.kind is CellKind.NULL

    def to_wire(self) -> Any:
        """Convert to the JSON-safe external form documented above."""
        if self.kind is CellKind.BLOB:
            return list(self.value)
        return self.value


Row = Dict[str, CellValue]
RecordSet = List[Row]


def row_to_wire(row: Row) -> Dict[str, Any]:
    """Convert a row, keeping column order."""
    return {column: cell.to_wire() for column, cell in row.items()}


def record_set_to_wire(records: RecordSet) -> List[Dict[str, Any]]:
    return [row_to_wire(row) for row in records]
