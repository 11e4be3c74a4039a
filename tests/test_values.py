import pytest

from autofill_manager.errors import MarshalingError
from autofill_manager.values import CellKind, CellValue, record_set_to_wire, row_to_wire


@pytest.mark.parametrize("raw, kind", [
    (None, CellKind.NULL),
    (7, CellKind.INTEGER),
    (2 ** 63 - 1, CellKind.INTEGER),
    (1.25, CellKind.REAL),
    ("text", CellKind.TEXT),
    (b"\x00\xff", CellKind.BLOB),
])
def test_from_native_kinds(raw, kind):
    cell = CellValue.from_native(raw)
    assert cell.kind is kind
    assert cell.value == raw


def test_memoryview_becomes_bytes():
    cell = CellValue.from_native(memoryview(b"abc"))
    assert cell == CellValue(CellKind.BLOB, b"abc")


@pytest.mark.parametrize("raw", [True, 2 ** 63, object(), [1, 2]])
def test_from_native_rejects_other_values(raw):
    with pytest.raises(MarshalingError) as exc:
        CellValue.from_native(raw)
    assert str(exc.value).startswith("Serialization error: ")


def test_blob_wire_form_is_byte_list():
    assert CellValue(CellKind.BLOB, b"\x00\x10\xff").to_wire() == [0, 16, 255]
    assert CellValue(CellKind.BLOB, b"").to_wire() == []


def test_row_to_wire_keeps_column_order():
    row = {
        "z": CellValue(CellKind.INTEGER, 1),
        "a": CellValue(CellKind.NULL),
        "m": CellValue(CellKind.TEXT, "x"),
    }
    wire = row_to_wire(row)
    assert list(wire) == ["z", "a", "m"]
    assert wire == {"z": 1, "a": None, "m": "x"}
    assert record_set_to_wire([row, row]) == [wire, wire]

