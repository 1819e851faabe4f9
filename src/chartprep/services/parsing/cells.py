from __future__ import annotations

from datetime import date
from typing import Mapping

from ...domain.values import Cell, CellKind, ColumnMeta, DataType, TypedCell
from ..aggregate.stats import is_null, to_number
from .detector import FALSE_LITERALS, TRUE_LITERALS, parse_date


def _as_boolean(raw: Cell) -> bool | None:
    if isinstance(raw, bool):
        return raw
    key = str(raw).strip().lower()
    if key in TRUE_LITERALS:
        return True
    if key in FALSE_LITERALS:
        return False
    return None


def read_cell(row: Mapping[str, Cell], column: ColumnMeta) -> TypedCell:
    """Interpret a raw cell through the column's confirmed type.

    Values that do not fit the confirmed type come back as STRING cells with
    the raw text, so callers can still show them.
    """
    raw = row.get(column.name)
    if is_null(raw):
        return TypedCell(CellKind.ABSENT)

    kind = column.confirmed_type
    if kind is DataType.NUMBER:
        n = to_number(raw)
        if n is not None:
            return TypedCell(CellKind.NUMBER, n)
    elif kind is DataType.BOOLEAN:
        b = _as_boolean(raw)
        if b is not None:
            return TypedCell(CellKind.BOOLEAN, b)
    elif kind is DataType.DATE:
        if isinstance(raw, date):
            return TypedCell(CellKind.DATE, raw)
        d = parse_date(str(raw))
        if d is not None:
            return TypedCell(CellKind.DATE, d)
    return TypedCell(CellKind.STRING, str(raw))


def read_column(rows: list[dict[str, Cell]], column: ColumnMeta) -> list[TypedCell]:
    return [read_cell(row, column) for row in rows]
