from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

import pandas as pd

from ...domain.values import AggregatedGroup, AggregationType, Cell, Row
from .stats import aggregate, is_null, to_number


def _category_label(value: Cell) -> str:
    return "" if value is None else str(value)


def _single_column(mapping: Mapping[str, str | Sequence[str]], dimension_id: str) -> Optional[str]:
    mapped = mapping.get(dimension_id)
    if not mapped or not isinstance(mapped, str):
        return None
    return mapped


def extract_column(
    rows: Sequence[Row],
    mapping: Mapping[str, str | Sequence[str]],
    dimension_id: str,
) -> List[str | float | None]:
    """Raw values of the single column mapped to a dimension.

    Blank cells become None; numbers are kept as numbers, anything else as text.
    Returns [] when the dimension is unmapped or mapped to several columns.
    """
    column = _single_column(mapping, dimension_id)
    if column is None:
        return []
    out: List[str | float | None] = []
    for row in rows:
        raw = row.get(column)
        if is_null(raw):
            out.append(None)
        elif isinstance(raw, (int, float)) and not isinstance(raw, bool):
            out.append(float(raw))
        else:
            out.append(str(raw))
    return out


def extract_numeric_column(
    rows: Sequence[Row],
    mapping: Mapping[str, str | Sequence[str]],
    dimension_id: str,
) -> List[float | None]:
    column = _single_column(mapping, dimension_id)
    if column is None:
        return []
    return [to_number(row.get(column)) for row in rows]


def group_and_aggregate(
    rows: Sequence[Row],
    category_column: str,
    value_column: str,
    aggregation: AggregationType | str = AggregationType.SUM,
) -> List[AggregatedGroup]:
    """Group rows by a category column and aggregate a numeric column.

    - categories keep first-seen order; a missing category is ""
    - rows whose value does not resolve to a number are dropped entirely
      (they neither count nor contribute zero)
    """
    how = AggregationType(aggregation)
    records: list[tuple[str, float]] = []
    for row in rows:
        value = to_number(row.get(value_column))
        if value is None:
            continue
        records.append((_category_label(row.get(category_column)), value))

    if not records:
        return []

    frame = pd.DataFrame.from_records(records, columns=["category", "value"])
    groups: List[AggregatedGroup] = []
    for category, sub in frame.groupby("category", sort=False):
        groups.append(
            AggregatedGroup(
                category=str(category),
                value=aggregate(sub["value"].tolist(), how),
            )
        )
    return groups
