from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import pandas as pd

from ...domain.values import AggregationType, Cell
from ..parsing.numbers import parse_number


@dataclass(frozen=True)
class NumericSummary:
    min: float
    max: float
    mean: float
    count: int


def is_null(value: Cell) -> bool:
    """None and the empty string are nulls; whitespace-only text is not."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    return isinstance(value, float) and math.isnan(value)


def to_number(value: Cell) -> Optional[float]:
    """Numbers pass through, everything else goes through parse_number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    return parse_number(str(value))


def numeric_series(values: Iterable[Cell]) -> pd.Series:
    """Values that resolve to a number; failures are dropped, never zeroed."""
    parsed = [n for n in (to_number(v) for v in values) if n is not None]
    return pd.Series(parsed, dtype="float64")


def summarize(values: Iterable[Cell]) -> Optional[NumericSummary]:
    s = numeric_series(values)
    if s.empty:
        return None
    return NumericSummary(
        min=float(s.min()),
        max=float(s.max()),
        mean=float(s.mean()),
        count=int(s.count()),
    )


def aggregate(values: Sequence[float], method: AggregationType | str) -> float:
    """Reduce values with one of sum/mean/median/count/min/max.

    An empty input aggregates to 0. Unknown methods raise ValueError.
    """
    how = AggregationType(method)
    if len(values) == 0:
        return 0.0
    s = pd.Series(list(values), dtype="float64")
    # sum, mean, median, count, min and max are all Series reductions
    return float(getattr(s, how.value)())
