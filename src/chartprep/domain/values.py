from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Mapping, Optional, Union


class DataType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"


class AggregationType(str, Enum):
    SUM = "sum"
    MEAN = "mean"
    MEDIAN = "median"
    COUNT = "count"
    MIN = "min"
    MAX = "max"


Cell = Union[str, float, int, bool, date, None]
Row = Mapping[str, Cell]


@dataclass(frozen=True)
class ColumnMeta:
    """Metadata for one column, computed when the dataset is profiled.

    ``min``/``max``/``mean`` are only set for number columns with at least one
    parseable value; ``min_date``/``max_date`` likewise for date columns.
    """

    name: str
    detected_type: DataType
    confirmed_type: DataType
    unique_values: int
    null_count: int
    sample_values: tuple[Cell, ...] = ()
    min: Optional[float] = None
    max: Optional[float] = None
    mean: Optional[float] = None
    min_date: Optional[date] = None
    max_date: Optional[date] = None

    def with_confirmed_type(self, data_type: DataType | str) -> "ColumnMeta":
        """Return a copy with the user's type override applied."""
        return replace(self, confirmed_type=DataType(data_type))


@dataclass(frozen=True)
class DimensionRequirement:
    id: str
    required: bool
    accepted_types: tuple[DataType, ...]
    multiple: bool = False
    name: str = ""
    default_aggregation: Optional[AggregationType] = None
    # Regexes matched against column names when suggesting a mapping
    name_patterns: tuple[str, ...] = ()

    @property
    def label(self) -> str:
        return self.name or self.id


@dataclass(frozen=True)
class Target:
    id: str
    name: str
    dimensions: tuple[DimensionRequirement, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class AggregatedGroup:
    category: str
    value: float


class CellKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    ABSENT = "absent"


@dataclass(frozen=True)
class TypedCell:
    kind: CellKind
    value: Cell = None

    @property
    def is_absent(self) -> bool:
        return self.kind is CellKind.ABSENT
