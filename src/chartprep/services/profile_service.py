from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from ..domain.values import Cell, ColumnMeta, DataType, TypedCell
from .parsing.cells import read_column
from .parsing.delimited import ParseResult, parse_text
from .parsing.detector import detect_column_types


@dataclass(frozen=True)
class Dataset:
    """Immutable snapshot of one parse: raw rows plus their column schema."""

    rows: list[dict[str, Cell]]
    headers: list[str]
    columns: list[ColumnMeta]
    row_count: int
    errors: list[str] = field(default_factory=list)
    delimiter: str = ","

    @property
    def ok(self) -> bool:
        return self.row_count > 0

    def column(self, name: str) -> Optional[ColumnMeta]:
        for c in self.columns:
            if c.name == name:
                return c
        return None

    def with_confirmed_type(self, name: str, data_type: DataType | str) -> "Dataset":
        """Return a new snapshot with one column's confirmed type overridden."""
        if self.column(name) is None:
            raise KeyError(name)
        cols = [c.with_confirmed_type(data_type) if c.name == name else c for c in self.columns]
        return replace(self, columns=cols)

    def typed_column(self, name: str) -> list[TypedCell]:
        col = self.column(name)
        if col is None:
            raise KeyError(name)
        return read_column(self.rows, col)


def profile_parsed(parsed: ParseResult) -> Dataset:
    columns = detect_column_types(parsed.rows, parsed.headers) if parsed.ok else []
    return Dataset(
        rows=parsed.rows,
        headers=parsed.headers,
        columns=columns,
        row_count=parsed.row_count,
        errors=parsed.errors,
        delimiter=parsed.delimiter,
    )


def profile_text(text: str) -> Dataset:
    """Parse raw delimited text and detect its column types in one call."""
    return profile_parsed(parse_text(text))


class ProfileService:
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def profile(self, parsed: ParseResult, max_errors: int = 50) -> Dataset:
        for err in parsed.errors[:max_errors]:
            self.logger.warning(f"  {err}")
        if len(parsed.errors) > max_errors:
            self.logger.warning(f"  ... {len(parsed.errors) - max_errors} more parse errors")

        dataset = profile_parsed(parsed)
        for col in dataset.columns:
            if col.detected_type is DataType.NUMBER and col.min is not None:
                self.logger.info(
                    f"  {col.name}: number (min={col.min:g}, max={col.max:g}, mean={col.mean:g}, "
                    f"nulls={col.null_count})"
                )
            else:
                self.logger.info(
                    f"  {col.name}: {col.detected_type.value} "
                    f"(unique={col.unique_values}, nulls={col.null_count})"
                )
        self.logger.info(
            "Profiled dataset",
            extra={"rows": dataset.row_count, "columns": len(dataset.columns)},
        )
        return dataset
