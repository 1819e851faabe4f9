"""Column type detection.

Each column is classified from a sample of the first rows using an ordered
list of rules (boolean, date, number). The first rule whose match ratio
reaches the threshold decides the type; a column nothing claims is a string.
Statistics are then computed over the full dataset, not the sample.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Final, Mapping, Optional, Sequence

import pandas as pd

from ...domain.values import Cell, ColumnMeta, DataType
from ..aggregate.stats import is_null, summarize
from .numbers import is_number


SAMPLE_SIZE: Final = 100
MATCH_THRESHOLD: Final = 0.8
PREVIEW_SIZE: Final = 5

TRUE_LITERALS: Final[frozenset[str]] = frozenset({"true", "yes", "1", "ja", "oui"})
FALSE_LITERALS: Final[frozenset[str]] = frozenset({"false", "no", "0", "nein", "non"})
BOOLEAN_LITERALS: Final[frozenset[str]] = TRUE_LITERALS | FALSE_LITERALS


@dataclass(frozen=True)
class DateShape:
    name: str
    pattern: re.Pattern[str]
    fmt: str


DATE_SHAPES: Final[tuple[DateShape, ...]] = (
    DateShape("iso", re.compile(r"^\d{4}-\d{2}-\d{2}$"), "%Y-%m-%d"),
    DateShape("us_slash", re.compile(r"^\d{2}/\d{2}/\d{4}$"), "%m/%d/%Y"),
    DateShape("eu_dot", re.compile(r"^\d{2}\.\d{2}\.\d{4}$"), "%d.%m.%Y"),
    DateShape("dash_alt", re.compile(r"^\d{2}-\d{2}-\d{4}$"), "%d-%m-%Y"),
    DateShape("year_first_slash", re.compile(r"^\d{4}/\d{2}/\d{2}$"), "%Y/%m/%d"),
)


def is_boolean_literal(value: str) -> bool:
    return value.strip().lower() in BOOLEAN_LITERALS


def is_date_shaped(value: str) -> bool:
    v = value.strip()
    return any(shape.pattern.match(v) for shape in DATE_SHAPES)


def parse_date(value: str) -> Optional[date]:
    """Parse a date-shaped string into a calendar date, or None.

    Shape matching alone does not guarantee a real date ("13/45/2024").
    """
    v = value.strip()
    for shape in DATE_SHAPES:
        if shape.pattern.match(v):
            try:
                return datetime.strptime(v, shape.fmt).date()
            except ValueError:
                return None
    return None


@dataclass(frozen=True)
class ClassifierRule:
    data_type: DataType
    matches: Callable[[str], bool]


CLASSIFIER_RULES: Final[tuple[ClassifierRule, ...]] = (
    ClassifierRule(DataType.BOOLEAN, is_boolean_literal),
    ClassifierRule(DataType.DATE, is_date_shaped),
    ClassifierRule(DataType.NUMBER, is_number),
)


def match_ratio(rule: ClassifierRule, values: Sequence[str]) -> float:
    if not values:
        return 0.0
    hits = sum(1 for v in values if rule.matches(v))
    return hits / len(values)


def classify_values(
    values: Sequence[Cell],
    rules: Sequence[ClassifierRule] = CLASSIFIER_RULES,
    threshold: float = MATCH_THRESHOLD,
) -> DataType:
    """Majority vote: the first rule matching at least ``threshold`` of values wins."""
    texts = [str(v).strip() for v in values if not is_null(v)]
    if not texts:
        return DataType.STRING
    for rule in rules:
        if match_ratio(rule, texts) >= threshold:
            return rule.data_type
    return DataType.STRING


def _column_meta(name: str, rows: Sequence[Mapping[str, Cell]], sample_size: int) -> ColumnMeta:
    sampled = [row.get(name) for row in rows[:sample_size]]
    sampled = [v for v in sampled if not is_null(v)]
    detected = classify_values(sampled)

    all_values = pd.Series([row.get(name) for row in rows], dtype=object)
    null_mask = all_values.map(is_null).astype(bool)
    present = all_values[~null_mask]

    meta = ColumnMeta(
        name=name,
        detected_type=detected,
        confirmed_type=detected,
        unique_values=int(present.nunique()),
        null_count=int(null_mask.sum()),
        sample_values=tuple(sampled[:PREVIEW_SIZE]),
    )

    if detected is DataType.NUMBER:
        summary = summarize(present.tolist())
        if summary is not None:
            meta = replace(meta, min=summary.min, max=summary.max, mean=summary.mean)
    elif detected is DataType.DATE:
        dates = [d for d in (parse_date(str(v)) for v in present.tolist()) if d is not None]
        if dates:
            meta = replace(meta, min_date=min(dates), max_date=max(dates))
    return meta


def detect_column_types(
    rows: Sequence[Mapping[str, Cell]],
    headers: Sequence[str],
    sample_size: int = SAMPLE_SIZE,
) -> list[ColumnMeta]:
    """Classify every column and compute its full-dataset statistics."""
    return [_column_meta(name, rows, sample_size) for name in headers]
