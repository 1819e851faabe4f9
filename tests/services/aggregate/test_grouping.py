from __future__ import annotations

import pytest

from chartprep.domain.values import AggregatedGroup
from chartprep.services.aggregate.grouping import (
    extract_column,
    extract_numeric_column,
    group_and_aggregate,
)


ROWS = [
    {"Region": "North", "Sales": "100"},
    {"Region": "South", "Sales": "200"},
    {"Region": "North", "Sales": "150"},
    {"Region": "South", "Sales": "250"},
    {"Region": "East", "Sales": "300"},
]


def test_sum_keeps_first_seen_order() -> None:
    result = group_and_aggregate(ROWS, "Region", "Sales", "sum")
    assert result == [
        AggregatedGroup("North", 250),
        AggregatedGroup("South", 450),
        AggregatedGroup("East", 300),
    ]


def test_sum_is_the_default() -> None:
    assert group_and_aggregate(ROWS, "Region", "Sales")[0].value == 250


def test_mean() -> None:
    result = group_and_aggregate(ROWS, "Region", "Sales", "mean")
    assert result[0] == AggregatedGroup("North", 125)


@pytest.mark.parametrize(
    "method, north",
    [("median", 125), ("count", 2), ("min", 100), ("max", 150)],
)
def test_other_methods(method: str, north: float) -> None:
    result = group_and_aggregate(ROWS, "Region", "Sales", method)
    assert result[0].category == "North"
    assert result[0].value == north


def test_unparseable_values_are_dropped_not_zeroed() -> None:
    rows = [
        {"k": "a", "v": "10"},
        {"k": "a", "v": "n/a"},
        {"k": "a", "v": ""},
        {"k": "a", "v": "1.000,5"},
        {"k": "b", "v": "oops"},
    ]
    count = group_and_aggregate(rows, "k", "v", "count")
    # "b" has no contributing value, so it never becomes a group
    assert count == [AggregatedGroup("a", 2)]
    mean = group_and_aggregate(rows, "k", "v", "mean")
    assert mean[0].value == pytest.approx((10 + 1000.5) / 2)


def test_missing_category_becomes_empty_string() -> None:
    rows = [{"v": "1"}, {"k": None, "v": "2"}, {"k": "x", "v": "3"}]
    result = group_and_aggregate(rows, "k", "v", "sum")
    assert result == [AggregatedGroup("", 3), AggregatedGroup("x", 3)]


def test_numeric_cells_are_used_directly() -> None:
    rows = [{"k": "a", "v": 1.5}, {"k": "a", "v": 2}, {"k": "a", "v": True}]
    assert group_and_aggregate(rows, "k", "v", "sum") == [AggregatedGroup("a", 3.5)]


def test_median_of_even_count_averages_middle_pair() -> None:
    rows = [{"k": "a", "v": v} for v in ["4", "1", "3", "2"]]
    assert group_and_aggregate(rows, "k", "v", "median")[0].value == 2.5


def test_no_rows_no_groups() -> None:
    assert group_and_aggregate([], "k", "v") == []


def test_unknown_method_is_rejected() -> None:
    with pytest.raises(ValueError):
        group_and_aggregate(ROWS, "Region", "Sales", "mode")


def test_extract_columns() -> None:
    rows = [{"c": "A", "v": "1,5"}, {"c": "", "v": "x"}, {"c": "B", "v": 3}]
    mapping = {"x": "c", "y": "v", "multi": ["c", "v"]}
    assert extract_column(rows, mapping, "x") == ["A", None, "B"]
    assert extract_numeric_column(rows, mapping, "y") == [1.5, None, 3.0]
    assert extract_column(rows, mapping, "multi") == []
    assert extract_numeric_column(rows, mapping, "missing") == []
