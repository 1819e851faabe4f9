from __future__ import annotations

from typing import Optional, TypedDict


class DimensionSpec(TypedDict, total=False):
    id: str
    name: str
    required: bool
    accepted_types: list[str]
    multiple: bool
    default_aggregation: str
    name_patterns: list[str]


class TargetSpec(TypedDict, total=False):
    id: str
    name: str
    dimensions: list[DimensionSpec]


class TargetCatalog(TypedDict, total=False):
    version: str
    targets: list[TargetSpec]


class ConfigOverrides(TypedDict, total=False):
    pipeline_version: str
    default_aggregation: str
    max_errors: int
    targets_path: str
    log_level: str


class YamlConfig(TypedDict, total=False):
    pipeline_version: str
    default_aggregation: str
    max_errors: int
    targets_path: str
    log_level: str


class ColumnReport(TypedDict):
    name: str
    detected_type: str
    confirmed_type: str
    unique_values: int
    null_count: int
    sample_values: list[str]
    min: Optional[float]
    max: Optional[float]
    mean: Optional[float]
    min_date: Optional[str]
    max_date: Optional[str]


class InputEntry(TypedDict):
    path: str
    sha256: str
    rows: int
    delimiter: str


class GroupReport(TypedDict):
    category: str
    value: float


class ProfileReport(TypedDict, total=False):
    pipeline_version: str
    started_at: str
    finished_at: str
    input: InputEntry
    parse_errors: list[str]
    columns: list[ColumnReport]
    target: dict[str, object]
    mapping: dict[str, object]
    validation: dict[str, object]
    aggregation: dict[str, object]
    groups: list[GroupReport]
