from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, cast

import yaml

from ...domain.values import AggregationType, ColumnMeta, DataType, DimensionRequirement, Target
from ...types import DimensionSpec, TargetCatalog, TargetSpec


def _parse_types(raw: object, where: str) -> tuple[DataType, ...]:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list) or not raw:
        raise ValueError(f"{where}: accepted_types must be a non-empty list")
    try:
        return tuple(DataType(str(t).strip().lower()) for t in raw)
    except ValueError as e:
        raise ValueError(f"{where}: {e}") from e


def _parse_dimension(entry: DimensionSpec, target_id: str) -> DimensionRequirement:
    dim_id = str(entry.get("id", "")).strip()
    if not dim_id:
        raise ValueError(f"target '{target_id}': dimension without id")
    where = f"target '{target_id}', dimension '{dim_id}'"
    agg = entry.get("default_aggregation")
    return DimensionRequirement(
        id=dim_id,
        name=str(entry.get("name", "")),
        required=bool(entry.get("required", False)),
        accepted_types=_parse_types(entry.get("accepted_types"), where),
        multiple=bool(entry.get("multiple", False)),
        default_aggregation=AggregationType(agg) if agg else None,
        name_patterns=tuple(str(p) for p in entry.get("name_patterns", []) or []),
    )


def parse_targets(raw: object) -> List[Target]:
    if not isinstance(raw, dict):
        raise ValueError("target catalog must be a mapping with a 'targets' list")
    catalog = cast(TargetCatalog, raw)
    targets: List[Target] = []
    for entry in catalog.get("targets", []) or []:
        entry = cast(TargetSpec, entry)
        target_id = str(entry.get("id", "")).strip()
        if not target_id:
            raise ValueError("target without id")
        dims = tuple(_parse_dimension(d, target_id) for d in entry.get("dimensions", []) or [])
        targets.append(Target(id=target_id, name=str(entry.get("name", target_id)), dimensions=dims))
    return targets


def load_targets(path: Path) -> List[Target]:
    """Load dimension requirements per target from a YAML catalog."""
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    return parse_targets(raw)


def find_target(targets: Sequence[Target], target_id: str) -> Optional[Target]:
    for t in targets:
        if t.id == target_id:
            return t
    return None


def compatible_targets(targets: Sequence[Target], columns: Sequence[ColumnMeta]) -> List[Target]:
    """Targets whose every required dimension accepts at least one present column type."""
    present = {c.confirmed_type for c in columns}
    return [
        t
        for t in targets
        if all(
            any(tp in present for tp in dim.accepted_types)
            for dim in t.dimensions
            if dim.required
        )
    ]


def suggest_mapping(
    dimensions: Sequence[DimensionRequirement],
    columns: Sequence[ColumnMeta],
) -> Dict[str, str]:
    """Pre-fill a mapping from column names.

    Each dimension takes the first unused column whose name matches one of its
    patterns (case-insensitive) and whose confirmed type it accepts.
    """
    used: set[str] = set()
    suggestion: Dict[str, str] = {}
    for dim in dimensions:
        patterns = [re.compile(p, re.IGNORECASE) for p in dim.name_patterns]
        for col in columns:
            if col.name in used or col.confirmed_type not in dim.accepted_types:
                continue
            if any(p.search(col.name) for p in patterns):
                suggestion[dim.id] = col.name
                used.add(col.name)
                break
    return suggestion


def describe(target: Target) -> Mapping[str, object]:
    return {
        "id": target.id,
        "name": target.name,
        "dimensions": [
            {
                "id": d.id,
                "required": d.required,
                "accepted_types": [t.value for t in d.accepted_types],
                "multiple": d.multiple,
            }
            for d in target.dimensions
        ],
    }
