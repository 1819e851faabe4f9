from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ...config import Config
from ...domain.values import AggregatedGroup, Cell, ColumnMeta
from ..parsing.delimited import ParseResult
from ..validation.mapping import ValidationResult
from .utils import sha256_file
from ...types import ColumnReport, GroupReport, InputEntry, ProfileReport


def _preview(value: Cell) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def column_report(col: ColumnMeta) -> ColumnReport:
    return {
        "name": col.name,
        "detected_type": col.detected_type.value,
        "confirmed_type": col.confirmed_type.value,
        "unique_values": col.unique_values,
        "null_count": col.null_count,
        "sample_values": [_preview(v) for v in col.sample_values],
        "min": col.min,
        "max": col.max,
        "mean": col.mean,
        "min_date": col.min_date.isoformat() if col.min_date else None,
        "max_date": col.max_date.isoformat() if col.max_date else None,
    }


def build_profile_report(
    *,
    input_path: Path,
    parsed: ParseResult,
    columns: Sequence[ColumnMeta],
    started_at: str,
    finished_at: str,
    cfg: Config,
    target: Optional[Mapping[str, object]] = None,
    mapping: Optional[Mapping[str, object]] = None,
    validation: Optional[ValidationResult] = None,
    aggregation: Optional[Mapping[str, object]] = None,
    groups: Optional[Sequence[AggregatedGroup]] = None,
) -> ProfileReport:
    entry: InputEntry = {
        "path": str(input_path),
        "sha256": sha256_file(input_path),
        "rows": parsed.row_count,
        "delimiter": parsed.delimiter,
    }
    report: ProfileReport = {
        "pipeline_version": cfg.pipeline_version,
        "started_at": started_at,
        "finished_at": finished_at,
        "input": entry,
        "parse_errors": list(parsed.errors[: cfg.max_errors]),
        "columns": [column_report(c) for c in columns],
    }
    if target is not None:
        report["target"] = dict(target)
    if mapping is not None:
        report["mapping"] = dict(mapping)
    if validation is not None:
        report["validation"] = validation.to_dict()
    if aggregation is not None:
        report["aggregation"] = dict(aggregation)
    if groups is not None:
        report["groups"] = [
            GroupReport(category=g.category, value=g.value) for g in groups
        ]
    return report


def write_profile(report: ProfileReport, run_dir: Path, logger: logging.Logger) -> Path:
    import yaml

    out_path = run_dir / "profile.yaml"
    logger.info("Writing profile.yaml", extra={"path": str(out_path)})
    with out_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(dict(report), f, sort_keys=False, allow_unicode=True)
    return out_path
