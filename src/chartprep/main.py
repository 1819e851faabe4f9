from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Mapping, Sequence

from .app.container import build_container
from .app.orchestrator import EXIT_ERROR, Orchestrator, RunRequest
from .config import Config, load_config
from .domain.values import AggregationType
from .types import ConfigOverrides


logger = logging.getLogger(__name__)


def _make_orchestrator(cfg: Config) -> Orchestrator:
    container = build_container("chartprep", cfg)
    return Orchestrator(container=container, cfg=cfg, logger=logging.getLogger("chartprep.main"))


def run_pipeline(
    input_path: Path,
    out_dir: Path,
    cfg: Config | None = None,
    *,
    target_id: str | None = None,
    targets_path: Path | None = None,
    mapping: Mapping[str, str | Sequence[str]] | None = None,
    category: str | None = None,
    value: str | None = None,
    aggregation: str | None = None,
) -> int:
    req = RunRequest(
        input_path=input_path,
        target_id=target_id,
        targets_path=targets_path,
        mapping=mapping,
        category=category,
        value=value,
        aggregation=aggregation,
    )
    return _make_orchestrator(cfg or Config()).run(req, out_dir)


def parse_map_args(items: Sequence[str]) -> dict[str, str | list[str]]:
    """Turn ["x=Region", "y=Q1,Q2"] into {"x": "Region", "y": ["Q1", "Q2"]}."""
    mapping: dict[str, str | list[str]] = {}
    for item in items:
        dim, sep, cols = item.partition("=")
        if not sep or not dim.strip():
            raise ValueError(f"expected DIM=COLUMN[,COLUMN...], got '{item}'")
        names = [c.strip() for c in cols.split(",") if c.strip()]
        mapping[dim.strip()] = names[0] if len(names) == 1 else names
    return mapping


def main() -> int:
    ap = argparse.ArgumentParser(description="chartprep: profile a table and aggregate it for a chart")
    ap.add_argument("--input", required=True, type=Path, help="CSV/TSV/TXT or XLSX/XLS file")
    ap.add_argument(
        "--out", required=False, type=Path, default=Path("runs"), help="Output base dir"
    )
    ap.add_argument("--config", required=False, type=Path, help="Optional YAML config file")
    ap.add_argument("--targets", required=False, type=Path, help="Target catalog YAML")
    ap.add_argument("--target", required=False, help="Target id to validate the mapping against")
    ap.add_argument(
        "--map",
        action="append",
        default=[],
        metavar="DIM=COL[,COL]",
        help="Map a target dimension to column(s); repeatable. Suggested from names if omitted",
    )
    ap.add_argument("--category", required=False, help="Column to group by")
    ap.add_argument("--value", required=False, help="Column to aggregate")
    ap.add_argument(
        "--agg",
        required=False,
        choices=[a.value for a in AggregationType],
        default=None,
        help="Aggregation method (default from target or config)",
    )
    ap.add_argument(
        "--max-errors", required=False, type=int, default=None, help="Max errors to show in reports"
    )
    args = ap.parse_args()

    try:
        mapping = parse_map_args(args.map)
    except ValueError as exc:
        ap.error(str(exc))

    overrides: ConfigOverrides = {}
    if args.max_errors is not None:
        overrides["max_errors"] = int(args.max_errors)
    cfg = load_config(args.config, overrides=overrides)

    try:
        return run_pipeline(
            args.input,
            args.out,
            cfg,
            target_id=args.target,
            targets_path=args.targets,
            mapping=mapping or None,
            category=args.category,
            value=args.value,
            aggregation=args.agg,
        )
    except Exception as exc:  # pragma: no cover
        logging.basicConfig(level=logging.ERROR)
        logging.exception("Unhandled exception: %s", exc)
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
