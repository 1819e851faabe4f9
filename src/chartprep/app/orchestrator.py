from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from ..config import Config
from ..domain.values import AggregatedGroup, DataType, DimensionRequirement, Target
from ..services.output.profile_writer import build_profile_report, write_profile
from ..services.parsing.delimited import ParseResult
from ..services.profile_service import Dataset
from ..services.validation.mapping import ValidationResult, mapped_columns
from ..services.validation.targets import describe, find_target
from .container import Container
from .run_manager import RunContext, start_run, utc_stamp


EXIT_OK = 0
EXIT_PARSE_FAILED = 1
EXIT_INVALID_MAPPING = 2
EXIT_ERROR = 3


@dataclass(frozen=True)
class RunRequest:
    input_path: Path
    target_id: Optional[str] = None
    targets_path: Optional[Path] = None
    mapping: Optional[Mapping[str, str | Sequence[str]]] = None
    category: Optional[str] = None
    value: Optional[str] = None
    aggregation: Optional[str] = None


def _value_dimension(target: Target) -> Optional[DimensionRequirement]:
    for dim in target.dimensions:
        if dim.default_aggregation is not None or dim.accepted_types == (DataType.NUMBER,):
            return dim
    return None


def _category_dimension(
    target: Target, value_dim: Optional[DimensionRequirement]
) -> Optional[DimensionRequirement]:
    for dim in target.dimensions:
        if dim is not value_dim and dim.required:
            return dim
    return None


def _first_column(mapping: Mapping[str, object], dim: Optional[DimensionRequirement]) -> Optional[str]:
    if dim is None:
        return None
    names = mapped_columns(mapping.get(dim.id))  # type: ignore[arg-type]
    return names[0] if names else None


def _plain_mapping(mapping: Mapping[str, str | Sequence[str]]) -> dict[str, object]:
    return {k: v if isinstance(v, str) else list(v) for k, v in mapping.items()}


@dataclass(frozen=True)
class Orchestrator:
    container: Container
    cfg: Config
    logger: logging.Logger

    def run(self, req: RunRequest, out_dir: Path) -> int:
        """Parse -> profile -> (validate mapping) -> aggregate -> write profile.yaml/groups.xlsx."""
        run_ctx = start_run(out_dir, level=self.cfg.log_level)

        try:
            parsed = self.container.io.read_table(req.input_path)
            if not parsed.ok:
                self.logger.error(f"No rows parsed from {req.input_path.name}")
                for err in parsed.errors[: self.cfg.max_errors]:
                    self.logger.error(f"  {err}")
                return EXIT_PARSE_FAILED

            dataset = self.container.profile.profile(parsed, self.cfg.max_errors)
            self.logger.info(f"Loaded {dataset.row_count} rows, {len(dataset.columns)} columns")

            category, value, how = req.category, req.value, req.aggregation
            target_desc: Optional[Mapping[str, object]] = None
            mapping: Optional[dict[str, object]] = None
            validation: Optional[ValidationResult] = None

            if req.target_id:
                val = self.container.validate
                targets_path = req.targets_path or Path(self.cfg.targets_path)
                targets = val.load_targets(targets_path)
                target = find_target(targets, req.target_id)
                if target is None:
                    self.logger.error(
                        f"Unknown target '{req.target_id}'",
                        extra={"available": [t.id for t in targets]},
                    )
                    return EXIT_INVALID_MAPPING
                target_desc = describe(target)
                if target not in val.compatible(targets, dataset.columns):
                    self.logger.warning(
                        f"Target '{target.id}' has required dimensions no column type can fill"
                    )

                raw_mapping = req.mapping or val.suggest_mapping(target.dimensions, dataset.columns)
                mapping = _plain_mapping(raw_mapping)
                validation = val.validate(target.dimensions, raw_mapping, dataset.columns)
                if not validation.is_valid:
                    self.logger.error(f"Mapping is not valid for target '{target.id}'")
                    self._write_report(
                        run_ctx, req, parsed, dataset,
                        target=target_desc, mapping=mapping, validation=validation,
                    )
                    return EXIT_INVALID_MAPPING

                value_dim = _value_dimension(target)
                category = category or _first_column(mapping, _category_dimension(target, value_dim))
                value = value or _first_column(mapping, value_dim)
                if how is None and value_dim is not None and value_dim.default_aggregation:
                    how = value_dim.default_aggregation.value

            how = how or self.cfg.default_aggregation
            groups: Optional[list[AggregatedGroup]] = None
            aggregation: Optional[dict[str, object]] = None

            if category and value:
                missing = [c for c in (category, value) if c not in dataset.headers]
                if missing:
                    self.logger.error(f"Columns not found in data: {missing}")
                    return EXIT_INVALID_MAPPING
                groups = self.container.aggregate.group(dataset.rows, category, value, how)
                aggregation = {"category": category, "value": value, "method": how}
                self.container.io.write_groups(groups, run_ctx.artifact("groups.xlsx"), value)
            else:
                self.logger.info("No category/value columns selected; skipping aggregation")

            self._write_report(
                run_ctx, req, parsed, dataset,
                target=target_desc, mapping=mapping, validation=validation,
                aggregation=aggregation, groups=groups,
            )
            self.logger.info("Run completed successfully")
            return EXIT_OK

        except Exception as e:
            self.logger.error(f"Run failed: {e}", exc_info=True)
            return EXIT_ERROR

    def _write_report(
        self,
        run_ctx: RunContext,
        req: RunRequest,
        parsed: ParseResult,
        dataset: Dataset,
        **sections: object,
    ) -> None:
        report = build_profile_report(
            input_path=req.input_path,
            parsed=parsed,
            columns=dataset.columns,
            started_at=run_ctx.started_at,
            finished_at=utc_stamp(),
            cfg=self.cfg,
            **sections,  # type: ignore[arg-type]
        )
        write_profile(report, run_ctx.run_dir, self.logger)
