from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Sequence

from ..domain.values import ColumnMeta, DimensionRequirement, Target
from .validation.mapping import MappingConfig, ValidationResult, validate_mapping
from .validation.targets import compatible_targets, load_targets, suggest_mapping


class ValidateService:
    """Target catalog loading and mapping validation, with logging."""

    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def load_targets(self, path: Path) -> List[Target]:
        self.logger.info("Loading target catalog", extra={"path": str(path)})
        targets = load_targets(path)
        self.logger.info("Loaded target catalog", extra={"targets": len(targets)})
        return targets

    def compatible(self, targets: Sequence[Target], columns: Sequence[ColumnMeta]) -> List[Target]:
        found = compatible_targets(targets, columns)
        self.logger.info(f"Compatible targets: {[t.id for t in found]}")
        return found

    def suggest_mapping(
        self, dimensions: Sequence[DimensionRequirement], columns: Sequence[ColumnMeta]
    ) -> Dict[str, str]:
        suggestion = suggest_mapping(dimensions, columns)
        self.logger.info("Suggested mapping", extra={"mapping": suggestion})
        return suggestion

    def validate(
        self,
        dimensions: Sequence[DimensionRequirement],
        mapping: MappingConfig,
        columns: Sequence[ColumnMeta],
    ) -> ValidationResult:
        result = validate_mapping(dimensions, mapping, columns)
        for err in result.errors:
            self.logger.error(f"  [{err.dimension_id}] {err.message}")
        for warn in result.warnings:
            self.logger.warning(f"  [{warn.dimension_id}] {warn.message}")
        self.logger.info(
            "Validated mapping",
            extra={
                "valid": result.is_valid,
                "errors": len(result.errors),
                "warnings": len(result.warnings),
            },
        )
        return result
