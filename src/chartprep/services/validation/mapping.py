from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence, Union

from ...domain.errors import ErrorCategory, ValidationIssue
from ...domain.values import ColumnMeta, DataType, DimensionRequirement


MappingConfig = Mapping[str, Union[str, Sequence[str], None]]


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    def errors_for(self, dimension_id: str) -> List[ValidationIssue]:
        return [e for e in self.errors if e.dimension_id == dimension_id]

    def to_dict(self) -> dict[str, Any]:
        def _issue(i: ValidationIssue) -> dict[str, Any]:
            return {"dimension": i.dimension_id, "code": i.code, "message": i.message}

        return {
            "is_valid": self.is_valid,
            "errors": [_issue(e) for e in self.errors],
            "warnings": [_issue(w) for w in self.warnings],
        }


def mapped_columns(mapped: str | Sequence[str] | None) -> list[str]:
    """Normalize a mapping entry to a list of column names ("" / None -> [])."""
    if mapped is None:
        return []
    if isinstance(mapped, str):
        return [mapped] if mapped else []
    return [str(c) for c in mapped]


def is_type_compatible(column_type: DataType, accepted_types: Sequence[DataType]) -> bool:
    return column_type in accepted_types


def _error(dim: DimensionRequirement, code: str, message: str, **details: object) -> ValidationIssue:
    return ValidationIssue(
        category=ErrorCategory.VALIDATION_ERROR,
        code=code,
        message=message,
        dimension_id=dim.id,
        details=details or None,
    )


def validate_mapping(
    dimensions: Sequence[DimensionRequirement],
    mapping: MappingConfig,
    columns: Sequence[ColumnMeta],
) -> ValidationResult:
    """Check a column mapping against a target's dimension requirements.

    Missing required dimensions, unknown columns and too many columns are
    errors. A column whose confirmed type is not accepted is only a warning.
    """
    by_name = {c.name: c for c in columns}
    errors: List[ValidationIssue] = []
    warnings: List[ValidationIssue] = []

    for dim in dimensions:
        names = mapped_columns(mapping.get(dim.id))

        if not names:
            if dim.required:
                errors.append(_error(dim, "MAPPING_REQUIRED", f'"{dim.label}" is required.'))
            continue

        for col_name in names:
            col = by_name.get(col_name)
            if col is None:
                errors.append(
                    _error(
                        dim,
                        "COLUMN_NOT_FOUND",
                        f'Column "{col_name}" not found in data.',
                        column=col_name,
                    )
                )
                continue
            if not is_type_compatible(col.confirmed_type, dim.accepted_types):
                expected = " or ".join(t.value for t in dim.accepted_types)
                warnings.append(
                    ValidationIssue(
                        category=ErrorCategory.VALIDATION_WARNING,
                        code="TYPE_MISMATCH",
                        message=(
                            f'"{col_name}" is {col.confirmed_type.value}, '
                            f'but "{dim.label}" expects {expected}.'
                        ),
                        dimension_id=dim.id,
                        details={"column": col_name, "type": col.confirmed_type.value},
                    )
                )

        if not dim.multiple and len(names) > 1:
            errors.append(
                _error(
                    dim,
                    "MULTIPLE_NOT_ALLOWED",
                    f'"{dim.label}" accepts only one column.',
                    columns=list(names),
                )
            )

    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
