from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional


EMPTY_INPUT_MESSAGE = "Empty input"


class ErrorCategory(str, Enum):
    PARSE_ERROR = "PARSE_ERROR"
    EMPTY_INPUT = "EMPTY_INPUT"
    FILE_CONVERSION = "FILE_CONVERSION"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    VALIDATION_WARNING = "VALIDATION_WARNING"


@dataclass(frozen=True)
class ValidationIssue:
    category: ErrorCategory
    code: str
    message: str
    dimension_id: Optional[str] = None
    details: Optional[Mapping[str, object]] = None


class FileConversionError(Exception):
    """A spreadsheet could not be turned into delimited text.

    Carries a single human-readable message wrapping the underlying cause.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
