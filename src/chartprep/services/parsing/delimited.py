from __future__ import annotations

import csv
import io
from collections import Counter
from dataclasses import dataclass, field
from typing import Final

from ...domain.errors import EMPTY_INPUT_MESSAGE
from ...domain.values import Cell


CANDIDATE_DELIMITERS: Final[tuple[str, ...]] = (",", "\t", ";")
_SNIFF_CHARS = 4096
_SCAN_LINES = 20


@dataclass(frozen=True)
class ParseResult:
    rows: list[dict[str, Cell]] = field(default_factory=list)
    headers: list[str] = field(default_factory=list)
    row_count: int = 0
    errors: list[str] = field(default_factory=list)
    delimiter: str = ","

    @property
    def ok(self) -> bool:
        """A parse with zero rows is a failed parse, whatever the errors say."""
        return self.row_count > 0


def failed_parse(message: str) -> ParseResult:
    return ParseResult(errors=[message])


def _is_blank_record(record: list[str]) -> bool:
    return all(not cell.strip() for cell in record)


def _delimiter_by_field_counts(sample: str) -> str:
    """Pick the candidate giving the most consistent multi-field split."""
    best = ","
    best_score: tuple[int, int] = (0, 0)
    for delim in CANDIDATE_DELIMITERS:
        reader = csv.reader(io.StringIO(sample, newline=""), delimiter=delim)
        counts: list[int] = []
        try:
            for record in reader:
                if record and not _is_blank_record(record):
                    counts.append(len(record))
                if len(counts) >= _SCAN_LINES:
                    break
        except csv.Error:
            continue
        if not counts:
            continue
        width, hits = Counter(counts).most_common(1)[0]
        if width <= 1:
            continue
        score = (hits, width)
        if score > best_score:
            best, best_score = delim, score
    return best


def detect_delimiter(text: str) -> str:
    """Detect comma, tab or semicolon; defaults to comma."""
    sample = text[:_SNIFF_CHARS]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters="".join(CANDIDATE_DELIMITERS))
        if dialect.delimiter in CANDIDATE_DELIMITERS:
            return dialect.delimiter
    except csv.Error:
        pass
    return _delimiter_by_field_counts(sample)


def _dedupe_headers(raw: list[str]) -> list[str]:
    seen: Counter[str] = Counter()
    headers: list[str] = []
    for name in raw:
        if seen[name]:
            headers.append(f"{name}_{seen[name]}")
        else:
            headers.append(name)
        seen[name] += 1
    return headers


def parse_text(text: str) -> ParseResult:
    """Split delimited text into header + row records without coercing cells.

    - first non-blank record is the header row (names trimmed)
    - records whose fields are all blank are skipped
    - short records are padded with None, long records truncated; both are
      reported as row-level errors and the row is kept
    """
    body = text.lstrip("\ufeff").strip()
    if not body:
        return failed_parse(EMPTY_INPUT_MESSAGE)

    delimiter = detect_delimiter(body)
    reader = csv.reader(io.StringIO(body, newline=""), delimiter=delimiter)

    headers: list[str] | None = None
    rows: list[dict[str, Cell]] = []
    errors: list[str] = []

    try:
        for record in reader:
            if not record or _is_blank_record(record):
                continue
            if headers is None:
                headers = _dedupe_headers([h.strip() for h in record])
                continue

            idx = len(rows)
            width = len(headers)
            if len(record) < width:
                errors.append(
                    f"Row {idx}: Too few fields: expected {width} fields but parsed {len(record)}"
                )
            elif len(record) > width:
                errors.append(
                    f"Row {idx}: Too many fields: expected {width} fields but parsed {len(record)}"
                )
            row: dict[str, Cell] = {
                name: (record[i] if i < len(record) else None) for i, name in enumerate(headers)
            }
            rows.append(row)
    except csv.Error as e:
        errors.append(f"Row {len(rows)}: {e} (line {reader.line_num})")

    return ParseResult(
        rows=rows,
        headers=headers or [],
        row_count=len(rows),
        errors=errors,
        delimiter=delimiter,
    )
