from __future__ import annotations

import logging
import math
from datetime import date, datetime, time
from pathlib import Path
from typing import Final, Sequence

import pandas as pd

from ..domain.errors import FileConversionError
from ..domain.values import AggregatedGroup
from .parsing.delimited import ParseResult, failed_parse, parse_text


TEXT_EXTENSIONS: Final[frozenset[str]] = frozenset({".csv", ".tsv", ".txt"})
SPREADSHEET_EXTENSIONS: Final[frozenset[str]] = frozenset({".xlsx", ".xls"})


def read_text_file(path: Path) -> str:
    # utf-8-sig drops a leading BOM written by spreadsheet exports
    return path.read_text(encoding="utf-8-sig")


def _cell_text(value: object) -> str:
    """Render one spreadsheet cell the way it would appear in a CSV export."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    if value is pd.NaT:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def spreadsheet_to_text(path: Path) -> str:
    """Convert the first sheet of an .xlsx/.xls workbook to CSV text.

    Either the whole sheet converts or FileConversionError is raised; no
    partial output.
    """
    try:
        raw = pd.read_excel(path, sheet_name=0, header=None, dtype=object)
        cells = raw.map(_cell_text)
        return cells.to_csv(index=False, header=False, lineterminator="\n")
    except Exception as e:
        raise FileConversionError(f"Failed to parse Excel file: {e}", cause=e) from e


def parse_file(path: Path) -> ParseResult:
    """Read a .csv/.tsv/.txt or spreadsheet file and run the row parser on it.

    Read and conversion failures come back as a single error with zero rows.
    """
    suffix = path.suffix.lower()
    try:
        if suffix in SPREADSHEET_EXTENSIONS:
            text = spreadsheet_to_text(path)
        elif suffix in TEXT_EXTENSIONS:
            text = read_text_file(path)
        else:
            return failed_parse(f"Unsupported file type: {suffix or path.name}")
    except FileConversionError as e:
        return failed_parse(e.message)
    except (OSError, UnicodeDecodeError) as e:
        return failed_parse(f"Failed to read file: {e}")
    return parse_text(text)


def write_groups_excel(groups: Sequence[AggregatedGroup], out_path: Path, value_label: str) -> None:
    """Write aggregated groups as an Excel Table with a built-in style."""
    from openpyxl.styles import Alignment, Font
    from openpyxl.utils import get_column_letter
    from openpyxl.worksheet.table import Table, TableStyleInfo

    df = pd.DataFrame(
        [{"Category": g.category, value_label: g.value} for g in groups],
        columns=["Category", value_label],
    )
    out_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        sheet_name = "Groups"
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        ws = writer.sheets[sheet_name]

        # An Excel table needs at least one data row
        if len(df):
            ref = f"A1:{get_column_letter(len(df.columns))}{len(df) + 1}"
            table = Table(displayName="Groups", ref=ref)
            table.tableStyleInfo = TableStyleInfo(
                name="TableStyleMedium2",
                showFirstColumn=False,
                showLastColumn=False,
                showRowStripes=True,
                showColumnStripes=False,
            )
            ws.add_table(table)

        for idx, header in enumerate(df.columns, start=1):
            ws.column_dimensions[get_column_letter(idx)].width = max(18, min(40, len(str(header)) + 2))
            cell = ws.cell(row=1, column=idx)
            cell.alignment = Alignment(horizontal="left")
            cell.font = Font(color="FFFFFFFF")


class IOService:
    def __init__(self, logger: logging.Logger) -> None:
        self.logger = logger

    def read_table(self, path: Path) -> ParseResult:
        self.logger.info("Reading input", extra={"path": str(path)})
        parsed = parse_file(path)
        self.logger.info(
            "Parsed input",
            extra={
                "rows": parsed.row_count,
                "columns": len(parsed.headers),
                "delimiter": parsed.delimiter,
                "errors": len(parsed.errors),
            },
        )
        return parsed

    def write_groups(
        self, groups: Sequence[AggregatedGroup], out_path: Path, value_label: str
    ) -> None:
        self.logger.info(
            f"Writing {out_path.name}", extra={"path": str(out_path), "groups": len(groups)}
        )
        write_groups_excel(groups, out_path, value_label)
