from __future__ import annotations

import json
import logging
from pathlib import Path

from chartprep.utils.logging_setup import ExtraAwareFormatter, JsonLineFormatter, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    rec = logging.LogRecord(
        name="chartprep.validate",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="Mapping is not valid for target 'column-chart'",
        args=(),
        exc_info=None,
    )
    rec.__dict__.update(extra)
    return rec


def test_extra_aware_formatter_keeps_message_clean() -> None:
    fmt = ExtraAwareFormatter("%(levelname)s | %(name)s | %(message)s")
    out = fmt.format(_record(errors=2))
    assert out == "ERROR | chartprep.validate | Mapping is not valid for target 'column-chart'"


def test_json_formatter_includes_extras() -> None:
    payload = json.loads(JsonLineFormatter().format(_record(errors=2, path=Path("a.csv"))))
    assert payload["level"] == "ERROR"
    assert payload["errors"] == 2
    assert payload["path"] == "a.csv"
    assert "lineno" not in payload


def test_setup_logging_writes_both_files(tmp_path: Path) -> None:
    files = setup_logging(tmp_path / "run")
    logging.getLogger("chartprep.test").info("hello", extra={"rows": 3})
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello" in files.human.read_text(encoding="utf-8")
    line = files.jsonl.read_text(encoding="utf-8").strip().splitlines()[-1]
    assert json.loads(line)["rows"] == 3
