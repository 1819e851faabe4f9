from __future__ import annotations

from pathlib import Path

import pandas as pd
import yaml

from chartprep.config import Config
from chartprep.main import run_pipeline

TARGETS = Path(__file__).resolve().parents[2] / "configs" / "targets.yaml"

SALES_CSV = "Region,Sales\nNorth,100\nSouth,200\nNorth,150\nEast,300\nSouth,250\n"


def _only(pattern: str, base: Path) -> Path:
    found = list(base.glob(pattern))
    assert len(found) == 1, found
    return found[0]


def test_csv_with_suggested_mapping(tmp_path: Path) -> None:
    src = tmp_path / "sales.csv"
    src.write_text(SALES_CSV, encoding="utf-8")
    runs = tmp_path / "runs"

    code = run_pipeline(src, runs, Config(), target_id="column-chart", targets_path=TARGETS)
    assert code == 0

    report = yaml.safe_load(_only("*/profile.yaml", runs).read_text(encoding="utf-8"))
    assert report["mapping"] == {"x": "Region", "y": "Sales"}
    assert report["validation"]["is_valid"] is True
    assert report["aggregation"] == {"category": "Region", "value": "Sales", "method": "sum"}
    assert [c["detected_type"] for c in report["columns"]] == ["string", "number"]

    groups = pd.read_excel(_only("*/groups.xlsx", runs))
    assert groups["Category"].tolist() == ["North", "South", "East"]
    assert groups["Sales"].tolist() == [250, 450, 300]

    assert _only("*/latest_run.log", runs).read_text(encoding="utf-8")
    assert _only("*/logs.jsonl", runs).read_text(encoding="utf-8")


def test_missing_required_dimension_is_rejected(tmp_path: Path) -> None:
    src = tmp_path / "sales.csv"
    src.write_text(SALES_CSV, encoding="utf-8")
    runs = tmp_path / "runs"

    code = run_pipeline(
        src, runs, Config(), target_id="column-chart", targets_path=TARGETS, mapping={"x": "Region"}
    )
    assert code == 2

    report = yaml.safe_load(_only("*/profile.yaml", runs).read_text(encoding="utf-8"))
    assert report["validation"]["is_valid"] is False
    assert [e["dimension"] for e in report["validation"]["errors"]] == ["y"]
    assert not list(runs.glob("*/groups.xlsx"))


def test_unknown_target(tmp_path: Path) -> None:
    src = tmp_path / "sales.csv"
    src.write_text(SALES_CSV, encoding="utf-8")
    code = run_pipeline(src, tmp_path / "runs", Config(), target_id="radar", targets_path=TARGETS)
    assert code == 2


def test_empty_file_fails_parse(tmp_path: Path) -> None:
    src = tmp_path / "empty.csv"
    src.write_text("", encoding="utf-8")
    assert run_pipeline(src, tmp_path / "runs", Config()) == 1


def test_explicit_columns_with_mean(tmp_path: Path) -> None:
    src = tmp_path / "sales.tsv"
    src.write_text(SALES_CSV.replace(",", "\t"), encoding="utf-8")
    runs = tmp_path / "runs"

    code = run_pipeline(src, runs, Config(), category="Region", value="Sales", aggregation="mean")
    assert code == 0

    report = yaml.safe_load(_only("*/profile.yaml", runs).read_text(encoding="utf-8"))
    assert report["input"]["delimiter"] == "\t"
    assert "target" not in report
    groups = pd.read_excel(_only("*/groups.xlsx", runs))
    assert groups["Sales"].tolist() == [125, 225, 300]


def test_excel_input(tmp_path: Path) -> None:
    src = tmp_path / "sales.xlsx"
    pd.DataFrame({"Region": ["North", "South", "North"], "Sales": [1, 2, 3]}).to_excel(src, index=False)
    runs = tmp_path / "runs"

    code = run_pipeline(src, runs, Config(), category="Region", value="Sales")
    assert code == 0
    groups = pd.read_excel(_only("*/groups.xlsx", runs))
    assert groups["Sales"].tolist() == [4, 2]
