from __future__ import annotations

import csv
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from radiant_core import aggregate
from radiant_core.export_rows import (
    RESULT_COLUMNS,
    _format_value,
    results_frame,
    rooms_frame,
    summary_frame,
    write_csv,
)
from radiant_core.project_file import load_project

SAMPLE = ROOT / "samples" / "demo_project.yaml"


def _read_csv(path: Path) -> list[dict[str, str]]:
    with path.open("r", encoding="utf-8", newline="") as handle:
        return list(csv.DictReader(handle))


def test_format_value_by_column_suffix() -> None:
    assert _format_value("q_fabric_w", 463.84) == "464"
    assert _format_value("load_w_per_m2", 59.8693) == "59.9"
    assert _format_value("length_m", 4) == "4.0"
    assert _format_value("area_m2", 12.04) == "12.0"
    assert _format_value("water_temp_c", 39.97) == "40.0"
    assert _format_value("tubing_ft", 97) == "97"
    assert _format_value("ft_per_loop", 269.25) == "269.2"
    assert _format_value("fin_spacing_mm", None) == ""
    assert _format_value("floor_on_ground", True) == "true"
    assert _format_value("tubing_spacing_mm", "VARIES") == "VARIES"
    assert _format_value("q_psi_w", float("nan")) == ""


def test_frames_and_csv(tmp_path: Path) -> None:
    project = load_project(SAMPLE)
    summary = aggregate(project.rooms, project.settings_si)

    inputs = rooms_frame(project.rooms)
    assert list(inputs["name"]) == ["Lounge", "Kitchen", "Bedroom", "Bathroom"]
    assert rooms_frame([]).empty

    results = results_frame(summary.rooms)
    assert tuple(results.columns) == RESULT_COLUMNS
    assert len(results) == 4

    out_path = write_csv(results, tmp_path / "out" / "results.csv")
    rows = _read_csv(out_path)
    assert [r["name"] for r in rows] == ["Lounge", "Kitchen", "Bedroom", "Bathroom"]
    bath = rows[3]
    assert bath["install_method"] == "INSLAB"
    assert bath["joist_spacing"] == ""
    assert bath["fin_spacing_mm"] == ""
    assert bath["tubing_spacing_mm"] in ("150", "200")
    lounge = rows[0]
    assert "." not in lounge["q_after_factors_w"]
    assert len(lounge["load_w_per_m2"].split(".")[1]) == 1

    totals = summary_frame(summary)
    assert dict(zip(totals["key"], totals["value"]))["room_count"] == "4"


def test_export_results_csv_cli_smoke(tmp_path: Path) -> None:
    tool_path = ROOT / "tools" / "export_results.py"
    out_path = tmp_path / "results.csv"
    cmd = [
        sys.executable,
        str(tool_path),
        "--project",
        str(SAMPLE),
        "--format",
        "csv",
        "--out",
        str(out_path),
    ]
    subprocess.run(cmd, check=True, cwd=str(ROOT))

    rows = _read_csv(out_path)
    assert len(rows) == 4
    totals = _read_csv(tmp_path / "results_summary.csv")
    assert {r["key"] for r in totals} >= {"total_load_w", "total_tubing_ft", "tubing_spacing_mm"}


def test_export_results_reports_invalid_project(tmp_path: Path) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text(
        "project:\n  region: UK\n  indoor_temp: 21\n"
        "rooms:\n  - name: Lounge\n    length_m: 4\n    width_m: 3\n    height_m: 2.4\n"
        "    install_method: DRILLING\n    joist_spacing: 16\n",
        encoding="utf-8",
    )
    tool_path = ROOT / "tools" / "export_results.py"
    out_path = tmp_path / "results.csv"
    cmd = [
        sys.executable,
        str(tool_path),
        "--project",
        str(bad),
        "--format",
        "csv",
        "--out",
        str(out_path),
    ]
    proc = subprocess.run(cmd, cwd=str(ROOT), capture_output=True, text=True)
    assert proc.returncode == 2
    lines = proc.stdout.splitlines()
    assert lines[0] == "ERROR"
    assert "error: outdoor_temp is required" in lines
    assert not out_path.exists()
