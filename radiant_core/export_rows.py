from __future__ import annotations

import math
from dataclasses import asdict, fields
from pathlib import Path
from typing import Sequence

import pandas as pd

from .aggregation import ProjectSummary, RoomReport
from .normalizer import RoomInput

RESULT_COLUMNS = (
    "name",
    "install_method",
    "joist_spacing",
    "area_m2",
    "q_fabric_w",
    "q_vent_w",
    "q_psi_w",
    "q_ground_w",
    "q_before_factors_w",
    "q_after_factors_w",
    "load_w_per_m2",
    "water_temp_c",
    "band",
    "tube_size",
    "tubing_ft",
    "tubing_m",
    "loops",
    "m_per_loop",
    "fin_pairs",
    "clips",
    "fin_spacing_mm",
    "tubing_spacing_mm",
    "warnings",
)


def rooms_frame(rooms: Sequence[RoomInput]) -> pd.DataFrame:
    records = [asdict(room) for room in rooms]
    if not records:
        return pd.DataFrame(columns=[f.name for f in fields(RoomInput)])
    return pd.DataFrame.from_records(records)


def results_frame(reports: Sequence[RoomReport]) -> pd.DataFrame:
    records = []
    for report in reports:
        res = report.results
        mat = report.materials
        records.append(
            {
                "name": report.room.name,
                "install_method": mat.method,
                "joist_spacing": mat.joist_spacing,
                "area_m2": res.area_m2,
                "q_fabric_w": res.q_fabric_w,
                "q_vent_w": res.q_vent_w,
                "q_psi_w": res.q_psi_w,
                "q_ground_w": res.q_ground_w,
                "q_before_factors_w": res.q_before_factors_w,
                "q_after_factors_w": res.q_after_factors_w,
                "load_w_per_m2": res.load_w_per_m2,
                "water_temp_c": res.water_temp_c,
                "band": mat.band,
                "tube_size": mat.tube_size,
                "tubing_ft": mat.tubing_ft,
                "tubing_m": mat.tubing_m,
                "loops": mat.loops,
                "m_per_loop": mat.m_per_loop,
                "fin_pairs": mat.fin_pairs,
                "clips": mat.clip_total,
                "fin_spacing_mm": mat.fin_spacing_mm,
                "tubing_spacing_mm": mat.tubing_spacing_mm,
                "warnings": " | ".join(res.warnings),
            }
        )
    return pd.DataFrame.from_records(records, columns=list(RESULT_COLUMNS))


def summary_frame(summary: ProjectSummary) -> pd.DataFrame:
    rows = [
        ("room_count", summary.room_count),
        ("total_area_m2", summary.total_area_m2),
        ("total_load_w", summary.total_load_w),
        ("avg_load_w_per_m2", summary.avg_load_w_per_m2),
        ("avg_water_temp_c", summary.avg_water_temp_c),
        ("total_tubing_ft", summary.total_tubing_ft),
        ("total_tubing_m", summary.total_tubing_m),
        ("total_fin_pairs", summary.total_fin_pairs),
        ("total_clips", summary.total_clips),
        ("total_loops", summary.total_loops),
        ("fin_spacing_mm", summary.fin_spacing_mm),
        ("tubing_spacing_mm", summary.tubing_spacing_mm),
    ]
    return pd.DataFrame(
        {
            "key": [k for k, _ in rows],
            "value": [_format_value(k, v) for k, v in rows],
        }
    )


def _format_value(column: str, value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        num = float(value)
        if not math.isfinite(num):
            return ""
        decimals = _decimals_for_column(column)
        if decimals is None:
            return _format_default_number(num)
        return f"{num:.{decimals}f}"
    return str(value)


def _decimals_for_column(column: str) -> int | None:
    name = column.lower()
    if name.endswith("_w_per_m2"):
        return 1
    if name.endswith("_w"):
        return 0
    if name.endswith("_m") or name.endswith("_m2") or name.endswith("_per_loop"):
        return 1
    if name.endswith("_c"):
        return 1
    return None


def _format_default_number(value: float) -> str:
    text = f"{value:.6f}".rstrip("0").rstrip(".")
    if text in {"-0", "-0.0", ""}:
        return "0"
    return text


def format_frame(frame: pd.DataFrame) -> pd.DataFrame:
    out = pd.DataFrame(index=frame.index)
    for column in frame.columns:
        out[column] = [
            _format_value(str(column), None if _is_missing(v) else v) for v in frame[column].tolist()
        ]
    return out


def _is_missing(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def write_csv(frame: pd.DataFrame, path: str | Path) -> Path:
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    format_frame(frame).to_csv(out_path, index=False, encoding="utf-8")
    return out_path
