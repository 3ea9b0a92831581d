from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Sequence

from .aggregation import ProjectSummary, RoomReport, aggregate
from .layout import FloorLayout, build_layout
from .layout_assets import resolve_sidebar_assets
from .normalizer import ProjectSettingsSI, RoomInput
from .units import ui_units

PAYLOAD_VERSION = "1.0"


def _iso_utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _settings_payload(settings: ProjectSettingsSI) -> dict:
    return {
        "region": settings.region,
        "standards_mode": settings.standards_mode,
        "insulation_period": settings.insulation_period,
        "indoor_temp_c": settings.indoor_temp_c,
        "outdoor_temp_c": settings.outdoor_temp_c,
        "safety_factor_pct": settings.safety_factor_pct,
        "heat_up_factor_pct": settings.heat_up_factor_pct,
        "psi_allowance_w_per_k": settings.psi_allowance_w_per_k,
        "mech_vent_m3_per_h": settings.mech_vent_m3_per_h,
        "air_change_rate": settings.air_change_rate,
        "glazing": settings.glazing,
        "u_values": asdict(settings.u),
        "display_units": asdict(ui_units(settings.region)),
    }


def layout_payload(layout: FloorLayout) -> dict:
    return {
        "cols": layout.cols,
        "rows": layout.rows,
        "block_width_m": layout.block_width_m,
        "block_height_m": layout.block_height_m,
        "width_remainder_m": layout.width_remainder_m,
        "length_remainder_m": layout.length_remainder_m,
        "tiles": [asdict(tile) for tile in layout.tiles],
    }


def _room_payload(report: RoomReport) -> dict:
    room = report.room
    res = report.results
    mat = report.materials

    if mat.method == "INSLAB":
        layout = None
    else:
        layout = layout_payload(
            build_layout(room.length_m, room.width_m, mat.joist_spacing, mat.band, mat.method)
        )
    sidebar = resolve_sidebar_assets(mat.method, mat.joist_spacing)

    return {
        "name": room.name,
        "input": asdict(room),
        "results": {
            "area_m2": res.area_m2,
            "q_fabric_w": res.q_fabric_w,
            "q_vent_w": res.q_vent_w,
            "q_psi_w": res.q_psi_w,
            "q_ground_w": res.q_ground_w,
            "q_before_factors_w": res.q_before_factors_w,
            "q_after_factors_w": res.q_after_factors_w,
            "load_w_per_m2": res.load_w_per_m2,
            "load_btu_per_ft2": res.load_btu_per_ft2,
            "water_temp_c": res.water_temp_c,
            "floor_cover_r": res.floor_cover_r,
            "warnings": list(res.warnings),
        },
        "materials": {**asdict(mat), "clip_total": mat.clip_total},
        "layout": layout,
        "sidebar": {**asdict(sidebar), "profiles": list(sidebar.profiles)},
    }


def _summary_payload(summary: ProjectSummary) -> dict:
    return {
        "room_count": summary.room_count,
        "total_area_m2": summary.total_area_m2,
        "total_load_w": summary.total_load_w,
        "avg_load_w_per_m2": summary.avg_load_w_per_m2,
        "avg_load_btu_per_ft2": summary.avg_load_btu_per_ft2,
        "avg_water_temp_c": summary.avg_water_temp_c,
        "total_tubing_ft": summary.total_tubing_ft,
        "total_tubing_m": summary.total_tubing_m,
        "total_fin_pairs": summary.total_fin_pairs,
        "total_clips": summary.total_clips,
        "total_loops": summary.total_loops,
        "fin_spacing_mm": summary.fin_spacing_mm,
        "tubing_spacing_mm": summary.tubing_spacing_mm,
        "notes": list(summary.notes),
    }


def build_payload(
    settings: ProjectSettingsSI,
    rooms: Sequence[RoomInput],
    *,
    generated_at: str | None = None,
    project_name: str | None = None,
) -> dict:
    """
    JSON-ready document: project settings, one entry per room (results,
    materials, layout; layout is None for in-slab rooms) and the summary.
    """
    if not isinstance(settings, ProjectSettingsSI):
        raise TypeError("settings must be ProjectSettingsSI")
    summary = aggregate(rooms, settings)

    return {
        "version": PAYLOAD_VERSION,
        "generated_at": generated_at or _iso_utc_now(),
        "project": {"name": project_name, **_settings_payload(settings)},
        "rooms": [_room_payload(report) for report in summary.rooms],
        "summary": _summary_payload(summary),
    }
