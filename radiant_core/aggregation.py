from __future__ import annotations

"""
Project aggregation.

Behavior note:
- Absolute quantities (load, tubing, fins, clips, loops) are summed over rooms.
- Load density and water temperature are area-weighted: sum(value * area) / sum(area),
  never the plain mean of per-room values.
- Spacing is categorical: one distinct value across rooms is reported as-is,
  several distinct values are reported as VARIES, no value at all as None.
- Room order does not change the summary.
"""

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from .heat_loss import RoomResults, calculate_room
from .materials import MaterialSelection, select_materials
from .normalizer import ProjectSettingsSI, RoomInput
from .units import w_m2_to_btu_ft2
from .validation import ensure_room_valid

VARIES = "VARIES"
SUPPLEMENTAL_NOTE = "Supplemental heat recommended (high load)"


@dataclass(frozen=True)
class RoomReport:
    room: RoomInput
    results: RoomResults
    materials: MaterialSelection


@dataclass
class _Totals:
    area_m2: float = 0.0
    load_w: float = 0.0
    load_area_w: float = 0.0
    water_area_c: float = 0.0
    tubing_ft: int = 0
    tubing_m: int = 0
    fin_pairs: int = 0
    clips: int = 0
    loops: int = 0
    notes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectSummary:
    room_count: int
    total_area_m2: float
    total_load_w: float
    avg_load_w_per_m2: float
    avg_water_temp_c: float
    total_tubing_ft: int
    total_tubing_m: int
    total_fin_pairs: int
    total_clips: int
    total_loops: int
    fin_spacing_mm: int | str | None
    tubing_spacing_mm: int | str | None
    notes: tuple[str, ...] = ()
    rooms: tuple[RoomReport, ...] = ()

    @property
    def avg_load_btu_per_ft2(self) -> float:
        return w_m2_to_btu_ft2(self.avg_load_w_per_m2)

    @property
    def spacing_varies(self) -> bool:
        return VARIES in (self.fin_spacing_mm, self.tubing_spacing_mm)


def uniform_or_varies(values: Iterable[int | None]) -> int | str | None:
    distinct = {v for v in values if v is not None}
    if not distinct:
        return None
    if len(distinct) > 1:
        return VARIES
    return next(iter(distinct))


def build_room_report(room: RoomInput, settings: ProjectSettingsSI) -> RoomReport:
    ensure_room_valid(room)
    results = calculate_room(room, settings)
    materials = select_materials(results, room)
    return RoomReport(room=room, results=results, materials=materials)


def _check_unique_names(rooms: Sequence[RoomInput]) -> None:
    seen: set[str] = set()
    for room in rooms:
        if room.name in seen:
            raise ValueError(f"Duplicate room name: {room.name}")
        seen.add(room.name)


def summarize(reports: Sequence[RoomReport]) -> ProjectSummary:
    totals = _Totals()
    for report in reports:
        res = report.results
        mat = report.materials
        name = report.room.name

        totals.area_m2 += res.area_m2
        totals.load_w += res.q_after_factors_w
        totals.load_area_w += res.load_w_per_m2 * res.area_m2
        totals.water_area_c += res.water_temp_c * res.area_m2
        totals.tubing_ft += mat.tubing_ft
        totals.tubing_m += mat.tubing_m
        totals.fin_pairs += mat.fin_pairs
        totals.clips += mat.clip_total
        totals.loops += mat.loops

        for warning in res.warnings:
            totals.notes.append(f"{name}: {warning}")
        if mat.supplemental_warning:
            totals.notes.append(f"{name}: {SUPPLEMENTAL_NOTE}")

    area = totals.area_m2
    return ProjectSummary(
        room_count=len(reports),
        total_area_m2=area,
        total_load_w=totals.load_w,
        avg_load_w_per_m2=totals.load_area_w / area if area > 0 else 0.0,
        avg_water_temp_c=totals.water_area_c / area if area > 0 else 0.0,
        total_tubing_ft=totals.tubing_ft,
        total_tubing_m=totals.tubing_m,
        total_fin_pairs=totals.fin_pairs,
        total_clips=totals.clips,
        total_loops=totals.loops,
        fin_spacing_mm=uniform_or_varies(r.materials.fin_spacing_mm for r in reports),
        tubing_spacing_mm=uniform_or_varies(r.materials.tubing_spacing_mm for r in reports),
        notes=tuple(totals.notes),
        rooms=tuple(reports),
    )


def aggregate(rooms: Sequence[RoomInput], settings: ProjectSettingsSI) -> ProjectSummary:
    """
    Runs heat loss and material selection for every room and rolls the
    results into one project summary. Room names must be unique and every
    room must have positive dimensions; ValueError otherwise.
    """
    rooms = list(rooms)
    _check_unique_names(rooms)
    reports = [build_room_report(room, settings) for room in rooms]
    return summarize(reports)
