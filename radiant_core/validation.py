from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd

from .materials import INSTALL_METHODS
from .normalizer import RoomInput
from .presets import (
    FLOOR_COVER_R,
    GLAZING_WINDOW_U,
    INSULATION_PERIODS,
    JOIST_SPACINGS,
    REGIONS,
    STANDARDS_MODES,
)

Translator = Callable[..., str]

ROOM_COLUMNS = (
    "name",
    "length_m",
    "width_m",
    "height_m",
    "exterior_len_m",
    "window_area_m2",
    "door_area_m2",
    "setpoint_c",
    "install_method",
    "joist_spacing",
    "floor_cover",
)

ROOM_FLAGS = ("ceiling_exposed", "floor_exposed", "floor_on_ground")

# Default English strings used when no translator is provided.
_VALIDATION_EN = {
    "validation.name_required": "name is required",
    "validation.name_duplicate": "room name '{name}' is used more than once",
    "validation.region": "region must be one of UK, EU, US, CA_METRIC, CA_IMPERIAL",
    "validation.standards_mode": "standards_mode is not supported",
    "validation.period": "insulation_period must be pre1980, y1980_2000, y2001_2015, or y2016p",
    "validation.glazing": "glazing must be single, double, or triple",
    "validation.field_required": "{field} is required",
    "validation.field_number": "{field} must be a number",
    "validation.field_positive": "{field} must be > 0",
    "validation.field_gte_zero": "{field} must be >= 0",
    "validation.field_flag": "{field} must be true or false",
    "validation.temp_range": "{field} must be in [{lo}, {hi}]",
    "validation.indoor_below_outdoor": "indoor_temp should be above outdoor_temp",
    "validation.u_override_unknown": "u_overrides.{field} is not a U-value field",
    "validation.u_overrides_mapping": "u_overrides must be a mapping of U-value fields",
    "validation.install_method": "install_method must be DRILLING, OPEN_WEB, HANGING_SNAKE, "
    "HANGING_ULTRACLIP, TOPDOWN_UC_UC1212, or INSLAB",
    "validation.joist_required": "joist_spacing is required unless install_method is INSLAB",
    "validation.joist_choice": "joist_spacing must be 12, 16, 19, or 24",
    "validation.joist_ignored": "joist_spacing is ignored for INSLAB",
    "validation.floor_cover": "floor_cover is not a known covering",
    "validation.openings_exceed_wall": "window and door area exceed the exterior wall area",
}


def _tr(translator: Translator | None, key: str, **kwargs: Any) -> str:
    if translator is None:
        raw = _VALIDATION_EN.get(key, key)
        return raw.format(**kwargs) if kwargs else raw
    return translator(key, **kwargs)


@dataclass(frozen=True)
class ValidationResult:
    errors: list[str]
    warnings: list[str]
    row_status: dict[int, str]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def is_finite(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    try:
        num = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(num)


def _is_blank(value: Any) -> bool:
    if value is None or value == "":
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _num_or_zero(value: Any) -> float:
    return 0.0 if _is_blank(value) else float(value)


def validate_project(
    data: dict[str, Any],
    *,
    display_units: bool = False,
    translator: Translator | None = None,
) -> list[str]:
    """
    Project-level checks that must pass before any room is calculated.
    Values are checked as entered; with display_units a US project carries
    its temperatures in °F.
    """
    errors: list[str] = []

    region = data.get("region")
    if region not in REGIONS:
        errors.append(_tr(translator, "validation.region"))

    standards_mode = data.get("standards_mode")
    if not _is_blank(standards_mode) and standards_mode not in STANDARDS_MODES:
        errors.append(_tr(translator, "validation.standards_mode"))

    period = data.get("insulation_period")
    if not _is_blank(period) and period not in INSULATION_PERIODS:
        errors.append(_tr(translator, "validation.period"))

    glazing = data.get("glazing")
    if not _is_blank(glazing) and glazing not in GLAZING_WINDOW_U:
        errors.append(_tr(translator, "validation.glazing"))

    temps_ok = True
    for field, lo, hi in (("indoor_temp", -10, 50), ("outdoor_temp", -50, 50)):
        val = data.get(field)
        if _is_blank(val):
            errors.append(_tr(translator, "validation.field_required", field=field))
            temps_ok = False
        elif not is_finite(val):
            errors.append(_tr(translator, "validation.field_number", field=field))
            temps_ok = False
        elif display_units and region == "US":
            lo_f, hi_f = lo * 9 / 5 + 32, hi * 9 / 5 + 32
            if not lo_f <= float(val) <= hi_f:
                errors.append(_tr(translator, "validation.temp_range", field=field, lo=lo_f, hi=hi_f))
        elif not lo <= float(val) <= hi:
            errors.append(_tr(translator, "validation.temp_range", field=field, lo=lo, hi=hi))
    if temps_ok and float(data["indoor_temp"]) <= float(data["outdoor_temp"]):
        errors.append(_tr(translator, "validation.indoor_below_outdoor"))

    for field in (
        "safety_factor_pct",
        "heat_up_factor_pct",
        "psi_allowance",
        "mech_vent",
        "infiltration_ach",
    ):
        val = data.get(field)
        if _is_blank(val):
            continue
        if not is_finite(val):
            errors.append(_tr(translator, "validation.field_number", field=field))
        elif float(val) < 0:
            errors.append(_tr(translator, "validation.field_gte_zero", field=field))

    overrides = data.get("u_overrides") or {}
    if not isinstance(overrides, dict):
        errors.append(_tr(translator, "validation.u_overrides_mapping"))
        overrides = {}
    for key, val in overrides.items():
        if key not in ("wall", "window", "door", "roof", "floor"):
            errors.append(_tr(translator, "validation.u_override_unknown", field=key))
        elif _is_blank(val):
            continue
        elif not is_finite(val):
            errors.append(_tr(translator, "validation.field_number", field=f"u_overrides.{key}"))
        elif float(val) < 0:
            errors.append(_tr(translator, "validation.field_gte_zero", field=f"u_overrides.{key}"))

    return errors


def validate_rooms(df: pd.DataFrame, *, translator: Translator | None = None) -> ValidationResult:
    """
    Validates the room table before any heat-loss calculation.

    Expects DataFrame with columns (missing optional columns are treated as blank):
    name, length_m, width_m, height_m, exterior_len_m, window_area_m2,
    door_area_m2, setpoint_c, install_method, joist_spacing, floor_cover
    plus the optional flags ceiling_exposed, floor_exposed, floor_on_ground,
    which must be real booleans when present.
    """
    errors: list[str] = []
    warnings: list[str] = []
    statuses: dict[int, str] = {}
    seen_names: set[str] = set()

    for idx, row in df.iterrows():
        row_errors: list[str] = []
        row_warnings: list[str] = []

        name_raw = row.get("name")
        name = "" if _is_blank(name_raw) else str(name_raw).strip()
        label = name or f"row#{idx}"
        if not name:
            row_errors.append(_tr(translator, "validation.name_required"))
        elif name in seen_names:
            row_errors.append(_tr(translator, "validation.name_duplicate", name=name))
        seen_names.add(name)

        for field in ("length_m", "width_m", "height_m"):
            val = row.get(field)
            if _is_blank(val):
                row_errors.append(_tr(translator, "validation.field_required", field=field))
            elif not is_finite(val):
                row_errors.append(_tr(translator, "validation.field_number", field=field))
            elif float(val) <= 0:
                row_errors.append(_tr(translator, "validation.field_positive", field=field))

        for field in ("exterior_len_m", "window_area_m2", "door_area_m2"):
            val = row.get(field)
            if _is_blank(val):
                continue
            if not is_finite(val):
                row_errors.append(_tr(translator, "validation.field_number", field=field))
            elif float(val) < 0:
                row_errors.append(_tr(translator, "validation.field_gte_zero", field=field))

        setpoint = row.get("setpoint_c")
        if not _is_blank(setpoint) and not is_finite(setpoint):
            row_errors.append(_tr(translator, "validation.field_number", field="setpoint_c"))

        for field in ROOM_FLAGS:
            val = row.get(field)
            if not _is_blank(val) and not pd.api.types.is_bool(val):
                row_errors.append(_tr(translator, "validation.field_flag", field=field))

        method = str(row.get("install_method") or "").strip().upper()
        if method not in INSTALL_METHODS:
            row_errors.append(_tr(translator, "validation.install_method"))

        joist = row.get("joist_spacing")
        if method == "INSLAB":
            if not _is_blank(joist):
                row_warnings.append(_tr(translator, "validation.joist_ignored"))
        elif _is_blank(joist):
            row_errors.append(_tr(translator, "validation.joist_required"))
        elif not is_finite(joist) or float(joist) not in JOIST_SPACINGS:
            row_errors.append(_tr(translator, "validation.joist_choice"))

        cover = row.get("floor_cover")
        if not _is_blank(cover) and cover not in FLOOR_COVER_R:
            row_errors.append(_tr(translator, "validation.floor_cover"))

        if not row_errors:
            wall = _num_or_zero(row.get("exterior_len_m")) * float(row["height_m"])
            openings = _num_or_zero(row.get("window_area_m2")) + _num_or_zero(row.get("door_area_m2"))
            if openings > wall:
                row_warnings.append(_tr(translator, "validation.openings_exceed_wall"))

        if row_errors:
            errors.append(f"{label}: " + "; ".join(row_errors))
            statuses[idx] = "INVALID"
        else:
            statuses[idx] = "OK"

        if row_warnings:
            warnings.append(f"{label}: " + "; ".join(row_warnings))

    return ValidationResult(errors=errors, warnings=warnings, row_status=statuses)


def room_errors(room: RoomInput) -> list[str]:
    """Geometry checks for a single constructed room."""
    errors: list[str] = []
    for field in ("length_m", "width_m", "height_m"):
        val = getattr(room, field)
        if not is_finite(val) or float(val) <= 0:
            errors.append(f"{room.name}: {field} must be > 0")
    for field in ("exterior_len_m", "window_area_m2", "door_area_m2"):
        val = getattr(room, field)
        if not is_finite(val) or float(val) < 0:
            errors.append(f"{room.name}: {field} must be >= 0")
    return errors


def ensure_room_valid(room: RoomInput) -> None:
    errors = room_errors(room)
    if errors:
        raise ValueError("; ".join(errors))
