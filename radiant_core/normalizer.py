"""
Unit & standard normalizer.

Project settings and rooms are stored in SI. Forms may hand over values in
the region's display units (feet, °F, cfm, imperial U-values); those are
converted here, once, at the boundary (`display_units=True`).

U-value priority, lowest first:
  insulation-period preset < UK BS EN 12831 preset < glazing-derived window U
  < explicit user overrides.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

from . import units
from .presets import (
    EN_REGIONS,
    GENERIC_PRESETS,
    GLAZING_WINDOW_U,
    INSULATION_PERIODS,
    REGION_DEFAULTS,
    REGIONS,
    STANDARDS_MODES,
    UK_PRESETS,
    UValues,
)

U_FIELDS = ("wall", "window", "door", "roof", "floor")


@dataclass(frozen=True)
class ProjectSettings:
    region: str
    indoor_temp: float | None = None
    outdoor_temp: float | None = None
    standards_mode: str | None = None
    insulation_period: str = "pre1980"
    safety_factor_pct: float | None = None
    heat_up_factor_pct: float | None = None
    psi_allowance: float | None = None
    mech_vent: float | None = None
    infiltration_ach: float | None = None
    glazing: str | None = None
    u_overrides: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class ProjectSettingsSI:
    region: str
    standards_mode: str
    insulation_period: str
    indoor_temp_c: float
    outdoor_temp_c: float
    safety_factor_pct: float
    heat_up_factor_pct: float
    psi_allowance_w_per_k: float
    mech_vent_m3_per_h: float
    air_change_rate: float
    glazing: str | None
    u: UValues

    @property
    def applies_en_factors(self) -> bool:
        return self.region in EN_REGIONS


@dataclass(frozen=True)
class RoomInput:
    """
    One room as entered. Field names carry SI units, but a room built with
    display_units holds the region's display units until normalize_room
    converts it: feet and ft² for US and Canada, and °F in setpoint_c for US.
    Only normalized rooms may reach calculate_room.
    """

    name: str
    length_m: float
    width_m: float
    height_m: float
    install_method: str
    exterior_len_m: float = 0.0
    window_area_m2: float = 0.0
    door_area_m2: float = 0.0
    ceiling_exposed: bool = False
    floor_exposed: bool = False
    floor_on_ground: bool = False
    setpoint_c: float | None = None
    joist_spacing: int | None = None
    floor_cover: str | None = None

    @property
    def area_m2(self) -> float:
        return self.length_m * self.width_m


def _require_choice(value: Any, choices: tuple, field_name: str) -> None:
    if value not in choices:
        raise ValueError(f"{field_name} must be one of {choices}, got {value!r}")


def _require_temperature(value: float | None, field_name: str) -> float:
    if value is None:
        raise ValueError(f"{field_name} is required")
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{field_name} must be a number")
    num = float(value)
    if math.isnan(num) or math.isinf(num):
        raise ValueError(f"{field_name} must be finite")
    return num


def _or_zero(value: float | None) -> float:
    return 0.0 if value is None else float(value)


def apply_region_defaults(settings: ProjectSettings) -> ProjectSettings:
    """Fill unset optional fields from the regional defaults table."""
    _require_choice(settings.region, REGIONS, "region")
    defaults = REGION_DEFAULTS[settings.region]
    updates: dict[str, Any] = {}
    pairs = (
        ("standards_mode", defaults.standards_mode),
        ("safety_factor_pct", defaults.safety_factor_pct),
        ("heat_up_factor_pct", defaults.heat_up_factor_pct),
        ("psi_allowance", defaults.psi_allowance_w_per_k),
        ("mech_vent", defaults.mech_vent_m3_per_h),
        ("infiltration_ach", defaults.infiltration_ach),
    )
    for name, value in pairs:
        if getattr(settings, name) is None:
            updates[name] = value
    return replace(settings, **updates) if updates else settings


def merge_u_values(
    region: str,
    standards_mode: str,
    insulation_period: str,
    glazing: str | None,
    overrides_si: Mapping[str, float | None],
) -> tuple[UValues, float]:
    _require_choice(insulation_period, INSULATION_PERIODS, "insulation_period")
    base = GENERIC_PRESETS[insulation_period]
    u = base.u
    ach = base.ach

    if region == "UK" and standards_mode == "BS_EN_12831":
        uk = UK_PRESETS.get(insulation_period)
        if uk is not None:
            u = uk.u

    if glazing is not None:
        _require_choice(glazing, tuple(GLAZING_WINDOW_U), "glazing")
        u = u.merged(window=GLAZING_WINDOW_U[glazing])

    unknown = sorted(set(overrides_si) - set(U_FIELDS))
    if unknown:
        raise ValueError(f"Unknown U-value override: {', '.join(unknown)}")
    for key, value in overrides_si.items():
        if value is not None and float(value) < 0:
            raise ValueError(f"u_overrides.{key} must be >= 0")
    u = u.merged(**dict(overrides_si))
    return u, ach


def normalize(settings: ProjectSettings, *, display_units: bool = False) -> ProjectSettingsSI:
    region = settings.region
    _require_choice(region, REGIONS, "region")
    standards_mode = settings.standards_mode or REGION_DEFAULTS[region].standards_mode
    _require_choice(standards_mode, STANDARDS_MODES, "standards_mode")

    indoor = _require_temperature(settings.indoor_temp, "indoor_temp")
    outdoor = _require_temperature(settings.outdoor_temp, "outdoor_temp")
    psi = settings.psi_allowance
    mech_vent = settings.mech_vent
    overrides = dict(settings.u_overrides or {})

    if display_units:
        indoor = units.to_si_temperature(region, indoor)
        outdoor = units.to_si_temperature(region, outdoor)
        psi = units.to_si_psi(region, psi)
        mech_vent = units.to_si_ventilation(region, mech_vent)
        overrides = {k: units.to_si_u_value(region, v) for k, v in overrides.items()}

    u, preset_ach = merge_u_values(
        region, standards_mode, settings.insulation_period, settings.glazing, overrides
    )
    ach = preset_ach if settings.infiltration_ach is None else float(settings.infiltration_ach)

    return ProjectSettingsSI(
        region=region,
        standards_mode=standards_mode,
        insulation_period=settings.insulation_period,
        indoor_temp_c=float(indoor),
        outdoor_temp_c=float(outdoor),
        safety_factor_pct=_or_zero(settings.safety_factor_pct),
        heat_up_factor_pct=_or_zero(settings.heat_up_factor_pct),
        psi_allowance_w_per_k=_or_zero(psi),
        mech_vent_m3_per_h=_or_zero(mech_vent),
        air_change_rate=ach,
        glazing=settings.glazing,
        u=u,
    )


_ROOM_LENGTH_FIELDS = ("length_m", "width_m", "height_m", "exterior_len_m")
_ROOM_AREA_FIELDS = ("window_area_m2", "door_area_m2")


def normalize_room(room: RoomInput, region: str, *, display_units: bool = False) -> RoomInput:
    """Converts a room entered in display units to SI. SI rooms pass through."""
    _require_choice(region, REGIONS, "region")
    if not display_units:
        return room
    updates: dict[str, Any] = {}
    for f in fields(room):
        value = getattr(room, f.name)
        if f.name in _ROOM_LENGTH_FIELDS:
            updates[f.name] = units.to_si_length(region, value)
        elif f.name in _ROOM_AREA_FIELDS:
            updates[f.name] = units.to_si_area(region, value)
        elif f.name == "setpoint_c":
            updates[f.name] = units.to_si_temperature(region, value)
    return replace(room, **updates)
