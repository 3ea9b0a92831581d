"""
Room heat loss (fabric, ventilation, thermal bridging, ground) and the
design supply water temperature.

The calculator trusts its inputs: geometry and required project fields are
checked at the boundary (see validation.py and normalizer.normalize).
"""

from __future__ import annotations

from dataclasses import dataclass

from .bands import determine_band_w_m2
from .normalizer import ProjectSettingsSI, RoomInput
from .presets import (
    AIR_HEAT_CAPACITY_EN,
    AIR_HEAT_CAPACITY_GENERIC,
    FLOOR_COVER_BONUS_MAX_C,
    FLOOR_COVER_BONUS_PER_R,
    FLOOR_COVER_R,
    GROUND_LOSS_W_PER_M2K,
    HIGH_LOAD_W_M2,
    INSLAB_WATER_F,
    OCCUPIED_HEIGHT_CAP_M,
    WATER_TABLE,
    UValues,
)
from .units import f_to_c, w_m2_to_btu_ft2

HIGH_LOAD_WARNING = "High load - supplemental heat may be required."


@dataclass(frozen=True)
class RoomResults:
    name: str
    area_m2: float
    q_fabric_w: float
    q_vent_w: float
    q_psi_w: float
    q_ground_w: float
    q_before_factors_w: float
    q_after_factors_w: float
    load_w_per_m2: float
    water_temp_c: float
    warnings: tuple[str, ...] = ()
    floor_cover_r: float | None = None
    floor_cover_u: float | None = None

    @property
    def load_btu_per_ft2(self) -> float:
        return w_m2_to_btu_ft2(self.load_w_per_m2)


def interp_water_c(load_w_m2: float) -> float:
    """
    Linear interpolation over WATER_TABLE; loads outside the table clamp to
    the first/last entry.
    """
    first_q, first_c = WATER_TABLE[0]
    last_q, last_c = WATER_TABLE[-1]
    if load_w_m2 <= first_q:
        return first_c
    if load_w_m2 >= last_q:
        return last_c

    for (q_lo, c_lo), (q_hi, c_hi) in zip(WATER_TABLE, WATER_TABLE[1:]):
        if q_lo <= load_w_m2 <= q_hi:
            t = (load_w_m2 - q_lo) / (q_hi - q_lo)
            return c_lo + t * (c_hi - c_lo)
    return last_c


def room_volume_m3(room: RoomInput) -> float:
    return room.area_m2 * min(room.height_m, OCCUPIED_HEIGHT_CAP_M)


def fabric_loss_w(room: RoomInput, u: UValues, dt: float) -> float:
    floor_area = room.area_m2
    wall_area = max(
        0.0,
        room.exterior_len_m * room.height_m - room.window_area_m2 - room.door_area_m2,
    )
    q_wall = u.wall * wall_area * dt
    q_window = u.window * room.window_area_m2 * dt
    q_door = u.door * room.door_area_m2 * dt
    q_ceiling = u.roof * floor_area * dt if room.ceiling_exposed else 0.0
    q_floor = u.floor * floor_area * dt if room.floor_exposed else 0.0
    return q_wall + q_window + q_door + q_ceiling + q_floor


def ventilation_loss_w(room: RoomInput, settings: ProjectSettingsSI, dt: float) -> float:
    volume = room_volume_m3(room)
    if settings.applies_en_factors:
        infiltration = AIR_HEAT_CAPACITY_EN * settings.air_change_rate * volume * dt
        mechanical = settings.mech_vent_m3_per_h * AIR_HEAT_CAPACITY_EN * dt
        return infiltration + mechanical
    return AIR_HEAT_CAPACITY_GENERIC * settings.air_change_rate * volume * dt


def thermal_bridge_w(settings: ProjectSettingsSI, dt: float) -> float:
    return settings.psi_allowance_w_per_k * dt


def ground_loss_w(room: RoomInput, dt: float) -> float:
    if not room.floor_on_ground:
        return 0.0
    return GROUND_LOSS_W_PER_M2K * room.area_m2 * dt


def apply_safety_factors(q_w: float, settings: ProjectSettingsSI) -> float:
    # UK/EU only; other standards already carry their margins.
    if not settings.applies_en_factors:
        return q_w
    safety = 1.0 + settings.safety_factor_pct / 100.0
    heat_up = 1.0 + settings.heat_up_factor_pct / 100.0
    return q_w * safety * heat_up


def floor_cover_r(room: RoomInput) -> float | None:
    if room.floor_cover is None:
        return None
    if room.floor_cover not in FLOOR_COVER_R:
        raise ValueError(f"Unsupported floor_cover: {room.floor_cover}")
    return FLOOR_COVER_R[room.floor_cover]


def water_temp_c(load_w_m2: float, install_method: str, cover_r: float | None) -> float:
    if install_method == "INSLAB":
        band = "LL" if determine_band_w_m2(load_w_m2) == "LL" else "HL"
        return f_to_c(INSLAB_WATER_F[band])
    temp = interp_water_c(load_w_m2)
    if cover_r is not None:
        temp += min(FLOOR_COVER_BONUS_MAX_C, FLOOR_COVER_BONUS_PER_R * cover_r)
    return temp


def calculate_room(room: RoomInput, settings: ProjectSettingsSI) -> RoomResults:
    indoor = room.setpoint_c if room.setpoint_c is not None else settings.indoor_temp_c
    dt = indoor - settings.outdoor_temp_c

    q_fabric = fabric_loss_w(room, settings.u, dt)
    q_vent = ventilation_loss_w(room, settings, dt)
    q_psi = thermal_bridge_w(settings, dt)
    q_ground = ground_loss_w(room, dt)

    q_before = q_fabric + q_vent + q_psi + q_ground
    q_after = apply_safety_factors(q_before, settings)

    area = room.area_m2
    load = q_after / area if area > 0 else 0.0

    cover_r = floor_cover_r(room)
    water = water_temp_c(load, room.install_method, cover_r)

    warnings: list[str] = []
    if load > HIGH_LOAD_W_M2:
        warnings.append(HIGH_LOAD_WARNING)

    return RoomResults(
        name=room.name,
        area_m2=area,
        q_fabric_w=q_fabric,
        q_vent_w=q_vent,
        q_psi_w=q_psi,
        q_ground_w=q_ground,
        q_before_factors_w=q_before,
        q_after_factors_w=q_after,
        load_w_per_m2=load,
        water_temp_c=water,
        warnings=tuple(warnings),
        floor_cover_r=cover_r,
        floor_cover_u=1.0 / cover_r if cover_r else None,
    )
