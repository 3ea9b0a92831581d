from __future__ import annotations

import math
from dataclasses import dataclass

FT_TO_M = 0.3048
M_TO_FT = 3.28084
FT2_TO_M2 = 0.092903
FT2_PER_M2 = 10.7639
CFM_TO_M3_PER_H = 1.699
M3_PER_H_TO_CFM = 0.5886
U_METRIC_TO_IMPERIAL = 0.1761
U_IMPERIAL_TO_METRIC = 1 / 0.1761
PSI_WK_TO_BTUHR_F = 1.895
PSI_BTUHR_F_TO_WK = 1 / 1.895
W_TO_BTUH = 3.412
W_M2_PER_BTU_FT2 = 3.15459

_FEET_REGIONS = ("US", "CA_METRIC", "CA_IMPERIAL")
_FAHRENHEIT_REGIONS = ("US",)
_IMPERIAL_COEFF_REGIONS = ("US", "CA_IMPERIAL")
_BTU_POWER_REGIONS = ("US", "CA_METRIC", "CA_IMPERIAL")


@dataclass(frozen=True)
class UiUnits:
    length: str
    area: str
    temperature: str
    u_value: str
    power: str
    power_density: str
    ventilation: str
    psi: str


def _check_number(value: float, field: str) -> float:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        raise TypeError(f"{field} must be a number")
    num = float(value)
    if math.isnan(num) or math.isinf(num):
        raise ValueError(f"{field} must be finite")
    return num


def _round(value: float, decimals: int) -> float:
    return round(value, decimals)


def c_to_f(value: float) -> float:
    return value * 9.0 / 5.0 + 32.0


def f_to_c(value: float) -> float:
    return (value - 32.0) * 5.0 / 9.0


def w_m2_to_btu_ft2(value: float) -> float:
    return value / W_M2_PER_BTU_FT2


def btu_ft2_to_w_m2(value: float) -> float:
    return value * W_M2_PER_BTU_FT2


def uses_feet(region: str) -> bool:
    return region in _FEET_REGIONS


def uses_btu(region: str) -> bool:
    return region in _BTU_POWER_REGIONS


def ui_units(region: str) -> UiUnits:
    if region in ("UK", "EU"):
        return UiUnits("m", "m²", "°C", "W/m²·K", "W", "W/m²", "m³/h", "W/K")
    if region == "US":
        return UiUnits(
            "ft", "ft²", "°F", "BTU/hr·ft²·°F", "BTU/hr", "BTU/hr·ft²", "cfm", "Btu/hr·°F"
        )
    if region == "CA_METRIC":
        return UiUnits("ft", "ft²", "°C", "W/m²·K", "BTU/hr", "BTU/hr·ft²", "m³/h", "W/K")
    if region == "CA_IMPERIAL":
        return UiUnits(
            "ft", "ft²", "°C", "BTU/hr·ft²·°F", "BTU/hr", "BTU/hr·ft²", "cfm", "Btu/hr·°F"
        )
    raise ValueError(f"Unsupported region: {region}")


# display -> SI


def to_si_length(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    num = _check_number(value, "length")
    return num * FT_TO_M if uses_feet(region) else num


def to_si_area(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    num = _check_number(value, "area")
    return num * FT2_TO_M2 if uses_feet(region) else num


def to_si_temperature(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    num = _check_number(value, "temperature")
    return f_to_c(num) if region in _FAHRENHEIT_REGIONS else num


def to_si_u_value(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    num = _check_number(value, "u_value")
    return num * U_IMPERIAL_TO_METRIC if region in _IMPERIAL_COEFF_REGIONS else num


def to_si_ventilation(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    num = _check_number(value, "ventilation")
    return num * CFM_TO_M3_PER_H if region in _IMPERIAL_COEFF_REGIONS else num


def to_si_psi(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    num = _check_number(value, "psi_allowance")
    return num * PSI_BTUHR_F_TO_WK if region in _IMPERIAL_COEFF_REGIONS else num


# SI -> display (rounded the way forms show them)


def to_display_length(region: str, meters: float | None) -> float | None:
    if meters is None:
        return None
    return _round(meters * M_TO_FT if uses_feet(region) else meters, 2)


def to_display_area(region: str, m2: float | None) -> float | None:
    if m2 is None:
        return None
    return _round(m2 * FT2_PER_M2 if uses_feet(region) else m2, 2)


def to_display_temperature(region: str, celsius: float | None) -> float | None:
    if celsius is None:
        return None
    return float(round(c_to_f(celsius) if region in _FAHRENHEIT_REGIONS else celsius))


def to_display_u_value(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    if region in _IMPERIAL_COEFF_REGIONS:
        return _round(value * U_METRIC_TO_IMPERIAL, 2)
    return _round(value, 2)


def to_display_ventilation(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    if region in _IMPERIAL_COEFF_REGIONS:
        return _round(value * M3_PER_H_TO_CFM, 2)
    return _round(value, 2)


def to_display_psi(region: str, value: float | None) -> float | None:
    if value is None:
        return None
    if region in _IMPERIAL_COEFF_REGIONS:
        return _round(value * PSI_WK_TO_BTUHR_F, 2)
    return _round(value, 2)


def format_power(region: str, watts: float) -> str:
    if uses_btu(region):
        return f"{round(watts * W_TO_BTUH)} BTU/hr"
    return f"{round(watts)} W"


def format_power_density(region: str, w_per_m2: float) -> str:
    if uses_btu(region):
        return f"{w_m2_to_btu_ft2(w_per_m2):.1f} BTU/hr·ft²"
    return f"{w_per_m2:.1f} W/m²"


def format_spacing(region: str, spacing_mm: float | str | None) -> str:
    if spacing_mm is None or spacing_mm == 0:
        return "-"
    if isinstance(spacing_mm, str):
        return spacing_mm
    if uses_feet(region):
        return f"{spacing_mm / 304.8:.2f} ft"
    return f"{spacing_mm:g} mm"
