from __future__ import annotations

import math

from .presets import HL_MAX_BTU, LL_MAX_BTU
from .units import w_m2_to_btu_ft2

LOAD_BANDS = ("LL", "HL", "HighOutput")


def determine_band(load_btu_ft2: float) -> str:
    # Lower bound inclusive: exactly 24 is LL, exactly 46 is HL.
    if math.isnan(load_btu_ft2):
        raise ValueError("load must not be NaN")
    if load_btu_ft2 <= LL_MAX_BTU:
        return "LL"
    if load_btu_ft2 <= HL_MAX_BTU:
        return "HL"
    return "HighOutput"


def determine_band_w_m2(load_w_m2: float) -> str:
    return determine_band(w_m2_to_btu_ft2(load_w_m2))


def table_band(band: str) -> str:
    """HighOutput shares the HL rows of every LL/HL table."""
    if band not in LOAD_BANDS:
        raise ValueError(f"Unsupported load band: {band}")
    return "LL" if band == "LL" else "HL"
