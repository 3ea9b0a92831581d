"""
Static lookup tables for the radiant-floor core.

All tables are read-only module data: insulation-period presets, regional
defaults, glazing/floor-cover properties, the supply water temperature
curve and the joist/load-band tables used by material selection and layout.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

REGIONS = ("UK", "EU", "US", "CA_METRIC", "CA_IMPERIAL")
STANDARDS_MODES = ("generic", "BS_EN_12831", "ASHRAE", "EN_ISO_13790", "CSA_F280")
INSULATION_PERIODS = ("pre1980", "y1980_2000", "y2001_2015", "y2016p")
JOIST_SPACINGS = (12, 16, 19, 24)

# Regions that use the infiltration + mechanical ventilation split and apply
# safety / heat-up multipliers.
EN_REGIONS = ("UK", "EU")


@dataclass(frozen=True)
class UValues:
    wall: float
    window: float
    door: float
    roof: float
    floor: float

    def merged(self, **overrides: float | None) -> "UValues":
        data = {
            "wall": self.wall,
            "window": self.window,
            "door": self.door,
            "roof": self.roof,
            "floor": self.floor,
        }
        for key, value in overrides.items():
            if key not in data:
                raise ValueError(f"Unknown U-value field: {key}")
            if value is not None:
                data[key] = float(value)
        return UValues(**data)


@dataclass(frozen=True)
class PeriodPreset:
    u: UValues
    ach: float


@dataclass(frozen=True)
class RegionDefaults:
    standards_mode: str
    safety_factor_pct: float
    heat_up_factor_pct: float
    psi_allowance_w_per_k: float
    mech_vent_m3_per_h: float
    infiltration_ach: float


GENERIC_PRESETS = MappingProxyType(
    {
        "pre1980": PeriodPreset(UValues(wall=0.8, window=3.0, door=2.0, roof=0.6, floor=0.6), ach=1.0),
        "y1980_2000": PeriodPreset(UValues(wall=0.6, window=2.5, door=1.8, roof=0.45, floor=0.5), ach=0.7),
        "y2001_2015": PeriodPreset(UValues(wall=0.35, window=2.0, door=1.6, roof=0.25, floor=0.35), ach=0.5),
        "y2016p": PeriodPreset(UValues(wall=0.25, window=1.6, door=1.2, roof=0.18, floor=0.25), ach=0.35),
    }
)

# BS EN 12831 overrides. Currently identical to the generic table, kept as a
# separate layer so regional revisions do not touch the generic presets.
UK_PRESETS = MappingProxyType(dict(GENERIC_PRESETS))

REGION_DEFAULTS = MappingProxyType(
    {
        "UK": RegionDefaults("BS_EN_12831", 12.5, 27.5, 0.04, 0.4, 0.25),
        "US": RegionDefaults("ASHRAE", 10.0, 20.0, 0.05, 0.5, 0.35),
        "EU": RegionDefaults("EN_ISO_13790", 12.0, 25.0, 0.035, 0.45, 0.3),
        "CA_METRIC": RegionDefaults("CSA_F280", 15.0, 30.0, 0.045, 0.4, 0.3),
        "CA_IMPERIAL": RegionDefaults("CSA_F280", 15.0, 30.0, 0.045, 0.4, 0.3),
    }
)

# W/m²K
GLAZING_WINDOW_U = MappingProxyType({"single": 5.0, "double": 2.7, "triple": 1.0})

# m²K/W
FLOOR_COVER_R = MappingProxyType(
    {
        "tile_stone": 0.01,
        "vinyl_lvt": 0.02,
        "laminate": 0.03,
        "engineered_wood": 0.05,
        "solid_wood": 0.07,
        "carpet_low_pad": 0.1,
        "carpet_high_pad": 0.15,
    }
)

# (load density W/m², supply water °C); must stay sorted and non-decreasing.
WATER_TABLE: tuple[tuple[float, float], ...] = (
    (20.0, 30.0),
    (40.0, 35.0),
    (60.0, 40.0),
    (80.0, 45.0),
    (100.0, 50.0),
    (120.0, 55.0),
    (145.0, 60.0),
    (175.0, 65.0),
)

FLOOR_COVER_BONUS_MAX_C = 12.0
FLOOR_COVER_BONUS_PER_R = 25.0

GROUND_LOSS_W_PER_M2K = 0.10
OCCUPIED_HEIGHT_CAP_M = 2.4
AIR_HEAT_CAPACITY_EN = 0.34
AIR_HEAT_CAPACITY_GENERIC = 0.33

# Load bands, BTU/hr·ft². The HL ceiling doubles as the high-load warning
# threshold in W/m² and as the tube upgrade threshold.
LL_MAX_BTU = 24.0
HL_MAX_BTU = 46.0
LL_MAX_W_M2 = 76.0
HL_MAX_W_M2 = 145.0
HIGH_LOAD_W_M2 = HL_MAX_W_M2
TUBE_UPGRADE_BTU = HL_MAX_BTU
SUPPLEMENTAL_BTU = 50.0

MAX_LOOP_FT = 300.0
SUPPORTS_PER_FT_TUBE = 0.4  # one every 30"
TOPDOWN_CLIPS_PER_M = 1.5

INSLAB_WATER_F = MappingProxyType({"LL": 100.0, "HL": 120.0})
INSLAB_TUBING_FACTOR = MappingProxyType({"LL": 1.5, "HL": 2.0})
INSLAB_SPACING_MM = MappingProxyType({"LL": 200, "HL": 150})
INSLAB_SPACING_IN = MappingProxyType({"LL": 8, "HL": 6})

# ft² of floor per fin pair
FIN_DENSITY_FT2 = MappingProxyType({"LL": 1.8, "HL": 1.4})

# ft of tube per ft² of floor
TUBING_ACROSS = MappingProxyType(
    {
        12: {"LL": 0.5714, "HL": 0.7059},
        16: {"LL": 0.75, "HL": 0.9231},
        19: {"LL": 0.8571, "HL": 1.0909},
        24: {"LL": 0.5714, "HL": 0.7059},
    }
)
TUBING_WITH = MappingProxyType({12: 1.0, 16: 0.75, 19: 0.6316, 24: 1.0})

# clips per ft² of floor
OPEN_WEB_CLIPS = MappingProxyType(
    {
        12: {"LL": 0.286, "HL": 0.353},
        16: {"LL": 0.281, "HL": 0.346},
        19: {"LL": 0.271, "HL": 0.344},
        24: {"LL": 0.286, "HL": 0.353},
    }
)

# Fin spacing for with-joist runs; the same numbers are the tube pitch for
# across-joist runs.
SPACING_MM = MappingProxyType(
    {
        12: {"LL": 530, "HL": 430},
        16: {"LL": 400, "HL": 330},
        19: {"LL": 360, "HL": 280},
        24: {"LL": 530, "HL": 430},
    }
)

JOIST_MM = MappingProxyType({12: 300, 16: 400, 19: 488, 24: 600})

# Installation block footprint in metres, (width, height).
BLOCK_SIZE_M = MappingProxyType(
    {
        12: {"LL": (0.300, 0.530), "HL": (0.300, 0.430)},
        16: {"LL": (0.400, 0.400), "HL": (0.400, 0.330)},
        19: {"LL": (0.488, 0.360), "HL": (0.488, 0.280)},
        24: {"LL": (0.600, 0.530), "HL": (0.600, 0.430)},
    }
)

CONNECTOR_WIDTH_FACTOR = MappingProxyType({12: 0.94, 16: 1.0, 19: 0.97, 24: 1.0})
