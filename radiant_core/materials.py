"""
Material selection.

Classifies the room load into a band, then derives tube size, tubing
length, loop split, fin and support/clip counts and the reported
fin/tube spacing for the chosen install method and joist spacing.

All purchased quantities are rounded up.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .bands import determine_band, table_band
from .heat_loss import RoomResults
from .normalizer import RoomInput
from .presets import (
    FIN_DENSITY_FT2,
    INSLAB_SPACING_IN,
    INSLAB_SPACING_MM,
    INSLAB_TUBING_FACTOR,
    JOIST_SPACINGS,
    MAX_LOOP_FT,
    OPEN_WEB_CLIPS,
    SPACING_MM,
    SUPPLEMENTAL_BTU,
    SUPPORTS_PER_FT_TUBE,
    TOPDOWN_CLIPS_PER_M,
    TUBE_UPGRADE_BTU,
    TUBING_ACROSS,
    TUBING_WITH,
)
from .units import FT2_PER_M2, FT_TO_M, M_TO_FT


class InstallMethod(str, Enum):
    DRILLING = "DRILLING"
    OPEN_WEB = "OPEN_WEB"
    HANGING_SNAKE = "HANGING_SNAKE"
    HANGING_ULTRACLIP = "HANGING_ULTRACLIP"
    TOPDOWN_UC_UC1212 = "TOPDOWN_UC_UC1212"
    INSLAB = "INSLAB"


ACROSS_JOIST_METHODS = (InstallMethod.DRILLING.value, InstallMethod.OPEN_WEB.value)
WITH_JOIST_METHODS = (
    InstallMethod.HANGING_SNAKE.value,
    InstallMethod.HANGING_ULTRACLIP.value,
    InstallMethod.TOPDOWN_UC_UC1212.value,
)
HANGING_METHODS = (InstallMethod.HANGING_SNAKE.value, InstallMethod.HANGING_ULTRACLIP.value)
INSTALL_METHODS = tuple(m.value for m in InstallMethod)

TUBE_SMALL = "16mm"
TUBE_LARGE = "20mm"


@dataclass(frozen=True)
class MaterialSelection:
    method: str
    joist_spacing: int | None
    band: str
    tube_size: str
    supplemental_warning: bool
    area_m2: float
    area_ft2: float
    tubing_ft: int
    tubing_m: int
    loops: int
    ft_per_loop: float
    m_per_loop: float
    fin_pairs: int
    fin_halves: int
    drilling_supports: int = 0
    hanging_supports: int | None = None
    open_web_clips: int | None = None
    topdown_clips: int | None = None
    topdown_uc1212: int | None = None
    topdown_uc1234: int | None = None
    fin_spacing_mm: int | None = None
    tubing_spacing_mm: int | None = None
    spacing_display: str | None = None
    fin_block_asset: str | None = None

    @property
    def clip_total(self) -> int:
        counts = (
            self.hanging_supports,
            self.open_web_clips,
            self.topdown_clips,
            self.topdown_uc1212,
            self.topdown_uc1234,
        )
        return sum(c for c in counts if c is not None)


def parse_install_method(method: object) -> str:
    if isinstance(method, InstallMethod):
        return method.value
    if not isinstance(method, str):
        raise TypeError("install_method must be a string")
    method_norm = method.strip().upper()
    if method_norm not in INSTALL_METHODS:
        raise ValueError(f"install_method must be one of {INSTALL_METHODS}, got {method!r}")
    return method_norm


def parse_joist_spacing(joist: object) -> int:
    if joist is None:
        raise ValueError("joist_spacing is required for joist-mounted install methods")
    if isinstance(joist, bool):
        raise TypeError("joist_spacing must be a number")
    try:
        joist_val = int(float(joist))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"joist_spacing is not a number: {joist!r}") from exc
    if joist_val not in JOIST_SPACINGS or float(joist) != joist_val:
        raise ValueError(f"joist_spacing must be one of {JOIST_SPACINGS}, got {joist!r}")
    return joist_val


def is_across_joist(method: str) -> bool:
    return method in ACROSS_JOIST_METHODS


def tube_size_for(load_btu: float, method: str) -> str:
    if method == "INSLAB":
        return TUBE_SMALL
    return TUBE_LARGE if load_btu > TUBE_UPGRADE_BTU else TUBE_SMALL


def tubing_factor(method: str, joist: int | None, band: str) -> float:
    calc_band = table_band(band)
    if method == "INSLAB":
        return INSLAB_TUBING_FACTOR[calc_band]
    if joist is None:
        raise ValueError("joist_spacing is required for joist-mounted install methods")
    if is_across_joist(method):
        return TUBING_ACROSS[joist][calc_band]
    return TUBING_WITH[joist]


def calc_loops(tubing_ft: float) -> tuple[int, float, float]:
    """Splits the run evenly over ceil(total / MAX_LOOP_FT) loops."""
    loops = max(1, math.ceil(tubing_ft / MAX_LOOP_FT))
    ft_per = tubing_ft / loops
    if ft_per > MAX_LOOP_FT + 1e-9:
        raise AssertionError(f"loop length {ft_per} ft exceeds {MAX_LOOP_FT} ft")
    return loops, ft_per, ft_per * FT_TO_M


def topdown_clip_count(fin_count: int, heated_run_m: float) -> int:
    clips_from_fins = fin_count * 2
    clips_from_run = math.ceil(heated_run_m * TOPDOWN_CLIPS_PER_M)
    return max(clips_from_fins, clips_from_run)


def fin_block_svg(joist: int | None, band: str, method: str) -> str | None:
    if method == "INSLAB" or joist is None:
        return None
    direction = "drilled" if is_across_joist(method) else "parallel"
    return f"FB_{joist}_{table_band(band)}_{direction}.svg"


def spacing_for(method: str, joist: int | None, band: str) -> tuple[int | None, int | None, str | None]:
    """Returns (fin spacing mm, tubing spacing mm, in-slab display text)."""
    calc_band = table_band(band)
    if method == "INSLAB":
        mm = INSLAB_SPACING_MM[calc_band]
        inches = INSLAB_SPACING_IN[calc_band]
        return None, mm, f'{inches}" ({mm} mm) on center'
    if joist is None:
        raise ValueError("joist_spacing is required for joist-mounted install methods")
    if method in WITH_JOIST_METHODS:
        return SPACING_MM[joist][calc_band], None, None
    return None, SPACING_MM[joist][calc_band], None


def select_materials(
    results: RoomResults,
    room: RoomInput,
    install_method: str | None = None,
    joist_spacing: int | None = None,
) -> MaterialSelection:
    """
    Derives quantities from the room results. Method and joist default to the
    room's own values; in-slab ignores joist spacing entirely.
    """
    method = parse_install_method(install_method if install_method is not None else room.install_method)
    joist_raw = joist_spacing if joist_spacing is not None else room.joist_spacing
    joist = None if method == "INSLAB" else parse_joist_spacing(joist_raw)

    load_btu = results.load_btu_per_ft2
    band = determine_band(load_btu)
    calc_band = table_band(band)
    tube_size = tube_size_for(load_btu, method)
    supplemental = load_btu > SUPPLEMENTAL_BTU

    area_m2 = room.area_m2
    area_ft2 = area_m2 * FT2_PER_M2

    factor = tubing_factor(method, joist, band)
    tubing_ft = math.ceil(area_ft2 * factor)
    tubing_m = math.ceil(area_m2 * factor * M_TO_FT)

    if method == "INSLAB":
        fin_pairs = 0
    else:
        fin_pairs = math.ceil(area_ft2 / FIN_DENSITY_FT2[calc_band])
    fin_halves = fin_pairs * 2

    hanging = None
    open_web = None
    topdown = None
    uc1212 = None
    uc1234 = None

    if method in HANGING_METHODS:
        hanging = math.ceil(tubing_ft * SUPPORTS_PER_FT_TUBE)
    elif method == "OPEN_WEB":
        open_web = math.ceil(area_ft2 * OPEN_WEB_CLIPS[joist][calc_band])
    elif method == "TOPDOWN_UC_UC1212":
        topdown = topdown_clip_count(fin_halves, tubing_m)
        if tube_size == TUBE_SMALL:
            uc1212 = math.ceil(topdown / 2)
        else:
            uc1234 = math.ceil(topdown / 2)

    loops, ft_per_loop, m_per_loop = calc_loops(tubing_ft)
    fin_spacing, tube_spacing, spacing_display = spacing_for(method, joist, band)

    return MaterialSelection(
        method=method,
        joist_spacing=joist,
        band=band,
        tube_size=tube_size,
        supplemental_warning=supplemental,
        area_m2=area_m2,
        area_ft2=area_ft2,
        tubing_ft=tubing_ft,
        tubing_m=tubing_m,
        loops=loops,
        ft_per_loop=ft_per_loop,
        m_per_loop=m_per_loop,
        fin_pairs=fin_pairs,
        fin_halves=fin_halves,
        hanging_supports=hanging,
        open_web_clips=open_web,
        topdown_clips=topdown,
        topdown_uc1212=uc1212,
        topdown_uc1234=uc1234,
        fin_spacing_mm=fin_spacing,
        tubing_spacing_mm=tube_spacing,
        spacing_display=spacing_display,
        fin_block_asset=fin_block_svg(joist, band, method),
    )
