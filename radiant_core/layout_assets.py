"""
Asset lookup keys for the installation diagram.

The core only emits keys; resolving them against the static diagram catalog
belongs to the rendering side.
"""

from __future__ import annotations

from dataclasses import dataclass

from .presets import JOIST_MM

ASSET_ROOT = "/assets/diagrams"

# 24" joists only ship a top-side and a bottom-center bridge.
_PB_24_VARIANT = {"TL": "TS", "TR": "TS", "BL": "BC", "BR": "BC"}


@dataclass(frozen=True)
class SidebarAssets:
    profiles: tuple[str, ...]
    support_icon: str
    label: str
    joist_label: str


def _joist_key(joist: int) -> str:
    return f"{joist}-{JOIST_MM[joist]}"


def fin_block_asset(joist: int, band: str, direction: str) -> str:
    return f"{ASSET_ROOT}/FB_{_joist_key(joist)}_{band}_{direction}.svg"


def pipe_bridge_asset(joist: int, pos: str) -> str:
    if pos not in _PB_24_VARIANT:
        raise ValueError(f"Unsupported pipe bridge position: {pos}")
    if joist == 24:
        return f"{ASSET_ROOT}/PB_24-600_{_PB_24_VARIANT[pos]}.svg"
    return f"{ASSET_ROOT}/PB_{_joist_key(joist)}_{pos}.svg"


def end_cap_asset(joist: int, pos: str) -> str:
    if pos not in ("T", "B"):
        raise ValueError(f"Unsupported end cap position: {pos}")
    return f"{ASSET_ROOT}/EC_{_joist_key(joist)}_{pos}.svg"


def resolve_sidebar_assets(method: str, joist: int | None) -> SidebarAssets:
    if method == "INSLAB":
        return SidebarAssets(
            profiles=(),
            support_icon=f"{ASSET_ROOT}/ICON_UltraClip.svg",
            label="In Slab",
            joist_label="",
        )
    if joist is None or joist not in JOIST_MM:
        raise ValueError(f"joist_spacing must be one of {tuple(JOIST_MM)}, got {joist!r}")

    mm = JOIST_MM[joist]
    joist_label = f'{joist}" ({mm} mm) Joists'
    prefix = f"{ASSET_ROOT}/PROFILE_{joist}-{mm}"

    if method == "DRILLING":
        return SidebarAssets(
            (f"{prefix}_Drilling.svg",), f"{ASSET_ROOT}/ICON_Drilling.svg", "Drilling", joist_label
        )
    if method == "OPEN_WEB":
        return SidebarAssets(
            (f"{prefix}_OpenWeb.svg", f"{ASSET_ROOT}/PROFILE_OpenWeb.svg"),
            f"{ASSET_ROOT}/ICON_UltraClip.svg",
            "Open-Web / Truss Joist",
            joist_label,
        )
    if method == "HANGING_SNAKE":
        return SidebarAssets(
            (f"{prefix}_HangingSH.svg",),
            f"{ASSET_ROOT}/ICON_SnakeHanger.svg",
            "Hanging - Snake",
            joist_label,
        )
    if method == "HANGING_ULTRACLIP":
        return SidebarAssets(
            (f"{prefix}_HangingUC.svg",),
            f"{ASSET_ROOT}/ICON_UltraClip.svg",
            "Hanging - Ultra-Clip",
            joist_label,
        )
    if method == "TOPDOWN_UC_UC1212":
        return SidebarAssets(
            (f"{prefix}_Bracket.svg",), f"{ASSET_ROOT}/ICON_Bracket.svg", "Top-Down", joist_label
        )
    raise ValueError(f"Unsupported install method: {method}")
