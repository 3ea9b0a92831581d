from __future__ import annotations

import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from radiant_core.layout import END_CAP, FIN_BLOCK, PIPE_BRIDGE, build_layout, compute_grid
from radiant_core.layout_assets import (
    end_cap_asset,
    fin_block_asset,
    pipe_bridge_asset,
    resolve_sidebar_assets,
)

ASSETS = "/assets/diagrams"


def _connectors(layout, row: int):
    return sorted((t for t in layout.tiles if t.row == row), key=lambda t: t.col)


def test_grid_floors_with_float_tolerance() -> None:
    assert compute_grid(1.2, 1.2, 16, "LL") == (3, 3, 0.4, 0.4)
    cols, rows, _, block_h = compute_grid(0.99, 0.8, 16, "HighOutput")
    assert block_h == pytest.approx(0.33)
    assert (cols, rows) == (2, 3)


def test_across_joist_end_caps_per_column() -> None:
    layout = build_layout(1.2, 1.2, 16, "LL", "DRILLING")
    assert (layout.cols, layout.rows) == (3, 3)
    assert len(layout.tiles_by_role(FIN_BLOCK)) == 9
    assert len(layout.tiles_by_role(END_CAP)) == 6
    assert layout.tiles_by_role(PIPE_BRIDGE) == []

    top = _connectors(layout, -1)
    bottom = _connectors(layout, 3)
    assert [t.asset for t in top] == [f"{ASSETS}/EC_16-400_T.svg"] * 3
    assert [t.asset for t in bottom] == [f"{ASSETS}/EC_16-400_B.svg"] * 3
    assert top[0].y == pytest.approx(-0.2)
    assert bottom[0].y == pytest.approx(1.0)

    fin = layout.tiles_by_role(FIN_BLOCK)[0]
    assert fin.asset == f"{ASSETS}/FB_16-400_LL_drilled.svg"


def test_with_joist_serpentine_three_columns() -> None:
    layout = build_layout(1.2, 1.2, 16, "LL", "HANGING_SNAKE")
    top = _connectors(layout, -1)
    bottom = _connectors(layout, 3)

    assert [t.role for t in top] == [END_CAP, PIPE_BRIDGE, PIPE_BRIDGE]
    assert [t.asset for t in top] == [
        f"{ASSETS}/PB_16-400_TL.svg",
        f"{ASSETS}/PB_16-400_TR.svg",
        f"{ASSETS}/PB_16-400_TL.svg",
    ]
    assert [t.role for t in bottom] == [PIPE_BRIDGE, PIPE_BRIDGE, END_CAP]
    assert [t.asset for t in bottom] == [
        f"{ASSETS}/PB_16-400_BR.svg",
        f"{ASSETS}/PB_16-400_BL.svg",
        f"{ASSETS}/PB_16-400_BL.svg",
    ]
    assert layout.tiles_by_role(FIN_BLOCK)[0].asset.endswith("_parallel.svg")


def test_single_column_serpentine_has_only_end_caps() -> None:
    layout = build_layout(1.2, 0.4, 16, "LL", "TOPDOWN_UC_UC1212")
    assert layout.cols == 1
    assert len(layout.tiles_by_role(END_CAP)) == 2
    assert layout.tiles_by_role(PIPE_BRIDGE) == []


def test_connector_width_is_narrowed_and_centered() -> None:
    layout = build_layout(1.0, 0.6, 12, "LL", "HANGING_ULTRACLIP")
    bridge = layout.tiles_by_role(PIPE_BRIDGE)[0]
    assert bridge.w == pytest.approx(0.3 * 0.94)
    assert bridge.x == pytest.approx(bridge.col * 0.3 + (0.3 - 0.282) / 2)

    start = _connectors(layout, -1)[0]
    assert start.role == END_CAP
    assert start.w == pytest.approx(0.3)
    assert start.x == 0.0


def test_24_inch_bridges_use_shared_graphics() -> None:
    assert pipe_bridge_asset(24, "TL") == f"{ASSETS}/PB_24-600_TS.svg"
    assert pipe_bridge_asset(24, "BR") == f"{ASSETS}/PB_24-600_BC.svg"
    with pytest.raises(ValueError):
        pipe_bridge_asset(16, "XX")
    with pytest.raises(ValueError):
        end_cap_asset(16, "M")
    assert fin_block_asset(19, "HL", "drilled") == f"{ASSETS}/FB_19-488_HL_drilled.svg"


def test_remainder_is_reported_not_tiled() -> None:
    layout = build_layout(1.3, 1.0, 16, "LL", "DRILLING")
    assert (layout.cols, layout.rows) == (2, 3)
    assert layout.width_remainder_m == pytest.approx(0.2)
    assert layout.length_remainder_m == pytest.approx(0.1)
    assert layout.tiled_area_m2 == pytest.approx(0.8 * 1.2)
    assert all(t.x + t.w <= layout.width_m + 1e-9 for t in layout.tiles_by_role(FIN_BLOCK))


def test_room_smaller_than_a_block_logs_and_returns_empty(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="radiant_core.layout"):
        layout = build_layout(0.3, 0.3, 16, "LL", "DRILLING")
    assert layout.tiles == ()
    assert "layout is empty" in caplog.text


def test_inslab_and_bad_inputs_raise() -> None:
    with pytest.raises(ValueError):
        build_layout(4.0, 3.0, 16, "LL", "INSLAB")
    with pytest.raises(ValueError):
        build_layout(4.0, 3.0, None, "LL", "DRILLING")
    with pytest.raises(ValueError):
        build_layout(0.0, 3.0, 16, "LL", "DRILLING")
    with pytest.raises(ValueError):
        build_layout(4.0, 3.0, 16, "LL", "STAPLED")


def test_layout_is_deterministic() -> None:
    a = build_layout(4.0, 3.0, 19, "HL", "HANGING_SNAKE")
    b = build_layout(4.0, 3.0, 19, "HL", "HANGING_SNAKE")
    assert a == b


def test_sidebar_assets() -> None:
    open_web = resolve_sidebar_assets("OPEN_WEB", 16)
    assert open_web.profiles == (
        f"{ASSETS}/PROFILE_16-400_OpenWeb.svg",
        f"{ASSETS}/PROFILE_OpenWeb.svg",
    )
    assert open_web.joist_label == '16" (400 mm) Joists'

    inslab = resolve_sidebar_assets("INSLAB", None)
    assert inslab.profiles == ()
    assert inslab.label == "In Slab"

    with pytest.raises(ValueError):
        resolve_sidebar_assets("DRILLING", None)
    with pytest.raises(ValueError):
        resolve_sidebar_assets("STAPLED", 16)
