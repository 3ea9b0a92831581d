from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from radiant_core.bands import determine_band, table_band
from radiant_core.heat_loss import RoomResults
from radiant_core.materials import (
    InstallMethod,
    calc_loops,
    parse_install_method,
    select_materials,
)
from radiant_core.normalizer import RoomInput
from radiant_core.presets import MAX_LOOP_FT
from radiant_core.units import btu_ft2_to_w_m2


def _room(length: float = 4.0, width: float = 3.0, **kwargs) -> RoomInput:
    base = dict(
        name="R",
        length_m=length,
        width_m=width,
        height_m=2.4,
        install_method="DRILLING",
        joist_spacing=16,
    )
    base.update(kwargs)
    return RoomInput(**base)


def _results(load_btu: float, area_m2: float = 12.0) -> RoomResults:
    load_w_m2 = btu_ft2_to_w_m2(load_btu)
    q = load_w_m2 * area_m2
    return RoomResults(
        name="R",
        area_m2=area_m2,
        q_fabric_w=q,
        q_vent_w=0.0,
        q_psi_w=0.0,
        q_ground_w=0.0,
        q_before_factors_w=q,
        q_after_factors_w=q,
        load_w_per_m2=load_w_m2,
        water_temp_c=40.0,
    )


@pytest.mark.parametrize(
    "load, band",
    [(10.0, "LL"), (24.0, "LL"), (24.01, "HL"), (46.0, "HL"), (46.01, "HighOutput"), (80.0, "HighOutput")],
)
def test_band_lower_edge_inclusive(load: float, band: str) -> None:
    assert determine_band(load) == band


def test_band_rejects_nan_and_maps_high_output() -> None:
    with pytest.raises(ValueError):
        determine_band(float("nan"))
    assert table_band("HighOutput") == "HL"
    with pytest.raises(ValueError):
        table_band("XL")


def test_drilling_16_low_load() -> None:
    mat = select_materials(_results(19.0), _room())
    assert mat.method == "DRILLING"
    assert mat.band == "LL"
    assert mat.tube_size == "16mm"
    assert mat.area_ft2 == pytest.approx(129.1668)
    assert mat.tubing_ft == 97
    assert mat.tubing_m == 30
    assert mat.loops == 1
    assert mat.ft_per_loop == pytest.approx(97.0)
    assert mat.fin_pairs == 72
    assert mat.fin_halves == 144
    assert mat.clip_total == 0
    assert mat.fin_spacing_mm is None
    assert mat.tubing_spacing_mm == 400
    assert mat.fin_block_asset == "FB_16_LL_drilled.svg"
    assert not mat.supplemental_warning


def test_tube_upgrade_and_supplemental_are_separate_thresholds() -> None:
    at_edge = select_materials(_results(45.9), _room())
    assert at_edge.tube_size == "16mm"

    upgraded = select_materials(_results(48.0), _room())
    assert upgraded.tube_size == "20mm"
    assert upgraded.band == "HighOutput"
    assert not upgraded.supplemental_warning

    supplemental = select_materials(_results(50.5), _room())
    assert supplemental.supplemental_warning


def test_hanging_supports_and_loop_split() -> None:
    room = _room(10.0, 10.0, install_method="HANGING_SNAKE", joist_spacing=12)
    mat = select_materials(_results(20.0, area_m2=100.0), room)
    assert mat.tubing_ft == 1077
    assert mat.loops == 4
    assert mat.ft_per_loop == pytest.approx(269.25)
    assert mat.hanging_supports == 431
    assert mat.clip_total == 431
    assert mat.fin_spacing_mm == 530
    assert mat.tubing_spacing_mm is None


def test_open_web_clips() -> None:
    mat = select_materials(_results(20.0), _room(install_method="OPEN_WEB"))
    assert mat.open_web_clips == 37
    assert mat.hanging_supports is None


def test_topdown_clips_take_the_larger_estimate() -> None:
    low = select_materials(_results(20.0), _room(install_method="TOPDOWN_UC_UC1212", joist_spacing=19))
    assert low.fin_halves == 144
    assert low.topdown_clips == 288
    assert low.topdown_uc1212 == 144
    assert low.topdown_uc1234 is None
    assert low.fin_spacing_mm == 360

    high = select_materials(_results(47.0), _room(install_method="TOPDOWN_UC_UC1212", joist_spacing=19))
    assert high.tube_size == "20mm"
    assert high.fin_pairs == 93
    assert high.topdown_clips == 372
    assert high.topdown_uc1212 is None
    assert high.topdown_uc1234 == 186
    assert high.fin_spacing_mm == 280
    assert high.fin_block_asset == "FB_19_HL_parallel.svg"


def test_inslab_ignores_joists() -> None:
    room = _room(install_method="INSLAB", joist_spacing=16)
    mat = select_materials(_results(48.0), room)
    assert mat.joist_spacing is None
    assert mat.tube_size == "16mm"
    assert mat.tubing_ft == 259
    assert mat.fin_pairs == 0
    assert mat.fin_halves == 0
    assert mat.tubing_spacing_mm == 150
    assert mat.spacing_display == '6" (150 mm) on center'
    assert mat.fin_block_asset is None

    low = select_materials(_results(20.0), room)
    assert low.tubing_spacing_mm == 200
    assert low.spacing_display == '8" (200 mm) on center'


def test_method_and_joist_arguments_override_room() -> None:
    mat = select_materials(_results(20.0), _room(), install_method=" open_web ", joist_spacing=24)
    assert mat.method == "OPEN_WEB"
    assert mat.joist_spacing == 24


def test_unknown_method_is_a_hard_error() -> None:
    with pytest.raises(ValueError):
        select_materials(_results(20.0), _room(install_method="STAPLED"))
    assert parse_install_method(InstallMethod.INSLAB) == "INSLAB"


@pytest.mark.parametrize("joist", [None, 14, 16.5])
def test_joist_required_for_joist_methods(joist) -> None:
    with pytest.raises(ValueError):
        select_materials(_results(20.0), _room(joist_spacing=joist))


@pytest.mark.parametrize("tubing_ft", [0.0, 1.0, 299.0, 300.0, 301.0, 899.9, 900.0, 1234.0, 5000.0])
def test_loops_never_exceed_max_and_sum_back(tubing_ft: float) -> None:
    loops, ft_per, m_per = calc_loops(tubing_ft)
    assert loops >= 1
    assert ft_per <= MAX_LOOP_FT
    assert loops * ft_per == pytest.approx(tubing_ft)
    assert m_per == pytest.approx(ft_per * 0.3048)


def test_loops_invariant_over_room_sizes() -> None:
    for side in (1.0, 2.5, 4.0, 7.5, 12.0, 20.0):
        room = _room(side, side, install_method="HANGING_ULTRACLIP")
        mat = select_materials(_results(30.0, area_m2=side * side), room)
        assert mat.ft_per_loop <= MAX_LOOP_FT
        assert mat.loops * mat.ft_per_loop == pytest.approx(mat.tubing_ft)
