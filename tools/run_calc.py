#!/usr/bin/env python3

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]

# Allow running as "python tools/run_calc.py" (so repo root is importable)
sys.path.insert(0, str(ROOT))

from radiant_core import aggregate, build_layout  # noqa: E402
from radiant_core.project_file import ProjectFileError, load_project  # noqa: E402
from radiant_core.units import format_power, format_power_density, format_spacing  # noqa: E402


def _print_layout(report) -> None:
    mat = report.materials
    if mat.method == "INSLAB":
        print("  layout: none (in-slab)")
        return
    room = report.room
    layout = build_layout(room.length_m, room.width_m, mat.joist_spacing, mat.band, mat.method)
    print(
        "  layout:",
        f"{layout.cols}x{layout.rows}",
        "block_m=",
        f"{layout.block_width_m:.3f}x{layout.block_height_m:.3f}",
        "tiles=",
        len(layout.tiles),
        "remainder_m=",
        f"{layout.width_remainder_m:.3f}/{layout.length_remainder_m:.3f}",
    )


def main() -> int:
    ap = argparse.ArgumentParser(
        description="Run heat loss, material selection and project summary for a project file."
    )
    ap.add_argument("--project", required=True, help="Path to project file (YAML or JSON)")
    ap.add_argument("--room", default=None, help="Only report this room (summary still covers all rooms).")
    ap.add_argument("--layout", action="store_true", help="Also build the tile layout per room.")
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: WARNING).",
    )
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        project = load_project(Path(args.project))
    except ProjectFileError as exc:
        print("ERROR")
        for message in exc.messages:
            print("error:", message)
        return 2

    if args.room is not None:
        try:
            project.room(args.room)
        except KeyError as exc:
            print("ERROR")
            print("error:", exc.args[0])
            return 2

    region = project.settings_si.region
    summary = aggregate(project.rooms, project.settings_si)

    print("OK")
    print("project:", str(args.project))
    print("region:", region)
    print("standards_mode:", project.settings_si.standards_mode)
    for report in summary.rooms:
        if args.room is not None and report.room.name != args.room:
            continue
        res = report.results
        mat = report.materials
        print(
            "room:",
            report.room.name,
            "load=",
            format_power(region, res.q_after_factors_w),
            "density=",
            format_power_density(region, res.load_w_per_m2),
            "water_c=",
            round(res.water_temp_c, 1),
            "band=",
            mat.band,
            "tube=",
            mat.tube_size,
            "tubing_ft=",
            mat.tubing_ft,
            "loops=",
            mat.loops,
            "fins=",
            mat.fin_pairs,
            "clips=",
            mat.clip_total,
        )
        if args.layout:
            _print_layout(report)

    print("rooms:", summary.room_count)
    print("total_load:", format_power(region, summary.total_load_w))
    print("avg_density:", format_power_density(region, summary.avg_load_w_per_m2))
    print("avg_water_c:", round(summary.avg_water_temp_c, 1))
    print("total_tubing_ft:", summary.total_tubing_ft)
    print("total_loops:", summary.total_loops)
    print("total_fin_pairs:", summary.total_fin_pairs)
    print("total_clips:", summary.total_clips)
    print("fin_spacing:", format_spacing(region, summary.fin_spacing_mm))
    print("tubing_spacing:", format_spacing(region, summary.tubing_spacing_mm))
    for note in summary.notes:
        print("note:", note)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
