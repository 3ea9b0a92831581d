#!/usr/bin/env python3

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from radiant_core import aggregate  # noqa: E402
from radiant_core.export_payload import build_payload  # noqa: E402
from radiant_core.export_rows import results_frame, summary_frame, write_csv  # noqa: E402
from radiant_core.project_file import Project, ProjectFileError, load_project  # noqa: E402


def export_json(project: Project, out_path: Path) -> None:
    payload = build_payload(project.settings_si, project.rooms, project_name=project.name)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def export_csv(project: Project, out_path: Path) -> Path:
    """Writes the per-room table to out_path and the totals next to it."""
    summary = aggregate(project.rooms, project.settings_si)
    write_csv(results_frame(summary.rooms), out_path)
    summary_path = out_path.with_name(f"{out_path.stem}_summary.csv")
    write_csv(summary_frame(summary), summary_path)
    return summary_path


def main() -> int:
    ap = argparse.ArgumentParser(description="Export project results to JSON or CSV.")
    ap.add_argument("--project", required=True, help="Path to project file (YAML or JSON)")
    ap.add_argument("--format", choices=["json", "csv"], required=True, help="Export format")
    ap.add_argument("--out", required=True, help="Output file path")
    ap.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging level (default: WARNING).",
    )
    args = ap.parse_args()

    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    project_path = Path(args.project)
    out_path = Path(args.out)
    try:
        project = load_project(project_path)
    except ProjectFileError as exc:
        print("ERROR")
        for message in exc.messages:
            print("error:", message)
        return 2

    summary_path = None
    if args.format == "json":
        export_json(project, out_path)
    else:
        summary_path = export_csv(project, out_path)

    print("OK")
    print("project:", str(project_path))
    print("rooms:", len(project.rooms))
    print("out:", str(out_path))
    if summary_path is not None:
        print("summary:", str(summary_path))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
