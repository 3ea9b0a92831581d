from __future__ import annotations

import json
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from radiant_core.export_payload import PAYLOAD_VERSION, build_payload
from radiant_core.project_file import load_project

SAMPLE = ROOT / "samples" / "demo_project.yaml"


def test_build_payload_smoke() -> None:
    project = load_project(SAMPLE)
    payload = build_payload(
        project.settings_si,
        project.rooms,
        generated_at="2026-01-01T00:00:00+00:00",
        project_name=project.name,
    )

    assert payload["version"] == PAYLOAD_VERSION
    assert payload["generated_at"] == "2026-01-01T00:00:00+00:00"
    for key in ("project", "rooms", "summary"):
        assert key in payload

    assert payload["project"]["name"] == "Demo bungalow"
    assert payload["project"]["region"] == "UK"
    assert set(payload["project"]["u_values"]) == {"wall", "window", "door", "roof", "floor"}

    rooms = {room["name"]: room for room in payload["rooms"]}
    assert list(rooms) == ["Lounge", "Kitchen", "Bedroom", "Bathroom"]

    lounge = rooms["Lounge"]
    assert lounge["materials"]["method"] == "DRILLING"
    assert lounge["layout"]["cols"] > 0
    assert lounge["layout"]["tiles"][0]["role"] == "FIN_BLOCK"
    assert lounge["sidebar"]["label"] == "Drilling"

    bath = rooms["Bathroom"]
    assert bath["layout"] is None
    assert bath["materials"]["fin_pairs"] == 0
    assert bath["sidebar"]["profiles"] == []

    summary = payload["summary"]
    assert summary["room_count"] == 4
    assert summary["total_load_w"] == pytest.approx(
        sum(r["results"]["q_after_factors_w"] for r in payload["rooms"])
    )

    # JSON-ready
    json.dumps(payload)


def test_build_payload_requires_si_settings() -> None:
    project = load_project(SAMPLE)
    with pytest.raises(TypeError):
        build_payload(project.settings, project.rooms)


def test_export_results_json_cli_smoke(tmp_path: Path) -> None:
    tool_path = ROOT / "tools" / "export_results.py"
    out_path = tmp_path / "payload.json"
    cmd = [
        sys.executable,
        str(tool_path),
        "--project",
        str(SAMPLE),
        "--format",
        "json",
        "--out",
        str(out_path),
    ]
    proc = subprocess.run(cmd, check=True, cwd=str(ROOT), capture_output=True, text=True)
    assert proc.stdout.startswith("OK")

    data = json.loads(out_path.read_text(encoding="utf-8"))
    assert data["version"] == PAYLOAD_VERSION
    assert len(data["rooms"]) == 4
