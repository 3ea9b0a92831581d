"""
Project input files.

A project file is YAML (or JSON, picked by the .json suffix) with two keys:

    project:
      region: UK
      indoor_temp: 21
      outdoor_temp: -5
      display_units: false     # optional, values entered in the region's units
      region_defaults: false   # optional, fill unset factors from the region table
      ...
    rooms:
      - name: Lounge
        length_m: 4
        ...

Every validation message is collected before anything is calculated; the
loader raises ProjectFileError listing all of them at once.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import pandas as pd
import yaml

from .normalizer import (
    ProjectSettings,
    ProjectSettingsSI,
    RoomInput,
    apply_region_defaults,
    normalize,
    normalize_room,
)
from .validation import (
    ROOM_COLUMNS,
    ROOM_FLAGS,
    ensure_room_valid,
    validate_project,
    validate_rooms,
)

logger = logging.getLogger(__name__)

_SETTINGS_FIELDS = {f.name for f in fields(ProjectSettings)}
_ROOM_FIELDS = {f.name for f in fields(RoomInput)}
_NUMERIC_SETTINGS = (
    "indoor_temp",
    "outdoor_temp",
    "safety_factor_pct",
    "heat_up_factor_pct",
    "psi_allowance",
    "mech_vent",
    "infiltration_ach",
)


class ProjectFileError(ValueError):
    def __init__(self, source: str, messages: list[str]) -> None:
        self.source = source
        self.messages = list(messages)
        super().__init__(f"{source}: " + "; ".join(self.messages))


@dataclass(frozen=True)
class Project:
    name: str | None
    settings: ProjectSettings
    settings_si: ProjectSettingsSI
    rooms: tuple[RoomInput, ...]
    display_units: bool = False

    def room(self, name: str) -> RoomInput:
        for room in self.rooms:
            if room.name == name:
                return room
        raise KeyError(f"Room not found: {name}")


def read_document(path: str | Path) -> dict:
    project_path = Path(path)
    text = project_path.read_text(encoding="utf-8")
    try:
        if project_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ProjectFileError(str(project_path), [f"cannot parse file: {exc}"]) from exc
    if not isinstance(data, dict):
        raise ProjectFileError(str(project_path), ["root must be a mapping"])
    return data


def rooms_table(rooms: list[dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame.from_records(rooms)
    for column in ROOM_COLUMNS:
        if column not in df.columns:
            df[column] = None
    return df


def _present(raw: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in raw.items() if v is not None and v != ""}


def _room_from_dict(raw: dict[str, Any]) -> RoomInput:
    values = _present(raw)
    values["name"] = str(values["name"]).strip()
    values["install_method"] = str(values["install_method"]).strip().upper()
    if values["install_method"] == "INSLAB":
        values.pop("joist_spacing", None)
    elif "joist_spacing" in values:
        values["joist_spacing"] = int(float(values["joist_spacing"]))
    for key in ROOM_FLAGS:
        if key in values:
            values[key] = bool(values[key])
    for key in ("length_m", "width_m", "height_m", "exterior_len_m", "window_area_m2", "door_area_m2", "setpoint_c"):
        if key in values:
            values[key] = float(values[key])
    return RoomInput(**values)


def _settings_from_dict(raw: dict[str, Any]) -> ProjectSettings:
    """Validated values as typed settings; quoted numbers become floats."""
    values = _present(raw)
    for key in _NUMERIC_SETTINGS:
        if key in values:
            values[key] = float(values[key])
    if "u_overrides" in values:
        values["u_overrides"] = {k: float(v) for k, v in _present(values["u_overrides"]).items()}
    return ProjectSettings(**values)


def parse_project(data: dict[str, Any], *, source: str = "<project>") -> Project:
    project_raw = data.get("project")
    rooms_raw = data.get("rooms")
    messages: list[str] = []
    if not isinstance(project_raw, dict):
        messages.append("'project' must be a mapping")
    if not isinstance(rooms_raw, list) or not all(isinstance(r, dict) for r in rooms_raw or []):
        messages.append("'rooms' must be a list of mappings")
    if messages:
        raise ProjectFileError(source, messages)

    project_raw = dict(project_raw)
    project_name = project_raw.pop("name", None)
    display_units = bool(project_raw.pop("display_units", False))
    region_defaults = bool(project_raw.pop("region_defaults", False))

    if display_units and region_defaults:
        # the region table is SI
        messages.append("region_defaults cannot be combined with display_units")
    unknown = sorted(set(project_raw) - _SETTINGS_FIELDS)
    if unknown:
        messages.append(f"unknown project keys: {', '.join(unknown)}")
    for idx, room_raw in enumerate(rooms_raw):
        unknown_room = sorted(set(room_raw) - _ROOM_FIELDS)
        if unknown_room:
            label = room_raw.get("name") or f"row#{idx}"
            messages.append(f"{label}: unknown room keys: {', '.join(unknown_room)}")
    if messages:
        raise ProjectFileError(source, messages)

    messages.extend(validate_project(project_raw, display_units=display_units))
    rooms_result = validate_rooms(rooms_table(rooms_raw))
    messages.extend(rooms_result.errors)
    if messages:
        raise ProjectFileError(source, messages)
    for warning in rooms_result.warnings:
        logger.warning("%s: %s", source, warning)

    settings = _settings_from_dict(project_raw)
    if region_defaults:
        settings = apply_region_defaults(settings)
    settings_si = normalize(settings, display_units=display_units)

    rooms: list[RoomInput] = []
    for room_raw in rooms_raw:
        room = normalize_room(_room_from_dict(room_raw), settings.region, display_units=display_units)
        ensure_room_valid(room)
        rooms.append(room)

    logger.info("loaded %s: region=%s rooms=%d", source, settings.region, len(rooms))
    return Project(
        name=str(project_name) if project_name is not None else None,
        settings=settings,
        settings_si=settings_si,
        rooms=tuple(rooms),
        display_units=display_units,
    )


def load_project(path: str | Path) -> Project:
    project_path = Path(path)
    if not project_path.exists():
        raise FileNotFoundError(f"Project file not found: {project_path}")
    return parse_project(read_document(project_path), source=str(project_path))
