"""
radiant_core: calculation core of the radiant floor designer.

Pipeline (each stage is a pure function of its inputs):
- normalize: regional display units and insulation presets -> SI settings
- calculate_room: fabric / ventilation / bridging / ground loss, water temperature
- select_materials: load band, tube size, tubing, loops, fins, clips, spacing
- build_layout: fin-block grid with end caps and pipe bridges
- aggregate: project summary over all rooms

Rendering, storage and the form UI live outside the core; layout tiles only
carry asset keys.
"""

from .aggregation import VARIES, ProjectSummary, RoomReport, aggregate
from .bands import determine_band
from .heat_loss import RoomResults, calculate_room
from .layout import FloorLayout, Tile, build_layout
from .materials import MaterialSelection, select_materials
from .normalizer import ProjectSettings, ProjectSettingsSI, RoomInput, normalize, normalize_room

__all__ = [
    "VARIES",
    "FloorLayout",
    "MaterialSelection",
    "ProjectSettings",
    "ProjectSettingsSI",
    "ProjectSummary",
    "RoomInput",
    "RoomReport",
    "RoomResults",
    "Tile",
    "aggregate",
    "build_layout",
    "calculate_room",
    "determine_band",
    "normalize",
    "normalize_room",
    "select_materials",
]
