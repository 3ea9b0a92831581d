"""
Layout tiling.

Turns room dimensions into a grid of installation blocks and places the
diagram tiles: one fin block per cell plus the connector row above and
below the grid.

- Across-joist runs (DRILLING, OPEN_WEB): each column gets a top and a
  bottom end cap, the run is contained in its bay.
- With-joist runs (hanging, top-down): a serpentine. Column 0 starts with an
  end cap on top, later columns are joined on top by a bridge mirrored from
  the previous column's direction, interior columns are joined at the bottom
  by a bridge oriented by their own direction and the last column ends with
  an end cap.

Known limitation: the grid is floored to whole blocks, the remainder of the
room is not tiled (reported as width/length remainder).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .bands import table_band
from .layout_assets import end_cap_asset, fin_block_asset, pipe_bridge_asset
from .materials import is_across_joist, parse_install_method, parse_joist_spacing
from .presets import BLOCK_SIZE_M, CONNECTOR_WIDTH_FACTOR

logger = logging.getLogger(__name__)

FIN_BLOCK = "FIN_BLOCK"
PIPE_BRIDGE = "PIPE_BRIDGE"
END_CAP = "END_CAP"

_GRID_EPS = 1e-9


@dataclass(frozen=True)
class Tile:
    role: str
    col: int
    row: int
    x: float
    y: float
    w: float
    h: float
    asset: str


@dataclass(frozen=True)
class FloorLayout:
    cols: int
    rows: int
    block_width_m: float
    block_height_m: float
    tiles: tuple[Tile, ...]
    width_remainder_m: float
    length_remainder_m: float

    @property
    def width_m(self) -> float:
        return self.cols * self.block_width_m

    @property
    def height_m(self) -> float:
        return self.rows * self.block_height_m

    @property
    def tiled_area_m2(self) -> float:
        return self.width_m * self.height_m

    def tiles_by_role(self, role: str) -> list[Tile]:
        return [t for t in self.tiles if t.role == role]


def block_size(joist: int, band: str) -> tuple[float, float]:
    return BLOCK_SIZE_M[joist][table_band(band)]


def compute_grid(length_m: float, width_m: float, joist: int, band: str) -> tuple[int, int, float, float]:
    """Returns (cols, rows, block width, block height)."""
    if length_m <= 0 or width_m <= 0:
        raise ValueError("room length and width must be > 0")
    block_w, block_h = block_size(joist, band)
    cols = math.floor(width_m / block_w + _GRID_EPS)
    rows = math.floor(length_m / block_h + _GRID_EPS)
    return cols, rows, block_w, block_h


def build_layout(
    length_m: float,
    width_m: float,
    joist_spacing: int | None,
    band: str,
    install_method: str,
) -> FloorLayout:
    method = parse_install_method(install_method)
    if method == "INSLAB":
        raise ValueError("INSLAB rooms have no joist layout")
    joist = parse_joist_spacing(joist_spacing)

    cols, rows, block_w, block_h = compute_grid(length_m, width_m, joist, band)
    width_rem = max(0.0, width_m - cols * block_w)
    length_rem = max(0.0, length_m - rows * block_h)

    if cols == 0 or rows == 0:
        logger.warning(
            "room %.3f x %.3f m is smaller than one %s block; layout is empty",
            length_m,
            width_m,
            f"{block_w:.3f} x {block_h:.3f} m",
        )
        return FloorLayout(cols, rows, block_w, block_h, (), width_rem, length_rem)
    if width_rem > _GRID_EPS or length_rem > _GRID_EPS:
        logger.debug("untiled remainder: width %.3f m, length %.3f m", width_rem, length_rem)

    across = is_across_joist(method)
    direction = "drilled" if across else "parallel"
    fin_asset = fin_block_asset(joist, table_band(band), direction)

    connector_w = block_w * CONNECTOR_WIDTH_FACTOR[joist]
    top_y = -block_h * 0.5
    bottom_y = rows * block_h - block_h * 0.5

    def connector_x(c: int) -> float:
        return c * block_w + (block_w - connector_w) / 2

    tiles: list[Tile] = []
    for r in range(rows):
        for c in range(cols):
            tiles.append(Tile(FIN_BLOCK, c, r, c * block_w, r * block_h, block_w, block_h, fin_asset))

    if across:
        for c in range(cols):
            tiles.append(
                Tile(END_CAP, c, -1, connector_x(c), top_y, connector_w, block_h, end_cap_asset(joist, "T"))
            )
            tiles.append(
                Tile(END_CAP, c, rows, connector_x(c), bottom_y, connector_w, block_h, end_cap_asset(joist, "B"))
            )
        return FloorLayout(cols, rows, block_w, block_h, tuple(tiles), width_rem, length_rem)

    for c in range(cols):
        is_down = c % 2 == 0

        if c == 0:
            # serpentine start
            tiles.append(
                Tile(END_CAP, c, -1, 0.0, top_y, block_w, block_h, pipe_bridge_asset(joist, "TL"))
            )
        else:
            prev_is_down = (c - 1) % 2 == 0
            tiles.append(
                Tile(
                    PIPE_BRIDGE,
                    c,
                    -1,
                    connector_x(c),
                    top_y,
                    connector_w,
                    block_h,
                    pipe_bridge_asset(joist, "TR" if prev_is_down else "TL"),
                )
            )

        if c == cols - 1:
            # serpentine finish
            tiles.append(
                Tile(END_CAP, c, rows, c * block_w, bottom_y, block_w, block_h, pipe_bridge_asset(joist, "BL"))
            )
        else:
            tiles.append(
                Tile(
                    PIPE_BRIDGE,
                    c,
                    rows,
                    connector_x(c),
                    bottom_y,
                    connector_w,
                    block_h,
                    pipe_bridge_asset(joist, "BR" if is_down else "BL"),
                )
            )

    return FloorLayout(cols, rows, block_w, block_h, tuple(tiles), width_rem, length_rem)
