"""
pattern_generator.py - Tile Pattern Generation
==============================================
Lays tiles out on a lattice anchored at the pattern origin, rotates the
lattice about that origin, and clips every candidate against the available
area.

Every pattern family is described by a ``LatticeLayout``: two step vectors,
a per-cell motif of tile outlines, an optional per-row/column shift and an
id scheme built from absolute lattice indices. The generator itself is
shared by all families.
"""

import logging
import math
import numpy as np
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry
from shapely.prepared import prep

from area_resolver import compute_available_area, room_polygon
from config import Config
from cut_classifier import calculate_tile_area, is_full_tile
from floor_geometry import (
    GeometryUtils, geometry_to_rings, to_multipolygon, transformed_polygon
)
from tile_models import (
    Coord, ErrorKind, OriginPreset, OriginSpec, PatternType, Room,
    TilePlacement, TileShape, TilingResult
)


logger = logging.getLogger(__name__)


def _rect_coords(x: float, y: float, w: float, h: float) -> np.ndarray:
    return np.array([[x, y], [x + w, y], [x + w, y + h], [x, y + h]], dtype=float)


def _no_shift(i: int, j: int) -> Coord:
    return (0.0, 0.0)


@dataclass
class LatticeLayout:
    """Geometry of one pattern family in unrotated lattice space."""
    col_step: np.ndarray
    row_step: np.ndarray
    motif: Callable[[int, int], List[np.ndarray]]
    motif_size: int
    tile_id: Callable[[int, int, int], str]
    full_area: float
    center_offset: Coord
    shift: Callable[[int, int], Coord] = _no_shift

    @property
    def max_step(self) -> float:
        return float(max(np.linalg.norm(self.col_step), np.linalg.norm(self.row_step)))


def detect_bond_period(fraction: float) -> int:
    """
    Row period of a running bond, 0 when the fraction is not 1/n.

    1/2 repeats every 2 rows, 1/3 every 3 rows, and so on up to the
    configured maximum period.
    """
    try:
        frac = float(fraction)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(frac) or frac <= 0:
        return 0
    inverse = 1.0 / frac
    rounded = round(inverse)
    if (abs(inverse - rounded) < Config.TILING['bond_period_epsilon']
            and Config.TILING['bond_period_min'] <= rounded <= Config.TILING['bond_period_max']):
        return int(rounded)
    return 0


def compute_origin_point(origin: OriginSpec,
                         bounds: Tuple[float, float, float, float]) -> Coord:
    """Lattice origin for a preset, relative to the room bounding box."""
    min_x, min_y, max_x, max_y = bounds
    preset = origin.preset
    if preset == OriginPreset.TOP_LEFT:
        return (min_x, min_y)
    if preset == OriginPreset.TOP_RIGHT:
        return (max_x, min_y)
    if preset == OriginPreset.BOTTOM_LEFT:
        return (min_x, max_y)
    if preset == OriginPreset.BOTTOM_RIGHT:
        return (max_x, max_y)
    if preset == OriginPreset.CENTER:
        return ((min_x + max_x) / 2, (min_y + max_y) / 2)
    return (origin.x_cm, origin.y_cm)


class PatternGenerator:
    """Generates clipped tile placements for one room."""

    def __init__(self, room: Room):
        self.room = room
        self.tile = room.tile
        self.pattern = room.pattern
        self.grout = room.grout.width_cm

        self._builders = {
            PatternType.GRID: self._grid_layout,
            PatternType.RUNNING_BOND: self._running_bond_layout,
            PatternType.HERRINGBONE: self._herringbone_layout,
            PatternType.DOUBLE_HERRINGBONE: self._double_herringbone_layout,
            PatternType.BASKETWEAVE: self._basketweave_layout,
            PatternType.VERTICAL_STACK_ALTERNATING: self._vertical_stack_layout,
        }

    def has_valid_dimensions(self) -> bool:
        values = (self.tile.width_cm, self.tile.height_cm, self.grout)
        if not all(math.isfinite(v) for v in values):
            return False
        return self.tile.width_cm > 0 and self.tile.height_cm > 0 and self.grout >= 0

    def build_layout(self) -> LatticeLayout:
        """Pick the lattice for the tile shape and pattern type."""
        if self.tile.shape == TileShape.HEX:
            return self._hex_layout()
        if self.tile.shape == TileShape.RHOMBUS:
            return self._rhombus_layout()
        return self._builders[self.pattern.type]()

    # ------------------------------------------------------------------
    # Layouts
    # ------------------------------------------------------------------

    def _grid_layout(self) -> LatticeLayout:
        tw, th, g = self.tile.width_cm, self.tile.height_cm, self.grout
        outline = _rect_coords(0, 0, tw, th)
        return LatticeLayout(
            col_step=np.array([tw + g, 0.0]),
            row_step=np.array([0.0, th + g]),
            motif=lambda i, j: [outline],
            motif_size=1,
            tile_id=lambda i, j, k: f"r{j}c{i}",
            full_area=tw * th,
            center_offset=(tw / 2, th / 2),
        )

    def _running_bond_layout(self) -> LatticeLayout:
        layout = self._grid_layout()
        row_shift = self.tile.width_cm * self.pattern.bond_fraction
        period = detect_bond_period(self.pattern.bond_fraction) or 2
        # Periodic shift per absolute row, no cumulative drift
        layout.shift = lambda i, j: ((j % period) * row_shift, 0.0)
        return layout

    def _hex_layout(self) -> LatticeLayout:
        tw, g = self.tile.width_cm, self.grout
        r = tw / math.sqrt(3)
        outline = np.array([
            [tw / 2, 0.0], [tw, r / 2], [tw, 1.5 * r],
            [tw / 2, 2 * r], [0.0, 1.5 * r], [0.0, r / 2],
        ])
        step_x = tw + g
        step_y = Config.TILING['hex_step_ratio'] * 2 * (tw + g) / math.sqrt(3)
        return LatticeLayout(
            col_step=np.array([step_x, 0.0]),
            row_step=np.array([0.0, step_y]),
            motif=lambda i, j: [outline],
            motif_size=1,
            tile_id=lambda i, j, k: f"hex-r{j}c{i}",
            full_area=calculate_tile_area(tw, tw, TileShape.HEX),
            center_offset=(tw / 2, r),
            shift=lambda i, j: ((j % 2) * step_x / 2, 0.0),
        )

    def _rhombus_layout(self) -> LatticeLayout:
        tw, th, g = self.tile.width_cm, self.tile.height_cm, self.grout
        outline = np.array([[tw / 2, 0.0], [tw, th / 2], [tw / 2, th], [0.0, th / 2]])
        step_x = tw + g
        return LatticeLayout(
            col_step=np.array([step_x, 0.0]),
            row_step=np.array([0.0, (th + g) / 2]),
            motif=lambda i, j: [outline],
            motif_size=1,
            tile_id=lambda i, j, k: f"rh-r{j}c{i}",
            full_area=calculate_tile_area(tw, th, TileShape.RHOMBUS),
            center_offset=(tw / 2, th / 2),
            shift=lambda i, j: ((j % 2) * step_x / 2, 0.0),
        )

    def _herringbone_cells(self, slot: float, slot_tiles: int) -> Tuple[np.ndarray, np.ndarray, List[np.ndarray]]:
        """
        Sheared herringbone lattice for slots of the given width.

        A horizontal slot [0, L] x [0, slot] and a vertical slot standing
        to its right, ending flush with the horizontal slot's far edge,
        tile the plane under the vectors (S', S') and (L', -L').
        """
        L, W, g = self.tile.long_side, self.tile.short_side, self.grout
        long_step, slot_step = L + g, slot + g
        outlines = []
        for n in range(slot_tiles):
            outlines.append(_rect_coords(0.0, n * (W + g), L, W))
        for n in range(slot_tiles):
            outlines.append(_rect_coords(L + g + n * (W + g), slot - L, W, L))
        row_step = np.array([slot_step, slot_step])
        col_step = row_step + np.array([long_step, -long_step])
        return col_step, row_step, outlines

    def _herringbone_layout(self) -> LatticeLayout:
        L, W = self.tile.long_side, self.tile.short_side
        col_step, row_step, outlines = self._herringbone_cells(W, 1)
        return LatticeLayout(
            col_step=col_step,
            row_step=row_step,
            motif=lambda i, j: outlines,
            motif_size=len(outlines),
            tile_id=lambda i, j, k: f"hb-{j}-{i}-{k}",
            full_area=L * W,
            center_offset=(L / 2, W / 2),
        )

    def _double_herringbone_layout(self) -> LatticeLayout:
        L, W, g = self.tile.long_side, self.tile.short_side, self.grout
        col_step, row_step, outlines = self._herringbone_cells(2 * W + g, 2)
        return LatticeLayout(
            col_step=col_step,
            row_step=row_step,
            motif=lambda i, j: outlines,
            motif_size=len(outlines),
            tile_id=lambda i, j, k: f"dhb-{j}-{i}-{k}",
            full_area=L * W,
            center_offset=(L / 2, W + g / 2),
        )

    def _basketweave_layout(self) -> LatticeLayout:
        L, W, g = self.tile.long_side, self.tile.short_side, self.grout
        tiles_per_stack = max(1, int(math.floor(L / W + 0.5)))
        stack = tiles_per_stack * W + (tiles_per_stack - 1) * g
        block = max(L, stack)
        horizontal = [_rect_coords(0.0, n * (W + g), L, W) for n in range(tiles_per_stack)]
        vertical = [_rect_coords(n * (W + g), 0.0, W, L) for n in range(tiles_per_stack)]
        return LatticeLayout(
            col_step=np.array([block + g, 0.0]),
            row_step=np.array([0.0, block + g]),
            motif=lambda i, j: horizontal if (i + j) % 2 == 0 else vertical,
            motif_size=tiles_per_stack,
            tile_id=lambda i, j, k: f"bw-{j}-{i}-{k}",
            full_area=L * W,
            center_offset=(block / 2, block / 2),
        )

    def _vertical_stack_layout(self) -> LatticeLayout:
        L, W, g = self.tile.long_side, self.tile.short_side, self.grout
        outline = _rect_coords(0.0, 0.0, W, L)
        return LatticeLayout(
            col_step=np.array([W + g, 0.0]),
            row_step=np.array([0.0, L + g]),
            motif=lambda i, j: [outline],
            motif_size=1,
            tile_id=lambda i, j, k: f"vsa-r{j}c{i}",
            full_area=L * W,
            center_offset=(W / 2, L / 2),
            shift=lambda i, j: (0.0, (i % 2) * (L + g) / 2),
        )

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _lattice_ranges(self, layout: LatticeLayout, bounds, origin: Coord,
                        anchor: np.ndarray, angle: float) -> Tuple[range, range]:
        """Column/row index ranges covering the inverse-rotated room bounds."""
        min_x, min_y, max_x, max_y = bounds
        corners = np.array([[min_x, min_y], [max_x, min_y], [max_x, max_y], [min_x, max_y]])
        local = GeometryUtils.rotate_points(corners, origin, -angle)

        margin = Config.TILING['margin_multiplier'] * layout.max_step
        lo = local.min(axis=0) - margin
        hi = local.max(axis=0) + margin
        box_corners = np.array([[lo[0], lo[1]], [hi[0], lo[1]], [hi[0], hi[1]], [lo[0], hi[1]]])

        basis = np.column_stack([layout.col_step, layout.row_step])
        ij = np.linalg.solve(basis, (box_corners - anchor).T).T
        i_min, j_min = np.floor(ij.min(axis=0)).astype(int)
        i_max, j_max = np.ceil(ij.max(axis=0)).astype(int)
        return range(int(i_min), int(i_max) + 1), range(int(j_min), int(j_max) + 1)

    def _clip(self, tile_id: str, coords: np.ndarray, origin: Coord, angle: float,
              available: BaseGeometry, prepared, full_area: float) -> Optional[TilePlacement]:
        tile_poly = transformed_polygon(coords, origin, angle)
        if not prepared.intersects(tile_poly):
            return None
        if prepared.contains(tile_poly):
            clipped = tile_poly
        else:
            clipped = to_multipolygon(available.intersection(tile_poly))
            if clipped.is_empty:
                return None
        area = float(clipped.area)
        return TilePlacement(
            id=tile_id,
            boundary=geometry_to_rings(clipped),
            is_full=is_full_tile(area, full_area),
            area=area,
        )

    def generate(self, available: Optional[BaseGeometry],
                 include_excluded: bool = False) -> TilingResult:
        """Generate placements in row-major lattice order."""
        if not self.has_valid_dimensions():
            logger.debug(f"Invalid tile/grout dimensions for room '{self.room.id}'")
            return TilingResult()
        if available is None or available.is_empty:
            return TilingResult()

        footprint = room_polygon(self.room).area
        bounds = footprint.bounds if footprint is not None and not footprint.is_empty \
            else available.bounds

        origin = compute_origin_point(self.pattern.origin, bounds)
        angle = self.pattern.rotation_deg
        layout = self.build_layout()

        anchor = np.array([origin[0] + self.pattern.offset_x_cm,
                           origin[1] + self.pattern.offset_y_cm])
        if self.pattern.origin.preset == OriginPreset.CENTER:
            anchor -= np.asarray(layout.center_offset)

        cols, rows = self._lattice_ranges(layout, bounds, origin, anchor, angle)
        estimated = len(cols) * len(rows) * layout.motif_size
        if estimated > Config.TILING['max_preview_tiles']:
            logger.warning(f"Tile cap hit for room '{self.room.id}': {estimated} candidates")
            return TilingResult(error=f"Too many tiles for preview ({estimated}).",
                                error_kind=ErrorKind.TOO_MANY_TILES)

        logger.debug(f"Room '{self.room.id}': {self.pattern.type.value} "
                     f"{len(rows)} rows x {len(cols)} cols, ~{estimated} candidates")

        prepared = prep(available)
        excluded_ids = self.room.excluded_tiles
        tiles = []

        for j in rows:
            for i in cols:
                dx, dy = layout.shift(i, j)
                cell = anchor + i * layout.col_step + j * layout.row_step + np.array([dx, dy])

                for k, outline in enumerate(layout.motif(i, j)):
                    tile_id = layout.tile_id(i, j, k)
                    excluded = tile_id in excluded_ids
                    if excluded and not include_excluded:
                        continue

                    try:
                        placement = self._clip(tile_id, outline + cell, origin, angle,
                                               available, prepared, layout.full_area)
                    except ShapelyError as e:
                        logger.error(f"Tile {tile_id} clipping failed: {e}")
                        return TilingResult(error=str(e),
                                            error_kind=ErrorKind.GEOMETRY_OPERATION_FAILED)

                    if placement is None:
                        continue
                    placement.excluded = excluded
                    tiles.append(placement)

        result = TilingResult(tiles=tiles)
        logger.debug(f"Room '{self.room.id}': {result.full_count} full, {result.cut_count} cut")
        return result


def tiles_for_preview(room: Room, available_area: Optional[BaseGeometry] = None,
                      include_excluded: bool = False) -> TilingResult:
    """
    Tile placements for a room.

    When no available area is passed it is resolved from the room's own
    exclusions first.
    """
    if available_area is None:
        available_area = compute_available_area(room).area
    return PatternGenerator(room).generate(available_area, include_excluded)
