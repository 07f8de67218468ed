"""
Floor Geometry Module
=====================
Handles polygon operations, area calculations, and geometric transformations
shared by the area resolver, pattern generator and skirting segmenter.

Geometry travels between modules in two forms: shapely geometries for the
boolean operations, and plain ring lists (see ``tile_models.Boundary``) for
placements handed to callers.
"""

import logging
import math
import numpy as np
from typing import List, Tuple, Optional, Iterable
from shapely.geometry import Polygon, MultiPolygon, GeometryCollection, box
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from shapely.validation import make_valid

from tile_models import Point, Coord, Ring, Boundary


logger = logging.getLogger(__name__)


def clean_coord(value: float) -> float:
    """Round away float noise and normalize -0.0."""
    return round(float(value), 6) + 0.0


class GeometryUtils:
    """Utility functions for geometric operations."""

    @staticmethod
    def rotation_matrix(angle_deg: float) -> np.ndarray:
        """2x2 counter-clockwise rotation matrix."""
        theta = math.radians(angle_deg)
        c, s = math.cos(theta), math.sin(theta)
        return np.array([[c, -s], [s, c]])

    @staticmethod
    def rotate_points(points: np.ndarray, origin: Coord, angle_deg: float) -> np.ndarray:
        """Rotate an (n, 2) array of points about origin."""
        if not angle_deg:
            return np.asarray(points, dtype=float)
        pts = np.asarray(points, dtype=float) - np.asarray(origin, dtype=float)
        return pts @ GeometryUtils.rotation_matrix(angle_deg).T + np.asarray(origin, dtype=float)

    @staticmethod
    def rotate_point(point: Coord, origin: Coord, angle_deg: float) -> Coord:
        """Rotate a single point about origin."""
        x, y = GeometryUtils.rotate_points(np.array([point]), origin, angle_deg)[0]
        return (float(x), float(y))

    @staticmethod
    def ring_area(ring: Ring) -> float:
        """
        Calculate area of a ring using the shoelace formula.
        Orientation does not matter; the result is never negative.
        """
        if len(ring) < 3:
            return 0.0
        pts = np.asarray(ring, dtype=float)
        x, y = pts[:, 0], pts[:, 1]
        return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0)

    @staticmethod
    def boundary_area(boundary: Boundary) -> float:
        """Sum of outer ring areas minus their holes."""
        total = 0.0
        for poly in boundary:
            if not poly:
                continue
            area = GeometryUtils.ring_area(poly[0])
            for hole in poly[1:]:
                area -= GeometryUtils.ring_area(hole)
            total += max(0.0, area)
        return total

    @staticmethod
    def boundary_points(boundary: Boundary) -> List[Coord]:
        """All ring points of a boundary, outer rings and holes alike."""
        return [pt for poly in boundary for ring in poly for pt in ring]

    @staticmethod
    def get_bounding_box(points: Iterable[Coord]) -> Optional[Tuple[float, float, float, float]]:
        """Get (min_x, min_y, max_x, max_y) for a set of points."""
        pts = list(points)
        if not pts:
            return None
        arr = np.asarray(pts, dtype=float)
        if not np.all(np.isfinite(arr)):
            return None
        return (float(arr[:, 0].min()), float(arr[:, 1].min()),
                float(arr[:, 0].max()), float(arr[:, 1].max()))


# ============================================================================
# SHAPELY CONVERSIONS
# ============================================================================

def polygonal_parts(geom: Optional[BaseGeometry]) -> List[Polygon]:
    """Extract the non-empty polygons of any geometry."""
    if geom is None or geom.is_empty:
        return []
    if isinstance(geom, Polygon):
        return [geom]
    if isinstance(geom, (MultiPolygon, GeometryCollection)):
        parts = []
        for g in geom.geoms:
            parts.extend(polygonal_parts(g))
        return parts
    return []


def to_multipolygon(geom: Optional[BaseGeometry]) -> MultiPolygon:
    """Normalize a kernel result to a MultiPolygon, dropping lines and points."""
    parts = [p for p in polygonal_parts(geom) if p.area > 0]
    return MultiPolygon(parts)


def geometry_to_rings(geom: Optional[BaseGeometry]) -> Boundary:
    """Convert a geometry to closed ring lists: [[outer, *holes], ...]."""
    boundary = []
    for poly in polygonal_parts(geom):
        poly = orient(poly, sign=1.0)
        rings = [[(clean_coord(x), clean_coord(y)) for x, y in poly.exterior.coords]]
        for interior in poly.interiors:
            rings.append([(clean_coord(x), clean_coord(y)) for x, y in interior.coords])
        boundary.append(rings)
    return boundary


def rings_to_geometry(boundary: Boundary) -> MultiPolygon:
    """Build a MultiPolygon from ring lists."""
    polys = []
    for poly in boundary:
        if not poly or len(poly[0]) < 3:
            continue
        polys.append(Polygon(poly[0], [h for h in poly[1:] if len(h) >= 3]))
    return to_multipolygon(make_valid(MultiPolygon(polys))) if polys else MultiPolygon()


# ============================================================================
# SHAPE BUILDERS
# ============================================================================

def rect_polygon(x: float, y: float, width: float, height: float) -> Optional[Polygon]:
    """Axis-aligned rectangle, None when degenerate."""
    if width <= 0 or height <= 0:
        return None
    return box(x, y, x + width, y + height)


def polygon_from_points(points: List[Point]) -> Optional[BaseGeometry]:
    """Polygon from vertices; self-intersections are repaired."""
    coords = [(p.x, p.y) for p in points]
    if len(coords) < 3:
        return None
    if not all(math.isfinite(c) for pt in coords for c in pt):
        return None
    poly = Polygon(coords)
    if not poly.is_valid:
        parts = polygonal_parts(make_valid(poly))
        if not parts:
            return None
        poly = parts[0] if len(parts) == 1 else MultiPolygon(parts)
    if poly.is_empty or poly.area <= 0:
        return None
    return poly


def circle_polygon(cx: float, cy: float, r: float, steps: int) -> Optional[Polygon]:
    """Regular N-gon approximating a circle."""
    if r <= 0 or steps < 3:
        return None
    angles = np.arange(steps) * (2 * math.pi / steps)
    coords = np.column_stack([cx + r * np.cos(angles), cy + r * np.sin(angles)])
    return Polygon(coords)


def transformed_polygon(coords: List[Coord], origin: Coord, angle_deg: float) -> Polygon:
    """Polygon from local coordinates rotated about origin."""
    pts = GeometryUtils.rotate_points(np.asarray(coords, dtype=float), origin, angle_deg)
    return Polygon(pts)
