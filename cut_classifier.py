"""
cut_classifier.py - Full/Cut Classification and Cut Analysis
============================================================
Decides whether a clipped placement is a full tile and measures cut pieces
so that complementary triangular cuts can be paired later.
"""

import logging
import math
from typing import Optional

from config import Config
from floor_geometry import GeometryUtils
from tile_models import (
    Boundary, BoundingBox, CutAnalysis, TilePlacement, TileShape
)


logger = logging.getLogger(__name__)


def is_full_tile(clipped_area: float, full_area: float,
                 tolerance: Optional[float] = None) -> bool:
    """True when the clipped area reaches the full tile area within tolerance."""
    if tolerance is None:
        tolerance = Config.TILING['tile_area_tolerance']
    if full_area <= 0:
        return False
    return clipped_area >= full_area * tolerance


def calculate_tile_area(width: float, height: float, shape=TileShape.RECT) -> float:
    """Area of one uncut tile for the given outline."""
    shape = TileShape.parse(shape)
    if shape == TileShape.HEX:
        # Flat-to-flat width w gives circumradius w / sqrt(3)
        radius = width / math.sqrt(3)
        return (3 * math.sqrt(3) / 2) * radius * radius
    if shape == TileShape.RHOMBUS:
        return width * height / 2
    if shape == TileShape.SQUARE:
        return width * width
    return width * height


def bbox_from_boundary(boundary: Boundary) -> Optional[BoundingBox]:
    """Bounding box over every ring point, None when there are none."""
    bounds = GeometryUtils.get_bounding_box(GeometryUtils.boundary_points(boundary))
    if bounds is None:
        return None
    min_x, min_y, max_x, max_y = bounds
    return BoundingBox(min_x, min_y, max_x - min_x, max_y - min_y)


def analyze_cut_tile(placement: TilePlacement) -> Optional[CutAnalysis]:
    """
    Measure a cut placement.

    Returns None for degenerate boundaries (no points or a zero-area
    bounding box); such placements take no part in pairing.
    """
    bbox = bbox_from_boundary(placement.boundary)
    if bbox is None or bbox.area <= 0:
        logger.debug(f"Degenerate boundary for placement {placement.id}")
        return None

    actual_area = GeometryUtils.boundary_area(placement.boundary)
    ratio = actual_area / bbox.area
    lo = Config.CUT_ANALYSIS['triangular_min_ratio']
    hi = Config.CUT_ANALYSIS['triangular_max_ratio']

    return CutAnalysis(
        bbox=bbox,
        bbox_area=bbox.area,
        actual_area=actual_area,
        area_ratio=ratio,
        is_triangular_cut=lo <= ratio <= hi,
    )
