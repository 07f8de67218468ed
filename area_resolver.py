"""
area_resolver.py - Room and Available Area Resolution
=====================================================
Builds the room footprint polygon and subtracts exclusions to obtain the
area that actually receives tiles.
"""

import logging
from typing import List, Optional

from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from config import Config
from floor_geometry import (
    circle_polygon, polygon_from_points, rect_polygon, to_multipolygon
)
from tile_models import AreaResult, Exclusion, ExclusionType, Room


logger = logging.getLogger(__name__)


def room_polygon(room: Room) -> AreaResult:
    """
    Room footprint as a MultiPolygon.

    Freeform vertices take precedence, then the union of sections, then
    the plain width x height rectangle.
    """
    try:
        if len(room.polygon_vertices) >= 3:
            poly = polygon_from_points(room.polygon_vertices)
            if poly is not None:
                return AreaResult(area=to_multipolygon(poly))

        sections = [s for s in room.get_sections() if s.is_valid]
        rects = [rect_polygon(s.x, s.y, s.width_cm, s.height_cm) for s in sections]
        rects = [r for r in rects if r is not None]
        if not rects:
            return AreaResult(area=to_multipolygon(None))
        if len(rects) == 1:
            return AreaResult(area=to_multipolygon(rects[0]))
        return AreaResult(area=to_multipolygon(unary_union(rects)))
    except ShapelyError as e:
        logger.error(f"Room polygon failed for room '{room.id}': {e}")
        return AreaResult(area=to_multipolygon(None), error=str(e))


def exclusion_to_polygon(ex: Exclusion) -> Optional[BaseGeometry]:
    """Polygon for one exclusion, None when unknown or degenerate."""
    if ex.type == ExclusionType.RECT:
        return rect_polygon(ex.x, ex.y, ex.w, ex.h)
    if ex.type == ExclusionType.CIRCLE:
        return circle_polygon(ex.cx, ex.cy, ex.r, Config.TILING['circle_steps'])
    if ex.type == ExclusionType.TRIANGLE:
        if len(ex.points) != 3:
            return None
        return polygon_from_points(ex.points)
    if ex.type == ExclusionType.FREEFORM:
        return polygon_from_points(ex.points)
    return None


def compute_exclusions_union(exclusions: Optional[List[Exclusion]]) -> AreaResult:
    """Union of all exclusion polygons; area is None when nothing to subtract."""
    if not exclusions:
        return AreaResult()

    polys = [p for p in (exclusion_to_polygon(ex) for ex in exclusions) if p is not None]
    if not polys:
        return AreaResult()

    try:
        return AreaResult(area=to_multipolygon(unary_union(polys)))
    except ShapelyError as e:
        logger.error(f"Exclusion union failed: {e}")
        return AreaResult(error=str(e))


def compute_available_area(room: Room, exclusions: Optional[List[Exclusion]] = None) -> AreaResult:
    """
    Room polygon minus the union of exclusions.

    Never raises: kernel failures are logged and reported through
    ``AreaResult.error`` with the room polygon returned as fallback.
    """
    if exclusions is None:
        exclusions = room.exclusions

    room_result = room_polygon(room)
    if room_result.error:
        return room_result

    union_result = compute_exclusions_union(exclusions)
    if union_result.area is None:
        return AreaResult(area=room_result.area, error=union_result.error)

    try:
        available = to_multipolygon(room_result.area.difference(union_result.area))
    except ShapelyError as e:
        logger.error(f"Available area difference failed for room '{room.id}': {e}")
        return AreaResult(area=room_result.area, error=str(e))

    logger.debug(f"Available area for room '{room.id}': {available.area:.1f} cm² "
                 f"of {room_result.area.area:.1f} cm²")
    return AreaResult(area=available)
