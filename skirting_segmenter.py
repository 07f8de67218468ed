"""
skirting_segmenter.py - Skirting / Baseboard Segmentation
=========================================================
Breaks the trimmed boundary of a room into wall runs and the runs into
physical trim pieces.

Trim only goes where a wall meets the floor: an edge of the skirting area
is kept over the stretch that lies on the boundary of the available floor
area, so shared joints between sections and the parts of a wall hidden by
a cabinet or bathtub without trim get no pieces.
"""

import logging
import math
import numpy as np
from typing import List, Optional, Tuple

from shapely.errors import ShapelyError
from shapely.geometry import MultiPolygon
from shapely.ops import unary_union

from area_resolver import compute_available_area, exclusion_to_polygon, room_polygon
from config import Config
from floor_geometry import clean_coord, polygonal_parts, rect_polygon, to_multipolygon
from tile_models import AreaResult, Coord, Room, SkirtingSegment


logger = logging.getLogger(__name__)


def compute_skirting_area(room: Room) -> AreaResult:
    """
    Region whose outline receives trim.

    (active sections XOR active exclusions) clipped to the room footprint.
    """
    footprint = room_polygon(room)
    if footprint.error:
        return footprint

    sections = []
    if room.skirting.enabled:
        if not room.sections and len(room.polygon_vertices) >= 3:
            # Freeform rooms are one section
            sections = polygonal_parts(footprint.area)
        else:
            sections = [rect_polygon(s.x, s.y, s.width_cm, s.height_cm)
                        for s in room.get_sections() if s.skirting_enabled]
            sections = [s for s in sections if s is not None]

    exclusions = [exclusion_to_polygon(ex) for ex in room.exclusions if ex.skirting_enabled]
    exclusions = [e for e in exclusions if e is not None]

    try:
        active_sections = unary_union(sections) if sections else MultiPolygon()
        active_exclusions = unary_union(exclusions) if exclusions else MultiPolygon()
        area = active_sections.symmetric_difference(active_exclusions)
        area = to_multipolygon(area.intersection(footprint.area))
    except ShapelyError as e:
        logger.error(f"Skirting area failed for room '{room.id}': {e}")
        return AreaResult(area=to_multipolygon(None), error=str(e))

    return AreaResult(area=area)


def _ring_runs(coords: List[Coord], eps: float) -> List[Tuple[np.ndarray, np.ndarray]]:
    """Edges of a closed ring with collinear consecutive edges merged."""
    pts = [np.asarray(c, dtype=float) for c in coords]
    if len(pts) > 1 and np.allclose(pts[0], pts[-1]):
        pts = pts[:-1]

    changed = True
    while changed and len(pts) >= 3:
        changed = False
        for idx in range(len(pts)):
            prev_pt, pt, next_pt = pts[idx - 1], pts[idx], pts[(idx + 1) % len(pts)]
            d1, d2 = pt - prev_pt, next_pt - pt
            n1, n2 = np.linalg.norm(d1), np.linalg.norm(d2)
            if n1 <= eps or n2 <= eps:
                del pts[idx]
                changed = True
                break
            cross = d1[0] * d2[1] - d1[1] * d2[0]
            if abs(cross) / max(n1, n2) <= eps and np.dot(d1, d2) > 0:
                del pts[idx]
                changed = True
                break

    if len(pts) < 2:
        return []
    return [(pts[i], pts[(i + 1) % len(pts)]) for i in range(len(pts))]


def _boundary_edges(area) -> List[Tuple[np.ndarray, np.ndarray]]:
    edges = []
    for poly in polygonal_parts(area):
        for ring in [poly.exterior, *poly.interiors]:
            coords = np.asarray(ring.coords, dtype=float)
            edges.extend(zip(coords[:-1], coords[1:]))
    return edges


def _stretches_on_boundary(start: np.ndarray, end: np.ndarray,
                           boundary_edges, eps: float) -> List[Tuple[float, float]]:
    """Parameter intervals [t0, t1] (cm from start) of a run lying on boundary edges."""
    direction = end - start
    length = float(np.linalg.norm(direction))
    if length <= eps:
        return []
    unit = direction / length
    normal = np.array([-unit[1], unit[0]])

    intervals = []
    for a, b in boundary_edges:
        if abs(np.dot(a - start, normal)) > eps or abs(np.dot(b - start, normal)) > eps:
            continue
        t0, t1 = sorted((float(np.dot(a - start, unit)), float(np.dot(b - start, unit))))
        t0, t1 = max(t0, 0.0), min(t1, length)
        if t1 - t0 > eps:
            intervals.append((t0, t1))

    intervals.sort()
    merged: List[List[float]] = []
    for t0, t1 in intervals:
        if merged and t0 <= merged[-1][1] + eps:
            merged[-1][1] = max(merged[-1][1], t1)
        else:
            merged.append([t0, t1])
    return [(t0, t1) for t0, t1 in merged]


def _id_coord(value: float) -> float:
    return round(value, 2) + 0.0


def _split_run(p_start: Coord, p_end: Coord, piece_length: Optional[float],
               eps: float) -> List[SkirtingSegment]:
    """Cut a run into pieces laid from its lexicographically smaller end."""
    a = (_id_coord(p_start[0]), _id_coord(p_start[1]))
    b = (_id_coord(p_end[0]), _id_coord(p_end[1]))
    if b < a:
        p_start, p_end = p_end, p_start
        a, b = b, a

    start = np.asarray(p_start, dtype=float)
    end = np.asarray(p_end, dtype=float)
    run_length = float(np.linalg.norm(end - start))
    unit = (end - start) / run_length
    run_key = f"w{a[0]:.2f},{a[1]:.2f}-{b[0]:.2f},{b[1]:.2f}"

    if piece_length and piece_length > 0:
        count = max(1, int(math.ceil(run_length / piece_length - eps)))
    else:
        count, piece_length = 1, run_length

    segments = []
    for index in range(count):
        t0 = index * piece_length
        t1 = run_length if index == count - 1 else (index + 1) * piece_length
        p1 = start + unit * t0
        p2 = start + unit * t1
        segments.append(SkirtingSegment(
            p1=(clean_coord(p1[0]), clean_coord(p1[1])),
            p2=(clean_coord(p2[0]), clean_coord(p2[1])),
            length=t1 - t0,
            id=f"{run_key}-p{index}",
        ))
    return segments


def compute_skirting_runs(room: Room) -> List[Tuple[Coord, Coord]]:
    """Wall runs (start, end) that receive trim, before splitting into pieces."""
    eps = Config.SKIRTING['epsilon']

    skirting = compute_skirting_area(room)
    if skirting.error or skirting.area is None or skirting.area.is_empty:
        return []

    available = compute_available_area(room)
    if available.area is None or available.area.is_empty:
        return []

    boundary_edges = _boundary_edges(available.area)
    runs = []
    for poly in polygonal_parts(skirting.area):
        for ring in [poly.exterior, *poly.interiors]:
            for start, end in _ring_runs(list(ring.coords), eps):
                unit_len = float(np.linalg.norm(end - start))
                if unit_len <= eps:
                    continue
                unit = (end - start) / unit_len
                for t0, t1 in _stretches_on_boundary(start, end, boundary_edges, eps):
                    p1 = start + unit * t0
                    p2 = start + unit * t1
                    runs.append(((float(p1[0]), float(p1[1])), (float(p2[0]), float(p2[1]))))
    return runs


def compute_skirting_segments(room: Room, include_excluded: bool = False) -> List[SkirtingSegment]:
    """
    Trim pieces for a room.

    Manually excluded piece ids are dropped, or returned flagged when
    ``include_excluded`` is set.
    """
    eps = Config.SKIRTING['epsilon']
    piece_length = room.skirting.piece_length(room.tile)

    segments = []
    for start, end in compute_skirting_runs(room):
        for segment in _split_run(start, end, piece_length, eps):
            if segment.id in room.excluded_skirts:
                if not include_excluded:
                    continue
                segment.excluded = True
            segments.append(segment)

    logger.debug(f"Room '{room.id}': {len(segments)} skirting pieces")
    return segments


def compute_skirting_perimeter(room: Optional[Room]) -> float:
    """Total trim length, excluding manually removed pieces."""
    if room is None:
        return 0.0
    return sum(s.length for s in compute_skirting_segments(room))
