"""
Test Area Resolver
==================
Room footprints, exclusion polygons and the available area.
"""

import math
import pytest
from shapely.errors import GEOSException
from shapely.geometry import MultiPolygon

import area_resolver
from area_resolver import (
    compute_available_area, compute_exclusions_union, exclusion_to_polygon, room_polygon
)
from tile_models import Exclusion, ExclusionType, Point, Room, Section, TileSpec


def _room(**kwargs):
    return Room(tile=TileSpec(20, 20), **kwargs)


def test_rectangle_room():
    result = room_polygon(_room(width_cm=200, height_cm=100))
    assert result.ok
    assert result.area.area == pytest.approx(20000)
    assert result.area.bounds == (0, 0, 200, 100)


def test_sections_are_unioned():
    room = _room(sections=[
        Section(0, 0, 100, 100, id="a"),
        Section(100, 0, 100, 200, id="b"),
    ])
    assert room_polygon(room).area.area == pytest.approx(30000)


def test_freeform_vertices_take_precedence():
    room = _room(width_cm=500, height_cm=500,
                 polygon_vertices=[Point(0, 0), Point(100, 0), Point(0, 100)])
    assert room_polygon(room).area.area == pytest.approx(5000)


def test_room_without_geometry_is_empty():
    result = room_polygon(_room())
    assert result.ok
    assert result.area.is_empty


def test_exclusion_polygons():
    rect = Exclusion(ExclusionType.RECT, x=10, y=10, w=20, h=5)
    assert exclusion_to_polygon(rect).area == pytest.approx(100)

    circle = Exclusion(ExclusionType.CIRCLE, cx=50, cy=50, r=10)
    assert exclusion_to_polygon(circle).area == pytest.approx(24 * 100 * math.sin(2 * math.pi / 48))

    tri = Exclusion(ExclusionType.TRIANGLE, points=[Point(0, 0), Point(10, 0), Point(0, 10)])
    assert exclusion_to_polygon(tri).area == pytest.approx(50)

    free = Exclusion(ExclusionType.FREEFORM,
                     points=[Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)])
    assert exclusion_to_polygon(free).area == pytest.approx(100)


def test_degenerate_exclusions_are_dropped():
    assert exclusion_to_polygon(Exclusion(ExclusionType.RECT, w=0, h=10)) is None
    assert exclusion_to_polygon(Exclusion(ExclusionType.CIRCLE, r=0)) is None
    assert exclusion_to_polygon(Exclusion(ExclusionType.TRIANGLE, points=[Point(0, 0)])) is None
    assert exclusion_to_polygon(Exclusion(ExclusionType.FREEFORM, points=[])) is None


def test_exclusion_union():
    assert compute_exclusions_union([]).area is None
    assert compute_exclusions_union([Exclusion(ExclusionType.RECT)]).area is None

    overlapping = [
        Exclusion(ExclusionType.RECT, x=0, y=0, w=10, h=10),
        Exclusion(ExclusionType.RECT, x=5, y=0, w=10, h=10),
    ]
    result = compute_exclusions_union(overlapping)
    assert result.ok
    assert result.area.area == pytest.approx(150)


def test_available_area_without_exclusions_is_room():
    room = _room(width_cm=200, height_cm=100)
    result = compute_available_area(room)
    assert result.error is None
    assert result.area.area == pytest.approx(20000)


def test_available_area_subtracts_exclusions():
    room = _room(width_cm=200, height_cm=100, exclusions=[
        Exclusion(ExclusionType.RECT, x=50, y=25, w=50, h=50),
        Exclusion(ExclusionType.RECT, x=150, y=-10, w=100, h=20),
    ])
    result = compute_available_area(room)
    assert result.error is None
    assert result.area.area == pytest.approx(20000 - 2500 - 500)


def test_explicit_exclusion_list_overrides_room():
    room = _room(width_cm=100, height_cm=100,
                 exclusions=[Exclusion(ExclusionType.RECT, x=0, y=0, w=50, h=100)])
    assert compute_available_area(room, []).area.area == pytest.approx(10000)


def test_fully_excluded_room_is_empty_without_error():
    room = _room(width_cm=100, height_cm=100,
                 exclusions=[Exclusion(ExclusionType.RECT, x=-10, y=-10, w=120, h=120)])
    result = compute_available_area(room)
    assert result.error is None
    assert result.area.is_empty


def _fail(*args, **kwargs):
    raise GEOSException("TopologyException: found non-noded intersection")


def test_difference_failure_falls_back_to_room(monkeypatch):
    room = _room(width_cm=100, height_cm=100,
                 exclusions=[Exclusion(ExclusionType.RECT, x=0, y=0, w=50, h=50)])
    monkeypatch.setattr(MultiPolygon, "difference", _fail)

    result = compute_available_area(room)

    assert result.error == "TopologyException: found non-noded intersection"
    assert result.area.area == pytest.approx(10000)


def test_exclusion_union_failure(monkeypatch):
    exclusions = [Exclusion(ExclusionType.RECT, x=0, y=0, w=50, h=50)]
    monkeypatch.setattr(area_resolver, "unary_union", _fail)

    union = compute_exclusions_union(exclusions)
    assert union.area is None
    assert union.error == "TopologyException: found non-noded intersection"

    room = _room(width_cm=100, height_cm=100, exclusions=exclusions)
    result = compute_available_area(room)
    assert result.error == "TopologyException: found non-noded intersection"
    assert result.area.area == pytest.approx(10000)
