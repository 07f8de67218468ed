"""
Test Cut Classifier
===================
Full/cut decision, tile areas per shape and cut shape analysis.
"""

import math
import pytest

from cut_classifier import analyze_cut_tile, bbox_from_boundary, calculate_tile_area, is_full_tile
from tile_models import TilePlacement, TileShape


def _placement(ring, tile_id="t"):
    return TilePlacement(id=tile_id, boundary=[[ring]], is_full=False)


def test_is_full_tile_tolerance():
    assert is_full_tile(600, 600)
    assert is_full_tile(599.5, 600)
    assert not is_full_tile(599, 600)
    assert not is_full_tile(10, 0)
    assert is_full_tile(90, 100, tolerance=0.9)


def test_calculate_tile_area():
    assert calculate_tile_area(30, 60) == 1800
    assert calculate_tile_area(30, 60, TileShape.SQUARE) == 900
    assert calculate_tile_area(40, 20, TileShape.RHOMBUS) == 400
    assert calculate_tile_area(30, 30, TileShape.HEX) == pytest.approx(450 * math.sqrt(3))
    # Unknown shapes fall back to a rectangle
    assert calculate_tile_area(30, 60, "octagon") == 1800


def test_rectangular_cut_is_not_triangular():
    analysis = analyze_cut_tile(_placement([(0, 0), (30, 0), (30, 20), (0, 20), (0, 0)]))

    assert analysis is not None
    assert not analysis.is_triangular_cut
    assert analysis.actual_area == pytest.approx(analysis.bbox_area)
    assert analysis.area_ratio == pytest.approx(1.0)


def test_right_triangle_is_triangular():
    analysis = analyze_cut_tile(_placement([(0, 0), (60, 0), (0, 40), (0, 0)]))

    assert analysis.bbox.w == 60
    assert analysis.bbox.h == 40
    assert analysis.actual_area == pytest.approx(1200)
    assert analysis.area_ratio == pytest.approx(0.5)
    assert analysis.is_triangular_cut


def test_trapezoid_outside_band():
    # 3/4 of the bounding box
    analysis = analyze_cut_tile(_placement([(0, 0), (40, 0), (40, 20), (20, 20), (0, 0)]))
    assert analysis.area_ratio == pytest.approx(0.75)
    assert not analysis.is_triangular_cut


def test_holes_reduce_actual_area():
    outer = [(0, 0), (10, 0), (10, 10), (0, 10), (0, 0)]
    hole = [(2, 2), (4, 2), (4, 4), (2, 4), (2, 2)]
    placement = TilePlacement(id="h", boundary=[[outer, hole]], is_full=False)
    assert analyze_cut_tile(placement).actual_area == pytest.approx(96)


def test_degenerate_boundaries():
    assert analyze_cut_tile(TilePlacement(id="e", boundary=[], is_full=False)) is None
    assert analyze_cut_tile(_placement([(0, 0), (10, 0), (20, 0), (0, 0)])) is None
    assert bbox_from_boundary([]) is None
