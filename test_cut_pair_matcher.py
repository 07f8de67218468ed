"""
Test Cut-Pair Matcher
=====================
Greedy pairing of complementary triangular cuts.
"""

from config import Config
from cut_classifier import analyze_cut_tile
from cut_pair_matcher import find_complementary_pairs
from tile_models import BoundingBox, CutAnalysis, TilePlacement


def _cut(ring, tile_id, is_full=False):
    return TilePlacement(id=tile_id, boundary=[[ring]], is_full=is_full)


def _analyses(placements):
    return [None if p.is_full else analyze_cut_tile(p) for p in placements]


LOWER = [(0, 0), (60, 0), (0, 60), (0, 0)]
UPPER = [(60, 0), (60, 60), (0, 60), (60, 0)]
THIRD = [(200, 0), (260, 0), (200, 60), (200, 0)]


def test_complementary_triangles_pair_symmetrically():
    placements = [_cut(LOWER, "a"), _cut(UPPER, "b"), _cut(THIRD, "c")]

    pairs = find_complementary_pairs(placements, _analyses(placements), 60, 60)

    assert pairs == {0: 1, 1: 0}
    assert 2 not in pairs


def test_pairing_is_greedy_in_scan_order():
    placements = [_cut(THIRD, "c"), _cut(LOWER, "a"), _cut(UPPER, "b")]

    pairs = find_complementary_pairs(placements, _analyses(placements), 60, 60)

    # The first candidate takes the first match
    assert pairs == {0: 1, 1: 0}


def test_full_and_rectangular_placements_are_skipped():
    full = _cut([(0, 0), (60, 0), (60, 60), (0, 60), (0, 0)], "f", is_full=True)
    rect = _cut([(0, 0), (60, 0), (60, 30), (0, 30), (0, 0)], "r")
    placements = [full, rect, _cut(LOWER, "a")]

    assert find_complementary_pairs(placements, _analyses(placements), 60, 60) == {}


def test_mismatched_sizes_do_not_pair():
    small = [(0, 0), (30, 0), (0, 30), (0, 0)]
    placements = [_cut(LOWER, "a"), _cut(small, "s")]

    assert find_complementary_pairs(placements, _analyses(placements), 60, 60) == {}


def test_combined_area_above_one_tile_does_not_pair():
    # Two halves of a 60x60 square checked against a smaller tile
    placements = [_cut(LOWER, "a"), _cut(UPPER, "b")]

    assert find_complementary_pairs(placements, _analyses(placements), 50, 50) == {}


def test_degenerate_analysis_is_ignored():
    placements = [_cut(LOWER, "a"), _cut(UPPER, "b")]
    analyses = [None, analyze_cut_tile(placements[1])]

    assert find_complementary_pairs(placements, analyses, 60, 60) == {}


def _triangle_analysis(w, h):
    bbox = BoundingBox(0, 0, w, h)
    return CutAnalysis(bbox=bbox, bbox_area=bbox.area, actual_area=1800,
                       area_ratio=1800 / bbox.area, is_triangular_cut=True)


def test_bbox_tolerance_is_exclusive(monkeypatch):
    monkeypatch.setitem(Config.CUT_ANALYSIS, 'bbox_tolerance', 0.5)
    placements = [_cut(LOWER, "a"), _cut(UPPER, "b")]

    on_bound = [_triangle_analysis(60, 60), _triangle_analysis(60.5, 60)]
    assert find_complementary_pairs(placements, on_bound, 60, 60) == {}

    inside = [_triangle_analysis(60, 60), _triangle_analysis(60.25, 60)]
    assert find_complementary_pairs(placements, inside, 60, 60) == {0: 1, 1: 0}
