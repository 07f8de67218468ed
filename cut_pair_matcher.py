"""
cut_pair_matcher.py - Complementary Triangular Cut Pairing
==========================================================
Finds pairs of triangular cut placements that together use up one tile,
e.g. the two halves of a diagonally cut tile along a rotated wall.
"""

import logging
from typing import Dict, List, Optional

from config import Config
from tile_models import CutAnalysis, TilePlacement


logger = logging.getLogger(__name__)


def _bbox_matches(a: CutAnalysis, b: CutAnalysis, tolerance: float) -> bool:
    return (abs(a.bbox.w - b.bbox.w) < tolerance and
            abs(a.bbox.h - b.bbox.h) < tolerance)


def find_complementary_pairs(placements: List[TilePlacement],
                             analyses: List[Optional[CutAnalysis]],
                             tile_w: float, tile_h: float) -> Dict[int, int]:
    """
    Greedy pairing of triangular cuts in scan order.

    Args:
        placements: Placements in generation order
        analyses: Cut analysis per placement (None for full or degenerate ones)
        tile_w: Tile width in cm
        tile_h: Tile height in cm

    Returns:
        Symmetric mapping of placement index -> partner index
    """
    tile_area = tile_w * tile_h
    if tile_area <= 0 or len(placements) != len(analyses):
        return {}

    tolerance = Config.CUT_ANALYSIS['bbox_tolerance']
    area_tolerance = tile_area * Config.CUT_ANALYSIS['area_match_fraction']
    max_combined = tile_area * Config.CUT_ANALYSIS['combined_area_fraction']

    candidates = [
        i for i, (placement, analysis) in enumerate(zip(placements, analyses))
        if not placement.is_full and analysis is not None and analysis.is_triangular_cut
    ]

    pairs: Dict[int, int] = {}
    for pos, i in enumerate(candidates):
        if i in pairs:
            continue
        a = analyses[i]
        for j in candidates[pos + 1:]:
            if j in pairs:
                continue
            b = analyses[j]
            if not _bbox_matches(a, b, tolerance):
                continue
            if abs(a.actual_area - b.actual_area) >= area_tolerance:
                continue
            if a.actual_area + b.actual_area > max_combined:
                continue
            pairs[i] = j
            pairs[j] = i
            break

    logger.debug(f"Paired {len(pairs) // 2} complementary cuts "
                 f"from {len(candidates)} triangular candidates")
    return pairs
