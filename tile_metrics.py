"""
tile_metrics.py - Material and Cost Calculation
===============================================
Turns a generated layout into a shopping list: how many tiles must be
bought once complementary cuts are paired and offcuts reused, how much
area is wasted, and what the skirting needs on top.
"""

import logging
import math
from typing import Dict, List, Optional

from area_resolver import compute_available_area, room_polygon
from config import Config
from cut_classifier import analyze_cut_tile, bbox_from_boundary, calculate_tile_area
from cut_pair_matcher import find_complementary_pairs
from offcut_pool import OffcutPool, guillotine_remainders
from pattern_generator import PatternGenerator
from skirting_segmenter import compute_skirting_segments
from tile_models import (
    PlanMetrics, PricingOptions, Room, SkirtingNeeds, SkirtingType, WasteOptions
)
from utils import cm2_to_m2, safe_divide, timer


logger = logging.getLogger(__name__)


def default_waste_options() -> WasteOptions:
    """Waste options from the WASTE config section."""
    return WasteOptions(
        allow_rotate=Config.WASTE['allow_rotate'],
        optimize_cuts=Config.WASTE['optimize_cuts'],
        kerf_cm=Config.WASTE['kerf_cm'],
        share_offcuts=Config.WASTE['share_offcuts'],
    )


def default_pricing_options() -> PricingOptions:
    """Pricing options from the PRICING config section."""
    return PricingOptions(
        price_per_m2=Config.PRICING['price_per_m2'],
        pack_m2=Config.PRICING['pack_m2'],
        reserve_tiles=Config.PRICING['reserve_tiles'],
    )


def _leftover_offcut(tile_w: float, tile_h: float, used_area: float):
    """
    One conservative rectangle standing in for the rest of a cut tile.

    Used when cuts are not planned precisely: the leftover area is kept
    but shaped as a strip no longer than the tile's long side.
    """
    leftover = max(0.0, tile_w * tile_h - used_area)
    if leftover <= 0:
        return None
    max_side = max(tile_w, tile_h)
    w = min(max_side, max(Config.WASTE['min_offcut_side_cm'], leftover / max_side))
    return (w, leftover / w)


@timer
def compute_plan_metrics(room: Room, waste: Optional[WasteOptions] = None,
                         pricing: Optional[PricingOptions] = None,
                         pool: Optional[OffcutPool] = None) -> PlanMetrics:
    """
    Count the tiles a room needs.

    Args:
        room: Room to plan
        waste: Offcut reuse options (config defaults when None)
        pricing: Price and pack settings (config defaults when None)
        pool: Offcut pool to draw from and feed; a fresh one when None

    Returns:
        PlanMetrics, with ok=False and an error message when the layout
        could not be generated
    """
    waste = waste or default_waste_options()
    pricing = pricing or default_pricing_options()
    pool = pool if pool is not None else OffcutPool()

    tw, th = room.tile.width_cm, room.tile.height_cm
    generator = PatternGenerator(room)
    if not generator.has_valid_dimensions():
        return PlanMetrics(ok=False, room_id=room.id, error="Invalid tile or grout dimensions.")

    available = compute_available_area(room)
    if available.area is None:
        return PlanMetrics(ok=False, room_id=room.id, error="No available area.")

    layout = generator.generate(available.area)
    if layout.error:
        return PlanMetrics(ok=False, room_id=room.id, error=layout.error)

    warnings = []
    if available.error:
        warnings.append(f"Exclusions ignored: {available.error}")

    kerf = waste.kerf_cm if waste.optimize_cuts else 0.0
    tile_area = calculate_tile_area(tw, th, room.tile.shape)
    placements = layout.tiles

    analyses = [None if p.is_full else analyze_cut_tile(p) for p in placements]
    pairs = find_complementary_pairs(placements, analyses, tw, th)

    full_tiles = cut_tiles = reused_cuts = paired_cuts = 0
    cut_need_area = 0.0

    for index, placement in enumerate(placements):
        if placement.is_full:
            full_tiles += 1
            continue

        cut_tiles += 1
        bbox = bbox_from_boundary(placement.boundary)
        if bbox is None or bbox.w <= 0 or bbox.h <= 0:
            continue
        cut_need_area += bbox.area

        partner = pairs.get(index)
        if partner is not None:
            # Both halves come from one new tile, bought for the earlier piece
            if partner < index:
                paired_cuts += 1
            continue

        taken = pool.take(bbox.w, bbox.h, allow_rotate=waste.allow_rotate,
                          optimize_cuts=waste.optimize_cuts, kerf_cm=kerf)
        if taken.ok:
            reused_cuts += 1
            continue

        if waste.optimize_cuts:
            for rw, rh in guillotine_remainders(tw, th, bbox.w, bbox.h, kerf):
                pool.add(rw, rh, origin_tag="tile")
        else:
            leftover = _leftover_offcut(tw, th, bbox.area)
            if leftover:
                pool.add(*leftover, origin_tag="tile")

    purchased = full_tiles + max(0, cut_tiles - reused_cuts - paired_cuts)
    reserve = max(0, int(pricing.reserve_tiles))

    installed_cm2 = max(0.0, float(available.area.area))
    purchased_cm2 = (purchased + reserve) * tile_area
    waste_cm2 = max(0.0, purchased_cm2 - installed_cm2)
    installed_equivalent = safe_divide(installed_cm2, tile_area)

    footprint = room_polygon(room).area
    gross_cm2 = float(footprint.area) if footprint is not None else 0.0
    installed_m2 = cm2_to_m2(installed_cm2)

    metrics = PlanMetrics(
        ok=True,
        room_id=room.id,
        full_tiles=full_tiles,
        cut_tiles=cut_tiles,
        reused_cuts=reused_cuts,
        paired_cuts=paired_cuts,
        purchased_tiles=purchased,
        reserve_tiles=reserve,
        tile_area_cm2=tile_area,
        gross_room_area_m2=cm2_to_m2(gross_cm2),
        installed_area_m2=installed_m2,
        purchased_area_m2=cm2_to_m2(purchased_cm2),
        waste_area_m2=cm2_to_m2(waste_cm2),
        waste_pct=safe_divide(waste_cm2, purchased_cm2) * 100,
        waste_tiles_est=max(0, purchased + reserve - math.ceil(installed_equivalent)),
        cut_tiles_pct=safe_divide(cut_tiles, full_tiles + cut_tiles) * 100,
        cut_need_area_m2_est=cm2_to_m2(cut_need_area),
        price_per_m2=pricing.price_per_m2,
        pack_m2=pricing.pack_m2,
        packs=math.ceil(installed_m2 / pricing.pack_m2) if pricing.pack_m2 > 0 else None,
        price_total=installed_m2 * pricing.price_per_m2,
        offcut_pool_final=pool.snapshot(),
        warnings=warnings,
    )

    logger.info(f"Room '{room.id}': {purchased} tiles to buy "
                f"({full_tiles} full, {cut_tiles} cut, {reused_cuts} from offcuts, "
                f"{paired_cuts} paired)")
    return metrics


def compute_group_metrics(rooms: List[Room], waste: Optional[WasteOptions] = None,
                          pricing: Optional[PricingOptions] = None) -> List[PlanMetrics]:
    """
    Plan several rooms laid with the same tile.

    With ``share_offcuts`` the rooms draw from one pool in the given
    order, otherwise every room starts with an empty pool.
    """
    waste = waste or default_waste_options()
    shared_pool = OffcutPool() if waste.share_offcuts else None

    results = []
    for room in rooms:
        pool = shared_pool if shared_pool is not None else OffcutPool()
        results.append(compute_plan_metrics(room, waste, pricing, pool))
    return results


def summarize_group(results: List[PlanMetrics]) -> Dict:
    """Totals over a room group."""
    ok = [r for r in results if r.ok]
    return {
        'rooms': len(results),
        'failed': len(results) - len(ok),
        'purchasedTiles': sum(r.purchased_tiles_with_reserve for r in ok),
        'installedAreaM2': sum(r.installed_area_m2 for r in ok),
        'purchasedAreaM2': sum(r.purchased_area_m2 for r in ok),
        'priceTotal': sum(r.price_total for r in ok),
    }


def compute_skirting_needs(room: Room) -> SkirtingNeeds:
    """
    Trim material for a room.

    Cut-out trim yields up to ``max_strips_per_tile`` strips from each
    extra tile; bought trim is counted per run and priced per piece.
    """
    skirting = room.skirting
    segments = compute_skirting_segments(room)
    needs = SkirtingNeeds(
        enabled=skirting.enabled,
        type=skirting.type,
        total_length_cm=sum(s.length for s in segments),
        runs=len({s.id.rsplit('-p', 1)[0] for s in segments}),
        pieces=len(segments),
    )

    if skirting.type == SkirtingType.BOUGHT:
        if skirting.bought_width_cm <= 0:
            needs.warnings.append("Bought skirting width is not set.")
            return needs
        needs.bought_pieces = needs.pieces
        needs.bought_cost = needs.bought_pieces * skirting.bought_price_per_piece
        return needs

    if skirting.height_cm <= 0:
        needs.warnings.append("Skirting height is not set.")
        return needs

    strips = int(math.floor(room.tile.height_cm / skirting.height_cm))
    needs.strips_per_tile = min(Config.SKIRTING['max_strips_per_tile'], strips)
    if needs.strips_per_tile <= 0:
        needs.warnings.append("Tile is lower than the skirting height; strips cannot be cut.")
        return needs

    needs.additional_tiles = math.ceil(needs.pieces / needs.strips_per_tile)
    logger.debug(f"Room '{room.id}': {needs.pieces} skirting strips, "
                 f"{needs.additional_tiles} extra tiles")
    return needs
