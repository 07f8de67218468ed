#!/usr/bin/env python3
"""
Tile Layout Planning System
===========================
Main entry point: plans the tiles and skirting for rooms described in JSON.
"""

import argparse
import json
import logging
import sys
import time
from typing import Optional, List, Dict, Any

from area_resolver import compute_available_area
from config import Config
from pattern_generator import tiles_for_preview
from skirting_segmenter import compute_skirting_segments
from tile_metrics import (
    compute_group_metrics, compute_skirting_needs, default_pricing_options,
    default_waste_options, summarize_group
)
from tile_models import PricingOptions, Room, WasteOptions
from utils import cm_to_m, format_money, load_json, round_for_output, save_json, setup_logging

# Setup logging
logger = logging.getLogger(__name__)


class TilePlanningSystem:
    """Main system orchestrator for tile layout planning."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize the planning system."""
        self.config = Config()
        if config_path:
            self.config.from_file(config_path)

        logger.info("Tile Layout Planning System initialized")

    def load_plan(self, plan_path: str):
        """
        Read rooms and options from a JSON plan.

        The file holds either a single room, or ``{"rooms": [...]}`` with
        optional ``waste`` and ``pricing`` sections.
        """
        data = load_json(plan_path)
        room_dicts = data.get('rooms') if isinstance(data.get('rooms'), list) else [data]
        rooms = [Room.from_dict(r) for r in room_dicts]

        waste = WasteOptions.from_dict(data['waste']) if 'waste' in data else default_waste_options()
        pricing = (PricingOptions.from_dict(data['pricing']) if 'pricing' in data
                   else default_pricing_options())

        logger.info(f"Loaded {len(rooms)} room(s) from {plan_path}")
        return rooms, waste, pricing

    def plan_room(self, room: Room, include_excluded: bool = False) -> Dict[str, Any]:
        """Layout and skirting for one room."""
        available = compute_available_area(room)
        tiling = tiles_for_preview(room, available.area, include_excluded)
        segments = compute_skirting_segments(room, include_excluded)
        needs = compute_skirting_needs(room)

        return {
            'room': room.id or room.name,
            'availableAreaError': available.error,
            'tiling': tiling,
            'skirtingSegments': segments,
            'skirtingNeeds': needs,
        }

    def process_plan(self, plan_path: str, include_excluded: bool = False) -> Dict[str, Any]:
        """
        Process a plan file.

        Args:
            plan_path: Path to the JSON plan
            include_excluded: Return manually removed tiles/skirting flagged

        Returns:
            Dict with per-room layouts, metrics and group totals
        """
        logger.info(f"Processing plan: {plan_path}")
        start_time = time.time()

        rooms, waste, pricing = self.load_plan(plan_path)
        layouts = [self.plan_room(room, include_excluded) for room in rooms]
        metrics = compute_group_metrics(rooms, waste, pricing)

        total_time = time.time() - start_time
        logger.info(f"Plan processing complete in {total_time:.2f}s")

        return {
            'rooms': rooms,
            'layouts': layouts,
            'metrics': metrics,
            'summary': summarize_group(metrics),
            'waste': waste,
            'time': total_time,
        }


def result_to_dict(result: Dict[str, Any]) -> Dict[str, Any]:
    """Serializable form of a processed plan."""
    rooms = []
    for layout, metrics in zip(result['layouts'], result['metrics']):
        rooms.append({
            'room': layout['room'],
            'availableAreaError': layout['availableAreaError'],
            'tiling': layout['tiling'].to_dict(),
            'skirtingSegments': [s.to_dict() for s in layout['skirtingSegments']],
            'skirtingNeeds': layout['skirtingNeeds'].to_dict(),
            'metrics': metrics.to_dict(),
        })
    return {
        'rooms': rooms,
        'waste': result['waste'].to_dict(),
        'summary': result['summary'],
    }


def print_summary(result: Dict[str, Any]):
    print("\n" + "="*60)
    print("TILE PLAN RESULTS")
    print("="*60)

    for room, layout, metrics in zip(result['rooms'], result['layouts'], result['metrics']):
        tiling = layout['tiling']
        needs = layout['skirtingNeeds']
        print(f"Room: {room.name or room.id or '(unnamed)'}")
        print(f"Tile: {room.tile.width_cm:g} x {room.tile.height_cm:g} cm "
              f"({room.tile.shape.value}), pattern {room.pattern.type.value}")
        if tiling.error:
            print(f"⚠ Layout error: {tiling.error}")
        else:
            print(f"Placements: {len(tiling.tiles)} "
                  f"({tiling.full_count} full, {tiling.cut_count} cut)")
        print(metrics.get_summary())
        if needs.enabled:
            print(f"Skirting: {cm_to_m(needs.total_length_cm):.2f} m in {needs.pieces} pieces")
            if needs.additional_tiles:
                print(f"  Extra tiles for strips: {needs.additional_tiles}")
            if needs.bought_pieces:
                print(f"  Bought pieces: {needs.bought_pieces} "
                      f"({format_money(needs.bought_cost)})")
            for warning in needs.warnings:
                print(f"  - {warning}")
        print()

    summary = result['summary']
    print(f"Rooms: {summary['rooms']} ({summary['failed']} failed)")
    print(f"Tiles to buy: {summary['purchasedTiles']}")
    print(f"Price: {format_money(summary['priceTotal'])}")
    print(f"Planning Time: {result['time']:.2f}s")
    print("="*60)


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Tile Layout Planning System",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s bathroom.json                     # Print a plan summary
  %(prog)s bathroom.json --json              # Print the full plan as JSON
  %(prog)s bathroom.json --include-excluded  # Keep removed tiles, flagged
  %(prog)s flat.json --output plan.json      # Save the plan to a file
        """
    )

    parser.add_argument(
        "plan",
        help="Path to room/plan description (JSON)"
    )

    parser.add_argument(
        "--include-excluded",
        action="store_true",
        help="Return manually removed tiles and skirting pieces, flagged"
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON instead of a summary"
    )

    parser.add_argument(
        "--output",
        help="Save the JSON result to the given path"
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )

    parser.add_argument(
        "--config",
        help="Path to configuration file"
    )

    args = parser.parse_args(argv)

    # Setup logging
    if args.verbose:
        setup_logging("DEBUG")
    else:
        setup_logging(Config.LOGGING['level'])

    try:
        system = TilePlanningSystem(args.config)
        result = system.process_plan(args.plan, include_excluded=args.include_excluded)

        if args.output:
            save_json(round_for_output(result_to_dict(result), 4), args.output)
            print(f"\nPlan saved to: {args.output}")

        if args.json:
            print(json.dumps(round_for_output(result_to_dict(result), 4), indent=2))
        else:
            print_summary(result)

    except Exception as e:
        logger.error(f"Error: {e}", exc_info=args.verbose)
        sys.exit(1)


if __name__ == "__main__":
    main()
