#!/usr/bin/env python3
"""
Normalize the aggregated POI document into per-world route maps.

For each cell "<area>-<cell>" of the aggregated document:
1. Label the cell "World <area>-<cell>"
2. Drop routes whose first element is null
3. Replace the first element with "Start" where it points at a start spot
4. Keep everything else of the route as-is

Usage:
    python -m poimap.normalize
    python -m poimap.normalize --input ./poi/final.json --output ./kc3kai.json
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from .base import BaseStage, read_json, write_json
from .cell_key import CellKey
from .config import CONFIG_ERRORS, load_config
from .constants import OUTPUT_INDENT, SPOT_CATEGORY_INDEX, START_CATEGORY, START_MARKER

logger = logging.getLogger(__name__)


def lookup_spot(spots: Sequence, index: Any) -> Optional[Sequence]:
    """
    Look up a spot by route index.

    Returns:
        The spot, or None if index is not a valid position in spots
    """
    # bool is an int subclass but never a valid index here
    if isinstance(index, bool):
        return None
    if isinstance(index, float) and index.is_integer():
        index = int(index)
    if not isinstance(index, int):
        return None
    if index < 0 or index >= len(spots):
        return None
    return spots[index]


def spot_category(spot: Sequence) -> Optional[str]:
    """Category field of a spot, or None if the spot is too short."""
    if len(spot) <= SPOT_CATEGORY_INDEX:
        return None
    return spot[SPOT_CATEGORY_INDEX]


def normalize_routes(route: Dict[str, list], spots: Sequence, label: str = '') -> Dict[str, list]:
    """
    Normalize the routes of one cell.

    Args:
        route: Route id -> route entry
        spots: Spot records referenced by the route entries
        label: World label, used in error messages

    Returns:
        Route id -> normalized copy of the route entry, without routes
        whose first element is null

    Raises:
        ValueError: If a route points at a spot that does not exist
    """
    routes = {}
    for route_id, entry in route.items():
        if not entry or entry[0] is None:
            continue

        spot = lookup_spot(spots, entry[0])
        if spot is None:
            raise ValueError(
                f"{label or 'Cell'}: route {route_id} references spot {entry[0]!r}, "
                f"but only {len(spots)} spots exist"
            )

        entry = list(entry)
        if spot_category(spot) == START_CATEGORY:
            entry[0] = START_MARKER
        routes[route_id] = entry

    return routes


def normalize_document(aggregated: Dict[str, Dict]) -> Dict[str, Dict[str, list]]:
    """
    Normalize an aggregated document.

    The input is left untouched, so normalizing the same document twice
    gives the same result.

    Returns:
        World label -> normalized routes
    """
    worlds = {}
    for composite, record in aggregated.items():
        key = CellKey.from_composite(composite)
        label = key.world_label

        if not isinstance(record, dict) or 'route' not in record or 'spots' not in record:
            raise ValueError(f"{label}: record must have 'route' and 'spots'")

        worlds[label] = normalize_routes(record['route'], record['spots'], label)

    return worlds


class Normalizer(BaseStage):
    """Writes the normalized document for an aggregated document."""

    name = 'normalize'

    def __init__(self, input_path: Path, output_path: Path):
        self.input_path = Path(input_path)
        self.output_path = Path(output_path)

    def process(self) -> Dict:
        logger.info(f"Reading aggregated data from {self.input_path}")
        aggregated = read_json(self.input_path)
        if not isinstance(aggregated, dict):
            raise ValueError(f"Aggregated document must be an object: {self.input_path}")

        worlds = normalize_document(aggregated)

        logger.info(f"Writing normalized data to {self.output_path}")
        write_json(self.output_path, worlds, indent=OUTPUT_INDENT)

        kept = sum(len(routes) for routes in worlds.values())
        total = sum(len(record['route']) for record in aggregated.values())
        starts = sum(
            1 for routes in worlds.values()
            for entry in routes.values() if entry[0] == START_MARKER
        )
        return {
            'worlds': len(worlds),
            'routes': kept,
            'skipped': total - kept,
            'starts': starts,
            'output': str(self.output_path),
        }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Normalize aggregated POI data into per-world routes',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--config', '-c', type=Path,
                        help='YAML config file')
    parser.add_argument('--input', '-i', type=Path,
                        help='Aggregated document (default: poi/final.json)')
    parser.add_argument('--output', '-o', type=Path,
                        help='Output path (default: kc3kai.json)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.config).with_overrides(
            aggregated_path=args.input,
            output_path=args.output,
        )
    except CONFIG_ERRORS as e:
        logger.error(f"Could not load config: {e}")
        sys.exit(1)

    normalizer = Normalizer(config.aggregated_path, config.output_path)
    sys.exit(0 if normalizer.run() else 1)


if __name__ == '__main__':
    main()
