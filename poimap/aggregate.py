#!/usr/bin/env python3
"""
Aggregate per-cell POI files into a single document.

Scans a directory tree for files named <area>_<cell>.json and writes one
compact JSON object mapping "<area>-<cell>" to the contents of each file.
Other files are ignored.

Usage:
    python -m poimap.aggregate
    python -m poimap.aggregate --poi-dir ./poi --output ./poi/final.json
    python -m poimap.aggregate --on-duplicate error
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from tqdm import tqdm

from .base import BaseStage, read_json, write_json
from .cell_key import CellKey
from .config import CONFIG_ERRORS, load_config
from .constants import DUPLICATE_ERROR, DUPLICATE_OVERWRITE, DUPLICATE_POLICIES

logger = logging.getLogger(__name__)


def iter_cell_files(root: Path) -> Iterator[Tuple[CellKey, Path]]:
    """
    Recursively find cell files under a directory.

    Files are visited in sorted path order so the scan is reproducible.

    Yields:
        (key, path) for every file whose name matches <area>_<cell>.json

    Raises:
        FileNotFoundError: If root is not a directory
        ValueError: If a matching name has an unparseable component
    """
    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"POI directory not found: {root}")

    for path in sorted(root.rglob('*')):
        if not path.is_file():
            continue
        key = CellKey.from_filename(path.name)
        if key is None:
            logger.debug(f"Skipping {path}")
            continue
        yield key, path


def merge_cell_files(cell_files: List[Tuple[CellKey, Path]],
                     on_duplicate: str = DUPLICATE_OVERWRITE,
                     progress: bool = False) -> Dict:
    """
    Read cell files into one mapping, in the order given.

    Args:
        cell_files: (key, path) pairs as produced by iter_cell_files
        on_duplicate: 'overwrite' keeps the later file when two files map
            to the same cell, 'error' aborts instead
        progress: Show a progress bar while reading files

    Returns:
        Dict mapping composite key to the parsed file contents
    """
    if on_duplicate not in DUPLICATE_POLICIES:
        raise ValueError(f"Invalid on_duplicate policy: {on_duplicate}")

    merged = {}
    sources: Dict[CellKey, Path] = {}
    for key, path in tqdm(cell_files, desc="Aggregating cells", disable=not progress):
        if key in sources:
            if on_duplicate == DUPLICATE_ERROR:
                raise ValueError(f"Duplicate cell {key}: {sources[key]} and {path}")
            logger.warning(f"Duplicate cell {key}: {path} replaces {sources[key]}")

        merged[key.composite] = read_json(path)
        sources[key] = path

    return merged


def collect_cell_files(root: Path) -> List[Tuple[CellKey, Path]]:
    """List the cell files under root, failing before any file is read."""
    cell_files = list(iter_cell_files(root))
    logger.info(f"Found {len(cell_files)} cell files in {root}")
    return cell_files


def aggregate_cells(root: Path, on_duplicate: str = DUPLICATE_OVERWRITE,
                    progress: bool = False) -> Dict:
    """Merge all cell files under root into one mapping."""
    return merge_cell_files(collect_cell_files(root), on_duplicate, progress)


class Aggregator(BaseStage):
    """Writes the aggregated document for a POI directory."""

    name = 'aggregate'

    def __init__(self, poi_dir: Path, output_path: Path,
                 on_duplicate: str = DUPLICATE_OVERWRITE, progress: bool = True):
        self.poi_dir = Path(poi_dir)
        self.output_path = Path(output_path)
        self.on_duplicate = on_duplicate
        self.progress = progress

    def process(self) -> Dict:
        cell_files = collect_cell_files(self.poi_dir)
        merged = merge_cell_files(cell_files, self.on_duplicate, self.progress)

        logger.info(f"Writing aggregated data to {self.output_path}")
        write_json(self.output_path, merged)

        return {
            'files': len(cell_files),
            'cells': len(merged),
            'duplicates': len(cell_files) - len(merged),
            'output': str(self.output_path),
        }


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Aggregate per-cell POI files into one JSON document',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )
    parser.add_argument('--config', '-c', type=Path,
                        help='YAML config file')
    parser.add_argument('--poi-dir', type=Path,
                        help='Directory to scan for <area>_<cell>.json files (default: poi)')
    parser.add_argument('--output', '-o', type=Path,
                        help='Output path (default: poi/final.json)')
    parser.add_argument('--on-duplicate', choices=DUPLICATE_POLICIES,
                        help='How to handle two files for the same cell (default: overwrite)')
    parser.add_argument('--no-progress', action='store_true',
                        help='Disable the progress bar')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.config).with_overrides(
            poi_dir=args.poi_dir,
            aggregated_path=args.output,
            on_duplicate=args.on_duplicate,
            progress=False if args.no_progress else None,
        )
    except CONFIG_ERRORS as e:
        logger.error(f"Could not load config: {e}")
        sys.exit(1)

    aggregator = Aggregator(config.poi_dir, config.aggregated_path,
                            config.on_duplicate, config.progress)
    sys.exit(0 if aggregator.run() else 1)


if __name__ == '__main__':
    main()
