#!/usr/bin/env python3
"""
Main pipeline orchestrator.

Runs the full data pipeline:
1. Aggregate - Merge per-cell POI files into poi/final.json
2. Normalize - Convert the aggregated document into kc3kai.json
"""

import argparse
import logging
import sys
from pathlib import Path

from .aggregate import Aggregator
from .config import CONFIG_ERRORS, PipelineConfig, load_config
from .constants import DUPLICATE_POLICIES
from .normalize import Normalizer

logger = logging.getLogger(__name__)

STAGES = ['aggregate', 'normalize']


def run_stage(stage: str, config: PipelineConfig) -> bool:
    """
    Run a pipeline stage.

    Args:
        stage: One of 'aggregate', 'normalize', 'all'
        config: Paths and options for the stages

    Returns:
        True if successful
    """
    if stage == 'aggregate':
        return run_aggregate(config)
    elif stage == 'normalize':
        return run_normalize(config)
    elif stage == 'all':
        for s in STAGES:
            logger.info('=' * 60)
            logger.info(f"STAGE: {s.upper()}")
            logger.info('=' * 60)
            # Normalize reads what aggregate writes, so stop at the first failure
            if not run_stage(s, config):
                logger.error(f"Stage {s} failed!")
                return False
        return True
    else:
        logger.error(f"Unknown stage: {stage}")
        return False


def run_aggregate(config: PipelineConfig) -> bool:
    """Run the aggregation stage."""
    aggregator = Aggregator(
        poi_dir=config.poi_dir,
        output_path=config.aggregated_path,
        on_duplicate=config.on_duplicate,
        progress=config.progress,
    )
    return aggregator.run()


def run_normalize(config: PipelineConfig) -> bool:
    """Run the normalization stage."""
    normalizer = Normalizer(
        input_path=config.aggregated_path,
        output_path=config.output_path,
    )
    return normalizer.run()


def main():
    parser = argparse.ArgumentParser(
        description='Run the POI data pipeline',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  poimap                                  # Aggregate ./poi, then write ./kc3kai.json
  poimap --stage aggregate                # Only write ./poi/final.json
  poimap --stage normalize -o out.json    # Only normalize
  poimap --config pipeline.yaml           # Read paths and options from YAML
  poimap --on-duplicate error             # Fail if two files describe the same cell
"""
    )

    parser.add_argument('--stage', '-t', type=str, default='all',
                        choices=STAGES + ['all'],
                        help='Pipeline stage to run')
    parser.add_argument('--config', '-c', type=Path,
                        help='YAML config file')
    parser.add_argument('--poi-dir', type=Path,
                        help='Directory with <area>_<cell>.json files')
    parser.add_argument('--aggregated', '-a', type=Path,
                        help='Aggregated document path')
    parser.add_argument('--output', '-o', type=Path,
                        help='Normalized document path')
    parser.add_argument('--on-duplicate', choices=DUPLICATE_POLICIES,
                        help='How to handle two files for the same cell')
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
            aggregated_path=args.aggregated,
            output_path=args.output,
            on_duplicate=args.on_duplicate,
            progress=False if args.no_progress else None,
        )
    except CONFIG_ERRORS as e:
        logger.error(f"Could not load config: {e}")
        sys.exit(1)

    success = run_stage(args.stage, config)
    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
