"""
Point-of-interest data pipeline.

Aggregates per-cell POI files into one document and normalizes their
routes into per-world route maps:
1. Aggregate - Merge poi/<area>_<cell>.json files into poi/final.json
2. Normalize - Regroup routes under world labels into kc3kai.json
"""

from .aggregate import Aggregator, aggregate_cells
from .cell_key import CellKey
from .config import PipelineConfig, load_config
from .normalize import Normalizer, normalize_document, normalize_routes

__version__ = "1.0.0"
__all__ = [
    "Aggregator",
    "aggregate_cells",
    "CellKey",
    "PipelineConfig",
    "load_config",
    "Normalizer",
    "normalize_document",
    "normalize_routes",
]
