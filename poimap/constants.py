"""
Centralized constants for the POI data pipeline.

Import from here to ensure consistency between the stages.
"""

# Input file naming: <area>_<cell>.json
CELL_FILE_PATTERN = r'^([0-9]+)_([0-9]+)\.json$'

# Default locations, relative to the working directory
DEFAULT_POI_DIR = 'poi'
DEFAULT_AGGREGATED_PATH = 'poi/final.json'
DEFAULT_OUTPUT_PATH = 'kc3kai.json'

# Indentation of the normalized output (the aggregated file is compact)
OUTPUT_INDENT = '\t'

# Spot records: [x, y, category, ...]
SPOT_CATEGORY_INDEX = 2
START_CATEGORY = 'start'
START_MARKER = 'Start'

WORLD_LABEL_PREFIX = 'World'
KEY_SEPARATOR = '-'

# What to do when two files map to the same (area, cell) pair
DUPLICATE_OVERWRITE = 'overwrite'  # later-scanned file wins
DUPLICATE_ERROR = 'error'
DUPLICATE_POLICIES = (DUPLICATE_OVERWRITE, DUPLICATE_ERROR)
