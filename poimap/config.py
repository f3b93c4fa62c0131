"""
Pipeline configuration.

Defaults come from constants.py. An optional YAML file can override them,
and command line flags override the file:

    poi_dir: poi
    aggregated_path: poi/final.json
    output_path: kc3kai.json
    on_duplicate: overwrite   # or: error
    progress: true
"""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml

from .constants import (
    DEFAULT_AGGREGATED_PATH,
    DEFAULT_OUTPUT_PATH,
    DEFAULT_POI_DIR,
    DUPLICATE_OVERWRITE,
    DUPLICATE_POLICIES,
)

PATH_FIELDS = ('poi_dir', 'aggregated_path', 'output_path')

# Errors load_config can raise for a bad or unreadable file
CONFIG_ERRORS = (OSError, ValueError, yaml.YAMLError)

# Types accepted from YAML for each config field
FIELD_TYPES = {
    'poi_dir': str,
    'aggregated_path': str,
    'output_path': str,
    'on_duplicate': str,
    'progress': bool,
}


@dataclass(frozen=True)
class PipelineConfig:
    """Paths and options shared by the pipeline stages."""
    poi_dir: Path = Path(DEFAULT_POI_DIR)
    aggregated_path: Path = Path(DEFAULT_AGGREGATED_PATH)
    output_path: Path = Path(DEFAULT_OUTPUT_PATH)
    on_duplicate: str = DUPLICATE_OVERWRITE
    progress: bool = True

    def __post_init__(self):
        if self.on_duplicate not in DUPLICATE_POLICIES:
            raise ValueError(
                f"Invalid on_duplicate policy: {self.on_duplicate} "
                f"(expected one of {', '.join(DUPLICATE_POLICIES)})"
            )

    def with_overrides(self, **overrides) -> 'PipelineConfig':
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        for name in PATH_FIELDS:
            if name in changes:
                changes[name] = Path(changes[name])
        return replace(self, **changes)


def load_config(config_path: Optional[Path] = None) -> PipelineConfig:
    """
    Load pipeline configuration.

    Args:
        config_path: YAML file to read, or None for the defaults

    Returns:
        The resulting configuration

    Raises:
        ValueError: On unknown keys, wrongly typed values, a non-mapping
            document or a bad policy
    """
    config = PipelineConfig()
    if config_path is None:
        return config

    with open(config_path, encoding='utf-8') as f:
        data = yaml.safe_load(f)

    # An empty file means "use the defaults"
    if data is None:
        return config
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping: {config_path}")

    known = {f.name for f in fields(PipelineConfig)}
    unknown = sorted(str(k) for k in data if k not in known)
    if unknown:
        raise ValueError(f"Unknown config field(s) in {config_path}: {', '.join(unknown)}")

    for name, value in data.items():
        expected = FIELD_TYPES[name]
        # YAML null means "keep the default"
        if value is not None and not isinstance(value, expected):
            raise ValueError(
                f"Config field {name} in {config_path} must be {expected.__name__}, "
                f"got {type(value).__name__}: {value!r}"
            )

    return config.with_overrides(**data)
