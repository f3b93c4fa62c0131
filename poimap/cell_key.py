"""
Cell key parsing.

A cell is identified by two integers, the area and the cell number. On disk
the pair shows up in three forms:
- File names: "1_2.json"
- Aggregated document keys: "1-2"
- Normalized document labels: "World 1-2"
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .constants import CELL_FILE_PATTERN, KEY_SEPARATOR, WORLD_LABEL_PREFIX

_CELL_FILE_RE = re.compile(CELL_FILE_PATTERN)


def parse_component(value: str, context: str) -> int:
    """
    Parse one half of a cell key to an integer.

    Args:
        value: The digit string to convert
        context: Where the value came from, used in the error message

    Returns:
        The parsed integer

    Raises:
        ValueError: If the value is not a plain integer
    """
    # int() alone would also accept signs, whitespace, underscores and non-ASCII digits
    if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
        raise ValueError(f"Invalid {context} component: '{value}'")
    return int(value)


@dataclass(frozen=True, order=True)
class CellKey:
    """An (area, cell) pair."""
    area: int
    cell: int

    @property
    def composite(self) -> str:
        """Key used in the aggregated document, e.g. '3-5'."""
        return f"{self.area}{KEY_SEPARATOR}{self.cell}"

    @property
    def world_label(self) -> str:
        """Label used in the normalized document, e.g. 'World 3-5'."""
        return f"{WORLD_LABEL_PREFIX} {self.composite}"

    def __str__(self) -> str:
        return self.composite

    @classmethod
    def from_filename(cls, name: Union[str, Path]) -> Optional['CellKey']:
        """
        Parse a key from a file name such as '1_2.json'.

        Only the base name is considered. Leading zeros are dropped, so
        '01_02.json' and '1_2.json' give the same key.

        Returns:
            The key, or None if the name does not follow the pattern
        """
        m = _CELL_FILE_RE.match(Path(name).name)
        if m is None:
            return None
        return cls(
            parse_component(m.group(1), 'area'),
            parse_component(m.group(2), 'cell'),
        )

    @classmethod
    def from_composite(cls, key: str) -> 'CellKey':
        """Parse a key of the aggregated document such as '1-2'."""
        parts = key.split(KEY_SEPARATOR)
        if len(parts) != 2:
            raise ValueError(f"Invalid cell key: '{key}'")
        return cls(
            parse_component(parts[0], 'area'),
            parse_component(parts[1], 'cell'),
        )
