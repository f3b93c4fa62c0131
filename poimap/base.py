"""
Base class and JSON helpers for pipeline stages.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any:
    """Read a JSON file. A UTF-8 byte order mark is skipped if present."""
    with open(path, encoding='utf-8-sig') as f:
        return json.load(f)


def write_json(path: Path, data: Any, indent: Optional[str] = None) -> None:
    """
    Write a JSON document, replacing any existing file.

    The document is fully serialized before the file is opened, so a
    serialization error leaves the previous file as it was.

    Args:
        path: Output file
        data: Document to write
        indent: Indentation string, or None for compact output
    """
    if indent is None:
        text = json.dumps(data, ensure_ascii=False, separators=(',', ':'))
    else:
        text = json.dumps(data, ensure_ascii=False, indent=indent)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text + '\n')


class BaseStage(ABC):
    """Base class for pipeline stages."""

    name = 'stage'

    @abstractmethod
    def process(self) -> Dict:
        """
        Run the stage.

        Returns:
            Dict of summary statistics
        """
        pass

    def run(self) -> bool:
        """Run the stage, logging the outcome instead of raising."""
        logger.info(f"Running {self.name}...")

        try:
            stats = self.process()
        except Exception as e:
            logger.error(f"{self.name} failed: {e}", exc_info=True)
            return False

        logger.info(f"{self.name} finished")
        for key, value in stats.items():
            logger.info(f"  {key}: {value}")
        return True
