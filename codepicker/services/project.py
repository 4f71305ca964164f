"""
Loading of project files.
"""

import json
from pathlib import Path
from typing import List

from ..models import ProjectEntry, parse_project
from ..infrastructure.error_handler import ProjectError
from ..infrastructure.logger import logger


class ProjectService:
    """Reads and validates a project file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> List[ProjectEntry]:
        """
        Read the project file.

        Raises:
            ProjectError: If the file is missing, not JSON or malformed
        """
        try:
            entries = parse_project(json.loads(self.path.read_text(encoding='utf-8')))
        except (OSError, ValueError) as e:
            raise ProjectError(f"Cannot read project {self.path}", e) from e

        logger.debug(f"Loaded {len(entries)} repositories from {self.path}")
        return entries
