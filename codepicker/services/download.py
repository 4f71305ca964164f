"""
Storage of downloaded file content on the local file system.
"""

import asyncio
import posixpath
from pathlib import Path

from ..models import Language, TreeEntry
from ..infrastructure.logger import logger


class DownloadService:
    """
    Writes downloaded content under ``<destination>/<language>/``.

    Files are named after their content hash so identical content
    from different repositories lands in the same place.
    """

    def __init__(self, destination: Path, dry_run: bool = False):
        self.destination = Path(destination)
        self.dry_run = dry_run

    def target_path(self, language: Language, entry: TreeEntry) -> Path:
        suffix = posixpath.splitext(entry.path)[1]
        return self.destination / language.value / f'{entry.sha}{suffix}'

    async def save(self, language: Language, entry: TreeEntry, content: bytes) -> str:
        """
        Store ``content`` for ``entry``.

        Returns:
            The path written, relative to the destination directory
        """
        target = self.target_path(language, entry)
        relative = target.relative_to(self.destination).as_posix()

        if self.dry_run:
            logger.debug(f"Dry-run: would write {entry.path} to {relative}")
            return relative

        await asyncio.to_thread(self._write, target, content)
        return relative

    @staticmethod
    def _write(target: Path, content: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
