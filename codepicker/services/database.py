"""
JSON persistence of the download database.
"""

import json
import tempfile
from pathlib import Path

from ..models import Database, DownloadRecord
from ..infrastructure.error_handler import DatabaseError
from ..infrastructure.logger import logger


class DatabaseService:
    """Loads and atomically saves the database file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Database:
        """
        Read the database.

        A missing file is an empty database, not an error.

        Raises:
            DatabaseError: If the file exists but cannot be parsed
        """
        if not self.path.exists():
            logger.debug(f"Database {self.path} does not exist, a new one will be created")
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding='utf-8'))
            if not isinstance(raw, dict):
                raise ValueError("top-level value must be an object")
            database = {sha: DownloadRecord.from_dict(data) for sha, data in raw.items()}
        except (OSError, ValueError) as e:
            raise DatabaseError(f"Cannot read database {self.path}", e) from e

        logger.debug(f"Loaded {len(database)} records from {self.path}")
        return database

    def save(self, database: Database) -> None:
        """Write the database to a temporary file and rename it into place."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(
            {sha: record.to_dict() for sha, record in sorted(database.items())},
            indent=2,
        )

        temp_fd = tempfile.NamedTemporaryFile(
            mode='w',
            encoding='utf-8',
            dir=str(self.path.parent),
            prefix='.codepicker_',
            suffix='.tmp',
            delete=False,
        )
        temp_path = Path(temp_fd.name)
        try:
            temp_fd.write(payload)
            temp_fd.flush()
            temp_fd.close()
            temp_path.replace(self.path)
        except BaseException:
            temp_fd.close()
            if temp_path.exists():
                temp_path.unlink()
            raise

        logger.debug(f"Saved {len(database)} records to {self.path}")
