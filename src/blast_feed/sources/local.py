"""Local file system data source implementation."""

import logging
from pathlib import Path
from typing import IO, Any

from typing_extensions import override

from blast_feed.errors import DataOpenError
from blast_feed.sources.base import DataSource

logger = logging.getLogger(__name__)


class LocalFileSource(DataSource):
    """
    Read record data from the local file system.

    The returned handle is owned by the run state and closed on teardown.
    """

    def __init__(self, file_path: str, encoding: str = "utf-8") -> None:
        """
        Initialize LocalFileSource.

        Args:
            file_path: Path to the local data file.
            encoding: Text encoding of the file (default: utf-8).
        """
        self.file_path = Path(file_path)
        self.encoding = encoding

        logger.info("LocalFileSource initialized for: %s", self.file_path)

    @override
    def open(self) -> IO[Any]:
        """
        Open the file for reading.

        Returns:
            IO[Any]: Text handle suitable for the csv module.

        Raises:
            DataOpenError: If the file cannot be opened.
        """
        try:
            return self.file_path.open("r", encoding=self.encoding, newline="")
        except OSError as e:
            logger.warning("Could not open %s: %s", self.file_path, e)
            raise DataOpenError(str(self.file_path), str(e)) from e

    @override
    def get_metadata(self) -> dict[str, Any]:
        try:
            size = self.file_path.stat().st_size
        except OSError:
            size = 0

        return {
            "size": size,
            "source_type": "local",
            "path": str(self.file_path),
        }
