"""Abstract base class for record data sources."""

from abc import ABC, abstractmethod
from typing import IO, Any


class DataSource(ABC):
    """
    Abstract base class for record data sources.

    Provides a unified interface for opening inline, Google Cloud Storage and
    local file data as a readable stream.
    """

    #: Whether the system owns the opened stream and must close it on teardown.
    owned: bool = True

    @abstractmethod
    def open(self) -> IO[Any]:
        """
        Open the source and return a readable stream.

        Returns:
            IO[Any]: A readable text or binary stream.

        Raises:
            DataOpenError: If the source cannot be opened.
        """
        ...

    @abstractmethod
    def get_metadata(self) -> dict[str, Any]:
        """
        Return metadata about the source.

        Returns:
            dict[str, Any]: Metadata dictionary containing at least:
                - 'source_type': Type of source ('inline', 'gcs', 'local')
        """
        ...
