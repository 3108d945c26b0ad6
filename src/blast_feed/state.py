"""Shared state for one run: data source, headers, rate and shutdown signaling."""

import logging
import threading
from types import TracebackType
from typing import IO, Any

from blast_feed.errors import DataReadError
from blast_feed.records import RecordSource
from blast_feed.sync import CompletionSignal, WaitGroup

logger = logging.getLogger(__name__)


class RunState:
    """
    Process-wide state container for a single run.

    Holds the active record source and the fields the status loop and the
    downstream engine share. At most one record source is active; replacing
    it releases any stream the previous one owned.
    """

    def __init__(
        self,
        quiet: bool = False,
        out_writer: IO[str] | None = None,
        input_reader: IO[str] | None = None,
        rate: float = 0.0,
    ) -> None:
        """
        Initialize the run state.

        Args:
            quiet: Suppress all status output and prompts.
            out_writer: Sink for status text. None disables reporting.
            input_reader: Source of operator input. None disables the rate prompt.
            rate: Initial target rate in requests per second.
        """
        self.headers: list[str] = []
        self.quiet = quiet
        self.out_writer = out_writer
        self.input_reader = input_reader
        self.record_reader: RecordSource | None = None
        self.data_closer: Any = None
        self.completion = CompletionSignal()
        self.shutdown = WaitGroup()

        self._rate = rate
        self._rate_lock = threading.Lock()

    @property
    def rate(self) -> float:
        with self._rate_lock:
            return self._rate

    @rate.setter
    def rate(self, value: float) -> None:
        with self._rate_lock:
            self._rate = value

    @property
    def reporting(self) -> bool:
        """Whether status output is enabled."""
        return not self.quiet and self.out_writer is not None

    def set_data(self, stream: IO[Any] | None, owned: bool = True) -> None:
        """
        Install ``stream`` as the record data source.

        Any stream owned by the previous source is closed first. Passing None
        clears the reader and the closer.

        Args:
            stream: Readable stream, or None for no data source.
            owned: Take ownership of the stream's ``close`` when it has one.
        """
        self.close()

        if stream is None:
            self.record_reader = None
            return

        self.record_reader = RecordSource(stream)
        closer = getattr(stream, "close", None)
        self.data_closer = closer if owned and callable(closer) else None
        logger.debug("Data source set (owned=%s)", self.data_closer is not None)

    def read_headers(self) -> list[str]:
        """
        Consume one record and store it as the header row.

        Calling this again reads the next record and overwrites the headers.

        Raises:
            DataReadError: If no data source is set or the data is empty.
        """
        headers = self.read_record()
        if headers is None:
            raise DataReadError("Failed to read headers: no records in data source")
        self.headers = headers
        logger.info("Read %d headers", len(headers))
        return headers

    def read_record(self) -> list[str] | None:
        """
        Read the next record from the active data source.

        Returns:
            list[str] | None: The record, or None at end of data.

        Raises:
            DataReadError: If no data source is set or the read fails.
        """
        if self.record_reader is None:
            raise DataReadError("No data source configured")
        return self.record_reader.read()

    def close(self) -> None:
        """Release the owned stream, if any."""
        closer, self.data_closer = self.data_closer, None
        if closer is not None:
            closer()
            logger.debug("Released previous data stream")

    def __enter__(self) -> "RunState":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
