"""Inline literal data source implementation."""

import io
import logging
from typing import IO, Any

from typing_extensions import override

from blast_feed.sources.base import DataSource

logger = logging.getLogger(__name__)


class InlineSource(DataSource):
    """Serve record data passed directly as a string."""

    owned = False

    def __init__(self, value: str) -> None:
        self.value = value
        logger.info("InlineSource initialized (%d characters)", len(value))

    @override
    def open(self) -> IO[Any]:
        return io.StringIO(self.value)

    @override
    def get_metadata(self) -> dict[str, Any]:
        return {
            "size": len(self.value.encode("utf-8")),
            "source_type": "inline",
        }
