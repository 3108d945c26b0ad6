"""Resolve a location string into a configured record data source."""

from enum import Enum
import logging

from blast_feed.context import Context
from blast_feed.errors import DataOpenError, DataReadError
from blast_feed.sources.base import DataSource
from blast_feed.sources.gcs import GCS_PREFIX, GCSSource, ObjectOpener, parse_gcs_location
from blast_feed.sources.inline import InlineSource
from blast_feed.sources.local import LocalFileSource
from blast_feed.state import RunState

logger = logging.getLogger(__name__)


class LocationKind(Enum):
    """The forms a location string can take, in dispatch order."""

    NONE = "none"
    INLINE = "inline"
    GCS = "gcs"
    LOCAL = "local"


def classify_location(value: str) -> LocationKind:
    """
    Classify a location string by its shape alone.

    An empty string means no data. Anything containing a newline is inline
    data, a ``gs://`` prefix names a GCS object, and everything else is a
    local path. A single-line literal is therefore read as a path.
    """
    if value == "":
        return LocationKind.NONE
    if "\n" in value:
        return LocationKind.INLINE
    if value.startswith(GCS_PREFIX):
        return LocationKind.GCS
    return LocationKind.LOCAL


def create_source(
    value: str,
    context: Context | None = None,
    opener: ObjectOpener | None = None,
) -> DataSource | None:
    """
    Create a DataSource for a location string.

    Args:
        value: Location string (inline data, gs://bucket/object, or local path).
        context: Context that can cancel a remote fetch.
        opener: ObjectOpener used for gs:// locations.

    Returns:
        DataSource | None: The source, or None for an empty location.

    Raises:
        DataOpenError: If a gs:// location is malformed.
    """
    kind = classify_location(value)

    if kind is LocationKind.NONE:
        return None

    if kind is LocationKind.INLINE:
        logger.info("Creating InlineSource")
        return InlineSource(value)

    if kind is LocationKind.GCS:
        try:
            bucket, key = parse_gcs_location(value)
        except ValueError as e:
            raise DataOpenError(value, str(e)) from e
        logger.info("Creating GCSSource for gs://%s/%s", bucket, key)
        return GCSSource(bucket=bucket, key=key, opener=opener, context=context)

    logger.info("Creating LocalFileSource for %s", value)
    return LocalFileSource(value)


def open_data(
    state: RunState,
    context: Context,
    value: str,
    headers: bool = False,
    opener: ObjectOpener | None = None,
) -> None:
    """
    Open ``value`` and install it as the data source of ``state``.

    An empty location leaves ``state`` without a data source. If the source
    cannot be opened, ``state`` is not modified.

    Args:
        state: Run state to configure.
        context: Context that can cancel a remote fetch.
        value: Location string.
        headers: Read the first record into ``state.headers``.
        opener: ObjectOpener used for gs:// locations.

    Raises:
        DataOpenError: If the location cannot be opened.
        DataReadError: If the header record cannot be read. The data
            source is cleared again.
        CancelledError: If ``context`` is cancelled during a remote fetch.
    """
    source = create_source(value, context=context, opener=opener)
    if source is None:
        return

    stream = source.open()
    state.set_data(stream, owned=source.owned)

    if headers:
        try:
            state.read_headers()
        except DataReadError:
            state.set_data(None)
            raise
