"""Exception types raised while opening and reading record data."""


class BlastFeedError(Exception):
    """Base class for all blast-feed errors."""


class DataOpenError(BlastFeedError, OSError):
    """
    A data location could not be opened.

    The underlying failure is always chained as ``__cause__``.
    """

    def __init__(self, location: str, message: str) -> None:
        super().__init__(f"Failed to open data from {location!r}: {message}")
        self.location = location


class DataReadError(BlastFeedError, OSError):
    """A record could not be read from the active data source."""


class CancelledError(BlastFeedError):
    """The execution context was cancelled before the operation finished."""
