"""blast-feed: record data sources and live status reporting for rate-driven load runs."""

from blast_feed.context import Context
from blast_feed.opener import open_data
from blast_feed.state import RunState
from blast_feed.status import StatusReporter

__all__ = ["Context", "RunState", "StatusReporter", "open_data"]
