"""Data source variants a location string can resolve to."""

from blast_feed.sources.base import DataSource
from blast_feed.sources.gcs import GCSSource, GoogleCloudOpener, ObjectOpener
from blast_feed.sources.inline import InlineSource
from blast_feed.sources.local import LocalFileSource

__all__ = [
    "DataSource",
    "GCSSource",
    "GoogleCloudOpener",
    "InlineSource",
    "LocalFileSource",
    "ObjectOpener",
]
