"""Google Cloud Storage data source implementation."""

from abc import ABC, abstractmethod
import logging
from typing import IO, Any

from typing_extensions import override

from blast_feed.context import Context
from blast_feed.errors import CancelledError, DataOpenError
from blast_feed.sources.base import DataSource

logger = logging.getLogger(__name__)

GCS_PREFIX = "gs://"


def parse_gcs_location(value: str) -> tuple[str, str]:
    """
    Split a ``gs://bucket/object`` location into bucket and object names.

    The bucket is everything up to the first ``/`` after the prefix; the
    object is the remainder, so ``gs://b/a/c`` yields ``("b", "a/c")``.

    Raises:
        ValueError: If the prefix, separator or bucket name is missing.
    """
    if not value.startswith(GCS_PREFIX):
        raise ValueError(f"Invalid GCS location: {value}. Expected: gs://bucket/object")

    name = value[len(GCS_PREFIX) :]
    bucket, sep, key = name.partition("/")
    if not sep or not bucket:
        raise ValueError(f"Invalid GCS location: {value}. Expected: gs://bucket/object")
    return bucket, key


class ObjectOpener(ABC):
    """Open a readable stream for a remote object."""

    @abstractmethod
    def open(self, context: Context, bucket: str, key: str) -> IO[Any]:
        """
        Open ``key`` in ``bucket`` for reading.

        Raises:
            CancelledError: If ``context`` is cancelled during the fetch.
            Exception: Any client or transport failure.
        """
        ...


class GoogleCloudOpener(ObjectOpener):
    """
    Open objects with the google-cloud-storage client.

    Credentials are resolved by the client library from the environment.
    """

    def __init__(self, client: Any = None) -> None:
        """
        Initialize GoogleCloudOpener.

        Args:
            client: ``google.cloud.storage.Client`` instance. If None, a
                default client is created on first use.

        Raises:
            ImportError: If google-cloud-storage is not installed.
        """
        try:
            from google.cloud import storage  # noqa: F401
        except ImportError as e:
            raise ImportError(
                "google-cloud-storage is required for gs:// data. "
                "Install with: pip install blast-feed[gcs]"
            ) from e

        self.client = client

    @override
    def open(self, context: Context, bucket: str, key: str) -> IO[Any]:
        from google.cloud import storage

        context.raise_if_cancelled()
        if self.client is None:
            self.client = storage.Client()

        context.raise_if_cancelled()
        blob = self.client.bucket(bucket).get_blob(key)
        if blob is None:
            raise FileNotFoundError(f"No such object: gs://{bucket}/{key}")

        context.raise_if_cancelled()
        return blob.open("rt", encoding="utf-8", newline="")


class GCSSource(DataSource):
    """
    Read record data from a Google Cloud Storage object.

    Fetching is delegated to an ObjectOpener so the client and transport can
    be replaced.
    """

    def __init__(
        self,
        bucket: str,
        key: str,
        opener: ObjectOpener | None = None,
        context: Context | None = None,
    ) -> None:
        """
        Initialize GCSSource.

        Args:
            bucket: GCS bucket name.
            key: Object name within the bucket.
            opener: ObjectOpener instance. If None, a GoogleCloudOpener is used.
            context: Context that can cancel the fetch.

        Raises:
            ValueError: If bucket is empty.
        """
        if not bucket:
            raise ValueError("bucket must be non-empty")

        self.bucket = bucket
        self.key = key
        self.opener = opener
        self.context = context or Context()

        logger.info("GCSSource initialized for gs://%s/%s", bucket, key)

    @property
    def location(self) -> str:
        return f"{GCS_PREFIX}{self.bucket}/{self.key}"

    @override
    def open(self) -> IO[Any]:
        """
        Fetch the object through the opener.

        Raises:
            CancelledError: If the context was cancelled.
            ImportError: If no opener was given and google-cloud-storage is missing.
            DataOpenError: If the client or the object fetch fails.
        """
        if self.opener is None:
            self.opener = GoogleCloudOpener()

        try:
            return self.opener.open(self.context, self.bucket, self.key)
        except CancelledError:
            raise
        except Exception as e:
            logger.exception("Error opening GCS object %s: %s", self.location, e)
            raise DataOpenError(self.location, str(e)) from e

    @override
    def get_metadata(self) -> dict[str, Any]:
        return {
            "source_type": "gcs",
            "bucket": self.bucket,
            "key": self.key,
        }
