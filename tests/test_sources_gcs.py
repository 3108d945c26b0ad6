"""Tests for GCSSource and the object openers."""

import io
from typing import IO, Any
from unittest.mock import Mock

import pytest
from typing_extensions import override

from blast_feed.context import Context
from blast_feed.errors import CancelledError, DataOpenError
from blast_feed.sources.gcs import GCSSource, GoogleCloudOpener, ObjectOpener, parse_gcs_location

try:
    from google.cloud import storage  # noqa: F401

    HAS_GCS = True
except ImportError:
    HAS_GCS = False


class RecordingOpener(ObjectOpener):
    def __init__(self, payload: str = "a,b\n") -> None:
        self.payload = payload
        self.calls: list[tuple[Context, str, str]] = []

    @override
    def open(self, context: Context, bucket: str, key: str) -> IO[Any]:
        self.calls.append((context, bucket, key))
        return io.StringIO(self.payload)


def test_parse_gcs_location() -> None:
    """Test splitting at the first separator after the prefix."""
    assert parse_gcs_location("gs://bucket/object") == ("bucket", "object")
    assert parse_gcs_location("gs://bucket/a/b") == ("bucket", "a/b")
    assert parse_gcs_location("gs://bucket/") == ("bucket", "")


def test_parse_gcs_location_validation() -> None:
    """Test that malformed locations are rejected."""
    with pytest.raises(ValueError, match="Invalid GCS location"):
        parse_gcs_location("gs://bucket")

    with pytest.raises(ValueError, match="Invalid GCS location"):
        parse_gcs_location("gs:///object")

    with pytest.raises(ValueError, match="Invalid GCS location"):
        parse_gcs_location("s3://bucket/object")


def test_gcs_source_validation() -> None:
    """Test GCSSource parameter validation."""
    with pytest.raises(ValueError, match="must be non-empty"):
        GCSSource(bucket="", key="data.csv", opener=RecordingOpener())


def test_gcs_source_delegates_to_opener() -> None:
    """Test that open passes context, bucket and key to the opener."""
    opener = RecordingOpener("x,y\n")
    ctx = Context()
    source = GCSSource(bucket="bucket", key="a/b.csv", opener=opener, context=ctx)

    stream = source.open()

    assert stream.read() == "x,y\n"
    assert opener.calls == [(ctx, "bucket", "a/b.csv")]
    assert source.owned is True


def test_gcs_source_wraps_opener_failure() -> None:
    """Test that fetch failures become DataOpenError with the cause chained."""
    opener = Mock(spec=ObjectOpener)
    cause = PermissionError("forbidden")
    opener.open.side_effect = cause
    source = GCSSource(bucket="bucket", key="data.csv", opener=opener)

    with pytest.raises(DataOpenError, match="gs://bucket/data.csv") as exc_info:
        source.open()

    assert exc_info.value.location == "gs://bucket/data.csv"
    assert exc_info.value.__cause__ is cause


def test_gcs_source_propagates_cancellation() -> None:
    """Test that cancellation is not reported as an open failure."""
    opener = Mock(spec=ObjectOpener)
    opener.open.side_effect = CancelledError("context cancelled")
    source = GCSSource(bucket="bucket", key="data.csv", opener=opener)

    with pytest.raises(CancelledError):
        source.open()


def test_gcs_source_metadata() -> None:
    """Test GCSSource metadata."""
    source = GCSSource(bucket="bucket", key="data.csv", opener=RecordingOpener())

    assert source.get_metadata() == {
        "source_type": "gcs",
        "bucket": "bucket",
        "key": "data.csv",
    }


@pytest.mark.skipif(not HAS_GCS, reason="Requires google-cloud-storage")
def test_google_cloud_opener_reads_blob() -> None:
    """Test GoogleCloudOpener against a mocked storage client."""
    blob = Mock()
    blob.open.return_value = io.StringIO("a,b\n")
    client = Mock()
    client.bucket.return_value.get_blob.return_value = blob

    opener = GoogleCloudOpener(client=client)
    stream = opener.open(Context(), "bucket", "data.csv")

    assert stream.read() == "a,b\n"
    client.bucket.assert_called_once_with("bucket")
    client.bucket.return_value.get_blob.assert_called_once_with("data.csv")
    blob.open.assert_called_once_with("rt", encoding="utf-8", newline="")


@pytest.mark.skipif(not HAS_GCS, reason="Requires google-cloud-storage")
def test_google_cloud_opener_missing_object() -> None:
    """Test that a missing object raises FileNotFoundError."""
    client = Mock()
    client.bucket.return_value.get_blob.return_value = None

    with pytest.raises(FileNotFoundError, match="gs://bucket/missing.csv"):
        GoogleCloudOpener(client=client).open(Context(), "bucket", "missing.csv")


@pytest.mark.skipif(not HAS_GCS, reason="Requires google-cloud-storage")
def test_google_cloud_opener_checks_cancellation() -> None:
    """Test that a cancelled context stops the fetch before the client is used."""
    client = Mock()
    ctx = Context()
    ctx.cancel()

    with pytest.raises(CancelledError):
        GoogleCloudOpener(client=client).open(ctx, "bucket", "data.csv")

    client.bucket.assert_not_called()
