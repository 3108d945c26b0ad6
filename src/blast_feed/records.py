"""Comma-delimited record reader over an opened data stream."""

from collections.abc import Iterable, Iterator
import csv
import io
import logging
from typing import IO, Any

from blast_feed.errors import DataReadError

logger = logging.getLogger(__name__)

QUOTECHAR = '"'


class RecordSource:
    """
    Read structured records, one at a time, from a readable stream.

    Byte streams are decoded as UTF-8; text streams are used as-is. Blank
    lines are skipped. Every record must have as many fields as the first
    one, and quotes may only open a field. Only one logical reader may
    consume a given stream.
    """

    def __init__(self, stream: IO[Any], delimiter: str = ",") -> None:
        """
        Initialize the record source.

        Args:
            stream: Readable text or binary stream.
            delimiter: Field delimiter (default: comma).
        """
        self.stream = stream
        self.delimiter = delimiter
        self.records_read = 0
        self.fields_per_record: int | None = None
        self._raw: list[str] = []
        self._reader = csv.reader(
            self._track(_as_text(stream)),
            delimiter=delimiter,
            quotechar=QUOTECHAR,
            strict=True,
        )

    def _track(self, lines: Iterable[str]) -> Iterator[str]:
        for line in lines:
            self._raw.append(line)
            yield line

    def read(self) -> list[str] | None:
        """
        Read the next record.

        Returns:
            list[str] | None: The record's fields, or None at end of data.

        Raises:
            DataReadError: If the underlying stream or record is malformed.
        """
        number = self.records_read + 1
        self._raw.clear()
        try:
            record = next(self._reader)
            while not record:
                self._raw.clear()
                record = next(self._reader)
        except StopIteration:
            return None
        except (csv.Error, OSError, ValueError) as e:
            raise DataReadError(f"Failed to read record {number}: {e}") from e

        if _has_bare_quote("".join(self._raw), self.delimiter):
            raise DataReadError(
                f"Failed to read record {number}: bare {QUOTECHAR} in non-quoted field"
            )

        if self.fields_per_record is None:
            self.fields_per_record = len(record)
        elif len(record) != self.fields_per_record:
            raise DataReadError(
                f"Failed to read record {number}: wrong number of fields "
                f"(got {len(record)}, expected {self.fields_per_record})"
            )

        self.records_read = number
        logger.debug("Read record %d (%d fields)", number, len(record))
        return record

    def __iter__(self) -> Iterator[list[str]]:
        while True:
            record = self.read()
            if record is None:
                return
            yield record


def _as_text(stream: IO[Any]) -> Iterator[str] | IO[str]:
    if isinstance(stream, io.TextIOBase):
        return stream
    # Decoded lazily; closing the stream stays with its owner.
    return (line.decode("utf-8") if isinstance(line, bytes) else line for line in stream)


def _has_bare_quote(text: str, delimiter: str) -> bool:
    """Whether a quote appears inside a field that did not open with one."""
    in_quotes = False
    field_start = True
    i = 0
    while i < len(text):
        ch = text[i]
        if in_quotes:
            if ch == QUOTECHAR:
                if text[i + 1 : i + 2] == QUOTECHAR:
                    i += 1
                else:
                    in_quotes = False
        elif ch == delimiter or ch in "\r\n":
            field_start = True
        elif ch == QUOTECHAR:
            if not field_start:
                return True
            in_quotes = True
            field_start = False
        else:
            field_start = False
        i += 1
    return False
