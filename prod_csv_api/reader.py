"""
Streaming tail-row extraction for producer CSV files.

The producer keeps appending to today's file while we read it, so the
reader only ever returns rows that were completely written:
- blank and whitespace-only lines are skipped
- rows the csv module rejects (e.g. an unclosed quote at end of data) are skipped
- a final line without a line terminator is still being written and is ignored
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterator, List, Optional, TextIO, Union

from charset_normalizer import from_bytes
from loguru import logger

from .errors import EmptyFileError, FileAccessError, SourceFileNotFound
from .rules import CSV_DELIMITER, DEFAULT_ENCODING, ENCODING_SAMPLE_BYTES

PathLike = Union[str, Path]


def detect_encoding(sample: bytes) -> str:
    """
    Best-effort encoding for a file whose head is ``sample``.

    Rules:
    - Detect via charset-normalizer; fall back to UTF-8 when nothing matches.
    - ASCII is widened to UTF-8 since the sample may stop before the first non-ASCII byte.
    - A UTF-8 BOM selects utf-8-sig so the BOM never leaks into the first field.
    """
    match = from_bytes(sample).best()
    encoding = match.encoding if match is not None else DEFAULT_ENCODING

    normalized = encoding.lower().replace("-", "_")
    if normalized == "ascii":
        encoding, normalized = DEFAULT_ENCODING, "utf_8"
    if sample.startswith(b"\xef\xbb\xbf") and normalized in ("utf_8", "utf8"):
        encoding = "utf-8-sig"

    return encoding


class _LineTracker:
    """Yield text lines, remembering whether the latest one was newline-terminated."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self.terminated = True

    def __iter__(self) -> Iterator[str]:
        for line in self._stream:
            self.terminated = line.endswith(("\n", "\r"))
            yield line


def iter_rows(path: PathLike, encoding: Optional[str] = None) -> Iterator[List[str]]:
    """Lazily yield every complete record of ``path``, first to last."""
    try:
        if encoding is None:
            with open(path, "rb") as head:
                encoding = detect_encoding(head.read(ENCODING_SAMPLE_BYTES))

        with open(path, encoding=encoding, errors="replace", newline="") as handle:
            lines = _LineTracker(handle)
            reader = csv.reader(lines, delimiter=CSV_DELIMITER, strict=True)

            while True:
                try:
                    row = next(reader)
                except StopIteration:
                    return
                except csv.Error as exc:
                    logger.debug("Skipping unparseable record near line {} of {}: {}", reader.line_num, path, exc)
                    continue

                if not any(field.strip() for field in row):
                    continue

                if not lines.terminated:
                    logger.debug("Ignoring unterminated tail of {} ({} fields)", path, len(row))
                    return

                yield row
    except FileNotFoundError as exc:
        raise SourceFileNotFound(Path(path).name, str(path)) from exc
    except OSError as exc:
        raise FileAccessError(str(path), exc) from exc


def read_last_row(path: PathLike, encoding: Optional[str] = None) -> List[str]:
    """Return the last complete record of ``path`` in a single forward pass."""
    last_row: Optional[List[str]] = None
    for row in iter_rows(path, encoding):
        last_row = row

    if last_row is None:
        raise EmptyFileError(str(path))
    return last_row
