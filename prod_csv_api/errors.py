"""Exception hierarchy for the ingestion pipeline.

Each pipeline stage raises its own error type so the HTTP layer can tell
an expected miss (404) from an internal failure (500).
"""

from __future__ import annotations


class IngestError(Exception):
    """Base exception for all pipeline failures."""


class ConfigError(IngestError):
    """Raised for invalid runtime configuration."""


class SourceFileNotFound(IngestError):
    """Raised when the expected CSV for the current date does not exist yet."""

    def __init__(self, expected_file: str, path: str):
        super().__init__(f"File not found: {path}")
        self.expected_file = expected_file
        self.path = path


class FileAccessError(IngestError):
    """Raised when the source file cannot be opened or read."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"Cannot read {path}: {cause}")
        self.path = path
        self.cause = cause


class EmptyFileError(IngestError):
    """Raised when a source file holds no complete record."""

    def __init__(self, path: str):
        super().__init__(f"CSV empty: {path}")
        self.path = path


class MalformedRowError(IngestError):
    """Raised when a row is too short for the dataset's column contract."""

    def __init__(self, kind: str, required: int, actual: int):
        super().__init__(
            f"{kind} row has {actual} fields, at least {required} required"
        )
        self.kind = kind
        self.required = required
        self.actual = actual


class FieldParseError(IngestError):
    """Raised when a field value cannot be coerced to its declared type."""

    def __init__(self, field: str, raw_value: str):
        super().__init__(f"Invalid value for {field}: {raw_value!r}")
        self.field = field
        self.raw_value = raw_value


class StorageError(IngestError):
    """Raised for database connection and transport failures."""
