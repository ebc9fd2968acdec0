"""Error taxonomy for ftndb.

Core code raises these and never retries; the CLI maps them to exit codes.
"""

from __future__ import annotations


class FtndbError(Exception):
    """Base class for all ftndb failures."""


class ConfigUnavailable(FtndbError):
    """Configuration could not be found, parsed or resolved."""


class NodelistFileNotFound(FtndbError, FileNotFoundError):
    """No nodelist file matched the requested basename."""


class FileOpenError(FtndbError):
    """The selected nodelist file could not be opened for reading."""


class MalformedLineError(FtndbError):
    """A nodelist line has a non-numeric or negative number field."""

    def __init__(self, line_number: int, line: str) -> None:
        self.line_number = line_number
        self.line = line
        super().__init__(f"malformed nodelist line {line_number}: {line!r}")


class StoreConnectionError(FtndbError):
    """The database could not be opened."""


class StatementExecutionError(FtndbError):
    """A SQL statement failed in the database."""

    def __init__(self, statement: str, cause: Exception) -> None:
        self.statement = statement
        super().__init__(f"{cause} [while executing: {statement}]")


class NoOutputTarget(FtndbError):
    """A report was requested without a destination to write to."""
