"""Errors raised while turning log lines into metric data points."""
from typing import Optional


class PipelineError(Exception):
    """Base class for row-level failures.

    Every subclass is contained by the pipeline controller: it is logged and
    the offending line is dropped, never propagated to the line producer.
    """

    def __init__(self, detail: str, line: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.line = line

    def __str__(self) -> str:
        if self.line is None:
            return self.detail
        return f"{self.detail} (line: {self.line!r})"


class SchemaMissingError(PipelineError):
    """A line could not define a schema and no schema is established yet."""


class SchemaMismatchError(PipelineError):
    """A data row does not have as many columns as the current schema."""

    def __init__(self, expected: int, actual: int, line: Optional[str] = None):
        super().__init__(
            f"Row has {actual} columns but the schema has {expected}", line
        )
        self.expected = expected
        self.actual = actual


class ParseError(PipelineError):
    """A metric or timestamp cell is not numeric."""

    def __init__(self, column: int, token: str, line: Optional[str] = None):
        super().__init__(f"Column {column} is not numeric: {token!r}", line)
        self.column = column
        self.token = token


class TransportError(PipelineError):
    """The metrics backend rejected or failed to receive a batch."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        super().__init__(detail)
        self.status_code = status_code


class DuplicateHeaderRow(Exception):
    """A repeated header line showed up between data rows.

    Not a failure: the controller skips such rows without reporting them.
    """
