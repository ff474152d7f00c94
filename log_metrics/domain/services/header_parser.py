"""Header Parser - builds a column schema from the first line of a stats log."""
import logging
import re
from typing import List, Optional, Sequence

from log_metrics.domain.entities.column_schema import (
    Column,
    ColumnSchema,
    MetricColumn,
    SkipColumn,
    TimestampColumn,
)
from log_metrics.domain.errors import SchemaMissingError
from log_metrics.domain.services.unit_classifier import classify_unit, normalize_token

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"\W+")

# Running totals are skipped, except these two which are current values.
_KEPT_TOTALS = frozenset({"total threads", "total heap"})


def split_line(line: str) -> List[str]:
    """Split a comma-separated line into stripped tokens."""
    return [token.strip() for token in line.split(",")]


def metric_name(token: str) -> str:
    """Collapse every run of non-word characters to one space."""
    return _NON_WORD.sub(" ", token).strip()


def is_timestamp_token(token: str) -> bool:
    return normalize_token(token) == "time"


def is_skipped_token(token: str) -> bool:
    """Whether a header token names a column that is never emitted."""
    if normalize_token(token) == "separator":
        return True
    if token.startswith("max "):
        return True
    return token.startswith("total ") and token not in _KEPT_TOTALS


def parse_header(tokens: Sequence[str], line: Optional[str] = None) -> ColumnSchema:
    """Derive the column schema from header tokens.

    Args:
        tokens: The header line, already split into columns
        line: Raw line text, used only for error reporting

    Returns:
        A schema with one entry per token and exactly one timestamp column

    Raises:
        SchemaMissingError: If there is no "time" column, or more than one
    """
    columns: List[Column] = []
    timestamp_indexes: List[int] = []

    for index, token in enumerate(tokens):
        if is_skipped_token(token):
            columns.append(SkipColumn())
        elif is_timestamp_token(token):
            columns.append(TimestampColumn())
            timestamp_indexes.append(index)
        else:
            columns.append(MetricColumn(name=metric_name(token), unit=classify_unit(token)))

    if not timestamp_indexes:
        raise SchemaMissingError("No schema: header has no time column", line)
    if len(timestamp_indexes) > 1:
        raise SchemaMissingError(
            f"No schema: header has {len(timestamp_indexes)} time columns", line
        )

    schema = ColumnSchema(
        header=tuple(tokens),
        columns=tuple(columns),
        timestamp_index=timestamp_indexes[0],
    )
    logger.debug(
        f"Parsed header: {len(schema)} columns, {len(schema.metric_columns)} metrics, "
        f"time at column {schema.timestamp_index}"
    )
    return schema
