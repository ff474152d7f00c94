"""Row Translator - turns one data row into timestamped data points."""
import re
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from log_metrics.domain.entities.column_schema import ColumnSchema
from log_metrics.domain.entities.data_point import DataPoint, Dimension
from log_metrics.domain.errors import DuplicateHeaderRow, ParseError, SchemaMismatchError

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Plain decimal literals only; int() and float() also take "1_000" and " 5".
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:NaN|Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")


def is_numeric(token: str) -> bool:
    return _DECIMAL.fullmatch(token) is not None


def parse_timestamp(token: str, column: int, line: Optional[str] = None) -> datetime:
    """Parse an epoch-milliseconds cell into an aware UTC datetime."""
    if _INTEGER.fullmatch(token) is None:
        raise ParseError(column, token, line)
    try:
        return _EPOCH + timedelta(milliseconds=int(token))
    except (ValueError, OverflowError):
        raise ParseError(column, token, line) from None


def parse_value(token: str, column: int, line: Optional[str] = None) -> float:
    if not is_numeric(token):
        raise ParseError(column, token, line)
    return float(token)


def translate_row(
    tokens: Sequence[str],
    schema: ColumnSchema,
    dimensions: Sequence[Dimension] = (),
    line: Optional[str] = None,
) -> List[DataPoint]:
    """Convert a data row into one data point per metric column.

    Every cell is parsed before any point is built, so a bad cell drops the
    whole row.

    Raises:
        SchemaMismatchError: If the row width differs from the schema
        DuplicateHeaderRow: If the timestamp cell holds the literal "time"
        ParseError: If the timestamp or a metric cell is not numeric
    """
    if len(tokens) != len(schema):
        raise SchemaMismatchError(len(schema), len(tokens), line)

    time_token = tokens[schema.timestamp_index]
    if time_token == "time":
        raise DuplicateHeaderRow(line)

    timestamp = parse_timestamp(time_token, schema.timestamp_index, line)
    values = [
        (column, parse_value(tokens[index], index, line))
        for index, column in schema.metric_columns
    ]

    tags = tuple(dimensions)
    return [
        DataPoint(
            metric_name=column.name,
            unit=column.unit,
            value=value,
            timestamp=timestamp,
            dimensions=tags,
        )
        for column, value in values
    ]
