"""Column Schema Entity - per-column interpretation derived from a header line."""
from dataclasses import dataclass
from typing import Iterator, Tuple, Union

from log_metrics.domain.entities.unit import Unit


@dataclass(frozen=True)
class MetricColumn:
    """A column emitted as one data point per row."""

    name: str
    unit: Unit


@dataclass(frozen=True)
class SkipColumn:
    """A separator, maximum or running-total column that is never emitted."""


@dataclass(frozen=True)
class TimestampColumn:
    """The column holding the sample time in epoch milliseconds."""


Column = Union[MetricColumn, SkipColumn, TimestampColumn]


@dataclass(frozen=True)
class ColumnSchema:
    """Immutable schema built from one header line.

    A new header produces a new instance; instances are never mutated.
    """

    header: Tuple[str, ...]
    columns: Tuple[Column, ...]
    timestamp_index: int

    def __post_init__(self):
        if len(self.header) != len(self.columns):
            raise ValueError("Schema must have one column per header token")
        timestamps = [
            i for i, column in enumerate(self.columns)
            if isinstance(column, TimestampColumn)
        ]
        if timestamps != [self.timestamp_index]:
            raise ValueError("Schema must have exactly one timestamp column")

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self) -> Iterator[Column]:
        return iter(self.columns)

    @property
    def metric_columns(self) -> Tuple[Tuple[int, MetricColumn], ...]:
        """Metric columns with their positions, in column order."""
        return tuple(
            (i, column) for i, column in enumerate(self.columns)
            if isinstance(column, MetricColumn)
        )
