from .column_schema import (
    Column,
    ColumnSchema,
    MetricColumn,
    SkipColumn,
    TimestampColumn,
)
from .data_point import DataPoint, Dimension
from .unit import Unit

__all__ = [
    "Column",
    "ColumnSchema",
    "MetricColumn",
    "SkipColumn",
    "TimestampColumn",
    "DataPoint",
    "Dimension",
    "Unit",
]
