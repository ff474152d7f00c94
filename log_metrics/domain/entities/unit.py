from enum import Enum


class Unit(str, Enum):
    """Measurement units a metric column can carry."""

    COUNT = "Count"
    BYTES = "Bytes"
    MILLISECONDS = "Milliseconds"
    KILOBITS_PER_SECOND = "Kilobits/Second"
    COUNT_PER_SECOND = "Count/Second"
    NONE = "None"
