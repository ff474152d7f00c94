from datetime import datetime
from typing import Tuple

from pydantic import BaseModel, ConfigDict

from log_metrics.domain.entities.unit import Unit


class Dimension(BaseModel):
    """A name/value tag attached to every data point."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str


class DataPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    metric_name: str
    unit: Unit
    value: float
    timestamp: datetime
    dimensions: Tuple[Dimension, ...] = ()
