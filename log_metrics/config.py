import logging
import re
import socket
from typing import Iterable, Optional, Tuple

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from log_metrics.domain.entities.data_point import Dimension

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "Lightstreamer"
DEFAULT_STORAGE_RESOLUTION = 60
DEFAULT_SOURCE_LOGGER = "LightstreamerMonitorText"

# key=value, key: value or "key value", as in a properties file
_DIMENSION_LINE = re.compile(r"^\s*([^=:\s]+)\s*(?:[=:]|\s)\s*(.*?)\s*$")


def parse_dimensions(text: str) -> Tuple[Dimension, ...]:
    """Parse dimensions from properties-style text, one pair per line.

    Blank lines and lines starting with '#' or '!' are ignored. A later
    entry with the same key replaces the earlier one in place.

    Raises:
        ValueError: If a line has no key or no value
    """
    dimensions = {}
    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        match = _DIMENSION_LINE.match(line)
        if not match or not match.group(2):
            raise ValueError(f"Invalid dimension on line {number}: {raw!r}")
        dimensions[match.group(1)] = match.group(2)
    return tuple(Dimension(name=name, value=value) for name, value in dimensions.items())


def format_dimensions(dimensions: Iterable[Dimension]) -> str:
    return "".join(f"{dimension.name}={dimension.value}\n" for dimension in dimensions)


def default_dimensions() -> Tuple[Dimension, ...]:
    """A single hostname dimension, or none if the host name is unavailable."""
    try:
        hostname = socket.gethostname()
    except OSError as e:
        logger.warning(f"⚠️ Unable to resolve local host name, sending no dimensions: {e}")
        return ()
    if not hostname:
        return ()
    return (Dimension(name="hostname", value=hostname),)


class Settings(BaseSettings):
    METRICS_NAMESPACE: str = Field(DEFAULT_NAMESPACE, alias="METRICS_NAMESPACE")
    METRICS_STORAGE_RESOLUTION: Optional[int] = Field(
        DEFAULT_STORAGE_RESOLUTION, alias="METRICS_STORAGE_RESOLUTION"
    )
    METRICS_DIMENSIONS: Optional[str] = Field(None, alias="METRICS_DIMENSIONS")
    METRICS_SOURCE_LOGGER: str = Field(DEFAULT_SOURCE_LOGGER, alias="METRICS_SOURCE_LOGGER")

    DATADOG_API_KEY: Optional[str] = Field(
        None, validation_alias=AliasChoices("DATADOG_API_KEY", "DD_API_KEY")
    )
    DATADOG_APP_KEY: Optional[str] = Field(
        None, validation_alias=AliasChoices("DATADOG_APP_KEY", "DD_APP_KEY")
    )
    DATADOG_SITE_URL: str = Field("https://api.datadoghq.com", alias="DATADOG_SITE_URL")
    HTTP_TIMEOUT: float = Field(30.0, alias="HTTP_TIMEOUT")

    LOG_LEVEL: str = Field("INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True, extra="ignore")

    @property
    def dimensions(self) -> Tuple[Dimension, ...]:
        """Configured dimensions, falling back to the local host name."""
        if self.METRICS_DIMENSIONS is None:
            return default_dimensions()
        return parse_dimensions(self.METRICS_DIMENSIONS)

    @property
    def datadog_api_key(self) -> Optional[str]:
        return self.DATADOG_API_KEY

    @property
    def datadog_app_key(self) -> Optional[str]:
        return self.DATADOG_APP_KEY


settings = Settings()
