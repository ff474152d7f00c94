"""Base Datadog client with common functionality."""
import logging
from typing import Dict, Optional

import httpx

from log_metrics.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class BaseDatadogClient:
    """Base class for Datadog API clients with common functionality."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the HTTP client.

        Args:
            settings: Credentials, site URL and timeout; the process settings by default
            client: Preconfigured client, e.g. one with a mock transport
        """
        settings = settings or default_settings
        self._api_key = settings.datadog_api_key
        self._app_key = settings.datadog_app_key
        self._site_url = settings.DATADOG_SITE_URL.rstrip("/")
        self.client = client or httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)

    def _get_headers(self, content_type: Optional[str] = "application/json") -> Dict[str, str]:
        """Get standard Datadog API headers."""
        headers = {
            "DD-API-KEY": self._api_key or "",
        }
        if content_type:
            headers["Content-Type"] = content_type
        if self._app_key:
            headers["DD-APPLICATION-KEY"] = self._app_key
        return headers

    def _is_api_available(self) -> bool:
        """Submitting metrics needs only the API key."""
        return bool(self._api_key)

    def _url(self, path: str) -> str:
        return f"{self._site_url}{path}"

    async def _make_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Make HTTP request, logging transport failures."""
        try:
            return await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"HTTP request failed: {e}")
            raise

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
