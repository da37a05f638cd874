"""
HTTP client for the forecast endpoint (ForecastSource capability).
"""

from typing import Any, Dict, Optional

import httpx

from serverless_tasks.handlers.utils.errors import ExternalServiceError
from serverless_tasks.handlers.utils.observability import logger, tracer


class WeatherApiClient:
    """Fetches one forecast document from a fixed URL."""

    def __init__(self, url: str, timeout: float = 10.0, http_client: Optional[httpx.Client] = None):
        self.url = url
        self.timeout = timeout
        self.http_client = http_client or httpx.Client(timeout=timeout)

    @tracer.capture_method
    def fetch(self) -> Dict[str, Any]:
        """
        GET the forecast document.

        Raises:
            ExternalServiceError: On transport errors, non-2xx statuses or a non-JSON body
        """
        try:
            response = self.http_client.get(self.url)
            response.raise_for_status()
            document = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Forecast request failed", extra={"url": self.url, "error": str(e)})
            raise ExternalServiceError(
                message=f"Forecast request failed: {e}",
                service_name="WeatherAPI",
                error_code="WEATHER_API_ERROR",
            ) from e

        if not isinstance(document, dict):
            raise ExternalServiceError(
                message="Forecast response is not a JSON object",
                service_name="WeatherAPI",
                error_code="WEATHER_API_ERROR",
            )

        logger.debug("Forecast fetched", extra={"url": self.url, "status_code": response.status_code})
        return document
