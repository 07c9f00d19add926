"""Shared HTTP plumbing for the Radarr, Sonarr and Tautulli clients."""

import logging
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import httpx

from ..config.settings import ServiceConfig

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
BODY_LOG_LIMIT = 2000


class APIError(Exception):
    """Raised when a backing service returns an unusable response."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def resolve_url(base_url: str, path: str) -> str:
    """Join path (optionally with a query string) onto base_url.

    An existing query on the base URL is kept and the path's query appended.
    """
    scheme, netloc, base_path, base_query, _ = urlsplit(base_url)
    trimmed = path.lstrip("/")
    trimmed, _, query = trimmed.partition("?")
    full_path = base_path.rstrip("/") + "/" + trimmed
    if base_query and query:
        query = f"{base_query}&{query}"
    elif base_query:
        query = base_query
    return urlunsplit((scheme, netloc, full_path, query, ""))


def truncate_body(body: str, limit: int = BODY_LOG_LIMIT) -> str:
    if len(body) <= limit:
        return body
    return body[:limit] + "...(truncated)"


class ServiceClient:
    """Base client for a service addressed by base URL and API key."""

    service_name = "service"

    def __init__(
        self,
        service: ServiceConfig,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize client with service configuration."""
        self.base_url = service.base_url
        self.api_key = service.api_key
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.client.aclose()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    def url(self, path: str) -> str:
        return resolve_url(self.base_url, path)

    async def get_json(
        self,
        path: str,
        what: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET a JSON document. Failures raise APIError; there are no retries."""
        url = self.url(path)
        logger.debug(f"HTTP request: GET {url}")
        try:
            response = await self.client.request(
                method="GET", url=url, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            raise APIError(f"{self.service_name} {what}: request failed: {e}") from e

        logger.debug(f"HTTP response: {response.status_code} {url}")
        if not 200 <= response.status_code < 300:
            raise APIError(
                f"{self.service_name} {what}: status {response.status_code}: "
                f"{truncate_body(response.text)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise APIError(
                f"{self.service_name} {what}: decode json: {e}",
                status_code=response.status_code,
            ) from e
