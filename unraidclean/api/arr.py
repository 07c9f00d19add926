"""Clients for the Radarr and Sonarr library catalogs."""

import logging

from ..core.models import RadarrMovie, SonarrSeries
from .client import APIError, ServiceClient

logger = logging.getLogger(__name__)


class ArrClient(ServiceClient):
    """Common behaviour of the *arr v3 APIs."""

    async def _get_list(self, path: str, what: str) -> list[dict]:
        data = await self.get_json(path, what, headers={"X-Api-Key": self.api_key})
        if not isinstance(data, list):
            raise APIError(f"{self.service_name} {what}: expected a JSON list")
        return [entry for entry in data if isinstance(entry, dict)]


class RadarrClient(ArrClient):
    """Client for the Radarr movie catalog."""

    service_name = "radarr"

    async def movies(self) -> list[RadarrMovie]:
        """Fetch every movie in the library."""
        payload = await self._get_list("api/v3/movie", "movies")
        movies = [RadarrMovie.from_api(entry) for entry in payload]
        logger.debug(f"Loaded {len(movies)} Radarr movies")
        return movies


class SonarrClient(ArrClient):
    """Client for the Sonarr series catalog."""

    service_name = "sonarr"

    async def series(self) -> list[SonarrSeries]:
        """Fetch every series in the library."""
        payload = await self._get_list("api/v3/series", "series")
        series = [SonarrSeries.from_api(entry) for entry in payload]
        logger.debug(f"Loaded {len(series)} Sonarr series")
        return series
