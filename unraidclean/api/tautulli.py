"""Client for the Tautulli playback history API."""

import logging
from typing import Any

from ..core.history import coerce_int
from .client import APIError, ServiceClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 200


class TautulliClient(ServiceClient):
    """Client for Tautulli's v2 API."""

    service_name = "tautulli"

    async def history(self, page_size: int = DEFAULT_PAGE_SIZE) -> list[dict[str, Any]]:
        """Fetch the full playback history, newest first, page by page."""
        entries: list[dict[str, Any]] = []
        start = 0
        while True:
            page, total = await self.history_page(start, page_size)
            entries.extend(page)
            if not page or start + len(page) >= total:
                break
            start += len(page)
        logger.debug(f"Loaded {len(entries)} Tautulli history entries")
        return entries

    async def history_page(self, start: int, length: int) -> tuple[list[dict[str, Any]], int]:
        """Fetch one page of history. Returns the records and the filtered total."""
        params = {
            "cmd": "get_history",
            "apikey": self.api_key,
            "length": str(length),
            "start": str(start),
            "order": "desc",
            "sort": "date",
        }
        payload = await self.get_json("api/v2", "history", params=params)

        response = payload.get("response") if isinstance(payload, dict) else None
        if not isinstance(response, dict):
            raise APIError("tautulli history: missing response")
        result = response.get("result")
        if isinstance(result, str) and result != "success":
            raise APIError(f"tautulli history: result {result}")

        data = response.get("data")
        if not isinstance(data, dict):
            raise APIError("tautulli history: missing data")

        total = coerce_int(data.get("recordsFiltered")) or coerce_int(data.get("recordsTotal")) or 0
        records = data.get("data")
        if not isinstance(records, list):
            raise APIError("tautulli history: missing data list")

        return [entry for entry in records if isinstance(entry, dict)], total
