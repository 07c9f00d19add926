"""Scan pipeline: fetch catalogs and history, then evaluate."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from ..api.arr import RadarrClient, SonarrClient
from ..api.tautulli import TautulliClient
from ..config.settings import CleanupConfig
from .models import RadarrMovie, Report, SonarrSeries
from .scanner import CleanupScanner, ScanOptions

logger = logging.getLogger(__name__)


@dataclass
class LibrarySnapshot:
    """Everything fetched from the backing services for one run."""

    movies: list[RadarrMovie] = field(default_factory=list)
    series: list[SonarrSeries] = field(default_factory=list)
    history: list[dict[str, Any]] = field(default_factory=list)


async def fetch_catalogs(config: CleanupConfig) -> tuple[list[RadarrMovie], list[SonarrSeries]]:
    """Fetch the Radarr and Sonarr catalogs."""
    async with RadarrClient(config.radarr) as radarr:
        logger.info("Fetching Radarr movies")
        movies = await radarr.movies()
    async with SonarrClient(config.sonarr) as sonarr:
        logger.info("Fetching Sonarr series")
        series = await sonarr.series()
    return movies, series


async def fetch_snapshot(config: CleanupConfig) -> LibrarySnapshot:
    """Fetch catalogs and full playback history."""
    movies, series = await fetch_catalogs(config)
    async with TautulliClient(config.tautulli) as tautulli:
        logger.info("Fetching Tautulli history")
        history = await tautulli.history()
    return LibrarySnapshot(movies=movies, series=series, history=history)


async def run_scan(
    config: CleanupConfig,
    options: ScanOptions | None = None,
    now: datetime | None = None,
) -> Report:
    """Fetch everything and produce a sorted review report."""
    snapshot = await fetch_snapshot(config)
    scanner = CleanupScanner(config)
    return scanner.scan(
        snapshot.movies,
        snapshot.series,
        snapshot.history,
        now=now or datetime.now(timezone.utc),
        options=options,
    )
