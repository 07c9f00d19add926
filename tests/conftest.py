"""Pytest configuration and fixtures."""

import shutil
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from unraidclean.config.settings import CleanupConfig, ServiceConfig
from unraidclean.core.models import RadarrMovie, SonarrSeries

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def utc(year: int, month: int, day: int) -> datetime:
    """Shorthand for a UTC midnight timestamp."""
    return datetime(year, month, day, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def test_config():
    """Create a test configuration with all services filled in."""
    return CleanupConfig(
        tautulli=ServiceConfig(base_url="http://tautulli:8181", api_key="t-key"),
        sonarr=ServiceConfig(base_url="http://sonarr:8989", api_key="s-key"),
        radarr=ServiceConfig(base_url="http://radarr:7878", api_key="r-key"),
    )


@pytest.fixture
def sample_movie():
    """A movie with a file on disk, added long ago."""
    return RadarrMovie(
        id=1,
        title="The Matrix",
        year=1999,
        tmdb_id=603,
        imdb_id="tt0133093",
        path="/data/movies/The Matrix (1999)",
        added=utc(2023, 1, 1),
        size_on_disk=8_000_000_000,
        has_file=True,
    )


@pytest.fixture
def sample_series():
    """An ended series, added long ago."""
    return SonarrSeries(
        id=10,
        title="Breaking Bad",
        year=2008,
        tvdb_id=81189,
        imdb_id="tt0903747",
        path="/data/tv/Breaking Bad",
        added=utc(2023, 1, 1),
        size_on_disk=50_000_000_000,
        status="ended",
    )
