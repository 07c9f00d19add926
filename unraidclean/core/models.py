"""Core data models for library catalog entries and review reports."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class MediaType(Enum):
    """Kinds of library entries."""

    MOVIE = "movie"
    SERIES = "series"


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an RFC 3339 or naive ISO timestamp into UTC."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


@dataclass
class RadarrMovie:
    """Movie entry from the Radarr catalog."""

    id: int
    title: str
    year: int = 0
    tmdb_id: int = 0
    imdb_id: str = ""
    path: str = ""
    added: datetime | None = None
    size_on_disk: int = 0
    has_file: bool = False

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "RadarrMovie":
        """Build from a Radarr /api/v3/movie record."""
        return cls(
            id=_as_int(payload.get("id")),
            title=payload.get("title") or "",
            year=_as_int(payload.get("year")),
            tmdb_id=_as_int(payload.get("tmdbId")),
            imdb_id=payload.get("imdbId") or "",
            path=payload.get("path") or "",
            added=parse_timestamp(payload.get("added")),
            size_on_disk=_as_int(payload.get("sizeOnDisk")),
            has_file=bool(payload.get("hasFile")),
        )

    @property
    def display_title(self) -> str:
        return f"{self.title} ({self.year})"


@dataclass
class SonarrSeries:
    """Series entry from the Sonarr catalog."""

    id: int
    title: str
    year: int = 0
    tvdb_id: int = 0
    imdb_id: str = ""
    path: str = ""
    added: datetime | None = None
    size_on_disk: int = 0
    status: str = ""

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "SonarrSeries":
        """Build from a Sonarr /api/v3/series record."""
        statistics = payload.get("statistics") or {}
        return cls(
            id=_as_int(payload.get("id")),
            title=payload.get("title") or "",
            year=_as_int(payload.get("year")),
            tvdb_id=_as_int(payload.get("tvdbId")),
            imdb_id=payload.get("imdbId") or "",
            path=payload.get("path") or "",
            added=parse_timestamp(payload.get("added")),
            size_on_disk=_as_int(statistics.get("sizeOnDisk")),
            status=payload.get("status") or "",
        )

    @property
    def is_ended(self) -> bool:
        return self.status.strip().lower() == "ended"


@dataclass
class ReportUser:
    """Hours watched by a single user."""

    user: str
    hours: float


@dataclass
class ReportItem:
    """A flagged library entry with the facts behind its classification."""

    type: MediaType
    title: str
    path: str
    size_bytes: int
    reason: str
    radarr_id: int | None = None
    sonarr_id: int | None = None
    tmdb_id: int | None = None
    tvdb_id: int | None = None
    imdb_id: str = ""
    added_at: datetime | None = None
    first_activity_at: datetime | None = None
    last_activity_at: datetime | None = None
    top_users: list[ReportUser] = field(default_factory=list)
    top_users_total_hours: float = 0.0
    total_watch_hours: float = 0.0
    series_status: str = ""


@dataclass
class Report:
    """Result of a scan run."""

    generated_at: datetime
    items: list[ReportItem] = field(default_factory=list)
