"""Parsing of loosely-typed Tautulli history records."""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

LEGACY_AGENT_PREFIX = "com.plexapp.agents."
TMDB_PROVIDERS = ("themoviedb", "tmdb")
TVDB_PROVIDERS = ("tvdb", "thetvdb")
IMDB_PROVIDERS = ("imdb",)

# Durations at or above this are assumed to be milliseconds. This is a guess
# about the upstream data, not a reliable unit detection.
MILLISECONDS_THRESHOLD = 100_000

TITLE_FIELDS = ("title", "full_title")
USER_FIELDS = ("user", "username", "friendly_name")
PERCENT_FIELDS = ("percent_complete", "percent")
TIMESTAMP_FIELDS = ("date", "stopped", "started", "last_viewed_at")
WATCHED_DURATION_FIELDS = ("watch_duration", "watched_duration", "play_duration")


@dataclass
class HistoryEvent:
    """A single playback record in a uniform shape."""

    media_type: str
    title: str
    year: int
    guid: str
    parent_guid: str
    grandparent_guid: str
    grandparent_title: str
    percent_complete: int
    when: datetime
    user: str
    watch_seconds: int


@dataclass(frozen=True)
class ExternalIDs:
    """Metadata database identifiers extracted from a provider GUID."""

    tmdb_id: int = 0
    tvdb_id: int = 0
    imdb_id: str = ""


def coerce_int(value: Any) -> int | None:
    """Coerce int, float or decimal string to int. Returns None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    if isinstance(value, str):
        return parse_decimal(value)
    return None


def get_string(raw: Mapping[str, Any], *keys: str) -> str:
    """Return the first non-empty string (or stringified number) among keys."""
    for key in keys:
        value = raw.get(key)
        if isinstance(value, str):
            if value:
                return value
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
    return ""


def get_int(raw: Mapping[str, Any], *keys: str) -> int:
    """Return the first value among keys that coerces to an int, else 0."""
    for key in keys:
        if key in raw:
            out = coerce_int(raw[key])
            if out is not None:
                return out
    return 0


def get_unix_time(raw: Mapping[str, Any], *keys: str) -> datetime | None:
    """Return the first strictly positive epoch-seconds value among keys."""
    for key in keys:
        if key in raw:
            seconds = coerce_int(raw[key])
            if seconds is not None and seconds > 0:
                try:
                    return datetime.fromtimestamp(seconds, tz=timezone.utc)
                except (OverflowError, OSError, ValueError):
                    continue
    return None


def duration_seconds(raw: Mapping[str, Any], *keys: str) -> int:
    """Return the first coercible duration among keys, in seconds."""
    for key in keys:
        if key in raw:
            seconds = coerce_int(raw[key])
            if seconds is not None:
                if seconds >= MILLISECONDS_THRESHOLD:
                    return seconds // 1000
                return seconds
    return 0


def watch_seconds(raw: Mapping[str, Any], percent: int) -> int:
    """Resolve how long an event was watched.

    Tries, in order:
        1. an explicit watched-duration field
        2. total duration scaled by the completion percentage
        3. the raw view offset
    """
    seconds = duration_seconds(raw, *WATCHED_DURATION_FIELDS)
    if seconds > 0:
        return seconds
    duration = duration_seconds(raw, "duration")
    if duration > 0 and percent > 0:
        return int(duration * percent / 100)
    return duration_seconds(raw, "view_offset")


def parse_history_entry(raw: Mapping[str, Any]) -> HistoryEvent | None:
    """Convert a raw history record into a HistoryEvent.

    Returns None when the record carries no usable timestamp.
    """
    when = get_unix_time(raw, *TIMESTAMP_FIELDS)
    if when is None:
        return None

    percent = get_int(raw, *PERCENT_FIELDS)
    return HistoryEvent(
        media_type=get_string(raw, "media_type"),
        title=get_string(raw, *TITLE_FIELDS),
        year=get_int(raw, "year"),
        guid=get_string(raw, "guid"),
        parent_guid=get_string(raw, "parent_guid"),
        grandparent_guid=get_string(raw, "grandparent_guid"),
        grandparent_title=get_string(raw, "grandparent_title"),
        percent_complete=percent,
        when=when,
        user=get_string(raw, *USER_FIELDS),
        watch_seconds=watch_seconds(raw, percent),
    )


def extract_ids(guid: str) -> ExternalIDs:
    """Extract metadata IDs from a provider GUID such as ``tmdb://603``.

    Unknown providers and malformed values yield empty IDs.
    """
    if not guid:
        return ExternalIDs()
    clean = guid.strip()
    if clean.startswith(LEGACY_AGENT_PREFIX):
        clean = clean[len(LEGACY_AGENT_PREFIX):]

    provider, sep, id_part = clean.partition("://")
    if not sep:
        return ExternalIDs()
    id_part = id_part.split("?", 1)[0]

    if provider in TMDB_PROVIDERS:
        tmdb_id = parse_decimal(id_part)
        return ExternalIDs(tmdb_id=tmdb_id) if tmdb_id is not None else ExternalIDs()
    if provider in TVDB_PROVIDERS:
        tvdb_id = parse_decimal(id_part)
        return ExternalIDs(tvdb_id=tvdb_id) if tvdb_id is not None else ExternalIDs()
    if provider in IMDB_PROVIDERS:
        return ExternalIDs(imdb_id=id_part)
    return ExternalIDs()


def parse_decimal(value: str) -> int | None:
    """Strict base-10 integer with optional sign. Whitespace and underscores are rejected."""
    sign, digits = (value[0], value[1:]) if value[:1] in ("+", "-") else ("", value)
    if not digits.isascii() or not digits.isdigit():
        return None
    return int(sign + digits)
