"""First/last playback activity per movie and series."""

from dataclasses import dataclass
from datetime import datetime

from .keyed_index import KeyedIndex


@dataclass
class ActivityWindow:
    """Earliest and latest activity seen for an entity."""

    first: datetime
    last: datetime

    def include(self, when: datetime) -> None:
        """Widen the window to cover when."""
        if when < self.first:
            self.first = when
        if when > self.last:
            self.last = when


class ActivityIndex:
    """Activity windows for movies and series, keyed three ways."""

    def __init__(self) -> None:
        self.movies: KeyedIndex[ActivityWindow] = KeyedIndex()
        self.series: KeyedIndex[ActivityWindow] = KeyedIndex()

    def record_movie(self, tmdb_id: int, imdb_id: str, title_key: str, when: datetime) -> None:
        _record(self.movies, tmdb_id, imdb_id, title_key, when)

    def record_series(self, tvdb_id: int, imdb_id: str, title_key: str, when: datetime) -> None:
        _record(self.series, tvdb_id, imdb_id, title_key, when)

    def movie_window(self, tmdb_id: int, imdb_id: str, title_key: str) -> ActivityWindow | None:
        return self.movies.lookup(tmdb_id, imdb_id, title_key)

    def series_window(self, tvdb_id: int, imdb_id: str, title_key: str) -> ActivityWindow | None:
        return self.series.lookup(tvdb_id, imdb_id, title_key)

    def movie_first(self, tmdb_id: int, imdb_id: str, title_key: str) -> datetime | None:
        window = self.movie_window(tmdb_id, imdb_id, title_key)
        return window.first if window else None

    def movie_last(self, tmdb_id: int, imdb_id: str, title_key: str) -> datetime | None:
        window = self.movie_window(tmdb_id, imdb_id, title_key)
        return window.last if window else None

    def series_first(self, tvdb_id: int, imdb_id: str, title_key: str) -> datetime | None:
        window = self.series_window(tvdb_id, imdb_id, title_key)
        return window.first if window else None

    def series_last(self, tvdb_id: int, imdb_id: str, title_key: str) -> datetime | None:
        window = self.series_window(tvdb_id, imdb_id, title_key)
        return window.last if window else None


def _record(
    index: KeyedIndex[ActivityWindow],
    numeric_id: int,
    string_id: str,
    title_key: str,
    when: datetime,
) -> None:
    windows = index.values_for_update(
        numeric_id, string_id, title_key, lambda: ActivityWindow(first=when, last=when)
    )
    for window in windows:
        window.include(when)
