"""Per-user cumulative watch time per movie and series."""

from dataclasses import dataclass

from .keyed_index import KeyedIndex


@dataclass
class UserWatch:
    """Total seconds a user spent on an entity."""

    user: str
    seconds: int


def top_users(totals: dict[str, int], limit: int) -> list[UserWatch]:
    """Rank users by seconds descending, ties by name; keep at most limit."""
    users = [UserWatch(user=user, seconds=seconds) for user, seconds in totals.items()]
    users.sort(key=lambda u: (-u.seconds, u.user))
    if limit <= 0 or len(users) <= limit:
        return users
    return users[:limit]


class WatchIndex:
    """User watch totals for movies and series, keyed three ways."""

    def __init__(self) -> None:
        self.movies: KeyedIndex[dict[str, int]] = KeyedIndex()
        self.series: KeyedIndex[dict[str, int]] = KeyedIndex()

    def record_movie(
        self, tmdb_id: int, imdb_id: str, title_key: str, user: str, seconds: int
    ) -> None:
        _record(self.movies, tmdb_id, imdb_id, title_key, user, seconds)

    def record_series(
        self, tvdb_id: int, imdb_id: str, title_key: str, user: str, seconds: int
    ) -> None:
        _record(self.series, tvdb_id, imdb_id, title_key, user, seconds)

    def movie_top_users(
        self, tmdb_id: int, imdb_id: str, title_key: str, limit: int
    ) -> list[UserWatch]:
        totals = self.movies.lookup(tmdb_id, imdb_id, title_key)
        return top_users(totals, limit) if totals else []

    def series_top_users(
        self, tvdb_id: int, imdb_id: str, title_key: str, limit: int
    ) -> list[UserWatch]:
        totals = self.series.lookup(tvdb_id, imdb_id, title_key)
        return top_users(totals, limit) if totals else []

    def movie_total_seconds(self, tmdb_id: int, imdb_id: str, title_key: str) -> int:
        totals = self.movies.lookup(tmdb_id, imdb_id, title_key)
        return sum(totals.values()) if totals else 0

    def series_total_seconds(self, tvdb_id: int, imdb_id: str, title_key: str) -> int:
        totals = self.series.lookup(tvdb_id, imdb_id, title_key)
        return sum(totals.values()) if totals else 0


def _record(
    index: KeyedIndex[dict[str, int]],
    numeric_id: int,
    string_id: str,
    title_key: str,
    user: str,
    seconds: int,
) -> None:
    if not user or seconds <= 0:
        return
    for totals in index.values_for_update(numeric_id, string_id, title_key, dict):
        totals[user] = totals.get(user, 0) + seconds
