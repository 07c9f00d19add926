"""Keep-rules that exclude library entries from evaluation."""

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass

from ..config.settings import ExceptionsConfig
from .normalize import normalize_title

# POSIX normpath keeps exactly two leading slashes
LEADING_SLASHES = re.compile(r"^/{2,}")


@dataclass(frozen=True)
class _KindExceptions:
    """Lookup sets for one media kind."""

    local_ids: frozenset[int] = frozenset()
    external_ids: frozenset[int] = frozenset()
    imdb_ids: frozenset[str] = frozenset()
    titles: frozenset[str] = frozenset()
    path_prefixes: tuple[str, ...] = ()

    @classmethod
    def build(
        cls,
        local_ids: Iterable[int],
        external_ids: Iterable[int],
        imdb_ids: Iterable[str],
        titles: Iterable[str],
        path_prefixes: Iterable[str],
    ) -> "_KindExceptions":
        return cls(
            local_ids=frozenset(local_ids),
            external_ids=frozenset(external_ids),
            imdb_ids=frozenset(i.lower() for i in imdb_ids),
            titles=frozenset(filter(None, (normalize_title(t) for t in titles))),
            path_prefixes=tuple(clean_path(p) for p in path_prefixes if p),
        )

    def matches(
        self, local_id: int, external_id: int, imdb_id: str, title: str, path: str
    ) -> bool:
        if local_id > 0 and local_id in self.local_ids:
            return True
        if external_id > 0 and external_id in self.external_ids:
            return True
        if imdb_id and imdb_id.lower() in self.imdb_ids:
            return True
        if title and normalize_title(title) in self.titles:
            return True
        return has_path_prefix(path, self.path_prefixes)


def clean_path(path: str) -> str:
    """Resolve redundant separators and '.' segments without touching the disk."""
    return LEADING_SLASHES.sub("/", os.path.normpath(path))


def has_path_prefix(path: str, prefixes: Iterable[str]) -> bool:
    """Plain string-prefix test of the cleaned path against cleaned prefixes."""
    if not path:
        return False
    cleaned = clean_path(path)
    return any(cleaned.startswith(prefix) for prefix in prefixes)


class ExceptionIndex:
    """Fast exclusion checks for movies and series."""

    def __init__(self, movies: _KindExceptions, series: _KindExceptions):
        self.movies = movies
        self.series = series

    @classmethod
    def from_config(cls, exceptions: ExceptionsConfig) -> "ExceptionIndex":
        movies = exceptions.movies
        series = exceptions.series
        return cls(
            movies=_KindExceptions.build(
                movies.radarr_ids,
                movies.tmdb_ids,
                movies.imdb_ids,
                movies.titles,
                movies.path_prefixes,
            ),
            series=_KindExceptions.build(
                series.sonarr_ids,
                series.tvdb_ids,
                series.imdb_ids,
                series.titles,
                series.path_prefixes,
            ),
        )

    def is_movie_excluded(
        self, radarr_id: int, tmdb_id: int, imdb_id: str, title: str, path: str
    ) -> bool:
        return self.movies.matches(radarr_id, tmdb_id, imdb_id, title, path)

    def is_series_excluded(
        self, sonarr_id: int, tvdb_id: int, imdb_id: str, title: str, path: str
    ) -> bool:
        return self.series.matches(sonarr_id, tvdb_id, imdb_id, title, path)
