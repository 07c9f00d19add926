"""Backfill titles and paths for ID-only exception entries."""

from collections.abc import Iterable

from ..config.settings import ExceptionsConfig, MovieExceptions, SeriesExceptions, add_unique
from .models import RadarrMovie, SonarrSeries


def enrich_exceptions(
    exceptions: ExceptionsConfig,
    movies: Iterable[RadarrMovie],
    series: Iterable[SonarrSeries],
) -> list[str]:
    """
    Add the title, path and external IDs of every excepted catalog entry.

    Exceptions are matched by local ID, numeric external ID or IMDB ID, and
    the config is mutated in place.

    Returns:
        One "movie: Title" or "series: Title" line per entry that changed
    """
    changes: list[str] = []

    movie_list = list(movies)
    by_radarr = {m.id: m for m in movie_list}
    by_tmdb = {m.tmdb_id: m for m in movie_list if m.tmdb_id > 0}
    by_imdb = {m.imdb_id.lower(): m for m in movie_list if m.imdb_id}

    movie_rules = exceptions.movies
    matched_movies = (
        [by_radarr.get(i) for i in list(movie_rules.radarr_ids)]
        + [by_tmdb.get(i) for i in list(movie_rules.tmdb_ids)]
        + [by_imdb.get(i.lower()) for i in list(movie_rules.imdb_ids)]
    )
    for movie in matched_movies:
        if movie is not None and _apply_movie(movie_rules, movie):
            changes.append(f"movie: {movie.title}")

    series_list = list(series)
    by_sonarr = {s.id: s for s in series_list}
    by_tvdb = {s.tvdb_id: s for s in series_list if s.tvdb_id > 0}
    by_imdb_series = {s.imdb_id.lower(): s for s in series_list if s.imdb_id}

    series_rules = exceptions.series
    matched_series = (
        [by_sonarr.get(i) for i in list(series_rules.sonarr_ids)]
        + [by_tvdb.get(i) for i in list(series_rules.tvdb_ids)]
        + [by_imdb_series.get(i.lower()) for i in list(series_rules.imdb_ids)]
    )
    for show in matched_series:
        if show is not None and _apply_series(series_rules, show):
            changes.append(f"series: {show.title}")

    return changes


def _apply_movie(rules: MovieExceptions, movie: RadarrMovie) -> bool:
    changed = add_unique(rules.titles, movie.title)
    changed = add_unique(rules.path_prefixes, movie.path) or changed
    changed = add_unique(rules.imdb_ids, movie.imdb_id) or changed
    changed = add_unique(rules.tmdb_ids, movie.tmdb_id) or changed
    return changed


def _apply_series(rules: SeriesExceptions, show: SonarrSeries) -> bool:
    changed = add_unique(rules.titles, show.title)
    changed = add_unique(rules.path_prefixes, show.path) or changed
    changed = add_unique(rules.imdb_ids, show.imdb_id) or changed
    changed = add_unique(rules.tvdb_ids, show.tvdb_id) or changed
    return changed
