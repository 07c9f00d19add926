"""Matching of catalog entries against history and exceptions."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from ..config.settings import CleanupConfig
from .activity import ActivityIndex
from .evaluator import evaluate
from .exceptions import ExceptionIndex
from .history import extract_ids, parse_history_entry
from .models import MediaType, RadarrMovie, Report, ReportItem, ReportUser, SonarrSeries
from .normalize import normalize_title, normalize_title_year
from .ranker import DEFAULT_SORT_KEY, DEFAULT_SORT_ORDER, sort_items
from .watch import UserWatch, WatchIndex

logger = logging.getLogger(__name__)

TOP_USERS_LIMIT = 2
SECONDS_PER_HOUR = 3600


@dataclass
class ScanOptions:
    """Presentation options for a scan."""

    sort_by: str = DEFAULT_SORT_KEY
    sort_order: str = DEFAULT_SORT_ORDER


def build_indexes(
    entries: Iterable[Mapping[str, Any]], min_percent: int
) -> tuple[ActivityIndex, WatchIndex]:
    """Fold raw history records into activity and watch indexes.

    Records without a timestamp are skipped, as are partially watched events
    below min_percent. A percentage of 0 means unknown and is kept.
    """
    activity = ActivityIndex()
    watch = WatchIndex()
    skipped = 0

    for raw in entries:
        entry = parse_history_entry(raw)
        if entry is None:
            skipped += 1
            continue
        if 0 < entry.percent_complete < min_percent:
            continue

        if entry.media_type == "movie":
            ids = extract_ids(entry.guid)
            title_key = normalize_title_year(entry.title, entry.year)
            activity.record_movie(ids.tmdb_id, ids.imdb_id, title_key, entry.when)
            watch.record_movie(ids.tmdb_id, ids.imdb_id, title_key, entry.user, entry.watch_seconds)

        elif entry.media_type == "episode":
            show_ids = extract_ids(entry.grandparent_guid)
            own_ids = extract_ids(entry.guid)
            tvdb_id = (
                show_ids.tvdb_id
                or extract_ids(entry.parent_guid).tvdb_id
                or own_ids.tvdb_id
            )
            imdb_id = show_ids.imdb_id or own_ids.imdb_id
            title_key = normalize_title(entry.grandparent_title)
            activity.record_series(tvdb_id, imdb_id, title_key, entry.when)
            watch.record_series(tvdb_id, imdb_id, title_key, entry.user, entry.watch_seconds)

        elif entry.media_type in ("show", "series"):
            ids = extract_ids(entry.guid)
            title_key = normalize_title(entry.title)
            activity.record_series(ids.tvdb_id, ids.imdb_id, title_key, entry.when)
            watch.record_series(ids.tvdb_id, ids.imdb_id, title_key, entry.user, entry.watch_seconds)

    if skipped:
        logger.debug(f"Skipped {skipped} history entries without a timestamp")
    return activity, watch


def to_report_users(users: list[UserWatch]) -> tuple[list[ReportUser], float]:
    """Convert seconds to hours and total them."""
    out = [ReportUser(user=u.user, hours=u.seconds / SECONDS_PER_HOUR) for u in users]
    return out, sum(u.hours for u in out)


class CleanupScanner:
    """Evaluates catalog entries against history, exceptions and rules."""

    def __init__(self, config: CleanupConfig):
        """Initialize scanner with configuration."""
        self.config = config
        self.rules = config.rules
        self.exceptions = ExceptionIndex.from_config(config.exceptions)
        self.watch_cutoff = timedelta(days=self.rules.inactivity_days_after_watch)
        self.never_watched_cutoff = timedelta(days=self.rules.never_watched_days_since_added)

    def scan(
        self,
        movies: Iterable[RadarrMovie],
        series: Iterable[SonarrSeries],
        history: Iterable[Mapping[str, Any]],
        now: datetime | None = None,
        options: ScanOptions | None = None,
    ) -> Report:
        """
        Build a sorted review report.

        Args:
            movies: Radarr catalog
            series: Sonarr catalog
            history: Raw Tautulli history records
            now: Reference time for every age calculation
            options: Sort key and order

        Returns:
            Report with one item per flagged entry

        Raises:
            UnsupportedSortError: If the sort key is unknown
        """
        now = now or datetime.now(timezone.utc)
        options = options or ScanOptions()
        activity, watch = build_indexes(history, self.rules.activity_min_percent)

        report = Report(generated_at=now)
        for movie in movies:
            item = self._evaluate_movie(movie, activity, watch, now)
            if item is not None:
                report.items.append(item)
        logger.info(f"Movies flagged for review: {len(report.items)}")

        for show in series:
            item = self._evaluate_series(show, activity, watch, now)
            if item is not None:
                report.items.append(item)
        logger.info(f"Total items flagged for review: {len(report.items)}")

        sort_items(report.items, options.sort_by, options.sort_order, generated_at=now)
        return report

    def _evaluate_movie(
        self,
        movie: RadarrMovie,
        activity: ActivityIndex,
        watch: WatchIndex,
        now: datetime,
    ) -> ReportItem | None:
        if not movie.has_file or movie.size_on_disk <= 0:
            return None
        if self.exceptions.is_movie_excluded(
            movie.id, movie.tmdb_id, movie.imdb_id, movie.title, movie.path
        ):
            logger.debug(f"Skipping movie due to exception: {movie.title}")
            return None

        key = (movie.tmdb_id, movie.imdb_id, normalize_title_year(movie.title, movie.year))
        window = activity.movie_window(*key)
        top_users, top_total = to_report_users(watch.movie_top_users(*key, TOP_USERS_LIMIT))
        total_hours = watch.movie_total_seconds(*key) / SECONDS_PER_HOUR

        reason = self._classify(window.last if window else None, movie.added, total_hours, now)
        if not reason:
            return None

        return ReportItem(
            type=MediaType.MOVIE,
            title=movie.display_title,
            path=movie.path,
            size_bytes=movie.size_on_disk,
            reason=reason,
            radarr_id=movie.id,
            tmdb_id=movie.tmdb_id or None,
            imdb_id=movie.imdb_id,
            added_at=movie.added,
            first_activity_at=window.first if window else None,
            last_activity_at=window.last if window else None,
            top_users=top_users,
            top_users_total_hours=top_total,
            total_watch_hours=total_hours,
        )

    def _evaluate_series(
        self,
        show: SonarrSeries,
        activity: ActivityIndex,
        watch: WatchIndex,
        now: datetime,
    ) -> ReportItem | None:
        if show.size_on_disk <= 0:
            return None
        if self.exceptions.is_series_excluded(
            show.id, show.tvdb_id, show.imdb_id, show.title, show.path
        ):
            logger.debug(f"Skipping series due to exception: {show.title}")
            return None
        if self.rules.series_ended_only and not show.is_ended:
            logger.debug(f"Skipping series because status is not ended: {show.title} ({show.status})")
            return None

        key = (show.tvdb_id, show.imdb_id, normalize_title(show.title))
        window = activity.series_window(*key)
        top_users, top_total = to_report_users(watch.series_top_users(*key, TOP_USERS_LIMIT))
        total_hours = watch.series_total_seconds(*key) / SECONDS_PER_HOUR

        reason = self._classify(window.last if window else None, show.added, total_hours, now)
        if not reason:
            return None

        return ReportItem(
            type=MediaType.SERIES,
            title=show.title,
            path=show.path,
            size_bytes=show.size_on_disk,
            reason=reason,
            sonarr_id=show.id,
            tvdb_id=show.tvdb_id or None,
            imdb_id=show.imdb_id,
            added_at=show.added,
            first_activity_at=window.first if window else None,
            last_activity_at=window.last if window else None,
            top_users=top_users,
            top_users_total_hours=top_total,
            total_watch_hours=total_hours,
            series_status=show.status,
        )

    def _classify(
        self,
        last_activity: datetime | None,
        added_at: datetime | None,
        total_hours: float,
        now: datetime,
    ) -> str:
        return evaluate(
            now,
            last_activity,
            added_at,
            self.watch_cutoff,
            self.never_watched_cutoff,
            total_hours,
            self.rules,
        )
