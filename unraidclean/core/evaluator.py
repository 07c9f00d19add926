"""Classification of library entries into deletion-candidate reasons."""

from datetime import datetime, timedelta
from enum import Enum

from ..config.settings import RulesConfig

NO_ACTION = ""


class Reason(str, Enum):
    """Why an entry was flagged."""

    WATCH_INACTIVE = "watch_inactive"
    NEVER_WATCHED = "never_watched"
    LOW_WATCH = "low_watch"


def evaluate(
    now: datetime,
    last_activity: datetime | None,
    added_at: datetime | None,
    watch_cutoff: timedelta,
    never_watched_cutoff: timedelta,
    total_watch_hours: float,
    rules: RulesConfig,
) -> str:
    """
    Decide whether an entry should be flagged.

    Args:
        now: Reference time; passed in so results do not depend on the clock
        last_activity: Latest playback seen for the entry, if any
        added_at: When the entry was added to the library, if known
        watch_cutoff: Idle time after the last playback before flagging
        never_watched_cutoff: Time since add before flagging an unwatched entry
        total_watch_hours: Cumulative hours watched across all users
        rules: Low-watch thresholds and whether low-watch is mandatory

    Returns:
        A Reason value, or NO_ACTION when nothing applies
    """
    base_reason = NO_ACTION
    if last_activity is not None:
        if now - last_activity >= watch_cutoff:
            base_reason = Reason.WATCH_INACTIVE.value
    elif added_at is not None and now - added_at >= never_watched_cutoff:
        base_reason = Reason.NEVER_WATCHED.value

    low_watch_reason = NO_ACTION
    if rules.low_watch_enabled and added_at is not None:
        added_days = (now - added_at) / timedelta(days=1)
        if (
            added_days >= rules.low_watch_min_added_days
            and total_watch_hours < rules.low_watch_max_hours
        ):
            low_watch_reason = Reason.LOW_WATCH.value

    if rules.low_watch_require and not low_watch_reason:
        return NO_ACTION
    return base_reason or low_watch_reason
