"""Human-readable formatting of review reports."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..core.models import Report, ReportItem, ReportUser
from ..core.ranker import gap_days, inactivity_days

GIB = 1024 * 1024 * 1024

TABLE_COLUMNS = [
    "TYPE",
    "TITLE",
    "STATUS",
    "SIZE(GiB)",
    "ADDED",
    "FIRST_ACTIVITY",
    "LAST_ACTIVITY",
    "GAP_DAYS",
    "INACTIVITY_DAYS",
    "WATCH_HOURS",
    "TOP_USERS",
    "REASON",
    "PATH",
]


@dataclass
class Summary:
    """Counts of report items by type and reason."""

    total: int
    by_type: dict[str, int] = field(default_factory=dict)
    by_reason: dict[str, int] = field(default_factory=dict)


def summarize(report: Report) -> Summary:
    """Count items by type and by reason."""
    by_type = Counter(item.type.value for item in report.items)
    by_reason = Counter(item.reason for item in report.items if item.reason)
    return Summary(total=len(report.items), by_type=dict(by_type), by_reason=dict(by_reason))


def format_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC with a Z suffix."""
    text = value.astimezone(timezone.utc).isoformat()
    return text.replace("+00:00", "Z")


def format_optional_time(value: datetime | None) -> str:
    return format_timestamp(value) if value is not None else ""


def format_optional_int(value: int | None) -> str:
    return str(value) if value is not None else ""


def format_size_gib(size_bytes: int) -> str:
    if size_bytes <= 0:
        return "0"
    return f"{size_bytes / GIB:.2f}"


def format_hours(hours: float) -> str:
    if hours <= 0:
        return ""
    return f"{hours:.1f}"


def format_gap_days(
    added_at: datetime | None, first_activity_at: datetime | None, generated_at: datetime
) -> str:
    if added_at is None:
        return ""
    return f"{gap_days(added_at, first_activity_at, generated_at):.1f}"


def format_inactivity_days(
    added_at: datetime | None, last_activity_at: datetime | None, generated_at: datetime
) -> str:
    if last_activity_at is None and added_at is None:
        return ""
    return f"{inactivity_days(added_at, last_activity_at, generated_at):.1f}"


def format_top_users(users: list[ReportUser], total: float) -> str:
    """Render e.g. "alice:2.0h bob:1.5h total:3.5h"."""
    if not users:
        return ""
    parts = [f"{u.user}:{u.hours:.1f}h" for u in users]
    if total > 0:
        parts.append(f"total:{total:.1f}h")
    return " ".join(parts)


def table_row(item: ReportItem, generated_at: datetime) -> list[str]:
    return [
        item.type.value,
        item.title,
        item.series_status,
        format_size_gib(item.size_bytes),
        format_optional_time(item.added_at),
        format_optional_time(item.first_activity_at),
        format_optional_time(item.last_activity_at),
        format_gap_days(item.added_at, item.first_activity_at, generated_at),
        format_inactivity_days(item.added_at, item.last_activity_at, generated_at),
        format_hours(item.total_watch_hours),
        format_top_users(item.top_users, item.top_users_total_hours),
        item.reason,
        item.path,
    ]


def format_table(report: Report) -> str:
    """Render the report as an aligned text table."""
    if not report.items:
        return "No items to review."

    rows = [TABLE_COLUMNS] + [table_row(item, report.generated_at) for item in report.items]
    widths = [max(len(row[i]) for row in rows) for i in range(len(TABLE_COLUMNS))]
    lines = []
    for row in rows:
        cells = [cell.ljust(width) for cell, width in zip(row, widths)]
        lines.append("  ".join(cells).rstrip())
    return "\n".join(lines)
