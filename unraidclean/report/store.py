"""Reading and writing review reports as JSON and CSV."""

import csv
import json
import logging
from pathlib import Path
from typing import Any

from ..core.models import MediaType, Report, ReportItem, ReportUser, parse_timestamp
from .formatter import (
    format_gap_days,
    format_hours,
    format_inactivity_days,
    format_optional_int,
    format_optional_time,
    format_size_gib,
    format_timestamp,
    format_top_users,
)

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "type",
    "title",
    "radarr_id",
    "sonarr_id",
    "series_status",
    "path",
    "size_bytes",
    "size_gib",
    "added_at",
    "first_activity_at",
    "last_activity_at",
    "gap_days",
    "inactivity_days",
    "top_users",
    "top_users_hours_total",
    "total_watch_hours",
    "reason",
]


class ReportError(Exception):
    """Raised when a report file cannot be read."""


def item_to_dict(item: ReportItem) -> dict[str, Any]:
    """Serialize an item, leaving out empty optional fields."""
    data: dict[str, Any] = {"type": item.type.value, "title": item.title}
    optional = {
        "radarr_id": item.radarr_id,
        "sonarr_id": item.sonarr_id,
        "tmdb_id": item.tmdb_id,
        "tvdb_id": item.tvdb_id,
        "imdb_id": item.imdb_id or None,
    }
    data.update({key: value for key, value in optional.items() if value is not None})
    data["path"] = item.path
    data["size_bytes"] = item.size_bytes
    for key in ("added_at", "first_activity_at", "last_activity_at"):
        value = getattr(item, key)
        if value is not None:
            data[key] = format_timestamp(value)
    if item.top_users:
        data["top_users"] = [{"user": u.user, "hours": u.hours} for u in item.top_users]
    if item.top_users_total_hours:
        data["top_users_total_hours"] = item.top_users_total_hours
    if item.total_watch_hours:
        data["total_watch_hours"] = item.total_watch_hours
    if item.series_status:
        data["series_status"] = item.series_status
    data["reason"] = item.reason
    return data


def item_from_dict(data: dict[str, Any]) -> ReportItem:
    """Inverse of item_to_dict."""
    return ReportItem(
        type=MediaType(data.get("type", "")),
        title=data.get("title", ""),
        path=data.get("path", ""),
        size_bytes=int(data.get("size_bytes") or 0),
        reason=data.get("reason", ""),
        radarr_id=data.get("radarr_id"),
        sonarr_id=data.get("sonarr_id"),
        tmdb_id=data.get("tmdb_id"),
        tvdb_id=data.get("tvdb_id"),
        imdb_id=data.get("imdb_id", ""),
        added_at=parse_timestamp(data.get("added_at")),
        first_activity_at=parse_timestamp(data.get("first_activity_at")),
        last_activity_at=parse_timestamp(data.get("last_activity_at")),
        top_users=[
            ReportUser(user=u.get("user", ""), hours=float(u.get("hours") or 0))
            for u in data.get("top_users") or []
        ],
        top_users_total_hours=float(data.get("top_users_total_hours") or 0),
        total_watch_hours=float(data.get("total_watch_hours") or 0),
        series_status=data.get("series_status", ""),
    )


def report_to_dict(report: Report) -> dict[str, Any]:
    return {
        "generated_at": format_timestamp(report.generated_at),
        "items": [item_to_dict(item) for item in report.items],
    }


def write_json(path: Path, report: Report) -> None:
    """Write the report as indented JSON."""
    payload = json.dumps(report_to_dict(report), indent=2, ensure_ascii=False)
    with open(path, "w", encoding="utf-8") as f:
        f.write(payload + "\n")
    logger.debug(f"Wrote JSON report to {path}")


def read_json(path: Path) -> Report:
    """Load a report written by write_json."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ReportError(f"read report: {e}") from e
    except json.JSONDecodeError as e:
        raise ReportError(f"parse report: {e}") from e

    generated_at = parse_timestamp(data.get("generated_at")) if isinstance(data, dict) else None
    if generated_at is None:
        raise ReportError("parse report: missing or invalid generated_at")

    try:
        items = [item_from_dict(entry) for entry in data.get("items") or []]
    except (AttributeError, TypeError, ValueError) as e:
        raise ReportError(f"parse report: {e}") from e
    return Report(generated_at=generated_at, items=items)


def write_csv(path: Path, report: Report) -> None:
    """Write the report as CSV with derived gap and inactivity columns."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        for item in report.items:
            writer.writerow([
                item.type.value,
                item.title,
                format_optional_int(item.radarr_id),
                format_optional_int(item.sonarr_id),
                item.series_status,
                item.path,
                str(item.size_bytes),
                format_size_gib(item.size_bytes),
                format_optional_time(item.added_at),
                format_optional_time(item.first_activity_at),
                format_optional_time(item.last_activity_at),
                format_gap_days(item.added_at, item.first_activity_at, report.generated_at),
                format_inactivity_days(item.added_at, item.last_activity_at, report.generated_at),
                format_top_users(item.top_users, item.top_users_total_hours),
                format_hours(item.top_users_total_hours),
                format_hours(item.total_watch_hours),
                item.reason,
            ])
    logger.debug(f"Wrote CSV report to {path}")
