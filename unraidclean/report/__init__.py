"""Review report output."""

from .formatter import Summary, format_table, summarize
from .store import ReportError, read_json, write_csv, write_json

__all__ = [
    "ReportError",
    "Summary",
    "format_table",
    "read_json",
    "summarize",
    "write_csv",
    "write_json",
]
