"""Cached schedule snapshot: loading, validation and daily filtering."""

from .adapter import SnapshotAdapter
from .snapshot import filter_today, load_snapshot, today_date_keyword

__all__ = [
    "SnapshotAdapter",
    "filter_today",
    "load_snapshot",
    "today_date_keyword",
]
