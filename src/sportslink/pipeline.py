"""End-to-end merge run: fetch, load, filter, match, write.

Expected stage failures are handled here and turned into an aborted
:class:`RunResult`. Anything else propagates to the caller.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .config import Settings
from .errors import ScheduleSnapshotError
from .matcher import collect_stats, match_data
from .models import MatchStats, MergedRecord
from .output import build_merged_record, write_merged_record
from .playlist import PlaylistClient, get_playlist_entries
from .run_summary import log_run_recap
from .schedule import load_snapshot, today_date_keyword

LOGGER = logging.getLogger(__name__)


@dataclass
class RunResult:
    playlist_entries: int = 0
    scheduled_matches: int = 0
    record: Optional[MergedRecord] = None
    stats: MatchStats = field(default_factory=MatchStats)
    written: List[Path] = field(default_factory=list)
    aborted_reason: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.aborted_reason is None


def run(
    settings: Settings,
    *,
    now: Optional[dt.datetime] = None,
    client: Optional[PlaylistClient] = None,
) -> RunResult:
    run_started = now or dt.datetime.now(dt.timezone.utc)
    result = RunResult()
    LOGGER.info("Starting merge of today's schedule with the playlist feed")

    entries = get_playlist_entries(settings.fetch, settings.matching.allowed_groups, client=client)
    result.playlist_entries = len(entries)
    if not entries:
        result.aborted_reason = "no playlist data"
        LOGGER.error("No playlist data available; nothing written")
        return result

    try:
        matches = load_snapshot(settings.snapshot_path)
    except ScheduleSnapshotError as exc:
        result.aborted_reason = "snapshot unavailable"
        LOGGER.error("Failed to load schedule snapshot: %s", exc)
        return result
    result.scheduled_matches = len(matches)

    offset = settings.matching.utc_offset_hours
    matched = match_data(
        matches,
        entries,
        today_keyword=today_date_keyword(run_started, offset),
        threshold=settings.matching.threshold,
    )
    record = build_merged_record(matched, run_started, utc_offset_hours=offset)
    result.record = record
    result.stats = collect_stats(record.data)

    try:
        result.written = write_merged_record(record, settings.output, run_started)
    except OSError as exc:
        result.aborted_reason = "write failed"
        LOGGER.error("Failed to write merged data: %s", exc)
        return result

    log_run_recap(
        result.stats,
        record.data,
        playlist_entries=result.playlist_entries,
        written=result.written,
    )
    return result
