"""Run recap formatting for the merge statistics."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional, Sequence

from .logging_utils import LogBlockBuilder

if TYPE_CHECKING:
    from pathlib import Path

    from .models import MatchStats, ScheduleMatch

LOGGER = logging.getLogger(__name__)


def format_coverage(stats: MatchStats) -> str:
    return f"{stats.matched_nodes}/{stats.total_nodes} ({stats.coverage:.1f}%)"


def unmatched_nodes(matches: Sequence[ScheduleMatch]) -> List[str]:
    """Describe every node that received no URL as ``keyword title / node``."""
    lines: List[str] = []
    for match in matches:
        for node in match.nodes:
            if not node.urls:
                lines.append(f"{match.keyword} {match.competition_title} / {node.name}")
    return lines


def render_run_recap(
    stats: MatchStats,
    *,
    playlist_entries: int,
    written: Optional[Sequence[Path]] = None,
    unmatched: Optional[Sequence[str]] = None,
) -> str:
    builder = LogBlockBuilder("Merge Recap")
    builder.add_fields(
        [
            ("Playlist entries", playlist_entries),
            ("Matches today", stats.matches),
            ("Nodes matched", format_coverage(stats)),
            ("Stream URLs", stats.total_urls),
        ]
    )
    if written:
        builder.add_section("Output", [str(path) for path in written])
    if unmatched is not None:
        builder.add_section("Unmatched nodes", unmatched)
    return builder.render()


def log_run_recap(
    stats: MatchStats,
    matches: Sequence[ScheduleMatch],
    *,
    playlist_entries: int,
    written: Optional[Sequence[Path]] = None,
) -> None:
    # Unmatched listing at DEBUG only
    unmatched = unmatched_nodes(matches) if LOGGER.isEnabledFor(logging.DEBUG) else None
    LOGGER.info(
        render_run_recap(
            stats,
            playlist_entries=playlist_entries,
            written=written,
            unmatched=unmatched,
        )
    )
