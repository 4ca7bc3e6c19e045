"""Attach playlist stream URLs to the broadcast nodes of scheduled matches.

A playlist entry qualifies for a node when:

1. its time key equals the match keyword exactly,
2. its comparison text ends with the node name (underscores and whitespace
   removed), and
3. at least ``threshold`` of the characters of the competition title plus team
   info occur somewhere in the remaining prefix of the comparison text.

Repeated reference characters count once per occurrence. A match whose
competition title and team info are both empty never qualifies.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from copy import deepcopy

from .models import BroadcastNode, MatchStats, PlaylistEntry, ScheduleMatch
from .schedule import filter_today, today_date_keyword
from .utils import normalize_text

LOGGER = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.5


def character_overlap(reference: str, middle: str) -> tuple[int, int]:
    """Return ``(hits, total)`` for the characters of ``reference`` found in ``middle``."""
    hits = sum(1 for char in reference if char in middle)
    return hits, len(reference)


def entry_matches_node(
    entry: PlaylistEntry,
    keyword: str | None,
    reference: str,
    node_name: str,
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> bool:
    if keyword is None or entry.time_key != keyword:
        return False
    # Empty names never match
    if not node_name or not entry.comparison_text.endswith(node_name):
        return False

    middle = entry.comparison_text[: len(entry.comparison_text) - len(node_name)]
    hits, total = character_overlap(reference, middle)
    return total > 0 and hits / total >= threshold


def match_node(
    match: ScheduleMatch,
    node: BroadcastNode,
    entries: Sequence[PlaylistEntry],
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> BroadcastNode:
    """Return a copy of ``node`` whose ``urls`` hold every qualifying entry's URL."""
    reference = normalize_text(match.competition_title) + normalize_text(match.pk_info_title)
    node_name = node.normalized_name
    urls = [
        entry.url
        for entry in entries
        if entry_matches_node(entry, match.keyword, reference, node_name, threshold=threshold)
    ]
    return BroadcastNode(
        name=node.name,
        urls=urls,
        extra=deepcopy(node.extra),
        snapshot_fields=deepcopy(node.snapshot_fields),
    )


def match_schedule(
    matches: Iterable[ScheduleMatch],
    entries: Sequence[PlaylistEntry],
    *,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[ScheduleMatch]:
    """Build freshly allocated matches with populated node URLs.

    Inputs are left untouched.
    """
    results: list[ScheduleMatch] = []
    for match in matches:
        nodes = [match_node(match, node, entries, threshold=threshold) for node in match.nodes]
        results.append(
            ScheduleMatch(
                keyword=match.keyword,
                title=match.title,
                modify_title=match.modify_title,
                pk_info_title=match.pk_info_title,
                nodes=nodes,
                extra=deepcopy(match.extra),
                snapshot_fields=deepcopy(match.snapshot_fields),
            )
        )
    return results


def match_data(
    matches: Iterable[ScheduleMatch],
    entries: Sequence[PlaylistEntry],
    *,
    today_keyword: str | None = None,
    threshold: float = DEFAULT_THRESHOLD,
    utc_offset_hours: float = 8,
) -> list[ScheduleMatch]:
    """Filter ``matches`` down to today's and attach playlist URLs to them."""
    keyword = today_keyword or today_date_keyword(offset_hours=utc_offset_hours)
    LOGGER.info("Filtering matches for %s", keyword)
    todays = filter_today(matches, keyword)
    LOGGER.info("%d matches scheduled today", len(todays))
    return match_schedule(todays, entries, threshold=threshold)


def collect_stats(matches: Iterable[ScheduleMatch]) -> MatchStats:
    stats = MatchStats()
    for match in matches:
        stats.matches += 1
        for node in match.nodes:
            stats.register_node(node)
    return stats
