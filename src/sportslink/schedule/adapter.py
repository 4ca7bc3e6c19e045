"""Adapter to convert snapshot records to sportslink dataclass models."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from ..models import BroadcastNode, ScheduleMatch

if TYPE_CHECKING:
    from .models import MatchRecord, NodeRecord, SnapshotDocument

MATCH_KEYS = ("keyword", "title", "modifyTitle", "pkInfoTitle")
NODE_KEYS = ("name",)


def _snapshot_fields(source: Any, keys: Sequence[str]) -> dict[str, Any]:
    if not isinstance(source, Mapping):
        return {}
    return {key: source[key] for key in keys if key in source}


def _sources(source: Any, key: str, count: int) -> list[Any]:
    """Raw items under ``source[key]``, or placeholders when they don't line up."""
    items = source.get(key) if isinstance(source, Mapping) else None
    if not isinstance(items, list) or len(items) != count:
        return [None] * count
    return items


class SnapshotAdapter:
    """Converts validated snapshot records into :class:`ScheduleMatch` objects.

    When the raw JSON objects are passed alongside the records, the declared
    fields are also kept verbatim so serialization reproduces them exactly.
    """

    def to_node(self, record: NodeRecord, source: Any = None) -> BroadcastNode:
        return BroadcastNode(
            name=record.name or "",
            extra=dict(record.model_extra or {}),
            snapshot_fields=_snapshot_fields(source, NODE_KEYS),
        )

    def to_match(self, record: MatchRecord, source: Any = None) -> ScheduleMatch:
        node_sources = _sources(source, "nodes", len(record.nodes))
        return ScheduleMatch(
            keyword=record.keyword,
            title=record.title,
            modify_title=record.modify_title,
            pk_info_title=record.pk_info_title,
            nodes=[self.to_node(node, raw) for node, raw in zip(record.nodes, node_sources)],
            extra=dict(record.model_extra or {}),
            snapshot_fields=_snapshot_fields(source, MATCH_KEYS),
        )

    def to_matches(self, document: SnapshotDocument, source: Any = None) -> list[ScheduleMatch]:
        match_sources = _sources(source, "data", len(document.data))
        return [self.to_match(record, raw) for record, raw in zip(document.data, match_sources)]
