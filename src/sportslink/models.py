from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .utils import normalize_text


@dataclass(frozen=True, slots=True)
class PlaylistEntry:
    title: str
    time_key: str
    comparison_text: str
    url: str


@dataclass(slots=True)
class BroadcastNode:
    name: str
    urls: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    # Declared fields exactly as loaded, keyed by their snapshot names
    snapshot_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def normalized_name(self) -> str:
        return normalize_text(self.name)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = dict(self.extra)
        payload["name"] = self.snapshot_fields.get("name", self.name)
        payload["urls"] = list(self.urls)
        return payload


@dataclass(slots=True)
class ScheduleMatch:
    keyword: Optional[str]
    title: Optional[str] = None
    modify_title: Optional[str] = None
    pk_info_title: Optional[str] = None
    nodes: List[BroadcastNode] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    snapshot_fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def competition_title(self) -> str:
        """Competition name, preferring the edited title over the raw one."""
        return self.modify_title or self.title or ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with the snapshot's camelCase keys.

        Fields loaded from a snapshot are written back as they appeared there,
        nulls included. Absent titles are omitted.
        """
        payload: Dict[str, Any] = dict(self.extra)
        payload["keyword"] = self.snapshot_fields.get("keyword", self.keyword)
        for key, value in (
            ("title", self.title),
            ("modifyTitle", self.modify_title),
            ("pkInfoTitle", self.pk_info_title),
        ):
            if key in self.snapshot_fields:
                payload[key] = self.snapshot_fields[key]
            elif value is not None:
                payload[key] = value
        payload["nodes"] = [node.to_dict() for node in self.nodes]
        return payload


@dataclass(frozen=True, slots=True)
class MergedRecord:
    update_time: str
    data: List[ScheduleMatch]
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "updateTime": self.update_time,
            "data": [match.to_dict() for match in self.data],
        }


@dataclass(slots=True)
class MatchStats:
    matches: int = 0
    total_nodes: int = 0
    matched_nodes: int = 0
    total_urls: int = 0

    @property
    def coverage(self) -> float:
        if not self.total_nodes:
            return 0.0
        return self.matched_nodes / self.total_nodes * 100

    def register_node(self, node: BroadcastNode) -> None:
        self.total_nodes += 1
        self.total_urls += len(node.urls)
        if node.urls:
            self.matched_nodes += 1
