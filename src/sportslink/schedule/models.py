"""Pydantic models for the cached schedule snapshot document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class NodeRecord(BaseModel):
    """A broadcast node as stored in the snapshot."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    name: str | None = None


class MatchRecord(BaseModel):
    """A scheduled match as stored in the snapshot.

    Fields the matcher does not use are kept as extras so they can be written
    back unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    keyword: str | None = None
    title: str | None = None
    modify_title: str | None = Field(default=None, alias="modifyTitle")
    pk_info_title: str | None = Field(default=None, alias="pkInfoTitle")
    nodes: list[NodeRecord] = Field(default_factory=list)


class SnapshotDocument(BaseModel):
    """Top-level snapshot wrapper."""

    model_config = ConfigDict(extra="ignore")

    data: list[MatchRecord]
