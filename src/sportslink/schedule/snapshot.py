"""Snapshot loading and today's-match selection."""

from __future__ import annotations

import datetime as dt
import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import ValidationError

from ..errors import ScheduleSnapshotError
from ..models import ScheduleMatch
from ..utils import local_now
from .adapter import SnapshotAdapter
from .models import SnapshotDocument

LOGGER = logging.getLogger(__name__)


def load_snapshot(path: Path) -> list[ScheduleMatch]:
    """Read and validate the cached schedule snapshot.

    Raises:
        ScheduleSnapshotError: If the file is missing, is not JSON, or lacks a
            well-formed top-level ``data`` list.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except FileNotFoundError as exc:
        raise ScheduleSnapshotError(f"Snapshot not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise ScheduleSnapshotError(f"Unable to read snapshot {path}: {exc}") from exc

    try:
        document = SnapshotDocument.model_validate(payload)
    except ValidationError as exc:
        raise ScheduleSnapshotError(f"Snapshot {path} has an invalid structure: {exc}") from exc

    matches = SnapshotAdapter().to_matches(document, payload)
    LOGGER.info("Loaded %d scheduled matches from %s", len(matches), path)
    return matches


def today_date_keyword(now: dt.datetime | None = None, offset_hours: float = 8) -> str:
    """Render today's date as ``M月D日`` (no zero padding) at a fixed UTC offset."""
    local = local_now(offset_hours, now)
    return f"{local.month}月{local.day}日"


def filter_today(matches: Iterable[ScheduleMatch], today_keyword: str) -> list[ScheduleMatch]:
    """Keep matches whose keyword contains ``today_keyword``, in input order."""
    return [match for match in matches if match.keyword and today_keyword in match.keyword]
