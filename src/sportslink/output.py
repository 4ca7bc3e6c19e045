"""Merged record construction and JSON persistence.

Each run writes the same document twice: once to a fixed "latest" file that
is overwritten, and once to a file whose name carries the run's UTC start
timestamp.
"""

from __future__ import annotations

import datetime as dt
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, List, Sequence

from .logging_utils import render_fields_block
from .models import MergedRecord, ScheduleMatch
from .utils import ensure_directory, filename_timestamp, format_update_time, local_now

if TYPE_CHECKING:
    from .config import OutputSettings

LOGGER = logging.getLogger(__name__)


def build_merged_record(
    matches: Sequence[ScheduleMatch],
    run_started: dt.datetime,
    *,
    utc_offset_hours: float = 8,
) -> MergedRecord:
    return MergedRecord(
        update_time=format_update_time(local_now(utc_offset_hours, run_started)),
        data=list(matches),
    )


def timestamped_filename(prefix: str, run_started: dt.datetime) -> str:
    return f"{prefix}{filename_timestamp(run_started)}.json"


def _write_json(path: Path, payload: dict) -> None:
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, ensure_ascii=False, indent=2)


def write_merged_record(
    record: MergedRecord,
    settings: OutputSettings,
    run_started: dt.datetime,
) -> List[Path]:
    """Serialize ``record`` to the timestamped and latest files.

    Returns the written paths, timestamped file first. ``OSError`` propagates
    to the caller.
    """
    ensure_directory(settings.directory)
    payload = record.to_dict()

    targets: List[Path] = []
    if settings.write_timestamped:
        targets.append(settings.directory / timestamped_filename(settings.filename_prefix, run_started))
    targets.append(settings.directory / settings.latest_filename)

    for path in targets:
        _write_json(path, payload)

    LOGGER.info(
        render_fields_block(
            "Merged Data Written",
            [("Path", path) for path in targets],
        )
    )
    return targets
