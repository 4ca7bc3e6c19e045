"""Extended M3U parsing into time-keyed playlist entries.

Only ``#EXTINF`` directives whose ``group-title`` is on the allow list are
considered. Each accepted directive claims the next ``http`` line as its
stream URL. Titles carry a ``M月D日H:MM`` date/time which becomes the
zero-padded time key; the rest of the title, stripped of underscores and
whitespace, is kept for text comparison against the schedule.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ..config import DEFAULT_ALLOWED_GROUPS
from ..errors import PlaylistFetchError
from ..logging_utils import render_fields_block
from ..models import PlaylistEntry
from ..utils import normalize_text
from .client import PlaylistClient

if TYPE_CHECKING:
    from ..config import FetchSettings

LOGGER = logging.getLogger(__name__)

DIRECTIVE_PREFIX = "#EXTINF:"
URL_PREFIX = "http"

GROUP_TITLE_PATTERN = re.compile(r'group-title="([^"]*)"')
DISPLAY_TITLE_PATTERN = re.compile(r",(.*)$")
TITLE_TIME_PATTERN = re.compile(r"(\d{1,2})月(\d{1,2})日(\d{1,2}):(\d{2})", re.ASCII)
# Date/time segment plus the separator that usually follows it
TITLE_TIME_SEGMENT = re.compile(r"\d{1,2}月\d{1,2}日\d{1,2}:\d{2}_?", re.ASCII)

SAMPLE_SIZE = 3


def parse_title(title: str) -> tuple[str, str] | None:
    """Split a display title into ``(time_key, comparison_text)``.

    Returns None when the title carries no date/time.

    >>> parse_title("11月6日20:00_NBA湖人vs勇士_主播A")
    ('11月06日20:00', 'NBA湖人vs勇士主播A')
    """
    match = TITLE_TIME_PATTERN.search(title)
    if match is None:
        return None
    month, day, hour, minute = match.groups()
    time_key = f"{int(month):02d}月{int(day):02d}日{int(hour):02d}:{minute}"
    comparison_text = normalize_text(TITLE_TIME_SEGMENT.sub("", title, count=1))
    return time_key, comparison_text


def _accepted_title(line: str, allowed_groups: frozenset[str], pending: str) -> str:
    """Return the pending title after reading a directive line.

    Directives outside the allow list clear it. An allow-listed directive
    without a display title leaves ``pending`` in place.
    """
    group = GROUP_TITLE_PATTERN.search(line)
    if group is None or group.group(1) not in allowed_groups:
        return ""
    display = DISPLAY_TITLE_PATTERN.search(line)
    if display is None:
        return pending
    return display.group(1).strip()


def parse_playlist(text: str, allowed_groups: Iterable[str] = DEFAULT_ALLOWED_GROUPS) -> list[PlaylistEntry]:
    groups = frozenset(allowed_groups)
    entries: list[PlaylistEntry] = []
    pending_title = ""

    for raw_line in text.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        if line.startswith(DIRECTIVE_PREFIX):
            pending_title = _accepted_title(line, groups, pending_title)
            continue

        if not (line.startswith(URL_PREFIX) and pending_title):
            continue

        parsed = parse_title(pending_title)
        if parsed is not None:
            time_key, comparison_text = parsed
            entries.append(
                PlaylistEntry(
                    title=pending_title,
                    time_key=time_key,
                    comparison_text=comparison_text,
                    url=line,
                )
            )
        pending_title = ""

    return entries


def _log_samples(entries: list[PlaylistEntry]) -> None:
    if not entries:
        return
    LOGGER.debug(
        render_fields_block(
            "Playlist Samples",
            [(entry.time_key, entry.comparison_text) for entry in entries[:SAMPLE_SIZE]],
        )
    )


def get_playlist_entries(
    settings: FetchSettings,
    allowed_groups: Iterable[str] = DEFAULT_ALLOWED_GROUPS,
    *,
    client: PlaylistClient | None = None,
) -> list[PlaylistEntry]:
    """Download and parse the playlist feed.

    A download that exhausts its retry budget is logged and yields an empty
    list; callers must read an empty result as "no data available".
    """
    LOGGER.info("Fetching playlist from %s", settings.url)
    owns_client = client is None
    try:
        if client is None:
            client = PlaylistClient(
                max_attempts=settings.max_attempts,
                timeout=settings.timeout,
                retry_delay=settings.retry_delay,
                headers=settings.headers,
            )
        text = client.fetch_text(settings.url)
    except PlaylistFetchError as exc:
        LOGGER.error("Failed to fetch playlist: %s", exc)
        return []
    finally:
        if owns_client and client is not None:
            client.close()

    entries = parse_playlist(text, allowed_groups)
    LOGGER.info("Parsed %d playlist entries", len(entries))
    _log_samples(entries)
    return entries
