from __future__ import annotations

import datetime as dt
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import yaml


STRIP_PATTERN = re.compile(r"[_\s]+")

# Fixed offset of the source feed (Asia/Shanghai, no DST)
FEED_TIMEZONE = dt.timezone(dt.timedelta(hours=8))

# Boolean true/false string values
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def normalize_text(value: Optional[str]) -> str:
    """Return ``value`` with every underscore and whitespace character removed."""
    if not value:
        return ""
    return STRIP_PATTERN.sub("", str(value))


def feed_timezone(offset_hours: float = 8) -> dt.timezone:
    if offset_hours == 8:
        return FEED_TIMEZONE
    return dt.timezone(dt.timedelta(hours=offset_hours))


def local_now(offset_hours: float = 8, now: Optional[dt.datetime] = None) -> dt.datetime:
    """Return ``now`` (or the current instant) expressed at a fixed UTC offset.

    Naive datetimes are treated as UTC so the result never depends on the
    host timezone configuration.
    """
    current = now or dt.datetime.now(dt.timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=dt.timezone.utc)
    return current.astimezone(feed_timezone(offset_hours))


def format_update_time(moment: dt.datetime) -> str:
    return moment.strftime("%Y-%m-%d %H:%M:%S")


def filename_timestamp(moment: dt.datetime) -> str:
    """Render a UTC ISO timestamp that is safe to embed in a file name.

    ``2025-11-06T12:00:00.123Z`` becomes ``2025-11-06T12-00-00-123Z``.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=dt.timezone.utc)
    utc = moment.astimezone(dt.timezone.utc)
    iso = f"{utc.strftime('%Y-%m-%dT%H:%M:%S')}.{utc.microsecond // 1000:03d}Z"
    return iso.replace(":", "-").replace(".", "-")


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_env(val) for key, val in value.items()}
    return value


def load_yaml_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return expand_env(data)


def parse_env_bool(value: Optional[str]) -> Optional[bool]:
    """Parse a boolean from an environment variable string.

    Returns None if value is None or not a recognized boolean string.
    """
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def env_bool(name: str) -> Optional[bool]:
    return parse_env_bool(os.getenv(name))


def env_list(name: str, separator: str = ",") -> Optional[List[str]]:
    """Get a list of strings from an environment variable.

    Returns None if not set, empty list if set but empty.
    """
    raw = os.getenv(name)
    if raw is None:
        return None
    return [part.strip() for part in raw.split(separator) if part.strip()]


def validate_url(url: Optional[str]) -> bool:
    """Validate that URL is a valid http/https URL."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
