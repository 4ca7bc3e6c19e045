from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .utils import env_bool, env_list, load_yaml_file, validate_url

DEFAULT_PLAYLIST_URL = "https://bingcha.hxfkof88.cloudns.ch/"
DEFAULT_ALLOWED_GROUPS = ("冰茶体育", "咪咕备用")


@dataclass
class FetchSettings:
    """How the playlist feed is downloaded."""

    url: str = DEFAULT_PLAYLIST_URL
    max_attempts: int = 2
    timeout: float = 10.0
    retry_delay: float = 1.0
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class MatchSettings:
    allowed_groups: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_GROUPS))
    threshold: float = 0.5
    utc_offset_hours: float = 8


@dataclass
class OutputSettings:
    directory: Path = Path(".")
    latest_filename: str = "merged-sports-data-latest.json"
    filename_prefix: str = "merged-sports-data-"
    write_timestamped: bool = True


@dataclass
class Settings:
    snapshot_path: Path = Path("sports-data-latest.json")
    fetch: FetchSettings = field(default_factory=FetchSettings)
    matching: MatchSettings = field(default_factory=MatchSettings)
    output: OutputSettings = field(default_factory=OutputSettings)


def _require_mapping(value: Any, *, field_name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{field_name}' must be provided as a mapping when specified")
    return value


def _positive_int(value: Any, *, field_name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{field_name}' must be an integer") from exc
    if number < 1:
        raise ConfigError(f"'{field_name}' must be at least 1")
    return number


def _non_negative_float(value: Any, *, field_name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"'{field_name}' must be a number") from exc
    if number < 0:
        raise ConfigError(f"'{field_name}' must not be negative")
    return number


def _ensure_string_list(value: Any, *, field_name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        raise ConfigError(f"'{field_name}' must be provided as a list of strings")
    result: list[str] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, str):
            raise ConfigError(f"'{field_name}[{index}]' must be a string")
        cleaned = entry.strip()
        if cleaned:
            result.append(cleaned)
    return result


def _build_fetch_settings(data: dict[str, Any]) -> FetchSettings:
    defaults = FetchSettings()
    url = str(data.get("url", defaults.url)).strip()
    if not validate_url(url):
        raise ConfigError(f"'playlist.url' must be an http(s) URL, got {url!r}")

    headers_raw = _require_mapping(data.get("headers"), field_name="playlist.headers")
    headers = {str(key): str(value) for key, value in headers_raw.items() if value is not None}
    for key, value in headers.items():
        if not (key.isascii() and value.isascii()):
            raise ConfigError(f"'playlist.headers.{key}' must contain only ASCII characters")

    return FetchSettings(
        url=url,
        max_attempts=_positive_int(data.get("max_attempts", defaults.max_attempts), field_name="playlist.max_attempts"),
        timeout=_non_negative_float(data.get("timeout", defaults.timeout), field_name="playlist.timeout"),
        retry_delay=_non_negative_float(
            data.get("retry_delay", defaults.retry_delay), field_name="playlist.retry_delay"
        ),
        headers=headers,
    )


def _build_match_settings(data: dict[str, Any]) -> MatchSettings:
    defaults = MatchSettings()
    groups = _ensure_string_list(data.get("allowed_groups", defaults.allowed_groups), field_name="matching.allowed_groups")
    if not groups:
        raise ConfigError("'matching.allowed_groups' must name at least one group-title")

    threshold = _non_negative_float(data.get("threshold", defaults.threshold), field_name="matching.threshold")
    if threshold > 1:
        raise ConfigError("'matching.threshold' must be between 0 and 1")

    try:
        offset = float(data.get("utc_offset_hours", defaults.utc_offset_hours))
    except (TypeError, ValueError) as exc:
        raise ConfigError("'matching.utc_offset_hours' must be a number") from exc
    if not -24 < offset < 24:
        raise ConfigError("'matching.utc_offset_hours' must be within (-24, 24)")

    return MatchSettings(allowed_groups=groups, threshold=threshold, utc_offset_hours=offset)


def _build_output_settings(data: dict[str, Any]) -> OutputSettings:
    defaults = OutputSettings()
    latest = str(data.get("latest_filename", defaults.latest_filename)).strip()
    if not latest:
        raise ConfigError("'output.latest_filename' must not be empty")
    return OutputSettings(
        directory=Path(data.get("directory", defaults.directory)).expanduser(),
        latest_filename=latest,
        filename_prefix=str(data.get("filename_prefix", defaults.filename_prefix)),
        write_timestamped=bool(data.get("write_timestamped", defaults.write_timestamped)),
    )


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    playlist = dict(_require_mapping(data.get("playlist"), field_name="playlist"))
    matching = dict(_require_mapping(data.get("matching"), field_name="matching"))
    output = dict(_require_mapping(data.get("output"), field_name="output"))

    url = os.getenv("SPORTSLINK_PLAYLIST_URL")
    if url:
        playlist["url"] = url
    groups = env_list("SPORTSLINK_GROUPS")
    if groups:
        matching["allowed_groups"] = groups
    snapshot = os.getenv("SPORTSLINK_SNAPSHOT")
    if snapshot:
        data["snapshot"] = snapshot
    output_dir = os.getenv("SPORTSLINK_OUTPUT_DIR")
    if output_dir:
        output["directory"] = output_dir
    write_timestamped = env_bool("SPORTSLINK_WRITE_TIMESTAMPED")
    if write_timestamped is not None:
        output["write_timestamped"] = write_timestamped

    data["playlist"] = playlist
    data["matching"] = matching
    data["output"] = output
    return data


def build_settings(data: dict[str, Any] | None = None) -> Settings:
    raw = _apply_env_overrides(dict(_require_mapping(data, field_name="<root>")))
    return Settings(
        snapshot_path=Path(raw.get("snapshot") or Settings().snapshot_path).expanduser(),
        fetch=_build_fetch_settings(_require_mapping(raw.get("playlist"), field_name="playlist")),
        matching=_build_match_settings(_require_mapping(raw.get("matching"), field_name="matching")),
        output=_build_output_settings(_require_mapping(raw.get("output"), field_name="output")),
    )


def load_config(path: Path | None = None) -> Settings:
    """Load settings from a YAML file, or return defaults when ``path`` is None."""
    if path is None:
        return build_settings({})
    try:
        data = load_yaml_file(path)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    return build_settings(data)
