"""Exception hierarchy shared across sportslink modules."""

from __future__ import annotations

from typing import Optional


class SportslinkError(Exception):
    """Base exception for sportslink failures."""


class ConfigError(SportslinkError, ValueError):
    """Raised when the configuration file is missing fields or malformed."""


class PlaylistFetchError(SportslinkError):
    """Raised when the playlist could not be downloaded within the retry budget."""

    def __init__(self, message: str, attempts: int = 0, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.status_code = status_code


class ScheduleSnapshotError(SportslinkError):
    """Raised when the cached schedule snapshot cannot be read or parsed."""
