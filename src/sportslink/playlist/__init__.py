"""Playlist feed download and parsing."""

from .client import PlaylistClient, fetch_with_retry
from .parser import get_playlist_entries, parse_playlist, parse_title

__all__ = [
    "PlaylistClient",
    "fetch_with_retry",
    "get_playlist_entries",
    "parse_playlist",
    "parse_title",
]
