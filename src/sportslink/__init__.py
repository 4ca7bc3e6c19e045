"""sportslink core package.

Merges a live extended-M3U playlist feed into a cached sports schedule:

- **playlist**: feed download with retries and ``#EXTINF`` parsing
- **schedule**: snapshot loading, validation and today's-match filtering
- **matcher**: time-key plus character-overlap matching of entries to nodes
- **output**: merged record construction and JSON persistence
- **pipeline**: the end-to-end run used by the CLI

``get_playlist_entries`` and ``match_data`` are the programmatic entry points
for reusing the engine without the CLI.
"""

from .matcher import match_data
from .pipeline import RunResult, run
from .playlist import get_playlist_entries
from .version import __version__

__all__ = [
    "__version__",
    "RunResult",
    "get_playlist_entries",
    "match_data",
    "run",
]
