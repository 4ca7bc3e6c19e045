from __future__ import annotations

import pytest

_ENV_VARS = (
    "SPORTSLINK_CONFIG",
    "SPORTSLINK_PLAYLIST_URL",
    "SPORTSLINK_GROUPS",
    "SPORTSLINK_SNAPSHOT",
    "SPORTSLINK_OUTPUT_DIR",
    "SPORTSLINK_WRITE_TIMESTAMPED",
    "BUILD_VERSION",
)


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
