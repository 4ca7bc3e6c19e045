"""Tests for merged record construction and persistence."""

from __future__ import annotations

import datetime as dt
import json

from sportslink.config import OutputSettings
from sportslink.models import BroadcastNode, MergedRecord, ScheduleMatch
from sportslink.output import build_merged_record, timestamped_filename, write_merged_record

UTC = dt.timezone.utc
RUN_STARTED = dt.datetime(2025, 11, 6, 4, 5, 6, 123456, tzinfo=UTC)


def _record() -> MergedRecord:
    match = ScheduleMatch(
        keyword="11月06日20:00",
        title="NBA",
        modify_title="NBA常规赛",
        pk_info_title="湖人vs勇士",
        nodes=[BroadcastNode(name="主播A", urls=["http://x/1.m3u8"], extra={"type": "live"})],
        extra={"id": 42},
    )
    return build_merged_record([match], RUN_STARTED)


class TestBuildMergedRecord:
    def test_update_time_uses_plus_eight(self) -> None:
        assert _record().update_time == "2025-11-06 12:05:06"

    def test_update_time_rolls_over_date(self) -> None:
        record = build_merged_record([], dt.datetime(2025, 12, 31, 20, 0, tzinfo=UTC))
        assert record.update_time == "2026-01-01 04:00:00"

    def test_to_dict_uses_camel_case_keys(self) -> None:
        payload = _record().to_dict()

        assert payload["success"] is True
        assert payload["updateTime"] == "2025-11-06 12:05:06"
        match = payload["data"][0]
        assert match == {
            "id": 42,
            "keyword": "11月06日20:00",
            "title": "NBA",
            "modifyTitle": "NBA常规赛",
            "pkInfoTitle": "湖人vs勇士",
            "nodes": [{"type": "live", "name": "主播A", "urls": ["http://x/1.m3u8"]}],
        }

    def test_absent_titles_are_not_emitted(self) -> None:
        payload = ScheduleMatch(keyword="11月06日20:00").to_dict()
        assert payload == {"keyword": "11月06日20:00", "nodes": []}


class TestTimestampedFilename:
    def test_replaces_colons_and_periods(self) -> None:
        name = timestamped_filename("merged-sports-data-", RUN_STARTED)
        assert name == "merged-sports-data-2025-11-06T04-05-06-123Z.json"

    def test_converts_to_utc(self) -> None:
        shanghai = dt.timezone(dt.timedelta(hours=8))
        moment = dt.datetime(2025, 11, 6, 12, 0, 0, tzinfo=shanghai)
        assert timestamped_filename("p-", moment) == "p-2025-11-06T04-00-00-000Z.json"


class TestWriteMergedRecord:
    def test_writes_latest_and_timestamped_files(self, tmp_path) -> None:
        settings = OutputSettings(directory=tmp_path / "out")

        written = write_merged_record(_record(), settings, RUN_STARTED)

        assert [path.name for path in written] == [
            "merged-sports-data-2025-11-06T04-05-06-123Z.json",
            "merged-sports-data-latest.json",
        ]
        contents = [path.read_text(encoding="utf-8") for path in written]
        assert contents[0] == contents[1]
        assert "主播A" in contents[0]
        assert json.loads(contents[0])["data"][0]["nodes"][0]["urls"] == ["http://x/1.m3u8"]

    def test_output_is_indented(self, tmp_path) -> None:
        settings = OutputSettings(directory=tmp_path)
        latest = write_merged_record(_record(), settings, RUN_STARTED)[-1]
        assert latest.read_text(encoding="utf-8").startswith('{\n  "success": true')

    def test_latest_file_is_overwritten(self, tmp_path) -> None:
        settings = OutputSettings(directory=tmp_path, write_timestamped=False)
        (tmp_path / settings.latest_filename).write_text("stale", encoding="utf-8")

        written = write_merged_record(_record(), settings, RUN_STARTED)

        assert written == [tmp_path / "merged-sports-data-latest.json"]
        assert json.loads(written[0].read_text(encoding="utf-8"))["success"] is True
