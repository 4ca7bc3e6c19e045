"""Tests for snapshot loading and today's-match filtering."""

from __future__ import annotations

import datetime as dt
import json

import pytest

from sportslink.errors import ScheduleSnapshotError
from sportslink.matcher import match_schedule
from sportslink.models import BroadcastNode, ScheduleMatch
from sportslink.output import build_merged_record
from sportslink.schedule import filter_today, load_snapshot, today_date_keyword

UTC = dt.timezone.utc


def _write_snapshot(path, payload) -> None:
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")


class TestLoadSnapshot:
    def test_loads_matches_and_nodes(self, tmp_path) -> None:
        path = tmp_path / "sports-data-latest.json"
        _write_snapshot(
            path,
            {
                "success": True,
                "data": [
                    {
                        "keyword": "11月16日20:00",
                        "title": "NBA",
                        "modifyTitle": "NBA常规赛",
                        "pkInfoTitle": "湖人vs勇士",
                        "id": 42,
                        "nodes": [{"name": "主播A", "type": "live"}],
                    }
                ],
            },
        )

        matches = load_snapshot(path)

        assert len(matches) == 1
        match = matches[0]
        assert match.keyword == "11月16日20:00"
        assert match.modify_title == "NBA常规赛"
        assert match.pk_info_title == "湖人vs勇士"
        assert match.competition_title == "NBA常规赛"
        assert match.extra == {"id": 42}
        assert match.nodes == [
            BroadcastNode(name="主播A", extra={"type": "live"}, snapshot_fields={"name": "主播A"})
        ]

    def test_missing_optional_fields(self, tmp_path) -> None:
        path = tmp_path / "snapshot.json"
        _write_snapshot(path, {"data": [{"title": "无关键字"}]})

        match = load_snapshot(path)[0]

        assert match.keyword is None
        assert match.nodes == []
        assert match.competition_title == "无关键字"

    def test_node_without_name_gets_empty_name(self, tmp_path) -> None:
        path = tmp_path / "snapshot.json"
        _write_snapshot(path, {"data": [{"keyword": "11月16日20:00", "nodes": [{}]}]})
        assert load_snapshot(path)[0].nodes[0].name == ""

    def test_missing_file_raises(self, tmp_path) -> None:
        with pytest.raises(ScheduleSnapshotError, match="not found"):
            load_snapshot(tmp_path / "missing.json")

    def test_invalid_json_raises(self, tmp_path) -> None:
        path = tmp_path / "snapshot.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ScheduleSnapshotError):
            load_snapshot(path)

    def test_missing_data_key_raises(self, tmp_path) -> None:
        path = tmp_path / "snapshot.json"
        _write_snapshot(path, {"success": True})
        with pytest.raises(ScheduleSnapshotError, match="invalid structure"):
            load_snapshot(path)

    def test_data_must_be_a_list(self, tmp_path) -> None:
        path = tmp_path / "snapshot.json"
        _write_snapshot(path, {"data": {"keyword": "x"}})
        with pytest.raises(ScheduleSnapshotError):
            load_snapshot(path)


class TestSnapshotRoundTrip:
    def test_loaded_fields_are_written_back_unchanged(self, tmp_path) -> None:
        raw_match = {
            "keyword": "11月16日20:00",
            "title": None,
            "modifyTitle": "X",
            "pkInfoTitle": None,
            "id": 5,
            "nodes": [{"name": None, "rank": 3}, {"name": 12, "id": "n2"}],
        }
        path = tmp_path / "snapshot.json"
        _write_snapshot(path, {"data": [raw_match]})

        matches = match_schedule(load_snapshot(path), [])
        record = build_merged_record(matches, dt.datetime(2025, 11, 16, 4, 0, tzinfo=UTC))

        assert record.to_dict()["data"] == [
            {**raw_match, "nodes": [{**node, "urls": []} for node in raw_match["nodes"]]}
        ]

    def test_numeric_title_is_matched_as_text_but_written_as_number(self, tmp_path) -> None:
        path = tmp_path / "snapshot.json"
        _write_snapshot(path, {"data": [{"keyword": "11月16日20:00", "title": 2025, "nodes": []}]})

        match = load_snapshot(path)[0]

        assert match.competition_title == "2025"
        assert match.to_dict()["title"] == 2025


class TestTodayDateKeyword:
    def test_uses_fixed_plus_eight_offset(self) -> None:
        # 20:00 UTC on Nov 5 is already Nov 6 in the feed's timezone
        now = dt.datetime(2025, 11, 5, 20, 0, tzinfo=UTC)
        assert today_date_keyword(now) == "11月6日"

    def test_no_zero_padding(self) -> None:
        now = dt.datetime(2025, 1, 2, 0, 0, tzinfo=UTC)
        assert today_date_keyword(now) == "1月2日"

    def test_naive_datetime_treated_as_utc(self) -> None:
        assert today_date_keyword(dt.datetime(2025, 1, 1, 15, 59)) == "1月1日"
        assert today_date_keyword(dt.datetime(2025, 1, 1, 16, 0)) == "1月2日"

    def test_custom_offset(self) -> None:
        now = dt.datetime(2025, 3, 10, 2, 0, tzinfo=UTC)
        assert today_date_keyword(now, offset_hours=-5) == "3月9日"

    def test_independent_of_input_timezone(self) -> None:
        tokyo = dt.timezone(dt.timedelta(hours=9))
        now = dt.datetime(2025, 11, 6, 0, 30, tzinfo=tokyo)  # 23:30 on Nov 5 at +8
        assert today_date_keyword(now) == "11月5日"


class TestFilterToday:
    def test_keeps_matches_containing_today_in_order(self) -> None:
        first = ScheduleMatch(keyword="11月16日20:00", title="A")
        other_day = ScheduleMatch(keyword="11月17日20:00", title="B")
        second = ScheduleMatch(keyword="11月16日09:30", title="C")

        result = filter_today([first, other_day, second], "11月16日")

        assert result == [first, second]
        assert result[0] is first
        assert result[1] is second

    def test_excludes_matches_without_keyword(self) -> None:
        matches = [ScheduleMatch(keyword=None), ScheduleMatch(keyword="")]
        assert filter_today(matches, "11月16日") == []

    def test_zero_padded_keyword_does_not_contain_unpadded_day(self) -> None:
        padded = ScheduleMatch(keyword="11月06日20:00")
        assert filter_today([padded], "11月6日") == []

    def test_output_is_subset_of_input(self) -> None:
        matches = [ScheduleMatch(keyword=f"11月1{day}日20:00") for day in range(10)]
        result = filter_today(matches, "11月15日")
        assert all(any(item is source for source in matches) for item in result)
        assert [item.keyword for item in result] == ["11月15日20:00"]
