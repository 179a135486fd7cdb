"""
Tests for settings and level table loading / validation.
"""
from __future__ import annotations

import json

import logging

import pytest
from pydantic import ValidationError

from ladder.core.config import Settings, load_level_table, settings
from ladder.core.log import configure_logging
from ladder.core.errors import LevelTableError
from ladder.schemas.levels import DEFAULT_LEVEL_TABLE, LevelDefinition, LevelTable


def _row(index, points, privileges=10, name=None):
    return {
        "index": index,
        "name": name or f"Level {index}",
        "cumulative_points_required": points,
        "daily_points_for_privileges": privileges,
    }


class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.TREND_THRESHOLD == 0.15
        assert s.WEEKLY_TREND_POLICY == "legacy"
        assert s.DAILY_TREND_POLICY == "daily"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("TREND_THRESHOLD", "0.2")
        monkeypatch.setenv("WEEKLY_TREND_POLICY", "weekly")
        s = Settings()
        assert s.TREND_THRESHOLD == 0.2
        assert s.WEEKLY_TREND_POLICY == "weekly"


class TestDefaultTable:
    def test_shape(self):
        assert len(DEFAULT_LEVEL_TABLE) == 11
        assert DEFAULT_LEVEL_TABLE[0].name == "Orientation"
        assert DEFAULT_LEVEL_TABLE[0].cumulative_points_required == 120
        assert DEFAULT_LEVEL_TABLE[10].is_unbounded
        assert DEFAULT_LEVEL_TABLE.terminal_index == 10

    def test_privilege_thresholds(self):
        assert [lvl.daily_points_for_privileges for lvl in DEFAULT_LEVEL_TABLE] == [
            10, 20, 20, 30, 40, 50, 60, 70, 80, 90, 100,
        ]


class TestLevelTableValidation:
    def test_valid_rows(self):
        table = LevelTable.from_rows([_row(0, 100), _row(1, 200), _row(2, None)])
        assert len(table) == 3
        assert [lvl.index for lvl in table] == [0, 1, 2]

    def test_all_bounded_allowed(self):
        table = LevelTable.from_rows([_row(0, 120), _row(1, 840)])
        assert table.terminal_index == 1
        assert not any(level.is_unbounded for level in table)

    def test_empty(self):
        with pytest.raises(LevelTableError):
            LevelTable(())

    def test_gap_in_indices(self):
        with pytest.raises(LevelTableError) as exc:
            LevelTable.from_rows([_row(0, 100), _row(2, None)])
        assert exc.value.details["position"] == 1

    def test_decreasing_points(self):
        with pytest.raises(LevelTableError):
            LevelTable.from_rows([_row(0, 500), _row(1, 100), _row(2, None)])

    def test_unbounded_not_last(self):
        with pytest.raises(LevelTableError):
            LevelTable.from_rows([_row(0, None), _row(1, 100)])

    def test_two_unbounded(self):
        with pytest.raises(LevelTableError):
            LevelTable.from_rows([_row(0, 100), _row(1, None), _row(2, None)])

    def test_row_validation_error_wrapped(self):
        with pytest.raises(LevelTableError) as exc:
            LevelTable.from_rows([_row(0, -5)])
        assert exc.value.details["errors"]

    def test_definition_is_frozen(self):
        level = LevelDefinition(index=0, name="x", cumulative_points_required=1,
                                daily_points_for_privileges=1)
        with pytest.raises(ValidationError):
            level.name = "y"


class TestLoadLevelTable:
    def test_default_when_unconfigured(self, monkeypatch):
        monkeypatch.setattr(settings, "LEVEL_TABLE_FILE", None)
        assert load_level_table() is DEFAULT_LEVEL_TABLE

    def test_from_file(self, tmp_path):
        path = tmp_path / "levels.json"
        path.write_text(json.dumps([_row(0, 50, name="Intake"), _row(1, None)]))
        table = load_level_table(str(path))
        assert isinstance(table, LevelTable)
        assert table[0].name == "Intake"
        assert table[1].is_unbounded

    def test_from_settings(self, tmp_path, monkeypatch):
        path = tmp_path / "levels.json"
        path.write_text(json.dumps([_row(0, 75), _row(1, None)]))
        monkeypatch.setattr(settings, "LEVEL_TABLE_FILE", str(path))
        assert load_level_table()[0].cumulative_points_required == 75

    def test_missing_file(self, tmp_path):
        with pytest.raises(LevelTableError):
            load_level_table(str(tmp_path / "nope.json"))

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "levels.json"
        path.write_text(json.dumps({"levels": []}))
        with pytest.raises(LevelTableError):
            load_level_table(str(path))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "levels.json"
        path.write_text("{not json")
        with pytest.raises(LevelTableError):
            load_level_table(str(path))


class TestConfigureLogging:
    def test_installs_root_handler_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
        configure_logging("debug")
        assert calls["level"] == logging.DEBUG
        assert "%(name)s" in calls["format"]

    def test_defaults_to_settings(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
        monkeypatch.setattr(settings, "LOG_LEVEL", "WARNING")
        configure_logging()
        assert calls["level"] == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
        configure_logging("chatty")
        assert calls["level"] == logging.INFO
