"""
Tests for trend classification and window-size policies.

Scenario: ten daily shifts rising linearly from 2.0 (oldest) to 4.0
(newest) with a window of 5 -> improving.
"""
from __future__ import annotations

from datetime import date

import pytest

from ladder.core.config import settings
from ladder.core.errors import UnknownWindowPolicyError
from ladder.services.trends import (
    POLICIES,
    Trend,
    classify_daily_trend,
    classify_trend,
    daily_policy,
    fixed_window,
    legacy_policy,
    resolve_policy,
    weekly_policy,
)
from tests.factories import days_back, shift, uniform_shift

_RISING_TENTHS = [20, 22, 24, 27, 29, 31, 33, 36, 38, 40]  # oldest -> newest


def _rising_newest_first():
    days = days_back(date(2024, 3, 10), len(_RISING_TENTHS))
    return [uniform_shift(d, t) for d, t in zip(days, reversed(_RISING_TENTHS))]


class TestPolicies:
    @pytest.mark.parametrize("n,expected", [(0, 0), (1, 0), (3, 1), (10, 5), (40, 5)])
    def test_weekly(self, n, expected):
        assert weekly_policy(n) == expected

    @pytest.mark.parametrize("n,expected", [(0, 2), (3, 2), (12, 4), (21, 7), (100, 7)])
    def test_legacy(self, n, expected):
        assert legacy_policy(n) == expected

    @pytest.mark.parametrize("n", [0, 5, 14, 200])
    def test_daily_is_fixed_seven(self, n):
        assert daily_policy(n) == 7

    def test_fixed_window(self):
        assert fixed_window(3)(99) == 3

    def test_named_presets(self):
        assert set(POLICIES) == {"weekly", "daily", "legacy"}
        assert resolve_policy("weekly") is weekly_policy
        assert resolve_policy("legacy") is legacy_policy

    def test_callable_passthrough(self):
        policy = fixed_window(4)
        assert resolve_policy(policy) is policy

    def test_default_comes_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "WEEKLY_TREND_POLICY", "weekly")
        assert resolve_policy(None) is weekly_policy

    def test_unknown_name(self):
        with pytest.raises(UnknownWindowPolicyError) as exc:
            resolve_policy("monthly")
        assert exc.value.code == "UNKNOWN_WINDOW_POLICY"


class TestClassifyTrend:
    def test_scenario_rising_shifts_improving(self):
        result = classify_trend(_rising_newest_first(), policy=fixed_window(5), threshold=0.15)
        assert result.trend is Trend.improving
        assert result.window_size == 5
        assert result.recent_average - result.previous_average >= 0.15
        assert result.recent_average == 3.56
        assert result.previous_average == 2.44

    def test_weekly_policy_gives_same_window_for_ten(self):
        result = classify_trend(_rising_newest_first(), policy="weekly", threshold=0.15)
        assert result.window_size == 5
        assert result.trend is Trend.improving

    def test_declining(self):
        values = [1.0, 1.0, 1.0, 3.0, 3.0, 3.0]
        result = classify_trend(values, policy=fixed_window(3), threshold=0.15)
        assert result.trend is Trend.declining
        assert (result.recent_average, result.previous_average) == (1.0, 3.0)

    def test_within_threshold_is_stable(self):
        values = [3.1, 3.1, 3.0, 3.0]
        result = classify_trend(values, policy=fixed_window(2), threshold=0.15)
        assert result.trend is Trend.stable

    def test_diff_equal_to_threshold_is_stable(self):
        values = [2.5, 2.5, 2.0, 2.0]
        result = classify_trend(values, policy=fixed_window(2), threshold=0.5)
        assert result.trend is Trend.stable

    def test_only_two_windows_considered(self):
        values = [3.0, 3.0, 2.0, 2.0, 0.0, 0.0, 0.0]
        result = classify_trend(values, policy=fixed_window(2), threshold=0.15)
        assert result.trend is Trend.improving
        assert result.previous_average == 2.0

    def test_threshold_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "TREND_THRESHOLD", 1.0)
        values = [2.5, 2.5, 2.0, 2.0]
        assert classify_trend(values, policy=fixed_window(2)).trend is Trend.stable
        monkeypatch.setattr(settings, "TREND_THRESHOLD", 0.1)
        assert classify_trend(values, policy=fixed_window(2)).trend is Trend.improving

    def test_domain_value(self):
        records = [
            shift(peer=40, adult=10, day="2024-03-04"),
            shift(peer=40, adult=10, day="2024-03-03"),
            shift(peer=10, adult=40, day="2024-03-02"),
            shift(peer=10, adult=40, day="2024-03-01"),
        ]
        assert classify_trend(records, policy=fixed_window(2), value="peer").trend is Trend.improving
        assert classify_trend(records, policy=fixed_window(2), value="adult").trend is Trend.declining

    def test_callable_value(self):
        values = [{"v": 4.0}, {"v": 4.0}, {"v": 1.0}, {"v": 1.0}]
        result = classify_trend(values, policy=fixed_window(2), value=lambda r: r["v"])
        assert result.trend is Trend.improving


class TestSparseHistory:
    def test_empty(self):
        result = classify_trend([], policy="weekly")
        assert result.trend is Trend.stable
        assert result.recent_average is None
        assert result.previous_average is None
        assert result.sample_size == 0

    def test_single_record_weekly_window_zero(self):
        result = classify_trend([3.0], policy="weekly")
        assert result.trend is Trend.stable
        assert result.window_size == 0
        assert result.recent_average == result.previous_average == 3.0

    @pytest.mark.parametrize("n", range(1, 14))
    def test_fewer_than_two_windows_always_stable(self, n):
        values = [4.0] * (n // 2) + [0.0] * (n - n // 2)
        result = classify_trend(values, policy=daily_policy, threshold=0.15)
        assert result.trend is Trend.stable
        assert result.recent_average == result.previous_average

    def test_sparse_averages_equal_overall(self):
        result = classify_trend([4.0, 3.0, 2.0], policy=fixed_window(2))
        assert result.recent_average == result.previous_average == 3.0


class TestDailyTrend:
    def test_uses_configured_daily_window(self):
        values = [3.5] * 7 + [2.0] * 7
        result = classify_daily_trend(values)
        assert result.window_size == 7
        assert result.trend is Trend.improving

    def test_thirteen_values_insufficient(self):
        values = [3.5] * 6 + [2.0] * 7
        assert classify_daily_trend(values).trend is Trend.stable
