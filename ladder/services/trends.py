"""
Trend classification — is a youth improving, declining or stable?

The newest-first history is split into two consecutive windows of equal
size: the `w` most recent values and the `w` values before them.

    diff = mean(recent) - mean(previous)
    diff >  threshold -> improving
    diff < -threshold -> declining
    otherwise         -> stable

Window size comes from a policy `(n) -> w` chosen by the caller. Three
presets exist because three screens historically sized windows
differently; none of them is canonical yet:

    weekly_policy : min(5, n // 2)
    daily_policy  : always 7
    legacy_policy : max(2, min(n // 3, 7))

With fewer than 2 * w values (or w < 1) the result is "stable" and both
averages equal the overall average (None when there is no data at all).
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence, Union

from ladder.core.config import settings
from ladder.core.errors import UnknownWindowPolicyError
from ladder.schemas.ratings import (
    DailyShiftRecord,
    SchoolScoreRecord,
    WeeklyEvalRecord,
)
from ladder.services.scoring import normalize, normalize_school_score, round_half_up

logger = logging.getLogger(__name__)

WindowPolicy = Callable[[int], int]
ValueGetter = Union[str, Callable[[Any], float]]


class Trend(str, enum.Enum):
    improving = "improving"
    declining = "declining"
    stable = "stable"


@dataclass(frozen=True)
class TrendResult:
    trend: Trend
    recent_average: Optional[float]
    previous_average: Optional[float]
    window_size: int
    sample_size: int


# ---------------------------------------------------------------------------
# Window-size policies
# ---------------------------------------------------------------------------

def weekly_policy(n: int) -> int:
    return min(5, n // 2)


def legacy_policy(n: int) -> int:
    return max(2, min(n // 3, 7))


def fixed_window(size: int) -> WindowPolicy:
    def policy(n: int) -> int:
        return size
    policy.__name__ = f"fixed_window_{size}"
    return policy


daily_policy = fixed_window(7)

POLICIES: dict[str, WindowPolicy] = {
    "weekly": weekly_policy,
    "daily": daily_policy,
    "legacy": legacy_policy,
}


def resolve_policy(policy: Union[str, WindowPolicy, None]) -> WindowPolicy:
    """Accept a preset name, a callable, or None (configured weekly preset)."""
    if policy is None:
        policy = settings.WEEKLY_TREND_POLICY
    if callable(policy):
        return policy
    try:
        return POLICIES[policy]
    except KeyError:
        raise UnknownWindowPolicyError(policy, tuple(POLICIES)) from None


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

def _extract(record: Any, value: ValueGetter) -> float:
    if callable(value):
        return float(value(record))
    if isinstance(record, (int, float)):
        return float(record)
    if isinstance(record, (WeeklyEvalRecord, DailyShiftRecord)):
        record = normalize(record)
    elif isinstance(record, SchoolScoreRecord):
        record = normalize_school_score(record)
    return float(getattr(record, value))


def _avg(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def classify_trend(
    records_newest_first: Iterable[Any],
    policy: Union[str, WindowPolicy, None] = None,
    threshold: Optional[float] = None,
    value: ValueGetter = "overall",
    places: int = 2,
) -> TrendResult:
    """
    Classify the trend of a newest-first history.

    `value` names the field to read ("overall", "peer", "score", ...) or is
    a callable; plain numbers are used as-is. Stored rating records are
    normalized first. Averages are rounded to `places`; the comparison
    against `threshold` uses unrounded values.
    """
    values = [_extract(r, value) for r in records_newest_first]
    window_policy = resolve_policy(policy)
    limit = settings.TREND_THRESHOLD if threshold is None else threshold

    n = len(values)
    window = window_policy(n)

    if window < 1 or n < window * 2:
        overall = round_half_up(_avg(values), places) if values else None
        logger.debug(
            "Insufficient data for trend (%d values, window %d needs %d)",
            n, window, max(window, 1) * 2,
        )
        return TrendResult(
            trend=Trend.stable,
            recent_average=overall,
            previous_average=overall,
            window_size=window,
            sample_size=n,
        )

    recent = _avg(values[:window])
    previous = _avg(values[window:window * 2])
    diff = recent - previous
    if diff > limit:
        trend = Trend.improving
    elif diff < -limit:
        trend = Trend.declining
    else:
        trend = Trend.stable

    logger.debug(
        "Trend over window %d: recent=%.2f previous=%.2f diff=%.2f -> %s",
        window, recent, previous, diff, trend.value,
    )
    return TrendResult(
        trend=trend,
        recent_average=round_half_up(recent, places),
        previous_average=round_half_up(previous, places),
        window_size=window,
        sample_size=n,
    )


def classify_daily_trend(
    records_newest_first: Iterable[Any],
    threshold: Optional[float] = None,
    value: ValueGetter = "overall",
) -> TrendResult:
    """classify_trend with the configured daily-shift window preset."""
    return classify_trend(
        records_newest_first,
        policy=settings.DAILY_TREND_POLICY,
        threshold=threshold,
        value=value,
    )
