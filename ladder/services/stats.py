"""
Per-youth summary statistics built on the aggregator and trend classifier.

  eval_stats(youth_id, weekly_records)        -> EvalStats | None
  school_score_stats(youth_id, school_scores) -> SchoolScoreStats | None
  recent_school_average(school_scores, today) -> float | None
  rating_band(value)                          -> RatingBand | None

Summary figures are rounded to one decimal for display. None means the
youth has no records at all.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Union

from ladder.schemas.ratings import (
    NormalizedSchoolScore,
    NormalizedWeeklyEval,
    SchoolScoreRecord,
    WeeklyEvalRecord,
)
from ladder.services.aggregator import mean
from ladder.services.scoring import normalize, normalize_school_score, round_half_up
from ladder.services.trends import Trend, WindowPolicy, classify_trend
from ladder.services.weekly_dedupe import dedupe_weekly

logger = logging.getLogger(__name__)

# Fewer records than this fall back to an endpoint comparison for school scores.
MIN_WINDOWED_SCORES = 4
ENDPOINT_THRESHOLD = 0.1


class RatingBand(str, enum.Enum):
    excellent = "excellent"   # >= 3.5
    good = "good"             # >= 3.0
    fair = "fair"             # >= 2.0
    poor = "poor"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EvalStats:
    youth_id: str
    total_evals: int
    overall_average: float
    trend: Trend
    recent_average: float
    previous_average: float


@dataclass(frozen=True)
class SchoolScoreStats:
    youth_id: str
    total_scores: int
    average: float
    highest: float
    lowest: float
    trend: Trend
    recent_average: float
    previous_average: float


# ---------------------------------------------------------------------------
# Weekly evals
# ---------------------------------------------------------------------------

def eval_stats(
    youth_id: str,
    weekly_records: Iterable[Union[WeeklyEvalRecord, NormalizedWeeklyEval]],
    policy: Union[str, WindowPolicy, None] = None,
    threshold: Optional[float] = None,
) -> Optional[EvalStats]:
    """Deduplicated weekly evals, newest week first, summarized for display."""
    evals = [normalize(r) for r in dedupe_weekly(weekly_records)]
    if not evals:
        return None

    evals.sort(key=lambda e: e.week_date, reverse=True)
    overalls = [e.overall for e in evals]
    result = classify_trend(overalls, policy=policy, threshold=threshold, places=1)

    return EvalStats(
        youth_id=youth_id,
        total_evals=len(evals),
        overall_average=mean(overalls, places=1),
        trend=result.trend,
        recent_average=result.recent_average,
        previous_average=result.previous_average,
    )


# ---------------------------------------------------------------------------
# School scores
# ---------------------------------------------------------------------------

def school_score_stats(
    youth_id: str,
    scores: Iterable[Union[SchoolScoreRecord, NormalizedSchoolScore]],
    policy: Union[str, WindowPolicy, None] = None,
    threshold: Optional[float] = None,
) -> Optional[SchoolScoreStats]:
    """
    Average, range and trend of a youth's school scores.

    Four or more scores use the windowed trend. Two or three compare the
    most recent score against the oldest (±0.1). A single score is stable.
    """
    rows = sorted(
        (normalize_school_score(s) for s in scores),
        key=lambda s: s.date,
        reverse=True,
    )
    if not rows:
        return None

    values = [s.score for s in rows]
    average = sum(values) / len(values)

    if len(values) >= MIN_WINDOWED_SCORES:
        result = classify_trend(values, policy=policy, threshold=threshold, places=1)
        trend = result.trend
        recent_average, previous_average = result.recent_average, result.previous_average
    elif len(values) >= 2:
        most_recent, oldest = values[0], values[-1]
        diff = most_recent - oldest
        if diff > ENDPOINT_THRESHOLD:
            trend = Trend.improving
        elif diff < -ENDPOINT_THRESHOLD:
            trend = Trend.declining
        else:
            trend = Trend.stable
        logger.debug(
            "Limited school data for %s: most recent=%s oldest=%s -> %s",
            youth_id, most_recent, oldest, trend.value,
        )
        recent_average, previous_average = most_recent, oldest
    else:
        trend = Trend.stable
        recent_average = previous_average = average

    return SchoolScoreStats(
        youth_id=youth_id,
        total_scores=len(values),
        average=round_half_up(average, 1),
        highest=max(values),
        lowest=min(values),
        trend=trend,
        recent_average=round_half_up(recent_average, 1),
        previous_average=round_half_up(previous_average, 1),
    )


def recent_school_average(
    scores: Iterable[Union[SchoolScoreRecord, NormalizedSchoolScore]],
    today: Optional[date] = None,
    days: int = 30,
) -> Optional[float]:
    """Mean school score over the last `days` days (inclusive of the cutoff)."""
    end = today or datetime.now(tz=timezone.utc).date()
    cutoff = end - timedelta(days=days)
    recent = [s.score for s in map(normalize_school_score, scores) if s.date >= cutoff]
    return mean(recent)


# ---------------------------------------------------------------------------
# Display bands
# ---------------------------------------------------------------------------

def rating_band(value: Optional[float]) -> Optional[RatingBand]:
    if value is None:
        return None
    if value >= 3.5:
        return RatingBand.excellent
    if value >= 3.0:
        return RatingBand.good
    if value >= 2.0:
        return RatingBand.fair
    return RatingBand.poor
