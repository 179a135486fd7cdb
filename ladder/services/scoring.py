"""
Score normalization — the 0.0–4.0 display scale vs. the 0–40 storage scale.

Domain scores are shown as decimals (one place) and stored as integer
tenths so the store never accumulates floating-point drift. Conversion
happens here and nowhere else.

  clamp_score(v)         -> float in [0.0, 4.0]; NaN/inf/negative -> 0.0
  to_storage(v)          -> int tenths, 0–40
  score_to_decimal(sv)   -> float, driven by the ScoreValue tag
  normalize(record)      -> NormalizedWeeklyEval | NormalizedDailyShift
  normalize_school_score(record) -> NormalizedSchoolScore

Rounding is half-away-from-zero everywhere (Decimal ROUND_HALF_UP), not
Python's banker's rounding.
"""
from __future__ import annotations

import logging
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

from ladder.schemas.ratings import (
    DOMAINS,
    DailyShiftRecord,
    DecimalScore,
    NormalizedDailyShift,
    NormalizedRating,
    NormalizedSchoolScore,
    NormalizedWeeklyEval,
    PercentScore,
    ScaledTenths,
    SchoolScoreRecord,
    ScoreValue,
    WeeklyEvalRecord,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 4.0

# Divisor that brings each tagged value onto the 0–4 scale.
_DIVISORS = {
    "decimal": 1,
    "scaled": 10,
    "percent": 25,
}

RatingInput = Union[WeeklyEvalRecord, DailyShiftRecord, NormalizedRating]


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp_score(value) -> float:
    """Clamp into [0.0, 4.0]. Non-numeric and non-finite input becomes 0.0."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        logger.warning("Non-numeric score %r clamped to %s", value, MIN_SCORE)
        return MIN_SCORE
    if not math.isfinite(v):
        logger.warning("Non-finite score %r clamped to %s", value, MIN_SCORE)
        return MIN_SCORE
    if v < MIN_SCORE or v > MAX_SCORE:
        clamped = min(max(v, MIN_SCORE), MAX_SCORE)
        logger.warning("Out-of-range score %s clamped to %s", v, clamped)
        return clamped
    return v


def to_storage(score) -> int:
    """0.0–4.0 decimal -> integer tenths (0–40)."""
    return int(round_half_up(clamp_score(score) * 10, 0))


def to_stored_value(score) -> ScaledTenths:
    return ScaledTenths(value=to_storage(score))


def score_to_decimal(score: ScoreValue) -> float:
    """Tagged storage value -> 0.0–4.0 decimal rounded to one place."""
    divisor = _DIVISORS[score.kind]
    raw = score.value
    if isinstance(raw, (int, float)) and math.isfinite(raw):
        raw = raw / divisor
    return round_half_up(clamp_score(raw), 1)


# ---------------------------------------------------------------------------
# Legacy rows
# ---------------------------------------------------------------------------

def legacy_score_from_storage(raw: float) -> ScoreValue:
    """
    Tag an untagged legacy domain score by magnitude.

    Older rows mixed decimals (0–4) with tenths (5–40) in the same column,
    and the only way to tell them apart was `raw >= 5`. Use this solely
    when migrating such rows; a genuine stored value under 5 tenths
    (0.0–0.4) is indistinguishable from a decimal and will be misread.
    """
    if isinstance(raw, (int, float)) and math.isfinite(raw) and raw >= 5:
        return ScaledTenths(value=raw)
    return DecimalScore(value=raw)


def legacy_school_score_from_storage(raw: float) -> ScoreValue:
    """Same as legacy_score_from_storage, plus the old 0–100 school scale (> 40)."""
    if isinstance(raw, (int, float)) and math.isfinite(raw):
        if raw > 40:
            return PercentScore(value=raw)
        if raw > 4:
            return ScaledTenths(value=raw)
    return DecimalScore(value=raw)


# ---------------------------------------------------------------------------
# Record normalization
# ---------------------------------------------------------------------------

def overall_of(peer: float, adult: float, investment: float, authority: float) -> float:
    return round_half_up((peer + adult + investment + authority) / 4, 2)


def _domain_values(record: RatingInput) -> dict[str, float]:
    if isinstance(record, NormalizedRating):
        return {d: round_half_up(clamp_score(getattr(record, d)), 1) for d in DOMAINS}
    return {d: score_to_decimal(getattr(record, d)) for d in DOMAINS}


def normalize(record: RatingInput) -> NormalizedRating:
    """
    Convert a stored weekly/daily record to its 0–4 decimal form.

    Already-normalized records are re-clamped and returned with identical
    values, so normalize(normalize(r)) == normalize(r).
    """
    if not isinstance(record, (NormalizedRating, WeeklyEvalRecord, DailyShiftRecord)):
        raise TypeError(f"Cannot normalize {type(record).__name__}")

    values = _domain_values(record)
    values["overall"] = overall_of(**values)

    if isinstance(record, NormalizedRating):
        return record.model_copy(update=values)

    common = {
        "id": record.id,
        "youth_id": record.youth_id,
        "created_at": record.created_at,
        "updated_at": record.updated_at,
        **values,
    }
    if isinstance(record, WeeklyEvalRecord):
        return NormalizedWeeklyEval(
            week_date=record.week_date,
            source=record.source,
            **common,
        )
    return NormalizedDailyShift(
        date=record.date,
        shift=record.shift,
        staff=record.staff,
        **common,
    )


def normalize_school_score(
    record: Union[SchoolScoreRecord, NormalizedSchoolScore],
) -> NormalizedSchoolScore:
    if isinstance(record, NormalizedSchoolScore):
        return record.model_copy(update={"score": round_half_up(clamp_score(record.score), 1)})
    return NormalizedSchoolScore(
        id=record.id,
        youth_id=record.youth_id,
        date=record.date,
        weekday=record.weekday,
        score=score_to_decimal(record.score),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )
