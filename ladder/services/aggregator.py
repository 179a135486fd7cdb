"""
Domain Rating Aggregator — averages over caller-supplied record sets.

The caller (persistence adapter) has already chosen the youth and the date
range; everything passed in is averaged. Weekly and daily records are
pooled as equal samples: a combined average is never an average of two
per-type averages.

Empty input yields None for every average, never 0.0, so "no data" stays
distinguishable from "all zeros".
"""
from __future__ import annotations

import calendar
from dataclasses import asdict, dataclass
from datetime import date, datetime, timezone
from typing import Iterable, Optional, Sequence, Union

from ladder.core.errors import UnknownDomainError
from ladder.schemas.ratings import (
    DOMAINS,
    DailyShiftRecord,
    NormalizedRating,
    WeeklyEvalRecord,
)
from ladder.services.scoring import normalize, round_half_up

AVERAGEABLE: tuple[str, ...] = DOMAINS + ("overall",)

RatingLike = Union[WeeklyEvalRecord, DailyShiftRecord, NormalizedRating]


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DomainAverages:
    peer: Optional[float]
    adult: Optional[float]
    investment: Optional[float]
    authority: Optional[float]
    overall: Optional[float]
    total_entries: int

    def as_dict(self) -> dict:
        return asdict(self)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def mean(values: Sequence[float], places: int = 2) -> Optional[float]:
    if not values:
        return None
    return round_half_up(sum(values) / len(values), places)


def _normalized(records: Iterable[RatingLike]) -> list[NormalizedRating]:
    return [normalize(r) for r in records]


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def average_over_range(records: Iterable[RatingLike], domain: str) -> Optional[float]:
    """Mean of one domain (or "overall") across all records; None when empty."""
    if domain not in AVERAGEABLE:
        raise UnknownDomainError(domain, AVERAGEABLE)
    return mean([getattr(r, domain) for r in _normalized(records)])


def aggregate_domains(records: Iterable[RatingLike]) -> DomainAverages:
    rows = _normalized(records)
    return DomainAverages(
        peer=mean([r.peer for r in rows]),
        adult=mean([r.adult for r in rows]),
        investment=mean([r.investment for r in rows]),
        authority=mean([r.authority for r in rows]),
        overall=mean([r.overall for r in rows]),
        total_entries=len(rows),
    )


def aggregate_combined(
    weekly: Iterable[RatingLike],
    daily: Iterable[RatingLike],
) -> DomainAverages:
    """Weekly + daily records pooled, each record one equally weighted sample."""
    return aggregate_domains([*weekly, *daily])


# ---------------------------------------------------------------------------
# Range helpers (what to ask the store for)
# ---------------------------------------------------------------------------

def month_bounds(year: int, month: int) -> tuple[date, date]:
    """First and last calendar day of the month, inclusive."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def stay_bounds(admission_date: date, today: Optional[date] = None) -> tuple[date, date]:
    """Admission date through today (UTC), inclusive."""
    end = today or datetime.now(tz=timezone.utc).date()
    return admission_date, end
