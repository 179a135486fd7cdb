"""
Domain rating schemas.

Stored records (what a persistence adapter hands over):
  WeeklyEvalRecord   — one four-domain evaluation per youth per week
  DailyShiftRecord   — one four-domain observation per youth per shift
  SchoolScoreRecord  — one 0–4 school score per youth per school day

Normalized records (what the engine hands back):
  NormalizedWeeklyEval / NormalizedDailyShift / NormalizedSchoolScore

Score values are tagged at the storage boundary instead of being guessed
from their magnitude:
  {"kind": "decimal", "value": 3.2}   already on the 0.0–4.0 scale
  {"kind": "scaled",  "value": 32}    tenths, 0–40 (how scores are stored)
  {"kind": "percent", "value": 80}    legacy 0–100 school scores

A bare number in a stored-record field is read as scaled tenths, because
that is what the store persists. Decimal input must say so explicitly.
"""
from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

DOMAINS: tuple[str, ...] = ("peer", "adult", "investment", "authority")

ShiftType = Literal["day", "evening", "night"]
EvalSource = Literal["manual", "uploaded"]


# ---------------------------------------------------------------------------
# Tagged score values
# ---------------------------------------------------------------------------

class DecimalScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["decimal"] = "decimal"
    value: float


class ScaledTenths(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["scaled"] = "scaled"
    value: float = Field(description="Stored tenths, 0–40. Float so corrupt rows still parse.")


class PercentScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["percent"] = "percent"
    value: float = Field(description="Legacy 0–100 school score; 100 == 4.0.")


ScoreValue = Annotated[
    Union[DecimalScore, ScaledTenths, PercentScore],
    Field(discriminator="kind"),
]


def _coerce_stored_score(v):
    if v is None:
        return {"kind": "scaled", "value": 0}
    if isinstance(v, bool):
        return {"kind": "scaled", "value": int(v)}
    if isinstance(v, (int, float, Decimal)):
        return {"kind": "scaled", "value": float(v)}
    return v


def _coerce_timestamp(v):
    # Stored timestamps are UTC strings ending in "Z"; naive datetimes are read as UTC.
    if isinstance(v, dt.datetime):
        if v.tzinfo is None:
            v = v.replace(tzinfo=dt.timezone.utc)
        v = v.astimezone(dt.timezone.utc).replace(tzinfo=None)
        timespec = "milliseconds" if v.microsecond else "seconds"
        return v.isoformat(timespec=timespec) + "Z"
    return v


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------

class _DomainRatingRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[str] = None
    youth_id: str
    peer: ScoreValue
    adult: ScoreValue
    investment: ScoreValue
    authority: ScoreValue
    created_at: Optional[str] = None
    updated_at: Optional[str] = Field(
        default=None,
        description="ISO-8601 timestamp; compared lexicographically for last-write-wins.",
    )

    @field_validator(*DOMAINS, mode="before")
    @classmethod
    def _stored_scores(cls, v):
        return _coerce_stored_score(v)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _timestamps(cls, v):
        return _coerce_timestamp(v)


class WeeklyEvalRecord(_DomainRatingRecord):
    week_date: dt.date
    source: EvalSource = "manual"


class DailyShiftRecord(_DomainRatingRecord):
    date: dt.date
    shift: ShiftType
    staff: Optional[str] = None


class SchoolScoreRecord(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[str] = None
    youth_id: str
    date: dt.date
    weekday: int = Field(ge=1, le=5, description="1=Mon … 5=Fri")
    score: ScoreValue
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @field_validator("score", mode="before")
    @classmethod
    def _stored_score(cls, v):
        return _coerce_stored_score(v)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _timestamps(cls, v):
        return _coerce_timestamp(v)


# ---------------------------------------------------------------------------
# Normalized records (0.0–4.0 decimals)
# ---------------------------------------------------------------------------

class NormalizedRating(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    youth_id: str
    peer: float
    adult: float
    investment: float
    authority: float
    overall: float = Field(description="Mean of the four domains, 2 decimals.")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class NormalizedWeeklyEval(NormalizedRating):
    week_date: dt.date
    source: EvalSource = "manual"


class NormalizedDailyShift(NormalizedRating):
    date: dt.date
    shift: ShiftType
    staff: Optional[str] = None


class NormalizedSchoolScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    youth_id: str
    date: dt.date
    weekday: int
    score: float
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
