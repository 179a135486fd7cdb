"""Port definitions for the persistence adapter.

Responsibilities:
  - Define the record-supply and state-save contracts the engine relies on.
Must not:
  - Implement logic; interfaces only.

Adapters filter by youth and by inclusive date range before returning;
the engine does no further filtering. Transactions and retries are the
adapter's business.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ladder.schemas.levels import YouthLevelState
from ladder.schemas.ratings import DailyShiftRecord, SchoolScoreRecord, WeeklyEvalRecord


class RatingsStore(Protocol):
    def weekly_evals(
        self, youth_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> Sequence[WeeklyEvalRecord]:
        ...

    def daily_shifts(
        self, youth_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> Sequence[DailyShiftRecord]:
        ...

    def school_scores(
        self, youth_id: str, start: Optional[date] = None, end: Optional[date] = None
    ) -> Sequence[SchoolScoreRecord]:
        ...


class LevelStateStore(Protocol):
    def get_level_state(self, youth_id: str) -> Optional[YouthLevelState]:
        ...

    def save_level_state(self, youth_id: str, state: YouthLevelState) -> None:
        ...
