"""
Youth scoring service — composes a persistence adapter with the pure engine.

The store is always passed in; nothing here holds a global client or
cache. Only accepted level transitions are written back.

Public API
----------
weekly_averages_for_range(store, youth_id, start, end)    -> DomainAverages
daily_averages_for_range(store, youth_id, start, end)     -> DomainAverages
combined_averages_for_range(store, youth_id, start, end)  -> DomainAverages
monthly_average(store, youth_id, year, month)             -> DomainAverages
duration_of_stay_average(store, youth_id, admission)      -> DomainAverages
weekly_eval_stats(store, youth_id)                        -> EvalStats | None
school_stats(store, youth_id)                             -> SchoolScoreStats | None
level_up_youth / demote_youth / record_points_for_youth   -> state | rejection
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from ladder.core.config import load_level_table
from ladder.ports import LevelStateStore, RatingsStore
from ladder.schemas.levels import LevelRejection, LevelTable, YouthLevelState
from ladder.services import level_engine
from ladder.services.aggregator import (
    DomainAverages,
    aggregate_combined,
    aggregate_domains,
    month_bounds,
    stay_bounds,
)
from ladder.services.stats import EvalStats, SchoolScoreStats, eval_stats, school_score_stats
from ladder.services.weekly_dedupe import dedupe_weekly

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Averages
# ---------------------------------------------------------------------------

def weekly_averages_for_range(
    store: RatingsStore, youth_id: str, start: date, end: date,
) -> DomainAverages:
    return aggregate_domains(dedupe_weekly(store.weekly_evals(youth_id, start, end)))


def daily_averages_for_range(
    store: RatingsStore, youth_id: str, start: date, end: date,
) -> DomainAverages:
    return aggregate_domains(store.daily_shifts(youth_id, start, end))


def combined_averages_for_range(
    store: RatingsStore, youth_id: str, start: date, end: date,
) -> DomainAverages:
    weekly = dedupe_weekly(store.weekly_evals(youth_id, start, end))
    daily = store.daily_shifts(youth_id, start, end)
    return aggregate_combined(weekly, daily)


def monthly_average(
    store: RatingsStore, youth_id: str, year: int, month: int,
) -> DomainAverages:
    start, end = month_bounds(year, month)
    return combined_averages_for_range(store, youth_id, start, end)


def duration_of_stay_average(
    store: RatingsStore,
    youth_id: str,
    admission_date: date,
    today: Optional[date] = None,
) -> DomainAverages:
    start, end = stay_bounds(admission_date, today)
    return combined_averages_for_range(store, youth_id, start, end)


# ---------------------------------------------------------------------------
# Summary stats
# ---------------------------------------------------------------------------

def weekly_eval_stats(store: RatingsStore, youth_id: str) -> Optional[EvalStats]:
    return eval_stats(youth_id, store.weekly_evals(youth_id))


def school_stats(store: RatingsStore, youth_id: str) -> Optional[SchoolScoreStats]:
    return school_score_stats(youth_id, store.school_scores(youth_id))


# ---------------------------------------------------------------------------
# Level transitions
# ---------------------------------------------------------------------------

def _apply(
    store: LevelStateStore,
    youth_id: str,
    transition: Callable[[YouthLevelState], YouthLevelState | LevelRejection],
) -> YouthLevelState | LevelRejection:
    state = store.get_level_state(youth_id) or YouthLevelState()
    result = transition(state)
    if isinstance(result, LevelRejection):
        return result
    store.save_level_state(youth_id, result)
    logger.info(
        "Youth %s level state saved: level %d, %d points",
        youth_id, result.level_index, result.points_in_current_level,
    )
    return result


def level_up_youth(
    store: LevelStateStore, youth_id: str, table: Optional[LevelTable] = None,
) -> YouthLevelState | LevelRejection:
    ladder_table = table or load_level_table()
    return _apply(store, youth_id, lambda s: level_engine.apply_level_up(s, ladder_table))


def demote_youth(
    store: LevelStateStore, youth_id: str, table: Optional[LevelTable] = None,
) -> YouthLevelState | LevelRejection:
    ladder_table = table or load_level_table()
    return _apply(store, youth_id, lambda s: level_engine.apply_level_demotion(s, ladder_table))


def record_points_for_youth(
    store: LevelStateStore,
    youth_id: str,
    daily_points: int,
    table: Optional[LevelTable] = None,
) -> YouthLevelState | LevelRejection:
    ladder_table = table or load_level_table()
    return _apply(
        store, youth_id,
        lambda s: level_engine.record_daily_points(s, daily_points, ladder_table),
    )
