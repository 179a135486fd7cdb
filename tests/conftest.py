"""
Shared pytest fixtures.

Uses an in-memory store implementing the persistence ports so no database
is required for tests.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

import pytest

from ladder.schemas.levels import LevelDefinition, LevelTable, YouthLevelState
from ladder.schemas.ratings import DailyShiftRecord, SchoolScoreRecord, WeeklyEvalRecord


def _in_range(day: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


class InMemoryStore:
    """Implements RatingsStore and LevelStateStore over plain lists/dicts."""

    def __init__(self):
        self.weekly: list[WeeklyEvalRecord] = []
        self.daily: list[DailyShiftRecord] = []
        self.school: list[SchoolScoreRecord] = []
        self.levels: dict[str, YouthLevelState] = {}
        self.saves: list[tuple[str, YouthLevelState]] = []

    def weekly_evals(self, youth_id, start=None, end=None):
        return [r for r in self.weekly
                if r.youth_id == youth_id and _in_range(r.week_date, start, end)]

    def daily_shifts(self, youth_id, start=None, end=None):
        return [r for r in self.daily
                if r.youth_id == youth_id and _in_range(r.date, start, end)]

    def school_scores(self, youth_id, start=None, end=None):
        return [r for r in self.school
                if r.youth_id == youth_id and _in_range(r.date, start, end)]

    def get_level_state(self, youth_id):
        return self.levels.get(youth_id)

    def save_level_state(self, youth_id, state):
        self.levels[youth_id] = state
        self.saves.append((youth_id, state))


@pytest.fixture()
def store():
    return InMemoryStore()


@pytest.fixture()
def two_level_table():
    return LevelTable((
        LevelDefinition(index=0, name="Orientation", cumulative_points_required=120,
                        daily_points_for_privileges=10),
        LevelDefinition(index=1, name="Level 1", cumulative_points_required=840,
                        daily_points_for_privileges=20),
    ))
