"""
Level Ladder Engine — pure decisions over a LevelTable and a YouthLevelState.

Operations
----------
  current_level(state)                      -> LevelDefinition
  next_level(state)                         -> LevelDefinition | None
  meets_privilege_requirement(state, pts)   -> bool
  can_level_up(state)                       -> bool
  apply_level_up(state)                     -> YouthLevelState | LevelRejection
  apply_level_demotion(state)               -> YouthLevelState | LevelRejection
  record_daily_points(state, pts)           -> YouthLevelState | LevelRejection
  level_progress(state)                     -> float (percent of current level)

Transitions
-----------
  level-up   : index + 1, points carry over (points - requirement)
  demotion   : index - 1, points reset to 0
  floor      : index 0 cannot be demoted
  ceiling    : the last level of the table cannot level up

A level_index outside the table is treated as index 0 so that stale or
corrupt youth rows still render. Nothing here raises for well-formed
input; refused transitions come back as LevelRejection values.

Every function accepts an optional `table`; DEFAULT_LEVEL_TABLE is used
when none is given. States are never mutated, a new one is returned.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from ladder.schemas.levels import (
    DEFAULT_LEVEL_TABLE,
    LevelDefinition,
    LevelRejection,
    LevelTable,
    YouthLevelState,
)
from ladder.services.scoring import round_half_up

logger = logging.getLogger(__name__)

TransitionResult = Union[YouthLevelState, LevelRejection]

# Upper bound accepted for a single day's behavior card.
MAX_DAILY_POINTS = 105


class RejectionReason:
    NOT_ELIGIBLE               = "not_eligible"
    AT_TERMINAL_LEVEL          = "at_terminal_level"
    AT_FLOOR                   = "at_floor"
    DAILY_POINTS_OUT_OF_RANGE  = "daily_points_out_of_range"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _table(table: Optional[LevelTable]) -> LevelTable:
    return table if table is not None else DEFAULT_LEVEL_TABLE


def _effective_index(state: YouthLevelState, table: LevelTable) -> int:
    if 0 <= state.level_index < len(table):
        return state.level_index
    logger.warning(
        "level_index %s outside table of %d levels; using level 0",
        state.level_index, len(table),
    )
    return 0


def _reject(state: YouthLevelState, reason: str, message: str) -> LevelRejection:
    logger.info("Level transition rejected (%s): %s", reason, message)
    return LevelRejection(reason=reason, message=message, state=state)


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def current_level(
    state: YouthLevelState,
    table: Optional[LevelTable] = None,
) -> LevelDefinition:
    table = _table(table)
    return table[_effective_index(state, table)]


def next_level(
    state: YouthLevelState,
    table: Optional[LevelTable] = None,
) -> Optional[LevelDefinition]:
    """The level above the current one, or None at the terminal level."""
    table = _table(table)
    index = _effective_index(state, table)
    if index >= table.terminal_index:
        return None
    return table[index + 1]


def meets_privilege_requirement(
    state: YouthLevelState,
    daily_points_earned_today: int,
    table: Optional[LevelTable] = None,
) -> bool:
    level = current_level(state, table)
    return daily_points_earned_today >= level.daily_points_for_privileges


def can_level_up(
    state: YouthLevelState,
    table: Optional[LevelTable] = None,
) -> bool:
    table = _table(table)
    index = _effective_index(state, table)
    if index == table.terminal_index:
        return False
    level = table[index]
    return state.points_in_current_level >= level.cumulative_points_required


def level_progress(
    state: YouthLevelState,
    table: Optional[LevelTable] = None,
) -> float:
    """Percent (0–100, 1 decimal) of the current level's requirement earned."""
    table = _table(table)
    index = _effective_index(state, table)
    level = table[index]
    if index == table.terminal_index or level.cumulative_points_required == 0:
        return 100.0
    pct = state.points_in_current_level / level.cumulative_points_required * 100
    return round_half_up(min(pct, 100.0), 1)


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def apply_level_up(
    state: YouthLevelState,
    table: Optional[LevelTable] = None,
) -> TransitionResult:
    """
    Advance one level, carrying excess points into the new level.

    {level 0, 150 pts} with a 120-point requirement -> {level 1, 30 pts}.
    """
    table = _table(table)
    index = _effective_index(state, table)
    level = table[index]

    if index == table.terminal_index:
        return _reject(
            state, RejectionReason.AT_TERMINAL_LEVEL,
            f"{level.name} is the top level; there is no level to advance to.",
        )
    if state.points_in_current_level < level.cumulative_points_required:
        return _reject(
            state, RejectionReason.NOT_ELIGIBLE,
            f"{state.points_in_current_level} of {level.cumulative_points_required} "
            f"points earned on {level.name}.",
        )

    new_state = YouthLevelState(
        level_index=index + 1,
        points_in_current_level=state.points_in_current_level - level.cumulative_points_required,
    )
    logger.debug(
        "Level up %s -> %s (carry-over %d)",
        level.name, table[index + 1].name, new_state.points_in_current_level,
    )
    return new_state


def apply_level_demotion(
    state: YouthLevelState,
    table: Optional[LevelTable] = None,
) -> TransitionResult:
    """Drop one level; points earned on the old level are forfeited."""
    table = _table(table)
    index = _effective_index(state, table)

    if index == 0:
        return _reject(
            state, RejectionReason.AT_FLOOR,
            f"{table[0].name} is the lowest level; cannot demote further.",
        )

    new_state = YouthLevelState(level_index=index - 1, points_in_current_level=0)
    logger.debug("Demotion %s -> %s", table[index].name, table[index - 1].name)
    return new_state


def record_daily_points(
    state: YouthLevelState,
    daily_points: int,
    table: Optional[LevelTable] = None,
) -> TransitionResult:
    """
    Add one day's behavior-card points to the points earned on this level.

    The level itself never changes here; advancing is an explicit
    apply_level_up so staff can review before promoting.
    """
    if not 0 <= daily_points <= MAX_DAILY_POINTS:
        return _reject(
            state, RejectionReason.DAILY_POINTS_OUT_OF_RANGE,
            f"Daily points must be between 0 and {MAX_DAILY_POINTS}; got {daily_points}.",
        )

    new_state = state.model_copy(
        update={"points_in_current_level": state.points_in_current_level + daily_points}
    )
    if can_level_up(new_state, table):
        logger.debug(
            "Level %s requirement met with %d points",
            current_level(new_state, table).name, new_state.points_in_current_level,
        )
    return new_state
