"""
Level ladder schemas.

LevelDefinition  — one rung of the program ladder (static configuration)
LevelTable       — the ordered, immutable ladder, validated on construction
YouthLevelState  — a youth's position on the ladder (replaced, never mutated)
LevelRejection   — returned instead of a new state when a transition is refused
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ladder.core.errors import LevelTableError

logger = logging.getLogger(__name__)


class LevelDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0, description="0-based position on the ladder.")
    name: str
    cumulative_points_required: Optional[int] = Field(
        default=None,
        ge=0,
        description="Points needed to complete this level; None = unbounded (terminal).",
    )
    daily_points_for_privileges: int = Field(
        ge=0,
        description="Minimum points earned in a single day to keep privileges.",
    )

    @property
    def is_unbounded(self) -> bool:
        return self.cumulative_points_required is None


@dataclass(frozen=True)
class LevelTable:
    """Ordered ladder of LevelDefinitions, indexed 0..N-1."""
    levels: tuple[LevelDefinition, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "levels", tuple(self.levels))
        if not self.levels:
            raise LevelTableError("Level table must contain at least one level.")

        for position, level in enumerate(self.levels):
            if level.index != position:
                raise LevelTableError(
                    f"Level indices must be contiguous from 0; found {level.index} at position {position}.",
                    details={"position": position, "index": level.index},
                )

        unbounded = [lvl.index for lvl in self.levels if lvl.is_unbounded]
        if len(unbounded) > 1:
            raise LevelTableError(
                "At most one level may have an unbounded points requirement.",
                details={"unbounded_indices": unbounded},
            )
        if unbounded and unbounded[0] != len(self.levels) - 1:
            raise LevelTableError(
                "The unbounded level must be the last level of the ladder.",
                details={"unbounded_index": unbounded[0]},
            )

        previous = 0
        for level in self.levels:
            if level.is_unbounded:
                continue
            if level.cumulative_points_required < previous:
                raise LevelTableError(
                    f"cumulative_points_required must be non-decreasing; "
                    f"level {level.index} requires {level.cumulative_points_required} < {previous}.",
                    details={"index": level.index},
                )
            previous = level.cumulative_points_required

    @classmethod
    def from_rows(cls, rows: list[dict[str, Any]]) -> "LevelTable":
        try:
            levels = tuple(LevelDefinition.model_validate(row) for row in rows)
        except ValidationError as exc:
            raise LevelTableError(
                "Level table row failed validation.",
                details={"errors": exc.errors(include_url=False)},
            ) from exc
        return cls(levels)

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self) -> Iterator[LevelDefinition]:
        return iter(self.levels)

    def __getitem__(self, index: int) -> LevelDefinition:
        return self.levels[index]

    @property
    def terminal_index(self) -> int:
        return len(self.levels) - 1


class YouthLevelState(BaseModel):
    model_config = ConfigDict(frozen=True)

    level_index: int = 0
    points_in_current_level: int = 0

    @field_validator("points_in_current_level", mode="before")
    @classmethod
    def _floor_points(cls, v):
        if v is None:
            return 0
        if isinstance(v, (int, float)) and v < 0:
            logger.warning("Negative points_in_current_level %s floored to 0", v)
            return 0
        return v


class LevelRejection(BaseModel):
    model_config = ConfigDict(frozen=True)

    reason: str = Field(description='"not_eligible" | "at_terminal_level" | "at_floor" | "daily_points_out_of_range"')
    message: str
    state: YouthLevelState = Field(description="The unchanged state the request was made against.")


def _level(index: int, name: str, points: Optional[int], privileges: int) -> LevelDefinition:
    return LevelDefinition(
        index=index,
        name=name,
        cumulative_points_required=points,
        daily_points_for_privileges=privileges,
    )


DEFAULT_LEVEL_TABLE = LevelTable((
    _level(0,  "Orientation", 120,   10),
    _level(1,  "Level 1",     840,   20),
    _level(2,  "Level 2",     2000,  20),
    _level(3,  "Level 3",     3060,  30),
    _level(4,  "Level 4",     4740,  40),
    _level(5,  "Level 5",     6840,  50),
    _level(6,  "Level 6",     9360,  60),
    _level(7,  "Level 7",     12300, 70),
    _level(8,  "Level 8",     15660, 80),
    _level(9,  "Level 9",     19440, 90),
    _level(10, "Level 10",    None,  100),
))
