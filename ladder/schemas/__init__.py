from .levels import (
    DEFAULT_LEVEL_TABLE,
    LevelDefinition,
    LevelRejection,
    LevelTable,
    YouthLevelState,
)
from .ratings import (
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

__all__ = [
    "DEFAULT_LEVEL_TABLE",
    "LevelDefinition",
    "LevelRejection",
    "LevelTable",
    "YouthLevelState",
    "DOMAINS",
    "DailyShiftRecord",
    "DecimalScore",
    "NormalizedDailyShift",
    "NormalizedRating",
    "NormalizedSchoolScore",
    "NormalizedWeeklyEval",
    "PercentScore",
    "ScaledTenths",
    "SchoolScoreRecord",
    "ScoreValue",
    "WeeklyEvalRecord",
]
