import json
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from ladder.core.errors import LevelTableError
from ladder.schemas.levels import DEFAULT_LEVEL_TABLE, LevelTable


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    LOG_LEVEL: str = "INFO"

    # recent - previous must exceed this (either direction) to leave "stable".
    TREND_THRESHOLD: float = 0.15

    # Named window-size presets, see ladder/services/trends.py.
    WEEKLY_TREND_POLICY: str = "legacy"
    DAILY_TREND_POLICY: str = "daily"

    # Optional JSON file holding a replacement level table:
    # [{"index": 0, "name": "...", "cumulative_points_required": 120,
    #   "daily_points_for_privileges": 10}, ...]  (null = unbounded)
    LEVEL_TABLE_FILE: Optional[str] = None


settings = Settings()


def load_level_table(path: Optional[str] = None) -> LevelTable:
    """
    Return the level table configured for this process.

    Falls back to DEFAULT_LEVEL_TABLE when no file is configured. A file that
    cannot be read or does not describe a well-formed ladder raises
    LevelTableError at startup rather than at scoring time.
    """
    source = path or settings.LEVEL_TABLE_FILE
    if not source:
        return DEFAULT_LEVEL_TABLE

    try:
        raw = json.loads(Path(source).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise LevelTableError(
            f"Could not read level table from {source}: {exc}",
            details={"path": str(source)},
        ) from exc

    if not isinstance(raw, list):
        raise LevelTableError(
            "Level table file must contain a JSON list of levels.",
            details={"path": str(source)},
        )
    return LevelTable.from_rows(raw)
