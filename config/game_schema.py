"""
Screen-Time Casino - Game Configuration Schema

Read-only tunables every engine boots from. The defaults mirror the
shipped app constants; a JSON file can override any subset per game:

    {"slots": {"max_wager": 45}, "pai-gow": {"daily_cap": 60}}

Usage:
    from config.game_schema import GameType, load_game_configs
    configs = load_game_configs()
    configs[GameType.BLACKJACK].max_wager
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger("screentime.config")


class GameType(str, Enum):
    SLOTS        = "slots"
    BLACKJACK    = "blackjack"
    ROULETTE     = "roulette"
    PLINKO       = "plinko"
    PAI_GOW      = "pai-gow"
    MATH         = "math-problems"
    JEWEL_MINING = "jewel-mining"


class GameConfig(BaseModel):
    """Per-game limits and outcome weights (minutes of screen time)."""
    win_probability: float = Field(0.5, ge=0.0, le=1.0)
    loss_probability: float = Field(0.5, ge=0.0, le=1.0)
    min_wager: int = Field(5, ge=1)
    max_wager: int = Field(60, ge=1)
    daily_cap: int = Field(120, ge=0)     # enforced by the session layer, not engines

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_ranges(self):
        if self.win_probability + self.loss_probability > 1.0 + 1e-9:
            raise ValueError("win_probability + loss_probability must not exceed 1")
        if self.min_wager > self.max_wager:
            raise ValueError(f"min_wager {self.min_wager} exceeds max_wager {self.max_wager}")
        return self

    @property
    def push_probability(self) -> float:
        return max(0.0, 1.0 - self.win_probability - self.loss_probability)


DEFAULT_GAME_CONFIGS: dict[GameType, GameConfig] = {
    GameType.SLOTS: GameConfig(
        win_probability=0.10, loss_probability=0.85,
        min_wager=5, max_wager=60, daily_cap=120,
    ),
    GameType.BLACKJACK: GameConfig(
        win_probability=0.42, loss_probability=0.49,
        min_wager=10, max_wager=45, daily_cap=90,
    ),
    GameType.ROULETTE: GameConfig(
        win_probability=0.47, loss_probability=0.53,
        min_wager=5, max_wager=120, daily_cap=180,
    ),
    GameType.PLINKO: GameConfig(
        win_probability=0.35, loss_probability=0.65,
        min_wager=10, max_wager=80, daily_cap=150,
    ),
    GameType.PAI_GOW: GameConfig(
        win_probability=0.40, loss_probability=0.45,
        min_wager=15, max_wager=60, daily_cap=120,
    ),
    GameType.MATH: GameConfig(
        win_probability=0.60, loss_probability=0.40,
        min_wager=5, max_wager=30, daily_cap=90,
    ),
    GameType.JEWEL_MINING: GameConfig(
        win_probability=0.25, loss_probability=0.75,
        min_wager=10, max_wager=100, daily_cap=200,
    ),
}


def default_config(game_type) -> GameConfig:
    """Shipped defaults for one game."""
    return DEFAULT_GAME_CONFIGS[GameType(game_type)]


def load_game_configs(path: Optional[Path] = None) -> dict[GameType, GameConfig]:
    """Defaults merged with per-game overrides from a JSON file.

    Without an explicit path the CASINO_CONFIG_PATH setting is used.
    Unknown game keys raise ValueError; bad values raise pydantic's
    ValidationError.
    """
    if path is None:
        from config.settings import CasinoSettings
        path = CasinoSettings.config_path()

    configs = dict(DEFAULT_GAME_CONFIGS)
    if path is None:
        return configs

    overrides = json.loads(Path(path).read_text(encoding="utf-8"))
    for key, values in overrides.items():
        game_type = GameType(key)
        merged = {**configs[game_type].model_dump(), **values}
        configs[game_type] = GameConfig.model_validate(merged)
        logger.info(f"Config override for {game_type.value}: {sorted(values)}")
    return configs
