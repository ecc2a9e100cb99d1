"""
Screen-Time Casino - Base Game Engine

Contract shared by all seven games:
    validate(input) -> bool        pure, consumes no randomness
    play(input, seed) -> Outcome   pure given (input, seed)
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from typing import Any, Optional

from config.game_schema import GameConfig, GameType, default_config
from tools.seeded_rng import ParkMillerRandom, SeededRandom

logger = logging.getLogger("screentime.engine")


class GameResult(str, Enum):
    WIN = "win"
    LOSS = "loss"
    PUSH = "push"


class GameInputError(ValueError):
    """Input rejected before any randomness was drawn."""


class InvalidWager(GameInputError):
    """Wager outside the game's [min_wager, max_wager] range or malformed."""


class InvalidBetSet(GameInputError):
    """Roulette bet list empty, a non-positive stake, or an out-of-range target."""


def round_half_up(x: float) -> int:
    """Halves round toward +inf (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(x + 0.5)


def _plain(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class Outcome:
    """Normalized result of one round plus the engine-specific display payload."""
    result: GameResult
    delta: int            # signed minutes of screen time
    display: Any

    def to_dict(self) -> dict:
        return {
            "result": self.result.value,
            "delta": self.delta,
            "display": _plain(self.display),
        }


class DisplayMixin:
    """to_dict() for display dataclasses holding cards, enums and nested lists."""

    def to_dict(self) -> dict:
        return {k: _plain(v) for k, v in self.__dict__.items()}


class BaseGameEngine(ABC):
    """Abstract base for all casino game engines. Engines hold no per-round state."""

    game_type: GameType
    display_name: str = "Base Game"
    input_type: type = object
    rng_type: type = ParkMillerRandom

    def __init__(self, config: Optional[GameConfig] = None):
        self.config = config or default_config(self.game_type)

    # ── Validation ────────────────────────────────────────────

    @abstractmethod
    def check_input(self, game_input) -> None:
        """Raise a GameInputError subclass if the input cannot be played."""
        ...

    def validate(self, game_input) -> bool:
        try:
            self.check_input(game_input)
        except GameInputError:
            return False
        return True

    def check_wager(self, wager) -> None:
        if isinstance(wager, bool) or not isinstance(wager, int):
            raise InvalidWager(f"Wager must be a whole number of minutes, got {wager!r}")
        if not self.config.min_wager <= wager <= self.config.max_wager:
            raise InvalidWager(
                f"Wager {wager} outside [{self.config.min_wager}, {self.config.max_wager}] "
                f"for {self.game_type.value}"
            )

    # ── Play ──────────────────────────────────────────────────

    def make_rng(self, seed: int) -> SeededRandom:
        return self.rng_type(seed)

    def play(self, game_input, seed: int) -> Outcome:
        """Validate, then simulate one round from a fresh seeded stream."""
        if not isinstance(game_input, self.input_type):
            raise TypeError(
                f"{self.display_name} expects {self.input_type.__name__}, "
                f"got {type(game_input).__name__}"
            )
        try:
            self.check_input(game_input)
        except GameInputError as e:
            logger.warning(f"{self.game_type.value}: rejected input ({e})")
            raise

        outcome = self._play(game_input, self.make_rng(seed))
        logger.debug(f"{self.game_type.value}: seed={seed} result={outcome.result.value} "
                     f"delta={outcome.delta:+d}")
        return outcome

    @abstractmethod
    def _play(self, game_input, rng: SeededRandom) -> Outcome:
        """Simulate one validated round."""
        ...

    def get_metadata(self) -> dict:
        """Return game metadata for the UI/CLI."""
        return {
            "game_type": self.game_type.value,
            "display_name": self.display_name,
            "min_wager": self.config.min_wager,
            "max_wager": self.config.max_wager,
            "daily_cap": self.config.daily_cap,
        }
