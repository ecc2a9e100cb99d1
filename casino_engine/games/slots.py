"""Slots — one draw against cumulative win/loss thresholds, then reel dressing."""
import math
from dataclasses import dataclass

from casino_engine.games.base import (
    BaseGameEngine, DisplayMixin, GameResult, Outcome,
)
from config.game_schema import GameType

SLOT_SYMBOLS = ("🍒", "🍋", "🍊", "🍇", "💎", "⭐", "🔔")
WINNING_COMBINATIONS = tuple((s, s, s) for s in SLOT_SYMBOLS)


@dataclass(frozen=True)
class SlotsInput:
    wager: int


@dataclass(frozen=True)
class SlotsDisplay(DisplayMixin):
    reels: tuple
    is_win: bool
    payline: str


def is_winning_combination(reels) -> bool:
    return tuple(reels) in WINNING_COMBINATIONS


class SlotsEngine(BaseGameEngine):
    game_type = GameType.SLOTS
    display_name = "Slots"
    input_type = SlotsInput

    reward_range = (1.5, 2.0)

    def check_input(self, game_input: SlotsInput) -> None:
        self.check_wager(game_input.wager)

    def _play(self, game_input: SlotsInput, rng) -> Outcome:
        wager = game_input.wager
        draw = rng.next()
        if draw < self.config.win_probability:
            result = GameResult.WIN
        elif draw < self.config.win_probability + self.config.loss_probability:
            result = GameResult.LOSS
        else:
            result = GameResult.PUSH

        if result is GameResult.WIN:
            reels = rng.choice(WINNING_COMBINATIONS)
            low, high = self.reward_range
            delta = math.floor(wager * (low + rng.next() * (high - low)))
        else:
            reels = self._spin_losing_reels(rng)
            delta = -wager if result is GameResult.LOSS else 0

        display = SlotsDisplay(
            reels=tuple(reels),
            is_win=result is GameResult.WIN,
            payline=f"Three {reels[0]}s!" if result is GameResult.WIN else "No match",
        )
        return Outcome(result=result, delta=delta, display=display)

    def _spin_losing_reels(self, rng) -> list:
        reels = [rng.choice(SLOT_SYMBOLS) for _ in range(3)]
        if is_winning_combination(reels):
            reels[2] = next(s for s in SLOT_SYMBOLS if s != reels[0])
        return reels
