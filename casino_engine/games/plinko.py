"""Plinko — a chip falls through rows of pegs into a multiplier slot."""
from dataclasses import dataclass

from casino_engine.games.base import (
    BaseGameEngine, DisplayMixin, GameResult, Outcome, round_half_up,
)
from config.game_schema import GameType
from tools.seeded_rng import LinearCongruentialRandom

PLINKO_ROWS = 12
PLINKO_MULTIPLIERS = (0.1, 0.3, 0.5, 1.0, 1.5, 2.0, 1.5, 1.0, 0.5, 0.3, 0.1)

LEFT, RIGHT = 0, 1


@dataclass(frozen=True)
class PlinkoInput:
    wager: int


@dataclass(frozen=True)
class ChipPosition:
    row: int
    position: int     # offset from the centre column


@dataclass(frozen=True)
class PlinkoDisplay(DisplayMixin):
    path: tuple
    final_slot: int
    multiplier: float
    chip_positions: tuple


def final_slot(path, slot_count: int = len(PLINKO_MULTIPLIERS)) -> int:
    """Centre slot shifted one per bounce, clamped to the board."""
    offset = sum(1 if step == RIGHT else -1 for step in path)
    return max(0, min(slot_count - 1, slot_count // 2 + offset))


def chip_positions(path) -> list:
    positions = [ChipPosition(0, 0)]
    current = 0
    for row, step in enumerate(path, start=1):
        current += 1 if step == RIGHT else -1
        positions.append(ChipPosition(row, current))
    return positions


class PlinkoEngine(BaseGameEngine):
    game_type = GameType.PLINKO
    display_name = "Plinko"
    input_type = PlinkoInput
    rng_type = LinearCongruentialRandom

    rows = PLINKO_ROWS
    multipliers = PLINKO_MULTIPLIERS

    def check_input(self, game_input: PlinkoInput) -> None:
        self.check_wager(game_input.wager)

    def _play(self, game_input: PlinkoInput, rng) -> Outcome:
        wager = game_input.wager
        path = [LEFT if rng.next() < 0.5 else RIGHT for _ in range(self.rows)]
        slot = final_slot(path, len(self.multipliers))
        multiplier = self.multipliers[slot]

        if multiplier >= 1.0:
            delta = round_half_up(wager * multiplier - wager)
            result = GameResult.WIN if delta > 0 else GameResult.PUSH
        else:
            delta = -round_half_up(wager * (1 - multiplier))
            result = GameResult.LOSS

        display = PlinkoDisplay(
            path=tuple(path),
            final_slot=slot,
            multiplier=multiplier,
            chip_positions=tuple(chip_positions(path)),
        )
        return Outcome(result=result, delta=delta, display=display)
