"""Jewel Mining — 4x4 minefield; gems pay a slice of the wager until a bomb or the cap."""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from casino_engine.games.base import (
    BaseGameEngine, DisplayMixin, GameResult, InvalidWager, Outcome,
)
from config.game_schema import GameType

GRID_SIZE = 16
BOMB_COUNT = 4
GEM_VALUE_RATIO = 0.2


class Cell(str, Enum):
    GEM = "gem"
    BOMB = "bomb"


class FinalState(str, Enum):
    CONTINUE = "continue"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class JewelMiningInput:
    wager: int
    clicked_positions: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class JewelMiningDisplay(DisplayMixin):
    grid: tuple
    revealed: tuple
    final_state: FinalState
    accumulated_winnings: int
    bomb_position: Optional[int] = None


def generate_bomb_positions(rng, grid_size: int = GRID_SIZE, bomb_count: int = BOMB_COUNT) -> list:
    """Distinct bomb cells in draw order; repeated draws are discarded."""
    positions = []
    while len(positions) < bomb_count:
        pos = math.floor(rng.next() * grid_size)
        if pos not in positions:
            positions.append(pos)
    return positions


def build_grid(bomb_positions, grid_size: int = GRID_SIZE) -> tuple:
    bombs = set(bomb_positions)
    return tuple(Cell.BOMB if i in bombs else Cell.GEM for i in range(grid_size))


class JewelMiningEngine(BaseGameEngine):
    game_type = GameType.JEWEL_MINING
    display_name = "Jewel Mining"
    input_type = JewelMiningInput

    def check_input(self, game_input: JewelMiningInput) -> None:
        self.check_wager(game_input.wager)
        positions = list(game_input.clicked_positions)
        for pos in positions:
            if isinstance(pos, bool) or not isinstance(pos, int) or not 0 <= pos < GRID_SIZE:
                raise InvalidWager(f"Cell {pos!r} is off the {GRID_SIZE}-cell grid")
        if len(set(positions)) != len(positions):
            raise InvalidWager("Each cell can only be revealed once")

    def _play(self, game_input: JewelMiningInput, rng) -> Outcome:
        wager = game_input.wager
        grid = build_grid(generate_bomb_positions(rng))
        gem_value = math.floor(wager * GEM_VALUE_RATIO)

        winnings = 0
        revealed = []
        bomb_position = None
        for pos in game_input.clicked_positions:
            revealed.append(pos)
            if grid[pos] is Cell.BOMB:
                bomb_position = pos
                break
            winnings += gem_value
            if winnings >= wager:
                winnings = wager
                break

        if bomb_position is not None:
            result, delta, winnings = GameResult.LOSS, -wager, 0
            final_state = FinalState.LOST
        elif winnings > 0:
            result, delta = GameResult.WIN, winnings
            final_state = FinalState.WON if winnings >= wager else FinalState.CONTINUE
        else:
            result, delta = GameResult.PUSH, 0
            final_state = FinalState.CONTINUE

        display = JewelMiningDisplay(
            grid=grid,
            revealed=tuple(revealed),
            final_state=final_state,
            accumulated_winnings=winnings,
            bomb_position=bomb_position,
        )
        return Outcome(result=result, delta=delta, display=display)
