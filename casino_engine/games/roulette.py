"""Roulette — single-zero wheel, several simultaneous sub-bets settled against one spin."""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from casino_engine.games.base import (
    BaseGameEngine, DisplayMixin, GameResult, InvalidBetSet, InvalidWager, Outcome,
)
from config.game_schema import GameType

POCKETS = 37
RED_NUMBERS = frozenset({1, 3, 5, 7, 9, 12, 14, 16, 18, 19, 21, 23, 25, 27, 30, 32, 34, 36})
BLACK_NUMBERS = frozenset(n for n in range(1, POCKETS) if n not in RED_NUMBERS)


class BetKind(str, Enum):
    COLOR = "color"
    PARITY = "parity"
    SINGLE = "single"
    DOZEN = "dozen"
    COLUMN = "column"


# Total return per unit staked (stake included): 1:1, 2:1 and 35:1 odds
PAYOUT_MULTIPLIERS = {
    BetKind.COLOR: 2,
    BetKind.PARITY: 2,
    BetKind.DOZEN: 3,
    BetKind.COLUMN: 3,
    BetKind.SINGLE: 36,
}

VALID_TARGETS = {
    BetKind.COLOR: ("red", "black"),
    BetKind.PARITY: ("odd", "even"),
    BetKind.SINGLE: tuple(range(POCKETS)),
    BetKind.DOZEN: (1, 2, 3),
    BetKind.COLUMN: (1, 2, 3),
}


@dataclass(frozen=True)
class RouletteBet:
    kind: BetKind
    target: Union[str, int]
    amount: int

    def to_dict(self) -> dict:
        return {"kind": BetKind(self.kind).value, "target": self.target, "amount": self.amount}


@dataclass(frozen=True)
class RouletteInput:
    bets: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class RouletteDisplay(DisplayMixin):
    winning_number: int
    winning_color: str
    ball_animation: tuple
    winning_bets: tuple
    losing_bets: tuple


@dataclass(frozen=True)
class Settlement:
    total_payout: int
    total_loss: int
    winning_bets: tuple
    losing_bets: tuple

    @property
    def net(self) -> int:
        return self.total_payout - self.total_loss


def number_color(number: int) -> str:
    if number == 0:
        return "green"
    return "red" if number in RED_NUMBERS else "black"


def is_bet_winner(bet: RouletteBet, number: int) -> bool:
    kind = BetKind(bet.kind)
    if kind is BetKind.COLOR:
        return number_color(number) == bet.target
    if kind is BetKind.PARITY:
        if number == 0:
            return False
        return (number % 2 == 1) == (bet.target == "odd")
    if kind is BetKind.SINGLE:
        return number == bet.target
    if kind is BetKind.DOZEN:
        low = (bet.target - 1) * 12 + 1
        return low <= number <= low + 11
    if kind is BetKind.COLUMN:
        return number != 0 and number % 3 == bet.target % 3
    return False


def evaluate_bets(bets, number: int) -> Settlement:
    """Settle every bet against one pocket. Pure; no randomness."""
    winners, losers = [], []
    payout = loss = 0
    for bet in bets:
        if is_bet_winner(bet, number):
            winners.append(bet)
            payout += bet.amount * PAYOUT_MULTIPLIERS[BetKind(bet.kind)]
        else:
            losers.append(bet)
            loss += bet.amount
    return Settlement(payout, loss, tuple(winners), tuple(losers))


def ball_animation(winning_number: int, rng) -> list:
    """Pocket sequence for 3-4 laps, the last lap stopping on the winner."""
    laps = 3 + math.floor(rng.next() * 2)
    path = []
    for lap in range(laps):
        last = winning_number if lap == laps - 1 else POCKETS - 1
        path.extend(range(last + 1))
    return path


class RouletteEngine(BaseGameEngine):
    game_type = GameType.ROULETTE
    display_name = "Roulette"
    input_type = RouletteInput

    def check_input(self, game_input: RouletteInput) -> None:
        bets = game_input.bets
        if not bets:
            raise InvalidBetSet("At least one bet is required")
        for bet in bets:
            self._check_bet(bet)
        total = sum(bet.amount for bet in bets)
        if not self.config.min_wager <= total <= self.config.max_wager:
            raise InvalidWager(
                f"Total stake {total} outside [{self.config.min_wager}, {self.config.max_wager}]"
            )

    @staticmethod
    def _check_bet(bet) -> None:
        if not isinstance(bet, RouletteBet):
            raise InvalidBetSet(f"Not a roulette bet: {bet!r}")
        try:
            kind = BetKind(bet.kind)
        except ValueError:
            raise InvalidBetSet(f"Unknown bet kind: {bet.kind!r}") from None
        if isinstance(bet.amount, bool) or not isinstance(bet.amount, int) or bet.amount <= 0:
            raise InvalidBetSet(f"Stake must be a positive whole number, got {bet.amount!r}")
        if isinstance(bet.target, bool) or bet.target not in VALID_TARGETS[kind]:
            raise InvalidBetSet(f"Invalid target {bet.target!r} for {kind.value} bet")

    def _play(self, game_input: RouletteInput, rng) -> Outcome:
        winning_number = math.floor(rng.next() * POCKETS)
        animation = ball_animation(winning_number, rng)
        settlement = evaluate_bets(game_input.bets, winning_number)

        net = settlement.net
        if net > 0:
            result = GameResult.WIN
        elif net < 0:
            result = GameResult.LOSS
        else:
            result = GameResult.PUSH

        display = RouletteDisplay(
            winning_number=winning_number,
            winning_color=number_color(winning_number),
            ball_animation=tuple(animation),
            winning_bets=settlement.winning_bets,
            losing_bets=settlement.losing_bets,
        )
        return Outcome(result=result, delta=net, display=display)
