"""Pai Gow Poker (simplified) — seven cards split into a five-card high and two-card low hand."""
from collections import Counter
from dataclasses import dataclass
from enum import Enum

from casino_engine.games.base import (
    BaseGameEngine, DisplayMixin, GameResult, Outcome, round_half_up,
)
from config.game_schema import GameType
from tools.cards import (
    PAI_GOW_RANKS, PAI_GOW_SUITS, high_card_value, shuffled_deck,
)
from tools.seeded_rng import LinearCongruentialRandom

HAND_SIZE = 7
WIN_PAYOUT_RATIO = 0.95     # 5% commission on winning hands


class HandResult(str, Enum):
    WIN = "win"
    LOSE = "lose"
    TIE = "tie"


@dataclass(frozen=True)
class PaiGowInput:
    wager: int


@dataclass(frozen=True)
class HandComparison(DisplayMixin):
    high_hand_result: HandResult
    low_hand_result: HandResult


@dataclass(frozen=True)
class PaiGowDisplay(DisplayMixin):
    player_cards: tuple
    dealer_cards: tuple
    player_high_hand: tuple
    player_low_hand: tuple
    dealer_high_hand: tuple
    dealer_low_hand: tuple
    player_high_rank: str
    player_low_rank: str
    dealer_high_rank: str
    dealer_low_rank: str
    hand_comparison: HandComparison


def arrange_hands(cards) -> tuple:
    """Split seven cards into (high, low).

    The highest pair goes low; with no pair the two highest cards do.
    """
    ordered = sorted(cards, key=lambda c: c.value, reverse=True)
    pairs, singles = [], []
    i = 0
    while i < len(ordered):
        if i + 1 < len(ordered) and ordered[i].value == ordered[i + 1].value:
            pairs.append([ordered[i], ordered[i + 1]])
            i += 2
        else:
            singles.append(ordered[i])
            i += 1

    if pairs:
        low = pairs[0]
        high = ([card for pair in pairs[1:] for card in pair] + singles)[:5]
    else:
        low = ordered[:2]
        high = ordered[2:]
    return high, low


def arrange_house_way(cards) -> tuple:
    """Dealer arrangement; currently the same heuristic as the player's."""
    return arrange_hands(cards)


def describe_hand(hand) -> str:
    """Descriptive label only; it does not affect settlement."""
    if len(hand) == 2:
        if hand[0].value == hand[1].value:
            return f"Pair of {hand[0].rank}s"
        top = max(hand, key=lambda c: c.value)
        return f"{top.rank} High"

    counts = sorted(Counter(c.value for c in hand).values(), reverse=True)
    counts.append(0)
    if counts[0] == 4:
        return "Four of a Kind"
    if counts[0] == 3 and counts[1] == 2:
        return "Full House"
    if len({c.suit for c in hand}) == 1:
        return "Flush"
    if counts[0] == 3:
        return "Three of a Kind"
    if counts[0] == 2 and counts[1] == 2:
        return "Two Pair"
    if counts[0] == 2:
        return "One Pair"
    return "High Card"


def compare_hands(player_hand, dealer_hand) -> HandResult:
    """Highest single card decides."""
    player_high = max(c.value for c in player_hand)
    dealer_high = max(c.value for c in dealer_hand)
    if player_high > dealer_high:
        return HandResult.WIN
    if player_high < dealer_high:
        return HandResult.LOSE
    return HandResult.TIE


class PaiGowEngine(BaseGameEngine):
    game_type = GameType.PAI_GOW
    display_name = "Pai Gow Poker"
    input_type = PaiGowInput
    rng_type = LinearCongruentialRandom

    def check_input(self, game_input: PaiGowInput) -> None:
        self.check_wager(game_input.wager)

    def _play(self, game_input: PaiGowInput, rng) -> Outcome:
        wager = game_input.wager
        deck = shuffled_deck(rng, PAI_GOW_SUITS, PAI_GOW_RANKS, high_card_value)
        player_cards = deck[:HAND_SIZE]
        dealer_cards = deck[HAND_SIZE:2 * HAND_SIZE]

        player_high, player_low = arrange_hands(player_cards)
        dealer_high, dealer_low = arrange_house_way(dealer_cards)

        comparison = HandComparison(
            high_hand_result=compare_hands(player_high, dealer_high),
            low_hand_result=compare_hands(player_low, dealer_low),
        )

        if comparison.high_hand_result is HandResult.WIN and comparison.low_hand_result is HandResult.WIN:
            result, delta = GameResult.WIN, round_half_up(wager * WIN_PAYOUT_RATIO)
        elif comparison.high_hand_result is HandResult.LOSE and comparison.low_hand_result is HandResult.LOSE:
            result, delta = GameResult.LOSS, -wager
        else:
            result, delta = GameResult.PUSH, 0

        display = PaiGowDisplay(
            player_cards=tuple(player_cards),
            dealer_cards=tuple(dealer_cards),
            player_high_hand=tuple(player_high),
            player_low_hand=tuple(player_low),
            dealer_high_hand=tuple(dealer_high),
            dealer_low_hand=tuple(dealer_low),
            player_high_rank=describe_hand(player_high),
            player_low_rank=describe_hand(player_low),
            dealer_high_rank=describe_hand(dealer_high),
            dealer_low_rank=describe_hand(dealer_low),
            hand_comparison=comparison,
        )
        return Outcome(result=result, delta=delta, display=display)
