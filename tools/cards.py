"""
Screen-Time Casino - Card & Deck Primitives

Shared by Blackjack and Pai Gow. A deck is built fresh per round,
shuffled with the round's seeded stream, then dealt from.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable, Sequence

from tools.seeded_rng import SeededRandom

BLACKJACK_SUITS = ("♠", "♥", "♦", "♣")
BLACKJACK_RANKS = ("A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K")

PAI_GOW_SUITS = ("hearts", "diamonds", "clubs", "spades")
PAI_GOW_RANKS = ("2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K", "A")


@dataclass(frozen=True)
class Card:
    suit: str
    rank: str
    value: int

    def to_dict(self) -> dict:
        return asdict(self)

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}" if len(self.suit) == 1 else f"{self.rank} of {self.suit}"


def blackjack_value(rank: str) -> int:
    """Ace counts 11 here; softening happens in blackjack_total."""
    if rank == "A":
        return 11
    if rank in ("J", "Q", "K"):
        return 10
    return int(rank)


def high_card_value(rank: str) -> int:
    """2-14, ace high."""
    return PAI_GOW_RANKS.index(rank) + 2


def build_deck(suits: Sequence[str], ranks: Sequence[str],
               value_of: Callable[[str], int]) -> list[Card]:
    """One card per (suit, rank), suit-major order."""
    return [Card(suit, rank, value_of(rank)) for suit in suits for rank in ranks]


def shuffled_deck(rng: SeededRandom, suits: Sequence[str] = BLACKJACK_SUITS,
                  ranks: Sequence[str] = BLACKJACK_RANKS,
                  value_of: Callable[[str], int] = blackjack_value) -> list[Card]:
    deck = build_deck(suits, ranks, value_of)
    rng.shuffle(deck)
    return deck


def blackjack_total(hand: Sequence[Card]) -> int:
    """Best total: every ace starts at 11, then drops to 1 while busting."""
    total = 0
    aces = 0
    for card in hand:
        if card.rank == "A":
            aces += 1
            total += 11
        else:
            total += card.value

    while total > 21 and aces > 0:
        total -= 10
        aces -= 1
    return total
