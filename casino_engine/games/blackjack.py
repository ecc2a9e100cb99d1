"""Blackjack — auto-played basic strategy against a dealer standing on 17."""
from dataclasses import dataclass
from enum import Enum

from casino_engine.games.base import (
    BaseGameEngine, DisplayMixin, GameResult, Outcome,
)
from config.game_schema import GameType
from tools.cards import Card, blackjack_total, shuffled_deck


class BlackjackState(str, Enum):
    PLAYER_BUST = "player_bust"
    DEALER_BUST = "dealer_bust"
    PUSH = "push"
    PLAYER_WIN = "player_win"
    DEALER_WIN = "dealer_win"


SETTLEMENT = {
    BlackjackState.PLAYER_WIN: GameResult.WIN,
    BlackjackState.DEALER_BUST: GameResult.WIN,
    BlackjackState.PLAYER_BUST: GameResult.LOSS,
    BlackjackState.DEALER_WIN: GameResult.LOSS,
    BlackjackState.PUSH: GameResult.PUSH,
}


@dataclass(frozen=True)
class BlackjackInput:
    wager: int


@dataclass(frozen=True)
class BlackjackDisplay(DisplayMixin):
    player_hand: tuple
    dealer_hand: tuple
    player_total: int
    dealer_total: int
    game_state: BlackjackState


def should_hit(hand, dealer_up_card: Card) -> bool:
    """Simplified basic strategy: hit to 11, stand from 17, 12-16 depends on the up-card."""
    total = blackjack_total(hand)
    if total <= 11:
        return True
    if total >= 17:
        return False
    return dealer_up_card.value >= 7


class BlackjackEngine(BaseGameEngine):
    game_type = GameType.BLACKJACK
    display_name = "Blackjack"
    input_type = BlackjackInput

    dealer_stands_on = 17

    def check_input(self, game_input: BlackjackInput) -> None:
        self.check_wager(game_input.wager)

    def _play(self, game_input: BlackjackInput, rng) -> Outcome:
        deck = shuffled_deck(rng)

        player = [deck.pop(), deck.pop()]
        dealer = [deck.pop(), deck.pop()]

        while should_hit(player, dealer[0]):
            player.append(deck.pop())
            if blackjack_total(player) > 21:
                break

        player_total = blackjack_total(player)
        if player_total > 21:
            state = BlackjackState.PLAYER_BUST
        else:
            while blackjack_total(dealer) < self.dealer_stands_on:
                dealer.append(deck.pop())
            dealer_total = blackjack_total(dealer)
            if dealer_total > 21:
                state = BlackjackState.DEALER_BUST
            elif player_total > dealer_total:
                state = BlackjackState.PLAYER_WIN
            elif dealer_total > player_total:
                state = BlackjackState.DEALER_WIN
            else:
                state = BlackjackState.PUSH

        result = SETTLEMENT[state]
        delta = {GameResult.WIN: game_input.wager,
                 GameResult.LOSS: -game_input.wager,
                 GameResult.PUSH: 0}[result]

        display = BlackjackDisplay(
            player_hand=tuple(player),
            dealer_hand=tuple(dealer),
            player_total=player_total,
            dealer_total=blackjack_total(dealer),
            game_state=state,
        )
        return Outcome(result=result, delta=delta, display=display)
