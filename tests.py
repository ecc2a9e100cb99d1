#!/usr/bin/env python3
"""
Screen-Time Casino — Core Test Suite

Run: python -m pytest tests.py
     python -m pytest tests.py -k Blackjack

Test categories:
  TestSeededRandom   — LCG streams, ranges, seed normalization, shuffle
  TestCards          — deck construction, ace softening
  TestEngineContract — validate/play, errors before randomness, determinism
  TestBlackjack      — strategy, dealer play, every terminal state
  TestPaiGow         — hand arrangement, labels, comparison, settlement
"""

import json
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

# ── Ensure project root is on sys.path ──
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from casino_engine.games import GAME_ENGINES, get_game_engine, play_game
from casino_engine.games.base import (
    GameResult, InvalidBetSet, InvalidWager, round_half_up,
)
from casino_engine.games.blackjack import (
    BlackjackEngine, BlackjackInput, BlackjackState, should_hit,
)
from casino_engine.games.jewel_mining import JewelMiningInput
from casino_engine.games.math_challenge import Difficulty, MathChallengeInput
from casino_engine.games.pai_gow import (
    HandResult, PaiGowEngine, PaiGowInput, arrange_hands, arrange_house_way,
    compare_hands, describe_hand,
)
from casino_engine.games.plinko import PlinkoInput
from casino_engine.games.roulette import BetKind, RouletteBet, RouletteInput
from casino_engine.games.slots import SlotsInput
from config.game_schema import GameType
from tools.cards import (
    BLACKJACK_RANKS, PAI_GOW_RANKS, PAI_GOW_SUITS, Card, blackjack_total, blackjack_value,
    build_deck, high_card_value, shuffled_deck,
)
from tools.seeded_rng import LinearCongruentialRandom, ParkMillerRandom


def bj(rank: str, suit: str = "♠") -> Card:
    return Card(suit, rank, blackjack_value(rank))


def pg(rank: str, suit: str = "hearts") -> Card:
    return Card(suit, rank, high_card_value(rank))


def stacked(*deal_order):
    """Deck whose pops come out in deal_order."""
    return list(reversed(deal_order))


# One playable input per game, used by the cross-engine checks
SAMPLE_INPUTS = {
    GameType.SLOTS: SlotsInput(wager=10),
    GameType.BLACKJACK: BlackjackInput(wager=30),
    GameType.ROULETTE: RouletteInput(bets=(
        RouletteBet(BetKind.COLOR, "red", 10),
        RouletteBet(BetKind.SINGLE, 7, 5),
    )),
    GameType.PLINKO: PlinkoInput(wager=20),
    GameType.PAI_GOW: PaiGowInput(wager=20),
    GameType.MATH: MathChallengeInput(
        wager=10, difficulty=Difficulty.EASY, time_limit=60,
        user_answers=(1, 2, 3, 4, 5), time_spent=(10.0, 10.0, 10.0, 10.0, 10.0),
    ),
    GameType.JEWEL_MINING: JewelMiningInput(wager=20, clicked_positions=(0, 5, 10)),
}


# ============================================================
# Random Source
# ============================================================

class TestSeededRandom(unittest.TestCase):

    def test_park_miller_first_values(self):
        """state = state * 16807 mod (2^31 - 1); output (state - 1) / (M - 1)."""
        rng = ParkMillerRandom(1)
        self.assertEqual(rng.next(), 16806 / 2147483646)
        self.assertEqual(rng.state, 16807)
        rng.next()
        self.assertEqual(rng.state, 282475249)

    def test_lcg_first_values(self):
        """state = (state * 9301 + 49297) mod 233280; output state / 233280."""
        rng = LinearCongruentialRandom(0)
        self.assertEqual(rng.next(), 49297 / 233280)
        self.assertEqual(rng.state, 49297)
        rng.next()
        self.assertEqual(rng.state, (49297 * 9301 + 49297) % 233280)

    def test_same_seed_same_stream(self):
        for cls in (ParkMillerRandom, LinearCongruentialRandom):
            a, b = cls(987654321), cls(987654321)
            self.assertEqual([a.next() for _ in range(50)], [b.next() for _ in range(50)])

    def test_outputs_in_unit_interval_for_odd_seeds(self):
        """Zero, negative and huge seeds all yield valid streams."""
        for cls in (ParkMillerRandom, LinearCongruentialRandom):
            for seed in (0, -1, -987654321, 2147483647, 2 ** 80 + 3, 1_700_000_000_000):
                rng = cls(seed)
                for _ in range(200):
                    value = rng.next()
                    self.assertGreaterEqual(value, 0.0)
                    self.assertLess(value, 1.0)

    def test_park_miller_zero_seed_does_not_stick(self):
        rng = ParkMillerRandom(0)
        values = {rng.next() for _ in range(10)}
        self.assertGreater(len(values), 1)
        self.assertEqual(ParkMillerRandom(2147483647).next(), ParkMillerRandom(1).next())

    def test_seed_must_be_int(self):
        for bad in (1.5, "42", None, True):
            with self.assertRaises(TypeError):
                ParkMillerRandom(bad)

    def test_next_int_inclusive_bounds(self):
        rng = LinearCongruentialRandom(31337)
        seen = {rng.next_int(-2, 2) for _ in range(2000)}
        self.assertEqual(seen, {-2, -1, 0, 1, 2})

    def test_shuffle_is_deterministic_permutation(self):
        items_a, items_b = list(range(52)), list(range(52))
        ParkMillerRandom(12345).shuffle(items_a)
        ParkMillerRandom(12345).shuffle(items_b)
        self.assertEqual(items_a, items_b)
        self.assertEqual(sorted(items_a), list(range(52)))
        self.assertNotEqual(items_a, list(range(52)))


# ============================================================
# Cards
# ============================================================

class TestCards(unittest.TestCase):

    def test_decks_have_52_unique_cards(self):
        for deck in (build_deck(("♠", "♥", "♦", "♣"), BLACKJACK_RANKS, blackjack_value),
                     build_deck(PAI_GOW_SUITS, PAI_GOW_RANKS, high_card_value)):
            self.assertEqual(len(deck), 52)
            self.assertEqual(len({(c.suit, c.rank) for c in deck}), 52)

    def test_card_values(self):
        self.assertEqual(blackjack_value("A"), 11)
        self.assertEqual(blackjack_value("K"), 10)
        self.assertEqual(blackjack_value("7"), 7)
        self.assertEqual(high_card_value("A"), 14)
        self.assertEqual(high_card_value("2"), 2)
        self.assertEqual(high_card_value("J"), 11)

    def test_shuffled_deck_reproducible(self):
        self.assertEqual(shuffled_deck(ParkMillerRandom(7)), shuffled_deck(ParkMillerRandom(7)))
        self.assertNotEqual(shuffled_deck(ParkMillerRandom(7)), shuffled_deck(ParkMillerRandom(8)))

    def test_ace_softening(self):
        self.assertEqual(blackjack_total([bj("A"), bj("K")]), 21)
        self.assertEqual(blackjack_total([bj("A"), bj("A")]), 12)
        self.assertEqual(blackjack_total([bj("A"), bj("A"), bj("9")]), 21)
        self.assertEqual(blackjack_total([bj("A"), bj("6"), bj("K")]), 17)
        self.assertEqual(blackjack_total([bj("A"), bj("A"), bj("A"), bj("A")]), 14)
        self.assertEqual(blackjack_total([bj("K"), bj("Q"), bj("5")]), 25)

    def test_softening_never_leaves_a_reducible_bust(self):
        """Total > 21 only when every ace already counts as 1."""
        deck = shuffled_deck(ParkMillerRandom(99))
        for start in range(0, 45):
            hand = deck[start:start + 5]
            total = blackjack_total(hand)
            if total > 21:
                hard = sum(1 if c.rank == "A" else c.value for c in hand)
                self.assertEqual(total, hard)


# ============================================================
# Engine Contract
# ============================================================

class TestEngineContract(unittest.TestCase):

    def test_registry_covers_all_games(self):
        self.assertEqual(set(GAME_ENGINES), set(GameType))
        for game_type in GameType:
            engine = get_game_engine(game_type.value)
            self.assertEqual(engine.game_type, game_type)

    def test_unknown_game_type(self):
        with self.assertRaises(ValueError):
            get_game_engine("baccarat")

    def test_sample_inputs_validate(self):
        for game_type, game_input in SAMPLE_INPUTS.items():
            self.assertTrue(get_game_engine(game_type).validate(game_input), game_type)

    def test_play_is_deterministic(self):
        """Identical (input, seed) gives byte-identical outcomes, even on fresh engines."""
        for game_type, game_input in SAMPLE_INPUTS.items():
            for seed in (1, 12345, 1_700_000_000_000, -42):
                first = play_game(game_type, game_input, seed).to_dict()
                second = get_game_engine(game_type).play(game_input, seed).to_dict()
                self.assertEqual(json.dumps(first, sort_keys=True, ensure_ascii=False),
                                 json.dumps(second, sort_keys=True, ensure_ascii=False))

    def test_result_matches_delta_sign(self):
        for game_type, game_input in SAMPLE_INPUTS.items():
            engine = get_game_engine(game_type)
            for seed in range(1000, 1100):
                outcome = engine.play(game_input, seed * 7919)
                if outcome.result is GameResult.WIN:
                    self.assertGreater(outcome.delta, 0, game_type)
                elif outcome.result is GameResult.LOSS:
                    self.assertLess(outcome.delta, 0, game_type)
                else:
                    self.assertEqual(outcome.delta, 0, game_type)
                self.assertIsInstance(outcome.delta, int)

    def test_invalid_wager_raised_before_randomness(self):
        bad_inputs = {
            GameType.SLOTS: SlotsInput(wager=4),
            GameType.BLACKJACK: BlackjackInput(wager=46),
            GameType.PLINKO: PlinkoInput(wager=10.5),
            GameType.PAI_GOW: PaiGowInput(wager=True),
            GameType.JEWEL_MINING: JewelMiningInput(wager=101),
        }
        for game_type, game_input in bad_inputs.items():
            engine = get_game_engine(game_type)
            self.assertFalse(engine.validate(game_input))
            with patch.object(engine, "make_rng") as make_rng:
                with self.assertRaises(InvalidWager):
                    engine.play(game_input, 1)
                make_rng.assert_not_called()

    def test_invalid_bet_set_raised_before_randomness(self):
        engine = get_game_engine(GameType.ROULETTE)
        with patch.object(engine, "make_rng") as make_rng:
            with self.assertRaises(InvalidBetSet):
                engine.play(RouletteInput(bets=()), 1)
            make_rng.assert_not_called()

    def test_wrong_input_type(self):
        with self.assertRaises(TypeError):
            play_game("blackjack", SlotsInput(wager=10), 1)

    def test_play_does_not_mutate_input(self):
        game_input = SAMPLE_INPUTS[GameType.JEWEL_MINING]
        before = (game_input.wager, tuple(game_input.clicked_positions))
        get_game_engine(GameType.JEWEL_MINING).play(game_input, 5)
        self.assertEqual((game_input.wager, tuple(game_input.clicked_positions)), before)

    def test_round_half_up(self):
        self.assertEqual(round_half_up(2.5), 3)
        self.assertEqual(round_half_up(-2.5), -2)
        self.assertEqual(round_half_up(28.4), 28)
        self.assertEqual(round_half_up(19.0), 19)

    def test_metadata(self):
        meta = get_game_engine("blackjack").get_metadata()
        self.assertEqual(meta["game_type"], "blackjack")
        self.assertEqual((meta["min_wager"], meta["max_wager"]), (10, 45))


# ============================================================
# Blackjack
# ============================================================

class TestBlackjack(unittest.TestCase):

    def setUp(self):
        self.engine = BlackjackEngine()

    def _play_stacked(self, *deal_order, wager=30):
        with patch("casino_engine.games.blackjack.shuffled_deck", return_value=stacked(*deal_order)):
            return self.engine.play(BlackjackInput(wager=wager), 1)

    def test_should_hit_rules(self):
        self.assertTrue(should_hit([bj("5"), bj("6")], bj("2")))        # 11
        self.assertFalse(should_hit([bj("10"), bj("7")], bj("A")))      # 17
        self.assertTrue(should_hit([bj("10"), bj("2")], bj("7")))       # 12 vs 7
        self.assertFalse(should_hit([bj("10"), bj("6")], bj("6")))      # 16 vs 6
        self.assertTrue(should_hit([bj("10"), bj("6")], bj("A")))       # 16 vs ace (11)
        self.assertFalse(should_hit([bj("A"), bj("6")], bj("5")))       # soft 17

    def test_dealer_bust(self):
        outcome = self._play_stacked(bj("10"), bj("K"), bj("10"), bj("6"), bj("Q"))
        self.assertEqual(outcome.display.game_state, BlackjackState.DEALER_BUST)
        self.assertEqual(outcome.result, GameResult.WIN)
        self.assertEqual(outcome.delta, 30)
        self.assertEqual(outcome.display.dealer_total, 26)

    def test_player_bust_dealer_does_not_draw(self):
        outcome = self._play_stacked(bj("10"), bj("2"), bj("7"), bj("9"), bj("K"))
        self.assertEqual(outcome.display.game_state, BlackjackState.PLAYER_BUST)
        self.assertEqual(outcome.delta, -30)
        self.assertEqual(len(outcome.display.dealer_hand), 2)
        self.assertEqual(outcome.display.player_total, 22)
        self.assertEqual(outcome.display.dealer_total, 16)

    def test_push(self):
        outcome = self._play_stacked(bj("10"), bj("8"), bj("10"), bj("8"))
        self.assertEqual(outcome.display.game_state, BlackjackState.PUSH)
        self.assertEqual((outcome.result, outcome.delta), (GameResult.PUSH, 0))

    def test_player_win(self):
        outcome = self._play_stacked(bj("10"), bj("9"), bj("10"), bj("7"), wager=10)
        self.assertEqual(outcome.display.game_state, BlackjackState.PLAYER_WIN)
        self.assertEqual(outcome.delta, 10)

    def test_dealer_win(self):
        outcome = self._play_stacked(bj("10"), bj("7"), bj("10"), bj("9"))
        self.assertEqual(outcome.display.game_state, BlackjackState.DEALER_WIN)
        self.assertEqual(outcome.delta, -30)

    def test_soft_hands(self):
        """A,A is 12; standing against a 6 up-card; dealer hits 16 to 21."""
        outcome = self._play_stacked(bj("A"), bj("A", "♥"), bj("6"), bj("10"), bj("5"))
        self.assertEqual(outcome.display.player_total, 12)
        self.assertEqual(len(outcome.display.player_hand), 2)
        self.assertEqual(outcome.display.dealer_total, 21)
        self.assertEqual(outcome.display.game_state, BlackjackState.DEALER_WIN)

    def test_player_hits_until_standing(self):
        outcome = self._play_stacked(bj("2"), bj("3"), bj("10"), bj("7"), bj("4"), bj("2"), bj("8"))
        self.assertEqual([c.rank for c in outcome.display.player_hand], ["2", "3", "4", "2", "8"])
        self.assertEqual(outcome.display.player_total, 19)
        self.assertEqual(outcome.display.game_state, BlackjackState.PLAYER_WIN)

    def test_seed_12345_wager_30_is_consistent(self):
        outcome = self.engine.play(BlackjackInput(wager=30), 12345)
        d = outcome.display
        self.assertEqual(d.player_total, blackjack_total(d.player_hand))
        self.assertEqual(d.dealer_total, blackjack_total(d.dealer_hand))
        expected = {
            BlackjackState.PLAYER_BUST: (d.player_total > 21, -30),
            BlackjackState.DEALER_BUST: (d.player_total <= 21 and d.dealer_total > 21, 30),
            BlackjackState.PLAYER_WIN: (d.player_total > d.dealer_total, 30),
            BlackjackState.DEALER_WIN: (d.dealer_total > d.player_total, -30),
            BlackjackState.PUSH: (d.dealer_total == d.player_total, 0),
        }[d.game_state]
        self.assertTrue(expected[0])
        self.assertEqual(outcome.delta, expected[1])
        self.assertEqual(outcome.to_dict(), self.engine.play(BlackjackInput(wager=30), 12345).to_dict())

    def test_dealer_stands_at_17_or_more(self):
        for seed in range(1, 300):
            d = self.engine.play(BlackjackInput(wager=10), seed * 104729).display
            if d.game_state is not BlackjackState.PLAYER_BUST:
                self.assertGreaterEqual(d.dealer_total, 17)
                self.assertLess(blackjack_total(d.dealer_hand[:-1]), 17)


# ============================================================
# Pai Gow
# ============================================================

class TestPaiGow(unittest.TestCase):

    def setUp(self):
        self.engine = PaiGowEngine()

    def test_pair_goes_low(self):
        cards = [pg("9"), pg("A"), pg("K"), pg("A", "spades"), pg("Q"), pg("J"), pg("8")]
        high, low = arrange_hands(cards)
        self.assertEqual([c.rank for c in low], ["A", "A"])
        self.assertEqual([c.rank for c in high], ["K", "Q", "J", "9", "8"])

    def test_highest_pair_goes_low_other_pairs_high(self):
        cards = [pg("5"), pg("5", "clubs"), pg("K"), pg("K", "clubs"), pg("2"), pg("3"), pg("4")]
        high, low = arrange_hands(cards)
        self.assertEqual([c.rank for c in low], ["K", "K"])
        self.assertEqual([c.rank for c in high], ["5", "5", "4", "3", "2"])

    def test_no_pair_two_highest_go_low(self):
        cards = [pg("2"), pg("9"), pg("A"), pg("7"), pg("K"), pg("4"), pg("5")]
        high, low = arrange_hands(cards)
        self.assertEqual([c.rank for c in low], ["A", "K"])
        self.assertEqual(len(high), 5)
        self.assertEqual(arrange_house_way(cards), (high, low))

    def test_trips_split_into_pair_and_single(self):
        cards = [pg("7"), pg("7", "clubs"), pg("7", "spades"), pg("2"), pg("3"), pg("4"), pg("9")]
        high, low = arrange_hands(cards)
        self.assertEqual([c.rank for c in low], ["7", "7"])
        self.assertEqual(sorted(c.rank for c in high), ["2", "3", "4", "7", "9"])

    def test_hand_labels(self):
        self.assertEqual(describe_hand([pg("A"), pg("A", "clubs")]), "Pair of As")
        self.assertEqual(describe_hand([pg("K"), pg("3", "clubs")]), "K High")
        self.assertEqual(describe_hand([pg("2"), pg("5"), pg("9"), pg("J"), pg("K")]), "Flush")
        self.assertEqual(describe_hand([pg("9"), pg("9", "clubs"), pg("9", "spades"),
                                        pg("4"), pg("4", "clubs")]), "Full House")
        self.assertEqual(describe_hand([pg("9"), pg("9", "clubs"), pg("4", "spades"),
                                        pg("4"), pg("2", "clubs")]), "Two Pair")
        self.assertEqual(describe_hand([pg("9"), pg("9", "clubs"), pg("5", "spades"),
                                        pg("4"), pg("2", "clubs")]), "One Pair")
        self.assertEqual(describe_hand([pg("9"), pg("8", "clubs"), pg("5", "spades"),
                                        pg("4"), pg("2", "clubs")]), "High Card")

    def test_compare_highest_card_only(self):
        self.assertEqual(compare_hands([pg("A"), pg("2")], [pg("K"), pg("K", "clubs")]), HandResult.WIN)
        self.assertEqual(compare_hands([pg("Q")], [pg("K")]), HandResult.LOSE)
        self.assertEqual(compare_hands([pg("Q")], [pg("Q", "clubs")]), HandResult.TIE)

    def _play_dealt(self, player, dealer, wager=20):
        deck = list(player) + list(dealer)
        with patch("casino_engine.games.pai_gow.shuffled_deck", return_value=deck):
            return self.engine.play(PaiGowInput(wager=wager), 1)

    def test_win_both_hands_pays_less_commission(self):
        player = [pg("A"), pg("A", "spades"), pg("K"), pg("Q"), pg("J"), pg("9"), pg("8")]
        dealer = [pg("K", "clubs"), pg("K", "spades"), pg("Q", "clubs"), pg("J", "clubs"),
                  pg("9", "clubs"), pg("8", "clubs"), pg("7", "clubs")]
        outcome = self._play_dealt(player, dealer)
        self.assertEqual(outcome.result, GameResult.WIN)
        self.assertEqual(outcome.delta, 19)
        self.assertEqual(outcome.display.dealer_low_rank, "Pair of Ks")

    def test_lose_both_hands(self):
        player = [pg("K", "clubs"), pg("K", "spades"), pg("Q", "clubs"), pg("J", "clubs"),
                  pg("9", "clubs"), pg("8", "clubs"), pg("7", "diamonds")]
        dealer = [pg("A"), pg("A", "spades"), pg("K"), pg("Q"), pg("J"), pg("9"), pg("8")]
        outcome = self._play_dealt(player, dealer, wager=40)
        self.assertEqual((outcome.result, outcome.delta), (GameResult.LOSS, -40))

    def test_split_is_push(self):
        player = [pg("A"), pg("A", "spades"), pg("5"), pg("4"), pg("3"), pg("2"), pg("6")]
        dealer = [pg("K", "clubs"), pg("K", "spades"), pg("Q", "clubs"), pg("J", "clubs"),
                  pg("9", "clubs"), pg("8", "clubs"), pg("7", "clubs")]
        outcome = self._play_dealt(player, dealer)
        comparison = outcome.display.hand_comparison
        self.assertEqual(comparison.low_hand_result, HandResult.WIN)
        self.assertEqual(comparison.high_hand_result, HandResult.LOSE)
        self.assertEqual((outcome.result, outcome.delta), (GameResult.PUSH, 0))

    def test_real_deal_uses_first_fourteen_cards(self):
        outcome = self.engine.play(PaiGowInput(wager=15), 2024)
        d = outcome.display
        deck = shuffled_deck(LinearCongruentialRandom(2024), PAI_GOW_SUITS, PAI_GOW_RANKS, high_card_value)
        self.assertEqual(list(d.player_cards), deck[:7])
        self.assertEqual(list(d.dealer_cards), deck[7:14])
        self.assertEqual(len(d.player_high_hand) + len(d.player_low_hand), 7)
        self.assertEqual(set(d.player_high_hand) | set(d.player_low_hand), set(d.player_cards))


if __name__ == "__main__":
    unittest.main(verbosity=2)
