#!/usr/bin/env python3
"""
Tests for the draw-driven games: Slots, Roulette, Plinko, Jewel Mining

Validates:
1.  Slots win dressing: triple reels, 1.5x-2.0x floored reward
2.  Slots loss dressing never shows three of a kind
3.  Roulette pure settlement (payout includes stake, net = payout - losing stakes)
4.  Roulette payouts return 36 units per unit staked over the 37 pockets
5.  Roulette ball animation ends on the winning pocket
6.  Roulette rejects empty / malformed bet sets before drawing
7.  Plinko slot mapping and clamping, settlement per multiplier
8.  Jewel Mining bomb placement, gem accumulation, cap, bomb hit
9.  Jewel Mining click validation
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from casino_engine.games.base import GameResult, InvalidBetSet, InvalidWager
from casino_engine.games.jewel_mining import (
    BOMB_COUNT, GRID_SIZE, Cell, FinalState, JewelMiningEngine, JewelMiningInput,
    build_grid, generate_bomb_positions,
)
from casino_engine.games.plinko import (
    LEFT, PLINKO_MULTIPLIERS, PLINKO_ROWS, RIGHT, PlinkoEngine, PlinkoInput,
    chip_positions, final_slot,
)
from casino_engine.games.roulette import (
    POCKETS, BetKind, RouletteBet, RouletteEngine, RouletteInput, ball_animation,
    evaluate_bets, is_bet_winner, number_color,
)
from casino_engine.games.slots import SLOT_SYMBOLS, SlotsEngine, SlotsInput, is_winning_combination
from tools.seeded_rng import ParkMillerRandom, SeededRandom


class ScriptedRandom(SeededRandom):
    """Replays a fixed list of draws."""

    def __init__(self, values):
        super().__init__(0)
        self.values = list(values)

    def next(self) -> float:
        return self.values.pop(0)


# Draws that place the four bombs on cells 0-3
BOMBS_ON_0_TO_3 = [0.01, 0.07, 0.13, 0.19]


# ============================================================
# Slots
# ============================================================

def test_slots_win_dressing():
    """Class draw 0.05 < 0.10 wins; cherries; reward floor(10 * 1.75)."""
    outcome = SlotsEngine()._play(SlotsInput(wager=10), ScriptedRandom([0.05, 0.0, 0.5]))
    assert outcome.result is GameResult.WIN
    assert outcome.delta == 17
    assert outcome.display.reels == ("🍒", "🍒", "🍒")
    assert outcome.display.is_win
    assert outcome.display.payline == "Three 🍒s!"


def test_slots_reward_bounds():
    engine = SlotsEngine()
    assert engine._play(SlotsInput(wager=60), ScriptedRandom([0.0, 0.99, 0.0])).delta == 90
    assert engine._play(SlotsInput(wager=60), ScriptedRandom([0.0, 0.99, 0.999999])).delta == 119


def test_slots_loss_breaks_accidental_triple():
    outcome = SlotsEngine()._play(SlotsInput(wager=10), ScriptedRandom([0.5, 0.0, 0.0, 0.0]))
    assert outcome.result is GameResult.LOSS
    assert outcome.delta == -10
    assert outcome.display.reels == ("🍒", "🍒", "🍋")
    assert outcome.display.payline == "No match"


def test_slots_push_band():
    outcome = SlotsEngine()._play(SlotsInput(wager=10), ScriptedRandom([0.97, 0.2, 0.4, 0.6]))
    assert outcome.result is GameResult.PUSH
    assert outcome.delta == 0
    assert not outcome.display.is_win


def test_slots_reels_never_triple_unless_win():
    engine = SlotsEngine()
    for seed in range(1, 400):
        outcome = engine.play(SlotsInput(wager=10), seed * 7919)
        assert is_winning_combination(outcome.display.reels) == (outcome.result is GameResult.WIN)
        assert all(symbol in SLOT_SYMBOLS for symbol in outcome.display.reels)


# ============================================================
# Roulette
# ============================================================

def test_roulette_pure_settlement_on_seven():
    bets = [RouletteBet(BetKind.COLOR, "red", 10), RouletteBet(BetKind.SINGLE, 7, 5)]
    settlement = evaluate_bets(bets, 7)
    assert settlement.total_payout == 20 + 180
    assert settlement.total_loss == 0
    assert settlement.net == 200
    assert len(settlement.winning_bets) == 2


def test_roulette_net_counts_only_losing_stakes():
    bets = [RouletteBet(BetKind.COLOR, "black", 10), RouletteBet(BetKind.SINGLE, 7, 5)]
    settlement = evaluate_bets(bets, 7)
    assert (settlement.total_payout, settlement.total_loss, settlement.net) == (180, 10, 170)
    assert settlement.losing_bets == (bets[0],)


def test_zero_loses_outside_bets():
    for bet in (RouletteBet(BetKind.COLOR, "red", 5), RouletteBet(BetKind.COLOR, "black", 5),
                RouletteBet(BetKind.PARITY, "even", 5), RouletteBet(BetKind.PARITY, "odd", 5),
                RouletteBet(BetKind.DOZEN, 1, 5), RouletteBet(BetKind.COLUMN, 3, 5)):
        assert not is_bet_winner(bet, 0)
    assert is_bet_winner(RouletteBet(BetKind.SINGLE, 0, 5), 0)
    assert number_color(0) == "green"


def test_every_bet_returns_36_units_over_the_wheel():
    """Each bet wins on exactly 36 / multiplier pockets."""
    bets = [RouletteBet(BetKind.COLOR, "red", 1), RouletteBet(BetKind.COLOR, "black", 1),
            RouletteBet(BetKind.PARITY, "odd", 1), RouletteBet(BetKind.PARITY, "even", 1)]
    bets += [RouletteBet(BetKind.DOZEN, t, 1) for t in (1, 2, 3)]
    bets += [RouletteBet(BetKind.COLUMN, t, 1) for t in (1, 2, 3)]
    bets += [RouletteBet(BetKind.SINGLE, t, 1) for t in range(POCKETS)]
    for bet in bets:
        returned = sum(evaluate_bets([bet], n).total_payout for n in range(POCKETS))
        assert returned == 36, bet


def test_dozen_and_column_membership():
    assert [n for n in range(POCKETS) if is_bet_winner(RouletteBet(BetKind.DOZEN, 2, 1), n)] == list(range(13, 25))
    assert [n for n in range(1, 10) if is_bet_winner(RouletteBet(BetKind.COLUMN, 1, 1), n)] == [1, 4, 7]
    assert [n for n in range(1, 10) if is_bet_winner(RouletteBet(BetKind.COLUMN, 3, 1), n)] == [3, 6, 9]


def test_ball_animation_ends_on_winner():
    path = ball_animation(17, ScriptedRandom([0.0]))
    assert len(path) == 2 * POCKETS + 18
    assert path[-1] == 17
    path = ball_animation(0, ScriptedRandom([0.9]))
    assert len(path) == 3 * POCKETS + 1
    assert path[-1] == 0


def test_roulette_engine_spin():
    game_input = RouletteInput(bets=(RouletteBet(BetKind.COLOR, "red", 10), RouletteBet(BetKind.SINGLE, 7, 5)))
    outcome = RouletteEngine()._play(game_input, ScriptedRandom([7.5 / 37, 0.0]))
    assert outcome.display.winning_number == 7
    assert outcome.display.winning_color == "red"
    assert (outcome.result, outcome.delta) == (GameResult.WIN, 200)
    assert outcome.display.ball_animation[-1] == 7


def test_roulette_all_losing():
    game_input = RouletteInput(bets=(RouletteBet(BetKind.PARITY, "odd", 20),))
    outcome = RouletteEngine()._play(game_input, ScriptedRandom([0.0, 0.0]))
    assert outcome.display.winning_number == 0
    assert (outcome.result, outcome.delta) == (GameResult.LOSS, -20)


def test_roulette_spin_stays_on_wheel():
    engine = RouletteEngine()
    game_input = RouletteInput(bets=(RouletteBet(BetKind.DOZEN, 3, 10),))
    numbers = {engine.play(game_input, seed * 104729).display.winning_number for seed in range(1, 600)}
    assert numbers <= set(range(POCKETS))
    assert len(numbers) > 30


@pytest.mark.parametrize("bets, error", [
    ((), InvalidBetSet),
    ((RouletteBet("split", 7, 5),), InvalidBetSet),
    ((RouletteBet(BetKind.SINGLE, 37, 5),), InvalidBetSet),
    ((RouletteBet(BetKind.COLOR, "green", 5),), InvalidBetSet),
    ((RouletteBet(BetKind.DOZEN, 4, 5),), InvalidBetSet),
    ((RouletteBet(BetKind.COLOR, "red", 0),), InvalidBetSet),
    ((RouletteBet(BetKind.COLOR, "red", -5), RouletteBet(BetKind.COLOR, "black", 15)), InvalidBetSet),
    ((RouletteBet(BetKind.COLOR, "red", 4),), InvalidWager),
    ((RouletteBet(BetKind.COLOR, "red", 100), RouletteBet(BetKind.SINGLE, 0, 21)), InvalidWager),
])
def test_roulette_rejects_bad_bet_sets(bets, error):
    engine = RouletteEngine()
    assert not engine.validate(RouletteInput(bets=bets))
    with pytest.raises(error):
        engine.play(RouletteInput(bets=bets), 1)


# ============================================================
# Plinko
# ============================================================

def test_plinko_slot_mapping():
    assert final_slot([RIGHT] * PLINKO_ROWS) == len(PLINKO_MULTIPLIERS) - 1
    assert final_slot([LEFT] * PLINKO_ROWS) == 0
    assert final_slot([LEFT, RIGHT] * 6) == 5
    assert final_slot([RIGHT] * 5 + [LEFT] * 7) == 3


def test_plinko_chip_positions_follow_path():
    positions = chip_positions([RIGHT, RIGHT, LEFT])
    assert [(p.row, p.position) for p in positions] == [(0, 0), (1, 1), (2, 2), (3, 1)]


def test_plinko_far_edge_loses_most():
    outcome = PlinkoEngine()._play(PlinkoInput(wager=10), ScriptedRandom([0.9] * PLINKO_ROWS))
    assert outcome.display.final_slot == 10
    assert outcome.display.multiplier == 0.1
    assert (outcome.result, outcome.delta) == (GameResult.LOSS, -9)


def test_plinko_centre_doubles():
    outcome = PlinkoEngine()._play(PlinkoInput(wager=10), ScriptedRandom([0.1, 0.9] * 6))
    assert outcome.display.final_slot == 5
    assert (outcome.result, outcome.delta) == (GameResult.WIN, 10)
    assert len(outcome.display.chip_positions) == PLINKO_ROWS + 1


def test_plinko_even_money_slot_pushes():
    outcome = PlinkoEngine()._play(PlinkoInput(wager=25), ScriptedRandom([0.9] * 5 + [0.1] * 7))
    assert outcome.display.multiplier == 1.0
    assert (outcome.result, outcome.delta) == (GameResult.PUSH, 0)


def test_plinko_loss_slots():
    engine = PlinkoEngine()
    outcome = engine._play(PlinkoInput(wager=20), ScriptedRandom([0.9] * 8 + [0.1] * 4))
    assert (outcome.display.final_slot, outcome.delta) == (9, -14)
    outcome = engine._play(PlinkoInput(wager=20), ScriptedRandom([0.1] * 7 + [0.9] * 5))
    assert (outcome.display.final_slot, outcome.delta) == (3, 0)


def test_plinko_twelve_rows_land_on_odd_slots_or_edges():
    """An even number of bounces moves the chip an even number of columns."""
    engine = PlinkoEngine()
    slots = {engine.play(PlinkoInput(wager=10), seed).display.final_slot for seed in range(2000)}
    assert slots <= {0, 1, 3, 5, 7, 9, 10}


def test_plinko_slot_always_on_board():
    engine = PlinkoEngine()
    for seed in range(0, 500):
        outcome = engine.play(PlinkoInput(wager=20), seed)
        assert 0 <= outcome.display.final_slot < len(PLINKO_MULTIPLIERS)
        assert len(outcome.display.path) == PLINKO_ROWS


# ============================================================
# Jewel Mining
# ============================================================

def test_bomb_positions_from_draws():
    assert generate_bomb_positions(ScriptedRandom(BOMBS_ON_0_TO_3)) == [0, 1, 2, 3]


def test_bomb_redraws_skip_duplicates():
    draws = [0.01, 0.02, 0.5, 0.5, 0.7, 0.99]
    assert generate_bomb_positions(ScriptedRandom(draws)) == [0, 8, 11, 15]


def test_grid_always_has_four_bombs():
    for seed in range(1, 300):
        grid = build_grid(generate_bomb_positions(ParkMillerRandom(seed * 31)))
        assert len(grid) == GRID_SIZE
        assert grid.count(Cell.BOMB) == BOMB_COUNT


def _mine(wager, clicks):
    return JewelMiningEngine()._play(JewelMiningInput(wager=wager, clicked_positions=tuple(clicks)),
                                     ScriptedRandom(BOMBS_ON_0_TO_3))


def test_partial_winnings_continue():
    outcome = _mine(10, [4, 5, 6])
    assert (outcome.result, outcome.delta) == (GameResult.WIN, 6)
    assert outcome.display.final_state is FinalState.CONTINUE
    assert outcome.display.accumulated_winnings == 6


def test_winnings_capped_at_wager():
    outcome = _mine(20, [4, 5, 6, 7, 8, 9, 10])
    assert (outcome.result, outcome.delta) == (GameResult.WIN, 20)
    assert outcome.display.final_state is FinalState.WON
    assert outcome.display.revealed == (4, 5, 6, 7, 8)


def test_cap_trims_overshoot():
    """11 * 0.2 floors to 2 per gem; the sixth gem would reach 12."""
    outcome = _mine(11, [4, 5, 6, 7, 8, 9, 10])
    assert outcome.delta == 11
    assert len(outcome.display.revealed) == 6


def test_bomb_loses_wager():
    outcome = _mine(30, [4, 5, 2, 6])
    assert (outcome.result, outcome.delta) == (GameResult.LOSS, -30)
    assert outcome.display.final_state is FinalState.LOST
    assert outcome.display.bomb_position == 2
    assert outcome.display.accumulated_winnings == 0
    assert outcome.display.revealed == (4, 5, 2)


def test_no_clicks_is_push():
    outcome = _mine(10, [])
    assert (outcome.result, outcome.delta) == (GameResult.PUSH, 0)
    assert outcome.display.final_state is FinalState.CONTINUE
    assert outcome.display.grid.count(Cell.BOMB) == BOMB_COUNT


@pytest.mark.parametrize("clicks", [(16,), (-1,), (3, 3), ("4",), (1.0,)])
def test_jewel_mining_rejects_bad_clicks(clicks):
    engine = JewelMiningEngine()
    game_input = JewelMiningInput(wager=20, clicked_positions=clicks)
    assert not engine.validate(game_input)
    with pytest.raises(InvalidWager):
        engine.play(game_input, 1)
