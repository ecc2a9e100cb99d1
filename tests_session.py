#!/usr/bin/env python3
"""
Tests for configuration, the session boundary, Monte Carlo and the CLI

Validates:
1.  GameConfig rejects impossible weights and wager ranges
2.  JSON overrides merge into the shipped defaults
3.  Daily spin allowance (free / premium) and day rollover
4.  Gains trimmed to the per-game daily cap
5.  Screen-time limit clamped to [1, 720] minutes
6.  Monte Carlo rates sum to one and track configured weights
7.  CLI plays a seeded round and reports bad input with exit code 2
"""

import json
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from casino_engine.games import get_game_engine
from casino_engine.games.base import GameResult, InvalidWager
from casino_engine.games.blackjack import BlackjackInput
from casino_engine.games.plinko import PlinkoInput
from casino_engine.games.slots import SlotsInput
from config.game_schema import (
    DEFAULT_GAME_CONFIGS, GameConfig, GameType, default_config, load_game_configs,
)
from tools import casino_cli
from tools.casino_montecarlo import OutcomeSimulator
from tools.screen_time import (
    CasinoSession, ClampedScreenTimeLimit, DailyLimitReached, DailyStats, ScreenTimeAdjuster,
)


class RecordingAdjuster(ScreenTimeAdjuster):

    def __init__(self, accept=True):
        self.accept = accept
        self.deltas = []

    def apply_delta(self, delta: int) -> bool:
        self.deltas.append(delta)
        return self.accept


def _always_win_slots(daily_cap=15):
    configs = dict(DEFAULT_GAME_CONFIGS)
    configs[GameType.SLOTS] = GameConfig(win_probability=1.0, loss_probability=0.0,
                                         min_wager=5, max_wager=60, daily_cap=daily_cap)
    return configs


# ============================================================
# Config
# ============================================================

def test_default_configs_cover_every_game():
    assert set(DEFAULT_GAME_CONFIGS) == set(GameType)
    slots = default_config("slots")
    assert (slots.min_wager, slots.max_wager, slots.daily_cap) == (5, 60, 120)
    assert slots.push_probability == pytest.approx(0.05)
    assert default_config(GameType.PAI_GOW).min_wager == 15


@pytest.mark.parametrize("fields", [
    {"win_probability": 0.7, "loss_probability": 0.5},
    {"win_probability": -0.1},
    {"min_wager": 50, "max_wager": 10},
    {"min_wager": 0},
    {"daily_cap": -1},
])
def test_game_config_rejects_bad_values(fields):
    with pytest.raises(ValidationError):
        GameConfig(**fields)


def test_game_config_is_frozen():
    with pytest.raises(ValidationError):
        default_config("slots").max_wager = 999


def test_json_overrides_merge(tmp_path):
    path = tmp_path / "casino.json"
    path.write_text(json.dumps({"slots": {"max_wager": 45}, "pai-gow": {"daily_cap": 60}}))
    configs = load_game_configs(path)
    assert configs[GameType.SLOTS].max_wager == 45
    assert configs[GameType.SLOTS].min_wager == 5
    assert configs[GameType.PAI_GOW].daily_cap == 60
    assert configs[GameType.BLACKJACK] == DEFAULT_GAME_CONFIGS[GameType.BLACKJACK]


def test_json_overrides_reject_unknown_game(tmp_path):
    path = tmp_path / "casino.json"
    path.write_text(json.dumps({"baccarat": {"max_wager": 45}}))
    with pytest.raises(ValueError):
        load_game_configs(path)


def test_engine_uses_injected_config():
    config = GameConfig(win_probability=0.1, loss_probability=0.85, min_wager=20, max_wager=30)
    engine = get_game_engine("slots", config)
    assert not engine.validate(SlotsInput(wager=10))
    assert engine.validate(SlotsInput(wager=25))


# ============================================================
# Session
# ============================================================

def test_free_tier_allows_three_games():
    session = CasinoSession(RecordingAdjuster())
    for seed in (11, 12, 13):
        session.play("blackjack", BlackjackInput(wager=10), seed)
    assert session.spins_remaining == 0
    with pytest.raises(DailyLimitReached):
        session.play("blackjack", BlackjackInput(wager=10), 14)
    assert session.stats.total_games_played == 3


def test_premium_tier_and_upgrade():
    assert CasinoSession(RecordingAdjuster(), subscribed=True).spins_remaining == 10
    session = CasinoSession(RecordingAdjuster())
    session.play("slots", SlotsInput(wager=5), 1)
    session.play("slots", SlotsInput(wager=5), 2)
    session.set_subscribed(True)
    assert session.spins_remaining == 8
    session.set_subscribed(False)
    assert session.spins_remaining == 3


def test_stats_and_adjuster_receive_delta():
    adjuster = RecordingAdjuster()
    session = CasinoSession(adjuster, subscribed=True)
    outcomes = [session.play("plinko", PlinkoInput(wager=10), seed) for seed in range(5)]
    assert adjuster.deltas == [o.delta for o in outcomes]
    stats = session.stats
    assert stats.net_screen_time_change == sum(adjuster.deltas)
    assert stats.win_count + stats.loss_count + stats.push_count == 5
    assert stats.to_dict()["total_spins_used"] == 5


def test_gain_trimmed_to_daily_cap():
    adjuster = RecordingAdjuster()
    session = CasinoSession(adjuster, configs=_always_win_slots(daily_cap=15))
    first = session.play("slots", SlotsInput(wager=10), 1)
    assert (first.result, first.delta) == (GameResult.WIN, 15)
    second = session.play("slots", SlotsInput(wager=10), 2)
    assert (second.result, second.delta) == (GameResult.PUSH, 0)
    assert adjuster.deltas == [15, 0]
    assert session.remaining_cap("slots") == 0
    assert session.stats.gained_by_game == {GameType.SLOTS: 15}


def test_losses_are_never_capped():
    configs = dict(DEFAULT_GAME_CONFIGS)
    configs[GameType.SLOTS] = GameConfig(win_probability=0.0, loss_probability=1.0, daily_cap=0)
    session = CasinoSession(RecordingAdjuster(), configs=configs)
    assert session.play("slots", SlotsInput(wager=30), 1).delta == -30


def test_day_rollover_resets_allowance():
    days = [date(2026, 3, 1)]
    session = CasinoSession(RecordingAdjuster(), today=lambda: days[0])
    for seed in (1, 2, 3):
        session.play("slots", SlotsInput(wager=5), seed)
    with pytest.raises(DailyLimitReached):
        session.play("slots", SlotsInput(wager=5), 4)
    days[0] += timedelta(days=1)
    session.play("slots", SlotsInput(wager=5), 5)
    assert session.stats.day == date(2026, 3, 2)
    assert session.stats.total_games_played == 1
    assert session.spins_remaining == 2


def test_invalid_input_does_not_spend_a_spin():
    session = CasinoSession(RecordingAdjuster())
    with pytest.raises(InvalidWager):
        session.play("slots", SlotsInput(wager=500), 1)
    assert session.spins_remaining == 3


def test_rejected_adjustment_still_recorded(caplog):
    session = CasinoSession(RecordingAdjuster(accept=False))
    with caplog.at_level("WARNING", logger="screentime.session"):
        session.play("slots", SlotsInput(wager=5), 1)
    assert session.stats.total_games_played == 1
    assert "rejected delta" in caplog.text


def test_limit_clamped():
    limit = ClampedScreenTimeLimit(current_minutes=715)
    limit.apply_delta(20)
    assert limit.current_minutes == 720
    limit = ClampedScreenTimeLimit(current_minutes=3)
    limit.apply_delta(-10)
    assert limit.current_minutes == 1
    limit.apply_delta(29)
    assert limit.current_minutes == 30


def test_daily_stats_ignore_losses_in_gains():
    stats = DailyStats(day=date(2026, 1, 1))
    stats.record(GameType.ROULETTE, GameResult.LOSS, -10)
    stats.record(GameType.ROULETTE, GameResult.WIN, 25)
    assert stats.gained_by_game == {GameType.ROULETTE: 25}
    assert stats.to_dict()["gained_by_game"] == {"roulette": 25}
    assert stats.net_screen_time_change == 15


# ============================================================
# Monte Carlo
# ============================================================

def test_simulation_rates_sum_to_one():
    sim = OutcomeSimulator()
    for game_type in GameType:
        summary = sim.run(game_type, rounds=200, seed=3)
        assert summary.wins + summary.losses + summary.pushes == 200
        assert summary.win_rate + summary.loss_rate + summary.push_rate == pytest.approx(1.0)
        assert sum(summary.delta_distribution.values()) == 200


def test_simulation_is_reproducible():
    first = OutcomeSimulator().run("plinko", rounds=300, seed=9).to_dict()
    second = OutcomeSimulator().run("plinko", rounds=300, seed=9).to_dict()
    first.pop("duration_s")
    second.pop("duration_s")
    assert first == second


def test_slots_win_rate_tracks_config():
    summary = OutcomeSimulator().run("slots", rounds=3000, seed=1)
    assert summary.win_rate == pytest.approx(0.10, abs=0.03)
    assert summary.push_rate == pytest.approx(0.05, abs=0.03)


def test_perfect_math_player_always_wins():
    summary = OutcomeSimulator().run("math-problems", rounds=100, seed=4)
    assert summary.win_rate == 1.0
    assert summary.return_ratio == pytest.approx(2.0)


# ============================================================
# CLI
# ============================================================

def test_cli_json_round(capsys):
    code = casino_cli.main(["blackjack", "--wager", "30", "--seed", "12345", "--json"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["game_type"] == "blackjack"
    assert payload["seed"] == 12345
    assert payload["result"] in ("win", "loss", "push")
    expected = get_game_engine("blackjack").play(BlackjackInput(wager=30), 12345).to_dict()
    assert payload["delta"] == expected["delta"]


def test_cli_roulette_bets(capsys):
    code = casino_cli.main(["roulette", "--bet", "color:red:10", "--bet", "single:7:5",
                            "--seed", "1", "--json"])
    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    bets = payload["display"]["winning_bets"] + payload["display"]["losing_bets"]
    assert {b["kind"] for b in bets} == {"color", "single"}


def test_cli_bad_wager_exit_code():
    assert casino_cli.main(["slots", "--wager", "4", "--seed", "1"]) == 2


def test_cli_bad_bet_format():
    with pytest.raises(SystemExit):
        casino_cli.main(["roulette", "--bet", "red-10"])


def test_cli_simulate_json(capsys):
    assert casino_cli.main(["plinko", "--simulate", "50", "--seed", "2", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["rounds"] == 50
