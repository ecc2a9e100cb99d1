"""
Screen-Time Casino - Monte Carlo Outcome Measurement

Plays N seeded rounds of one game and reports how often it wins,
loses and pushes, plus the average delta per round. Useful for
checking that an engine's long-run behaviour matches its configured
win/loss weights.

Usage:
    from tools.casino_montecarlo import OutcomeSimulator
    sim = OutcomeSimulator()
    summary = sim.run("plinko", rounds=50_000, seed=1)
    print(summary.summary())
"""

from __future__ import annotations

import logging
import random
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Optional

from casino_engine.games import get_game_engine
from casino_engine.games.base import GameResult
from casino_engine.games.blackjack import BlackjackInput
from casino_engine.games.jewel_mining import JewelMiningInput
from casino_engine.games.math_challenge import (
    DIFFICULTY_TIERS, Difficulty, MathChallengeInput, generate_problems,
)
from casino_engine.games.pai_gow import PaiGowInput
from casino_engine.games.plinko import PlinkoInput
from casino_engine.games.roulette import BetKind, RouletteBet, RouletteInput
from casino_engine.games.slots import SlotsInput
from config.game_schema import GameType

logger = logging.getLogger("screentime.montecarlo")


# ═══════════════════════════════════════════════════════════════
# Data Structures
# ═══════════════════════════════════════════════════════════════

@dataclass
class SimulationSummary:
    """Aggregate outcome rates for one game over a batch of seeded rounds."""
    game_type: str
    rounds: int
    seed: int
    wins: int = 0
    losses: int = 0
    pushes: int = 0
    total_wagered: int = 0
    total_delta: int = 0
    max_gain: int = 0
    max_loss: int = 0
    delta_distribution: dict = field(default_factory=dict)
    duration_seconds: float = 0.0

    @property
    def win_rate(self) -> float:
        return self.wins / self.rounds if self.rounds else 0.0

    @property
    def loss_rate(self) -> float:
        return self.losses / self.rounds if self.rounds else 0.0

    @property
    def push_rate(self) -> float:
        return self.pushes / self.rounds if self.rounds else 0.0

    @property
    def avg_delta(self) -> float:
        return self.total_delta / self.rounds if self.rounds else 0.0

    @property
    def return_ratio(self) -> float:
        """Minutes returned per minute wagered, stake included (1.0 = break-even)."""
        if not self.total_wagered:
            return 0.0
        return (self.total_wagered + self.total_delta) / self.total_wagered

    def summary(self) -> str:
        return "\n".join([
            f"═══ Monte Carlo: {self.game_type.upper()} ═══",
            f"  Rounds:      {self.rounds:,} (batch seed {self.seed})",
            f"  Win / Loss / Push: {self.win_rate*100:.2f}% / {self.loss_rate*100:.2f}% / {self.push_rate*100:.2f}%",
            f"  Avg Delta:   {self.avg_delta:+.3f} min",
            f"  Return:      {self.return_ratio*100:.2f}%",
            f"  Best / Worst: {self.max_gain:+d} / {self.max_loss:+d} min",
            f"  Duration:    {self.duration_seconds:.2f}s",
        ])

    def to_dict(self) -> dict:
        return {
            "game_type": self.game_type,
            "rounds": self.rounds,
            "seed": self.seed,
            "win_rate": round(self.win_rate, 6),
            "loss_rate": round(self.loss_rate, 6),
            "push_rate": round(self.push_rate, 6),
            "avg_delta": round(self.avg_delta, 6),
            "return_ratio": round(self.return_ratio, 6),
            "total_wagered": self.total_wagered,
            "total_delta": self.total_delta,
            "max_gain": self.max_gain,
            "max_loss": self.max_loss,
            "delta_distribution": {str(k): v for k, v in sorted(self.delta_distribution.items())},
            "duration_s": round(self.duration_seconds, 3),
        }


# ═══════════════════════════════════════════════════════════════
# Default Inputs
# ═══════════════════════════════════════════════════════════════

def _perfect_math_player(seed: int, wager: int = 10,
                         difficulty: Difficulty = Difficulty.EASY) -> MathChallengeInput:
    """Answers every problem correctly at the target pace."""
    tier = DIFFICULTY_TIERS[difficulty]
    problems = generate_problems(difficulty, seed)
    return MathChallengeInput(
        wager=wager,
        difficulty=difficulty,
        time_limit=tier.time_limit * tier.problem_count,
        user_answers=tuple(p.answer for p in problems),
        time_spent=tuple(float(tier.target_time) for _ in problems),
    )


DEFAULT_INPUTS: dict[GameType, Callable[[int], object]] = {
    GameType.SLOTS: lambda seed: SlotsInput(wager=10),
    GameType.BLACKJACK: lambda seed: BlackjackInput(wager=10),
    GameType.ROULETTE: lambda seed: RouletteInput(bets=(RouletteBet(BetKind.COLOR, "red", 10),)),
    GameType.PLINKO: lambda seed: PlinkoInput(wager=10),
    GameType.PAI_GOW: lambda seed: PaiGowInput(wager=20),
    GameType.MATH: _perfect_math_player,
    GameType.JEWEL_MINING: lambda seed: JewelMiningInput(wager=10, clicked_positions=(0, 1, 2)),
}


def input_wager(game_input) -> int:
    if isinstance(game_input, RouletteInput):
        return sum(bet.amount for bet in game_input.bets)
    return game_input.wager


# ═══════════════════════════════════════════════════════════════
# Simulator
# ═══════════════════════════════════════════════════════════════

class OutcomeSimulator:
    """Runs an engine across a reproducible batch of round seeds.

    Round seeds are drawn from random.Random(seed) in the epoch-millisecond
    range the app uses; adjacent small integers would give Park-Miller
    streams with nearly identical first draws.
    """

    seed_bits = 41

    def run(self, game_type, rounds: int = 10_000, seed: int = 1,
            input_factory: Optional[Callable[[int], object]] = None) -> SimulationSummary:
        engine = get_game_engine(game_type)
        factory = input_factory or DEFAULT_INPUTS[engine.game_type]
        summary = SimulationSummary(game_type=engine.game_type.value, rounds=rounds, seed=seed)
        distribution = Counter()

        seeder = random.Random(seed)
        start = time.time()
        for _ in range(rounds):
            round_seed = seeder.randrange(1, 2 ** self.seed_bits)
            game_input = factory(round_seed)
            outcome = engine.play(game_input, round_seed)

            summary.total_wagered += input_wager(game_input)
            summary.total_delta += outcome.delta
            summary.max_gain = max(summary.max_gain, outcome.delta)
            summary.max_loss = min(summary.max_loss, outcome.delta)
            distribution[outcome.delta] += 1
            if outcome.result is GameResult.WIN:
                summary.wins += 1
            elif outcome.result is GameResult.LOSS:
                summary.losses += 1
            else:
                summary.pushes += 1

        summary.delta_distribution = dict(distribution)
        summary.duration_seconds = time.time() - start
        logger.info(f"{summary.game_type}: {rounds:,} rounds, avg delta {summary.avg_delta:+.3f}")
        return summary

    def run_all(self, rounds: int = 10_000, seed: int = 1) -> list:
        return [self.run(game_type, rounds=rounds, seed=seed) for game_type in GameType]
