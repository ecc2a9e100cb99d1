#!/usr/bin/env python3
"""
Screen-Time Casino - Command Line

Usage:
    python -m tools.casino_cli blackjack --wager 30 --seed 12345
    python -m tools.casino_cli roulette --bet color:red:10 --bet single:7:5
    python -m tools.casino_cli jewel-mining --wager 20 --click 0 --click 5 --click 9
    python -m tools.casino_cli math-problems --difficulty easy --seed 7 --problems
    python -m tools.casino_cli math-problems --seed 7 --answers 91 40 77 102 63 --times 9 11 8 12 10
    python -m tools.casino_cli plinko --simulate 20000
    python -m tools.casino_cli slots --seed 99 --json
"""

import argparse
import json
import logging
import sys
import time
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from casino_engine.games import GAME_TYPES, get_game_engine
from casino_engine.games.base import GameInputError, GameResult
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
from config.settings import setup_logging
from tools.casino_montecarlo import OutcomeSimulator

logger = logging.getLogger("screentime.cli")
console = Console()

RESULT_STYLE = {GameResult.WIN: "green", GameResult.LOSS: "red", GameResult.PUSH: "yellow"}


def parse_bet(text: str) -> RouletteBet:
    """kind:target:amount, e.g. color:red:10, single:7:5, dozen:2:10."""
    try:
        kind, target, amount = text.split(":")
        kind = BetKind(kind)
        if kind in (BetKind.SINGLE, BetKind.DOZEN, BetKind.COLUMN):
            target = int(target)
        return RouletteBet(kind, target, int(amount))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Bad bet '{text}', expected kind:target:amount") from None


def build_input(game_type: GameType, args, seed: int):
    wager = args.wager
    if game_type is GameType.SLOTS:
        return SlotsInput(wager=wager)
    if game_type is GameType.BLACKJACK:
        return BlackjackInput(wager=wager)
    if game_type is GameType.ROULETTE:
        return RouletteInput(bets=tuple(args.bet or [RouletteBet(BetKind.COLOR, "red", wager)]))
    if game_type is GameType.PLINKO:
        return PlinkoInput(wager=wager)
    if game_type is GameType.PAI_GOW:
        return PaiGowInput(wager=wager)
    if game_type is GameType.JEWEL_MINING:
        return JewelMiningInput(wager=wager, clicked_positions=tuple(args.click or ()))
    if game_type is GameType.MATH:
        difficulty = Difficulty(args.difficulty)
        tier = DIFFICULTY_TIERS[difficulty]
        return MathChallengeInput(
            wager=wager,
            difficulty=difficulty,
            time_limit=args.time_limit or tier.time_limit * tier.problem_count,
            user_answers=tuple(args.answers or ()),
            time_spent=tuple(args.times or [float(tier.time_limit)] * tier.problem_count),
        )
    raise ValueError(f"Unhandled game type: {game_type}")


def render_outcome(game_type: GameType, seed: int, outcome) -> None:
    style = RESULT_STYLE[outcome.result]
    table = Table(show_header=False, box=None)
    for key, value in outcome.to_dict()["display"].items():
        if isinstance(value, list) and value and isinstance(value[0], dict) and "rank" in value[0]:
            value = " ".join(f"{c['rank']}{c['suit'][0] if len(c['suit']) > 1 else c['suit']}" for c in value)
        table.add_row(f"[dim]{key}[/dim]", str(value))
    console.print(Panel(
        table,
        title=f"{game_type.value} · seed {seed}",
        subtitle=f"[bold {style}]{outcome.result.value.upper()} {outcome.delta:+d} min[/bold {style}]",
        border_style=style,
    ))


def render_problems(difficulty: Difficulty, seed: int) -> None:
    table = Table(title=f"{difficulty.value} problems · seed {seed}")
    table.add_column("#")
    table.add_column("Question")
    table.add_column("Options")
    table.add_column("Time (s)")
    for p in generate_problems(difficulty, seed):
        table.add_row(p.id, p.question, "  ".join(str(o) for o in p.options), str(p.time_limit))
    console.print(table)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Play the screen-time casino engines")
    parser.add_argument("game_type", choices=GAME_TYPES)
    parser.add_argument("--wager", type=int, default=None, help="Minutes wagered (default: game minimum)")
    parser.add_argument("--seed", type=int, default=None, help="Round seed (default: epoch ms)")
    parser.add_argument("--bet", type=parse_bet, action="append", help="Roulette bet kind:target:amount")
    parser.add_argument("--click", type=int, action="append", help="Jewel Mining cell to reveal (0-15)")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default="easy")
    parser.add_argument("--time-limit", type=float, default=None)
    parser.add_argument("--answers", type=int, nargs="*")
    parser.add_argument("--times", type=float, nargs="*")
    parser.add_argument("--problems", action="store_true", help="Show the Math Challenge batch for the seed")
    parser.add_argument("--simulate", type=int, default=0, metavar="ROUNDS")
    parser.add_argument("--json", action="store_true")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    engine = get_game_engine(args.game_type)
    game_type = engine.game_type
    seed = args.seed if args.seed is not None else int(time.time() * 1000)
    if args.wager is None:
        args.wager = engine.config.min_wager

    if args.problems:
        render_problems(Difficulty(args.difficulty), seed)
        return 0

    if args.simulate:
        summary = OutcomeSimulator().run(game_type, rounds=args.simulate, seed=seed)
        if args.json:
            print(json.dumps(summary.to_dict(), indent=2))
        else:
            console.print(Panel(summary.summary(), title="Monte Carlo", border_style="cyan"))
        return 0

    try:
        outcome = engine.play(build_input(game_type, args, seed), seed)
    except GameInputError as e:
        console.print(f"[red]❌ {type(e).__name__}: {e}[/red]")
        return 2

    logger.info(f"{game_type.value}: seed={seed} {outcome.result.value} {outcome.delta:+d} min")
    if args.json:
        print(json.dumps({"game_type": game_type.value, "seed": seed, **outcome.to_dict()},
                         indent=2, ensure_ascii=False))
    else:
        render_outcome(game_type, seed, outcome)
    return 0


if __name__ == "__main__":
    sys.exit(main())
