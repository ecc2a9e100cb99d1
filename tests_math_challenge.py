#!/usr/bin/env python3
"""
Tests for Math Challenge

Validates:
1.  Same (difficulty, seed) regenerates the identical batch
2.  Every problem has four distinct options including the answer
3.  Problem shapes per tier (operand ranges, positive results)
4.  Grading: accuracy thresholds, speed bonus clamp, loss fraction
5.  Input validation (wager, difficulty, time limit, timings)
"""

import re
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from casino_engine.games.base import GameResult, InvalidWager
from casino_engine.games.math_challenge import (
    DIFFICULTY_TIERS, OPTION_COUNT, Difficulty, MathChallengeEngine,
    MathChallengeInput, generate_options, generate_problems, speed_bonus,
)
from tools.seeded_rng import LinearCongruentialRandom


def _submission(difficulty, seed, wager=10, correct=None, seconds=None):
    """Answer the first `correct` problems right and the rest wrong."""
    problems = generate_problems(difficulty, seed)
    tier = DIFFICULTY_TIERS[difficulty]
    correct = len(problems) if correct is None else correct
    answers = tuple(p.answer if i < correct else p.answer + 10_000 for i, p in enumerate(problems))
    seconds = tier.target_time if seconds is None else seconds
    return MathChallengeInput(
        wager=wager,
        difficulty=difficulty,
        time_limit=tier.time_limit * tier.problem_count,
        user_answers=answers,
        time_spent=tuple(float(seconds) for _ in problems),
    )


# ============================================================
# Generation
# ============================================================

def test_regeneration_is_identical():
    for difficulty in Difficulty:
        for seed in (1, 42, 1_700_000_000_000):
            first = [p.to_dict() for p in generate_problems(difficulty, seed)]
            second = [p.to_dict() for p in MathChallengeEngine().generate_problems(difficulty, seed)]
            assert first == second


def test_batch_sizes_follow_tiers():
    for difficulty, tier in DIFFICULTY_TIERS.items():
        problems = generate_problems(difficulty, 9)
        assert len(problems) == tier.problem_count
        assert all(p.time_limit == tier.time_limit for p in problems)
        assert [p.id for p in problems] == [str(i) for i in range(tier.problem_count)]
    assert len(generate_problems("easy", 9, count=8)) == 8


def test_options_are_four_unique_values_with_answer():
    for difficulty in Difficulty:
        for seed in range(300):
            for problem in generate_problems(difficulty, seed):
                assert len(problem.options) == OPTION_COUNT
                assert len(set(problem.options)) == OPTION_COUNT
                assert problem.answer in problem.options


def test_small_answers_still_get_three_distractors():
    """4 = 2^2 has a spread of two; generation must still terminate."""
    options = generate_options(4, LinearCongruentialRandom(5))
    assert 4 in options
    assert len(set(options)) == OPTION_COUNT
    assert all(2 <= o <= 6 for o in options)


def test_easy_problem_shapes():
    for seed in range(200):
        for p in generate_problems(Difficulty.EASY, seed):
            numbers = [int(n) for n in re.findall(r"\d+", p.question)]
            assert len(numbers) == 3
            if "+" in p.question:
                assert all(10 <= n <= 50 for n in numbers)
                assert p.answer == sum(numbers)
            else:
                a, b, c = numbers
                assert 10 <= b <= 30 and 5 <= c <= 20
                assert p.answer == a - b - c
                assert 10 <= p.answer <= 80


def test_medium_problem_shapes():
    for seed in range(200):
        for p in generate_problems(Difficulty.MEDIUM, seed):
            a, b = [int(n) for n in re.findall(r"\d+", p.question)]
            if "×" in p.question:
                assert 12 <= a <= 25 and 11 <= b <= 20
                assert p.answer == a * b
            else:
                assert "÷" in p.question
                assert a % b == 0
                assert p.answer == a // b
                assert 8 <= p.answer <= 25


def test_hard_problem_shapes():
    for seed in range(200):
        for p in generate_problems(Difficulty.HARD, seed):
            base, exponent = [int(n) for n in re.findall(r"\d+", p.question)]
            assert 2 <= base <= 9 and 2 <= exponent <= 4
            assert p.answer == base ** exponent


# ============================================================
# Grading
# ============================================================

def test_speed_bonus_clamped():
    assert speed_bonus(15, Difficulty.EASY) == 1.0
    assert speed_bonus(1, Difficulty.EASY) == 2.0
    assert speed_bonus(1000, Difficulty.HARD) == 0.5


def test_perfect_at_target_pace_pays_wager():
    outcome = MathChallengeEngine().play(_submission(Difficulty.EASY, 77), 77)
    assert (outcome.result, outcome.delta) == (GameResult.WIN, 10)
    assert outcome.display.total_correct == 5
    assert outcome.display.accuracy == 1.0


def test_fast_answers_double_the_payout():
    outcome = MathChallengeEngine().play(_submission(Difficulty.EASY, 77, seconds=7.5), 77)
    assert outcome.delta == 20


def test_slow_answers_halve_the_payout():
    outcome = MathChallengeEngine().play(_submission(Difficulty.EASY, 77, seconds=100), 77)
    assert (outcome.result, outcome.delta) == (GameResult.WIN, 5)


def test_all_wrong_loses_half_rounded_up():
    engine = MathChallengeEngine()
    outcome = engine.play(_submission(Difficulty.EASY, 3, correct=0), 3)
    assert (outcome.result, outcome.delta) == (GameResult.LOSS, -5)
    assert outcome.display.bonus_multiplier == 0.1
    outcome = engine.play(_submission(Difficulty.EASY, 3, wager=5, correct=0), 3)
    assert outcome.delta == -3


def test_half_threshold_pushes():
    engine = MathChallengeEngine()
    outcome = engine.play(_submission(Difficulty.EASY, 11, correct=2), 11)
    assert (outcome.result, outcome.delta) == (GameResult.PUSH, 0)
    outcome = engine.play(_submission(Difficulty.EASY, 11, correct=1), 11)
    assert outcome.result is GameResult.LOSS


def test_hard_two_of_three_is_not_enough_to_win():
    outcome = MathChallengeEngine().play(_submission(Difficulty.HARD, 5, correct=2), 5)
    assert (outcome.result, outcome.delta) == (GameResult.PUSH, 0)


def test_medium_three_of_four_wins_scaled():
    outcome = MathChallengeEngine().play(_submission(Difficulty.MEDIUM, 21, wager=20, correct=3), 21)
    assert (outcome.result, outcome.delta) == (GameResult.WIN, 15)


def test_graded_against_regenerated_key():
    """Answers for one seed are wrong for another."""
    engine = MathChallengeEngine()
    submission = _submission(Difficulty.MEDIUM, 100)
    assert engine.play(submission, 100).result is GameResult.WIN
    other = engine.play(submission, 101)
    assert other.display.correct_answers != submission.user_answers


def test_missing_answers_count_as_wrong():
    problems = generate_problems(Difficulty.EASY, 8)
    game_input = MathChallengeInput(
        wager=10, difficulty=Difficulty.EASY, time_limit=50,
        user_answers=tuple(p.answer for p in problems[:4]), time_spent=(10.0,),
    )
    outcome = MathChallengeEngine().play(game_input, 8)
    assert outcome.display.total_correct == 4
    assert outcome.display.total_problems == 5
    assert outcome.result is GameResult.WIN


# ============================================================
# Validation
# ============================================================

@pytest.mark.parametrize("changes", [
    {"wager": 4},
    {"wager": 31},
    {"difficulty": "expert"},
    {"time_limit": 0},
    {"time_limit": 301},
    {"time_spent": ()},
    {"time_spent": (5.0, 0.0)},
    {"time_spent": (float("nan"),)},
])
def test_invalid_math_inputs(changes):
    fields = dict(wager=10, difficulty=Difficulty.EASY, time_limit=60,
                  user_answers=(1, 2, 3, 4, 5), time_spent=(5.0,) * 5)
    fields.update(changes)
    engine = MathChallengeEngine()
    game_input = MathChallengeInput(**fields)
    assert not engine.validate(game_input)
    with pytest.raises(InvalidWager):
        engine.play(game_input, 1)


def test_string_difficulty_accepted():
    game_input = MathChallengeInput(wager=10, difficulty="hard", time_limit=15,
                                    user_answers=(), time_spent=(3.0,))
    outcome = MathChallengeEngine().play(game_input, 2)
    assert outcome.display.total_problems == 3
    assert outcome.result is GameResult.LOSS
