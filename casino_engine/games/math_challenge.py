"""Math Challenge — a seeded batch of multiple-choice problems, graded for accuracy and speed.

The problem set is never trusted from the client. Grading calls
generate_problems() with the same seed and difficulty, which rebuilds
the identical batch, and scores the submitted answers against it.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from casino_engine.games.base import (
    BaseGameEngine, DisplayMixin, GameResult, InvalidWager, Outcome,
    round_half_up,
)
from config.game_schema import GameType
from tools.seeded_rng import LinearCongruentialRandom

MAX_TIME_LIMIT = 300  # seconds
OPTION_COUNT = 4


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass(frozen=True)
class DifficultyTier:
    problem_count: int
    time_limit: int           # per problem, seconds
    target_time: float        # average seconds for a 1.0x speed bonus
    required_accuracy: float


DIFFICULTY_TIERS = {
    Difficulty.EASY: DifficultyTier(problem_count=5, time_limit=10, target_time=15, required_accuracy=0.80),
    Difficulty.MEDIUM: DifficultyTier(problem_count=4, time_limit=8, target_time=25, required_accuracy=0.75),
    Difficulty.HARD: DifficultyTier(problem_count=3, time_limit=5, target_time=40, required_accuracy=0.67),
}

SPEED_BONUS_RANGE = (0.5, 2.0)
MIN_BONUS_MULTIPLIER = 0.1
LOSS_FRACTION = 0.5


@dataclass(frozen=True)
class MathProblem:
    id: str
    question: str
    answer: int
    options: tuple
    difficulty: Difficulty
    time_limit: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
            "options": list(self.options),
            "difficulty": self.difficulty.value,
            "time_limit": self.time_limit,
        }


@dataclass(frozen=True)
class MathChallengeInput:
    wager: int
    difficulty: Difficulty
    time_limit: float
    user_answers: tuple = field(default_factory=tuple)
    time_spent: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class MathChallengeDisplay(DisplayMixin):
    problems: tuple
    user_answers: tuple
    correct_answers: tuple
    time_spent: tuple
    total_correct: int
    total_problems: int
    accuracy: float
    bonus_multiplier: float


# ═══════════════════════════════════════════════════════════════
# Problem Generation
# ═══════════════════════════════════════════════════════════════

def _easy_problem(rng) -> tuple:
    if rng.next_int(0, 1) == 0:
        a, b, c = rng.next_int(10, 50), rng.next_int(10, 50), rng.next_int(10, 50)
        return f"{a} + {b} + {c} = ?", a + b + c
    c = rng.next_int(5, 20)
    b = rng.next_int(10, 30)
    a = rng.next_int(b + c + 10, b + c + 80)   # keeps the result positive
    return f"{a} - {b} - {c} = ?", a - b - c


def _medium_problem(rng) -> tuple:
    if rng.next_int(0, 1) == 0:
        a = rng.next_int(12, 25)
        b = rng.next_int(11, 20)
        return f"{a} × {b} = ?", a * b
    divisor = rng.next_int(6, 15)
    quotient = rng.next_int(8, 25)
    return f"{divisor * quotient} ÷ {divisor} = ?", quotient


def _hard_problem(rng) -> tuple:
    base = rng.next_int(2, 9)
    exponent = rng.next_int(2, 4)
    return f"{base}^{exponent} = ?", base ** exponent


PROBLEM_BUILDERS = {
    Difficulty.EASY: _easy_problem,
    Difficulty.MEDIUM: _medium_problem,
    Difficulty.HARD: _hard_problem,
}


def generate_options(answer: int, rng) -> list:
    """The answer plus three distinct nearby distractors, shuffled."""
    variance = max(1, abs(answer) * 0.3)
    # at least five candidate values so three distinct distractors always exist
    spread = max(2, round_half_up(variance))
    options = [answer]
    while len(options) < OPTION_COUNT:
        wrong = answer + rng.next_int(-spread, spread)
        if wrong not in options:
            options.append(wrong)

    for i in range(len(options) - 1, 0, -1):
        j = rng.next_int(0, i)
        options[i], options[j] = options[j], options[i]
    return options


def build_problems(difficulty, rng, count: Optional[int] = None) -> list:
    """Draw a problem batch from a fresh stream."""
    difficulty = Difficulty(difficulty)
    tier = DIFFICULTY_TIERS[difficulty]
    problems = []
    for i in range(tier.problem_count if count is None else count):
        question, answer = PROBLEM_BUILDERS[difficulty](rng)
        problems.append(MathProblem(
            id=str(i),
            question=question,
            answer=answer,
            options=tuple(generate_options(answer, rng)),
            difficulty=difficulty,
            time_limit=tier.time_limit,
        ))
    return problems


def generate_problems(difficulty, seed: int, count: Optional[int] = None) -> list:
    """Deterministic problem batch for (difficulty, seed)."""
    return build_problems(difficulty, LinearCongruentialRandom(seed), count)


# ═══════════════════════════════════════════════════════════════
# Scoring
# ═══════════════════════════════════════════════════════════════

def speed_bonus(average_time: float, difficulty) -> float:
    low, high = SPEED_BONUS_RANGE
    ratio = DIFFICULTY_TIERS[Difficulty(difficulty)].target_time / average_time
    return min(high, max(low, ratio))


class MathChallengeEngine(BaseGameEngine):
    game_type = GameType.MATH
    display_name = "Math Challenge"
    input_type = MathChallengeInput
    rng_type = LinearCongruentialRandom

    def check_input(self, game_input: MathChallengeInput) -> None:
        self.check_wager(game_input.wager)
        try:
            Difficulty(game_input.difficulty)
        except ValueError:
            raise InvalidWager(f"Unknown difficulty: {game_input.difficulty!r}") from None
        limit = game_input.time_limit
        if isinstance(limit, bool) or not isinstance(limit, (int, float)) or not 0 < limit <= MAX_TIME_LIMIT:
            raise InvalidWager(f"Time limit must be in (0, {MAX_TIME_LIMIT}] seconds, got {limit!r}")
        if not game_input.time_spent:
            raise InvalidWager("At least one answer timing is required")
        for t in game_input.time_spent:
            if isinstance(t, bool) or not isinstance(t, (int, float)) or not math.isfinite(t) or t <= 0:
                raise InvalidWager(f"Answer timings must be positive seconds, got {t!r}")

    def generate_problems(self, difficulty, seed: int, count: Optional[int] = None) -> list:
        return generate_problems(difficulty, seed, count)

    def _play(self, game_input: MathChallengeInput, rng) -> Outcome:
        difficulty = Difficulty(game_input.difficulty)
        tier = DIFFICULTY_TIERS[difficulty]
        wager = game_input.wager

        # rng is untouched here, so this is the batch generate_problems(seed) showed the player
        problems = build_problems(difficulty, rng)
        correct_answers = tuple(p.answer for p in problems)
        user_answers = tuple(game_input.user_answers)
        time_spent = tuple(game_input.time_spent)

        total_correct = sum(1 for given, expected in zip(user_answers, correct_answers)
                            if given == expected)
        accuracy = total_correct / len(problems)
        average_time = sum(time_spent) / len(time_spent)
        bonus = max(MIN_BONUS_MULTIPLIER, accuracy * speed_bonus(average_time, difficulty))

        if accuracy >= tier.required_accuracy:
            result, delta = GameResult.WIN, round_half_up(wager * bonus)
        elif accuracy >= tier.required_accuracy * 0.5:
            result, delta = GameResult.PUSH, 0
        else:
            result, delta = GameResult.LOSS, -round_half_up(wager * LOSS_FRACTION)

        display = MathChallengeDisplay(
            problems=tuple(problems),
            user_answers=user_answers,
            correct_answers=correct_answers,
            time_spent=time_spent,
            total_correct=total_correct,
            total_problems=len(problems),
            accuracy=accuracy,
            bonus_multiplier=bonus,
        )
        return Outcome(result=result, delta=delta, display=display)
