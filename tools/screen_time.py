"""
Screen-Time Casino - Session & Screen-Time Boundary

The engines only compute deltas. This module is the thin layer that
applies them: it spends a daily spin, trims gains above a game's
daily cap, updates the day's stats and hands the delta to whatever
owns the real app limit through ScreenTimeAdjuster.apply_delta().

Usage:
    from tools.screen_time import CasinoSession, ClampedScreenTimeLimit
    session = CasinoSession(ClampedScreenTimeLimit(current_minutes=60))
    outcome = session.play("slots", SlotsInput(wager=10), seed=int(time.time() * 1000))
    session.stats.net_screen_time_change
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Callable, Optional

from casino_engine.games import get_game_engine
from casino_engine.games.base import GameResult, Outcome
from config.game_schema import GameConfig, GameType, load_game_configs
from config.settings import CasinoSettings

logger = logging.getLogger("screentime.session")


class DailyLimitReached(RuntimeError):
    """No spins left for today."""


# ═══════════════════════════════════════════════════════════════
# Screen-Time Adjusters
# ═══════════════════════════════════════════════════════════════

class ScreenTimeAdjuster(ABC):
    """Owner of the real app limit. Returns False when the change was not applied."""

    @abstractmethod
    def apply_delta(self, delta: int) -> bool:
        ...


@dataclass
class ClampedScreenTimeLimit(ScreenTimeAdjuster):
    """In-memory limit kept within [min_minutes, max_minutes]."""
    current_minutes: int
    min_minutes: int = CasinoSettings.MIN_SCREEN_TIME_MINUTES
    max_minutes: int = CasinoSettings.MAX_SCREEN_TIME_MINUTES

    def apply_delta(self, delta: int) -> bool:
        self.current_minutes = max(self.min_minutes,
                                   min(self.max_minutes, self.current_minutes + delta))
        return True


# ═══════════════════════════════════════════════════════════════
# Daily Stats
# ═══════════════════════════════════════════════════════════════

@dataclass
class DailyStats:
    day: date = field(default_factory=date.today)
    total_games_played: int = 0
    total_spins_used: int = 0
    net_screen_time_change: int = 0
    win_count: int = 0
    loss_count: int = 0
    push_count: int = 0
    gained_by_game: dict = field(default_factory=dict)

    def record(self, game_type: GameType, result: GameResult, delta: int) -> None:
        self.total_games_played += 1
        self.total_spins_used += 1
        self.net_screen_time_change += delta
        if result is GameResult.WIN:
            self.win_count += 1
        elif result is GameResult.LOSS:
            self.loss_count += 1
        else:
            self.push_count += 1
        if delta > 0:
            self.gained_by_game[game_type] = self.gained_by_game.get(game_type, 0) + delta

    def to_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "total_games_played": self.total_games_played,
            "total_spins_used": self.total_spins_used,
            "net_screen_time_change": self.net_screen_time_change,
            "win_count": self.win_count,
            "loss_count": self.loss_count,
            "push_count": self.push_count,
            "gained_by_game": {k.value: v for k, v in self.gained_by_game.items()},
        }


# ═══════════════════════════════════════════════════════════════
# Session
# ═══════════════════════════════════════════════════════════════

class CasinoSession:
    """One player's day at the casino."""

    def __init__(self, adjuster: ScreenTimeAdjuster, subscribed: bool = False,
                 configs: Optional[dict] = None, today: Callable[[], date] = date.today):
        self.adjuster = adjuster
        self.subscribed = subscribed
        self.configs = configs or load_game_configs()
        self._today = today
        self.stats = DailyStats(day=today())
        self.spins_remaining = self.daily_spins

    @property
    def daily_spins(self) -> int:
        return CasinoSettings.DAILY_SPINS_PREMIUM if self.subscribed else CasinoSettings.DAILY_SPINS_FREE

    def _roll_day(self) -> None:
        today = self._today()
        if today != self.stats.day:
            logger.info(f"New day {today.isoformat()}: resetting daily stats")
            self.stats = DailyStats(day=today)
            self.spins_remaining = self.daily_spins

    def set_subscribed(self, subscribed: bool) -> None:
        """Upgrades add the premium allowance difference; downgrades cap at the free tier."""
        if subscribed and not self.subscribed:
            used = CasinoSettings.DAILY_SPINS_FREE - self.spins_remaining
            self.spins_remaining = max(0, CasinoSettings.DAILY_SPINS_PREMIUM - used)
        elif not subscribed and self.subscribed:
            self.spins_remaining = min(self.spins_remaining, CasinoSettings.DAILY_SPINS_FREE)
        self.subscribed = subscribed

    def remaining_cap(self, game_type) -> int:
        game_type = GameType(game_type)
        config: GameConfig = self.configs[game_type]
        return max(0, config.daily_cap - self.stats.gained_by_game.get(game_type, 0))

    def play(self, game_type, game_input, seed: int) -> Outcome:
        """Play one round, apply its (capped) delta and record it."""
        self._roll_day()
        if self.spins_remaining <= 0:
            raise DailyLimitReached(f"No spins left today ({self.daily_spins} per day)")

        game_type = GameType(game_type)
        engine = get_game_engine(game_type, self.configs[game_type])
        outcome = engine.play(game_input, seed)

        if outcome.delta > 0:
            cap = self.remaining_cap(game_type)
            if outcome.delta > cap:
                logger.info(f"{game_type.value}: gain {outcome.delta} trimmed to daily cap remainder {cap}")
                outcome = replace(outcome, delta=cap,
                                  result=GameResult.WIN if cap else GameResult.PUSH)

        self.spins_remaining -= 1
        self.stats.record(game_type, outcome.result, outcome.delta)
        if not self.adjuster.apply_delta(outcome.delta):
            logger.warning(f"{game_type.value}: screen-time adjuster rejected delta {outcome.delta:+d}")
        return outcome
