"""
Screen-Time Casino — Game Engines

Seven deterministic rule engines converting a wager (minutes of screen
time) into a signed delta. Each engine exposes validate() and play().

Usage:
    from casino_engine.games import get_game_engine, play_game
    from casino_engine.games.blackjack import BlackjackInput
    engine = get_game_engine("blackjack")
    outcome = engine.play(BlackjackInput(wager=30), seed=12345)
    outcome.to_dict()  # {"result": ..., "delta": ..., "display": {...}}
"""

from casino_engine.games.base import (
    BaseGameEngine, GameInputError, GameResult, InvalidBetSet, InvalidWager, Outcome,
)
from casino_engine.games.blackjack import BlackjackEngine
from casino_engine.games.jewel_mining import JewelMiningEngine
from casino_engine.games.math_challenge import MathChallengeEngine
from casino_engine.games.pai_gow import PaiGowEngine
from casino_engine.games.plinko import PlinkoEngine
from casino_engine.games.roulette import RouletteEngine
from casino_engine.games.slots import SlotsEngine
from config.game_schema import GameConfig, GameType

GAME_ENGINES = {
    GameType.SLOTS: SlotsEngine,
    GameType.BLACKJACK: BlackjackEngine,
    GameType.ROULETTE: RouletteEngine,
    GameType.PLINKO: PlinkoEngine,
    GameType.PAI_GOW: PaiGowEngine,
    GameType.MATH: MathChallengeEngine,
    GameType.JEWEL_MINING: JewelMiningEngine,
}

GAME_TYPES = [t.value for t in GAME_ENGINES]


def get_game_engine(game_type, config: GameConfig = None) -> BaseGameEngine:
    """Get the engine for a game type (enum member or its string value)."""
    try:
        key = GameType(game_type.lower() if isinstance(game_type, str) else game_type)
    except ValueError:
        raise ValueError(f"Unknown game type: {game_type}. Available: {GAME_TYPES}") from None
    return GAME_ENGINES[key](config)


def play_game(game_type, game_input, seed: int, config: GameConfig = None) -> Outcome:
    """Dispatch one round to the engine that owns this input type."""
    return get_game_engine(game_type, config).play(game_input, seed)


__all__ = [
    "GAME_ENGINES", "GAME_TYPES", "get_game_engine", "play_game",
    "BaseGameEngine", "GameInputError", "GameResult", "InvalidBetSet", "InvalidWager", "Outcome",
]
