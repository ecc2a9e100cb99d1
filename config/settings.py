"""
Screen-Time Casino - Runtime Settings & Logging

Values are read from the environment (a local .env file is loaded first):

    CASINO_LOG_LEVEL          logging level for the screentime.* loggers (INFO)
    CASINO_CONFIG_PATH        optional JSON file with per-game config overrides
    MIN_SCREEN_TIME_MINUTES   lower clamp applied by the limit adjuster (1)
    MAX_SCREEN_TIME_MINUTES   upper clamp applied by the limit adjuster (720)
    DAILY_SPINS_FREE          daily games for free accounts (3)
    DAILY_SPINS_PREMIUM       daily games for subscribers (10)
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).parent.parent


class CasinoSettings:

    # --- Logging ---
    LOG_LEVEL = os.getenv("CASINO_LOG_LEVEL", "INFO").upper()

    # --- Game config overrides ---
    CONFIG_PATH = os.getenv("CASINO_CONFIG_PATH", "")

    # --- Screen-time clamp (minutes) ---
    MIN_SCREEN_TIME_MINUTES = int(os.getenv("MIN_SCREEN_TIME_MINUTES", "1"))
    MAX_SCREEN_TIME_MINUTES = int(os.getenv("MAX_SCREEN_TIME_MINUTES", str(12 * 60)))

    # --- Daily allowance ---
    DAILY_SPINS_FREE = int(os.getenv("DAILY_SPINS_FREE", "3"))
    DAILY_SPINS_PREMIUM = int(os.getenv("DAILY_SPINS_PREMIUM", "10"))

    @classmethod
    def config_path(cls):
        """Override file for game configs, or None when unset."""
        return Path(cls.CONFIG_PATH) if cls.CONFIG_PATH else None


def setup_logging(level: str = None) -> logging.Logger:
    """Attach one stream handler to the screentime logger tree."""
    logger = logging.getLogger("screentime")
    if not logger.handlers:
        _h = logging.StreamHandler()
        _h.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(message)s", datefmt="%H:%M:%S"))
        logger.addHandler(_h)
    logger.setLevel(getattr(logging, (level or CasinoSettings.LOG_LEVEL).upper(), logging.INFO))
    return logger
