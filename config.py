"""
Environment configuration for the bot.

Values come from the process environment; a ``.env`` file in the working
directory is loaded first, without overriding variables that are already set.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://lichess.org/api"
DEFAULT_TIMEOUT = 10.0
DEFAULT_OPENING_MOVE = "d4"


class ConfigError(Exception):
    """Required configuration is missing or malformed."""


@dataclass(frozen=True)
class BotConfig:
    token: str
    username: str
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    opening_move: str = DEFAULT_OPENING_MOVE


def load_config(environ: Optional[Mapping[str, str]] = None) -> BotConfig:
    """Build a BotConfig from ``environ`` (defaults to ``os.environ`` after reading .env)."""
    if environ is None:
        load_dotenv()
        environ = os.environ

    token = environ.get("LICHESS_API_TOKEN", "").strip()
    username = environ.get("BOT_USERNAME", "").strip()
    missing = [name for name, value in (("LICHESS_API_TOKEN", token),
                                        ("BOT_USERNAME", username)) if not value]
    if missing:
        raise ConfigError(f"Missing required environment variable(s): {', '.join(missing)}")

    raw_timeout = environ.get("LICHESS_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigError(f"LICHESS_TIMEOUT must be a number of seconds, got {raw_timeout!r}")
    if timeout <= 0:
        raise ConfigError("LICHESS_TIMEOUT must be positive")

    return BotConfig(
        token=token,
        username=username,
        base_url=environ.get("LICHESS_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout=timeout,
        opening_move=environ.get("BOT_OPENING_MOVE", DEFAULT_OPENING_MOVE).strip() or DEFAULT_OPENING_MOVE,
    )
