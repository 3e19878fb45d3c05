#!/usr/bin/env python
"""
Command-line entry point: load configuration, connect and run the bot.

Exit codes: 0 on SIGINT/SIGTERM, 1 on missing configuration or a failed
startup account check.
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from bot import LichessBot
from config import ConfigError, load_config
from lichess_api import ApiError, LichessApi
from strategies import CaptureFirstStrategy, MoveStrategy, RandomPlayer

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def build_strategy(name: str, opening_move: str) -> MoveStrategy:
    if name == "random":
        return RandomPlayer()
    return CaptureFirstStrategy(opening_move=opening_move)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lichess bot that accepts every challenge and plays capture-first.")
    parser.add_argument("--strategy", choices=["capture-first", "random"], default="capture-first",
                        help="Move selection strategy (default: capture-first)")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: INFO)")
    return parser.parse_args(argv)


def _interrupt(signum, frame):
    raise KeyboardInterrupt


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    try:
        config = load_config()
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    api = LichessApi(config.token, base_url=config.base_url, timeout=config.timeout)
    bot = LichessBot(api, config.username, build_strategy(args.strategy, config.opening_move))
    logger.info("Starting bot %s with %s strategy", config.username, args.strategy)

    signal.signal(signal.SIGTERM, _interrupt)
    try:
        bot.start()
    except ApiError as e:
        logger.error("Failed to connect to Lichess: %s", e.payload or e)
        return 1
    except KeyboardInterrupt:
        logger.info("Bot stopping")
        bot.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
