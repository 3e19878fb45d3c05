"""
Lichess BOT: accepts every challenge and plays each game on its own stream.

The account event stream runs on the calling thread; every started game gets
a daemon worker that follows the game stream and answers on our turn.
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional

import chess

from board_tracker import BoardTracker
from lichess_api import ApiError, LichessApi
from models import Challenge, GameState, Player
from strategies import MoveStrategy

logger = logging.getLogger(__name__)

STREAM_ERROR_DELAY = 5.0
STREAM_END_DELAY = 1.0


class LichessBot:
    def __init__(self, api: LichessApi, username: str, strategy: MoveStrategy,
                 thread_factory: Callable[..., threading.Thread] = threading.Thread,
                 stop_event: Optional[threading.Event] = None):
        self.api = api
        self.username = username
        self.strategy = strategy
        self.thread_factory = thread_factory
        self.stop_event = stop_event or threading.Event()
        # game id -> tracker; only mutated under _games_lock
        self.games: Dict[str, BoardTracker] = {}
        self._games_lock = threading.Lock()
        self._workers: Dict[str, threading.Thread] = {}

    # ───────────────────────── startup ─────────────────────────

    def check_account(self) -> Dict[str, Any]:
        """Fetch the account behind the token. ApiError propagates to the caller."""
        account = self.api.get_account()
        name = account.get("username") or account.get("id", "?")
        rating = ((account.get("perfs") or {}).get("rapid") or {}).get("rating", "Unrated")
        logger.info("Connected as %s (rapid rating: %s)", name, rating)
        if account.get("title") != "BOT":
            logger.warning("Account %s is not a BOT account; bot endpoints will refuse it", name)
        if str(account.get("id", "")).lower() != self.username.lower():
            logger.warning("Configured BOT_USERNAME %r does not match account id %r",
                           self.username, account.get("id"))
        return account

    def start(self) -> None:
        self.check_account()
        logger.info("Bot online, waiting for challenges")
        self.run_event_stream()

    def stop(self) -> None:
        self.stop_event.set()

    # ───────────────────────── event stream ─────────────────────────

    def run_event_stream(self) -> None:
        """Consume the account event stream forever, reconnecting after errors or EOF."""
        while not self.stop_event.is_set():
            try:
                logger.info("Connecting to event stream")
                for event in self.api.stream_events():
                    self.handle_event(event)
                    if self.stop_event.is_set():
                        return
                logger.warning("Event stream ended, reconnecting in %.0fs", STREAM_END_DELAY)
                delay = STREAM_END_DELAY
            except ApiError as e:
                logger.error("Event stream error: %s. Reconnecting in %.0fs", e, STREAM_ERROR_DELAY)
                delay = STREAM_ERROR_DELAY
            if self.stop_event.wait(delay):
                return

    def handle_event(self, event: Dict[str, Any]) -> None:
        kind = event.get("type")
        if kind == "challenge":
            self.handle_challenge(Challenge.from_json(event["challenge"]))
        elif kind == "gameStart":
            self.handle_game_start(event["game"])
        elif kind == "gameFinish":
            self.handle_game_finish(event["game"])
        else:
            logger.info("Unhandled event type: %s", kind)

    def handle_challenge(self, challenge: Challenge) -> None:
        logger.info("Challenge %s from %s: %s, %s, %s, color %s", challenge.id, challenge.challenger,
                    challenge.variant, challenge.time_control,
                    "rated" if challenge.rated else "casual", challenge.color)
        try:
            self.api.accept_challenge(challenge.id)
            logger.info("Accepted challenge %s", challenge.id)
        except ApiError as e:
            logger.error("Failed to accept challenge %s: %s", challenge.id, e.payload or e)

    def handle_game_start(self, game: Dict[str, Any]) -> None:
        game_id = game["id"]
        logger.info("[%s] Game started", game_id)
        with self._games_lock:
            self.games[game_id] = BoardTracker(game_id)
            worker = self._workers.get(game_id)
            if worker is not None and worker.is_alive():
                logger.info("[%s] Game stream already running, not starting another", game_id)
                return
            worker = self.thread_factory(target=self.run_game_stream, args=(game_id,),
                                         name=f"game-{game_id}", daemon=True)
            self._workers[game_id] = worker
        worker.start()

    def handle_game_finish(self, game: Dict[str, Any]) -> None:
        game_id = game["id"]
        status = game.get("status")
        if isinstance(status, dict):
            status = status.get("name")
        winner = game.get("winner")
        logger.info("[%s] Game finished: %s%s", game_id, status or "unknown",
                    f", {winner} wins" if winner else "")
        with self._games_lock:
            removed = self.games.pop(game_id, None)
            self._workers.pop(game_id, None)
        if removed is not None:
            logger.info("[%s] Stopped tracking game", game_id)

    # ───────────────────────── game streams ─────────────────────────

    def tracker(self, game_id: str) -> Optional[BoardTracker]:
        with self._games_lock:
            return self.games.get(game_id)

    def run_game_stream(self, game_id: str) -> None:
        """Worker body: follow one game's stream until it ends or the game is dropped."""
        logger.info("[%s] Game stream started", game_id)
        try:
            for event in self.api.stream_game(game_id):
                self.handle_game_event(game_id, event)
                if self.tracker(game_id) is None:
                    break
        except ApiError as e:
            logger.error("[%s] Game stream failed: %s", game_id, e)
        except Exception:
            logger.exception("[%s] Unexpected error in game stream", game_id)
        finally:
            logger.info("[%s] Game stream finished", game_id)

    def handle_game_event(self, game_id: str, event: Dict[str, Any]) -> None:
        state = GameState.from_event(event)
        if state is None:
            logger.debug("[%s] Ignoring %s event", game_id, event.get("type"))
            return
        tracker = self.tracker(game_id)
        if tracker is None:
            logger.debug("[%s] Event for untracked game ignored", game_id)
            return

        tracker.replay(state.moves)
        if state.white is not None:
            tracker.own_color = self.own_color(state.white)
            logger.info("[%s] Playing as %s", game_id, chess.COLOR_NAMES[tracker.own_color])
        elif tracker.own_color is None:
            tracker.own_color = self.lookup_own_color(game_id)

        logger.info("[%s] %d moves played, %s to move, status %s", game_id, tracker.moves_played,
                    chess.COLOR_NAMES[tracker.turn], state.status)
        if not state.in_progress:
            logger.info("[%s] Game over: %s", game_id, state.status)
            return
        if tracker.is_our_turn(state.status):
            self.make_move(game_id, tracker)

    def own_color(self, white: Player) -> chess.Color:
        return chess.WHITE if white.is_account(self.username) else chess.BLACK

    def lookup_own_color(self, game_id: str) -> Optional[chess.Color]:
        try:
            info = self.api.get_game(game_id) or {}
        except ApiError as e:
            logger.error("[%s] Failed to get game info: %s", game_id, e)
            return None
        return self.own_color(Player.from_json(info.get("white")))

    def make_move(self, game_id: str, tracker: BoardTracker) -> None:
        legal_moves = tracker.legal_moves()
        if not legal_moves:
            logger.info("[%s] No legal moves, nothing to play", game_id)
            return
        move = self.strategy.select_move(legal_moves, tracker.moves_played)
        if move is None:
            logger.info("[%s] Strategy returned no move", game_id)
            return
        try:
            self.api.make_move(game_id, move.uci)
            logger.info("[%s] Made move %s (%s)", game_id, move.san, move.uci)
        except ApiError as e:
            logger.error("[%s] Error making move %s: %s", game_id, move.uci, e.payload or e)
