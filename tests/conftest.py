"""Shared fakes for the bot tests: an in-memory API and a recording thread factory."""

import threading

import pytest

from bot import LichessBot
from lichess_api import ApiError
from strategies import CaptureFirstStrategy


class FakeApi:
    def __init__(self):
        self.accepted = []
        self.moves = []
        self.game_info = {}
        self.game_streams = {}
        self.event_streams = []
        self.account = {"id": "bot1", "username": "Bot1", "title": "BOT"}
        self.fail_accept = False
        self.fail_move = False

    def get_account(self):
        if isinstance(self.account, Exception):
            raise self.account
        return self.account

    def stream_events(self):
        item = self.event_streams.pop(0)
        if isinstance(item, BaseException):
            raise item
        return iter(item)

    def accept_challenge(self, challenge_id):
        self.accepted.append(challenge_id)
        if self.fail_accept:
            raise ApiError("accept failed", payload={"error": "Challenge not found"}, status_code=404)

    def stream_game(self, game_id):
        return iter(self.game_streams.get(game_id, []))

    def get_game(self, game_id):
        info = self.game_info[game_id]
        if isinstance(info, Exception):
            raise info
        return info

    def make_move(self, game_id, uci):
        self.moves.append((game_id, uci))
        if self.fail_move:
            raise ApiError("move failed", payload={"error": "Not your turn"}, status_code=400)


class RecordingThread:
    """Stands in for threading.Thread; records instead of running."""
    created = []

    def __init__(self, target=None, args=(), name=None, daemon=None):
        self.target = target
        self.args = args
        self.name = name
        self.daemon = daemon
        self.started = False
        RecordingThread.created.append(self)

    def start(self):
        self.started = True

    def is_alive(self):
        return self.started

    def run(self):
        self.target(*self.args)


class RecordingStop(threading.Event):
    """Stop event that records reconnect waits and sets itself after ``stop_after`` waits."""

    def __init__(self, stop_after):
        super().__init__()
        self.waits = []
        self.stop_after = stop_after

    def wait(self, timeout=None):
        self.waits.append(timeout)
        if len(self.waits) >= self.stop_after:
            self.set()
        return self.is_set()


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def threads():
    RecordingThread.created = []
    return RecordingThread.created


@pytest.fixture
def bot(api, threads):
    return LichessBot(api, "bot1", CaptureFirstStrategy(), thread_factory=RecordingThread)


def game_full(white_id="bot1", black_id="opponent", moves="", status="started"):
    return {
        "type": "gameFull",
        "id": "game1",
        "white": {"id": white_id, "name": white_id.capitalize()},
        "black": {"id": black_id, "name": black_id.capitalize()},
        "state": {"type": "gameState", "moves": moves, "status": status},
    }


def game_state(moves="", status="started"):
    return {"type": "gameState", "moves": moves, "status": status}


def challenge_event(challenge_id="chal1"):
    return {
        "type": "challenge",
        "challenge": {
            "id": challenge_id,
            "status": "created",
            "challenger": {"id": "someone", "name": "Someone", "rating": 1500},
            "destUser": {"id": "bot1", "name": "Bot1", "title": "BOT"},
            "variant": {"key": "standard", "name": "Standard"},
            "rated": False,
            "speed": "blitz",
            "timeControl": {"type": "clock", "limit": 300, "increment": 3, "show": "5+3"},
            "color": "random",
        },
    }
