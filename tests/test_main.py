"""Tests for the command-line entry point and its exit codes."""

import pytest

import main
from lichess_api import ApiError
from strategies import CaptureFirstStrategy, RandomPlayer

from conftest import FakeApi


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setattr("config.load_dotenv", lambda: None)
    monkeypatch.setenv("LICHESS_API_TOKEN", "tok")
    monkeypatch.setenv("BOT_USERNAME", "bot1")


@pytest.fixture
def fake_api(monkeypatch):
    api = FakeApi()
    monkeypatch.setattr(main, "LichessApi", lambda *args, **kwargs: api)
    return api


def test_missing_config_exits_1(monkeypatch):
    monkeypatch.setattr("config.load_dotenv", lambda: None)
    monkeypatch.delenv("LICHESS_API_TOKEN", raising=False)
    monkeypatch.delenv("BOT_USERNAME", raising=False)
    assert main.main([]) == 1


def test_failed_account_check_exits_1(env, fake_api):
    fake_api.account = ApiError("unauthorized", payload={"error": "No such token"}, status_code=401)
    assert main.main([]) == 1


def test_interrupt_exits_0(env, fake_api):
    fake_api.event_streams = [KeyboardInterrupt()]
    assert main.main([]) == 0


def test_build_strategy():
    assert isinstance(main.build_strategy("random", "d4"), RandomPlayer)
    strategy = main.build_strategy("capture-first", "e4")
    assert isinstance(strategy, CaptureFirstStrategy)
    assert strategy.opening_move == "e4"


def test_rejects_unknown_strategy():
    with pytest.raises(SystemExit):
        main.parse_args(["--strategy", "minimax"])
