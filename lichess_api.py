"""
Thin Lichess HTTP client: authenticated calls and NDJSON streams.

Built on berserk's TokenSession so every request carries the bearer token.
"""

import json
import logging
from typing import Any, Dict, Iterable, Iterator, Optional

import berserk
import requests

from config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A Lichess call failed. ``payload`` is the decoded error body, if any."""

    def __init__(self, message: str, payload: Any = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.payload = payload
        self.status_code = status_code


def _error_payload(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or None


def parse_ndjson(lines: Iterable[str]) -> Iterator[Dict[str, Any]]:
    """Yield each line that parses as a JSON object; drop everything else."""
    for line in lines:
        line = line.strip()
        if not line:
            continue
        try:
            event = json.loads(line)
        except ValueError:
            logger.debug("Dropping unparsable stream line: %r", line)
            continue
        if isinstance(event, dict):
            yield event
        else:
            logger.debug("Dropping non-object stream line: %r", line)


class LichessApi:
    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL,
                 timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else berserk.TokenSession(token)

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def request(self, path: str, method: str = "GET", data: Optional[Dict[str, Any]] = None) -> Any:
        """
        Perform one authenticated call and return the decoded JSON body.

        POST payloads are form-url-encoded. Raises ApiError on transport
        failure or a non-2xx response. No retries.
        """
        try:
            response = self.session.request(method, self._url(path), data=data, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("API request failed: %s %s: %s", method, path, e)
            raise ApiError(f"{method} {path} failed: {e}") from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            payload = _error_payload(response)
            logger.error("API request failed: %s %s: %s %s", method, path, response.status_code, payload)
            raise ApiError(f"{method} {path} returned {response.status_code}",
                           payload=payload, status_code=response.status_code) from e

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(f"{method} {path} returned a non-JSON body") from e

    def stream(self, path: str) -> Iterator[str]:
        """Yield decoded lines from a streaming GET. No timeout is applied."""
        try:
            with self.session.get(self._url(path), stream=True, timeout=None) as response:
                try:
                    response.raise_for_status()
                except requests.HTTPError as e:
                    payload = _error_payload(response)
                    raise ApiError(f"GET {path} returned {response.status_code}",
                                   payload=payload, status_code=response.status_code) from e
                for line in response.iter_lines(decode_unicode=True):
                    if line:
                        yield line
        except requests.RequestException as e:
            raise ApiError(f"Stream {path} failed: {e}") from e

    # -- endpoints ---------------------------------------------------------

    def get_account(self) -> Dict[str, Any]:
        return self.request("/account")

    def stream_events(self) -> Iterator[Dict[str, Any]]:
        return parse_ndjson(self.stream("/stream/event"))

    def accept_challenge(self, challenge_id: str) -> Any:
        return self.request(f"/challenge/{challenge_id}/accept", "POST")

    def stream_game(self, game_id: str) -> Iterator[Dict[str, Any]]:
        return parse_ndjson(self.stream(f"/bot/game/stream/{game_id}"))

    def get_game(self, game_id: str) -> Dict[str, Any]:
        return self.request(f"/bot/game/{game_id}")

    def make_move(self, game_id: str, uci: str) -> Any:
        return self.request(f"/bot/game/{game_id}/move/{uci}", "POST")
