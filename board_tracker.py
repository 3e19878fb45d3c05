"""Per-game board state rebuilt from the authoritative move list."""

import logging
from typing import Iterable, List, NamedTuple, Optional

import chess

from models import STATUS_STARTED

logger = logging.getLogger(__name__)


class LegalMove(NamedTuple):
    from_square: str
    to_square: str
    promotion: Optional[str]
    capture: bool
    san: str

    @property
    def uci(self) -> str:
        return f"{self.from_square}{self.to_square}{self.promotion or ''}"


class BoardTracker:
    """
    Holds the position of one game.

    The board is never advanced one move at a time: every update resets it
    and replays the whole move list, so a missed update cannot leave it
    out of sync.
    """

    def __init__(self, game_id: str = ""):
        self.game_id = game_id
        self.board = chess.Board()
        self.own_color: Optional[chess.Color] = None

    def reset(self) -> None:
        self.board.reset()

    def replay(self, moves: Iterable[str]) -> List[str]:
        """
        Reset, then apply ``moves`` in order. UCI and SAN tokens are both accepted.

        A token the rules engine rejects is logged and skipped; the replay goes
        on from the position before it. Returns the skipped tokens.
        """
        self.reset()
        skipped = []
        for token in moves:
            if not token:
                continue
            try:
                self._push(token)
            except ValueError:
                logger.error("[%s] Illegal move %r in history, skipping. Tracked board may diverge.",
                             self.game_id, token)
                skipped.append(token)
        return skipped

    def _push(self, token: str) -> None:
        try:
            move = chess.Move.from_uci(token)
        except ValueError:
            self.board.push_san(token)
            return
        if move not in self.board.legal_moves:
            raise chess.IllegalMoveError(f"illegal uci: {token!r} in {self.board.fen()}")
        self.board.push(move)

    @property
    def turn(self) -> chess.Color:
        return self.board.turn

    @property
    def moves_played(self) -> int:
        return len(self.board.move_stack)

    def is_our_turn(self, status: str) -> bool:
        return self.own_color is not None and self.turn == self.own_color and status == STATUS_STARTED

    def legal_moves(self) -> List[LegalMove]:
        """Legal moves in python-chess enumeration order."""
        result = []
        for move in self.board.legal_moves:
            result.append(LegalMove(
                from_square=chess.square_name(move.from_square),
                to_square=chess.square_name(move.to_square),
                promotion=chess.piece_symbol(move.promotion) if move.promotion else None,
                capture=self.board.is_capture(move),
                san=self.board.san(move),
            ))
        return result

    def fen(self) -> str:
        return self.board.fen()
