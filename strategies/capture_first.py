import logging
import random
from typing import Optional, Sequence

from board_tracker import LegalMove
from .base import MoveStrategy

logger = logging.getLogger(__name__)


def select_move(legal_moves: Sequence[LegalMove], moves_played: int, opening_move: str = "d4",
                rng: Optional[random.Random] = None) -> Optional[LegalMove]:
    """
    Pick a move: the opening move on the first ply, else a random capture,
    else any random legal move. Falls back to the first legal move.
    """
    if not legal_moves:
        return None
    rng = rng or random

    if moves_played == 0:
        for move in legal_moves:
            if move.san == opening_move:
                logger.info("Playing opening move %s", move.san)
                return move
    else:
        captures = [m for m in legal_moves if m.capture]
        if captures:
            move = rng.choice(captures)
            logger.info("Playing capture %s (%d available)", move.san, len(captures))
            return move
        move = rng.choice(legal_moves)
        logger.info("Playing move %s", move.san)
        return move

    return legal_moves[0]


class CaptureFirstStrategy(MoveStrategy):
    def __init__(self, opening_move: str = "d4", rng: Optional[random.Random] = None):
        self.opening_move = opening_move
        self.rng = rng or random.Random()

    def select_move(self, legal_moves: Sequence[LegalMove], moves_played: int) -> Optional[LegalMove]:
        return select_move(legal_moves, moves_played, self.opening_move, self.rng)
