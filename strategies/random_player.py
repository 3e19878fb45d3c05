import random
from typing import Optional, Sequence

from board_tracker import LegalMove
from .base import MoveStrategy


class RandomPlayer(MoveStrategy):
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def select_move(self, legal_moves: Sequence[LegalMove], moves_played: int) -> Optional[LegalMove]:
        return self.rng.choice(legal_moves) if legal_moves else None
