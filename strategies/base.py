from typing import Optional, Protocol, Sequence

from board_tracker import LegalMove


class MoveStrategy(Protocol):
    """Anything that can choose one of the legal moves of a position."""
    def select_move(self, legal_moves: Sequence[LegalMove], moves_played: int) -> Optional[LegalMove]:
        ...
