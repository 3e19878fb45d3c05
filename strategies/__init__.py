from .base import MoveStrategy
from .capture_first import CaptureFirstStrategy
from .random_player import RandomPlayer

__all__ = ["MoveStrategy", "CaptureFirstStrategy", "RandomPlayer"]
