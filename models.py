"""Typed views over the JSON objects Lichess sends on its streams."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

STATUS_STARTED = "started"


@dataclass(frozen=True)
class Player:
    id: str = ""
    name: str = ""
    title: Optional[str] = None
    rating: Optional[int] = None
    provisional: bool = False

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "Player":
        data = data or {}
        # gameFull nests the account under "user" for some clients
        user = data.get("user") or {}
        return cls(
            id=str(data.get("id") or user.get("id") or ""),
            name=str(data.get("name") or user.get("name") or data.get("username") or ""),
            title=data.get("title") or user.get("title"),
            rating=data.get("rating"),
            provisional=bool(data.get("provisional", False)),
        )

    def is_account(self, username: str) -> bool:
        """True if this side belongs to ``username`` (case-insensitive on id or name)."""
        wanted = username.lower()
        return bool(wanted) and wanted in (self.id.lower(), self.name.lower())

    def __str__(self):
        rating = self.rating if self.rating is not None else "Unrated"
        prefix = f"{self.title} " if self.title else ""
        return f"{prefix}{self.name or self.id} ({rating}{'?' if self.provisional else ''})"


@dataclass(frozen=True)
class Challenge:
    id: str
    challenger: Player
    dest_user: Player
    variant: str = "standard"
    rated: bool = False
    speed: str = ""
    time_control: str = ""
    color: str = "random"

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Challenge":
        time_control = data.get("timeControl") or {}
        show = time_control.get("show")
        if not show and "limit" in time_control:
            show = f"{time_control['limit'] // 60}+{time_control.get('increment', 0)}"
        return cls(
            id=str(data["id"]),
            challenger=Player.from_json(data.get("challenger")),
            dest_user=Player.from_json(data.get("destUser")),
            variant=(data.get("variant") or {}).get("key", "standard"),
            rated=bool(data.get("rated", False)),
            speed=data.get("speed", ""),
            time_control=show or time_control.get("type", "unknown"),
            color=data.get("color", "random"),
        )


@dataclass(frozen=True)
class GameState:
    """Move list and status from a ``gameFull`` or ``gameState`` event."""
    moves: List[str] = field(default_factory=list)
    status: str = ""
    white: Optional[Player] = None
    black: Optional[Player] = None

    @property
    def in_progress(self) -> bool:
        return self.status == STATUS_STARTED

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> Optional["GameState"]:
        kind = event.get("type")
        if kind == "gameFull":
            state = event.get("state") or {}
            return cls(
                moves=split_moves(state.get("moves")),
                status=state.get("status", ""),
                white=Player.from_json(event.get("white")),
                black=Player.from_json(event.get("black")),
            )
        if kind == "gameState":
            return cls(moves=split_moves(event.get("moves")), status=event.get("status", ""))
        return None


def split_moves(moves: Optional[str]) -> List[str]:
    return (moves or "").split()
