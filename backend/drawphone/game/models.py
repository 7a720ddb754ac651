from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal


Phase = Literal["lobby", "writing", "drawing", "results"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Player:
    id: str
    nickname: str
    avatar: str = ""
    is_host: bool = False
    is_ready: bool = False


@dataclass(frozen=True)
class Sentence:
    author_id: str
    text: str
    round: int


@dataclass(frozen=True)
class Drawing:
    author_id: str
    image_data: str
    round: int


@dataclass
class PresentationState:
    active: bool = False
    current_index: int = 0


@dataclass
class Room:
    id: str
    code: str
    players: list[Player] = field(default_factory=list)
    phase: Phase = "lobby"
    current_round: int = 0
    max_rounds: int = 3
    created_at: datetime = field(default_factory=utcnow)
    locked: bool = False
    sentences: list[Sentence] = field(default_factory=list)
    drawings: list[Drawing] = field(default_factory=list)
    presentation: PresentationState = field(default_factory=PresentationState)

    @property
    def host(self) -> Player | None:
        for p in self.players:
            if p.is_host:
                return p
        return None

    def get_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None
