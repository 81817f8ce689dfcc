"""Player model and the registry of everyone in the session."""

import random
from typing import Iterator, Optional
from hearts_shared.constants import Mark, Role, ARENA_WIDTH, ARENA_HEIGHT
from hearts_shared.models import PlayerState
from hearts_server.roles import assign_mark


class Player:
    """Server-side player state."""

    def __init__(self, player_id: str, is_bot: bool = False):
        self.player_id = player_id
        self.is_bot = is_bot
        self.mark: Mark = assign_mark()
        self.role: Optional[Role] = None
        self.alive: bool = True
        self.guess: Optional[Mark] = None
        # Bots never wait on anyone
        self.ready: bool = is_bot
        self.x: float = random.randint(0, ARENA_WIDTH)
        self.y: float = random.randint(0, ARENA_HEIGHT)

    @property
    def is_jack(self) -> bool:
        return self.role == Role.JACK

    def guessed_correctly(self) -> bool:
        return self.guess is not None and self.guess == self.mark

    def eliminate(self):
        self.alive = False

    def move_to(self, x: float, y: float):
        self.x = max(0, min(ARENA_WIDTH, x))
        self.y = max(0, min(ARENA_HEIGHT, y))

    def to_state(self) -> PlayerState:
        return PlayerState(
            player_id=self.player_id,
            x=self.x,
            y=self.y,
            alive=self.alive,
            is_bot=self.is_bot,
            ready=self.ready,
            mark=self.mark,
            role=self.role,
        )


class PlayerRegistry:
    """Mapping of participant id -> Player. Missing ids are never an error."""

    def __init__(self):
        self.players: dict[str, Player] = {}

    def add(self, player_id: str, is_bot: bool = False) -> Player:
        player = Player(player_id, is_bot=is_bot)
        self.players[player_id] = player
        return player

    def remove(self, player_id: str) -> Optional[Player]:
        return self.players.pop(player_id, None)

    def get(self, player_id: str) -> Optional[Player]:
        return self.players.get(player_id)

    def all(self) -> list[Player]:
        return list(self.players.values())

    def living(self) -> list[Player]:
        return [p for p in self.players.values() if p.alive]

    def living_ids(self) -> list[str]:
        return [p.player_id for p in self.living()]

    def humans(self) -> list[Player]:
        return [p for p in self.players.values() if not p.is_bot]

    def living_jack(self) -> Optional[Player]:
        for player in self.living():
            if player.is_jack:
                return player
        return None

    def __contains__(self, player_id: str) -> bool:
        return player_id in self.players

    def __len__(self) -> int:
        return len(self.players)

    def __iter__(self) -> Iterator[Player]:
        return iter(list(self.players.values()))
