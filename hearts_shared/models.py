"""Serializable data classes for session entities.

Used by the server when announcing players to clients.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
from hearts_shared.constants import Mark, Role


@dataclass
class PlayerState:
    player_id: str
    x: float
    y: float
    alive: bool = True
    is_bot: bool = False
    ready: bool = False
    mark: Optional[Mark] = None
    role: Optional[Role] = None

    def to_dict(self) -> dict:
        return {
            "id": self.player_id,
            "x": self.x,
            "y": self.y,
            "alive": self.alive,
            "is_bot": self.is_bot,
            "ready": self.ready,
            "mark": self.mark.value if self.mark else None,
            "role": self.role.value if self.role else None,
        }

    @staticmethod
    def from_dict(d: dict) -> PlayerState:
        return PlayerState(
            player_id=d["id"],
            x=d["x"],
            y=d["y"],
            alive=d.get("alive", True),
            is_bot=d.get("is_bot", False),
            ready=d.get("ready", False),
            mark=Mark(d["mark"]) if d.get("mark") else None,
            role=Role(d["role"]) if d.get("role") else None,
        )

    def hidden(self) -> PlayerState:
        """Copy with the secret mark removed, for the player it belongs to."""
        return PlayerState(
            player_id=self.player_id,
            x=self.x,
            y=self.y,
            alive=self.alive,
            is_bot=self.is_bot,
            ready=self.ready,
            mark=None,
            role=self.role,
        )
