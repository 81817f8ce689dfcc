"""Per-round mark draws and Jack of Hearts selection."""

import random
from typing import Optional
from hearts_shared.constants import MARKS, Mark, Role


def assign_mark() -> Mark:
    """Uniform draw from the deck. Repeats across rounds are allowed."""
    return random.choice(MARKS)


def assign_jack(registry) -> Optional["Player"]:
    """Make one living player the Jack unless a living Jack already exists.

    Returns the newly chosen player, or None when nothing changed (a Jack is
    already alive, or nobody is).
    """
    alive = registry.living()
    if any(p.is_jack for p in alive):
        return None
    if not alive:
        return None
    jack = random.choice(alive)
    jack.role = Role.JACK
    return jack
