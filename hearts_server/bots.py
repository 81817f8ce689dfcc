"""Simulated player helpers - fully random within valid options."""

import random
from hearts_shared.constants import MARKS, Mark, BOT_ID_PREFIX


def bot_ids(count: int) -> list[str]:
    return [f"{BOT_ID_PREFIX}{i}" for i in range(1, count + 1)]


def guess_delay_ms(confinement_ms: int) -> int:
    """Random delay in [0, confinement_ms) so every bot guesses before the cutoff."""
    if confinement_ms <= 0:
        return 0
    return random.randrange(confinement_ms)


def choose_guess() -> Mark:
    return random.choice(MARKS)
