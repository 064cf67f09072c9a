from __future__ import annotations

from .models import Combatant
from .rng import RandomSource
from .stats import find_stat

def user_moves_first(user: Combatant, opponent: Combatant, rng: RandomSource) -> bool:
    """Faster side acts first; an exact speed tie is a coin flip."""
    user_speed = find_stat(user, "speed")
    opponent_speed = find_stat(opponent, "speed")
    if user_speed == opponent_speed:
        return rng.randrange(2) == 0
    return user_speed > opponent_speed

__all__ = ["user_moves_first"]
