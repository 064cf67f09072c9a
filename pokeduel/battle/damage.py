"""Damage resolution for a single attack.

The base formula truncates after every step, exactly in this order:

    floor(floor(floor(2*level/5 + 2) * attack * power / defense) / 50) + 2

then applies type effectiveness, the critical multiplier and STAB, leaving
the result unrounded.
"""
from __future__ import annotations
import math

from .models import Combatant, Move, MovePerformance
from .rng import RandomSource
from .stats import find_stat
from .typechart import effectiveness

MISS_ROLL_RANGE = 100
CRIT_ROLL_RANGE = 255
MAX_CRIT_RATE = 255
CRIT_MULTIPLIER = 1.5
STAB_MULTIPLIER = 1.5

def base_damage(level: int, attack: int, power: int, defense: int) -> int:
    """Integer part of the damage formula.

    Attack, power and the level factor below 0 count as 0; defense below 1
    counts as 1. The result is never below 2.
    """
    attack = max(0, attack)
    power = max(0, power)
    defense = max(1, defense)
    level_factor = max(0, math.floor((2 * level) / 5 + 2))
    scaled = math.floor(level_factor * attack * power / defense)
    return math.floor(scaled / 50) + 2

def crit_rate(speed: int) -> int:
    return min(speed // 2, MAX_CRIT_RATE)

def is_stab(move: Move, attacker: Combatant) -> bool:
    return move.category is not None and move.category in attacker.types

class DamageCalculator:
    def __init__(self, rng: RandomSource):
        self.rng = rng

    def roll_miss(self, move: Move) -> bool:
        return move.accuracy <= self.rng.randrange(MISS_ROLL_RANGE)

    def roll_crit(self, speed: int) -> bool:
        return self.rng.randrange(CRIT_ROLL_RANGE) < crit_rate(speed)

    def resolve(self, move: Move, attacker: Combatant, defender: Combatant) -> MovePerformance:
        if not move.usable:
            raise ValueError(f"Move {move.name!r} has no power and cannot be used")
        # Both rolls are always drawn, miss first
        missed = self.roll_miss(move)
        critical = self.roll_crit(find_stat(attacker, "speed"))
        stab = is_stab(move, attacker)
        if missed:
            return MovePerformance(damage=0, missed=True, critical_hit=critical, stab=stab)

        damage: float = base_damage(
            attacker.effective_level,
            find_stat(attacker, "attack"),
            move.power,
            find_stat(defender, "defense"),
        )
        damage *= effectiveness(move.category, defender.types)
        if critical:
            damage *= CRIT_MULTIPLIER
        if stab:
            damage *= STAB_MULTIPLIER
        return MovePerformance(damage=damage, missed=False, critical_hit=critical, stab=stab)

__all__ = ["DamageCalculator","base_damage","crit_rate","is_stab","CRIT_MULTIPLIER","STAB_MULTIPLIER"]
