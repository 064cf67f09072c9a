"""Battle data model: combatants, moves and move outcomes.

Combatant records are borrowed from the catalog and never mutated; current
health lives in the battle session.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple
import math

# Power value for moves that deal no direct damage (status moves etc.)
NO_POWER = -1
# Accuracy that no miss draw from [0, 100) can reach
ALWAYS_HIT = 1000
DEFAULT_ACCURACY = 100
DEFAULT_LEVEL = 1

@dataclass(frozen=True)
class StatEntry:
    name: str
    base_stat: int

@dataclass(frozen=True)
class MoveRef:
    name: str
    url: str = ""

@dataclass(frozen=True)
class Combatant:
    name: str
    types: Tuple[str, ...] = ()
    # None => no stat collection at all (malformed record)
    stats: Optional[Tuple[StatEntry, ...]] = None
    moves: Tuple[MoveRef, ...] = ()
    level: Any = None

    @property
    def effective_level(self) -> int:
        lvl = self.level
        if isinstance(lvl, bool):
            return DEFAULT_LEVEL
        if isinstance(lvl, int):
            return lvl
        if isinstance(lvl, float) and math.isfinite(lvl):
            return int(lvl)
        if isinstance(lvl, str):
            try:
                return int(lvl.strip())
            except ValueError:
                return DEFAULT_LEVEL
        return DEFAULT_LEVEL

@dataclass(frozen=True)
class Move:
    name: str
    category: Optional[str] = None
    power: int = NO_POWER
    accuracy: int = DEFAULT_ACCURACY

    @property
    def usable(self) -> bool:
        return self.power != NO_POWER

@dataclass(frozen=True)
class MovePerformance:
    damage: float = 0
    missed: bool = False
    critical_hit: bool = False
    stab: bool = False

class Side(str, Enum):
    USER = "user"
    OPPONENT = "opponent"

    @property
    def other(self) -> "Side":
        return Side.OPPONENT if self is Side.USER else Side.USER

class MoveListMode(str, Enum):
    NORMAL = "normal"
    COPYING = "copying"

@dataclass(frozen=True)
class MoveList:
    """A side's resolved usable moves, tagged with how the side picks moves."""
    moves: Tuple[Move, ...] = ()
    mode: MoveListMode = MoveListMode.NORMAL

    @property
    def is_copy(self) -> bool:
        return self.mode is MoveListMode.COPYING

    def names(self) -> Tuple[str, ...]:
        return tuple(m.name for m in self.moves)

@dataclass
class AttackOutcome:
    side: Side
    move: Move
    performance: MovePerformance
    message: str
    target_health: int

@dataclass
class TurnReport:
    first: Side
    outcomes: list[AttackOutcome] = field(default_factory=list)
    victory: bool = False

    def outcome_for(self, side: Side) -> Optional[AttackOutcome]:
        for o in self.outcomes:
            if o.side is side:
                return o
        return None

__all__ = [
    "NO_POWER","ALWAYS_HIT","DEFAULT_ACCURACY","DEFAULT_LEVEL",
    "StatEntry","MoveRef","Combatant","Move","MovePerformance",
    "Side","MoveListMode","MoveList","AttackOutcome","TurnReport",
]
