"""Move availability and per-turn move choice.

Raw move documents (``{"power": 40, "accuracy": 100, "type": {"name": "normal"}}``)
become :class:`Move` records through :func:`move_from_record`; anything the
document leaves out falls back to a default. Moves without power never make
it into a side's usable list.

A side with no usable moves is put in copy mode: it borrows a uniformly
random move from the other side's list instead (think Ditto).
"""
from __future__ import annotations
from typing import Any, Iterable, Mapping, Optional, Protocol
import math

from pokeduel.core.errors import NoMovesAvailable
from .messages import capital_case
from .models import DEFAULT_ACCURACY, NO_POWER, Move, MoveList, MoveListMode, MoveRef
from .rng import RandomSource

class MoveProvider(Protocol):
    async def fetch_move(self, ref: MoveRef) -> Mapping[str, Any]: ...

def _given_number(value: Any) -> Optional[int]:
    # 0, negatives, null, strings and NaN all count as "not given"
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if value <= 0:
        return None
    return int(value)

def display_name(raw_name: str) -> str:
    return capital_case(raw_name.replace("-", " "))

def move_from_record(name: str, raw: Optional[Mapping[str, Any]]) -> Move:
    raw = raw or {}
    power = _given_number(raw.get("power"))
    accuracy = _given_number(raw.get("accuracy"))
    type_info = raw.get("type")
    category = type_info.get("name") if isinstance(type_info, Mapping) else None
    return Move(
        name=display_name(name),
        category=category.lower() if isinstance(category, str) and category else None,
        power=NO_POWER if power is None else power,
        accuracy=DEFAULT_ACCURACY if accuracy is None else accuracy,
    )

def resolve_move_list(moves: Iterable[Move]) -> MoveList:
    usable = tuple(m for m in moves if m.usable)
    mode = MoveListMode.NORMAL if usable else MoveListMode.COPYING
    return MoveList(moves=usable, mode=mode)

def _draw(moves: tuple[Move, ...], rng: RandomSource) -> Move:
    return moves[rng.randrange(len(moves))]

def pick_copy_move(other: MoveList, rng: RandomSource) -> Move:
    if not other.moves:
        raise NoMovesAvailable("Neither combatant has a usable move")
    return _draw(other.moves, rng)

def choose_opponent_move(own: MoveList, other: MoveList, rng: RandomSource) -> Move:
    """Uniform random choice; a copying side draws from the other list each turn."""
    if own.is_copy:
        return pick_copy_move(other, rng)
    return _draw(own.moves, rng)

__all__ = [
    "MoveProvider","move_from_record","display_name",
    "resolve_move_list","pick_copy_move","choose_opponent_move",
]
