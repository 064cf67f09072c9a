"""Base stat lookup.

Works on :class:`Combatant` records and on raw catalog documents shaped like
``{"stats": [{"base_stat": 45, "stat": {"name": "hp"}}, ...]}``.
"""
from __future__ import annotations
from typing import Any, Mapping

from .models import Combatant

STAT_NOT_FOUND = -1
STAT_MALFORMED = -2

BATTLE_STATS = ("hp", "attack", "defense", "speed")

def normalize_stat_name(name: str) -> str:
    """Canonical stored form of a stat name ("Special Attack" -> "special-attack")."""
    return "-".join(name.strip().lower().split())

def _entries(source: Any):
    if isinstance(source, Combatant):
        return source.stats
    if isinstance(source, Mapping):
        return source.get("stats")
    return getattr(source, "stats", None)

def _entry_name(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        stat = entry.get("stat")
        return stat.get("name") if isinstance(stat, Mapping) else None
    return getattr(entry, "name", None)

def _entry_value(entry: Any) -> Any:
    if isinstance(entry, Mapping):
        return entry.get("base_stat")
    return getattr(entry, "base_stat", None)

def find_stat(combatant: Any, stat_name: str) -> int:
    """Return the base value of ``stat_name``.

    Returns ``STAT_MALFORMED`` when the combatant has no stat collection and
    ``STAT_NOT_FOUND`` when no entry carries that exact name. The first
    matching entry wins.
    """
    entries = _entries(combatant)
    if entries is None:
        return STAT_MALFORMED
    for entry in entries:
        if _entry_name(entry) == stat_name:
            return _entry_value(entry)
    return STAT_NOT_FOUND

__all__ = ["STAT_NOT_FOUND","STAT_MALFORMED","BATTLE_STATS","normalize_stat_name","find_stat"]
