"""Runtime loader for the combatant roster.

The roster is a JSON array of combatant documents in the remote catalog's
shape (``name``, ``stats[].base_stat``, ``stats[].stat.name``,
``types[].type.name``, ``moves[].move``). Documents are validated against
``schema/roster.schema.json`` and normalised here, at the boundary, so the
battle engine can compare stat and type names exactly.
"""
from __future__ import annotations
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import jsonschema

from pokeduel.battle.models import Combatant, MoveRef, StatEntry
from pokeduel.battle.stats import BATTLE_STATS, find_stat, normalize_stat_name
from pokeduel.core.errors import DataLoadError
from pokeduel.core.logging import logger
from pokeduel.core.paths import ROSTER_FILE, ROSTER_SCHEMA
from pokeduel.core.types import is_known_type

@lru_cache(maxsize=None)
def _schema() -> Dict[str, Any]:
    if not ROSTER_SCHEMA.exists():
        raise DataLoadError(str(ROSTER_SCHEMA), "schema file missing")
    return json.loads(ROSTER_SCHEMA.read_text(encoding="utf-8"))

def _sorted_types(raw_types: Sequence[Dict[str, Any]]) -> Tuple[str, ...]:
    ordered = sorted(raw_types, key=lambda t: t.get("slot", 0))
    return tuple(t["type"]["name"].strip().lower() for t in ordered)

def combatant_from_document(doc: Dict[str, Any]) -> Combatant:
    stats = None
    if "stats" in doc:
        stats = tuple(
            StatEntry(normalize_stat_name(s["stat"]["name"]), int(s["base_stat"]))
            for s in doc["stats"]
        )
    moves = tuple(
        MoveRef(m["move"]["name"], m["move"].get("url", ""))
        for m in doc.get("moves", [])
    )
    return Combatant(
        name=doc["name"],
        types=_sorted_types(doc["types"]),
        stats=stats,
        moves=moves,
        level=doc.get("level"),
    )

def _check(c: Combatant):
    for t in c.types:
        if not is_known_type(t):
            logger.warn("UnknownType", combatant=c.name, type=t)
    missing = [s for s in BATTLE_STATS if find_stat(c, s) < 0]
    if missing:
        logger.warn("MissingBattleStats", combatant=c.name, stats=",".join(missing))

@lru_cache(maxsize=8)
def _load(path: str) -> Tuple[Combatant, ...]:
    p = Path(path)
    if not p.exists():
        raise DataLoadError(path, "file does not exist")
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataLoadError(path, f"invalid JSON: {e}") from e
    try:
        jsonschema.validate(raw, _schema())
    except jsonschema.ValidationError as e:
        raise DataLoadError(path, f"schema: {e.message}") from e
    roster = tuple(combatant_from_document(doc) for doc in raw)
    for c in roster:
        _check(c)
    logger.info("RosterLoaded", path=path, count=len(roster))
    return roster

def load_roster(path: Path = ROSTER_FILE) -> Tuple[Combatant, ...]:
    return _load(str(path))

def find_by_name(roster: Sequence[Combatant], name: str) -> Optional[Combatant]:
    name_lower = name.strip().lower()
    for c in roster:
        if c.name.lower() == name_lower:
            return c
    return None

def index_of(roster: Sequence[Combatant], name: str) -> int:
    """Roster position of ``name``; -1 when absent."""
    found = find_by_name(roster, name)
    if found is None:
        return -1
    return roster.index(found)

__all__ = ["load_roster","combatant_from_document","find_by_name","index_of"]
