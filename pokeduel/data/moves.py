"""Runtime loader for move metadata.

Serves the catalog's move documents from a local JSON file keyed by move
URL, behind the same async interface a remote lookup would have.
"""
from __future__ import annotations
import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

from pokeduel.battle.models import MoveRef
from pokeduel.core.errors import DataLoadError
from pokeduel.core.logging import logger
from pokeduel.core.paths import MOVES_FILE

class CatalogMoveProvider:
    def __init__(self, records: Mapping[str, Mapping[str, Any]]):
        self.records: Dict[str, Mapping[str, Any]] = dict(records)
        self._by_name = {str(r.get("name")): r for r in self.records.values() if r.get("name")}

    @classmethod
    def from_file(cls, path: Path = MOVES_FILE) -> "CatalogMoveProvider":
        return cls(_read_moves(str(path)))

    async def fetch_move(self, ref: MoveRef) -> Mapping[str, Any]:
        record = self.records.get(ref.url) or self._by_name.get(ref.name)
        if record is None:
            logger.warn("MoveMetadataMissing", move=ref.name, url=ref.url)
            return {}
        return record

@lru_cache(maxsize=8)
def _read_moves(path: str) -> Dict[str, Mapping[str, Any]]:
    p = Path(path)
    if not p.exists():
        raise DataLoadError(path, "file does not exist")
    try:
        raw = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise DataLoadError(path, f"invalid JSON: {e}") from e
    if not isinstance(raw, dict):
        raise DataLoadError(path, "expected an object keyed by move url")
    logger.debug("MovesLoaded", path=path, count=len(raw))
    return raw

__all__ = ["CatalogMoveProvider"]
