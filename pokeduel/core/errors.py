"""
Error classes for clearer exception sources.
"""
from __future__ import annotations

class PokeduelError(Exception):
    pass

class DataLoadError(PokeduelError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load {path}: {detail}")
        self.path = path
        self.detail = detail

class ValidationError(PokeduelError):
    pass

class NoCandidates(PokeduelError):
    """Raised when an opponent is requested from an empty roster."""

class NoMovesAvailable(PokeduelError):
    """Neither side has a usable move, so no turn can be resolved."""

class BattleNotReady(PokeduelError):
    def __init__(self, phase: str):
        super().__init__(f"Battle cannot attack while {phase}")
        self.phase = phase

class InvalidMoveSelection(PokeduelError):
    def __init__(self, index: int, available: int):
        super().__init__(f"Move index {index} out of range (0..{available - 1})")
        self.index = index
        self.available = available
