"""Random source used by a battle session.

Anything with a ``randrange(stop)`` method works; ``random.Random`` is the
default so a seed reproduces a whole battle.
"""
from __future__ import annotations
from typing import Optional, Protocol
import random

class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...

def make_rng(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)

__all__ = ["RandomSource","make_rng"]
