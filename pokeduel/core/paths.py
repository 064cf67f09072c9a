"""
Centralized path helpers (works with the current flat layout).
"""
from __future__ import annotations
from pathlib import Path

# This file lives at pokeduel/core/paths.py
ROOT = Path(__file__).resolve().parents[2]   # project root (one up from 'pokeduel')
ASSETS = ROOT / "assets"
SCHEMA = ROOT / "schema"
CATALOG = ASSETS / "catalog"
ROSTER_FILE = CATALOG / "roster.json"
MOVES_FILE = CATALOG / "moves.json"
ROSTER_SCHEMA = SCHEMA / "roster.schema.json"
