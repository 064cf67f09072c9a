"""Global type metadata: colors & abbreviations.

Provides:
  TYPE_NAMES: the closed set of type tags the battle engine understands
  TYPE_COLORS_HEX: mapping type -> hex color string (#RRGGBB)
  TYPE_ABBREVIATIONS: mapping type -> 3-letter abbreviation (upper)
  helpers producing rich markup for type badges.
"""
from __future__ import annotations
from typing import Dict, FrozenSet, Iterable
import re

TYPE_COLORS_HEX: Dict[str, str] = {
    "normal": "#A8A77A",
    "fire": "#EE8130",
    "water": "#6390F0",
    "electric": "#F7D02C",
    "grass": "#7AC74C",
    "ice": "#96D9D6",
    "fighting": "#C22E28",
    "poison": "#A33EA1",
    "ground": "#E2BF65",
    "flying": "#A98FF3",
    "psychic": "#F95587",
    "bug": "#A6B91A",
    "rock": "#B6A136",
    "ghost": "#735797",
    "dragon": "#6F35FC",
    "dark": "#705746",
    "steel": "#B7B7CE",
    "fairy": "#D685AD",
}

TYPE_NAMES: FrozenSet[str] = frozenset(TYPE_COLORS_HEX)

TYPE_ABBREVIATIONS: Dict[str, str] = {
    "normal": "NRM",
    "fire": "FIR",
    "water": "WTR",
    "grass": "GRS",
    "electric": "ELE",
    "ice": "ICE",
    "fighting": "FGT",
    "poison": "PSN",
    "ground": "GRN",
    "flying": "FLY",
    "psychic": "PSY",
    "bug": "BUG",
    "rock": "RCK",
    "ghost": "GHO",
    "dragon": "DRA",
    "dark": "DRK",
    "steel": "STL",
    "fairy": "FAI",
}

def is_known_type(type_name: str) -> bool:
    return type_name.lower() in TYPE_NAMES

def type_abbreviation(type_name: str) -> str:
    return TYPE_ABBREVIATIONS.get(type_name.lower(), type_name[:3].upper())

def rich_type_markup(type_name: str, text: str) -> str:
    """Wrap text in rich colour markup for the given type (plain text if unknown)."""
    hex_color = TYPE_COLORS_HEX.get(type_name.lower())
    if not hex_color:
        return text
    return f"[{hex_color}]{text}[/{hex_color}]"

def format_types(types: Iterable[str]) -> str:
    parts = [rich_type_markup(t, type_abbreviation(t)) for t in types]
    return '/'.join(parts)

MARKUP_TAG_RE = re.compile(r"\[/?#[0-9A-Fa-f]{6}\]")

def strip_markup(s: str) -> str:
    return MARKUP_TAG_RE.sub('', s)

__all__ = [
    'TYPE_NAMES','TYPE_COLORS_HEX','TYPE_ABBREVIATIONS',
    'is_known_type','type_abbreviation','rich_type_markup','format_types','strip_markup'
]
