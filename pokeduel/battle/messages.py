"""Human readable battle text."""
from __future__ import annotations

from .models import MovePerformance

def title_case(text: str) -> str:
    """Upper-case only the first character ("mr. mime" -> "Mr. mime")."""
    return text[:1].upper() + text[1:]

def capital_case(text: str) -> str:
    """First character upper, the rest lower ("tEST" -> "Test")."""
    return text[:1].upper() + text[1:].lower()

def format_amount(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)

def format_attack_message(name: str, move_name: str, performance: MovePerformance) -> str:
    titled = title_case(name)
    if performance.missed:
        return f"{titled} missed"
    crit = "critically " if performance.critical_hit else ""
    stab = " (STAB)" if performance.stab else ""
    return f"{titled} used {move_name} and hit {crit}for {format_amount(performance.damage)} damage{stab}"

__all__ = ["title_case","capital_case","format_amount","format_attack_message"]
