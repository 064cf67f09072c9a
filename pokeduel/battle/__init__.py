"""
Battle engine package.
Modules:
- models.py (Combatant, Move, MoveList, outcomes)
- stats.py (base stat lookup)
- typechart.py (type matchups)
- damage.py (hit/miss, crits, STAB, damage formula)
- moves.py (usable moves, copy fallback, opponent move choice)
- order.py (turn order)
- session.py (battle lifecycle and turn sequencing)
- render.py (rich markup for terminal output)
"""
from .session import BattleSession, BattlePhase, BattleView
__all__ = ["BattleSession","BattlePhase","BattleView"]
