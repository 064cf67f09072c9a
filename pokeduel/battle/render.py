"""Rich markup for terminal battle output.

Only formatting lives here; everything is derived from :class:`BattleView`
and :class:`TurnReport` so the engine itself never prints.
"""
from __future__ import annotations
from typing import List

from rich.align import Align
from rich.box import ROUNDED
from rich.columns import Columns
from rich.markup import escape
from rich.panel import Panel

from pokeduel.core.types import format_types
from .messages import title_case
from .models import Side, TurnReport
from .session import BattlePhase, BattleView

_PHASE_PROMPTS = {
    BattlePhase.AWAITING_OPPONENT: "Selecting opponent...",
    BattlePhase.MOVES_LOADING: "Loading moves...",
    BattlePhase.READY: "Choose a move",
    BattlePhase.OPPONENT_DEFEATED: "Opponent defeated. Battle again?",
    BattlePhase.USER_DEFEATED: "You were knocked out. Restart?",
}

def hp_bar(current: int, max_hp: int, width: int = 20) -> str:
    if max_hp <= 0:
        return "[red]FAINTED[/red]"
    current = max(0, min(current, max_hp))
    percent = current / max_hp
    filled = int(percent * width)

    # Choose color based on HP percentage
    if percent > 0.5:
        color = "green"
    elif percent > 0.25:
        color = "yellow"
    else:
        color = "red"

    bar = "█" * filled + "░" * (width - filled)
    return f"[{color}]{bar}[/{color}]"

def _side_panel(title: str, name: str, types, health: int, max_health: int) -> Panel:
    body = (
        f"[bold bright_white]{title_case(name)}[/bold bright_white]\n"
        f"{format_types(types)}\n"
        f"HP: {health}/{max_health}\n"
        f"{hp_bar(health, max_health)}"
    )
    return Panel(body, title=f"[bold]{title}[/bold]", box=ROUNDED, width=36, padding=(0, 1))

def phase_prompt(view: BattleView) -> str:
    return _PHASE_PROMPTS[view.phase]

def battle_panel(view: BattleView) -> Align:
    panels = []
    if view.opponent_name is not None:
        panels.append(_side_panel("OPPONENT", view.opponent_name, view.opponent_types,
                                  view.opponent_health, view.opponent_max_health))
    panels.append(_side_panel("YOU", view.user_name, view.user_types,
                              view.user_health, view.user_max_health))
    return Align.center(Columns(panels, equal=True, expand=False, padding=(0, 4)))

def turn_lines(report: TurnReport) -> List[str]:
    lines = []
    for outcome in report.outcomes:
        style = "cyan" if outcome.side is Side.USER else "magenta"
        lines.append(f"[{style}]{escape(outcome.message)}[/{style}]")
    if report.victory:
        lines.append("[bold green]Victory![/bold green]")
    return lines

__all__ = ["hp_bar","battle_panel","phase_prompt","turn_lines"]
