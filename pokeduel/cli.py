"""Command line front end.

``pokeduel roster`` lists the catalog; ``pokeduel simulate`` plays a chosen
combatant against random opponents with uniformly random move choices and
prints every turn.
"""
from __future__ import annotations
import argparse
import asyncio
from pathlib import Path
from typing import List, Optional, Sequence

from rich.box import ROUNDED
from rich.console import Console
from rich.table import Table

from pokeduel import __version__
from pokeduel.battle.models import Combatant
from pokeduel.battle.render import battle_panel, phase_prompt, turn_lines
from pokeduel.battle.rng import make_rng
from pokeduel.battle.session import BattlePhase, BattleSession
from pokeduel.battle.stats import find_stat
from pokeduel.core.errors import NoMovesAvailable, PokeduelError, ValidationError
from pokeduel.core.logging import logger
from pokeduel.core.paths import CATALOG
from pokeduel.core.types import rich_type_markup
from pokeduel.data.catalog import index_of, load_roster
from pokeduel.data.moves import CatalogMoveProvider
from pokeduel.system.settings import Settings

console = Console()

# Neutral matchups such as normal vs ghost can never finish on their own
MAX_TURNS = 100

def _catalog_dir(args, settings: Settings) -> Path:
    if args.catalog:
        return Path(args.catalog)
    if settings.data.catalog_dir:
        return Path(settings.data.catalog_dir)
    return CATALOG

def _stat_cell(c: Combatant, name: str) -> str:
    value = find_stat(c, name)
    return str(value) if value >= 0 else "-"

def cmd_roster(args, settings: Settings) -> int:
    roster = load_roster(_catalog_dir(args, settings) / "roster.json")
    table = Table(title="[bold]ROSTER[/bold]", box=ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Name", style="bright_white")
    table.add_column("Types")
    for stat in ("HP", "Atk", "Def", "Spd"):
        table.add_column(stat, justify="right")
    table.add_column("Moves", justify="right")
    for i, c in enumerate(roster):
        types = " ".join(rich_type_markup(t, t.upper()) for t in c.types)
        table.add_row(
            str(i), c.name.capitalize(), types,
            _stat_cell(c, "hp"), _stat_cell(c, "attack"),
            _stat_cell(c, "defense"), _stat_cell(c, "speed"),
            str(len(c.moves)),
        )
    console.print(table)
    return 0

def _play_battle(session: BattleSession, provider: CatalogMoveProvider, quiet: bool) -> str:
    opponent = session.start_battle()
    asyncio.run(session.load_moves(provider))
    if not quiet:
        console.rule(f"{session.user.name.capitalize()} vs {opponent.name.capitalize()}")
        console.print(battle_panel(session.view()))
    for _ in range(MAX_TURNS):
        if session.phase is not BattlePhase.READY:
            break
        choices = session.selectable_moves()
        if choices:
            session.select_move(session.rng.randrange(len(choices)))
        try:
            report = session.attack()
        except NoMovesAvailable as e:
            logger.warn("Stalemate", user=session.user.name, opponent=opponent.name, reason=str(e))
            return "stalemate"
        if not quiet:
            for line in turn_lines(report):
                console.print(line)
    view = session.view()
    if not quiet:
        console.print(battle_panel(view))
        console.print(f"[dim]{phase_prompt(view)}[/dim]")
    if view.phase is BattlePhase.OPPONENT_DEFEATED:
        return "won"
    if view.phase is BattlePhase.USER_DEFEATED:
        return "lost"
    logger.warn("TurnLimitReached", user=session.user.name, opponent=opponent.name, turns=MAX_TURNS)
    return "draw"

def cmd_simulate(args, settings: Settings) -> int:
    catalog = _catalog_dir(args, settings)
    roster = load_roster(catalog / "roster.json")
    provider = CatalogMoveProvider.from_file(catalog / "moves.json")
    user_index = index_of(roster, args.user)
    if user_index < 0:
        raise ValidationError(f"No combatant named {args.user!r} in {catalog}")
    if args.battles < 1:
        raise ValidationError("--battles must be at least 1")
    seed = args.seed if args.seed is not None else settings.data.seed
    session = BattleSession(roster, user_index, rng=make_rng(seed))

    results: List[tuple] = []
    for number in range(1, args.battles + 1):
        result = _play_battle(session, provider, args.quiet)
        opponent_name = session.opponent.name
        results.append((number, opponent_name, result, session.user_health))
        if result != "won":
            break

    summary = Table(title=f"[bold]{session.user.name.capitalize()}[/bold] summary", box=ROUNDED)
    summary.add_column("Battle", justify="right")
    summary.add_column("Opponent")
    summary.add_column("Result")
    summary.add_column("HP left", justify="right")
    colors = {"won": "green", "lost": "red", "draw": "yellow", "stalemate": "yellow"}
    for number, opponent_name, result, hp in results:
        color = colors[result]
        summary.add_row(str(number), opponent_name.capitalize(), f"[{color}]{result}[/{color}]", str(hp))
    console.print(summary)
    console.print(f"Victories: [bold]{session.victories}[/bold]")
    return 0

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pokeduel", description="One-on-one creature battle simulator")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", choices=["DEBUG","INFO","WARN","ERROR"],
                        help="Override the log level from settings")
    sub = parser.add_subparsers(dest="command", required=True)

    roster = sub.add_parser("roster", help="List the combatants in the catalog")
    roster.add_argument("--catalog", help="Directory holding roster.json and moves.json")
    roster.set_defaults(func=cmd_roster)

    sim = sub.add_parser("simulate", help="Battle random opponents until defeated")
    sim.add_argument("--user", required=True, help="Name of the combatant to play")
    sim.add_argument("--seed", type=int, help="Seed for reproducible battles")
    sim.add_argument("--battles", type=int, default=1, help="Maximum number of battles")
    sim.add_argument("--catalog", help="Directory holding roster.json and moves.json")
    sim.add_argument("--quiet", action="store_true", help="Only print the summary")
    sim.set_defaults(func=cmd_simulate)
    return parser

def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.load()
    settings.apply()
    if args.log_level:
        logger.set_level(args.log_level)
    try:
        return args.func(args, settings)
    except PokeduelError as e:
        logger.error("CommandFailed", command=args.command, error=str(e))
        console.print(f"[red]{e}[/red]")
        return 1
