"""Battle session orchestration for 1v1 battles against random opponents.

A session keeps the user's combatant for its whole lifetime and swaps
opponents in with :meth:`BattleSession.start_battle`. User health and the
victory counter carry over between opponents until :meth:`BattleSession.reset`.

Move lists are resolved through a move-metadata provider, which may be slow;
until both sides are resolved the session reports ``MOVES_LOADING`` and
refuses to attack.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import asyncio

from pokeduel.core.errors import BattleNotReady, InvalidMoveSelection, NoCandidates, NoMovesAvailable, ValidationError
from pokeduel.core.logging import logger
from .damage import DamageCalculator
from .messages import format_attack_message
from .models import AttackOutcome, Combatant, Move, MoveList, Side, TurnReport
from .moves import MoveProvider, choose_opponent_move, move_from_record, pick_copy_move, resolve_move_list
from .order import user_moves_first
from .rng import RandomSource, make_rng
from .stats import find_stat

class BattlePhase(str, Enum):
    AWAITING_OPPONENT = "awaiting_opponent"
    MOVES_LOADING = "moves_loading"
    READY = "ready"
    OPPONENT_DEFEATED = "opponent_defeated"
    USER_DEFEATED = "user_defeated"

@dataclass(frozen=True)
class BattleView:
    """Snapshot of everything a front end needs to draw the battle."""
    phase: BattlePhase
    user_name: str
    user_types: Tuple[str, ...]
    user_health: int
    user_max_health: int
    opponent_name: Optional[str]
    opponent_types: Tuple[str, ...]
    opponent_health: int
    opponent_max_health: int
    user_message: str
    opponent_message: str
    selectable_moves: Tuple[str, ...]
    selected_move_index: int
    victories: int

def seed_health(combatant: Combatant) -> int:
    hp = find_stat(combatant, "hp")
    if hp < 0:
        logger.warn("HpStatUnavailable", combatant=combatant.name, code=hp)
        return 0
    return hp

class BattleSession:
    def __init__(self, roster: Sequence[Combatant], user_index: int, *,
                 rng: Optional[RandomSource] = None,
                 opponents: Optional[Sequence[Combatant]] = None):
        if not 0 <= user_index < len(roster):
            raise ValidationError(f"User index {user_index} outside roster of {len(roster)}")
        self.roster = roster
        # Opponents are drawn from the whole roster unless a narrower pool is given
        self.opponents = roster if opponents is None else opponents
        self.user_index = user_index
        self.rng = rng or make_rng()
        self.damage = DamageCalculator(self.rng)
        self.log: List[str] = []
        # Bumped per opponent so late move lists for a replaced opponent are dropped;
        # survives reset() so lists fetched before a reset stay stale
        self.generation = 0
        self._init_state()

    def _init_state(self):
        self.user_health = seed_health(self.user)
        self.opponent_index: Optional[int] = None
        self.opponent_health = 0
        self.user_message = ""
        self.opponent_message = ""
        self.moves: Dict[Side, Optional[MoveList]] = {Side.USER: None, Side.OPPONENT: None}
        self.selected_move_index = 0
        self.copied_move: Optional[Move] = None
        self.victories = 0

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def user(self) -> Combatant:
        return self.roster[self.user_index]

    @property
    def opponent(self) -> Optional[Combatant]:
        if self.opponent_index is None:
            return None
        return self.opponents[self.opponent_index]

    def combatant(self, side: Side) -> Combatant:
        c = self.user if side is Side.USER else self.opponent
        if c is None:
            raise BattleNotReady(BattlePhase.AWAITING_OPPONENT.value)
        return c

    def health(self, side: Side) -> int:
        return self.user_health if side is Side.USER else self.opponent_health

    def _set_health(self, side: Side, value: int):
        if side is Side.USER:
            self.user_health = value
        else:
            self.opponent_health = value

    def pending_sides(self) -> Tuple[Side, ...]:
        return tuple(s for s in (Side.OPPONENT, Side.USER) if self.moves[s] is None)

    @property
    def phase(self) -> BattlePhase:
        if self.opponent is None:
            return BattlePhase.AWAITING_OPPONENT
        if self.pending_sides():
            return BattlePhase.MOVES_LOADING
        if self.user_health == 0:
            return BattlePhase.USER_DEFEATED
        if self.opponent_health == 0:
            return BattlePhase.OPPONENT_DEFEATED
        return BattlePhase.READY

    def selectable_moves(self) -> Tuple[Move, ...]:
        own = self.moves[Side.USER]
        if own is None:
            return ()
        if own.is_copy:
            return (self.copied_move,) if self.copied_move is not None else ()
        return own.moves

    def view(self) -> BattleView:
        opponent = self.opponent
        return BattleView(
            phase=self.phase,
            user_name=self.user.name,
            user_types=self.user.types,
            user_health=self.user_health,
            user_max_health=seed_health(self.user),
            opponent_name=opponent.name if opponent else None,
            opponent_types=opponent.types if opponent else (),
            opponent_health=self.opponent_health,
            opponent_max_health=seed_health(opponent) if opponent else 0,
            user_message=self.user_message,
            opponent_message=self.opponent_message,
            selectable_moves=tuple(m.name for m in self.selectable_moves()),
            selected_move_index=self.selected_move_index,
            victories=self.victories,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start_battle(self) -> Combatant:
        """Match a new random opponent; user health and victories carry over."""
        if self.phase is BattlePhase.USER_DEFEATED:
            raise BattleNotReady(BattlePhase.USER_DEFEATED.value)
        if not self.opponents:
            raise NoCandidates("No opponents to choose from")
        self.opponent_index = self.rng.randrange(len(self.opponents))
        self.generation += 1
        opponent = self.opponents[self.opponent_index]
        self.opponent_health = seed_health(opponent)
        self.user_message = ""
        self.opponent_message = ""
        self.moves[Side.OPPONENT] = None
        # A copying user re-rolls its borrowed move against each new opponent
        self.copied_move = None
        logger.info("BattleStart", user=self.user.name, opponent=opponent.name,
                    generation=self.generation, victories=self.victories)
        return opponent

    def reset(self):
        """Forget the opponent, restore user health and zero the victory count."""
        self._init_state()
        self.log.clear()
        logger.info("BattleReset", user=self.user.name)

    # ------------------------------------------------------------------
    # Move resolution
    # ------------------------------------------------------------------
    def receive_moves(self, side: Side, moves: Iterable[Move], generation: Optional[int] = None) -> Optional[MoveList]:
        """Install a side's resolved moves.

        ``generation`` identifies the opponent the moves were fetched for;
        moves for an opponent that has since been replaced are dropped.
        """
        if side is Side.OPPONENT:
            if self.opponent is None:
                raise BattleNotReady(BattlePhase.AWAITING_OPPONENT.value)
            if generation is not None and generation != self.generation:
                logger.debug("StaleMovesIgnored", generation=generation, current=self.generation)
                return None
        move_list = resolve_move_list(moves)
        self.moves[side] = move_list
        logger.debug("MovesResolved", side=side.value, combatant=self.combatant(side).name,
                     count=len(move_list.moves), mode=move_list.mode.value)
        self._settle_user_selection()
        return move_list

    def _settle_user_selection(self):
        own = self.moves[Side.USER]
        other = self.moves[Side.OPPONENT]
        if own is None or other is None:
            return
        if own.is_copy:
            if self.copied_move is None and other.moves:
                self.copied_move = pick_copy_move(other, self.rng)
                logger.debug("CopiedMove", move=self.copied_move.name)
            self.selected_move_index = 0
        elif self.selected_move_index >= len(own.moves):
            self.selected_move_index = 0

    async def load_moves(self, provider: MoveProvider):
        """Resolve every pending side through ``provider``, both sides concurrently."""
        generation = self.generation

        async def resolve(side: Side) -> Tuple[Side, List[Move]]:
            combatant = self.combatant(side)
            resolved: List[Move] = []
            for ref in combatant.moves:
                raw = await provider.fetch_move(ref)
                resolved.append(move_from_record(ref.name, raw))
            return side, resolved

        pending = self.pending_sides()
        try:
            results = await asyncio.gather(*(resolve(s) for s in pending))
        except Exception as e:
            logger.error("MoveLoadFailed", error=str(e), pending=",".join(s.value for s in pending))
            raise
        for side, resolved in results:
            self.receive_moves(side, resolved, generation=generation if side is Side.OPPONENT else None)

    def select_move(self, index: int):
        available = self.selectable_moves()
        if not 0 <= index < len(available):
            raise InvalidMoveSelection(index, len(available))
        self.selected_move_index = index

    # ------------------------------------------------------------------
    # Turn resolution
    # ------------------------------------------------------------------
    def _user_move(self) -> Move:
        own = self.moves[Side.USER]
        if own is None:
            raise BattleNotReady(BattlePhase.MOVES_LOADING.value)
        if own.is_copy:
            if self.copied_move is None:
                raise NoMovesAvailable("Neither combatant has a usable move")
            return self.copied_move
        return own.moves[self.selected_move_index]

    def _strike(self, side: Side, user_move: Move) -> AttackOutcome:
        attacker = self.combatant(side)
        defender = self.combatant(side.other)
        if side is Side.USER:
            move = user_move
        else:
            move = choose_opponent_move(self.moves[Side.OPPONENT], self.moves[Side.USER], self.rng)
        performance = self.damage.resolve(move, attacker, defender)
        target_health = max(0, self.health(side.other) - int(performance.damage))
        self._set_health(side.other, target_health)
        message = format_attack_message(attacker.name, move.name, performance)
        if side is Side.USER:
            self.user_message = message
        else:
            self.opponent_message = message
        self.log.append(message)
        return AttackOutcome(side=side, move=move, performance=performance,
                             message=message, target_health=target_health)

    def attack(self) -> TurnReport:
        """Resolve one full turn: both sides act once, faster side first."""
        phase = self.phase
        if phase is not BattlePhase.READY:
            raise BattleNotReady(phase.value)
        user_moves, opponent_moves = self.moves[Side.USER], self.moves[Side.OPPONENT]
        if user_moves.is_copy and opponent_moves.is_copy:
            raise NoMovesAvailable("Neither combatant has a usable move")
        user_move = self._user_move()

        first = Side.USER if user_moves_first(self.user, self.opponent, self.rng) else Side.OPPONENT
        report = TurnReport(first=first)
        report.outcomes.append(self._strike(first, user_move))
        # Second step only if the second side survived the first strike
        second = first.other
        if self.health(second) > 0:
            report.outcomes.append(self._strike(second, user_move))

        if self.opponent_health == 0:
            self.victories += 1
            report.victory = True
        logger.debug("TurnResolved", first=first.value, user_hp=self.user_health,
                     opponent_hp=self.opponent_health, phase=self.phase.value)
        return report

__all__ = ["BattlePhase","BattleView","BattleSession","seed_health"]
