import asyncio

import pytest

from pokeduel.battle.models import NO_POWER, Combatant, Side
from pokeduel.battle.session import BattlePhase, BattleSession, seed_health
from pokeduel.core.errors import BattleNotReady, InvalidMoveSelection, NoCandidates, NoMovesAvailable, ValidationError
from battle_helpers import FakeProvider, ScriptedRandom, combatant, doc, move

CHARMANDER = combatant("charmander", types=("fire",), moves=("ember", "growl"), hp=20, attack=10, defense=1, speed=90)
BULBASAUR = combatant("bulbasaur", types=("grass",), moves=("tackle",), hp=10, attack=10, defense=1, speed=10)
WEEDLE = combatant("weedle", types=("bug",), moves=("poison-sting",), hp=5, attack=1, defense=1, speed=5)
DITTO = combatant("ditto", types=("normal",), moves=("transform",), hp=48, attack=48, defense=48, speed=48)
PIDGEY = combatant("pidgey", types=("normal", "flying"), moves=("peck",), hp=40, attack=45, defense=40, speed=56)

EMBER = move("Ember", category="fire")
SCRATCH = move("Scratch", category="normal", power=1)
TACKLE = move("Tackle", category="normal")
TRANSFORM = move("Transform", power=NO_POWER)


def ready_session(roster, user_index, user_moves, opponent_moves, *draws):
    """Session whose first start_battle draw picks roster index 1."""
    rng = ScriptedRandom(1, *draws)
    session = BattleSession(roster, user_index, rng=rng)
    session.start_battle()
    session.receive_moves(Side.USER, user_moves)
    session.receive_moves(Side.OPPONENT, opponent_moves)
    return session, rng


def test_phases_until_ready():
    session = BattleSession([CHARMANDER, BULBASAUR], 0, rng=ScriptedRandom(1))
    assert session.phase is BattlePhase.AWAITING_OPPONENT
    assert session.view().opponent_name is None
    assert session.start_battle() is BULBASAUR
    assert session.phase is BattlePhase.MOVES_LOADING
    session.receive_moves(Side.USER, [EMBER])
    assert session.phase is BattlePhase.MOVES_LOADING
    session.receive_moves(Side.OPPONENT, [TACKLE])
    assert session.phase is BattlePhase.READY
    view = session.view()
    assert (view.user_health, view.user_max_health) == (20, 20)
    assert (view.opponent_health, view.opponent_max_health) == (10, 10)
    assert view.selectable_moves == ("Ember",)


def test_attack_refused_until_ready():
    session = BattleSession([CHARMANDER, BULBASAUR], 0, rng=ScriptedRandom(1))
    with pytest.raises(BattleNotReady):
        session.attack()
    session.start_battle()
    with pytest.raises(BattleNotReady) as exc:
        session.attack()
    assert exc.value.phase == "moves_loading"


def test_bad_user_index():
    with pytest.raises(ValidationError):
        BattleSession([CHARMANDER], 3)


def test_faster_user_knocks_out_before_reply():
    # miss roll 0 hits, crit roll 200 misses a rate of 45
    session, rng = ready_session([CHARMANDER, BULBASAUR], 0, [EMBER], [TACKLE], 0, 200)
    report = session.attack()
    assert report.first is Side.USER
    assert len(report.outcomes) == 1
    outcome = report.outcome_for(Side.USER)
    assert outcome.performance.damage == 18
    assert outcome.message == "Charmander used Ember and hit for 18 damage (STAB)"
    assert report.victory
    assert session.opponent_health == 0
    assert session.user_health == 20
    assert session.victories == 1
    assert session.phase is BattlePhase.OPPONENT_DEFEATED
    assert session.view().user_message == outcome.message
    assert session.view().opponent_message == ""
    assert not rng.values


def test_full_turn_both_sides_strike():
    session, _ = ready_session([CHARMANDER, BULBASAUR], 0, [SCRATCH], [TACKLE], 0, 200, 0, 0, 200)
    report = session.attack()
    assert [o.side for o in report.outcomes] == [Side.USER, Side.OPPONENT]
    assert session.opponent_health == 8
    assert session.user_health == 14
    assert not report.victory
    assert session.phase is BattlePhase.READY
    assert session.view().opponent_message == "Bulbasaur used Tackle and hit for 6 damage"
    assert session.log == [report.outcomes[0].message, report.outcomes[1].message]


def test_faster_opponent_defeats_user():
    session, _ = ready_session([WEEDLE, BULBASAUR], 0, [SCRATCH], [TACKLE], 0, 0, 200)
    report = session.attack()
    assert report.first is Side.OPPONENT
    assert len(report.outcomes) == 1
    assert session.user_health == 0
    assert session.phase is BattlePhase.USER_DEFEATED
    assert session.victories == 0
    with pytest.raises(BattleNotReady):
        session.attack()
    with pytest.raises(BattleNotReady):
        session.start_battle()


def test_speed_tie_draws_first():
    twin = combatant("twin", types=("normal",), moves=("tackle",), hp=30, speed=40)
    other = combatant("other", types=("normal",), moves=("tackle",), hp=30, speed=40)
    # tie-break 1 => opponent first; then opponent move, miss, crit; user miss, crit
    session, _ = ready_session([twin, other], 0, [TACKLE], [TACKLE], 1, 0, 0, 200, 0, 200)
    assert session.attack().first is Side.OPPONENT


def test_damage_is_truncated_when_applied():
    fast_fire = combatant("blaze", types=("fire",), moves=("ember",), hp=50, attack=10, speed=512)
    # 6 * 1.5 crit * 1.5 stab = 13.5 neutral damage against normal
    target = combatant("target", types=("normal",), moves=("tackle",), hp=50, defense=1, speed=1)
    session, _ = ready_session([fast_fire, target], 0, [EMBER], [TACKLE], 0, 0, 0, 0, 200)
    report = session.attack()
    assert report.outcomes[0].performance.damage == 13.5
    assert session.opponent_health == 50 - 13


def test_next_opponent_keeps_user_health_and_victories():
    session, rng = ready_session([CHARMANDER, BULBASAUR], 0, [SCRATCH, EMBER], [TACKLE], 0, 200, 0, 0, 200)
    session.attack()
    session.select_move(1)
    rng.push(0, 200)
    session.attack()
    assert session.victories == 1
    assert session.user_health == 14
    rng.push(1)
    session.start_battle()
    assert session.phase is BattlePhase.MOVES_LOADING
    assert session.pending_sides() == (Side.OPPONENT,)
    assert session.user_health == 14
    assert session.opponent_health == 10
    assert session.victories == 1
    assert session.view().user_message == ""
    assert session.selected_move_index == 1


def test_reset_restores_initial_state():
    session, _ = ready_session([CHARMANDER, BULBASAUR], 0, [EMBER], [TACKLE], 0, 200)
    session.attack()
    session.reset()
    view = session.view()
    assert view.phase is BattlePhase.AWAITING_OPPONENT
    assert view.victories == 0
    assert view.user_health == 20
    assert view.selectable_moves == ()
    assert session.log == []


def test_copying_user_borrows_opponent_move():
    session = BattleSession([DITTO, CHARMANDER, PIDGEY], 0, rng=ScriptedRandom(1))
    session.start_battle()
    session.receive_moves(Side.USER, [TRANSFORM])
    assert session.moves[Side.USER].is_copy
    session.rng.push(1)
    session.receive_moves(Side.OPPONENT, [EMBER, SCRATCH])
    assert session.view().selectable_moves == ("Scratch",)

    # A new opponent invalidates the borrowed move
    session.rng.push(2)
    session.start_battle()
    assert session.view().selectable_moves == ()
    session.rng.push(0)
    session.receive_moves(Side.OPPONENT, [move("Peck", category="flying"), TACKLE])
    assert session.view().selectable_moves == ("Peck",)


def test_copying_user_attacks_with_borrowed_move():
    session = BattleSession([DITTO, BULBASAUR], 0, rng=ScriptedRandom(1, 0))
    session.start_battle()
    session.receive_moves(Side.USER, [TRANSFORM])
    session.receive_moves(Side.OPPONENT, [TACKLE])
    session.rng.push(0, 200)
    report = session.attack()
    assert report.outcome_for(Side.USER).move.name == "Tackle"


def test_both_sides_copying_raises_without_changes():
    session = BattleSession([DITTO, DITTO], 0, rng=ScriptedRandom(1))
    session.start_battle()
    session.receive_moves(Side.USER, [TRANSFORM])
    session.receive_moves(Side.OPPONENT, [TRANSFORM])
    before = session.view()
    with pytest.raises(NoMovesAvailable):
        session.attack()
    assert session.view() == before
    assert not session.rng.values


def test_view_is_idempotent():
    session, _ = ready_session([CHARMANDER, BULBASAUR], 0, [EMBER], [TACKLE])
    assert session.view() == session.view()
    assert session.phase is session.phase


def test_stale_opponent_moves_are_dropped():
    session = BattleSession([CHARMANDER, BULBASAUR, PIDGEY], 0, rng=ScriptedRandom(1, 2))
    session.start_battle()
    stale = session.generation
    session.start_battle()
    assert session.receive_moves(Side.OPPONENT, [TACKLE], generation=stale) is None
    assert Side.OPPONENT in session.pending_sides()
    assert session.receive_moves(Side.OPPONENT, [TACKLE], generation=session.generation) is not None


def test_moves_fetched_before_reset_stay_stale():
    session = BattleSession([CHARMANDER, BULBASAUR], 0, rng=ScriptedRandom(1, 1))
    session.start_battle()
    before_reset = session.generation
    session.reset()
    session.start_battle()
    assert session.generation > before_reset
    assert session.receive_moves(Side.OPPONENT, [move("Leftover")], generation=before_reset) is None
    assert Side.OPPONENT in session.pending_sides()


def test_user_move_requires_loaded_moves():
    session = BattleSession([CHARMANDER, BULBASAUR], 0, rng=ScriptedRandom(1))
    session.start_battle()
    with pytest.raises(BattleNotReady):
        session._user_move()


def test_negative_level_never_heals_the_defender():
    feeble = combatant("feeble", types=("bug",), moves=("tackle",), hp=10, attack=10, speed=90, level=-100)
    target = combatant("target", types=("normal",), moves=("tackle",), hp=20, defense=1, speed=10)
    session, _ = ready_session([feeble, target], 0, [TACKLE], [TACKLE], 0, 200, 0, 0, 200)
    session.attack()
    view = session.view()
    assert view.opponent_health == 18
    assert view.opponent_health <= view.opponent_max_health
    assert view.user_health <= view.user_max_health


def test_empty_opponent_pool():
    session = BattleSession([CHARMANDER], 0, opponents=[])
    with pytest.raises(NoCandidates):
        session.start_battle()


def test_select_move_bounds():
    session, _ = ready_session([CHARMANDER, BULBASAUR], 0, [EMBER, SCRATCH], [TACKLE])
    session.select_move(1)
    assert session.view().selected_move_index == 1
    with pytest.raises(InvalidMoveSelection):
        session.select_move(2)
    with pytest.raises(InvalidMoveSelection):
        session.select_move(-1)


def test_missing_hp_seeds_zero_health():
    assert seed_health(Combatant("broken", types=("normal",))) == 0
    assert seed_health(CHARMANDER) == 20


PROVIDER_DOCS = {
    "ember": doc(power=40, type_name="fire"),
    "growl": doc(power=None),
    "tackle": doc(power=40),
}


def test_load_moves_resolves_both_sides():
    session = BattleSession([CHARMANDER, BULBASAUR], 0, rng=ScriptedRandom(1))
    session.start_battle()
    provider = FakeProvider(PROVIDER_DOCS)
    asyncio.run(session.load_moves(provider))
    assert session.phase is BattlePhase.READY
    assert session.view().selectable_moves == ("Ember",)
    assert session.moves[Side.OPPONENT].names() == ("Tackle",)
    assert sorted(provider.requested) == ["ember", "growl", "tackle"]


def test_load_moves_only_fetches_pending_sides():
    session = BattleSession([CHARMANDER, BULBASAUR], 0, rng=ScriptedRandom(1, 1))
    session.start_battle()
    asyncio.run(session.load_moves(FakeProvider(PROVIDER_DOCS)))
    session.start_battle()
    provider = FakeProvider(PROVIDER_DOCS)
    asyncio.run(session.load_moves(provider))
    assert provider.requested == ["tackle"]


def test_provider_failure_leaves_moves_loading():
    session = BattleSession([CHARMANDER, BULBASAUR], 0, rng=ScriptedRandom(1))
    session.start_battle()
    with pytest.raises(ConnectionError):
        asyncio.run(session.load_moves(FakeProvider(PROVIDER_DOCS, fail_on={"tackle"})))
    assert session.phase is BattlePhase.MOVES_LOADING
    with pytest.raises(BattleNotReady):
        session.attack()
