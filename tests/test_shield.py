from dataclasses import replace

import numpy as np

from shooter import simulation as sim
from shooter.rules import HEALTH_RULES, SHIELD_RULES
from shooter.state import GamePhase, ShieldPhase, new_game, restart, shield_phase, snapshot

QUIET_SHIELD = replace(SHIELD_RULES, spawn_interval=None)


def run_ticks(state, n, rng=None):
    rng = rng if rng is not None else np.random.default_rng(0)
    for _ in range(n):
        sim.tick(state, rng)


def test_ability_is_disabled_under_health_rules():
    state = new_game(HEALTH_RULES)
    assert not sim.use_ability(state)
    assert not state.player.shield


def test_shield_lasts_its_duration():
    state = new_game(QUIET_SHIELD)
    assert shield_phase(state) is ShieldPhase.AVAILABLE
    assert sim.use_ability(state)
    assert shield_phase(state) is ShieldPhase.ACTIVE

    run_ticks(state, QUIET_SHIELD.shield_duration - 1)
    assert state.player.shield
    assert snapshot(state).shield_ticks_left == 1

    run_ticks(state, 1)
    assert not state.player.shield
    assert shield_phase(state) is ShieldPhase.AVAILABLE
    assert state.shield_expiries == []


def test_shield_cannot_be_stacked():
    state = new_game(QUIET_SHIELD)
    assert sim.use_ability(state)
    assert not sim.use_ability(state)
    assert len(state.shield_expiries) == 1


def test_consumed_shield_recharges_when_its_timer_fires():
    state = new_game(QUIET_SHIELD)
    sim.use_ability(state)
    state.player.shield = False
    state.ability_available = False
    assert shield_phase(state) is ShieldPhase.COOLING
    assert not sim.use_ability(state)

    run_ticks(state, QUIET_SHIELD.shield_duration)
    assert shield_phase(state) is ShieldPhase.AVAILABLE
    assert sim.use_ability(state)


def test_timer_from_previous_game_cuts_new_shield_short():
    state = new_game(QUIET_SHIELD)
    sim.use_ability(state)  # expires at clock 300
    run_ticks(state, 100)
    state.phase = GamePhase.GAME_OVER

    restart(state)
    assert state.clock == 100
    run_ticks(state, 50)
    assert sim.use_ability(state)  # would expire at clock 450

    run_ticks(state, 150)
    assert state.clock == 300
    assert not state.player.shield
    assert shield_phase(state) is ShieldPhase.AVAILABLE


def test_restart_can_cancel_pending_timers():
    rules = replace(QUIET_SHIELD, cancel_shield_timers_on_restart=True)
    state = new_game(rules)
    sim.use_ability(state)
    run_ticks(state, 100)
    state.phase = GamePhase.GAME_OVER

    restart(state)
    assert state.shield_expiries == []
    run_ticks(state, 50)
    sim.use_ability(state)
    run_ticks(state, 150)
    assert state.player.shield
    run_ticks(state, 150)
    assert not state.player.shield
