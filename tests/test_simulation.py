from dataclasses import replace

import numpy as np
import pytest

from shooter import simulation as sim
from shooter.entities import ENEMY_ARCHETYPES, Bullet, Enemy
from shooter.rules import HEALTH_RULES, SHIELD_RULES, get_rules
from shooter.state import GamePhase, ShieldPhase, new_game, restart, shield_phase, snapshot

QUIET_HEALTH = replace(HEALTH_RULES, spawn_probability=0.0)
QUIET_SHIELD = replace(SHIELD_RULES, spawn_interval=None)


def make_enemy(x, y, size=40, speed=2, health=None):
    return Enemy(x=x, y=y, width=size, height=size, speed=speed, color="green",
                 health=health, max_health=health)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


def test_get_rules():
    assert get_rules("health") is HEALTH_RULES
    assert get_rules("shield") is SHIELD_RULES
    with pytest.raises(ValueError):
        get_rules("nightmare")


def test_new_game_layout():
    state = new_game(HEALTH_RULES)
    assert (state.player.x, state.player.y) == (375, 540)
    assert state.player.health == 100
    assert state.phase is GamePhase.RUNNING
    assert state.bullets == [] and state.enemies == []

    assert new_game(SHIELD_RULES).player.health is None


# ----------------------------
# Motion
# ----------------------------

def test_player_clamped_on_both_axes_under_health_rules():
    state = new_game(QUIET_HEALTH)
    sim.set_movement(state, -1, -1)
    for _ in range(200):
        sim.update_player(state)
    assert (state.player.x, state.player.y) == (0, 0)

    sim.set_movement(state, 1, 1)
    for _ in range(200):
        sim.update_player(state)
    assert (state.player.x, state.player.y) == (750, 550)


def test_shield_rules_only_move_horizontally():
    state = new_game(QUIET_SHIELD)
    sim.set_movement(state, 1, -1)
    assert state.player.dy == 0
    for _ in range(200):
        sim.update_player(state)
    assert state.player.x == 750
    assert state.player.y == 540


def test_bullets_leaving_the_top_are_removed():
    state = new_game(QUIET_HEALTH)
    state.bullets = [Bullet(x=10, y=1), Bullet(x=20, y=2), Bullet(x=30, y=7), Bullet(x=40, y=3)]
    sim.update_bullets(state)
    # every bullet that crossed y < 0 is gone, the one landing on 0 stays
    assert [b.x for b in state.bullets] == [30]
    assert state.bullets[0].y == 0


def test_leaking_enemy_is_discarded_under_health_rules():
    state = new_game(QUIET_HEALTH)
    state.enemies = [make_enemy(0, 599), make_enemy(100, 100)]
    events = sim.update_enemies(state)
    assert events["leaked"] == 1
    assert len(state.enemies) == 1
    assert state.running


def test_leaking_enemy_ends_the_game_under_shield_rules():
    state = new_game(QUIET_SHIELD)
    state.enemies = [make_enemy(0, 599)]
    sim.update_enemies(state)
    assert state.enemies == []
    assert state.phase is GamePhase.GAME_OVER


# ----------------------------
# Spawner
# ----------------------------

def test_spawner_places_enemy_above_the_field(rng):
    state = new_game(replace(HEALTH_RULES, spawn_probability=1.0))
    for _ in range(50):
        sim.maybe_spawn(state, rng)
    assert len(state.enemies) == 50
    for e in state.enemies:
        assert e.y == -e.height
        assert 0 <= e.x <= state.width - e.width
        assert e.health is not None and e.health > 0
    colors = {e.color for e in state.enemies}
    assert colors == {a.color for a in ENEMY_ARCHETYPES}


def test_spawner_respects_probability(rng):
    state = new_game(QUIET_HEALTH)
    for _ in range(100):
        sim.maybe_spawn(state, rng)
    assert state.enemies == []


def test_shield_rules_spawn_on_a_fixed_cadence(rng):
    state = new_game(SHIELD_RULES)
    state.tick = 10
    assert sim.maybe_spawn(state, rng)["spawned"] == 0
    state.tick = SHIELD_RULES.spawn_interval - 1
    assert sim.maybe_spawn(state, rng)["spawned"] == 1
    assert state.enemies[0].health is None


def test_spawn_specific_archetype(rng):
    state = new_game(QUIET_HEALTH)
    enemy = sim.spawn_enemy(state, rng, archetype=ENEMY_ARCHETYPES[1])
    assert enemy.color == "red"
    assert state.enemies == [enemy]


# ----------------------------
# Collisions
# ----------------------------

def test_player_contact_costs_health_under_health_rules():
    state = new_game(QUIET_HEALTH)
    state.player.x, state.player.y = 100, 50
    state.enemies = [make_enemy(100, 50, size=50)]
    events = sim.resolve_collisions(state)
    assert state.player.health == 90
    assert state.enemies == []
    assert events["player_hits"] == 1
    assert state.running


def test_last_health_point_ends_the_game():
    state = new_game(QUIET_HEALTH)
    state.player.health = 5
    state.enemies = [make_enemy(state.player.x, state.player.y)]
    sim.resolve_collisions(state)
    assert state.player.health == 0
    assert state.phase is GamePhase.GAME_OVER


def test_unshielded_contact_is_lethal_under_shield_rules():
    state = new_game(QUIET_SHIELD)
    state.player.x, state.player.y = 100, 50
    state.enemies = [make_enemy(100, 50, size=50)]
    sim.resolve_collisions(state)
    assert state.phase is GamePhase.GAME_OVER


def test_shield_absorbs_one_contact():
    state = new_game(QUIET_SHIELD)
    assert sim.use_ability(state)
    state.player.x, state.player.y = 100, 50
    state.enemies = [make_enemy(100, 50, size=50)]
    events = sim.resolve_collisions(state)
    assert state.running
    assert state.enemies == []
    assert events["shield_blocks"] == 1
    assert not state.player.shield
    assert shield_phase(state) is ShieldPhase.COOLING


def test_bullet_damages_armoured_enemy():
    state = new_game(QUIET_HEALTH)
    state.bullets = [Bullet(x=100, y=100)]
    state.enemies = [make_enemy(100, 105, health=50)]
    events = sim.resolve_collisions(state)
    assert state.bullets == []
    assert state.enemies[0].health == 30
    assert events["hits"] == 1 and events["kills"] == 0
    assert state.score == 0

    for _ in range(2):
        state.bullets.append(Bullet(x=100, y=100))
        sim.resolve_collisions(state)
    assert state.enemies == []
    assert state.score == HEALTH_RULES.score_per_kill
    assert state.kills == 1


def test_bullet_destroys_enemy_under_shield_rules():
    state = new_game(QUIET_SHIELD)
    state.bullets = [Bullet(x=100, y=100)]
    state.enemies = [make_enemy(100, 105)]
    events = sim.resolve_collisions(state)
    assert state.bullets == [] and state.enemies == []
    assert state.score == 10 and state.high_score == 10
    assert events["score"] == 10


def test_enemy_is_removed_only_once_when_hit_by_two_bullets():
    state = new_game(QUIET_SHIELD)
    state.bullets = [Bullet(x=100, y=100), Bullet(x=110, y=100)]
    state.enemies = [make_enemy(100, 105)]
    events = sim.resolve_collisions(state)
    assert events["kills"] == 1
    assert state.score == 10
    # the second bullet had nothing left to hit
    assert len(state.bullets) == 1 and state.bullets[0].x == 110


def test_bullet_is_spent_on_a_single_enemy():
    state = new_game(QUIET_SHIELD)
    state.bullets = [Bullet(x=100, y=100)]
    state.enemies = [make_enemy(90, 105), make_enemy(102, 95)]
    events = sim.resolve_collisions(state)
    assert events["kills"] == 1
    assert len(state.enemies) == 1


def test_enemy_killed_by_player_contact_is_not_also_shot():
    state = new_game(QUIET_HEALTH)
    p = state.player
    state.enemies = [make_enemy(p.x, p.y, health=50)]
    state.bullets = [Bullet(x=p.x + 5, y=p.y + 5)]
    events = sim.resolve_collisions(state)
    assert events["player_hits"] == 1
    assert events["hits"] == 0
    assert len(state.bullets) == 1


# ----------------------------
# Tick / phases
# ----------------------------

def test_tick_after_game_over_changes_nothing(rng):
    state = new_game(SHIELD_RULES)
    state.bullets = [Bullet(x=10, y=300)]
    state.enemies = [make_enemy(0, 599), make_enemy(300, 100)]
    sim.tick(state, rng)
    assert state.game_over

    before = snapshot(state)
    for _ in range(10):
        events = sim.tick(state, rng)
        assert events["game_over"] == 1
    assert snapshot(state) == before
    assert sim.fire(state) is None
    assert not sim.use_ability(state)
    sim.set_movement(state, 1, 0)
    assert state.player.dx == 0


def test_restart_resets_the_game(rng):
    state = new_game(QUIET_SHIELD)
    state.add_score(40)
    sim.use_ability(state)
    sim.fire(state)
    state.enemies = [make_enemy(0, 599)]
    state.player.x = 10
    sim.tick(state, rng)
    assert state.game_over

    restart(state)
    assert state.phase is GamePhase.RUNNING
    assert state.score == 0
    assert state.high_score == 40
    assert state.bullets == [] and state.enemies == []
    assert (state.player.x, state.player.y) == (375, 540)
    assert state.ability_available
    assert shield_phase(state) is ShieldPhase.AVAILABLE


def _play(rules, ticks, seed):
    """Random play with restarts, yields the state after every tick"""
    rng = np.random.default_rng(seed)
    state = new_game(rules)
    for i in range(ticks):
        if state.game_over:
            restart(state)
        sim.set_movement(state, int(rng.integers(-1, 2)), int(rng.integers(-1, 2)))
        if i % 4 == 0:
            sim.fire(state)
        if i % 200 == 0:
            sim.use_ability(state)
        sim.tick(state, rng)
        yield state


@pytest.mark.parametrize("rules", [HEALTH_RULES, SHIELD_RULES])
def test_player_stays_inside_the_field(rules):
    for state in _play(rules, 3000, seed=7):
        p = state.player
        assert 0 <= p.x <= state.width - p.width
        assert 0 <= p.y <= state.height - p.height


@pytest.mark.parametrize("rules", [HEALTH_RULES, SHIELD_RULES])
def test_high_score_is_the_running_maximum(rules):
    best = 0
    previous_high = 0
    for state in _play(rules, 5000, seed=11):
        best = max(best, state.score)
        assert state.high_score >= previous_high
        assert state.high_score == best
        previous_high = state.high_score


@pytest.mark.parametrize("rules", [HEALTH_RULES, SHIELD_RULES])
def test_no_bullet_above_the_field_after_a_tick(rules):
    for state in _play(rules, 2000, seed=3):
        assert all(b.y >= 0 for b in state.bullets)
        assert all(e.y <= state.height for e in state.enemies)
        assert all(b.alive for b in state.bullets)
        assert all(e.alive for e in state.enemies)
        if state.player.health is not None:
            assert state.player.health >= 0
