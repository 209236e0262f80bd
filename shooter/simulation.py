"""
Per-frame simulation step
-------------------------
Spawner, motion updater, collision resolver and shield timer, all operating
on an explicit ``GameState``. ``tick`` runs them in order and reports what
happened as an events dict, which the gym env turns into rewards.

Removals never splice a list while it is being walked: entities are marked
dead (``alive = False``) and each pass ends with a single compaction.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional

import numpy as np

from .entities import Bullet, Enemy, EnemyArchetype, ENEMY_ARCHETYPES, BULLET_WIDTH
from .state import GameState, GamePhase
from .utils import aabb_overlap, clamp

logger = logging.getLogger(__name__)

Events = Dict[str, int]

EVENT_KEYS = (
    "spawned",
    "shots",
    "hits",
    "kills",
    "score",
    "player_hits",
    "shield_blocks",
    "leaked",
    "game_over",
)


def new_events() -> Events:
    return {key: 0 for key in EVENT_KEYS}


def _end_game(state: GameState, reason: str):
    if state.phase is GamePhase.GAME_OVER:
        return
    state.phase = GamePhase.GAME_OVER
    logger.info("Game over (%s) at tick %d, score %d", reason, state.tick, state.score)


# ----------------------------
# Input operations
# ----------------------------

def set_movement(state: GameState, x_dir: int, y_dir: int = 0):
    """Set player velocity from a direction in {-1, 0, 1} per axis"""
    if not state.running:
        return
    p = state.player
    p.dx = clamp(x_dir, -1, 1) * p.speed
    p.dy = clamp(y_dir, -1, 1) * p.speed if state.rules.vertical_movement else 0.0


def fire(state: GameState) -> Optional[Bullet]:
    """Launch a bullet from the top centre of the player"""
    if not state.running:
        return None
    p = state.player
    bullet = Bullet(x=p.x + p.width / 2 - BULLET_WIDTH / 2, y=p.y)
    state.bullets.append(bullet)
    state.shots_fired += 1
    return bullet


def use_ability(state: GameState) -> bool:
    """Raise the shield if the rules allow it and it is not on cooldown"""
    if not state.running or not state.rules.ability_enabled or not state.ability_available:
        return False
    state.player.shield = True
    state.ability_available = False
    state.shield_expiries.append(state.clock + state.rules.shield_duration)
    logger.debug("Shield raised at clock %d", state.clock)
    return True


# ----------------------------
# Spawner
# ----------------------------

def spawn_enemy(state: GameState, rng: np.random.Generator,
                archetype: Optional[EnemyArchetype] = None) -> Enemy:
    """Append an enemy just above the top edge at a random column"""
    if archetype is None:
        archetype = ENEMY_ARCHETYPES[int(rng.integers(len(ENEMY_ARCHETYPES)))]
    x = float(rng.uniform(0.0, max(0.0, state.width - archetype.width)))
    enemy = Enemy.from_archetype(
        archetype,
        x=x,
        y=-archetype.height,
        with_health=state.rules.bullet_damage is not None,
    )
    state.enemies.append(enemy)
    return enemy


def maybe_spawn(state: GameState, rng: np.random.Generator, events: Optional[Events] = None) -> Events:
    events = new_events() if events is None else events
    rules = state.rules

    if rules.spawn_interval is not None and (state.tick + 1) % rules.spawn_interval == 0:
        spawn_enemy(state, rng)
        events["spawned"] += 1

    if rules.spawn_probability > 0 and rng.random() < rules.spawn_probability:
        spawn_enemy(state, rng)
        events["spawned"] += 1

    return events


# ----------------------------
# Motion updater
# ----------------------------

def update_player(state: GameState):
    p = state.player
    p.x += p.dx
    p.y += p.dy

    p.x = clamp(p.x, 0.0, state.width - p.width)
    if state.rules.vertical_movement:
        p.y = clamp(p.y, 0.0, state.height - p.height)


def update_bullets(state: GameState):
    for b in state.bullets:
        b.y -= b.speed
        if b.y < 0:
            b.alive = False

    state.bullets = [b for b in state.bullets if b.alive]


def update_enemies(state: GameState, events: Optional[Events] = None) -> Events:
    events = new_events() if events is None else events

    for e in state.enemies:
        if not e.alive:
            continue
        e.y += e.speed
        if e.y > state.height:
            e.alive = False
            events["leaked"] += 1
            if state.rules.leak_ends_game:
                _end_game(state, "enemy reached the bottom")

    state.enemies = [e for e in state.enemies if e.alive]
    return events


def update_motion(state: GameState, events: Optional[Events] = None) -> Events:
    events = new_events() if events is None else events
    update_player(state)
    update_bullets(state)
    update_enemies(state, events)
    return events


# ----------------------------
# Collision resolver
# ----------------------------

def _resolve_player_hits(state: GameState, events: Events):
    player = state.player
    rules = state.rules

    for e in state.enemies:
        if not e.alive or not aabb_overlap(player, e):
            continue

        e.alive = False
        events["player_hits"] += 1

        if player.health is not None:
            player.health = max(0, player.health - rules.contact_damage)
            state.hits_taken += 1
            if player.health <= 0:
                _end_game(state, "health depleted")
                break
        elif player.shield:
            player.shield = False
            events["shield_blocks"] += 1
            logger.debug("Shield absorbed a hit at tick %d", state.tick)
        else:
            state.hits_taken += 1
            _end_game(state, "hit without shield")
            break


def _resolve_bullet_hits(state: GameState, events: Events):
    rules = state.rules

    for b in state.bullets:
        if not b.alive:
            continue
        for e in state.enemies:
            if not e.alive or not aabb_overlap(b, e):
                continue

            # a bullet is spent on the first enemy it touches
            b.alive = False
            events["hits"] += 1

            if rules.bullet_damage is None or e.health is None:
                e.alive = False
            else:
                e.health = max(0, e.health - rules.bullet_damage)
                if e.health <= 0:
                    e.alive = False

            if not e.alive:
                events["kills"] += 1
                events["score"] += rules.score_per_kill
                state.kills += 1
                state.add_score(rules.score_per_kill)
            break


def resolve_collisions(state: GameState, events: Optional[Events] = None) -> Events:
    events = new_events() if events is None else events

    _resolve_player_hits(state, events)
    if state.running:
        _resolve_bullet_hits(state, events)

    state.enemies = [e for e in state.enemies if e.alive]
    state.bullets = [b for b in state.bullets if b.alive]
    return events


# ----------------------------
# Shield timer
# ----------------------------

def update_shield(state: GameState):
    """Fire every shield timer whose expiry the session clock has reached"""
    while state.shield_expiries and state.shield_expiries[0] <= state.clock:
        state.shield_expiries.pop(0)
        state.player.shield = False
        state.ability_available = True
        logger.debug("Shield timer fired at clock %d", state.clock)


# ----------------------------
# Tick
# ----------------------------

def tick(state: GameState, rng: np.random.Generator) -> Events:
    """Advance the game by one frame. A finished game is left untouched."""
    events = new_events()
    if not state.running:
        events["game_over"] = 1
        return events

    maybe_spawn(state, rng, events)
    update_motion(state, events)
    if state.running:
        resolve_collisions(state, events)

    state.tick += 1
    state.clock += 1
    update_shield(state)

    events["game_over"] = int(state.game_over)
    return events
