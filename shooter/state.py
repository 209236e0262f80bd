"""
Simulation state
----------------
Everything the per-frame step reads or writes lives in one ``GameState``.
Renderers only ever see the frozen views produced by :func:`snapshot`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .entities import Bullet, Enemy, Player, PLAYER_BOTTOM_OFFSET, PLAYER_SIZE
from .rules import RuleSet, HEALTH_RULES

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    RUNNING = "running"
    GAME_OVER = "game_over"


class ShieldPhase(str, Enum):
    AVAILABLE = "available"
    ACTIVE = "active"
    COOLING = "cooling"  # shield used up, waiting for its timer


@dataclass
class GameState:
    """Mutable world state threaded through every tick"""
    rules: RuleSet
    width: float
    height: float
    player: Player
    bullets: List[Bullet] = field(default_factory=list)
    enemies: List[Enemy] = field(default_factory=list)
    score: int = 0
    high_score: int = 0
    phase: GamePhase = GamePhase.RUNNING
    tick: int = 0  # frames in the current game
    clock: int = 0  # frames in the session, survives restarts
    ability_available: bool = True
    shield_expiries: List[int] = field(default_factory=list)

    # per-game counters
    kills: int = 0
    hits_taken: int = 0
    shots_fired: int = 0

    @property
    def running(self) -> bool:
        return self.phase is GamePhase.RUNNING

    @property
    def game_over(self) -> bool:
        return self.phase is GamePhase.GAME_OVER

    def add_score(self, points: int):
        self.score += points
        if self.score > self.high_score:
            self.high_score = self.score


def spawn_player(rules: RuleSet, width: float, height: float) -> Player:
    """Player centred horizontally near the bottom edge"""
    return Player(
        x=width / 2 - PLAYER_SIZE / 2,
        y=height - PLAYER_BOTTOM_OFFSET,
        health=rules.player_health,
        max_health=rules.player_health,
    )


def new_game(rules: RuleSet = HEALTH_RULES, width: float = 800, height: float = 600) -> GameState:
    assert width > PLAYER_SIZE and height > PLAYER_BOTTOM_OFFSET, "Play field too small"
    return GameState(
        rules=rules,
        width=width,
        height=height,
        player=spawn_player(rules, width, height),
    )


def restart(state: GameState) -> GameState:
    """Reset a game in place and re-enter RUNNING.

    The high score and session clock carry over. Pending shield expiries
    are kept unless the rule set cancels them, so a timer started before the
    restart can still end a shield raised after it.
    """
    state.player = spawn_player(state.rules, state.width, state.height)
    state.bullets = []
    state.enemies = []
    state.score = 0
    state.phase = GamePhase.RUNNING
    state.tick = 0
    state.ability_available = True
    if state.rules.cancel_shield_timers_on_restart:
        state.shield_expiries = []
    state.kills = 0
    state.hits_taken = 0
    state.shots_fired = 0
    logger.info("Game restarted (high score %d)", state.high_score)
    return state


def shield_phase(state: GameState) -> ShieldPhase:
    if state.player.shield:
        return ShieldPhase.ACTIVE
    if state.ability_available:
        return ShieldPhase.AVAILABLE
    return ShieldPhase.COOLING


def shield_ticks_left(state: GameState) -> int:
    """Ticks until the next pending shield timer fires, 0 if none"""
    if not state.shield_expiries:
        return 0
    return max(0, state.shield_expiries[0] - state.clock)


# ----------------------------
# Read-only views for renderers
# ----------------------------

@dataclass(frozen=True)
class RectView:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class EnemyView(RectView):
    color: str = "green"
    health: Optional[int] = None
    max_health: Optional[int] = None


@dataclass(frozen=True)
class PlayerView(RectView):
    shield: bool = False
    health: Optional[int] = None
    max_health: Optional[int] = None


@dataclass(frozen=True)
class Snapshot:
    """Everything a renderer needs for one frame"""
    width: float
    height: float
    player: PlayerView
    bullets: Tuple[RectView, ...]
    enemies: Tuple[EnemyView, ...]
    score: int
    high_score: int
    phase: GamePhase
    shield: ShieldPhase
    shield_ticks_left: int
    fps: int
    tick: int


def snapshot(state: GameState) -> Snapshot:
    p = state.player
    return Snapshot(
        width=state.width,
        height=state.height,
        player=PlayerView(
            x=p.x, y=p.y, width=p.width, height=p.height,
            shield=p.shield, health=p.health, max_health=p.max_health,
        ),
        bullets=tuple(
            RectView(x=b.x, y=b.y, width=b.width, height=b.height)
            for b in state.bullets
        ),
        enemies=tuple(
            EnemyView(
                x=e.x, y=e.y, width=e.width, height=e.height,
                color=e.color, health=e.health, max_health=e.max_health,
            )
            for e in state.enemies
        ),
        score=state.score,
        high_score=state.high_score,
        phase=state.phase,
        shield=shield_phase(state),
        shield_ticks_left=shield_ticks_left(state),
        fps=state.rules.fps,
        tick=state.tick,
    )
