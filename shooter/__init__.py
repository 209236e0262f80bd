"""Arcade shooter - frame-by-frame simulation, frame driver and Gymnasium environment"""

from .rules import RuleSet, HEALTH_RULES, SHIELD_RULES, get_rules
from .state import GameState, GamePhase, ShieldPhase, Snapshot, new_game, restart, snapshot
from .simulation import tick
from .driver import FrameDriver
from .shooter_env import ShooterEnv, run_random_episode

__all__ = [
    'RuleSet', 'HEALTH_RULES', 'SHIELD_RULES', 'get_rules',
    'GameState', 'GamePhase', 'ShieldPhase', 'Snapshot', 'new_game', 'restart', 'snapshot',
    'tick', 'FrameDriver', 'ShooterEnv', 'run_random_episode',
]
