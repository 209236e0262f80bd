"""
Rule sets for the two game variants.

``health``: the player has a health pool, enemies soak several bullets and
leaking enemies simply disappear. ``shield``: one unshielded contact ends
the run, bullets kill outright, and a single enemy leaking past the bottom
edge is game over. The player can raise a temporary shield instead.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class RuleSet:
    """Constants and switches that distinguish the game variants"""
    name: str
    description: str = ""
    vertical_movement: bool = True
    player_health: Optional[int] = 100  # None: unshielded contact is lethal
    contact_damage: int = 10
    bullet_damage: Optional[int] = 20  # None: bullets kill in one hit
    score_per_kill: int = 10
    spawn_probability: float = 0.0
    spawn_interval: Optional[int] = None  # ticks between scheduled spawns
    leak_ends_game: bool = False
    ability_enabled: bool = False
    shield_duration: int = 300  # ticks, 5 s at 60 fps
    cancel_shield_timers_on_restart: bool = False
    fps: int = 60

    def __post_init__(self):
        if not 0.0 <= self.spawn_probability <= 1.0:
            raise ValueError(f"spawn_probability must be in [0, 1], got {self.spawn_probability}")
        if self.spawn_interval is not None and self.spawn_interval <= 0:
            raise ValueError(f"spawn_interval must be positive, got {self.spawn_interval}")
        if self.player_health is not None and self.player_health <= 0:
            raise ValueError(f"player_health must be positive, got {self.player_health}")
        if self.shield_duration <= 0:
            raise ValueError(f"shield_duration must be positive, got {self.shield_duration}")


HEALTH_RULES = RuleSet(
    name="health",
    description="Health pool, armoured enemies, probabilistic spawns",
    vertical_movement=True,
    player_health=100,
    contact_damage=10,
    bullet_damage=20,
    spawn_probability=0.02,
)

SHIELD_RULES = RuleSet(
    name="shield",
    description="One-hit deaths, shield ability, leaking enemies end the game",
    vertical_movement=False,
    player_health=None,
    bullet_damage=None,
    spawn_interval=60,
    leak_ends_game=True,
    ability_enabled=True,
    shield_duration=300,
)

RULESETS: Dict[str, RuleSet] = {
    "health": HEALTH_RULES,
    "shield": SHIELD_RULES,
}


def get_rules(name: str) -> RuleSet:
    """Look up a rule set by name"""
    try:
        return RULESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown rule set: {name!r} (choose from {', '.join(RULESETS)})"
        ) from None
