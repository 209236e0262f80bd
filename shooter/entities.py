"""
Game entity dataclasses
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


# RGB colours shared by the arcade window and the numpy rasteriser
COLORS: Dict[str, Tuple[int, int, int]] = {
    "background": (10, 10, 30),
    "player": (0, 0, 255),
    "player_shield": (0, 255, 255),
    "bullet": (255, 0, 0),
    "player_health": (255, 0, 0),
    "enemy_health": (0, 0, 0),
    "text": (255, 255, 255),
    "green": (0, 128, 0),
    "red": (255, 0, 0),
    "yellow": (255, 255, 0),
}


@dataclass(frozen=True)
class EnemyArchetype:
    """Template enemies are instantiated from"""
    width: float
    height: float
    speed: float
    health: int
    color: str

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Archetype size must be positive, got {self.width}x{self.height}")
        if self.speed <= 0:
            raise ValueError(f"Archetype speed must be positive, got {self.speed}")
        if self.health <= 0:
            raise ValueError(f"Archetype health must be positive, got {self.health}")


# medium, large/slow, small/fast
ENEMY_ARCHETYPES: Tuple[EnemyArchetype, ...] = (
    EnemyArchetype(width=40, height=40, speed=2, health=50, color="green"),
    EnemyArchetype(width=60, height=60, speed=1, health=100, color="red"),
    EnemyArchetype(width=30, height=30, speed=3, health=30, color="yellow"),
)

PLAYER_SIZE = 50.0
PLAYER_SPEED = 5.0
PLAYER_BOTTOM_OFFSET = 60.0

BULLET_WIDTH = 5.0
BULLET_HEIGHT = 10.0
BULLET_SPEED = 7.0


@dataclass
class Player:
    """Player ship entity"""
    x: float
    y: float
    width: float = PLAYER_SIZE
    height: float = PLAYER_SIZE
    speed: float = PLAYER_SPEED
    dx: float = 0.0
    dy: float = 0.0
    shield: bool = False
    health: Optional[int] = None  # None: any unshielded hit is lethal
    max_health: Optional[int] = None


@dataclass
class Bullet:
    """Bullet projectile entity, travels straight up"""
    x: float
    y: float
    width: float = BULLET_WIDTH
    height: float = BULLET_HEIGHT
    speed: float = BULLET_SPEED
    alive: bool = True


@dataclass
class Enemy:
    """Enemy entity falling from the top of the field"""
    x: float
    y: float
    width: float
    height: float
    speed: float
    color: str
    health: Optional[int] = None
    max_health: Optional[int] = None
    alive: bool = True

    @classmethod
    def from_archetype(cls, archetype: EnemyArchetype, x: float, y: float,
                       with_health: bool = True) -> "Enemy":
        health = archetype.health if with_health else None
        return cls(
            x=x,
            y=y,
            width=archetype.width,
            height=archetype.height,
            speed=archetype.speed,
            color=archetype.color,
            health=health,
            max_health=health,
        )
