"""
ShooterEnv - the arcade shooter as a Gymnasium environment
-----------------------------------------------------------
- Wraps the frame-by-frame simulation (one env step = one frame)
- Gymnasium API
- 1 RL agent that moves, shoots (with cooldown) and raises its shield
- Enemies fall from the top and hurt the agent on contact
- Vector observation: agent state + top-K nearest enemies
- MultiDiscrete action space: [move(5), fire(2), ability(2)]

Both rule sets are supported through ``rules="health"`` / ``rules="shield"``.

Quick test:
    python -m shooter.shooter_env
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional, Union

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from . import simulation as sim
from .raster import rasterize
from .rules import RuleSet, get_rules
from .state import GameState, new_game, shield_phase, ShieldPhase, snapshot
from .utils import clamp


DEFAULT_REWARDS: Dict[str, float] = {
    "R_KILL": 1.0,      # enemy destroyed
    "R_HIT": 0.2,       # bullet landed
    "R_DAMAGE": 1.0,    # per contact with an enemy
    "R_SHIELD": 0.2,    # per hit the shield absorbed
    "R_SHOT": 0.01,     # per bullet fired
    "R_TIME": 0.001,    # per step
    "R_DEATH": 5.0,     # game over
}


class ShooterEnv(gym.Env):
    """Arcade shooter environment"""

    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(
        self,
        render_mode: Optional[str] = None,
        rules: Union[str, RuleSet] = "health",
        width: int = 800,
        height: int = 600,
        max_steps: int = 3600,  # 60s at 60 FPS
        k_enemies: int = 5,
        shoot_cooldown_steps: int = 8,
        reward_config: Optional[Dict[str, float]] = None,
    ):
        super().__init__()

        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"Unsupported render mode: {render_mode}"
        self.render_mode = render_mode

        self.rules = get_rules(rules) if isinstance(rules, str) else rules
        self.width = width
        self.height = height
        self.max_steps = max_steps
        self.k_enemies = k_enemies
        self.shoot_cooldown_steps = shoot_cooldown_steps
        self.metadata = dict(self.metadata, render_fps=self.rules.fps)

        self.rewards = dict(DEFAULT_REWARDS)
        if reward_config:
            self.rewards.update({k: v for k, v in reward_config.items() if k.startswith("R_")})

        # Action space:
        # move: 0 stay, 1 up, 2 down, 3 left, 4 right
        # fire: 0/1
        # ability: 0/1
        self.action_space = spaces.MultiDiscrete([5, 2, 2])

        # Observation space (vector)
        # Agent: pos(2) vel(2) health(1) shield active(1) shield ready(1) cooldown(1)
        # Each enemy: rel pos(2) speed(1) health(1)
        obs_dim = 8 + self.k_enemies * 4
        self.observation_space = spaces.Box(
            low=-1.0, high=1.0, shape=(obs_dim,), dtype=np.float32
        )

        self._window = None

        self.state: GameState = new_game(self.rules, width, height)
        self._cooldown = 0
        self._step_count = 0
        self._events: sim.Events = sim.new_events()

    # ----------------------------
    # Gym API
    # ----------------------------

    def reset(self, seed: Optional[int] = None, options: Optional[dict] = None):
        super().reset(seed=seed)

        self.state = new_game(self.rules, self.width, self.height)
        self._cooldown = 0
        self._step_count = 0
        self._events = sim.new_events()

        return self._get_obs(), self._get_info()

    def step(self, action):
        move, fire, ability = int(action[0]), int(action[1]), int(action[2])

        self._apply_move(move)
        shots = self._apply_fire(fire)
        if ability:
            sim.use_ability(self.state)

        self._events = sim.tick(self.state, self.np_random)
        self._events["shots"] = shots

        if self._cooldown > 0:
            self._cooldown -= 1

        reward = self._compute_reward()

        terminated = self.state.game_over
        self._step_count += 1
        truncated = self._step_count >= self.max_steps and not terminated

        if self.render_mode == "human":
            self.render()

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    # ----------------------------
    # Actions
    # ----------------------------

    def _apply_move(self, move: int):
        x_dir, y_dir = 0, 0
        if move == 1:
            y_dir = -1
        elif move == 2:
            y_dir = 1
        elif move == 3:
            x_dir = -1
        elif move == 4:
            x_dir = 1
        sim.set_movement(self.state, x_dir, y_dir)

    def _apply_fire(self, fire: int) -> int:
        if fire == 0 or self._cooldown > 0:
            return 0
        if sim.fire(self.state) is None:
            return 0
        self._cooldown = self.shoot_cooldown_steps
        return 1

    # ----------------------------
    # Observation / reward / info
    # ----------------------------

    def _get_obs(self) -> np.ndarray:
        p = self.state.player
        span_x = max(1.0, self.width - p.width)
        span_y = max(1.0, self.height - p.height)

        health = 1.0 if p.health is None else p.health / max(1, p.max_health)
        phase = shield_phase(self.state)

        obs_parts = [
            clamp(p.x / span_x, 0, 1) * 2 - 1,
            clamp(p.y / span_y, 0, 1) * 2 - 1,
            clamp(p.dx / p.speed, -1, 1),
            clamp(p.dy / p.speed, -1, 1),
            health * 2 - 1,
            1.0 if phase is ShieldPhase.ACTIVE else -1.0,
            1.0 if phase is ShieldPhase.AVAILABLE else -1.0,
            clamp(self._cooldown / max(1, self.shoot_cooldown_steps), 0, 1) * 2 - 1,
        ]

        # Enemies: top-K nearest, centre to centre
        px = p.x + p.width / 2
        py = p.y + p.height / 2
        enemies_sorted = sorted(
            self.state.enemies,
            key=lambda e: (e.x + e.width / 2 - px) ** 2 + (e.y + e.height / 2 - py) ** 2
        )
        for i in range(self.k_enemies):
            if i < len(enemies_sorted):
                e = enemies_sorted[i]
                dx = (e.x + e.width / 2 - px) / self.width
                dy = (e.y + e.height / 2 - py) / self.height
                e_health = 1.0 if e.health is None else e.health / max(1, e.max_health)
                obs_parts += [
                    clamp(dx, -1, 1),
                    clamp(dy, -1, 1),
                    clamp(e.speed / 5.0, 0, 1),
                    e_health,
                ]
            else:
                obs_parts += [0.0, 0.0, 0.0, 0.0]

        return np.array(obs_parts, dtype=np.float32)

    def _compute_reward(self) -> float:
        r = self.rewards
        ev = self._events

        reward = 0.0
        reward += r["R_KILL"] * ev["kills"]
        reward += r["R_HIT"] * ev["hits"]
        reward += r["R_SHIELD"] * ev["shield_blocks"]
        reward -= r["R_DAMAGE"] * (ev["player_hits"] - ev["shield_blocks"])
        reward -= r["R_SHOT"] * ev["shots"]
        reward -= r["R_TIME"]

        if self.state.game_over:
            reward -= r["R_DEATH"]

        return float(reward)

    def _get_info(self) -> Dict[str, Any]:
        p = self.state.player
        return {
            "score": self.state.score,
            "high_score": self.state.high_score,
            "health": p.health if p.health is not None else (0 if self.state.game_over else 1),
            "shield": shield_phase(self.state).value,
            "enemies_killed": self.state.kills,
            "hits_taken": self.state.hits_taken,
            "shots_fired": self.state.shots_fired,
            "num_enemies": len(self.state.enemies),
            "num_bullets": len(self.state.bullets),
            "game_over": self.state.game_over,
            "step": self._step_count,
        }

    # ----------------------------
    # Rendering
    # ----------------------------

    def render(self):
        if self.render_mode is None:
            return None

        if self.render_mode == "rgb_array":
            return rasterize(snapshot(self.state))

        if self._window is None:
            # arcade needs a display, only touch it for human rendering
            from .window import ShooterWindow
            self._window = ShooterWindow(self.width, self.height, title="ShooterEnv - Arcade")
        self._window.show(snapshot(self.state))
        return None

    def close(self):
        if self._window is not None:
            self._window.close()
            self._window = None


# ----------------------------
# Quick sanity test
# ----------------------------

def run_random_episode(render: bool = True, rules: str = "health", seed: int = 42,
                       frame_time: float = 1 / 60) -> float:
    """Run a random episode for testing"""
    env = ShooterEnv(render_mode="human" if render else None, rules=rules)
    obs, info = env.reset(seed=seed)

    terminated = False
    truncated = False
    total = 0.0

    print(f"Running random episode ({rules} rules)...")

    while not (terminated or truncated):
        action = env.action_space.sample()
        obs, reward, terminated, truncated, info = env.step(action)
        total += reward
        if render:
            time.sleep(frame_time)

    print(f"Random episode return: {total:.2f}  "
          f"score: {info['score']}  kills: {info['enemies_killed']}  steps: {info['step']}")

    env.close()
    return total


if __name__ == "__main__":
    run_random_episode(render=True)
