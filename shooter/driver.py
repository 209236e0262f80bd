"""
Frame driver: draw -> update -> reschedule-or-stop, once per frame.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import numpy as np

from . import simulation as sim
from .rules import RuleSet, HEALTH_RULES
from .state import GameState, Snapshot, new_game, restart, snapshot

logger = logging.getLogger(__name__)

Renderer = Callable[[Snapshot], None]


class FrameDriver:
    """Owns one game session and steps it frame by frame.

    ``renderer`` receives a read-only snapshot before every update.
    ``on_game_over`` is called once each time a game ends.
    """

    def __init__(
        self,
        rules: RuleSet = HEALTH_RULES,
        width: float = 800,
        height: float = 600,
        seed: Optional[int] = None,
        renderer: Optional[Renderer] = None,
        on_game_over: Optional[Callable[[GameState], None]] = None,
    ):
        self.rng = np.random.default_rng(seed)
        self.state = new_game(rules, width, height)
        self.renderer = renderer
        self.on_game_over = on_game_over
        self.last_events: sim.Events = sim.new_events()

    @property
    def running(self) -> bool:
        return self.state.running

    def snapshot(self) -> Snapshot:
        return snapshot(self.state)

    # ----------------------------
    # Input
    # ----------------------------

    def move(self, x_dir: int, y_dir: int = 0):
        sim.set_movement(self.state, x_dir, y_dir)

    def fire(self):
        return sim.fire(self.state)

    def use_ability(self) -> bool:
        return sim.use_ability(self.state)

    def restart(self):
        restart(self.state)

    # ----------------------------
    # Frame loop
    # ----------------------------

    def tick(self) -> bool:
        """Run one frame. Returns True if another frame should be scheduled."""
        if self.renderer is not None:
            self.renderer(self.snapshot())

        if not self.state.running:
            return False

        self.last_events = sim.tick(self.state, self.rng)

        if self.state.game_over:
            if self.on_game_over is not None:
                self.on_game_over(self.state)
            return False
        return True

    def run(self, max_ticks: Optional[int] = None, frame_time: Optional[float] = None) -> int:
        """Tick until the game ends or ``max_ticks`` frames have run.

        With ``frame_time`` set, frames are paced in real time.
        Returns the number of frames run.
        """
        frames = 0
        while max_ticks is None or frames < max_ticks:
            started = time.perf_counter()
            frames += 1
            if not self.tick():
                break
            if frame_time is not None:
                remaining = frame_time - (time.perf_counter() - started)
                if remaining > 0:
                    time.sleep(remaining)

        logger.debug("Frame loop stopped after %d frames", frames)
        return frames
