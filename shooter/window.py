"""
Arcade window: draws snapshots and turns key presses into game input.

Controls:
    Arrow keys - move
    Space      - fire
    S          - shield (shield rules only)
    R          - restart
    Esc        - quit
"""

from __future__ import annotations

import math
from typing import Optional, Set

import arcade

from .driver import FrameDriver
from .entities import COLORS
from .state import GamePhase, ShieldPhase, Snapshot


class ShooterWindow(arcade.Window):
    """Arcade window for playing or watching the shooter"""

    def __init__(self, width: int, height: int, driver: Optional[FrameDriver] = None,
                 title: str = "Shooter - Arcade"):
        fps = driver.state.rules.fps if driver is not None else 60
        super().__init__(width, height, title, update_rate=1 / fps)
        self.driver = driver
        self._frame: Optional[Snapshot] = None
        self._held: Set[int] = set()
        self.background_color = COLORS["background"]

        if driver is not None:
            driver.renderer = self.set_frame
            self._frame = driver.snapshot()

    def set_frame(self, snap: Snapshot):
        self._frame = snap

    def show(self, snap: Snapshot):
        """Draw one frame immediately, for callers that own the loop"""
        self._frame = snap
        self.dispatch_events()
        self.on_draw()
        self.flip()

    # ----------------------------
    # Loop hooks
    # ----------------------------

    def on_update(self, delta_time: float):
        if self.driver is None:
            return
        if not self.driver.tick():
            self._frame = self.driver.snapshot()

    def on_draw(self):
        self.clear()
        if self._frame is None:
            return
        snap = self._frame

        p = snap.player
        self._rect(p.x, p.y, p.width, p.height,
                   COLORS["player_shield"] if p.shield else COLORS["player"])
        if p.health is not None and p.max_health:
            fill = p.width * (p.health / p.max_health)
            if fill > 0:
                self._rect(p.x, p.y - 10, fill, 5, COLORS["player_health"])

        for b in snap.bullets:
            self._rect(b.x, b.y, b.width, b.height, COLORS["bullet"])

        for e in snap.enemies:
            self._rect(e.x, e.y, e.width, e.height, COLORS.get(e.color, COLORS["text"]))
            if e.health is not None and e.max_health:
                fill = e.width * (e.health / e.max_health)
                if fill > 0:
                    self._rect(e.x, e.y - 10, fill, 5, COLORS["enemy_health"])

        # HUD
        if snap.shield is ShieldPhase.ACTIVE:
            seconds = math.ceil(snap.shield_ticks_left / snap.fps)
            arcade.draw_text(f"Shield: {seconds}s", 10, self.height - 20, COLORS["text"], 12)
        elif snap.shield is ShieldPhase.COOLING:
            arcade.draw_text("Shield: recharging", 10, self.height - 20, COLORS["text"], 12)

        arcade.draw_text(f"Score: {snap.score}", self.width - 140, self.height - 20,
                         COLORS["text"], 12)
        arcade.draw_text(f"High: {snap.high_score}", self.width - 140, self.height - 40,
                         COLORS["text"], 12)

        if snap.phase is GamePhase.GAME_OVER:
            arcade.draw_text("GAME OVER", self.width / 2, self.height / 2 + 10,
                             COLORS["text"], 32, anchor_x="center")
            arcade.draw_text("Press R to restart", self.width / 2, self.height / 2 - 30,
                             COLORS["text"], 14, anchor_x="center")

    def _rect(self, x: float, y: float, w: float, h: float, color):
        # game coordinates grow downwards, arcade's grow upwards
        top = self.height - y
        arcade.draw_lrbt_rectangle_filled(x, x + w, top - h, top, color)

    # ----------------------------
    # Input
    # ----------------------------

    def on_key_press(self, key: int, modifiers: int):
        if key == arcade.key.ESCAPE:
            self.close()
            return
        if self.driver is None:
            return

        if key in (arcade.key.LEFT, arcade.key.RIGHT, arcade.key.UP, arcade.key.DOWN):
            self._held.add(key)
            self._apply_movement()
        elif key == arcade.key.SPACE:
            self.driver.fire()
        elif key == arcade.key.S:
            self.driver.use_ability()
        elif key == arcade.key.R:
            self.driver.restart()
            self._apply_movement()

    def on_key_release(self, key: int, modifiers: int):
        self._held.discard(key)
        if self.driver is not None:
            self._apply_movement()

    def _apply_movement(self):
        x_dir = int(arcade.key.RIGHT in self._held) - int(arcade.key.LEFT in self._held)
        y_dir = int(arcade.key.DOWN in self._held) - int(arcade.key.UP in self._held)
        self.driver.move(x_dir, y_dir)
