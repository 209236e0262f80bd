"""
Software rasteriser for snapshots, used for ``rgb_array`` rendering.
"""

from __future__ import annotations

import numpy as np

from .entities import COLORS
from .state import Snapshot


def fill_rect(frame: np.ndarray, x: float, y: float, w: float, h: float, color):
    """Fill the part of a rectangle that lies inside the frame"""
    height, width = frame.shape[:2]
    x0 = max(0, int(round(x)))
    y0 = max(0, int(round(y)))
    x1 = min(width, int(round(x + w)))
    y1 = min(height, int(round(y + h)))
    if x1 > x0 and y1 > y0:
        frame[y0:y1, x0:x1] = color


def rasterize(snap: Snapshot) -> np.ndarray:
    """Draw a snapshot into an (H, W, 3) uint8 array"""
    frame = np.empty((int(snap.height), int(snap.width), 3), dtype=np.uint8)
    frame[:] = COLORS["background"]

    p = snap.player
    fill_rect(frame, p.x, p.y, p.width, p.height,
              COLORS["player_shield"] if p.shield else COLORS["player"])
    if p.health is not None and p.max_health:
        fill_rect(frame, p.x, p.y - 10, p.width * (p.health / p.max_health), 5,
                  COLORS["player_health"])

    for b in snap.bullets:
        fill_rect(frame, b.x, b.y, b.width, b.height, COLORS["bullet"])

    for e in snap.enemies:
        fill_rect(frame, e.x, e.y, e.width, e.height, COLORS.get(e.color, COLORS["text"]))
        if e.health is not None and e.max_health:
            fill_rect(frame, e.x, e.y - 10, e.width * (e.health / e.max_health), 5,
                      COLORS["enemy_health"])

    return frame
