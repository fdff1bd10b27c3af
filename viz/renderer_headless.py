# viz/renderer_headless.py
from __future__ import annotations
from typing import Optional
import numpy as np
from config import AppConfig
from core.interfaces import Snapshot
from viz.render_iface import Hud

def to_text(s: Snapshot) -> str:
    """ASCII board: H head, o body, * food, . empty."""
    grid = np.full((s.grid_size, s.grid_size), ".", dtype="<U1")
    for f in s.foods:
        fx, fy = f.pos
        grid[fy, fx] = "*"
    for (x, y) in s.snake[1:]:
        grid[y, x] = "o"
    hx, hy = s.head
    grid[hy, hx] = "H"
    return "\n".join("".join(row) for row in grid)

class HeadlessRenderer:
    """Keeps the last frame as text instead of drawing it."""
    def __init__(self):
        self.cfg: Optional[AppConfig] = None
        self.last_frame = ""
        self.frames = 0

    def open(self, cfg: AppConfig) -> None:
        self.cfg = cfg
    def draw(self, snap: Snapshot, hud: Optional[Hud] = None) -> None:
        self.last_frame = to_text(snap)
        self.frames += 1
    def tick(self, fps: int) -> None:
        pass
    def close(self) -> None:
        pass
