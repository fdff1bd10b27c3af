# viz/render_iface.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Protocol, Optional
from config import AppConfig
from core.interfaces import Snapshot
from commentary.service import Commentary

@dataclass(frozen=True)
class Hud:
    """Session-level extras drawn around the board."""
    high_score: int = 0
    autopilot: bool = False
    commentary: Optional[Commentary] = None
    overlay: str = ""

class Renderer(Protocol):
    def open(self, cfg: AppConfig) -> None: ...
    def draw(self, snap: Snapshot, hud: Optional[Hud] = None) -> None: ...
    def tick(self, fps: int) -> None: ...
    def close(self) -> None: ...
