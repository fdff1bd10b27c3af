# config.py
from dataclasses import dataclass, replace
from typing import Optional

from core.interfaces import GameMode

GRID_MIN, GRID_MAX = 10, 30

@dataclass(frozen=True, slots=True)
class AppConfig:
    # shared / global
    grid_size: int = 20
    food_count: int = 1
    mode: GameMode = GameMode.NORMAL
    target_score: Optional[int] = None   # None -> every free cell
    seed: Optional[int] = None

    # gameplay
    start_len: int = 3
    tick_ms: int = 150
    grace_ms: int = 250                  # human only; 0 disables
    food_ttl_s: Optional[float] = None   # fading food
    max_steps_without_food: Optional[int] = None
    max_blocked_ticks: Optional[int] = None

    # render
    render_cell: int = 24
    render_title: str = "Neon Snake"
    render_grid_lines: bool = False
    render_show_hud: bool = True
    render_record_dir: Optional[str] = None

    # persistence
    high_score_path: str = "runs/highscore.json"

    # commentary
    commentary_enabled: bool = True
    commentary_model: str = "gpt-4o-mini"
    commentary_retries: int = 2
    commentary_delay_s: float = 1.0
    commentary_every: int = 5

    # autopilot evaluation
    episodes: int = 100
    max_ep_steps: int = 5000
    log_path: str = "runs/autopilot/logs.csv"

    def with_(self, **kwargs) -> "AppConfig":
        """Convenience: clone with updated values"""
        return replace(self, **kwargs)

    @property
    def cells(self) -> int:
        return self.grid_size * self.grid_size

    def sanitized(self) -> "AppConfig":
        """Clamp settings into the playable range instead of rejecting them."""
        n = max(GRID_MIN, min(GRID_MAX, int(self.grid_size)))
        start_len = max(1, min(int(self.start_len), n // 2))
        return replace(self, grid_size=n, start_len=start_len,
                       food_count=max(1, int(self.food_count)))

    def effective_target(self) -> int:
        """Score that wins the game; 'max' means filling every free cell."""
        most = self.cells - self.start_len
        if self.target_score is None:
            return most
        return max(1, min(int(self.target_score), most))
