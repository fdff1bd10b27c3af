# core/snake_rules.py  (pure rules, no pygame)
from __future__ import annotations
import logging
import random
import time
from typing import Tuple, Optional, List

from config import AppConfig
from .food import place_foods, expire_foods
from .interfaces import (
    Clock, Direction, Food, GameMode, GameStatus, Point, Snapshot, TickOutcome,
)

logger = logging.getLogger(__name__)

Resolution = Tuple[Optional[Point], TickOutcome, Optional[str], Direction]

class Rules:
    """
    Owns the canonical game state. Every mutation happens inside `tick`,
    which publishes a fresh frozen Snapshot.
    """
    def __init__(self, cfg: AppConfig, clock: Clock = time.monotonic):
        self.cfg = cfg.sanitized()
        self.clock = clock
        self.rng = random.Random(self.cfg.seed)
        self._reset_state()
        self.status = GameStatus.IDLE

    def seed(self, seed: Optional[int]):
        self.rng = random.Random(seed)

    def _reset_state(self):
        n = self.cfg.grid_size
        cx, cy = n // 2, n // 2
        self.snake: List[Point] = [(cx, cy + i) for i in range(self.cfg.start_len)]
        self.dir = Direction.UP
        self.foods: Tuple[Food, ...] = ()
        self.foods = self._refill(self.foods)
        self.score = 0
        self.steps_since_food = 0
        self.step_count = 0
        self.blocked_ticks = 0
        self.status = GameStatus.PLAYING
        self.reason: Optional[str] = None

    def reset(self) -> Snapshot:
        self._reset_state()
        logger.debug("reset: grid=%d mode=%s foods=%d", self.cfg.grid_size,
                     self.cfg.mode.value, len(self.foods))
        return self.snapshot()

    def apply_settings(self, cfg: AppConfig) -> None:
        """Swap settings between ticks; takes effect on the next reset."""
        self.cfg = cfg.sanitized()

    # ---- status machine ----
    def to_idle(self) -> Snapshot:
        self.status = GameStatus.IDLE
        return self.snapshot()

    def pause(self) -> Snapshot:
        if self.status is GameStatus.PLAYING:
            self.status = GameStatus.PAUSED
        return self.snapshot()

    def resume(self) -> Snapshot:
        if self.status is GameStatus.PAUSED:
            self.status = GameStatus.PLAYING
        return self.snapshot()

    def toggle_pause(self) -> Snapshot:
        if self.status is GameStatus.PAUSED:
            return self.resume()
        return self.pause()

    # ---- movement ----
    def _refill(self, foods) -> Tuple[Food, ...]:
        return place_foods(self.snake, foods, self.cfg.food_count,
                           self.cfg.grid_size, self.rng, now=self.clock())

    def _steer(self, direction: Direction) -> Direction:
        # Prevent instant 180° reversal if the snake has a body
        if len(self.snake) > 1 and direction is self.dir.opposite:
            return self.dir
        return direction

    def _resolve(self, direction: Direction) -> Resolution:
        d = self._steer(direction)
        n = self.cfg.grid_size
        mode = self.cfg.mode
        x, y = d.apply(self.snake[0])

        if not (0 <= x < n and 0 <= y < n):
            if mode is GameMode.NORMAL:
                return None, TickOutcome.LOST, "wall", d
            if mode is GameMode.STOP:
                return None, TickOutcome.BLOCKED, "wall", d
            x, y = x % n, y % n   # WRAP and GOD

        new_head = (x, y)
        # tail vacates this tick, so it never blocks
        if new_head in self.snake[:-1]:
            if mode is GameMode.GOD:
                return None, TickOutcome.BLOCKED, "self", d
            return None, TickOutcome.LOST, "self", d

        if any(f.pos == new_head for f in self.foods):
            return new_head, TickOutcome.ATE, None, d
        return new_head, TickOutcome.MOVED, None, d

    def preview(self, direction: Direction) -> TickOutcome:
        """What `tick(direction)` would do, without touching state."""
        if self.status is not GameStatus.PLAYING:
            return TickOutcome.IGNORED
        return self._resolve(direction)[1]

    def tick(self, direction: Direction) -> Tuple[Snapshot, TickOutcome]:
        if self.status is not GameStatus.PLAYING:
            return self.snapshot(), TickOutcome.IGNORED

        if self.cfg.food_ttl_s is not None:
            fresh = expire_foods(self.foods, self.clock(), self.cfg.food_ttl_s)
            if len(fresh) != len(self.foods):
                self.foods = self._refill(fresh)

        self.step_count += 1
        self.steps_since_food += 1
        new_head, outcome, reason, self.dir = self._resolve(direction)

        if outcome is TickOutcome.LOST:
            self.status, self.reason = GameStatus.GAME_OVER, reason
            logger.info("game over (%s) score=%d steps=%d", reason, self.score, self.step_count)
            return self.snapshot(), outcome

        if outcome is TickOutcome.BLOCKED:
            self.blocked_ticks += 1
            limit = self.cfg.max_blocked_ticks
            if limit is not None and self.blocked_ticks > limit:
                self.status, self.reason = GameStatus.STALLED, "blocked"
                return self.snapshot(), TickOutcome.STALLED
            return self._check_starvation(outcome)

        self.blocked_ticks = 0
        self.snake.insert(0, new_head)
        if outcome is TickOutcome.ATE:
            self.score += 1
            self.steps_since_food = 0
            self.foods = self._refill(tuple(f for f in self.foods if f.pos != new_head))
            if self.score >= self.cfg.effective_target():
                self.status, self.reason = GameStatus.WON, "target"
                logger.info("won: score=%d steps=%d", self.score, self.step_count)
                return self.snapshot(), TickOutcome.WON
        else:
            self.snake.pop()

        return self._check_starvation(outcome)

    def _check_starvation(self, outcome: TickOutcome) -> Tuple[Snapshot, TickOutcome]:
        limit = self.cfg.max_steps_without_food
        if limit is not None and self.steps_since_food > limit:
            self.status, self.reason = GameStatus.STALLED, "starvation"
            return self.snapshot(), TickOutcome.STALLED
        return self.snapshot(), outcome

    def snapshot(self) -> Snapshot:
        return Snapshot(
            snake=tuple(self.snake),
            foods=tuple(self.foods),
            dir=self.dir,
            score=self.score,
            status=self.status,
            steps_since_food=self.steps_since_food,
            step_count=self.step_count,
            reason=self.reason,
            grid_size=self.cfg.grid_size,
            mode=self.cfg.mode,
            target_score=self.cfg.effective_target(),
        )

    def get_state(self) -> dict:
        """Pure-Python, JSON-serializable state (plus RNG)."""
        return {
            "snake": list(self.snake),
            "dir": self.dir.value,
            "foods": [[f.pos[0], f.pos[1], f.born_at] for f in self.foods],
            "score": self.score,
            "steps_since_food": self.steps_since_food,
            "step_count": self.step_count,
            "blocked_ticks": self.blocked_ticks,
            "status": self.status.value,
            "reason": self.reason,
            "rng_state": self.rng.getstate(),
        }

    def set_state(self, state: dict) -> None:
        """Restore exact internal state (including RNG)."""
        self.snake = list(map(tuple, state["snake"]))
        self.dir = Direction(state["dir"])
        self.foods = tuple(Food(pos=(int(x), int(y)), born_at=float(t)) for x, y, t in state["foods"])
        self.score = int(state["score"])
        self.steps_since_food = int(state["steps_since_food"])
        self.step_count = int(state["step_count"])
        self.blocked_ticks = int(state.get("blocked_ticks", 0))
        self.status = GameStatus(state["status"])
        self.reason = state["reason"]
        rng_state = state["rng_state"]
        # JSON turns the inner tuple into a list
        self.rng.setstate((rng_state[0], tuple(rng_state[1]), rng_state[2]))
