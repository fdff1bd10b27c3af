# core/session.py
from __future__ import annotations
import logging
import time
from typing import List, Optional, Tuple

from config import AppConfig
from .grace import GraceTimer
from .highscore import HighScoreStore
from .interfaces import (
    Clock, Direction, GameStatus, Policy, Snapshot, StatusListener, TickOutcome,
)
from .snake_rules import Rules

logger = logging.getLogger(__name__)

class Session:
    """
    One player's run of games: routes human input or the autopilot into the
    rules, owns the grace period, and reports status/score to listeners.

    Input and settings changes are recorded between ticks; only `step`
    advances the game.
    """
    def __init__(
        self,
        cfg: AppConfig,
        policy: Policy,
        store: Optional[HighScoreStore] = None,
        clock: Clock = time.monotonic,
        grace: Optional[GraceTimer] = None,
    ):
        self.rules = Rules(cfg, clock=clock)
        self.policy = policy
        self.store = store
        self.grace = grace or GraceTimer(cfg.grace_ms / 1000.0)
        self.autopilot = False
        self.human_dir = Direction.UP
        self.high_score = store.load() if store else 0
        self._listeners: List[StatusListener] = []

    @property
    def cfg(self) -> AppConfig:
        return self.rules.cfg

    @property
    def status(self) -> GameStatus:
        return self.rules.status

    def subscribe(self, fn: StatusListener) -> None:
        self._listeners.append(fn)

    def _notify(self, status: GameStatus, score: int) -> None:
        for fn in self._listeners:
            fn(status, score)

    def snapshot(self) -> Snapshot:
        return self.rules.snapshot()

    # ---- lifecycle ----
    def start(self, autopilot: bool = False) -> Snapshot:
        self.grace.cancel()
        snap = self.rules.reset()
        self.autopilot = autopilot
        self.human_dir = snap.dir
        self._notify(snap.status, snap.score)
        return snap

    def to_menu(self) -> Snapshot:
        self.grace.cancel()
        self.autopilot = False
        return self.rules.to_idle()

    def update_settings(self, cfg: AppConfig) -> bool:
        """Accepted only while no game is running."""
        if self.status in (GameStatus.PLAYING, GameStatus.PAUSED):
            return False
        self.rules.apply_settings(cfg)
        self.grace = GraceTimer(cfg.grace_ms / 1000.0)
        return True

    def toggle_pause(self) -> Snapshot:
        if self.status is GameStatus.PLAYING:
            # a pending loss is re-previewed on the first tick after resuming
            self.grace.cancel()
        return self.rules.toggle_pause()

    def toggle_autopilot(self) -> bool:
        if self.status is GameStatus.PLAYING:
            self.autopilot = not self.autopilot
            self.grace.cancel()
            logger.info("autopilot %s", "on" if self.autopilot else "off")
        return self.autopilot

    # ---- input ----
    def steer(self, direction: Direction) -> bool:
        """Human input. Takes the wheel back from the autopilot."""
        if self.status is not GameStatus.PLAYING:
            return False
        if len(self.rules.snake) > 1 and direction is self.rules.dir.opposite:
            return False
        self.autopilot = False
        if self.grace.token is not None:
            if self.rules.preview(direction).fatal or not self.grace.try_correct():
                return False
            logger.debug("grace: corrected to %s", direction.value)
        self.human_dir = direction
        return True

    # ---- tick ----
    def step(self) -> Tuple[Snapshot, TickOutcome]:
        if self.status is not GameStatus.PLAYING:
            return self.snapshot(), TickOutcome.IGNORED

        if self.grace.token is not None:
            if not self.grace.expired():
                return self.snapshot(), TickOutcome.IGNORED
            fatal_dir = self.grace.token.direction
            self.grace.cancel()
            return self._commit(fatal_dir)

        if self.autopilot:
            d = self.policy.act(self.snapshot())
        else:
            d = self.human_dir
            if self.grace.enabled and self.rules.preview(d).fatal:
                self.grace.arm(d)
                logger.debug("grace: pending loss moving %s", d.value)
                return self.snapshot(), TickOutcome.IGNORED
        return self._commit(d)

    def _commit(self, d: Direction) -> Tuple[Snapshot, TickOutcome]:
        prev_score = self.rules.score
        snap, outcome = self.rules.tick(d)
        self.human_dir = snap.dir
        if snap.status.terminal:
            self._record(snap.score)
            self._notify(snap.status, snap.score)
        elif snap.score != prev_score:
            self._notify(snap.status, snap.score)
        return snap, outcome

    def _record(self, score: int) -> None:
        if self.store is not None:
            self.high_score = self.store.save(score)
        else:
            self.high_score = max(self.high_score, score)
