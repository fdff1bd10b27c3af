import os
import sys

# Headless SDL so tests don't open a window
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

# Ensure project root is importable (so core.* imports work when running from repo root)
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import pygame as pg
import pytest

from config import AppConfig
from core.interfaces import Direction, Food, GameMode, GameStatus, Snapshot

@pytest.fixture(scope="session", autouse=True)
def _pygame_session():
    pg.init()
    yield
    pg.quit()

@pytest.fixture
def cfg(tmp_path):
    return AppConfig(seed=0, grace_ms=0, commentary_enabled=False,
                     high_score_path=str(tmp_path / "highscore.json"),
                     log_path=str(tmp_path / "logs.csv"))

@pytest.fixture
def make_snap():
    def make(snake, foods=(), dir=Direction.UP, mode=GameMode.NORMAL, n=20):
        return Snapshot(
            snake=tuple(snake),
            foods=tuple(Food(pos=p) for p in foods),
            dir=dir,
            score=0,
            status=GameStatus.PLAYING,
            steps_since_food=0,
            step_count=0,
            reason=None,
            grid_size=n,
            mode=mode,
            target_score=n * n - len(snake),
        )
    return make

class FakeClock:
    def __init__(self, t: float = 0.0):
        self.t = t
    def __call__(self) -> float:
        return self.t

@pytest.fixture
def clock():
    return FakeClock()

class FakeTimer:
    """Stands in for threading.Timer; the test fires it by hand."""
    def __init__(self, interval, fn):
        self.interval = interval
        self.fn = fn
        self.daemon = False
        self.started = False
        self.cancelled = False
    def start(self):
        self.started = True
    def cancel(self):
        self.cancelled = True
    def fire(self):
        if not self.cancelled:
            self.fn()

@pytest.fixture
def timers():
    made = []
    def factory(interval, fn):
        t = FakeTimer(interval, fn)
        made.append(t)
        return t
    factory.made = made
    return factory
