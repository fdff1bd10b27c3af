# viz/live_viewer.py
from __future__ import annotations
import multiprocessing as mp
import queue
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from config import AppConfig
from core.interfaces import Snapshot, SnapshotSink
from viz.render_iface import Hud

# ("episode", (index, best_score)) | ("frame", Snapshot) | ("quit", None)
Msg = Tuple[str, Any]

@dataclass
class Scoreboard:
    """What the viewer window knows about the evaluation run so far."""
    episode: int = 0
    best: int = 0
    paused: bool = False

    def hud(self, snap: Snapshot) -> Hud:
        best = max(self.best, snap.score)
        text = f"Episode {self.episode}"
        if self.paused:
            text += "  (paused, P to resume)"
        return Hud(high_score=best, autopilot=True, overlay=text)

    def on_episode(self, payload: Tuple[int, int]) -> None:
        self.episode, self.best = payload


def _viewer_proc(q: mp.Queue, closed: mp.Event, cfg: AppConfig) -> None:
    from viz.keyboard import Keyboard
    from viz.renderer_pygame import PygameRenderer

    fps = max(1, 1000 // max(1, cfg.tick_ms))
    ren = PygameRenderer()
    ren.open(cfg)
    keys = Keyboard()
    board = Scoreboard()
    last: Optional[Snapshot] = None
    try:
        while True:
            cmds = keys.poll()
            if "quit" in cmds:
                break
            if "pause" in cmds:
                board.paused = not board.paused
            try:
                kind, payload = q.get(timeout=1.0 / fps)
            except queue.Empty:
                kind, payload = "idle", None
            if kind == "quit":
                break
            if kind == "episode":
                board.on_episode(payload)
            elif kind == "frame" and not board.paused:
                last = payload
            if last is not None and not (board.paused and kind == "frame"):
                ren.draw(last, board.hud(last))
                ren.tick(fps)
    except KeyboardInterrupt:
        pass
    finally:
        closed.set()
        ren.close()


class LiveViewer(SnapshotSink):
    """
    Watches autopilot episodes in a separate pygame process. The evaluation
    loop never waits on the window: frames are dropped when the queue is full,
    and everything is dropped once the window has been closed.
    """
    def __init__(self, cfg: AppConfig, queue_max: int = 64):
        self._cfg = cfg
        self._queue_max = queue_max
        self._q: Optional[mp.Queue] = None
        self._closed: Optional[mp.Event] = None
        self._proc: Optional[mp.Process] = None

    @property
    def alive(self) -> bool:
        return self._proc is not None and not self._closed.is_set()

    def start(self) -> None:
        if self._proc is not None:
            return
        ctx = mp.get_context("spawn")
        self._q = ctx.Queue(maxsize=self._queue_max)
        self._closed = ctx.Event()
        self._proc = ctx.Process(target=_viewer_proc, args=(self._q, self._closed, self._cfg),
                                 daemon=True)
        self._proc.start()

    def begin_episode(self, index: int, best: int) -> None:
        # must not be dropped, or the window shows the wrong episode
        if self.alive:
            self._q.put(("episode", (index, best)))

    def push(self, snap: Snapshot) -> None:
        if not self.alive:
            return
        try:
            self._q.put_nowait(("frame", snap))
        except queue.Full:
            pass

    def close(self) -> None:
        if self.alive:
            self._q.put(("quit", None))
        if self._proc is not None:
            self._proc.join(timeout=2.0)
        self._proc = None
        self._q = None
        self._closed = None
