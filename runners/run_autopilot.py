# runners/run_autopilot.py
from __future__ import annotations

import logging
from typing import Dict, Any, Optional

from config import AppConfig
from core.interfaces import GameStatus, SnapshotSink
from core.snake_rules import Rules
from policy.autopilot import AutopilotPolicy
from stats.episode_log import CSVLogger, make_episode_logger, ALL_KEYS
from viz.renderer_headless import HeadlessRenderer

logger = logging.getLogger(__name__)


def run_episode(rules: Rules, policy: AutopilotPolicy, max_steps: int,
                sink: Optional[SnapshotSink] = None) -> Dict[str, Any]:
    """Play one game with the autopilot at the wheel, as fast as possible."""
    snap = rules.reset()
    steps = 0
    while snap.status is GameStatus.PLAYING and steps < max_steps:
        snap, _ = rules.tick(policy.act(snap))
        steps += 1
        if sink is not None:
            sink.push(snap)
    return {
        "score": snap.score,
        "steps": steps,
        "status": snap.status.value,
        "reason": snap.reason if snap.status is not GameStatus.PLAYING else "max_steps",
        "snapshot": snap,
    }


def main(cfg: AppConfig | None = None, live: bool = False) -> Dict[str, Any]:
    cfg = (cfg or AppConfig()).sanitized()
    rules = Rules(cfg)
    policy = AutopilotPolicy()

    viewer = None
    if live:
        from viz.live_viewer import LiveViewer
        viewer = LiveViewer(cfg)
        viewer.start()
    board = HeadlessRenderer()
    board.open(cfg)

    csv_logger = CSVLogger(cfg.log_path, fieldnames=ALL_KEYS)
    on_episode_end = make_episode_logger(logger=csv_logger)

    logger.info("=== Snake autopilot ===")
    logger.info("grid: %dx%d  mode: %s  foods: %d  target: %d",
                cfg.grid_size, cfg.grid_size, cfg.mode.value, cfg.food_count, cfg.effective_target())

    scalars: Dict[str, Any] = {}
    best = 0
    try:
        for ep in range(cfg.episodes):
            if cfg.seed is not None:
                rules.seed(cfg.seed + ep)
            sink: Optional[SnapshotSink] = None
            if viewer is not None and viewer.alive:
                viewer.begin_episode(ep, best)
                sink = viewer
            summary = run_episode(rules, policy, cfg.max_ep_steps, sink)
            best = max(best, summary["score"])
            board.draw(summary["snapshot"])
            scalars = on_episode_end(ep, summary)
            logger.info("[ep %d] score=%d len=%d status=%s reason=%s",
                        ep, summary["score"], summary["steps"], summary["status"], summary["reason"])
            logger.debug("final board:\n%s", board.last_frame)
    finally:
        csv_logger.close()
        board.close()
        if viewer is not None:
            viewer.close()
    return scalars


if __name__ == "__main__":
    main()
