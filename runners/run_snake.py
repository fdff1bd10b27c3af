# runners/run_snake.py
from __future__ import annotations
import logging

from config import AppConfig
from commentary.service import CommentaryService
from commentary.trigger import CommentaryTrigger
from core.highscore import HighScoreStore
from core.interfaces import Direction, GameStatus
from core.session import Session
from policy.autopilot import AutopilotPolicy
from viz.keyboard import Keyboard
from viz.render_iface import Hud
from viz.renderer_pygame import PygameRenderer

logger = logging.getLogger(__name__)

def handle(session: Session, cmd) -> bool:
    """Apply one keyboard command between ticks. Returns False to quit."""
    if cmd == "quit":
        return False
    status = session.status
    if cmd == "space":
        if status is GameStatus.IDLE:
            session.start()
        elif status.terminal:
            session.to_menu()
        elif status is GameStatus.PLAYING:
            session.toggle_autopilot()
    elif cmd == "pause":
        if status in (GameStatus.PLAYING, GameStatus.PAUSED):
            session.toggle_pause()
    elif isinstance(cmd, Direction):
        session.steer(cmd)
    return True

def main(cfg: AppConfig | None = None):
    cfg = (cfg or AppConfig()).sanitized()
    policy = AutopilotPolicy()
    session = Session(cfg, policy, store=HighScoreStore(cfg.high_score_path))

    trigger = None
    if cfg.commentary_enabled:
        service = CommentaryService(model=cfg.commentary_model,
                                    retries=cfg.commentary_retries,
                                    delay_s=cfg.commentary_delay_s)
        trigger = CommentaryTrigger(service, every=cfg.commentary_every)
        session.subscribe(trigger)

    rend = PygameRenderer()
    rend.open(cfg)
    kbd = Keyboard()
    fps = max(1, 1000 // cfg.tick_ms)

    logger.info("grid %dx%d  mode=%s  foods=%d  target=%d",
                cfg.grid_size, cfg.grid_size, cfg.mode.value, cfg.food_count, cfg.effective_target())
    try:
        running = True
        while running:
            for cmd in kbd.poll():
                if not handle(session, cmd):
                    running = False
                    break
            snap, _ = session.step()
            hud = Hud(
                high_score=session.high_score,
                autopilot=session.autopilot,
                commentary=trigger.latest if trigger else None,
                overlay=policy.describe() if session.autopilot else "",
            )
            rend.draw(snap, hud)
            rend.tick(fps)
    finally:
        session.grace.cancel()
        rend.close()

if __name__ == "__main__":
    main()
