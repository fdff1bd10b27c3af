from __future__ import annotations
import logging
import threading
from typing import Callable, Optional

from core.interfaces import GameStatus
from .service import Commentary, CommentaryService

logger = logging.getLogger(__name__)

class CommentaryTrigger:
    """
    Session listener deciding when to ask for commentary: on game over, and
    each time the score lands on a new positive multiple of `every`.
    Requests run off the tick thread; the newest reply wins.
    """
    def __init__(
        self,
        service: CommentaryService,
        every: int = 5,
        run_async: bool = True,
        on_commentary: Optional[Callable[[Commentary], None]] = None,
    ):
        self.service = service
        self.every = max(1, every)
        self.run_async = run_async
        self.on_commentary = on_commentary
        self.last_score: Optional[int] = None
        self._lock = threading.Lock()
        self._latest: Optional[Commentary] = None

    @property
    def latest(self) -> Optional[Commentary]:
        with self._lock:
            return self._latest

    def wants(self, status: GameStatus, score: int) -> bool:
        if status is GameStatus.GAME_OVER:
            return True
        return score > 0 and score % self.every == 0 and score != self.last_score

    def __call__(self, status: GameStatus, score: int) -> None:
        if not self.wants(status, score):
            return
        self.last_score = score
        if self.run_async:
            threading.Thread(target=self._fetch, args=(score, status),
                             name="Commentary", daemon=True).start()
        else:
            self._fetch(score, status)

    def _fetch(self, score: int, status: GameStatus) -> None:
        c = self.service.get_commentary(score, status)
        logger.debug("commentary [%s] %s", c.type, c.message)
        with self._lock:
            self._latest = c
        if self.on_commentary is not None:
            self.on_commentary(c)
