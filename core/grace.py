# core/grace.py
from __future__ import annotations
import threading
from enum import Enum
from typing import Callable, Optional

from .interfaces import Direction

class GraceState(Enum):
    PENDING = "pending"
    CORRECTED = "corrected"
    FINALIZED = "finalized"

class GraceToken:
    """
    A pending loss for the human snake. Exactly one of `correct` or
    `finalize` wins; the loser gets False back.
    """
    def __init__(self, direction: Direction):
        self.direction = direction       # the move that would have killed us
        self._lock = threading.Lock()
        self._state = GraceState.PENDING

    @property
    def state(self) -> GraceState:
        with self._lock:
            return self._state

    @property
    def pending(self) -> bool:
        return self.state is GraceState.PENDING

    def _resolve(self, to: GraceState) -> bool:
        with self._lock:
            if self._state is not GraceState.PENDING:
                return False
            self._state = to
            return True

    def correct(self) -> bool:
        return self._resolve(GraceState.CORRECTED)

    def finalize(self) -> bool:
        return self._resolve(GraceState.FINALIZED)

TimerFactory = Callable[[float, Callable[[], None]], "threading.Timer"]

class GraceTimer:
    """Arms one cancellable expiry per pending loss."""
    def __init__(self, grace_s: float, timer_factory: Optional[TimerFactory] = None):
        self.grace_s = max(0.0, float(grace_s))
        self._factory = timer_factory or threading.Timer
        self._timer = None
        self.token: Optional[GraceToken] = None

    @property
    def enabled(self) -> bool:
        return self.grace_s > 0

    def arm(self, direction: Direction) -> GraceToken:
        self.cancel()
        token = GraceToken(direction)
        self.token = token
        self._timer = self._factory(self.grace_s, token.finalize)
        self._timer.daemon = True
        self._timer.start()
        return token

    def try_correct(self) -> bool:
        """Claim the pending token for a correction; stops the timer on success."""
        token = self.token
        if token is None or not token.correct():
            return False
        self._stop_timer()
        self.token = None
        return True

    def expired(self) -> bool:
        token = self.token
        return token is not None and token.state is GraceState.FINALIZED

    def cancel(self) -> None:
        self._stop_timer()
        self.token = None

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
