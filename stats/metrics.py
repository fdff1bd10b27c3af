from __future__ import annotations
from collections import deque
from typing import Deque, Dict, Optional

import numpy as np

class EMA:
    """Exponential moving average."""
    def __init__(self, alpha: float):
        self.alpha = alpha
        self.value: Optional[float] = None
    def update(self, x: float) -> float:
        self.value = x if self.value is None else (self.alpha * x + (1 - self.alpha) * self.value)
        return self.value

class WindowedStat:
    """Fixed-window mean/min/max/median over the last `window` episodes."""
    def __init__(self, window: int):
        self.window = window
        self.buf: Deque[float] = deque(maxlen=window)
    def add(self, x: float) -> None:
        self.buf.append(float(x))
    def summary(self) -> Dict[str, float]:
        if not self.buf:
            return {"mean": 0.0, "min": 0.0, "max": 0.0, "median": 0.0}
        b = np.fromiter(self.buf, dtype=np.float64)
        return {"mean": float(b.mean()), "min": float(b.min()),
                "max": float(b.max()), "median": float(np.median(b))}

class OutcomeCounter:
    """Tally of how episodes ended, keyed by final status value."""
    def __init__(self):
        self.counts: Dict[str, int] = {}
    def add(self, status: str) -> None:
        self.counts[status] = self.counts.get(status, 0) + 1
    def rate(self, status: str) -> float:
        total = sum(self.counts.values())
        return self.counts.get(status, 0) / total if total else 0.0
