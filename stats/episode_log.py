from __future__ import annotations
import csv, os
from typing import Dict, Any, Protocol, Callable

from .metrics import EMA, WindowedStat, OutcomeCounter

ALL_KEYS = [
    "episode",
    "epis/score", "epis/score_ema", "epis/score_mean100", "epis/score_max100",
    "epis/len", "epis/len_ema", "epis/len_mean100",
    "epis/status", "epis/reason", "epis/win_rate",
]

class Logger(Protocol):
    def log(self, step: int, scalars: Dict[str, Any]) -> None: ...
    def flush(self) -> None: ...
    def close(self) -> None: ...


class CSVLogger:
    """Append-only CSV logger with header auto-discovery or predefined schema."""
    def __init__(self, path: str, fieldnames: list[str] | None = None):
        d = os.path.dirname(path)
        if d:
            os.makedirs(d, exist_ok=True)
        self.path = path
        self._fieldnames = fieldnames
        self._file = open(path, "a", newline="")
        self._writer = None

    def log(self, step: int, scalars: Dict[str, Any]) -> None:
        scalars = {"episode": step, **scalars}
        if self._writer is None:
            if self._fieldnames is None:
                self._fieldnames = list(scalars.keys())
            self._writer = csv.DictWriter(
                self._file,
                fieldnames=self._fieldnames,
                extrasaction="ignore",
            )
            if self._file.tell() == 0:
                self._writer.writeheader()
        self._writer.writerow(scalars)

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


def make_episode_logger(
    *,
    logger: Logger,
    window: int = 100,
    alpha: float = 0.05,
) -> Callable[[int, Dict[str, Any]], Dict[str, Any]]:
    """
    Returns a function(ep, summary) -> scalars that folds one finished
    episode into running stats and writes a CSV row.

    `summary` carries "score", "steps", "status" and "reason".
    """
    ema_score, ema_len = EMA(alpha), EMA(alpha)
    win_score, win_len = WindowedStat(window), WindowedStat(window)
    outcomes = OutcomeCounter()

    def _on_episode_end(ep: int, s: Dict[str, Any]) -> Dict[str, Any]:
        sc, ln = int(s["score"]), int(s["steps"])
        status = str(s.get("status", ""))
        win_score.add(sc); win_len.add(ln)
        outcomes.add(status)
        ws, wl = win_score.summary(), win_len.summary()

        scalars = {
            "epis/score": sc,
            "epis/score_ema": ema_score.update(sc),
            "epis/score_mean100": ws["mean"],
            "epis/score_max100": ws["max"],
            "epis/len": ln,
            "epis/len_ema": ema_len.update(ln),
            "epis/len_mean100": wl["mean"],
            "epis/status": status,
            "epis/reason": s.get("reason") or "",
            "epis/win_rate": outcomes.rate("WON"),
        }
        logger.log(ep, scalars)
        logger.flush()
        return scalars

    return _on_episode_end
