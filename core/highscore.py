from __future__ import annotations
import json, logging, os

logger = logging.getLogger(__name__)

class HighScoreStore:
    """Single persisted scalar. Missing or unreadable files count as 0."""
    def __init__(self, path: str):
        self.path = path

    def load(self) -> int:
        if not os.path.exists(self.path):
            return 0
        try:
            with open(self.path, "r") as f:
                return max(0, int(json.load(f).get("high_score", 0)))
        except (OSError, ValueError, AttributeError, TypeError) as e:
            logger.warning("ignoring unreadable high score file %s: %s", self.path, e)
            return 0

    def save(self, score: int) -> int:
        """Persist max(stored, score) and return it."""
        best = max(self.load(), int(score))
        d = os.path.dirname(self.path)
        if d:
            os.makedirs(d, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"high_score": best}, f)
        return best
