"""
Cosmetic AI commentary for the side panel.

Asks an OpenAI-compatible chat endpoint for a one-line quip about the
current score. Rate limiting is retried with exponential backoff; any other
failure, or running out of retries, falls back to a canned line. Nothing in
here ever raises into the game loop.
"""

import json
import logging
import os
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import openai
from openai import OpenAI

from core.interfaces import GameStatus

logger = logging.getLogger(__name__)

COMMENTARY_TYPES = ("encouragement", "sarcasm", "advice", "congratulations")


@dataclass(frozen=True)
class Commentary:
    message: str
    type: str


FALLBACK_COMMENTARIES = (
    Commentary("Your snake moves faster than my processors on a Monday.", "encouragement"),
    Commentary("Do you even blink? A score like that takes inhuman focus.", "congratulations"),
    Commentary("I see you're going with the inch-by-inch strategy. Bold.", "advice"),
    Commentary("You zigzag like you're running from a system update.", "sarcasm"),
    Commentary("Your hand-eye coordination is... acceptable to the algorithm.", "encouragement"),
    Commentary("Eating that energy cell was statistically unlikely. Well done.", "congratulations"),
    Commentary("Warning: excessive dexterity detected. Are you a bot?", "sarcasm"),
    Commentary("Turn left. Or right. Just not into yourself.", "advice"),
)

PROMPT = (
    "You are a witty, slightly sarcastic AI commentator in a retro Snake game. "
    "The current score is {score} and the game status is {status}. "
    "Give a short, punchy, one-sentence comment on the player's performance. "
    "Be creative and use gaming terminology. "
    "Reply with a JSON object with two fields: 'message' (string) and 'type' "
    "(one of: 'encouragement', 'sarcasm', 'advice', 'congratulations')."
)


def _sanitize_env_value(value: Optional[str]) -> Optional[str]:
    """Strip whitespace and wrapping quotes that shells sometimes leave on env values."""
    if value is None:
        return None
    cleaned = value.strip()
    if len(cleaned) >= 2 and cleaned[0] == cleaned[-1] and cleaned[0] in ("'", '"'):
        cleaned = cleaned[1:-1].strip()
    return cleaned or None


def parse_commentary(text: Optional[str]) -> Commentary:
    """Validate a model reply. Raises ValueError on anything malformed."""
    if not text:
        raise ValueError("Empty response")
    data: Dict[str, Any] = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    message = str(data.get("message", "")).strip()
    kind = data.get("type")
    if not message or kind not in COMMENTARY_TYPES:
        raise ValueError(f"Malformed commentary: {data}")
    return Commentary(message=message, type=kind)


class CommentaryService:
    def __init__(
        self,
        model: str = "gpt-4o-mini",
        retries: int = 2,
        delay_s: float = 1.0,
        client: Optional[Any] = None,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.model = model
        self.retries = max(0, int(retries))
        self.delay_s = delay_s
        self.client = client if client is not None else self._make_client()
        self.rng = rng or random.Random()
        self.sleep = sleep

    @staticmethod
    def _make_client() -> Optional[OpenAI]:
        api_key = _sanitize_env_value(os.getenv("COMMENTARY_API_KEY") or os.getenv("OPENAI_API_KEY"))
        if not api_key:
            logger.info("No commentary API key configured, using canned commentary")
            return None
        base_url = _sanitize_env_value(os.getenv("COMMENTARY_BASE_URL"))
        # retries are ours; the SDK would otherwise retry 429s underneath
        return OpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    def _request(self, score: int, status: str) -> Commentary:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": PROMPT.format(score=score, status=status)}],
            response_format={"type": "json_object"},
        )
        return parse_commentary(response.choices[0].message.content)

    def fallback(self, score: int, status: str) -> Commentary:
        pick = self.rng.choice(FALLBACK_COMMENTARIES)
        if status == GameStatus.GAME_OVER.value:
            return Commentary(f"Session over. Score: {score}. My circuits are crying (in binary).", pick.type)
        return pick

    def get_commentary(self, score: int, status: GameStatus | str) -> Commentary:
        status = status.value if isinstance(status, GameStatus) else str(status)
        if self.client is None:
            return self.fallback(score, status)

        delay = self.delay_s
        for attempt in range(self.retries + 1):
            try:
                return self._request(score, status)
            except openai.RateLimitError as e:
                logger.warning("Commentary rate limited (attempt %d/%d): %s",
                               attempt + 1, self.retries + 1, e)
                if attempt < self.retries:
                    self.sleep(delay)
                    delay *= 2
            except (openai.APIError, ValueError, AttributeError, IndexError) as e:
                logger.warning("Commentary request failed (attempt %d): %s", attempt + 1, e)
                break
        return self.fallback(score, status)
