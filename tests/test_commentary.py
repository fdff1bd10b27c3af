"""
Tests for the commentary client: reply parsing, 429 backoff and the canned
fallback. The OpenAI client is replaced with dummies, except for one test
that talks to a local always-429 server.
"""

import json
import random
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from types import SimpleNamespace

import httpx
import openai
import pytest

from commentary import service as commentary_service
from commentary.service import (
    COMMENTARY_TYPES, FALLBACK_COMMENTARIES, Commentary, CommentaryService, parse_commentary,
)
from commentary.trigger import CommentaryTrigger
from core.interfaces import GameStatus


def _reply(payload):
    content = payload if isinstance(payload, str) else json.dumps(payload)
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _rate_limited():
    request = httpx.Request("POST", "https://example.invalid/v1/chat/completions")
    response = httpx.Response(429, request=request)
    return openai.RateLimitError("Resource exhausted", response=response, body=None)


class DummyCompletions:
    """Plays back a script of replies/exceptions and records every call."""
    def __init__(self, *script):
        self.script = list(script)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def make_service(*script, retries=2):
    completions = DummyCompletions(*script)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    sleeps = []
    svc = CommentaryService(model="test-model", retries=retries, delay_s=1.0,
                            client=client, rng=random.Random(0), sleep=sleeps.append)
    return svc, completions, sleeps


def test_parses_a_good_reply():
    svc, completions, sleeps = make_service(_reply({"message": "Nice turn!", "type": "advice"}))
    c = svc.get_commentary(10, GameStatus.PLAYING)
    assert c == Commentary("Nice turn!", "advice")
    kwargs = completions.calls[0]
    assert kwargs["model"] == "test-model"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert "10" in kwargs["messages"][0]["content"]
    assert "PLAYING" in kwargs["messages"][0]["content"]
    assert sleeps == []


def test_rate_limit_retries_with_doubling_delay():
    svc, completions, sleeps = make_service(
        _rate_limited(), _rate_limited(), _reply({"message": "Back online.", "type": "sarcasm"}))
    c = svc.get_commentary(5, "PLAYING")
    assert c.message == "Back online."
    assert sleeps == [1.0, 2.0]
    assert len(completions.calls) == 3


def test_rate_limit_exhausts_to_fallback():
    svc, completions, sleeps = make_service(_rate_limited(), _rate_limited(), _rate_limited())
    c = svc.get_commentary(5, GameStatus.PLAYING)
    assert c in FALLBACK_COMMENTARIES
    assert sleeps == [1.0, 2.0]
    assert len(completions.calls) == 3


def test_other_errors_fall_back_without_retry():
    conn = openai.APIConnectionError(request=httpx.Request("POST", "https://example.invalid"))
    svc, completions, sleeps = make_service(conn)
    c = svc.get_commentary(5, GameStatus.PLAYING)
    assert c in FALLBACK_COMMENTARIES
    assert sleeps == []
    assert len(completions.calls) == 1


@pytest.mark.parametrize("bad", ["", "not json", '["list"]', '{"message": "hi", "type": "rant"}'])
def test_malformed_replies_fall_back(bad):
    svc, _, _ = make_service(_reply(bad))
    assert svc.get_commentary(3, GameStatus.PLAYING) in FALLBACK_COMMENTARIES


def test_game_over_fallback_mentions_score():
    svc, _, _ = make_service(_reply("garbage"))
    c = svc.get_commentary(42, GameStatus.GAME_OVER)
    assert "42" in c.message
    assert c.type in COMMENTARY_TYPES


def test_missing_api_key_uses_canned_lines(monkeypatch):
    monkeypatch.delenv("COMMENTARY_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    svc = CommentaryService(rng=random.Random(1))
    assert svc.client is None
    assert svc.get_commentary(5, GameStatus.PLAYING) in FALLBACK_COMMENTARIES


def test_env_key_is_sanitized(monkeypatch):
    seen = {}

    class DummyClient:
        def __init__(self, api_key=None, base_url=None, max_retries=None):
            seen.update(api_key=api_key, base_url=base_url, max_retries=max_retries)

    monkeypatch.setattr(commentary_service, "OpenAI", DummyClient)
    monkeypatch.setenv("COMMENTARY_API_KEY", '  "sk-test"  ')
    monkeypatch.setenv("COMMENTARY_BASE_URL", "'https://llm.example/v1'")
    CommentaryService()
    assert seen == {"api_key": "sk-test", "base_url": "https://llm.example/v1", "max_retries": 0}


def test_parse_rejects_unknown_type():
    with pytest.raises(ValueError):
        parse_commentary('{"message": "x", "type": "neutral"}')


class FixedService:
    def __init__(self):
        self.asked = []
    def get_commentary(self, score, status):
        self.asked.append((score, status))
        return Commentary(f"score {score}", "encouragement")


def test_trigger_fires_on_multiples_and_game_over():
    svc = FixedService()
    got = []
    trigger = CommentaryTrigger(svc, every=5, run_async=False, on_commentary=got.append)
    for score in range(0, 11):
        trigger(GameStatus.PLAYING, score)
    trigger(GameStatus.PLAYING, 10)   # same score again: skipped
    trigger(GameStatus.GAME_OVER, 10)
    assert svc.asked == [(5, GameStatus.PLAYING), (10, GameStatus.PLAYING), (10, GameStatus.GAME_OVER)]
    assert trigger.latest == Commentary("score 10", "encouragement")
    assert len(got) == 3


def test_trigger_ignores_other_terminal_states():
    svc = FixedService()
    trigger = CommentaryTrigger(svc, every=5, run_async=False)
    trigger(GameStatus.WON, 3)
    trigger(GameStatus.STALLED, 0)
    assert svc.asked == []


@pytest.fixture
def busy_server():
    """Local endpoint that answers every request with 429."""
    hits = []

    class Handler(BaseHTTPRequestHandler):
        def do_POST(self):
            hits.append(self.path)
            self.rfile.read(int(self.headers.get("Content-Length", 0)))
            body = json.dumps({"error": {"message": "slow down", "type": "rate_limit"}}).encode()
            self.send_response(429)
            self.send_header("Content-Type", "application/json")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def log_message(self, *args):
            pass

    server = HTTPServer(("127.0.0.1", 0), Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_port}/v1", hits
    server.shutdown()
    server.server_close()


def test_real_client_sends_one_request_per_attempt(monkeypatch, busy_server):
    url, hits = busy_server
    monkeypatch.setenv("COMMENTARY_API_KEY", "sk-test")
    monkeypatch.setenv("COMMENTARY_BASE_URL", url)
    monkeypatch.setenv("NO_PROXY", "127.0.0.1")
    sleeps = []
    svc = CommentaryService(retries=2, delay_s=1.0, rng=random.Random(0), sleep=sleeps.append)
    c = svc.get_commentary(5, GameStatus.PLAYING)
    assert c in FALLBACK_COMMENTARIES
    assert len(hits) == 3
    assert all(p.endswith("/chat/completions") for p in hits)
    assert sleeps == [1.0, 2.0]
