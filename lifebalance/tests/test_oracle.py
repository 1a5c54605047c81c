"""
Tests for the OpenAI-compatible rating oracle.

The HTTP layer is replaced with a fake urlopen; no network access.
"""

import http.client
import io
import json
import socket
import urllib.error

import pytest

from lifebalance.core.events import Polarity
from lifebalance.oracle import OpenAICompatRatingOracle, RatingSuggestion


class FakeResponse:
    def __init__(self, body: bytes):
        self._body = body

    def read(self):
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _completion(content: str) -> FakeResponse:
    payload = {"choices": [{"message": {"role": "assistant", "content": content}}]}
    return FakeResponse(json.dumps(payload).encode("utf-8"))


def _http_error(code: int) -> urllib.error.HTTPError:
    return urllib.error.HTTPError(
        "https://example.invalid/v1/chat/completions", code, "error", {}, io.BytesIO(b"")
    )


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Queue of responses (or exceptions) returned by successive urlopen calls."""
    calls = []
    queue = []

    def _urlopen(req, timeout=None):
        calls.append({"req": req, "timeout": timeout})
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr("urllib.request.urlopen", _urlopen)
    return queue, calls


def _oracle(**kwargs):
    kwargs.setdefault("retry_backoff", 0)
    return OpenAICompatRatingOracle(api_key="test-key", base_url="https://example.invalid/openai/", **kwargs)


def test_suggest_returns_rating(fake_urlopen):
    queue, calls = fake_urlopen
    queue.append(_completion('{"rating": 14, "reasoning": "Losing a job affects weeks."}'))

    suggestion = _oracle(timeout=3.0).suggest("Lost my job", Polarity.NEGATIVE)

    assert suggestion == RatingSuggestion(rating=14, reasoning="Losing a job affects weeks.")
    req = calls[0]["req"]
    assert req.full_url == "https://example.invalid/openai/v1/chat/completions"
    assert req.get_header("Authorization") == "Bearer test-key"
    assert calls[0]["timeout"] == 3.0

    body = json.loads(req.data)
    assert body["model"] == "llama-3.3-70b-versatile"
    assert body["temperature"] == 0.3
    assert body["max_tokens"] == 150
    assert body["response_format"] == {"type": "json_object"}
    assert "Misfortune (negative)" in body["messages"][1]["content"]
    assert '"Lost my job"' in body["messages"][1]["content"]


def test_positive_event_prompt(fake_urlopen):
    queue, calls = fake_urlopen
    queue.append(_completion('{"rating": 5, "reasoning": "Nice."}'))

    _oracle().suggest("Found a coin", Polarity.POSITIVE)

    body = json.loads(calls[0]["req"].data)
    assert "Good Fortune (positive)" in body["messages"][1]["content"]


def test_no_api_key_is_not_ready(fake_urlopen):
    _, calls = fake_urlopen
    oracle = OpenAICompatRatingOracle(api_key=None)

    assert not oracle.is_ready()
    assert oracle.suggest("Lost my job", Polarity.NEGATIVE) is None
    assert calls == []


def test_empty_description_skips_request(fake_urlopen):
    _, calls = fake_urlopen

    assert _oracle().suggest("   ", Polarity.NEGATIVE) is None
    assert calls == []


def test_client_error_is_not_retried(fake_urlopen):
    queue, calls = fake_urlopen
    queue.append(_http_error(401))

    assert _oracle(max_retries=3).suggest("x", Polarity.NEGATIVE) is None
    assert len(calls) == 1


def test_server_error_is_retried_once(fake_urlopen):
    queue, calls = fake_urlopen
    queue.extend([_http_error(503), _completion('{"rating": 7, "reasoning": "ok"}')])

    suggestion = _oracle(max_retries=1).suggest("x", Polarity.NEGATIVE)

    assert suggestion.rating == 7
    assert len(calls) == 2


def test_network_failure_exhausts_retries(fake_urlopen):
    queue, calls = fake_urlopen
    queue.extend([urllib.error.URLError("down"), TimeoutError("slow")])

    assert _oracle(max_retries=1).suggest("x", Polarity.NEGATIVE) is None
    assert len(calls) == 2


@pytest.mark.parametrize("content", [
    '{"rating": 25, "reasoning": "too big"}',
    '{"rating": 0}',
    '{"reasoning": "no rating"}',
    "not json at all",
    "",
])
def test_unusable_content_yields_none(fake_urlopen, content):
    queue, _ = fake_urlopen
    queue.append(_completion(content))

    assert _oracle().suggest("x", Polarity.POSITIVE) is None


def test_non_json_body_yields_none(fake_urlopen):
    queue, _ = fake_urlopen
    queue.append(FakeResponse(b"<html>gateway</html>"))

    assert _oracle().suggest("x", Polarity.POSITIVE) is None


def test_unexpected_shape_yields_none(fake_urlopen):
    queue, _ = fake_urlopen
    queue.append(FakeResponse(b'{"choices": []}'))

    assert _oracle().suggest("x", Polarity.POSITIVE) is None


@pytest.mark.parametrize("error", [
    http.client.IncompleteRead(b"partial"),
    http.client.BadStatusLine("garbage"),
    http.client.RemoteDisconnected("closed"),
    socket.timeout("read timed out"),
    OSError("connection reset"),
])
def test_transport_errors_yield_none(fake_urlopen, error):
    """Any low-level transport failure becomes an unavailable suggestion."""
    queue, calls = fake_urlopen
    queue.extend([error, error])

    assert _oracle(max_retries=1).suggest("Lost wallet", Polarity.NEGATIVE) is None
    assert len(calls) == 2


def test_transport_error_then_success_is_retried(fake_urlopen):
    queue, calls = fake_urlopen
    queue.extend([
        http.client.IncompleteRead(b"partial"),
        _completion('{"rating": 9, "reasoning": "ok"}'),
    ])

    suggestion = _oracle(max_retries=1).suggest("Lost wallet", Polarity.NEGATIVE)

    assert suggestion.rating == 9
    assert len(calls) == 2
