"""Pytest configuration and shared fixtures."""
import io
import json
import os

import httpx
import pytest
from rich.console import Console

from askgpt.config import ChatSettings
from askgpt.llm import OpenAIProvider

TEST_URL = "https://llm.test/v1/chat/completions"


def sse_line(content: str) -> str:
    """One event-stream line carrying a text delta."""
    return "data: " + json.dumps({"choices": [{"delta": {"content": content}}]}) + "\n"


def sse_body(*contents: str, done: bool = True) -> bytes:
    """A complete event-stream body for the given deltas."""
    text = "".join(sse_line(c) for c in contents)
    if done:
        text += "data: [DONE]\n"
    return text.encode("utf-8")


async def chunked(data: bytes, size: int):
    """Yield ``data`` in pieces of ``size`` bytes."""
    for start in range(0, len(data), size):
        yield data[start:start + size]


class RecordingServer:
    """httpx handler that answers every request with prepared responses."""

    def __init__(self, *responses: httpx.Response):
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError("unexpected extra request")
        return self._responses.pop(0)

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def settings():
    """Default request settings."""
    return ChatSettings()


@pytest.fixture
def make_provider(settings):
    """Build an OpenAIProvider backed by a RecordingServer."""
    def _make(server: RecordingServer, **kwargs) -> OpenAIProvider:
        return OpenAIProvider(
            api_key="sk-test",
            model="gpt-test",
            url=TEST_URL,
            settings=kwargs.pop("settings", settings),
            transport=httpx.MockTransport(server),
            **kwargs
        )
    return _make


@pytest.fixture
def consoles():
    """Return (out, err) consoles writing to in-memory buffers."""
    out = Console(file=io.StringIO(), width=200)
    err = Console(file=io.StringIO(), width=200)
    return out, err


@pytest.fixture(scope="session")
def api_keys():
    """Return API settings from environment."""
    return {
        "url": os.getenv("ASKGPT_URL"),
        "model": os.getenv("ASKGPT_MODEL"),
        "key": os.getenv("ASKGPT_KEY"),
    }


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Point the home directory at a temporary path."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("ASKGPT_URL", "ASKGPT_MODEL", "ASKGPT_KEY"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path
