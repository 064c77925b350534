import json
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, List, Optional

import pytest

from meteobot.storage import ConversationStore
from meteobot.weather import WeatherSnapshot, ForecastEntry, OpenWeatherClient


class FakeResponse:
    def __init__(self, status: int, body: Any):
        self.status = status
        self._body = body

    async def json(self, content_type="application/json"):
        if isinstance(self._body, Exception):
            raise self._body
        return json.loads(self._body.decode("utf-8"))

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; replays queued replies in order."""

    def __init__(self, replies: List[Any]):
        self.replies = list(replies)
        self.requests = []
        self.closed = False

    def get(self, url, params=None):
        self.requests.append((url, dict(params or {})))
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        status, body = reply
        if isinstance(body, str):
            body = body.encode("utf-8")
        elif not isinstance(body, (bytes, Exception)):
            body = json.dumps(body).encode("utf-8")
        return FakeResponse(status, body)

    async def close(self):
        self.closed = True


def make_client(*replies) -> OpenWeatherClient:
    client = OpenWeatherClient("test-key")
    client._session = FakeSession(list(replies))
    return client


class FakeMessage:
    def __init__(self, text: Optional[str]):
        self.text = text
        self.replies = []

    async def reply_text(self, text, **kwargs):
        self.replies.append((text, kwargs))


def make_update(text: Optional[str], chat_id: int = 42):
    return SimpleNamespace(
        message=FakeMessage(text),
        effective_chat=SimpleNamespace(id=chat_id),
    )


class FakeWeather:
    """Records calls instead of talking to OpenWeather."""

    def __init__(self, snapshot=None, entries=None, error: Optional[Exception] = None):
        self.snapshot = snapshot
        self.entries = entries if entries is not None else []
        self.error = error
        self.current_calls = []
        self.forecast_calls = []

    async def fetch_current(self, city):
        self.current_calls.append(city)
        if self.error:
            raise self.error
        return self.snapshot

    async def fetch_forecast(self, city):
        self.forecast_calls.append(city)
        if self.error:
            raise self.error
        return self.entries


class FakeBot:
    def __init__(self):
        self.sent = []

    async def send_message(self, chat_id, text, **kwargs):
        self.sent.append((chat_id, text))


@pytest.fixture
def store():
    return ConversationStore()


@pytest.fixture
def snapshot():
    return WeatherSnapshot(
        city="Kyiv",
        temperature=12.34,
        humidity=70,
        condition="Rain",
        description="легкий дощ",
    )


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)
