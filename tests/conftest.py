"""Shared pytest fixtures for dialog360 tests."""

import json

import httpx
import pytest

from dialog360.client import Dialog360Client
from dialog360.config import ClientConfig


class SleepRecorder:
    """Stands in for time.sleep so backoff can be observed without waiting."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeProvider:
    """Queue of canned outcomes served through httpx.MockTransport.

    Each outcome is either an httpx.Response or an exception instance to raise.
    Every request seen is recorded.
    """

    def __init__(self):
        self.outcomes: list = []
        self.requests: list[httpx.Request] = []

    def reply(self, status_code: int = 200, body=None, content: bytes | None = None):
        if content is None:
            content = b"" if body is None else json.dumps(body).encode()
        self.outcomes.append(httpx.Response(status_code, content=content))
        return self

    def fail(self, exc: Exception):
        self.outcomes.append(exc)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def config():
    return ClientConfig(api_key="test-api-key", phone_number_id="test-phone-number-id")


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def client(config, provider, sleeper):
    with Dialog360Client(config, transport=httpx.MockTransport(provider.handler), sleep=sleeper) as c:
        yield c
