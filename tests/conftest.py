"""Pytest configuration - loads .env and provides an in-process WorkWave API."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest
from dotenv import load_dotenv

from workwave.core.client import APIClient
from workwave.sdk import WorkWaveClient

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

TESTDATA = Path(__file__).parent / "testdata"
API_KEY = "api-key"
BASE_URL = "http://workwave.test"

Handler = Callable[[httpx.Request], httpx.Response]


def load_fixture(name: str) -> dict[str, Any]:
    """Load a canned API response from tests/testdata."""
    return json.loads((TESTDATA / name).read_text())


class MockAPI:
    """
    Path-routed fake of the WorkWave API.

    Handlers are looked up by exact path, falling back to "/" when
    registered. Every request received is kept in ``requests``.
    """

    def __init__(self) -> None:
        self.handlers: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.handlers.get(request.url.path) or self.handlers.get("/")
        if handler is None:
            return httpx.Response(404, text="404 page not found")
        return handler(request)

    def add(self, path: str, handler: Handler) -> None:
        self.handlers[path] = handler

    def json(self, path: str, payload: Any, status: int = 200) -> None:
        self.add(path, lambda _request: httpx.Response(status, json=payload))

    def fixture(self, path: str, name: str) -> None:
        self.json(path, load_fixture(name))

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


@pytest.fixture
def api() -> MockAPI:
    """A fresh fake API per test."""
    return MockAPI()


@pytest.fixture
def raw_client(api):
    """Low-level APIClient bound to the fake API."""
    client = APIClient(api_key=API_KEY, base_url=BASE_URL, transport=api.transport())
    yield client
    client.close()


@pytest.fixture
def client(api):
    """WorkWaveClient bound to the fake API."""
    with WorkWaveClient(api_key=API_KEY, base_url=BASE_URL, transport=api.transport()) as c:
        yield c
