"""shared fixtures: a fake bitbucket server behind httpx.MockTransport"""

import json
from typing import Any

import httpx
import pytest

from bitbucket_mcp._dispatch import Dispatcher
from bitbucket_mcp.settings import Settings

BASE_URL = "https://bitbucket.example.com"
API = "/rest/api/1.0"
PR_PATH = "/projects/PROJ/repos/repo/pull-requests"

ENV_VARS = (
    "BITBUCKET_URL",
    "BITBUCKET_TOKEN",
    "BITBUCKET_USERNAME",
    "BITBUCKET_PASSWORD",
    "BITBUCKET_DEFAULT_PROJECT",
    "BITBUCKET_TIMEOUT",
    "BITBUCKET_LOG_LEVEL",
    "BITBUCKET_LOG_FILE",
)


class FakeBitbucket:
    """records requests and answers them from a route table"""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], tuple[int, dict[str, Any]]] = {}

    def add(self, method: str, path: str, status: int = 200, **response: Any) -> None:
        self.routes[(method, f"{API}{path}")] = (status, response)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, response = self.routes.get(
            (request.method, request.url.path),
            (404, {"json": {"message": "no route"}}),
        )
        return httpx.Response(status, **response)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


class RecordingSink:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failures: list[tuple[str, BaseException]] = []

    def record_call(self, name, arguments):
        self.calls.append((name, dict(arguments)))

    def record_failure(self, name, error):
        self.failures.append((name, error))


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """keep the developer's environment and .env out of the tests"""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, bitbucket_url=BASE_URL, bitbucket_token="secret")


@pytest.fixture
def fake_bitbucket() -> FakeBitbucket:
    return FakeBitbucket()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
async def dispatcher(settings, fake_bitbucket, sink):
    """dispatcher with no default project"""
    d = Dispatcher.from_settings(
        settings, transport=httpx.MockTransport(fake_bitbucket), sink=sink
    )
    yield d
    await d.aclose()


@pytest.fixture
async def default_dispatcher(fake_bitbucket, sink):
    """dispatcher with BITBUCKET_DEFAULT_PROJECT=PROJ"""
    settings = Settings(
        _env_file=None,
        bitbucket_url=BASE_URL,
        bitbucket_token="secret",
        bitbucket_default_project="PROJ",
    )
    d = Dispatcher.from_settings(
        settings, transport=httpx.MockTransport(fake_bitbucket), sink=sink
    )
    yield d
    await d.aclose()
