"""
Pytest configuration for backend-services tests.

Ensures the backend-services directory is on sys.path so imports like
`from utils...` resolve correctly when tests run from the repo root in CI.
"""

# External imports
import os
import sys

# TEST-ONLY settings - DO NOT use these in production
os.environ.setdefault('LOG_TO_FILE', 'false')
os.environ.setdefault('LOG_FORMAT', 'plain')

_HERE = os.path.dirname(__file__)
_PROJECT_ROOT = os.path.abspath(os.path.join(_HERE, os.pardir))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from services.gateway_service import GatewayService
from utils.settings_util import GatewaySettings

TEST_API_KEY = 'test-only-api-key'

_SETTINGS_ENV = (
    'GOOGLE_API_KEY', 'HTTP_PROXY', 'http_proxy', 'HTTPS_PROXY', 'https_proxy',
    'ENVIRONMENT', 'VERCEL', 'GEMINI_MODEL', 'GEMINI_API_BASE',
    'UPSTREAM_TIMEOUT', 'ENABLE_HTTPX_CLIENT_CACHE',
)


def gemini_body(text: str) -> dict:
    return {
        'candidates': [
            {'content': {'role': 'model', 'parts': [{'text': text}]}, 'finishReason': 'STOP'}
        ],
        'modelVersion': 'gemini-3-flash-preview',
    }


class UpstreamRecorder:
    """httpx.MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code=200, json_body=None, text_body=None, exc=None):
        self.status_code = status_code
        self.json_body = json_body if json_body is not None or text_body is not None else gemini_body('plain answer')
        self.text_body = text_body
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.text_body is not None:
            return httpx.Response(self.status_code, text=self.text_body)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def client_factory(self, settings):
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    for name in _SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def settings():
    return GatewaySettings(google_api_key=TEST_API_KEY, environment='production')


@pytest.fixture
def upstream():
    return UpstreamRecorder()


@pytest_asyncio.fixture
async def gateway_service(settings, upstream):
    service = GatewayService(settings, client_factory=upstream.client_factory)
    yield service
    await service.aclose_http_client()


@pytest_asyncio.fixture
async def gateway_client(gateway_service):
    from insight import insight

    original = insight.state.gateway_service
    insight.state.gateway_service = gateway_service
    try:
        async with AsyncClient(transport=ASGITransport(app=insight), base_url='http://testserver') as c:
            yield c
    finally:
        insight.state.gateway_service = original
