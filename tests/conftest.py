"""
Shared fixtures for the Outlook MCP server tests.

Graph is never contacted: httpx.AsyncClient verbs are monkeypatched to return
real httpx.Response objects, and MSAL is replaced by FakeMsalApp.
"""

import httpx
import pytest

from outlook_mcp.auth import GraphAuth
from outlook_mcp.config import IdentityConfig
from outlook_mcp.service import OutlookService
from outlook_mcp.tools import ToolDispatcher

GRAPH_BASE = "https://graph.microsoft.com/v1.0"


class FakeMsalApp:
    """Stands in for msal.PublicClientApplication."""

    def __init__(self, result=None, flow=None):
        self.result = result if result is not None else {"access_token": "fake-token", "expires_in": 3600}
        self.flow = flow if flow is not None else {
            "user_code": "ABC123",
            "verification_uri": "https://microsoft.com/devicelogin",
        }
        self.initiate_calls = 0
        self.acquire_calls = 0
        self.scopes = None

    def initiate_device_flow(self, scopes=None, **kwargs):
        self.initiate_calls += 1
        self.scopes = scopes
        return dict(self.flow)

    def acquire_token_by_device_flow(self, flow, **kwargs):
        self.acquire_calls += 1
        return dict(self.result)


class FakeAuth:
    """GraphAuth stand-in that hands out a real client without signing in."""

    def __init__(self):
        self.get_client_calls = 0
        self.client = httpx.AsyncClient(
            base_url=GRAPH_BASE,
            headers={"Authorization": "Bearer fake-token"},
        )

    async def get_client(self):
        self.get_client_calls += 1
        return self.client

    async def close(self):
        await self.client.aclose()


def mock_response(status_code: int = 200, json_body=None, method: str = "GET") -> httpx.Response:
    """Create an httpx.Response bound to a request so raise_for_status works."""
    request = httpx.Request(method, f"{GRAPH_BASE}/test")
    return httpx.Response(status_code=status_code, request=request, json=json_body or {})


class RecordingTransport:
    """Records calls made through a patched httpx.AsyncClient verb."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.calls = []

    def verb(self):
        async def _verb(client, url, **kwargs):
            self.calls.append((url, kwargs))
            return self.response
        return _verb

    @property
    def last(self):
        return self.calls[-1]


@pytest.fixture
def fake_auth():
    return FakeAuth()


@pytest.fixture
async def service(fake_auth):
    svc = OutlookService(fake_auth)
    await svc.initialize()
    yield svc
    await svc.close()


@pytest.fixture
def graph(monkeypatch):
    """Patch httpx.AsyncClient.get/post; set .get_response/.post_response per test."""

    class Graph:
        def __init__(self):
            self.get = RecordingTransport(mock_response(200, {"value": []}))
            self.post = RecordingTransport(mock_response(200, {}, method="POST"))

        def respond_get(self, status_code=200, json_body=None):
            self.get.response = mock_response(status_code, json_body)

        def respond_post(self, status_code=200, json_body=None):
            self.post.response = mock_response(status_code, json_body, method="POST")

    g = Graph()
    monkeypatch.setattr(httpx.AsyncClient, "get", g.get.verb())
    monkeypatch.setattr(httpx.AsyncClient, "post", g.post.verb())
    return g


VALID_IDENTITY = IdentityConfig(client_id="11111111-aaaa", tenant_id="22222222-bbbb")


@pytest.fixture
def dispatcher(fake_auth):
    """Dispatcher with a valid identity and a service backed by FakeAuth."""
    factory_calls = []

    def factory(config):
        factory_calls.append(config)
        return OutlookService(fake_auth)

    d = ToolDispatcher(config_resolver=lambda: VALID_IDENTITY, service_factory=factory)
    d.factory_calls = factory_calls
    return d


@pytest.fixture
def fake_msal():
    return FakeMsalApp()


@pytest.fixture
def graph_auth(fake_msal):
    auth = GraphAuth("client", "tenant", app=fake_msal, device_code_callback=lambda flow: None)
    return auth
