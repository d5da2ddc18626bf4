"""
Gmail Relay — Test Configuration (conftest.py)
===============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── make_provider: The StubProvider class, for custom canned data
    ├── stub_provider: In-memory MailProvider that records every call
    ├── provider_tokens: Access tokens the provider factory was called with
    ├── relay_app: App built by create_app() around the stub provider
    └── test_client: HTTPX AsyncClient bound to relay_app
"""

import os
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Before any gmail_relay import, so the settings singleton picks these up
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["CONTACTS_PAGE_SIZE"] = "1000"

from gmail_relay.services.provider_base import MailProvider  # noqa: E402


class StubProvider(MailProvider):
    """
    MailProvider double with canned responses and call recording.

    Set `errors[<method name>]` to an exception to make that method fail.
    """

    def __init__(
        self,
        own_address: str = "me@x.com",
        send_as: Optional[List[Dict[str, Any]]] = None,
        profile_names: Optional[List[Dict[str, Any]]] = None,
        connections: Optional[Dict[str, Any]] = None,
        sent_id: str = "msg-123",
    ):
        self.own_address = own_address
        self.send_as = send_as or []
        self.profile_names = profile_names or []
        self.connections = connections if connections is not None else {}
        self.sent_id = sent_id
        self.errors: Dict[str, Exception] = {}
        self.calls: List[tuple] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name in self.errors:
            raise self.errors[name]

    def call_count(self, name: str) -> int:
        return sum(1 for called, _ in self.calls if called == name)

    def calls_to(self, name: str) -> List[tuple]:
        return [args for called, args in self.calls if called == name]

    async def get_own_address(self) -> str:
        self._record("get_own_address")
        return self.own_address

    async def list_send_as(self) -> List[Dict[str, Any]]:
        self._record("list_send_as")
        return self.send_as

    async def get_profile_names(self) -> List[Dict[str, Any]]:
        self._record("get_profile_names")
        return self.profile_names

    async def modify_labels(self, message_id, add=None, remove=None) -> Dict[str, Any]:
        self._record("modify_labels", message_id, add, remove)
        return {"id": message_id}

    async def send_raw(self, raw: str) -> Dict[str, Any]:
        self._record("send_raw", raw)
        return {"id": self.sent_id, "labelIds": ["SENT"]}

    async def list_connections(self, page_size: int, person_fields: str) -> Dict[str, Any]:
        self._record("list_connections", page_size, person_fields)
        return self.connections


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_provider():
    """The StubProvider class, for tests that need custom canned data."""
    return StubProvider


@pytest.fixture
def stub_provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def provider_tokens() -> List[str]:
    return []


@pytest.fixture
def provider_factory(stub_provider, provider_tokens):
    """Factory handing out the shared stub and remembering each token."""

    def factory(access_token: str) -> StubProvider:
        provider_tokens.append(access_token)
        return stub_provider

    return factory


@pytest.fixture
def relay_app(provider_factory):
    from gmail_relay.main import create_app
    return create_app(provider_factory=provider_factory)


@pytest_asyncio.fixture
async def test_client(relay_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=relay_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
