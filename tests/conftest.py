"""Shared test fixtures for the commandbot test suite."""

import json

import httpx
import pytest

from commandbot.core.confirmations import ConfirmationStore
from commandbot.core.results import Text
from commandbot.core.router import CommandRouter, InboundMessage
from commandbot.integrations.command_gateway import CommandGatewayClient
from commandbot.memory.usage_store import UsageStore


class FakeAssistant:
    """Stand-in assistant backend that replays canned results."""

    name = "fake"
    base_url = "http://assistant.test"
    configured = True

    def __init__(self, *results, supports_confirmation=True):
        self.results = list(results)
        self.calls = []
        self.supports_confirmation = supports_confirmation

    async def ask(self, prompt, confirmed=False):
        self.calls.append((prompt, confirmed))
        if self.results:
            return self.results.pop(0)
        return Text("ok")


class Outbox:
    """Collects replies in the order the router sends them."""

    def __init__(self):
        self.replies = []

    async def send(self, reply):
        self.replies.append(reply)

    @property
    def texts(self):
        return [r.text for r in self.replies]


class GatewayStub:
    """Routes mocked gateway requests by path and records them."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.requests = []

    def __call__(self, request):
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.url.path, body, request.headers))
        status, payload = self.routes.get(request.url.path, (404, {"error": "not found"}))
        return httpx.Response(status, json=payload)

    def client(self):
        return CommandGatewayClient("http://gateway.test", token="test-token",
                                    transport=httpx.MockTransport(self))


def make_message(text, conversation_id=100, sender_id=7, **kwargs):
    return InboundMessage(
        conversation_id=conversation_id,
        sender_id=sender_id,
        text=text,
        message_id=kwargs.pop("message_id", 1),
        first_name=kwargs.pop("first_name", "Ada"),
        chat_type=kwargs.pop("chat_type", "private"),
        **kwargs,
    )


@pytest.fixture
def outbox():
    return Outbox()


@pytest.fixture
def gateway_stub():
    return GatewayStub()


@pytest.fixture
def store(tmp_path):
    """Provide a UsageStore backed by a temporary database."""
    usage = UsageStore(str(tmp_path / "db" / "test.db"))
    yield usage
    usage.close()


@pytest.fixture
def make_router(gateway_stub):
    def _make(assistant=None, store=None, aliases=None):
        return CommandRouter(
            gateway=gateway_stub.client(),
            assistant=assistant or FakeAssistant(),
            confirmations=ConfirmationStore(),
            store=store,
            aliases=aliases,
        )
    return _make
