"""Tests for the confirmation state machine and the /confirm, /cancel flow."""

import asyncio

import pytest

from commandbot.core import texts
from commandbot.core.confirmations import AwaitingConfirmation, ConfirmationStore, Idle
from commandbot.core.results import Failure, RequiresConfirmation, Text

from conftest import FakeAssistant, make_message


class TestConfirmationStore:
    def test_initial_state_is_idle(self):
        assert ConfirmationStore().state(1) == Idle(1)

    @pytest.mark.asyncio
    async def test_request_then_take(self):
        store = ConfirmationStore()
        await store.request(1, "draft a contract")
        assert store.state(1) == AwaitingConfirmation(1, "draft a contract")

        assert await store.take(1) == "draft a contract"
        assert store.state(1) == Idle(1)
        assert await store.take(1) is None

    @pytest.mark.asyncio
    async def test_new_prompt_overwrites_pending(self):
        store = ConfirmationStore()
        await store.request(1, "first")
        await store.request(1, "second")
        assert store.pending(1) == "second"
        assert len(store) == 1

    @pytest.mark.asyncio
    async def test_conversations_are_independent(self):
        store = ConfirmationStore()
        await store.request(1, "one")
        await store.request(2, "two")
        await store.cancel(1)
        assert store.state(1) == Idle(1)
        assert store.pending(2) == "two"

    @pytest.mark.asyncio
    async def test_cancel_when_idle(self):
        assert await ConfirmationStore().cancel(5) is False

    @pytest.mark.asyncio
    async def test_concurrent_conversations(self):
        store = ConfirmationStore(shards=4)
        await asyncio.gather(*(store.request(i, f"p{i}") for i in range(50)))
        assert len(store) == 50
        taken = await asyncio.gather(*(store.take(i) for i in range(50)))
        assert taken == [f"p{i}" for i in range(50)]
        assert len(store) == 0


class TestConfirmFlow:
    @pytest.mark.asyncio
    async def test_sensitive_nova_prompt_then_confirm(self, make_router, outbox):
        assistant = FakeAssistant(
            RequiresConfirmation(("sensitive_action",)),
            Text("Contract drafted."),
        )
        router = make_router(assistant=assistant)

        await router.dispatch(make_message("/nova draft a contract"), outbox.send)
        assert outbox.texts[0] == "🤖 Nova is thinking..."
        assert "sensitive_action" in outbox.texts[1]
        assert "/confirm" in outbox.texts[1]
        assert router.confirmations.pending(100) == "draft a contract"

        await router.dispatch(make_message("/confirm"), outbox.send)
        assert assistant.calls == [("draft a contract", False), ("draft a contract", True)]
        assert outbox.texts[-1] == "Contract drafted."
        assert router.confirmations.state(100) == Idle(100)

    @pytest.mark.asyncio
    async def test_missing_reasons_use_default(self, make_router, outbox):
        router = make_router(assistant=FakeAssistant(RequiresConfirmation()))
        await router.dispatch(make_message("delete everything"), outbox.send)
        assert texts.DEFAULT_REASON in outbox.texts[-1]
        assert router.confirmations.pending(100) == "delete everything"

    @pytest.mark.asyncio
    async def test_confirm_with_empty_answer_acknowledges(self, make_router, outbox):
        router = make_router(assistant=FakeAssistant(RequiresConfirmation(("x",)), Text("")))
        await router.dispatch(make_message("wire money"), outbox.send)
        await router.dispatch(make_message("/confirm"), outbox.send)
        assert outbox.texts[-1] == texts.CONFIRMED_ACK

    @pytest.mark.asyncio
    async def test_confirm_with_nothing_pending(self, make_router, outbox):
        assistant = FakeAssistant()
        await make_router(assistant=assistant).dispatch(make_message("/confirm"), outbox.send)
        assert outbox.texts == [texts.NOTHING_PENDING]
        assert assistant.calls == []

    @pytest.mark.asyncio
    async def test_failed_confirm_still_clears_pending(self, make_router, outbox):
        router = make_router(assistant=FakeAssistant(
            RequiresConfirmation(("x",)), Failure("nova returned 502"),
        ))
        await router.dispatch(make_message("wire money"), outbox.send)
        await router.dispatch(make_message("/confirm"), outbox.send)

        assert outbox.texts[-1] == "❌ Error confirmando: nova returned 502"
        assert router.confirmations.state(100) == Idle(100)

    @pytest.mark.asyncio
    async def test_cancel_clears_without_backend_call(self, make_router, outbox):
        assistant = FakeAssistant(RequiresConfirmation(("x",)))
        router = make_router(assistant=assistant)
        await router.dispatch(make_message("wire money"), outbox.send)
        await router.dispatch(make_message("/cancel"), outbox.send)

        assert outbox.texts[-1] == texts.CANCELLED
        assert len(assistant.calls) == 1
        assert router.confirmations.state(100) == Idle(100)

    @pytest.mark.asyncio
    async def test_cancel_when_idle_acknowledges(self, make_router, outbox):
        assistant = FakeAssistant()
        await make_router(assistant=assistant).dispatch(make_message("/cancel"), outbox.send)
        assert outbox.texts == [texts.CANCELLED]
        assert assistant.calls == []

    @pytest.mark.asyncio
    async def test_second_sensitive_prompt_replaces_first(self, make_router, outbox):
        assistant = FakeAssistant(
            RequiresConfirmation(("a",)), RequiresConfirmation(("b",)), Text("done"),
        )
        router = make_router(assistant=assistant)
        await router.dispatch(make_message("first action"), outbox.send)
        await router.dispatch(make_message("second action"), outbox.send)
        await router.dispatch(make_message("/confirm"), outbox.send)

        assert assistant.calls[-1] == ("second action", True)

    @pytest.mark.asyncio
    async def test_plain_answer_supersedes_pending(self, make_router, outbox):
        router = make_router(assistant=FakeAssistant(RequiresConfirmation(("a",)), Text("hi")))
        await router.dispatch(make_message("wire money"), outbox.send)
        await router.dispatch(make_message("hello"), outbox.send)
        assert router.confirmations.state(100) == Idle(100)

    @pytest.mark.asyncio
    async def test_failed_answer_keeps_pending(self, make_router, outbox):
        router = make_router(assistant=FakeAssistant(RequiresConfirmation(("a",)), Failure("down")))
        await router.dispatch(make_message("wire money"), outbox.send)
        await router.dispatch(make_message("hello"), outbox.send)
        assert router.confirmations.pending(100) == "wire money"

    @pytest.mark.asyncio
    async def test_pending_is_per_conversation(self, make_router, outbox):
        assistant = FakeAssistant(RequiresConfirmation(("a",)))
        router = make_router(assistant=assistant)
        await router.dispatch(make_message("wire money", conversation_id=1), outbox.send)
        await router.dispatch(make_message("/confirm", conversation_id=2), outbox.send)

        assert outbox.texts[-1] == texts.NOTHING_PENDING
        assert router.confirmations.pending(1) == "wire money"
