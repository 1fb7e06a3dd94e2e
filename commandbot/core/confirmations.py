"""Per-conversation confirmation state for sensitive assistant actions.

Each conversation is either Idle or AwaitingConfirmation(prompt). A new
sensitive prompt replaces the pending one; there is no queue.
"""

import asyncio
from dataclasses import dataclass

SHARD_COUNT = 32


@dataclass(frozen=True)
class Idle:
    conversation_id: int


@dataclass(frozen=True)
class AwaitingConfirmation:
    conversation_id: int
    prompt: str


class ConfirmationStore:
    """Pending confirmations keyed by conversation id.

    Mutations take the lock of the shard the conversation hashes to, so
    unrelated conversations do not serialize behind one global lock.
    """

    def __init__(self, shards=SHARD_COUNT):
        self._shards = [({}, asyncio.Lock()) for _ in range(shards)]

    def _shard(self, conversation_id):
        return self._shards[hash(conversation_id) % len(self._shards)]

    def state(self, conversation_id):
        pending, _ = self._shard(conversation_id)
        prompt = pending.get(conversation_id)
        if prompt is None:
            return Idle(conversation_id)
        return AwaitingConfirmation(conversation_id, prompt)

    def pending(self, conversation_id):
        pending, _ = self._shard(conversation_id)
        return pending.get(conversation_id)

    async def request(self, conversation_id, prompt):
        """Idle/Awaiting -> AwaitingConfirmation(prompt), overwriting."""
        pending, lock = self._shard(conversation_id)
        async with lock:
            pending[conversation_id] = prompt

    async def take(self, conversation_id):
        """Awaiting -> Idle. Returns the stored prompt, or None when Idle."""
        pending, lock = self._shard(conversation_id)
        async with lock:
            return pending.pop(conversation_id, None)

    async def cancel(self, conversation_id):
        """Any state -> Idle. True when something was pending."""
        return await self.take(conversation_id) is not None

    def __len__(self):
        return sum(len(pending) for pending, _ in self._shards)
