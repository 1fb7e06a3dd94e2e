import logging

from commandbot.core.errors import PersistenceError

logger = logging.getLogger(__name__)


class InteractionRecorder:
    """Best-effort analytics writes. Never raises into the dispatcher."""

    def __init__(self, store=None):
        self.store = store

    def record(self, message, trace_id="-", direction="incoming"):
        if self.store is None:
            return False
        try:
            self.store.record_message(message, direction=direction)
        except PersistenceError as e:
            logger.warning(f"  [{trace_id}] Error logging message: {e}")
            return False
        return True
