"""Client for the Nova assistant, the only backend that can ask for confirmation."""

import logging

from commandbot.config import NOVA_API_KEY, NOVA_API_URL, NOVA_DEFAULT_PROVIDER
from commandbot.core.errors import BackendUnavailable
from commandbot.core.results import Failure, RequiresConfirmation, Text
from commandbot.integrations.http_backend import HttpBackend

logger = logging.getLogger(__name__)


def parse_nova_response(payload):
    data = (payload.get("data") or payload) if isinstance(payload, dict) else payload
    if not isinstance(data, dict):
        return Text(str(data) if data else "")
    meta = data.get("meta") or {}
    if meta.get("requiresConfirmation"):
        return RequiresConfirmation(tuple(meta.get("reasons") or ()))
    return Text(data.get("response") or "")


class NovaClient(HttpBackend):
    name = "nova"
    supports_confirmation = True

    def __init__(self, url=NOVA_API_URL, api_key=NOVA_API_KEY,
                 provider=NOVA_DEFAULT_PROVIDER, **kwargs):
        headers = {"x-api-key": api_key} if api_key else {}
        super().__init__(url, headers=headers, **kwargs)
        self.provider = provider

    @property
    def configured(self):
        return bool(self.base_url)

    async def ask(self, prompt, confirmed=False):
        """Send `prompt`; an empty `Text` body means Nova had nothing to say."""
        if not self.configured:
            return Failure("Nova API not configured")
        payload = {"prompt": prompt, "provider": self.provider, "confirmed": confirmed}
        try:
            data = await self._post("", payload)
        except BackendUnavailable as e:
            logger.error(f"Nova API error: {e}")
            return Failure(str(e))
        return parse_nova_response(data)
