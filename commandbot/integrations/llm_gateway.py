import logging

from commandbot.config import LLM_DEFAULT_MODEL, LLM_GATEWAY_API_KEY, LLM_GATEWAY_URL
from commandbot.core.errors import BackendUnavailable
from commandbot.core.results import Failure, Text
from commandbot.integrations.http_backend import HttpBackend

logger = logging.getLogger(__name__)


def extract_reply(payload):
    """Chat-completion style first, then the flat `response` field."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None
    if content:
        return content
    if isinstance(payload, dict) and payload.get("response"):
        return payload["response"]
    return "No response"


class LLMGatewayClient(HttpBackend):
    """Generic chat completion. Never asks for confirmation."""

    name = "llm-gateway"
    supports_confirmation = False

    def __init__(self, base_url=LLM_GATEWAY_URL, api_key=LLM_GATEWAY_API_KEY,
                 model=LLM_DEFAULT_MODEL, **kwargs):
        headers = {"X-API-Key": api_key} if api_key else {}
        super().__init__(base_url, headers=headers, **kwargs)
        self.model = model

    async def ask(self, prompt, confirmed=False):
        provider, _, model = self.model.partition("/")
        payload = {
            "provider": provider,
            "model": model or self.model,
            "messages": [{"role": "user", "content": prompt}],
            "stream": False,
        }
        try:
            data = await self._post("/api/chat", payload)
        except BackendUnavailable as e:
            logger.error(f"LLM Gateway error: {e}")
            return Failure(str(e))
        return Text(extract_reply(data))

    async def health(self):
        try:
            await self._request("GET", "/health")
        except BackendUnavailable as e:
            return Failure(str(e))
        return Text("ok")
