"""Client for the command gateway (tasks, orders, deployments, resources).

Each method performs exactly one POST and returns a `BackendResult` whose
`Text` body is already the user-facing message.
"""

import json
import logging

from commandbot.config import COMMAND_GATEWAY_TOKEN, COMMAND_GATEWAY_URL
from commandbot.core.errors import BackendUnavailable
from commandbot.core.results import Failure, Text
from commandbot.integrations.http_backend import HttpBackend

logger = logging.getLogger(__name__)


def _unwrap(payload):
    if isinstance(payload, dict) and payload.get("data") is not None:
        return payload["data"]
    return payload


def format_tasks(payload):
    columns = _unwrap(payload) or {}
    if not isinstance(columns, dict) or not columns:
        return "📋 No tasks found."
    lines = [f"• {column}: *{len(items or [])}*" for column, items in columns.items()]
    return "📋 *TaskBoard Status*\n\n" + "\n".join(lines)


def format_orders(payload, status=None):
    message = f"📦 *Orders*\n\nTotal: *{payload.get('count') or 0}*\n"
    if status:
        message += f"Status: {status}\n"
    return message + "\nUse: /orders <status> to filter"


def format_deploy(payload):
    actions = "\n".join(f"• {a}" for a in payload.get("actions") or [])
    return f"🚀 *Deployment: {payload.get('phase') or 'All Phases'}*\n\n{actions}".rstrip()


def format_resource(key, payload):
    data = _unwrap(payload)
    if isinstance(data, str):
        return data
    if isinstance(data, dict) and data.get("url"):
        return f"{key}: {data['url']}"
    return "```\n" + json.dumps(data, indent=2, ensure_ascii=False) + "\n```"


class CommandGatewayClient(HttpBackend):
    name = "command-gateway"

    def __init__(self, base_url=COMMAND_GATEWAY_URL, token=COMMAND_GATEWAY_TOKEN, **kwargs):
        super().__init__(base_url, headers={"Authorization": f"Bearer {token}"}, **kwargs)

    async def _call(self, path, payload, formatter):
        try:
            response = await self._post(path, payload)
        except BackendUnavailable as e:
            logger.error(f"Gateway error ({path}): {e}")
            return Failure(str(e))
        if not isinstance(response, dict):
            response = {"data": response}
        return Text(formatter(response))

    async def task_status(self):
        return await self._call("/commands/tasks/status", {}, format_tasks)

    async def list_orders(self, status=None):
        payload = {"status": status} if status else {}
        return await self._call(
            "/commands/orders/list", payload, lambda r: format_orders(r, status)
        )

    async def deploy(self, phase=None):
        payload = {"phase": phase} if phase else {}
        return await self._call("/commands/deploy", payload, format_deploy)

    async def resource(self, key):
        return await self._call(f"/commands/{key}", {}, lambda r: format_resource(key, r))

    async def automation_ping(self):
        return await self._call(
            "/commands/automation/ping", {},
            lambda r: "⚙️ *Automation Hub*\n\n✅ Online and responding",
        )

    async def health(self):
        return await self._call("/health", {}, lambda r: "ok")
