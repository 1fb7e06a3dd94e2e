"""Command routing: classify an inbound message and run exactly one handler.

Handlers talk to the outside world only through the `send` coroutine they
are given, one call per outbound message, so a transport (or a test) sees
every reply in order.
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Optional

from commandbot.config import CONTACT_EMAIL, CONTACT_PHONE, WEBHOOK_URL
from commandbot.core import texts
from commandbot.core.confirmations import ConfirmationStore
from commandbot.core.errors import PersistenceError, ValidationError
from commandbot.core.results import Failure, RequiresConfirmation
from commandbot.memory.recorder import InteractionRecorder

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "/"


@dataclass(frozen=True)
class InboundMessage:
    conversation_id: int
    sender_id: int
    text: str
    message_id: Optional[int] = None
    username: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    language_code: Optional[str] = None
    chat_type: Optional[str] = None
    date: Optional[int] = None

    @property
    def is_command(self):
        return self.text.startswith(COMMAND_PREFIX)


@dataclass(frozen=True)
class ParsedCommand:
    name: str
    args: tuple = ()

    def arg(self, index):
        return self.args[index] if index < len(self.args) else None

    @property
    def rest(self):
        return " ".join(self.args)

    def require(self, index, usage):
        value = self.arg(index)
        if not value:
            raise ValidationError(usage)
        return value


@dataclass(frozen=True)
class Reply:
    text: str
    markdown: bool = False
    # Provisional "working..." notices go out before the backend call.
    provisional: bool = False


def parse_command(text):
    """Split `/name arg1 arg2` into a ParsedCommand. Free text gives None."""
    if not text or not text.startswith(COMMAND_PREFIX):
        return None
    tokens = text.split()
    name = tokens[0][len(COMMAND_PREFIX):].split("@", 1)[0].lower()
    if not name:
        return None
    return ParsedCommand(name, tuple(tokens[1:]))


class CommandRouter:
    RESOURCE_COMMANDS = ("commandcenter", "dashboard", "miniapps", "tools", "terminal")

    def __init__(self, gateway, assistant, confirmations=None, store=None,
                 recorder=None, aliases=None):
        self.gateway = gateway
        self.assistant = assistant
        self.confirmations = confirmations if confirmations is not None else ConfirmationStore()
        self.store = store
        self.recorder = recorder if recorder is not None else InteractionRecorder(store)
        self.aliases = aliases or {}
        self.started_at = time.time()

        self.handlers = {
            "start": self.handle_start,
            "menu": self.handle_menu,
            "help": self.handle_help,
            "ayuda": self.handle_help,
            "status": self.handle_status,
            "tasks": self.handle_tasks,
            "orders": self.handle_orders,
            "deploy": self.handle_deploy,
            "automation": self.handle_automation,
            "ping": self.handle_ping,
            "nova": self.handle_nova,
            "confirm": self.handle_confirm,
            "cancel": self.handle_cancel,
            "license": self.handle_license,
            "validar": self.handle_license,
            "licencias": self.handle_licenses_help,
            "mylicenses": self.handle_my_licenses,
            "registrar": self.handle_register,
            "stats": self.handle_stats,
            "servicios": self.handle_services,
            "precios": self.handle_prices,
            "contacto": self.handle_contact,
        }
        for key in self.RESOURCE_COMMANDS:
            self.handlers[key] = self.handle_resource

    def classify(self, message):
        command = parse_command(message.text)
        if command is not None:
            return command
        if message.is_command:
            # "/" or "/@bot" has no name; it still never reaches the assistant.
            return ParsedCommand("")
        if message.text.strip() in self.aliases:
            return ParsedCommand(self.aliases[message.text.strip()])
        return None

    async def dispatch(self, message, send):
        trace_id = str(uuid.uuid4())[:8]
        t0 = time.time()
        self.recorder.record(message, trace_id)

        command = self.classify(message)
        if command is None:
            await self.handle_text(message, send)
            route = "text"
        else:
            handler = self.handlers.get(command.name)
            if handler is None:
                logger.debug(f"  [{trace_id}] unknown command /{command.name}, ignoring")
                return
            route = f"/{command.name}"
            try:
                await handler(message, command, send)
            except ValidationError as e:
                await send(Reply(str(e), markdown=True))

        ms = int((time.time() - t0) * 1000)
        logger.info(f"[{trace_id}] {route} chat:{message.conversation_id} total:{ms}ms | {message.text[:50]}")

    # ── informational ─────────────────────────────

    async def handle_start(self, message, command, send):
        await send(Reply(texts.WELCOME, markdown=True))

    async def handle_menu(self, message, command, send):
        await send(Reply(texts.MENU))

    async def handle_help(self, message, command, send):
        await send(Reply(texts.HELP, markdown=True))

    async def handle_licenses_help(self, message, command, send):
        await send(Reply(texts.LICENSES_HELP, markdown=True))

    async def handle_services(self, message, command, send):
        await send(Reply(texts.SERVICES, markdown=True))

    async def handle_prices(self, message, command, send):
        await send(Reply(texts.PRICES, markdown=True))

    async def handle_contact(self, message, command, send):
        await send(Reply(texts.contact(CONTACT_EMAIL, CONTACT_PHONE), markdown=True))

    async def handle_status(self, message, command, send):
        status = (
            f"📊 *{texts.BRAND['name']} Status*\n\n"
            "✅ *Online and Running*\n\n"
            f"📦 Version: {texts.BRAND['version']}\n"
            f"⏰ Uptime: {texts.format_uptime(time.time() - self.started_at)}\n"
            f"🌐 Webhook: {'✅ Configured' if WEBHOOK_URL else '⚠️ Polling mode'}\n"
            f"💾 Database: {'✅ Connected' if self.store is not None else '⚠️ Disconnected'}\n"
            f"🔗 Command Gateway: {self.gateway.base_url}\n"
            f"🤖 Assistant: {self.assistant.name} ({self.assistant.base_url})\n\n"
            "🚀 Ready for automation!"
        )
        await send(Reply(status, markdown=True))

    async def handle_stats(self, message, command, send):
        stats = (
            "📊 *Bot Statistics*\n\n"
            f"🤖 Bot: {texts.BRAND['name']}\n"
            f"👤 Your name: {message.first_name or '-'}\n"
            f"🆔 Your ID: `{message.sender_id}`\n"
            f"⏰ Uptime: {texts.format_uptime(time.time() - self.started_at)}\n\n"
        )
        if self.store is not None:
            try:
                stats += (
                    "📈 *Global Stats:*\n"
                    f"👥 Total users: {self.store.count_users()}\n"
                    f"💬 Total messages: {self.store.count_messages()}\n"
                )
            except PersistenceError as e:
                logger.warning(f"Stats query failed: {e}")
                stats += "⚠️ Could not fetch database stats\n"
        stats += f"\n🏢 {texts.BRAND['company']}"
        await send(Reply(stats, markdown=True))

    # ── structured-action backend ─────────────────

    async def _structured(self, send, notice, error_prefix, call, *args):
        await send(Reply(notice, provisional=True))
        result = await call(*args)
        if isinstance(result, Failure):
            await send(Reply(f"❌ {error_prefix}: {result.message}"))
        else:
            await send(Reply(result.body, markdown=True))

    async def handle_tasks(self, message, command, send):
        await self._structured(
            send, "🔄 Fetching tasks...", "Error fetching tasks", self.gateway.task_status
        )

    async def handle_orders(self, message, command, send):
        await self._structured(
            send, "🔄 Fetching orders...", "Error fetching orders",
            self.gateway.list_orders, command.arg(0),
        )

    async def handle_deploy(self, message, command, send):
        await self._structured(
            send, "🔄 Fetching deployment info...", "Error",
            self.gateway.deploy, command.arg(0),
        )

    async def handle_resource(self, message, command, send):
        await self._structured(
            send, f"🔄 Fetching {command.name}...", "Error",
            self.gateway.resource, command.name,
        )

    async def handle_automation(self, message, command, send):
        await self._structured(
            send, "🔄 Pinging Automation Hub...", "Automation Hub",
            self.gateway.automation_ping,
        )

    async def handle_ping(self, message, command, send):
        await send(Reply("🏓 Pinging services...", provisional=True))
        lines = ["🏓 *Ping Services*\n"]

        probes = [("Command Gateway", self.gateway)]
        if hasattr(self.assistant, "health"):
            probes.append((self.assistant.name, self.assistant))
        for label, backend in probes:
            t0 = time.time()
            result = await backend.health()
            ms = int((time.time() - t0) * 1000)
            if isinstance(result, Failure):
                lines.append(f"❌ {label}: Offline")
            else:
                lines.append(f"✅ {label}: {ms}ms")

        if self.store is None:
            lines.append("⚠️ Database: Not configured")
        else:
            t0 = time.time()
            try:
                self.store.ping()
                lines.append(f"✅ Database: {int((time.time() - t0) * 1000)}ms")
            except PersistenceError:
                lines.append("❌ Database: Error")

        await send(Reply("\n".join(lines), markdown=True))

    # ── assistant & confirmation ──────────────────

    async def _answer(self, message, prompt, result, send, nova_command=False):
        conversation_id = message.conversation_id
        if isinstance(result, RequiresConfirmation):
            await self.confirmations.request(conversation_id, prompt)
            reasons = ", ".join(result.reasons) or texts.DEFAULT_REASON
            await send(Reply(texts.CONFIRMATION_REQUIRED.format(reasons=reasons)))
            return
        if isinstance(result, Failure):
            if nova_command:
                await send(Reply(f"❌ Nova error: {result.message}"))
            else:
                await send(Reply(f"⚙️ Error técnico contactando a NOVA: {result.message}"))
            return

        # A plain answer supersedes whatever was waiting for confirmation.
        if self.assistant.supports_confirmation:
            await self.confirmations.take(conversation_id)
        if nova_command:
            await send(Reply(f"🤖 *Nova AI:*\n\n{result.body or texts.DONE}", markdown=True))
        else:
            await send(Reply(result.body or texts.DONE))

    async def handle_text(self, message, send):
        result = await self.assistant.ask(message.text)
        await self._answer(message, message.text, result, send)

    async def handle_nova(self, message, command, send):
        prompt = command.rest
        if not prompt:
            raise ValidationError(texts.NOVA_USAGE)
        await send(Reply("🤖 Nova is thinking...", provisional=True))
        result = await self.assistant.ask(prompt)
        await self._answer(message, prompt, result, send, nova_command=True)

    async def handle_confirm(self, message, command, send):
        prompt = await self.confirmations.take(message.conversation_id)
        if prompt is None:
            await send(Reply(texts.NOTHING_PENDING))
            return
        await send(Reply("⏳ Ejecutando acción confirmada...", provisional=True))
        result = await self.assistant.ask(prompt, confirmed=True)
        if isinstance(result, Failure):
            await send(Reply(f"❌ Error confirmando: {result.message}"))
        elif isinstance(result, RequiresConfirmation):
            await self._answer(message, prompt, result, send)
        else:
            await send(Reply(result.body or texts.CONFIRMED_ACK))

    async def handle_cancel(self, message, command, send):
        await self.confirmations.cancel(message.conversation_id)
        await send(Reply(texts.CANCELLED))

    # ── usage store lookups ───────────────────────

    async def handle_license(self, message, command, send):
        stl_key = command.require(0, texts.LICENSE_USAGE)
        if self.store is None:
            await send(Reply("❌ Database not connected. Cannot validate license."))
            return
        await send(Reply("🔄 Validating license...", provisional=True))
        try:
            result = self.store.validate_license(stl_key, message.sender_id)
        except PersistenceError as e:
            await send(Reply(f"❌ Validation error: {e}"))
            return

        if result["valid"]:
            features = "\n".join(
                f"• {name.replace('_', ' ')}" for name, enabled in result["features"].items() if enabled
            )
            expires = result["expires_at"][:10] if result["expires_at"] else "Never"
            await send(Reply(
                "✅ *License Valid!*\n\n"
                f"🔑 Key: `{stl_key}`\n"
                f"📦 Plan: *{result['plan']}*\n"
                f"⏰ Expires: {expires}\n\n"
                f"🎯 *Features:*\n{features or 'Standard features'}",
                markdown=True,
            ))
        else:
            await send(Reply(
                "❌ *License Invalid*\n\n"
                f"🔑 Key: `{stl_key}`\n"
                f"⚠️ Reason: {result['message']}",
                markdown=True,
            ))

    async def handle_my_licenses(self, message, command, send):
        if self.store is None:
            await send(Reply(texts.DB_NOT_CONFIGURED))
            return
        try:
            rows = self.store.recent_validations(message.sender_id, limit=5)
        except PersistenceError as e:
            await send(Reply(f"❌ Error consultando licencias: {e}"))
            return
        if not rows:
            await send(Reply(
                "No hay licencias vinculadas a tu usuario. Usa /license <STL-KEY> para validar."
            ))
            return
        lines = [f"• {r['stl_key']} — {r['result']} ({r['validated_at'][:10]})" for r in rows]
        await send(Reply("🔑 *Tus últimas validaciones*\n\n" + "\n".join(lines), markdown=True))

    async def handle_register(self, message, command, send):
        email = command.require(0, texts.REGISTER_USAGE)
        if "@" not in email:
            raise ValidationError(texts.REGISTER_USAGE)
        if self.store is None:
            await send(Reply(texts.DB_NOT_CONFIGURED))
            return
        try:
            registered = self.store.register_email(message.sender_id, email)
        except PersistenceError as e:
            await send(Reply(f"❌ Error registrando email: {e}"))
            return
        if not registered:
            await send(Reply(texts.REGISTER_UNKNOWN_USER))
            return
        await send(Reply(f"✅ Email registrado: {email}"))
