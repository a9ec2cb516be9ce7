"""Main entry point: command/component registries and interaction dispatch."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from slashkit.cache import ComponentCache, init_cache
from slashkit.command_registry import CommandRegistry
from slashkit.commands import Command, RegisteredCommand
from slashkit.component_registry import ComponentRegistry
from slashkit.config import Settings, load_settings
from slashkit.contexts import InteractionContext, PingContext
from slashkit.deadline import Deadline, ResponseCallback, ResponseSink
from slashkit.errors import (
    ConfigurationError,
    InteractionHandlerTimedOut,
    UnauthorizedInteraction,
    UnknownInteractionType,
)
from slashkit.handlers import (
    handle_application_command,
    handle_command_autocomplete,
    handle_message_component,
    handle_modal_submit,
)
from slashkit.hooks import InteractionHooks
from slashkit.models.enums import ApplicationCommandType, InteractionType
from slashkit.models.interactions import Interaction
from slashkit.rest import DEFAULT_BASE_URL, RESTClient
from slashkit.signature import load_public_key, verify_interaction_signature

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 2500


class Application:
    """Manages an application's commands and components and handles its interactions.

    Usage::

        app = Application(client_id, public_key, token, cache=MemoryCache())
        await app.commands.register(SlashCommand(builder, handler))

        # in the HTTP endpoint
        await app.handle_interaction(send_response, raw_body, signature, timestamp)
    """

    verify_interaction_signature = staticmethod(verify_interaction_signature)

    def __init__(
        self,
        client_id: str,
        public_key: str | bytes,
        token: str | None = None,
        *,
        cache: ComponentCache | None = None,
        hooks: InteractionHooks | None = None,
        timeout: int = DEFAULT_TIMEOUT_MS,
        remove_unregistered: bool = False,
        rest: RESTClient | None = None,
        api_base_url: str = DEFAULT_BASE_URL,
        max_retries: int = 3,
    ) -> None:
        self.client_id = client_id
        self.public_key = load_public_key(public_key)
        self.rest = rest if rest is not None else RESTClient(api_base_url, token, max_retries=max_retries)
        # Milliseconds before handle_interaction raises InteractionHandlerTimedOut.
        self.timeout = timeout
        self.hooks = hooks if hooks is not None else InteractionHooks()
        self.remove_unregistered = remove_unregistered

        self.components = ComponentRegistry(cache)
        self.commands = CommandRegistry(self)
        self.guild_commands: dict[str, CommandRegistry] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        hooks: InteractionHooks | None = None,
    ) -> Application:
        settings = settings or load_settings()
        cfg = settings.application
        missing = [name for name in ("client_id", "public_key", "token") if not getattr(cfg, name)]
        if missing:
            raise ConfigurationError(
                "Missing application settings: " + ", ".join(f"SLASHKIT_{m.upper()}" for m in missing)
            )
        return cls(
            cfg.client_id,
            cfg.public_key,
            cfg.token,
            cache=init_cache(settings.cache),
            hooks=hooks,
            timeout=cfg.timeout_ms,
            remove_unregistered=cfg.remove_unregistered,
            api_base_url=cfg.api_base_url,
            max_retries=cfg.max_retries,
        )

    # --- Commands ---

    def guild(self, guild_id: str) -> CommandRegistry:
        """Return the command registry for a guild, creating it on first use."""
        registry = self.guild_commands.get(guild_id)
        if registry is None:
            registry = CommandRegistry(self, guild_id)
            self.guild_commands[guild_id] = registry
        return registry

    def find_command(
        self,
        name: str,
        type: ApplicationCommandType = ApplicationCommandType.CHAT_INPUT,
        guild_id: str | None = None,
    ) -> RegisteredCommand | None:
        """Look a command up in the guild's registry first, then globally."""
        if guild_id is not None and guild_id in self.guild_commands:
            command = self.guild_commands[guild_id].get(name, type)
            if command is not None:
                return command
        return self.commands.get(name, type)

    async def sync_commands(self, *commands: Command, guild_id: str | None = None) -> list[RegisteredCommand]:
        """Register commands, then prune remote ones if ``remove_unregistered`` is set."""
        registry = self.commands if guild_id is None else self.guild(guild_id)
        registered = await registry.register(*commands)
        if self.remove_unregistered:
            await registry.delete_unregistered()
        return registered

    # --- Interactions ---

    async def handle_interaction(
        self,
        response_callback: ResponseCallback,
        body: str | bytes,
        signature: str | bool | None,
        timestamp: str | None = None,
    ) -> None:
        """Authenticate, parse and dispatch a raw interaction request.

        Args:
            response_callback: Receives the interaction response payload.
            body: The raw request body, exactly as received.
            signature: The ``X-Signature-Ed25519`` header, or ``False`` to skip
                verification (trusted transports and local testing only).
            timestamp: The ``X-Signature-Timestamp`` header.

        Raises:
            UnauthorizedInteraction: The signature is missing or invalid.
            InteractionHandlerTimedOut: No response was sent within ``timeout``.
                The handler keeps running and may still respond.
            UnknownInteractionType: The interaction kind is not supported.
        """
        if signature is not False:
            if (
                not signature
                or not timestamp
                or not verify_interaction_signature(self.public_key, timestamp, str(signature), body)
            ):
                log.warning("Rejected interaction with a missing or invalid signature")
                raise UnauthorizedInteraction(body)

        interaction = Interaction.model_validate_json(body)

        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[None] = loop.create_future()

        def on_expire() -> None:
            if not outcome.done():
                outcome.set_exception(InteractionHandlerTimedOut(interaction))

        deadline = Deadline(self.timeout / 1000, on_expire)
        respond = ResponseSink(response_callback, deadline)
        task = asyncio.ensure_future(self._dispatch(interaction, response_callback, respond))

        def on_done(t: asyncio.Future[None]) -> None:
            if outcome.done():
                if not t.cancelled() and t.exception() is not None:
                    log.error(
                        "Handler for interaction %s failed after timing out",
                        interaction.id,
                        exc_info=t.exception(),
                    )
                return
            if t.cancelled():
                outcome.cancel()
            elif t.exception() is not None:
                outcome.set_exception(t.exception())
            else:
                outcome.set_result(None)

        task.add_done_callback(on_done)
        try:
            await outcome
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            deadline.cancel()

    async def _dispatch(
        self,
        interaction: Interaction,
        response_callback: ResponseCallback,
        respond: ResponseSink,
    ) -> None:
        if self.hooks.interaction is not None:
            ctx = InteractionContext(self, interaction, response_callback)
            if await self.hooks.interaction(ctx) is True:
                log.debug("Interaction %s handled by global hook", interaction.id)
                return

        kind = interaction.type
        if kind == InteractionType.PING:
            await PingContext(respond).reply()
        elif kind == InteractionType.APPLICATION_COMMAND:
            await handle_application_command(self, interaction, respond)
        elif kind == InteractionType.APPLICATION_COMMAND_AUTOCOMPLETE:
            await handle_command_autocomplete(self, interaction, respond)
        elif kind == InteractionType.MESSAGE_COMPONENT:
            await handle_message_component(self, interaction, respond)
        elif kind == InteractionType.MODAL_SUBMIT:
            await handle_modal_submit(self, interaction, respond)
        else:
            raise UnknownInteractionType(interaction)

    async def close(self) -> None:
        await self.rest.close()
        close = getattr(self.components.cache, "close", None)
        if close is not None:
            await close()

    async def __aenter__(self) -> Application:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
