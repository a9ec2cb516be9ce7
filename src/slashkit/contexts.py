"""Context objects passed to hooks and handlers.

Contexts wrap the parsed interaction and the response callback, and expose
helpers for building the response payloads each interaction kind accepts.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from slashkit.builders.components import ModalBuilder
from slashkit.builders.message import MessageBuilder
from slashkit.deadline import ResponseCallback
from slashkit.models.enums import InteractionResponseType, MessageFlags
from slashkit.models.interactions import CommandInteractionOption, Interaction, User, leaf_options

if TYPE_CHECKING:
    from slashkit.application import Application
    from slashkit.commands import RegisteredCommand
    from slashkit.components import Component

MessageLike = MessageBuilder | str | dict[str, Any]


def _message_data(message: MessageLike) -> dict[str, Any]:
    if isinstance(message, MessageBuilder):
        return message.to_json()
    if isinstance(message, str):
        return {"content": message}
    return message


class PingContext:
    def __init__(self, response_callback: ResponseCallback) -> None:
        self.response_callback = response_callback

    async def reply(self) -> None:
        await self.response_callback({"type": int(InteractionResponseType.PONG)})


class InteractionContext:
    """Read-only view of an interaction plus its response callback."""

    def __init__(self, app: Application, interaction: Interaction, response_callback: ResponseCallback) -> None:
        self.app = app
        self.interaction = interaction
        self.response_callback = response_callback

    @property
    def user(self) -> User | None:
        return self.interaction.invoker

    @property
    def guild_id(self) -> str | None:
        return self.interaction.guild_id

    @property
    def channel_id(self) -> str | None:
        return self.interaction.channel_id

    @property
    def locale(self) -> str | None:
        return self.interaction.locale

    async def respond(self, response: dict[str, Any]) -> None:
        await self.response_callback(response)

    async def reply(self, message: MessageLike) -> None:
        await self.respond({
            "type": int(InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE),
            "data": _message_data(message),
        })

    async def defer(self, ephemeral: bool = False) -> None:
        data = {"flags": int(MessageFlags.EPHEMERAL)} if ephemeral else {}
        await self.respond({
            "type": int(InteractionResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE),
            "data": data,
        })

    async def show_modal(self, modal: ModalBuilder) -> None:
        await self.respond({"type": int(InteractionResponseType.MODAL), "data": modal.to_json()})

    def _component_name(self, name: str) -> str:
        return name

    async def create_component(self, name: str, data: dict[str, Any] | None = None, ttl: int | None = None):
        """Build a registered component bound to ``data``.

        Inside a command or one of its components, ``name`` may be given
        without the command prefix.
        """
        return await self.app.components.create_instance(self._component_name(name), data, ttl)


# --- Application commands ---


class _CommandContext(InteractionContext):
    def __init__(
        self,
        app: Application,
        interaction: Interaction,
        response_callback: ResponseCallback,
        command: RegisteredCommand,
    ) -> None:
        super().__init__(app, interaction, response_callback)
        self.command = command

    def _component_name(self, name: str) -> str:
        scoped = f"{self.command.name}.{name}"
        return scoped if self.app.components.has(scoped) else name


class SlashCommandContext(_CommandContext):
    def __init__(self, app, interaction, response_callback, command) -> None:
        super().__init__(app, interaction, response_callback, command)
        path, options = leaf_options(interaction.data.options if interaction.data else None)
        self.subcommand: list[str] = path
        self.options: dict[str, Any] = {o.name: o.value for o in options}

    def get_option(self, name: str, default: Any = None) -> Any:
        return self.options.get(name, default)


class AutocompleteContext(_CommandContext):
    def __init__(self, app, interaction, response_callback, command) -> None:
        super().__init__(app, interaction, response_callback, command)
        path, options = leaf_options(interaction.data.options if interaction.data else None)
        self.subcommand: list[str] = path
        self.options: dict[str, Any] = {o.name: o.value for o in options}
        self.focused: CommandInteractionOption | None = next((o for o in options if o.focused), None)

    async def respond_with(self, choices: list[Any]) -> None:
        """Send autocomplete choices (``OptionChoice`` models or plain dicts)."""
        payload = [c if isinstance(c, dict) else c.model_dump(mode="json", exclude_none=True) for c in choices]
        await self.respond({
            "type": int(InteractionResponseType.APPLICATION_COMMAND_AUTOCOMPLETE_RESULT),
            "data": {"choices": payload},
        })


class UserCommandContext(_CommandContext):
    @property
    def target_id(self) -> str | None:
        return self.interaction.data.target_id if self.interaction.data else None

    @property
    def target(self) -> User | None:
        resolved = (self.interaction.data.resolved or {}) if self.interaction.data else {}
        user = resolved.get("users", {}).get(self.target_id)
        return User.model_validate(user) if user else None

    @property
    def target_member(self) -> dict[str, Any] | None:
        resolved = (self.interaction.data.resolved or {}) if self.interaction.data else {}
        return resolved.get("members", {}).get(self.target_id)


class MessageCommandContext(_CommandContext):
    @property
    def target_id(self) -> str | None:
        return self.interaction.data.target_id if self.interaction.data else None

    @property
    def target(self) -> dict[str, Any] | None:
        resolved = (self.interaction.data.resolved or {}) if self.interaction.data else {}
        return resolved.get("messages", {}).get(self.target_id)


# --- Components ---


class _ComponentContext(InteractionContext):
    def __init__(
        self,
        app: Application,
        interaction: Interaction,
        response_callback: ResponseCallback,
        component: Component,
        state: dict[str, Any],
    ) -> None:
        super().__init__(app, interaction, response_callback)
        self.component = component
        self.state = state

    @property
    def custom_id(self) -> str | None:
        return self.interaction.data.custom_id if self.interaction.data else None

    @property
    def message(self) -> dict[str, Any] | None:
        return self.interaction.message

    def _component_name(self, name: str) -> str:
        if self.component.parent_command is None:
            return name
        scoped = f"{self.component.parent_command}.{name}"
        return scoped if self.app.components.has(scoped) else name

    async def update_message(self, message: MessageLike) -> None:
        await self.respond({
            "type": int(InteractionResponseType.UPDATE_MESSAGE),
            "data": _message_data(message),
        })

    async def defer_update(self) -> None:
        await self.respond({"type": int(InteractionResponseType.DEFERRED_UPDATE_MESSAGE)})


class ButtonContext(_ComponentContext):
    pass


class SelectMenuContext(_ComponentContext):
    @property
    def values(self) -> list[str]:
        return list(self.interaction.data.values or []) if self.interaction.data else []


class ModalSubmitContext(_ComponentContext):
    @property
    def fields(self) -> dict[str, Any]:
        """Submitted text input values keyed by their custom id."""
        values: dict[str, Any] = {}
        rows = (self.interaction.data.components or []) if self.interaction.data else []
        for row in rows:
            for component in row.get("components", []):
                values[component["custom_id"]] = component.get("value")
        return values
