"""Command declarations and their registered counterparts.

A declaration (``SlashCommand``, ``CommandGroup``, ``UserCommand``,
``MessageCommand``) pairs a builder with handlers. Once reconciled with the
platform, it is wrapped in the matching ``Registered*`` variant, which adds
the remote command id and the namespaced component definitions.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Union

from slashkit.builders.commands import MessageCommandBuilder, SlashCommandBuilder, UserCommandBuilder
from slashkit.components import Component
from slashkit.models.enums import ApplicationCommandType

if TYPE_CHECKING:
    from slashkit.command_registry import CommandRegistry
    from slashkit.contexts import (
        AutocompleteContext,
        MessageCommandContext,
        SlashCommandContext,
        UserCommandContext,
    )


@dataclass
class SlashCommand:
    builder: SlashCommandBuilder
    handler: Callable[[SlashCommandContext], Awaitable[None]]
    autocomplete: Callable[[AutocompleteContext], Awaitable[None]] | None = None
    components: Sequence[Component] = ()


@dataclass
class CommandGroup:
    """A chat-input command whose sub-commands carry the handlers.

    ``handlers`` and ``autocomplete`` are keyed by the space-separated
    sub-command path, e.g. ``"add"`` or ``"config set"``.
    """

    builder: SlashCommandBuilder
    handlers: Mapping[str, Callable[[SlashCommandContext], Awaitable[None]]]
    autocomplete: Mapping[str, Callable[[AutocompleteContext], Awaitable[None]]] = field(default_factory=dict)
    components: Sequence[Component] = ()


@dataclass
class UserCommand:
    builder: UserCommandBuilder
    handler: Callable[[UserCommandContext], Awaitable[None]]
    components: Sequence[Component] = ()


@dataclass
class MessageCommand:
    builder: MessageCommandBuilder
    handler: Callable[[MessageCommandContext], Awaitable[None]]
    components: Sequence[Component] = ()


Command = Union[SlashCommand, CommandGroup, UserCommand, MessageCommand]


# ---------------------------------------------------------------------------
# Registered variants
# ---------------------------------------------------------------------------


@dataclass
class _Registered:
    registry: CommandRegistry = field(repr=False)
    command: Command
    id: str
    components: tuple[Component, ...] = ()

    type: ClassVar[ApplicationCommandType]

    @property
    def name(self) -> str:
        return self.command.builder.name

    @property
    def builder(self):
        return self.command.builder

    async def update_remote(self) -> None:
        """Push the current builder to the remote command, e.g. after a rename."""
        await self.registry.update_api_command(self.command.builder.to_json(), self.id)

    async def unregister(self, delete_remote: bool = False) -> None:
        await self.registry.unregister(self.name, self.type, delete_remote)


@dataclass
class RegisteredSlashCommand(_Registered):
    command: SlashCommand

    type: ClassVar[ApplicationCommandType] = ApplicationCommandType.CHAT_INPUT


@dataclass
class RegisteredCommandGroup(_Registered):
    command: CommandGroup

    type: ClassVar[ApplicationCommandType] = ApplicationCommandType.CHAT_INPUT


@dataclass
class RegisteredUserCommand(_Registered):
    command: UserCommand

    type: ClassVar[ApplicationCommandType] = ApplicationCommandType.USER


@dataclass
class RegisteredMessageCommand(_Registered):
    command: MessageCommand

    type: ClassVar[ApplicationCommandType] = ApplicationCommandType.MESSAGE


RegisteredCommand = Union[
    RegisteredSlashCommand,
    RegisteredCommandGroup,
    RegisteredUserCommand,
    RegisteredMessageCommand,
]


def command_type(command: Command) -> ApplicationCommandType:
    return command.builder.type


def wrap_registered(
    registry: CommandRegistry,
    command: Command,
    command_id: str,
    components: tuple[Component, ...],
) -> RegisteredCommand:
    """Select the registered variant for a declaration."""
    if isinstance(command, CommandGroup):
        return RegisteredCommandGroup(registry, command, command_id, components)
    if isinstance(command, SlashCommand):
        return RegisteredSlashCommand(registry, command, command_id, components)
    if isinstance(command, UserCommand):
        return RegisteredUserCommand(registry, command, command_id, components)
    if isinstance(command, MessageCommand):
        return RegisteredMessageCommand(registry, command, command_id, components)
    raise TypeError(f"Unknown command declaration {type(command).__name__}")
