"""Routed handlers for each interaction kind.

Each handler receives the application, the parsed interaction and the
deadline-aware response callback, builds the matching context, runs the
kind's hook and then the registered handler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from slashkit.commands import (
    RegisteredCommand,
    RegisteredCommandGroup,
    RegisteredMessageCommand,
    RegisteredSlashCommand,
    RegisteredUserCommand,
)
from slashkit.components import Button, Modal, SelectMenu, parse_custom_id
from slashkit.contexts import (
    AutocompleteContext,
    ButtonContext,
    MessageCommandContext,
    ModalSubmitContext,
    SelectMenuContext,
    SlashCommandContext,
    UserCommandContext,
)
from slashkit.deadline import ResponseCallback
from slashkit.errors import CommandNotFound, ComponentNotFound
from slashkit.hooks import run_hook
from slashkit.models.enums import ApplicationCommandType, InteractionResponseType
from slashkit.models.interactions import Interaction, InteractionData

if TYPE_CHECKING:
    from slashkit.application import Application

log = logging.getLogger(__name__)


def _lookup_command(app: Application, interaction: Interaction) -> RegisteredCommand:
    data = interaction.data or InteractionData()
    name = data.name or ""
    kind = data.type if data.type is not None else ApplicationCommandType.CHAT_INPUT
    try:
        command = app.find_command(name, ApplicationCommandType(kind), interaction.guild_id)
    except ValueError:
        command = None
    if command is None:
        raise CommandNotFound(name, kind)
    return command


async def handle_application_command(
    app: Application, interaction: Interaction, respond: ResponseCallback
) -> None:
    command = _lookup_command(app, interaction)
    hooks = app.hooks.command
    log.debug("Routing command %s (interaction %s)", command.name, interaction.id)

    if isinstance(command, (RegisteredSlashCommand, RegisteredCommandGroup)):
        ctx = SlashCommandContext(app, interaction, respond, command)
        if await run_hook(hooks.slash, ctx):
            return
        if isinstance(command, RegisteredCommandGroup):
            path = " ".join(ctx.subcommand)
            handler = command.command.handlers.get(path)
            if handler is None:
                raise CommandNotFound(f"{command.name} {path}".strip(), ApplicationCommandType.CHAT_INPUT)
        else:
            handler = command.command.handler
        await handler(ctx)
    elif isinstance(command, RegisteredUserCommand):
        ctx = UserCommandContext(app, interaction, respond, command)
        if await run_hook(hooks.user, ctx):
            return
        await command.command.handler(ctx)
    elif isinstance(command, RegisteredMessageCommand):
        ctx = MessageCommandContext(app, interaction, respond, command)
        if await run_hook(hooks.message, ctx):
            return
        await command.command.handler(ctx)


async def handle_command_autocomplete(
    app: Application, interaction: Interaction, respond: ResponseCallback
) -> None:
    command = _lookup_command(app, interaction)
    if not isinstance(command, (RegisteredSlashCommand, RegisteredCommandGroup)):
        raise CommandNotFound(command.name, ApplicationCommandType.CHAT_INPUT)

    ctx = AutocompleteContext(app, interaction, respond, command)
    if await run_hook(app.hooks.command.autocomplete, ctx):
        return

    if isinstance(command, RegisteredCommandGroup):
        handler = command.command.autocomplete.get(" ".join(ctx.subcommand))
    else:
        handler = command.command.autocomplete

    if handler is None:
        log.debug("No autocomplete handler for %s, sending no choices", command.name)
        await respond({
            "type": int(InteractionResponseType.APPLICATION_COMMAND_AUTOCOMPLETE_RESULT),
            "data": {"choices": []},
        })
        return
    await handler(ctx)


async def handle_message_component(
    app: Application, interaction: Interaction, respond: ResponseCallback
) -> None:
    custom_id = interaction.data.custom_id if interaction.data else None
    component_id, raw_state = parse_custom_id(custom_id or "")
    component = app.components.get(component_id)
    if component is None:
        raise ComponentNotFound(component_id)

    state = await app.components.resolve_state(raw_state)
    hooks = app.hooks.component
    log.debug("Routing component %s (interaction %s)", component_id, interaction.id)

    if isinstance(component, Button):
        ctx = ButtonContext(app, interaction, respond, component, state)
        if await run_hook(hooks.button, ctx):
            return
    elif isinstance(component, SelectMenu):
        ctx = SelectMenuContext(app, interaction, respond, component, state)
        if await run_hook(hooks.select_menu, ctx):
            return
    else:
        raise ComponentNotFound(component_id)
    await component.handler(ctx)


async def handle_modal_submit(
    app: Application, interaction: Interaction, respond: ResponseCallback
) -> None:
    custom_id = interaction.data.custom_id if interaction.data else None
    component_id, raw_state = parse_custom_id(custom_id or "")
    component = app.components.get(component_id)
    if not isinstance(component, Modal):
        raise ComponentNotFound(component_id)

    state = await app.components.resolve_state(raw_state)
    ctx = ModalSubmitContext(app, interaction, respond, component, state)
    if await run_hook(app.hooks.component.modal, ctx):
        return
    await component.handler(ctx)
