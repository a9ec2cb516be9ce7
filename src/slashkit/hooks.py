"""Pre-dispatch hooks.

Hooks run before the matching handler. A hook that returns ``True`` marks
the interaction as handled and stops further processing; it is then
responsible for having responded (or for deliberately not responding).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from slashkit.contexts import (
        AutocompleteContext,
        ButtonContext,
        InteractionContext,
        MessageCommandContext,
        ModalSubmitContext,
        SelectMenuContext,
        SlashCommandContext,
        UserCommandContext,
    )

Hook = Callable[[Any], Awaitable[bool | None]]


@dataclass(frozen=True)
class CommandHooks:
    slash: Callable[[SlashCommandContext], Awaitable[bool | None]] | None = None
    autocomplete: Callable[[AutocompleteContext], Awaitable[bool | None]] | None = None
    user: Callable[[UserCommandContext], Awaitable[bool | None]] | None = None
    message: Callable[[MessageCommandContext], Awaitable[bool | None]] | None = None


@dataclass(frozen=True)
class ComponentHooks:
    button: Callable[[ButtonContext], Awaitable[bool | None]] | None = None
    select_menu: Callable[[SelectMenuContext], Awaitable[bool | None]] | None = None
    modal: Callable[[ModalSubmitContext], Awaitable[bool | None]] | None = None


@dataclass(frozen=True)
class InteractionHooks:
    # Runs first, on every authenticated interaction.
    interaction: Callable[[InteractionContext], Awaitable[bool | None]] | None = None
    command: CommandHooks = field(default_factory=CommandHooks)
    component: ComponentHooks = field(default_factory=ComponentHooks)


async def run_hook(hook: Hook | None, ctx: Any) -> bool:
    """Run ``hook`` if set. Returns True when it claimed the interaction."""
    if hook is None:
        return False
    return await hook(ctx) is True
