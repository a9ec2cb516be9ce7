"""Inbound interaction payloads.

``Interaction.type`` and the nested ``type`` fields are plain ints rather than
enums so that kinds added to the platform later still parse; the dispatcher
decides what is routable.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from slashkit.models.base import PlatformModel
from slashkit.models.enums import ApplicationCommandOptionType


class User(PlatformModel):
    id: str
    username: str | None = None
    global_name: str | None = None
    avatar: str | None = None
    bot: bool = False


class Member(PlatformModel):
    user: User | None = None
    nick: str | None = None
    roles: list[str] = Field(default_factory=list)
    permissions: str | None = None


class CommandInteractionOption(PlatformModel):
    name: str
    type: int
    value: Any = None
    focused: bool | None = None
    options: list[CommandInteractionOption] | None = None


class InteractionData(PlatformModel):
    # Application commands / autocomplete
    id: str | None = None
    name: str | None = None
    type: int | None = None
    options: list[CommandInteractionOption] | None = None
    resolved: dict[str, Any] | None = None
    target_id: str | None = None
    guild_id: str | None = None
    # Message components / modal submissions
    custom_id: str | None = None
    component_type: int | None = None
    values: list[str] | None = None
    components: list[dict[str, Any]] | None = None


class Interaction(PlatformModel):
    id: str
    application_id: str
    type: int
    token: str
    data: InteractionData | None = None
    guild_id: str | None = None
    channel_id: str | None = None
    member: Member | None = None
    user: User | None = None
    message: dict[str, Any] | None = None
    locale: str | None = None
    guild_locale: str | None = None
    version: int = 1

    @property
    def invoker(self) -> User | None:
        """The user who triggered the interaction, in a guild or a DM."""
        if self.member is not None and self.member.user is not None:
            return self.member.user
        return self.user


def leaf_options(
    options: list[CommandInteractionOption] | None,
) -> tuple[list[str], list[CommandInteractionOption]]:
    """Walk down sub-command groups and sub-commands.

    Returns the sub-command path (e.g. ``["config", "set"]``) and the options
    given to the innermost sub-command.
    """
    path: list[str] = []
    current = options or []
    while len(current) == 1 and current[0].type in (
        ApplicationCommandOptionType.SUB_COMMAND,
        ApplicationCommandOptionType.SUB_COMMAND_GROUP,
    ):
        path.append(current[0].name)
        current = current[0].options or []
    return path, current
