"""Declarative application-command payloads.

Builders are the source of truth for what a command should look like
remotely. ``equals()`` compares a builder against a command object returned
by the API, ignoring server-assigned fields (``id``, ``version``, ...) and
treating absent values the same as their defaults.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel

from slashkit.models.enums import ApplicationCommandOptionType, ApplicationCommandType


class OptionChoice(BaseModel):
    name: str
    value: str | int | float
    name_localizations: dict[str, str] | None = None


class CommandOption(BaseModel):
    type: ApplicationCommandOptionType
    name: str
    description: str
    required: bool | None = None
    autocomplete: bool | None = None
    choices: list[OptionChoice] | None = None
    options: list[CommandOption] | None = None
    channel_types: list[int] | None = None
    min_value: int | float | None = None
    max_value: int | float | None = None
    min_length: int | None = None
    max_length: int | None = None
    name_localizations: dict[str, str] | None = None
    description_localizations: dict[str, str] | None = None


class CommandBuilder(BaseModel):
    type: ClassVar[ApplicationCommandType]

    name: str
    name_localizations: dict[str, str] | None = None
    default_member_permissions: str | None = None
    dm_permission: bool | None = None
    nsfw: bool | None = None

    def set_default_member_permissions(self, permissions: int | str | None) -> CommandBuilder:
        self.default_member_permissions = None if permissions is None else str(permissions)
        return self

    def set_dm_permission(self, allowed: bool) -> CommandBuilder:
        self.dm_permission = allowed
        return self

    def set_nsfw(self, nsfw: bool) -> CommandBuilder:
        self.nsfw = nsfw
        return self

    def set_name_localizations(self, localizations: dict[str, str] | None) -> CommandBuilder:
        self.name_localizations = localizations
        return self

    def to_json(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", exclude_none=True)
        data["type"] = int(self.type)
        return data

    def equals(self, remote: dict[str, Any]) -> bool:
        return canonical_command(self.to_json()) == canonical_command(remote)


class SlashCommandBuilder(CommandBuilder):
    type: ClassVar[ApplicationCommandType] = ApplicationCommandType.CHAT_INPUT

    description: str
    description_localizations: dict[str, str] | None = None
    options: list[CommandOption] | None = None

    def set_description_localizations(self, localizations: dict[str, str] | None) -> SlashCommandBuilder:
        self.description_localizations = localizations
        return self

    def add_option(self, option: CommandOption) -> SlashCommandBuilder:
        if self.options is None:
            self.options = []
        self.options.append(option)
        return self

    def add_string_option(
        self,
        name: str,
        description: str,
        *,
        required: bool = False,
        choices: list[OptionChoice] | None = None,
        autocomplete: bool | None = None,
    ) -> SlashCommandBuilder:
        return self.add_option(CommandOption(
            type=ApplicationCommandOptionType.STRING,
            name=name,
            description=description,
            required=required or None,
            choices=choices,
            autocomplete=autocomplete,
        ))

    def add_integer_option(
        self,
        name: str,
        description: str,
        *,
        required: bool = False,
        min_value: int | None = None,
        max_value: int | None = None,
    ) -> SlashCommandBuilder:
        return self.add_option(CommandOption(
            type=ApplicationCommandOptionType.INTEGER,
            name=name,
            description=description,
            required=required or None,
            min_value=min_value,
            max_value=max_value,
        ))

    def add_subcommand(
        self, name: str, description: str, options: list[CommandOption] | None = None
    ) -> SlashCommandBuilder:
        return self.add_option(CommandOption(
            type=ApplicationCommandOptionType.SUB_COMMAND,
            name=name,
            description=description,
            options=options,
        ))

    def add_subcommand_group(
        self, name: str, description: str, subcommands: list[CommandOption]
    ) -> SlashCommandBuilder:
        return self.add_option(CommandOption(
            type=ApplicationCommandOptionType.SUB_COMMAND_GROUP,
            name=name,
            description=description,
            options=subcommands,
        ))

    @property
    def is_group(self) -> bool:
        return any(
            o.type in (ApplicationCommandOptionType.SUB_COMMAND, ApplicationCommandOptionType.SUB_COMMAND_GROUP)
            for o in self.options or []
        )


class UserCommandBuilder(CommandBuilder):
    type: ClassVar[ApplicationCommandType] = ApplicationCommandType.USER


class MessageCommandBuilder(CommandBuilder):
    type: ClassVar[ApplicationCommandType] = ApplicationCommandType.MESSAGE


# ---------------------------------------------------------------------------
# Canonical forms used for local/remote comparison
# ---------------------------------------------------------------------------


def _or_none(value: Any) -> Any:
    """Empty containers compare equal to missing ones."""
    return value or None


def canonical_option(option: dict[str, Any]) -> dict[str, Any]:
    choices = option.get("choices") or []
    children = option.get("options") or []
    return {
        "type": int(option["type"]),
        "name": option["name"],
        "description": option.get("description") or "",
        "required": bool(option.get("required", False)),
        "autocomplete": bool(option.get("autocomplete", False)),
        "choices": [
            {
                "name": c["name"],
                "value": c["value"],
                "name_localizations": _or_none(c.get("name_localizations")),
            }
            for c in choices
        ] or None,
        "options": sorted((canonical_option(o) for o in children), key=lambda o: o["name"]) or None,
        "channel_types": sorted(option.get("channel_types") or []) or None,
        "min_value": option.get("min_value"),
        "max_value": option.get("max_value"),
        "min_length": option.get("min_length"),
        "max_length": option.get("max_length"),
        "name_localizations": _or_none(option.get("name_localizations")),
        "description_localizations": _or_none(option.get("description_localizations")),
    }


def canonical_command(command: dict[str, Any]) -> dict[str, Any]:
    dm_permission = command.get("dm_permission")
    return {
        "type": int(command.get("type", ApplicationCommandType.CHAT_INPUT)),
        "name": command["name"],
        "description": command.get("description") or "",
        "options": sorted(
            (canonical_option(o) for o in command.get("options") or []), key=lambda o: o["name"]
        ) or None,
        "default_member_permissions": command.get("default_member_permissions"),
        "dm_permission": True if dm_permission is None else bool(dm_permission),
        "nsfw": bool(command.get("nsfw", False)),
        "name_localizations": _or_none(command.get("name_localizations")),
        "description_localizations": _or_none(command.get("description_localizations")),
    }
