"""Command registry: local command map reconciled against the platform.

Each registry is scoped either globally or to a single guild. Commands are
matched to their remote counterparts by ``(type, name)``; once matched, the
remote id sticks to the local registration until it is unregistered.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from slashkit.commands import (
    Command,
    RegisteredCommand,
    command_type,
    wrap_registered,
)
from slashkit.errors import CommandNotFound, CommandSyncError, RegistrationFailed
from slashkit.models.enums import ApplicationCommandType
from slashkit.rest import Routes

if TYPE_CHECKING:
    from slashkit.application import Application

log = logging.getLogger(__name__)

# (type -> name -> remote command object)
RemoteCommands = dict[ApplicationCommandType, dict[str, dict[str, Any]]]


class CommandRegistry:
    """Registered commands for one scope, one map per command type."""

    def __init__(self, app: Application, guild_id: str | None = None) -> None:
        self.app = app
        self.guild_id = guild_id
        self._commands: dict[ApplicationCommandType, dict[str, RegisteredCommand]] = {
            t: {} for t in ApplicationCommandType
        }

    def __repr__(self) -> str:
        scope = "global" if self.guild_id is None else f"guild={self.guild_id}"
        return f"<CommandRegistry {scope} commands={len(self)}>"

    def __len__(self) -> int:
        return sum(len(m) for m in self._commands.values())

    def __iter__(self):
        for commands in self._commands.values():
            yield from commands.values()

    # --- Routes ---

    def _route(self) -> str:
        if self.guild_id is None:
            return Routes.application_commands(self.app.client_id)
        return Routes.application_guild_commands(self.app.client_id, self.guild_id)

    def _command_route(self, command_id: str) -> str:
        if self.guild_id is None:
            return Routes.application_command(self.app.client_id, command_id)
        return Routes.application_guild_command(self.app.client_id, self.guild_id, command_id)

    @staticmethod
    def _partition(commands: list[dict[str, Any]]) -> RemoteCommands:
        parsed: RemoteCommands = {t: {} for t in ApplicationCommandType}
        for command in commands:
            try:
                kind = ApplicationCommandType(command.get("type", ApplicationCommandType.CHAT_INPUT))
            except ValueError:
                log.debug("Ignoring remote command %s of unknown type %s", command.get("name"), command.get("type"))
                continue
            parsed[kind][command["name"]] = command
        return parsed

    # --- Local map ---

    def has(self, name: str, type: ApplicationCommandType = ApplicationCommandType.CHAT_INPUT) -> bool:
        return name in self._commands[ApplicationCommandType(type)]

    def get(
        self, name: str, type: ApplicationCommandType = ApplicationCommandType.CHAT_INPUT
    ) -> RegisteredCommand | None:
        return self._commands[ApplicationCommandType(type)].get(name)

    def rename(self, old_name: str, new_name: str, type: ApplicationCommandType) -> None:
        """Rename a registered command locally.

        The entry keeps its remote id and now carries a builder with the new
        name. The remote command is not touched until
        :meth:`RegisteredCommand.update_remote` is called.
        """
        commands = self._commands[ApplicationCommandType(type)]
        command = commands.pop(old_name, None)
        if command is None:
            raise CommandNotFound(old_name, type)
        builder = command.builder.model_copy(update={"name": new_name}, deep=True)
        command.command = replace(command.command, builder=builder)
        commands[new_name] = command

    # --- Reconciliation ---

    async def register(self, *commands: Command) -> list[RegisteredCommand]:
        """Register commands to be handled.

        Creates each command remotely if it does not exist, overwrites it if
        the remote version differs, and leaves it alone otherwise.
        """
        remote = self._partition(await self.get_api_commands())
        registered: list[RegisteredCommand] = []

        for command in commands:
            kind = command_type(command)
            name = command.builder.name

            components = tuple(c.namespaced(name) for c in command.components)
            if components:
                self.app.components.register(*components)

            result = remote[kind].get(name)
            if result is not None:
                if not command.builder.equals(result):
                    command_id = result["id"]
                    result = await self.update_api_command(command.builder.to_json(), command_id)
                    if not result or not result.get("id"):
                        raise RegistrationFailed(name, overwriting=True)
                    log.info("Updated command %s (%s) in %r", name, result["id"], self)
            else:
                result = await self.create_api_command(command.builder.to_json())
                if not result or not result.get("id"):
                    raise RegistrationFailed(name)
                log.info("Created command %s (%s) in %r", name, result["id"], self)

            entry = wrap_registered(self, command, result["id"], components)
            self._commands[kind][name] = entry
            registered.append(entry)

        return registered

    async def unregister(
        self,
        name: str,
        type: ApplicationCommandType = ApplicationCommandType.CHAT_INPUT,
        delete_remote: bool = False,
    ) -> None:
        """Stop handling a command, optionally deleting it from the platform as well."""
        command = self.get(name, type)
        if command is None:
            raise CommandNotFound(name, type)

        del self._commands[ApplicationCommandType(type)][name]
        if delete_remote:
            await self.delete_api_command(command.id)

    async def delete_unregistered(self) -> None:
        """Delete remote commands that are not registered here.

        Every deletion is attempted; failures are collected and raised
        together as :class:`CommandSyncError` afterwards.
        """
        remote = self._partition(await self.get_api_commands())
        failures: list[tuple[str, BaseException]] = []

        for kind, remote_commands in remote.items():
            local = self._commands[kind]
            for name, command in remote_commands.items():
                if name in local:
                    continue
                try:
                    await self.delete_api_command(command["id"])
                except Exception as exc:
                    log.warning("Failed to delete unregistered command %s (%s): %s", name, command["id"], exc)
                    failures.append((command["id"], exc))

        if failures:
            raise CommandSyncError(failures)

    def to_api_commands(self) -> list[dict[str, Any]]:
        """API payloads for every registered command."""
        return [command.builder.to_json() for command in self]

    # --- REST wrappers ---

    async def get_api_commands(self, with_localizations: bool = True) -> list[dict[str, Any]]:
        """Fetch the scope's remote commands.

        With ``with_localizations`` the full ``name_localizations`` /
        ``description_localizations`` maps are returned instead of the
        ``*_localized`` fields for the current locale.
        """
        return await self.app.rest.get(
            self._route(), params={"with_localizations": "true" if with_localizations else "false"}
        ) or []

    async def put_api_commands(self, data: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Bulk overwrite every command in this scope."""
        return await self.app.rest.put(self._route(), json=data)

    async def create_api_command(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self.app.rest.post(self._route(), json=data)

    async def update_api_command(self, data: dict[str, Any], command_id: str) -> dict[str, Any]:
        # A command's type cannot be changed after creation.
        body = {k: v for k, v in data.items() if k != "type"}
        return await self.app.rest.patch(self._command_route(command_id), json=body)

    async def delete_api_command(self, command_id: str) -> None:
        await self.app.rest.delete(self._command_route(command_id))
        log.info("Deleted command %s from %r", command_id, self)
