"""Exception taxonomy for interaction handling and command sync."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from slashkit.models.interactions import Interaction


class SlashkitError(Exception):
    """Base class for every error raised by slashkit."""


class ConfigurationError(SlashkitError):
    pass


# --- Interaction dispatch ---


class UnauthorizedInteraction(SlashkitError):
    """The request signature was missing or did not verify."""

    def __init__(self, body: str | bytes) -> None:
        super().__init__("Interaction signature is missing or invalid.")
        self.body = body


class InteractionHandlerTimedOut(SlashkitError):
    """No response was delivered before the deadline."""

    def __init__(self, interaction: Interaction) -> None:
        super().__init__(f"Interaction {interaction.id} was not responded to in time.")
        self.interaction = interaction


class UnknownInteractionType(SlashkitError):
    def __init__(self, interaction: Interaction) -> None:
        super().__init__(f"Unknown interaction type {interaction.type}.")
        self.interaction = interaction


class InteractionAlreadyResponded(SlashkitError):
    def __init__(self) -> None:
        super().__init__("A response has already been sent for this interaction.")


# --- Registries ---


class CommandNotFound(SlashkitError):
    def __init__(self, name: str, type: int) -> None:
        super().__init__(f"Command {name!r} (type {int(type)}) is not registered.")
        self.name = name
        self.type = type


class ComponentNotFound(SlashkitError):
    def __init__(self, component_id: str) -> None:
        super().__init__(f"Component {component_id!r} does not exist.")
        self.component_id = component_id


class RegistrationFailed(SlashkitError):
    """The API accepted a create/update call but returned no command id."""

    def __init__(self, name: str, *, overwriting: bool = False) -> None:
        suffix = " (was overwriting)" if overwriting else ""
        super().__init__(f"Command {name!r} failed to register{suffix}.")
        self.name = name
        self.overwriting = overwriting


class CommandSyncError(SlashkitError):
    """One or more remote deletions failed while pruning unregistered commands.

    ``failures`` holds ``(command_id, exception)`` pairs in the order they occurred.
    """

    def __init__(self, failures: list[tuple[str, BaseException]]) -> None:
        ids = ", ".join(command_id for command_id, _ in failures)
        super().__init__(f"Failed to delete {len(failures)} remote command(s): {ids}")
        self.failures = failures


# --- Component state ---


class StateTooLarge(SlashkitError):
    def __init__(self, component_id: str, length: int) -> None:
        super().__init__(
            f"Component state too large for {component_id!r} ({length} chars), please use a cache."
        )
        self.component_id = component_id
        self.length = length


class ExpiredComponentState(SlashkitError):
    def __init__(self, handle: str) -> None:
        super().__init__(f"Component state {handle!r} has expired or was never stored.")
        self.handle = handle


# --- REST ---


class HTTPError(SlashkitError):
    """A REST call returned a non-success status."""

    def __init__(self, status: int, code: Any = None, message: str = "", body: Any = None) -> None:
        super().__init__(f"HTTP {status}: {message or 'request failed'}")
        self.status = status
        self.code = code
        self.message = message
        self.body = body
