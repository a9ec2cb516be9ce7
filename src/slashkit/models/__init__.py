"""Platform payload models and enums."""

from slashkit.models.base import PlatformModel
from slashkit.models.enums import (
    ApplicationCommandOptionType,
    ApplicationCommandType,
    ButtonStyle,
    ComponentType,
    InteractionResponseType,
    InteractionType,
    MessageFlags,
    TextInputStyle,
)
from slashkit.models.interactions import (
    CommandInteractionOption,
    Interaction,
    InteractionData,
    Member,
    User,
)

__all__ = [
    "PlatformModel",
    "ApplicationCommandOptionType",
    "ApplicationCommandType",
    "ButtonStyle",
    "ComponentType",
    "InteractionResponseType",
    "InteractionType",
    "MessageFlags",
    "TextInputStyle",
    "CommandInteractionOption",
    "Interaction",
    "InteractionData",
    "Member",
    "User",
]
