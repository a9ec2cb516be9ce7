"""Payload builders for commands, components, modals and messages."""

from slashkit.builders.commands import (
    CommandBuilder,
    CommandOption,
    MessageCommandBuilder,
    OptionChoice,
    SlashCommandBuilder,
    UserCommandBuilder,
)
from slashkit.builders.components import (
    ActionRowBuilder,
    ButtonBuilder,
    ModalBuilder,
    SelectMenuBuilder,
    SelectOption,
    TextInputBuilder,
)
from slashkit.builders.message import Embed, EmbedField, MessageBuilder

__all__ = [
    "CommandBuilder",
    "CommandOption",
    "MessageCommandBuilder",
    "OptionChoice",
    "SlashCommandBuilder",
    "UserCommandBuilder",
    "ActionRowBuilder",
    "ButtonBuilder",
    "ModalBuilder",
    "SelectMenuBuilder",
    "SelectOption",
    "TextInputBuilder",
    "Embed",
    "EmbedField",
    "MessageBuilder",
]
