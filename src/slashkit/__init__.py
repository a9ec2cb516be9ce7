"""HTTP interactions framework: signed webhooks, command sync and stateful components."""

from slashkit.application import Application
from slashkit.cache import DatabaseCache, MemoryCache
from slashkit.commands import CommandGroup, MessageCommand, SlashCommand, UserCommand
from slashkit.components import Button, Modal, SelectMenu
from slashkit.hooks import CommandHooks, ComponentHooks, InteractionHooks

__all__ = [
    "Application",
    "DatabaseCache",
    "MemoryCache",
    "CommandGroup",
    "MessageCommand",
    "SlashCommand",
    "UserCommand",
    "Button",
    "Modal",
    "SelectMenu",
    "CommandHooks",
    "ComponentHooks",
    "InteractionHooks",
]
