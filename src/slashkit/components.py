"""Component definitions.

A definition is a stateless template: a builder, a handler and an id. At
response time it is bound to a state string, producing a builder whose
``custom_id`` is ``"{id}|{state}"``. When the user interacts with the
component, the platform echoes the custom id back and the handler receives
the decoded state.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, ClassVar, Union

from slashkit.builders.components import ButtonBuilder, ModalBuilder, SelectMenuBuilder

if TYPE_CHECKING:
    from slashkit.contexts import ButtonContext, ModalSubmitContext, SelectMenuContext

CUSTOM_ID_SEPARATOR = "|"
# id + state must fit with the separator in the platform's 100-char custom_id.
MAX_CUSTOM_ID_PAYLOAD = 99


def encode_custom_id(component_id: str, state: str) -> str:
    return f"{component_id}{CUSTOM_ID_SEPARATOR}{state}"


def parse_custom_id(custom_id: str) -> tuple[str, str]:
    """Split a custom id into ``(component_id, state)``. State is "" when absent."""
    component_id, _, state = custom_id.partition(CUSTOM_ID_SEPARATOR)
    return component_id, state


@dataclass(frozen=True)
class ComponentDefinition:
    id: str
    builder: Any
    handler: Callable[[Any], Awaitable[None]]
    parent_command: str | None = None

    kind: ClassVar[str] = "component"

    def namespaced(self, parent_command: str):
        """Return a copy whose id is scoped under ``parent_command``."""
        return replace(self, id=f"{parent_command}.{self.id}", parent_command=parent_command)

    def create_instance(self, state: str):
        return self.builder.with_custom_id(encode_custom_id(self.id, state))


@dataclass(frozen=True)
class Button(ComponentDefinition):
    builder: ButtonBuilder
    handler: Callable[[ButtonContext], Awaitable[None]]

    kind: ClassVar[str] = "button"


@dataclass(frozen=True)
class SelectMenu(ComponentDefinition):
    builder: SelectMenuBuilder
    handler: Callable[[SelectMenuContext], Awaitable[None]]

    kind: ClassVar[str] = "select_menu"


@dataclass(frozen=True)
class Modal(ComponentDefinition):
    builder: ModalBuilder
    handler: Callable[[ModalSubmitContext], Awaitable[None]]

    kind: ClassVar[str] = "modal"


Component = Union[Button, SelectMenu, Modal]
