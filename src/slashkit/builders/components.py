"""Message component and modal payloads."""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, field_validator

from slashkit.models.enums import SELECT_COMPONENT_TYPES, ButtonStyle, ComponentType, TextInputStyle


class _ComponentBuilder(BaseModel):
    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)

    def with_custom_id(self, custom_id: str):
        """Return a copy carrying ``custom_id``; the template is left untouched."""
        return self.model_copy(update={"custom_id": custom_id}, deep=True)


class ButtonBuilder(_ComponentBuilder):
    type: ComponentType = ComponentType.BUTTON
    style: ButtonStyle = ButtonStyle.PRIMARY
    label: str | None = None
    emoji: dict[str, Any] | None = None
    custom_id: str | None = None
    url: str | None = None
    disabled: bool | None = None

    def set_label(self, label: str) -> ButtonBuilder:
        self.label = label
        return self

    def set_style(self, style: ButtonStyle) -> ButtonBuilder:
        self.style = style
        return self

    def set_emoji(self, emoji: dict[str, Any]) -> ButtonBuilder:
        self.emoji = emoji
        return self

    def set_url(self, url: str) -> ButtonBuilder:
        self.url = url
        self.style = ButtonStyle.LINK
        return self

    def set_disabled(self, disabled: bool = True) -> ButtonBuilder:
        self.disabled = disabled
        return self


class SelectOption(BaseModel):
    label: str
    value: str
    description: str | None = None
    emoji: dict[str, Any] | None = None
    default: bool | None = None


class SelectMenuBuilder(_ComponentBuilder):
    type: ComponentType = ComponentType.STRING_SELECT
    custom_id: str | None = None
    options: list[SelectOption] | None = None
    channel_types: list[int] | None = None
    placeholder: str | None = None
    min_values: int | None = None
    max_values: int | None = None
    disabled: bool | None = None

    @field_validator("type")
    @classmethod
    def _check_type(cls, v: ComponentType) -> ComponentType:
        if v not in SELECT_COMPONENT_TYPES:
            raise ValueError(f"{v!r} is not a select menu type")
        return v

    def add_options(self, *options: SelectOption) -> SelectMenuBuilder:
        if self.options is None:
            self.options = []
        self.options.extend(options)
        return self

    def set_placeholder(self, placeholder: str) -> SelectMenuBuilder:
        self.placeholder = placeholder
        return self

    def set_values_range(self, min_values: int, max_values: int) -> SelectMenuBuilder:
        self.min_values = min_values
        self.max_values = max_values
        return self


class TextInputBuilder(_ComponentBuilder):
    type: ComponentType = ComponentType.TEXT_INPUT
    custom_id: str
    label: str
    style: TextInputStyle = TextInputStyle.SHORT
    min_length: int | None = None
    max_length: int | None = None
    required: bool | None = None
    value: str | None = None
    placeholder: str | None = None


class ActionRowBuilder:
    """A row of up to five buttons, one select menu, or one text input."""

    def __init__(self, components: list[Any] | None = None) -> None:
        self.components: list[Any] = list(components or [])

    def add_components(self, *components: Any) -> ActionRowBuilder:
        self.components.extend(components)
        return self

    def set_components(self, components: list[Any]) -> ActionRowBuilder:
        self.components = list(components)
        return self

    def to_json(self) -> dict[str, Any]:
        return {
            "type": int(ComponentType.ACTION_ROW),
            "components": [c.to_json() for c in self.components],
        }


class ModalBuilder:
    def __init__(self, title: str, custom_id: str | None = None) -> None:
        self.title = title
        self.custom_id = custom_id
        self.rows: list[ActionRowBuilder] = []

    def add_text_inputs(self, *inputs: TextInputBuilder) -> ModalBuilder:
        for text_input in inputs:
            self.rows.append(ActionRowBuilder([text_input]))
        return self

    def with_custom_id(self, custom_id: str) -> ModalBuilder:
        clone = copy.deepcopy(self)
        clone.custom_id = custom_id
        return clone

    def to_json(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "custom_id": self.custom_id,
            "components": [row.to_json() for row in self.rows],
        }
