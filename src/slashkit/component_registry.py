"""In-memory component registry with cache-backed state offload."""

from __future__ import annotations

import json
import logging
import secrets
from typing import Any

from slashkit.cache import ComponentCache
from slashkit.components import MAX_CUSTOM_ID_PAYLOAD, Component
from slashkit.errors import ComponentNotFound, ExpiredComponentState, StateTooLarge

log = logging.getLogger(__name__)


def serialize_state(data: dict[str, Any] | None) -> str:
    return json.dumps(data or {}, separators=(",", ":"))


class ComponentRegistry:
    """Maps component ids to definitions.

    Components are not synced with the platform; they only need to be known
    locally so that responses can embed them and later interactions can be
    routed back to their handlers.
    """

    def __init__(self, cache: ComponentCache | None = None) -> None:
        self.cache = cache
        self._components: dict[str, Component] = {}

    def has(self, component_id: str) -> bool:
        return component_id in self._components

    def get(self, component_id: str) -> Component | None:
        return self._components.get(component_id)

    def register(self, *components: Component) -> None:
        for component in components:
            self._components[component.id] = component

    def unregister(self, component_id: str) -> None:
        self._components.pop(component_id, None)

    def __len__(self) -> int:
        return len(self._components)

    async def create_instance(
        self,
        name: str,
        data: dict[str, Any] | None = None,
        ttl: int | None = None,
    ):
        """Build a component bound to ``data``.

        Small state is embedded in the custom id. State that would push the
        custom id past the platform limit is stored in the cache and replaced
        by a random handle. If even the handle does not fit next to the
        component id, :class:`StateTooLarge` is raised.
        """
        component = self.get(name)
        if component is None:
            raise ComponentNotFound(name)

        state = serialize_state(data)
        if len(component.id) + len(state) > MAX_CUSTOM_ID_PAYLOAD:
            if self.cache is None:
                raise StateTooLarge(component.id, len(state))
            handle = secrets.token_urlsafe(16)
            if len(component.id) + len(handle) > MAX_CUSTOM_ID_PAYLOAD:
                raise StateTooLarge(component.id, len(state))
            await self.cache.set(handle, ttl if ttl is not None else self.cache.ttl, state)
            log.debug("Offloaded %d chars of state for %s to cache", len(state), component.id)
            state = handle

        return component.create_instance(state)

    async def resolve_state(self, state: str) -> dict[str, Any]:
        """Decode the state segment of a custom id, fetching cache handles."""
        if not state:
            return {}
        if state.startswith("{"):
            return json.loads(state)
        if self.cache is None:
            raise ExpiredComponentState(state)
        stored = await self.cache.get(state)
        if stored is None:
            raise ExpiredComponentState(state)
        return json.loads(stored)
