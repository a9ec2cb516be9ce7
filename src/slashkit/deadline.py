"""Response deadline bookkeeping for a single interaction."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from slashkit.errors import InteractionAlreadyResponded

ResponseCallback = Callable[[dict[str, Any]], Awaitable[None]]


class Deadline:
    """One-shot alarm that calls ``on_expire`` after ``timeout`` seconds unless cancelled."""

    def __init__(self, timeout: float, on_expire: Callable[[], None]) -> None:
        self._on_expire = on_expire
        self.expired = False
        self._handle: asyncio.TimerHandle | None = asyncio.get_running_loop().call_later(
            timeout, self._fire
        )

    def _fire(self) -> None:
        self._handle = None
        self.expired = True
        self._on_expire()

    @property
    def active(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        """Stop the alarm. Safe to call any number of times."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class ResponseSink:
    """Response callback that accepts exactly one response.

    The first call cancels the deadline before delivering; later calls raise
    :class:`InteractionAlreadyResponded`. A response delivered after the
    deadline expired is still passed through.
    """

    def __init__(self, callback: ResponseCallback, deadline: Deadline) -> None:
        self._callback = callback
        self._deadline = deadline
        self.responded = False

    async def __call__(self, response: dict[str, Any]) -> None:
        if self.responded:
            raise InteractionAlreadyResponded()
        self.responded = True
        self._deadline.cancel()
        await self._callback(response)
