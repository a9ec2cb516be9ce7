"""Async REST client for the platform API, with 429 retry."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx

from slashkit.errors import HTTPError

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://discord.com/api/v10"
USER_AGENT = "DiscordBot (https://github.com/slashkit/slashkit, 0.1.0)"


class Routes:
    """Path builders for the application-command endpoints."""

    @staticmethod
    def application_commands(application_id: str) -> str:
        return f"/applications/{application_id}/commands"

    @staticmethod
    def application_command(application_id: str, command_id: str) -> str:
        return f"/applications/{application_id}/commands/{command_id}"

    @staticmethod
    def application_guild_commands(application_id: str, guild_id: str) -> str:
        return f"/applications/{application_id}/guilds/{guild_id}/commands"

    @staticmethod
    def application_guild_command(application_id: str, guild_id: str, command_id: str) -> str:
        return f"/applications/{application_id}/guilds/{guild_id}/commands/{command_id}"


class RESTClient:
    """Thin wrapper around ``httpx.AsyncClient``.

    Non-2xx responses raise :class:`HTTPError`. Rate-limited requests (429)
    are retried after the advertised delay, up to ``max_retries`` times.

    Usage::

        rest = RESTClient(token="...")
        commands = await rest.get(Routes.application_commands(app_id))
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        token: str | None = None,
        *,
        max_retries: int = 3,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self.max_retries = max_retries
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    @property
    def token(self) -> str | None:
        return self._token

    @token.setter
    def token(self, value: str | None) -> None:
        self._token = value

    def _headers(self) -> dict[str, str]:
        headers = {"User-Agent": USER_AGENT}
        if self._token:
            headers["Authorization"] = f"Bot {self._token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        attempt = 0
        while True:
            response = await self._client.request(
                method, path, json=json, params=params, headers=self._headers()
            )
            if response.status_code == 429 and attempt < self.max_retries:
                attempt += 1
                delay = _retry_after(response)
                log.warning("Rate limited on %s %s, retrying in %.2fs", method, path, delay)
                await asyncio.sleep(delay)
                continue
            if response.status_code >= 400:
                raise _error_from(response)
            if response.status_code == 204 or not response.content:
                return None
            return response.json()

    async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, *, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, *, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, *, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> RESTClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()


def _retry_after(response: httpx.Response) -> float:
    try:
        data = response.json()
        if isinstance(data, dict) and "retry_after" in data:
            return float(data["retry_after"])
    except ValueError:
        pass
    header = response.headers.get("retry-after")
    if header is not None:
        try:
            return float(header)
        except ValueError:
            pass
    return 1.0


def _error_from(response: httpx.Response) -> HTTPError:
    code = None
    message = response.reason_phrase
    body: Any = None
    try:
        body = response.json()
    except ValueError:
        body = response.text
    if isinstance(body, dict):
        code = body.get("code")
        message = body.get("message", message)
    return HTTPError(response.status_code, code, message, body)
