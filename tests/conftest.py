import itertools
import json
import time

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from slashkit.application import Application
from slashkit.cache import MemoryCache
from slashkit.rest import RESTClient
from slashkit.signature import sign_interaction

CLIENT_ID = "100000000000000001"
GUILD_ID = "200000000000000002"
API_BASE = "https://discord.test/api/v10"


class FakeAPI:
    """In-memory stand-in for the application-command endpoints.

    Commands are stored per scope (the path up to ``/commands``) so global
    and guild commands stay separate. Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.scopes: dict[str, dict[str, dict]] = {}
        self.calls: list[tuple[str, str, object]] = []
        self.fail_deletes: set[str] = set()
        self.omit_ids = False
        # (status, body) returned for every request when set.
        self.error: tuple[int, dict] | None = None
        self.requests: list[httpx.Request] = []
        self._ids = itertools.count(900000000000000001)

    def scope(self, guild_id: str | None = None) -> str:
        base = f"/api/v10/applications/{CLIENT_ID}"
        return base if guild_id is None else f"{base}/guilds/{guild_id}"

    def seed(self, command: dict, guild_id: str | None = None) -> dict:
        command = {"id": str(next(self._ids)), "type": 1, "application_id": CLIENT_ID, "version": "1", **command}
        self.scopes.setdefault(self.scope(guild_id), {})[command["id"]] = command
        return command

    def writes(self, method: str | None = None) -> list[tuple[str, str, object]]:
        return [
            c for c in self.calls
            if c[0] != "GET" and (method is None or c[0] == method)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path
        self.calls.append((request.method, path, body))
        self.requests.append(request)
        if self.error is not None:
            return httpx.Response(self.error[0], json=self.error[1])

        scope, _, rest = path.partition("/commands")
        commands = self.scopes.setdefault(scope, {})
        command_id = rest.lstrip("/") or None

        if command_id is None:
            if request.method == "GET":
                return httpx.Response(200, json=list(commands.values()))
            if request.method == "POST":
                created = {"id": str(next(self._ids)), "application_id": CLIENT_ID, "version": "1", **body}
                if self.omit_ids:
                    return httpx.Response(201, json={k: v for k, v in created.items() if k != "id"})
                commands[created["id"]] = created
                return httpx.Response(201, json=created)
            if request.method == "PUT":
                commands.clear()
                for item in body:
                    created = {"id": str(next(self._ids)), "application_id": CLIENT_ID, **item}
                    commands[created["id"]] = created
                return httpx.Response(200, json=list(commands.values()))
        else:
            if command_id not in commands:
                return httpx.Response(404, json={"code": 10063, "message": "Unknown application command"})
            if request.method == "PATCH":
                if self.omit_ids:
                    return httpx.Response(200, json={})
                commands[command_id] = {**commands[command_id], **body}
                return httpx.Response(200, json=commands[command_id])
            if request.method == "DELETE":
                if command_id in self.fail_deletes:
                    return httpx.Response(500, json={"code": 0, "message": "Internal Server Error"})
                del commands[command_id]
                return httpx.Response(204)
        return httpx.Response(405, json={"code": 0, "message": "405: Method Not Allowed"})


@pytest.fixture()
def private_key():
    return Ed25519PrivateKey.generate()


@pytest.fixture()
def public_key_hex(private_key):
    return private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw).hex()


@pytest.fixture()
def fake_api():
    return FakeAPI()


@pytest.fixture()
async def make_app(fake_api, public_key_hex):
    created = []

    def factory(**kwargs):
        kwargs.setdefault("cache", MemoryCache())
        rest = RESTClient(API_BASE, "test-token", transport=httpx.MockTransport(fake_api.handler))
        app = Application(CLIENT_ID, public_key_hex, "test-token", rest=rest, **kwargs)
        created.append(app)
        return app

    yield factory
    for app in created:
        await app.close()


@pytest.fixture()
def app(make_app):
    return make_app()


@pytest.fixture()
def sign(private_key):
    """Return ``(body, signature, timestamp)`` for a payload, signed like the platform does."""

    def _sign(payload: dict | str):
        body = payload if isinstance(payload, str) else json.dumps(payload)
        timestamp = str(int(time.time()))
        return body, sign_interaction(private_key, timestamp, body), timestamp

    return _sign


class Responses:
    """Response callback that records every payload it receives."""

    def __init__(self):
        self.payloads: list[dict] = []

    async def __call__(self, response: dict) -> None:
        self.payloads.append(response)


@pytest.fixture()
def responses():
    return Responses()


def interaction_payload(type: int, data: dict | None = None, **extra) -> dict:
    payload = {
        "id": "300000000000000003",
        "application_id": CLIENT_ID,
        "type": type,
        "token": "interaction-token",
        "version": 1,
        "channel_id": "400000000000000004",
        "user": {"id": "500000000000000005", "username": "tester"},
        "locale": "en-US",
    }
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return payload
