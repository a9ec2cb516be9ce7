"""Tests for the REST client."""

import asyncio
import json

import httpx
import pytest

from slashkit.errors import HTTPError
from slashkit.rest import RESTClient, Routes


@pytest.fixture()
def rest_client():
    calls = []
    responses = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return responses.pop(0) if responses else httpx.Response(200, json={"ok": True})

    client = RESTClient("https://discord.test/api/v10", "secret", transport=httpx.MockTransport(handler))
    return client, calls, responses


@pytest.fixture()
def sleeps(monkeypatch):
    delays = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay):
        delays.append(delay)
        await real_sleep(0)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    return delays


async def test_sends_bot_authorization(rest_client):
    client, calls, _ = rest_client
    assert await client.get("/applications/1/commands") == {"ok": True}
    assert calls[0].headers["Authorization"] == "Bot secret"
    assert calls[0].headers["User-Agent"].startswith("DiscordBot")
    assert calls[0].url.path == "/api/v10/applications/1/commands"
    await client.close()


async def test_token_can_be_replaced(rest_client):
    client, calls, _ = rest_client
    client.token = None
    await client.get("/x")
    assert "Authorization" not in calls[0].headers
    await client.close()


async def test_json_body_and_empty_response(rest_client):
    client, calls, responses = rest_client
    responses.append(httpx.Response(204))
    assert await client.post("/x", json={"name": "ping"}) is None
    assert calls[0].method == "POST"
    assert json.loads(calls[0].content) == {"name": "ping"}
    await client.close()


async def test_retry_on_429(rest_client, sleeps):
    client, calls, responses = rest_client
    responses.append(httpx.Response(429, json={"message": "You are being rate limited.", "retry_after": 0.25, "global": False}))

    assert await client.get("/x") == {"ok": True}
    assert len(calls) == 2
    assert sleeps == [0.25]
    await client.close()


async def test_retry_after_header_fallback(rest_client, sleeps):
    client, _, responses = rest_client
    responses.append(httpx.Response(429, headers={"retry-after": "2"}))
    await client.get("/x")
    assert sleeps == [2.0]
    await client.close()


async def test_retries_exhausted(rest_client, sleeps):
    client, calls, responses = rest_client
    client.max_retries = 2
    for _ in range(3):
        responses.append(httpx.Response(429, json={"message": "Slow down", "retry_after": 0.1}))

    with pytest.raises(HTTPError) as exc_info:
        await client.get("/x")
    assert exc_info.value.status == 429
    assert len(calls) == 3
    assert len(sleeps) == 2
    await client.close()


async def test_error_carries_code_and_message(rest_client):
    client, _, responses = rest_client
    responses.append(httpx.Response(400, json={"code": 50035, "message": "Invalid Form Body"}))
    with pytest.raises(HTTPError) as exc_info:
        await client.patch("/x", json={})
    assert exc_info.value.status == 400
    assert exc_info.value.code == 50035
    assert exc_info.value.message == "Invalid Form Body"
    assert exc_info.value.body["code"] == 50035
    await client.close()


async def test_error_with_text_body(rest_client):
    client, _, responses = rest_client
    responses.append(httpx.Response(502, text="Bad Gateway"))
    with pytest.raises(HTTPError) as exc_info:
        await client.delete("/x")
    assert exc_info.value.status == 502
    assert exc_info.value.body == "Bad Gateway"
    await client.close()


def test_routes():
    assert Routes.application_commands("1") == "/applications/1/commands"
    assert Routes.application_command("1", "9") == "/applications/1/commands/9"
    assert Routes.application_guild_commands("1", "2") == "/applications/1/guilds/2/commands"
    assert Routes.application_guild_command("1", "2", "9") == "/applications/1/guilds/2/commands/9"
