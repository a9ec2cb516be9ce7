"""Tests for Application.handle_interaction: auth, deadline, hooks and routing."""

import asyncio
import json

import pytest

import slashkit.application as application_mod
from conftest import interaction_payload
from slashkit.builders import SlashCommandBuilder
from slashkit.commands import SlashCommand
from slashkit.deadline import Deadline
from slashkit.errors import (
    InteractionAlreadyResponded,
    InteractionHandlerTimedOut,
    UnauthorizedInteraction,
    UnknownInteractionType,
)
from slashkit.hooks import InteractionHooks
from slashkit.models.enums import InteractionResponseType, InteractionType


@pytest.fixture()
def deadlines(monkeypatch):
    """Record every Deadline the dispatcher starts."""
    started = []

    class RecordingDeadline(Deadline):
        def __init__(self, *args, **kwargs):
            super().__init__(*args, **kwargs)
            started.append(self)

    monkeypatch.setattr(application_mod, "Deadline", RecordingDeadline)
    return started


def _command(name, data=None, **extra):
    payload = {"id": "600000000000000006", "name": name, "type": 1}
    payload.update(data or {})
    return interaction_payload(InteractionType.APPLICATION_COMMAND, payload, **extra)


# ---------------------------------------------------------------------------
# Ping
# ---------------------------------------------------------------------------


async def test_ping_responds_with_pong_and_clears_deadline(app, sign, responses, deadlines):
    body, sig, ts = sign(interaction_payload(InteractionType.PING))

    await app.handle_interaction(responses, body, sig, ts)

    assert responses.payloads == [{"type": InteractionResponseType.PONG}]
    assert len(deadlines) == 1
    assert deadlines[0].active is False
    assert deadlines[0].expired is False


async def test_ping_with_short_timeout_does_not_fail_late(make_app, sign, responses, deadlines):
    app = make_app(timeout=20)
    body, sig, ts = sign(interaction_payload(InteractionType.PING))

    await app.handle_interaction(responses, body, sig, ts)
    await asyncio.sleep(0.05)

    assert deadlines[0].expired is False
    assert len(responses.payloads) == 1


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------


async def test_invalid_signature_rejected_before_deadline(app, sign, responses, deadlines):
    body, sig, ts = sign(interaction_payload(InteractionType.PING))
    tampered = body.replace('"type": 1', '"type": 2')

    with pytest.raises(UnauthorizedInteraction) as exc_info:
        await app.handle_interaction(responses, tampered, sig, ts)

    assert exc_info.value.body == tampered
    assert deadlines == []
    assert responses.payloads == []


async def test_missing_timestamp_rejected(app, sign, responses, deadlines):
    body, sig, _ = sign(interaction_payload(InteractionType.PING))
    with pytest.raises(UnauthorizedInteraction):
        await app.handle_interaction(responses, body, sig, None)
    assert deadlines == []


async def test_missing_signature_rejected(app, sign, responses):
    body, _, ts = sign(interaction_payload(InteractionType.PING))
    with pytest.raises(UnauthorizedInteraction):
        await app.handle_interaction(responses, body, None, ts)


async def test_signature_false_skips_verification(app, responses):
    body = json.dumps(interaction_payload(InteractionType.PING))
    await app.handle_interaction(responses, body, False)
    assert responses.payloads == [{"type": InteractionResponseType.PONG}]


# ---------------------------------------------------------------------------
# Deadline
# ---------------------------------------------------------------------------


async def test_slow_handler_times_out_but_may_still_respond(make_app, responses):
    app = make_app(timeout=20)
    finished = asyncio.Event()

    async def slow(ctx):
        await asyncio.sleep(0.1)
        await ctx.reply("late")
        finished.set()

    await app.commands.register(SlashCommand(SlashCommandBuilder(name="slow", description="Slow"), slow))
    body = json.dumps(_command("slow"))

    with pytest.raises(InteractionHandlerTimedOut) as exc_info:
        await app.handle_interaction(responses, body, False)
    assert exc_info.value.interaction.id == "300000000000000003"
    assert responses.payloads == []

    await asyncio.wait_for(finished.wait(), 1)
    assert responses.payloads[0]["data"] == {"content": "late"}


async def test_handler_error_propagates(app, responses):
    async def broken(ctx):
        raise RuntimeError("boom")

    await app.commands.register(SlashCommand(SlashCommandBuilder(name="broken", description="Broken"), broken))
    with pytest.raises(RuntimeError, match="boom"):
        await app.handle_interaction(responses, json.dumps(_command("broken")), False)


async def test_second_response_rejected(app, responses):
    async def twice(ctx):
        await ctx.reply("one")
        await ctx.reply("two")

    await app.commands.register(SlashCommand(SlashCommandBuilder(name="twice", description="Twice"), twice))
    with pytest.raises(InteractionAlreadyResponded):
        await app.handle_interaction(responses, json.dumps(_command("twice")), False)
    assert len(responses.payloads) == 1
    assert responses.payloads[0]["data"] == {"content": "one"}


async def test_handler_without_response_resolves(app, responses):
    async def silent(ctx):
        pass

    await app.commands.register(SlashCommand(SlashCommandBuilder(name="silent", description="Silent"), silent))
    await app.handle_interaction(responses, json.dumps(_command("silent")), False)
    assert responses.payloads == []


# ---------------------------------------------------------------------------
# Hooks
# ---------------------------------------------------------------------------


async def test_global_hook_short_circuits(make_app, sign, responses):
    seen = []

    async def hook(ctx):
        seen.append(ctx.interaction.type)
        await ctx.response_callback({"type": InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE, "data": {"content": "hooked"}})
        return True

    app = make_app(hooks=InteractionHooks(interaction=hook))
    # Unknown type would raise if it reached routing.
    body, sig, ts = sign(interaction_payload(99))
    await app.handle_interaction(responses, body, sig, ts)

    assert seen == [99]
    assert responses.payloads[0]["data"] == {"content": "hooked"}


async def test_hook_returning_truthy_non_true_does_not_short_circuit(make_app, responses):
    async def hook(ctx):
        return "yes"

    app = make_app(hooks=InteractionHooks(interaction=hook))
    await app.handle_interaction(responses, json.dumps(interaction_payload(InteractionType.PING)), False)
    assert responses.payloads == [{"type": InteractionResponseType.PONG}]


async def test_hook_receives_original_callback(make_app, responses):
    captured = []

    async def hook(ctx):
        captured.append(ctx.response_callback)
        return True

    app = make_app(hooks=InteractionHooks(interaction=hook))
    await app.handle_interaction(responses, json.dumps(interaction_payload(InteractionType.PING)), False)
    assert captured == [responses]


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------


async def test_unknown_interaction_type(app, sign, responses):
    body, sig, ts = sign(interaction_payload(42))
    with pytest.raises(UnknownInteractionType) as exc_info:
        await app.handle_interaction(responses, body, sig, ts)
    assert exc_info.value.interaction.type == 42
    assert responses.payloads == []
