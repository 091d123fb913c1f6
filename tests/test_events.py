"""Tests for the view event emitter."""
import pytest

from medialib.utils.events import EventEmitter


@pytest.mark.asyncio
async def test_emit_sync_and_async_listeners_in_order():
    events = EventEmitter()
    received = []

    async def async_listener(value):
        received.append(("async", value))

    events.on("notify", received.append)
    events.on("notify", async_listener)
    await events.emit("notify", "hello")

    assert received == ["hello", ("async", "hello")]


@pytest.mark.asyncio
async def test_listener_errors_do_not_stop_others():
    events = EventEmitter()
    received = []

    def broken(value):
        raise ValueError("listener bug")

    events.on("select", broken)
    events.on("select", received.append)
    await events.emit("select", "url")

    assert received == ["url"]


@pytest.mark.asyncio
async def test_off_and_duplicate_subscriptions():
    events = EventEmitter()
    received = []

    events.on("notify", received.append)
    events.on("notify", received.append)
    assert events.listener_count("notify") == 1

    events.off("notify", received.append)
    await events.emit("notify", "ignored")
    await events.emit("unknown", "ignored")

    assert received == []
