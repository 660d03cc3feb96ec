import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import discord
import pytest

from gatecord.moderation.message_cleanup import MessageCleanupScheduler, safe_delete_message


def _message(message_id: int, side_effect=None) -> SimpleNamespace:
    return SimpleNamespace(id=message_id, delete=AsyncMock(side_effect=side_effect))


@pytest.mark.asyncio
async def test_safe_delete_message_success_and_none() -> None:
    message = _message(1)
    assert await safe_delete_message(message) is True
    message.delete.assert_awaited_once()
    assert await safe_delete_message(None) is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "cls, status",
    [(discord.NotFound, 404), (discord.Forbidden, 403), (discord.HTTPException, 500)],
)
async def test_safe_delete_message_swallows_discord_errors(http_error, cls, status) -> None:
    message = _message(2, side_effect=http_error(cls, status))
    assert await safe_delete_message(message) is False


@pytest.mark.asyncio
async def test_schedule_deletes_all_messages_after_delay() -> None:
    scheduler = MessageCleanupScheduler()
    command, reply = _message(1), _message(2)

    task = scheduler.schedule(0.01, command, None, reply)

    assert task is not None
    assert task in scheduler.pending
    command.delete.assert_not_awaited()

    await task

    command.delete.assert_awaited_once()
    reply.delete.assert_awaited_once()
    assert task not in scheduler.pending


@pytest.mark.asyncio
async def test_failed_delete_does_not_stop_the_others(http_error) -> None:
    scheduler = MessageCleanupScheduler()
    gone, reply = _message(1, side_effect=http_error(discord.NotFound, 404)), _message(2)

    task = scheduler.schedule(0, gone, reply)
    await task

    reply.delete.assert_awaited_once()
    assert task.exception() is None


@pytest.mark.asyncio
async def test_schedule_with_nothing_to_delete_returns_none() -> None:
    scheduler = MessageCleanupScheduler()
    assert scheduler.schedule(1, None, None) is None
    assert not scheduler.pending


def test_schedule_without_running_loop_returns_none() -> None:
    scheduler = MessageCleanupScheduler()
    assert scheduler.schedule(1, _message(1)) is None


@pytest.mark.asyncio
async def test_shutdown_cancels_pending_deletions() -> None:
    scheduler = MessageCleanupScheduler()
    message = _message(1)
    task = scheduler.schedule(60, message)

    await scheduler.shutdown()

    assert task.cancelled()
    assert not scheduler.pending
    message.delete.assert_not_awaited()
    # A second shutdown is harmless
    await scheduler.shutdown()
