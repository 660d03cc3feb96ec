"""
Delayed deletion of ban channel messages.

The ban channel is kept clean by deleting each moderator command together
with the bot's reply a few seconds after the reply was sent. Deletions are
fire-and-forget: :meth:`MessageCleanupScheduler.schedule` returns immediately,
and a failed delete (message already gone, missing permission) is only
logged at debug level.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Set

import discord

from gatecord.util.logger import get_logger

logger = get_logger("message_cleanup")


async def safe_delete_message(message: Optional[discord.Message]) -> bool:
    """Attempt to delete a message, suppressing Discord errors."""
    if message is None:
        return False
    try:
        await message.delete()
        return True
    except discord.NotFound:
        logger.debug("[CLEANUP] Message %s was already deleted", getattr(message, "id", "?"))
    except discord.Forbidden:
        logger.debug("[CLEANUP] No permission to delete message %s", getattr(message, "id", "?"))
    except discord.HTTPException as exc:
        logger.debug("[CLEANUP] Could not delete message %s: %s", getattr(message, "id", "?"), exc)
    return False


class MessageCleanupScheduler:
    """Owns the background tasks that delete messages after a delay.

    Attributes:
        pending (set[asyncio.Task]): Tasks that have not finished yet. Keeping
            references here stops the event loop from garbage-collecting them.
    """

    def __init__(self) -> None:
        self.pending: Set[asyncio.Task] = set()

    def schedule(self, delay_seconds: float, *messages: Optional[discord.Message]) -> Optional[asyncio.Task]:
        """Delete ``messages`` after ``delay_seconds``; ``None`` entries are skipped.

        Returns the background task, or ``None`` when there was nothing to delete
        or no event loop is running.
        """
        targets = [message for message in messages if message is not None]
        if not targets:
            return None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("[CLEANUP] Cannot schedule deletion: no running event loop")
            return None

        task = loop.create_task(self._delete_later(delay_seconds, targets), name="gatecord-message-cleanup")
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)
        return task

    async def _delete_later(self, delay_seconds: float, messages: list[discord.Message]) -> None:
        await asyncio.sleep(max(0.0, delay_seconds))
        for message in messages:
            await safe_delete_message(message)

    async def shutdown(self) -> None:
        """Cancel every pending deletion. Safe to call multiple times."""
        tasks = list(self.pending)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.pending.clear()
