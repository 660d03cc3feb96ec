"""
Pytest configuration and fixtures for Gatecord tests.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from gatecord.configuration.bot_settings import BotSettings  # noqa: E402

GUILD_ID = 100000000000000001
MODERATION_CHANNEL_ID = 200000000000000002
BAN_CHANNEL_ID = 300000000000000003
ADMIN_ROLE_ID = 400000000000000004
VERIFIED_ROLE_ID = 500000000000000005
VERIFICATION_CHANNEL_ID = 600000000000000006


class FakeUser:
    """Stands in for discord.Member / discord.User; ``str()`` gives the tag like py-cord does."""

    def __init__(self, user_id: int, name: str = "someone", role_ids=(), bot: bool = False) -> None:
        self.id = user_id
        self.name = name
        self.bot = bot
        self.roles = [SimpleNamespace(id=role_id) for role_id in role_ids]
        self.mention = f"<@{user_id}>"
        self.display_avatar = SimpleNamespace(url="https://cdn.example.com/avatar.png")
        self.created_at = datetime(2021, 5, 1, tzinfo=timezone.utc)
        self.joined_at = datetime(2024, 1, 15, tzinfo=timezone.utc)
        self.add_roles = AsyncMock()
        self.send = AsyncMock()

    def __str__(self) -> str:
        return self.name


class AsyncIter:
    """Minimal async iterator, e.g. for ``async for entry in guild.bans()``."""

    def __init__(self, items) -> None:
        self._items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


def make_http_error(cls=discord.HTTPException, status: int = 500, message: str = "error"):
    """Build a py-cord HTTP exception without a real aiohttp response."""
    reasons = {403: "Forbidden", 404: "Not Found", 429: "Too Many Requests"}
    response = MagicMock(status=status, reason=reasons.get(status, "Internal Server Error"))
    return cls(response, message)


@pytest.fixture()
def settings() -> BotSettings:
    return BotSettings(
        token="test-token",
        guild_id=GUILD_ID,
        moderation_channel_id=MODERATION_CHANNEL_ID,
        ban_channel_id=BAN_CHANNEL_ID,
        admin_role_id=ADMIN_ROLE_ID,
        verified_role_id=VERIFIED_ROLE_ID,
        verification_channel_id=VERIFICATION_CHANNEL_ID,
    )


@pytest.fixture()
def admin() -> FakeUser:
    return FakeUser(700000000000000007, name="admin", role_ids=[ADMIN_ROLE_ID])


@pytest.fixture()
def member() -> FakeUser:
    return FakeUser(800000000000000008, name="newcomer")


@pytest.fixture()
def http_error():
    """Factory fixture: ``http_error(discord.NotFound, 404)``."""
    return make_http_error


@pytest.fixture()
def make_user():
    """Factory fixture building :class:`FakeUser` objects."""
    return FakeUser


@pytest.fixture()
def async_iter():
    return AsyncIter
