"""
discord_utils.py
================

Small stateless helpers around py-cord objects shared by the workflows.
"""

from __future__ import annotations

import datetime
import math
from typing import Optional, Union

import discord

from gatecord.util.logger import get_logger

logger = get_logger("discord_utils")

# Discord rejects audit log reasons longer than this
AUDIT_REASON_LIMIT = 512


def has_role(member: Union[discord.Member, discord.User, None], role_id: Optional[int]) -> bool:
    """Return True if ``member`` currently holds the role ``role_id``.

    Plain users (DM authors, members that left) have no roles and always fail.
    """
    if member is None or role_id is None:
        return False
    return any(getattr(role, "id", None) == role_id for role in getattr(member, "roles", ()) or ())


def is_bot_author(author: Union[discord.User, discord.Member, None]) -> bool:
    """Check if a message author is a bot account (including this bot)."""
    return bool(getattr(author, "bot", False))


def compose_audit_reason(reason: str, executor: object) -> str:
    """Build ``"<reason> | executor: <tag>"`` and keep it under the audit log limit."""
    suffix = f" | executor: {executor}"
    room = AUDIT_REASON_LIMIT - len(suffix)
    if len(reason) > room:
        reason = reason[: max(0, room - 1)] + "…"
    return f"{reason}{suffix}"


def format_footer_timestamp(moment: Optional[datetime.datetime] = None) -> str:
    """Return a compact UTC timestamp for embed footers."""
    moment = moment or datetime.datetime.now(datetime.timezone.utc)
    return moment.astimezone(datetime.timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def relative_timestamp(moment: Optional[datetime.datetime]) -> str:
    """Render ``moment`` as a Discord relative timestamp (``<t:...:R>``)."""
    if moment is None:
        return "Unknown"
    return f"<t:{int(moment.timestamp())}:R>"


async def resolve_channel(bot: discord.Client, channel_id: int):
    """Return the channel from cache or the API, or ``None`` if it cannot be fetched."""
    channel = bot.get_channel(channel_id)
    if channel is not None:
        return channel
    try:
        return await bot.fetch_channel(channel_id)
    except discord.HTTPException as exc:
        logger.error("Could not fetch channel %s: %s", channel_id, exc)
        return None


async def resolve_member(guild: discord.Guild, user_id: int) -> Optional[discord.Member]:
    """Return the guild member from cache or the API, or ``None`` if they are not in the guild.

    Other HTTP failures propagate; a rate limit must not look like a departed member.
    """
    member = guild.get_member(user_id)
    if member is not None:
        return member
    try:
        return await guild.fetch_member(user_id)
    except discord.NotFound:
        return None


def gateway_latency_ms(bot) -> Optional[int]:
    """Gateway heartbeat latency in milliseconds, or ``None`` before the first heartbeat."""
    latency = getattr(bot, "latency", None)
    if latency is None or not math.isfinite(latency):
        return None
    return round(latency * 1000)
