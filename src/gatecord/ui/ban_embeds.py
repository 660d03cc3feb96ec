"""
Embeds shown in the ban channel.

This module converts the pure :class:`BanListDocument` into a Discord embed
and builds the help embed for the ban channel commands.
"""

import datetime

import discord

from gatecord.configuration.app_configuration import CleanupDelays
from gatecord.datatypes.ban_datatypes import BanListDocument

BAN_LIST_COLOR = discord.Color(0xDC3545)
HELP_COLOR = discord.Color(0x0099FF)

EXAMPLE_USER_ID = "123456789012345678"


def _format_seconds(seconds: float) -> str:
    return f"{seconds:g}"


def build_ban_list_embed(document: BanListDocument) -> discord.Embed:
    """Create the ban list embed from a rendered document."""
    embed = discord.Embed(
        title=document.title,
        description=document.summary,
        color=BAN_LIST_COLOR,
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    for chunk in document.chunks:
        embed.add_field(name=chunk.label, value=chunk.content, inline=False)
    embed.set_footer(text=document.footer)
    return embed


def build_help_embed(delays: CleanupDelays) -> discord.Embed:
    """Create the help embed describing the ban channel commands."""
    embed = discord.Embed(
        title="📋 Ban System Help",
        description="Ban and unban users by posting in this channel.",
        color=HELP_COLOR,
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    embed.add_field(
        name="🔨 Ban",
        value=(
            "```\nUserID\n```\n"
            "```\nUserID reason\n```\n"
            f"Example: `{EXAMPLE_USER_ID} spamming invites`"
        ),
        inline=False,
    )
    embed.add_field(
        name="✅ Unban",
        value=(
            "```\n!unban UserID\n```\n"
            "```\nunban UserID\n```\n"
            f"Example: `!unban {EXAMPLE_USER_ID}`"
        ),
        inline=False,
    )
    embed.add_field(
        name="💡 Tips",
        value="\n".join(
            [
                "• Right-click a user and choose \"Copy User ID\" to get their ID",
                "• A reason is optional but recommended for the record",
                f"• Commands and replies are deleted after {_format_seconds(delays.action)} seconds",
                f"• This help is deleted after {_format_seconds(delays.help)} seconds",
            ]
        ),
        inline=False,
    )
    embed.set_footer(text="Ban management")
    return embed
