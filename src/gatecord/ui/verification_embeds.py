"""
Embeds and button views for the verification workflow.

A verification request is a message in the moderation channel carrying an
embed that describes the applicant and two buttons, Approve and Deny, whose
custom ids hold the applicant's user ID. There is no stored request record:
the message itself is the request, and its colour, footer and button state
show where it is in its lifecycle (see :class:`VerificationState`).
"""

from __future__ import annotations

import datetime
from typing import Optional

import discord

from gatecord.datatypes.discord_datatypes import UserID
from gatecord.datatypes.verification_datatypes import (
    VERIFY_BUTTON_ID,
    VerificationState,
    approve_custom_id,
    deny_custom_id,
)
from gatecord.util.discord_utils import format_footer_timestamp, relative_timestamp

STATE_COLORS = {
    VerificationState.OPEN: discord.Color(0xFFC107),
    VerificationState.APPROVED: discord.Color(0x28A745),
    VerificationState.DENIED: discord.Color(0xDC3545),
}
BOARD_COLOR = discord.Color(0x0099FF)

TARGET_MISSING_NOTICE = "⚠ The target user is no longer in this server."


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def build_request_embed(member: discord.Member) -> discord.Embed:
    """Describe the applicant for the moderators."""
    embed = discord.Embed(
        title="📝 Verification Request",
        description=f"{member.mention} ({member}) has requested verification.",
        color=STATE_COLORS[VerificationState.OPEN],
        timestamp=_now(),
    )
    embed.set_thumbnail(url=member.display_avatar.url)
    embed.add_field(name="Username", value=str(member), inline=True)
    embed.add_field(name="User ID", value=str(member.id), inline=True)
    embed.add_field(name="\u200b", value="\u200b", inline=True)
    embed.add_field(name="Account Created", value=relative_timestamp(member.created_at), inline=True)
    embed.add_field(name="Joined Server", value=relative_timestamp(member.joined_at), inline=True)
    embed.set_footer(text="Verification system")
    return embed


def build_request_view(user_id: UserID) -> discord.ui.View:
    """Approve and Deny buttons for one applicant."""
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Button(
            label="Approve",
            style=discord.ButtonStyle.success,
            emoji="✅",
            custom_id=approve_custom_id(user_id),
        )
    )
    view.add_item(
        discord.ui.Button(
            label="Deny",
            style=discord.ButtonStyle.danger,
            emoji="❌",
            custom_id=deny_custom_id(user_id),
        )
    )
    return view


def build_disabled_view(message: Optional[discord.Message]) -> discord.ui.View:
    """Rebuild the components of ``message`` with every item disabled."""
    if message is None or not message.components:
        return discord.ui.View(timeout=None)
    view = discord.ui.View.from_message(message, timeout=None)
    for item in view.children:
        item.disabled = True
    return view


def build_decided_embed(
    original: Optional[discord.Embed],
    state: VerificationState,
    actor: object,
    *,
    already_verified: bool = False,
) -> discord.Embed:
    """Recolour the request embed and stamp who decided it and when."""
    embed = original.copy() if original is not None else discord.Embed(title="📝 Verification Request")
    embed.color = STATE_COLORS.get(state, STATE_COLORS[VerificationState.OPEN])

    stamp = format_footer_timestamp()
    if state is VerificationState.APPROVED and already_verified:
        footer = f"Already verified (checked by {actor}) | {stamp}"
    elif state is VerificationState.APPROVED:
        footer = f"Approved by {actor} | {stamp}"
    elif state is VerificationState.DENIED:
        footer = f"Denied by {actor} | {stamp}"
    else:
        footer = stamp
    embed.set_footer(text=footer)
    return embed


def build_approval_dm_embed(guild_name: str) -> discord.Embed:
    embed = discord.Embed(
        title="✅ Verification Complete",
        description=(
            f"Your verification in **{guild_name}** has been approved!\n\n"
            "You now have access to all channels of the server."
        ),
        color=STATE_COLORS[VerificationState.APPROVED],
        timestamp=_now(),
    )
    embed.set_footer(text=guild_name)
    return embed


def build_denial_dm_embed(guild_name: str) -> discord.Embed:
    embed = discord.Embed(
        title="❌ Verification Denied",
        description=(
            f"Your verification request in **{guild_name}** was denied.\n\n"
            "If you have questions, please contact the server administrators."
        ),
        color=STATE_COLORS[VerificationState.DENIED],
        timestamp=_now(),
    )
    embed.set_footer(text=guild_name)
    return embed


def build_board_embed(guild_name: str) -> discord.Embed:
    """The public board members click to ask for verification."""
    embed = discord.Embed(
        title="🔐 Server Verification",
        description=(
            "Press the button below to verify yourself as a member of this server.\n\n"
            "Once an administrator approves your request you will have access to all channels."
        ),
        color=BOARD_COLOR,
        timestamp=_now(),
    )
    embed.set_footer(text=f"{guild_name} verification system")
    return embed


def build_board_view() -> discord.ui.View:
    view = discord.ui.View(timeout=None)
    view.add_item(
        discord.ui.Button(
            label="✓ Verify",
            style=discord.ButtonStyle.success,
            emoji="🔓",
            custom_id=VERIFY_BUTTON_ID,
        )
    )
    return view
