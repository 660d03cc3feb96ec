from types import SimpleNamespace
from unittest.mock import patch

import discord
import pytest

from gatecord.configuration.app_configuration import CleanupDelays
from gatecord.datatypes.ban_datatypes import BanListChunk, BanListDocument
from gatecord.datatypes.discord_datatypes import UserID
from gatecord.datatypes.verification_datatypes import VERIFY_BUTTON_ID, VerificationState
from gatecord.ui.ban_embeds import BAN_LIST_COLOR, build_ban_list_embed, build_help_embed
from gatecord.ui.verification_embeds import (
    STATE_COLORS,
    build_board_embed,
    build_board_view,
    build_decided_embed,
    build_disabled_view,
    build_request_view,
)


def test_ban_list_embed_has_one_field_per_chunk():
    document = BanListDocument(
        title="🚫 Banned Users",
        summary="**2** users are currently banned.",
        footer="Guild ban management",
        total=2,
        displayed=2,
        chunks=[BanListChunk("📋 User List", "first"), BanListChunk("\u200b", "second")],
    )

    embed = build_ban_list_embed(document)

    assert embed.color == BAN_LIST_COLOR
    assert embed.description == document.summary
    assert [(f.name, f.value, f.inline) for f in embed.fields] == [
        ("📋 User List", "first", False),
        ("\u200b", "second", False),
    ]
    assert embed.footer.text == "Guild ban management"


def test_help_embed_mentions_configured_delays():
    embed = build_help_embed(CleanupDelays(action=8, help=20))
    tips = embed.fields[2].value
    assert "8 seconds" in tips
    assert "20 seconds" in tips


def test_decided_embed_keeps_original_content():
    original = discord.Embed(title="📝 Verification Request", description="<@1> asked", color=STATE_COLORS[VerificationState.OPEN])
    original.add_field(name="User ID", value="1")

    with patch("gatecord.ui.verification_embeds.format_footer_timestamp", return_value="STAMP"):
        denied = build_decided_embed(original, VerificationState.DENIED, "mod")

    assert denied.description == "<@1> asked"
    assert denied.fields[0].value == "1"
    assert denied.color == STATE_COLORS[VerificationState.DENIED]
    assert denied.footer.text == "Denied by mod | STAMP"
    # The original embed is not modified
    assert original.color == STATE_COLORS[VerificationState.OPEN]


def test_decided_embed_without_original():
    embed = build_decided_embed(None, VerificationState.APPROVED, "mod", already_verified=True)
    assert embed.title == "📝 Verification Request"
    assert embed.footer.text.startswith("Already verified (checked by mod) | ")


@pytest.mark.asyncio
async def test_request_view_buttons():
    view = build_request_view(UserID(42))
    approve, deny = view.children
    assert (approve.label, approve.style, approve.custom_id) == ("Approve", discord.ButtonStyle.success, "approve_user:42")
    assert (deny.label, deny.style, deny.custom_id) == ("Deny", discord.ButtonStyle.danger, "deny_user:42")
    assert view.timeout is None


@pytest.mark.asyncio
async def test_disabled_view_disables_every_button():
    message = SimpleNamespace(components=["row"])
    source = build_request_view(UserID(42))

    with patch("discord.ui.View.from_message", return_value=source) as from_message:
        view = build_disabled_view(message)

    from_message.assert_called_once_with(message, timeout=None)
    assert all(item.disabled for item in view.children)


@pytest.mark.asyncio
async def test_disabled_view_for_message_without_components():
    assert build_disabled_view(SimpleNamespace(components=[])).children == []
    assert build_disabled_view(None).children == []


@pytest.mark.asyncio
async def test_board_embed_and_view():
    embed = build_board_embed("Test Guild")
    assert embed.footer.text == "Test Guild verification system"

    (button,) = build_board_view().children
    assert button.custom_id == VERIFY_BUTTON_ID
    assert button.style == discord.ButtonStyle.success
