"""Rendering of the ban list into a display document.

:func:`render_ban_list` is pure: it takes the bans in the order Discord
returned them and produces a :class:`BanListDocument`. Converting the
document into an embed lives in :mod:`gatecord.ui.ban_embeds`.
"""
from __future__ import annotations

from typing import Iterable, List

from gatecord.datatypes.ban_datatypes import (
    DEFAULT_BAN_REASON,
    BanListChunk,
    BanListDocument,
    BanRecord,
)

MAX_DISPLAY = 20
CHUNK_CEILING = 1000
MAX_REASON_LENGTH = 150

BAN_LIST_TITLE = "🚫 Banned Users"
FIRST_CHUNK_LABEL = "📋 User List"
# Embed fields need a non-empty name; a zero-width space renders as nothing.
CONTINUATION_LABEL = "\u200b"
BLOCK_SEPARATOR = "\n\n"


def shorten_reason(reason: str | None, limit: int = MAX_REASON_LENGTH) -> str:
    """Return ``reason`` (or the default placeholder) cut to ``limit`` characters."""
    text = (reason or "").strip() or DEFAULT_BAN_REASON
    if len(text) <= limit:
        return text
    return text[: limit - 1].rstrip() + "…"


def format_ban_block(index: int, record: BanRecord) -> str:
    """Format one ban as a three-line block."""
    return (
        f"{index}. **{record.display_tag}** ({record.user_id.mention})\n"
        f"   └ ID: `{record.user_id}`\n"
        f"   └ Reason: {shorten_reason(record.reason)}"
    )


def format_summary(total: int) -> str:
    if total == 0:
        return "No users are currently banned."
    noun = "user is" if total == 1 else "users are"
    return f"**{total}** {noun} currently banned."


def pack_chunks(blocks: Iterable[str], ceiling: int = CHUNK_CEILING) -> List[str]:
    """Greedily pack blocks into chunks no longer than ``ceiling``.

    Blocks are never split and keep their order. A block that is longer than
    the ceiling on its own still gets a chunk of its own.
    """
    chunks: List[str] = []
    current = ""
    for block in blocks:
        candidate = f"{current}{BLOCK_SEPARATOR}{block}" if current else block
        if len(candidate) > ceiling and current:
            chunks.append(current)
            current = block
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def render_ban_list(records: Iterable[BanRecord], guild_name: str) -> BanListDocument:
    """Render the current bans.

    Parameters
    ----------
    records:
        Active bans in the order Discord returned them; the order is kept.
    guild_name:
        Shown in the footer.

    Returns
    -------
    BanListDocument
        At most ``MAX_DISPLAY`` bans are written out; a ``"... and +K more"``
        line follows when there are more.
    """
    records = list(records)
    total = len(records)
    displayed = records[:MAX_DISPLAY]

    blocks = [format_ban_block(index, record) for index, record in enumerate(displayed, start=1)]
    hidden = total - len(displayed)
    if hidden > 0:
        blocks.append(f"... and +{hidden} more")

    chunks = [
        BanListChunk(label=FIRST_CHUNK_LABEL if position == 0 else CONTINUATION_LABEL, content=content)
        for position, content in enumerate(pack_chunks(blocks))
    ]

    return BanListDocument(
        title=BAN_LIST_TITLE,
        summary=format_summary(total),
        footer=f"{guild_name} ban management",
        total=total,
        displayed=len(displayed),
        chunks=chunks,
    )
