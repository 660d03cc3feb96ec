"""Parsing of the plain-text commands accepted in the ban channel.

The function here is pure and is the single place where ban channel text is
pattern-matched. Patterns are tried in a fixed priority order and the first
match wins:

1. ``help`` / ``!help`` (any case)                -> :class:`HelpRequest`
2. ``unban <id>`` / ``!unban <id>`` (any case)     -> :class:`UnbanRequest`
3. ``<id> <reason...>``                            -> :class:`BanRequest` with the reason
4. ``<id>``                                        -> :class:`BanRequest` with the default reason
5. anything else                                   -> :class:`UnknownRequest`

An ``<id>`` is a 17 to 19 digit (ASCII) Discord snowflake. Reasons must fit on
one line and are kept verbatim after trimming. They are not length-limited
here; the ban list renderer shortens them for display.

Example usage
    >>> parse_ban_command("!unban 123456789012345678")
    UnbanRequest(user_id=UserID('123456789012345678'))
"""
from __future__ import annotations

import re

from gatecord.datatypes.ban_datatypes import (
    DEFAULT_BAN_REASON,
    BanCommandRequest,
    BanRequest,
    HelpRequest,
    UnbanRequest,
    UnknownRequest,
)
from gatecord.datatypes.discord_datatypes import UserID

HELP_PATTERN = re.compile(r"^!?help$", re.IGNORECASE)
UNBAN_PATTERN = re.compile(r"^!?unban\s+([0-9]{17,19})$", re.IGNORECASE)
BAN_WITH_REASON_PATTERN = re.compile(r"^([0-9]{17,19})\s+(.+)$")
BAN_ONLY_PATTERN = re.compile(r"^([0-9]{17,19})$")


def parse_ban_command(text: str | None) -> BanCommandRequest:
    """Parse ban channel text into a command request.

    Parameters
    ----------
    text:
        Raw message content. ``None`` is treated as empty text.

    Returns
    -------
    BanCommandRequest
        One of :class:`HelpRequest`, :class:`UnbanRequest`,
        :class:`BanRequest` or :class:`UnknownRequest`.
    """
    trimmed = (text or "").strip()

    if HELP_PATTERN.match(trimmed):
        return HelpRequest()

    match = UNBAN_PATTERN.match(trimmed)
    if match:
        return UnbanRequest(user_id=UserID(match.group(1)))

    match = BAN_WITH_REASON_PATTERN.match(trimmed)
    if match:
        reason = match.group(2).strip()
        if reason:
            return BanRequest(user_id=UserID(match.group(1)), reason=reason)

    match = BAN_ONLY_PATTERN.match(trimmed)
    if match:
        return BanRequest(user_id=UserID(match.group(1)), reason=DEFAULT_BAN_REASON)

    return UnknownRequest(text=trimmed)
