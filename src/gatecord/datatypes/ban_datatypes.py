"""
Data structures for the ban channel workflow.

The ban commands form a closed set of request variants, each tagged with a
:class:`BanCommandType`. The parser in :mod:`gatecord.moderation.ban_parsing`
is the only place that produces them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, List, Optional

from gatecord.datatypes.discord_datatypes import UserID


DEFAULT_BAN_REASON = "No reason given"


class BanCommandType(Enum):
    """Enumeration of the text commands accepted in the ban channel."""

    HELP = "help"
    UNBAN = "unban"
    BAN = "ban"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class BanCommandRequest:
    """Base class of every parsed ban channel command; variants set ``kind``."""

    kind: ClassVar[BanCommandType]


@dataclass(frozen=True, slots=True)
class HelpRequest(BanCommandRequest):
    kind: ClassVar[BanCommandType] = BanCommandType.HELP


@dataclass(frozen=True, slots=True)
class UnbanRequest(BanCommandRequest):
    kind: ClassVar[BanCommandType] = BanCommandType.UNBAN

    user_id: UserID


@dataclass(frozen=True, slots=True)
class BanRequest(BanCommandRequest):
    kind: ClassVar[BanCommandType] = BanCommandType.BAN

    user_id: UserID
    reason: str = DEFAULT_BAN_REASON


@dataclass(frozen=True, slots=True)
class UnknownRequest(BanCommandRequest):
    kind: ClassVar[BanCommandType] = BanCommandType.UNKNOWN

    text: str = ""


@dataclass(frozen=True, slots=True)
class BanRecord:
    """One active ban as reported by Discord.

    Attributes:
        user_id: Banned user's ID.
        display_tag: Username (or legacy ``name#discriminator``) at fetch time.
        reason: Audit log reason, ``None`` when the ban was issued without one.
    """
    user_id: UserID
    display_tag: str
    reason: Optional[str] = None


@dataclass(frozen=True, slots=True)
class BanListChunk:
    """One embed field of the rendered ban list."""
    label: str
    content: str


@dataclass(frozen=True, slots=True)
class BanListDocument:
    """Rendered ban list, independent of any Discord object.

    Attributes:
        title: Embed title.
        summary: One-line count of banned users.
        footer: Footer text naming the guild.
        total: Number of active bans.
        displayed: Number of bans written out in ``chunks``.
        chunks: Ordered content blocks, each below the chunk ceiling.
    """
    title: str
    summary: str
    footer: str
    total: int
    displayed: int
    chunks: List[BanListChunk] = field(default_factory=list)


@dataclass(slots=True)
class ActionOutcome:
    """Result of a ban or unban attempt, ready to be sent as a reply."""
    success: bool
    message: str
    user: Any = None
