"""
Error taxonomy for the moderation and verification workflows.

Validation helpers raise these exceptions; each event handler entry point
catches them and turns ``user_message`` into a single reply. Failures coming
from Discord itself are mapped onto the same classes by
:func:`classify_http_error`.
"""

from __future__ import annotations

import discord


class GatecordError(Exception):
    """Base class for failures that end in a user-facing reply."""

    default_message = "❌ Something went wrong. Please try again later."

    def __init__(self, user_message: str | None = None, *, detail: str | None = None) -> None:
        self.user_message = user_message or self.default_message
        self.detail = detail
        super().__init__(detail or self.user_message)


class ConfigError(GatecordError):
    """A required setting is missing."""

    default_message = "❌ The bot is not fully configured. Please contact an administrator."


class PermissionDenied(GatecordError):
    """The actor lacks the admin role, or the bot lacks a Discord permission."""

    default_message = "❌ You do not have permission to do that."


class HierarchyError(GatecordError):
    """The bot's highest role is not above the role it should grant."""

    default_message = "❌ The bot's role is below the role it needs to manage."


class TargetMissing(GatecordError):
    """A referenced user, member, role, channel or message does not exist."""

    default_message = "❌ The requested target could not be found."


class ChannelUnreachable(TargetMissing):
    """A configured channel could not be fetched."""

    default_message = "❌ An error occurred. Please contact an administrator."


class AlreadyInState(GatecordError):
    """The requested change is already in effect (already banned, already verified)."""

    default_message = "ℹ️ Nothing to do; that is already the case."


class TransientError(GatecordError):
    """Rate limit, network or other HTTP failure; the moderator may retry."""

    default_message = "❌ Discord did not accept the request. Please try again."


def classify_http_error(exc: discord.HTTPException, user_message: str | None = None) -> GatecordError:
    """Map a py-cord HTTP exception onto the error taxonomy."""
    detail = str(exc)
    if isinstance(exc, discord.Forbidden):
        return PermissionDenied(user_message, detail=detail)
    if isinstance(exc, discord.NotFound):
        return TargetMissing(user_message, detail=detail)
    return TransientError(user_message, detail=detail)
