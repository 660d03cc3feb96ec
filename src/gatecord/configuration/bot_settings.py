"""
Identifiers and secrets read from the environment.

The settings object is built once at startup and handed to every component
that needs it; nothing below the bootstrap reads ``os.environ`` directly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from gatecord.util.logger import get_logger

logger = get_logger("bot_settings")

DEFAULT_PORT = 8080


def parse_snowflake(environ: Mapping[str, str], name: str) -> Optional[int]:
    """Return the integer value of ``environ[name]`` or ``None`` when unset or invalid."""
    raw = (environ.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.error("[SETTINGS] %s must be a numeric Discord ID, got %r", name, raw)
        return None


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Runtime identifiers for the single community server the bot serves.

    Every identifier is optional. A component whose identifiers are missing
    logs an error and stays inactive instead of crashing the process.
    """

    token: Optional[str] = None
    guild_id: Optional[int] = None
    moderation_channel_id: Optional[int] = None
    ban_channel_id: Optional[int] = None
    admin_role_id: Optional[int] = None
    verified_role_id: Optional[int] = None
    verification_channel_id: Optional[int] = None
    app_url: Optional[str] = None
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "BotSettings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        if environ is None:
            environ = os.environ

        port_raw = (environ.get("PORT") or "").strip()
        try:
            port = int(port_raw) if port_raw else DEFAULT_PORT
        except ValueError:
            logger.error("[SETTINGS] PORT must be an integer, got %r; using %d", port_raw, DEFAULT_PORT)
            port = DEFAULT_PORT

        return cls(
            token=(environ.get("DISCORD_BOT_TOKEN") or "").strip() or None,
            guild_id=parse_snowflake(environ, "GUILD_ID"),
            moderation_channel_id=parse_snowflake(environ, "MODERATION_CHANNEL_ID"),
            ban_channel_id=parse_snowflake(environ, "BAN_CHANNEL_ID"),
            admin_role_id=parse_snowflake(environ, "ADMIN_ROLE_ID"),
            verified_role_id=parse_snowflake(environ, "VERIFIED_ROLE_ID"),
            verification_channel_id=parse_snowflake(environ, "VERIFICATION_CHANNEL_ID"),
            app_url=(environ.get("APP_URL") or "").strip() or None,
            port=port,
        )

    def missing(self, *names: str) -> list[str]:
        """Return the environment variable names of the given fields that are unset."""
        return [name.upper() for name in names if getattr(self, name) is None]

    def log_missing(self, component: str, *names: str) -> bool:
        """Log every missing field for ``component``; return True when something is missing."""
        missing = self.missing(*names)
        if missing:
            logger.error(
                "[SETTINGS] %s is disabled; missing environment variables: %s",
                component,
                ", ".join(missing),
            )
        return bool(missing)
