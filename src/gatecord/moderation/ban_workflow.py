"""
Ban channel workflow: text commands in, bans and a live ban list out.

Every message posted in the configured ban channel goes through
:meth:`BanWorkflowEngine.handle_message`:

1. Gate: bot authors, other channels and DMs are ignored. Without a ban
   channel or admin role configured nothing is handled at all.
2. Authorization: authors without the admin role get a short warning.
3. Parsing with :func:`parse_ban_command`.
4. Dispatch to help, unban, ban or the invalid-command reply.
5. After a successful ban or unban, the ban list message is refreshed.

Each handled message gets exactly one reply, and both the command and the
reply are deleted after a delay by the :class:`MessageCleanupScheduler`.
The list refresh re-reads every ban from Discord instead of patching the
previous list; its failures are logged and never reach the moderator.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import discord

from gatecord.configuration.app_configuration import CleanupDelays
from gatecord.configuration.bot_settings import BotSettings
from gatecord.datatypes.ban_datatypes import (
    ActionOutcome,
    BanRecord,
    BanRequest,
    HelpRequest,
    UnbanRequest,
)
from gatecord.datatypes.discord_datatypes import UserID
from gatecord.moderation.ban_list_renderer import render_ban_list
from gatecord.moderation.ban_parsing import parse_ban_command
from gatecord.moderation.errors import (
    AlreadyInState,
    GatecordError,
    PermissionDenied,
    TargetMissing,
    classify_http_error,
)
from gatecord.moderation.message_cleanup import MessageCleanupScheduler
from gatecord.repositories.ban_list_pointer_repo import BanListPointerRepo
from gatecord.ui.ban_embeds import build_ban_list_embed, build_help_embed
from gatecord.util.discord_utils import compose_audit_reason, has_role, is_bot_author, resolve_channel
from gatecord.util.logger import get_logger

logger = get_logger("ban_workflow")

NO_PERMISSION_MESSAGE = "❌ You do not have permission to do that."
INVALID_COMMAND_MESSAGE = "❓ Invalid command. Send `help` to see usage."
NOT_BANNED_MESSAGE = "❌ This user is not banned."
USER_NOT_FOUND_MESSAGE = "❌ User not found. Please check the ID."
MISSING_BAN_PERMISSION_MESSAGE = (
    "❌ The bot is missing the \"Ban Members\" permission, or the user's role is above the bot's."
)


class BanWorkflowEngine:
    """Handles the ban channel mini-protocol and keeps the ban list message current."""

    def __init__(
        self,
        bot: discord.Client,
        settings: BotSettings,
        pointer_repo: BanListPointerRepo,
        cleanup: MessageCleanupScheduler,
        delays: CleanupDelays = CleanupDelays(),
    ) -> None:
        self.bot = bot
        self.settings = settings
        self.pointer_repo = pointer_repo
        self.cleanup = cleanup
        self.delays = delays
        self._refresh_lock = asyncio.Lock()
        self._config_error_logged = False

    # --------------------------
    # Configuration gate
    # --------------------------
    @property
    def enabled(self) -> bool:
        return not self.settings.missing("ban_channel_id", "admin_role_id")

    def _check_config(self) -> bool:
        if self.enabled:
            return True
        if not self._config_error_logged:
            self.settings.log_missing("Ban system", "ban_channel_id", "admin_role_id")
            self._config_error_logged = True
        return False

    # --------------------------
    # Message entry point
    # --------------------------
    async def handle_message(self, message: discord.Message) -> None:
        """Process one message observed in any channel."""
        if is_bot_author(message.author):
            return
        if not self._check_config():
            return
        if message.guild is None or getattr(message.channel, "id", None) != self.settings.ban_channel_id:
            return

        if not has_role(message.author, self.settings.admin_role_id):
            logger.info("[BAN] Rejected command from %s (%s): missing admin role", message.author, message.author.id)
            reply = await self._reply(message, NO_PERMISSION_MESSAGE)
            self.cleanup.schedule(self.delays.unauthorized, message, reply)
            return

        request = parse_ban_command(message.content)
        logger.debug("[BAN] %s issued %s", message.author, request.kind)

        if isinstance(request, HelpRequest):
            reply = await self._reply(message, embed=build_help_embed(self.delays))
            self.cleanup.schedule(self.delays.help, message, reply)
            return

        if isinstance(request, UnbanRequest):
            outcome = await self.unban_user(message.guild, request.user_id, message.author)
        elif isinstance(request, BanRequest):
            outcome = await self.ban_user(message.guild, request.user_id, request.reason, message.author)
        else:
            reply = await self._reply(message, INVALID_COMMAND_MESSAGE)
            self.cleanup.schedule(self.delays.invalid, message, reply)
            return

        reply = await self._reply(message, outcome.message)
        self.cleanup.schedule(self.delays.action, message, reply)

        if outcome.success:
            await self.refresh_ban_list(message.channel, message.guild)

    async def _reply(
        self,
        message: discord.Message,
        content: Optional[str] = None,
        *,
        embed: Optional[discord.Embed] = None,
    ) -> Optional[discord.Message]:
        try:
            return await message.reply(content=content, embed=embed)
        except discord.HTTPException as exc:
            logger.warning("[BAN] Failed to reply to message %s: %s", message.id, exc)
            return None

    # --------------------------
    # Moderation actions
    # --------------------------
    @staticmethod
    def _http_failure(verb: str, exc: discord.HTTPException) -> GatecordError:
        if isinstance(exc, discord.Forbidden):
            return PermissionDenied(MISSING_BAN_PERMISSION_MESSAGE, detail=str(exc))
        return classify_http_error(exc, f"❌ Failed to {verb}: {exc.text or exc}")

    async def ban_user(
        self,
        guild: discord.Guild,
        user_id: UserID,
        reason: str,
        executor: discord.abc.User,
    ) -> ActionOutcome:
        """Ban ``user_id`` unless the user does not exist or is already banned."""
        try:
            try:
                user = await self.bot.fetch_user(user_id.to_int())
            except discord.NotFound:
                raise TargetMissing(USER_NOT_FOUND_MESSAGE)

            try:
                await guild.fetch_ban(user)
            except discord.NotFound:
                pass
            else:
                raise AlreadyInState(f"❌ **{user}** ({user.mention}) is already banned.")

            await guild.ban(user, reason=compose_audit_reason(reason, executor))
        except GatecordError as err:
            logger.info("[BAN] Ban of %s not performed: %s", user_id, err.user_message)
            return ActionOutcome(False, err.user_message)
        except discord.HTTPException as exc:
            logger.error("[BAN] Ban of %s failed: %s", user_id, exc)
            return ActionOutcome(False, self._http_failure("ban", exc).user_message)

        logger.info("[BAN] Banned %s (%s) | reason: %s | executor: %s", user, user_id, reason, executor)
        return ActionOutcome(True, f"✅ Banned **{user}** ({user.mention}).\n📝 Reason: {reason}", user)

    async def unban_user(
        self,
        guild: discord.Guild,
        user_id: UserID,
        executor: discord.abc.User,
    ) -> ActionOutcome:
        """Lift the ban on ``user_id`` if there is one."""
        try:
            try:
                ban_entry = await guild.fetch_ban(user_id.to_object())
            except discord.NotFound:
                raise TargetMissing(NOT_BANNED_MESSAGE)

            user = ban_entry.user
            try:
                await guild.unban(user, reason=compose_audit_reason("Unban", executor))
            except discord.NotFound:
                raise TargetMissing(NOT_BANNED_MESSAGE)
        except GatecordError as err:
            logger.info("[BAN] Unban of %s not performed: %s", user_id, err.user_message)
            return ActionOutcome(False, err.user_message)
        except discord.HTTPException as exc:
            logger.error("[BAN] Unban of %s failed: %s", user_id, exc)
            return ActionOutcome(False, self._http_failure("unban", exc).user_message)

        logger.info("[BAN] Unbanned %s (%s) | executor: %s", user, user_id, executor)
        return ActionOutcome(True, f"✅ Unbanned **{user}** ({user.mention}).", user)

    # --------------------------
    # Ban list message
    # --------------------------
    async def fetch_ban_records(self, guild: discord.Guild) -> list[BanRecord]:
        """Read every active ban, in the order Discord returns them."""
        return [
            BanRecord(user_id=UserID(entry.user.id), display_tag=str(entry.user), reason=entry.reason)
            async for entry in guild.bans(limit=None)
        ]

    async def refresh_ban_list(self, channel: discord.abc.Messageable, guild: discord.Guild) -> Optional[discord.Message]:
        """Re-render the ban list and edit the stored message, or post a new one.

        Returns the ban list message, or ``None`` if the refresh failed. Never raises.
        """
        async with self._refresh_lock:
            try:
                records = await self.fetch_ban_records(guild)
                embed = build_ban_list_embed(render_ban_list(records, guild.name))

                message_id = await self.pointer_repo.get_message_id()
                if message_id is not None:
                    try:
                        message = await channel.fetch_message(message_id)
                        await message.edit(embed=embed)
                        logger.info("[BAN LIST] Updated ban list message %s (%d bans)", message_id, len(records))
                        return message
                    except discord.NotFound:
                        logger.warning("[BAN LIST] Ban list message %s is gone; posting a new one", message_id)
                        await self.pointer_repo.clear()
                    except discord.HTTPException as exc:
                        logger.warning("[BAN LIST] Could not edit ban list message %s (%s); posting a new one", message_id, exc)

                message = await channel.send(embed=embed)
                await self.pointer_repo.set_message_id(message.id)
                logger.info("[BAN LIST] Posted ban list message %s (%d bans)", message.id, len(records))
                return message
            except Exception as exc:
                logger.exception("[BAN LIST] Failed to refresh the ban list: %s", exc)
                return None

    async def initialize_ban_list(self) -> Optional[discord.Message]:
        """Render the ban list once at startup so the channel reflects current bans."""
        if self.settings.ban_channel_id is None:
            logger.error("[BAN LIST] BAN_CHANNEL_ID is not set; skipping ban list initialization.")
            return None

        channel = await resolve_channel(self.bot, self.settings.ban_channel_id)
        guild = getattr(channel, "guild", None)
        if channel is None or guild is None:
            logger.error("[BAN LIST] Ban channel %s not found; skipping ban list initialization.", self.settings.ban_channel_id)
            return None

        message = await self.refresh_ban_list(channel, guild)
        if message is not None:
            logger.info("[BAN LIST] Ban list initialized.")
        return message
