"""
Button-driven member verification.

Three buttons drive the workflow, all routed through
:meth:`VerificationEngine.handle_interaction`:

- ``verify_user_button``: a member asks to be verified. A request message
  with Approve and Deny buttons is posted to the moderation channel.
- ``approve_user:<id>``: an administrator approves. After the permission,
  role and hierarchy checks the verified role is granted and the request
  message turns green with its buttons disabled.
- ``deny_user:<id>``: an administrator denies. The request message turns red
  with its buttons disabled.

Approval is idempotent: approving an applicant who already holds the verified
role closes the request without another role grant. Direct messages to the
applicant are sent after the request message has been updated and their
failure is only logged.
"""

from __future__ import annotations

from typing import Optional

import discord

from gatecord.configuration.bot_settings import BotSettings
from gatecord.datatypes.discord_datatypes import UserID
from gatecord.datatypes.verification_datatypes import (
    VerificationActionType,
    VerificationState,
    parse_verification_custom_id,
)
from gatecord.moderation.errors import (
    ChannelUnreachable,
    ConfigError,
    GatecordError,
    HierarchyError,
    PermissionDenied,
    TransientError,
    classify_http_error,
)
from gatecord.ui.verification_embeds import (
    TARGET_MISSING_NOTICE,
    build_approval_dm_embed,
    build_decided_embed,
    build_denial_dm_embed,
    build_disabled_view,
    build_request_embed,
    build_request_view,
)
from gatecord.util.discord_utils import has_role, resolve_channel, resolve_member
from gatecord.util.logger import get_logger

logger = get_logger("verification_workflow")

ALREADY_VERIFIED_MESSAGE = "✅ You are already verified."
REQUEST_SUBMITTED_MESSAGE = "✅ Your verification request has been submitted. Please wait for an administrator to approve it."
REQUEST_FAILED_MESSAGE = "❌ Failed to submit your verification request. Please contact an administrator."
BOT_MISSING_MANAGE_ROLES_MESSAGE = (
    "❌ The bot is missing the \"Manage Roles\" permission. Please check the server settings."
)
VERIFIED_ROLE_MISSING_MESSAGE = "❌ The verified role was not found. Please check VERIFIED_ROLE_ID."
GRANT_FORBIDDEN_MESSAGE = (
    "❌ The bot is not allowed to grant the role. Check the \"Manage Roles\" permission and the role order."
)
GRANT_FAILED_MESSAGE = "❌ Failed to grant the verified role."


class VerificationEngine:
    """Runs the request / approve / deny workflow for verification buttons."""

    def __init__(self, bot: discord.Client, settings: BotSettings) -> None:
        self.bot = bot
        self.settings = settings

    # --------------------------
    # Entry point
    # --------------------------
    async def handle_interaction(self, interaction: discord.Interaction) -> Optional[VerificationState]:
        """Handle a component interaction if it belongs to the verification workflow.

        Returns the resulting request state for approve/deny clicks, ``OPEN``
        for a submitted request, and ``None`` when the interaction was not a
        verification button or ended in an error reply.
        """
        action = parse_verification_custom_id(getattr(interaction, "custom_id", None))
        if action is None:
            logger.warning("[VERIFY] Unknown button interaction: %s", getattr(interaction, "custom_id", None))
            return None

        try:
            if action.kind is VerificationActionType.REQUEST:
                return await self.request_verification(interaction)
            if action.kind is VerificationActionType.APPROVE:
                return await self.approve(interaction, action.user_id)
            return await self.deny(interaction, action.user_id)
        except GatecordError as err:
            logger.info("[VERIFY] %s by %s ended with %s: %s", action.kind, interaction.user, type(err).__name__, err)
            await self.send_ephemeral(interaction, err.user_message)
        except discord.HTTPException as exc:
            logger.error("[VERIFY] Discord rejected %s by %s: %s", action.kind, interaction.user, exc)
            await self.send_ephemeral(interaction, classify_http_error(exc).user_message)
        return None

    # --------------------------
    # Self-request
    # --------------------------
    async def request_verification(self, interaction: discord.Interaction) -> VerificationState:
        """Post a verification request for the clicking member."""
        self._require_settings("Verification requests", "moderation_channel_id", "verified_role_id")
        member = interaction.user

        if has_role(member, self.settings.verified_role_id):
            await self.send_ephemeral(interaction, ALREADY_VERIFIED_MESSAGE)
            return VerificationState.APPROVED

        channel = await resolve_channel(self.bot, self.settings.moderation_channel_id)
        if channel is None:
            logger.error("[VERIFY] Moderation channel %s not found", self.settings.moderation_channel_id)
            raise ChannelUnreachable()

        view = build_request_view(UserID.from_user(member))
        try:
            await channel.send(embed=build_request_embed(member), view=view)
        except discord.HTTPException as exc:
            logger.error("[VERIFY] Failed to post verification request for %s: %s", member, exc)
            raise TransientError(REQUEST_FAILED_MESSAGE, detail=str(exc))
        finally:
            # Clicks are routed by on_interaction; drop the view from the client view store
            view.stop()

        logger.info("[VERIFY] Verification request submitted: %s (%s)", member, member.id)
        await self.send_ephemeral(interaction, REQUEST_SUBMITTED_MESSAGE)
        return VerificationState.OPEN

    # --------------------------
    # Approve
    # --------------------------
    async def approve(self, interaction: discord.Interaction, user_id: UserID) -> VerificationState:
        """Grant the verified role to ``user_id`` and close the request."""
        self._require_settings("Verification approval", "admin_role_id", "verified_role_id")
        self._require_admin(interaction.user)
        guild = interaction.guild

        target = await resolve_member(guild, user_id.to_int())
        if target is None:
            logger.info("[VERIFY] Approval target %s is no longer in the server", user_id)
            view = build_disabled_view(interaction.message)
            await interaction.response.edit_message(content=TARGET_MISSING_NOTICE, view=view)
            view.stop()
            return VerificationState.TARGET_MISSING

        role = self._validate_role_grant(guild)

        if has_role(target, role.id):
            await self._close_request(interaction, VerificationState.APPROVED, already_verified=True)
            logger.info("[VERIFY] %s (%s) was already verified | checked by %s", target, target.id, interaction.user)
            return VerificationState.APPROVED

        try:
            await target.add_roles(role, reason=f"Approved by {interaction.user}")
        except discord.Forbidden as exc:
            raise PermissionDenied(GRANT_FORBIDDEN_MESSAGE, detail=str(exc))
        except discord.HTTPException as exc:
            raise TransientError(GRANT_FAILED_MESSAGE, detail=str(exc))

        await self._close_request(interaction, VerificationState.APPROVED)
        logger.info("[VERIFY] Approved %s (%s) | approver: %s", target, target.id, interaction.user)

        await self._notify(target, build_approval_dm_embed(guild.name))
        return VerificationState.APPROVED

    def _validate_role_grant(self, guild: discord.Guild) -> discord.Role:
        """Check, before any mutation, that the bot can grant the verified role."""
        me = guild.me
        if not me.guild_permissions.manage_roles:
            raise PermissionDenied(BOT_MISSING_MANAGE_ROLES_MESSAGE)

        role = guild.get_role(self.settings.verified_role_id)
        if role is None:
            raise ConfigError(VERIFIED_ROLE_MISSING_MESSAGE)

        if me.top_role.position <= role.position:
            raise HierarchyError(
                f"❌ The bot's role is below the verified role \"{role.name}\", so it cannot grant it.\n"
                "Move the bot's role above the verified role in the server settings."
            )
        return role

    # --------------------------
    # Deny
    # --------------------------
    async def deny(self, interaction: discord.Interaction, user_id: UserID) -> VerificationState:
        """Close the request as denied; the applicant may already have left."""
        self._require_settings("Verification denial", "admin_role_id")
        self._require_admin(interaction.user)
        guild = interaction.guild

        try:
            target = await resolve_member(guild, user_id.to_int())
        except discord.HTTPException as exc:
            logger.warning("[VERIFY] Could not look up denied user %s: %s", user_id, exc)
            target = None

        await self._close_request(interaction, VerificationState.DENIED)

        if target is None:
            logger.info("[VERIFY] Denied user %s (not in server) | denier: %s", user_id, interaction.user)
            return VerificationState.DENIED

        logger.info("[VERIFY] Denied %s (%s) | denier: %s", target, target.id, interaction.user)
        await self._notify(target, build_denial_dm_embed(guild.name))
        return VerificationState.DENIED

    # --------------------------
    # Helpers
    # --------------------------
    def _require_settings(self, component: str, *names: str) -> None:
        if self.settings.log_missing(component, *names):
            raise ConfigError()

    def _require_admin(self, member) -> None:
        if not has_role(member, self.settings.admin_role_id):
            raise PermissionDenied()

    async def _close_request(
        self,
        interaction: discord.Interaction,
        state: VerificationState,
        *,
        already_verified: bool = False,
    ) -> None:
        message = interaction.message
        original = message.embeds[0] if message is not None and message.embeds else None
        embed = build_decided_embed(original, state, interaction.user, already_verified=already_verified)
        view = build_disabled_view(message)
        await interaction.response.edit_message(embed=embed, view=view)
        view.stop()

    async def _notify(self, member: discord.Member, embed: discord.Embed) -> None:
        """Best-effort direct message; failures never affect the decision."""
        try:
            await member.send(embed=embed)
        except Exception as exc:
            logger.info("[VERIFY] Could not send DM to %s (%s): %s", member, member.id, exc)

    async def send_ephemeral(self, interaction: discord.Interaction, content: str) -> None:
        try:
            if interaction.response.is_done():
                await interaction.followup.send(content, ephemeral=True)
            else:
                await interaction.response.send_message(content, ephemeral=True)
        except discord.HTTPException as exc:
            logger.error("[VERIFY] Failed to send ephemeral reply: %s", exc)
