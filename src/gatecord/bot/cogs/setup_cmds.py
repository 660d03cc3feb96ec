"""
Server setup commands.

``/setup-verify`` posts the verification board, the public message whose
button starts a verification request. It may only target the channel named
by ``VERIFICATION_CHANNEL_ID``.
"""

import discord
from discord import Option
from discord.ext import commands

from gatecord.configuration.bot_settings import BotSettings
from gatecord.ui.verification_embeds import build_board_embed, build_board_view
from gatecord.util.logger import get_logger

logger = get_logger("setup_commands")

MISSING_CHANNEL_MESSAGE = (
    "❌ Error: `VERIFICATION_CHANNEL_ID` is not set in the environment. Please check `.env`."
)
BOARD_FAILED_MESSAGE = (
    "❌ Error: failed to post the verification board. "
    "Check that the bot has the \"Send Messages\" permission there."
)


class SetupCog(commands.Cog):
    """Cog with one-time setup commands for administrators."""

    def __init__(self, bot: discord.Bot, settings: BotSettings):
        self.bot = bot
        self.settings = settings
        logger.info("Setup cog loaded")

    @commands.slash_command(
        name="setup-verify",
        description="Post the verification board.",
        default_member_permissions=discord.Permissions(administrator=True),
    )
    async def setup_verify(
        self,
        application_context: discord.ApplicationContext,
        channel: Option(discord.TextChannel, "Channel for the verification board", required=True),  # type: ignore
    ) -> None:
        expected_id = self.settings.verification_channel_id
        if expected_id is None:
            self.settings.log_missing("/setup-verify", "verification_channel_id")
            await application_context.respond(MISSING_CHANNEL_MESSAGE, ephemeral=True)
            return

        if channel.id != expected_id:
            await application_context.respond(
                "❌ The selected channel is not the verification channel.\n"
                f"Please choose <#{expected_id}>.",
                ephemeral=True,
            )
            return

        guild_name = application_context.guild.name if application_context.guild else "Server"
        view = build_board_view()
        try:
            await channel.send(embed=build_board_embed(guild_name), view=view)
        except discord.HTTPException as exc:
            logger.error("[SETUP] Failed to post verification board in %s: %s", channel.id, exc)
            await application_context.respond(BOARD_FAILED_MESSAGE, ephemeral=True)
            return
        finally:
            view.stop()

        logger.info(
            "[SETUP] Verification board posted in #%s (%s) | executor: %s",
            channel.name,
            channel.id,
            application_context.user,
        )
        await application_context.respond(f"✅ Posted the verification board in <#{channel.id}>.", ephemeral=True)


def setup(bot: discord.Bot, settings: BotSettings) -> None:
    """Register the SetupCog with the bot."""
    bot.add_cog(SetupCog(bot, settings))
