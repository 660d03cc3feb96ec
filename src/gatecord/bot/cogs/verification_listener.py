"""Verification button listener cog.

The request buttons carry the applicant's ID in their custom id, so they are
not registered as persistent views. Instead every component interaction is
handed to the :class:`VerificationEngine`, which decodes the custom id.
"""

import discord
from discord.ext import commands

from gatecord.moderation.verification_workflow import VerificationEngine
from gatecord.util.logger import get_logger

logger = get_logger("verification_listener_cog")

GENERIC_ERROR_MESSAGE = "❌ An error occurred. Please contact an administrator."


class VerificationListenerCog(commands.Cog):
    """Cog that routes button clicks to the verification workflow."""

    def __init__(self, discord_bot_instance, engine: VerificationEngine):
        self.bot = discord_bot_instance
        self.engine = engine
        logger.info("Verification listener cog loaded")

    @commands.Cog.listener(name="on_interaction")
    async def on_interaction(self, interaction: discord.Interaction):
        if interaction.type is not discord.InteractionType.component:
            return

        try:
            await self.engine.handle_interaction(interaction)
        except Exception as exc:
            logger.exception("[VERIFY] Unhandled error for interaction %s: %s", interaction.custom_id, exc)
            if interaction.response.is_done():
                return
            try:
                await interaction.response.send_message(GENERIC_ERROR_MESSAGE, ephemeral=True)
            except discord.HTTPException as reply_exc:
                logger.error("[VERIFY] Failed to send error reply: %s", reply_exc)


def setup(discord_bot_instance, engine: VerificationEngine):
    """Register the VerificationListenerCog with the bot."""
    discord_bot_instance.add_cog(VerificationListenerCog(discord_bot_instance, engine))
