"""Ban channel listener cog.

Feeds every message into the :class:`BanWorkflowEngine` and renders the ban
list once the gateway connection is ready.
"""

import discord
from discord.ext import commands

from gatecord.moderation.ban_workflow import BanWorkflowEngine
from gatecord.util.logger import get_logger

logger = get_logger("ban_listener_cog")


class BanListenerCog(commands.Cog):
    """Cog that connects message events to the ban workflow."""

    def __init__(self, discord_bot_instance, engine: BanWorkflowEngine):
        self.bot = discord_bot_instance
        self.engine = engine
        self._ban_list_initialized = False
        logger.info("Ban listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """Render the ban list on the first ready event only; reconnects fire it again."""
        if self._ban_list_initialized:
            return
        self._ban_list_initialized = True
        try:
            await self.engine.initialize_ban_list()
        except Exception as exc:
            logger.exception("[BAN LIST] Initialization failed: %s", exc)

    @commands.Cog.listener(name="on_message")
    async def on_message(self, message: discord.Message):
        try:
            await self.engine.handle_message(message)
        except Exception as exc:
            logger.exception("[BAN] Unhandled error while processing message %s: %s", getattr(message, "id", "?"), exc)


def setup(discord_bot_instance, engine: BanWorkflowEngine):
    """Register the BanListenerCog with the bot."""
    discord_bot_instance.add_cog(BanListenerCog(discord_bot_instance, engine))
