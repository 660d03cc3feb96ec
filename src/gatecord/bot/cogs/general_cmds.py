"""
General utility commands: /ping, /stats and /search.
"""

import asyncio
import datetime
import platform
import resource
import sys
import time

import aiohttp
import discord
from discord import Option
from discord.ext import commands

from gatecord.util.discord_utils import gateway_latency_ms
from gatecord.util.logger import get_logger
from gatecord.util.web_search import search_web

logger = get_logger("general_commands")

LATENCY_GOOD = discord.Color(0x28A745)
LATENCY_FAIR = discord.Color(0xFFC107)
LATENCY_POOR = discord.Color(0xDC3545)
STATS_COLOR = discord.Color(0x0099FF)
SEARCH_COLOR = discord.Color(0x4285F4)


def latency_color(latency_ms: float) -> discord.Color:
    """Green below 200 ms, amber below 500 ms, red otherwise."""
    if latency_ms < 200:
        return LATENCY_GOOD
    if latency_ms < 500:
        return LATENCY_FAIR
    return LATENCY_POOR


def format_uptime(total_seconds: float) -> str:
    total = max(0, int(total_seconds))
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    return f"{days}d {hours}h {minutes}m {seconds}s"


def peak_memory_mb() -> float:
    """Peak resident set size of this process in MiB."""
    rss = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # Linux reports kilobytes, macOS reports bytes
    if sys.platform == "darwin":
        return rss / (1024 * 1024)
    return rss / 1024


class GeneralCog(commands.Cog):
    """Cog for informational commands available to every member."""

    def __init__(self, bot: discord.Bot, search_result_limit: int = 5, search_timeout: float = 10.0):
        self.bot = bot
        self.search_result_limit = search_result_limit
        self.search_timeout = search_timeout
        self.started_at = time.monotonic()
        logger.info("General cog loaded")

    @commands.slash_command(name="ping", description="Check the bot's response time.")
    async def ping(self, application_context: discord.ApplicationContext) -> None:
        """Reply, then turn the reply into an embed with round-trip and gateway latency."""
        await application_context.respond("Pinging...")
        interaction = application_context.interaction
        original = await interaction.original_response()
        round_trip = (original.created_at - interaction.created_at).total_seconds() * 1000
        round_trip = max(0, round(round_trip))
        gateway = gateway_latency_ms(self.bot)

        embed = discord.Embed(
            title="🏓 Pong!",
            color=latency_color(round_trip),
            timestamp=datetime.datetime.now(datetime.timezone.utc),
        )
        embed.add_field(name="Bot latency", value=f"`{round_trip}ms`", inline=True)
        embed.add_field(name="API latency", value=f"`{gateway}ms`" if gateway is not None else "`n/a`", inline=True)
        await interaction.edit_original_response(content=None, embed=embed)
        logger.debug("Ping by %s: %sms round trip, %sms gateway", application_context.user, round_trip, gateway)

    @commands.slash_command(name="stats", description="Show bot statistics.")
    async def stats(self, application_context: discord.ApplicationContext) -> None:
        embed = discord.Embed(
            title="📊 Bot Statistics",
            color=STATS_COLOR,
            timestamp=datetime.datetime.now(datetime.timezone.utc),
        )
        embed.add_field(name="Uptime", value=f"`{format_uptime(time.monotonic() - self.started_at)}`", inline=False)
        embed.add_field(name="Memory (peak RSS)", value=f"`{peak_memory_mb():.2f} MB`", inline=True)
        embed.add_field(name="py-cord version", value=f"`v{discord.__version__}`", inline=True)
        embed.add_field(name="Python version", value=f"`{platform.python_version()}`", inline=True)
        embed.add_field(name="Platform", value=f"`{platform.system()} {platform.machine()}`", inline=True)
        embed.add_field(name="Servers", value=f"`{len(self.bot.guilds)}`", inline=True)
        embed.set_footer(text="Bot Statistics")
        await application_context.respond(embed=embed)

    @commands.slash_command(name="search", description="Search the web.")
    async def search(
        self,
        application_context: discord.ApplicationContext,
        query: Option(str, "Search keywords", required=True),  # type: ignore
    ) -> None:
        await application_context.defer()
        try:
            async with aiohttp.ClientSession() as session:
                results = await search_web(session, query, self.search_result_limit, self.search_timeout)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error("[SEARCH] Search for %r failed: %s", query, exc)
            await application_context.send_followup(content="❌ An error occurred while searching.")
            return

        if not results:
            await application_context.send_followup(content="No search results were found.")
            return

        embed = discord.Embed(
            title=f"🔍 Search results: {query}"[:256],
            color=SEARCH_COLOR,
            timestamp=datetime.datetime.now(datetime.timezone.utc),
        )
        for index, result in enumerate(results, start=1):
            embed.add_field(
                name=f"{index}. {result.title or 'Untitled'}"[:256],
                value=f"[Open link]({result.link})\n{result.snippet or 'No description'}"[:1024],
                inline=False,
            )
        embed.set_footer(text="Results from DuckDuckGo")
        await application_context.send_followup(embed=embed)


def setup(bot: discord.Bot, search_result_limit: int = 5) -> None:
    """Register the GeneralCog with the bot."""
    bot.add_cog(GeneralCog(bot, search_result_limit=search_result_limit))
