"""
Gatecord Discord Bot
====================

A Discord bot that gatekeeps a single community server: administrators ban
and unban users from a dedicated text channel that also shows a live list of
all bans, and new members are verified through an approve/deny button flow
before they receive the verified role.
"""

import os
import signal
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. GATECORD_HOME environment variable, if set.
    2. If running in a frozen/compiled context (e.g., PyInstaller, Nuitka), use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("GATECORD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()

import asyncio
import discord
from dotenv import load_dotenv

from gatecord.configuration.app_configuration import CONFIG_PATH, AppConfig
from gatecord.configuration.bot_settings import BotSettings
from gatecord.moderation.ban_workflow import BanWorkflowEngine
from gatecord.moderation.message_cleanup import MessageCleanupScheduler
from gatecord.moderation.verification_workflow import VerificationEngine
from gatecord.repositories.ban_list_pointer_repo import BanListPointerRepo
from gatecord.util.logger import get_logger, handle_exception
from gatecord.web.keep_alive import KeepAliveServer


logger = get_logger("main")


def load_environment() -> BotSettings:
    """Load ``.env`` and return the settings read from the environment.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    settings = BotSettings.from_env()
    if not settings.token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)

    settings.log_missing("Ban system", "ban_channel_id", "admin_role_id")
    settings.log_missing("Verification", "moderation_channel_id", "admin_role_id", "verified_role_id")
    return settings


def build_intents() -> discord.Intents:
    """Construct the Discord intents required for Gatecord runtime features.

    Returns
    -------
    discord.Intents
        Intents enabling guild, member, message, message content and ban events.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    intents.messages = True
    intents.message_content = True
    intents.moderation = True
    return intents


def load_cogs(
    discord_bot_instance: discord.Bot,
    settings: BotSettings,
    app_config: AppConfig,
    cleanup: MessageCleanupScheduler,
) -> None:
    """Build the workflow engines and register every cog with the bot."""
    from gatecord.bot.cogs import (
        ban_listener,
        events_listener,
        general_cmds,
        setup_cmds,
        verification_listener,
    )

    ban_engine = BanWorkflowEngine(
        discord_bot_instance,
        settings,
        BanListPointerRepo(app_config.ban_data_file),
        cleanup,
        app_config.cleanup_delays,
    )
    verification_engine = VerificationEngine(discord_bot_instance, settings)

    events_listener.setup(discord_bot_instance)
    ban_listener.setup(discord_bot_instance, ban_engine)
    verification_listener.setup(discord_bot_instance, verification_engine)
    general_cmds.setup(discord_bot_instance, app_config.search_result_limit)
    setup_cmds.setup(discord_bot_instance, settings)

    logger.info("All cogs loaded successfully.")


def create_bot(settings: BotSettings, app_config: AppConfig, cleanup: MessageCleanupScheduler) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs."""
    debug_guilds = [settings.guild_id] if settings.guild_id is not None else None
    bot = discord.Bot(intents=build_intents(), debug_guilds=debug_guilds)
    load_cogs(bot, settings, app_config, cleanup)
    return bot


def install_signal_handlers(stop_event: asyncio.Event) -> None:
    """Make SIGINT and SIGTERM request a graceful shutdown."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no signal handler support
            logger.debug("Signal handler for %s not installed", sig)


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def run_bot_session(bot: discord.Bot, token: str, stop_event: asyncio.Event) -> int:
    """Run the bot until it stops on its own or a shutdown signal arrives, returning an exit code."""
    bot_task = asyncio.create_task(start_bot(bot, token), name="gatecord-bot")
    stop_waiter = asyncio.create_task(stop_event.wait(), name="gatecord-stop-signal")
    try:
        await asyncio.wait({bot_task, stop_waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        stop_waiter.cancel()

    if not bot_task.done():
        logger.info("Shutdown signal received; closing the Discord connection")
        await bot.close()

    try:
        await bot_task
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        return 1
    return 0


async def shutdown_runtime(
    bot: discord.Bot,
    cleanup: MessageCleanupScheduler,
    keep_alive: KeepAliveServer | None = None,
) -> None:
    """Gracefully stop pending cleanups, the keep-alive server and the Discord bot."""
    try:
        await cleanup.shutdown()
    except Exception as exc:
        logger.exception("Error while cancelling message cleanups: %s", exc)

    if keep_alive is not None:
        try:
            await keep_alive.stop()
        except Exception as exc:
            logger.exception("Error during keep-alive server shutdown: %s", exc)

    try:
        if not bot.is_closed():
            await bot.close()
    except Exception as exc:
        logger.exception("Error while closing the Discord bot: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap configuration, the bot and the keep-alive server, returning an exit code."""
    settings = load_environment()
    app_config = AppConfig(CONFIG_PATH)
    cleanup = MessageCleanupScheduler()

    try:
        bot = create_bot(settings, app_config, cleanup)
    except Exception as exc:
        logger.critical("Failed to initialize Discord bot: %s", exc)
        return 1

    keep_alive = KeepAliveServer(
        bot,
        port=settings.port,
        app_url=settings.app_url,
        interval_seconds=app_config.keep_alive_interval,
        timeout_seconds=app_config.keep_alive_timeout,
    )
    try:
        await keep_alive.start()
    except OSError as exc:
        logger.error("[KEEP ALIVE] Could not start the web server on port %d: %s", settings.port, exc)

    stop_event = asyncio.Event()
    install_signal_handlers(stop_event)

    try:
        return await run_bot_session(bot, settings.token, stop_event)
    finally:
        await shutdown_runtime(bot, cleanup, keep_alive)


def main() -> int:
    """Entrypoint that orchestrates the async runtime and returns the process code.

    Returns
    -------
    int
        Exit code propagated to the operating system: 0 on a normal shutdown,
        1 when startup failed.
    """
    sys.excepthook = handle_exception
    os.chdir(BASE_DIR)
    logger.info("Starting Gatecord…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        if code is None:
            return 1
        try:
            return int(code)
        except (ValueError, TypeError):
            logger.warning("SystemExit.code is not an int (%r); defaulting to 1", code)
            return 1
    except Exception as exc:
        logger.critical("An unexpected error occurred while running the bot: %s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
