"""
Shared logging setup for Gatecord.

Every module asks :func:`get_logger` for a named logger. Each one writes
coloured lines to the console through prompt_toolkit and plain lines to a
rotating file under ``logs/``, one file per bot session. Components tag their
messages (``[BAN]``, ``[VERIFY]``, ``[KEEP ALIVE]``...) so a single file can be
grepped per workflow.

Environment:

- ``GATECORD_HOME``: base directory; logs go to ``$GATECORD_HOME/logs``.
- ``GATECORD_LOG_LEVEL``: console level name (default ``INFO``). The file
  always receives DEBUG.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import ANSI


def resolve_logs_dir() -> Path:
    if env_home := os.getenv("GATECORD_HOME"):
        return (Path(env_home) / "logs").resolve()
    return (Path(__file__).parents[3] / "logs").resolve()


# -------------------- Configuration --------------------
LOGS_DIR: Path = resolve_logs_dir()
LOGS_DIR.mkdir(parents=True, exist_ok=True)

LOG_FORMAT: str = "[%(asctime)s] [%(levelname)s] [%(name)s:%(funcName)s:%(lineno)d] %(message)s"
DATE_FORMAT: str = "%Y-%m-%d %H-%M-%S"

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[1;31m",
}
RESET_COLOR = "\033[0m"

LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 3

LOG_FILEPATH: Path | None = None


# -------------------- Formatters --------------------
class ColorFormatter(logging.Formatter):
    """Colours the level name of each record; the rest of the line stays plain."""

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname)
        if not color:
            return super().format(record)

        levelname = record.levelname
        record.levelname = f"{color}{levelname}{RESET_COLOR}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class PromptToolkitHandler(logging.Handler):
    """
    Logging handler that prints through prompt_toolkit.

    ``print_formatted_text`` interprets the ANSI codes added by
    :class:`ColorFormatter` on every terminal prompt_toolkit supports,
    Windows consoles included.
    """

    def __init__(self, formatter: logging.Formatter | None = None):
        super().__init__()
        if formatter:
            self.setFormatter(formatter)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            print_formatted_text(ANSI(self.format(record)))
        except Exception:
            self.handleError(record)


def should_use_color() -> bool:
    """True when stderr is a terminal."""
    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


def console_level() -> int:
    """Console level from ``GATECORD_LOG_LEVEL``; unknown names fall back to INFO."""
    name = (os.getenv("GATECORD_LOG_LEVEL") or "INFO").strip().upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


plain_formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
console_formatter = ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT) if should_use_color() else plain_formatter


# -------------------- Logger Setup --------------------
def get_log_filepath() -> Path:
    """Return the log file of the current session, choosing it on first use."""
    global LOG_FILEPATH

    if LOG_FILEPATH is None:
        LOG_FILEPATH = LOGS_DIR / f"gatecord_{datetime.now().strftime(DATE_FORMAT)}.log"
    return LOG_FILEPATH


def setup_logger(logger_name: str) -> logging.Logger:
    """Attach the console and file handlers to ``logger_name``.

    Parameters
    ----------
    logger_name:
        Name of the logger to configure.

    Returns
    -------
    logging.Logger
        The configured logger. Repeated calls for one name do not add
        duplicate handlers.
    """
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    console_handler = PromptToolkitHandler(formatter=console_formatter)
    console_handler.setLevel(console_level())
    logger.addHandler(console_handler)

    file_handler = RotatingFileHandler(
        get_log_filepath(),
        encoding="utf-8",
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(plain_formatter)
    logger.addHandler(file_handler)

    return logger


def get_logger(logger_name: str) -> logging.Logger:
    return setup_logger(logger_name)


# -------------------- Exception Handling --------------------
def handle_exception(exception_type, exception_instance, exception_traceback) -> None:
    """``sys.excepthook`` replacement; Ctrl+C keeps the default behaviour."""
    if issubclass(exception_type, KeyboardInterrupt):
        sys.__excepthook__(exception_type, exception_instance, exception_traceback)
        return
    get_logger("gatecord").error(
        "Uncaught exception", exc_info=(exception_type, exception_instance, exception_traceback)
    )


# -------------------- Quiet Libraries --------------------
# py-cord logs every gateway event at INFO; aiohttp.access would log each
# keep-alive ping served by the web server.
NOISY_LOGGERS = [
    "discord",
    "discord.gateway",
    "discord.client",
    "discord.http",
    "discord.webhook",
    "websockets",
    "aiohttp",
    "aiohttp.access",
    "aiohttp.server",
    "aiohttp.client",
]

for noisy_logger in NOISY_LOGGERS:
    library_logger = logging.getLogger(noisy_logger)
    library_logger.setLevel(logging.ERROR)
    library_logger.propagate = False
    library_logger.handlers = []
