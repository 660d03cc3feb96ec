from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from gatecord.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml")

DEFAULT_BAN_DATA_FILE = "data/ban_data.json"


@dataclass(frozen=True, slots=True)
class CleanupDelays:
    """Seconds to wait before deleting a moderator's message and the bot reply."""

    unauthorized: float = 3.0
    action: float = 5.0
    help: float = 15.0
    invalid: float = 3.0


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The class caches the contents of ``./config/app_config.yml`` and exposes
    typed shortcuts for the tunables the bot reads. Every shortcut falls back
    to its default when the key is missing or has the wrong type, so a missing
    file simply means "defaults everywhere".
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.warning("[APP CONFIGURATION] Config file %s not found; using defaults.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def section(self, key: str) -> Dict[str, Any]:
        value = self._data.get(key, {})
        return value if isinstance(value, dict) else {}

    @staticmethod
    def _number(mapping: Dict[str, Any], key: str, default: float) -> float:
        try:
            value = float(mapping.get(key, default))
        except (TypeError, ValueError):
            logger.warning("[APP CONFIGURATION] Invalid number for %r; using %s", key, default)
            return default
        return value if value >= 0 else default

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns the raw mapping that was loaded (an empty dict on error).
        """
        self._data = self.load_from_disk()
        return self._data

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def cleanup_delays(self) -> CleanupDelays:
        """Auto-delete delays for the ban channel, read from ``auto_delete``."""
        section = self.section("auto_delete")
        defaults = CleanupDelays()
        return CleanupDelays(
            unauthorized=self._number(section, "unauthorized_seconds", defaults.unauthorized),
            action=self._number(section, "action_seconds", defaults.action),
            help=self._number(section, "help_seconds", defaults.help),
            invalid=self._number(section, "invalid_seconds", defaults.invalid),
        )

    @property
    def ban_data_file(self) -> Path:
        """Path of the JSON file that remembers the ban list message."""
        value = self.section("ban_list").get("data_file") or DEFAULT_BAN_DATA_FILE
        return Path(str(value))

    @property
    def keep_alive_interval(self) -> float:
        """Seconds between self-pings of ``APP_URL``. Default is 120 seconds."""
        return self._number(self.section("keep_alive"), "interval_seconds", 120.0)

    @property
    def keep_alive_timeout(self) -> float:
        """Upper bound for a single self-ping request. Default is 5 seconds."""
        return self._number(self.section("keep_alive"), "timeout_seconds", 5.0)

    @property
    def search_result_limit(self) -> int:
        """Maximum number of results shown by ``/search``."""
        limit = int(self._number(self.section("search"), "result_limit", 5))
        return max(1, min(limit, 10))
