"""
Persistent pointer to the ban list message.

The ban list is a single message in the ban channel that gets edited on
every refresh. Its ID is remembered in a small JSON document so the same
message is reused after a restart::

    {"banListMessageId": "123456789012345678"}

A missing file is the normal first-boot state. Writes go through a temporary
file and an atomic rename, so a crash never leaves a half-written document.
Unknown keys already present in the file are preserved.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional

from gatecord.util.logger import get_logger

logger = get_logger("ban_list_pointer_repo")

BAN_LIST_MESSAGE_KEY = "banListMessageId"


class BanListPointerRepo:
    """Read and write the ban list message ID stored at ``path``."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    # ------------------------------------------------------------------
    # Blocking helpers (run in a worker thread)
    # ------------------------------------------------------------------

    def _load(self) -> Dict[str, Any]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            logger.error("[BAN LIST POINTER] Failed to read %s: %s", self.path, exc)
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error("[BAN LIST POINTER] %s is not valid JSON (%s); starting fresh", self.path, exc)
            return {}

        if not isinstance(data, dict):
            logger.error("[BAN LIST POINTER] %s does not hold a JSON object; starting fresh", self.path)
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            tmp_path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            tmp_path.replace(self.path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

    def _read_message_id(self) -> Optional[int]:
        value = self._load().get(BAN_LIST_MESSAGE_KEY)
        if value in (None, ""):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning("[BAN LIST POINTER] Ignoring invalid message id %r in %s", value, self.path)
            return None

    def _write_message_id(self, message_id: Optional[int]) -> None:
        data = self._load()
        if message_id is None:
            data.pop(BAN_LIST_MESSAGE_KEY, None)
        else:
            data[BAN_LIST_MESSAGE_KEY] = str(message_id)
        self._save(data)

    # ------------------------------------------------------------------
    # Async API
    # ------------------------------------------------------------------

    async def get_message_id(self) -> Optional[int]:
        """Return the stored ban list message ID, or ``None`` if there is none."""
        return await asyncio.to_thread(self._read_message_id)

    async def set_message_id(self, message_id: int) -> None:
        """Store ``message_id`` as the current ban list message (last writer wins)."""
        await asyncio.to_thread(self._write_message_id, message_id)
        logger.debug("[BAN LIST POINTER] Stored ban list message id %s", message_id)

    async def clear(self) -> None:
        """Forget the stored message ID."""
        await asyncio.to_thread(self._write_message_id, None)
