import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from gatecord import main as main_module
from gatecord.configuration.app_configuration import CleanupDelays
from gatecord.moderation.message_cleanup import MessageCleanupScheduler


class FakeBot:
    """Bot whose ``start`` blocks until ``close`` is called."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        self._closed = asyncio.Event()
        self.fail_with = fail_with
        self.start_token = None
        self.close_calls = 0

    async def start(self, token: str) -> None:
        self.start_token = token
        if self.fail_with is not None:
            raise self.fail_with
        await self._closed.wait()

    async def close(self) -> None:
        self.close_calls += 1
        self._closed.set()

    def is_closed(self) -> bool:
        return self._closed.is_set()


def test_resolve_base_dir_honours_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("GATECORD_HOME", str(tmp_path))
    assert main_module.resolve_base_dir() == tmp_path.resolve()


def test_build_intents_enables_required_events() -> None:
    intents = main_module.build_intents()
    assert intents.guilds
    assert intents.members
    assert intents.messages
    assert intents.message_content
    assert intents.moderation


def test_load_environment_requires_token(monkeypatch) -> None:
    monkeypatch.setattr(main_module, "load_dotenv", lambda **kwargs: False)
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)

    with pytest.raises(SystemExit) as exc_info:
        main_module.load_environment()

    assert exc_info.value.code == 1


def test_load_environment_returns_settings(monkeypatch) -> None:
    monkeypatch.setattr(main_module, "load_dotenv", lambda **kwargs: False)
    monkeypatch.setenv("DISCORD_BOT_TOKEN", "abc")
    monkeypatch.setenv("BAN_CHANNEL_ID", "42")

    settings = main_module.load_environment()

    assert settings.token == "abc"
    assert settings.ban_channel_id == 42


def test_load_cogs_registers_all_cogs(settings, tmp_path) -> None:
    bot = MagicMock()
    app_config = SimpleNamespace(
        ban_data_file=tmp_path / "ban_list.json",
        cleanup_delays=CleanupDelays(),
        search_result_limit=5,
    )

    main_module.load_cogs(bot, settings, app_config, MessageCleanupScheduler())

    names = sorted(type(call.args[0]).__name__ for call in bot.add_cog.call_args_list)
    assert names == [
        "BanListenerCog",
        "EventsListenerCog",
        "GeneralCog",
        "SetupCog",
        "VerificationListenerCog",
    ]


@pytest.mark.asyncio
async def test_run_bot_session_stops_on_signal() -> None:
    bot = FakeBot()
    stop_event = asyncio.Event()
    asyncio.get_running_loop().call_later(0.01, stop_event.set)

    code = await asyncio.wait_for(main_module.run_bot_session(bot, "token", stop_event), timeout=2)

    assert code == 0
    assert bot.start_token == "token"
    assert bot.close_calls == 1


@pytest.mark.asyncio
async def test_run_bot_session_reports_runtime_error() -> None:
    bot = FakeBot(fail_with=RuntimeError("login failed"))

    code = await asyncio.wait_for(main_module.run_bot_session(bot, "token", asyncio.Event()), timeout=2)

    assert code == 1
    assert bot.close_calls == 0


@pytest.mark.asyncio
async def test_shutdown_runtime_closes_everything() -> None:
    bot = FakeBot()
    cleanup = MagicMock(shutdown=AsyncMock())
    keep_alive = MagicMock(stop=AsyncMock())

    await main_module.shutdown_runtime(bot, cleanup, keep_alive)

    cleanup.shutdown.assert_awaited_once()
    keep_alive.stop.assert_awaited_once()
    assert bot.close_calls == 1


@pytest.mark.asyncio
async def test_shutdown_runtime_continues_after_failures() -> None:
    bot = FakeBot()
    cleanup = MagicMock(shutdown=AsyncMock(side_effect=RuntimeError("stuck")))
    keep_alive = MagicMock(stop=AsyncMock(side_effect=RuntimeError("port busy")))

    await main_module.shutdown_runtime(bot, cleanup, keep_alive)

    assert bot.close_calls == 1


@pytest.mark.asyncio
async def test_shutdown_runtime_skips_closed_bot() -> None:
    bot = FakeBot()
    await bot.close()

    await main_module.shutdown_runtime(bot, MagicMock(shutdown=AsyncMock()))

    assert bot.close_calls == 1
