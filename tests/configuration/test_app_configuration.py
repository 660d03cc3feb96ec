from pathlib import Path

import pytest

from gatecord.configuration.app_configuration import DEFAULT_BAN_DATA_FILE, AppConfig, CleanupDelays


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "app_config.yml"


def test_app_config_reload_parses_yaml(config_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "auto_delete:",
                "  unauthorized_seconds: 1",
                "  action_seconds: 2.5",
                "  help_seconds: 30",
                "  invalid_seconds: 4",
                "ban_list:",
                "  data_file: state/bans.json",
                "keep_alive:",
                "  interval_seconds: 60",
                "  timeout_seconds: 2",
                "search:",
                "  result_limit: 3",
            ]
        ),
        encoding="utf-8",
    )

    config = AppConfig(config_path)

    assert config.cleanup_delays == CleanupDelays(unauthorized=1.0, action=2.5, help=30.0, invalid=4.0)
    assert config.ban_data_file == Path("state/bans.json")
    assert config.keep_alive_interval == pytest.approx(60.0)
    assert config.keep_alive_timeout == pytest.approx(2.0)
    assert config.search_result_limit == 3
    assert config.section("search") == {"result_limit": 3}


def test_app_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    config = AppConfig(tmp_path / "does_not_exist.yml")

    assert config.reload() == {}
    assert config.cleanup_delays == CleanupDelays()
    assert config.ban_data_file == Path(DEFAULT_BAN_DATA_FILE)
    assert config.keep_alive_interval == pytest.approx(120.0)
    assert config.keep_alive_timeout == pytest.approx(5.0)
    assert config.search_result_limit == 5


@pytest.mark.parametrize("content", ["just a string", "- a\n- list", ": : not yaml : ["])
def test_app_config_malformed_file_returns_defaults(config_path: Path, content: str) -> None:
    config_path.write_text(content, encoding="utf-8")

    config = AppConfig(config_path)

    assert config.reload() == {}
    assert config.cleanup_delays == CleanupDelays()


def test_invalid_values_fall_back_per_key(config_path: Path) -> None:
    config_path.write_text(
        "auto_delete:\n  action_seconds: soon\n  help_seconds: -1\n  invalid_seconds: 7\nsearch:\n  result_limit: 50\n",
        encoding="utf-8",
    )

    config = AppConfig(config_path)

    delays = config.cleanup_delays
    assert delays.action == 5.0
    assert delays.help == 15.0
    assert delays.invalid == 7.0
    assert config.search_result_limit == 10


def test_reload_picks_up_changes(config_path: Path) -> None:
    config_path.write_text("search:\n  result_limit: 2\n", encoding="utf-8")
    config = AppConfig(config_path)
    assert config.search_result_limit == 2

    config_path.write_text("search:\n  result_limit: 4\n", encoding="utf-8")
    config.reload()

    assert config.search_result_limit == 4
