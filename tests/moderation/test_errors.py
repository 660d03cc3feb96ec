import discord
import pytest

from gatecord.moderation.errors import (
    AlreadyInState,
    ChannelUnreachable,
    ConfigError,
    GatecordError,
    HierarchyError,
    PermissionDenied,
    TargetMissing,
    TransientError,
    classify_http_error,
)


@pytest.mark.parametrize(
    "cls",
    [ConfigError, PermissionDenied, HierarchyError, TargetMissing, ChannelUnreachable, AlreadyInState, TransientError],
)
def test_every_error_has_a_user_message(cls):
    err = cls()
    assert isinstance(err, GatecordError)
    assert err.user_message == cls.default_message
    assert err.user_message


def test_custom_message_and_detail():
    err = PermissionDenied("❌ nope", detail="403 Forbidden")
    assert err.user_message == "❌ nope"
    assert err.detail == "403 Forbidden"
    assert str(err) == "403 Forbidden"


def test_channel_unreachable_is_a_target_missing():
    assert issubclass(ChannelUnreachable, TargetMissing)


@pytest.mark.parametrize(
    "cls, status, expected",
    [
        (discord.Forbidden, 403, PermissionDenied),
        (discord.NotFound, 404, TargetMissing),
        (discord.HTTPException, 429, TransientError),
        (discord.HTTPException, 500, TransientError),
    ],
)
def test_classify_http_error(http_error, cls, status, expected):
    err = classify_http_error(http_error(cls, status), "❌ custom")
    assert type(err) is expected
    assert err.user_message == "❌ custom"
    assert err.detail
