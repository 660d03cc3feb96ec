"""
Verification button identifiers and request document states.

Button custom ids carry the action and the requesting user's ID
(``approve_user:<id>``). :func:`parse_verification_custom_id` turns them back
into a :class:`VerificationAction`; it is the only place that inspects the
raw string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gatecord.datatypes.discord_datatypes import UserID


VERIFY_BUTTON_ID = "verify_user_button"
APPROVE_PREFIX = "approve_user"
DENY_PREFIX = "deny_user"
CUSTOM_ID_SEPARATOR = ":"


class VerificationActionType(Enum):
    """Button actions understood by the verification workflow."""

    REQUEST = "request"
    APPROVE = "approve"
    DENY = "deny"

    def __str__(self) -> str:
        return self.value


class VerificationState(Enum):
    """Lifecycle of a verification request message.

    ``OPEN`` is the only state with enabled buttons; every other state is terminal.
    """

    OPEN = "open"
    APPROVED = "approved"
    DENIED = "denied"
    TARGET_MISSING = "target_missing"


@dataclass(frozen=True, slots=True)
class VerificationAction:
    kind: VerificationActionType
    user_id: Optional[UserID] = None

    def to_custom_id(self) -> str:
        if self.kind is VerificationActionType.REQUEST:
            return VERIFY_BUTTON_ID
        prefix = APPROVE_PREFIX if self.kind is VerificationActionType.APPROVE else DENY_PREFIX
        return f"{prefix}{CUSTOM_ID_SEPARATOR}{self.user_id}"


def approve_custom_id(user_id: UserID) -> str:
    return VerificationAction(VerificationActionType.APPROVE, user_id).to_custom_id()


def deny_custom_id(user_id: UserID) -> str:
    return VerificationAction(VerificationActionType.DENY, user_id).to_custom_id()


def parse_verification_custom_id(custom_id: Optional[str]) -> Optional[VerificationAction]:
    """Decode a button custom id.

    Returns ``None`` for ids that do not belong to the verification workflow,
    including approve/deny ids whose user part is not a valid snowflake.
    """
    if not custom_id:
        return None

    if custom_id == VERIFY_BUTTON_ID:
        return VerificationAction(VerificationActionType.REQUEST)

    prefix, separator, raw_user_id = custom_id.partition(CUSTOM_ID_SEPARATOR)
    if not separator:
        return None

    if prefix == APPROVE_PREFIX:
        kind = VerificationActionType.APPROVE
    elif prefix == DENY_PREFIX:
        kind = VerificationActionType.DENY
    else:
        return None

    try:
        user_id = UserID(raw_user_id)
    except ValueError:
        return None
    return VerificationAction(kind, user_id)
