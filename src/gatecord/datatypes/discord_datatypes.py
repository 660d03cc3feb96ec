"""
Type-safe wrapper for Discord user identifiers.

Snowflakes arrive as text (typed into the ban channel, embedded in button
custom ids, stored in JSON) and leave as integers (Discord API calls).
:class:`UserID` keeps both forms consistent.
"""

from __future__ import annotations

from typing import Union
import discord


class UserID:
    """
    Type-safe wrapper for Discord user snowflake IDs.

    Attributes:
        _value (str): The snowflake ID stored as a string for JSON parity.

    Example:
        >>> uid = UserID("123456789012345678")
        >>> uid.to_int()
        123456789012345678
        >>> str(uid)
        '123456789012345678'
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[str, int, "UserID"]) -> None:
        """
        Initialize a UserID from a string, int, or another UserID.

        Raises:
            ValueError: If the value cannot be converted to a valid snowflake.
        """
        if isinstance(value, UserID):
            self._value = value._value
        elif isinstance(value, bool):
            raise ValueError(f"Cannot create UserID from bool: {value}")
        elif isinstance(value, int):
            if value < 0:
                raise ValueError(f"Snowflakes are non-negative: {value}")
            self._value = str(value)
        elif isinstance(value, str):
            self._value = str(int(value.strip()))
            if self._value.startswith("-"):
                raise ValueError(f"Snowflakes are non-negative: {value}")
        else:
            raise ValueError(f"Cannot create UserID from {type(value).__name__}: {value}")

    @classmethod
    def from_user(cls, member: Union[discord.Member, discord.User]) -> "UserID":
        """Create a UserID from a Discord Member or User object."""
        return cls(member.id)

    def to_int(self) -> int:
        """Convert to an integer for Discord API calls."""
        return int(self._value)

    def to_object(self) -> discord.Object:
        """Return a :class:`discord.Object` usable where the API expects a snowflake."""
        return discord.Object(id=self.to_int())

    @property
    def mention(self) -> str:
        return f"<@{self._value}>"

    def __str__(self) -> str:
        return self._value

    def __repr__(self) -> str:
        return f"UserID({self._value!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserID):
            return self._value == other._value
        if isinstance(other, str):
            return self._value == other
        if isinstance(other, int):
            return self._value == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)
