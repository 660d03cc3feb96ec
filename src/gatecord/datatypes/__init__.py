"""
Plain data structures shared across Gatecord.

- **discord_datatypes.py**: :class:`UserID` snowflake wrapper.
- **ban_datatypes.py**: ban channel command variants, ban records and the
  rendered ban list document.
- **verification_datatypes.py**: verification button custom ids and request states.
"""
