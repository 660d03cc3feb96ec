"""
Configuration management for Gatecord.

- **bot_settings.py**: Discord identifiers, the login token and the keep-alive
  URL, read once from the environment (``.env`` is loaded by ``main``).
  Missing identifiers disable the component that needs them.

- **app_configuration.py**: YAML tunables (auto-delete delays, ban list data
  file, keep-alive timing, search limits) read under a shared file lock.
  Falls back to defaults on missing or malformed files.
"""
