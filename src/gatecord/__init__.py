"""
Gatecord - Discord gatekeeping bot

Gatecord serves a single community server and keeps two gates:

- **Ban channel**: administrators ban and unban users by posting short text
  commands in a dedicated channel; the bot keeps one live "Banned Users"
  message in that channel up to date and cleans up the commands.
- **Verification**: members request verification with a button; an
  administrator approves or denies the request from the moderation channel,
  and approval grants the verified role.

Supporting pieces are a few slash commands (/ping, /stats, /search,
/setup-verify) and a small keep-alive HTTP server for hosted deployments.
"""

__version__ = "1.0.0"
