"""Py-cord cogs. Each module exposes ``setup(bot, ...)`` taking the components it needs."""
