"""Embeds and button views sent to Discord."""
