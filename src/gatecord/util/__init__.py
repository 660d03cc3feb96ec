"""Shared helpers: logging, py-cord utilities and the web search client."""
