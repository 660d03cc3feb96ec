"""
Thin client for the DuckDuckGo instant answer API used by ``/search``.

The API answers with an optional abstract plus a list of related topics,
where a topic is either a result (``Text`` / ``FirstURL``) or a named group of
results (``Name`` / ``Topics``). :func:`parse_instant_answer` flattens that
into :class:`SearchResult` entries.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import aiohttp

from gatecord.util.logger import get_logger

logger = get_logger("web_search")

SEARCH_ENDPOINT = "https://api.duckduckgo.com/"
USER_AGENT = "Mozilla/5.0 (compatible; GatecordBot/1.0)"
MAX_SNIPPET_LENGTH = 300


@dataclass(frozen=True, slots=True)
class SearchResult:
    title: str
    link: str
    snippet: str


def _split_topic_text(text: str) -> tuple[str, str]:
    # Topic text reads "<title> - <description>" most of the time
    title, sep, rest = text.partition(" - ")
    if sep:
        return title.strip(), rest.strip()
    return text.strip(), ""


def _shorten(text: str, limit: int = MAX_SNIPPET_LENGTH) -> str:
    return text if len(text) <= limit else text[: limit - 1].rstrip() + "…"


def _iter_topics(topics: List[Any]):
    for topic in topics:
        if not isinstance(topic, dict):
            continue
        if isinstance(topic.get("Topics"), list):
            yield from _iter_topics(topic["Topics"])
        elif topic.get("FirstURL") and topic.get("Text"):
            yield topic


def parse_instant_answer(payload: Dict[str, Any], limit: int) -> List[SearchResult]:
    """Turn an instant answer payload into at most ``limit`` results."""
    if not isinstance(payload, dict) or limit <= 0:
        return []

    results: List[SearchResult] = []
    abstract = (payload.get("AbstractText") or "").strip()
    abstract_url = (payload.get("AbstractURL") or "").strip()
    if abstract and abstract_url:
        title = (payload.get("Heading") or "").strip() or abstract_url
        results.append(SearchResult(title=title, link=abstract_url, snippet=_shorten(abstract)))

    for topic in _iter_topics(payload.get("RelatedTopics") or []):
        if len(results) >= limit:
            break
        title, snippet = _split_topic_text(topic["Text"])
        results.append(SearchResult(title=title, link=topic["FirstURL"], snippet=_shorten(snippet)))

    return results[:limit]


async def search_web(
    session: aiohttp.ClientSession,
    query: str,
    limit: int,
    timeout_seconds: float = 10.0,
) -> List[SearchResult]:
    """Query the instant answer API.

    Raises:
        aiohttp.ClientError: On connection failures or a non-2xx status.
        asyncio.TimeoutError: When the request exceeds ``timeout_seconds``.
    """
    params = {"q": query, "format": "json", "no_html": "1", "skip_disambig": "1"}
    headers = {"User-Agent": USER_AGENT}
    async with session.get(
        SEARCH_ENDPOINT,
        params=params,
        headers=headers,
        timeout=aiohttp.ClientTimeout(total=timeout_seconds),
    ) as resp:
        resp.raise_for_status()
        # The API labels its JSON as application/x-javascript
        payload = await resp.json(content_type=None)

    results = parse_instant_answer(payload, limit)
    logger.debug("[SEARCH] %r returned %d result(s)", query, len(results))
    return results
