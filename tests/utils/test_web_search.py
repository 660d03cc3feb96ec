from unittest.mock import MagicMock

import pytest

from gatecord.util.web_search import SearchResult, parse_instant_answer, search_web

PAYLOAD = {
    "Heading": "Python (programming language)",
    "AbstractText": "Python is a high-level programming language.",
    "AbstractURL": "https://en.wikipedia.org/wiki/Python_(programming_language)",
    "RelatedTopics": [
        {"Text": "CPython - The reference implementation.", "FirstURL": "https://duckduckgo.com/CPython"},
        {
            "Name": "Implementations",
            "Topics": [
                {"Text": "PyPy - A fast implementation.", "FirstURL": "https://duckduckgo.com/PyPy"},
                {"Text": "Jython", "FirstURL": "https://duckduckgo.com/Jython"},
            ],
        },
        {"Text": "no url here"},
        "garbage",
    ],
}


def test_parse_instant_answer_flattens_topics():
    results = parse_instant_answer(PAYLOAD, limit=10)

    assert results == [
        SearchResult(
            title="Python (programming language)",
            link="https://en.wikipedia.org/wiki/Python_(programming_language)",
            snippet="Python is a high-level programming language.",
        ),
        SearchResult(title="CPython", link="https://duckduckgo.com/CPython", snippet="The reference implementation."),
        SearchResult(title="PyPy", link="https://duckduckgo.com/PyPy", snippet="A fast implementation."),
        SearchResult(title="Jython", link="https://duckduckgo.com/Jython", snippet=""),
    ]


def test_parse_instant_answer_respects_limit():
    assert len(parse_instant_answer(PAYLOAD, limit=2)) == 2
    assert parse_instant_answer(PAYLOAD, limit=0) == []


def test_parse_instant_answer_handles_empty_payloads():
    assert parse_instant_answer({}, limit=5) == []
    assert parse_instant_answer([], limit=5) == []  # type: ignore[arg-type]


def test_long_snippets_are_shortened():
    payload = {"RelatedTopics": [{"Text": "Title - " + "x" * 1000, "FirstURL": "https://example.com"}]}
    (result,) = parse_instant_answer(payload, limit=5)
    assert len(result.snippet) == 300
    assert result.snippet.endswith("…")


class _FakeResponse:
    def __init__(self, payload):
        self.payload = payload
        self.raise_for_status = MagicMock()

    async def json(self, content_type="application/json"):
        assert content_type is None
        return self.payload

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


@pytest.mark.asyncio
async def test_search_web_queries_instant_answer_api():
    response = _FakeResponse(PAYLOAD)
    session = MagicMock()
    session.get.return_value = response

    results = await search_web(session, "python", limit=3)

    assert len(results) == 3
    args, kwargs = session.get.call_args
    assert args[0] == "https://api.duckduckgo.com/"
    assert kwargs["params"]["q"] == "python"
    assert kwargs["params"]["format"] == "json"
    response.raise_for_status.assert_called_once()
