"""Tests for the Wikipedia fact source."""

import json
from typing import Dict, List

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, Request, Response

from history_bluff.domain.errors import ExternalUnavailableError
from history_bluff.domain.ports.fact_source import SearchHit
from history_bluff.infrastructure.lookup.wikipedia_adapter import WikipediaAdapter, WikipediaConfig

API_URL = "http://test-wiki/w/api.php"


def create_response(status_code: int, json_data: dict = None, text: str = None) -> Response:
    """Create a Response object with a proper request."""
    request = Request("GET", API_URL)
    content = (
        json.dumps(json_data).encode() if json_data is not None
        else text.encode() if text is not None
        else b""
    )
    return Response(status_code=status_code, content=content, request=request)


SEARCH_PAYLOAD = {
    "query": {
        "search": [
            {"pageid": 60762, "title": "Battle of Hastings",
             "snippet": 'The <span class="searchmatch">Battle</span> of Hastings'},
            {"title": "Hastings", "snippet": "town"},
        ]
    }
}

PAGE_PAYLOAD = {
    "query": {
        "pages": [
            {
                "title": "Battle of Hastings",
                "extract": "The Battle of Hastings was fought on 14 October 1066.",
                "categories": [{"title": "Category:Battles involving England"}],
                "fullurl": "https://en.wikipedia.org/wiki/Battle_of_Hastings",
            }
        ]
    }
}


class RecordingClient(AsyncClient):
    """Client answering from a queue of responses and recording params."""

    def __init__(self, responses: List[Response]):
        super().__init__()
        self.responses = list(responses)
        self.calls: List[Dict] = []

    async def get(self, url, params=None, **kwargs):
        self.calls.append(dict(params or {}))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest_asyncio.fixture
async def adapter():
    """Create an adapter initialized around a recording client."""
    adapter = WikipediaAdapter(WikipediaConfig(api_url=API_URL))
    adapter._client = RecordingClient([])
    await adapter.initialize()
    yield adapter
    await adapter.shutdown()


def _install(adapter: WikipediaAdapter, *responses) -> RecordingClient:
    client = adapter._client
    client.responses.extend(responses)
    return client


@pytest.mark.asyncio
async def test_search_strips_markup_and_keeps_ranking(adapter):
    client = _install(adapter, create_response(200, SEARCH_PAYLOAD))

    hits = await adapter.search("Battle of Hastings", limit=5)

    assert [hit.title for hit in hits] == ["Battle of Hastings", "Hastings"]
    assert hits[0].snippet == "The Battle of Hastings"
    assert hits[0].source_id == "60762"
    assert hits[1].source_id is None
    params = client.calls[0]
    assert params["list"] == "search"
    assert params["srlimit"] == 5
    assert params["formatversion"] == 2


@pytest.mark.asyncio
async def test_search_is_cached(adapter):
    client = _install(adapter, create_response(200, SEARCH_PAYLOAD))

    await adapter.search("Battle of Hastings")
    await adapter.search("Battle of Hastings")

    assert len(client.calls) == 1


@pytest.mark.asyncio
async def test_get_page_details(adapter):
    client = _install(adapter, create_response(200, PAGE_PAYLOAD))

    details = await adapter.get_page_details(SearchHit(title="Battle of Hastings"))

    assert details.title == "Battle of Hastings"
    assert details.extract.startswith("The Battle of Hastings")
    assert details.categories == ["Category:Battles involving England"]
    assert details.url == "https://en.wikipedia.org/wiki/Battle_of_Hastings"
    assert details.structured_date is None
    assert client.calls[0]["redirects"] == 1


@pytest.mark.asyncio
async def test_missing_page_returns_none(adapter):
    _install(adapter, create_response(200, {"query": {"pages": [{"title": "Nope", "missing": True}]}}))

    assert await adapter.get_page_details(SearchHit(title="Nope")) is None


@pytest.mark.asyncio
async def test_http_error_becomes_external_unavailable(adapter):
    _install(adapter, create_response(503, text="unavailable"))

    with pytest.raises(ExternalUnavailableError):
        await adapter.search("Battle of Hastings")


@pytest.mark.asyncio
async def test_transport_error_becomes_external_unavailable(adapter):
    _install(adapter, httpx.ConnectError("boom", request=Request("GET", API_URL)))

    with pytest.raises(ExternalUnavailableError):
        await adapter.get_page_details(SearchHit(title="Battle of Hastings"))


@pytest.mark.asyncio
async def test_invalid_json_becomes_external_unavailable(adapter):
    _install(adapter, create_response(200, text="<html>not json</html>"))

    with pytest.raises(ExternalUnavailableError):
        await adapter.search("Battle of Hastings")


@pytest.mark.asyncio
async def test_requires_initialization():
    adapter = WikipediaAdapter()

    assert not adapter.is_available
    with pytest.raises(RuntimeError):
        await adapter.search("anything")


@pytest.mark.asyncio
async def test_shutdown(adapter):
    assert adapter.is_available
    assert adapter.provider_name == "Wikipedia"

    await adapter.shutdown()

    assert not adapter.is_available
    assert adapter.capabilities["structured_dates"] is False
