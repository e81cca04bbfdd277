import asyncio

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from core import flights, hotels, web_search
from core.errors import ProviderError
from tools.mcp_server import mcp


def call(name, arguments):
    async def _call():
        async with Client(mcp) as client:
            return await client.call_tool(name, arguments)

    return asyncio.run(_call()).structured_content


@pytest.fixture
def providers(monkeypatch):
    """Fake the provider calls behind every tool; records what reached them."""

    class _Providers:
        def __init__(self):
            self.calls = []
            self.serp = {"organic": []}
            self.items = []
            self.error = None

        def fetch_serp(self, query, settings):
            self.calls.append(("serp", query))
            if self.error is not None:
                raise self.error
            return self.serp

        def run_actor(self, actor_id, actor_input, settings):
            self.calls.append((actor_id, actor_input))
            if self.error is not None:
                raise self.error
            return self.items

    fake = _Providers()
    monkeypatch.setattr(web_search, "fetch_serp", fake.fetch_serp)
    monkeypatch.setattr(flights, "run_actor", fake.run_actor)
    monkeypatch.setattr(hotels, "run_actor", fake.run_actor)
    return fake


# --- brightdata_web_search ---------------------------------------------------

def test_web_search_returns_results_envelope(providers):
    providers.serp = {"organic": [
        {"title": "Visit Paris", "link": "https://example.com/paris",
         "description": "City guide", "rank": 1, "extra": "dropped"},
    ]}
    out = call("brightdata_web_search", {"query": "  paris  "})
    assert out == {"results": [
        {"title": "Visit Paris", "link": "https://example.com/paris",
         "snippet": "City guide", "position": 1},
    ]}
    assert providers.calls == [("serp", "paris")]


def test_web_search_rejects_multi_word_query_before_fetching(providers):
    with pytest.raises(ToolError, match="single token"):
        call("brightdata_web_search", {"query": "new york"})
    assert providers.calls == []


def test_web_search_provider_failure_is_an_empty_envelope(providers):
    providers.error = ProviderError("brightdata", "HTTP 503")
    assert call("brightdata_web_search", {"query": "paris"}) == {"results": []}


# --- get_flights -------------------------------------------------------------

def test_flights_returns_flights_envelope(providers):
    listing = {"url": "https://www.kayak.com/book/1", "price": "$245", "provider": "Kiwi.com"}
    providers.items = [listing]
    out = call("get_flights", {
        "origin": "SFO", "destination": "JFK", "departure_date": "2025-07-15",
        "sort": "low_price",
    })
    assert out == {"flights": [listing]}
    actor_input = providers.calls[0][1]
    assert actor_input["origin.0"] == "SFO"
    assert actor_input["depart.0"] == "2025-07-15"
    assert actor_input["sort"] == "low_price"


def test_flights_reject_unknown_sort_before_fetching(providers):
    with pytest.raises(ToolError, match="sort"):
        call("get_flights", {
            "origin": "SFO", "destination": "JFK", "departure_date": "2025-07-15",
            "sort": "cheapest",
        })
    assert providers.calls == []


# --- get_hotels --------------------------------------------------------------

def test_hotels_returns_hotels_envelope(providers):
    hotel = {"url": "https://www.expedia.com/h1", "name": "Hotel One", "rating": 8.6}
    providers.items = [hotel]
    out = call("get_hotels", {"location": ["Lisbon"]})
    assert out == {"hotels": [hotel]}
    assert providers.calls[0][1] == {"location": ["Lisbon"], "limit": 5}


def test_hotels_provider_failure_is_an_empty_envelope(providers):
    providers.error = ProviderError("apify", "APIFY_API_KEY is not set")
    assert call("get_hotels", {"location": ["Lisbon"]}) == {"hotels": []}


def test_hotels_reject_empty_location_list_before_fetching(providers):
    with pytest.raises(ToolError, match="locations"):
        call("get_hotels", {"location": []})
    assert providers.calls == []
