from __future__ import annotations

import asyncio

import httpx

from adapters.google_search import GoogleSearchClient, normalize_items
from core.models import CandidateSource


def _search(handler, api_key: str = "key", cse_id: str = "cx") -> GoogleSearchClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleSearchClient(api_key, cse_id, http_client=client)


def test_missing_configuration_returns_empty_without_request() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"items": []})

    assert asyncio.run(_search(handler, api_key="").search("claim")) == []
    assert asyncio.run(_search(handler, cse_id="").search("claim")) == []
    assert calls == []


def test_successful_search_maps_items_and_caps_result_count() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={
                "items": [
                    {"title": "A", "link": "https://a.example", "snippet": "about a"},
                    {"link": "https://b.example"},
                ]
            },
        )

    results = asyncio.run(_search(handler).search("prices rose", num_results=25))

    assert results == [
        CandidateSource(title="A", link="https://a.example", snippet="about a"),
        CandidateSource(title="", link="https://b.example", snippet=""),
    ]
    assert seen["q"] == "prices rose"
    assert seen["num"] == "10"
    assert seen["key"] == "key"
    assert seen["cx"] == "cx"


def test_http_error_returns_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"error": {"message": "quota"}})

    assert asyncio.run(_search(handler).search("claim")) == []


def test_transport_error_returns_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    assert asyncio.run(_search(handler).search("claim")) == []


def test_non_json_body_returns_empty() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    assert asyncio.run(_search(handler).search("claim")) == []


def test_normalize_items_tolerates_malformed_payloads() -> None:
    assert normalize_items(None) == []
    assert normalize_items({}) == []
    assert normalize_items({"items": "nope"}) == []
    assert normalize_items({"items": ["junk", {"title": 5, "snippet": "s"}]}) == [
        CandidateSource(title="", link="", snippet="s")
    ]
