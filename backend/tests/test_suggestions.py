"""Tests for the Perplexity suggestion adapter."""
import json

import httpx
import pytest

from app.config import settings
from app.services.suggestions import (
    FALLBACK_SOURCES,
    FALLBACK_TOPICS,
    SuggestionService,
    extract_json,
    validate_items,
)
from app.schemas.suggestions import SourceSuggestion
from app.utils.cache import TTLCache


def _reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def _service(handler, api_key="test-key", clock=None):
    calls = []

    def recording_handler(request):
        calls.append(json.loads(request.content))
        return handler(request)

    service = SuggestionService(
        settings.model_copy(update={"perplexity_api_key": api_key}),
        TTLCache(ttl_seconds=900, clock=clock) if clock else TTLCache(ttl_seconds=900),
        transport=httpx.MockTransport(recording_handler),
    )
    return service, calls


class TestParsing:

    def test_extract_json_from_prose(self):
        content = 'Here you go:\n[{"topic": "Tariffs", "category": "regulatory"}]\nHope that helps.'
        assert extract_json(content) == [{"topic": "Tariffs", "category": "regulatory"}]

    def test_extract_json_garbage(self):
        assert extract_json("no json here") is None
        assert extract_json("[not, json]") is None

    def test_invalid_items_are_dropped(self):
        items = validate_items([
            {"name": "Good", "url": "https://good.example.com", "category": "Government"},
            {"name": "No scheme", "url": "good.example.com"},
            {"url": "https://nameless.example.com"},
            "not an object",
        ], SourceSuggestion)
        assert [i.name for i in items] == ["Good"]
        assert items[0].category == "government"

    def test_unknown_category_is_replaced(self):
        items = validate_items([{"name": "Blog", "url": "https://b.example.com", "category": "podcast"}], SourceSuggestion)
        assert items[0].category == "news"


class TestSuggestionService:

    @pytest.mark.asyncio
    async def test_topics(self):
        reply = json.dumps([{"topic": "Cold chain rules", "category": "regulatory", "description": "FDA"}])
        service, calls = _service(lambda request: httpx.Response(200, json=_reply(reply)))

        topics = await service.suggest_topics("Cold storage")

        assert [t.topic for t in topics] == ["Cold chain rules"]
        assert calls[0]["temperature"] == 0.2
        assert calls[0]["max_tokens"] == 2000
        assert "Cold storage" in calls[0]["messages"][1]["content"]

    @pytest.mark.asyncio
    async def test_results_are_cached(self):
        reply = json.dumps([{"topic": "Tariffs"}])
        service, calls = _service(lambda request: httpx.Response(200, json=_reply(reply)))

        await service.suggest_topics("Importer")
        await service.suggest_topics("Importer")

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_cache_expires(self):
        now = [0.0]
        reply = json.dumps([{"topic": "Tariffs"}])
        service, calls = _service(lambda request: httpx.Response(200, json=_reply(reply)), clock=lambda: now[0])

        await service.suggest_topics("Importer")
        now[0] += 900
        await service.suggest_topics("Importer")

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_http_error_falls_back(self):
        service, calls = _service(lambda request: httpx.Response(502, text="bad gateway"))

        topics = await service.suggest_topics("Importer")
        assert [t.topic for t in topics] == [t["topic"] for t in FALLBACK_TOPICS]

        # Fallbacks are not cached
        await service.suggest_topics("Importer")
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_unusable_reply_falls_back(self):
        service, _ = _service(lambda request: httpx.Response(200, json=_reply("Sorry, I can't help.")))

        sources = await service.suggest_sources("Importer", ["Tariffs", "Freight"])
        assert [s.url for s in sources] == [s["url"] for s in FALLBACK_SOURCES]

    @pytest.mark.asyncio
    async def test_missing_key_falls_back_without_calling(self):
        service, calls = _service(lambda request: httpx.Response(200, json=_reply("[]")), api_key=None)

        competitors = await service.find_competitors(["Acme", " Globex "])

        assert [c.name for c in competitors] == ["Acme", "Globex"]
        assert calls == []

    @pytest.mark.asyncio
    async def test_competitors(self):
        reply = json.dumps([{"name": "Acme", "website": "https://acme.example.com", "blog": None}])
        service, _ = _service(lambda request: httpx.Response(200, json=_reply(reply)))

        competitors = await service.find_competitors("Acme")

        assert competitors[0].website == "https://acme.example.com"
        assert competitors[0].blog == ""


class TestSuggestionEndpoints:

    def test_suggest_topics_without_key(self, client):
        response = client.post("/api/suggest-topics", json={"business_description": "Bakery"})
        assert response.status_code == 200
        assert len(response.json()["topics"]) == len(FALLBACK_TOPICS)

    def test_suggest_sources_uses_app_service(self, client):
        reply = json.dumps([{"name": "USDA", "url": "https://www.usda.gov", "category": "government"}])
        service, _ = _service(lambda request: httpx.Response(200, json=_reply(reply)))
        client.app.state.suggestion_service = service

        response = client.post(
            "/api/suggest-sources",
            json={"business_description": "Bakery", "topics": "Flour prices, Food safety"},
        )
        assert response.status_code == 200
        assert response.json()["sources"][0]["name"] == "USDA"

    def test_missing_description(self, client):
        response = client.post("/api/suggest-topics", json={})
        assert response.status_code == 400
