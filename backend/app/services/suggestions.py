"""Topic, source and competitor suggestions from the Perplexity chat API.

Replies are free-form text. The first JSON array/object in a reply is parsed
and each item is validated on its own; anything unusable falls back to a
small default list so the wizard step never fails.
"""
import json
import re
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from app.config import Settings
from app.schemas.suggestions import CompetitorPresence, SourceSuggestion, TopicSuggestion
from app.utils.cache import TTLCache
from app.utils.exceptions import ExternalServiceError
from app.utils.logger import get_logger

logger = get_logger("suggestions")

M = TypeVar("M", bound=BaseModel)

_JSON_BLOCK = re.compile(r"\[[\s\S]*\]|\{[\s\S]*\}")

FALLBACK_TOPICS = [
    {"topic": "Industry regulations", "category": "regulatory", "description": "Track regulatory changes"},
    {"topic": "Market trends", "category": "market", "description": "Monitor market developments"},
    {"topic": "Competitor news", "category": "competitor", "description": "Track competitor activities"},
]

FALLBACK_SOURCES = [
    {
        "name": "Reuters Business",
        "url": "https://www.reuters.com/business",
        "description": "Global business news",
        "category": "news",
    },
    {
        "name": "Industry Week",
        "url": "https://www.industryweek.com",
        "description": "Manufacturing and industry news",
        "category": "publication",
    },
]

TOPICS_PROMPT = """Based on this business description: "{description}"

Suggest 8-10 highly relevant monitoring topics that would be valuable for this business to track. Include regulatory topics, market trends, competitor activities, and industry developments.

Return ONLY a JSON array of objects with this exact format:
[
  {{
    "topic": "Topic name",
    "category": "regulatory|market|competitor|industry",
    "description": "Why this is relevant"
  }}
]

Return valid JSON only, no additional text."""

SOURCES_PROMPT = """Find the top 10 most authoritative sources for monitoring these topics: {topics}

Business context: {description}

Include:
- Government regulatory sites
- Industry publications and journals
- Major news outlets covering this sector
- Trade associations
- Research institutions
- Authoritative blogs

Return ONLY a JSON array with this exact format:
[
  {{
    "name": "Source name",
    "url": "https://full-url.com",
    "description": "Brief description of why it's valuable",
    "category": "government|publication|news|association|research|blog"
  }}
]

Return valid JSON only, no additional text. Ensure all URLs are complete and valid."""

COMPETITORS_PROMPT = """Find online presence (websites, blogs, press pages, social media) for these companies/competitors: {names}

Return ONLY a JSON array with this exact format:
[
  {{
    "name": "Company name",
    "website": "https://main-website.com",
    "blog": "https://blog-url.com",
    "press": "https://press-or-news-url.com",
    "description": "Brief description"
  }}
]

Include all available URLs. Return valid JSON only, no additional text."""


def join_terms(value: Union[Sequence[str], str]) -> str:
    if isinstance(value, str):
        return value
    return ", ".join(v.strip() for v in value if v and v.strip())


def extract_json(content: str) -> Optional[Any]:
    """Pull the first JSON array or object out of a model reply."""
    match = _JSON_BLOCK.search(content or "")
    if not match:
        return None
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse JSON from suggestion reply: {e}")
        return None


def validate_items(data: Any, model: Type[M]) -> List[M]:
    """Validate each item of a parsed reply, dropping the ones that do not fit."""
    if not isinstance(data, list):
        return []

    items = []
    for raw in data:
        try:
            items.append(model.model_validate(raw))
        except ValidationError:
            logger.debug(f"Dropping malformed {model.__name__}: {raw!r}")
    return items


class SuggestionService:
    """
    Perplexity-backed suggestion lookups with a TTL cache in front.

    Only validated API results are cached; fallbacks are recomputed on the
    next call.
    """

    def __init__(
        self,
        settings: Settings,
        cache: TTLCache,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self.cache = cache
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.settings.perplexity_api_key)

    async def _query(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run one chat completion.

        Returns:
            The assistant message text

        Raises:
            ExternalServiceError: If the key is missing or the call fails
        """
        if not self.configured:
            raise ExternalServiceError("Perplexity API key not configured")

        body = {
            "model": self.settings.perplexity_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": 0.2,
            "max_tokens": 2000,
        }
        headers = {
            "Authorization": f"Bearer {self.settings.perplexity_api_key}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.settings.ai_request_timeout, transport=self._transport) as client:
                response = await client.post(self.settings.perplexity_api_url, json=body, headers=headers)
                response.raise_for_status()
                return response.json()["choices"][0]["message"]["content"]
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(
                "Perplexity API failed",
                details=f"{e.response.status_code} - {e.response.text[:500]}",
            ) from e
        except httpx.HTTPError as e:
            raise ExternalServiceError("Perplexity API failed", details=str(e)) from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ExternalServiceError("Unexpected Perplexity response shape", details=str(e)) from e

    async def _suggest(
        self,
        kind: str,
        cache_input: Any,
        system_prompt: str,
        user_prompt: str,
        model: Type[M],
        fallback: List[Dict[str, Any]],
    ) -> List[M]:
        cache_key = TTLCache.make_key(kind, cache_input)
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            content = await self._query(system_prompt, user_prompt)
        except ExternalServiceError as e:
            logger.warning(f"{kind} suggestion failed, using fallback: {e.message} {e.details or ''}")
            return [model.model_validate(item) for item in fallback]

        items = validate_items(extract_json(content), model)
        if not items:
            logger.warning(f"No usable {kind} in Perplexity reply, using fallback")
            return [model.model_validate(item) for item in fallback]

        self.cache.set(cache_key, items)
        return items

    async def suggest_topics(self, business_description: str) -> List[TopicSuggestion]:
        """Suggest monitoring topics for a business."""
        return await self._suggest(
            "topics",
            business_description,
            "You are a business intelligence assistant. Always respond with valid JSON arrays.",
            TOPICS_PROMPT.format(description=business_description),
            TopicSuggestion,
            FALLBACK_TOPICS,
        )

    async def suggest_sources(
        self,
        business_description: str,
        topics: Union[Sequence[str], str],
    ) -> List[SourceSuggestion]:
        """Suggest authoritative sources for a business and its topics."""
        topics_str = join_terms(topics)
        return await self._suggest(
            "sources",
            {"businessDescription": business_description, "topics": topics_str},
            "You are a research assistant that finds authoritative information sources. "
            "Always respond with valid JSON arrays containing real, accessible URLs.",
            SOURCES_PROMPT.format(topics=topics_str, description=business_description),
            SourceSuggestion,
            FALLBACK_SOURCES,
        )

    async def find_competitors(self, competitor_names: Union[Sequence[str], str]) -> List[CompetitorPresence]:
        """Find websites, blogs and press pages of named competitors."""
        names_str = join_terms(competitor_names)
        fallback = [
            {"name": name.strip(), "description": "Competitor tracking enabled"}
            for name in names_str.split(",")
            if name.strip()
        ]
        return await self._suggest(
            "competitors",
            names_str,
            "You are a competitive intelligence assistant. Always respond with valid JSON arrays containing real URLs.",
            COMPETITORS_PROMPT.format(names=names_str),
            CompetitorPresence,
            fallback,
        )
