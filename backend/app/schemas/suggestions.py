"""Schemas for AI suggestions; external replies are validated item by item."""
from pydantic import BaseModel, Field, field_validator
from typing import List, Union

TOPIC_CATEGORIES = {"regulatory", "market", "competitor", "industry"}
SOURCE_CATEGORIES = {"government", "publication", "news", "association", "research", "blog"}


class TopicSuggestion(BaseModel):
    """Suggested monitoring topic."""
    topic: str = Field(..., min_length=1)
    category: str = "industry"
    description: str = ""

    @field_validator("category", mode="before")
    @classmethod
    def known_category(cls, value):
        value = str(value or "").strip().lower()
        return value if value in TOPIC_CATEGORIES else "industry"


class SourceSuggestion(BaseModel):
    """Suggested information source."""
    name: str = Field(..., min_length=1)
    url: str = Field(..., pattern=r"^https?://")
    description: str = ""
    category: str = "news"

    @field_validator("category", mode="before")
    @classmethod
    def known_category(cls, value):
        value = str(value or "").strip().lower()
        return value if value in SOURCE_CATEGORIES else "news"


class CompetitorPresence(BaseModel):
    """Online presence found for a competitor."""
    name: str = Field(..., min_length=1)
    website: str = ""
    blog: str = ""
    press: str = ""
    description: str = ""

    @field_validator("website", "blog", "press", "description", mode="before")
    @classmethod
    def blank_if_missing(cls, value):
        return value if isinstance(value, str) else ""


class SuggestTopicsRequest(BaseModel):
    """Request schema for /api/suggest-topics endpoint."""
    business_description: str = Field(..., min_length=1)


class SuggestSourcesRequest(BaseModel):
    """Request schema for /api/suggest-sources endpoint."""
    business_description: str = Field(..., min_length=1)
    topics: Union[List[str], str]


class FindCompetitorsRequest(BaseModel):
    """Request schema for /api/find-competitors endpoint."""
    competitor_names: Union[List[str], str]


class TopicsResponse(BaseModel):
    success: bool
    topics: List[TopicSuggestion]


class SourcesResponse(BaseModel):
    success: bool
    sources: List[SourceSuggestion]


class CompetitorsResponse(BaseModel):
    success: bool
    competitors: List[CompetitorPresence]
