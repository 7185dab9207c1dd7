"""AI suggestion endpoints for the profile wizard."""
from fastapi import APIRouter, Depends, Request

from app.schemas.suggestions import (
    CompetitorsResponse,
    FindCompetitorsRequest,
    SourcesResponse,
    SuggestSourcesRequest,
    SuggestTopicsRequest,
    TopicsResponse,
)
from app.services.suggestions import SuggestionService

router = APIRouter(prefix="/api", tags=["suggestions"])


def get_suggestion_service(request: Request) -> SuggestionService:
    """Suggestion service created at startup."""
    return request.app.state.suggestion_service


@router.post("/suggest-topics", response_model=TopicsResponse)
async def suggest_topics(
    request: SuggestTopicsRequest,
    service: SuggestionService = Depends(get_suggestion_service),
) -> TopicsResponse:
    topics = await service.suggest_topics(request.business_description)
    return TopicsResponse(success=True, topics=topics)


@router.post("/suggest-sources", response_model=SourcesResponse)
async def suggest_sources(
    request: SuggestSourcesRequest,
    service: SuggestionService = Depends(get_suggestion_service),
) -> SourcesResponse:
    sources = await service.suggest_sources(request.business_description, request.topics)
    return SourcesResponse(success=True, sources=sources)


@router.post("/find-competitors", response_model=CompetitorsResponse)
async def find_competitors(
    request: FindCompetitorsRequest,
    service: SuggestionService = Depends(get_suggestion_service),
) -> CompetitorsResponse:
    """Look up the online presence of named competitors."""
    competitors = await service.find_competitors(request.competitor_names)
    return CompetitorsResponse(success=True, competitors=competitors)
