"""Restaurant recommendation API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, EmailStr

from ..dependencies import get_recommendation_service
from ..exceptions import OnboardingIncompleteError
from ..models.recommendation import (
    Readiness,
    RecommendationData,
    RestaurantQueries,
    UserLocation,
)
from ..services.recommendations import RecommendationService

router = APIRouter(prefix="/recommendations", tags=["Recommendations"])


class RecommendationRequest(BaseModel):
    email: EmailStr
    location: UserLocation


@router.post("", response_model=RecommendationData)
async def fetch_recommendations(
    data: RecommendationRequest,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RecommendationData:
    """Search restaurants matching the user's preferences near a location."""
    try:
        return await service.fetch_recommendations(data.email, data.location)
    except OnboardingIncompleteError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/queries", response_model=RestaurantQueries)
async def preview_queries(
    email: EmailStr,
    service: RecommendationService = Depends(get_recommendation_service),
) -> RestaurantQueries:
    """Preview the search queries for a user."""
    queries = await service.get_search_queries_preview(email)
    if queries is None:
        raise HTTPException(status_code=409, detail="User has not completed onboarding")
    return queries


@router.get("/readiness", response_model=Readiness)
async def check_readiness(
    email: EmailStr,
    service: RecommendationService = Depends(get_recommendation_service),
) -> Readiness:
    """Check whether recommendations can be fetched for a user."""
    return await service.validate_user_readiness(email)
