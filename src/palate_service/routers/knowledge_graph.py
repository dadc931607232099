"""Knowledge graph API endpoints."""

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, EmailStr, Field

from ..dependencies import get_knowledge_graph
from ..exceptions import UserNotFoundError
from ..models.behavior import BehaviorCreate
from ..models.profile import SimilarUser, UserProfile
from ..models.restaurant import RestaurantCreate
from ..services.knowledge_graph import KnowledgeGraphService

router = APIRouter(prefix="/knowledge-graph", tags=["Knowledge Graph"])


class UserSync(BaseModel):
    email: EmailStr
    extra: dict[str, Any] = Field(default_factory=dict)


class BehaviorRecord(BehaviorCreate):
    email: EmailStr


@router.post("/initialize")
async def initialize_schema(
    service: KnowledgeGraphService = Depends(get_knowledge_graph),
) -> dict:
    """Create constraints and indexes."""
    applied = await service.initialize_schema()
    return {"success": True, "applied": applied}


@router.post("/users")
async def sync_user(
    data: UserSync,
    service: KnowledgeGraphService = Depends(get_knowledge_graph),
) -> dict:
    """Create or update a user from their onboarding answers."""
    user_id = await service.create_or_update_user(data.email, data.extra or None)
    if user_id is None:
        raise HTTPException(status_code=404, detail="No onboarding data found for user")
    return {"success": True, "user_id": user_id}


@router.post("/behaviors", status_code=201)
async def record_behavior(
    data: BehaviorRecord,
    service: KnowledgeGraphService = Depends(get_knowledge_graph),
) -> dict:
    """Record a user behavior."""
    try:
        behavior_id = await service.record_user_behavior(
            data.email, data.type, data.action, data.context, data.metadata
        )
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"success": True, "behavior_id": behavior_id}


@router.post("/restaurants", status_code=201)
async def create_restaurant(
    data: RestaurantCreate,
    service: KnowledgeGraphService = Depends(get_knowledge_graph),
) -> dict:
    """Create or update a restaurant."""
    restaurant_id = await service.create_restaurant_node(data)
    return {"success": True, "restaurant_id": restaurant_id}


@router.post("/cleanup")
async def cleanup_behaviors(
    days_to_keep: Optional[int] = Query(None, ge=0),
    service: KnowledgeGraphService = Depends(get_knowledge_graph),
) -> dict:
    """Delete behaviors older than the retention window."""
    deleted = await service.cleanup_old_behaviors(days_to_keep)
    return {"success": True, "deleted": deleted}


@router.get("/profile", response_model=UserProfile)
async def get_profile(
    email: EmailStr,
    service: KnowledgeGraphService = Depends(get_knowledge_graph),
) -> UserProfile:
    """Get a user's graph profile."""
    profile = await service.get_user_profile(email)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return profile


@router.get("/similar-users", response_model=list[SimilarUser])
async def get_similar_users(
    email: EmailStr,
    limit: int = Query(10, ge=1, le=100),
    service: KnowledgeGraphService = Depends(get_knowledge_graph),
) -> list[SimilarUser]:
    """Find users sharing preferences."""
    return await service.find_similar_users(email, limit)


@router.get("/context")
async def get_semantic_context(
    email: EmailStr,
    service: KnowledgeGraphService = Depends(get_knowledge_graph),
) -> dict:
    """Get the natural-language profile summary."""
    return {"email": email, "context": await service.get_semantic_context(email)}
