"""RAG context API endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import EmailStr

from ..dependencies import get_context_engine
from ..models.context import RAGContext, RecommendationConstraints
from ..services.context_engine import ContextEngine

router = APIRouter(prefix="/rag", tags=["RAG Context"])


@router.get("/context", response_model=RAGContext)
async def get_rag_context(
    email: EmailStr,
    engine: ContextEngine = Depends(get_context_engine),
) -> RAGContext:
    """Get the structured context bundle for a user."""
    context = await engine.generate_rag_context(email)
    if not context:
        raise HTTPException(status_code=404, detail="User not found")
    return context


@router.get("/summary")
async def get_context_summary(
    email: EmailStr,
    engine: ContextEngine = Depends(get_context_engine),
) -> dict:
    """Get the prompt-ready context summary."""
    return {"email": email, "summary": await engine.generate_context_summary(email)}


@router.get("/tags", response_model=list[str])
async def get_contextual_tags(
    email: EmailStr,
    engine: ContextEngine = Depends(get_context_engine),
) -> list[str]:
    """Get semantic index keys for a user."""
    return await engine.get_contextual_embeddings(email)


@router.get("/constraints", response_model=RecommendationConstraints)
async def get_recommendation_constraints(
    email: EmailStr,
    engine: ContextEngine = Depends(get_context_engine),
) -> RecommendationConstraints:
    """Get must-have / must-avoid / preference constraints."""
    return await engine.get_restaurant_recommendation_context(email)
