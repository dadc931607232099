"""Chat API endpoint."""

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_chat_service
from ..exceptions import InvalidQueryError
from ..models.chat import ChatRequest, ChatResponse
from ..services.chat import ChatService

router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    data: ChatRequest,
    service: ChatService = Depends(get_chat_service),
) -> ChatResponse:
    """Answer a question using the user's context."""
    try:
        return await service.respond(data.email, data.user_query, data.session_id)
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e))
