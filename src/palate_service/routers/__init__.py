"""API routers."""

from .knowledge_graph import router as knowledge_graph_router
from .rag import router as rag_router
from .chat import router as chat_router
from .recommendations import router as recommendations_router

__all__ = [
    "knowledge_graph_router",
    "rag_router",
    "chat_router",
    "recommendations_router",
]
