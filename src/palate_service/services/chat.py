"""Chat orchestration: context retrieval, prompt, generation."""

import asyncio
import logging
from typing import Optional

from ..exceptions import InvalidQueryError
from ..graph.nodes import utcnow
from ..models.chat import ChatResponse
from ..models.outcome import enrich
from .context_engine import ContextEngine
from .generation import GenerationProvider, build_prompt_with_context, validate_content
from .knowledge_graph import KnowledgeGraphService
from .summary import NO_PROFILE_SUMMARY

logger = logging.getLogger("chat_service")


class ChatService:
    """Answers a user's question grounded in their knowledge graph context.

    Context reads and the behavior write are enrichments: when the graph is
    unavailable the answer is generated with less context instead of failing.
    """

    def __init__(
        self,
        knowledge_graph: KnowledgeGraphService,
        context_engine: ContextEngine,
        generator: GenerationProvider,
    ):
        self.knowledge_graph = knowledge_graph
        self.context_engine = context_engine
        self.generator = generator

    async def respond(
        self,
        email: str,
        query: str,
        session_id: Optional[str] = None,
    ) -> ChatResponse:
        """Generate a personalized answer.

        Raises:
            InvalidQueryError: If the query is empty or too long
        """
        if not validate_content(query):
            raise InvalidQueryError("Invalid query. Please provide a valid question.")

        logger.info(f"Processing chat request for {email}")

        summary, tags = await asyncio.gather(
            enrich("pattern_summary", self.knowledge_graph.get_user_pattern_summary, email, fallback=""),
            enrich("contextual_tags", self.context_engine.get_contextual_embeddings, email, fallback=[]),
        )

        profile_text = summary.value if summary.value != NO_PROFILE_SUMMARY else None
        prompt = build_prompt_with_context(query, tags.value, profile_text)
        response = await self.generator.generate(prompt)

        session_id = session_id or f"session_{int(utcnow().timestamp() * 1000)}"
        recorded = await enrich(
            "record_behavior",
            self.knowledge_graph.record_user_behavior,
            email,
            "interaction",
            "chat_query",
            query,
            {
                "sessionId": session_id,
                "responseLength": len(response),
                "contextUsed": len(tags.value),
            },
            fallback=None,
        )

        return ChatResponse(
            response=response,
            session_id=session_id,
            context_used=len(tags.value),
            degraded=[e.name for e in (summary, tags, recorded) if e.degraded],
            timestamp=utcnow(),
        )
