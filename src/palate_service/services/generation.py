"""Response generation for chat."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import google.generativeai as genai

from ..config import Settings, get_settings

logger = logging.getLogger("generation")

MAX_QUERY_LENGTH = 1000

SYSTEM_PROMPT = """You are a helpful restaurant recommendation assistant.
You have access to the user's preferences, dietary restrictions and recent activity.
Give personalized, conversational answers that help the user find a great place to eat.
Be concise but friendly, and always respect the user's dietary restrictions."""


def validate_content(content: Optional[str]) -> bool:
    """Reject empty or oversized queries before they reach the model."""
    if not content or not content.strip():
        return False
    if len(content) > MAX_QUERY_LENGTH:
        logger.warning(f"Query exceeds maximum length ({len(content)} > {MAX_QUERY_LENGTH})")
        return False
    return True


def build_prompt_with_context(
    user_query: str,
    context: list[str],
    user_profile: Optional[str] = None,
) -> str:
    """Compose profile summary, retrieved context and the question."""
    parts = []
    if user_profile:
        parts.append(f"User Profile:\n{user_profile}\n")
    if context:
        parts.append("Relevant Context:\n" + "\n".join(context) + "\n")
    parts.append(f"User Query: {user_query}")
    parts.append(
        "\nPlease provide a helpful, personalized response based on the user's profile and context."
    )
    return "\n".join(parts)


class GenerationProvider(ABC):
    """Prompt in, text out."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        ...


class TemplateGenerationProvider(GenerationProvider):
    """Deterministic canned answers keyed on the prompt wording."""

    async def generate(self, prompt: str) -> str:
        text = prompt.lower()
        if "recommend" in text:
            return (
                "Based on your profile, I have a few suggestions that match your tastes "
                "and dietary needs. Tell me the area you're in and I'll narrow them down."
            )
        if "what" in text and "eat" in text:
            return (
                "Looking at your preferences and recent activity, something light and fresh "
                "could be a good fit right now. Want me to find places nearby?"
            )
        return (
            "I'd be happy to help you find the perfect restaurant! What kind of cuisine "
            "are you in the mood for, or should I suggest something based on your preferences?"
        )


class GeminiGenerationProvider(GenerationProvider):
    """Gemini model; answers from templates when no API key is configured."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.fallback = TemplateGenerationProvider()
        self._init_gemini()

    def _init_gemini(self):
        """Initialize Gemini API."""
        if self.settings.gemini_api_key:
            genai.configure(api_key=self.settings.gemini_api_key)
            self.model = genai.GenerativeModel(
                self.settings.gemini_model,
                system_instruction=SYSTEM_PROMPT,
            )
        else:
            self.model = None

    async def generate(self, prompt: str) -> str:
        if self.model is None:
            return await self.fallback.generate(prompt)

        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config=genai.GenerationConfig(
                    temperature=self.settings.llm_temperature,
                    max_output_tokens=self.settings.llm_max_tokens,
                ),
            )
            return response.text.strip()
        except Exception as e:
            logger.error(f"Gemini generation error: {e}")
            return await self.fallback.generate(prompt)
