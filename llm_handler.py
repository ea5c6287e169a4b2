"""
Remote model clients for embeddings and diff-summary completions.

Pipeline stages depend only on the EmbeddingService and CompletionService
protocols; GeminiClient and OpenAIClient are the concrete providers.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import google.generativeai as genai
from openai import AsyncOpenAI

LOGGER = logging.getLogger(__name__)

DEFAULT_MODELS = {
    "gemini": ("models/text-embedding-004", "gemini-1.5-flash"),
    "openai": ("text-embedding-3-small", "gpt-4.1-mini"),
}


class EmbeddingService(Protocol):
    async def embed(self, text: str) -> List[float]: ...


class CompletionService(Protocol):
    async def complete(
        self, prompt: str, *, max_tokens: int, temperature: float
    ) -> Optional[str]: ...


class GeminiClient:
    """Wrapper around the Google Gemini API for embeddings and text generation."""

    def __init__(self, api_key: str, embedding_model: str, completion_model: str) -> None:
        """
        Initialize the Gemini client.

        Args:
            api_key: Google Gemini API key.
            embedding_model: Name of the embedding model.
            completion_model: Name of the generative model used for diff summaries.
        """
        genai.configure(api_key=api_key)
        self._embedding_model = embedding_model
        self._model = genai.GenerativeModel(completion_model)
        LOGGER.info(
            "Gemini client initialized (embedding=%s, completion=%s)",
            embedding_model,
            completion_model,
        )

    async def embed(self, text: str) -> List[float]:
        result = await genai.embed_content_async(model=self._embedding_model, content=text)
        return list(result["embedding"])

    async def complete(
        self, prompt: str, *, max_tokens: int, temperature: float
    ) -> Optional[str]:
        response = await self._model.generate_content_async(
            prompt,
            generation_config={
                "temperature": temperature,
                "max_output_tokens": max_tokens,
                "candidate_count": 1,
            },
        )
        return _extract_text(response)


class OpenAIClient:
    """Wrapper around the OpenAI API for embeddings and chat completions."""

    def __init__(self, api_key: str, embedding_model: str, completion_model: str) -> None:
        if not api_key:
            raise RuntimeError("Missing OPENAI_API_KEY")
        self._client = AsyncOpenAI(api_key=api_key)
        self._embedding_model = embedding_model
        self._model_name = completion_model
        LOGGER.info(
            "OpenAI client initialized (embedding=%s, completion=%s)",
            embedding_model,
            completion_model,
        )

    async def embed(self, text: str) -> List[float]:
        response = await self._client.embeddings.create(
            model=self._embedding_model,
            input=text,
        )
        return list(response.data[0].embedding)

    async def complete(
        self, prompt: str, *, max_tokens: int, temperature: float
    ) -> Optional[str]:
        response = await self._client.chat.completions.create(
            model=self._model_name,
            messages=[{"role": "user", "content": prompt}],
            max_tokens=max_tokens,
            temperature=temperature,
        )
        content = response.choices[0].message.content
        return content.strip() if content is not None else None


def _extract_text(response) -> Optional[str]:
    """Pull the generated text out of a Gemini response object."""
    candidates = response.candidates
    if not candidates:
        LOGGER.warning("Gemini returned no candidates")
        return None
    # response.text raises when the candidate has no parts (MAX_TOKENS, SAFETY)
    if not candidates[0].content.parts:
        LOGGER.warning(
            "Gemini returned an empty candidate (finish reason: %s)",
            getattr(candidates[0], "finish_reason", "unknown"),
        )
        return None
    return response.text.strip()


def build_client(settings):
    """
    Create the model client selected by ``settings.provider``.

    Args:
        settings: Application settings dataclass.

    Returns:
        A client implementing both EmbeddingService and CompletionService.
    """
    if settings.provider == "gemini":
        return GeminiClient(settings.api_key, settings.embedding_model, settings.completion_model)
    if settings.provider == "openai":
        return OpenAIClient(settings.api_key, settings.embedding_model, settings.completion_model)
    raise ValueError(f"Unsupported provider: {settings.provider}")
