"""Unified LLM client — tries OpenAI first, falls back to Anthropic."""

import logging

import anthropic
from openai import AsyncOpenAI

from truefare.config import settings

logger = logging.getLogger(__name__)

OPENAI_MODEL = "gpt-4o-mini"
ANTHROPIC_MODEL = "claude-sonnet-4-5-20250929"


class LLMClient:
    """Async LLM client with OpenAI primary + Anthropic fallback."""

    def __init__(self, openai_api_key: str | None = None, anthropic_api_key: str | None = None):
        openai_key = settings.openai_api_key if openai_api_key is None else openai_api_key
        anthropic_key = settings.anthropic_api_key if anthropic_api_key is None else anthropic_api_key

        self._openai = AsyncOpenAI(api_key=openai_key) if openai_key else None
        self._anthropic = anthropic.AsyncAnthropic(api_key=anthropic_key) if anthropic_key else None

    @property
    def available(self) -> bool:
        return self._openai is not None or self._anthropic is not None

    async def complete(
        self,
        system: str,
        user: str,
        *,
        max_tokens: int = 200,
        temperature: float = 0.4,
    ) -> str:
        """Single-turn completion from the best available LLM.

        Raises:
            RuntimeError if no provider is configured or all of them fail.
        """
        errors = []
        messages = [{"role": "user", "content": user}]

        if self._openai:
            try:
                response = await self._openai.chat.completions.create(
                    model=OPENAI_MODEL,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    messages=[{"role": "system", "content": system}] + messages,
                )
                return (response.choices[0].message.content or "").strip()
            except Exception as e:
                errors.append(f"OpenAI: {e}")
                logger.warning(f"OpenAI failed, trying Anthropic: {e}")

        if self._anthropic:
            try:
                response = await self._anthropic.messages.create(
                    model=ANTHROPIC_MODEL,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=system,
                    messages=messages,
                )
                return response.content[0].text.strip()
            except Exception as e:
                errors.append(f"Anthropic: {e}")
                logger.warning(f"Anthropic also failed: {e}")

        if not errors:
            raise RuntimeError("No LLM provider configured")
        raise RuntimeError(f"All LLM providers failed: {'; '.join(errors)}")


# Singleton
llm_client = LLMClient()
