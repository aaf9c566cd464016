# app/llm/openai_provider.py
"""
OpenAI LLM provider implementation.
"""

import logging

from openai import AsyncOpenAI

from app.llm.base import LLMProvider
from app.logging_config import log_llm_call

logger = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI-based LLM provider."""

    def __init__(
        self,
        api_key: str,
        client: AsyncOpenAI | None = None,
        timeout: float = 30.0,
    ):
        """
        Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key.
            client: Preconfigured client (tests).
            timeout: Per-request timeout in seconds.
        """
        if not api_key and client is None:
            raise ValueError("OpenAI API key required. Set OPENAI_API_KEY env var or pass api_key.")
        self._client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=1)

    @property
    def name(self) -> str:
        return "openai"

    async def generate(
        self,
        prompt: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str | None = None,
    ) -> str:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        with log_llm_call(self.name, model, "classify") as metrics:
            response = await self._client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
            )
            if response.usage:
                metrics["tokens_in"] = response.usage.prompt_tokens
                metrics["tokens_out"] = response.usage.completion_tokens

        return response.choices[0].message.content or ""
