# app/llm/base.py
"""
Base interface for LLM providers.
Allows swapping the backing model service without touching callers.
"""

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name (e.g., 'openai')."""
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        model: str,
        temperature: float,
        max_tokens: int,
        system_prompt: str | None = None,
    ) -> str:
        """
        Run a single completion and return the raw text.

        Raises whatever the underlying client raises; callers decide how to degrade.
        """
        pass
