# app/llm/__init__.py
"""
LLM provider abstraction layer.

Usage:
    from app.llm import get_llm_provider

    provider = get_llm_provider()  # None when no API key is configured
    text = await provider.generate(prompt, model="gpt-4o-mini", temperature=0.3, max_tokens=300)
"""

from app.config import get_settings
from app.llm.base import LLMProvider

__all__ = [
    "LLMProvider",
    "get_llm_provider",
]


def get_llm_provider(
    provider_name: str | None = None,
    **kwargs,
) -> LLMProvider | None:
    """
    Factory function to get an LLM provider instance.

    Args:
        provider_name: Provider to use. Defaults to the LLM_PROVIDER setting.
        **kwargs: Additional arguments passed to the provider constructor

    Returns:
        Configured LLMProvider, or None if the provider has no credentials
    """
    settings = get_settings()
    name = (provider_name or settings.LLM_PROVIDER).lower().strip()

    if name == "openai":
        api_key = kwargs.pop("api_key", None) or settings.OPENAI_API_KEY
        if not api_key:
            return None

        from app.llm.openai_provider import OpenAIProvider

        return OpenAIProvider(api_key=api_key, **kwargs)

    raise ValueError(
        f"Unknown LLM provider: {name}. Available: openai"
    )
