# app/services/llm_classifier.py
"""
LLM-based topic tagging and summarization for content records.

Classification is best-effort enrichment: it never blocks persistence. Every
failure (no provider configured, a transport error, a non-JSON reply, a
reply of the wrong shape) degrades to empty categories and an empty summary.
Bodies at or below CLASSIFICATION_MIN_BODY_CHARS are not sent at all.
"""

import json
import logging
import re
from dataclasses import dataclass, field

from app.config import get_settings
from app.exceptions import ClassificationError
from app.llm import LLMProvider, get_llm_provider
from app.llm.prompts import CLASSIFICATION_SYSTEM_PROMPT, CLASSIFICATION_USER_TEMPLATE

logger = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class ClassificationResult:
    """Result of classifying a single record."""
    categories: list[str] = field(default_factory=list)
    summary: str = ""
    status: str = STATUS_OK   # "ok", "skipped" or "failed"
    error: str | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def truncate_body(body: str, max_chars: int) -> str:
    """Cap the body embedded in the prompt, marking the cut with '...'."""
    if len(body) > max_chars:
        return body[:max_chars] + "..."
    return body


def build_prompt(title: str, body: str, max_chars: int) -> str:
    return CLASSIFICATION_USER_TEMPLATE.format(
        title=title or "",
        content=truncate_body(body, max_chars),
    )


def parse_classification(text: str) -> tuple[list[str], str]:
    """
    Parse a classification reply.

    Raises:
        ClassificationError: reply is not a JSON object
    """
    candidate = (text or "").strip()
    fenced = CODE_FENCE_PATTERN.search(candidate)
    if fenced:
        candidate = fenced.group(1).strip()

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ClassificationError(f"Reply is not JSON: {candidate[:200]}") from e

    if not isinstance(data, dict):
        raise ClassificationError(f"Reply is not a JSON object: {type(data).__name__}")

    raw_categories = data.get("categories")
    categories = []
    if isinstance(raw_categories, list):
        categories = [c.strip() for c in raw_categories if isinstance(c, str) and c.strip()]

    summary = data.get("summary")
    if not isinstance(summary, str):
        summary = ""

    return categories, summary.strip()


# ---------------------------------------------------------------------------
# Enricher
# ---------------------------------------------------------------------------

class ClassificationEnricher:
    """
    Derive topic tags and a short summary for a record.

    Usage:
        enricher = ClassificationEnricher()
        result = await enricher.classify(record.title, record.body)
        record.ai_categories, record.ai_summary = result.categories, result.summary
    """

    def __init__(self, provider: LLMProvider | None = None, use_default_provider: bool = True):
        settings = get_settings()
        if provider is None and use_default_provider:
            provider = get_llm_provider()
        self.provider = provider
        self.model = settings.CLASSIFICATION_MODEL
        self.temperature = settings.CLASSIFICATION_TEMPERATURE
        self.max_tokens = settings.CLASSIFICATION_MAX_TOKENS
        self.min_body_chars = settings.CLASSIFICATION_MIN_BODY_CHARS
        self.max_body_chars = settings.CLASSIFICATION_MAX_BODY_CHARS

        if self.provider is None:
            logger.info("[CLASSIFY] No LLM provider configured; classification disabled")

    async def classify(self, title: str, body: str) -> ClassificationResult:
        """Never raises. Failures come back as an empty result with status 'failed'."""
        body = body or ""
        if len(body) <= self.min_body_chars:
            return ClassificationResult(status=STATUS_SKIPPED)
        if self.provider is None:
            return ClassificationResult(status=STATUS_SKIPPED, error="no LLM provider configured")

        prompt = build_prompt(title, body, self.max_body_chars)
        try:
            reply = await self._generate(prompt)
            categories, summary = parse_classification(reply)
        except ClassificationError as e:
            logger.warning(f"[CLASSIFY] Unusable reply for '{title[:60]}': {e}")
            return ClassificationResult(status=STATUS_FAILED, error=str(e))

        return ClassificationResult(categories=categories, summary=summary, status=STATUS_OK)

    async def _generate(self, prompt: str) -> str:
        try:
            return await self.provider.generate(
                prompt,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                system_prompt=CLASSIFICATION_SYSTEM_PROMPT,
            )
        except Exception as e:
            # Any provider failure (network, auth, rate limit) is a classification failure
            raise ClassificationError(f"{self.provider.name} call failed: {e}") from e
