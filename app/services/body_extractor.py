"""
Full-article body extraction for feed articles.

Feeds often carry only an excerpt. On request, the article page is
downloaded (with retries and exponential backoff) and the readable body is
extracted with trafilatura, falling back to readability-lxml on the same HTML.
"""

import configparser
import logging
import time
from dataclasses import dataclass
from enum import Enum

import trafilatura
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.utils.content_sanitizer import clean_body_artifacts, strip_html

logger = logging.getLogger(__name__)


class ExtractionFailureReason(str, Enum):
    DOWNLOAD_FAILED = "download_failed"
    EXTRACTION_FAILED = "extraction_failed"
    TIMEOUT = "timeout"
    UNKNOWN = "unknown"


@dataclass
class ExtractionResult:
    """Result of a body extraction attempt."""

    success: bool
    body: str | None = None
    char_count: int = 0
    failure_reason: ExtractionFailureReason | None = None
    duration_ms: int = 0
    extractor_used: str | None = None  # "trafilatura" or "readability"


class BodyExtractor:
    """Download an article page and extract its readable body."""

    MIN_BODY_LENGTH = 200
    TIMEOUT_SECONDS = 15

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type((TimeoutError, ConnectionError, OSError)),
        reraise=True,
    )
    def _fetch_with_retry(self, url: str) -> str | None:
        config = configparser.ConfigParser()
        config.read_dict({"DEFAULT": {"DOWNLOAD_TIMEOUT": str(self.TIMEOUT_SECONDS)}})
        return trafilatura.fetch_url(url, config=config)

    def _try_trafilatura(self, html: str) -> str | None:
        text = trafilatura.extract(
            html,
            include_comments=False,
            include_tables=False,
            no_fallback=False,
        )
        if text and len(text) >= self.MIN_BODY_LENGTH:
            return text
        return None

    def _try_readability(self, html: str) -> str | None:
        """Fallback extractor using readability-lxml (Mozilla algorithm)."""
        from readability import Document

        text = strip_html(Document(html).summary())
        if text and len(text) >= self.MIN_BODY_LENGTH:
            return text
        return None

    def extract_from_html(self, html: str) -> tuple[str, str] | None:
        """Run the extractors in order on already-downloaded HTML. Returns (body, extractor)."""
        for extractor_fn, name in ((self._try_trafilatura, "trafilatura"), (self._try_readability, "readability")):
            try:
                text = extractor_fn(html)
            except Exception as e:
                # Both libraries raise a variety of parser errors on hostile markup
                logger.debug(f"{name} extraction failed: {e}")
                continue
            if text:
                return clean_body_artifacts(text), name
        return None

    def extract(self, url: str) -> ExtractionResult:
        start_time = time.time()

        def elapsed() -> int:
            return int((time.time() - start_time) * 1000)

        try:
            downloaded = self._fetch_with_retry(url)
        except (TimeoutError, ConnectionError, OSError) as e:
            logger.warning(f"[EXTRACT] Download failed for {url}: {e}")
            reason = ExtractionFailureReason.TIMEOUT if isinstance(e, TimeoutError) else ExtractionFailureReason.DOWNLOAD_FAILED
            return ExtractionResult(success=False, failure_reason=reason, duration_ms=elapsed())

        if not downloaded:
            return ExtractionResult(
                success=False,
                failure_reason=ExtractionFailureReason.DOWNLOAD_FAILED,
                duration_ms=elapsed(),
            )

        extracted = self.extract_from_html(downloaded)
        if not extracted:
            return ExtractionResult(
                success=False,
                failure_reason=ExtractionFailureReason.EXTRACTION_FAILED,
                duration_ms=elapsed(),
            )

        body, extractor = extracted
        logger.info(f"[EXTRACT] {extractor} extracted {len(body)} chars from {url}")
        return ExtractionResult(
            success=True,
            body=body,
            char_count=len(body),
            duration_ms=elapsed(),
            extractor_used=extractor,
        )
