# app/utils/content_sanitizer.py
"""
Shared utilities for turning feed and platform markup into display text.

Handles:
- HTML tag stripping and entity unescaping for titles and snippets
- Whitespace collapsing
- Common web scraping artifacts in extracted article bodies
  ("Advertisement", "Share this", etc.)

This module centralizes cleanup so it isn't duplicated across the parser,
normalizer and full-article fetch.
"""

import html
import re

TAG_PATTERN = re.compile(r"<[^>]+>")
WHITESPACE_PATTERN = re.compile(r"\s+")

# Common scraping artifacts to strip from extracted article bodies.
# Each pattern matches a full line (anchored with ^ and $, MULTILINE).
BODY_ARTIFACT_PATTERNS = [
    re.compile(
        r"^(?:RECOMMENDED|RELATED|MORE|TRENDING|POPULAR)\s+(?:STORIES|ARTICLES|NEWS|READS|POSTS)\s*$",
        re.MULTILINE | re.IGNORECASE,
    ),
    re.compile(r"^(?:Advertisement|Sponsored|Ad)\s*$", re.MULTILINE | re.IGNORECASE),
    re.compile(r"^(?:Share this|Share on|Follow us on|Subscribe to)\b.*$", re.MULTILINE | re.IGNORECASE),
    re.compile(
        r"^(?:Read more|Continue reading|Click here|Sign up|Log in|Subscribe)\s*$",
        re.MULTILINE | re.IGNORECASE,
    ),
    re.compile(r"^(?:We use cookies|This site uses cookies|Accept cookies)\b.*$", re.MULTILINE | re.IGNORECASE),
]


def strip_html(text: str | None) -> str:
    """Remove tags, unescape entities and collapse whitespace."""
    if not text:
        return ""
    if "<" in text:
        text = TAG_PATTERN.sub(" ", text)
    text = html.unescape(text)
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def clean_title(title: str | None, default: str = "Untitled") -> str:
    """Display-safe title: no markup, never empty."""
    cleaned = strip_html(title)
    return cleaned or default


def clean_body_artifacts(text: str) -> str:
    """Strip common scraping artifacts from an extracted article body."""
    for pattern in BODY_ARTIFACT_PATTERNS:
        text = pattern.sub("", text)
    # Collapse excessive blank lines left by removed artifacts
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()
