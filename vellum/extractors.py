"""Metadata extractors for Vellum.

Each extractor pulls one kind of metadata out of a post's source text and
returns it as a dictionary; CompositeMetadataExtractor merges the results.

Key classes:
- FrontmatterError: Raised for a front-matter block that cannot be parsed.
- FrontmatterExtractor: Splits YAML front matter from the markup body.
- ReadingTimeExtractor: Estimates reading time from the rendered body.
"""

from __future__ import annotations

import html
import math
import re
from pathlib import Path
from typing import Any

import mistune
import yaml

FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)
TAG_RE = re.compile(r"<[^>]+>")
MDX_STATEMENT_RE = re.compile(r"^(?:import|export)\s.*$", re.MULTILINE)
CJK_RE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af]")
WORD_RE = re.compile(r"\w+(?:'\w+)?")

DEFAULT_WORDS_PER_MINUTE = 200


class FrontmatterError(Exception):
    """Error raised when a front-matter block cannot be used."""


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from content, failing on a broken block.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front matter dict, remaining body). Content without a
        front-matter block yields an empty dict.

    Raises:
        FrontmatterError: If the block is not valid YAML or not a mapping.
    """
    text = text.lstrip("\ufeff")
    match = FRONTMATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(f"Invalid YAML front matter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        )
    return data, text[match.end() :]


def extract_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Extract YAML front matter from content.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front matter dict, remaining body). Content without a
        front-matter block, or whose block is not a YAML mapping, yields an
        empty dict.
    """
    try:
        return parse_frontmatter(text)
    except FrontmatterError:
        return {}, text.lstrip("\ufeff")


def count_words(text: str) -> int:
    """Count words in plain text; each CJK character counts as one word."""
    text = html.unescape(text)
    cjk_count = len(CJK_RE.findall(text))
    text = CJK_RE.sub(" ", text)
    return cjk_count + len(WORD_RE.findall(text))


def estimate_reading_time(
    body: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE
) -> str:
    """Estimate the reading time of a Markdown/MDX body.

    The body is rendered with mistune so markup does not count as words,
    then tags are stripped.

    Args:
        body: Markdown body without front matter.
        words_per_minute: Reading speed.

    Returns:
        A label such as ``"3 min read"``; never less than one minute.
    """
    source = MDX_STATEMENT_RE.sub("", body)
    rendered = mistune.html(source)
    words = count_words(TAG_RE.sub(" ", rendered))
    minutes = max(1, math.ceil(words / max(1, words_per_minute)))
    return f"{minutes} min read"


class FrontmatterExtractor:
    """Extracts YAML front matter from content.

    Parses the YAML block at the beginning of the file (between ---
    markers).
    """

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract front matter from content.

        Args:
            content: Source content with potential front matter.
            path: Path to the source file (unused).

        Returns:
            Dictionary with 'frontmatter' and 'body' keys.

        Raises:
            FrontmatterError: If the front-matter block is broken.
        """
        frontmatter, body = parse_frontmatter(content)
        return {"frontmatter": frontmatter, "body": body}


class ReadingTimeExtractor:
    """Computes a reading-time label from the post body."""

    def __init__(self, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE):
        self.words_per_minute = words_per_minute

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        _, body = extract_frontmatter(content)
        return {"reading_time": estimate_reading_time(body, self.words_per_minute)}


class CompositeMetadataExtractor:
    """Combines multiple metadata extractors.

    Runs every extractor on the content and merges their results. Later
    extractors can override earlier ones.
    """

    def __init__(self, extractors: list | None = None):
        """Initialize with a list of extractors.

        Args:
            extractors: Extractor instances. If None, only front matter is
                extracted.
        """
        if extractors is None:
            self._extractors = [FrontmatterExtractor()]
        else:
            self._extractors = list(extractors)

    def add_extractor(self, extractor) -> None:
        """Add an extractor to the composite.

        Args:
            extractor: An object with an ``extract(content, path)`` method.
        """
        self._extractors.append(extractor)

    def extract(self, content: str, path: Path) -> dict[str, Any]:
        """Extract all metadata from content.

        Args:
            content: Source content.
            path: Path to the source file.

        Returns:
            Dictionary with all extracted metadata.
        """
        result: dict[str, Any] = {}
        for extractor in self._extractors:
            result.update(extractor.extract(content, path))
        return result
