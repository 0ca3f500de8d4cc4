"""Utility functions for Vellum.

This module contains small helpers used throughout the Vellum codebase:
string processing, path handling and XML escaping.

Key functions:
    slugify: Lower-case a value and turn whitespace runs into hyphens.
    post_id_from_path: Derive a post id from its content source path.
    is_content_file: Check if a path is a Markdown or MDX post.
    ensure_clean_dir: Ensure a directory exists and is empty.
    escape_xml: Escape special characters for XML text and attributes.
    join_url: Join a base URL with a path.
    rfc822_date: Format a datetime for RSS.
"""

from __future__ import annotations

import re
import shutil
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

CONTENT_SUFFIXES = (".md", ".mdx")

_WHITESPACE_RE = re.compile(r"\s+")


def slugify(value: str) -> str:
    """Convert a value to a slug by lower-casing and hyphenating whitespace.

    Only whitespace is rewritten; other characters are kept as-is so the
    slug of a category stays recognisable.

    Args:
        value: Text to convert.

    Returns:
        Slug string.

    Examples:
        >>> slugify("Engineering")
        'engineering'

        >>> slugify("Side  Projects")
        'side-projects'
    """
    return _WHITESPACE_RE.sub("-", value.lower())


def post_id_from_path(path: Path, content_dir: Path) -> str:
    """Derive the unique post id from a content file path.

    The id is the path relative to the content directory, without its
    extension, using POSIX separators.

    Args:
        path: Path to the content file.
        content_dir: Root of the content collection.

    Returns:
        Post id such as ``2024/hello-world``.
    """
    rel = path.relative_to(content_dir).with_suffix("")
    parts = [slugify(part.strip()) for part in rel.parts]
    return "/".join(parts)


def is_content_file(path: Path) -> bool:
    """Check if a path is a post source file.

    Args:
        path: Path to check.

    Returns:
        True if the file has a .md or .mdx extension (case-insensitive).
    """
    return path.suffix.lower() in CONTENT_SUFFIXES


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(str(path))
    path.mkdir(parents=True, exist_ok=True)


def escape_xml(text: str) -> str:
    """Escape special characters in a string for XML output.

    Args:
        text: The string to escape.

    Returns:
        The escaped string.

    Examples:
        >>> escape_xml('Tom & "Jerry" <3')
        'Tom &amp; &quot;Jerry&quot; &lt;3'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def join_url(base: str, path: str) -> str:
    """Safely join a base URL and a path, avoiding double slashes.

    Args:
        base: Base URL or path prefix (e.g., https://example.com or /blog/).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_url('https://example.com/', '/blog/hello')
        'https://example.com/blog/hello'

        >>> join_url('/blog/', 'hello')
        '/blog/hello'
    """
    if not base:
        return path
    head = base.rstrip("/")
    tail = path if path.startswith("/") else f"/{path}"
    return f"{head}{tail}"


def rfc822_date(value: datetime) -> str:
    """Format a datetime as an RFC 822 date in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%a, %d %b %Y %H:%M:%S +0000")


def build_tags_index(posts: Iterable) -> dict[str, list]:
    """Build an index mapping tags to lists of posts carrying that tag.

    Args:
        posts: Iterable of Post objects with a 'tags' attribute.

    Returns:
        Dictionary mapping tag names to lists of posts, in input order.
    """
    tags: dict[str, list] = {}
    for post in posts:
        for tag in post.tags:
            tags.setdefault(tag, []).append(post)
    return tags
