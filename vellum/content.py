"""Content processing for Vellum.

This module turns post source files into immutable Post objects. A post is
produced in two sequential steps: the raw front matter is validated against
the schema (see schema.py), then a pure normalization pass derives the
remaining fields (resolved hero image, alt-text fallback, reading time and
category slug).

Key classes:
- Post: Frozen dataclass representing a validated, normalized blog post.
- FileContentLoader: Discovers post source files in the content directory.
- ContentProcessor: Loads every post, collecting validation failures.

Key functions:
- validate_and_normalize: Build a Post from a raw front-matter mapping.
- normalize_post: Derive a Post from already-validated front matter.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from .extractors import (
    CompositeMetadataExtractor,
    FrontmatterError,
    ReadingTimeExtractor,
)
from .images import (
    AssetNotFoundError,
    ImageAsset,
    InvalidImageError,
    image_from_descriptor,
)
from .schema import (
    Category,
    FieldIssue,
    Language,
    Mood,
    PostFrontmatter,
    PostValidationError,
    SeoMeta,
    validate_frontmatter,
)
from .utils import is_content_file, post_id_from_path, slugify

PLACEHOLDER_READING_TIME = "5 min read"

ImageResolverFunc = Callable[[Any, Path | None], ImageAsset]


@dataclass(frozen=True)
class Post:
    """A validated, normalized blog post.

    Attributes:
        id: Unique id derived from the source path (e.g. ``2024/hello``).
        title: Post title.
        description: Short summary.
        pub_date: Publication date (timezone-aware).
        updated_date: Last update date, if any.
        author: Author name.
        hero_image: Resolved hero image, if any.
        hero_image_alt: Alt text; falls back to the title when a hero image
            is present.
        category: Closed category.
        tags: Tags in their original order.
        mood: Optional tone of the post.
        series: Optional series id.
        series_order: Position inside the series.
        draft: Unpublished posts are excluded from feeds.
        featured: Whether the post is highlighted.
        language: Content language.
        reading_time: Reading-time label, always set.
        seo: Optional search-engine overrides.
        body: Markup body (not compared).
        path: Source file path (not compared).
    """

    id: str
    title: str
    description: str
    pub_date: datetime
    updated_date: datetime | None
    author: str
    hero_image: ImageAsset | None
    hero_image_alt: str | None
    category: Category
    tags: tuple[str, ...]
    mood: Mood | None
    series: str | None
    series_order: int | float | None
    draft: bool
    featured: bool
    language: Language
    reading_time: str
    seo: SeoMeta | None
    body: str = field(default="", compare=False, repr=False)
    path: Path | None = field(default=None, compare=False, repr=False)

    @property
    def category_slug(self) -> str:
        return slugify(self.category.value)

    def to_frontmatter(self) -> dict[str, Any]:
        """Return the post as a camelCase front-matter mapping.

        Feeding the result back through validate_and_normalize yields an
        identical Post.
        """
        data: dict[str, Any] = {
            "title": self.title,
            "description": self.description,
            "pubDate": self.pub_date,
            "updatedDate": self.updated_date,
            "author": self.author,
            "heroImage": self.hero_image.to_dict() if self.hero_image else None,
            "heroImageAlt": self.hero_image_alt,
            "category": self.category.value,
            "categorySlug": self.category_slug,
            "tags": list(self.tags),
            "mood": self.mood.value if self.mood else None,
            "series": self.series,
            "seriesOrder": self.series_order,
            "draft": self.draft,
            "featured": self.featured,
            "language": self.language.value,
            "readingTime": self.reading_time,
            "seo": self.seo.model_dump(by_alias=True, exclude_none=True)
            if self.seo
            else None,
        }
        return {key: value for key, value in data.items() if value is not None}


def _resolve_hero_image(
    reference: Any,
    post_id: str,
    image_resolver: ImageResolverFunc | None,
    source_path: Path | None,
) -> ImageAsset:
    """Resolve the hero image reference, reporting failures as schema issues."""
    try:
        if image_resolver is not None:
            return image_resolver(reference, source_path)
        resolved = image_from_descriptor(reference)
        return resolved if resolved is not None else ImageAsset(src=str(reference))
    except (AssetNotFoundError, InvalidImageError) as exc:
        raise PostValidationError(
            post_id, [FieldIssue("heroImage", "invalid_image", str(exc))]
        ) from exc


def normalize_post(
    frontmatter: PostFrontmatter,
    post_id: str,
    image_resolver: ImageResolverFunc | None = None,
    *,
    source_path: Path | None = None,
    body: str = "",
    reading_time: str = PLACEHOLDER_READING_TIME,
) -> Post:
    """Derive a Post from validated front matter.

    Derived values are computed from the final, defaulted fields: the alt
    text falls back to the final title and the category slug follows the
    final category.

    Args:
        frontmatter: Validated front matter.
        post_id: Unique id of the post.
        image_resolver: Callable resolving a hero image reference.
        source_path: Path of the source file, for relative image references.
        body: Markup body.
        reading_time: Label used when the front matter gives none.

    Returns:
        Normalized Post.

    Raises:
        PostValidationError: If the hero image cannot be resolved.
    """
    hero_image = None
    hero_image_alt = frontmatter.hero_image_alt
    if frontmatter.hero_image is not None:
        hero_image = _resolve_hero_image(
            frontmatter.hero_image, post_id, image_resolver, source_path
        )
        hero_image_alt = hero_image_alt or frontmatter.title

    return Post(
        id=post_id,
        title=frontmatter.title,
        description=frontmatter.description,
        pub_date=frontmatter.pub_date,
        updated_date=frontmatter.updated_date,
        author=frontmatter.author,
        hero_image=hero_image,
        hero_image_alt=hero_image_alt,
        category=frontmatter.category,
        tags=tuple(frontmatter.tags),
        mood=frontmatter.mood,
        series=frontmatter.series,
        series_order=frontmatter.series_order,
        draft=frontmatter.draft,
        featured=frontmatter.featured,
        language=frontmatter.language,
        reading_time=frontmatter.reading_time or reading_time,
        seo=frontmatter.seo,
        body=body,
        path=source_path,
    )


def validate_and_normalize(
    raw: Mapping[str, Any],
    post_id: str,
    image_resolver: ImageResolverFunc | None = None,
    *,
    source_path: Path | None = None,
    body: str = "",
    reading_time: str = PLACEHOLDER_READING_TIME,
) -> Post:
    """Validate raw front matter and normalize it into a Post.

    Args:
        raw: Untyped front-matter mapping.
        post_id: Unique id of the post.
        image_resolver: Callable resolving a hero image reference.
        source_path: Path of the source file, for relative image references.
        body: Markup body.
        reading_time: Label used when the front matter gives none.

    Returns:
        Normalized Post.

    Raises:
        PostValidationError: If the record does not match the schema.
    """
    frontmatter = validate_frontmatter(raw, post_id)
    return normalize_post(
        frontmatter,
        post_id,
        image_resolver,
        source_path=source_path,
        body=body,
        reading_time=reading_time,
    )


class FileContentLoader:
    """Discovers post source files in the content directory.

    Attributes:
        content_dir: Root of the post collection.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def iter_files(self) -> list[Path]:
        """Return every Markdown/MDX file, sorted by relative path.

        Returns:
            List of paths to post source files.
        """
        if not self.content_dir.exists():
            return []
        files = [
            path
            for path in self.content_dir.rglob("*")
            if path.is_file() and is_content_file(path)
        ]
        return sorted(files, key=lambda p: p.relative_to(self.content_dir).as_posix())


@dataclass
class LoadResult:
    """Result of loading a post collection.

    Attributes:
        posts: Every post that validated.
        errors: One error per post that failed.
    """

    posts: list[Post] = field(default_factory=list)
    errors: list[PostValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class ContentProcessor:
    """Loads post source files and builds Post objects.

    A failing post is recorded in the result's errors and does not stop the
    remaining posts from loading.

    Attributes:
        content_dir: Root of the post collection.
        image_resolver: Callable resolving hero image references.
        computed_reading_time: Whether to estimate reading time from the body
            instead of using the placeholder.
    """

    def __init__(
        self,
        content_dir: Path,
        image_resolver: ImageResolverFunc | None = None,
        content_loader: FileContentLoader | None = None,
        metadata_extractor: CompositeMetadataExtractor | None = None,
        computed_reading_time: bool = False,
        words_per_minute: int = 200,
    ):
        self.content_dir = content_dir
        self.image_resolver = image_resolver
        self.computed_reading_time = computed_reading_time
        self._content_loader = content_loader or FileContentLoader(content_dir)
        if metadata_extractor is None:
            metadata_extractor = CompositeMetadataExtractor()
            if computed_reading_time:
                metadata_extractor.add_extractor(ReadingTimeExtractor(words_per_minute))
        self._metadata_extractor = metadata_extractor

    def load(self) -> LoadResult:
        """Load every post in the content directory.

        Returns:
            LoadResult with the valid posts and the failures.
        """
        result = LoadResult()
        seen: dict[str, Path] = {}
        for path in self._content_loader.iter_files():
            post_id = post_id_from_path(path, self.content_dir)
            if post_id in seen:
                result.errors.append(
                    PostValidationError(
                        post_id,
                        [
                            FieldIssue(
                                "id",
                                "duplicate_id",
                                f"{path.name} has the same id as {seen[post_id].name}",
                            )
                        ],
                    )
                )
                continue
            seen[post_id] = path
            try:
                result.posts.append(self.load_post(path, post_id))
            except PostValidationError as exc:
                result.errors.append(exc)
        return result

    def load_post(self, path: Path, post_id: str | None = None) -> Post:
        """Build a Post from a source file.

        Args:
            path: Path to the source file.
            post_id: Id to use; derived from the path when omitted.

        Returns:
            Normalized Post.

        Raises:
            PostValidationError: If the file cannot be read as UTF-8 text, its
                front-matter block cannot be parsed, or the front matter fails
                validation.
        """
        if post_id is None:
            post_id = post_id_from_path(path, self.content_dir)
        try:
            text = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as exc:
            raise PostValidationError(
                post_id, [FieldIssue("", "wrong_type", f"Cannot read {path.name}: {exc}")]
            ) from exc
        try:
            metadata = self._metadata_extractor.extract(text, path)
        except FrontmatterError as exc:
            raise PostValidationError(post_id, [FieldIssue("", "wrong_type", str(exc))]) from exc
        return validate_and_normalize(
            metadata.get("frontmatter", {}),
            post_id,
            self.image_resolver,
            source_path=path,
            body=metadata.get("body", text),
            reading_time=metadata.get("reading_time", PLACEHOLDER_READING_TIME),
        )
