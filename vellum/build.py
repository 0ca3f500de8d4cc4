"""Site building functionality for Vellum.

This module loads the configuration and every post, refuses to continue if
any post is invalid, and writes the derived outputs: the RSS feed, the
sitemap and the theme stylesheet.

Key functions:
- load_posts: Load and validate every post of a project.
- build_site: Build all outputs into the output directory.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .config import SiteConfig, load_site_config
from .content import ContentProcessor, LoadResult, Post
from .feeds import create_default_feed_registry
from .images import ImageResolver
from .schema import PostValidationError
from .theme import render_theme_css
from .utils import ensure_clean_dir

THEME_CSS_FILENAME = "theme.css"


class BuildError(Exception):
    """Error during site build with file context.

    Attributes:
        source_path: Path to the file or directory that caused the error.
        message: Human-readable error message.
        errors: Post validation errors behind the failure, if any.
    """

    def __init__(
        self,
        source_path: Path,
        message: str,
        errors: list[PostValidationError] | None = None,
    ):
        self.source_path = source_path
        self.message = message
        self.errors = list(errors or [])
        super().__init__(f"{source_path}: {message}")


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        posts: Every valid post, drafts included.
        output_dir: Directory where the outputs were written.
        config: Resolved site configuration.
        generated: Filenames written to the output directory.
    """

    posts: list[Post]
    output_dir: Path
    config: SiteConfig
    generated: list[str] = field(default_factory=list)


def create_content_processor(config: SiteConfig) -> ContentProcessor:
    """Create a ContentProcessor wired to the project's directories."""
    resolver = ImageResolver(config.assets_dir, content_dir=config.content_dir)
    return ContentProcessor(
        config.content_dir,
        image_resolver=resolver,
        computed_reading_time=config.computed_reading_time,
        words_per_minute=config.words_per_minute,
    )


def load_posts(config: SiteConfig) -> LoadResult:
    """Load and validate every post of a project.

    Args:
        config: Site configuration.

    Returns:
        LoadResult with the valid posts and every failure.

    Raises:
        FileNotFoundError: If the content directory does not exist.
    """
    if not config.content_dir.exists():
        raise FileNotFoundError(f"Expected content directory at {config.content_dir}")
    return create_content_processor(config).load()


def build_site(
    project_root: Path,
    site: str | None = None,
    output_dir_override: Path | None = None,
    clean_output: bool = True,
) -> BuildResult:
    """Build the feed, sitemap and theme stylesheet.

    Args:
        project_root: Root directory of the project.
        site: Optional site origin overriding vellum.yaml.
        output_dir_override: Optional output directory overriding vellum.yaml.
        clean_output: Whether to wipe the output directory before building.

    Returns:
        BuildResult describing what was written.

    Raises:
        BuildError: If any post fails validation. Nothing is written then.
    """
    config = load_site_config(project_root, site=site)
    if output_dir_override is not None:
        config.output_dir = output_dir_override

    loaded = load_posts(config)
    if not loaded.ok:
        count = len(loaded.errors)
        noun = "post" if count == 1 else "posts"
        raise BuildError(
            config.content_dir,
            f"{count} {noun} failed validation",
            loaded.errors,
        )

    output_dir = config.output_dir
    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    generated = create_default_feed_registry(config).generate_all(
        output_dir, loaded.posts, config
    )
    if config.theme_css:
        (output_dir / THEME_CSS_FILENAME).write_text(render_theme_css(), encoding="utf-8")
        generated.append(THEME_CSS_FILENAME)
    return BuildResult(
        posts=loaded.posts,
        output_dir=output_dir,
        config=config,
        generated=generated,
    )
