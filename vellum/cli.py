"""Command-line interface for Vellum.

This module defines the CLI commands using Click framework.

Commands:
- build: Validate every post and write the feed, sitemap and theme stylesheet.
- check: Validate every post and report failures.
- feed: Print the RSS feed to stdout.
- new: Create a new post interactively.
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .config import ConfigError, load_site_config
from .schema import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    Category,
    Language,
    PostValidationError,
    validate_frontmatter,
)


@click.group()
@click.version_option(version=__version__, prog_name="vellum")
def cli():
    """Vellum blog content toolkit."""


def _report_errors(errors: list[PostValidationError]) -> None:
    for error in errors:
        click.echo(click.style(f"  Post: {error.post_id}", fg="yellow"), err=True)
        for issue in error.issues:
            click.echo(click.style(f"    {issue}", fg="white"), err=True)


@cli.command()
@click.option("--site", help="Canonical site origin (overrides vellum.yaml)")
@click.option(
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Output directory (overrides vellum.yaml)",
)
def build(site: str | None, output_dir: Path | None):
    """Build the feed, sitemap and theme stylesheet."""
    project_root = Path.cwd()
    from .build import BuildError, build_site

    try:
        result = build_site(project_root, site=site, output_dir_override=output_dir)
    except BuildError as exc:
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        _report_errors(exc.errors)
        raise SystemExit(1) from None
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    published = sum(1 for post in result.posts if not post.draft)
    click.echo(
        f"Built {', '.join(result.generated) or 'nothing'} from {published} published "
        f"posts into {result.output_dir}"
    )


@cli.command()
def check():
    """Validate every post and report failures."""
    from .build import load_posts

    try:
        config = load_site_config(Path.cwd())
        loaded = load_posts(config)
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    if loaded.errors:
        click.echo(
            click.style(f"{len(loaded.errors)} invalid posts:", fg="red", bold=True),
            err=True,
        )
        _report_errors(loaded.errors)
        raise SystemExit(1)
    click.echo(f"All {len(loaded.posts)} posts are valid.")


@cli.command()
@click.option("--site", help="Canonical site origin (overrides vellum.yaml)")
def feed(site: str | None):
    """Print the RSS feed to stdout."""
    from .build import load_posts
    from .feeds import build_feed, render_rss

    try:
        config = load_site_config(Path.cwd(), site=site)
        loaded = load_posts(config)
    except (ConfigError, FileNotFoundError) as exc:
        raise click.ClickException(str(exc)) from exc
    if not config.site:
        raise click.ClickException(
            "No site origin configured; pass --site or set it in vellum.yaml."
        )
    if loaded.errors:
        _report_errors(loaded.errors)
        raise SystemExit(1)
    document = build_feed(
        loaded.posts,
        config.site,
        title=config.title,
        description=config.description,
        link_prefix=config.feed.link_prefix,
        language=config.feed.language,
        stylesheet=config.feed.stylesheet,
    )
    click.echo(render_rss(document))


@cli.command()
def new():
    """Create a new post interactively."""
    try:
        config = load_site_config(Path.cwd())
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    content_dir = config.content_dir
    if not content_dir.exists():
        raise click.ClickException(
            f"No content directory found at {content_dir}. Run this command from a project root."
        )

    title = questionary.text(
        "Title:",
        validate=lambda x: 0 < len(x.strip()) <= TITLE_MAX_LENGTH
        or f"Title must be 1-{TITLE_MAX_LENGTH} characters",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()

    description = questionary.text(
        "Description:",
        validate=lambda x: len(x.strip()) <= DESCRIPTION_MAX_LENGTH
        or f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters",
        style=_questionary_style(),
    ).ask()
    if description is None:
        raise click.Abort()

    category = questionary.select(
        "Category:",
        choices=[c.value for c in Category],
        default=Category.NOTES.value,
        style=_questionary_style(),
    ).ask()
    if category is None:
        raise click.Abort()

    language = questionary.select(
        "Language:",
        choices=[lang.value for lang in Language],
        default=Language.VI.value,
        style=_questionary_style(),
    ).ask()
    if language is None:
        raise click.Abort()

    tags = questionary.text(
        "Tags (comma separated):",
        style=_questionary_style(),
    ).ask()
    if tags is None:
        raise click.Abort()

    draft = questionary.confirm(
        "Save as draft?",
        default=True,
        style=_questionary_style(),
    ).ask()
    if draft is None:
        raise click.Abort()

    slug = _slug_from_title(title)
    target_path = content_dir / f"{slug}.md"
    existing = [p for p in content_dir.glob(f"{slug}.*") if p.suffix in (".md", ".mdx")]
    if existing:
        raise click.ClickException(
            f"A post with slug '{slug}' already exists: {existing[0].name}"
        )

    frontmatter = {
        "title": title.strip(),
        "description": description.strip(),
        "pubDate": date.today().isoformat(),
        "category": category,
        "tags": _parse_tags(tags),
        "language": language,
        "draft": bool(draft),
    }
    try:
        validate_frontmatter(frontmatter, slug)
    except PostValidationError as exc:
        raise click.ClickException(str(exc)) from exc

    header = yaml.safe_dump(frontmatter, sort_keys=False, allow_unicode=True)
    target_path.write_text(
        f"---\n{header}---\n\n# {frontmatter['title']}\n", encoding="utf-8"
    )
    click.echo(f"Created {target_path.relative_to(config.project_root)}")


def _slug_from_title(title: str) -> str:
    """Convert a title to a file name slug."""
    slug = re.sub(r"[^\w]+", "-", title.lower(), flags=re.UNICODE)
    return slug.strip("-_").replace("_", "-") or "post"


def _parse_tags(value: str) -> list[str]:
    """Split a comma separated tag list, dropping blanks and duplicates."""
    tags: list[str] = []
    for tag in (part.strip() for part in value.split(",")):
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
