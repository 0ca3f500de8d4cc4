"""Feed generation for Vellum.

This module derives the site's syndication outputs from validated posts.
build_feed produces a structured FeedDocument (drafts removed, newest
first, one item per post); render_rss serializes it to RSS 2.0. Writing
files is handled by FeedGenerator subclasses collected in a FeedRegistry,
so new formats can be added without touching the build.

Classes:
    FeedItem: One syndication entry derived from a Post.
    FeedDocument: Channel metadata plus ordered items.
    FeedGenerator: Base class for feed writers.
    RSSGenerator: Writes the RSS feed.
    SitemapGenerator: Writes sitemap.xml.
    FeedRegistry: Registry for managing feed generators.

Functions:
    build_feed: Filter, order and project posts into a FeedDocument.
    render_rss: Serialize a FeedDocument to RSS 2.0 XML.
    create_default_feed_registry: Create a registry with default generators.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from .collections import PostCollection
from .utils import escape_xml, join_url, rfc822_date

if TYPE_CHECKING:
    from .config import SiteConfig
    from .content import Post

DEFAULT_FEED_TITLE = "Khoi Van - Android Developer Blog"
DEFAULT_FEED_DESCRIPTION = (
    "Technical articles about Android development, Clean Architecture, "
    "Jetpack Compose, and more."
)
DEFAULT_LINK_PREFIX = "/blog/"
DEFAULT_FEED_LANGUAGE = "vi-vn"
DEFAULT_FEED_STYLESHEET = "/rss-styles.xsl"


@dataclass(frozen=True)
class FeedItem:
    """A syndication entry.

    Attributes:
        title: Post title.
        pub_date: Publication date.
        description: Post description.
        author: Post author.
        categories: Category first, then tags in their original order.
        link: Site-relative link built from the post id.
    """

    title: str
    pub_date: datetime
    description: str
    author: str
    categories: tuple[str, ...]
    link: str


@dataclass
class FeedDocument:
    """A syndication feed ready to be serialized.

    Attributes:
        title: Channel title.
        description: Channel description.
        site: Canonical site origin.
        items: Feed items, newest first.
        language: Language tag written as custom channel data.
        stylesheet: URL of the XSL stylesheet, or None.
    """

    title: str
    description: str
    site: str
    items: list[FeedItem] = field(default_factory=list)
    language: str = DEFAULT_FEED_LANGUAGE
    stylesheet: str | None = DEFAULT_FEED_STYLESHEET


def post_link(post: Post, link_prefix: str = DEFAULT_LINK_PREFIX) -> str:
    """Return the site-relative link of a post, derived from its id only."""
    return join_url(link_prefix, post.id)


def feed_item(post: Post, link_prefix: str = DEFAULT_LINK_PREFIX) -> FeedItem:
    """Project a Post into a FeedItem."""
    return FeedItem(
        title=post.title,
        pub_date=post.pub_date,
        description=post.description,
        author=post.author,
        categories=(post.category.value, *post.tags),
        link=post_link(post, link_prefix),
    )


def build_feed(
    posts: Iterable[Post],
    site_origin: str,
    *,
    title: str = DEFAULT_FEED_TITLE,
    description: str = DEFAULT_FEED_DESCRIPTION,
    link_prefix: str = DEFAULT_LINK_PREFIX,
    language: str = DEFAULT_FEED_LANGUAGE,
    stylesheet: str | None = DEFAULT_FEED_STYLESHEET,
) -> FeedDocument:
    """Build a feed document from validated posts.

    Drafts are dropped and the remaining posts are ordered newest first.
    The sort is stable: posts sharing a publication date keep their input
    order.

    Args:
        posts: Validated posts, in any order.
        site_origin: Canonical site origin.
        title: Channel title.
        description: Channel description.
        link_prefix: Path prefix joined with each post id.
        language: Language tag for the channel.
        stylesheet: XSL stylesheet URL, or None for no stylesheet.

    Returns:
        FeedDocument with one item per published post.
    """
    published = PostCollection(posts).published().sorted()
    return FeedDocument(
        title=title,
        description=description,
        site=site_origin,
        items=[feed_item(post, link_prefix) for post in published],
        language=language,
        stylesheet=stylesheet,
    )


def render_rss(document: FeedDocument, build_date: datetime | None = None) -> str:
    """Serialize a FeedDocument to RSS 2.0 XML.

    Item links are made absolute against the document's site origin.

    Args:
        document: Feed to serialize.
        build_date: Value for lastBuildDate; defaults to now (UTC).

    Returns:
        RSS XML content.
    """
    site = document.site.rstrip("/")
    build_date = build_date or datetime.now(timezone.utc)
    lines = ['<?xml version="1.0" encoding="UTF-8"?>']
    if document.stylesheet:
        lines.append(
            f'<?xml-stylesheet href="{escape_xml(document.stylesheet)}" type="text/xsl"?>'
        )
    lines.extend(
        [
            '<rss version="2.0"><channel>',
            f"<title>{escape_xml(document.title)}</title>",
            f"<description>{escape_xml(document.description)}</description>",
            f"<link>{escape_xml(site + '/')}</link>",
            f"<language>{escape_xml(document.language)}</language>",
            f"<lastBuildDate>{rfc822_date(build_date)}</lastBuildDate>",
        ]
    )
    for item in document.items:
        link = escape_xml(join_url(site, item.link))
        categories = "".join(
            f"<category>{escape_xml(category)}</category>" for category in item.categories
        )
        lines.append(
            f"<item><title>{escape_xml(item.title)}</title><link>{link}</link>"
            f'<guid isPermaLink="true">{link}</guid>'
            f"<description>{escape_xml(item.description)}</description>"
            f"<pubDate>{rfc822_date(item.pub_date)}</pubDate>"
            f"<author>{escape_xml(item.author)}</author>{categories}</item>"
        )
    lines.append("</channel></rss>")
    return "\n".join(lines)


class FeedGenerator(ABC):
    """Abstract base class for feed generators.

    Subclasses implement specific feed formats. New formats can be added by
    creating new subclasses and registering them.
    """

    @property
    @abstractmethod
    def filename(self) -> str:
        """Return the output filename for this feed."""
        ...

    @abstractmethod
    def generate(self, posts: Iterable[Post], config: SiteConfig) -> str | None:
        """Generate feed content from posts.

        Args:
            posts: Validated posts.
            config: Site configuration.

        Returns:
            Feed content as a string, or None if the feed cannot be generated
            (e.g., no site origin configured).
        """
        ...

    def write(self, output_dir: Path, posts: Iterable[Post], config: SiteConfig) -> bool:
        """Generate and write the feed to the output directory.

        Returns:
            True if the feed was written, False if skipped.
        """
        content = self.generate(posts, config)
        if content is None:
            return False
        output_path = output_dir / self.filename
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        return True


class RSSGenerator(FeedGenerator):
    """Generates the RSS 2.0 feed of published posts.

    Requires a site origin to build absolute links.
    """

    def __init__(self, filename: str = "rss.xml"):
        self._filename = filename

    @property
    def filename(self) -> str:
        return self._filename

    def generate(self, posts: Iterable[Post], config: SiteConfig) -> str | None:
        if not config.site:
            print("No site origin configured; skipping RSS feed.")
            return None
        document = build_feed(
            posts,
            config.site,
            title=config.title,
            description=config.description,
            link_prefix=config.feed.link_prefix,
            language=config.feed.language,
            stylesheet=config.feed.stylesheet,
        )
        return render_rss(document)


class SitemapGenerator(FeedGenerator):
    """Generates sitemap.xml for search engine indexing.

    Lists the site root and every published post that is not marked
    ``noindex``. Requires a site origin to build absolute URLs.
    """

    @property
    def filename(self) -> str:
        return "sitemap.xml"

    def generate(self, posts: Iterable[Post], config: SiteConfig) -> str | None:
        if not config.site:
            print("No site origin configured; skipping sitemap.")
            return None
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
            f"  <url><loc>{escape_xml(config.site + '/')}</loc></url>",
        ]
        for post in PostCollection(posts).published().sorted():
            if post.seo is not None and post.seo.noindex:
                continue
            path = post_link(post, config.feed.link_prefix)
            if config.build_format == "directory":
                path = f"{path}/"
            loc = escape_xml(join_url(config.site, path))
            lastmod = (post.updated_date or post.pub_date).strftime("%Y-%m-%d")
            lines.append(f"  <url><loc>{loc}</loc><lastmod>{lastmod}</lastmod></url>")
        lines.append("</urlset>")
        return "\n".join(lines)


class FeedRegistry:
    """Registry for managing feed generators.

    Attributes:
        _generators: List of registered feed generators.
    """

    def __init__(self) -> None:
        self._generators: list[FeedGenerator] = []

    def register(self, generator: FeedGenerator) -> None:
        """Register a feed generator.

        Args:
            generator: Feed generator to register.
        """
        self._generators.append(generator)

    def generate_all(
        self,
        output_dir: Path,
        posts: Iterable[Post],
        config: SiteConfig,
    ) -> list[str]:
        """Generate all registered feeds.

        Args:
            output_dir: Directory to write feed files to.
            posts: Validated posts.
            config: Site configuration.

        Returns:
            List of filenames that were generated.
        """
        posts_list = list(posts)
        generated = []
        for generator in self._generators:
            if generator.write(output_dir, posts_list, config):
                generated.append(generator.filename)
        return generated


def create_default_feed_registry(config: SiteConfig) -> FeedRegistry:
    """Create a registry with the feeds enabled in the configuration.

    Returns:
        FeedRegistry with the RSS generator and, unless disabled, the
        sitemap generator.
    """
    registry = FeedRegistry()
    registry.register(RSSGenerator(config.feed.path))
    if config.sitemap:
        registry.register(SitemapGenerator())
    return registry
