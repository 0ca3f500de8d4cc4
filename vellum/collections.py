from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from .content import Post
from .schema import Category
from .utils import build_tags_index


class PostCollection(Sequence[Post]):
    """Lightweight helper for working with lists of Posts."""

    def __init__(self, posts: Iterable[Post]):
        self._posts = list(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        return self._posts[item]

    def published(self) -> PostCollection:
        return PostCollection(p for p in self._posts if not p.draft)

    def drafts(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.draft)

    def featured(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.featured)

    def with_tag(self, tag: str) -> PostCollection:
        return PostCollection(p for p in self._posts if tag in p.tags)

    def in_category(self, category: Category | str) -> PostCollection:
        value = Category(category)
        return PostCollection(p for p in self._posts if p.category is value)

    def sorted(self, reverse: bool = True) -> PostCollection:
        """Sort posts by publication date.

        The sort is stable, so posts sharing a date keep their current
        relative order in either direction.

        Args:
            reverse: If True (default), newest first.

        Returns:
            A new PostCollection with sorted posts.
        """
        ordered = sorted(self._posts, key=lambda p: p.pub_date, reverse=reverse)
        return PostCollection(ordered)

    def latest(self, count: int = 5) -> PostCollection:
        return PostCollection(self.sorted()[:count])

    def series(self, name: str) -> PostCollection:
        """Return the posts of a series in reading order.

        Posts are ordered by ``series_order``; posts without an order go last.
        Ties fall back to publication date.
        """
        members = [p for p in self._posts if p.series == name]

        def sort_key(p: Post):
            missing = p.series_order is None
            return (missing, p.series_order or 0, p.pub_date)

        return PostCollection(sorted(members, key=sort_key))

    def categories(self) -> dict[Category, PostCollection]:
        """Group posts by category, keeping the enumeration's order."""
        grouped = {}
        for category in Category:
            members = self.in_category(category)
            if members:
                grouped[category] = members
        return grouped

    def tags(self) -> dict[str, PostCollection]:
        """Group posts by tag, in order of first appearance."""
        return {
            tag: PostCollection(posts) for tag, posts in build_tags_index(self._posts).items()
        }

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"
