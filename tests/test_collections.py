from datetime import datetime, timezone

from vellum.collections import PostCollection
from vellum.content import validate_and_normalize
from vellum.schema import Category


def make_post(post_id, pub_date, **fields):
    raw = {"title": post_id.title(), "description": "d", "pubDate": pub_date}
    raw.update(fields)
    return validate_and_normalize(raw, post_id)


def test_post_collection_filters_and_latest():
    posts = PostCollection(
        [
            make_post("a", "2024-01-02", category="engineering"),
            make_post("b", "2024-01-03", draft=True, featured=True),
            make_post("c", "2024-01-01", tags=["python"], category="engineering"),
        ]
    )
    assert len(posts) == 3
    assert [p.id for p in posts.published()] == ["a", "c"]
    assert [p.id for p in posts.drafts()] == ["b"]
    assert [p.id for p in posts.featured()] == ["b"]
    assert [p.id for p in posts.with_tag("python")] == ["c"]
    assert [p.id for p in posts.in_category("engineering")] == ["a", "c"]
    assert [p.id for p in posts.in_category(Category.NOTES)] == ["b"]
    assert posts.latest(1)[0].id == "b"
    assert [p.id for p in posts.sorted(reverse=False)] == ["c", "a", "b"]
    assert posts[0].id == "a"


def test_sorted_is_stable_for_equal_dates():
    posts = PostCollection(
        [
            make_post("first", "2024-01-01"),
            make_post("second", "2024-01-01"),
            make_post("newer", "2024-02-01"),
        ]
    )
    assert [p.id for p in posts.sorted()] == ["newer", "first", "second"]
    assert [p.id for p in posts.sorted(reverse=False)] == ["first", "second", "newer"]


def test_sorted_compares_instants_across_offsets():
    posts = PostCollection(
        [
            make_post("utc", datetime(2024, 1, 1, 12, tzinfo=timezone.utc)),
            make_post("tokyo", "2024-01-01T20:00:00+09:00"),
        ]
    )
    assert [p.id for p in posts.sorted()] == ["utc", "tokyo"]


def test_series_orders_by_position():
    posts = PostCollection(
        [
            make_post("part-two", "2024-01-01", series="compose", seriesOrder=2),
            make_post("extra", "2024-01-05", series="compose"),
            make_post("part-one", "2024-03-01", series="compose", seriesOrder=1),
            make_post("other", "2024-01-01", series="kotlin", seriesOrder=1),
        ]
    )
    assert [p.id for p in posts.series("compose")] == ["part-one", "part-two", "extra"]
    assert len(posts.series("missing")) == 0


def test_categories_and_tags_grouping():
    posts = PostCollection(
        [
            make_post("a", "2024-01-01", category="life", tags=["travel", "food"]),
            make_post("b", "2024-01-02", category="engineering", tags=["kotlin"]),
            make_post("c", "2024-01-03", category="life", tags=["food"]),
        ]
    )
    grouped = posts.categories()
    assert list(grouped) == [Category.ENGINEERING, Category.LIFE]
    assert [p.id for p in grouped[Category.LIFE]] == ["a", "c"]

    tags = posts.tags()
    assert list(tags) == ["travel", "food", "kotlin"]
    assert [p.id for p in tags["food"]] == ["a", "c"]
