from datetime import datetime, timedelta, timezone
from pathlib import Path

from vellum.utils import (
    ensure_clean_dir,
    escape_xml,
    is_content_file,
    join_url,
    post_id_from_path,
    rfc822_date,
    slugify,
)


def test_slugify():
    assert slugify("Engineering") == "engineering"
    assert slugify("Side  Projects") == "side-projects"
    assert slugify("C++ & Kotlin") == "c++-&-kotlin"


def test_post_id_from_path():
    content = Path("/site/src/content/blog")
    assert post_id_from_path(content / "hello.md", content) == "hello"
    assert post_id_from_path(content / "2024" / "Jetpack Compose.mdx", content) == (
        "2024/jetpack-compose"
    )


def test_is_content_file():
    assert is_content_file(Path("a.md"))
    assert is_content_file(Path("b.MDX"))
    assert not is_content_file(Path("c.txt"))
    assert not is_content_file(Path("README"))


def test_ensure_clean_dir(tmp_path):
    target = tmp_path / "out"
    target.mkdir()
    (target / "stale.xml").write_text("x", encoding="utf-8")
    ensure_clean_dir(target)
    assert target.exists()
    assert list(target.iterdir()) == []

    fresh = tmp_path / "nested" / "dir"
    ensure_clean_dir(fresh)
    assert fresh.is_dir()


def test_escape_xml():
    assert escape_xml('Tom & "Jerry" <3') == "Tom &amp; &quot;Jerry&quot; &lt;3"
    assert escape_xml("a > b") == "a &gt; b"


def test_join_url():
    assert join_url("https://example.com/", "/blog/hello") == "https://example.com/blog/hello"
    assert join_url("/blog/", "hello") == "/blog/hello"
    assert join_url("/blog", "2024/hello") == "/blog/2024/hello"
    assert join_url("", "/blog/x") == "/blog/x"


def test_rfc822_date():
    assert rfc822_date(datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)) == (
        "Tue, 02 Jan 2024 03:04:05 +0000"
    )
    offset = timezone(timedelta(hours=7))
    assert rfc822_date(datetime(2024, 1, 2, 3, 0, tzinfo=offset)) == (
        "Mon, 01 Jan 2024 20:00:00 +0000"
    )
    assert rfc822_date(datetime(2024, 1, 2)) == "Tue, 02 Jan 2024 00:00:00 +0000"
