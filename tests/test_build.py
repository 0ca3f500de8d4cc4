from pathlib import Path

import pytest
from PIL import Image

from vellum.build import BuildError, build_site, load_posts
from vellum.config import load_site_config


def write_post(path: Path, frontmatter: str, body: str = "Hello there.\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"---\n{frontmatter}---\n\n{body}", encoding="utf-8")


def create_project(root: Path) -> Path:
    (root / "vellum.yaml").write_text("site: https://khoivan.dev\n", encoding="utf-8")
    content = root / "src" / "content" / "blog"
    write_post(
        content / "2024" / "compose.md",
        "title: Compose tips\n"
        "description: Things I learned\n"
        "pubDate: 2024-02-01\n"
        "category: engineering\n"
        "tags: [android, compose]\n"
        "heroImage: ./compose.png\n",
    )
    Image.new("RGB", (16, 9), color="navy").save(content / "2024" / "compose.png")
    write_post(
        content / "hanoi.mdx",
        "title: Weekend in Hanoi\n"
        "description: Coffee and streets\n"
        "pubDate: 2024-03-01\n"
        "category: life\n"
        "tags: [travel]\n"
        "heroImage: /covers/hanoi.jpg\n",
    )
    covers = root / "src" / "assets" / "covers"
    covers.mkdir(parents=True)
    Image.new("RGB", (32, 18), color="orange").save(covers / "hanoi.jpg")
    write_post(
        content / "draft.md",
        "title: Not yet\ndescription: Work in progress\npubDate: 2024-04-01\ndraft: true\n",
    )
    return content


def test_build_site_writes_outputs(tmp_path):
    create_project(tmp_path)
    result = build_site(tmp_path)

    assert result.output_dir == tmp_path / "dist"
    assert result.generated == ["rss.xml", "sitemap.xml", "theme.css"]
    assert sorted(p.id for p in result.posts) == ["2024/compose", "draft", "hanoi"]

    rss = (result.output_dir / "rss.xml").read_text(encoding="utf-8")
    assert rss.index("https://khoivan.dev/blog/hanoi") < rss.index(
        "https://khoivan.dev/blog/2024/compose"
    )
    assert "Not yet" not in rss
    assert "<category>engineering</category><category>android</category>" in rss

    sitemap = (result.output_dir / "sitemap.xml").read_text(encoding="utf-8")
    assert "https://khoivan.dev/blog/2024/compose" in sitemap
    assert "draft" not in sitemap

    css = (result.output_dir / "theme.css").read_text(encoding="utf-8")
    assert ".prose-invert" in css


def test_build_site_resolves_hero_images(tmp_path):
    create_project(tmp_path)
    posts = {post.id: post for post in build_site(tmp_path).posts}

    compose = posts["2024/compose"]
    assert compose.hero_image.src == "/assets/images/2024/compose.png"
    assert (compose.hero_image.width, compose.hero_image.height) == (16, 9)
    assert compose.hero_image.format == "PNG"
    assert compose.hero_image_alt == "Compose tips"

    hanoi = posts["hanoi"]
    assert hanoi.hero_image.src == "/assets/images/covers/hanoi.jpg"
    assert hanoi.hero_image.format == "JPEG"
    assert posts["draft"].hero_image is None
    assert posts["draft"].hero_image_alt is None


def test_build_site_overrides(tmp_path):
    create_project(tmp_path)
    (tmp_path / "vellum.yaml").write_text("integrations:\n  theme_css: false\n", encoding="utf-8")
    out = tmp_path / "public"

    result = build_site(tmp_path, output_dir_override=out)
    assert result.output_dir == out
    # no site origin, so only the theme switch matters and it is off
    assert result.generated == []

    result = build_site(tmp_path, site="https://example.org", output_dir_override=out)
    assert result.generated == ["rss.xml", "sitemap.xml"]
    assert "https://example.org/blog/hanoi" in (out / "rss.xml").read_text(encoding="utf-8")


def test_build_site_cleans_output(tmp_path):
    create_project(tmp_path)
    stale = tmp_path / "dist" / "old.html"
    stale.parent.mkdir()
    stale.write_text("old", encoding="utf-8")

    build_site(tmp_path, clean_output=False)
    assert stale.exists()
    build_site(tmp_path)
    assert not stale.exists()


def test_build_site_fails_on_invalid_posts(tmp_path):
    content = create_project(tmp_path)
    write_post(content / "broken.md", "title: Broken\ncategory: cooking\n")
    write_post(
        content / "missing-image.md",
        "title: Lost\ndescription: d\npubDate: 2024-01-01\nheroImage: ./nowhere.png\n",
    )
    stale = tmp_path / "dist" / "keep.txt"
    stale.parent.mkdir()
    stale.write_text("keep", encoding="utf-8")

    with pytest.raises(BuildError) as excinfo:
        build_site(tmp_path)

    error = excinfo.value
    assert error.source_path == content
    assert error.message == "2 posts failed validation"
    by_id = {e.post_id: e for e in error.errors}
    assert set(by_id) == {"broken", "missing-image"}
    assert set(by_id["broken"].fields) == {"description", "pubDate", "category"}
    assert by_id["missing-image"].issues[0].kind == "invalid_image"
    assert stale.exists()


def test_load_posts_requires_content_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_posts(load_site_config(tmp_path))


def test_load_posts_computed_reading_time(tmp_path):
    content = create_project(tmp_path)
    write_post(
        content / "long.md",
        "title: Long\ndescription: d\npubDate: 2024-01-01\n",
        body="word " * 401,
    )
    (tmp_path / "vellum.yaml").write_text("reading_time: computed\n", encoding="utf-8")
    posts = {post.id: post for post in load_posts(load_site_config(tmp_path)).posts}
    assert posts["long"].reading_time == "3 min read"
    assert posts["hanoi"].reading_time == "1 min read"
