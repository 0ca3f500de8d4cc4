from pathlib import Path

import pytest
from PIL import Image

from vellum.images import (
    AssetNotFoundError,
    ImageAsset,
    ImageResolver,
    InvalidImageError,
    image_from_descriptor,
)


def create_project(tmp_path: Path) -> tuple[Path, Path]:
    content = tmp_path / "src" / "content" / "blog"
    assets = tmp_path / "src" / "assets"
    (content / "2024").mkdir(parents=True)
    (assets / "covers").mkdir(parents=True)
    Image.new("RGB", (4, 3), color="red").save(content / "2024" / "hero.png")
    Image.new("RGB", (8, 6), color="blue").save(assets / "covers" / "shared.jpg")
    (content / "2024" / "post.md").write_text("---\n---\n", encoding="utf-8")
    return content, assets


def test_relative_reference_resolves_next_to_post(tmp_path):
    content, assets = create_project(tmp_path)
    resolver = ImageResolver(assets, content_dir=content)
    asset = resolver.resolve("./hero.png", content / "2024" / "post.md")
    assert asset == ImageAsset(
        src="/assets/images/2024/hero.png", width=4, height=3, format="PNG"
    )


def test_parent_relative_reference(tmp_path):
    content, assets = create_project(tmp_path)
    resolver = ImageResolver(assets, content_dir=content)
    asset = resolver("../../../assets/covers/shared.jpg", content / "2024" / "post.md")
    assert asset.src == "/assets/images/covers/shared.jpg"
    assert (asset.width, asset.height, asset.format) == (8, 6, "JPEG")


def test_root_and_bare_references_use_assets_dir(tmp_path):
    content, assets = create_project(tmp_path)
    resolver = ImageResolver(assets, content_dir=content, url_prefix="/img/")
    assert resolver.resolve("/covers/shared.jpg").src == "/img/covers/shared.jpg"
    assert resolver.resolve("covers/shared.jpg").src == "/img/covers/shared.jpg"


def test_missing_image(tmp_path):
    content, assets = create_project(tmp_path)
    resolver = ImageResolver(assets, content_dir=content)
    with pytest.raises(AssetNotFoundError) as excinfo:
        resolver.resolve("./missing.png", content / "2024" / "post.md")
    assert excinfo.value.asset_name == "./missing.png"
    assert excinfo.value.asset_type == "image"
    assert "missing.png" in str(excinfo.value)


def test_non_image_file_rejected(tmp_path):
    content, assets = create_project(tmp_path)
    (assets / "notes.png").write_text("not really a png", encoding="utf-8")
    resolver = ImageResolver(assets, content_dir=content)
    with pytest.raises(InvalidImageError):
        resolver.resolve("/notes.png")


def test_remote_image_rejected(tmp_path):
    resolver = ImageResolver(tmp_path)
    with pytest.raises(InvalidImageError):
        resolver.resolve("https://example.com/cover.png")


def test_descriptors_pass_through(tmp_path):
    resolver = ImageResolver(tmp_path)
    asset = ImageAsset(src="/assets/images/a.png", width=1, height=1, format="PNG")
    assert resolver.resolve(asset) is asset
    assert resolver.resolve(asset.to_dict()) == asset
    assert image_from_descriptor("plain/path.png") is None
    with pytest.raises(InvalidImageError):
        image_from_descriptor({"width": 10})


def test_to_dict_omits_unknown_fields():
    assert ImageAsset(src="/a.png").to_dict() == {"src": "/a.png"}


@pytest.mark.parametrize(
    "descriptor",
    [
        {"src": "/a.png", "width": "big"},
        {"src": "/a.png", "height": 2.5},
        {"src": "/a.png", "width": True},
        {"src": "/a.png", "format": 7},
    ],
)
def test_descriptor_metadata_types_checked(descriptor):
    with pytest.raises(InvalidImageError):
        image_from_descriptor(descriptor)
