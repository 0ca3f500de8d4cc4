"""Image resolution for Vellum.

This module maps the raw image references found in post front matter
(``heroImage: ./cover.png``) to resolved ImageAsset records. A reference is
only accepted when it points at an existing file that Pillow can read; the
asset keeps the public URL together with the image's dimensions and format.

Key classes:
- ImageAsset: A resolved image with its public URL and metadata.
- ImageResolver: Resolves image references relative to a post or the assets dir.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from .utils import join_url

_REMOTE_PREFIXES = ("http://", "https://", "//")


class AssetNotFoundError(Exception):
    """Error raised when an image file is not found.

    Attributes:
        asset_name: The reference that was requested.
        asset_type: The type of asset (always "image" for post images).
        searched_paths: List of paths that were searched.
    """

    def __init__(
        self,
        asset_name: str,
        asset_type: str,
        searched_paths: list[Path],
    ):
        self.asset_name = asset_name
        self.asset_type = asset_type
        self.searched_paths = searched_paths
        paths_str = ", ".join(str(p) for p in searched_paths)
        super().__init__(
            f"{asset_type} asset '{asset_name}' not found. Searched: {paths_str}"
        )


class InvalidImageError(Exception):
    """Error raised when a reference exists but is not a usable image."""


@dataclass(frozen=True)
class ImageAsset:
    """A resolved image.

    Attributes:
        src: Public URL path of the image.
        width: Width in pixels, if known.
        height: Height in pixels, if known.
        format: Image format reported by Pillow (e.g. "PNG"), if known.
    """

    src: str
    width: int | None = None
    height: int | None = None
    format: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ImageAsset:
        """Build an asset from an already-resolved descriptor mapping.

        Raises:
            InvalidImageError: If the mapping has no string ``src``, a
                non-integer ``width`` or ``height``, or a non-string ``format``.
        """
        src = data.get("src")
        if not isinstance(src, str) or not src:
            raise InvalidImageError("Image descriptor requires a 'src' string")
        for key in ("width", "height"):
            value = data.get(key)
            if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
                raise InvalidImageError(f"Image descriptor '{key}' must be an integer")
        image_format = data.get("format")
        if image_format is not None and not isinstance(image_format, str):
            raise InvalidImageError("Image descriptor 'format' must be a string")
        return cls(
            src=src,
            width=data.get("width"),
            height=data.get("height"),
            format=image_format,
        )

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


def image_from_descriptor(value: Any) -> ImageAsset | None:
    """Return an ImageAsset for values that are already resolved.

    Args:
        value: An ImageAsset, a descriptor mapping, or anything else.

    Returns:
        The asset, or None if the value is a raw reference that needs resolving.
    """
    if isinstance(value, ImageAsset):
        return value
    if isinstance(value, Mapping):
        return ImageAsset.from_mapping(value)
    return None


class ImageResolver:
    """Resolves front-matter image references to ImageAsset records.

    Relative references (``./hero.png``, ``../images/hero.png``) resolve
    against the directory of the post that uses them. Root-relative and bare
    references resolve against the assets directory; bare names are also
    tried next to the post first.

    Attributes:
        assets_dir: Directory holding shared site images.
        content_dir: Root of the post collection, used to build public URLs.
        url_prefix: Public URL prefix for resolved images.
    """

    def __init__(
        self,
        assets_dir: Path,
        content_dir: Path | None = None,
        url_prefix: str = "/assets/images/",
    ):
        self.assets_dir = assets_dir
        self.content_dir = content_dir
        self.url_prefix = url_prefix

    def __call__(self, reference: Any, source_path: Path | None = None) -> ImageAsset:
        return self.resolve(reference, source_path)

    def resolve(self, reference: Any, source_path: Path | None = None) -> ImageAsset:
        """Resolve an image reference.

        Args:
            reference: Path string, descriptor mapping or ImageAsset.
            source_path: Path of the post file using the image.

        Returns:
            Resolved ImageAsset.

        Raises:
            AssetNotFoundError: If no file matches the reference.
            InvalidImageError: If the reference is remote or not an image.
        """
        resolved = image_from_descriptor(reference)
        if resolved is not None:
            return resolved
        if not isinstance(reference, str):
            raise InvalidImageError(f"Unsupported image reference: {reference!r}")
        if reference.startswith(_REMOTE_PREFIXES):
            raise InvalidImageError(f"Remote images are not supported: {reference}")

        candidates = self._candidates(reference, source_path)
        for path in candidates:
            if path.is_file():
                return self._load(path)
        raise AssetNotFoundError(reference, "image", candidates)

    def _candidates(self, reference: str, source_path: Path | None) -> list[Path]:
        """List the file paths a reference may point to, in search order."""
        if reference.startswith("/"):
            return [self.assets_dir / reference.lstrip("/")]
        post_dir = source_path.parent if source_path is not None else None
        if reference.startswith(("./", "../")):
            base = post_dir if post_dir is not None else self.assets_dir
            return [(base / reference).resolve()]
        candidates = []
        if post_dir is not None:
            candidates.append(post_dir / reference)
        candidates.append(self.assets_dir / reference)
        return candidates

    def _load(self, path: Path) -> ImageAsset:
        """Open an image file with Pillow and capture its metadata."""
        try:
            with Image.open(path) as img:
                width, height = img.size
                image_format = img.format
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError) as exc:
            raise InvalidImageError(f"{path} is not a readable image: {exc}") from exc
        return ImageAsset(
            src=self._public_url(path),
            width=width,
            height=height,
            format=image_format,
        )

    def _public_url(self, path: Path) -> str:
        """Build the public URL for a resolved image file."""
        for base in (self.assets_dir, self.content_dir):
            if base is None:
                continue
            try:
                rel = path.resolve().relative_to(base.resolve())
            except ValueError:
                continue
            return join_url(self.url_prefix, rel.as_posix())
        return join_url(self.url_prefix, path.name)
