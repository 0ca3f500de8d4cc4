"""Project configuration for Vellum.

Configuration is read from ``vellum.yaml`` at the project root and merged
over DEFAULT_CONFIG. Nested sections (``feed``, ``integrations``) are merged
key by key, so a project only lists what it changes.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

CONFIG_FILENAME = "vellum.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "site": "",
    "title": "Khoi Van - Android Developer Blog",
    "description": (
        "Technical articles about Android development, Clean Architecture, "
        "Jetpack Compose, and more."
    ),
    "content_dir": "src/content/blog",
    "assets_dir": "src/assets",
    "output_dir": "dist",
    "build_format": "file",
    "feed": {
        "path": "rss.xml",
        "link_prefix": "/blog/",
        "language": "vi-vn",
        "stylesheet": "/rss-styles.xsl",
    },
    "integrations": {
        "sitemap": True,
        "theme_css": True,
    },
    "reading_time": "placeholder",
    "words_per_minute": 200,
}

BUILD_FORMATS = ("file", "directory")
READING_TIME_MODES = ("placeholder", "computed")


class ConfigError(Exception):
    """Error raised when vellum.yaml holds an unusable value."""


@dataclass
class FeedSettings:
    path: str = "rss.xml"
    link_prefix: str = "/blog/"
    language: str = "vi-vn"
    stylesheet: str | None = "/rss-styles.xsl"


@dataclass
class SiteConfig:
    """Resolved project configuration.

    Attributes:
        project_root: Directory holding vellum.yaml.
        site: Canonical site origin (e.g. https://khoivan.dev); empty when unset.
        title: Feed title.
        description: Feed description.
        content_dir: Absolute path of the post collection.
        assets_dir: Absolute path of shared images.
        output_dir: Absolute path of the build output.
        build_format: ``file`` (``/blog/post``) or ``directory`` (``/blog/post/``).
        feed: Feed settings.
        sitemap: Whether to write sitemap.xml.
        theme_css: Whether to write theme.css.
        reading_time: ``placeholder`` or ``computed``.
        words_per_minute: Reading speed for computed reading time.
    """

    project_root: Path
    site: str
    title: str
    description: str
    content_dir: Path
    assets_dir: Path
    output_dir: Path
    build_format: str = "file"
    feed: FeedSettings = field(default_factory=FeedSettings)
    sitemap: bool = True
    theme_css: bool = True
    reading_time: str = "placeholder"
    words_per_minute: int = 200

    @property
    def computed_reading_time(self) -> bool:
        return self.reading_time == "computed"

    @classmethod
    def from_mapping(cls, project_root: Path, data: dict[str, Any]) -> SiteConfig:
        """Build a SiteConfig from a merged configuration mapping.

        Raises:
            ConfigError: If an enumerated setting holds an unknown value.
        """
        build_format = str(data.get("build_format", "file"))
        if build_format not in BUILD_FORMATS:
            raise ConfigError(
                f"build_format must be one of {', '.join(BUILD_FORMATS)}, got {build_format!r}"
            )
        reading_time = str(data.get("reading_time", "placeholder"))
        if reading_time not in READING_TIME_MODES:
            raise ConfigError(
                f"reading_time must be one of {', '.join(READING_TIME_MODES)}, "
                f"got {reading_time!r}"
            )
        feed = data.get("feed") or {}
        integrations = data.get("integrations") or {}
        return cls(
            project_root=project_root,
            site=str(data.get("site") or "").rstrip("/"),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            content_dir=project_root / data.get("content_dir", "src/content/blog"),
            assets_dir=project_root / data.get("assets_dir", "src/assets"),
            output_dir=project_root / data.get("output_dir", "dist"),
            build_format=build_format,
            feed=FeedSettings(
                path=str(feed.get("path", "rss.xml")),
                link_prefix=str(feed.get("link_prefix", "/blog/")),
                language=str(feed.get("language", "vi-vn")),
                stylesheet=feed.get("stylesheet", "/rss-styles.xsl"),
            ),
            sitemap=bool(integrations.get("sitemap", True)),
            theme_css=bool(integrations.get("theme_css", True)),
            reading_time=reading_time,
            words_per_minute=int(data.get("words_per_minute", 200)),
        )


def load_config(project_root: Path) -> dict[str, Any]:
    """Load site configuration from vellum.yaml.

    Args:
        project_root: Root directory of the project.

    Returns:
        Dictionary containing configuration values, with defaults applied.
    """
    config_path = project_root / CONFIG_FILENAME
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            for key, value in loaded.items():
                if isinstance(config.get(key), dict) and isinstance(value, dict):
                    config[key].update(value)
                else:
                    config[key] = value
    return config


def load_site_config(project_root: Path, **overrides: Any) -> SiteConfig:
    """Load vellum.yaml and apply non-None overrides (e.g. from the CLI).

    Args:
        project_root: Root directory of the project.
        **overrides: Top-level keys to replace, such as ``site``.

    Returns:
        Resolved SiteConfig.
    """
    config = load_config(project_root)
    config.update({key: value for key, value in overrides.items() if value is not None})
    return SiteConfig.from_mapping(project_root, config)
