"""Vellum blog content toolkit.

This package validates blog post front matter against a fixed schema,
normalizes it into immutable Post objects, and derives the site's
syndication outputs (RSS feed, sitemap) and theme stylesheet from them.

The main entry point is the CLI module, which provides commands for
building the outputs, checking content and creating new posts.

Modules:
- schema: Front-matter shape, closed enumerations and validation errors.
- content: Post model, normalization and content loading.
- feeds: Feed document derivation and RSS/sitemap generators.
- theme: Color tokens and typography variants.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
