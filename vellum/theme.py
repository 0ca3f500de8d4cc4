"""Theme tokens for the Vellum blog.

The page-rendering layer styles the site from a closed set of named color
tokens and two typography variants. Variants map the ``--tw-prose-*``
custom properties to token references such as ``colors.gray[700]`` or to
literal CSS values. render_theme_css turns the whole theme into a
stylesheet of CSS custom properties.
"""

from __future__ import annotations

import re

FONT_FAMILY = {
    "mono": ["IBM Plex Mono", "monospace"],
}

# Site palettes. navy is the dark neutral scale, orange the accent scale.
COLORS: dict[str, dict[str, str] | str] = {
    "navy": {
        "900": "#0a0e27",
        "800": "#0f1729",
        "700": "#141e3c",
        "600": "#1e2a4a",
    },
    "orange": {
        "400": "#fb923c",
        "500": "#f97316",
        "600": "#ea580c",
    },
    "dark-gray": {
        "100": "#f3f4f6",
        "200": "#e5e7eb",
        "300": "#d1d5db",
        "400": "#9ca3af",
    },
    # Base scales referenced by the typography variants.
    "gray": {
        "100": "#f3f4f6",
        "200": "#e5e7eb",
        "300": "#d1d5db",
        "400": "#9ca3af",
        "500": "#6b7280",
        "600": "#4b5563",
        "700": "#374151",
        "800": "#1f2937",
        "900": "#111827",
    },
    "blue": {
        "600": "#2563eb",
        "700": "#1d4ed8",
    },
    "white": "#ffffff",
}

SITE_PALETTES = ("navy", "orange", "dark-gray")

PROSE_PROPERTIES = (
    "--tw-prose-body",
    "--tw-prose-headings",
    "--tw-prose-links",
    "--tw-prose-links-hover",
    "--tw-prose-bold",
    "--tw-prose-counters",
    "--tw-prose-bullets",
    "--tw-prose-hr",
    "--tw-prose-quotes",
    "--tw-prose-quote-borders",
    "--tw-prose-captions",
    "--tw-prose-code",
    "--tw-prose-pre-code",
    "--tw-prose-pre-bg",
    "--tw-prose-th-borders",
    "--tw-prose-td-borders",
)

TYPOGRAPHY: dict[str, dict[str, str]] = {
    "default": {
        "--tw-prose-body": "colors.gray[700]",
        "--tw-prose-headings": "colors.gray[900]",
        "--tw-prose-links": "colors.blue[600]",
        "--tw-prose-links-hover": "colors.blue[700]",
        "--tw-prose-bold": "colors.gray[900]",
        "--tw-prose-counters": "colors.gray[500]",
        "--tw-prose-bullets": "colors.gray[300]",
        "--tw-prose-hr": "colors.gray[200]",
        "--tw-prose-quotes": "colors.gray[900]",
        "--tw-prose-quote-borders": "colors.gray[200]",
        "--tw-prose-captions": "colors.gray[500]",
        "--tw-prose-code": "colors.gray[900]",
        "--tw-prose-pre-code": "colors.gray[200]",
        "--tw-prose-pre-bg": "colors.gray[800]",
        "--tw-prose-th-borders": "colors.gray[300]",
        "--tw-prose-td-borders": "colors.gray[200]",
    },
    "invert": {
        "--tw-prose-body": "colors.gray[300]",
        "--tw-prose-headings": "colors.white",
        "--tw-prose-links": "colors.orange[500]",
        "--tw-prose-links-hover": "colors.orange[400]",
        "--tw-prose-bold": "colors.white",
        "--tw-prose-counters": "colors.gray[400]",
        "--tw-prose-bullets": "colors.gray[600]",
        "--tw-prose-hr": "colors.orange[500]",
        "--tw-prose-quotes": "colors.gray[100]",
        "--tw-prose-quote-borders": "colors.orange[500]",
        "--tw-prose-captions": "colors.gray[400]",
        "--tw-prose-code": "colors.white",
        "--tw-prose-pre-code": "colors.gray[300]",
        "--tw-prose-pre-bg": "rgb(0 0 0 / 50%)",
        "--tw-prose-th-borders": "colors.gray[600]",
        "--tw-prose-td-borders": "colors.gray[700]",
    },
}

VARIANT_SELECTORS = {
    "default": ".prose",
    "invert": ".prose-invert",
}

TOKEN_RE = re.compile(r"^colors\.(?P<palette>[\w-]+)(?:\[(?P<shade>\d+)\])?$")


def is_token(value: str) -> bool:
    return value.startswith("colors.")


def resolve_token(reference: str) -> str:
    """Resolve a color token reference to its value.

    Args:
        reference: Reference such as ``colors.gray[700]`` or ``colors.white``.

    Returns:
        The color value.

    Raises:
        KeyError: If the reference does not name a known token.
    """
    match = TOKEN_RE.match(reference)
    if not match:
        raise KeyError(reference)
    palette = COLORS.get(match.group("palette"))
    shade = match.group("shade")
    if isinstance(palette, str) and shade is None:
        return palette
    if isinstance(palette, dict) and shade in palette:
        return palette[shade]
    raise KeyError(reference)


def typography_variables(variant: str = "default") -> dict[str, str]:
    """Return the resolved custom properties of a typography variant.

    Args:
        variant: ``default`` or ``invert``.

    Returns:
        Mapping of CSS custom-property name to CSS value.

    Raises:
        KeyError: For an unknown variant or token.
    """
    css = TYPOGRAPHY[variant]
    variables = {}
    for name in PROSE_PROPERTIES:
        value = css[name]
        variables[name] = resolve_token(value) if is_token(value) else value
    return variables


def palette_variables() -> dict[str, str]:
    """Return the site palettes as ``--color-<palette>-<shade>`` properties."""
    variables = {}
    for name in SITE_PALETTES:
        for shade, value in COLORS[name].items():
            variables[f"--color-{name}-{shade}"] = value
    return variables


def _block(selector: str, declarations: dict[str, str]) -> str:
    body = "\n".join(f"  {name}: {value};" for name, value in declarations.items())
    return f"{selector} {{\n{body}\n}}"


def render_theme_css() -> str:
    """Render the theme as a stylesheet of CSS custom properties."""
    root = palette_variables()
    root["--font-mono"] = ", ".join(
        f"'{family}'" if " " in family else family for family in FONT_FAMILY["mono"]
    )
    blocks = [_block(":root", root)]
    for variant, selector in VARIANT_SELECTORS.items():
        blocks.append(_block(selector, typography_variables(variant)))
    return "\n\n".join(blocks) + "\n"
