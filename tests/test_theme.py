import pytest

from vellum.theme import (
    COLORS,
    PROSE_PROPERTIES,
    TYPOGRAPHY,
    palette_variables,
    render_theme_css,
    resolve_token,
    typography_variables,
)


def test_variants_define_every_prose_property():
    for variant in ("default", "invert"):
        assert set(TYPOGRAPHY[variant]) == set(PROSE_PROPERTIES)


def test_every_token_reference_resolves():
    for variant in TYPOGRAPHY.values():
        for value in variant.values():
            if value.startswith("colors."):
                assert resolve_token(value).startswith("#")


def test_resolve_token():
    assert resolve_token("colors.gray[700]") == "#374151"
    assert resolve_token("colors.white") == "#ffffff"
    assert resolve_token("colors.orange[500]") == COLORS["orange"]["500"]
    with pytest.raises(KeyError):
        resolve_token("colors.pink[500]")
    with pytest.raises(KeyError):
        resolve_token("colors.gray[50]")
    with pytest.raises(KeyError):
        resolve_token("colors.white[100]")
    with pytest.raises(KeyError):
        resolve_token("gray-700")


def test_typography_variables():
    default = typography_variables()
    assert list(default) == list(PROSE_PROPERTIES)
    assert default["--tw-prose-links"] == "#2563eb"

    invert = typography_variables("invert")
    assert invert["--tw-prose-headings"] == "#ffffff"
    assert invert["--tw-prose-links"] == "#f97316"
    assert invert["--tw-prose-pre-bg"] == "rgb(0 0 0 / 50%)"

    with pytest.raises(KeyError):
        typography_variables("sepia")


def test_palette_variables_cover_site_palettes():
    variables = palette_variables()
    assert variables["--color-navy-900"] == "#0a0e27"
    assert variables["--color-orange-600"] == "#ea580c"
    assert variables["--color-dark-gray-400"] == "#9ca3af"
    assert not any(name.startswith("--color-gray-") for name in variables)


def test_render_theme_css():
    css = render_theme_css()
    assert css.startswith(":root {\n")
    assert "  --font-mono: 'IBM Plex Mono', monospace;" in css
    assert ".prose {\n  --tw-prose-body: #374151;" in css
    assert ".prose-invert {\n  --tw-prose-body: #d1d5db;" in css
    assert css.endswith("}\n")
