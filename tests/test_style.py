import pytest

from echotui.render.style import Style


def test_plain_style_returns_text_unchanged():
    assert Style().render("hello") == "hello"


def test_bold_wraps_text_in_escape_sequences():
    rendered = Style(bold=True).render("hi")
    assert rendered.startswith("\x1b[")
    assert rendered.endswith("\x1b[0m")
    assert "hi" in rendered


def test_foreground_hex_colour_is_encoded_as_truecolour():
    rendered = Style(foreground="#7D56F4").render("x")
    assert "38;2;125;86;244" in rendered


def test_invalid_colour_is_rejected():
    with pytest.raises(ValueError):
        Style(foreground="#zzzzzz")


def test_wrong_length_colour_is_rejected():
    with pytest.raises(ValueError):
        Style(background="#12345")


def test_width_pads_plain_text():
    rendered = Style(width=6).render("ab")
    assert len(rendered) == 6
    assert rendered.rstrip(" ") == "ab"


def test_width_ignores_escape_sequences_when_padding():
    inner = Style(bold=True).render("ab")
    padded = Style(width=6).render(inner)
    plain_padded = Style(width=6).render("ab")
    assert padded.startswith(inner)
    assert padded[len(inner):] == plain_padded[len("ab"):]


def test_each_line_is_styled_separately():
    rendered = Style(faint=True).render("a\nb")
    parts = rendered.split("\n")
    assert len(parts) == 2
    assert all(part.endswith("\x1b[0m") for part in parts)


def test_empty_text_stays_empty():
    assert Style(bold=True, italic=True).render("") == ""