from echotui.render.lines import (
    Buffer,
    Line,
    Span,
    is_blank_line_spaces_only,
    line_to_static,
    lines_to_plain_strings,
    lines_to_strings,
    owned_lines,
    prefix_lines,
)
from echotui.render.style import Style


def test_lines_to_plain_strings():
    lines = [
        Line(
            spans=[
                Span("• ", Style(foreground="#00FF00")),
                Span("hello", Style(bold=True)),
            ]
        ),
        Line(spans=[]),
    ]
    got = lines_to_plain_strings(lines)
    assert got == ["• hello", ""]
    assert all("\x1b" not in text for text in got)


def test_lines_to_strings_with_plain_styles_matches_plain_output():
    lines = [Line(spans=[Span("a"), Span("b")]), Line()]
    assert lines_to_strings(lines) == lines_to_plain_strings(lines)


def test_lines_to_strings_keeps_styles():
    lines = [Line(spans=[Span("x", Style(bold=True))])]
    rendered = lines_to_strings(lines)
    assert rendered == [Style(bold=True).render("x")]


def test_buffer_collects_lines_in_order():
    buf = Buffer()
    first = Line(spans=[Span("one")])
    second = Line(spans=[Span("two")])
    third = Line(spans=[Span("three")])
    buf.write_line(first)
    buf.write_lines(second, third)
    assert lines_to_plain_strings(buf.lines) == ["one", "two", "three"]


def test_line_to_static_is_independent_copy():
    original = Line(spans=[Span("a")])
    copy = line_to_static(original)
    copy.spans.append(Span("b"))
    assert lines_to_plain_strings([original]) == ["a"]
    assert copy.spans[0] == original.spans[0]


def test_owned_lines_copies_every_line():
    src = [Line(spans=[Span("a")]), Line(spans=[Span("b")])]
    out = owned_lines(src)
    assert out == src
    assert all(a.spans is not b.spans for a, b in zip(out, src))


def test_owned_lines_of_empty_source():
    assert owned_lines([]) == []


def test_blank_line_detection():
    assert is_blank_line_spaces_only(Line())
    assert is_blank_line_spaces_only(Line(spans=[Span("   "), Span("")]))
    assert not is_blank_line_spaces_only(Line(spans=[Span("  "), Span("x")]))
    assert not is_blank_line_spaces_only(Line(spans=[Span("\t")]))


def test_prefix_lines_uses_initial_then_subsequent():
    faint = Style(faint=True)
    lines = [Line(spans=[Span("a")], style=faint), Line(spans=[Span("b")])]
    out = prefix_lines(lines, Span("> "), Span("  "))
    assert lines_to_plain_strings(out) == ["> a", "  b"]
    assert out[0].style == faint


def test_prefix_lines_of_nothing_is_empty():
    assert prefix_lines([], Span("> "), Span("  ")) == []