"""Styled spans, lines and the buffer that collects rendered lines."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from echotui.render.style import Style


@dataclass(frozen=True)
class Span:
    """A piece of text with one style."""

    text: str = ""
    style: Style = field(default_factory=Style)


@dataclass
class Line:
    """A sequence of spans with an optional style for the whole line."""

    spans: list[Span] = field(default_factory=list)
    style: Style = field(default_factory=Style)

    @property
    def plain_text(self) -> str:
        return "".join(span.text for span in self.spans)


@dataclass
class Buffer:
    """Collects rendered output line by line."""

    lines: list[Line] = field(default_factory=list)

    def write_line(self, line: Line) -> None:
        self.lines.append(line)

    def write_lines(self, *args: Line) -> None:
        self.lines.extend(args)


def lines_to_strings(lines: Iterable[Line]) -> list[str]:
    """Render lines to strings carrying their styles as escape sequences."""
    out = []
    for line in lines:
        text = "".join(span.style.render(span.text) for span in line.spans)
        out.append(line.style.render(text))
    return out


def lines_to_plain_strings(lines: Iterable[Line]) -> list[str]:
    """Render lines to strings without any styling."""
    return [line.plain_text for line in lines]


def line_to_static(line: Line) -> Line:
    """Return a copy of ``line`` that shares no list with the original."""
    return Line(spans=list(line.spans), style=line.style)


def owned_lines(src: Iterable[Line]) -> list[Line]:
    """Return independent copies of every line in ``src``."""
    return [line_to_static(line) for line in src]


def is_blank_line_spaces_only(line: Line) -> bool:
    """True when the line has no spans or only spans made of spaces."""
    return all(span.text.strip(" ") == "" for span in line.spans)


def prefix_lines(lines: Iterable[Line], initial: Span, subsequent: Span) -> list[Line]:
    """Prepend ``initial`` to the first line and ``subsequent`` to the others."""
    return [
        Line(spans=[initial if index == 0 else subsequent, *line.spans], style=line.style)
        for index, line in enumerate(lines)
    ]