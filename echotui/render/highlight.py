"""Lightweight Bash highlighting that dims comments, operators and quoted words."""

from __future__ import annotations

from echotui.render.lines import Line, Span
from echotui.render.style import Style

_DIM = Style(faint=True)
_OPERATORS = frozenset({"&&", "||", "|", "&", ">", ">>", "<", "<<"})


def _is_string(token: str) -> bool:
    return any(
        token.startswith(quote) and token.endswith(quote) for quote in ('"', "'")
    )


def _highlight_line(raw: str) -> Line:
    if raw == "":
        return Line()
    if raw.strip().startswith("#"):
        return Line(spans=[Span(raw, _DIM)])
    tokens = raw.split()
    if not tokens:
        return Line()
    spans = []
    rest = raw
    for token in tokens:
        index = rest.find(token)
        if index > 0:
            spans.append(Span(rest[:index]))
        style = _DIM if token in _OPERATORS or _is_string(token) else Style()
        spans.append(Span(token, style))
        rest = rest[index + len(token):]
    if rest:
        spans.append(Span(rest))
    return Line(spans=spans)


def highlight_bash_to_lines(script: str) -> list[Line]:
    """Split ``script`` into lines and dim comments, operators and quoted tokens."""
    return [_highlight_line(raw) for raw in script.split("\n")]