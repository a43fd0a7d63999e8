"""Rendering of the slash-command popup body (without its border)."""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from echotui.render.style import Style
from echotui.render.wrap import display_width, wrap_text
from echotui.slash.state import Match, State

NAME_STYLE = Style(foreground="#C4A1FF")
DESC_STYLE = Style(foreground="#9CA3AF")
HIGHLIGHT_STYLE = Style(bold=True, foreground="#EBCB8B")
SELECTED_STYLE = Style(background="#2F2A3D")

MIN_CONTENT_WIDTH = 20
MIN_NAME_WIDTH = 10
MIN_DESC_WIDTH = 8
NO_MATCHES = "no matches"

_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def _visible_width(text: str) -> int:
    return max(
        (display_width(_ANSI_ESCAPE.sub("", line)) for line in text.split("\n")),
        default=0,
    )


@dataclass(frozen=True)
class RenderedEntry:
    """The rendered lines of one popup entry."""

    lines: list[str] = field(default_factory=list)
    selected: bool = False
    height: int = 0


def render_view(state: State, width: int) -> str:
    """Render the open popup at ``width`` columns (at least 20); ``""`` when closed."""
    if state is None or not state.open:
        return ""
    content_width = max(width, MIN_CONTENT_WIDTH)
    visible = _visible_entries(state, content_width)
    if not visible:
        return Style(width=content_width).render(NO_MATCHES)
    lines = [
        SELECTED_STYLE.render(line) if entry.selected else line
        for entry in visible
        for line in entry.lines
    ]
    return Style(width=content_width).render("\n".join(lines))


def _visible_entries(state: State, content_width: int) -> list[RenderedEntry]:
    matches = state.matches or []
    if not matches:
        return [RenderedEntry(lines=[NO_MATCHES], height=1)]
    name_width, desc_width = compute_column_widths(content_width, matches)
    entries = []
    for index, match in enumerate(matches):
        name = apply_highlights(match.item.display_name(), match.highlights, name_width)
        desc = match.item.description or "—"
        name_cell = Style(width=name_width).render(NAME_STYLE.render(name))
        blank_cell = " " * _visible_width(name_cell)
        lines = [
            f"{name_cell if i == 0 else blank_cell}  {DESC_STYLE.render(raw)}"
            for i, raw in enumerate(wrap_text(desc, desc_width))
        ]
        entries.append(
            RenderedEntry(lines=lines, selected=index == state.selected, height=len(lines))
        )
    return clamp_by_height(entries, state.max_lines, state.selected)


def compute_column_widths(content_width: int, matches: Iterable[Match]) -> tuple[int, int]:
    """Widths of the name and description columns for ``matches``."""
    max_name = max(
        (display_width(m.item.display_name() or "/") for m in matches), default=0
    )
    max_name = max(max_name, MIN_NAME_WIDTH)
    max_name = min(max_name, content_width - 12)
    desc_width = max(content_width - max_name - 2, MIN_DESC_WIDTH)
    return max_name, desc_width


def clamp_by_height(
    entries: Sequence[RenderedEntry], max_lines: int, selected: int
) -> list[RenderedEntry]:
    """The first run of entries fitting in ``max_lines`` that includes ``selected``."""
    if max_lines <= 0:
        return list(entries)
    for start in range(len(entries)):
        height = 0
        end = start
        while end < len(entries) and height + entries[end].height <= max_lines:
            height += entries[end].height
            end += 1
        if selected < end:
            return list(entries[start:end])
    # Nothing fits: show at least the selected entry.
    return [entries[selected]]


def apply_highlights(name: str, indexes: Iterable[int], width: int) -> str:
    """Highlight the characters of ``name`` at ``indexes`` and pad it to ``width``."""
    marked = set(indexes)
    if not marked:
        return name
    joined = "".join(
        HIGHLIGHT_STYLE.render(ch) if i in marked else ch for i, ch in enumerate(name)
    )
    return Style(width=width).render(joined)