"""Conversation transcript rendering with incremental line deltas."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable

from echotui.protocol import Message, Role
from echotui.render.geometry import Rect
from echotui.render.lines import Buffer, Line, Span, lines_to_strings, prefix_lines
from echotui.render.renderable import ColumnRenderable, Renderable
from echotui.render.style import Style
from echotui.render.wrap import char_width, display_width, wrap_text

USER_PREFIX_STYLE = Style(faint=True, bold=True)
USER_INDENT_STYLE = Style(faint=True)
ASSISTANT_PREFIX_STYLE = Style(foreground="#7D56F4")
ASSISTANT_INDENT_STYLE = Style(foreground="#7D56F4")
TOOL_STYLE = Style(faint=True)
DIFF_ADD_STYLE = Style(foreground="#16a34a")
DIFF_DEL_STYLE = Style(foreground="#dc2626")
DIFF_HUNK_STYLE = Style(foreground="#7D56F4", faint=True)


def render_messages(msgs: Iterable[Message], width: int) -> list[Line]:
    """Render messages one below the other at the given width."""
    column = ColumnRenderable(*(_MessageRenderable(msg) for msg in msgs))
    buf = Buffer()
    column.render(Rect(width=width, height=column.desired_height(width)), buf)
    return buf.lines


def _lines_for(role: Role | str, content: str, width: int) -> list[Line]:
    if role == Role.USER:
        return _render_user_lines(content, width)
    if role == Role.ASSISTANT:
        return _render_assistant_lines(content, width)
    if role == Role.TOOL:
        return _render_tool_lines(content, width)
    return _wrap_lines(content, width, Style())


class _MessageRenderable(Renderable):
    def __init__(self, msg: Message) -> None:
        self.msg = msg

    def render(self, area: Rect, buf: Buffer) -> None:
        content = self.msg.content.rstrip("\n")
        buf.write_lines(*_lines_for(self.msg.role, content, area.width))

    def desired_height(self, width: int) -> int:
        return len(_lines_for(self.msg.role, self.msg.content, width))


def _body_width(width: int) -> int:
    return width - 2 if width - 2 >= 1 else width


def _render_user_lines(content: str, width: int) -> list[Line]:
    body = _wrap_lines(content, _body_width(width), Style())
    prefixed = prefix_lines(
        body, Span("› ", USER_PREFIX_STYLE), Span("  ", USER_INDENT_STYLE)
    )
    blank = Line(spans=[Span("", USER_PREFIX_STYLE)])
    return [blank, *prefixed, Line(spans=[Span("", USER_PREFIX_STYLE)])]


def _render_assistant_lines(content: str, width: int) -> list[Line]:
    body = _wrap_lines(content, _body_width(width), Style())
    prefixed = prefix_lines(
        body, Span("• ", ASSISTANT_PREFIX_STYLE), Span("  ", ASSISTANT_INDENT_STYLE)
    )
    return prefixed or [Line(spans=[Span("• ", ASSISTANT_PREFIX_STYLE)])]


def _render_tool_lines(content: str, width: int) -> list[Line]:
    # Tool blocks carry their own bullets and indentation; keep their whitespace.
    return _wrap_tool_block(content, _body_width(width))


def _wrap_lines(content: str, width: int, style: Style) -> list[Line]:
    if width <= 0:
        width = len(content.encode("utf-8"))
    return [Line(spans=[Span(text, style)]) for text in wrap_text(content, width)]


def _wrap_tool_block(content: str, width: int) -> list[Line]:
    if width <= 0:
        width = len(content.encode("utf-8"))
    in_diff = False
    out: list[Line] = []
    for raw in content.split("\n"):
        is_diff_header = "└ diff:" in raw
        line_in_diff = in_diff and not is_diff_header
        out.extend(
            Line(spans=_tool_line_spans(piece, line_in_diff))
            for piece in wrap_line_preserve_spaces(raw, width)
        )
        if is_diff_header:
            in_diff = True
    return out or [Line()]


def _diff_style(rest: str) -> Style:
    if rest.startswith("+") and not rest.startswith("+++"):
        return DIFF_ADD_STYLE
    if rest.startswith("-") and not rest.startswith("---"):
        return DIFF_DEL_STYLE
    if rest.startswith("@@"):
        return DIFF_HUNK_STYLE
    return TOOL_STYLE


def _tool_line_spans(line: str, in_diff: bool) -> list[Span]:
    if line.strip() == "" or not in_diff:
        return [Span(line, TOOL_STYLE)]
    # Payload lines are indented by four spaces; keep that dim and style the rest.
    if line.startswith("    "):
        rest = line[4:]
        return [Span("    ", TOOL_STYLE), Span(rest, _diff_style(rest))]
    return [Span(line, _diff_style(line))]


def wrap_line_preserve_spaces(line: str, width: int) -> list[str]:
    """Hard-wrap ``line`` at ``width`` columns without collapsing whitespace."""
    if width <= 0 or display_width(line) <= width:
        return [line]
    out: list[str] = []
    current: list[str] = []
    used = 0
    for ch in line:
        w = char_width(ch)
        if used + w > width and current:
            out.append("".join(current))
            current = []
            used = 0
        current.append(ch)
        used += w
    if current:
        out.append("".join(current))
    return out or [line]


class Transcript:
    """Keeps the conversation and reports which rendered lines changed.

    ``messages()`` returns the persisted user and assistant history, while the
    view additionally holds tool blocks that are shown but never persisted.
    """

    def __init__(self, width: int = 80) -> None:
        self.width = width if width > 0 else 80
        self._history: list[Message] = []
        self._view: list[Message] = []
        self._last_render: list[str] = []

    def set_width(self, width: int) -> None:
        """Change the render width; ignored unless positive."""
        if width > 0:
            self.width = width
            self._last_render = []

    def messages(self) -> list[Message]:
        """A copy of the persisted messages."""
        return list(self._history)

    def load_messages(self, msgs: Iterable[Message]) -> None:
        """Replace the transcript with ``msgs``."""
        self._history = list(msgs)
        self._view = list(self._history)
        self._last_render = []

    def reset(self) -> None:
        """Clear all messages and cached render state."""
        self._history = []
        self._view = []
        self._last_render = []

    def append_user(self, content: str) -> list[str]:
        """Add a user message and return the changed rendered lines."""
        msg = Message(Role.USER, content)
        self._history.append(msg)
        self._view.append(msg)
        return self._render_delta()

    @staticmethod
    def _extend_assistant(messages: list[Message], chunk: str) -> None:
        if messages and messages[-1].role == Role.ASSISTANT:
            last = messages[-1]
            messages[-1] = dataclasses.replace(last, content=last.content + chunk)
        else:
            messages.append(Message(Role.ASSISTANT, chunk))

    @staticmethod
    def _set_assistant(messages: list[Message], final: str) -> None:
        if messages and messages[-1].role == Role.ASSISTANT:
            messages[-1] = dataclasses.replace(messages[-1], content=final)
        else:
            messages.append(Message(Role.ASSISTANT, final))

    def append_assistant_chunk(self, chunk: str) -> list[str]:
        """Append streamed assistant text and return the changed rendered lines."""
        self._extend_assistant(self._history, chunk)
        self._extend_assistant(self._view, chunk)
        return self._render_delta()

    def finalize_assistant(self, final: str) -> list[str]:
        """Finish the assistant message, replacing its text when ``final`` is given."""
        if not self._history or self._history[-1].role != Role.ASSISTANT:
            if final == "":
                return []
            msg = Message(Role.ASSISTANT, final)
            self._history.append(msg)
            self._view.append(msg)
            return self._render_delta()
        if final != "":
            self._set_assistant(self._history, final)
            self._set_assistant(self._view, final)
        return self._render_delta()

    def append_tool_block(self, content: str) -> list[str]:
        """Show a tool block in the view without persisting it."""
        content = content.rstrip("\n")
        if content.strip() == "":
            return []
        self._view.append(Message(Role.TOOL, content))
        return self._render_delta()

    def render_view_lines(self, width: int) -> list[Line]:
        """Render the whole view, tool blocks included."""
        return render_messages(self._view, width if width > 0 else self.width)

    def _render_delta(self) -> list[str]:
        lines = lines_to_strings(render_messages(self._view, self.width))
        start = 0
        for old, new in zip(self._last_render, lines):
            if old != new:
                break
            start += 1
        self._last_render = lines
        return lines[start:]