"""A one-line status widget: spinner, header, elapsed time and interrupt hint."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterable
from dataclasses import replace
from enum import Enum

from echotui.render.geometry import CursorPos, Rect
from echotui.render.lines import Buffer, Line, Span
from echotui.render.style import Style
from echotui.render.wrap import char_width, display_width

_HINT_STYLE = Style(faint=True)
_SPINNER_FRAMES = ("-", "\\", "|", "/")
_FRAME_MILLIS = 120


class StatusIndicatorState(Enum):
    """Every state the status indicator can show."""

    WORKING = 0
    WAITING = 1
    PAUSED = 2
    ERROR = 3
    IDLE = 4

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def default_header(self) -> str:
        """The header shown for this state when none is given."""
        if self is StatusIndicatorState.IDLE:
            return ""
        return self.name.capitalize()

    @property
    def tracks_elapsed(self) -> bool:
        return self in (StatusIndicatorState.WORKING, StatusIndicatorState.WAITING)

    @property
    def interruptible(self) -> bool:
        return self in (StatusIndicatorState.WORKING, StatusIndicatorState.WAITING)

    @property
    def visible(self) -> bool:
        return self is not StatusIndicatorState.IDLE


class StatusIndicatorWidget:
    """Renders and manages the status line, including its elapsed-time timer.

    ``clock`` returns the current time in seconds; it defaults to ``time.time``.
    """

    def __init__(
        self,
        state: StatusIndicatorState = StatusIndicatorState.WORKING,
        header: str = "",
        animations_enabled: bool = False,
        show_interrupt_hint: bool = True,
        on_interrupt: Callable[[], None] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._clock = clock or time.time
        if not isinstance(state, StatusIndicatorState):
            state = StatusIndicatorState.WORKING
        self.state = state
        self.header = header or state.default_header
        self.show_interrupt_hint = show_interrupt_hint
        self.animations_enabled = animations_enabled
        self.on_interrupt = on_interrupt
        self._elapsed_running = 0.0
        self._last_resume_at = self._clock()
        self._paused = not state.tracks_elapsed

    def update_header(self, header: str) -> None:
        """Replace the header text."""
        self.header = header

    def set_state(self, state: StatusIndicatorState) -> None:
        """Switch state, pausing or resuming the timer as the state requires."""
        if not isinstance(state, StatusIndicatorState):
            return
        now = self._clock()
        if state.tracks_elapsed and self._paused:
            self._resume_at(now)
        elif not state.tracks_elapsed and not self._paused:
            self._pause_at(now)
        self.state = state
        self.header = state.default_header

    def set_interrupt_hint_visible(self, visible: bool) -> None:
        """Show or hide the ``esc to interrupt`` hint."""
        self.show_interrupt_hint = visible

    def interrupt(self) -> None:
        """Call the interrupt callback when the current state can be interrupted."""
        if self.on_interrupt is not None and self.state.interruptible:
            self.on_interrupt()

    def pause_timer(self) -> None:
        self._pause_at(self._clock())

    def resume_timer(self) -> None:
        self._resume_at(self._clock())

    def elapsed_seconds(self) -> int:
        """Whole seconds counted while the timer ran."""
        return int(self._elapsed_at(self._clock()))

    def desired_height(self, width: int) -> int:
        """Rows the widget needs: one status line while visible, none when idle.

        The line is clamped rather than wrapped, so ``width`` never adds rows.
        """
        if not self.state.visible:
            return 0
        return 1

    def cursor_pos(self, area: Rect) -> CursorPos | None:
        """Where the terminal cursor goes inside ``area``.

        The status line is display-only and never takes input, so it never
        claims the cursor, whatever its state or area.
        """
        takes_input = False
        if takes_input and self.state.visible and area.width > 0 and area.height > 0:
            return CursorPos(x=area.x, y=area.y)
        return None

    def render(self, area: Rect, buf: Buffer) -> None:
        """Draw the status line into ``buf``, clamped to the area's width."""
        if buf is None or area.height <= 0 or area.width <= 0 or not self.state.visible:
            return
        now = self._clock()
        pretty = fmt_elapsed_compact(int(self._elapsed_at(now)))
        spans = [Span(self._spinner_frame(now))]
        if self.header:
            spans += [Span(" "), Span(self.header)]
        hint = format_hint(pretty, self.show_interrupt_hint and self.state.interruptible)
        spans += [Span(" "), Span(hint, _HINT_STYLE)]
        clamped = clamp_spans(spans, area.width)
        if clamped:
            buf.write_line(Line(spans=clamped))

    def _pause_at(self, now: float) -> None:
        if self._paused:
            return
        self._elapsed_running += now - self._last_resume_at
        self._paused = True

    def _resume_at(self, now: float) -> None:
        if not self._paused:
            return
        self._last_resume_at = now
        self._paused = False

    def _elapsed_at(self, now: float) -> float:
        if self._paused:
            return self._elapsed_running
        return self._elapsed_running + (now - self._last_resume_at)

    def _spinner_frame(self, now: float) -> str:
        if self.state is StatusIndicatorState.PAUSED:
            return "||"
        if self.state is StatusIndicatorState.ERROR:
            return "!"
        if self.state is StatusIndicatorState.IDLE:
            return ""
        if self.animations_enabled:
            index = int(now * 1000) // _FRAME_MILLIS % len(_SPINNER_FRAMES)
            return _SPINNER_FRAMES[index]
        return "•"


def format_hint(elapsed: str, interruptible: bool) -> str:
    """The parenthesised elapsed time, with the interrupt hint when allowed."""
    if interruptible:
        return f"({elapsed} • esc to interrupt)"
    return f"({elapsed})"


def fmt_elapsed_compact(elapsed_secs: int) -> str:
    """Format seconds as ``Ns``, ``Nm SSs`` or ``Nh MMm SSs``."""
    if elapsed_secs < 0:
        raise ValueError("elapsed seconds cannot be negative")
    if elapsed_secs < 60:
        return f"{elapsed_secs}s"
    if elapsed_secs < 3600:
        minutes, seconds = divmod(elapsed_secs, 60)
        return f"{minutes}m {seconds:02d}s"
    hours, rest = divmod(elapsed_secs, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours}h {minutes:02d}m {seconds:02d}s"


def clamp_spans(spans: Iterable[Span], width: int) -> list[Span]:
    """Keep spans that fit in ``width`` columns, truncating the one that overflows."""
    if width <= 0:
        return []
    remaining = width
    out: list[Span] = []
    for span in spans:
        if remaining <= 0:
            break
        span_width = display_width(span.text)
        if span_width <= remaining:
            out.append(span)
            remaining -= span_width
            continue
        text = truncate_to_width(span.text, remaining)
        if text:
            out.append(replace(span, text=text))
            remaining = 0
    return out


def truncate_to_width(text: str, width: int) -> str:
    """The longest prefix of ``text`` no wider than ``width`` columns."""
    if width <= 0:
        return ""
    used = 0
    out: list[str] = []
    for ch in text:
        w = char_width(ch)
        if used + w > width:
            break
        out.append(ch)
        used += w
    return "".join(out)