"""A scrolling viewport over rendered lines that can stick to the bottom."""

from __future__ import annotations

from collections.abc import Iterable


class Viewport:
    """Shows a window of ``height`` lines over the content.

    While following the bottom, new content keeps the newest lines visible;
    scrolling up stops following until the bottom is reached again.
    """

    def __init__(self, width: int = 0, height: int = 0) -> None:
        self.width = width
        self.height = height
        self.y_offset = 0
        self.y_position = 0
        self._content: list[str] = []
        self._last_lines: list[str] = []
        self._last_content_height = 0
        self._follow_bottom = False

    def _max_y_offset(self) -> int:
        return max(0, len(self._content) - self.height)

    def resize(self, width: int, height: int) -> None:
        """Change the size; a width change forces the next content update."""
        width_changed = self.width != width
        if not width_changed and self.height == height:
            return
        self.width = width
        self.height = height
        self._clamp_offset(self._last_content_height)
        if width_changed:
            self.invalidate()

    def set_y_position(self, y: int) -> None:
        """Set the terminal row where the viewport starts."""
        self.y_position = y

    def set_y_offset(self, offset: int) -> None:
        """Scroll to ``offset``, clamped to the content."""
        self.y_offset = min(max(offset, 0), self._max_y_offset())

    def set_lines(self, lines: Iterable[str]) -> None:
        """Replace the content, staying at the bottom if it was there."""
        lines = list(lines)
        if lines == self._last_lines:
            return
        content_height = len(lines)
        stick_to_bottom = (
            self._follow_bottom or self.at_bottom() or content_height <= self.height
        )
        self._last_lines = lines
        self._last_content_height = content_height

        self._content = "\n".join(lines).replace("\r\n", "\n").split("\n")
        if self.y_offset > len(self._content) - 1:
            self.goto_bottom()
        self._clamp_offset(content_height)
        if stick_to_bottom:
            self._follow_bottom = True
            self.goto_bottom()
        else:
            self._follow_bottom = False

    def visible_lines(self) -> list[str]:
        """The content lines currently inside the window."""
        if not self._content:
            return []
        top = max(0, self.y_offset)
        bottom = min(max(self.y_offset + self.height, top), len(self._content))
        return self._content[top:bottom]

    def at_top(self) -> bool:
        return self.y_offset <= 0

    def at_bottom(self) -> bool:
        return self.y_offset >= self._max_y_offset()

    def goto_top(self) -> None:
        """Scroll to the first line and stop following the bottom."""
        self._follow_bottom = False
        if not self.at_top():
            self.set_y_offset(0)

    def goto_bottom(self) -> None:
        """Scroll to the last line and follow the bottom."""
        self._follow_bottom = True
        self.set_y_offset(self._max_y_offset())

    def _scroll_down(self, n: int) -> None:
        if self.at_bottom() or n == 0 or not self._content:
            return
        self.set_y_offset(self.y_offset + n)

    def _scroll_up(self, n: int) -> None:
        if self.at_top() or n == 0 or not self._content:
            return
        self.set_y_offset(self.y_offset - n)

    def scroll_page_down(self) -> None:
        self._follow_bottom = False
        if not self.at_bottom():
            self.set_y_offset(self.y_offset + self.height)
        if self.at_bottom():
            self._follow_bottom = True

    def scroll_page_up(self) -> None:
        self._follow_bottom = False
        self.set_y_offset(self.y_offset - self.height)

    def scroll_line_down(self, n: int) -> None:
        self._follow_bottom = False
        self._scroll_down(n)
        if self.at_bottom():
            self._follow_bottom = True

    def scroll_line_up(self, n: int) -> None:
        self._follow_bottom = False
        self._scroll_up(n)

    def invalidate(self) -> None:
        """Forget the cached lines so the next ``set_lines`` always applies."""
        self._last_lines = []

    def _content_height(self) -> int:
        return self._last_content_height or len(self._last_lines)

    def percent_scrolled(self) -> int:
        """How far down the content the window is, from 0 to 100."""
        content_height = self._content_height()
        if content_height <= 0 or self.height == 0 or content_height <= self.height:
            return 100
        max_offset = content_height - self.height
        if self.y_offset >= max_offset:
            return 100
        return int(self.y_offset / max_offset * 100.0)

    def content_overflow(self) -> bool:
        """True when the content is taller than the viewport."""
        if self.height <= 0:
            return False
        return self._content_height() > self.height

    def following_bottom(self) -> bool:
        """True when new content will keep the view at the bottom."""
        if self._last_content_height <= self.height:
            return True
        return self._follow_bottom

    def _clamp_offset(self, content_height: int) -> None:
        if content_height <= 0 or self.height <= 0:
            self.y_offset = 0
            return
        self.y_offset = min(self.y_offset, max(0, content_height - self.height))