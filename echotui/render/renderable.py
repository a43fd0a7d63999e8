"""Renderable widgets and the column, row, flex and inset layouts."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator

from echotui.render.geometry import CursorPos, Insets, Rect
from echotui.render.lines import Buffer, Line, Span
from echotui.render.wrap import wrap_text


class Renderable(ABC):
    """Something that can draw itself into a buffer within an area."""

    @abstractmethod
    def render(self, area: Rect, buf: Buffer) -> None:
        """Draw into ``buf`` within ``area``."""

    @abstractmethod
    def desired_height(self, width: int) -> int:
        """Number of rows wanted at the given width."""

    def cursor_pos(self, area: Rect) -> CursorPos | None:
        """Where the cursor belongs, if this widget owns it."""
        return None


class StaticLines(Renderable):
    """Lines prepared in advance."""

    def __init__(self, lines: Iterable[Line] = ()) -> None:
        self.lines = list(lines)

    def render(self, area: Rect, buf: Buffer) -> None:
        lines = self.lines
        if area.height > 0:
            lines = lines[: area.height]
        buf.write_lines(*lines)

    def desired_height(self, width: int) -> int:
        return len(self.lines)


class ColumnRenderable(Renderable):
    """Stacks children vertically."""

    def __init__(self, *children: Renderable) -> None:
        self._children: list[Renderable] = list(children)

    def push(self, child: Renderable | None) -> None:
        if child is not None:
            self._children.append(child)

    def _layout(self, area: Rect) -> Iterator[tuple[Rect, Renderable]]:
        y = area.y
        for child in self._children:
            height = child.desired_height(area.width)
            yield Rect(area.x, y, area.width, height), child
            y += height

    def render(self, area: Rect, buf: Buffer) -> None:
        for child_area, child in self._layout(area):
            child.render(child_area, buf)
            bottom = child_area.y + child_area.height
            if area.height > 0 and bottom - area.y >= area.height:
                break

    def desired_height(self, width: int) -> int:
        return sum(child.desired_height(width) for child in self._children)

    def cursor_pos(self, area: Rect) -> CursorPos | None:
        for child_area, child in self._layout(area):
            pos = child.cursor_pos(child_area)
            if pos is not None:
                return pos
        return None


class RowRenderable(Renderable):
    """Lays children out horizontally, each with a fixed width.

    A width of zero or less, or one larger than the space left, takes all
    remaining space.
    """

    def __init__(self) -> None:
        self._children: list[tuple[int, Renderable]] = []

    def push(self, width: int, child: Renderable | None) -> None:
        if child is not None:
            self._children.append((width, child))

    def _layout(self, area: Rect) -> Iterator[tuple[Rect, Renderable]]:
        x = area.x
        for width, child in self._children:
            remaining = area.width - (x - area.x)
            if remaining <= 0:
                break
            w = width if 0 < width <= remaining else remaining
            yield Rect(x, area.y, w, area.height), child
            x += w

    def render(self, area: Rect, buf: Buffer) -> None:
        for child_area, child in self._layout(area):
            child.render(child_area, buf)

    def desired_height(self, width: int) -> int:
        remain = width
        tallest = 0
        for child_width, child in self._children:
            w = child_width if 0 < child_width <= remain else remain
            tallest = max(tallest, child.desired_height(w))
            remain -= w
            if remain <= 0:
                break
        return tallest

    def cursor_pos(self, area: Rect) -> CursorPos | None:
        for child_area, child in self._layout(area):
            pos = child.cursor_pos(child_area)
            if pos is not None:
                return pos
        return None


class FlexRenderable(Renderable):
    """Stacks children vertically, sharing free rows by flex weight.

    Children with a flex of zero or less get their desired height; the others
    share what is left in proportion to their flex, never more than they want.
    """

    def __init__(self) -> None:
        self._children: list[tuple[int, Renderable]] = []

    def push(self, flex: int, child: Renderable | None) -> None:
        if child is not None:
            self._children.append((flex, child))

    def _allocate(self, area: Rect) -> list[Rect]:
        if area.height <= 0 or not self._children:
            return []
        heights = [
            0 if flex > 0 else child.desired_height(area.width)
            for flex, child in self._children
        ]
        total_flex = sum(flex for flex, _ in self._children if flex > 0)
        free = max(0, area.height - sum(heights))
        allocated = 0
        last = len(self._children) - 1
        for index, (flex, child) in enumerate(self._children):
            if flex <= 0:
                continue
            share = free * flex // max(1, total_flex)
            if index == last:
                share = free - allocated
            allocated += share
            heights[index] = min(share, child.desired_height(area.width))
        rects = []
        y = area.y
        for height in heights:
            rects.append(Rect(area.x, y, area.width, height))
            y += height
        return rects

    def render(self, area: Rect, buf: Buffer) -> None:
        for rect, (_, child) in zip(self._allocate(area), self._children):
            child.render(rect, buf)

    def desired_height(self, width: int) -> int:
        rects = self._allocate(Rect(width=width, height=sys.maxsize))
        if not rects:
            return 0
        return rects[-1].y + rects[-1].height

    def cursor_pos(self, area: Rect) -> CursorPos | None:
        for rect, (_, child) in zip(self._allocate(area), self._children):
            pos = child.cursor_pos(rect)
            if pos is not None:
                return pos
        return None


class InsetRenderable(Renderable):
    """Applies padding around a child."""

    def __init__(self, child: Renderable | None, insets: Insets) -> None:
        self.child = child
        self.insets = insets

    def render(self, area: Rect, buf: Buffer) -> None:
        if self.child is not None:
            self.child.render(area.inset(self.insets), buf)

    def desired_height(self, width: int) -> int:
        if self.child is None:
            return 0
        inner = self.child.desired_height(width - self.insets.left - self.insets.right)
        return inner + self.insets.top + self.insets.bottom

    def cursor_pos(self, area: Rect) -> CursorPos | None:
        if self.child is None:
            return None
        return self.child.cursor_pos(area.inset(self.insets))


class PlainTextRenderable(Renderable):
    """Word-wrapped unstyled text."""

    def __init__(self, text: str = "") -> None:
        self.text = text

    def _wrap_width(self, width: int) -> int:
        return width if width > 0 else len(self.text.encode("utf-8"))

    def render(self, area: Rect, buf: Buffer) -> None:
        for line in wrap_text(self.text, self._wrap_width(area.width)):
            buf.write_line(Line(spans=[Span(line)]))

    def desired_height(self, width: int) -> int:
        return len(wrap_text(self.text, self._wrap_width(width)))