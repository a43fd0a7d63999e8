"""Rectangles, insets and cursor positions used for layout."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Insets:
    """Padding on each side of a rectangle."""

    top: int = 0
    left: int = 0
    right: int = 0
    bottom: int = 0


def tlbr(top: int, left: int, bottom: int, right: int) -> Insets:
    """Build insets from top, left, bottom and right values."""
    return Insets(top=top, left=left, right=right, bottom=bottom)


def vh(vertical: int, horizontal: int) -> Insets:
    """Build insets with equal vertical and equal horizontal padding."""
    return Insets(top=vertical, left=horizontal, right=horizontal, bottom=vertical)


@dataclass(frozen=True)
class Rect:
    """A rectangular area of the screen."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0

    def inset(self, insets: Insets) -> Rect:
        """Shrink the rectangle by ``insets``; sizes never go below zero."""
        return Rect(
            x=self.x + insets.left,
            y=self.y + insets.top,
            width=max(0, self.width - insets.left - insets.right),
            height=max(0, self.height - insets.top - insets.bottom),
        )


@dataclass(frozen=True)
class CursorPos:
    """A cursor position on the screen."""

    x: int = 0
    y: int = 0