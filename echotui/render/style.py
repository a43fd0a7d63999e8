"""Terminal text styles rendered as ANSI SGR escape sequences."""

from __future__ import annotations

import re
from dataclasses import dataclass

from echotui.render.wrap import display_width

_RESET = "\x1b[0m"
_ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def _parse_hex_color(color: str) -> tuple[int, int, int]:
    value = color[1:] if color.startswith("#") else color
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    if len(value) != 6:
        raise ValueError(f"invalid colour {color!r}")
    try:
        return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)
    except ValueError as exc:
        raise ValueError(f"invalid colour {color!r}") from exc


def _visible_width(text: str) -> int:
    return display_width(_ANSI_ESCAPE.sub("", text))


@dataclass(frozen=True)
class Style:
    """An immutable set of text attributes; the default style renders text unchanged."""

    bold: bool = False
    faint: bool = False
    italic: bool = False
    strikethrough: bool = False
    foreground: str | None = None
    background: str | None = None
    width: int = 0

    def __post_init__(self) -> None:
        for color in (self.foreground, self.background):
            if color is not None:
                _parse_hex_color(color)

    def _sgr_codes(self) -> list[str]:
        codes = []
        if self.bold:
            codes.append("1")
        if self.faint:
            codes.append("2")
        if self.italic:
            codes.append("3")
        if self.strikethrough:
            codes.append("9")
        if self.foreground is not None:
            r, g, b = _parse_hex_color(self.foreground)
            codes.append(f"38;2;{r};{g};{b}")
        if self.background is not None:
            r, g, b = _parse_hex_color(self.background)
            codes.append(f"48;2;{r};{g};{b}")
        return codes

    def render(self, text: str) -> str:
        """Return ``text`` padded to ``width`` and wrapped in this style's escapes."""
        lines = text.split("\n")
        if self.width > 0:
            lines = [
                line + " " * max(0, self.width - _visible_width(line)) for line in lines
            ]
        codes = self._sgr_codes()
        if not codes:
            return "\n".join(lines)
        prefix = f"\x1b[{';'.join(codes)}m"
        return "\n".join(prefix + line + _RESET if line else line for line in lines)