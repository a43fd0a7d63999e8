"""Word wrapping measured in terminal display columns."""

from __future__ import annotations

from wcwidth import wcwidth


def char_width(ch: str) -> int:
    """Display width of one character; control and combining characters count as 0."""
    width = wcwidth(ch)
    return width if width > 0 else 0


def display_width(text: str) -> int:
    """Display width of a string in terminal columns."""
    return sum(char_width(ch) for ch in text)


def wrap_text(text: str, width: int) -> list[str]:
    """Wrap every line of ``text`` at word boundaries to ``width`` columns."""
    if width <= 0:
        return [text]
    lines: list[str] = []
    for raw in text.split("\n"):
        if raw == "":
            lines.append("")
        else:
            lines.extend(wrap_line(raw, width))
    return lines or [""]


def wrap_line(line: str, width: int) -> list[str]:
    """Wrap one line at word boundaries, breaking words longer than ``width``."""
    if width <= 0 or display_width(line) <= width:
        return [line]
    out: list[str] = []
    current = ""
    for word in line.split():
        word_width = display_width(word)
        if current and display_width(current) + 1 + word_width <= width:
            current += " " + word
            continue
        if current:
            out.append(current)
            current = ""
        if word_width > width:
            out.extend(break_long_word(word, width))
        else:
            current = word
    if current:
        out.append(current)
    return out or [line]


def break_long_word(word: str, width: int) -> list[str]:
    """Split a word into pieces no wider than ``width`` columns."""
    if width <= 0:
        return [word]
    out: list[str] = []
    current: list[str] = []
    used = 0
    for ch in word:
        w = char_width(ch)
        if used + w > width and current:
            out.append("".join(current))
            current = []
            used = 0
        current.append(ch)
        used += w
    if current:
        out.append("".join(current))
    return out