"""Plain-text blocks describing tool events for the transcript view."""

from __future__ import annotations

from enum import Enum

from echotui.protocol import ToolEvent, ToolKind, ToolResult

MAX_TOOL_BLOCK_LINES = 60


def _kind_text(kind: ToolKind | str) -> str:
    return kind.value if isinstance(kind, Enum) else str(kind)


def format_tool_event_block(ev: ToolEvent) -> str:
    """Format a tool event as an unstyled block; unknown event types give ``""``."""
    res = ev.result
    has_diff = res.kind == ToolKind.APPLY_PATCH and res.diff.strip() != ""
    if ev.type == "approval.requested":
        desc = ev.reason.strip() or _approval_desc(res)
        head = f"? approval required: {desc}"
        return _block_with_diff(head, res.diff) if has_diff else head
    if ev.type == "approval.completed":
        reason = ev.reason.strip() or "completed"
        return f"✓ approval {reason}"
    if ev.type == "item.started":
        head, detail = _start_line(res)
        line = f"{head} {detail or _kind_text(res.kind)}"
        return _block_with_diff(line, res.diff) if has_diff else line
    if ev.type == "item.completed":
        return _completed_block(res)
    return ""


def _approval_desc(res: ToolResult) -> str:
    command = res.command.strip()
    path = res.path.strip()
    if res.kind == ToolKind.COMMAND:
        return f"command: {command}" if command else "command execution"
    if res.kind == ToolKind.APPLY_PATCH:
        return f"apply patch: {path}" if path else "apply patch"
    if res.kind == ToolKind.FILE_READ:
        return f"read file: {path}" if path else "read file"
    if res.kind == ToolKind.SEARCH:
        return "search workspace"
    return "approval required"


def _start_line(res: ToolResult) -> tuple[str, str]:
    if res.kind == ToolKind.COMMAND:
        return "> running", res.command.strip()
    if res.kind == ToolKind.APPLY_PATCH:
        return "Δ applying", res.path.strip()
    if res.kind == ToolKind.FILE_READ:
        return "↳ reading", res.path.strip()
    if res.kind == ToolKind.SEARCH:
        return "🔍 searching", res.output.strip()
    return "• running", res.status.strip()


def _completed_block(res: ToolResult) -> str:
    success = res.error == "" and res.status != "error"
    icon, state = ("✓", "completed") if success else ("✗", "failed")
    parts = [f"{icon} {_kind_text(res.kind)} {state}"]
    if res.command.strip():
        parts.append(f"\n  └ command: {res.command.strip()}")
    if res.path.strip():
        parts.append(f"\n  └ path: {res.path.strip()}")
    if res.exit_code != 0:
        parts.append(f"\n  └ exit_code: {res.exit_code}")
    if res.error.strip():
        parts.append(f"\n  └ error: {res.error.strip()}")
    if res.kind == ToolKind.APPLY_PATCH and res.diff.strip():
        parts.append("\n  └ diff:")
        parts.append(_indented_truncated(res.diff, MAX_TOOL_BLOCK_LINES))
    elif res.output.strip():
        parts.append("\n  └ output:")
        parts.append(_indented_truncated(res.output, MAX_TOOL_BLOCK_LINES))
    return "".join(parts)


def _block_with_diff(head: str, diff: str) -> str:
    return (
        head.rstrip("\n")
        + "\n  └ diff:"
        + _indented_truncated(diff, MAX_TOOL_BLOCK_LINES)
    )


def _indented_truncated(text: str, limit: int) -> str:
    lines = text.rstrip("\n").split("\n")
    truncated = limit > 0 and len(lines) > limit
    if truncated:
        lines = lines[:limit]
    out = "".join("\n    " + line.rstrip("\r") for line in lines)
    if truncated:
        out += "\n    … (truncated)"
    return out