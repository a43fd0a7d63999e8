"""Per-event renderers that feed engine events into a transcript."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from echotui.protocol import (
    AgentOutput,
    Event,
    EventType,
    Operation,
    PlanItem,
    Role,
    ToolEvent,
    UpdatePlanArgs,
)
from echotui.render.tool_event import format_tool_event_block
from echotui.render.transcript import Transcript

_RENDERED_TOOL_EVENTS = frozenset(
    {"approval.requested", "approval.completed", "item.started", "item.completed"}
)


@dataclass
class RenderContext:
    """State shared by all event renderers while rendering one event stream.

    ``active_sub`` is the submission whose output is being streamed; output of
    other submissions is ignored while it is set.
    """

    session_id: str = ""
    active_sub: str = ""
    transcript: Transcript | None = None
    emit_lines: Callable[[list[str]], None] | None = None

    def emit(self, lines: Iterable[str]) -> None:
        """Pass changed lines to ``emit_lines`` when there are any."""
        lines = list(lines)
        if lines and self.emit_lines is not None:
            self.emit_lines(lines)


class EventRenderer(ABC):
    """Renders one type of engine event."""

    type: EventType

    @abstractmethod
    def handle(self, ctx: RenderContext, evt: Event) -> None:
        """Apply ``evt`` to ``ctx``."""


class SubmissionAcceptedRenderer(EventRenderer):
    """Shows submitted user messages and marks the submission active."""

    type = EventType.SUBMISSION_ACCEPTED

    def handle(self, ctx: RenderContext, evt: Event) -> None:
        op = evt.payload
        if not isinstance(op, Operation):
            return
        if op.user_input is None or ctx.transcript is None:
            return
        ctx.active_sub = evt.submission_id
        for msg in op.user_input.items:
            if msg.role != Role.USER:
                continue
            ctx.emit(ctx.transcript.append_user(msg.content))


class TaskStartedRenderer(EventRenderer):
    """Task starts change nothing in the transcript."""

    type = EventType.TASK_STARTED

    def handle(self, ctx: RenderContext, evt: Event) -> None:
        # The active submission is set when the submission is accepted.
        return None


class AgentOutputRenderer(EventRenderer):
    """Streams assistant output of the active submission into the transcript."""

    type = EventType.AGENT_OUTPUT

    def handle(self, ctx: RenderContext, evt: Event) -> None:
        if ctx.transcript is None:
            return
        if ctx.active_sub and evt.submission_id != ctx.active_sub:
            return
        msg = evt.payload
        if not isinstance(msg, AgentOutput):
            return
        if msg.final:
            ctx.emit(ctx.transcript.finalize_assistant(msg.content))
            ctx.active_sub = ""
            return
        if msg.content:
            ctx.emit(ctx.transcript.append_assistant_chunk(msg.content))


class ToolEventRenderer(EventRenderer):
    """Shows tool lifecycle events as blocks that are never persisted."""

    type = EventType.TOOL_EVENT

    def handle(self, ctx: RenderContext, evt: Event) -> None:
        if ctx.transcript is None:
            return
        tool_event = evt.payload
        if not isinstance(tool_event, ToolEvent):
            return
        if tool_event.type not in _RENDERED_TOOL_EVENTS:
            return
        block = format_tool_event_block(tool_event)
        if block.strip() == "":
            return
        ctx.emit(ctx.transcript.append_tool_block(block))


class TaskTerminalRenderer(EventRenderer):
    """Clears the active submission when its task ends or fails."""

    def __init__(self, event_type: EventType) -> None:
        self.type = event_type

    def handle(self, ctx: RenderContext, evt: Event) -> None:
        if ctx.active_sub and evt.submission_id == ctx.active_sub:
            ctx.active_sub = ""


class PlanUpdatedRenderer(EventRenderer):
    """Shows plan updates as a user-style block."""

    type = EventType.PLAN_UPDATED

    def handle(self, ctx: RenderContext, evt: Event) -> None:
        args = evt.payload
        if not isinstance(args, UpdatePlanArgs) or ctx.transcript is None:
            return
        text = format_plan_update_text(args.plan, args.explanation)
        if text.strip() == "":
            return
        ctx.emit(ctx.transcript.append_user(text))


def default_renderers() -> dict[EventType, EventRenderer]:
    """The built-in renderers keyed by the event type they handle."""
    renderers: list[EventRenderer] = [
        SubmissionAcceptedRenderer(),
        TaskStartedRenderer(),
        AgentOutputRenderer(),
        ToolEventRenderer(),
        TaskTerminalRenderer(EventType.TASK_COMPLETED),
        TaskTerminalRenderer(EventType.ERROR),
        PlanUpdatedRenderer(),
    ]
    return {renderer.type: renderer for renderer in renderers}


_STATUS_ICONS = {"completed": "✓", "in_progress": "→"}


def format_plan_update_text(plan: Iterable[PlanItem], explanation: str) -> str:
    """Describe a plan update as plain text."""
    parts = ["Plan update"]
    if explanation.strip():
        parts.append("\nexplanation: " + explanation.strip())
    items = list(plan)
    if not items:
        parts.append("\nplan: (empty)")
        return "".join(parts)
    for item in items:
        icon = _STATUS_ICONS.get(item.status, "•")
        parts.append(f"\n- [{icon}] {item.step}")
    return "".join(parts)