"""Messages, plans, tool results and engine events consumed by the renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Role(str, Enum):
    """Who a conversation message belongs to."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass(frozen=True)
class Message:
    """One conversation entry."""

    role: Role | str
    content: str = ""


@dataclass(frozen=True)
class PlanItem:
    """One step of a plan and its status (pending, in_progress or completed)."""

    step: str = ""
    status: str = ""


@dataclass(frozen=True)
class UpdatePlanArgs:
    """A snapshot of the agent's plan with an optional explanation."""

    explanation: str = ""
    plan: list[PlanItem] = field(default_factory=list)


class ToolKind(str, Enum):
    """The kind of work a tool call performs."""

    COMMAND = "command_execution"
    APPLY_PATCH = "file_change"
    FILE_READ = "file_read"
    SEARCH = "search"


@dataclass(frozen=True)
class ToolResult:
    """The state or outcome of one tool call."""

    kind: ToolKind | str = ""
    status: str = ""
    command: str = ""
    path: str = ""
    output: str = ""
    diff: str = ""
    error: str = ""
    exit_code: int = 0


@dataclass(frozen=True)
class ToolEvent:
    """A lifecycle event of a tool call, such as ``item.started``."""

    type: str = ""
    result: ToolResult = field(default_factory=ToolResult)
    reason: str = ""


class EventType(str, Enum):
    """The kinds of events the engine emits."""

    SUBMISSION_ACCEPTED = "submission.accepted"
    TASK_STARTED = "task.started"
    AGENT_OUTPUT = "agent.output"
    TOOL_EVENT = "tool.event"
    TASK_COMPLETED = "task.completed"
    ERROR = "error"
    PLAN_UPDATED = "plan.updated"


@dataclass(frozen=True)
class Event:
    """An engine event carrying a type-specific payload."""

    type: EventType
    submission_id: str = ""
    session_id: str = ""
    payload: Any = None


@dataclass(frozen=True)
class UserInput:
    """Messages submitted by the user."""

    items: list[Message] = field(default_factory=list)


@dataclass(frozen=True)
class Operation:
    """A submitted operation; only user input is rendered."""

    user_input: UserInput | None = None


@dataclass(frozen=True)
class AgentOutput:
    """A streamed chunk of assistant output, or the final text."""

    content: str = ""
    final: bool = False