"""Slash commands, saved prompts and the entries shown in the slash popup."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, IntEnum


class Command(str, Enum):
    """Built-in slash commands, in the order they are listed."""

    MODEL = "model"
    APPROVALS = "approvals"
    SKILLS = "skills"
    REVIEW = "review"
    NEW = "new"
    RESUME = "resume"
    INIT = "init"
    COMPACT = "compact"
    UNDO = "undo"
    DIFF = "diff"
    MENTION = "mention"
    STATUS = "status"
    MCP = "mcp"
    LOGOUT = "logout"
    QUIT = "quit"
    EXIT = "exit"
    FEEDBACK = "feedback"
    ROLLOUT = "rollout"
    TEST_APPROVAL = "test-approval"
    # Older commands kept for compatibility.
    CLEAR = "clear"
    RUN = "run"
    APPLY = "apply"
    ATTACH = "attach"
    ADD_DIR = "add-dir"
    SESSIONS = "sessions"


class ItemKind(IntEnum):
    """Whether a popup entry is a built-in command or a saved prompt."""

    BUILTIN = 1
    PROMPT = 2


class PlaceholderKind(IntEnum):
    """The shape of a saved prompt's placeholders."""

    NONE = 0
    NAMED = 1
    POSITIONAL = 2


@dataclass(frozen=True)
class PromptPlaceholders:
    """Named placeholders (``{{NAME}}``) or a count of positional ones (``{{1}}``)."""

    named: tuple[str, ...] = ()
    positional: int = 0

    def __init__(self, named: Iterable[str] = (), positional: int = 0) -> None:
        object.__setattr__(self, "named", tuple(named))
        object.__setattr__(self, "positional", positional)

    def kind(self) -> PlaceholderKind:
        if self.named:
            return PlaceholderKind.NAMED
        if self.positional > 0:
            return PlaceholderKind.POSITIONAL
        return PlaceholderKind.NONE


@dataclass(frozen=True)
class CustomPrompt:
    """A prompt saved by the user."""

    name: str
    description: str = ""
    prefix: str = ""
    text: str = ""
    placeholders: PromptPlaceholders = field(default_factory=PromptPlaceholders)

    def token(self) -> str:
        """The ``prefix:name`` key; the prefix defaults to ``prompts``."""
        prefix = self.prefix if self.prefix.strip() else "prompts"
        return f"{prefix}:{self.name}"


@dataclass(frozen=True)
class Item:
    """One entry of the slash popup."""

    kind: ItemKind = ItemKind.BUILTIN
    command: Command | None = None
    prompt: CustomPrompt | None = None
    name: str = ""
    description: str = ""
    debug_only: bool = False

    def token(self) -> str:
        """The matching key, without a leading slash."""
        if self.kind == ItemKind.PROMPT:
            return self.prompt.token() if self.prompt is not None else ""
        if self.name:
            return self.name
        if self.command is not None:
            return self.command.value
        return ""

    def display_name(self) -> str:
        """The token with a leading slash, or ``""`` when there is no token."""
        token = self.token()
        if not token:
            return ""
        return token if token.startswith("/") else "/" + token