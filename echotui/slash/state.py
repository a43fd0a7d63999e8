"""Matching, selection and key handling for the slash-command popup."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum

from echotui.slash.items import (
    Command,
    CustomPrompt,
    Item,
    ItemKind,
    PlaceholderKind,
    PromptPlaceholders,
)

UNKNOWN_COMMAND_MESSAGE = "不认识的命令，请输入 / 查看列表"
DEFAULT_MAX_LINES = 8

_FIRST_CHAR_MATCH_BONUS = 10
_MATCH_FOLLOWING_SEPARATOR_BONUS = 20
_CAMEL_CASE_MATCH_BONUS = 20
_ADJACENT_MATCH_BONUS = 5
_UNMATCHED_LEADING_CHAR_PENALTY = -5
_MAX_UNMATCHED_LEADING_CHAR_PENALTY = -15
_SEPARATORS = frozenset("/-_ .\\")


@dataclass
class Options:
    """Where the popup's entries come from."""

    custom_prompts: list[CustomPrompt] = field(default_factory=list)
    skills_available: bool = False
    debug: bool = False
    max_lines: int = 0


@dataclass(frozen=True)
class Input:
    """The composer text and cursor; ``blocked`` means another popup owns the input."""

    value: str = ""
    cursor_line: int = 0
    cursor_column: int = 0
    blocked: bool = False


class ActionKind(IntEnum):
    """What the caller should do after a key or a submit."""

    NONE = 0
    CLOSE = 1
    INSERT = 2
    SUBMIT_COMMAND = 3
    SUBMIT_PROMPT = 4
    ERROR = 5


@dataclass(frozen=True)
class Action:
    """The outcome of handling a key or resolving a submit."""

    kind: ActionKind = ActionKind.NONE
    command: Command | None = None
    prompt: CustomPrompt | None = None
    new_value: str = ""
    cursor_column: int = 0
    submit_text: str = ""
    args: str = ""
    message: str = ""


class Trigger(IntEnum):
    """The key that chose an entry."""

    TAB = 1
    ENTER = 2


@dataclass(frozen=True)
class Match:
    """A popup entry that matches the query, with the positions to highlight."""

    item: Item
    highlights: tuple[int, ...] = ()
    score: int = 0


@dataclass(frozen=True)
class _TokenInfo:
    found: bool = False
    active: bool = False
    blocked: bool = False
    value: str = ""
    start: int = 0
    end: int = 0
    args: str = ""


@dataclass(frozen=True)
class _ParsedInput:
    first_line: str = ""
    rest: str = ""
    token: _TokenInfo = field(default_factory=_TokenInfo)
    cursor: int = 0


class State:
    """Keeps the popup's matches and selection in step with the composer."""

    def __init__(self, options: Options | None = None) -> None:
        self.options = options if options is not None else Options()
        self.max_lines = (
            self.options.max_lines if self.options.max_lines > 0 else DEFAULT_MAX_LINES
        )
        self.items: list[Item] = _builtin_items(self.options)
        if self.options.custom_prompts:
            self.items.extend(_prompt_items(self.options.custom_prompts))
        self.matches: list[Match] = []
        self.selected = 0
        self.open = False
        self._input = _ParsedInput()

    def is_open(self) -> bool:
        """True while the popup is shown."""
        return self.open

    def sync_input(self, input: Input) -> None:
        """Refresh the matches and selection from the latest composer state."""
        self._input = _parse_input(input)
        token = self._input.token
        if not token.found or token.blocked:
            self.open = False
            self.matches = []
            return
        self.open = token.active and not input.blocked and input.cursor_line == 0
        if not self.open:
            self.matches = []
            return
        self.matches = filter_matches(self.items, token.value)
        if not self.matches or self.selected >= len(self.matches):
            self.selected = 0

    def resolve_submit(self, value: str) -> Action:
        """Resolve what Enter does with ``value``, whether or not the popup is open."""
        first, _ = _split_first_line(value)
        parsed = _parse_input(Input(value=value, cursor_column=len(first)))
        if not parsed.token.found or parsed.token.value == "":
            return Action(ActionKind.NONE)
        item = self._find_exact_item(parsed.token.value)
        if item is None:
            return Action(ActionKind.ERROR, message=UNKNOWN_COMMAND_MESSAGE)
        return _action_for_item(item, Trigger.ENTER, parsed)

    def handle_key(self, key: str) -> Action | None:
        """Handle a key press; ``None`` means the popup did not handle it."""
        if not self.open:
            return None
        if key in ("up", "ctrl+p", "down", "ctrl+n"):
            if not self.matches:
                return Action(ActionKind.CLOSE)
            step = -1 if key in ("up", "ctrl+p") else 1
            self.selected = (self.selected + step) % len(self.matches)
            return Action(ActionKind.NONE)
        if key == "esc":
            self.open = False
            return Action(ActionKind.CLOSE)
        if key in ("tab", "enter"):
            if not self.matches:
                return Action(ActionKind.ERROR, message=UNKNOWN_COMMAND_MESSAGE)
            trigger = Trigger.ENTER if key == "enter" else Trigger.TAB
            item = self.matches[self.selected].item
            action = _action_for_item(item, trigger, self._input)
            if action.kind in (ActionKind.SUBMIT_COMMAND, ActionKind.SUBMIT_PROMPT):
                self.open = False
            return action
        return None

    def _find_exact_item(self, token: str) -> Item | None:
        wanted = token.casefold()
        return next(
            (item for item in self.items if item.token().casefold() == wanted), None
        )


def _action_for_item(item: Item, trigger: Trigger, parsed: _ParsedInput) -> Action:
    if item.kind == ItemKind.PROMPT:
        if item.prompt is None:
            return Action(ActionKind.NONE)
        return _prompt_action(item.prompt, trigger, parsed)
    return _command_action(item.command, trigger, parsed)


def _command_action(command: Command | None, trigger: Trigger, parsed: _ParsedInput) -> Action:
    args = parsed.token.args
    if trigger == Trigger.ENTER or command == Command.SKILLS:
        return Action(ActionKind.SUBMIT_COMMAND, command=command, args=args)
    name = command.value if command is not None else ""
    return Action(
        ActionKind.INSERT,
        new_value=_build_command_value(name, parsed),
        cursor_column=len("/" + name) + 1,
    )


def _prompt_action(prompt: CustomPrompt, trigger: Trigger, parsed: _ParsedInput) -> Action:
    args = parsed.token.args
    if trigger == Trigger.ENTER and placeholders_satisfied(prompt.placeholders, args):
        return Action(
            ActionKind.SUBMIT_PROMPT,
            prompt=prompt,
            submit_text=expand_prompt(prompt, args),
            args=args,
        )
    value, cursor = _build_prompt_value(prompt, parsed)
    return Action(ActionKind.INSERT, new_value=value, cursor_column=cursor, args=args)


def _build_command_value(name: str, parsed: _ParsedInput) -> str:
    token = "/" + name
    args = parsed.token.args.strip()
    if args:
        return f"{token} {args}{parsed.rest}"
    return f"{token} {parsed.rest}"


def _build_prompt_value(prompt: CustomPrompt, parsed: _ParsedInput) -> tuple[str, int]:
    token = "/" + prompt.token()
    args = parsed.token.args.strip()
    kind = prompt.placeholders.kind()
    named = prompt.placeholders.named
    placeholder = ""
    cursor = len(token)
    if kind == PlaceholderKind.NAMED and named:
        placeholder = " ".join(f'{name}=""' for name in named)
        # Land the cursor between the quotes of the first placeholder.
        cursor = len(token) + 1 + len(named[0]) + 2
    elif kind == PlaceholderKind.POSITIONAL:
        cursor = len(token) + 1
    if args:
        pos = args.find('=""')
        if pos >= 0:
            cursor = len(token) + 1 + pos + 1
        else:
            cursor = len(token) + 1 + len(args)
        return f"{token} {args}{parsed.rest}", cursor
    if placeholder:
        return f"{token} {placeholder}{parsed.rest}", cursor
    if kind == PlaceholderKind.POSITIONAL:
        return f"{token} {parsed.rest}", cursor
    return token + parsed.rest, cursor


def fuzzy_find(pattern: str, candidates: Sequence[str]) -> list[tuple[int, int, list[int]]]:
    """Fuzzy-match ``pattern`` against ``candidates``.

    Returns ``(candidate index, score, matched positions)`` for every candidate
    containing all pattern characters in order, best score first.
    """
    if not pattern:
        return []
    results = []
    for index, text in enumerate(candidates):
        hit = _score_candidate(pattern, text)
        if hit is not None:
            results.append((index, hit[0], hit[1]))
    results.sort(key=lambda result: -result[1])
    return results


def _score_candidate(pattern: str, text: str) -> tuple[int, list[int]] | None:
    matched: list[int] = []
    total = 0
    pattern_index = 0
    best_score = -1
    matched_index = -1
    adjacent_bonus = 0
    last = ""
    last_index = 0
    for j, candidate in enumerate(text):
        if candidate.lower() == pattern[pattern_index].lower():
            score = 0
            if j == 0:
                score += _FIRST_CHAR_MATCH_BONUS
            if last.islower() and candidate.isupper():
                score += _CAMEL_CASE_MATCH_BONUS
            if j != 0 and last in _SEPARATORS:
                score += _MATCH_FOLLOWING_SEPARATOR_BONUS
            if matched:
                bonus = adjacent_bonus * 2 + _ADJACENT_MATCH_BONUS if last_index == matched[-1] else 0
                score += bonus
                adjacent_bonus += bonus
            if score > best_score:
                best_score = score
                matched_index = j
        next_pattern = pattern[pattern_index + 1] if pattern_index < len(pattern) - 1 else ""
        next_char = text[j + 1] if j + 1 < len(text) else ""
        # Commit the best position once the next pattern character is coming up,
        # or when the text ends.
        if next_pattern.lower() == next_char.lower() or next_char == "":
            if matched_index > -1:
                if not matched:
                    penalty = matched_index * _UNMATCHED_LEADING_CHAR_PENALTY
                    best_score += max(penalty, _MAX_UNMATCHED_LEADING_CHAR_PENALTY)
                total += best_score
                matched.append(matched_index)
                best_score = -1
                pattern_index += 1
                if pattern_index >= len(pattern):
                    break
        last_index = j
        last = candidate
    total += len(matched) - len(text)
    if len(matched) != len(pattern):
        return None
    return total, matched


def filter_matches(items: Sequence[Item], query: str) -> list[Match]:
    """Entries matching ``query``; an empty query matches every entry in order."""
    trimmed = query.strip()
    if not trimmed:
        return [Match(item) for item in items]
    candidates = _build_candidates(items)
    keys = [key for _, key in candidates]
    seen: set[int] = set()
    matches = []
    for index, score, indexes in fuzzy_find(trimmed.lower(), keys):
        item_index, key = candidates[index]
        if item_index in seen:
            continue
        seen.add(item_index)
        item = items[item_index]
        offset = _highlight_offset(item.token(), key)
        matches.append(
            Match(item, tuple(position + offset for position in indexes), score)
        )
    matches.sort(key=lambda m: (-m.score, m.item.token()))
    return matches


def _build_candidates(items: Sequence[Item]) -> list[tuple[int, str]]:
    candidates = []
    for index, item in enumerate(items):
        token = item.token().lower()
        if not token:
            continue
        candidates.append((index, token))
        # Saved prompts also match by their name without the prefix.
        if item.kind == ItemKind.PROMPT and ":" in token:
            name = token.split(":", 1)[1]
            if name:
                candidates.append((index, name))
    return candidates


def _highlight_offset(token: str, key: str) -> int:
    if not key:
        return 0
    token = token.lower()
    key = key.lower()
    return len(token) - len(key) if token.endswith(key) else 0


def parse_assignments(args: str) -> dict[str, str]:
    """Parse ``NAME=value`` words; quotes around values are dropped."""
    assignments = {}
    for word in args.split():
        if "=" not in word:
            continue
        name, value = word.split("=", 1)
        assignments[name.strip()] = value.strip().strip('"')
    return assignments


def placeholders_satisfied(placeholders: PromptPlaceholders, args: str) -> bool:
    """True when ``args`` fills every placeholder of a prompt."""
    kind = placeholders.kind()
    if kind == PlaceholderKind.NAMED:
        assignments = parse_assignments(args)
        return all(
            assignments.get(name, "").strip() != "" for name in placeholders.named
        )
    if kind == PlaceholderKind.POSITIONAL:
        return len(args.split()) >= placeholders.positional
    return True


def expand_prompt(prompt: CustomPrompt, args: str) -> str:
    """The prompt text with its placeholders filled from ``args``."""
    text = prompt.text
    if not text.strip():
        return args.strip() or prompt.token()
    kind = prompt.placeholders.kind()
    if kind == PlaceholderKind.NAMED:
        for name, value in parse_assignments(args).items():
            text = text.replace("{{" + name + "}}", value)
    elif kind == PlaceholderKind.POSITIONAL:
        for position, value in enumerate(args.split(), start=1):
            text = text.replace("{{" + str(position) + "}}", value)
    return text


def _parse_input(input: Input) -> _ParsedInput:
    first, rest = _split_first_line(input.value)
    return _ParsedInput(
        first_line=first,
        rest=rest,
        token=_locate_token(first, input.cursor_column),
        cursor=input.cursor_column,
    )


def _split_first_line(value: str) -> tuple[str, str]:
    index = value.find("\n")
    if index < 0:
        return value, ""
    return value[:index], value[index:]


def _locate_token(line: str, cursor: int) -> _TokenInfo:
    if not line or line[0].isspace() or line[0] != "/":
        return _TokenInfo()
    if _blocked_by_other_token(line, cursor):
        return _TokenInfo(blocked=True)
    end = len(line)
    for index in range(1, len(line)):
        ch = line[index]
        if ch.isspace():
            end = index
            break
        if ch == "/":
            return _TokenInfo()
    return _TokenInfo(
        found=True,
        active=cursor <= end,
        value=line[1:end],
        start=0,
        end=end,
        args=line[end:].lstrip(),
    )


def _blocked_by_other_token(line: str, cursor: int) -> bool:
    start = min(max(cursor, 0), len(line))
    while start > 0 and not line[start - 1].isspace():
        start -= 1
    return start < len(line) and line[start] in "@$"


def _builtin(command: Command, description: str, debug_only: bool = False) -> Item:
    return Item(
        kind=ItemKind.BUILTIN,
        command=command,
        description=description,
        debug_only=debug_only,
    )


def _builtin_items(options: Options) -> list[Item]:
    items = [
        _builtin(Command.MODEL, "切换模型"),
        _builtin(Command.APPROVALS, "配置审批策略"),
    ]
    if options.skills_available:
        items.append(_builtin(Command.SKILLS, "查看可用技能"))
    items += [
        _builtin(Command.REVIEW, "进入代码审查模式"),
        _builtin(Command.NEW, "开始新会话"),
        _builtin(Command.RESUME, "恢复最近会话"),
        _builtin(Command.INIT, "生成 AGENTS.md 指南"),
        _builtin(Command.COMPACT, "压缩上下文"),
        _builtin(Command.UNDO, "撤销上一步"),
        _builtin(Command.DIFF, "查看工作区 diff"),
        _builtin(Command.MENTION, "搜索文件/路径"),
        _builtin(Command.STATUS, "查看当前状态"),
        _builtin(Command.MCP, "管理 MCP 连接"),
        _builtin(Command.LOGOUT, "注销登录"),
        _builtin(Command.QUIT, "退出 Echo"),
        _builtin(Command.EXIT, "退出 Echo"),
        _builtin(Command.FEEDBACK, "发送反馈"),
    ]
    if options.debug:
        items += [
            _builtin(Command.ROLLOUT, "调试：切换分流", debug_only=True),
            _builtin(Command.TEST_APPROVAL, "调试：审批测试", debug_only=True),
        ]
    # Older commands kept for compatibility.
    items += [
        _builtin(Command.CLEAR, "清空会话"),
        _builtin(Command.RUN, "执行本地命令"),
        _builtin(Command.APPLY, "应用补丁文件"),
        _builtin(Command.ATTACH, "附加文件内容"),
        _builtin(Command.ADD_DIR, "添加工作区路径"),
        _builtin(Command.SESSIONS, "列出会话"),
    ]
    return items


def _prompt_items(prompts: Sequence[CustomPrompt]) -> list[Item]:
    items = [
        Item(
            kind=ItemKind.PROMPT,
            prompt=prompt,
            name=prompt.token(),
            description=prompt.description if prompt.description.strip() else "send saved prompt",
        )
        for prompt in prompts
    ]
    return sorted(items, key=lambda item: item.token())