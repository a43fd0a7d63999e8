import pytest

from echotui.slash.items import (
    Command,
    CustomPrompt,
    Item,
    ItemKind,
    PromptPlaceholders,
)
from echotui.slash.state import (
    UNKNOWN_COMMAND_MESSAGE,
    Action,
    ActionKind,
    Input,
    Options,
    State,
    expand_prompt,
    filter_matches,
    fuzzy_find,
    parse_assignments,
    placeholders_satisfied,
)


def _prompt_state(prompt):
    return State(Options(custom_prompts=[prompt]))


def test_sync_input_opens_on_slash_token():
    state = State(Options())
    state.sync_input(Input(value="/mo", cursor_line=0, cursor_column=3))
    assert state.is_open()
    assert len(state.matches) > 0


def test_sync_input_opens_on_bare_slash():
    state = State(Options())
    state.sync_input(Input(value="/", cursor_line=0, cursor_column=1))
    assert state.is_open()
    assert len(state.matches) == len(state.items)


def test_handle_key_tab_completes_builtin():
    state = State(Options())
    state.sync_input(Input(value="/mo", cursor_line=0, cursor_column=3))
    action = state.handle_key("tab")
    assert action is not None
    assert action.kind == ActionKind.INSERT
    assert action.new_value.strip() == "/model"
    assert action.new_value == "/model "
    assert action.cursor_column == 7


def test_handle_key_enter_dispatches_command():
    state = State(Options())
    state.sync_input(Input(value="/model", cursor_line=0, cursor_column=6))
    action = state.handle_key("enter")
    assert action is not None
    assert action.kind == ActionKind.SUBMIT_COMMAND
    assert action.command == Command.MODEL
    assert not state.is_open()


def test_prompt_placeholder_insertion():
    prompt = CustomPrompt(name="foo", placeholders=PromptPlaceholders(named=["ARG"]))
    state = _prompt_state(prompt)
    state.sync_input(Input(value="/prompts:foo", cursor_line=0, cursor_column=12))
    action = state.handle_key("tab")
    assert action is not None
    assert action.kind == ActionKind.INSERT
    assert 'ARG=""' in action.new_value
    assert action.new_value == '/prompts:foo ARG=""'
    assert action.cursor_column > len("/prompts:foo ")
    assert action.cursor_column == 18


def test_resolve_submit_fallback():
    state = State(Options())
    action = state.resolve_submit("/model")
    assert action.kind == ActionKind.SUBMIT_COMMAND
    assert action.command == Command.MODEL


def test_resolve_submit_is_case_insensitive_and_keeps_args():
    state = State(Options())
    action = state.resolve_submit("/MODEL gpt big")
    assert action == Action(ActionKind.SUBMIT_COMMAND, command=Command.MODEL, args="gpt big")


def test_resolve_submit_unknown_command_is_error():
    action = State(Options()).resolve_submit("/nonsense")
    assert action.kind == ActionKind.ERROR
    assert action.message == UNKNOWN_COMMAND_MESSAGE


@pytest.mark.parametrize("value", ["hello", "", " /model", "/"])
def test_resolve_submit_without_command_does_nothing(value):
    assert State(Options()).resolve_submit(value).kind == ActionKind.NONE


def test_debug_commands_only_with_debug():
    assert State(Options()).resolve_submit("/rollout").kind == ActionKind.ERROR
    action = State(Options(debug=True)).resolve_submit("/rollout")
    assert action.command == Command.ROLLOUT


def test_sync_input_without_slash_stays_closed():
    state = State(Options())
    state.sync_input(Input(value="hello", cursor_column=5))
    assert not state.is_open()
    assert state.matches == []


def test_sync_input_blocked_by_mention_token():
    state = State(Options())
    state.sync_input(Input(value="/mo @fi", cursor_column=7))
    assert not state.is_open()


def test_sync_input_closes_when_cursor_past_token():
    state = State(Options())
    state.sync_input(Input(value="/model arg", cursor_column=10))
    assert not state.is_open()


def test_sync_input_closes_on_other_lines_and_when_blocked():
    state = State(Options())
    state.sync_input(Input(value="/mo\nmore", cursor_line=1, cursor_column=2))
    assert not state.is_open()
    state.sync_input(Input(value="/mo", cursor_column=3, blocked=True))
    assert not state.is_open()


def test_second_slash_in_token_is_not_a_command():
    state = State(Options())
    state.sync_input(Input(value="/usr/bin", cursor_column=3))
    assert not state.is_open()


def test_up_and_down_wrap_selection():
    state = State(Options())
    state.sync_input(Input(value="/", cursor_column=1))
    assert state.handle_key("up") == Action(ActionKind.NONE)
    assert state.selected == len(state.matches) - 1
    state.handle_key("down")
    assert state.selected == 0
    state.handle_key("ctrl+n")
    assert state.selected == 1


def test_esc_closes_popup():
    state = State(Options())
    state.sync_input(Input(value="/", cursor_column=1))
    assert state.handle_key("esc").kind == ActionKind.CLOSE
    assert not state.is_open()
    assert state.handle_key("enter") is None


def test_unhandled_key_returns_none():
    state = State(Options())
    state.sync_input(Input(value="/", cursor_column=1))
    assert state.handle_key("x") is None


def test_enter_without_matches_is_error():
    state = State(Options())
    state.sync_input(Input(value="/zzz", cursor_column=4))
    assert state.is_open()
    action = state.handle_key("enter")
    assert action.kind == ActionKind.ERROR
    assert action.message == UNKNOWN_COMMAND_MESSAGE
    assert state.handle_key("up").kind == ActionKind.CLOSE


def test_tab_keeps_arguments_and_rest():
    state = State(Options())
    state.sync_input(Input(value="/mo x\nsecond", cursor_column=3))
    action = state.handle_key("tab")
    assert action.new_value == "/model x\nsecond"
    assert action.cursor_column == 7


def test_tab_on_skills_submits():
    state = State(Options(skills_available=True))
    state.sync_input(Input(value="/skills", cursor_column=7))
    action = state.handle_key("tab")
    assert action.kind == ActionKind.SUBMIT_COMMAND
    assert action.command == Command.SKILLS


def test_prompt_enter_submits_expanded_text():
    prompt = CustomPrompt(
        name="greet",
        text="Hello {{ARG}}",
        placeholders=PromptPlaceholders(named=["ARG"]),
    )
    action = _prompt_state(prompt).resolve_submit("/prompts:greet ARG=bar")
    assert action.kind == ActionKind.SUBMIT_PROMPT
    assert action.submit_text == "Hello bar"
    assert action.prompt == prompt


def test_prompt_enter_with_missing_values_inserts():
    prompt = CustomPrompt(name="greet", placeholders=PromptPlaceholders(named=["ARG"]))
    action = _prompt_state(prompt).resolve_submit("/prompts:greet")
    assert action.kind == ActionKind.INSERT
    assert action.new_value == '/prompts:greet ARG=""'


def test_fuzzy_find_scores_and_positions():
    results = fuzzy_find("mo", ["model", "mcp", "mode"])
    assert results == [(2, 13, [0, 1]), (0, 12, [0, 1])]
    assert fuzzy_find("", ["model"]) == []


def test_filter_matches_ranks_model_first():
    state = State(Options())
    matches = filter_matches(state.items, "mo")
    assert matches[0].item.token() == "model"
    assert matches[0].highlights == (0, 1)
    assert all(m.item.token() != "mcp" for m in matches)


def test_filter_matches_prompt_by_name_shifts_highlights():
    prompt = CustomPrompt(name="foo")
    items = [Item(kind=ItemKind.PROMPT, prompt=prompt, name=prompt.token())]
    matches = filter_matches(items, "foo")
    assert len(matches) == 1
    assert matches[0].highlights == (8, 9, 10)
    assert matches[0].score == 30


def test_filter_matches_empty_query_keeps_all():
    state = State(Options())
    assert [m.item for m in filter_matches(state.items, "  ")] == state.items


def test_parse_assignments():
    assert parse_assignments('a=1 b="x y" c') == {"a": "1", "b": "x"}


def test_placeholders_satisfied():
    positional = PromptPlaceholders(positional=2)
    assert placeholders_satisfied(positional, "a b")
    assert not placeholders_satisfied(positional, "a")
    assert placeholders_satisfied(PromptPlaceholders(), "")
    named = PromptPlaceholders(named=["A", "B"])
    assert placeholders_satisfied(named, "A=1 B=2")
    assert not placeholders_satisfied(named, 'A=1 B=""')


def test_expand_prompt():
    positional = CustomPrompt(
        name="p", text="{{1}}-{{2}}", placeholders=PromptPlaceholders(positional=2)
    )
    assert expand_prompt(positional, "a b") == "a-b"
    empty = CustomPrompt(name="p")
    assert expand_prompt(empty, "  hi  ") == "hi"
    assert expand_prompt(empty, "") == "prompts:p"


def test_prompts_sorted_after_builtins():
    prompts = [CustomPrompt(name="zeta"), CustomPrompt(name="alpha")]
    state = State(Options(custom_prompts=prompts))
    assert [item.token() for item in state.items[-2:]] == [
        "prompts:alpha",
        "prompts:zeta",
    ]
    assert state.items[-1].description == "send saved prompt"
    assert state.max_lines == 8