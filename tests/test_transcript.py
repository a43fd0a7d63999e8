from echotui.protocol import Message, Role
from echotui.render.lines import lines_to_plain_strings
from echotui.render.transcript import (
    DIFF_ADD_STYLE,
    DIFF_DEL_STYLE,
    TOOL_STYLE,
    Transcript,
    render_messages,
    wrap_line_preserve_spaces,
)
from echotui.render.wrap import display_width


def test_append_tool_block_not_persisted():
    tr = Transcript(60)
    tr.append_user("hi")
    tr.append_tool_block("✓ command_execution completed\n  └ output:\n    ok")
    tr.finalize_assistant("done")

    history = tr.messages()
    assert len(history) == 2
    assert history[0].role == Role.USER and "hi" in history[0].content
    assert history[1].role == Role.ASSISTANT and "done" in history[1].content

    view_text = "\n".join(lines_to_plain_strings(tr.render_view_lines(80)))
    assert "command_execution" in view_text


def test_append_user_renders_framed_block():
    tr = Transcript(40)
    delta = tr.append_user("hi")
    assert len(delta) == 3
    plain = lines_to_plain_strings(render_messages(tr.messages(), 40))
    assert plain == ["", "› hi", ""]


def test_assistant_chunks_accumulate_and_delta_is_incremental():
    tr = Transcript(40)
    tr.append_user("question")
    first = tr.append_assistant_chunk("hel")
    assert len(first) == 1
    assert "hel" in first[0]
    second = tr.append_assistant_chunk("lo")
    assert len(second) == 1
    assert "hello" in second[0]
    assert tr.messages()[-1] == Message(Role.ASSISTANT, "hello")


def test_unchanged_render_gives_empty_delta():
    tr = Transcript(40)
    tr.append_assistant_chunk("text")
    assert tr.finalize_assistant("") == []
    assert tr.messages()[-1].content == "text"


def test_finalize_replaces_streamed_text():
    tr = Transcript(40)
    tr.append_assistant_chunk("draft")
    tr.finalize_assistant("final answer")
    assert tr.messages() == [Message(Role.ASSISTANT, "final answer")]
    view = lines_to_plain_strings(tr.render_view_lines(0))
    assert view == ["• final answer"]


def test_finalize_without_assistant_and_empty_text_is_noop():
    tr = Transcript(40)
    assert tr.finalize_assistant("") == []
    assert tr.messages() == []


def test_chunk_after_tool_block_starts_new_view_entry():
    tr = Transcript(60)
    tr.append_assistant_chunk("a")
    tr.append_tool_block("tool output")
    tr.append_assistant_chunk("b")
    assert tr.messages() == [Message(Role.ASSISTANT, "ab")]
    plain = lines_to_plain_strings(tr.render_view_lines(60))
    assert plain[-1] == "• b"
    assert "tool output" in plain


def test_blank_tool_block_is_ignored():
    tr = Transcript(60)
    assert tr.append_tool_block("   \n\n") == []
    assert tr.render_view_lines(60) == []


def test_set_width_forces_full_delta():
    tr = Transcript(40)
    tr.append_user("hi")
    tr.set_width(50)
    delta = tr.append_assistant_chunk("x")
    assert len(delta) == 4


def test_load_messages_and_reset():
    tr = Transcript(40)
    msgs = [Message(Role.USER, "q"), Message(Role.ASSISTANT, "a")]
    tr.load_messages(msgs)
    assert tr.messages() == msgs
    assert tr.messages() is not msgs
    tr.reset()
    assert tr.messages() == []
    assert tr.render_view_lines(40) == []


def test_long_assistant_text_wraps_within_width():
    width = 20
    lines = render_messages([Message(Role.ASSISTANT, "word " * 30)], width)
    plain = lines_to_plain_strings(lines)
    assert len(plain) > 1
    assert all(display_width(text) <= width for text in plain)
    assert all(text.startswith("  ") for text in plain[1:])


def test_tool_block_diff_lines_are_styled():
    content = "✓ file_change completed\n  └ diff:\n    +new\n    -old\n     ctx"
    lines = render_messages([Message(Role.TOOL, content)], 80)
    assert lines[0].spans[0].style == TOOL_STYLE
    assert lines[2].spans[1].style == DIFF_ADD_STYLE
    assert lines[3].spans[1].style == DIFF_DEL_STYLE
    assert lines[4].spans[1].style == TOOL_STYLE
    assert lines[2].spans[0].text == "    "


def test_wrap_line_preserve_spaces():
    assert wrap_line_preserve_spaces("abcdef", 4) == ["abcd", "ef"]
    assert wrap_line_preserve_spaces("a  b", 10) == ["a  b"]
    pieces = wrap_line_preserve_spaces("  x  y  z  ", 3)
    assert "".join(pieces) == "  x  y  z  "
    assert all(display_width(piece) <= 3 for piece in pieces)