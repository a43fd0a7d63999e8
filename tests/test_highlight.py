from echotui.render.highlight import highlight_bash_to_lines
from echotui.render.lines import Line, lines_to_plain_strings
from echotui.render.style import Style


def test_plain_text_round_trips():
    script = "  echo  hi && ls -la\n# note\n\ncat 'file' > out  "
    lines = highlight_bash_to_lines(script)
    assert lines_to_plain_strings(lines) == script.split("\n")


def test_comment_is_one_dim_span():
    (line,) = highlight_bash_to_lines("   # a comment")
    assert len(line.spans) == 1
    assert line.spans[0].text == "   # a comment"
    assert line.spans[0].style.faint


def test_operators_are_dimmed():
    (line,) = highlight_bash_to_lines("make && make install")
    styles = {span.text: span.style for span in line.spans}
    assert styles["&&"].faint
    assert styles["make"] == Style()


def test_quoted_tokens_are_dimmed():
    (line,) = highlight_bash_to_lines("echo \"hi\" 'there'")
    styles = {span.text: span.style for span in line.spans}
    assert styles['"hi"'].faint
    assert styles["'there'"].faint
    assert styles["echo"] == Style()


def test_empty_and_whitespace_lines_have_no_spans():
    lines = highlight_bash_to_lines("\n   ")
    assert lines == [Line(), Line()]


def test_one_line_per_input_line():
    script = "a\nb\nc"
    assert len(highlight_bash_to_lines(script)) == len(script.split("\n"))