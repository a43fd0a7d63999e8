# echotui

Building blocks for a chat-style terminal interface. The package turns
conversation state into lines of styled text. Your application writes those
lines to the terminal.

## Modules

- `echotui.render.style`: `Style`, an immutable set of text attributes (bold,
  faint, italic, strikethrough, hex foreground and background colours, and
  padding width). `Style.render` returns the text wrapped in ANSI escapes.
- `echotui.render.lines`: the styled text types `Span`, `Line` and `Buffer`,
  plus `lines_to_strings`, `lines_to_plain_strings` and `prefix_lines`.
- `echotui.render.geometry`: `Rect`, `Insets` (also built with `tlbr` and `vh`)
  and `CursorPos`.
- `echotui.render.wrap`: `wrap_text` wraps at word boundaries and measures
  width in terminal columns, so wide characters take two. It uses `wcwidth`.
- `echotui.render.renderable`: the `Renderable` base class and the layouts
  `ColumnRenderable`, `RowRenderable`, `FlexRenderable`, `InsetRenderable`,
  `StaticLines` and `PlainTextRenderable`.
- `echotui.render.highlight`: `highlight_bash_to_lines` dims comments,
  operators and quoted words in a shell script.
- `echotui.protocol`: the data the renderers consume. This covers `Message`,
  `Role`, `PlanItem`, `UpdatePlanArgs`, `ToolResult`, `ToolEvent`, `Event`,
  `EventType`, `Operation`, `UserInput` and `AgentOutput`.
- `echotui.render.transcript`: `Transcript`, which holds the conversation.
  Each change returns only the rendered lines that differ from the last
  render. `render_messages` renders a list of messages.
- `echotui.render.tool_event`: `format_tool_event_block` describes a tool
  event as plain text.
- `echotui.render.plan_update`: `render_plan_update` draws a plan as a
  checklist.
- `echotui.render.events`: `RenderContext`, `default_renderers` and one
  renderer class per event type. Together they feed engine events into a
  `Transcript`.
- `echotui.render.viewport`: `Viewport`, a scrolling window over lines. It
  stays at the bottom while new content arrives.
- `echotui.status_indicator`: `StatusIndicatorWidget`, a one-line status made
  of a spinner, a header, the elapsed time and an "esc to interrupt" hint.
- `echotui.slash.items`: the slash commands and saved prompts. This covers
  `Command`, `CustomPrompt`, `PromptPlaceholders` and `Item`.
- `echotui.slash.state`: `State`, the slash-command popup. It does fuzzy
  filtering, selection, tab completion and Enter handling, and fills in
  placeholders for saved prompts.
- `echotui.slash.view`: `render_view` draws the open popup as a string.

## Installation

```
pip install .
```

## Example: transcript

```python
from echotui.render.transcript import Transcript

transcript = Transcript(60)
for line in transcript.append_user("hi"):
    print(line)
for line in transcript.append_assistant_chunk("Hello"):
    print(line)
transcript.finalize_assistant("Hello there")
print([m.content for m in transcript.messages()])
```

Tool blocks appear in the view, but `messages()` does not return them:

```python
transcript.append_tool_block("✓ command_execution completed")
```

## Example: slash commands

```python
from echotui.slash.state import Input, Options, State
from echotui.slash.view import render_view

state = State(Options())
state.sync_input(Input(value="/mo", cursor_line=0, cursor_column=3))
print(render_view(state, 60))
action = state.handle_key("tab")   # an Action, or None if the key was not handled
print(action.new_value)            # "/model "
```

`State.resolve_submit("/model")` resolves what Enter does with a fully typed
line, whether or not the popup is open.

## Example: status line

```python
from echotui.render.geometry import Rect
from echotui.render.lines import Buffer, lines_to_plain_strings
from echotui.status_indicator import StatusIndicatorWidget

widget = StatusIndicatorWidget()
buf = Buffer()
widget.render(Rect(width=80, height=1), buf)
print(lines_to_plain_strings(buf.lines))  # ['• Working (0s • esc to interrupt)']
```

## What it does not do

The package has no command of its own. It has no event loop, does not read
the keyboard and does not draw to the terminal itself. It does not talk to a
model or run tools. It only renders the events and messages it is given, and
the application that uses it must supply all of these.

## Running the tests

```
pip install .[test]
pytest
```