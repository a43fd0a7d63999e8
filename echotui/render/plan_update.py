"""Rendering of plan snapshots as an indented checklist."""

from __future__ import annotations

from echotui.protocol import PlanItem, UpdatePlanArgs
from echotui.render.lines import Line, Span, prefix_lines
from echotui.render.style import Style
from echotui.render.wrap import display_width, wrap_text

PLAN_BULLET_STYLE = Style(faint=True)
PLAN_HEADER_STYLE = Style(bold=True)
PLAN_BRANCH_STYLE = Style(faint=True)
PLAN_NOTE_STYLE = Style(faint=True, italic=True)
PLAN_COMPLETED_STYLE = Style(faint=True, strikethrough=True)
PLAN_IN_PROGRESS_STYLE = Style(foreground="#2DD4BF", bold=True)
PLAN_PENDING_STYLE = Style(faint=True)
PLAN_EMPTY_STEPS_STYLE = Style(faint=True, italic=True)


def render_plan_update(args: UpdatePlanArgs, width: int) -> list[Line]:
    """Render a plan snapshot for a section ``width`` columns wide (80 if not positive)."""
    if width <= 0:
        width = 80
    header = Line(
        spans=[Span("• ", PLAN_BULLET_STYLE), Span("Updated Plan", PLAN_HEADER_STYLE)]
    )
    indented: list[Line] = []
    note = args.explanation.strip()
    if note:
        indented.extend(
            Line(spans=[Span(text, PLAN_NOTE_STYLE)])
            for text in wrap_text(note, max(1, width - 4))
        )
    if args.plan:
        for item in args.plan:
            indented.extend(_render_step(item, width))
    else:
        indented.append(Line(spans=[Span("(no steps provided)", PLAN_EMPTY_STEPS_STYLE)]))
    indented = prefix_lines(
        indented, Span("  └ ", PLAN_BRANCH_STYLE), Span("    ", Style())
    )
    return [header, *indented]


def _render_step(item: PlanItem, width: int) -> list[Line]:
    status = item.status.strip()
    box, step_style = {
        "completed": ("✔ ", PLAN_COMPLETED_STYLE),
        "in_progress": ("□ ", PLAN_IN_PROGRESS_STYLE),
    }.get(status, ("□ ", PLAN_PENDING_STYLE))
    # Four columns go to the outer indent, then the checkbox prefix.
    wrap_width = max(1, width - 4 - display_width(box))
    step_lines = [
        Line(spans=[Span(text, step_style)])
        for text in wrap_text(item.step.strip(), wrap_width)
    ]
    return prefix_lines(step_lines, Span(box, Style()), Span("  ", Style()))