"""Mustache rendering for comment bodies, labels and assignees."""

import chevron


class _ArgList(list):
    """Argument list that renders like a JavaScript array in ``{{args}}``."""

    def __str__(self) -> str:
        return ",".join(str(item) for item in self)


def build_render_context(args, author: str | None = None) -> dict:
    """Build the values available to templates.

    - ``args``: the command arguments (``{{args.0}}`` is the first one)
    - ``input``: the arguments joined by a single space
    - ``author``: login of the issue/PR author (comment bodies only)
    """
    context = {"args": _ArgList(args), "input": " ".join(args)}
    if author is not None:
        context["author"] = author
    return context


def render(template: str, context: dict) -> str:
    """Render a Mustache template. Unknown placeholders render as ''."""
    return chevron.render(template, context)
