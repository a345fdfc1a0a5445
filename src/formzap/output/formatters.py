"""Rich/JSON output helpers.

The CLI renders decode outcomes for humans (Rich tables, colors) or
machines (--json). ``--quiet`` prints only ``valid`` or the failing paths.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from pydantic_core import to_jsonable_python
from rich.pretty import Pretty
from rich.table import Table
from rich.text import Text

from formzap.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from formzap.services.outcome import Invalid, Valid


class OutputSettings(BaseModel):
    """How the CLI should render results."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    color: bool = True
    width: int = 120


def to_json(value: Any) -> str:
    """Serialize *value* (models, dates, sets included) as indented JSON."""
    return json.dumps(to_jsonable_python(value, fallback=str), indent=2)


def format_outcome(outcome: Valid | Invalid, *, settings: OutputSettings | None = None) -> str:
    """Format a decode outcome for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        payload = outcome.model_dump(exclude_none=not settings.verbose)
        return to_json(payload)
    if settings.quiet:
        return _render_quiet(outcome)

    console = _console(settings)
    if outcome.ok:
        _render_valid(outcome, console)
    else:
        _render_invalid(outcome, console)
    if settings.verbose and outcome.meta:
        console.print(Text("meta", style="fz.key"))
        console.print(Pretty(outcome.meta))
    return get_output(console).rstrip("\n")


def format_fields(rows: list[tuple[str, str]], *, settings: OutputSettings | None = None) -> str:
    """Format ``(path, kind)`` rows from :func:`~formzap.domain.paths.leaf_paths`."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return to_json([{"path": path, "kind": kind} for path, kind in rows])
    if settings.quiet:
        return "\n".join(path for path, _kind in rows)

    console = _console(settings)
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Field", style="fz.path")
    table.add_column("Kind", style="fz.kind")
    for path, kind in rows:
        table.add_row(path, kind)
    console.print(table)
    return get_output(console).rstrip("\n")


def format_error(message: str, *, settings: OutputSettings | None = None) -> str:
    """Format a fatal error (unsupported value, bad schema)."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return to_json({"type": "error", "message": message})
    return f"ERROR: {message}"


# ── Renderers ─────────────────────────────────────────────────────────


def _console(settings: OutputSettings) -> Console:
    return create_console(no_color=not settings.color, width=settings.width)


def _render_quiet(outcome: Valid | Invalid) -> str:
    if outcome.ok:
        return "valid"
    errors = outcome.errors
    if isinstance(errors, dict):
        return "\n".join(errors)
    return "invalid"


def _render_valid(outcome: Valid, console: Console) -> None:
    console.print(Text("VALID", style="fz.valid"))
    console.print(Pretty(to_jsonable_python(outcome.data, fallback=str)))


def _render_invalid(outcome: Invalid, console: Console) -> None:
    console.print(Text("INVALID", style="fz.invalid"))
    errors = outcome.errors
    if not isinstance(errors, dict):
        console.print(Pretty(errors))
        return
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Field", style="fz.path")
    table.add_column("Message", style="fz.message")
    for path, message in errors.items():
        table.add_row(path or "(root)", str(message))
    console.print(table)
