"""fields — list the form input names a schema expects."""

from __future__ import annotations

import click

from formzap.commands._base import FormzapCommand
from formzap.commands._context import AppContext
from formzap.domain.paths import FieldPaths, leaf_paths
from formzap.errors import FormzapError
from formzap.output.formatters import format_fields


@click.command(
    "fields",
    cls=FormzapCommand,
    examples="""\
  formzap fields myapp.forms:Signup
  formzap --json fields forms.py:Order""",
)
@click.argument("schema")
@click.pass_obj
def fields_cmd(app: AppContext, schema: str) -> None:
    """List every leaf field path of SCHEMA with its kind."""
    form_schema = app.load_schema(schema)
    try:
        rows = leaf_paths(FieldPaths(form_schema.describe()))
    except FormzapError as exc:
        app.fail(str(exc))
        return
    click.echo(format_fields(rows, settings=app.output_settings))
