"""encode — flatten a JSON value into a url-encoded form body."""

from __future__ import annotations

import json
from urllib.parse import urlencode

import click

from formzap.commands._base import FormzapCommand
from formzap.commands._context import AppContext
from formzap.config.discovery import decoder_options
from formzap.domain.types import ArrayStrategy
from formzap.errors import FormzapError
from formzap.output.formatters import to_json
from formzap.services.encoder import encode_form


@click.command(
    "encode",
    cls=FormzapCommand,
    examples="""\
  formzap encode myapp.forms:Signup '{"name": "Ada", "tags": ["a", "b"]}'
  echo '{"items": [{"sku": "x"}]}' | formzap encode myapp.forms:Order - --strategy key""",
)
@click.argument("schema")
@click.argument("value")
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in ArrayStrategy]),
    default=ArrayStrategy.INDEX.value,
    show_default=True,
    help="How arrays of objects are flattened.",
)
@click.pass_obj
def encode_cmd(app: AppContext, schema: str, value: str, strategy: str) -> None:
    """Encode VALUE (JSON, or - for stdin) as a form body for SCHEMA."""
    form_schema = app.load_schema(schema)
    raw = click.get_text_stream("stdin").read() if value == "-" else value
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"invalid JSON: {exc}", param_hint="VALUE") from exc

    try:
        submission = encode_form(
            form_schema, data, **decoder_options(app.settings.decoder, strategy)
        )
    except FormzapError as exc:
        app.fail(str(exc))
        return

    pairs = list(submission.items())
    if app.settings.json_output:
        click.echo(to_json([[k, v] for k, v in pairs]))
    else:
        click.echo(urlencode(pairs))
