"""decode — decode and validate a form body against a schema."""

from __future__ import annotations

from typing import BinaryIO

import click

from formzap.commands._base import FormzapCommand
from formzap.commands._context import AppContext
from formzap.config.logging import bind_decode_context
from formzap.domain.types import ArrayStrategy
from formzap.errors import FormzapError
from formzap.services.decoder import decode
from formzap.services.intake import URLENCODED, submission_from_body

_EXAMPLES = """\
  # url-encoded body from a file
  formzap decode myapp.forms:Signup body.txt

  # from stdin, JSON output
  printf 'name=Ada&tags=a&tags=b' | formzap --json decode myapp.forms:Signup -

  # multipart body captured from a browser
  formzap decode forms.py:Upload body.bin \\
      --content-type 'multipart/form-data; boundary=----x'

  # force positional array elements
  formzap decode myapp.forms:Order body.txt --strategy index"""


@click.command(
    "decode",
    cls=FormzapCommand,
    examples=_EXAMPLES,
)
@click.argument("schema")
@click.argument("body", type=click.File("rb"), default="-")
@click.option(
    "--content-type",
    default=URLENCODED,
    show_default=True,
    help="Body content type; multipart needs its boundary parameter.",
)
@click.option(
    "--strategy",
    type=click.Choice([s.value for s in ArrayStrategy]),
    default=None,
    help="Array-of-objects strategy (overrides [decoder] array_strategy).",
)
@click.pass_obj
def decode_cmd(
    app: AppContext,
    schema: str,
    body: BinaryIO,
    content_type: str,
    strategy: str | None,
) -> None:
    """Decode a form BODY against SCHEMA (module:Model or file.py:Model).

    Exit codes: 0 valid, 2 invalid, 1 fatal (e.g. a file upload where a
    text field was expected).
    """
    form_schema = app.load_schema(schema)
    decoder = app.decoder(strategy)
    bind_decode_context(schema=schema, content_type=content_type, strategy=str(decoder.strategy))
    try:
        submission = submission_from_body(body.read(), content_type)
        outcome = decode(form_schema, submission, decoder=decoder)
    except FormzapError as exc:
        app.fail(str(exc))
        return
    app.emit(outcome)
