"""CLI command registration."""

from __future__ import annotations

import click


def register_commands(cli: click.Group) -> None:
    """Attach all subcommands to the root group."""
    from formzap.commands.decode import decode_cmd
    from formzap.commands.encode import encode_cmd
    from formzap.commands.fields import fields_cmd

    cli.add_command(decode_cmd)
    cli.add_command(encode_cmd)
    cli.add_command(fields_cmd)
