"""Root CLI group for formzap with global flags and command registration."""

from __future__ import annotations

import click

from formzap import __version__
from formzap.commands import register_commands
from formzap.commands._context import AppContext
from formzap.config.settings import FormzapSettings
from formzap.errors import FormzapError


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="formzap")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logs and timing spans.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """formzap — decode flat form submissions into validated, typed values."""
    ctx.ensure_object(dict)
    try:
        settings = FormzapSettings.from_cli(
            config_path=config_path,
            json_output=json_output or None,
            quiet=quiet or None,
            verbose=verbose or None,
            log_json=log_json or None,
        )
    except FormzapError as exc:
        raise click.ClickException(str(exc)) from exc
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
