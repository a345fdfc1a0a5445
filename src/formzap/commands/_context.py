"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy plugin loading, schema resolution, and
centralized outcome emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from formzap.output.formatters import OutputSettings, format_error, format_outcome

if TYPE_CHECKING:
    from formzap.config.settings import FormzapSettings
    from formzap.domain.types import ArrayStrategy
    from formzap.plugins.manager import PluginManager
    from formzap.services.decoder import FormDecoder
    from formzap.services.outcome import Invalid, Valid
    from formzap.validation.pydantic_schema import PydanticFormSchema

EXIT_INVALID = 2


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    Plugins are loaded lazily on first use so ``--help`` and ``--version``
    never import third-party plugin code.
    """

    def __init__(self, settings: FormzapSettings) -> None:
        self.settings = settings
        self._plugins: PluginManager | None = None

        # Configure structured logging
        from formzap.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        # Enable telemetry context var when verbose
        if settings.verbose:
            from formzap.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
            color=self.settings.output.color,
            width=self.settings.output.width,
        )

    @property
    def plugins(self) -> PluginManager | None:
        """The plugin manager (None when plugins are disabled)."""
        if not self.settings.plugins.enabled:
            return None
        if self._plugins is None:
            from formzap.plugins.manager import PluginManager

            self._plugins = PluginManager()
            self._plugins.discover_and_load(local_dir=self.settings.plugin_dir())
        return self._plugins

    def load_schema(self, target: str) -> PydanticFormSchema:
        """Resolve ``module:attr`` or ``path/to/file.py:attr`` to a form schema."""
        from formzap.commands._schema import import_schema
        from formzap.validation.pydantic_schema import PydanticFormSchema

        return PydanticFormSchema(import_schema(target), plugins=self.plugins)

    def decoder(self, strategy: ArrayStrategy | str | None = None) -> FormDecoder:
        """A decoder configured from settings, optionally overriding the strategy."""
        from formzap.config.discovery import decoder_options
        from formzap.services.decoder import FormDecoder

        return FormDecoder(**decoder_options(self.settings.decoder, strategy))

    def emit(self, outcome: Valid | Invalid) -> None:
        """Format and output an outcome with correct exit semantics.

        * Valid: writes to stdout, returns normally.
        * Invalid: writes to stdout, exits with code 2.
        """
        click.echo(format_outcome(outcome, settings=self.output_settings))
        if not outcome.ok:
            raise SystemExit(EXIT_INVALID)

    def fail(self, message: str) -> None:
        """Report a fatal error on stderr and exit with code 1."""
        click.echo(format_error(message, settings=self.output_settings), err=True)
        raise SystemExit(1)
