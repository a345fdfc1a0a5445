"""Locating and reading ``formzap.toml``.

Resolution order for the file in effect:

1. ``--config PATH`` (a missing file means "no config", not an error)
2. ``FORMZAP_CONFIG`` environment variable
3. the nearest ``formzap.toml`` in the start directory or any parent

The file is sparse: only the sections a project overrides appear in it.
Top-level names the settings do not declare are reported with a warning
and otherwise ignored.
"""

from __future__ import annotations

import logging
import os
import tomllib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from formzap.config.models import DecoderConfig
from formzap.domain.types import ArrayStrategy
from formzap.errors import FormzapError

# Plain stdlib logger: config is read before structlog is configured.
logger = logging.getLogger(__name__)

CONFIG_FILENAME = "formzap.toml"
CONFIG_ENV_VAR = "FORMZAP_CONFIG"


class ConfigFileError(FormzapError):
    """formzap.toml exists but cannot be parsed."""


def find_config(start: Path | None = None, *, explicit: str | Path | None = None) -> Path | None:
    """Return the config file in effect, or None when there is none."""
    chosen = explicit or os.environ.get(CONFIG_ENV_VAR)
    if chosen:
        path = Path(chosen)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_config_table(path: Path, known: Iterable[str]) -> dict[str, Any]:
    """Parse *path*, keeping only the top-level names in *known*.

    Raises:
        ConfigFileError: the file is not valid TOML.
    """
    try:
        table = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigFileError(msg) from exc

    unknown = sorted(set(table) - set(known))
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", path, ", ".join(unknown))
    return {name: value for name, value in table.items() if name not in unknown}


def decoder_options(
    config: DecoderConfig, strategy: ArrayStrategy | str | None = None
) -> dict[str, Any]:
    """Keyword arguments for a decoder or encoder built from ``[decoder]``.

    An explicit *strategy* (a CLI flag) beats the configured one.
    """
    return {
        "strategy": ArrayStrategy(strategy) if strategy else config.array_strategy,
        "key_sentinel": config.key_sentinel,
    }
