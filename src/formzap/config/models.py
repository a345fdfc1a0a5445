"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, formzap.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from formzap.domain.paths import DEFAULT_KEY_SENTINEL
from formzap.domain.types import ArrayStrategy

# --- formzap.toml sections ---


class DecoderConfig(BaseModel):
    """[decoder] section."""

    model_config = {"frozen": True}

    array_strategy: ArrayStrategy = ArrayStrategy.AUTO
    key_sentinel: str = Field(default=DEFAULT_KEY_SENTINEL, min_length=1)


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    color: bool = True
    width: int = 120


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str | None = None

