"""Shared pytest fixtures and test helpers for formzap tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from formzap.domain.schema import ObjectNode, array_of, boolean, number, object_of, string
from formzap.services.telemetry import disable_telemetry

SCHEMA_SOURCE = """\
from datetime import date

from pydantic import BaseModel, Field


class Address(BaseModel):
    street: str
    zip: str = Field(min_length=5)


class Signup(BaseModel):
    name: str
    age: int
    newsletter: bool
    tags: list[str] = []
    address: Address


class Item(BaseModel):
    sku: str
    qty: int


class Order(BaseModel):
    placed: date
    items: list[Item] = []


class NotAModel:
    pass
"""


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo what AppContext does to logging and telemetry on each CLI invoke."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    disable_telemetry()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def schema_file(tmp_path: Path) -> Path:
    """A ``forms.py`` module holding the CLI test models."""
    path = tmp_path / "forms.py"
    path.write_text(SCHEMA_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def _isolated_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp directory so no stray formzap.toml is found.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command test
    classes.
    """
    monkeypatch.delenv("FORMZAP_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def order_node() -> ObjectNode:
    """Hand-built schema: a customer, tags and an array of line items."""
    return object_of(
        customer=object_of(name=string(), vip=boolean()),
        tags=array_of(string()),
        items=array_of(object_of(sku=string(), price=number())),
    )
