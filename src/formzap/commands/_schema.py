"""Resolve a schema target string to a model class."""

from __future__ import annotations

import importlib
import importlib.util
import sys
from pathlib import Path
from typing import Any

import click

from formzap.validation.pydantic_schema import is_pydantic_describable


def import_schema(target: str) -> type[Any]:
    """Import ``module:attr`` or ``path/to/file.py:attr``.

    *attr* may be dotted (``forms:Signup.Address``).

    Raises:
        click.BadParameter: the target cannot be imported or is not a
            pydantic model / dataclass.
    """
    module_part, sep, attr_path = target.rpartition(":")
    if not sep or not module_part or not attr_path:
        msg = f"expected 'module:attr' or 'file.py:attr', got {target!r}"
        raise click.BadParameter(msg, param_hint="SCHEMA")

    try:
        if module_part.endswith(".py"):
            module = _load_file(Path(module_part))
        else:
            module = importlib.import_module(module_part)
    except Exception as exc:
        msg = f"cannot import {module_part!r}: {exc}"
        raise click.BadParameter(msg, param_hint="SCHEMA") from exc

    obj: Any = module
    for name in attr_path.split("."):
        try:
            obj = getattr(obj, name)
        except AttributeError as exc:
            msg = f"{module_part!r} has no attribute {attr_path!r}"
            raise click.BadParameter(msg, param_hint="SCHEMA") from exc

    if not is_pydantic_describable(obj):
        msg = f"{target!r} is not a pydantic model or dataclass"
        raise click.BadParameter(msg, param_hint="SCHEMA")
    return obj


def _load_file(path: Path) -> Any:
    if not path.is_file():
        msg = f"no such file: {path}"
        raise ImportError(msg)
    module_name = f"formzap_schema_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"could not create module spec for {path}"
        raise ImportError(msg)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module
