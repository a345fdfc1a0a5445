"""Plugin loading and the annotation-description hook.

Plugins come from two places:

- installed distributions exposing the ``formzap.plugins`` entry-point group
- ``*.py`` files in the ``[plugins] local_dir`` of the project

A plugin is any object with ``@hookimpl`` methods. A plugin that fails to
import, instantiate or answer sensibly is logged and skipped; decoding never
fails because of one.
"""

from __future__ import annotations

import importlib.util
import inspect
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from types import ModuleType
from typing import Any

import pluggy
import structlog

from formzap.domain.schema import SchemaNode, is_schema_node
from formzap.plugins.hookspecs import FormzapHookSpec

PROJECT_NAME = "formzap"
ENTRY_POINT_GROUP = "formzap.plugins"
LOCAL_MODULE_PREFIX = "formzap_local_plugin_"

hookimpl = pluggy.HookimplMarker(PROJECT_NAME)

logger = structlog.get_logger(__name__)


class PluginManager:
    """Registry of formzap plugins over a :class:`pluggy.PluginManager`."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(FormzapHookSpec)
        self._loaded = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Load entry-point plugins, then the files in *local_dir*.

        Returns the names of every registered plugin.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        self._loaded = True
        names = self.list_plugin_names()
        logger.debug("plugins.loaded", count=len(names), local_dir=str(local_dir or ""))
        return names

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("plugin.registered", plugin=resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has run."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def describe_annotation(
        self, annotation: Any, describe: Callable[[Any], SchemaNode]
    ) -> SchemaNode | None:
        """Ask plugins for a schema node describing *annotation*.

        The first non-None answer wins. An answer that is not a schema node
        is logged and treated as no answer.
        """
        node = self._pm.hook.formzap_describe_annotation(annotation=annotation, describe=describe)
        if node is None or is_schema_node(node):
            return node
        logger.warning(
            "plugin.bad_schema_node",
            annotation=repr(annotation),
            returned=type(node).__name__,
        )
        return None

    # ------------------------------------------------------------------
    # Local directory
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Register every hook-carrying class defined in ``local_dir/*.py``.

        Files starting with ``_`` are helpers and are not loaded.
        """
        if not local_dir.is_dir():
            return
        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module = _load_module(py_file)
            if module is None:
                continue
            for cls in _hook_classes(module):
                name = f"{module.__name__}.{cls.__name__}"
                try:
                    self.register_plugin(cls(), name=name)
                except Exception:
                    logger.warning("plugin.instantiate_failed", plugin=name, exc_info=True)

    def _normalize_plugin_instances(self) -> None:
        """Swap plugin classes registered by entry points for instances.

        Hooks called on a class object would run with ``self`` unbound.
        """
        for plugin in self.get_plugins():
            if not (inspect.isclass(plugin) and self._has_hook_impls(plugin)):
                continue
            name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning("plugin.instantiate_failed", plugin=name, exc_info=True)
                continue
            self._pm.register(instance, name=name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Whether any public attribute of *cls* carries the ``formzap_impl`` marker."""
        return any(
            callable(attr) and getattr(attr, f"{PROJECT_NAME}_impl", None)
            for attr in (getattr(cls, name, None) for name in dir(cls) if not name.startswith("_"))
        )


def _load_module(py_file: Path) -> ModuleType | None:
    module_name = f"{LOCAL_MODULE_PREFIX}{py_file.stem}"
    spec = importlib.util.spec_from_file_location(module_name, py_file)
    if spec is None or spec.loader is None:
        logger.warning("plugin.load_failed", path=str(py_file), reason="no module spec")
        return None
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        logger.warning("plugin.load_failed", path=str(py_file), exc_info=True)
        return None
    return module


def _hook_classes(module: ModuleType) -> Iterator[type]:
    """Classes defined in *module* (not imported into it) that carry hooks."""
    for _name, cls in inspect.getmembers(module, inspect.isclass):
        if cls.__module__ == module.__name__ and PluginManager._has_hook_impls(cls):
            yield cls
