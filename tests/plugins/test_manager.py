"""Tests for PluginManager — registration, local discovery, and hook relay."""

from __future__ import annotations

import sys
import uuid
from pathlib import Path
from typing import Any

from formzap.domain.schema import string
from formzap.plugins.manager import PluginManager, hookimpl

_UUID_PLUGIN_SRC = """\
import uuid

import pluggy

from formzap.domain.schema import string

hookimpl = pluggy.HookimplMarker("formzap")


class UUIDAsString:
    \"\"\"Describe uuid.UUID fields as plain text inputs.\"\"\"

    @hookimpl
    def formzap_describe_annotation(self, annotation):
        if annotation is uuid.UUID:
            return string()
        return None
"""

_SYNTAX_ERROR_SRC = """\
def broken(
    # missing closing paren and colon
"""

_NO_HOOKS_SRC = """\
class PlainClass:
    \"\"\"A class with no hookimpl-decorated methods.\"\"\"
    def hello(self) -> str:
        return "world"
"""


class _DummyPlugin:
    """Minimal plugin for registration tests."""

    @hookimpl
    def formzap_describe_annotation(self, annotation: Any) -> Any:
        return None


class _DecliningPlugin:
    @hookimpl
    def formzap_describe_annotation(self, annotation: Any) -> Any:
        return None


class _StringPlugin:
    @hookimpl
    def formzap_describe_annotation(self, annotation: Any) -> Any:
        return string()


class _TextAnswerPlugin:
    @hookimpl
    def formzap_describe_annotation(self, annotation: Any) -> Any:
        return "string"


class TestPluginManager:
    def test_hook_relay_accessible(self) -> None:
        pm = PluginManager()
        assert hasattr(pm.hook, "formzap_describe_annotation")

    def test_register_plugin(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin(), name="dummy")
        assert "dummy" in pm.list_plugin_names()

    def test_register_plugin_default_name(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DummyPlugin())
        assert "_DummyPlugin" in pm.list_plugin_names()

    def test_unregister_plugin(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="dummy")
        pm.unregister(plugin)
        assert "dummy" not in pm.list_plugin_names()

    def test_get_plugins_returns_registered(self) -> None:
        pm = PluginManager()
        plugin = _DummyPlugin()
        pm.register_plugin(plugin, name="test")
        assert plugin in pm.get_plugins()

    def test_is_loaded_false_before_discover(self) -> None:
        assert PluginManager().is_loaded is False

    def test_discover_without_local_dir(self) -> None:
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=None)
        assert pm.is_loaded is True
        assert isinstance(names, list)

    def test_first_result_wins(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DecliningPlugin())
        pm.register_plugin(_StringPlugin())
        result = pm.hook.formzap_describe_annotation(annotation=int, describe=lambda a: None)
        assert result == string()

    def test_no_answer_is_none(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DecliningPlugin())
        assert pm.hook.formzap_describe_annotation(annotation=int, describe=lambda a: None) is None

    def test_has_hook_impls(self) -> None:
        class _NoHook:
            def some_method(self) -> None:
                pass

        assert PluginManager._has_hook_impls(_DummyPlugin) is True
        assert PluginManager._has_hook_impls(_NoHook) is False

    def test_normalizes_registered_classes(self) -> None:
        pm = PluginManager()
        pm._pm.register(_StringPlugin, name="as-class")
        pm._normalize_plugin_instances()
        plugins = pm.get_plugins()
        assert len(plugins) == 1
        assert isinstance(plugins[0], _StringPlugin)
        assert pm.list_plugin_names() == ["as-class"]


class TestDescribeAnnotation:
    def test_first_node_wins(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_DecliningPlugin())
        pm.register_plugin(_StringPlugin())
        assert pm.describe_annotation(uuid.UUID, lambda a: string()) == string()

    def test_no_plugins_is_none(self) -> None:
        assert PluginManager().describe_annotation(uuid.UUID, lambda a: string()) is None

    def test_non_node_answer_is_ignored(self) -> None:
        pm = PluginManager()
        pm.register_plugin(_TextAnswerPlugin())
        assert pm.describe_annotation(uuid.UUID, lambda a: string()) is None


class TestLocalDiscovery:
    def test_discovers_local_plugin(self, tmp_path: Path) -> None:
        (tmp_path / "uuids.py").write_text(_UUID_PLUGIN_SRC, encoding="utf-8")

        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)

        assert "formzap_local_plugin_uuids.UUIDAsString" in pm.list_plugin_names()

    def test_local_plugin_hook_fires(self, tmp_path: Path) -> None:
        (tmp_path / "uuids.py").write_text(_UUID_PLUGIN_SRC, encoding="utf-8")

        pm = PluginManager()
        pm._discover_local(tmp_path)

        result = pm.hook.formzap_describe_annotation(annotation=uuid.UUID, describe=lambda a: None)
        assert result == string()
        assert "formzap_local_plugin_uuids" in sys.modules

    def test_skips_bad_plugin_gracefully(self, tmp_path: Path) -> None:
        (tmp_path / "broken.py").write_text(_SYNTAX_ERROR_SRC, encoding="utf-8")

        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path)

        assert all("broken" not in n for n in names)
        assert "formzap_local_plugin_broken" not in sys.modules

    def test_nonexistent_dir_is_noop(self, tmp_path: Path) -> None:
        pm = PluginManager()
        names = pm.discover_and_load(local_dir=tmp_path / "does_not_exist")
        assert pm.is_loaded is True
        assert isinstance(names, list)

    def test_skips_underscore_prefixed_files(self, tmp_path: Path) -> None:
        (tmp_path / "_helpers.py").write_text(_UUID_PLUGIN_SRC, encoding="utf-8")

        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)

        assert all("_helpers" not in n for n in pm.list_plugin_names())

    def test_skips_classes_without_hookimpls(self, tmp_path: Path) -> None:
        (tmp_path / "plain.py").write_text(_NO_HOOKS_SRC, encoding="utf-8")

        pm = PluginManager()
        pm.discover_and_load(local_dir=tmp_path)

        assert all("plain" not in n for n in pm.list_plugin_names())
