"""Extension layer — plugin system via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from formzap.plugins.manager import PluginManager, hookimpl

__all__ = ["PluginManager", "hookimpl"]
