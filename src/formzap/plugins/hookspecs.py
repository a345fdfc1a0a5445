"""Pluggy hook specifications for formzap."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from formzap.domain.schema import SchemaNode

hookspec = pluggy.HookspecMarker("formzap")


class FormzapHookSpec:
    """Hook specifications for the formzap plugin system."""

    @hookspec(firstresult=True)
    def formzap_describe_annotation(
        self,
        annotation: Any,
        describe: Callable[[Any], SchemaNode],
    ) -> SchemaNode | None:
        """Describe a type annotation the built-in mapping does not know.

        Return None to defer to other plugins (and finally to an opaque
        node). *describe* recursively describes nested annotations.
        """
