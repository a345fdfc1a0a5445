"""FormAction — a schema bound to its valid/invalid hooks.

Usage::

    action = form_action(Signup).valid(save_user).invalid(log_errors)
    outcome = action(FormSubmission.from_query_string(body))
    outcome = await action.run_async(submission)   # awaits async hooks

    str(action.fields.address.zip)                 # "address.zip"
"""

from __future__ import annotations

from typing import Any, Self

from formzap.domain.paths import DEFAULT_KEY_SENTINEL, FieldPaths
from formzap.domain.types import ArrayStrategy
from formzap.services.decoder import FormDecoder, Hook, as_form_schema, decode, decode_async
from formzap.services.outcome import Invalid, Valid


class FormAction:
    """Reusable decode pipeline for one schema.

    Hooks are registered fluently; registering again replaces the previous
    hook. The schema is described afresh on each call.
    """

    def __init__(
        self,
        schema: Any,
        *,
        strategy: ArrayStrategy | str = ArrayStrategy.AUTO,
        key_sentinel: str = DEFAULT_KEY_SENTINEL,
    ) -> None:
        self.schema = as_form_schema(schema)
        self.decoder = FormDecoder(strategy=strategy, key_sentinel=key_sentinel)
        self._on_valid: Hook | None = None
        self._on_invalid: Hook | None = None

    def valid(self, fn: Hook) -> Self:
        self._on_valid = fn
        return self

    def invalid(self, fn: Hook) -> Self:
        self._on_invalid = fn
        return self

    @property
    def fields(self) -> FieldPaths:
        """Path builder over this action's schema."""
        return FieldPaths(self.schema.describe())

    def __call__(self, data: Any) -> Valid | Invalid:
        return decode(
            self.schema,
            data,
            on_valid=self._on_valid,
            on_invalid=self._on_invalid,
            decoder=self.decoder,
        )

    async def run_async(self, data: Any) -> Valid | Invalid:
        return await decode_async(
            self.schema,
            data,
            on_valid=self._on_valid,
            on_invalid=self._on_invalid,
            decoder=self.decoder,
        )


def form_action(schema: Any, *, strategy: ArrayStrategy | str = ArrayStrategy.AUTO) -> FormAction:
    """Factory for :class:`FormAction`."""
    return FormAction(schema, strategy=strategy)
