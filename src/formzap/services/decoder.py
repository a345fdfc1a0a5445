"""FormDecoder — rebuild a nested value from a flat form submission.

The walk follows the schema, not the submission: every declared field is
visited in declaration order with its dotted path, and the submission is
only queried for the keys the schema implies. Keys the schema does not name
are ignored.

Arrays of objects are located one of two ways:

- key-based: ``items.key`` lists element ids in order; element ``k`` lives
  under ``items[k].<field>``.
- index-based: elements live under ``items.0.<field>``, ``items.1.<field>``,
  ... up to the first index with no fields at all.

:class:`~formzap.domain.types.ArrayStrategy` selects between them; the
default ``AUTO`` uses keys whenever the sentinel is present.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from typing import Any

import structlog

from formzap.domain.coercion import ABSENT, coerce_passthrough, coerce_primitive
from formzap.domain.paths import (
    DEFAULT_KEY_SENTINEL,
    child_path,
    index_path,
    key_sentinel_path,
    keyed_path,
)
from formzap.domain.schema import SchemaNode, is_schema_node
from formzap.domain.shape import (
    array_element,
    describe,
    is_array,
    is_object,
    object_fields,
    primitive_kind,
)
from formzap.domain.submission import FormSubmission
from formzap.domain.types import ArrayStrategy
from formzap.errors import SchemaShapeError, UnsupportedValueError
from formzap.services.outcome import Invalid, Valid, project_errors
from formzap.services.telemetry import trace_span, traced
from formzap.validation.base import FormSchema, NodeSchema, ValidationReport, ValidationSuccess
from formzap.validation.pydantic_schema import PydanticFormSchema, is_pydantic_describable

logger = structlog.get_logger(__name__)

Hook = Callable[[Any], Any]


class FormDecoder:
    """Schema-driven walk over a :class:`FormSubmission`.

    Instances hold only configuration, so one decoder can serve concurrent
    decodes.
    """

    def __init__(
        self,
        *,
        strategy: ArrayStrategy | str = ArrayStrategy.AUTO,
        key_sentinel: str = DEFAULT_KEY_SENTINEL,
    ) -> None:
        self.strategy = ArrayStrategy(strategy)
        self.key_sentinel = key_sentinel

    def build(self, node: SchemaNode, submission: FormSubmission) -> dict[str, Any]:
        """Return the candidate value tree for *submission*.

        Raises:
            SchemaShapeError: *node* is not an object (after unwrapping).
            UnsupportedValueError: a leaf received a non-text value.
        """
        if not is_object(node):
            msg = f"form schema root must be an object, got {describe(node)}"
            raise SchemaShapeError(msg)
        logger.debug("decode.start", keys=len(submission), strategy=str(self.strategy))
        try:
            return self._object(node, submission, "")
        except UnsupportedValueError as exc:
            logger.warning("decode.unsupported_value", path=exc.path, value_type=exc.value_type)
            raise

    # ------------------------------------------------------------------

    def _value(self, node: SchemaNode, submission: FormSubmission, path: str) -> Any:
        if is_object(node):
            return self._object(node, submission, path)
        element = array_element(node)
        if element is not None:
            return self._array(element, submission, path)
        kind = primitive_kind(node)
        if kind is not None:
            return coerce_primitive(submission.get(path), kind, path=path)
        return coerce_passthrough(submission.get(path), path=path)

    def _object(self, node: SchemaNode, submission: FormSubmission, prefix: str) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for name, child in object_fields(node).items():
            value = self._value(child, submission, child_path(prefix, name))
            if value is not ABSENT:
                out[name] = value
        return out

    def _array(self, element: SchemaNode, submission: FormSubmission, path: str) -> Any:
        kind = primitive_kind(element)
        if kind is not None:
            values = [coerce_primitive(raw, kind, path=path) for raw in submission.get_all(path)]
            return [None if v is ABSENT else v for v in values]
        if is_object(element):
            if self._uses_keys(submission, path):
                return self._keyed_elements(element, submission, path)
            return self._indexed_elements(element, submission, path)
        if is_array(element):
            # Nested arrays have no flat encoding.
            return ABSENT
        values = [coerce_passthrough(raw, path=path) for raw in submission.get_all(path)]
        return [None if v is ABSENT else v for v in values]

    def _uses_keys(self, submission: FormSubmission, path: str) -> bool:
        if self.strategy is ArrayStrategy.KEY:
            return True
        if self.strategy is ArrayStrategy.INDEX:
            return False
        return submission.has(key_sentinel_path(path, self.key_sentinel))

    def _keyed_elements(
        self, element: SchemaNode, submission: FormSubmission, path: str
    ) -> list[dict[str, Any]]:
        sentinel = key_sentinel_path(path, self.key_sentinel)
        out: list[dict[str, Any]] = []
        for key in submission.get_all(sentinel):
            if not isinstance(key, str):
                raise UnsupportedValueError(sentinel, type(key).__name__)
            out.append(self._object(element, submission, keyed_path(path, key)))
        return out

    def _indexed_elements(
        self, element: SchemaNode, submission: FormSubmission, path: str
    ) -> list[dict[str, Any]]:
        fields = object_fields(element)
        keys = submission.keys()
        out: list[dict[str, Any]] = []
        index = 0
        while True:
            prefix = index_path(path, index)
            present = any(
                _field_present(keys, submission, child_path(prefix, name), child)
                for name, child in fields.items()
            )
            if not present:
                return out
            out.append(self._object(element, submission, prefix))
            index += 1


def _field_present(
    keys: list[str], submission: FormSubmission, path: str, node: SchemaNode
) -> bool:
    """Whether the submission carries anything for the field at *path*.

    Scalar fields must appear as an exact key. Structured fields also count
    when any key lives beneath them.
    """
    if submission.has(path):
        return True
    if not (is_object(node) or is_array(node)):
        return False
    return any(key.startswith((f"{path}.", f"{path}[")) for key in keys)


# ---------------------------------------------------------------------------
# Decode entry points
# ---------------------------------------------------------------------------


def as_form_schema(schema: Any) -> FormSchema:
    """Accept a FormSchema, a pydantic model / dataclass, or a bare SchemaNode."""
    if is_schema_node(schema):
        return NodeSchema(schema)
    if is_pydantic_describable(schema):
        return PydanticFormSchema(schema)
    if isinstance(schema, FormSchema):
        return schema
    msg = f"cannot use {schema!r} as a form schema"
    raise SchemaShapeError(msg)


def _decode_and_validate(
    schema: Any,
    data: Any,
    decoder: FormDecoder | None,
    strategy: ArrayStrategy | str | None,
) -> ValidationReport:
    form_schema = as_form_schema(schema)
    if decoder is None:
        decoder = FormDecoder(strategy=strategy or ArrayStrategy.AUTO)

    candidate = data
    if isinstance(data, FormSubmission):
        with trace_span("build") as span:
            candidate = decoder.build(form_schema.describe(), data)
            if span is not None:
                span.annotate("keys", len(data))

    with trace_span("validate") as span:
        report = form_schema.validate(candidate)
        if span is not None:
            span.annotate("ok", isinstance(report, ValidationSuccess))
    return report


@traced
def decode(
    schema: Any,
    data: Any,
    *,
    on_valid: Hook | None = None,
    on_invalid: Hook | None = None,
    strategy: ArrayStrategy | str | None = None,
    decoder: FormDecoder | None = None,
) -> Valid | Invalid:
    """Decode and validate *data* against *schema*.

    Args:
        schema: A :class:`FormSchema`, a pydantic model or dataclass, or a
            hand-built schema node.
        data: A :class:`FormSubmission` to decode, or an already structured
            value (e.g. a JSON body) to validate as-is.
        on_valid: Optional transform of the validated value.
        on_invalid: Optional transform of the ``{path: message}`` mapping;
            its return value (even None) becomes ``Invalid.errors``.
        strategy: Array-of-objects strategy when no *decoder* is given.
        decoder: A preconfigured :class:`FormDecoder`.

    Raises:
        UnsupportedValueError: a leaf received a non-text value.
        SchemaShapeError: *schema* cannot drive a form decode.
    """
    report = _decode_and_validate(schema, data, decoder, strategy)
    if isinstance(report, ValidationSuccess):
        value = report.value
        return Valid(data=on_valid(value) if on_valid else value)
    errors = project_errors(report.issues)
    return Invalid(errors=on_invalid(errors) if on_invalid else errors)


@traced
async def decode_async(
    schema: Any,
    data: Any,
    *,
    on_valid: Hook | None = None,
    on_invalid: Hook | None = None,
    strategy: ArrayStrategy | str | None = None,
    decoder: FormDecoder | None = None,
) -> Valid | Invalid:
    """Like :func:`decode`, awaiting hooks that return awaitables.

    Decoding and validation complete synchronously before any hook runs.
    """
    report = _decode_and_validate(schema, data, decoder, strategy)
    if isinstance(report, ValidationSuccess):
        value = report.value
        if on_valid is not None:
            value = await _resolve(on_valid(value))
        return Valid(data=value)
    errors: Any = project_errors(report.issues)
    if on_invalid is not None:
        errors = await _resolve(on_invalid(errors))
    return Invalid(errors=errors)


async def _resolve(result: Any) -> Any:
    if inspect.isawaitable(result):
        return await result
    return result
