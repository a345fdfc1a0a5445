"""formzap — decode flat form submissions into validated, typed values.

Usage::

    from formzap import FormSubmission, decode

    outcome = decode(Signup, FormSubmission.from_query_string(body))
    if outcome.ok:
        save(outcome.data)
    else:
        show(outcome.errors)          # {"address.zip": "Field required"}
"""

from formzap.domain.coercion import ABSENT
from formzap.domain.paths import FieldPaths
from formzap.domain.schema import (
    ArrayNode,
    ObjectNode,
    OpaqueNode,
    PrimitiveNode,
    SchemaNode,
    WrappedNode,
)
from formzap.domain.submission import FormSubmission
from formzap.domain.types import ArrayStrategy, PrimitiveKind
from formzap.errors import FormDecodeError, FormzapError, SchemaShapeError, UnsupportedValueError
from formzap.services.action import FormAction, form_action
from formzap.services.decoder import FormDecoder, decode, decode_async
from formzap.services.encoder import encode_form
from formzap.services.outcome import DecodeOutcome, Invalid, Valid
from formzap.validation import FormSchema, NodeSchema, PydanticFormSchema, pydantic_schema

__version__ = "0.3.0"

__all__ = [
    "ABSENT",
    "ArrayNode",
    "ArrayStrategy",
    "DecodeOutcome",
    "FieldPaths",
    "FormAction",
    "FormDecodeError",
    "FormDecoder",
    "FormSchema",
    "FormSubmission",
    "FormzapError",
    "Invalid",
    "NodeSchema",
    "ObjectNode",
    "OpaqueNode",
    "PrimitiveKind",
    "PrimitiveNode",
    "PydanticFormSchema",
    "SchemaNode",
    "SchemaShapeError",
    "UnsupportedValueError",
    "Valid",
    "WrappedNode",
    "__version__",
    "decode",
    "decode_async",
    "encode_form",
    "form_action",
    "pydantic_schema",
]
