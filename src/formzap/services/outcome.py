"""Valid and Invalid — the two terminal outcomes of a decode.

INVARIANT: Every decode returns exactly one of these; validation failures are
never raised. The CLI and any caller binding results into a UI consume this
type.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

from formzap.validation.base import Issue


class Valid(BaseModel):
    """The submission decoded and validated.

    Attributes:
        data: The validated value, or whatever the on-valid hook returned.
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    type: Literal["valid"] = "valid"
    data: Any = None
    meta: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return True


class Invalid(BaseModel):
    """The schema rejected the decoded submission.

    Attributes:
        errors: Dotted field path -> message, or whatever the on-invalid
            hook returned.
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    type: Literal["invalid"] = "invalid"
    errors: Any = Field(default_factory=dict)
    meta: dict[str, Any] | None = None

    @property
    def ok(self) -> bool:
        return False

    def error_for(self, path: str) -> str | None:
        """Message for a dotted field path, if the errors are a mapping."""
        if isinstance(self.errors, dict):
            return self.errors.get(str(path))
        return None


DecodeOutcome = Annotated[Valid | Invalid, Field(discriminator="type")]


def project_errors(issues: Iterable[Issue]) -> dict[str, str]:
    """Flatten validator issues into ``{"a.b": message}``.

    A later issue for the same path replaces the earlier one.
    """
    errors: dict[str, str] = {}
    for issue in issues:
        errors[issue.dotted] = issue.message
    return errors
