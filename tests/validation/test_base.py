"""Tests for the validator contract and NodeSchema."""

from typing import Any

from formzap.domain.schema import number, object_of
from formzap.validation.base import (
    FormSchema,
    Issue,
    NodeSchema,
    ValidationFailure,
    ValidationSuccess,
)

NODE = object_of(age=number())


class TestIssue:
    def test_dotted(self) -> None:
        assert Issue(("items", 3, "qty"), "bad").dotted == "items.3.qty"

    def test_root_dotted(self) -> None:
        assert Issue((), "bad").dotted == ""


class TestNodeSchema:
    def test_describe(self) -> None:
        assert NodeSchema(NODE).describe() is NODE

    def test_no_validator_accepts_anything(self) -> None:
        report = NodeSchema(NODE).validate({"anything": 1})
        assert report == ValidationSuccess({"anything": 1})

    def test_empty_issue_list_is_success(self) -> None:
        report = NodeSchema(NODE, lambda value: []).validate({"age": 3})
        assert report == ValidationSuccess({"age": 3})

    def test_issue_list_is_failure(self) -> None:
        def adults_only(value: dict[str, Any]) -> list[Issue]:
            if value.get("age", 0) >= 18:
                return []
            return [Issue(("age",), "must be an adult")]

        report = NodeSchema(NODE, adults_only).validate({"age": 12})
        assert report == ValidationFailure([Issue(("age",), "must be an adult")])

    def test_report_returned_as_is(self) -> None:
        report = NodeSchema(NODE, lambda value: ValidationSuccess(value["age"] * 2)).validate(
            {"age": 4}
        )
        assert report == ValidationSuccess(8)

    def test_satisfies_protocol(self) -> None:
        assert isinstance(NodeSchema(NODE), FormSchema)
