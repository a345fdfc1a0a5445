"""Tests for outcome, field and error formatting."""

from __future__ import annotations

import json
from datetime import date

from formzap.output.console import create_console, get_output
from formzap.output.formatters import (
    OutputSettings,
    format_error,
    format_fields,
    format_outcome,
    to_json,
)
from formzap.services.outcome import Invalid, Valid

PLAIN = OutputSettings(color=False)
JSON = OutputSettings(json_output=True)
QUIET = OutputSettings(quiet=True)

ROWS = [("name", "string"), ("items.<n>.qty", "bigint")]


class TestToJson:
    def test_handles_dates_and_sets(self) -> None:
        parsed = json.loads(to_json({"d": date(2024, 5, 1), "s": {1}}))
        assert parsed == {"d": "2024-05-01", "s": [1]}

    def test_unknown_objects_fall_back_to_str(self) -> None:
        class Thing:
            def __str__(self) -> str:
                return "thing"

        assert json.loads(to_json({"t": Thing()})) == {"t": "thing"}


class TestFormatOutcomeJson:
    def test_valid(self) -> None:
        parsed = json.loads(format_outcome(Valid(data={"n": 1}), settings=JSON))
        assert parsed == {"type": "valid", "data": {"n": 1}}

    def test_invalid(self) -> None:
        parsed = json.loads(format_outcome(Invalid(errors={"a.b": "bad"}), settings=JSON))
        assert parsed == {"type": "invalid", "errors": {"a.b": "bad"}}

    def test_verbose_keeps_meta(self) -> None:
        settings = OutputSettings(json_output=True, verbose=True)
        parsed = json.loads(format_outcome(Valid(data=None), settings=settings))
        assert parsed == {"type": "valid", "data": None, "meta": None}


class TestFormatOutcomeQuiet:
    def test_valid(self) -> None:
        assert format_outcome(Valid(data={}), settings=QUIET) == "valid"

    def test_invalid_lists_paths(self) -> None:
        outcome = Invalid(errors={"name": "Field required", "address.zip": "too short"})
        assert format_outcome(outcome, settings=QUIET) == "name\naddress.zip"

    def test_reshaped_errors(self) -> None:
        assert format_outcome(Invalid(errors=["x"]), settings=QUIET) == "invalid"


class TestFormatOutcomeHuman:
    def test_valid(self) -> None:
        text = format_outcome(Valid(data={"name": "Ada"}), settings=PLAIN)
        assert text.startswith("VALID")
        assert "'name': 'Ada'" in text

    def test_invalid_table(self) -> None:
        outcome = Invalid(errors={"address.zip": "Field required", "": "form closed"})
        text = format_outcome(outcome, settings=PLAIN)
        assert text.startswith("INVALID")
        assert "address.zip" in text
        assert "Field required" in text
        assert "(root)" in text

    def test_invalid_non_mapping(self) -> None:
        text = format_outcome(Invalid(errors=["a", "b"]), settings=PLAIN)
        assert "INVALID" in text
        assert "'a'" in text

    def test_verbose_shows_meta(self) -> None:
        outcome = Valid(data=1, meta={"telemetry": {"name": "decode"}})
        text = format_outcome(outcome, settings=OutputSettings(color=False, verbose=True))
        assert "meta" in text
        assert "decode" in text

    def test_default_settings(self) -> None:
        assert "VALID" in format_outcome(Valid(data=1))


class TestFormatFields:
    def test_json(self) -> None:
        parsed = json.loads(format_fields(ROWS, settings=JSON))
        assert parsed == [
            {"path": "name", "kind": "string"},
            {"path": "items.<n>.qty", "kind": "bigint"},
        ]

    def test_quiet(self) -> None:
        assert format_fields(ROWS, settings=QUIET) == "name\nitems.<n>.qty"

    def test_table(self) -> None:
        text = format_fields(ROWS, settings=PLAIN)
        assert "Field" in text
        assert "items.<n>.qty" in text
        assert "bigint" in text


class TestFormatError:
    def test_human(self) -> None:
        assert format_error("boom") == "ERROR: boom"

    def test_json(self) -> None:
        assert json.loads(format_error("boom", settings=JSON)) == {
            "type": "error",
            "message": "boom",
        }


class TestConsole:
    def test_renders_to_buffer(self) -> None:
        console = create_console(no_color=True, width=40)
        console.print("hello")
        assert get_output(console) == "hello\n"

    def test_theme_styles_available(self) -> None:
        console = create_console(no_color=True)
        console.print("[fz.valid]ok[/fz.valid] [fz.path]a.b[/fz.path]")
        assert get_output(console) == "ok a.b\n"
