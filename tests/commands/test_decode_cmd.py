"""Tests for the decode command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from formzap.cli import cli

VALID_BODY = (
    "name=Ada&age=36&newsletter=true&tags=a&tags=b"
    "&address.street=Main+St&address.zip=12345"
)
MISSING_ZIP = "name=Ada&age=36&address.street=Main+St"
ORDER_BODY = (
    "placed=2024-05-01&items.key=a&items[a].sku=K&items[a].qty=1"
    "&items.0.sku=I&items.0.qty=2"
)
BOUNDARY = "fzboundary"


def _file_upload_body() -> bytes:
    return (
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="age"\r\n\r\n36\r\n'
        f"--{BOUNDARY}\r\n"
        'Content-Disposition: form-data; name="name"; filename="name.txt"\r\n'
        "Content-Type: text/plain\r\n\r\nAda\r\n"
        f"--{BOUNDARY}--\r\n"
    ).encode()


@pytest.mark.usefixtures("_isolated_project")
class TestDecodeCommand:
    def test_valid_json(self, cli_runner: CliRunner, schema_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "decode", f"{schema_file}:Signup", "-"], input=VALID_BODY
        )
        assert result.exit_code == 0, result.output
        parsed = json.loads(result.output)
        assert parsed["type"] == "valid"
        assert parsed["data"] == {
            "name": "Ada",
            "age": 36,
            "newsletter": True,
            "tags": ["a", "b"],
            "address": {"street": "Main St", "zip": "12345"},
        }

    def test_invalid_json_exit_code(self, cli_runner: CliRunner, schema_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["--json", "decode", f"{schema_file}:Signup", "-"], input=MISSING_ZIP
        )
        assert result.exit_code == 2
        parsed = json.loads(result.output)
        assert parsed == {"type": "invalid", "errors": {"address.zip": "Field required"}}

    def test_body_from_file(self, cli_runner: CliRunner, schema_file: Path, tmp_path: Path) -> None:
        body = tmp_path / "body.txt"
        body.write_text(VALID_BODY)
        result = cli_runner.invoke(cli, ["-q", "decode", f"{schema_file}:Signup", str(body)])
        assert result.exit_code == 0
        assert result.output.strip() == "valid"

    def test_quiet_invalid_lists_paths(self, cli_runner: CliRunner, schema_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["-q", "decode", f"{schema_file}:Signup"], input="age=x&address.zip=1"
        )
        assert result.exit_code == 2
        assert result.output.split() == ["name", "age", "address.street", "address.zip"]

    def test_human_output(self, cli_runner: CliRunner, schema_file: Path) -> None:
        result = cli_runner.invoke(cli, ["decode", f"{schema_file}:Signup"], input=MISSING_ZIP)
        assert result.exit_code == 2
        assert "INVALID" in result.output
        assert "address.zip" in result.output

    def test_file_upload_is_fatal(self, cli_runner: CliRunner, schema_file: Path) -> None:
        result = cli_runner.invoke(
            cli,
            [
                "decode",
                f"{schema_file}:Signup",
                "-",
                "--content-type",
                f"multipart/form-data; boundary={BOUNDARY}",
            ],
            input=_file_upload_body(),
        )
        assert result.exit_code == 1
        assert "non strings are not supported" in result.output

    def test_strategy_option(self, cli_runner: CliRunner, schema_file: Path) -> None:
        target = f"{schema_file}:Order"
        keyed = cli_runner.invoke(cli, ["--json", "decode", target], input=ORDER_BODY)
        indexed = cli_runner.invoke(
            cli, ["--json", "decode", target, "--strategy", "index"], input=ORDER_BODY
        )
        assert keyed.exit_code == 0, keyed.output
        assert indexed.exit_code == 0, indexed.output
        assert json.loads(keyed.output)["data"]["items"] == [{"sku": "K", "qty": 1}]
        assert json.loads(indexed.output)["data"]["items"] == [{"sku": "I", "qty": 2}]

    def test_strategy_from_config(
        self, cli_runner: CliRunner, schema_file: Path, tmp_path: Path
    ) -> None:
        (tmp_path / "formzap.toml").write_text('[decoder]\narray_strategy = "index"\n')
        result = cli_runner.invoke(
            cli, ["--json", "decode", f"{schema_file}:Order"], input=ORDER_BODY
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"]["items"] == [{"sku": "I", "qty": 2}]

    def test_verbose_includes_telemetry(self, cli_runner: CliRunner, schema_file: Path) -> None:
        result = cli_runner.invoke(
            cli, ["-v", "--json", "decode", f"{schema_file}:Signup"], input=VALID_BODY
        )
        assert result.exit_code == 0
        assert '"telemetry"' in result.output

    def test_log_events_carry_decode_context(
        self, cli_runner: CliRunner, schema_file: Path
    ) -> None:
        target = f"{schema_file}:Order"
        result = cli_runner.invoke(
            cli, ["-v", "--log-json", "decode", target, "--strategy", "key"], input=ORDER_BODY
        )
        assert result.exit_code == 0
        start = next(
            json.loads(line) for line in result.output.splitlines() if '"decode.start"' in line
        )
        assert start["schema"] == target
        assert start["content_type"] == "application/x-www-form-urlencoded"
        assert start["strategy"] == "key"

    def test_schema_not_a_model(self, cli_runner: CliRunner, schema_file: Path) -> None:
        result = cli_runner.invoke(cli, ["decode", f"{schema_file}:NotAModel"], input="")
        assert result.exit_code == 2
        assert "not a pydantic model" in result.output

    def test_schema_attribute_missing(self, cli_runner: CliRunner, schema_file: Path) -> None:
        result = cli_runner.invoke(cli, ["decode", f"{schema_file}:Nope"], input="")
        assert result.exit_code == 2
        assert "has no attribute" in result.output

    def test_schema_module_missing(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["decode", "no_such_module_here:Form"], input="")
        assert result.exit_code == 2
        assert "cannot import" in result.output

    def test_schema_without_attr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["decode", "forms"], input="")
        assert result.exit_code == 2
        assert "module:attr" in result.output

    def test_dotted_attribute(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        source = tmp_path / "nested.py"
        source.write_text(
            "from pydantic import BaseModel\n\n\n"
            "class Forms:\n"
            "    class Login(BaseModel):\n"
            "        user: str\n"
        )
        result = cli_runner.invoke(
            cli, ["--json", "decode", f"{source}:Forms.Login"], input="user=ada"
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"] == {"user": "ada"}

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["decode", "--examples"])
        assert result.exit_code == 0
        assert "formzap decode" in result.output
