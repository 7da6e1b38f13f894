"""Tests for the command-line interface."""

import json
import pytest
from typer.testing import CliRunner
from schemacascade.cli import app as cli_module
from schemacascade.utils.schema_io import save_schema_to_json

runner = CliRunner()


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli_module, "setup_logging", lambda: None)


def test_reverse_verb():
    result = runner.invoke(cli_module.app, ["reverse-verb", "manages"])
    assert result.exit_code == 0
    assert "managedBy" in result.output


def test_generate_writes_records(tmp_path, team_schema_optional_scalars):
    schema_path = tmp_path / "schema.json"
    out_path = tmp_path / "out" / "records.json"
    save_schema_to_json(team_schema_optional_scalars, schema_path)

    result = runner.invoke(
        cli_module.app,
        ["generate", str(schema_path), "Team", "--no-ai", "--out", str(out_path), "--data", '{"name": "Core"}'],
    )

    assert result.exit_code == 0, result.output
    dump = json.loads(out_path.read_text(encoding="utf-8"))
    assert dump["root"]["$type"] == "Team"
    assert dump["root"]["name"] == "Core"
    assert len(dump["records"]["Member"]) == 1
    assert dump["relations"][0]["field_name"] == "members"


def test_generate_unknown_type(tmp_path, team_schema):
    schema_path = tmp_path / "schema.json"
    save_schema_to_json(team_schema, schema_path)

    result = runner.invoke(cli_module.app, ["generate", str(schema_path), "Ghost", "--no-ai"])
    assert result.exit_code == 1
    assert "Unknown type: Ghost" in result.output


def test_generate_rejects_bad_data(tmp_path, team_schema):
    schema_path = tmp_path / "schema.json"
    save_schema_to_json(team_schema, schema_path)

    result = runner.invoke(cli_module.app, ["generate", str(schema_path), "Team", "--data", "[1]"])
    assert result.exit_code == 1
