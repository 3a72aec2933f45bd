import json

import pytest
import yaml
from click.testing import CliRunner

from zodforge.__main__ import cli
from zodforge.config import CONFIG_ENV_VAR


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def chdir_to_tmp(monkeypatch, tmp_path):
    """Keep a stray zodforge.yml or config override out of the tests."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def petstore_file(tmp_path, petstore):
    path = tmp_path / "openapi.yaml"
    path.write_text(yaml.safe_dump(petstore, sort_keys=False))
    return path


def test_generate_prints_declarations(runner, petstore_file):
    result = runner.invoke(cli, ["generate", str(petstore_file)])

    assert result.exit_code == 0
    assert "export const Owner = z.object({ name: z.string() }).passthrough();" in result.stdout
    assert result.stdout.index("export type Owner") < result.stdout.index("export type Pet ")


def test_generate_json_output(runner, petstore_file):
    result = runner.invoke(cli, ["generate", str(petstore_file), "--json-output"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["status"] == "ok"
    assert payload["result"]["order"] == ["Owner", "NewPet", "Pet", "Error"]
    assert [e["alias"] for e in payload["result"]["endpoints"]] == [
        "listPets",
        "createPet",
        "getPetsPetId",
    ]


def test_generate_all_schemas(runner, petstore_file):
    result = runner.invoke(cli, ["generate", str(petstore_file), "--all-schemas"])

    assert result.exit_code == 0
    assert "export const Node: z.ZodType<Node> = z.lazy(() => " in result.stdout
    assert "export const Unused = z.string();" in result.stdout


def test_generate_strict_flag(runner, petstore_file):
    result = runner.invoke(cli, ["generate", str(petstore_file), "--strict"])

    assert result.exit_code == 0
    assert "export const Owner = z.object({ name: z.string() }).strict();" in result.stdout


def test_generate_reads_config_file(runner, petstore_file, tmp_path):
    config = tmp_path / "options.yml"
    config.write_text("all_readonly: true\n")

    result = runner.invoke(cli, ["generate", str(petstore_file), "--config", str(config)])

    assert result.exit_code == 0
    assert "export type Owner = Readonly<{ name: string }>;" in result.stdout


def test_generate_invalid_config(runner, petstore_file, tmp_path):
    config = tmp_path / "options.yml"
    config.write_text("unknown_option: 1\n")

    result = runner.invoke(cli, ["generate", str(petstore_file), "--config", str(config)])

    assert result.exit_code != 0
    assert "Invalid config file" in result.output


def test_generate_missing_reference(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(
        json.dumps(
            {
                "components": {
                    "schemas": {"A": {"type": "array", "items": {"$ref": "#/components/schemas/B"}}}
                }
            }
        )
    )

    result = runner.invoke(cli, ["generate", str(path), "--json-output"])

    assert result.exit_code != 0
    payload = json.loads(result.stdout)
    assert payload["status"] == "error"
    assert payload["ref"] == "#/components/schemas/B"
    assert payload["error"] == "Schema not found for $ref"
    assert payload["operation"] == "resolve"
    assert payload["type"] == "SchemaNotFoundError"


def test_generate_unsupported_kind_reports_kind(runner, tmp_path):
    path = tmp_path / "odd.json"
    path.write_text(json.dumps({"components": {"schemas": {"Odd": {"type": "foo"}}}}))

    result = runner.invoke(cli, ["generate", str(path), "--json-output"])

    assert result.exit_code != 0
    payload = json.loads(result.stdout)
    assert payload["type"] == "UnsupportedSchemaKindError"
    assert payload["kind"] == "foo"
    assert payload["operation"] == "convert"
    assert payload["ref"] == "Odd"
    assert "traceback" not in payload


def test_generate_error_text_names_operation(runner, tmp_path):
    path = tmp_path / "empty.json"
    path.write_text(json.dumps({"components": {"schemas": {"E": {"oneOf": []}}}}))

    result = runner.invoke(cli, ["generate", str(path)])

    assert result.exit_code != 0
    assert "Error [EmptyCompositionError]: Empty oneOf composition" in result.stderr
    assert "operation=convert" in result.stderr


def test_generate_error_traceback_in_debug(runner, tmp_path):
    path = tmp_path / "odd.json"
    path.write_text(json.dumps({"components": {"schemas": {"Odd": {"type": "foo"}}}}))

    result = runner.invoke(cli, ["generate", str(path), "--json-output", "--debug"])

    payload = json.loads(result.stdout)
    assert "Traceback" in payload["traceback"]


def test_graph_text_output(runner, petstore_file):
    result = runner.invoke(cli, ["graph", str(petstore_file)])

    assert result.exit_code == 0
    lines = result.stdout.splitlines()
    assert lines[:2] == ["Owner depth=0", "NewPet depth=1"]
    assert "  -> Owner" in lines
    assert "Node depth=0 (circular)" in lines


def test_graph_json_output(runner, petstore_file):
    result = runner.invoke(cli, ["graph", str(petstore_file), "--json-output"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)["result"]
    assert payload["order"][:3] == [
        "#/components/schemas/Owner",
        "#/components/schemas/NewPet",
        "#/components/schemas/Pet",
    ]
    node = payload["nodes"]["#/components/schemas/Node"]
    assert node["circular"] is True
    assert node["direct"] == ["#/components/schemas/Node"]
