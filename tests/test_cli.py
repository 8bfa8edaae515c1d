"""Tests for the reflectpool CLI."""

import json
import uuid

import yaml
from click.testing import CliRunner

from reflectpool.cli import main
from reflectpool.registry import reflect_pool

SAMPLE = '''
from reflectpool.annotations import annotation


@annotation(clazz=True, single="name")
def entity(): ...


@annotation(field=True)
def column(): ...


@entity({"name": "users"})
@column.field("email", {"length": 120})
class User:
    email: str


class Plain:
    pass
'''


def _sample_module(tmp_path, monkeypatch) -> str:
    name = f"rp_sample_{uuid.uuid4().hex[:8]}"
    (tmp_path / f"{name}.py").write_text(SAMPLE)
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0


def test_inspect_json(tmp_path, monkeypatch):
    module = _sample_module(tmp_path, monkeypatch)
    result = CliRunner().invoke(main, ["inspect", module, "--format", "json"])
    assert result.exit_code == 0, result.output

    data = json.loads(result.output)
    users = [c for c in data["classes"] if c["name"] == f"{module}.User"]
    assert len(users) == 1
    assert users[0]["instances"][0]["name"] == "email"
    assert users[0]["identifiers"][0]["values"] == [{"name": "users"}]


def test_inspect_yaml(tmp_path, monkeypatch):
    module = _sample_module(tmp_path, monkeypatch)
    result = CliRunner().invoke(main, ["inspect", module, "--format", "yaml", "--detailed"])
    assert result.exit_code == 0, result.output

    data = yaml.safe_load(result.output)
    names = [i["name"] for i in data["identifiers"]]
    assert f"{module}.entity" in names
    detailed = [i for i in data["identifiers"] if i["name"] == f"{module}.entity"][0]
    assert detailed["options"]["single"] == "name"


def test_inspect_table(tmp_path, monkeypatch):
    module = _sample_module(tmp_path, monkeypatch)
    result = CliRunner().invoke(main, ["inspect", module])
    assert result.exit_code == 0, result.output
    assert "Reflected classes" in result.output


def test_identifiers(tmp_path, monkeypatch):
    module = _sample_module(tmp_path, monkeypatch)
    result = CliRunner().invoke(main, ["identifiers", module])
    assert result.exit_code == 0, result.output
    assert "Identifiers (" in result.output


def test_classes(tmp_path, monkeypatch):
    module = _sample_module(tmp_path, monkeypatch)
    result = CliRunner().invoke(main, ["classes", module])
    assert result.exit_code == 0, result.output
    assert f"{module}.User" in result.output.splitlines()
    assert f"{module}.Plain" not in result.output.splitlines()


def test_classes_by_identifier(tmp_path, monkeypatch):
    module = _sample_module(tmp_path, monkeypatch)
    result = CliRunner().invoke(main, ["classes", module, "--by", f"{module}.entity"])
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [f"{module}.User"]


def test_classes_by_unknown_identifier(tmp_path, monkeypatch):
    module = _sample_module(tmp_path, monkeypatch)
    result = CliRunner().invoke(main, ["classes", module, "--by", "no.such.identifier"])
    assert result.exit_code == 1
    assert "Unknown identifier" in result.output


def test_missing_module():
    result = CliRunner().invoke(main, ["inspect", "rp_no_such_module_here"])
    assert result.exit_code == 1
    assert "Cannot import" in result.output


def test_config_file(tmp_path, monkeypatch):
    monkeypatch.setattr(reflect_pool, "config", reflect_pool.config)
    module = _sample_module(tmp_path, monkeypatch)
    config = tmp_path / "reflectpool.yaml"
    config.write_text("reflectpool:\n  warn_on_rename: false\n")

    result = CliRunner().invoke(main, ["--config", str(config), "classes", module])
    assert result.exit_code == 0, result.output
    assert reflect_pool.config.warn_on_rename is False


def test_invalid_config_file(tmp_path, monkeypatch):
    monkeypatch.setattr(reflect_pool, "config", reflect_pool.config)
    config = tmp_path / "reflectpool.yaml"
    config.write_text("reflectpool:\n  include_dunder: maybe\n")

    result = CliRunner().invoke(main, ["--config", str(config), "classes", "json"])
    assert result.exit_code == 1
    assert "Invalid config" in result.output
