"""Tests for the gql-iface command line."""

import json
import sys
import tarfile

import pytest
from click.testing import CliRunner

from gql_iface.cli import load_functions, main

VALID_SDL = """
interface NamedEntity { name: String }
type Person implements NamedEntity { name: String age: Int }
type Business implements NamedEntity { name: String employeeCount: Int }
"""

BROKEN_SDL = """
interface NamedEntity { name: String id: ID! }
type Person implements NamedEntity { name: String! }
"""

FUNCTIONS_MODULE = '''
def resolve_named_entity(value, context):
    return "Person" if "age" in value else None

resolvers = {"NamedEntity": resolve_named_entity}
'''


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def valid_schema(tmp_path):
    path = tmp_path / "schema.graphqls"
    path.write_text(VALID_SDL)
    return path


@pytest.fixture
def broken_schema(tmp_path):
    path = tmp_path / "broken.graphqls"
    path.write_text(BROKEN_SDL)
    return path


class TestCheck:
    """Tests for `gql-iface check`."""

    def test_valid_schema(self, runner, valid_schema):
        result = runner.invoke(main, ["check", "--schema", str(valid_schema)])
        assert result.exit_code == 0
        assert "Schema OK." in result.output

    def test_broken_schema_lists_all_fields(self, runner, broken_schema):
        result = runner.invoke(main, ["check", "-s", str(broken_schema)])
        assert result.exit_code == 1
        assert "Type Person does not correctly implement interface NamedEntity" in result.output
        assert "invalid fields: id, name" in result.output

    def test_json_format(self, runner, valid_schema):
        result = runner.invoke(main, ["check", "-s", str(valid_schema), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["violations"] == []
        assert data["interfaces_checked"] == 1
        assert data["implementations_checked"] == 2

    def test_json_format_broken(self, runner, broken_schema):
        result = runner.invoke(main, ["check", "-s", str(broken_schema), "--format", "json"])
        assert result.exit_code == 1
        assert '"not_covariant"' in result.output

    def test_functions_enable_resolvability_check(self, runner, valid_schema, tmp_path, monkeypatch):
        (tmp_path / "entity_functions.py").write_text(FUNCTIONS_MODULE)
        monkeypatch.syspath_prepend(str(tmp_path))

        result = runner.invoke(
            main, ["check", "-s", str(valid_schema), "-f", "entity_functions"]
        )
        assert result.exit_code == 0
        assert "Schema OK." in result.output

    def test_functions_module_in_working_directory(
        self, runner, valid_schema, tmp_path, monkeypatch
    ):
        (tmp_path / "cwd_entity_functions.py").write_text(FUNCTIONS_MODULE)
        monkeypatch.setattr(sys, "path", [p for p in sys.path if p not in ("", ".")])
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(
            main, ["check", "-s", str(valid_schema), "-f", "cwd_entity_functions"]
        )
        assert result.exit_code == 0, result.output
        assert "Schema OK." in result.output

    def test_missing_predicates_reported_with_functions(
        self, runner, valid_schema, tmp_path, monkeypatch
    ):
        (tmp_path / "no_functions.py").write_text("resolvers = {}\ntype_checks = {}\n")
        monkeypatch.syspath_prepend(str(tmp_path))

        result = runner.invoke(main, ["check", "-s", str(valid_schema), "-f", "no_functions"])
        assert result.exit_code == 1
        assert "Interface NamedEntity: no deterministic resolution strategy" in result.output

    def test_archive(self, runner, valid_schema, tmp_path):
        archive = tmp_path / "schema.tgz"
        with tarfile.open(archive, "w:gz") as tar:
            tar.add(valid_schema, arcname="schema/schema.graphqls")

        result = runner.invoke(main, ["check", "-s", str(archive)])
        assert result.exit_code == 0
        assert "Extracting archive schema.tgz" in result.output
        assert "Schema OK." in result.output

    def test_missing_path(self, runner, tmp_path):
        result = runner.invoke(main, ["check", "-s", str(tmp_path / "nope")])
        assert result.exit_code == 2


class TestLoadFunctions:
    """Tests for load_functions."""

    def test_loads_from_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "cwd_type_checks.py").write_text(
            "resolvers = {}\ntype_checks = {'Person': lambda value: True}\n"
        )
        monkeypatch.setattr(sys, "path", [p for p in sys.path if p not in ("", ".")])
        monkeypatch.chdir(tmp_path)

        resolvers, type_checks = load_functions("cwd_type_checks")

        assert resolvers == {}
        assert list(type_checks) == ["Person"]
        assert str(tmp_path) in sys.path

    def test_missing_mappings_default_to_empty(self, tmp_path, monkeypatch):
        (tmp_path / "cwd_nothing.py").write_text("VALUE = 1\n")
        monkeypatch.setattr(sys, "path", list(sys.path))
        monkeypatch.chdir(tmp_path)

        assert load_functions("cwd_nothing") == ({}, {})
