"""Tests for whole-schema validation."""

import json

import pytest

from gql_iface.core.errors import SchemaValidationError
from gql_iface.core.ir import IRField, IRInterface, IRSchema, IRType, fields_by_name
from gql_iface.core.report import ViolationKind
from gql_iface.core.type_ref import ListOf, Named, NonNullOf
from gql_iface.core.validation import assert_valid_schema, validate_schema


@pytest.fixture
def entity():
    return IRInterface(
        identifier="Entity",
        name="Entity",
        fields=fields_by_name([
            IRField("id", NonNullOf(Named("ID"))),
            IRField("name", Named("String")),
        ]),
    )


@pytest.fixture
def good_type():
    return IRType(
        identifier="Good",
        name="Good",
        fields=fields_by_name([
            IRField("id", NonNullOf(Named("ID"))),
            IRField("name", Named("String")),
        ]),
        interfaces=("Entity",),
        is_type_of=lambda value: value.get("kind") == "good",
    )


@pytest.fixture
def broken_schema(entity, good_type):
    """Entity is unresolvable, Bad misses fields and claims a ghost interface."""
    bad = IRType(
        identifier="Bad",
        name="Bad",
        fields=fields_by_name([IRField("name", NonNullOf(Named("String")))]),
        interfaces=("Entity", "Ghost"),
    )
    return IRSchema.build([entity, good_type, bad])


class TestValidateSchema:
    """Tests for validate_schema."""

    def test_valid_schema(self, entity, good_type):
        report = validate_schema(IRSchema.build([entity, good_type]))
        assert report.ok
        assert report.violations == []
        assert report.interfaces_checked == 1
        assert report.implementations_checked == 1

    def test_reports_every_violation(self, broken_schema):
        report = validate_schema(broken_schema)

        assert not report.ok
        kinds = [v.kind for v in report.violations]
        assert sorted(kinds) == sorted([
            ViolationKind.UNKNOWN_INTERFACE,
            ViolationKind.NOT_RESOLVABLE,
            ViolationKind.NOT_COVARIANT,
        ])

        covariance = next(v for v in report.violations if v.kind == ViolationKind.NOT_COVARIANT)
        assert covariance.type_name == "Bad"
        assert covariance.interface == "Entity"
        assert covariance.invalid_fields == ["id", "name"]

        ghost = next(v for v in report.violations if v.kind == ViolationKind.UNKNOWN_INTERFACE)
        assert ghost.interface == "Ghost"
        assert ghost.type_name == "Bad"

    def test_field_with_unknown_type(self, entity, good_type):
        stray = IRType(
            identifier="Stray",
            name="Stray",
            fields=fields_by_name([IRField("owner", NonNullOf(ListOf(Named("Ghost"))))]),
        )
        report = validate_schema(IRSchema.build([entity, good_type, stray]))

        assert [v.kind for v in report.violations] == [ViolationKind.UNKNOWN_TYPE]
        violation = report.violations[0]
        assert violation.type_name == "Stray"
        assert violation.field_name == "owner"
        assert violation.field_type == "Ghost"
        assert violation.message == "Field Stray.owner refers to unknown type Ghost"

    def test_interface_field_with_unknown_type(self):
        iface = IRInterface(
            identifier="Node",
            name="Node",
            fields=fields_by_name([IRField("parent", Named("Missing"))]),
        )
        report = validate_schema(IRSchema.build([iface]), check_resolvable=False)
        assert [(v.kind, v.type_name) for v in report.violations] == [
            (ViolationKind.UNKNOWN_TYPE, "Node"),
        ]

    def test_object_claiming_a_scalar(self):
        schema = IRSchema.build([IRType(identifier="Odd", name="Odd", interfaces=("String",))])
        report = validate_schema(schema)
        assert [v.kind for v in report.violations] == [ViolationKind.UNKNOWN_INTERFACE]

    def test_interface_without_implementors(self):
        lonely = IRInterface(identifier="Lonely", name="Lonely")
        report = validate_schema(IRSchema.build([lonely]))
        assert [v.kind for v in report.violations] == [ViolationKind.NOT_RESOLVABLE]

    def test_resolvability_check_can_be_skipped(self, broken_schema):
        report = validate_schema(broken_schema, check_resolvable=False)
        assert ViolationKind.NOT_RESOLVABLE not in [v.kind for v in report.violations]
        assert len(report.violations) == 2

    def test_messages(self, broken_schema):
        messages = validate_schema(broken_schema).messages()
        assert "Interface Entity: no deterministic resolution strategy" in messages
        assert any("invalid fields: id, name" in m for m in messages)

    def test_report_serializes_to_json(self, broken_schema):
        data = json.loads(validate_schema(broken_schema).model_dump_json())
        kinds = {v["kind"] for v in data["violations"]}
        assert kinds == {"not_resolvable", "not_covariant", "unknown_interface"}


class TestAssertValidSchema:
    """Tests for assert_valid_schema."""

    def test_valid_schema_returns_report(self, entity, good_type):
        report = assert_valid_schema(IRSchema.build([entity, good_type]))
        assert report.ok

    def test_invalid_schema_raises_with_all_problems(self, broken_schema):
        with pytest.raises(SchemaValidationError) as exc_info:
            assert_valid_schema(broken_schema)

        error = exc_info.value
        assert len(error.errors) == 3
        assert "no deterministic resolution strategy" in error.message
        assert "invalid fields: id, name" in error.message
        assert error.report.violations
