"""Whole-schema validation of interfaces and their implementors.

Runs every check on every interface before reporting, so a broken schema
can be fixed in one pass instead of one error at a time.
"""

import logging

from .errors import SchemaValidationError
from .interface import check_implements, is_resolvable
from .ir import IRInterface, IRSchema, IRType
from .report import ValidationReport, Violation, ViolationKind
from .type_ref import named_type

logger = logging.getLogger(__name__)


def validate_schema(schema: IRSchema, check_resolvable: bool = True) -> ValidationReport:
    """Validate every interface and implementation in the schema.

    Checks that:
    - every field refers to a type that exists in the schema
    - every interface an object type claims exists and is an interface
    - every interface can resolve the concrete type of its values
    - every implementor provides compatible fields for the interface

    The resolvability check can be turned off for schemas loaded from SDL
    before resolver functions are bound.

    Returns:
        A report listing all violations (empty if the schema is valid)
    """
    report = ValidationReport()

    for type_def in schema.types.values():
        if not isinstance(type_def, (IRInterface, IRType)):
            continue
        for ir_field in type_def.fields.values():
            target = named_type(ir_field.type).identifier
            if schema.lookup_type(target) is None:
                report.violations.append(
                    Violation(
                        kind=ViolationKind.UNKNOWN_TYPE,
                        type_name=type_def.name,
                        field_name=ir_field.name,
                        field_type=target,
                    )
                )

    for type_def in schema.objects.values():
        for iface_ident in type_def.interfaces:
            if not isinstance(schema.lookup_type(iface_ident), IRInterface):
                report.violations.append(
                    Violation(
                        kind=ViolationKind.UNKNOWN_INTERFACE,
                        interface=iface_ident,
                        type_name=type_def.name,
                    )
                )

    for interface in schema.interfaces.values():
        report.interfaces_checked += 1

        if check_resolvable and not is_resolvable(schema, interface):
            report.violations.append(
                Violation(kind=ViolationKind.NOT_RESOLVABLE, interface=interface.name)
            )

        for type_def in schema.implementors(interface.identifier):
            report.implementations_checked += 1
            result = check_implements(interface, type_def, schema)
            if not result.ok:
                report.violations.append(
                    Violation(
                        kind=ViolationKind.NOT_COVARIANT,
                        interface=interface.name,
                        type_name=type_def.name,
                        invalid_fields=sorted(result.invalid_fields),
                    )
                )

    for message in report.messages():
        logger.warning(message)
    return report


def assert_valid_schema(schema: IRSchema) -> ValidationReport:
    """Validate the schema and raise if anything is wrong.

    Raises:
        SchemaValidationError: With the full report of violations
    """
    report = validate_schema(schema)
    if not report.ok:
        raise SchemaValidationError(
            "Invalid schema: " + "; ".join(report.messages()), report
        )
    return report
