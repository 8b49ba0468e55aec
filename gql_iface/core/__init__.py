"""Core modules for interface resolution and schema validation."""

from .errors import SchemaError, SchemaValidationError, UnknownTypeError
from .interface import (
    CheckResult,
    ResolutionContext,
    check_implements,
    is_implementor,
    is_resolvable,
    resolve_type,
)
from .ir import (
    IRArgument,
    IREnum,
    IRField,
    IRInterface,
    IRScalar,
    IRSchema,
    IRType,
    IRUnion,
    fields_by_name,
)
from .parser import SchemaParser
from .report import ValidationReport, Violation, ViolationKind
from .type_ref import ListOf, Named, NonNullOf, TypeRef, compatible, named_type
from .validation import assert_valid_schema, validate_schema

__all__ = [
    # Type references
    "Named",
    "ListOf",
    "NonNullOf",
    "TypeRef",
    "compatible",
    "named_type",
    # IR types
    "IRArgument",
    "IREnum",
    "IRField",
    "IRInterface",
    "IRScalar",
    "IRSchema",
    "IRType",
    "IRUnion",
    "fields_by_name",
    # Interfaces
    "CheckResult",
    "ResolutionContext",
    "check_implements",
    "is_implementor",
    "is_resolvable",
    "resolve_type",
    # Validation
    "ValidationReport",
    "Violation",
    "ViolationKind",
    "assert_valid_schema",
    "validate_schema",
    # Errors
    "SchemaError",
    "SchemaValidationError",
    "UnknownTypeError",
    # Parser
    "SchemaParser",
]
