"""Exceptions raised for schema configuration problems.

A value that simply cannot be classified is not an error: resolve_type
returns None for it. These exceptions are reserved for schemas that are
wired up wrongly.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .report import ValidationReport


class SchemaError(Exception):
    """Base exception for invalid schema configuration."""


class SchemaValidationError(SchemaError):
    """Exception raised when a schema fails validation.

    Carries the full report so every violation can be fixed in one pass.
    """

    def __init__(self, message: str, report: "ValidationReport"):
        self.message = message
        self.report = report
        super().__init__(message)

    @property
    def errors(self) -> list[str]:
        """Return one message per violation."""
        return self.report.messages()


class UnknownTypeError(SchemaError):
    """Exception raised when resolve_type names no object type in the schema.

    Covers identifiers missing from the schema as well as ones naming a
    scalar, enum, interface or union.
    """

    def __init__(self, interface: str, identifier: str):
        self.interface = interface
        self.identifier = identifier
        super().__init__(
            f"resolve_type for interface {interface} returned {identifier!r}, "
            f"which is not an object type in the schema"
        )
