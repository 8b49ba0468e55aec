"""Validation report models.

Pydantic models so a report can be dumped as JSON by the CLI or by any
caller that wants to ship diagnostics elsewhere.
"""

from enum import Enum

from pydantic import BaseModel, Field

NOT_RESOLVABLE = "no deterministic resolution strategy"


class ViolationKind(str, Enum):
    """Kinds of schema violations."""
    NOT_RESOLVABLE = "not_resolvable"  # no resolve_type and a predicate missing
    NOT_COVARIANT = "not_covariant"  # implementor fields don't match
    UNKNOWN_INTERFACE = "unknown_interface"  # object claims a non-interface
    UNKNOWN_TYPE = "unknown_type"  # field refers to a missing type


class Violation(BaseModel):
    """A single schema violation."""
    kind: ViolationKind
    interface: str | None = None
    type_name: str | None = None
    field_name: str | None = None
    field_type: str | None = None
    invalid_fields: list[str] = Field(default_factory=list)

    @property
    def message(self) -> str:
        """Human-readable description of the violation."""
        if self.kind == ViolationKind.NOT_RESOLVABLE:
            return f"Interface {self.interface}: {NOT_RESOLVABLE}"
        if self.kind == ViolationKind.UNKNOWN_TYPE:
            return (
                f"Field {self.type_name}.{self.field_name} refers to unknown "
                f"type {self.field_type}"
            )
        if self.kind == ViolationKind.UNKNOWN_INTERFACE:
            return (
                f"Type {self.type_name} implements {self.interface}, "
                f"which is not an interface in the schema"
            )
        fields = ", ".join(self.invalid_fields)
        return (
            f"Type {self.type_name} does not correctly implement interface "
            f"{self.interface}; invalid fields: {fields}"
        )


class ValidationReport(BaseModel):
    """Result of validating a whole schema."""
    interfaces_checked: int = 0
    implementations_checked: int = 0
    violations: list[Violation] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True if the schema has no violations."""
        return not self.violations

    def messages(self) -> list[str]:
        """Return one message per violation, in discovery order."""
        return [v.message for v in self.violations]
