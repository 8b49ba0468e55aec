"""Interface (abstract type) resolution and implementation checks.

An interface declares a set of fields that object types promise to provide.
Because a resolver may return a value typed only as the interface, the
executor must find out which concrete object type the value really is.
Either:

* the interface provides a resolve_type function, or
* every implementing object type provides an is_type_of predicate.

Example:
    named_entity = IRInterface(
        identifier="NamedEntity",
        name="NamedEntity",
        fields=fields_by_name([IRField("name", Named("String"))]),
        resolve_type=lambda value, _ctx: (
            "Person" if "age" in value
            else "Business" if "employee_count" in value
            else None
        ),
    )

    resolve_type(named_entity, {"name": "Ada", "age": 30}, ctx)  # Person IRType

Everything here only reads the schema, so these functions can be called
concurrently against a shared IRSchema.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .errors import UnknownTypeError
from .ir import IRInterface, IRSchema, IRType
from .type_ref import compatible

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionContext:
    """Execution context handed to resolve_type functions.

    Attributes:
        schema: The schema the current request executes against
        extensions: Free-form per-request data for resolver functions
    """
    schema: IRSchema
    extensions: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CheckResult:
    """Outcome of check_implements; ok when no field is invalid."""
    invalid_fields: frozenset[str] = frozenset()

    @property
    def ok(self) -> bool:
        return not self.invalid_fields


def resolve_type(
    interface: IRInterface,
    value: Any,
    context: ResolutionContext,
    lookup: bool = True,
) -> IRType | str | None:
    """Find the concrete object type of a value typed as an interface.

    If the interface has a resolve_type function only that function is
    consulted. Otherwise each implementor's is_type_of is tried in the
    schema's build order and the first match wins.

    Args:
        interface: The interface the value was declared as
        value: The runtime value to classify
        context: Execution context; its schema is used for lookups
        lookup: Return the IRType if True, only its identifier if False

    Returns:
        The concrete IRType (or identifier), or None if no type matched

    Raises:
        UnknownTypeError: If resolve_type names something that is not an
            object type in the schema
    """
    schema = context.schema

    if interface.resolve_type is not None:
        ident = interface.resolve_type(value, context)
        if ident is None:
            logger.debug("resolve_type for %s found no match", interface.name)
            return None
        if not lookup:
            return ident
        type_def = schema.lookup_type(ident)
        if not isinstance(type_def, IRType):
            raise UnknownTypeError(interface.name, ident)
        return type_def

    for type_def in schema.implementors(interface.identifier):
        if type_def.is_type_of is None:
            logger.warning(
                "Skipping %s while resolving %s: no is_type_of",
                type_def.name, interface.name,
            )
            continue
        if type_def.is_type_of(value):
            return type_def if lookup else type_def.identifier

    logger.debug("No implementor of %s accepted the value", interface.name)
    return None


def is_resolvable(schema: IRSchema, interface: IRInterface) -> bool:
    """Whether the interface (or its implementors) can classify values.

    An interface without resolve_type and without implementors is not
    resolvable: no value of it could ever be produced.
    """
    if interface.resolve_type is not None:
        return True
    implementors = schema.implementors(interface.identifier)
    if not implementors:
        return False
    return all(t.is_type_of is not None for t in implementors)


def is_implementor(type_def: Any, interface_identifier: str) -> bool:
    """Whether a type declares the given interface among its interfaces."""
    if not isinstance(type_def, IRType):
        return False
    return interface_identifier in type_def.interfaces


def check_implements(
    interface: IRInterface,
    type_def: IRType,
    schema: IRSchema,
) -> CheckResult:
    """Check that an object type provides every field of an interface.

    A field is invalid if the object lacks it or declares it with a
    different type. Wrappers must match exactly (String! does not satisfy
    String) and named types are compared by their canonical names in the
    schema. Every interface field is checked, so the result lists all
    problems at once.
    """
    invalid_fields = set()
    for field_name, iface_field in interface.fields.items():
        type_field = type_def.fields.get(field_name)
        if type_field is None:
            invalid_fields.add(field_name)
        elif not compatible(iface_field.type, type_field.type, schema.canonical_name):
            invalid_fields.add(field_name)

    if invalid_fields:
        logger.debug(
            "%s does not implement %s: %s",
            type_def.name, interface.name, sorted(invalid_fields),
        )
    return CheckResult(frozenset(invalid_fields))
