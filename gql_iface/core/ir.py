"""Intermediate Representation (IR) for GraphQL schemas.

This module defines the immutable values the resolution and validation
code works on: fields, interfaces, object types and the schema registry
that indexes them. Values are built once and then only read, so a single
IRSchema can be shared by any number of concurrent requests.
"""

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from .errors import SchemaError
from .type_ref import TypeRef

logger = logging.getLogger(__name__)

# (value, context) -> identifier of the concrete type, or None for no match
TypeResolver = Callable[[Any, Any], str | None]
# value -> whether the value belongs to the type
IsTypeOf = Callable[[Any], bool]

BUILTIN_SCALARS = ("String", "Int", "Float", "Boolean", "ID")


@dataclass(frozen=True)
class IRArgument:
    """Represents an argument to a field."""
    name: str
    type: TypeRef
    default_value: Any = None
    description: str | None = None


@dataclass(frozen=True)
class IRField:
    """Represents a field in a GraphQL type or interface."""
    name: str
    type: TypeRef
    arguments: Mapping[str, IRArgument] = field(default_factory=dict)
    description: str | None = None


@dataclass(frozen=True)
class IRScalar:
    """Represents a GraphQL scalar type."""
    identifier: str
    name: str
    description: str | None = None


@dataclass(frozen=True)
class IREnum:
    """Represents a GraphQL enum type."""
    identifier: str
    name: str
    values: tuple[str, ...] = ()
    description: str | None = None


@dataclass(frozen=True)
class IRInterface:
    """Represents a GraphQL interface type.

    Either resolve_type is set, or every implementing IRType must carry an
    is_type_of predicate; otherwise values of this interface cannot be
    classified at runtime.
    """
    identifier: str
    name: str
    fields: Mapping[str, IRField] = field(default_factory=dict)
    resolve_type: TypeResolver | None = None
    description: str | None = None


@dataclass(frozen=True)
class IRType:
    """Represents a GraphQL object type."""
    identifier: str
    name: str
    fields: Mapping[str, IRField] = field(default_factory=dict)
    interfaces: tuple[str, ...] = ()
    is_type_of: IsTypeOf | None = None
    description: str | None = None


@dataclass(frozen=True)
class IRUnion:
    """Represents a GraphQL union type."""
    identifier: str
    name: str
    types: tuple[str, ...] = ()
    description: str | None = None


IRNamedType = IRScalar | IREnum | IRInterface | IRType | IRUnion


def fields_by_name(fields: Iterable[IRField]) -> dict[str, IRField]:
    """Key a sequence of fields by name, keeping declaration order."""
    return {f.name: f for f in fields}


@dataclass(frozen=True)
class IRSchema:
    """Complete, immutable registry of a GraphQL schema's named types.

    Use IRSchema.build() rather than the constructor: it derives the
    implementor index from the types' declared interfaces.
    """
    types: Mapping[str, IRNamedType] = field(default_factory=dict)
    # interface identifier -> implementing object identifiers, in build order
    implementor_index: Mapping[str, tuple[str, ...]] = field(default_factory=dict)

    @classmethod
    def build(cls, types: Iterable[IRNamedType]) -> "IRSchema":
        """Build a schema from named types.

        Built-in scalars are added unless already present. The implementor
        index follows the order in which object types are given, which is
        the order is_type_of predicates are tried at runtime.

        Raises:
            SchemaError: If two types share an identifier
        """
        registry: dict[str, IRNamedType] = {}
        for type_def in types:
            if type_def.identifier in registry:
                raise SchemaError(f"Duplicate type identifier: {type_def.identifier}")
            registry[type_def.identifier] = type_def

        for name in BUILTIN_SCALARS:
            registry.setdefault(name, IRScalar(identifier=name, name=name))

        index: dict[str, list[str]] = {}
        for type_def in registry.values():
            if not isinstance(type_def, IRType):
                continue
            for iface in type_def.interfaces:
                members = index.setdefault(iface, [])
                if type_def.identifier not in members:
                    members.append(type_def.identifier)

        logger.debug(
            "Built schema with %d types and %d implemented interfaces",
            len(registry), len(index),
        )
        return cls(
            types=MappingProxyType(registry),
            implementor_index=MappingProxyType(
                {iface: tuple(members) for iface, members in index.items()}
            ),
        )

    def with_functions(
        self,
        resolvers: Mapping[str, TypeResolver] | None = None,
        type_checks: Mapping[str, IsTypeOf] | None = None,
    ) -> "IRSchema":
        """Return a new schema with resolve_type/is_type_of functions bound.

        Args:
            resolvers: interface identifier -> resolve_type function
            type_checks: object identifier -> is_type_of predicate

        Raises:
            SchemaError: If a key does not name an interface/object type
        """
        resolvers = resolvers or {}
        type_checks = type_checks or {}

        for ident in resolvers:
            if not isinstance(self.types.get(ident), IRInterface):
                raise SchemaError(f"Cannot bind resolve_type: {ident} is not an interface")
        for ident in type_checks:
            if not isinstance(self.types.get(ident), IRType):
                raise SchemaError(f"Cannot bind is_type_of: {ident} is not an object type")

        rebuilt = []
        for ident, type_def in self.types.items():
            if ident in resolvers:
                type_def = replace(type_def, resolve_type=resolvers[ident])
            elif ident in type_checks:
                type_def = replace(type_def, is_type_of=type_checks[ident])
            rebuilt.append(type_def)
        return IRSchema.build(rebuilt)

    def lookup_type(self, identifier: str) -> IRNamedType | None:
        """Look up a type by identifier."""
        return self.types.get(identifier)

    def canonical_name(self, identifier: str) -> str | None:
        """Return the declared name of the type with this identifier."""
        type_def = self.types.get(identifier)
        return type_def.name if type_def is not None else None

    def implementors(self, interface_identifier: str) -> list[IRType]:
        """Return the object types implementing an interface, in build order."""
        return [
            self.types[ident]
            for ident in self.implementor_index.get(interface_identifier, ())
        ]

    @property
    def interfaces(self) -> dict[str, IRInterface]:
        """Return all interface types."""
        return {k: v for k, v in self.types.items() if isinstance(v, IRInterface)}

    @property
    def objects(self) -> dict[str, IRType]:
        """Return all object types."""
        return {k: v for k, v in self.types.items() if isinstance(v, IRType)}

    @property
    def scalars(self) -> dict[str, IRScalar]:
        """Return all scalar types, built-ins included."""
        return {k: v for k, v in self.types.items() if isinstance(v, IRScalar)}

    @property
    def enums(self) -> dict[str, IREnum]:
        """Return all enum types."""
        return {k: v for k, v in self.types.items() if isinstance(v, IREnum)}

    @property
    def unions(self) -> dict[str, IRUnion]:
        """Return all union types."""
        return {k: v for k, v in self.types.items() if isinstance(v, IRUnion)}
