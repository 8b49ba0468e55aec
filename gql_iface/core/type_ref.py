"""Type references for GraphQL field types.

A field type is either a named type or a wrapper around another reference:

    Named("Int")                      # Int
    ListOf(NonNullOf(Named("Int")))   # [Int!]
    NonNullOf(ListOf(Named("Int")))   # [Int]!

References are immutable and hashable so they can be shared freely between
threads once a schema is built.
"""

from dataclasses import dataclass
from typing import Callable, Union

from graphql import ListTypeNode, NamedTypeNode, NonNullTypeNode, TypeNode


@dataclass(frozen=True)
class Named:
    """Reference to a named type by its schema identifier."""
    identifier: str

    def __str__(self) -> str:
        return self.identifier


@dataclass(frozen=True)
class ListOf:
    """List wrapper: [of_type]."""
    of_type: "TypeRef"

    def __str__(self) -> str:
        return f"[{self.of_type}]"


@dataclass(frozen=True)
class NonNullOf:
    """Non-null wrapper: of_type!"""
    of_type: "TypeRef"

    def __str__(self) -> str:
        return f"{self.of_type}!"


TypeRef = Union[Named, ListOf, NonNullOf]

# Maps a type identifier to its canonical type name, or None if unknown
NameResolver = Callable[[str], str | None]


def compatible(a: TypeRef, b: TypeRef, resolve: NameResolver | None = None) -> bool:
    """Check whether two references are declared with the same shape.

    Wrappers must pair up exactly at every level; NonNullOf(Named("X")) is
    not compatible with Named("X"). The innermost identifiers are compared
    by canonical name when a resolver is given, otherwise by identifier.

    Args:
        a: Reference declared on the interface
        b: Reference declared on the implementing type
        resolve: Optional identifier -> canonical name lookup

    Returns:
        True if both references describe the same wrapped type
    """
    while True:
        if isinstance(a, ListOf) and isinstance(b, ListOf):
            a, b = a.of_type, b.of_type
        elif isinstance(a, NonNullOf) and isinstance(b, NonNullOf):
            a, b = a.of_type, b.of_type
        elif isinstance(a, Named) and isinstance(b, Named):
            break
        else:
            return False

    if resolve is None:
        return a.identifier == b.identifier

    name_a = resolve(a.identifier)
    name_b = resolve(b.identifier)
    # Unknown identifiers never match, not even each other
    if name_a is None or name_b is None:
        return False
    return name_a == name_b


def named_type(ref: TypeRef) -> Named:
    """Strip all wrappers and return the innermost named reference."""
    while not isinstance(ref, Named):
        ref = ref.of_type
    return ref


def from_type_node(type_node: TypeNode) -> TypeRef:
    """Convert a graphql-core type node into a TypeRef.

    Unlike a flat (name, is_list, is_optional) summary this keeps every
    level of nesting, so [[Int!]]! survives intact.
    """
    if isinstance(type_node, NonNullTypeNode):
        return NonNullOf(from_type_node(type_node.type))
    if isinstance(type_node, ListTypeNode):
        return ListOf(from_type_node(type_node.type))
    assert isinstance(type_node, NamedTypeNode), f"Expected NamedTypeNode, got {type(type_node)}"
    return Named(type_node.name.value)
