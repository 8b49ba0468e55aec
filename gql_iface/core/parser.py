"""GraphQL schema parser using graphql-core.

Parses .graphqls files and produces an IRSchema. SDL carries no code, so
resolve_type functions and is_type_of predicates are passed in separately
and bound by type name.
"""

import logging
import os
from dataclasses import replace
from typing import Mapping

from graphql import (
    EnumTypeDefinitionNode,
    InterfaceTypeDefinitionNode,
    InterfaceTypeExtensionNode,
    ObjectTypeDefinitionNode,
    ObjectTypeExtensionNode,
    ScalarTypeDefinitionNode,
    UnionTypeDefinitionNode,
    UnionTypeExtensionNode,
    parse,
)

from .ir import (
    IRArgument,
    IREnum,
    IRField,
    IRInterface,
    IRNamedType,
    IRScalar,
    IRSchema,
    IRType,
    IRUnion,
    IsTypeOf,
    TypeResolver,
)
from .type_ref import from_type_node

logger = logging.getLogger(__name__)


class SchemaParser:
    """Parses GraphQL schema files into IR."""

    def __init__(
        self,
        schema_path: str,
        resolvers: Mapping[str, TypeResolver] | None = None,
        type_checks: Mapping[str, IsTypeOf] | None = None,
    ):
        """Initialize a parser with a path to a schema file or directory.

        Args:
            schema_path: A .graphqls file or a directory searched recursively
            resolvers: interface name -> resolve_type function
            type_checks: object type name -> is_type_of predicate
        """
        self.schema_path = schema_path
        self.resolvers = dict(resolvers or {})
        self.type_checks = dict(type_checks or {})
        self.current_file = ""
        # Definitions in declaration order; this order becomes the
        # implementor order used at runtime
        self._types: dict[str, IRNamedType] = {}

    def parse_all(self) -> IRSchema:
        """Parse all schema files and return the complete IR."""
        for file_path in self._collect_schema_files():
            self.current_file = os.path.basename(file_path)
            with open(file_path) as f:
                content = f.read()
            try:
                self._process_ast(parse(content))
            except Exception:
                logger.error("Error parsing %s", self.current_file)
                raise
        return self._build()

    def parse_source(self, source: str) -> IRSchema:
        """Parse SDL text directly instead of files."""
        self.current_file = "<source>"
        self._process_ast(parse(source))
        return self._build()

    def _build(self) -> IRSchema:
        schema = IRSchema.build(self._types.values())
        logger.debug(
            "Parsed %d interfaces and %d object types",
            len(schema.interfaces), len(schema.objects),
        )
        return schema.with_functions(self.resolvers, self.type_checks)

    def _collect_schema_files(self) -> list[str]:
        """Collect all .graphqls files from path."""
        files = []
        if os.path.isfile(self.schema_path):
            if self.schema_path.endswith((".graphqls", ".graphql")):
                files.append(self.schema_path)
        else:
            for root, _, filenames in os.walk(self.schema_path):
                for filename in filenames:
                    if filename.endswith((".graphqls", ".graphql")):
                        files.append(os.path.join(root, filename))
        return sorted(files)

    def _process_ast(self, ast):
        """Process GraphQL AST and collect named type definitions."""
        for definition in ast.definitions:
            if isinstance(definition, ScalarTypeDefinitionNode):
                self._process_scalar(definition)
            elif isinstance(definition, EnumTypeDefinitionNode):
                self._process_enum(definition)
            elif isinstance(definition, InterfaceTypeDefinitionNode):
                self._process_interface(definition)
            elif isinstance(definition, ObjectTypeDefinitionNode):
                self._process_object_type(definition)
            elif isinstance(definition, UnionTypeDefinitionNode):
                self._process_union(definition)
            elif isinstance(definition, UnionTypeExtensionNode):
                self._merge_union_extension(definition)
            elif isinstance(definition, (ObjectTypeExtensionNode, InterfaceTypeExtensionNode)):
                self._merge_extension(definition)
            else:
                logger.debug(
                    "Ignoring %s in %s", type(definition).__name__, self.current_file
                )

    @staticmethod
    def _description(node) -> str | None:
        return node.description.value if node.description else None

    def _process_scalar(self, node: ScalarTypeDefinitionNode):
        name = node.name.value
        self._types[name] = IRScalar(
            identifier=name, name=name, description=self._description(node)
        )

    def _process_enum(self, node: EnumTypeDefinitionNode):
        name = node.name.value
        self._types[name] = IREnum(
            identifier=name,
            name=name,
            values=tuple(v.name.value for v in node.values or ()),
            description=self._description(node),
        )

    def _process_interface(self, node: InterfaceTypeDefinitionNode):
        name = node.name.value
        fields = self._process_fields(node.fields)
        existing = self._types.get(name)
        if isinstance(existing, IRInterface):
            # An extension was seen first; keep its fields after ours
            fields.update({k: v for k, v in existing.fields.items() if k not in fields})
        self._types[name] = IRInterface(
            identifier=name,
            name=name,
            fields=fields,
            description=self._description(node),
        )

    def _process_object_type(self, node: ObjectTypeDefinitionNode):
        name = node.name.value
        fields = self._process_fields(node.fields)
        interfaces = [i.name.value for i in node.interfaces or ()]

        existing = self._types.get(name)
        if isinstance(existing, IRType):
            # Merge: base fields first, keep extension fields
            fields.update({k: v for k, v in existing.fields.items() if k not in fields})
            interfaces += [i for i in existing.interfaces if i not in interfaces]

        self._types[name] = IRType(
            identifier=name,
            name=name,
            fields=fields,
            interfaces=tuple(interfaces),
            description=self._description(node),
        )

    def _process_union(self, node: UnionTypeDefinitionNode):
        name = node.name.value
        members = [t.name.value for t in node.types or ()]
        existing = self._types.get(name)
        if isinstance(existing, IRUnion):
            members += [t for t in existing.types if t not in members]
        self._types[name] = IRUnion(
            identifier=name,
            name=name,
            types=tuple(members),
            description=self._description(node),
        )

    def _merge_union_extension(self, node: UnionTypeExtensionNode):
        name = node.name.value
        existing = self._types.get(name)
        if not isinstance(existing, IRUnion):
            existing = IRUnion(identifier=name, name=name)
        members = list(existing.types)
        members += [t.name.value for t in node.types or () if t.name.value not in members]
        self._types[name] = replace(existing, types=tuple(members))

    def _merge_extension(self, node: ObjectTypeExtensionNode | InterfaceTypeExtensionNode):
        """Merge 'extend type' / 'extend interface' into the existing definition.

        The extension may come before the base definition when it lives in an
        earlier file; a placeholder is created then.
        """
        name = node.name.value
        extension_fields = self._process_fields(node.fields or ())
        existing = self._types.get(name)

        if existing is None:
            if isinstance(node, InterfaceTypeExtensionNode):
                existing = IRInterface(identifier=name, name=name)
            else:
                existing = IRType(identifier=name, name=name)

        fields = dict(existing.fields)
        for field_name, ir_field in extension_fields.items():
            fields.setdefault(field_name, ir_field)

        if isinstance(existing, IRType):
            interfaces = list(existing.interfaces)
            for iface in node.interfaces or ():
                if iface.name.value not in interfaces:
                    interfaces.append(iface.name.value)
            self._types[name] = replace(existing, fields=fields, interfaces=tuple(interfaces))
        else:
            self._types[name] = replace(existing, fields=fields)

    def _process_fields(self, field_nodes) -> dict[str, IRField]:
        """Process field definitions into IRFields keyed by name."""
        fields = {}
        for node in field_nodes or ():
            args = {}
            for arg_node in node.arguments or ():
                args[arg_node.name.value] = IRArgument(
                    name=arg_node.name.value,
                    type=from_type_node(arg_node.type),
                    description=self._description(arg_node),
                )
            fields[node.name.value] = IRField(
                name=node.name.value,
                type=from_type_node(node.type),
                arguments=args,
                description=self._description(node),
            )
        return fields
