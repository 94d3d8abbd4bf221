# Copyright 2021-present Kensho Technologies, LLC.
"""Parse and resolve the type expressions found in fragment argument definition metadata.

A fragment argument's type is written as a string, e.g. @argumentDefinitions(ids: {type: "[ID!]"}).
The string uses the type reference grammar of the GraphQL language:

    Type        := NamedType | ListType | NonNullType
    ListType    := "[" Type "]"
    NonNullType := NamedType "!" | ListType "!"

Parsing never consults the schema. Resolution against the schema is a separate step, so that
unknown type names can be reported by the rules that care about them, while every other
consumer simply treats an unresolvable type as unknown and skips the check that needed it.
"""
import logging
from typing import NamedTuple, Optional

from graphql import GraphQLInputType, GraphQLSchema, is_input_type, print_ast, type_from_ast
from graphql.error import GraphQLSyntaxError
from graphql.language.ast import NamedTypeNode, NonNullTypeNode, TypeNode
from graphql.language.parser import parse_type

from .ast_manipulation import get_ast_with_non_null_and_list_stripped


logger = logging.getLogger(__name__)


class TypeExpressionParseResult(NamedTuple):
    """The outcome of parsing a type expression: exactly one of the two fields is set."""

    type_node: Optional[TypeNode]
    error: Optional[GraphQLSyntaxError]

    @property
    def is_valid(self) -> bool:
        """Return True if the type expression was parsed successfully."""
        return self.type_node is not None


def parse_type_expression(type_expression: str) -> TypeExpressionParseResult:
    """Parse a type expression string like "[ID!]!" into a GraphQL type AST.

    Args:
        type_expression: str, the type reference to parse. Insignificant whitespace is ignored.

    Returns:
        TypeExpressionParseResult holding either the parsed TypeNode, or the syntax error
        describing why the string is not a valid type reference
    """
    try:
        type_node = parse_type(type_expression, no_location=True)
    except GraphQLSyntaxError as e:
        logger.debug("Could not parse type expression %r: %s", type_expression, e.message)
        return TypeExpressionParseResult(type_node=None, error=e)

    return TypeExpressionParseResult(type_node=type_node, error=None)


def resolve_input_type(schema: GraphQLSchema, type_node: TypeNode) -> Optional[GraphQLInputType]:
    """Return the schema input type the type AST refers to, or None if there is no such type.

    None is returned both when the named type does not exist in the schema, and when it exists
    but is not an input type (e.g. an object type).
    """
    schema_type = type_from_ast(schema, type_node)
    if schema_type is None:
        logger.debug("Type %s is not defined in the schema.", print_type_expression(type_node))
        return None
    if not is_input_type(schema_type):
        logger.debug("Type %s is not an input type.", schema_type)
        return None
    return schema_type


def print_type_expression(type_node: TypeNode) -> str:
    """Return the canonical string form of the type AST, e.g. "[ID!]!"."""
    return print_ast(type_node)


def get_named_type_name(type_node: TypeNode) -> str:
    """Return the name of the named type inside any list and non-null wrappers."""
    named_type_node = get_ast_with_non_null_and_list_stripped(type_node)
    if not isinstance(named_type_node, NamedTypeNode):
        raise AssertionError(
            "Expected a NamedTypeNode after stripping wrappers, but got: {}".format(
                named_type_node
            )
        )
    return named_type_node.name.value


def is_non_null_type_node(type_node: TypeNode) -> bool:
    """Return True if the outermost layer of the type AST is a non-null wrapper."""
    return isinstance(type_node, NonNullTypeNode)
