# Copyright 2021-present Kensho Technologies, LLC.
from typing import Any, List, Optional, Sequence

from graphql import GraphQLNonNull, GraphQLType, is_non_null_type
from graphql.error import GraphQLSyntaxError
from graphql.language.ast import (
    DocumentNode,
    FieldNode,
    ListTypeNode,
    Node,
    NonNullTypeNode,
    TypeNode,
    VariableNode,
)
from graphql.language.parser import parse
from graphql.language.visitor import BREAK, Visitor, visit

from .exceptions import GraphQLParsingError


def get_ast_field_name(ast: Any) -> str:
    """Return the field name for the given AST node."""
    return ast.name.value


def get_human_friendly_field_name(ast: FieldNode) -> str:
    """Return the name under which the field appears in the response: its alias, if any."""
    if ast.alias is not None:
        return ast.alias.value
    return get_ast_field_name(ast)


def safe_parse_graphql(graphql_string: str) -> DocumentNode:
    """Return an AST representation of the given GraphQL input, reraising GraphQL library errors."""
    try:
        ast = parse(graphql_string)
    except GraphQLSyntaxError as e:
        raise GraphQLParsingError(e) from e

    return ast


def get_ast_with_non_null_and_list_stripped(ast: TypeNode) -> TypeNode:
    """Strip any NonNullType or List layers around the AST, return the underlying AST."""
    while isinstance(ast, (NonNullTypeNode, ListTypeNode)):
        ast = ast.type
    return ast


def get_nearest_ancestor_node(ancestors: Sequence[Any]) -> Optional[Node]:
    """Return the closest AST node among the visitor ancestors, skipping node lists."""
    for ancestor in reversed(ancestors):
        if isinstance(ancestor, Node):
            return ancestor
    return None


class _VariableFinderVisitor(Visitor):
    def __init__(self) -> None:
        super().__init__()
        self.found = False

    def enter_variable(self, node: VariableNode, *args: Any) -> Any:
        self.found = True
        return BREAK


def contains_variable_nodes(ast: Node) -> bool:
    """Return True if a variable reference appears anywhere within the given AST."""
    visitor = _VariableFinderVisitor()
    visit(ast, visitor)
    return visitor.found


def make_non_nullable(graphql_type: GraphQLType) -> GraphQLType:
    """Wrap the type in GraphQLNonNull, unless it is already non-null."""
    if is_non_null_type(graphql_type):
        return graphql_type
    return GraphQLNonNull(graphql_type)


class _VariableCollectorVisitor(Visitor):
    def __init__(self) -> None:
        super().__init__()
        self.variable_nodes: List[VariableNode] = []

    def enter_variable(self, node: VariableNode, *args: Any) -> None:
        self.variable_nodes.append(node)


def get_variable_nodes(ast: Node) -> List[VariableNode]:
    """Return every variable reference within the given AST, in document order."""
    visitor = _VariableCollectorVisitor()
    visit(ast, visitor)
    return visitor.variable_nodes
