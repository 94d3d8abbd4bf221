# Copyright 2021-present Kensho Technologies, LLC.
"""Common test data and helper functions."""
from typing import List, Sequence, Tuple, Type

from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSchema,
    TypeInfo,
    ValidationContext,
    build_schema,
    parse,
    validate,
)
from graphql.language.ast import FragmentDefinitionNode, OperationDefinitionNode
from graphql.validation import ASTValidationRule

from ..directives import get_schema_with_relay_directives


# A small schema with a Relay-style connection. It declares none of the Relay directives:
# the helpers below add them, the same way the validation entry points do.
SCHEMA_TEXT = """
    schema {
        query: Query
    }

    type Foo {
        id: ID!
        bar: String
        baz(cond: Boolean): Boolean
        name(format: String!): String
        friends(first: Int, after: String, last: Int, before: String): FooConnection
    }

    type FooConnection {
        edges: [FooEdge]
        pageInfo: PageInfo!
    }

    type FooEdge {
        cursor: String
        node: Foo
    }

    type PageInfo {
        hasNextPage: Boolean!
        hasPreviousPage: Boolean!
        startCursor: String
        endCursor: String
    }

    input FooFilter {
        bar: String
        limit: Int
    }

    type Query {
        foo: Foo
        node(id: ID!): Foo
        nodes(ids: [ID!]): [Foo]
        search(filter: FooFilter, limit: Int = 10): [Foo]
        fooConnection(first: Int, after: String, last: Int, before: String): FooConnection
    }
"""


def get_schema() -> GraphQLSchema:
    """Return the test schema, with the Relay directives added."""
    return get_schema_with_relay_directives(build_schema(SCHEMA_TEXT))


def get_validation_context(document_text: str) -> Tuple[ValidationContext, List[GraphQLError]]:
    """Parse the document, returning a validation context for it and the list it reports into."""
    schema = get_schema()
    document = parse(document_text)
    reported_errors: List[GraphQLError] = []
    context = ValidationContext(schema, document, TypeInfo(schema), reported_errors.append)
    return context, reported_errors


def get_operation(document: DocumentNode, operation_name: str) -> OperationDefinitionNode:
    """Return the operation with the given name from the document."""
    for definition in document.definitions:
        if isinstance(definition, OperationDefinitionNode) and definition.name is not None:
            if definition.name.value == operation_name:
                return definition
    raise AssertionError(f"No operation named {operation_name} in document.")


def get_fragment(document: DocumentNode, fragment_name: str) -> FragmentDefinitionNode:
    """Return the fragment with the given name from the document."""
    for definition in document.definitions:
        if isinstance(definition, FragmentDefinitionNode):
            if definition.name.value == fragment_name:
                return definition
    raise AssertionError(f"No fragment named {fragment_name} in document.")


def get_validation_errors(
    document_text: str, rules: Sequence[Type[ASTValidationRule]]
) -> List[GraphQLError]:
    """Validate the document against the test schema using only the given rules."""
    return validate(get_schema(), parse(document_text), rules)


def get_validation_messages(
    document_text: str, rules: Sequence[Type[ASTValidationRule]]
) -> List[str]:
    """Return the messages of the errors that validating the document with the rules produces."""
    return [error.message for error in get_validation_errors(document_text, rules)]
