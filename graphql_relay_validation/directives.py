# Copyright 2021-present Kensho Technologies, LLC.
from collections import OrderedDict
from itertools import chain

from graphql import (
    DirectiveLocation,
    GraphQLArgument,
    GraphQLBoolean,
    GraphQLDirective,
    GraphQLList,
    GraphQLNonNull,
    GraphQLSchema,
    GraphQLString,
)
from graphql.utilities.print_schema import print_directive


ARGUMENT_DEFINITIONS_DIRECTIVE_NAME = "argumentDefinitions"
ARGUMENTS_DIRECTIVE_NAME = "arguments"
CONNECTION_DIRECTIVE_NAME = "connection"

# Keys allowed in the object literal describing a single fragment argument definition.
ARGUMENT_DEFINITION_TYPE_KEY = "type"
ARGUMENT_DEFINITION_DEFAULT_VALUE_KEY = "defaultValue"
ARGUMENT_DEFINITION_KEYS = frozenset(
    {ARGUMENT_DEFINITION_TYPE_KEY, ARGUMENT_DEFINITION_DEFAULT_VALUE_KEY}
)


# Declares the arguments a fragment accepts. Every directive argument is one fragment argument,
# and its value is an object literal: {type: "<type expression>", defaultValue: <literal>}.
# The argument names are arbitrary, so none are declared here.
ArgumentDefinitionsDirective = GraphQLDirective(
    name=ARGUMENT_DEFINITIONS_DIRECTIVE_NAME,
    locations=[
        DirectiveLocation.FRAGMENT_DEFINITION,
    ],
)


# Binds values to the arguments declared by the @argumentDefinitions of the spread fragment.
ArgumentsDirective = GraphQLDirective(
    name=ARGUMENTS_DIRECTIVE_NAME,
    locations=[
        DirectiveLocation.FRAGMENT_SPREAD,
    ],
)


ConnectionDirective = GraphQLDirective(
    name=CONNECTION_DIRECTIVE_NAME,
    args=OrderedDict(
        [
            (
                "key",
                GraphQLArgument(
                    type_=GraphQLNonNull(GraphQLString),
                    description="Name under which the connection is stored in the client store.",
                ),
            ),
            (
                "filters",
                GraphQLArgument(
                    type_=GraphQLList(GraphQLString),
                    description="Arguments of the connection field that identify its edges.",
                ),
            ),
            (
                "handler",
                GraphQLArgument(
                    type_=GraphQLString,
                    description="Name of a custom connection handler.",
                ),
            ),
        ]
    ),
    locations=[
        DirectiveLocation.FIELD,
    ],
)


RelayDirective = GraphQLDirective(
    name="relay",
    args=OrderedDict(
        [
            ("mask", GraphQLArgument(type_=GraphQLBoolean)),
            ("plural", GraphQLArgument(type_=GraphQLBoolean)),
        ]
    ),
    locations=[
        DirectiveLocation.FRAGMENT_DEFINITION,
        DirectiveLocation.FRAGMENT_SPREAD,
    ],
)


RefetchableDirective = GraphQLDirective(
    name="refetchable",
    args=OrderedDict(
        [
            ("queryName", GraphQLArgument(type_=GraphQLNonNull(GraphQLString))),
        ]
    ),
    locations=[
        DirectiveLocation.FRAGMENT_DEFINITION,
    ],
)


RELAY_DIRECTIVES = (
    ArgumentDefinitionsDirective,
    ArgumentsDirective,
    ConnectionDirective,
    RelayDirective,
    RefetchableDirective,
)

RELAY_DIRECTIVE_NAMES = frozenset(directive.name for directive in RELAY_DIRECTIVES)


def get_schema_with_relay_directives(schema: GraphQLSchema) -> GraphQLSchema:
    """Return a copy of the schema that also defines the Relay directives.

    Directives of the given schema that share a name with a Relay directive are replaced,
    so that SDL which already declares e.g. "directive @arguments on FRAGMENT_SPREAD" can be
    passed in without producing a schema with duplicate directives.

    Args:
        schema: GraphQL schema describing the data the documents query

    Returns:
        GraphQLSchema with the same types, and with the Relay directives added
    """
    new_directives = list(
        chain(
            (
                directive
                for directive in schema.directives
                if directive.name not in RELAY_DIRECTIVE_NAMES
            ),
            RELAY_DIRECTIVES,
        )
    )

    schema_arguments = schema.to_kwargs()
    schema_arguments["directives"] = new_directives
    return GraphQLSchema(**schema_arguments)


def print_relay_directives() -> str:
    """Return the SDL declaring every Relay directive."""
    return "\n\n".join(print_directive(directive) for directive in RELAY_DIRECTIVES)
