# Copyright 2021-present Kensho Technologies, LLC.
from typing import Any, Callable, List, Optional

from graphql import GraphQLError, GraphQLInputType, ValidationRule, value_from_ast
from graphql.language.ast import (
    DirectiveNode,
    FragmentDefinitionNode,
    NullValueNode,
    ObjectValueNode,
    ValueNode,
)
from graphql.language.visitor import SKIP
from graphql.pyutils import Undefined

from ..argument_definitions import get_fragment_argument_definitions, get_metadata_field
from ..ast_manipulation import (
    contains_variable_nodes,
    get_nearest_ancestor_node,
    make_non_nullable,
)
from ..directives import ARGUMENT_DEFINITION_DEFAULT_VALUE_KEY, ARGUMENT_DEFINITIONS_DIRECTIVE_NAME


def bad_default_value_message(
    argument_name: str, fragment_name: str, expected_type: GraphQLInputType
) -> str:
    return (
        f'defaultValue for argument "{argument_name}" on fragment "{fragment_name}" is expected '
        f'to be of type "{make_non_nullable(expected_type)}".'
    )


def null_default_value_message(argument_name: str, fragment_name: str) -> str:
    return (
        f'defaultValue for argument "{argument_name}" on fragment "{fragment_name}" cannot be '
        f"null. Instead, omit defaultValue."
    )


class RelayDefaultValueOfCorrectTypeRule(ValidationRule):
    """Default values in @argumentDefinitions must be valid for the declared argument types.

    A default value is substituted for a missing argument, so it must satisfy the non-null
    version of the declared type. An explicit null default is never useful, and gets its own
    message.
    """

    coerce_value: Callable[[ValueNode, GraphQLInputType, Optional[Any]], Any] = staticmethod(
        value_from_ast
    )

    def enter_directive(
        self,
        node: DirectiveNode,
        key: Any,
        parent: Any,
        path: List[Any],
        ancestors: List[Any],
    ) -> Any:
        if node.name.value != ARGUMENT_DEFINITIONS_DIRECTIVE_NAME:
            return None

        fragment_definition = get_nearest_ancestor_node(ancestors)
        if not isinstance(fragment_definition, FragmentDefinitionNode):
            return SKIP
        fragment_name = fragment_definition.name.value

        argument_definitions = get_fragment_argument_definitions(
            self.context.schema, fragment_definition
        )
        for argument_node in node.arguments or ():
            if not isinstance(argument_node.value, ObjectValueNode):
                continue
            default_value_field = get_metadata_field(
                argument_node.value, ARGUMENT_DEFINITION_DEFAULT_VALUE_KEY
            )
            if default_value_field is None:
                continue

            argument_name = argument_node.name.value
            argument_definition = argument_definitions.get(argument_name)
            # Only the first @argumentDefinitions directive of a fragment declares arguments.
            if argument_definition is None or argument_definition.node is not argument_node.name:
                continue

            schema_type = argument_definition.schema_type
            default_value = default_value_field.value
            # Variables in default values are reported by the known argument names rule.
            if schema_type is None or contains_variable_nodes(default_value):
                continue

            if isinstance(default_value, NullValueNode):
                message = null_default_value_message(argument_name, fragment_name)
            elif self.coerce_value(default_value, schema_type, None) is Undefined:
                message = bad_default_value_message(argument_name, fragment_name, schema_type)
            else:
                continue

            self.report_error(GraphQLError(message, default_value))
        return SKIP
