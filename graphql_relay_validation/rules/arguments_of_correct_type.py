# Copyright 2021-present Kensho Technologies, LLC.
from typing import Any, Callable, List, Optional

from graphql import GraphQLError, GraphQLInputType, ValidationRule, value_from_ast
from graphql.language.ast import DirectiveNode, FragmentSpreadNode, ValueNode
from graphql.language.visitor import SKIP
from graphql.pyutils import Undefined

from ..argument_definitions import get_fragment_argument_definitions
from ..ast_manipulation import contains_variable_nodes, get_nearest_ancestor_node
from ..directives import ARGUMENTS_DIRECTIVE_NAME


def bad_fragment_argument_value_message(
    argument_name: str, fragment_name: str, expected_type: GraphQLInputType
) -> str:
    return (
        f'Argument "{argument_name}" for fragment "{fragment_name}" is expected to be of type '
        f'"{expected_type}".'
    )


class RelayArgumentsOfCorrectTypeRule(ValidationRule):
    """Literal values bound through @arguments must be valid for the declared argument types.

    Values that contain variables are checked by the variables in allowed position rule instead,
    and arguments whose type is unknown are not checked at all.
    """

    # Return the Python value of a literal of the given type, or Undefined if it is invalid.
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
        if node.name.value != ARGUMENTS_DIRECTIVE_NAME:
            return None

        fragment_spread = get_nearest_ancestor_node(ancestors)
        if not isinstance(fragment_spread, FragmentSpreadNode):
            return SKIP
        fragment_name = fragment_spread.name.value
        fragment_definition = self.context.get_fragment(fragment_name)
        if fragment_definition is None:
            return SKIP

        argument_definitions = get_fragment_argument_definitions(
            self.context.schema, fragment_definition
        )
        for argument_node in node.arguments or ():
            argument_name = argument_node.name.value
            argument_definition = argument_definitions.get(argument_name)
            if argument_definition is None or argument_definition.schema_type is None:
                continue
            if contains_variable_nodes(argument_node.value):
                continue

            value = self.coerce_value(argument_node.value, argument_definition.schema_type, None)
            if value is Undefined:
                self.report_error(
                    GraphQLError(
                        bad_fragment_argument_value_message(
                            argument_name, fragment_name, argument_definition.schema_type
                        ),
                        argument_node.value,
                    )
                )
        return SKIP
