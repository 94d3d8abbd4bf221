# Copyright 2021-present Kensho Technologies, LLC.
from typing import Any

from graphql import GraphQLError, ValidationRule
from graphql.language.ast import FragmentDefinitionNode
from graphql.language.visitor import SKIP

from ..argument_definitions import get_fragment_argument_definitions
from ..ast_manipulation import get_variable_nodes


def unused_argument_message(argument_name: str, fragment_name: str) -> str:
    return f'Argument "{argument_name}" in fragment "{fragment_name}" is never used.'


class RelayNoUnusedArgumentsRule(ValidationRule):
    """Every argument a fragment declares must be used within the fragment's selections."""

    def enter_fragment_definition(self, node: FragmentDefinitionNode, *args: Any) -> Any:
        fragment_name = node.name.value
        used_names = {
            variable_node.name.value for variable_node in get_variable_nodes(node.selection_set)
        }
        argument_definitions = get_fragment_argument_definitions(self.context.schema, node)
        for argument_name, argument_definition in argument_definitions.items():
            if argument_name not in used_names:
                self.report_error(
                    GraphQLError(
                        unused_argument_message(argument_name, fragment_name),
                        argument_definition.node,
                    )
                )
        return SKIP
