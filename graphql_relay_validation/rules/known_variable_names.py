# Copyright 2021-present Kensho Technologies, LLC.
from typing import Any, Optional, Set

from graphql import GraphQLError, ValidationRule
from graphql.language.ast import FragmentDefinitionNode, OperationDefinitionNode

from ..unification import (
    get_operations_referencing_fragment,
    unify_operation_variable_definitions,
)
from ..variable_usages import get_recursive_variable_usages


def undefined_variable_message(
    variable_name: str, operation_name: Optional[str], using_fragment_name: Optional[str]
) -> str:
    if operation_name is None:
        message = f'Variable "${variable_name}" is not defined'
    else:
        message = f'Variable "${variable_name}" is not defined by operation "{operation_name}"'
    if using_fragment_name is not None:
        message += f' (used by fragment "{using_fragment_name}")'
    return message + "."


def undefined_fragment_variable_message(variable_name: str, fragment_name: str) -> str:
    return f'Variable "${variable_name}" is not defined by fragment "{fragment_name}".'


def incompatible_fragment_variable_message(variable_name: str, fragment_name: str) -> str:
    return (
        f'Variable "${variable_name}" is not defined by fragment "{fragment_name}" or defined '
        f'in a compatible way across all operations using "{fragment_name}".'
    )


class RelayKnownVariableNamesRule(ValidationRule):
    """Every variable used must be defined by a fragment argument or an operation variable.

    Operations are checked together with all the fragments they spread: a usage of a name that
    neither the containing fragment declares nor the operation defines is reported once per
    operation. Fragments are also checked on their own, which catches fragments no operation
    uses, and variables that the operations using a fragment all define, but incompatibly.
    """

    def leave_operation_definition(self, node: OperationDefinitionNode, *args: Any) -> None:
        operation_name = node.name.value if node.name else None
        reported_messages: Set[str] = set()
        for usage in get_recursive_variable_usages(self.context, node):
            if usage.definition is not None:
                continue

            message = undefined_variable_message(
                usage.variable_name, operation_name, usage.using_fragment_name
            )
            if usage.using_fragment_name is not None:
                # A fragment may be spread many times, but its usages are the same every time.
                if message in reported_messages:
                    continue
                reported_messages.add(message)

            self.report_error(GraphQLError(message, [usage.node, node]))

    def leave_fragment_definition(self, node: FragmentDefinitionNode, *args: Any) -> None:
        fragment_name = node.name.value
        operations = get_operations_referencing_fragment(self.context, fragment_name)
        unified_variables = unify_operation_variable_definitions(self.context, operations)

        for usage in get_recursive_variable_usages(
            self.context, node, unified_variables.definitions
        ):
            if usage.definition is not None:
                continue

            variable_name = usage.variable_name
            if not operations:
                message = undefined_fragment_variable_message(variable_name, fragment_name)
            elif variable_name in unified_variables.conflicting_names:
                message = incompatible_fragment_variable_message(variable_name, fragment_name)
            else:
                # Some operation using the fragment does not define the variable at all,
                # which is reported when that operation is checked.
                continue

            self.report_error(GraphQLError(message, usage.node))
