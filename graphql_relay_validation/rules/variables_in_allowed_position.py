# Copyright 2021-present Kensho Technologies, LLC.
import logging
from typing import Any, List, Optional, Set

from graphql import (
    GraphQLError,
    GraphQLInputType,
    GraphQLSchema,
    ValidationRule,
    is_non_null_type,
)
from graphql.language.ast import (
    FragmentDefinitionNode,
    NullValueNode,
    OperationDefinitionNode,
    ValueNode,
)
from graphql.utilities import is_type_sub_type_of

from ..unification import get_unified_variable_definitions_for_fragment
from ..variable_usages import (
    DefinitionOrigin,
    VariableUsageWithDefinition,
    get_recursive_variable_usages,
)


logger = logging.getLogger(__name__)


def bad_variable_position_message(
    variable_name: str, variable_type: str, expected_type: str
) -> str:
    return (
        f'Variable "${variable_name}" of type "{variable_type}" used in position '
        f'expecting type "{expected_type}".'
    )


def allowed_variable_usage(
    schema: GraphQLSchema,
    variable_type: GraphQLInputType,
    variable_default_value: Optional[ValueNode],
    location_type: GraphQLInputType,
    location_has_default_value: bool,
) -> bool:
    """Return True if a variable of the given type may be used where location_type is expected.

    A nullable variable may be used in a non-null position only if either the variable or the
    position supplies a non-null default value. Otherwise, the variable's type has to be a
    subtype of the position's type.
    """
    if is_non_null_type(location_type) and not is_non_null_type(variable_type):
        has_non_null_variable_default_value = variable_default_value is not None and not (
            isinstance(variable_default_value, NullValueNode)
        )
        if not has_non_null_variable_default_value and not location_has_default_value:
            return False
        return is_type_sub_type_of(schema, variable_type, location_type.of_type)
    return is_type_sub_type_of(schema, variable_type, location_type)


class RelayVariablesInAllowedPositionRule(ValidationRule):
    """Variables and fragment arguments must be compatible with the positions they are used in.

    A fragment is checked on its own: usages of its own arguments against the argument
    definitions, and usages of operation variables against the definitions that all operations
    using the fragment agree on. Each operation is then checked against its own variable
    definitions, covering its body and every fragment it spreads. Errors found inside fragments
    are reported only once, however many operations spread the fragment.
    """

    def __init__(self, context: Any) -> None:
        super().__init__(context)
        self.reported_fragment_messages: Set[str] = set()

    def enter_fragment_definition(self, node: FragmentDefinitionNode, *args: Any) -> None:
        unified_variables = get_unified_variable_definitions_for_fragment(
            self.context, node.name.value
        )
        for usage in get_recursive_variable_usages(
            self.context, node, unified_variables.definitions
        ):
            message = self._get_bad_position_message(usage)
            if message is None:
                continue

            if usage.origin == DefinitionOrigin.LOCAL:
                self.report_error(GraphQLError(message, [usage.definition.node, usage.node]))
            else:
                self._report_fragment_error_once(message, [usage.node])

    def enter_operation_definition(self, node: OperationDefinitionNode, *args: Any) -> None:
        for usage in get_recursive_variable_usages(self.context, node):
            if usage.is_fragment_argument_usage:
                # Checked when the fragment declaring the argument is entered.
                continue

            message = self._get_bad_position_message(usage)
            if message is None:
                continue

            if usage.using_fragment_name is None:
                self.report_error(GraphQLError(message, [usage.node, node]))
            else:
                self._report_fragment_error_once(message, [node])

    def _report_fragment_error_once(self, message: str, nodes: List[Any]) -> None:
        """Report the error, unless an error with the same message was already reported."""
        if message in self.reported_fragment_messages:
            logger.debug("Suppressing repeated error: %s", message)
            return
        self.reported_fragment_messages.add(message)
        self.report_error(GraphQLError(message, nodes))

    def _get_bad_position_message(self, usage: VariableUsageWithDefinition) -> Optional[str]:
        """Return the error message for the usage, or None if its position allows it."""
        definition = usage.definition
        if definition is None or definition.schema_type is None or usage.type is None:
            # Undefined variables and unknown types are reported by other rules.
            return None

        if allowed_variable_usage(
            self.context.schema,
            definition.schema_type,
            definition.default_value,
            usage.type,
            usage.has_default_value,
        ):
            return None

        return bad_variable_position_message(
            usage.variable_name, str(definition.schema_type), str(usage.type)
        )
