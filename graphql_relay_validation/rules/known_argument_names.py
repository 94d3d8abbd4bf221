# Copyright 2021-present Kensho Technologies, LLC.
import logging
from typing import Any, Callable, List, Sequence, Type

from graphql import GraphQLError, KnownArgumentNamesRule, ValidationRule
from graphql.language.ast import (
    ArgumentNode,
    DirectiveNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    ObjectValueNode,
    StringValueNode,
)
from graphql.language.visitor import SKIP
from graphql.pyutils import did_you_mean, suggestion_list

from ..argument_definitions import (
    get_argument_definitions_directive_arguments,
    get_fragment_argument_definitions,
    get_metadata_field,
)
from ..ast_manipulation import contains_variable_nodes, get_nearest_ancestor_node
from ..directives import (
    ARGUMENT_DEFINITION_DEFAULT_VALUE_KEY,
    ARGUMENT_DEFINITION_KEYS,
    ARGUMENT_DEFINITION_TYPE_KEY,
    ARGUMENT_DEFINITIONS_DIRECTIVE_NAME,
    ARGUMENTS_DIRECTIVE_NAME,
)
from ..type_expressions import get_named_type_name, parse_type_expression


logger = logging.getLogger(__name__)


def missing_argument_definitions_message() -> str:
    return "Missing required argument definitions."


def invalid_argument_definition_metadata_message() -> str:
    return (
        'Metadata of argument definition should be of type "Object" with a "type" and '
        'optional "defaultValue" key.'
    )


def unknown_metadata_key_message(key: str) -> str:
    return f'Unknown key "{key}" in argument definition metadata.'


def non_string_type_message() -> str:
    return 'Value for "type" in argument definition metadata must be specified as string literal.'


def unknown_type_message(type_name: str) -> str:
    return f'Unknown type "{type_name}" in argument definition metadata.'


def variable_in_default_value_message() -> str:
    return 'Value for "defaultValue" in argument definition metadata cannot contain variables.'


def no_argument_definitions_message(fragment_name: str) -> str:
    return f'No fragment argument definitions exist for fragment "{fragment_name}".'


def missing_fragment_argument_message(argument_name: str) -> str:
    return f'Missing required fragment argument "{argument_name}".'


def unknown_fragment_argument_message(argument_name: str, suggestions: Sequence[str]) -> str:
    hint = did_you_mean(list(suggestions))
    return f'Unknown fragment argument "{argument_name}".{hint}'


class RelayKnownArgumentNamesRule(ValidationRule):
    """Known argument names, aware of Relay fragment arguments.

    Validates the metadata of @argumentDefinitions, and checks that every @arguments binding on a
    fragment spread names an argument the fragment declares, and that no required argument is
    left unbound. Field arguments and the arguments of all other directives are delegated to
    the rule in default_rule_class.
    """

    default_rule_class: Type[ValidationRule] = KnownArgumentNamesRule

    # Given a misspelled name and the valid names, return the valid names it most resembles.
    suggest: Callable[[str, Sequence[str]], List[str]] = staticmethod(suggestion_list)

    def __init__(self, context: Any) -> None:
        super().__init__(context)
        self.default_rule = self.default_rule_class(context)

    def enter_argument(
        self,
        node: ArgumentNode,
        key: Any,
        parent: Any,
        path: List[Any],
        ancestors: List[Any],
    ) -> Any:
        self.default_rule.enter_argument(node, key, parent, path, ancestors)
        return SKIP

    def enter_directive(
        self,
        node: DirectiveNode,
        key: Any,
        parent: Any,
        path: List[Any],
        ancestors: List[Any],
    ) -> Any:
        directive_name = node.name.value
        if directive_name == ARGUMENT_DEFINITIONS_DIRECTIVE_NAME:
            self._validate_argument_definitions(node)
        elif directive_name == ARGUMENTS_DIRECTIVE_NAME:
            fragment_spread = get_nearest_ancestor_node(ancestors)
            if isinstance(fragment_spread, FragmentSpreadNode):
                fragment_definition = self.context.get_fragment(fragment_spread.name.value)
                # Unknown fragments are reported by the known fragment names rule.
                if fragment_definition is not None:
                    self._validate_fragment_arguments(fragment_definition, fragment_spread, node)
        else:
            self.default_rule.enter_directive(node, key, parent, path, ancestors)
        return SKIP

    def _validate_argument_definitions(self, directive_node: DirectiveNode) -> None:
        """Report malformed metadata in an @argumentDefinitions directive."""
        if not directive_node.arguments:
            self.report_error(GraphQLError(missing_argument_definitions_message(), directive_node))
            return

        for argument_node in directive_node.arguments:
            metadata_node = argument_node.value
            if (
                not isinstance(metadata_node, ObjectValueNode)
                or get_metadata_field(metadata_node, ARGUMENT_DEFINITION_TYPE_KEY) is None
            ):
                self.report_error(
                    GraphQLError(invalid_argument_definition_metadata_message(), metadata_node)
                )
                continue

            for field_node in metadata_node.fields:
                key = field_node.name.value
                if key not in ARGUMENT_DEFINITION_KEYS:
                    self.report_error(
                        GraphQLError(unknown_metadata_key_message(key), field_node.name)
                    )
                elif key == ARGUMENT_DEFINITION_TYPE_KEY:
                    self._validate_type_metadata(field_node.value)
                elif key == ARGUMENT_DEFINITION_DEFAULT_VALUE_KEY:
                    if contains_variable_nodes(field_node.value):
                        self.report_error(
                            GraphQLError(variable_in_default_value_message(), field_node.value)
                        )

    def _validate_type_metadata(self, value_node: Any) -> None:
        """Report a "type" metadata value that is not a string naming a known type."""
        if not isinstance(value_node, StringValueNode):
            self.report_error(GraphQLError(non_string_type_message(), value_node))
            return

        parse_result = parse_type_expression(value_node.value)
        if parse_result.type_node is None:
            self.report_error(GraphQLError(parse_result.error.message, value_node))
            return

        type_name = get_named_type_name(parse_result.type_node)
        if self.context.schema.get_type(type_name) is None:
            self.report_error(GraphQLError(unknown_type_message(type_name), value_node))

    def _validate_fragment_arguments(
        self,
        fragment_definition: FragmentDefinitionNode,
        fragment_spread: FragmentSpreadNode,
        directive_node: DirectiveNode,
    ) -> None:
        """Report unknown and missing bindings in an @arguments directive."""
        fragment_name = fragment_spread.name.value
        argument_definition_nodes = get_argument_definitions_directive_arguments(
            fragment_definition
        )
        if argument_definition_nodes is None:
            self.report_error(
                GraphQLError(no_argument_definitions_message(fragment_name), fragment_spread)
            )
            return

        for argument_definition_node in argument_definition_nodes:
            if not isinstance(argument_definition_node.value, ObjectValueNode):
                logger.warning(
                    'Unexpected metadata of kind "%s" for argument "%s" of fragment "%s".',
                    argument_definition_node.value.kind,
                    argument_definition_node.name.value,
                    fragment_name,
                )

        argument_definitions = get_fragment_argument_definitions(
            self.context.schema, fragment_definition
        )
        bound_argument_names = {argument.name.value for argument in directive_node.arguments or ()}

        for argument_name, argument_definition in argument_definitions.items():
            if argument_definition.is_required and argument_name not in bound_argument_names:
                self.report_error(
                    GraphQLError(missing_fragment_argument_message(argument_name), directive_node)
                )

        for argument_node in directive_node.arguments or ():
            argument_name = argument_node.name.value
            if argument_name not in argument_definitions:
                suggestions = self.suggest(argument_name, list(argument_definitions))
                self.report_error(
                    GraphQLError(
                        unknown_fragment_argument_message(argument_name, suggestions),
                        directive_node,
                    )
                )
