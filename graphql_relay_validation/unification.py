# Copyright 2021-present Kensho Technologies, LLC.
"""Reconcile the variable definitions of all operations that use a shared fragment.

A fragment may use variables it does not declare, in which case every operation that spreads
the fragment, directly or through other fragments, has to define them. Those operations may
declare the same variable differently, e.g. one as "ID!" and another as "ID" with a default.
To validate the fragment in isolation, we compute a single definition per variable that is
compatible with every one of those operations.
"""
from typing import Dict, FrozenSet, List, NamedTuple, Optional, Sequence

import funcy
from graphql import GraphQLNonNull, GraphQLSchema, ValidationContext, is_non_null_type
from graphql.language.ast import NonNullTypeNode, NullValueNode, OperationDefinitionNode
from graphql.utilities import is_type_sub_type_of

from .argument_definitions import OperationVariableDefinition, get_operation_variable_definitions


class UnifiedVariables(NamedTuple):
    """The variable definitions shared by a group of operations."""

    # Variable name -> a definition compatible with every operation's definition of it.
    definitions: Dict[str, OperationVariableDefinition]

    # Variables defined by every operation, but in ways that no single definition reconciles.
    conflicting_names: FrozenSet[str]


def get_operations_referencing_fragment(
    context: ValidationContext, fragment_name: str
) -> List[OperationDefinitionNode]:
    """Return the operations of the document that spread the named fragment, even indirectly."""
    result = []
    for definition in context.document.definitions:
        if isinstance(definition, OperationDefinitionNode):
            referenced_fragments = context.get_recursively_referenced_fragments(definition)
            if any(fragment.name.value == fragment_name for fragment in referenced_fragments):
                result.append(definition)
    return result


def _has_non_null_default_value(definition: OperationVariableDefinition) -> bool:
    """Return True if the variable has a default value, and that value is not null."""
    return definition.default_value is not None and not isinstance(
        definition.default_value, NullValueNode
    )


def _is_always_provided(definition: OperationVariableDefinition) -> bool:
    """Return True if the variable cannot be null when the operation executes."""
    return is_non_null_type(definition.schema_type) or _has_non_null_default_value(definition)


def _find_lowest_common_definition(
    schema: GraphQLSchema, definitions: Sequence[OperationVariableDefinition]
) -> Optional[OperationVariableDefinition]:
    """Return the definition whose type every other definition's type is a subtype of, if any."""
    return funcy.first(
        candidate
        for candidate in definitions
        if all(
            is_type_sub_type_of(schema, other.schema_type, candidate.schema_type)
            for other in definitions
        )
    )


def _unify_definitions(
    schema: GraphQLSchema, definitions: Sequence[OperationVariableDefinition]
) -> Optional[OperationVariableDefinition]:
    """Return a definition compatible with all of the given ones, or None if there is none.

    Args:
        schema: schema the operations are written against
        definitions: non-empty sequence with one operation's definition of the same variable
                     per operation

    Returns:
        the unified definition, or None if the definitions' types conflict
    """
    if any(definition.schema_type is None for definition in definitions):
        # The type of at least one declaration is unknown, so there is nothing to unify:
        # keep the variable defined, but leave its type unknown so that no check relies on it.
        representative = definitions[0]
        return OperationVariableDefinition(
            name=representative.name,
            node=representative.node,
            type_node=representative.type_node,
            schema_type=None,
            default_value=None,
        )

    lowest_common_definition = _find_lowest_common_definition(schema, definitions)
    if lowest_common_definition is None:
        return None

    if all(_has_non_null_default_value(definition) for definition in definitions):
        default_value = lowest_common_definition.default_value
    else:
        default_value = None

    if is_non_null_type(lowest_common_definition.schema_type):
        return OperationVariableDefinition(
            name=lowest_common_definition.name,
            node=lowest_common_definition.node,
            type_node=lowest_common_definition.type_node,
            schema_type=lowest_common_definition.schema_type,
            default_value=default_value,
        )

    if all(_is_always_provided(definition) for definition in definitions):
        # Every operation either requires the variable or falls back to a non-null default,
        # so by the time the fragment is reached the variable always has a non-null value.
        return OperationVariableDefinition(
            name=lowest_common_definition.name,
            node=lowest_common_definition.node,
            type_node=NonNullTypeNode(
                type=lowest_common_definition.type_node,
                loc=lowest_common_definition.type_node.loc,
            ),
            schema_type=GraphQLNonNull(lowest_common_definition.schema_type),
            default_value=None,
        )

    return OperationVariableDefinition(
        name=lowest_common_definition.name,
        node=lowest_common_definition.node,
        type_node=lowest_common_definition.type_node,
        schema_type=lowest_common_definition.schema_type,
        default_value=None,
    )


def unify_operation_variable_definitions(
    context: ValidationContext, operations: Sequence[OperationDefinitionNode]
) -> UnifiedVariables:
    """Compute the variable definitions that the given operations all agree on.

    Only variables defined by every one of the operations are considered. For each of them,
    the definition whose type is a supertype of all the others' types is chosen. If that type is
    nullable, but each operation either declares the variable non-null or gives it a non-null
    default value, the unified definition is made non-null.

    Args:
        context: validation context of the document containing the operations
        operations: operations whose variable definitions to unify

    Returns:
        UnifiedVariables with the unified definitions in the first operation's declaration order,
        and the names of the variables every operation defines, but in conflicting ways
    """
    if not operations:
        return UnifiedVariables(definitions={}, conflicting_names=frozenset())

    schema = context.schema
    definitions_per_operation = [
        get_operation_variable_definitions(schema, operation) for operation in operations
    ]

    shared_names = [
        variable_name
        for variable_name in definitions_per_operation[0]
        if all(variable_name in definitions for definitions in definitions_per_operation)
    ]

    unified_definitions = {}
    conflicting_names = set()
    for variable_name in shared_names:
        unified_definition = _unify_definitions(
            schema, [definitions[variable_name] for definitions in definitions_per_operation]
        )
        if unified_definition is None:
            conflicting_names.add(variable_name)
        else:
            unified_definitions[variable_name] = unified_definition

    return UnifiedVariables(
        definitions=unified_definitions, conflicting_names=frozenset(conflicting_names)
    )


def get_unified_variable_definitions_for_fragment(
    context: ValidationContext, fragment_name: str
) -> UnifiedVariables:
    """Unify the variable definitions of all operations using the named fragment."""
    operations = get_operations_referencing_fragment(context, fragment_name)
    return unify_operation_variable_definitions(context, operations)
