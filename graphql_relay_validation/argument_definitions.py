# Copyright 2021-present Kensho Technologies, LLC.
"""Variable and fragment argument definitions, in a form shared by all the Relay rules.

Operations declare variables with ordinary variable definitions. Fragments declare arguments
with the @argumentDefinitions directive, e.g.:

    fragment UserProfile on User
    @argumentDefinitions(size: {type: "Int!", defaultValue: 32}) {
        picture(size: $size) { uri }
    }

Inside the fragment body, $size refers to the fragment argument rather than to a variable of
the enclosing operation. Both kinds of definitions are represented here so that the rules can
treat them uniformly, and tell them apart with isinstance() where the distinction matters.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from graphql import GraphQLInputType, GraphQLSchema
from graphql.language.ast import (
    ArgumentNode,
    FragmentDefinitionNode,
    NameNode,
    ObjectFieldNode,
    ObjectValueNode,
    OperationDefinitionNode,
    StringValueNode,
    TypeNode,
    ValueNode,
    VariableNode,
)

from .directives import (
    ARGUMENT_DEFINITION_DEFAULT_VALUE_KEY,
    ARGUMENT_DEFINITION_TYPE_KEY,
    ARGUMENT_DEFINITIONS_DIRECTIVE_NAME,
)
from .type_expressions import is_non_null_type_node, parse_type_expression, resolve_input_type


@dataclass(frozen=True)
class FragmentArgumentDefinition:
    """An argument declared by a fragment's @argumentDefinitions directive."""

    name: str
    # The name of the directive argument that declares the fragment argument.
    node: NameNode
    # None if the "type" key is missing, not a string, or not a valid type expression.
    type_node: Optional[TypeNode]
    # None if type_node is None, or if it does not name an input type of the schema.
    schema_type: Optional[GraphQLInputType]
    default_value: Optional[ValueNode]

    @property
    def is_required(self) -> bool:
        """Return True if every spread of the fragment has to bind a value for this argument."""
        return (
            self.type_node is not None
            and is_non_null_type_node(self.type_node)
            and self.default_value is None
        )


@dataclass(frozen=True)
class OperationVariableDefinition:
    """A variable declared by an operation."""

    name: str
    node: VariableNode
    type_node: TypeNode
    # None if type_node does not name an input type of the schema.
    schema_type: Optional[GraphQLInputType]
    default_value: Optional[ValueNode]


VariableOrArgumentDefinition = Union[FragmentArgumentDefinition, OperationVariableDefinition]

# Variable or argument name -> its definition, in declaration order.
DefinitionsByName = Dict[str, VariableOrArgumentDefinition]


def get_argument_definitions_directive_arguments(
    fragment_definition: FragmentDefinitionNode,
) -> Optional[List[ArgumentNode]]:
    """Return the arguments of the fragment's @argumentDefinitions directive.

    Only the directives applied directly to the fragment definition are considered.

    Args:
        fragment_definition: the fragment whose argument definitions to look up

    Returns:
        None if the fragment has no @argumentDefinitions directive. Otherwise, the list of
        directive arguments, one per declared fragment argument. The list is empty if the
        directive was applied without any arguments.
    """
    for directive in fragment_definition.directives or ():
        if directive.name.value == ARGUMENT_DEFINITIONS_DIRECTIVE_NAME:
            return list(directive.arguments or ())
    return None


def get_metadata_field(metadata_node: ObjectValueNode, key: str) -> Optional[ObjectFieldNode]:
    """Return the field of the argument definition metadata object with the given key, if any."""
    for field in metadata_node.fields:
        if field.name.value == key:
            return field
    return None


def _make_fragment_argument_definition(
    schema: GraphQLSchema, argument_node: ArgumentNode
) -> FragmentArgumentDefinition:
    """Build the definition of a single fragment argument, omitting any unparseable parts."""
    type_node = None
    schema_type = None
    default_value = None

    metadata_node = argument_node.value
    if isinstance(metadata_node, ObjectValueNode):
        type_field = get_metadata_field(metadata_node, ARGUMENT_DEFINITION_TYPE_KEY)
        if type_field is not None and isinstance(type_field.value, StringValueNode):
            type_node = parse_type_expression(type_field.value.value).type_node

        default_value_field = get_metadata_field(
            metadata_node, ARGUMENT_DEFINITION_DEFAULT_VALUE_KEY
        )
        if default_value_field is not None:
            default_value = default_value_field.value

    if type_node is not None:
        schema_type = resolve_input_type(schema, type_node)

    return FragmentArgumentDefinition(
        name=argument_node.name.value,
        node=argument_node.name,
        type_node=type_node,
        schema_type=schema_type,
        default_value=default_value,
    )


def get_fragment_argument_definitions(
    schema: GraphQLSchema, fragment_definition: FragmentDefinitionNode
) -> Dict[str, FragmentArgumentDefinition]:
    """Return the arguments declared by the fragment, keyed by argument name.

    The result is empty both when the fragment has no @argumentDefinitions directive and when
    the directive has no arguments; use get_argument_definitions_directive_arguments() to tell
    those cases apart. Malformed metadata never raises: the parts of a definition that could not
    be understood are simply left unset.
    """
    argument_nodes = get_argument_definitions_directive_arguments(fragment_definition)
    if argument_nodes is None:
        return {}

    return {
        argument_node.name.value: _make_fragment_argument_definition(schema, argument_node)
        for argument_node in argument_nodes
    }


def get_operation_variable_definitions(
    schema: GraphQLSchema, operation_definition: OperationDefinitionNode
) -> Dict[str, OperationVariableDefinition]:
    """Return the variables declared by the operation, keyed by variable name."""
    result = {}
    for variable_definition in operation_definition.variable_definitions or ():
        variable_name = variable_definition.variable.name.value
        result[variable_name] = OperationVariableDefinition(
            name=variable_name,
            node=variable_definition.variable,
            type_node=variable_definition.type,
            schema_type=resolve_input_type(schema, variable_definition.type),
            default_value=variable_definition.default_value,
        )
    return result


def get_root_definitions(
    schema: GraphQLSchema, root: Union[OperationDefinitionNode, FragmentDefinitionNode]
) -> DefinitionsByName:
    """Return what the root itself declares: variables of an operation, arguments of a fragment."""
    if isinstance(root, OperationDefinitionNode):
        return dict(get_operation_variable_definitions(schema, root))
    elif isinstance(root, FragmentDefinitionNode):
        return dict(get_fragment_argument_definitions(schema, root))
    else:
        raise AssertionError(
            "Expected an operation or fragment definition, but got: {} {}".format(type(root), root)
        )
