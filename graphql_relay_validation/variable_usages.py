# Copyright 2021-present Kensho Technologies, LLC.
"""Find variable usages in operations and fragments, aware of Relay fragment arguments.

The usage collection mirrors ValidationContext.get_variable_usages() from graphql-core, with one
difference: values bound through @arguments on a fragment spread have no position in the schema,
so their expected type and default value come from the @argumentDefinitions of the spread
fragment instead.

The recursive aggregation then pairs every usage with the definition that governs it. Inside a
fragment, a name declared by the fragment's own @argumentDefinitions refers to that argument;
any other name refers to a variable of the enclosing operation.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from graphql import GraphQLInputType, TypeInfo, TypeInfoVisitor, ValidationContext
from graphql.language.ast import (
    ArgumentNode,
    DirectiveNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    OperationDefinitionNode,
    VariableDefinitionNode,
    VariableNode,
)
from graphql.language.visitor import SKIP, Visitor, visit
from graphql.pyutils import Undefined

from .argument_definitions import (
    FragmentArgumentDefinition,
    VariableOrArgumentDefinition,
    get_fragment_argument_definitions,
    get_root_definitions,
)
from .ast_manipulation import get_nearest_ancestor_node, get_variable_nodes
from .directives import ARGUMENTS_DIRECTIVE_NAME


class DefinitionOrigin(Enum):
    """Where the definition governing a variable usage comes from."""

    # Declared by the node containing the usage: the operation's own variable definitions,
    # or the @argumentDefinitions of the fragment whose body contains the usage.
    LOCAL = "local"

    # A variable of the operation that (possibly transitively) spreads the fragment.
    ENCLOSING_OPERATION = "enclosing_operation"


@dataclass(frozen=True)
class VariableUsage:
    """A reference to a variable, together with what is expected at the referencing position."""

    node: VariableNode
    # None if the position's type is unknown, e.g. an argument the schema does not define.
    type: Optional[GraphQLInputType]
    # Undefined if the position does not supply a default value.
    default_value: Any
    # None if the usage is directly within the root node, otherwise the fragment containing it.
    using_fragment_name: Optional[str] = None

    @property
    def variable_name(self) -> str:
        """Return the name of the referenced variable, without the leading "$"."""
        return self.node.name.value

    @property
    def has_default_value(self) -> bool:
        """Return True if the position supplies its own default value."""
        return self.default_value is not Undefined


@dataclass(frozen=True)
class VariableUsageWithDefinition(VariableUsage):
    """A variable usage paired with the variable or argument definition that governs it."""

    # None if no definition governs the usage, i.e. the variable is undefined.
    definition: Optional[VariableOrArgumentDefinition] = None
    origin: Optional[DefinitionOrigin] = None

    @property
    def is_fragment_argument_usage(self) -> bool:
        """Return True if the usage refers to an argument of the fragment containing it."""
        return isinstance(self.definition, FragmentArgumentDefinition)


class _VariableUsageCollector(Visitor):
    """Record every variable usage in a node, with the type expected at its position."""

    def __init__(
        self,
        context: ValidationContext,
        type_info: TypeInfo,
        using_fragment_name: Optional[str],
    ) -> None:
        super().__init__()
        self.context = context
        self.type_info = type_info
        self.using_fragment_name = using_fragment_name
        self.usages: List[VariableUsage] = []

    def enter_variable_definition(self, node: VariableDefinitionNode, *args: Any) -> Any:
        # Variable definitions declare variables, they do not use them.
        return SKIP

    def enter_directive(
        self,
        node: DirectiveNode,
        key: Any,
        parent: Any,
        path: List[Any],
        ancestors: List[Any],
    ) -> Any:
        if node.name.value != ARGUMENTS_DIRECTIVE_NAME or not node.arguments:
            return None

        fragment_spread = get_nearest_ancestor_node(ancestors)
        if not isinstance(fragment_spread, FragmentSpreadNode):
            return SKIP
        fragment_definition = self.context.get_fragment(fragment_spread.name.value)
        if fragment_definition is None:
            return SKIP

        argument_definitions = get_fragment_argument_definitions(
            self.context.schema, fragment_definition
        )
        for argument_node in node.arguments:
            self._record_fragment_argument_binding(argument_node, argument_definitions)
        return SKIP

    def enter_variable(self, node: VariableNode, *args: Any) -> None:
        self.usages.append(
            VariableUsage(
                node=node,
                type=self.type_info.get_input_type(),
                default_value=self.type_info.get_default_value(),
                using_fragment_name=self.using_fragment_name,
            )
        )

    def _record_fragment_argument_binding(
        self,
        argument_node: ArgumentNode,
        argument_definitions: Mapping[str, FragmentArgumentDefinition],
    ) -> None:
        """Record the variables bound to a fragment argument through @arguments."""
        value_node = argument_node.value
        if isinstance(value_node, VariableNode):
            definition = argument_definitions.get(argument_node.name.value)
            if definition is None:
                usage_type, default_value = None, Undefined
            else:
                usage_type = definition.schema_type
                default_value = (
                    Undefined if definition.default_value is None else definition.default_value
                )
            self.usages.append(
                VariableUsage(
                    node=value_node,
                    type=usage_type,
                    default_value=default_value,
                    using_fragment_name=self.using_fragment_name,
                )
            )
        else:
            # Variables nested inside list or object literals are still usages,
            # but there is no way to know the type expected at their position.
            for variable_node in get_variable_nodes(value_node):
                self.usages.append(
                    VariableUsage(
                        node=variable_node,
                        type=None,
                        default_value=Undefined,
                        using_fragment_name=self.using_fragment_name,
                    )
                )


def collect_variable_usages(
    context: ValidationContext,
    node: Union[OperationDefinitionNode, FragmentDefinitionNode],
    using_fragment_name: Optional[str] = None,
) -> List[VariableUsage]:
    """Return the variable usages within the node, in document order.

    Spread fragments are not followed: only the node's own body is examined.

    Args:
        context: validation context of the document containing the node
        node: operation or fragment definition to examine
        using_fragment_name: optional name to record as the fragment containing every usage

    Returns:
        list of VariableUsage objects, one per variable reference in the node
    """
    type_info = TypeInfo(context.schema)
    collector = _VariableUsageCollector(context, type_info, using_fragment_name)
    visit(node, TypeInfoVisitor(type_info, collector))
    return collector.usages


def _attach_definition(
    usage: VariableUsage,
    local_definitions: Mapping[str, VariableOrArgumentDefinition],
    operation_definitions: Mapping[str, VariableOrArgumentDefinition],
) -> VariableUsageWithDefinition:
    """Pair the usage with its governing definition, preferring local definitions."""
    variable_name = usage.variable_name
    definition: Optional[VariableOrArgumentDefinition] = None
    origin: Optional[DefinitionOrigin] = None
    if variable_name in local_definitions:
        definition = local_definitions[variable_name]
        origin = DefinitionOrigin.LOCAL
    elif variable_name in operation_definitions:
        definition = operation_definitions[variable_name]
        origin = DefinitionOrigin.ENCLOSING_OPERATION

    return VariableUsageWithDefinition(
        node=usage.node,
        type=usage.type,
        default_value=usage.default_value,
        using_fragment_name=usage.using_fragment_name,
        definition=definition,
        origin=origin,
    )


def get_recursive_variable_usages(
    context: ValidationContext,
    root: Union[OperationDefinitionNode, FragmentDefinitionNode],
    enclosing_definitions: Optional[Mapping[str, VariableOrArgumentDefinition]] = None,
) -> List[VariableUsageWithDefinition]:
    """Return the usages of the root and of the fragments it reaches, each with its definition.

    For an operation, the usages of every transitively spread fragment are included as well,
    tagged with the name of the fragment containing them. A usage inside a fragment is governed
    by the fragment's own argument of that name if there is one, and by the operation's variable
    of that name otherwise.

    A fragment root is examined on its own, and its usages are tagged with its own name. They
    are governed by its own arguments first, and then by enclosing_definitions, which callers
    use to supply the variables that the operations using the fragment are known to define.
    Fragments spread by a fragment root are not followed, since they are examined when their
    own definitions are.

    Args:
        context: validation context of the document containing the root
        root: operation or fragment definition
        enclosing_definitions: definitions that govern a fragment root's usages of names it does
                               not declare itself. Ignored for operation roots.

    Returns:
        list of VariableUsageWithDefinition, first the root's own usages and then those of each
        spread fragment. Usages no definition governs have definition and origin set to None.
    """
    schema = context.schema
    root_definitions = get_root_definitions(schema, root)

    operation_definitions: Dict[str, VariableOrArgumentDefinition]
    root_fragment_name: Optional[str]
    if isinstance(root, OperationDefinitionNode):
        operation_definitions = root_definitions
        fragments = context.get_recursively_referenced_fragments(root)
        root_fragment_name = None
    else:
        operation_definitions = dict(enclosing_definitions or {})
        fragments = []
        root_fragment_name = root.name.value

    result = [
        _attach_definition(usage, root_definitions, operation_definitions)
        for usage in collect_variable_usages(
            context, root, using_fragment_name=root_fragment_name
        )
    ]

    for fragment in fragments:
        fragment_name = fragment.name.value
        argument_definitions = get_fragment_argument_definitions(schema, fragment)
        fragment_usages = collect_variable_usages(
            context, fragment, using_fragment_name=fragment_name
        )
        result.extend(
            _attach_definition(usage, argument_definitions, operation_definitions)
            for usage in fragment_usages
        )

    return result

