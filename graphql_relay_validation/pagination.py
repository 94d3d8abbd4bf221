# Copyright 2021-present Kensho Technologies, LLC.
"""Determine which pagination fields a connection field's selections fetch.

Relay paginates a connection using the cursors and flags of its pageInfo sub-field, so a
connection paginated forward has to select pageInfo { hasNextPage endCursor }, and one paginated
backward has to select pageInfo { hasPreviousPage startCursor }. Those selections may be made
directly, or through any mix of inline fragments and fragment spreads, both on the connection and
on the pageInfo field. A field selected in any one branch counts as selected.
"""
from typing import Callable, FrozenSet, Iterable, NamedTuple, Optional

from graphql import GraphQLObjectType, GraphQLOutputType, get_nullable_type
from graphql.language.ast import (
    DirectiveNode,
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    SelectionSetNode,
    StringValueNode,
)

from .directives import CONNECTION_DIRECTIVE_NAME


CONNECTION_TYPE_SUFFIX = "Connection"

PAGE_INFO_FIELD_NAME = "pageInfo"
HAS_NEXT_PAGE_FIELD_NAME = "hasNextPage"
HAS_PREVIOUS_PAGE_FIELD_NAME = "hasPreviousPage"
START_CURSOR_FIELD_NAME = "startCursor"
END_CURSOR_FIELD_NAME = "endCursor"

# Pairs of field arguments that mark a connection as paginated in a given direction.
FORWARD_PAGINATION_ARGUMENTS = ("first", "after")
BACKWARD_PAGINATION_ARGUMENTS = ("last", "before")

# Names of the pageInfo fields each pagination direction requires, in reporting order.
FORWARD_PAGE_INFO_FIELDS = (HAS_NEXT_PAGE_FIELD_NAME, END_CURSOR_FIELD_NAME)
BACKWARD_PAGE_INFO_FIELDS = (HAS_PREVIOUS_PAGE_FIELD_NAME, START_CURSOR_FIELD_NAME)

GetFragmentFunc = Callable[[str], Optional[FragmentDefinitionNode]]


class PaginationFields(NamedTuple):
    """Which of the pagination-relevant fields are selected on a connection."""

    page_info: bool
    has_next_page: bool
    has_previous_page: bool
    start_cursor: bool
    end_cursor: bool

    def has_page_info_field(self, field_name: str) -> bool:
        """Return True if the given pageInfo sub-field is selected."""
        return {
            HAS_NEXT_PAGE_FIELD_NAME: self.has_next_page,
            HAS_PREVIOUS_PAGE_FIELD_NAME: self.has_previous_page,
            START_CURSOR_FIELD_NAME: self.start_cursor,
            END_CURSOR_FIELD_NAME: self.end_cursor,
        }[field_name]


NO_PAGINATION_FIELDS = PaginationFields(
    page_info=False,
    has_next_page=False,
    has_previous_page=False,
    start_cursor=False,
    end_cursor=False,
)


class PaginationDirections(NamedTuple):
    """The directions in which a connection field's arguments paginate it."""

    forward: bool
    backward: bool


class ConnectionDirectiveInfo(NamedTuple):
    """A @connection directive on a field, with the value of its "key" argument if a string."""

    key: Optional[str]
    directive: DirectiveNode


def is_connection_type(graphql_type: GraphQLOutputType) -> bool:
    """Return True if the type, ignoring nullability, is an object type named like a connection."""
    nullable_type = get_nullable_type(graphql_type)
    return isinstance(nullable_type, GraphQLObjectType) and nullable_type.name.endswith(
        CONNECTION_TYPE_SUFFIX
    )


def get_connection_directive(field_node: FieldNode) -> Optional[ConnectionDirectiveInfo]:
    """Return the field's @connection directive and its key, or None if the field has none."""
    for directive in field_node.directives or ():
        if directive.name.value != CONNECTION_DIRECTIVE_NAME:
            continue

        key = None
        for argument in directive.arguments or ():
            if argument.name.value == "key" and isinstance(argument.value, StringValueNode):
                key = argument.value.value
        return ConnectionDirectiveInfo(key=key, directive=directive)

    return None


def get_field_argument_names(field_node: FieldNode) -> FrozenSet[str]:
    """Return the names of the arguments supplied to the field."""
    return frozenset(argument.name.value for argument in field_node.arguments or ())


def get_pagination_directions(field_node: FieldNode) -> PaginationDirections:
    """Return whether the field's arguments paginate it forward, backward, or both."""
    argument_names = get_field_argument_names(field_node)
    return PaginationDirections(
        forward=argument_names.issuperset(FORWARD_PAGINATION_ARGUMENTS),
        backward=argument_names.issuperset(BACKWARD_PAGINATION_ARGUMENTS),
    )


def _combine_pagination_fields(all_fields: Iterable[PaginationFields]) -> PaginationFields:
    """Return the fields selected in at least one of the given branches."""
    result = NO_PAGINATION_FIELDS
    for fields in all_fields:
        result = PaginationFields(
            *(
                already_selected or newly_selected
                for already_selected, newly_selected in zip(result, fields)
            )
        )
    return result


def _get_fragment_selection_set(
    get_fragment: GetFragmentFunc,
    fragment_spread: FragmentSpreadNode,
    visited_fragments: FrozenSet[str],
) -> Optional[SelectionSetNode]:
    """Return the selections of the spread fragment, or None if unknown or already visited."""
    fragment_name = fragment_spread.name.value
    if fragment_name in visited_fragments:
        return None
    fragment_definition = get_fragment(fragment_name)
    if fragment_definition is None:
        return None
    return fragment_definition.selection_set


def _get_page_info_selection_set_pagination_info(
    get_fragment: GetFragmentFunc,
    selection_set: SelectionSetNode,
    visited_fragments: FrozenSet[str],
) -> PaginationFields:
    """Return the pageInfo sub-fields selected within the given pageInfo selections."""
    selected_field_names = set()
    nested_fields = []

    for selection in selection_set.selections:
        if isinstance(selection, FieldNode):
            # Relay reads these fields under their own names, so aliased selections do not count.
            if selection.alias is None:
                selected_field_names.add(selection.name.value)
        elif isinstance(selection, InlineFragmentNode):
            nested_fields.append(
                _get_page_info_selection_set_pagination_info(
                    get_fragment, selection.selection_set, visited_fragments
                )
            )
        elif isinstance(selection, FragmentSpreadNode):
            fragment_selection_set = _get_fragment_selection_set(
                get_fragment, selection, visited_fragments
            )
            if fragment_selection_set is not None:
                nested_fields.append(
                    _get_page_info_selection_set_pagination_info(
                        get_fragment,
                        fragment_selection_set,
                        visited_fragments | {selection.name.value},
                    )
                )
        else:
            raise AssertionError(
                "Unexpected selection type received: {} {}".format(type(selection), selection)
            )

    direct_fields = PaginationFields(
        page_info=True,
        has_next_page=HAS_NEXT_PAGE_FIELD_NAME in selected_field_names,
        has_previous_page=HAS_PREVIOUS_PAGE_FIELD_NAME in selected_field_names,
        start_cursor=START_CURSOR_FIELD_NAME in selected_field_names,
        end_cursor=END_CURSOR_FIELD_NAME in selected_field_names,
    )
    return _combine_pagination_fields([direct_fields] + nested_fields)


def _get_connection_selection_set_pagination_info(
    get_fragment: GetFragmentFunc,
    selection_set: SelectionSetNode,
    visited_fragments: FrozenSet[str],
) -> PaginationFields:
    """Return the pagination fields selected within the given connection selections."""
    all_fields = []

    for selection in selection_set.selections:
        if isinstance(selection, FieldNode):
            # Other fields of the connection, such as edges, cannot contribute pageInfo fields.
            if (
                selection.name.value == PAGE_INFO_FIELD_NAME
                and selection.alias is None
                and selection.selection_set
            ):
                all_fields.append(
                    _get_page_info_selection_set_pagination_info(
                        get_fragment, selection.selection_set, visited_fragments
                    )
                )
        elif isinstance(selection, InlineFragmentNode):
            all_fields.append(
                _get_connection_selection_set_pagination_info(
                    get_fragment, selection.selection_set, visited_fragments
                )
            )
        elif isinstance(selection, FragmentSpreadNode):
            fragment_selection_set = _get_fragment_selection_set(
                get_fragment, selection, visited_fragments
            )
            if fragment_selection_set is not None:
                all_fields.append(
                    _get_connection_selection_set_pagination_info(
                        get_fragment,
                        fragment_selection_set,
                        visited_fragments | {selection.name.value},
                    )
                )
        else:
            raise AssertionError(
                "Unexpected selection type received: {} {}".format(type(selection), selection)
            )

    return _combine_pagination_fields(all_fields)


def get_connection_selection_set_pagination_info(
    get_fragment: GetFragmentFunc, selection_set: SelectionSetNode
) -> PaginationFields:
    """Return which pagination fields the selections of a connection field fetch.

    Args:
        get_fragment: function returning the definition of the fragment with the given name,
                      or None if the document does not define it
        selection_set: the selections made on the connection field

    Returns:
        PaginationFields where each flag is True if the corresponding field is selected in
        at least one branch of the (possibly polymorphic) selections
    """
    return _get_connection_selection_set_pagination_info(get_fragment, selection_set, frozenset())
