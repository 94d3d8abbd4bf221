# Copyright 2021-present Kensho Technologies, LLC.
from typing import Any, List

from graphql import GraphQLError, ValidationRule
from graphql.language.ast import FieldNode

from ..ast_manipulation import get_human_friendly_field_name
from ..pagination import (
    BACKWARD_PAGE_INFO_FIELDS,
    FORWARD_PAGE_INFO_FIELDS,
    get_connection_directive,
    get_connection_selection_set_pagination_info,
    get_pagination_directions,
    is_connection_type,
)


def missing_page_info_message(connection_name: str) -> str:
    return f'Missing pageInfo selection on connection "{connection_name}".'


def missing_page_info_field_message(field_name: str, connection_name: str) -> str:
    return f'Missing pageInfo.{field_name} field on connection "{connection_name}".'


class RelayRequiredPageInfoFieldsRule(ValidationRule):
    """Paginated connections must select the pageInfo fields needed to fetch more edges.

    A field of a connection type that is given a forward (first and after) or backward (last and
    before) pair of pagination arguments must select pageInfo, together with hasNextPage and
    endCursor when paginated forward, and hasPreviousPage and startCursor when paginated
    backward. The selections may be made through inline fragments and fragment spreads.
    """

    def enter_field(self, node: FieldNode, *args: Any) -> None:
        if node.selection_set is None:
            return

        field_type = self.context.get_type()
        if field_type is None or not is_connection_type(field_type):
            return

        directions = get_pagination_directions(node)
        required_fields: List[str] = []
        if directions.forward:
            required_fields.extend(FORWARD_PAGE_INFO_FIELDS)
        if directions.backward:
            required_fields.extend(BACKWARD_PAGE_INFO_FIELDS)
        if not required_fields:
            return

        connection_directive = get_connection_directive(node)
        if connection_directive is None:
            connection_name = get_human_friendly_field_name(node)
            location = node
        else:
            connection_name = connection_directive.key or get_human_friendly_field_name(node)
            location = connection_directive.directive

        pagination_fields = get_connection_selection_set_pagination_info(
            self.context.get_fragment, node.selection_set
        )
        if not pagination_fields.page_info:
            self.report_error(GraphQLError(missing_page_info_message(connection_name), location))
            return

        for field_name in required_fields:
            if not pagination_fields.has_page_info_field(field_name):
                self.report_error(
                    GraphQLError(
                        missing_page_info_field_message(field_name, connection_name), location
                    )
                )
