# Copyright 2021-present Kensho Technologies, LLC.
from typing import Any

from graphql import GraphQLError, ValidationRule
from graphql.language.ast import FieldNode

from ..ast_manipulation import get_human_friendly_field_name
from ..pagination import get_connection_directive, get_pagination_directions


def missing_connection_directive_message(connection_name: str) -> str:
    return f'Missing @connection directive on connection "{connection_name}".'


class RelayCompatMissingConnectionDirectiveRule(ValidationRule):
    """In compatibility mode, paginated fields must be marked with @connection.

    Without the directive, the compatibility runtime cannot recognize the field as a connection,
    so it would not merge the edges of successive pages.
    """

    def enter_field(self, node: FieldNode, *args: Any) -> None:
        if node.selection_set is None:
            return

        directions = get_pagination_directions(node)
        if not (directions.forward or directions.backward):
            return

        if get_connection_directive(node) is None:
            self.report_error(
                GraphQLError(
                    missing_connection_directive_message(get_human_friendly_field_name(node)),
                    node,
                )
            )
