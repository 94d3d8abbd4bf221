# Copyright 2021-present Kensho Technologies, LLC.
"""Assemble the Relay validation rules, and validate documents with them."""
from typing import List, Optional, Sequence, Type

from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSchema,
    KnownArgumentNamesRule,
    NoUndefinedVariablesRule,
    VariablesInAllowedPositionRule,
    specified_rules,
    validate,
)
from graphql.validation import ASTValidationRule

from .ast_manipulation import safe_parse_graphql
from .directives import get_schema_with_relay_directives
from .rules import (
    RelayArgumentsOfCorrectTypeRule,
    RelayCompatMissingConnectionDirectiveRule,
    RelayDefaultValueOfCorrectTypeRule,
    RelayKnownArgumentNamesRule,
    RelayKnownVariableNamesRule,
    RelayNoUnusedArgumentsRule,
    RelayRequiredPageInfoFieldsRule,
    RelayVariablesInAllowedPositionRule,
)


RELAY_VALIDATION_RULES: Sequence[Type[ASTValidationRule]] = (
    RelayKnownArgumentNamesRule,
    RelayKnownVariableNamesRule,
    RelayVariablesInAllowedPositionRule,
    RelayArgumentsOfCorrectTypeRule,
    RelayDefaultValueOfCorrectTypeRule,
    RelayNoUnusedArgumentsRule,
    RelayRequiredPageInfoFieldsRule,
)

# Added to the Relay rules when validating documents for the compatibility runtime.
RELAY_COMPAT_VALIDATION_RULES: Sequence[Type[ASTValidationRule]] = (
    RelayCompatMissingConnectionDirectiveRule,
)

# Default rules whose checks the Relay rules perform instead, taking fragment arguments
# into account.
REPLACED_SPECIFIED_RULES = frozenset(
    {
        KnownArgumentNamesRule,
        NoUndefinedVariablesRule,
        VariablesInAllowedPositionRule,
    }
)


def get_relay_validation_rules(compat: bool = False) -> List[Type[ASTValidationRule]]:
    """Return the rules to validate Relay documents with.

    Args:
        compat: whether to also require @connection on paginated fields, as the compatibility
                runtime needs

    Returns:
        list of rule classes: the Relay rules first, followed by every default rule of
        graphql-core that no Relay rule replaces
    """
    rules = list(RELAY_VALIDATION_RULES)
    if compat:
        rules.extend(RELAY_COMPAT_VALIDATION_RULES)
    rules.extend(rule for rule in specified_rules if rule not in REPLACED_SPECIFIED_RULES)
    return rules


def validate_relay_document(
    schema: GraphQLSchema,
    document_ast: DocumentNode,
    compat: bool = False,
    rules: Optional[Sequence[Type[ASTValidationRule]]] = None,
) -> List[GraphQLError]:
    """Validate a parsed document that may use the Relay directives.

    Args:
        schema: schema the document is written against. It need not declare the Relay
                directives, they are added to a copy of it.
        document_ast: the document to validate
        compat: whether to validate for the compatibility runtime, see get_relay_validation_rules()
        rules: optional rules to use instead of those get_relay_validation_rules() returns

    Returns:
        list of GraphQLError diagnostics, empty if the document is valid
    """
    if rules is None:
        rules = get_relay_validation_rules(compat=compat)
    return validate(get_schema_with_relay_directives(schema), document_ast, rules)


def validate_relay_source(
    schema: GraphQLSchema, source: str, compat: bool = False
) -> List[GraphQLError]:
    """Parse the GraphQL source, then validate it like validate_relay_document() does.

    Raises:
        GraphQLParsingError: if the source is not syntactically valid GraphQL
    """
    return validate_relay_document(schema, safe_parse_graphql(source), compat=compat)
