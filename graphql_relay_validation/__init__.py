# Copyright 2021-present Kensho Technologies, LLC.
"""Commonly-used functions and data types from this package."""
from .directives import (  # noqa
    RELAY_DIRECTIVES,
    get_schema_with_relay_directives,
    print_relay_directives,
)
from .exceptions import GraphQLParsingError, RelayValidationError, SchemaLoadingError  # noqa
from .rules import (  # noqa
    RelayArgumentsOfCorrectTypeRule,
    RelayCompatMissingConnectionDirectiveRule,
    RelayDefaultValueOfCorrectTypeRule,
    RelayKnownArgumentNamesRule,
    RelayKnownVariableNamesRule,
    RelayNoUnusedArgumentsRule,
    RelayRequiredPageInfoFieldsRule,
    RelayVariablesInAllowedPositionRule,
)
from .validation import (  # noqa
    RELAY_COMPAT_VALIDATION_RULES,
    RELAY_VALIDATION_RULES,
    get_relay_validation_rules,
    validate_relay_document,
    validate_relay_source,
)


__package_name__ = "graphql-relay-validation"
__version__ = "1.0.0"
