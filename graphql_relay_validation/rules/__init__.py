# Copyright 2021-present Kensho Technologies, LLC.
"""Validation rules for documents that use the Relay directives."""
from .arguments_of_correct_type import RelayArgumentsOfCorrectTypeRule
from .default_value_of_correct_type import RelayDefaultValueOfCorrectTypeRule
from .known_argument_names import RelayKnownArgumentNamesRule
from .known_variable_names import RelayKnownVariableNamesRule
from .missing_connection_directive import RelayCompatMissingConnectionDirectiveRule
from .no_unused_arguments import RelayNoUnusedArgumentsRule
from .required_page_info_fields import RelayRequiredPageInfoFieldsRule
from .variables_in_allowed_position import RelayVariablesInAllowedPositionRule


__all__ = [
    "RelayArgumentsOfCorrectTypeRule",
    "RelayCompatMissingConnectionDirectiveRule",
    "RelayDefaultValueOfCorrectTypeRule",
    "RelayKnownArgumentNamesRule",
    "RelayKnownVariableNamesRule",
    "RelayNoUnusedArgumentsRule",
    "RelayRequiredPageInfoFieldsRule",
    "RelayVariablesInAllowedPositionRule",
]
