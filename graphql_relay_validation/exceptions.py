# Copyright 2021-present Kensho Technologies, LLC.
class RelayValidationError(Exception):
    """Generic error when setting up or running Relay document validation."""


class GraphQLParsingError(RelayValidationError):
    """Exception raised when the provided GraphQL string could not be parsed."""


class SchemaLoadingError(RelayValidationError):
    """Exception raised when a GraphQL schema could not be built from the provided SDL.

    For example:
    - the SDL may contain syntax errors;
    - the SDL may describe an invalid schema, e.g. referencing types that are never defined.
    """
