#!/usr/bin/env python
# Copyright 2021-present Kensho Technologies, LLC.
"""Utility modeled after json.tool, validates a Relay GraphQL document read from stdin.

Used as: python -m graphql_relay_validation.tool SCHEMA_FILE [--compat]

Each diagnostic is printed as "line:column message" on its own line. The exit status is 1 if
there were any diagnostics, and 0 otherwise.
"""
import argparse
import logging
import sys
from typing import List, Optional, TextIO

from graphql import GraphQLError, GraphQLSchema, build_schema, validate_schema

from .exceptions import SchemaLoadingError
from .validation import validate_relay_source


logger = logging.getLogger(__name__)


def load_schema(schema_text: str) -> GraphQLSchema:
    """Build a schema from SDL text, raising SchemaLoadingError if the SDL is not a valid schema."""
    try:
        schema = build_schema(schema_text)
    except (GraphQLError, TypeError) as e:
        raise SchemaLoadingError(f"Could not build schema: {e}") from e

    schema_errors = validate_schema(schema)
    if schema_errors:
        raise SchemaLoadingError(
            "Invalid schema: {}".format("; ".join(error.message for error in schema_errors))
        )
    return schema


def format_error(error: GraphQLError) -> str:
    """Return the error message, prefixed with the line and column of its first location."""
    if not error.locations:
        return error.message
    location = error.locations[0]
    return f"{location.line}:{location.column} {error.message}"


def main(argv: Optional[List[str]] = None, stdin: TextIO = sys.stdin) -> int:
    """Validate the GraphQL document on standard input, printing any diagnostics."""
    parser = argparse.ArgumentParser(
        prog="python -m graphql_relay_validation.tool",
        description="Validate a GraphQL document that uses the Relay directives.",
    )
    parser.add_argument("schema_file", help="path to the GraphQL schema, in SDL")
    parser.add_argument(
        "--compat",
        action="store_true",
        help="also require @connection on paginated fields, as the compatibility runtime does",
    )
    args = parser.parse_args(argv)

    with open(args.schema_file, "r") as f:
        schema = load_schema(f.read())

    errors = validate_relay_source(schema, stdin.read(), compat=args.compat)
    logger.info("Found %d validation error(s).", len(errors))
    for error in errors:
        sys.stdout.write(format_error(error) + "\n")

    return 1 if errors else 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    sys.exit(main())
