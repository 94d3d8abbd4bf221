# Copyright 2021-present Kensho Technologies, LLC.
import unittest

from graphql import (
    KnownArgumentNamesRule,
    NoUndefinedVariablesRule,
    NoUnusedFragmentsRule,
    VariablesInAllowedPositionRule,
    build_schema,
    parse,
)

from ..exceptions import GraphQLParsingError
from ..rules import RelayCompatMissingConnectionDirectiveRule, RelayNoUnusedArgumentsRule
from ..validation import (
    RELAY_VALIDATION_RULES,
    get_relay_validation_rules,
    validate_relay_document,
    validate_relay_source,
)
from .test_helpers import SCHEMA_TEXT


VALID_DOCUMENT_TEXT = """
    query Q($id: ID!, $cond: Boolean) {
        node(id: $id) {
            ...F @arguments(cond: $cond)
        }
        fooConnection(first: 10, after: "") %(connection_directive)s {
            edges {
                cursor
                node {
                    bar
                }
            }
            pageInfo {
                hasNextPage
                endCursor
            }
        }
    }

    fragment F on Foo @argumentDefinitions(cond: {type: "Boolean", defaultValue: true}) {
        baz(cond: $cond)
    }
"""


class ValidationTests(unittest.TestCase):
    def setUp(self) -> None:
        """Disable max diff limits for all tests."""
        self.maxDiff = None
        self.schema = build_schema(SCHEMA_TEXT)

    def test_relay_validation_rules(self) -> None:
        rules = get_relay_validation_rules()

        self.assertEqual(list(RELAY_VALIDATION_RULES), rules[: len(RELAY_VALIDATION_RULES)])
        self.assertIn(NoUnusedFragmentsRule, rules)
        self.assertNotIn(RelayCompatMissingConnectionDirectiveRule, rules)
        for replaced_rule in (
            KnownArgumentNamesRule,
            NoUndefinedVariablesRule,
            VariablesInAllowedPositionRule,
        ):
            self.assertNotIn(replaced_rule, rules)

    def test_compat_validation_rules(self) -> None:
        rules = get_relay_validation_rules(compat=True)

        self.assertIn(RelayCompatMissingConnectionDirectiveRule, rules)
        self.assertEqual(len(get_relay_validation_rules()) + 1, len(rules))

    def test_valid_document(self) -> None:
        document_text = VALID_DOCUMENT_TEXT % {
            "connection_directive": '@connection(key: "Query_foos")'
        }
        self.assertEqual([], validate_relay_source(self.schema, document_text))
        self.assertEqual([], validate_relay_source(self.schema, document_text, compat=True))

    def test_compat_requires_connection_directive(self) -> None:
        document_text = VALID_DOCUMENT_TEXT % {"connection_directive": ""}

        self.assertEqual([], validate_relay_source(self.schema, document_text))
        self.assertEqual(
            ['Missing @connection directive on connection "fooConnection".'],
            [
                error.message
                for error in validate_relay_source(self.schema, document_text, compat=True)
            ],
        )

    def test_fragment_argument_errors(self) -> None:
        document_text = """
            query Q {
                ...F @arguments(intVal: "Test", reqStrVal: null)
            }

            fragment F on Query @argumentDefinitions(
                intVal: {type: "Int"}
                reqStrVal: {type: "String!"}
            ) {
                node(id: $intVal) {
                    name(format: $reqStrVal)
                }
            }
        """
        messages = [
            error.message for error in validate_relay_source(self.schema, document_text)
        ]

        self.assertEqual(
            [
                'Argument "intVal" for fragment "F" is expected to be of type "Int".',
                'Argument "reqStrVal" for fragment "F" is expected to be of type "String!".',
                'Variable "$intVal" of type "Int" used in position expecting type "ID!".',
            ],
            sorted(messages),
        )

    def test_malformed_fragment_does_not_hide_other_errors(self) -> None:
        document_text = """
            query Q {
                foo {
                    ...Broken
                }
                ...G @arguments(intVal: "Test")
            }

            query R {
                node(id: $missing) {
                    bar
                }
            }

            fragment Broken on Foo
            @argumentDefinitions(a: {type: "[Int"}, b: 5)
            @argumentDefinitions(c: {type: "Boolean", defaultValue: true}) {
                bar
            }

            fragment G on Query @argumentDefinitions(intVal: {type: "Int"}) {
                search(limit: $intVal) {
                    bar
                }
            }
        """
        messages = [
            error.message for error in validate_relay_source(self.schema, document_text)
        ]

        self.assertIn(
            'Argument "intVal" for fragment "G" is expected to be of type "Int".', messages
        )
        self.assertIn('Variable "$missing" is not defined by operation "R".', messages)

    def test_undefined_variable_is_reported_once(self) -> None:
        messages = [
            error.message
            for error in validate_relay_source(self.schema, "query Q { node(id: $id) { bar } }")
        ]
        self.assertEqual(['Variable "$id" is not defined by operation "Q".'], messages)

    def test_explicit_rules(self) -> None:
        document = parse(
            """
            fragment F on Foo @argumentDefinitions(unused: {type: "Int"}) {
                bar
            }
            """
        )
        messages = [
            error.message
            for error in validate_relay_document(
                self.schema, document, rules=[RelayNoUnusedArgumentsRule]
            )
        ]
        self.assertEqual(['Argument "unused" in fragment "F" is never used.'], messages)

    def test_syntax_error(self) -> None:
        with self.assertRaises(GraphQLParsingError):
            validate_relay_source(self.schema, "query Q { node(id: ")
