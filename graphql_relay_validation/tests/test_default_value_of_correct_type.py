# Copyright 2021-present Kensho Technologies, LLC.
from typing import List
import unittest

from ..rules import RelayDefaultValueOfCorrectTypeRule
from .test_helpers import get_validation_errors, get_validation_messages


class DefaultValueOfCorrectTypeTests(unittest.TestCase):
    def setUp(self) -> None:
        """Disable max diff limits for all tests."""
        self.maxDiff = None

    def _get_messages(self, argument_definitions_text: str) -> List[str]:
        document_text = "fragment F on Foo @argumentDefinitions(%s) { bar }" % (
            argument_definitions_text
        )
        return get_validation_messages(document_text, [RelayDefaultValueOfCorrectTypeRule])

    def test_valid_default_values(self) -> None:
        argument_definitions_text = (
            'a: {type: "Int", defaultValue: 1}, '
            'b: {type: "String!", defaultValue: "x"}, '
            'c: {type: "[ID!]", defaultValue: ["1", 2]}, '
            'd: {type: "FooFilter", defaultValue: {limit: 3}}, '
            'e: {type: "Boolean"}'
        )
        self.assertEqual([], self._get_messages(argument_definitions_text))

    def test_default_value_of_wrong_type(self) -> None:
        self.assertEqual(
            [
                'defaultValue for argument "a" on fragment "F" is expected to be of type "Int!".',
                'defaultValue for argument "b" on fragment "F" is expected to be of type '
                '"[ID!]!".',
            ],
            self._get_messages(
                'a: {type: "Int", defaultValue: "x"}, b: {type: "[ID!]", defaultValue: [null]}'
            ),
        )

    def test_null_default_value(self) -> None:
        self.assertEqual(
            [
                'defaultValue for argument "a" on fragment "F" cannot be null. '
                "Instead, omit defaultValue.",
                'defaultValue for argument "b" on fragment "F" cannot be null. '
                "Instead, omit defaultValue.",
            ],
            self._get_messages(
                'a: {type: "Int", defaultValue: null}, b: {type: "Int!", defaultValue: null}'
            ),
        )

    def test_unknown_types_and_variables_are_skipped(self) -> None:
        self.assertEqual(
            [],
            self._get_messages(
                'a: {type: "Bogus", defaultValue: 1}, '
                'b: {type: "Int", defaultValue: $x}, '
                "c: {defaultValue: 1}, "
                "d: 5"
            ),
        )

    def test_repeated_argument_definitions_directive(self) -> None:
        document_text = """
            fragment F on Foo
            @argumentDefinitions(a: {type: "Int", defaultValue: "x"})
            @argumentDefinitions(
                a: {type: "Int", defaultValue: 1}
                b: {type: "Boolean", defaultValue: true}
            ) {
                bar
            }
        """
        # Arguments of the second directive are not declarations, so only the first is checked.
        self.assertEqual(
            ['defaultValue for argument "a" on fragment "F" is expected to be of type "Int!".'],
            get_validation_messages(document_text, [RelayDefaultValueOfCorrectTypeRule]),
        )

    def test_error_location(self) -> None:
        document_text = (
            'fragment F on Foo @argumentDefinitions(a: {type: "Int", defaultValue: "x"}) { bar }'
        )
        errors = get_validation_errors(document_text, [RelayDefaultValueOfCorrectTypeRule])

        self.assertEqual(1, len(errors))
        # Reported at the default value.
        self.assertEqual((1, 71), tuple(errors[0].locations[0]))
