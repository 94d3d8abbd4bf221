# Copyright 2021-present Kensho Technologies, LLC.
from typing import List
import unittest

from ..rules import RelayArgumentsOfCorrectTypeRule
from .test_helpers import get_validation_errors, get_validation_messages


FRAGMENT_TEXT = """
    fragment F on Query @argumentDefinitions(
        intVal: {type: "Int"}
        reqStrVal: {type: "String!"}
        ids: {type: "[ID!]"}
        filter: {type: "FooFilter"}
        unknownType: {type: "Bogus"}
    ) {
        foo {
            bar
        }
    }
"""


class ArgumentsOfCorrectTypeTests(unittest.TestCase):
    def setUp(self) -> None:
        """Disable max diff limits for all tests."""
        self.maxDiff = None

    def _get_messages(self, arguments_text: str) -> List[str]:
        document_text = "query Q($id: ID!) { ...F @arguments(%s) }" % arguments_text
        return get_validation_messages(
            document_text + FRAGMENT_TEXT, [RelayArgumentsOfCorrectTypeRule]
        )

    def test_valid_literals(self) -> None:
        arguments_text = (
            'intVal: 1, reqStrVal: "x", ids: [1, "2"], filter: {bar: "x", limit: 3}, '
            "unknownType: 1"
        )
        self.assertEqual([], self._get_messages(arguments_text))

    def test_invalid_scalar_literals(self) -> None:
        self.assertEqual(
            [
                'Argument "intVal" for fragment "F" is expected to be of type "Int".',
                'Argument "reqStrVal" for fragment "F" is expected to be of type "String!".',
            ],
            self._get_messages('intVal: "Test", reqStrVal: null'),
        )

    def test_invalid_list_and_object_literals(self) -> None:
        self.assertEqual(
            [
                'Argument "ids" for fragment "F" is expected to be of type "[ID!]".',
                'Argument "filter" for fragment "F" is expected to be of type "FooFilter".',
            ],
            self._get_messages('ids: [null], filter: {limit: "x"}'),
        )

    def test_literals_containing_variables_are_skipped(self) -> None:
        self.assertEqual([], self._get_messages('ids: ["1", $id], filter: {bar: $id}'))

    def test_unknown_arguments_and_types_are_skipped(self) -> None:
        self.assertEqual([], self._get_messages('bogus: 1, unknownType: "x"'))

    def test_error_location(self) -> None:
        document_text = 'query Q { ...F @arguments(intVal: "Test") }' + FRAGMENT_TEXT
        errors = get_validation_errors(document_text, [RelayArgumentsOfCorrectTypeRule])

        self.assertEqual(1, len(errors))
        # Reported at the invalid value.
        self.assertEqual((1, 35), tuple(errors[0].locations[0]))
