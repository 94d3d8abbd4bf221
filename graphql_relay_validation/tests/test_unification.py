# Copyright 2021-present Kensho Technologies, LLC.
import unittest

from ..unification import (
    get_operations_referencing_fragment,
    get_unified_variable_definitions_for_fragment,
)
from .test_helpers import get_validation_context


def _make_document(first_variables: str, second_variables: str) -> str:
    """Return a document with two operations using fragment F, with the given variables."""
    return """
        query A%(first_variables)s {
            node(id: "1") {
                ...F
            }
        }

        query B%(second_variables)s {
            node(id: "2") {
                ...F
            }
        }

        fragment F on Foo {
            bar
        }
    """ % {
        "first_variables": first_variables,
        "second_variables": second_variables,
    }


class UnificationTests(unittest.TestCase):
    def test_operations_referencing_fragment(self) -> None:
        context, _ = get_validation_context(
            """
            query Direct {
                foo {
                    ...F
                }
            }

            query Indirect {
                foo {
                    ...G
                }
            }

            query Unrelated {
                foo {
                    bar
                }
            }

            fragment G on Foo {
                ...F
            }

            fragment F on Foo {
                bar
            }
            """
        )

        self.assertEqual(
            ["Direct", "Indirect"],
            [
                operation.name.value
                for operation in get_operations_referencing_fragment(context, "F")
            ],
        )
        self.assertEqual([], get_operations_referencing_fragment(context, "Missing"))

    def test_unused_fragment_has_no_definitions(self) -> None:
        context, _ = get_validation_context(
            """
            fragment F on Foo {
                bar
            }
            """
        )
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        self.assertEqual({}, unified_variables.definitions)
        self.assertEqual(frozenset(), unified_variables.conflicting_names)

    def test_identical_definitions(self) -> None:
        context, _ = get_validation_context(_make_document("($id: ID!)", "($id: ID!)"))
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        self.assertEqual(["id"], list(unified_variables.definitions))
        self.assertEqual("ID!", str(unified_variables.definitions["id"].schema_type))

    def test_only_variables_of_every_operation_are_unified(self) -> None:
        context, _ = get_validation_context(
            _make_document("($id: ID!, $limit: Int)", "($limit: Int, $extra: String)")
        )
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        self.assertEqual(["limit"], list(unified_variables.definitions))
        self.assertEqual(frozenset(), unified_variables.conflicting_names)

    def test_non_null_and_nullable_definitions_unify_to_nullable(self) -> None:
        context, _ = get_validation_context(_make_document("($id: ID!)", "($id: ID)"))
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        self.assertEqual("ID", str(unified_variables.definitions["id"].schema_type))

    def test_nullable_definition_with_default_counts_as_non_null(self) -> None:
        context, _ = get_validation_context(_make_document("($id: ID!)", '($id: ID = "1")'))
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        unified_definition = unified_variables.definitions["id"]
        self.assertEqual("ID!", str(unified_definition.schema_type))
        self.assertIsNone(unified_definition.default_value)

    def test_non_null_defaults_in_every_operation_unify_to_non_null(self) -> None:
        context, _ = get_validation_context(_make_document("($n: Int = 1)", "($n: Int = 2)"))
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        unified_definition = unified_variables.definitions["n"]
        self.assertEqual("Int!", str(unified_definition.schema_type))

    def test_list_definitions_unify_to_supertype(self) -> None:
        context, _ = get_validation_context(_make_document("($ids: [ID!])", "($ids: [ID])"))
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        self.assertEqual("[ID]", str(unified_variables.definitions["ids"].schema_type))

    def test_conflicting_definitions(self) -> None:
        context, _ = get_validation_context(_make_document("($id: Int)", "($id: String)"))
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        self.assertEqual({}, unified_variables.definitions)
        self.assertEqual(frozenset({"id"}), unified_variables.conflicting_names)

    def test_unknown_type_keeps_variable_defined_without_type(self) -> None:
        context, _ = get_validation_context(_make_document("($id: Bogus)", "($id: ID!)"))
        unified_variables = get_unified_variable_definitions_for_fragment(context, "F")

        self.assertIn("id", unified_variables.definitions)
        self.assertIsNone(unified_variables.definitions["id"].schema_type)
        self.assertEqual(frozenset(), unified_variables.conflicting_names)
