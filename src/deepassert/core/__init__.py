"""Recursive assertions over arbitrary object graphs.

A predicate is applied to every node reachable from a root value; the result
is the list of FieldLocations where it failed:

    driver = RecursiveAssertionDriver(RecursiveAssertionConfiguration())
    failures = driver.assert_over_object_graph(lambda v: v is not None, order)
"""

from deepassert.core.assertions import (
    RecursiveAssertion,
    RecursiveAssertionError,
    recursive_assertion,
)
from deepassert.core.configuration import (
    CollectionAssertionPolicy,
    MapAssertionPolicy,
    RecursiveAssertionConfiguration,
)
from deepassert.core.driver import RecursiveAssertionDriver, assert_over_object_graph
from deepassert.core.introspection import AttributeIntrospector, FieldIntrospector
from deepassert.core.location import FieldLocation
from deepassert.core.optional import (
    EmptyOptionalError,
    OptionalDouble,
    OptionalInt,
    OptionalLong,
    OptionalValue,
)
from deepassert.core.policy import StructuralKind
from deepassert.core.report import failure_tree, format_failures

__all__ = [
    "RecursiveAssertionDriver",
    "assert_over_object_graph",
    "FieldLocation",
    # Configuration
    "RecursiveAssertionConfiguration",
    "CollectionAssertionPolicy",
    "MapAssertionPolicy",
    # Introspection
    "FieldIntrospector",
    "AttributeIntrospector",
    "StructuralKind",
    # Optional wrappers
    "OptionalValue",
    "OptionalInt",
    "OptionalDouble",
    "OptionalLong",
    "EmptyOptionalError",
    # Assertions and reporting
    "RecursiveAssertion",
    "RecursiveAssertionError",
    "recursive_assertion",
    "failure_tree",
    "format_failures",
]
