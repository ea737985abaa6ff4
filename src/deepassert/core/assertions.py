"""Fluent entry point for recursive assertions in tests.

    recursive_assertion(order).ignoring_fields("id").all_fields_satisfy(lambda v: v != "")
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from deepassert.core.configuration import (
    CollectionAssertionPolicy,
    MapAssertionPolicy,
    RecursiveAssertionConfiguration,
)
from deepassert.core.driver import Predicate, RecursiveAssertionDriver
from deepassert.core.introspection import FieldIntrospector
from deepassert.core.location import FieldLocation
from deepassert.core.report import format_failures


class RecursiveAssertionError(AssertionError):
    """Raised when at least one node of the graph fails the predicate."""

    def __init__(self, root: Any, failures: Sequence[FieldLocation]) -> None:
        self.root = root
        self.failures = tuple(failures)
        super().__init__(format_failures(root, self.failures))

    @property
    def paths(self) -> list[str]:
        return [location.path for location in self.failures]


class RecursiveAssertion:
    """Holds the object under test and the configuration to walk it with."""

    __slots__ = ("_actual", "_configuration", "_introspector")

    def __init__(
        self,
        actual: Any,
        configuration: RecursiveAssertionConfiguration | None = None,
        introspector: FieldIntrospector | None = None,
    ) -> None:
        if actual is None:
            raise ValueError("cannot run a recursive assertion on None")
        self._actual = actual
        self._configuration = (
            configuration if configuration is not None else RecursiveAssertionConfiguration()
        )
        self._introspector = introspector

    @property
    def configuration(self) -> RecursiveAssertionConfiguration:
        return self._configuration

    # -- configuration -----------------------------------------------------

    def ignoring_fields(self, *names: str) -> RecursiveAssertion:
        return self._with(self._configuration.ignoring_fields(*names))

    def ignoring_fields_matching_regexes(
        self, *patterns: str | re.Pattern[str]
    ) -> RecursiveAssertion:
        return self._with(self._configuration.ignoring_fields_matching_regexes(*patterns))

    def ignoring_fields_of_types(self, *types: type) -> RecursiveAssertion:
        return self._with(self._configuration.ignoring_fields_of_types(*types))

    def ignoring_all_none_fields(self) -> RecursiveAssertion:
        return self._with(self._configuration.ignoring_all_none_fields())

    def ignoring_primitive_fields(self) -> RecursiveAssertion:
        return self._with(self._configuration.ignoring_primitive_fields())

    def ignoring_all_empty_optional_fields(self) -> RecursiveAssertion:
        return self._with(self._configuration.ignoring_all_empty_optional_fields())

    def with_standard_library_type_objects_skipped(self, flag: bool) -> RecursiveAssertion:
        return self._with(self._configuration.with_standard_library_type_objects_skipped(flag))

    def with_collection_assertion_policy(
        self, policy: CollectionAssertionPolicy
    ) -> RecursiveAssertion:
        return self._with(self._configuration.with_collection_assertion_policy(policy))

    def with_map_assertion_policy(self, policy: MapAssertionPolicy) -> RecursiveAssertion:
        return self._with(self._configuration.with_map_assertion_policy(policy))

    def with_max_depth(self, max_depth: int | None) -> RecursiveAssertion:
        return self._with(self._configuration.with_max_depth(max_depth))

    def _with(self, configuration: RecursiveAssertionConfiguration) -> RecursiveAssertion:
        return RecursiveAssertion(self._actual, configuration, self._introspector)

    # -- assertions --------------------------------------------------------

    def failing_locations(self, predicate: Predicate) -> tuple[FieldLocation, ...]:
        driver = RecursiveAssertionDriver(self._configuration, self._introspector)
        return driver.assert_over_object_graph(predicate, self._actual)

    def all_fields_satisfy(self, predicate: Predicate) -> RecursiveAssertion:
        failures = self.failing_locations(predicate)
        if failures:
            raise RecursiveAssertionError(self._actual, failures)
        return self

    def has_no_none_fields(self) -> RecursiveAssertion:
        return self.all_fields_satisfy(lambda value: value is not None)


def recursive_assertion(
    actual: Any,
    configuration: RecursiveAssertionConfiguration | None = None,
    introspector: FieldIntrospector | None = None,
) -> RecursiveAssertion:
    return RecursiveAssertion(actual, configuration, introspector)
