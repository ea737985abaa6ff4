"""Immutable traversal configuration for recursive assertions.

All helpers return a new configuration; a configuration never changes once a
driver holds it.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING, cast

from pyrsistent import PRecord, field, pset_field, pvector_field

if TYPE_CHECKING:
    from deepassert.core.location import FieldLocation


class CollectionAssertionPolicy(Enum):
    """How sequences and arrays are asserted.

    ELEMENTS_ONLY: Assert each element, never the collection object itself.

    COLLECTION_OBJECT_ONLY: Assert the collection object, never its elements.

    COLLECTION_OBJECT_AND_ELEMENTS: Assert both the collection and its elements.
    """

    ELEMENTS_ONLY = "elements_only"
    COLLECTION_OBJECT_ONLY = "collection_object_only"
    COLLECTION_OBJECT_AND_ELEMENTS = "collection_object_and_elements"


class MapAssertionPolicy(Enum):
    """How mappings are asserted.

    MAP_VALUES_ONLY: Assert the values, never the mapping object itself.

    MAP_OBJECT_ONLY: Assert the mapping object, never its keys or values.

    MAP_OBJECT_AND_ENTRIES: Assert the mapping, its values, then its keys.
    """

    MAP_VALUES_ONLY = "map_values_only"
    MAP_OBJECT_ONLY = "map_object_only"
    MAP_OBJECT_AND_ENTRIES = "map_object_and_entries"


def _max_depth_invariant(value: int | None) -> tuple[bool, str]:
    return value is None or value >= 0, "max_depth must be >= 0 or None"


class RecursiveAssertionConfiguration(PRecord):
    """Policies consulted by the recursive assertion driver.

    Attributes:
        ignore_all_none_fields: Skip nodes whose value is None.
        assert_over_primitive_fields: Assert nodes typed bool/int/float/complex.
        ignore_all_empty_optional_fields: Skip empty optional wrappers.
        skip_standard_library_type_objects: Never walk the fields of objects
            whose class comes from the Python standard library. Also gates
            the dedicated handling of optional wrappers.
        collection_assertion_policy: Sequence and array policy.
        map_assertion_policy: Mapping policy.
        ignored_fields: Field names or dotted paths to skip.
        ignored_fields_regexes: Patterns matched against field names and paths.
        ignored_types: Exact node types to skip.
        max_depth: Deepest location that is still expanded, or None.
    """

    ignore_all_none_fields = field(type=bool, initial=False, mandatory=True)
    assert_over_primitive_fields = field(type=bool, initial=True, mandatory=True)
    ignore_all_empty_optional_fields = field(type=bool, initial=False, mandatory=True)
    skip_standard_library_type_objects = field(type=bool, initial=True, mandatory=True)
    collection_assertion_policy = field(
        type=CollectionAssertionPolicy,
        initial=CollectionAssertionPolicy.COLLECTION_OBJECT_AND_ELEMENTS,
        mandatory=True,
    )
    map_assertion_policy = field(
        type=MapAssertionPolicy,
        initial=MapAssertionPolicy.MAP_OBJECT_AND_ENTRIES,
        mandatory=True,
    )
    ignored_fields = pset_field(str)
    ignored_fields_regexes = pvector_field(re.Pattern)
    ignored_types = pset_field(type)
    max_depth = field(type=(int, type(None)), initial=None, invariant=_max_depth_invariant)

    # -- fluent helpers ----------------------------------------------------

    def ignoring_fields(self, *names: str) -> RecursiveAssertionConfiguration:
        return self._evolve(ignored_fields=self.ignored_fields.update(names))

    def ignoring_fields_matching_regexes(
        self, *patterns: str | re.Pattern[str]
    ) -> RecursiveAssertionConfiguration:
        compiled = [re.compile(p) if isinstance(p, str) else p for p in patterns]
        return self._evolve(ignored_fields_regexes=self.ignored_fields_regexes.extend(compiled))

    def ignoring_fields_of_types(self, *types: type) -> RecursiveAssertionConfiguration:
        return self._evolve(ignored_types=self.ignored_types.update(types))

    def ignoring_all_none_fields(self, flag: bool = True) -> RecursiveAssertionConfiguration:
        return self._evolve(ignore_all_none_fields=flag)

    def ignoring_primitive_fields(self, flag: bool = True) -> RecursiveAssertionConfiguration:
        return self._evolve(assert_over_primitive_fields=not flag)

    def ignoring_all_empty_optional_fields(
        self, flag: bool = True
    ) -> RecursiveAssertionConfiguration:
        return self._evolve(ignore_all_empty_optional_fields=flag)

    def with_standard_library_type_objects_skipped(
        self, flag: bool
    ) -> RecursiveAssertionConfiguration:
        return self._evolve(skip_standard_library_type_objects=flag)

    def with_collection_assertion_policy(
        self, policy: CollectionAssertionPolicy
    ) -> RecursiveAssertionConfiguration:
        return self._evolve(collection_assertion_policy=policy)

    def with_map_assertion_policy(
        self, policy: MapAssertionPolicy
    ) -> RecursiveAssertionConfiguration:
        return self._evolve(map_assertion_policy=policy)

    def with_max_depth(self, max_depth: int | None) -> RecursiveAssertionConfiguration:
        return self._evolve(max_depth=max_depth)

    def _evolve(self, **changes: object) -> RecursiveAssertionConfiguration:
        return cast(RecursiveAssertionConfiguration, self.set(**changes))

    # -- queries -----------------------------------------------------------

    def matches_an_ignored_field(self, location: FieldLocation) -> bool:
        if not self.ignored_fields or location.is_root:
            return False
        return location.field_name in self.ignored_fields or location.path in self.ignored_fields

    def matches_an_ignored_field_regex(self, location: FieldLocation) -> bool:
        if not self.ignored_fields_regexes or location.is_root:
            return False
        name = location.field_name
        path = location.path
        return any(
            pattern.fullmatch(name) is not None or pattern.fullmatch(path) is not None
            for pattern in self.ignored_fields_regexes
        )
