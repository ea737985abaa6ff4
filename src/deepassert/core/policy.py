"""Pure policy decisions for the recursive assertion walker.

Every function here answers one yes/no question about a node given the active
configuration. None of them look at the visited set or mutate anything.
"""

from __future__ import annotations

import array
import sys
from collections.abc import Collection, Mapping
from enum import Enum
from typing import Any

from pyrsistent import PRecord

from deepassert.core.configuration import (
    CollectionAssertionPolicy,
    MapAssertionPolicy,
    RecursiveAssertionConfiguration,
)
from deepassert.core.location import FieldLocation
from deepassert.core.optional import (
    OptionalDouble,
    OptionalInt,
    OptionalLong,
    OptionalValue,
    is_empty_optional,
)

# ---------------------------------------------------------------------------
# Structural kinds
# ---------------------------------------------------------------------------


class StructuralKind(Enum):
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    ARRAY = "array"
    MAP = "map"
    OPTIONAL = "optional"
    OPTIONAL_INT = "optional_int"
    OPTIONAL_DOUBLE = "optional_double"
    OPTIONAL_LONG = "optional_long"
    PLAIN_OBJECT = "plain_object"

    @property
    def is_collection(self) -> bool:
        return self in (StructuralKind.SEQUENCE, StructuralKind.ARRAY)

    @property
    def is_optional(self) -> bool:
        return self in _OPTIONAL_KINDS


_OPTIONAL_KINDS = frozenset(
    {
        StructuralKind.OPTIONAL,
        StructuralKind.OPTIONAL_INT,
        StructuralKind.OPTIONAL_DOUBLE,
        StructuralKind.OPTIONAL_LONG,
    }
)

PRIMITIVE_TYPES: frozenset[type] = frozenset({bool, int, float, complex})

# Collections that read as a single value rather than a container of elements.
_TEXT_TYPES: tuple[type, ...] = (str, bytes, bytearray, memoryview)

# Order matters: specializations first so a subclass never reads as the generic wrapper.
_OPTIONAL_KIND_BY_TYPE: tuple[tuple[type, StructuralKind], ...] = (
    (OptionalInt, StructuralKind.OPTIONAL_INT),
    (OptionalDouble, StructuralKind.OPTIONAL_DOUBLE),
    (OptionalLong, StructuralKind.OPTIONAL_LONG),
    (OptionalValue, StructuralKind.OPTIONAL),
)

_STDLIB_ROOTS: frozenset[str] = frozenset(sys.stdlib_module_names) | {"builtins"}


def is_primitive_type(node_type: type) -> bool:
    return node_type in PRIMITIVE_TYPES


def is_standard_library_type(node_type: type) -> bool:
    """True when ``node_type`` is defined in ``builtins`` or a stdlib module."""
    module = getattr(node_type, "__module__", None) or ""
    return module.partition(".")[0] in _STDLIB_ROOTS


def classify(node_type: type, configuration: RecursiveAssertionConfiguration) -> StructuralKind:
    """Return the structural kind of a node from its (runtime or declared) type.

    Optional wrappers only get their dedicated kinds while standard library
    objects are being skipped; otherwise they are walked as plain objects.
    """
    if node_type is type(None) or node_type in PRIMITIVE_TYPES:
        return StructuralKind.SCALAR
    if issubclass(node_type, _TEXT_TYPES) or issubclass(node_type, Enum):
        return StructuralKind.SCALAR
    # Records are mappings underneath but expose named fields.
    if issubclass(node_type, PRecord):
        return StructuralKind.PLAIN_OBJECT
    if issubclass(node_type, Mapping):
        return StructuralKind.MAP
    if issubclass(node_type, array.array):
        return StructuralKind.ARRAY
    for optional_type, kind in _OPTIONAL_KIND_BY_TYPE:
        if issubclass(node_type, optional_type):
            if configuration.skip_standard_library_type_objects:
                return kind
            return StructuralKind.PLAIN_OBJECT
    if issubclass(node_type, Collection):
        return StructuralKind.SEQUENCE
    return StructuralKind.PLAIN_OBJECT


# ---------------------------------------------------------------------------
# Ignore rules (evaluated in order, first match wins)
# ---------------------------------------------------------------------------


def node_is_none_and_we_are_ignoring_those(
    value: Any, configuration: RecursiveAssertionConfiguration
) -> bool:
    return value is None and configuration.ignore_all_none_fields


def node_is_primitive_and_we_are_ignoring_those(
    node_type: type, configuration: RecursiveAssertionConfiguration
) -> bool:
    return is_primitive_type(node_type) and not configuration.assert_over_primitive_fields


def node_is_empty_optional_and_we_are_ignoring_those(
    value: Any, configuration: RecursiveAssertionConfiguration
) -> bool:
    return configuration.ignore_all_empty_optional_fields and is_empty_optional(value)


def node_is_ignored_by_name_or_name_pattern(
    location: FieldLocation, configuration: RecursiveAssertionConfiguration
) -> bool:
    return configuration.matches_an_ignored_field(
        location
    ) or configuration.matches_an_ignored_field_regex(location)


def node_is_ignored_by_type(
    node_type: type, configuration: RecursiveAssertionConfiguration
) -> bool:
    return node_type in configuration.ignored_types


def node_must_be_ignored(
    value: Any,
    node_type: type,
    location: FieldLocation,
    configuration: RecursiveAssertionConfiguration,
) -> bool:
    return (
        node_is_none_and_we_are_ignoring_those(value, configuration)
        or node_is_primitive_and_we_are_ignoring_those(node_type, configuration)
        or node_is_empty_optional_and_we_are_ignoring_those(value, configuration)
        or node_is_ignored_by_name_or_name_pattern(location, configuration)
        or node_is_ignored_by_type(node_type, configuration)
    )


# ---------------------------------------------------------------------------
# Assertion and recursion gates
# ---------------------------------------------------------------------------


def policy_forbids_asserting_over_node(
    kind: StructuralKind, configuration: RecursiveAssertionConfiguration
) -> bool:
    """True when the container object itself must not reach the predicate."""
    if kind.is_collection:
        return configuration.collection_assertion_policy is CollectionAssertionPolicy.ELEMENTS_ONLY
    if kind is StructuralKind.MAP:
        return configuration.map_assertion_policy is MapAssertionPolicy.MAP_VALUES_ONLY
    return False


def policy_allows_recursing_into_special_kind(
    kind: StructuralKind, configuration: RecursiveAssertionConfiguration
) -> bool:
    if kind.is_collection:
        return (
            configuration.collection_assertion_policy
            is not CollectionAssertionPolicy.COLLECTION_OBJECT_ONLY
        )
    if kind is StructuralKind.MAP:
        return configuration.map_assertion_policy is not MapAssertionPolicy.MAP_OBJECT_ONLY
    return kind.is_optional


def node_should_have_fields_walked(
    value: Any, configuration: RecursiveAssertionConfiguration
) -> bool:
    if value is None:
        return False
    return not (
        configuration.skip_standard_library_type_objects
        and is_standard_library_type(type(value))
    )
