"""Child enumeration for each structural kind.

Each expander yields ``Child`` records in the order the walker must visit
them. Expanders never consult ignore rules or the visited set; the walker does
that when it reaches each child.
"""

from __future__ import annotations

import array
from collections.abc import Collection, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from deepassert.core.configuration import MapAssertionPolicy, RecursiveAssertionConfiguration
from deepassert.core.introspection import FieldIntrospector
from deepassert.core.location import INDEX_FORMAT, KEY_FORMAT, OPTIONAL_VALUE, VALUE_FORMAT
from deepassert.core.optional import OptionalValue
from deepassert.core.policy import StructuralKind, is_primitive_type


@dataclass(frozen=True)
class Child:
    value: Any
    node_type: type
    segment: str


# array.array typecodes -> element type
_ARRAY_COMPONENT_TYPES: dict[str, type] = {
    "b": int,
    "B": int,
    "h": int,
    "H": int,
    "i": int,
    "I": int,
    "l": int,
    "L": int,
    "q": int,
    "Q": int,
    "f": float,
    "d": float,
    "u": str,
    "w": str,
}


def runtime_type(value: Any) -> type:
    """Type of ``value``, with ``object`` standing in for None."""
    return object if value is None else type(value)


def array_component_type(arr: array.array) -> type:
    return _ARRAY_COMPONENT_TYPES.get(arr.typecode, object)


# ---------------------------------------------------------------------------
# Container expanders
# ---------------------------------------------------------------------------


def expand_sequence(node: Collection[Any]) -> Iterator[Child]:
    for idx, element in enumerate(node):
        yield Child(element, runtime_type(element), INDEX_FORMAT.format(idx))


def expand_array(node: array.array) -> Iterator[Child]:
    component_type = array_component_type(node)
    for idx, element in enumerate(node):
        yield Child(element, component_type, INDEX_FORMAT.format(idx))


def expand_map(
    node: Mapping[Any, Any], configuration: RecursiveAssertionConfiguration
) -> Iterator[Child]:
    # Values for every policy that recurses; keys only with MAP_OBJECT_AND_ENTRIES.
    for value in node.values():
        yield Child(value, runtime_type(value), VALUE_FORMAT.format(str(value)))
    if configuration.map_assertion_policy is MapAssertionPolicy.MAP_OBJECT_AND_ENTRIES:
        for key in node.keys():
            yield Child(key, runtime_type(key), KEY_FORMAT.format(str(key)))


def expand_optional(node: OptionalValue) -> Iterator[Child]:
    if node.is_present:
        value = node.get()
        yield Child(value, type(value), OPTIONAL_VALUE)
    else:
        yield Child(None, object, OPTIONAL_VALUE)


def expand_primitive_optional(node: Any) -> Iterator[Child]:
    # An empty primitive optional has no sensible stand-in value, so it has no child.
    if node.is_present:
        yield Child(node.get(), node.element_type, OPTIONAL_VALUE)


def expand_special_kind(
    kind: StructuralKind, node: Any, configuration: RecursiveAssertionConfiguration
) -> Iterator[Child]:
    if node is None:
        return iter(())
    match kind:
        case StructuralKind.SEQUENCE:
            return expand_sequence(node)
        case StructuralKind.ARRAY:
            return expand_array(node)
        case StructuralKind.MAP:
            return expand_map(node, configuration)
        case StructuralKind.OPTIONAL:
            return expand_optional(node)
        case (
            StructuralKind.OPTIONAL_INT
            | StructuralKind.OPTIONAL_DOUBLE
            | StructuralKind.OPTIONAL_LONG
        ):
            return expand_primitive_optional(node)
        case _:
            raise ValueError(f"{kind} has no dedicated expander")


# ---------------------------------------------------------------------------
# Field expander
# ---------------------------------------------------------------------------


def expand_fields(node: Any, introspector: FieldIntrospector) -> Iterator[Child]:
    """Yield one child per field of ``node``.

    A primitive declared type wins over the runtime type, so primitive ignore
    rules still apply when a field holds e.g. an int declared as float.
    """
    for name in introspector.field_names(node):
        value, declared_type = introspector.field_value(node, name)
        if is_primitive_type(declared_type) or value is None:
            child_type = declared_type
        else:
            child_type = type(value)
        yield Child(value, child_type, name)
