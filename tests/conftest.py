"""Pytest configuration and test helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from deepassert.core import (
    FieldLocation,
    OptionalDouble,
    OptionalInt,
    OptionalLong,
    OptionalValue,
    RecursiveAssertionConfiguration,
    RecursiveAssertionDriver,
)

# ---------------------------------------------------------------------------
# Model classes
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class Address:
    street: str
    number: int


@dataclass(eq=False)
class Person:
    name: str
    age: int
    address: Address | None = None
    friend: Person | None = None


@dataclass(eq=False)
class Holder:
    """Single field of any type."""

    x: Any = None


@dataclass(eq=False)
class Pair:
    left: Any = None
    right: Any = None


@dataclass(eq=False)
class Measurements:
    ratio: float
    count: int
    active: bool


@dataclass(eq=False)
class Optionals:
    generic: OptionalValue = field(default_factory=OptionalValue.empty)
    as_int: OptionalInt = field(default_factory=OptionalInt.empty)
    as_double: OptionalDouble = field(default_factory=OptionalDouble.empty)
    as_long: OptionalLong = field(default_factory=OptionalLong.empty)


class Node:
    """Plain (non-dataclass) object with instance attributes."""

    def __init__(self, name: str, next_node: Node | None = None) -> None:
        self.name = name
        self.next_node = next_node


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class Recorder:
    """Predicate that records every value it is called with.

    ``reject`` decides which values fail; by default nothing fails.
    """

    def __init__(self, reject: Any = None) -> None:
        self.calls: list[Any] = []
        self._reject = reject

    def __call__(self, value: Any) -> bool:
        self.calls.append(value)
        if self._reject is None:
            return True
        return not self._reject(value)


def run(
    root: Any,
    predicate: Any = None,
    configuration: RecursiveAssertionConfiguration | None = None,
) -> tuple[FieldLocation, ...]:
    """Run a fresh driver with a pass-everything predicate unless one is given."""
    if predicate is None:
        predicate = Recorder()
    return RecursiveAssertionDriver(configuration).assert_over_object_graph(predicate, root)


def paths(locations: tuple[FieldLocation, ...] | list[FieldLocation]) -> list[str]:
    return [location.path for location in locations]


def visited_paths(
    root: Any, configuration: RecursiveAssertionConfiguration | None = None
) -> list[str]:
    """Paths of every node that reached the predicate, in visiting order."""
    return paths(run(root, lambda value: False, configuration))
