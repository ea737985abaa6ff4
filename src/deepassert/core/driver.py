"""Recursive assertion driver.

Walks an object graph from a root value in depth-first pre-order, applies a
predicate to every node the configuration does not exclude, and records the
FieldLocation of every node the predicate rejects.

Each object instance is visited at most once per run, so cyclic and shared
graphs terminate. The walk uses an explicit stack; graph depth is bounded only
by memory (or ``max_depth`` when configured).
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any, NamedTuple

from deepassert.core.configuration import RecursiveAssertionConfiguration
from deepassert.core.expanders import Child, expand_fields, expand_special_kind
from deepassert.core.introspection import DEFAULT_INTROSPECTOR, FieldIntrospector
from deepassert.core.location import FieldLocation
from deepassert.core.policy import (
    PRIMITIVE_TYPES,
    StructuralKind,
    classify,
    node_must_be_ignored,
    node_should_have_fields_walked,
    policy_allows_recursing_into_special_kind,
    policy_forbids_asserting_over_node,
)

logger = logging.getLogger(__name__)

Predicate = Callable[[Any], object]

# Immutable atoms are never tracked: the interpreter caches, interns or shares
# them, so identity says nothing about whether two locations share a node.
_UNTRACKED_TYPES: frozenset[type] = PRIMITIVE_TYPES | {str, bytes}
_EMPTY_SINGLETON_TYPES: frozenset[type] = frozenset({tuple, frozenset})


def _is_shared_atom(value: Any) -> bool:
    value_type = type(value)
    if value is None or value_type in _UNTRACKED_TYPES or isinstance(value, Enum):
        return True
    return value_type in _EMPTY_SINGLETON_TYPES and not value


class _Node(NamedTuple):
    value: Any
    node_type: type
    location: FieldLocation


class _VisitedSet:
    """Identity-keyed membership; keeps a reference so ids are not recycled mid-run."""

    __slots__ = ("_marked",)

    def __init__(self) -> None:
        self._marked: dict[int, Any] = {}

    def mark(self, value: Any) -> bool:
        """Mark ``value``; return True when it was already marked."""
        if _is_shared_atom(value):
            return False
        key = id(value)
        if key in self._marked:
            return True
        self._marked[key] = value
        return False

    def __len__(self) -> int:
        return len(self._marked)

    def clear(self) -> None:
        self._marked.clear()


class RecursiveAssertionDriver:
    """Runs a predicate over every node of an object graph.

    One driver may run any number of traversals; each run starts from an
    empty visited set and failure list. A driver is not safe to share between
    threads running at the same time.
    """

    __slots__ = ("_configuration", "_failures", "_introspector", "_truncated", "_visited")

    def __init__(
        self,
        configuration: RecursiveAssertionConfiguration | None = None,
        introspector: FieldIntrospector | None = None,
    ) -> None:
        self._configuration = (
            configuration if configuration is not None else RecursiveAssertionConfiguration()
        )
        self._introspector = introspector if introspector is not None else DEFAULT_INTROSPECTOR
        self._visited = _VisitedSet()
        self._failures: list[FieldLocation] = []
        self._truncated: FieldLocation | None = None

    @property
    def configuration(self) -> RecursiveAssertionConfiguration:
        return self._configuration

    @property
    def failures(self) -> tuple[FieldLocation, ...]:
        """Locations rejected so far in the current (or last) run."""
        return tuple(self._failures)

    # -- public entry point ------------------------------------------------

    def assert_over_object_graph(
        self, predicate: Predicate, graph_node: Any
    ) -> tuple[FieldLocation, ...]:
        """Apply ``predicate`` to every reachable node and return rejected locations.

        Locations are in depth-first pre-order. Exceptions raised by the
        predicate propagate; ``failures`` still holds what was recorded first.
        """
        if graph_node is None:
            raise ValueError("the root of a recursive assertion must not be None")

        self.reset()
        logger.debug("Recursive assertion over %s", type(graph_node).__qualname__)

        stack: list[_Node] = [_Node(graph_node, type(graph_node), FieldLocation.root())]
        while stack:
            node = stack.pop()
            children = self._visit(predicate, node)
            # Reverse so the first child is popped first (pre-order).
            stack.extend(
                _Node(child.value, child.node_type, node.location.field(child.segment))
                for child in reversed(children)
            )

        if self._truncated is not None:
            warnings.warn(
                f"Recursive assertion stopped descending at {self._truncated.path!r}: "
                f"max_depth={self._configuration.max_depth} reached",
                RuntimeWarning,
                stacklevel=2,
            )

        logger.debug(
            "Recursive assertion visited %d objects, %d failures",
            len(self._visited),
            len(self._failures),
        )
        return self.failures

    def reset(self) -> None:
        self._visited.clear()
        self._failures.clear()
        self._truncated = None

    # -- per-node processing -----------------------------------------------

    def _visit(self, predicate: Predicate, node: _Node) -> list[Child]:
        value, node_type, location = node
        configuration = self._configuration

        if node_must_be_ignored(value, node_type, location, configuration):
            return []

        if self._visited.mark(value):
            return []

        kind = classify(node_type, configuration)
        if not policy_forbids_asserting_over_node(kind, configuration):
            if not predicate(value):
                self._failures.append(location)

        children = list(self._children_of(value, kind))
        if children and not self._may_descend(location):
            return []
        return children

    def _children_of(self, value: Any, kind: StructuralKind) -> Iterable[Child]:
        configuration = self._configuration
        if kind is StructuralKind.SCALAR:
            return ()
        if kind is not StructuralKind.PLAIN_OBJECT:
            if policy_allows_recursing_into_special_kind(kind, configuration):
                return expand_special_kind(kind, value, configuration)
            return ()
        if node_should_have_fields_walked(value, configuration):
            return expand_fields(value, self._introspector)
        return ()

    def _may_descend(self, location: FieldLocation) -> bool:
        max_depth = self._configuration.max_depth
        if max_depth is None or location.depth < max_depth:
            return True
        if self._truncated is None:
            self._truncated = location
        return False


def assert_over_object_graph(
    predicate: Predicate,
    graph_node: Any,
    configuration: RecursiveAssertionConfiguration | None = None,
    introspector: FieldIntrospector | None = None,
) -> tuple[FieldLocation, ...]:
    """Run ``predicate`` over ``graph_node`` with a fresh driver.

    Returns the rejected locations in depth-first pre-order.
    """
    return RecursiveAssertionDriver(configuration, introspector).assert_over_object_graph(
        predicate, graph_node
    )
