"""Immutable field locations inside an object graph.

A FieldLocation is the ordered list of segments leading from the traversal
root to one node. Appending a segment returns a new location; the parent keeps
its segments and shares storage with every child derived from it.
"""

from __future__ import annotations

from collections.abc import Iterator

from pyrsistent import PVector, pvector

INDEX_FORMAT = "[{}]"
KEY_FORMAT = "KEY[{}]"
VALUE_FORMAT = "VAL[{}]"
OPTIONAL_VALUE = "VAL"


class FieldLocation:
    """Path of a node relative to the root of the walked graph."""

    __slots__ = ("_segments",)

    def __init__(self, segments: PVector[str] | None = None) -> None:
        self._segments: PVector[str] = segments if segments is not None else pvector()

    @classmethod
    def root(cls) -> FieldLocation:
        return cls()

    def field(self, name: str) -> FieldLocation:
        """Return the location of child ``name``; self is left unchanged."""
        return FieldLocation(self._segments.append(name))

    @property
    def segments(self) -> PVector[str]:
        return self._segments

    @property
    def field_name(self) -> str:
        """Final segment, or an empty string at the root."""
        if not self._segments:
            return ""
        return self._segments[-1]

    @property
    def is_root(self) -> bool:
        return not self._segments

    @property
    def depth(self) -> int:
        return len(self._segments)

    @property
    def path(self) -> str:
        """Dotted rendering; index segments attach to their parent (``items[0]``)."""
        parts: list[str] = []
        for segment in self._segments:
            if parts and not segment.startswith("["):
                parts.append(".")
            parts.append(segment)
        return "".join(parts)

    def __iter__(self) -> Iterator[str]:
        return iter(self._segments)

    def __len__(self) -> int:
        return len(self._segments)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FieldLocation):
            return self._segments == other._segments
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._segments)

    def __str__(self) -> str:
        return self.path

    def __repr__(self) -> str:
        return f"FieldLocation({self.path or '<root>'})"
