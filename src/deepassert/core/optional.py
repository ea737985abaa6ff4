"""Optional value wrappers.

``OptionalValue`` wraps any object; ``OptionalInt``, ``OptionalDouble`` and
``OptionalLong`` wrap a single primitive. An empty wrapper holds nothing; the
walker treats the generic and primitive flavors differently when empty.
"""

from __future__ import annotations

from typing import Any, ClassVar


class EmptyOptionalError(ValueError):
    """Raised when reading the value of an empty optional wrapper."""


class _OptionalBase:
    __slots__ = ("_value",)

    element_type: ClassVar[type] = object

    def __init__(self, value: Any = None) -> None:
        self._value = value

    @classmethod
    def of(cls, value: Any):
        if value is None:
            raise ValueError(f"{cls.__name__}.of() requires a value; use empty()")
        return cls(cls._coerce(value))

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def _coerce(cls, value: Any) -> Any:
        return value

    @property
    def is_present(self) -> bool:
        return self._value is not None

    @property
    def is_empty(self) -> bool:
        return self._value is None

    def get(self) -> Any:
        if self._value is None:
            raise EmptyOptionalError(f"{type(self).__name__} is empty")
        return self._value

    def or_else(self, default: Any) -> Any:
        return default if self._value is None else self._value

    def __eq__(self, other: object) -> bool:
        if type(other) is type(self):
            return self._value == other._value  # type: ignore[attr-defined]
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._value))

    def __repr__(self) -> str:
        if self._value is None:
            return f"{type(self).__name__}.empty"
        return f"{type(self).__name__}[{self._value!r}]"


class OptionalValue(_OptionalBase):
    """Wrapper around any object, or nothing."""

    __slots__ = ()


class OptionalInt(_OptionalBase):
    __slots__ = ()

    element_type = int

    @classmethod
    def _coerce(cls, value: Any) -> int:
        return int(value)


class OptionalDouble(_OptionalBase):
    __slots__ = ()

    element_type = float

    @classmethod
    def _coerce(cls, value: Any) -> float:
        return float(value)


class OptionalLong(_OptionalBase):
    __slots__ = ()

    element_type = int

    @classmethod
    def _coerce(cls, value: Any) -> int:
        return int(value)


PRIMITIVE_OPTIONAL_TYPES: tuple[type[_OptionalBase], ...] = (
    OptionalInt,
    OptionalDouble,
    OptionalLong,
)
OPTIONAL_TYPES: tuple[type[_OptionalBase], ...] = (OptionalValue, *PRIMITIVE_OPTIONAL_TYPES)


def is_empty_optional(value: Any) -> bool:
    return isinstance(value, OPTIONAL_TYPES) and value.is_empty
