"""Field introspection used by the walker to descend into plain objects.

The walker never reads attributes directly; it goes through a FieldIntrospector
so callers can swap in their own notion of "fields" (ORM rows, protobufs, ...).
"""

from __future__ import annotations

import builtins
import dataclasses
import logging
import types
import typing
from collections.abc import Sequence
from functools import lru_cache
from typing import Any, Protocol, Union, runtime_checkable

from pyrsistent import PClass, PRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class FieldIntrospector(Protocol):
    """Enumerates the fields of an object and reads them."""

    def field_names(self, obj: Any) -> Sequence[str]: ...

    def field_value(self, obj: Any, name: str) -> tuple[Any, type]: ...


# ---------------------------------------------------------------------------
# Declared type resolution
# ---------------------------------------------------------------------------


def _resolve_declared_type(hint: Any) -> type:
    """Reduce a type hint to a concrete class, ``object`` when there is none."""
    if hint is Any:
        return object
    if isinstance(hint, type) and not isinstance(hint, types.GenericAlias):
        return hint

    origin = typing.get_origin(hint)
    if origin in (Union, types.UnionType):
        members = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(members) == 1:
            return _resolve_declared_type(members[0])
        return object
    if origin is typing.Annotated:
        return _resolve_declared_type(typing.get_args(hint)[0])
    if isinstance(origin, type):
        return origin
    return object


@lru_cache(maxsize=512)
def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError) as exc:
        logger.debug("Falling back to raw annotations for %s: %s", cls.__qualname__, exc)
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            for name, hint in klass.__dict__.get("__annotations__", {}).items():
                if isinstance(hint, str):
                    # Only builtin names can be resolved without the defining scope.
                    hint = getattr(builtins, hint, object)
                hints[name] = hint
        return hints


def _is_class_var(hint: Any) -> bool:
    return hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar


@lru_cache(maxsize=512)
def _declared_types(cls: type) -> dict[str, type]:
    if issubclass(cls, PRecord):
        return {name: _pyrsistent_type(f.type) for name, f in cls._precord_fields.items()}
    if issubclass(cls, PClass):
        return {name: _pyrsistent_type(f.type) for name, f in cls._pclass_fields.items()}
    return {
        name: _resolve_declared_type(hint)
        for name, hint in _type_hints(cls).items()
        if not _is_class_var(hint)
    }


def _pyrsistent_type(field_types: Any) -> type:
    candidates = [t for t in field_types if t is not type(None)]
    if len(candidates) == 1 and isinstance(candidates[0], type):
        return candidates[0]
    return object


def _slot_names(cls: type) -> list[str]:
    names: list[str] = []
    for klass in cls.__mro__:
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(s for s in slots if s not in ("__dict__", "__weakref__"))
    return names


# ---------------------------------------------------------------------------
# Default implementation
# ---------------------------------------------------------------------------


class AttributeIntrospector:
    """Reads dataclass fields, pyrsistent record fields, or instance attributes.

    Field order is deterministic:
      - dataclasses: declaration order;
      - PRecord / PClass: sorted field names;
      - anything else: annotated class attributes in declaration order, then
        the remaining instance attributes and filled slots, sorted.
    Dunder names are never reported.
    """

    def field_names(self, obj: Any) -> Sequence[str]:
        if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
            return tuple(f.name for f in dataclasses.fields(obj))
        if isinstance(obj, PRecord):
            return tuple(sorted(type(obj)._precord_fields))
        if isinstance(obj, PClass):
            return tuple(sorted(type(obj)._pclass_fields))
        return self._attribute_names(obj)

    def field_value(self, obj: Any, name: str) -> tuple[Any, type]:
        if isinstance(obj, PRecord):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        declared = _declared_types(type(obj)).get(name, object)
        return value, declared

    def _attribute_names(self, obj: Any) -> tuple[str, ...]:
        cls = type(obj)
        annotated = [
            name
            for name, hint in _type_hints(cls).items()
            if not name.startswith("__") and not _is_class_var(hint) and _has_attribute(obj, name)
        ]
        instance_names: set[str] = set()
        instance_dict = getattr(obj, "__dict__", None)
        if isinstance(instance_dict, dict):
            instance_names.update(instance_dict)
        instance_names.update(n for n in _slot_names(cls) if _has_attribute(obj, n))

        seen = set(annotated)
        rest = sorted(n for n in instance_names if n not in seen and not n.startswith("__"))
        return (*annotated, *rest)


def _has_attribute(obj: Any, name: str) -> bool:
    try:
        getattr(obj, name)
    except AttributeError:
        return False
    return True


DEFAULT_INTROSPECTOR = AttributeIntrospector()
