"""
Force internal state onto objects and classes for white-box tests.

The setters locate a field on the target's type hierarchy, including private
``__name`` fields (name-mangled per declaring class), ``__slots__`` members,
annotated attributes, pydantic fields and pydantic private attributes, then
write the value without running validators, property setters or frozen
checks. Nothing about the value is checked; leaving the object consistent is
the caller's job.

A name that cannot be found raises ReflectionError instead of silently
creating a new attribute.
"""

from __future__ import annotations

import importlib
import inspect
import types
from typing import Any, Iterator, Optional, Tuple, Union

from botharness.errors import ReflectionError

ClassRef = Union[type, str]

_MISSING = object()


def _candidates(klass: type, field_name: str) -> Iterator[str]:
    yield field_name
    if field_name.startswith("__") and not field_name.endswith("__"):
        yield f"_{klass.__name__.lstrip('_')}{field_name}"


def _annotations(klass: type) -> dict:
    try:
        return inspect.get_annotations(klass)
    except NameError:
        return vars(klass).get("__annotations__", {})


def _declares(klass: type, name: str) -> bool:
    namespace = vars(klass)
    if name in namespace or name in _annotations(klass):
        return True
    slots = namespace.get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return name in slots


def _hierarchy(klass: type) -> Tuple[type, ...]:
    return tuple(k for k in klass.__mro__ if k is not object)


def _find_declared(klass: type, field_name: str) -> Optional[Tuple[type, str]]:
    """Return (declaring class, attribute name) for `field_name`, if any."""
    for owner in _hierarchy(klass):
        for name in _candidates(owner, field_name):
            if _declares(owner, name):
                return owner, name
    return None


def _is_pydantic_private(klass: type, name: str) -> bool:
    return name in (getattr(klass, "__private_attributes__", None) or {})


def _is_pydantic_field(klass: type, name: str) -> bool:
    return name in (getattr(klass, "model_fields", None) or {})


def _resolve_class(type_or_path: ClassRef) -> type:
    if isinstance(type_or_path, type):
        return type_or_path
    module_name, _, class_name = str(type_or_path).rpartition(".")
    if not module_name:
        raise ReflectionError(str(type_or_path), "", "expected a dotted 'module.Class' path")
    try:
        klass = getattr(importlib.import_module(module_name), class_name)
    except (ImportError, AttributeError) as exc:
        raise ReflectionError(module_name, class_name, f"cannot resolve class ({exc})") from exc
    if not isinstance(klass, type):
        raise ReflectionError(module_name, class_name, "not a class")
    return klass


def _instance_slot(obj: Any, field_name: str) -> Tuple[str, str]:
    """
    Locate where `field_name` lives on `obj`.

    Returns a (kind, attribute name) pair where kind is one of "private"
    (pydantic private storage), "dict" (instance __dict__) or "attr"
    (object.__setattr__, used for slots).
    """
    klass = type(obj)
    if _is_pydantic_private(klass, field_name):
        return "private", field_name
    if _is_pydantic_field(klass, field_name):
        return "dict", field_name

    found = _find_declared(klass, field_name)
    if found is not None:
        owner, name = found
        attr = vars(owner).get(name)
        if isinstance(attr, property):
            # A property shadows the instance dict; there is nothing to write.
            raise ReflectionError(klass.__qualname__, field_name, "is a property, not a field")
        if isinstance(attr, types.MemberDescriptorType) or not hasattr(obj, "__dict__"):
            return "attr", name
        return "dict", name

    instance_dict = getattr(obj, "__dict__", None)
    if instance_dict is not None:
        for owner in _hierarchy(klass):
            for name in _candidates(owner, field_name):
                if name in instance_dict:
                    return "dict", name
    raise ReflectionError(klass.__qualname__, field_name)


def set_instance_field(obj: Any, field_name: str, value: Any) -> None:
    """
    Overwrite `field_name` on `obj`, bypassing access control and validation.

    Raises
    ------
    ReflectionError
        If neither the type of `obj`, its ancestors nor the instance itself
        carry `field_name`.
    """
    kind, name = _instance_slot(obj, field_name)
    if kind == "private":
        private = getattr(obj, "__pydantic_private__", None)
        if private is None:
            private = {}
            object.__setattr__(obj, "__pydantic_private__", private)
        private[name] = value
    elif kind == "dict":
        vars(obj)[name] = value
    else:
        object.__setattr__(obj, name, value)


def get_instance_field(obj: Any, field_name: str) -> Any:
    """Read `field_name` from `obj` using the same lookup as `set_instance_field`."""
    kind, name = _instance_slot(obj, field_name)
    if kind == "private":
        private = getattr(obj, "__pydantic_private__", None) or {}
        if name not in private:
            raise ReflectionError(type(obj).__qualname__, field_name, "not initialised")
        return private[name]
    value = vars(obj).get(name, _MISSING) if kind == "dict" else getattr(obj, name, _MISSING)
    if value is _MISSING:
        value = getattr(type(obj), name, _MISSING)
    if value is _MISSING:
        raise ReflectionError(type(obj).__qualname__, field_name, "not initialised")
    return value


def _class_slot(type_or_path: ClassRef, field_name: str) -> Tuple[type, str]:
    klass = _resolve_class(type_or_path)
    found = _find_declared(klass, field_name)
    if found is None:
        raise ReflectionError(klass.__qualname__, field_name)
    return found


def set_static_field(type_or_path: ClassRef, field_name: str, value: Any) -> None:
    """
    Overwrite the class-level `field_name` on the class that declares it.

    `type_or_path` is a class or a dotted ``"package.module.Class"`` path. No
    instance is needed; subclasses that do not redeclare the field see the
    new value.

    Raises
    ------
    ReflectionError
        If the class cannot be resolved or no class in its hierarchy declares
        `field_name`.
    """
    owner, name = _class_slot(type_or_path, field_name)
    type.__setattr__(owner, name, value)


def get_static_field(type_or_path: ClassRef, field_name: str) -> Any:
    """Read the class-level `field_name` from the class that declares it."""
    owner, name = _class_slot(type_or_path, field_name)
    if name not in vars(owner):
        raise ReflectionError(owner.__qualname__, field_name, "declared but not assigned")
    return vars(owner)[name]


__all__ = [
    "get_instance_field",
    "get_static_field",
    "set_instance_field",
    "set_static_field",
]
