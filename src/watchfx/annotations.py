"""Reaction markers — declare which fields a handler method watches.

A method decorated with @on_change("a", "b") is called by the Inspector after
an edit cycle in which `a` or `b` changed on the object. The decorator may be
stacked; every occurrence is a separate annotation with its own field list.

register_handler() is the same declaration made from outside the class body,
for types you cannot (or prefer not to) decorate.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from watchfx import _anchor

F = TypeVar("F", bound=Callable)

WATCHES_ATTR = "__watchfx_watches__"


def _check_names(field_names: tuple) -> tuple[str, ...]:
    if not field_names:
        raise TypeError("on_change() needs at least one field name")
    for name in field_names:
        if not isinstance(name, str):
            raise TypeError(f"field names must be str, got {name!r}")
    return tuple(field_names)


def on_change(*field_names: str) -> Callable[[F], F]:
    """Decorator: mark a method as a handler for the named fields.

    The method takes either no arguments, or one `str` argument that receives
    the name of the field that changed.

    Usage:
        class Light:
            intensity = 1.0
            color = "white"

            @on_change("intensity", "color")
            def refresh(self):
                ...

            @on_change("intensity")
            def log_field(self, field: str):
                ...
    """
    names = _check_names(field_names)

    def decorate(fn: F) -> F:
        watches = getattr(fn, WATCHES_ATTR, None)
        if watches is None:
            watches = []
            setattr(fn, WATCHES_ATTR, watches)
        # Decorators apply bottom-up; keep source order (top first).
        watches.insert(0, names)
        return fn

    return decorate


def register_handler(cls: type, method_name: str, *field_names: str) -> None:
    """Record an annotation for cls.method_name without decorating it.

    Must run before the type is first resolved: resolved handlers are cached
    for the life of the process.
    """
    names = _check_names(field_names)
    if method_name not in vars(cls):
        raise AttributeError(f"{cls.__name__} does not declare {method_name!r}")
    _anchor.registrations.setdefault(cls, {}).setdefault(method_name, []).append(names)


def declared_watches(cls: type, name: str, member: object) -> list[tuple[str, ...]]:
    """All annotations on one class member: decorators first, then registrations."""
    watches = list(getattr(member, WATCHES_ATTR, ()))
    watches.extend(_anchor.registrations.get(cls, {}).get(name, ()))
    return watches
