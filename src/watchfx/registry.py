"""Handler registry — which methods of a type watch which fields.

Discovery looks only at the type's own namespace (vars(cls)): inherited
handlers, static/class methods and non-public names are never handlers.
Each annotation occurrence becomes one HandlerDescriptor. A method whose
signature the dispatcher cannot call still gets descriptors, so its fields
are tracked, but it is flagged non-invocable and never called.

Results are cached per type for the life of the process.
"""

from __future__ import annotations

import enum
import inspect
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, NamedTuple

from watchfx import _anchor
from watchfx.annotations import declared_watches

logger = logging.getLogger("watchfx.registry")


class ParameterShape(enum.Enum):
    NONE = "none"  # handler(self)
    FIELD_NAME = "field_name"  # handler(self, field: str)
    UNSUPPORTED = "unsupported"


class MethodInfo(NamedTuple):
    """One candidate method as reported by a metadata provider."""

    name: str
    function: Callable
    shape: ParameterShape
    watches: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class HandlerDescriptor:
    """One reaction registration: a method plus the fields one annotation lists."""

    owner: type
    name: str
    function: Callable
    fields: tuple[str, ...]
    shape: ParameterShape

    @property
    def invocable(self) -> bool:
        return self.shape is not ParameterShape.UNSUPPORTED

    def __repr__(self) -> str:
        state = "" if self.invocable else ", non-invocable"
        return f"HandlerDescriptor({self.owner.__name__}.{self.name}, {list(self.fields)}{state})"


def parameter_shape(fn: Callable) -> ParameterShape:
    """Classify fn's parameters after `self`."""
    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError):
        return ParameterShape.UNSUPPORTED

    params = list(sig.parameters.values())
    if not params or params[0].kind not in (
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
    ):
        return ParameterShape.UNSUPPORTED  # no slot for self

    rest = params[1:]
    if not rest:
        return ParameterShape.NONE
    if len(rest) == 1:
        p = rest[0]
        positional = p.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        )
        # Annotations are strings under `from __future__ import annotations`
        if positional and p.annotation in (inspect.Parameter.empty, str, "str"):
            return ParameterShape.FIELD_NAME
    return ParameterShape.UNSUPPORTED


def list_instance_methods(cls: type) -> list[MethodInfo]:
    """Default metadata provider: public instance methods declared on cls itself."""
    methods = []
    for name, member in vars(cls).items():
        if name.startswith("_"):
            continue
        if isinstance(member, (staticmethod, classmethod)) or not inspect.isfunction(member):
            continue
        methods.append(
            MethodInfo(
                name=name,
                function=member,
                shape=parameter_shape(member),
                watches=tuple(declared_watches(cls, name, member)),
            )
        )
    return methods


class HandlerRegistry:
    """Resolves and caches HandlerDescriptors per type.

    The default registry shares its cache with _anchor; a registry built with
    a custom lister keeps its own.
    """

    def __init__(self, lister: Callable[[type], Iterable[MethodInfo]] | None = None) -> None:
        if lister is None:
            self._lister = list_instance_methods
            self._cache = _anchor.handler_cache
        else:
            self._lister = lister
            self._cache = {}

    def resolve(self, cls: type) -> tuple[HandlerDescriptor, ...]:
        cached = self._cache.get(cls)
        if cached is not None:
            return cached

        descriptors = []
        for method in self._lister(cls):
            for fields in method.watches:
                descriptors.append(
                    HandlerDescriptor(
                        owner=cls,
                        name=method.name,
                        function=method.function,
                        fields=tuple(fields),
                        shape=method.shape,
                    )
                )
            if method.watches and method.shape is ParameterShape.UNSUPPORTED:
                logger.debug(
                    "%s.%s has an unsupported signature; tracking its fields but never calling it",
                    cls.__name__, method.name,
                )

        result = tuple(descriptors)
        self._cache[cls] = result
        logger.debug("Resolved %d handler(s) on %s", len(result), cls.__name__)
        return result

    def tracked_fields(self, cls: type) -> tuple[str, ...]:
        """Union of watched names across cls's handlers, in discovery order."""
        seen: dict[str, None] = {}
        for descriptor in self.resolve(cls):
            for name in descriptor.fields:
                seen.setdefault(name, None)
        return tuple(seen)

    def __contains__(self, cls: type) -> bool:
        return cls in self._cache


default_registry = HandlerRegistry()


def resolve_handlers(cls: type) -> tuple[HandlerDescriptor, ...]:
    """Handlers declared on cls, in discovery order. Cached for the process lifetime."""
    return default_registry.resolve(cls)


def tracked_fields(cls: type) -> tuple[str, ...]:
    return default_registry.tracked_fields(cls)
