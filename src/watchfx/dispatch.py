"""Dispatch — decide which handlers fire for one object's changes, and call them.

Handlers are grouped per method: a method that several annotations point at
still fires as one handler. A no-argument handler is called once per cycle;
a handler taking a field name is called once for each changed field it
watches. Non-invocable handlers are skipped.

Handler exceptions are not caught here. They abort the rest of the object's
invocations; containment across objects is the Inspector's job.
"""

from __future__ import annotations

from typing import Any, Iterable, NamedTuple, Sequence

from watchfx.detector import detect_changes
from watchfx.registry import HandlerDescriptor, HandlerRegistry, ParameterShape
from watchfx.snapshot import SnapshotStore, read_values


class Invocation(NamedTuple):
    descriptor: HandlerDescriptor
    args: tuple

    def __call__(self, obj: Any) -> Any:
        return self.descriptor.function(obj, *self.args)

    def __repr__(self) -> str:
        args = ", ".join(repr(a) for a in self.args)
        return f"Invocation({self.descriptor.owner.__name__}.{self.descriptor.name}({args}))"


def plan_invocations(
    descriptors: Sequence[HandlerDescriptor], changed: Iterable[str]
) -> list[Invocation]:
    """Calls to make, in discovery order, for the given changed field names."""
    changed = set(changed)
    if not changed:
        return []

    # method name -> (first descriptor, watched names in declared order)
    methods: dict[str, tuple[HandlerDescriptor, dict[str, None]]] = {}
    for descriptor in descriptors:
        if not descriptor.invocable:
            continue
        _, watched = methods.setdefault(descriptor.name, (descriptor, {}))
        for name in descriptor.fields:
            watched.setdefault(name, None)

    plan = []
    for descriptor, watched in methods.values():
        hits = [name for name in watched if name in changed]
        if not hits:
            continue
        if descriptor.shape is ParameterShape.NONE:
            plan.append(Invocation(descriptor, ()))
        else:
            plan.extend(Invocation(descriptor, (name,)) for name in hits)
    return plan


class Dispatcher:
    """Runs detection + dispatch for single objects against one snapshot store."""

    def __init__(self, store: SnapshotStore, registry: HandlerRegistry) -> None:
        self._store = store
        self._registry = registry

    def baseline(self, obj: Any) -> dict[str, Any]:
        """Capture obj's current values as its baseline. Fires nothing."""
        names = self._registry.tracked_fields(type(obj))
        return self._store.init_from(obj, read_values(self._store.provider, obj, names))

    def changes(self, obj: Any) -> set[str]:
        names = self._registry.tracked_fields(type(obj))
        if not names:
            return set()
        fresh = read_values(self._store.provider, obj, names)
        return detect_changes(self._store, obj, fresh)

    def dispatch(self, obj: Any) -> int:
        """Detect obj's changes and call its handlers. Returns the number of calls."""
        changed = self.changes(obj)
        if not changed:
            return 0
        plan = plan_invocations(self._registry.resolve(type(obj)), changed)
        for invocation in plan:
            invocation(obj)
        return len(plan)
