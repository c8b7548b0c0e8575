"""Snapshot store — last-observed field values per inspected object.

Keyed by object identity. The first access for an object reads its current
values and stores them as the baseline; nothing fires for a baseline. reset()
drops an object so the next access starts over.

Mutable builtin containers and value dataclasses (eq=True) are captured by a
shallow copy, so editing a list in place still shows up as a change while the
objects it holds keep their identity. Everything else is held as-is and
compared with ==, which for plain objects means identity.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
from typing import Any, Iterable, Mapping, Protocol

logger = logging.getLogger("watchfx.snapshot")


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_COPIED_TYPES = (list, dict, set, bytearray)


def _is_value_dataclass(value: Any) -> bool:
    if not dataclasses.is_dataclass(value) or isinstance(value, type):
        return False
    return type(value).__dataclass_params__.eq


def capture(value: Any) -> Any:
    """Value to store as a baseline.

    One level deep: a list of child objects is copied, the children are not.
    A value that cannot be copied is stored by reference.
    """
    if not isinstance(value, _COPIED_TYPES) and not _is_value_dataclass(value):
        return value
    try:
        return copy.copy(value)
    except (TypeError, copy.Error):
        logger.debug("Cannot copy %s; keeping a reference", type(value).__name__)
        return value


# ─── Value providers ─────────────────────────────────────────────────────────


class ValueProvider(Protocol):
    def get_current_value(self, obj: Any, name: str) -> Any:
        """Current value of obj's field, or MISSING if obj has no such field."""
        ...


class AttributeValueProvider:
    """Reads fields as attributes. The default provider."""

    def get_current_value(self, obj: Any, name: str) -> Any:
        return getattr(obj, name, MISSING)


class MappingValueProvider:
    """Reads fields as keys of a dict-like object."""

    def get_current_value(self, obj: Mapping, name: str) -> Any:
        try:
            return obj[name]
        except KeyError:
            return MISSING


def read_values(provider: ValueProvider, obj: Any, names: Iterable[str]) -> dict[str, Any]:
    """Query the provider once per name."""
    return {name: provider.get_current_value(obj, name) for name in names}


# ─── Store ───────────────────────────────────────────────────────────────────


class SnapshotStore:
    """Session-scoped mapping: object identity -> {field name: baseline value}."""

    def __init__(self, provider: ValueProvider | None = None) -> None:
        self._provider = provider if provider is not None else AttributeValueProvider()
        # id(obj) -> (obj, values). The object is kept so its id is never reused.
        self._entries: dict[int, tuple[Any, dict[str, Any]]] = {}

    @property
    def provider(self) -> ValueProvider:
        return self._provider

    def get(self, obj: Any) -> dict[str, Any] | None:
        """Stored values for obj, or None if it has no snapshot yet."""
        entry = self._entries.get(id(obj))
        return entry[1] if entry is not None else None

    def get_or_init(self, obj: Any, field_names: Iterable[str]) -> dict[str, Any]:
        values = self.get(obj)
        if values is None:
            values = self.init_from(obj, read_values(self._provider, obj, field_names))
        return values

    def init_from(self, obj: Any, fresh_values: Mapping[str, Any]) -> dict[str, Any]:
        """Store fresh_values as obj's baseline, replacing any previous one."""
        values = {}
        for name, value in fresh_values.items():
            if value is MISSING:
                logger.debug("%s has no field %r; not tracking it", type(obj).__name__, name)
                continue
            values[name] = capture(value)
        self._entries[id(obj)] = (obj, values)
        return values

    def reset(self, obj: Any) -> None:
        self._entries.pop(id(obj), None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, obj: Any) -> bool:
        return id(obj) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SnapshotStore({len(self._entries)} object(s))"
