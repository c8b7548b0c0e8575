"""watchfx: react to field changes on inspected objects after each edit cycle."""

from importlib.metadata import version as _version

__version__ = _version("watchfx")

from watchfx.annotations import on_change, register_handler
from watchfx.registry import (
    HandlerDescriptor,
    HandlerRegistry,
    MethodInfo,
    ParameterShape,
    list_instance_methods,
    resolve_handlers,
)
from watchfx.snapshot import (
    MISSING,
    AttributeValueProvider,
    MappingValueProvider,
    SnapshotStore,
    ValueProvider,
)
from watchfx.detector import detect_changes, values_equal
from watchfx.dispatch import Dispatcher, Invocation, plan_invocations
from watchfx.inspector import Inspector
# textual is opt-in, not auto-imported

__all__ = [
    "on_change",
    "register_handler",
    "HandlerDescriptor",
    "HandlerRegistry",
    "MethodInfo",
    "ParameterShape",
    "list_instance_methods",
    "resolve_handlers",
    "MISSING",
    "AttributeValueProvider",
    "MappingValueProvider",
    "SnapshotStore",
    "ValueProvider",
    "detect_changes",
    "values_equal",
    "Dispatcher",
    "Invocation",
    "plan_invocations",
    "Inspector",
]
