"""
Function registry for datamapper.

Schemas refer to transform, condition and validation functions by name. This
module keeps the catalog those names resolve against: three independent
namespaces, each keyed by a unique string.

Key Features:
- Registration is overwrite-on-conflict, so callers can extend or replace
  built-ins without touching engine internals
- Resolving an undeclared name raises UnknownFunctionError naming the missing
  identifier, never a silent no-op
- Lock-guarded storage with per-name registration metadata
- No hidden singleton: engines take an explicit registry; a lazily built
  default instance exists for simple callers

Usage:
    >>> registry = create_registry()
    >>> registry.register_transform("shout", lambda value, row, ctx: f"{value}!")
    >>> registry.get(FunctionKind.TRANSFORM, "shout")("hi", {}, None)
    'hi!'
"""

import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from datamapper.exceptions import RegistryError, UnknownFunctionError


TransformFunction = Callable[..., Any]
ConditionFunction = Callable[..., bool]
ValidationFunction = Callable[..., bool]


class FunctionKind(Enum):
    """The closed set of function namespaces a registry holds."""
    TRANSFORM = "transform"
    CONDITION = "condition"
    VALIDATION = "validation"


class FunctionRegistry:
    """Catalog of named transform, condition and validation functions.

    Each namespace maps a name to a callable. Transforms are invoked as
    ``fn(value, row, context, *args)`` and return the new value; conditions
    and validations take the same arguments and return a truthy result.

    The registry is shared mutable state. Register every custom function
    before starting a run, or give each concurrent run its own registry via
    :meth:`copy`.
    """

    def __init__(self):
        self._functions: Dict[FunctionKind, Dict[str, Callable[..., Any]]] = {
            kind: {} for kind in FunctionKind
        }
        self._registration_metadata: Dict[FunctionKind, Dict[str, Dict[str, Any]]] = {
            kind: {} for kind in FunctionKind
        }
        self._registry_lock = threading.RLock()

    def register(
        self,
        kind: FunctionKind,
        name: str,
        fn: Callable[..., Any],
        source: str = "api"
    ) -> None:
        """Register ``fn`` under ``name``, replacing any previous function.

        Args:
            kind: Namespace to register into
            name: Lookup name used in schemas
            fn: The callable
            source: Registration source ('builtin' or 'api'), kept as metadata

        Raises:
            RegistryError: If the name is empty or ``fn`` is not callable
        """
        if not isinstance(name, str) or not name.strip():
            raise RegistryError(
                f"Function name must be a non-empty string, got {name!r}",
                error_code="REGISTRY_001",
                context={'function_kind': kind.value}
            )
        if not callable(fn):
            raise RegistryError(
                f"Cannot register {kind.value} '{name}': {type(fn).__name__} is not callable",
                error_code="REGISTRY_001",
                context={'function_kind': kind.value, 'function_name': name}
            )

        name = name.strip()
        with self._registry_lock:
            action = "replaced" if name in self._functions[kind] else "registered"
            self._functions[kind][name] = fn
            self._registration_metadata[kind][name] = {
                'registration_time': time.time(),
                'thread_id': threading.current_thread().ident,
                'source': source,
                'action': action,
                'function': getattr(fn, '__qualname__', type(fn).__name__),
            }

        if source != "builtin" or action == "replaced":
            logger.info(f"{action.capitalize()} {kind.value} function '{name}'")

    def register_transform(self, name: str, fn: TransformFunction) -> None:
        """Register a transform ``(value, row, context, *args) -> value``."""
        self.register(FunctionKind.TRANSFORM, name, fn)

    def register_condition(self, name: str, fn: ConditionFunction) -> None:
        """Register a condition ``(value, row, context, *args) -> bool``."""
        self.register(FunctionKind.CONDITION, name, fn)

    def register_validation(self, name: str, fn: ValidationFunction) -> None:
        """Register a validation ``(value, row, context, *args) -> bool``."""
        self.register(FunctionKind.VALIDATION, name, fn)

    def get(self, kind: FunctionKind, name: str) -> Callable[..., Any]:
        """Resolve a function by name.

        Raises:
            UnknownFunctionError: If nothing is registered under ``name``
        """
        with self._registry_lock:
            fn = self._functions[kind].get(name)
        if fn is None:
            raise UnknownFunctionError(name, kind.value)
        return fn

    def has(self, kind: FunctionKind, name: str) -> bool:
        with self._registry_lock:
            return name in self._functions[kind]

    def names(self, kind: FunctionKind) -> List[str]:
        """Sorted names registered in one namespace."""
        with self._registry_lock:
            return sorted(self._functions[kind])

    def unregister(self, kind: FunctionKind, name: str) -> bool:
        """Remove a function. Returns False if it was not registered."""
        with self._registry_lock:
            removed = self._functions[kind].pop(name, None) is not None
            self._registration_metadata[kind].pop(name, None)
        if removed:
            logger.info(f"Unregistered {kind.value} function '{name}'")
        return removed

    def clear(self) -> None:
        """Remove every function from every namespace."""
        with self._registry_lock:
            cleared_count = sum(len(fns) for fns in self._functions.values())
            for kind in FunctionKind:
                self._functions[kind].clear()
                self._registration_metadata[kind].clear()
        logger.info(f"Cleared {cleared_count} functions from registry")

    def get_registration_metadata(self, kind: FunctionKind, name: str) -> Optional[Dict[str, Any]]:
        """Return a copy of the registration metadata for one function."""
        with self._registry_lock:
            metadata = self._registration_metadata[kind].get(name)
            return dict(metadata) if metadata is not None else None

    def copy(self) -> 'FunctionRegistry':
        """Return an independent registry holding the same functions."""
        clone = FunctionRegistry()
        with self._registry_lock:
            for kind in FunctionKind:
                clone._functions[kind] = dict(self._functions[kind])
                clone._registration_metadata[kind] = {
                    name: dict(meta) for name, meta in self._registration_metadata[kind].items()
                }
        return clone

    def __len__(self) -> int:
        with self._registry_lock:
            return sum(len(fns) for fns in self._functions.values())

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{kind.value}s={len(self._functions[kind])}" for kind in FunctionKind
        )
        return f"FunctionRegistry({counts})"


def create_registry(include_builtins: bool = True) -> FunctionRegistry:
    """Build a new registry, pre-populated with the built-in functions by default."""
    registry = FunctionRegistry()
    if include_builtins:
        from datamapper.functions import register_builtins
        register_builtins(registry)
    return registry


_default_registry: Optional[FunctionRegistry] = None
_default_lock = threading.Lock()


def get_default_registry() -> FunctionRegistry:
    """Return the process-wide default registry, building it on first use."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = create_registry()
            logger.debug(f"Initialized default function registry: {_default_registry!r}")
        return _default_registry


def reset_default_registry() -> None:
    """Drop the default registry so the next access rebuilds it from built-ins."""
    global _default_registry
    with _default_lock:
        _default_registry = None


__all__ = [
    'FunctionKind',
    'FunctionRegistry',
    'TransformFunction',
    'ConditionFunction',
    'ValidationFunction',
    'create_registry',
    'get_default_registry',
    'reset_default_registry',
]
