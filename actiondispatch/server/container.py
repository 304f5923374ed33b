"""Dependency container used to build actions and validators.

Collaborators are bound by key (usually the contract class) and resolved
when an action is constructed, so every dispatch gets a fresh action with
its dependencies injected.

Usage:
    container = Container()
    container.singleton(AuthProvider, lambda c: SessionAuth())
    container.instance(ConversationRepository, repository)

    login = container.build(Login)  # Login(auth: AuthProvider)
"""

from __future__ import annotations

import builtins
import inspect
import threading
from collections.abc import Callable
from typing import Any, get_type_hints

from actiondispatch.commons.exceptions import DependencyResolutionError

Factory = Callable[["Container"], Any]


class Container:
    """Key to factory store with constructor auto-wiring."""

    def __init__(self) -> None:
        self._bindings: dict[Any, tuple[Factory, bool]] = {}
        self._instances: dict[Any, Any] = {}
        self._lock = threading.RLock()
        self.instance(Container, self)

    def bind(self, key: Any, factory: Factory) -> None:
        """Bind a factory that is called on every resolution."""
        with self._lock:
            self._instances.pop(key, None)
            self._bindings[key] = (factory, False)

    def singleton(self, key: Any, factory: Factory) -> None:
        """Bind a factory whose first result is shared by later resolutions."""
        with self._lock:
            self._instances.pop(key, None)
            self._bindings[key] = (factory, True)

    def instance(self, key: Any, obj: Any) -> None:
        """Bind an already built object."""
        with self._lock:
            self._bindings.pop(key, None)
            self._instances[key] = obj

    def has(self, key: Any) -> bool:
        return key in self._instances or key in self._bindings

    def make(self, key: Any) -> Any:
        """Resolve a key.

        Args:
            key: A bound key, or a concrete class to auto-wire

        Returns:
            The resolved object

        Raises:
            DependencyResolutionError: If nothing can produce the key
        """
        if key in self._instances:
            return self._instances[key]

        binding = self._bindings.get(key)
        if binding is not None:
            factory, shared = binding
            if not shared:
                return self._call(key, factory)
            with self._lock:
                # Double-check after acquiring lock
                if key not in self._instances:
                    self._instances[key] = self._call(key, factory)
                return self._instances[key]

        if self._is_buildable(key):
            return self.build(key)

        raise DependencyResolutionError(key, "no binding registered")

    def build(self, cls: type) -> Any:
        """Instantiate ``cls``, resolving its annotated constructor parameters.

        Parameters that cannot be resolved fall back to their default value
        when they have one.
        """
        if not self._is_buildable(cls):
            raise DependencyResolutionError(cls, "not a concrete class")

        try:
            hints = get_type_hints(cls.__init__)
        except Exception as e:
            raise DependencyResolutionError(cls, f"unreadable annotations: {e}") from e

        kwargs: dict[str, Any] = {}
        parameters = list(inspect.signature(cls.__init__).parameters.values())[1:]
        for param in parameters:
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            annotation = hints.get(param.name)
            if annotation is not None and self.has(annotation):
                kwargs[param.name] = self.make(annotation)
            elif param.default is not param.empty:
                continue
            elif annotation is not None and self._is_buildable(annotation):
                kwargs[param.name] = self.build(annotation)
            else:
                raise DependencyResolutionError(
                    cls, f"cannot resolve constructor parameter '{param.name}'"
                )

        try:
            return cls(**kwargs)
        except DependencyResolutionError:
            raise
        except Exception as e:
            raise DependencyResolutionError(cls, str(e)) from e

    def _call(self, key: Any, factory: Factory) -> Any:
        try:
            return factory(self)
        except DependencyResolutionError:
            raise
        except Exception as e:
            raise DependencyResolutionError(key, str(e)) from e

    @staticmethod
    def _is_buildable(key: Any) -> bool:
        return (
            inspect.isclass(key)
            and key.__module__ != builtins.__name__
            and not inspect.isabstract(key)
            and not getattr(key, "_is_protocol", False)
        )
