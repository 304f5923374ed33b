"""Factory Registry - name-keyed store of action and validator factories.

Provides:
- Factory registration by request name (last write wins)
- Lookup of the factory at dispatch time
- Fresh instantiation per lookup (nothing is cached)
- Freezing once the server starts serving traffic
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from actiondispatch.commons.exceptions import RegistryFrozenError
from actiondispatch.server.container import Container

T = TypeVar("T")

# A class built through the container, or a callable taking the container.
FactoryLike = type | Callable[[Container], Any]


class FactoryRegistry(Generic[T]):
    """Registry mapping request names to factories.

    Registration is expected to complete before concurrent dispatch begins;
    after ``freeze()`` the mapping is read-only and may be shared between
    threads without locking.
    """

    def __init__(self, label: str) -> None:
        """Initialize an empty registry.

        Args:
            label: Name used in error messages and logs
        """
        self.label = label
        self._factories: dict[str, FactoryLike] = {}
        self._frozen = False

    def register(self, name: str, factory: FactoryLike) -> None:
        """Register a factory under ``name``, replacing any previous one.

        Args:
            name: The request name
            factory: Class or ``(container) -> object`` callable

        Raises:
            RegistryFrozenError: If the registry has been frozen
            ValueError: If name is empty or factory is not callable
        """
        if self._frozen:
            raise RegistryFrozenError(self.label, name)
        if not name:
            raise ValueError(f"{self.label} name must be a non-empty string")
        if not callable(factory):
            raise ValueError(f"{self.label} factory for '{name}' must be callable")
        self._factories[name] = factory

    def unregister(self, name: str) -> None:
        if self._frozen:
            raise RegistryFrozenError(self.label, name)
        self._factories.pop(name, None)

    def get(self, name: str) -> FactoryLike | None:
        return self._factories.get(name)

    def has(self, name: str) -> bool:
        return name in self._factories

    def names(self) -> list[str]:
        return list(self._factories.keys())

    def create(self, name: str, container: Container) -> T | None:
        """Build a fresh object for ``name``.

        Args:
            name: The request name
            container: Container resolving constructor dependencies

        Returns:
            A new instance, or None if nothing is registered for the name
        """
        factory = self._factories.get(name)
        if factory is None:
            return None
        if isinstance(factory, type):
            return container.build(factory)
        return factory(container)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories

    def __repr__(self) -> str:
        return f"FactoryRegistry(label='{self.label}', names={self.names()})"
