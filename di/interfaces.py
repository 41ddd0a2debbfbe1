"""
Phalcon Runtime - Dependency Injection Contracts

Abstract contracts for a name-based service container, its service
entries and the components that receive a container.

The process-wide default container slot lives on `DiInterface` itself:
it is empty until the first `set_default` call, holds one container at
a time, and is emptied only by `reset`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional, Union

from observability.logging import get_logger

logger = get_logger(__name__)


class ServiceInterface(ABC):
    """A registered service: its definition plus the shared-instance state."""

    @abstractmethod
    def get_definition(self) -> Any:
        """Return the service definition."""

    @abstractmethod
    def set_definition(self, definition: Any) -> None:
        """Replace the service definition."""

    @abstractmethod
    def is_shared(self) -> bool:
        """Check whether the service is shared."""

    @abstractmethod
    def set_shared(self, shared: bool) -> None:
        """Set whether the service is shared."""

    @abstractmethod
    def has_shared_instance(self) -> bool:
        """Check whether a shared instance is cached."""

    @abstractmethod
    def get_shared_instance(self) -> Any:
        """Return the cached shared instance, or None."""

    @abstractmethod
    def set_shared_instance(self, instance: Any) -> None:
        """Store the instance handed out for a shared service."""

    @abstractmethod
    def clear_shared_instance(self) -> None:
        """Forget the cached shared instance."""

    @abstractmethod
    def is_resolved(self) -> bool:
        """Return True once the service has been resolved at least once."""

    @abstractmethod
    def resolve(
        self,
        parameters: Any = None,
        container: Optional["DiInterface"] = None,
    ) -> Any:
        """Build an instance from the definition."""


class DiInterface(ABC):
    """
    Service container contract.

    Services are registered under unique names. `get` always builds a new
    instance; `get_shared` hands out one cached instance per name.
    Unknown names raise `ServiceNotFoundError`.
    """

    _default: ClassVar[Optional["DiInterface"]] = None

    @abstractmethod
    def attempt(
        self,
        name: str,
        definition: Any,
        shared: bool = False,
    ) -> Union[ServiceInterface, bool]:
        """
        Register a service only if no service with that name exists.

        Returns:
            The registered service, or False when the name was taken
        """

    @abstractmethod
    def get(self, name: str, parameters: Any = None) -> Any:
        """Resolve a new instance of the service."""

    @abstractmethod
    def get_raw(self, name: str) -> Any:
        """Return the service definition without resolving it."""

    @abstractmethod
    def get_service(self, name: str) -> ServiceInterface:
        """Return the registered service entry."""

    @abstractmethod
    def get_services(self) -> Dict[str, ServiceInterface]:
        """Return all registered service entries keyed by name."""

    @abstractmethod
    def get_shared(self, name: str, parameters: Any = None) -> Any:
        """Return the cached instance, resolving and caching it on first use."""

    @abstractmethod
    def has(self, name: str) -> bool:
        """Check whether a service is registered."""

    @abstractmethod
    def remove(self, name: str) -> None:
        """Remove a service and its cached instance."""

    @abstractmethod
    def set(self, name: str, definition: Any, shared: bool = False) -> ServiceInterface:
        """Register a service, replacing any existing one."""

    @abstractmethod
    def set_service(self, name: str, raw_definition: ServiceInterface) -> ServiceInterface:
        """Register a prepared service entry."""

    def set_shared(self, name: str, definition: Any) -> ServiceInterface:
        """Register an always-shared service."""
        return self.set(name, definition, True)

    @classmethod
    def get_default(cls) -> Optional["DiInterface"]:
        """Return the process-wide default container, if any."""
        return DiInterface._default

    @classmethod
    def set_default(cls, container: "DiInterface") -> None:
        """Make `container` the process-wide default container."""
        previous = DiInterface._default
        if previous is not None and previous is not container:
            logger.debug("Default container replaced", previous=id(previous), current=id(container))
        DiInterface._default = container

    @classmethod
    def reset(cls) -> None:
        """Empty the process-wide default container slot."""
        DiInterface._default = None


class InjectionAwareInterface(ABC):
    """A component that holds a reference to a container it does not own."""

    @abstractmethod
    def set_di(self, container: DiInterface) -> None:
        """Set the dependency injector."""

    @abstractmethod
    def get_di(self) -> DiInterface:
        """Return the dependency injector."""
