"""
Phalcon Runtime - Dependency Injection Container

Name-based service container implementing `DiInterface`.

Features:
- Register, overwrite or attempt-register services by name
- Fresh resolution (`get`) and cached shared resolution (`get_shared`)
- Circular shared resolution detection
- Container injection into injection-aware instances
- Process-wide default container slot

Usage:
    container = Container()

    container.set("mailer", Mailer)
    container.set_shared("db", lambda: connect(dsn))
    container.attempt("db", other_factory)   # False, already registered

    db = container.get_shared("db")
    mailer = container.get("mailer", {"sender": "noreply@example.com"})
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Union

from config import get_config
from core.errors import CircularDependencyError, ServiceNotFoundError
from di.interfaces import DiInterface, ServiceInterface
from di.service import Service
from observability.logging import get_logger
from observability.tracing import create_span

logger = get_logger(__name__)


class Container(DiInterface):
    """
    Dependency Injection Container.

    Manages service registration, resolution and the shared instances.
    Mapping access is supported: ``container["db"]`` resolves honouring
    the shared flag, ``container["db"] = factory`` registers a shared
    service, ``"db" in container`` and ``del container["db"]`` check
    and remove.
    """

    def __init__(self, auto_default: Optional[bool] = None) -> None:
        self._services: Dict[str, ServiceInterface] = {}
        self._initializing: set = set()

        if auto_default is None:
            auto_default = get_config().di.auto_default
        if auto_default and DiInterface.get_default() is None:
            DiInterface.set_default(self)

    def set(self, name: str, definition: Any, shared: bool = False) -> ServiceInterface:
        """Register a service, replacing any existing one."""
        service = Service(definition, shared, name=name)
        self._services[name] = service
        logger.debug("Service registered", service=name, shared=shared)
        return service

    def attempt(
        self,
        name: str,
        definition: Any,
        shared: bool = False,
    ) -> Union[ServiceInterface, bool]:
        """Register a service only if the name is free."""
        if name in self._services:
            return False
        return self.set(name, definition, shared)

    def set_service(self, name: str, raw_definition: ServiceInterface) -> ServiceInterface:
        """Register a prepared service entry."""
        self._services[name] = raw_definition
        logger.debug("Service registered", service=name, shared=raw_definition.is_shared())
        return raw_definition

    def has(self, name: str) -> bool:
        return name in self._services

    def remove(self, name: str) -> None:
        """Remove a service and its cached instance; unknown names are ignored."""
        service = self._services.pop(name, None)
        if service is not None:
            service.clear_shared_instance()
            logger.debug("Service removed", service=name)

    def get_service(self, name: str) -> ServiceInterface:
        """Return the registered service entry or raise ServiceNotFoundError."""
        try:
            return self._services[name]
        except KeyError:
            raise ServiceNotFoundError(name) from None

    def get_services(self) -> Dict[str, ServiceInterface]:
        return dict(self._services)

    def get_raw(self, name: str) -> Any:
        return self.get_service(name).get_definition()

    def get(self, name: str, parameters: Any = None) -> Any:
        """Resolve a new instance, ignoring any cached shared instance."""
        service = self.get_service(name)
        return self._resolve(name, service, parameters)

    def get_shared(self, name: str, parameters: Any = None) -> Any:
        """Return the cached instance, resolving and caching it on first use."""
        service = self.get_service(name)
        if service.has_shared_instance():
            return service.get_shared_instance()

        if name in self._initializing:
            raise CircularDependencyError(name)

        self._initializing.add(name)
        try:
            instance = self._resolve(name, service, parameters)
        finally:
            self._initializing.discard(name)

        service.set_shared_instance(instance)
        return instance

    def _resolve(self, name: str, service: ServiceInterface, parameters: Any) -> Any:
        attributes = {"service.name": name, "service.shared": service.is_shared()}
        with create_span("di.resolve", attributes=attributes):
            instance = service.resolve(parameters, self)
        logger.debug("Service resolved", service=name, instance_type=type(instance).__name__)
        return instance

    def __getitem__(self, name: str) -> Any:
        if self.get_service(name).is_shared():
            return self.get_shared(name)
        return self.get(name)

    def __setitem__(self, name: str, definition: Any) -> None:
        self.set_shared(name, definition)

    def __delitem__(self, name: str) -> None:
        self.remove(name)

    def __contains__(self, name: object) -> bool:
        return name in self._services

    def __iter__(self) -> Iterator[str]:
        return iter(self._services)

    def __len__(self) -> int:
        return len(self._services)


def get_default() -> Optional[DiInterface]:
    """Get the process-wide default container."""
    return DiInterface.get_default()


def set_default(container: DiInterface) -> None:
    """Install `container` as the process-wide default container."""
    DiInterface.set_default(container)


def reset_default() -> None:
    """Empty the process-wide default container slot."""
    DiInterface.reset()
