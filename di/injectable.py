"""
Phalcon Runtime - Injection-Aware Components

Base class for components that receive a container. The component
keeps a plain reference to the container and never creates or
disposes it.
"""

from __future__ import annotations

from typing import Any, Optional

from core.errors import ContainerError, PhalconError
from di.interfaces import DiInterface, InjectionAwareInterface


class AbstractInjectionAware(InjectionAwareInterface):
    """
    Common container access for a class.

    Usage:
        class Mailer(AbstractInjectionAware):
            def send(self, message):
                transport = self.service("transport")
                ...
    """

    _container: Optional[DiInterface] = None

    def set_di(self, container: DiInterface) -> None:
        self._container = container

    def get_di(self) -> DiInterface:
        """
        Return the injected container, falling back to the default one.

        Raises:
            ContainerError: if neither is available
        """
        container = self._container
        if container is None:
            container = DiInterface.get_default()
        if container is None:
            raise ContainerError(PhalconError.container_service_not_found("internal services"))
        return container

    def service(self, name: str) -> Any:
        """
        Resolve the shared service `name` through the container.

        Raises:
            ContainerError: if no container is available
            ServiceNotFoundError: if the service is not registered
        """
        try:
            container = self.get_di()
        except ContainerError as e:
            raise ContainerError(
                PhalconError.container_service_not_found(f"the '{name}' service"),
                service_name=name,
                cause=e,
            ) from e
        return container.get_shared(name)
