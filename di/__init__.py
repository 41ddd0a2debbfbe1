"""
Phalcon Runtime - Dependency Injection Module

Name-based service container and the contracts around it:
- `DiInterface`: register / resolve / shared-instance contract plus the
  process-wide default container slot
- `ServiceInterface` / `Service`: a registered definition
- `Container`: the reference engine
- `InjectionAwareInterface` / `AbstractInjectionAware`: components that
  receive a container

Usage:
    from di import Container, DiInterface

    container = Container()
    container.set_shared("config", load_config)

    config = DiInterface.get_default().get_shared("config")
"""

from di.interfaces import (
    DiInterface,
    InjectionAwareInterface,
    ServiceInterface,
)
from di.service import Service, import_string
from di.container import (
    Container,
    get_default,
    reset_default,
    set_default,
)
from di.injectable import AbstractInjectionAware

__all__ = [
    # Contracts
    "DiInterface",
    "ServiceInterface",
    "InjectionAwareInterface",
    # Implementations
    "Service",
    "Container",
    "AbstractInjectionAware",
    # Default container slot
    "get_default",
    "set_default",
    "reset_default",
    # Utilities
    "import_string",
]
