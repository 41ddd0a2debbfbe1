"""
Phalcon Runtime - Service Entry

A `Service` pairs a definition with its shared flag and, once resolved
through `get_shared`, the cached instance.

Definitions resolve as follows:
- a dotted path string (``"pkg.module:Name"`` or ``"pkg.module.Name"``)
  is imported and then handled like the imported object
- a class is instantiated
- any other callable is called
- anything else is returned unchanged

Parameters are passed as keyword arguments when given as a mapping and
as positional arguments when given as a list or tuple.
"""

from __future__ import annotations

import importlib
from collections.abc import Mapping
from typing import Any, Optional, Tuple

from core.errors import ContainerError, ServiceResolutionError
from di.interfaces import DiInterface, InjectionAwareInterface, ServiceInterface


def import_string(path: str) -> Any:
    """
    Import the object named by `path`.

    Raises:
        ImportError: if the module or attribute cannot be found
    """
    if ":" in path:
        module_name, _, attribute = path.partition(":")
    else:
        module_name, _, attribute = path.rpartition(".")

    if not module_name or not attribute:
        raise ImportError(f"'{path}' is not a dotted path")

    module = importlib.import_module(module_name)
    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError:
            raise ImportError(f"'{module_name}' has no attribute '{attribute}'") from None
    return target


_UNSET = object()


def _split_parameters(parameters: Any) -> Tuple[tuple, dict]:
    if parameters is None:
        return (), {}
    if isinstance(parameters, Mapping):
        return (), dict(parameters)
    if isinstance(parameters, (list, tuple)):
        return tuple(parameters), {}
    return (parameters,), {}


class Service(ServiceInterface):
    """Registered service definition."""

    def __init__(self, definition: Any, shared: bool = False, name: Optional[str] = None):
        self._definition = definition
        self._shared = shared
        self._shared_instance: Any = _UNSET
        self._resolved = False
        self.name = name

    def get_definition(self) -> Any:
        return self._definition

    def set_definition(self, definition: Any) -> None:
        self._definition = definition
        self._shared_instance = _UNSET
        self._resolved = False

    def is_shared(self) -> bool:
        return self._shared

    def set_shared(self, shared: bool) -> None:
        self._shared = shared

    def has_shared_instance(self) -> bool:
        return self._shared_instance is not _UNSET

    def get_shared_instance(self) -> Any:
        return None if self._shared_instance is _UNSET else self._shared_instance

    def set_shared_instance(self, instance: Any) -> None:
        self._shared_instance = instance

    def clear_shared_instance(self) -> None:
        self._shared_instance = _UNSET

    def is_resolved(self) -> bool:
        return self._resolved

    def resolve(
        self,
        parameters: Any = None,
        container: Optional[DiInterface] = None,
    ) -> Any:
        """
        Build a new instance from the definition.

        Raises:
            ServiceResolutionError: if the definition cannot be imported
                or its factory raises
        """
        service_name = self.name or repr(self._definition)
        definition = self._definition

        if isinstance(definition, str):
            try:
                definition = import_string(definition)
            except ImportError as e:
                raise ServiceResolutionError(service_name, str(e), cause=e) from e

        if callable(definition):
            args, kwargs = _split_parameters(parameters)
            try:
                instance = definition(*args, **kwargs)
            except ContainerError:
                raise
            except Exception as e:
                raise ServiceResolutionError(service_name, str(e), cause=e) from e
        else:
            instance = definition

        if container is not None and isinstance(instance, InjectionAwareInterface):
            instance.set_di(container)

        self._resolved = True
        return instance

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, "
            f"definition={self._definition!r}, shared={self._shared})"
        )
