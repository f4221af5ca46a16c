"""Resource-type registry.

Maps resource-type names ("User", "Group", ...) to their ResourceType
descriptors and to the record class used to decode them.

Usage:
    # Process-wide default, built on first access
    registry = get_resource_registry()
    rt, found = registry.lookup("User")

    # Explicit instance, injected where it is needed
    registry = ResourceRegistry()
    registry.register_resource(Organization)
    response = decode_list_response(body, registry=registry)

Thread safety:
    ``lookup`` may run concurrently with ``register``. Concurrent calls to
    ``register`` / ``register_resource`` from several threads need external
    synchronization; register custom types at start-up.
"""
from __future__ import annotations
import copy
import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Type

from .group import Group
from .resource import CommonAttributes
from .resource_type import ResourceType
from .schema import Schema
from .service_provider_config import ServiceProviderConfig
from .user import User

logger = logging.getLogger(__name__)

BUILTIN_RESOURCES: Tuple[Type[CommonAttributes], ...] = (
    Group,
    ResourceType,
    Schema,
    ServiceProviderConfig,
    User,
)


@dataclass
class GenericResource(CommonAttributes):
    """Resource of a registered type that has no dedicated record class.

    Only the common attributes are typed; every other member stays in the
    extension bag and is written back unchanged.
    """
    descriptor: Optional[ResourceType] = field(default=None, repr=False, compare=False)

    def resource_type(self) -> Optional[ResourceType]:
        return self.descriptor


class ResourceRegistry:
    """Catalog of resource types keyed by name."""

    def __init__(self, builtins: bool = True):
        """Initialize registry.

        Args:
            builtins: Pre-populate with the protocol's five resource types
        """
        self._types: Dict[str, ResourceType] = {}
        self._classes: Dict[str, Type[CommonAttributes]] = {}
        if builtins:
            self.register_resource(*BUILTIN_RESOURCES)

    def lookup(self, name: str) -> Tuple[Optional[ResourceType], bool]:
        """Return a copy of the descriptor registered under ``name`` and whether it exists.

        Registered descriptors are shared with the resource classes
        (``User.RESOURCE_TYPE``), so callers only ever get copies.
        """
        rt = self._types.get(name)
        if rt is None:
            return None, False
        return copy.deepcopy(rt), True

    def lookup_by_schema(self, urn: str) -> Tuple[Optional[ResourceType], bool]:
        """Return a copy of the descriptor whose canonical schema is ``urn``."""
        for rt in list(self._types.values()):
            if rt.schema == urn:
                return copy.deepcopy(rt), True
        return None, False

    def register(self, *descriptors: ResourceType) -> None:
        """Insert or overwrite descriptors by name.

        Raises:
            ValueError: If a descriptor has no name
        """
        for rt in descriptors:
            if not rt.name:
                raise ValueError("ResourceType descriptor must have a name")
            if rt.name in self._types:
                logger.debug("Overwriting resource type %s", rt.name)
            self._types[rt.name] = rt

    def register_resource(self, *classes: Type[CommonAttributes]) -> None:
        """Register record classes together with their ``RESOURCE_TYPE`` descriptors.

        Raises:
            ValueError: If a class does not declare a named RESOURCE_TYPE
        """
        for cls in classes:
            rt = cls.RESOURCE_TYPE
            if rt is None or not rt.name:
                raise ValueError(f"{cls.__name__} does not declare a RESOURCE_TYPE")
            self.register(rt)
            self._classes[rt.name] = cls

    def resource_class(self, name: str) -> Optional[Type[CommonAttributes]]:
        """Return the record class bound to ``name``, if any."""
        return self._classes.get(name)

    def new_resource(self, name: str) -> Optional[CommonAttributes]:
        """Construct an empty resource of the registered type ``name``.

        Returns None when the type is not registered. Types registered by
        descriptor only are built as GenericResource.
        """
        rt, found = self.lookup(name)
        if not found:
            return None
        cls = self._classes.get(name)
        if cls is None:
            return GenericResource(descriptor=rt)
        return cls()

    def names(self) -> Tuple[str, ...]:
        return tuple(self._types)


_default_registry: Optional[ResourceRegistry] = None
_default_lock = threading.Lock()


def get_resource_registry() -> ResourceRegistry:
    """Return the process-wide registry, creating it on first access."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = ResourceRegistry(builtins=True)
                logger.debug("Initialized resource registry: %s", ", ".join(_default_registry.names()))
    return _default_registry
