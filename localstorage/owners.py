"""A thread-safe association from storage classes to the objects that own them."""

from __future__ import annotations

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class NamespacedName:
    """The namespace and name of an object."""

    namespace: str = ""
    name: str = ""

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class StorageClassOwnerMap:
    """Maps each storage class to its owners so one event can fan out to all of them."""

    def __init__(self) -> None:
        self._owners: dict[str, dict[NamespacedName, None]] = {}
        self._lock = threading.Lock()

    def get_storage_class_owners(self, storage_class: str) -> list[NamespacedName]:
        """Return the owners registered for a storage class, in registration order."""
        with self._lock:
            return list(self._owners.get(storage_class, ()))

    def register_storage_class_owner(self, storage_class: str, name: NamespacedName) -> None:
        """Associate an owner with a storage class."""
        with self._lock:
            self._owners.setdefault(storage_class, {})[name] = None

    def deregister_storage_class_owner(self, storage_class: str, name: NamespacedName) -> None:
        """Remove an owner from a storage class; unknown pairs are ignored."""
        with self._lock:
            owners = self._owners.get(storage_class)
            if owners:
                owners.pop(name, None)