"""Finalizer checks and lookup of the persistent volumes an object owns."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from localstorage.core import ObjectMeta, PersistentVolume, VolumePhase
from localstorage.names import PV_OWNER_KIND_LABEL, PV_OWNER_NAME_LABEL, PV_OWNER_NAMESPACE_LABEL


class PersistentVolumeLister:
    """An in-memory collection of persistent volumes that can be listed by labels."""

    def __init__(self, volumes: Iterable[PersistentVolume] = ()) -> None:
        self.volumes = list(volumes)

    def list_persistent_volumes(self, labels: Mapping[str, str]) -> list[PersistentVolume]:
        """Return the volumes carrying every given label with the given value."""
        return [
            pv
            for pv in self.volumes
            if all(pv.metadata.labels.get(key) == value for key, value in labels.items())
        ]


def contains_finalizer(metadata: ObjectMeta, finalizer: str) -> bool:
    """Report whether the finalizer is present in the metadata."""
    return finalizer in metadata.finalizers


def get_bound_and_released_pvs(
    obj: Any, client: Any
) -> tuple[list[PersistentVolume], list[PersistentVolume]]:
    """Return the bound and the released persistent volumes owned by the object.

    The client needs a ``list_persistent_volumes(labels)`` method.
    """
    try:
        metadata: ObjectMeta = obj.metadata
    except AttributeError:
        raise ValueError(f"could not get object metadata from obj: {obj!r}") from None
    name = metadata.name
    namespace = metadata.namespace
    type_meta = getattr(obj, "type_meta", None)
    kind = type_meta.kind if type_meta is not None else ""
    if not name or not namespace or not kind:
        raise ValueError(
            f"name: {name!r}, namespace: {namespace!r}, or kind: {kind!r} is empty for obj: {obj!r}"
        )
    selector = {
        PV_OWNER_KIND_LABEL: kind,
        PV_OWNER_NAME_LABEL: name,
        PV_OWNER_NAMESPACE_LABEL: namespace,
    }
    try:
        volumes = client.list_persistent_volumes(selector)
    except Exception as exc:
        raise RuntimeError(f"failed to list persistent volumes: {exc}") from exc
    bound = [pv for pv in volumes if pv.phase is VolumePhase.BOUND]
    released = [pv for pv in volumes if pv.phase is VolumePhase.RELEASED]
    return bound, released