"""Creation of local persistent volumes for device symlinks found on a node."""

from __future__ import annotations

import copy
import logging
import os
import stat
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

from localstorage.capacity import round_down_capacity_pretty
from localstorage.core import (
    Node,
    NodeSelector,
    NodeSelectorOperator,
    NodeSelectorRequirement,
    NodeSelectorTerm,
    ObjectMeta,
    PersistentVolume,
    PersistentVolumeMode,
    PersistentVolumeSpec,
)
from localstorage.names import (
    DEPRECATED_LABELS,
    PV_DEVICE_ID_LABEL,
    PV_DEVICE_NAME_LABEL,
    PV_OWNER_KIND_LABEL,
    PV_OWNER_NAME_LABEL,
    PV_OWNER_NAMESPACE_LABEL,
)

logger = logging.getLogger(__name__)

ANN_PROVISIONED_BY = "pv.kubernetes.io/provisioned-by"
LABEL_HOSTNAME = "kubernetes.io/hostname"
EVENT_VOLUME_FAILED_DELETE = "VolumeFailedDelete"
EVENT_TYPE_WARNING = "Warning"
RECLAIM_DELETE = "Delete"

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193


class ProvisionerError(Exception):
    """Raised when a local persistent volume cannot be created."""


class _OperationResult(str, Enum):
    NONE = "unchanged"
    CREATED = "created"
    UPDATED = "updated"


@dataclass
class MountConfig:
    """How volumes of one storage class are to be provided."""

    volume_mode: PersistentVolumeMode = PersistentVolumeMode.FILESYSTEM
    fs_type: str = ""


@dataclass
class StorageClass:
    """The parts of a storage class that shape the volumes made for it."""

    name: str
    reclaim_policy: str | None = None
    mount_options: list[str] = field(default_factory=list)


class VolumeUtil:
    """Reads volume modes and capacities from the local filesystem."""

    def get_volume_mode(self, path: str) -> PersistentVolumeMode:
        """Return BLOCK for a block device, FILESYSTEM for a directory."""
        mode = os.stat(path).st_mode
        if stat.S_ISBLK(mode):
            return PersistentVolumeMode.BLOCK
        if stat.S_ISDIR(mode):
            return PersistentVolumeMode.FILESYSTEM
        raise ProvisionerError(f"block device or file system not found at {path!r}")

    def get_block_capacity_bytes(self, path: str) -> int:
        """Return the size of a block device in bytes."""
        with open(path, "rb") as device:
            return device.seek(0, os.SEEK_END)

    def get_fs_capacity_bytes(self, path: str) -> int:
        """Return the total size of the filesystem holding the path, in bytes."""
        stats = os.statvfs(path)
        return stats.f_blocks * stats.f_frsize


def _unescape_mount_path(raw: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(raw):
        chunk = raw[i + 1 : i + 4]
        if raw[i] == "\\" and len(chunk) == 3 and all(c in "01234567" for c in chunk):
            out.append(chr(int(chunk, 8)))
            i += 4
        else:
            out.append(raw[i])
            i += 1
    return "".join(out)


class Mounter:
    """Lists mount points from a mount table in /proc/mounts format."""

    def __init__(self, mounts_file: str = "/proc/mounts") -> None:
        self.mounts_file = mounts_file

    def list_mount_points(self) -> list[str]:
        """Return the mount point of every entry of the mount table."""
        with open(self.mounts_file, encoding="utf-8") as table:
            return [
                _unescape_mount_path(fields[1])
                for fields in (line.split() for line in table)
                if len(fields) >= 2
            ]


@dataclass
class RuntimeConfig:
    """What the provisioner knows about the node it runs on."""

    name: str
    node: Node
    discovery_map: dict[str, MountConfig] = field(default_factory=dict)
    vol_util: Any = field(default_factory=VolumeUtil)
    mounter: Any = field(default_factory=Mounter)
    events: list[tuple[str, str, str, str]] = field(default_factory=list)

    def record_event(self, obj_name: str, event_type: str, reason: str, message: str) -> None:
        self.events.append((obj_name, event_type, reason, message))


@dataclass
class CleanupStatusTracker:
    """Tracks volume cleanups; a name started but not finished is in progress."""

    started: dict[str, datetime] = field(default_factory=dict)
    finished: dict[str, datetime] = field(default_factory=dict)

    def in_progress(self, pv_name: str) -> bool:
        """Report whether the cleanup of the volume is still running."""
        return pv_name in self.started and pv_name not in self.finished

    def remove_status(self, pv_name: str) -> tuple[datetime | None, datetime | None]:
        """Forget a finished cleanup and return its start and end times."""
        if self.in_progress(pv_name):
            raise ProvisionerError(f"cannot remove status of {pv_name!r}: cleanup still running")
        return self.started.pop(pv_name, None), self.finished.pop(pv_name, None)


@dataclass
class LocalPVConfig:
    """Everything needed to describe a local persistent volume."""

    name: str
    host_path: str
    capacity: int
    storage_class: str
    reclaim_policy: str
    provisioner_name: str
    volume_mode: PersistentVolumeMode
    mount_options: list[str] = field(default_factory=list)
    node_affinity: NodeSelector | None = None
    fs_type: str | None = None
    labels: dict[str, str] = field(default_factory=dict)


class PersistentVolumeStore:
    """An in-memory store of persistent volumes keyed by name."""

    def __init__(self) -> None:
        self._volumes: dict[str, PersistentVolume] = {}

    def get(self, name: str) -> PersistentVolume | None:
        """Return a copy of the named volume, or None."""
        pv = self._volumes.get(name)
        return copy.deepcopy(pv) if pv is not None else None

    def create(self, pv: PersistentVolume) -> PersistentVolume:
        """Store a new volume, stamping its creation time."""
        name = pv.metadata.name
        if name in self._volumes:
            raise ValueError(f"persistent volume {name!r} already exists")
        stored = copy.deepcopy(pv)
        if stored.metadata.creation_timestamp is None:
            stored.metadata.creation_timestamp = datetime.now(timezone.utc)
        self._volumes[name] = stored
        return copy.deepcopy(stored)

    def update(self, pv: PersistentVolume) -> PersistentVolume:
        """Replace a stored volume."""
        name = pv.metadata.name
        if name not in self._volumes:
            raise KeyError(f"persistent volume {name!r} not found")
        self._volumes[name] = copy.deepcopy(pv)
        return copy.deepcopy(pv)


def generate_mount_map(runtime_config: RuntimeConfig) -> set[str]:
    """Return the set of mount points on the node."""
    try:
        return set(runtime_config.mounter.list_mount_points())
    except Exception as exc:
        raise ProvisionerError(f"error retrieving mountpoints: {exc}") from exc


def generate_pv_name(file: str, node: str, storage_class: str) -> str:
    """Return a stable volume name from the FNV-1a 32-bit hash of its parts."""
    h = _FNV32_OFFSET
    for byte in (file + node + storage_class).encode("utf-8"):
        h = ((h ^ byte) * _FNV32_PRIME) & 0xFFFFFFFF
    return f"local-pv-{h:x}"


def create_local_pv_spec(config: LocalPVConfig) -> PersistentVolume:
    """Build the persistent volume a configuration describes."""
    return PersistentVolume(
        metadata=ObjectMeta(
            name=config.name,
            labels=dict(config.labels),
            annotations={ANN_PROVISIONED_BY: config.provisioner_name},
        ),
        spec=PersistentVolumeSpec(
            capacity=config.capacity,
            local_path=config.host_path,
            fs_type=config.fs_type,
            storage_class_name=config.storage_class,
            reclaim_policy=config.reclaim_policy,
            volume_mode=config.volume_mode,
            mount_options=list(config.mount_options),
            node_affinity=copy.deepcopy(config.node_affinity),
        ),
    )


def _init_map_if_nil(mapping: dict[str, str]) -> None:
    # Maps of fewer than two entries are reset, as the operator always has done.
    if len(mapping) <= 1:
        mapping.clear()


def _create_or_update(
    client: Any, name: str, new_pv: PersistentVolume, mutate: Callable[[PersistentVolume], None]
) -> tuple[PersistentVolume, _OperationResult]:
    existing = client.get(name)
    if existing is None:
        pv = copy.deepcopy(new_pv)
        mutate(pv)
        return client.create(pv), _OperationResult.CREATED
    before = copy.deepcopy(existing)
    mutate(existing)
    if existing == before:
        return existing, _OperationResult.NONE
    return client.update(existing), _OperationResult.UPDATED


def create_local_pv(
    obj: Any,
    runtime_config: RuntimeConfig,
    cleanup_tracker: CleanupStatusTracker,
    storage_class: StorageClass,
    mount_points: set[str],
    client: Any,
    symlink_path: str,
    device_name: str,
    id_exists: bool,
    extra_labels: dict[str, str] | None,
) -> PersistentVolume | None:
    """Create or complete the local volume for a device symlink.

    Returns the stored volume, or None while an earlier cleanup of it is running.
    """
    node = runtime_config.node
    hostname = node.metadata.labels.get(LABEL_HOSTNAME)
    if hostname is None:
        raise ProvisionerError(
            f"could not find label {LABEL_HOSTNAME!r} for node {node.metadata.name!r}"
        )

    pv_name = generate_pv_name(os.path.basename(symlink_path), node.metadata.name, storage_class.name)
    node_affinity = NodeSelector(
        [
            NodeSelectorTerm(
                match_expressions=[
                    NodeSelectorRequirement(LABEL_HOSTNAME, NodeSelectorOperator.IN, [hostname])
                ]
            )
        ]
    )

    mount_config = runtime_config.discovery_map.get(storage_class.name)
    if mount_config is None:
        raise ProvisionerError(f"could not find config for storageClass: {storage_class.name!r}")
    desired_mode = PersistentVolumeMode(mount_config.volume_mode)

    try:
        actual_mode = runtime_config.vol_util.get_volume_mode(symlink_path)
    except Exception as exc:
        raise ProvisionerError(
            f"could not read the device's volume mode from the node: {exc}"
        ) from exc

    if cleanup_tracker.in_progress(pv_name):
        logger.info("PV %s is still being cleaned, not going to recreate it", pv_name)
        return None
    cleanup_tracker.remove_status(pv_name)

    if actual_mode == PersistentVolumeMode.BLOCK:
        try:
            capacity = runtime_config.vol_util.get_block_capacity_bytes(symlink_path)
        except Exception as exc:
            raise ProvisionerError(f"could not read device capacity: {exc}") from exc
        if desired_mode is PersistentVolumeMode.BLOCK and storage_class.mount_options:
            logger.warning(
                "Path %r will be used to create block volume, mount options %s will not take effect.",
                symlink_path,
                storage_class.mount_options,
            )
    elif actual_mode == PersistentVolumeMode.FILESYSTEM:
        if desired_mode is PersistentVolumeMode.BLOCK:
            raise ProvisionerError(
                f"path {symlink_path!r} of filesystem mode cannot be used to create block volume"
            )
        if symlink_path not in mount_points:
            raise ProvisionerError(f"path {symlink_path!r} is not an actual mountpoint")
        try:
            capacity = runtime_config.vol_util.get_fs_capacity_bytes(symlink_path)
        except Exception as exc:
            raise ProvisionerError(f"path {symlink_path!r} fs stats error: {exc}") from exc
    else:
        raise ProvisionerError(f"path {symlink_path!r} has unexpected volume type {actual_mode!r}")

    metadata = getattr(obj, "metadata", None)
    if not isinstance(metadata, ObjectMeta):
        raise ProvisionerError(f"could not get object metadata from obj: {obj!r}")
    name, namespace = metadata.name, metadata.namespace
    type_meta = getattr(obj, "type_meta", None)
    kind = type_meta.kind if type_meta is not None else ""
    if not name or not namespace or not kind:
        raise ProvisionerError(
            f"name: {name!r}, namespace: {namespace!r}, or kind: {kind!r} is empty for obj: {obj!r}"
        )

    labels = {
        LABEL_HOSTNAME: hostname,
        PV_OWNER_KIND_LABEL: kind,
        PV_OWNER_NAMESPACE_LABEL: namespace,
        PV_OWNER_NAME_LABEL: name,
        **(extra_labels or {}),
    }
    annotations = {
        PV_DEVICE_NAME_LABEL: device_name,
        ANN_PROVISIONED_BY: runtime_config.name,
    }
    if id_exists:
        annotations[PV_DEVICE_ID_LABEL] = os.path.basename(symlink_path)

    if storage_class.reclaim_policy is None:
        logger.error("no ReclaimPolicy set in storageclass, defaulting to delete")
        reclaim_policy = RECLAIM_DELETE
    else:
        reclaim_policy = storage_class.reclaim_policy

    fs_type = mount_config.fs_type
    config = LocalPVConfig(
        name=pv_name,
        host_path=symlink_path,
        capacity=round_down_capacity_pretty(capacity),
        storage_class=storage_class.name,
        reclaim_policy=reclaim_policy,
        provisioner_name=runtime_config.name,
        volume_mode=desired_mode,
        mount_options=list(storage_class.mount_options),
        node_affinity=node_affinity,
        fs_type=fs_type if desired_mode is PersistentVolumeMode.FILESYSTEM and fs_type else None,
    )
    new_pv = create_local_pv_spec(config)

    def mutate(pv: PersistentVolume) -> None:
        if (
            pv.spec.volume_mode is PersistentVolumeMode.BLOCK
            and actual_mode == PersistentVolumeMode.FILESYSTEM
        ):
            message = "incorrect Volume Mode: PV requires block mode but path was in fs mode"
            logger.error("%s (pv %s, path %s)", message, pv_name, symlink_path)
            runtime_config.record_event(
                pv.metadata.name, EVENT_TYPE_WARNING, EVENT_VOLUME_FAILED_DELETE, message
            )
        _init_map_if_nil(pv.metadata.labels)
        for key in DEPRECATED_LABELS:
            pv.metadata.labels.pop(key, None)
        for key, value in labels.items():
            pv.metadata.labels.setdefault(key, value)
        _init_map_if_nil(pv.metadata.annotations)
        for key, value in annotations.items():
            pv.metadata.annotations.setdefault(key, value)

    logger.info("creating PV %s", pv_name)
    pv, result = _create_or_update(client, pv_name, new_pv, mutate)
    if result is not _OperationResult.NONE:
        logger.info("pv %s changed: %s", pv_name, result.value)
    return pv