"""The v1 API group: LocalVolume."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from localstorage.core import NodeSelector, ObjectMeta, Toleration, TypeMeta
from localstorage.meta import GroupVersion, SchemeBuilder

LOCAL_VOLUME_KIND = "LocalVolume"

GROUP_VERSION = GroupVersion("local.storage.openshift.io", "v1")

SCHEME_BUILDER = SchemeBuilder(GROUP_VERSION)


class PersistentVolumeMode(str, Enum):
    """How a volume is consumed: as a raw block device or a filesystem."""

    BLOCK = "Block"
    FILESYSTEM = "Filesystem"


class ManagementState(str, Enum):
    """Whether and how the operator manages a component."""

    MANAGED = "Managed"
    UNMANAGED = "Unmanaged"
    REMOVED = "Removed"
    FORCE = "Force"


class LogLevel(str, Enum):
    """Coarse logging intent for a component."""

    NORMAL = "Normal"
    DEBUG = "Debug"
    TRACE = "Trace"
    TRACE_ALL = "TraceAll"


@dataclass
class OperatorCondition:
    """A condition of the operator and its status."""

    type: str
    status: str
    last_transition_time: datetime | None = None
    reason: str = ""
    message: str = ""


@dataclass
class GenerationStatus:
    """The last generation of a resource that was acted on."""

    group: str = ""
    resource: str = ""
    namespace: str = ""
    name: str = ""
    last_generation: int = 0
    hash: str = ""


@dataclass
class StorageClassDevice:
    """A storage class and the device paths that feed it."""

    storage_class_name: str
    volume_mode: PersistentVolumeMode | None = None
    fs_type: str = ""
    device_paths: list[str] = field(default_factory=list)


@dataclass
class LocalVolumeSpec:
    """Desired state of a LocalVolume."""

    management_state: ManagementState | None = None
    log_level: LogLevel | None = None
    node_selector: NodeSelector | None = None
    storage_class_devices: list[StorageClassDevice] = field(default_factory=list)
    tolerations: list[Toleration] = field(default_factory=list)


@dataclass
class LocalVolumeStatus:
    """Observed state of a LocalVolume."""

    observed_generation: int | None = None
    state: ManagementState | None = None
    conditions: list[OperatorCondition] = field(default_factory=list)
    ready_replicas: int = 0
    generations: list[GenerationStatus] = field(default_factory=list)


@dataclass
class LocalVolume:
    """A set of device paths turned into local persistent volumes."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LocalVolumeSpec = field(default_factory=LocalVolumeSpec)
    status: LocalVolumeStatus = field(default_factory=LocalVolumeStatus)
    type_meta: TypeMeta = field(
        default_factory=lambda: TypeMeta(LOCAL_VOLUME_KIND, str(GROUP_VERSION))
    )

    def set_defaults(self) -> None:
        """Fill in the log level and management state where unset."""
        if not self.spec.log_level:
            self.spec.log_level = LogLevel.NORMAL
        if not self.spec.management_state:
            self.spec.management_state = ManagementState.MANAGED


@dataclass
class LocalVolumeList:
    """A list of LocalVolumes."""

    items: list[LocalVolume] = field(default_factory=list)
    type_meta: TypeMeta = field(
        default_factory=lambda: TypeMeta("LocalVolumeList", str(GROUP_VERSION))
    )


SCHEME_BUILDER.register(LocalVolume, LocalVolumeList)