"""The v1alpha1 API group: LocalVolumeSet, LocalVolumeDiscovery and discovery results."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from localstorage.core import NodeSelector, ObjectMeta, Toleration, TypeMeta
from localstorage.meta import GroupVersion, SchemeBuilder
from localstorage.v1 import OperatorCondition, PersistentVolumeMode

LOCAL_VOLUME_SET_KIND = "LocalVolumeSet"

GROUP_VERSION = GroupVersion("local.storage.openshift.io", "v1alpha1")

SCHEME_BUILDER = SchemeBuilder(GROUP_VERSION)


def _type_meta(kind: str):
    return lambda: TypeMeta(kind, str(GROUP_VERSION))


class DiscoveryPhase(str, Enum):
    """Phase of the discovery process."""

    DISCOVERING = "Discovering"
    DISCOVERY_FAILED = "DiscoveryFailed"


class DiscoveredDeviceType(str, Enum):
    """Types of device that discovery reports."""

    DISK = "disk"
    PART = "part"
    LVM = "lvm"


class DeviceState(str, Enum):
    """Availability of a discovered device."""

    AVAILABLE = "Available"
    NOT_AVAILABLE = "NotAvailable"
    UNKNOWN = "Unknown"


class DeviceMechanicalProperty(str, Enum):
    """Whether a device is rotational."""

    ROTATIONAL = "Rotational"
    NON_ROTATIONAL = "NonRotational"


class DeviceType(str, Enum):
    """Device types a LocalVolumeSet may select."""

    RAW_DISK = "disk"
    PARTITION = "part"
    LOOP = "loop"


@dataclass
class LocalVolumeDiscoverySpec:
    """Desired state of a LocalVolumeDiscovery."""

    node_selector: NodeSelector | None = None
    tolerations: list[Toleration] = field(default_factory=list)


@dataclass
class LocalVolumeDiscoveryStatus:
    """Observed state of a LocalVolumeDiscovery."""

    phase: DiscoveryPhase | None = None
    conditions: list[OperatorCondition] = field(default_factory=list)
    observed_generation: int = 0


@dataclass
class LocalVolumeDiscovery:
    """Requests continuous device discovery on selected nodes."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LocalVolumeDiscoverySpec = field(default_factory=LocalVolumeDiscoverySpec)
    status: LocalVolumeDiscoveryStatus = field(default_factory=LocalVolumeDiscoveryStatus)
    type_meta: TypeMeta = field(default_factory=_type_meta("LocalVolumeDiscovery"))


@dataclass
class LocalVolumeDiscoveryList:
    """A list of LocalVolumeDiscoveries."""

    items: list[LocalVolumeDiscovery] = field(default_factory=list)
    type_meta: TypeMeta = field(default_factory=_type_meta("LocalVolumeDiscoveryList"))


@dataclass
class DeviceStatus:
    """Availability of a discovered device."""

    state: DeviceState


@dataclass
class DiscoveredDevice:
    """A device found on a node, with its properties."""

    device_id: str
    path: str
    model: str
    type: DiscoveredDeviceType
    vendor: str
    serial: str
    size: int
    property: DeviceMechanicalProperty
    fs_type: str
    status: DeviceStatus


@dataclass
class LocalVolumeDiscoveryResultSpec:
    """The node a discovery result belongs to."""

    node_name: str


@dataclass
class LocalVolumeDiscoveryResultStatus:
    """Devices discovered on a node and when they were last updated."""

    discovered_time_stamp: str = ""
    discovered_devices: list[DiscoveredDevice] = field(default_factory=list)


@dataclass
class LocalVolumeDiscoveryResult:
    """The discovered devices of one node."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LocalVolumeDiscoveryResultSpec = field(
        default_factory=lambda: LocalVolumeDiscoveryResultSpec("")
    )
    status: LocalVolumeDiscoveryResultStatus = field(
        default_factory=LocalVolumeDiscoveryResultStatus
    )
    type_meta: TypeMeta = field(default_factory=_type_meta("LocalVolumeDiscoveryResult"))


@dataclass
class LocalVolumeDiscoveryResultList:
    """A list of LocalVolumeDiscoveryResults."""

    items: list[LocalVolumeDiscoveryResult] = field(default_factory=list)
    type_meta: TypeMeta = field(default_factory=_type_meta("LocalVolumeDiscoveryResultList"))


@dataclass
class DeviceInclusionSpec:
    """Rules a device must satisfy to be included; sizes are in bytes."""

    device_types: list[DeviceType] = field(default_factory=list)
    device_mechanical_properties: list[DeviceMechanicalProperty] = field(default_factory=list)
    min_size: int | None = None
    max_size: int | None = None
    models: list[str] = field(default_factory=list)
    vendors: list[str] = field(default_factory=list)


@dataclass
class LocalVolumeSetSpec:
    """Desired state of a LocalVolumeSet."""

    storage_class_name: str = ""
    node_selector: NodeSelector | None = None
    max_device_count: int | None = None
    volume_mode: PersistentVolumeMode | None = None
    fs_type: str = ""
    tolerations: list[Toleration] = field(default_factory=list)
    device_inclusion_spec: DeviceInclusionSpec | None = None


@dataclass
class LocalVolumeSetStatus:
    """Observed state of a LocalVolumeSet."""

    conditions: list[OperatorCondition] = field(default_factory=list)
    total_provisioned_device_count: int | None = None
    observed_generation: int = 0


@dataclass
class LocalVolumeSet:
    """Automatically turns matching devices into local persistent volumes."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: LocalVolumeSetSpec = field(default_factory=LocalVolumeSetSpec)
    status: LocalVolumeSetStatus = field(default_factory=LocalVolumeSetStatus)
    type_meta: TypeMeta = field(default_factory=_type_meta(LOCAL_VOLUME_SET_KIND))


@dataclass
class LocalVolumeSetList:
    """A list of LocalVolumeSets."""

    items: list[LocalVolumeSet] = field(default_factory=list)
    type_meta: TypeMeta = field(default_factory=_type_meta("LocalVolumeSetList"))


SCHEME_BUILDER.register(
    LocalVolumeDiscovery,
    LocalVolumeDiscoveryList,
    LocalVolumeDiscoveryResult,
    LocalVolumeDiscoveryResultList,
    LocalVolumeSet,
    LocalVolumeSetList,
)