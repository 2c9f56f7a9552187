from localstorage.core import NodeSelector
from localstorage.v1 import PersistentVolumeMode
from localstorage.v1alpha1 import (
    LOCAL_VOLUME_SET_KIND,
    DeviceInclusionSpec,
    DeviceMechanicalProperty,
    DeviceState,
    DeviceStatus,
    DeviceType,
    DiscoveredDevice,
    DiscoveredDeviceType,
    DiscoveryPhase,
    LocalVolumeDiscovery,
    LocalVolumeDiscoveryResult,
    LocalVolumeDiscoveryResultList,
    LocalVolumeSet,
    LocalVolumeSetSpec,
)


def test_enum_wire_values():
    assert DiscoveryPhase("Discovering") is DiscoveryPhase.DISCOVERING
    assert DiscoveredDeviceType("lvm") is DiscoveredDeviceType.LVM
    assert DeviceState("NotAvailable") is DeviceState.NOT_AVAILABLE
    assert DeviceMechanicalProperty("NonRotational") is DeviceMechanicalProperty.NON_ROTATIONAL
    assert DeviceType("part") is DeviceType.PARTITION
    assert DeviceType.LOOP.value == "loop"


def test_type_meta_defaults():
    lvset = LocalVolumeSet()
    assert lvset.type_meta.kind == LOCAL_VOLUME_SET_KIND
    assert lvset.type_meta.api_version == "local.storage.openshift.io/v1alpha1"
    assert LocalVolumeDiscovery().type_meta.kind == "LocalVolumeDiscovery"
    assert LocalVolumeDiscoveryResultList().items == []


def test_local_volume_set_spec_defaults():
    spec = LocalVolumeSetSpec(storage_class_name="noop")
    assert spec.max_device_count is None
    assert spec.volume_mode is None
    assert spec.device_inclusion_spec is None
    assert spec.tolerations == []


def test_local_volume_set_with_inclusion_spec():
    spec = LocalVolumeSetSpec(
        storage_class_name="twentytofifty-1",
        max_device_count=2,
        volume_mode=PersistentVolumeMode.BLOCK,
        node_selector=NodeSelector(),
        device_inclusion_spec=DeviceInclusionSpec(device_types=[DeviceType.RAW_DISK]),
    )
    lvset = LocalVolumeSet(spec=spec)
    assert lvset.spec.device_inclusion_spec.device_types == [DeviceType.RAW_DISK]
    assert lvset.spec.device_inclusion_spec.min_size is None
    assert lvset.spec.volume_mode.value == "Block"


def test_discovery_result_holds_devices():
    device = DiscoveredDevice(
        device_id="/dev/disk/by-id/example-disk-0001",
        path="/dev/sdb",
        model="model",
        type=DiscoveredDeviceType.DISK,
        vendor="vendor",
        serial="serial-0001",
        size=10,
        property=DeviceMechanicalProperty.ROTATIONAL,
        fs_type="",
        status=DeviceStatus(DeviceState.AVAILABLE),
    )
    result = LocalVolumeDiscoveryResult()
    result.status.discovered_devices.append(device)
    assert result.spec.node_name == ""
    assert result.status.discovered_devices[0].status.state is DeviceState.AVAILABLE
    assert LocalVolumeDiscoveryResult().status.discovered_devices == []