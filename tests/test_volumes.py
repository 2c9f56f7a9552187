from localstorage.names import LOCAL_DISK_LOCATION_ENV
from localstorage.volumes import (
    HostPathType,
    MountPropagation,
    symlink_host_dir_volume,
    symlink_mount,
)


def test_symlink_volume_default(monkeypatch):
    monkeypatch.delenv(LOCAL_DISK_LOCATION_ENV, raising=False)
    volume = symlink_host_dir_volume()
    assert volume.name == "local-disks"
    assert volume.host_path == "/mnt/local-storage"


def test_symlink_volume_and_mount_follow_env(monkeypatch):
    monkeypatch.setenv(LOCAL_DISK_LOCATION_ENV, "/srv/disks")
    volume, mount = symlink_host_dir_volume(), symlink_mount()
    assert volume.host_path == mount.mount_path == "/srv/disks"
    assert volume.name == mount.name
    assert mount.mount_propagation is MountPropagation.HOST_TO_CONTAINER


def test_enum_wire_values():
    assert MountPropagation("HostToContainer") is MountPropagation.HOST_TO_CONTAINER
    assert HostPathType("Directory") is HostPathType.DIRECTORY