# localstorage

A Python library that describes local storage resources and turns device
symlinks on a node into local persistent volumes. It has no dependencies
outside the standard library.

## What it contains

- `localstorage.core`: shared object types (`ObjectMeta`, `TypeMeta`, `Node`,
  `PersistentVolume`, `Toleration`, …) and node selection.
  `node_selector_matches_node_labels(node, selector)` returns `True` when the
  selector is `None`, and otherwise checks the terms with
  `match_node_selector_terms`. A node matches when any one term matches.
  Malformed requirements raise `ValueError`.
- `localstorage.meta`: `GroupVersion`, `Scheme` and `SchemeBuilder`. A
  `Scheme` maps group-version kinds to Python types.
- `localstorage.v1`: `LocalVolume` and `LocalVolumeList`.
  `LocalVolume.set_defaults()` sets the log level to `Normal` and the
  management state to `Managed` where they are unset.
- `localstorage.v1alpha1`: `LocalVolumeSet`, `LocalVolumeDiscovery`,
  `LocalVolumeDiscoveryResult` and the lists of each.
- `localstorage.apis`: `add_to_scheme(scheme)` registers every kind above.
- `localstorage.capacity`: the constants `KIB`, `MIB`, `GIB` and `TIB`, and
  `round_down_capacity_pretty`.
- `localstorage.names`: well-known label, annotation and finalizer names, and
  helpers that read settings from the environment.
- `localstorage.owners`: `StorageClassOwnerMap`, a thread-safe map from a
  storage class to its owners. Each owner is a `NamespacedName`.
- `localstorage.predicates`: `enqueue_only_labeled_subcomponents(*names)`
  builds a `Predicate` that passes only objects whose `app` label is one of
  the given names.
- `localstorage.finalizers`: `contains_finalizer`, and
  `get_bound_and_released_pvs(obj, client)`. The second function lists the
  PVs labelled as owned by `obj` and splits them into bound and released.
- `localstorage.volumes`: the pod volumes and mounts the node daemons use,
  for example `symlink_host_dir_volume()`, `DEV_HOST_DIR_VOLUME` and
  `UDEV_MOUNT`.
- `localstorage.provisioner`:
  - `generate_pv_name` gives a stable FNV-1a name for a volume.
  - `generate_mount_map` lists the node's mount points.
  - `create_local_pv` validates a symlink's volume mode and mount point, reads
    its capacity, and creates the PV. If the PV already exists, it adds the
    missing labels and annotations instead.
  - `VolumeUtil` reads volume modes and capacities from the local filesystem.
  - `Mounter` reads a mount table in `/proc/mounts` format.
  - `PersistentVolumeStore` is an in-memory PV store.
  - `ProvisionerError` is the exception these functions raise.

## Installation

```
pip install .
```

## Examples

```python
from localstorage.capacity import GIB, round_down_capacity_pretty

assert round_down_capacity_pretty(13 * GIB - 1) == 12 * GIB
```

```python
from localstorage.owners import NamespacedName, StorageClassOwnerMap

owners = StorageClassOwnerMap()
owners.register_storage_class_owner("fast", NamespacedName(namespace="local-storage", name="fastdisks"))
print(owners.get_storage_class_owners("fast"))
```

```python
from localstorage.v1 import LocalVolume

lv = LocalVolume()
lv.set_defaults()
```

```python
from localstorage.provisioner import generate_pv_name

name = generate_pv_name("sdb", "worker-0", "local-sc")  # "local-pv-" and a hex hash
```

## Environment

- `get_disk_maker_image()` reads `DISKMAKER_IMAGE`.
- `get_kube_rbac_proxy_image()` reads `KUBE_RBAC_PROXY_IMAGE`.
- `get_local_disk_location_path()` reads `LOCAL_DISK_LOCATION`. If it is unset,
  the path is `/mnt/local-storage`.
- `get_node_name_env_var()` reads `MY_NODE_NAME`. If it is unset, the result is
  an empty string.
- `get_watch_namespace()` reads `WATCH_NAMESPACE`. If it is unset, it raises
  `LookupError`.

## What it does not do

This is a library only. It has no command, it runs no controller or
reconcile loop, and it does not talk to a cluster API server.

Objects are kept in memory. `PersistentVolumeStore` and
`PersistentVolumeLister` stand in for a cluster client. Any object with the
same methods can take their place.

The library does not discover devices and does not create symlinks.

## Tests

```
pip install .[test]
pytest
```