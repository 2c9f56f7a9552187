"""Well-known names, labels, templates and environment-driven defaults."""

from __future__ import annotations

import os

from localstorage.core import Node
from localstorage.v1 import LocalVolume

DEFAULT_DISK_MAKER_IMAGE = "quay.io/openshift/origin-local-storage-diskmaker"
DEFAULT_KUBE_RBAC_PROXY_IMAGE = "quay.io/openshift/origin-kube-rbac-proxy:latest"
DEFAULT_LOCAL_DISK_LOCATION = "/mnt/local-storage"

OWNER_NAMESPACE_LABEL = "local.storage.openshift.io/owner-namespace"
OWNER_NAME_LABEL = "local.storage.openshift.io/owner-name"

DISK_MAKER_IMAGE_ENV = "DISKMAKER_IMAGE"
KUBE_RBAC_PROXY_IMAGE_ENV = "KUBE_RBAC_PROXY_IMAGE"
LOCAL_DISK_LOCATION_ENV = "LOCAL_DISK_LOCATION"

PROVISIONER_CONFIG_MAP_NAME = "local-provisioner"

DISCOVERY_NODE_LABEL = "discovery-result-node"

LOCAL_VOLUME_STORAGE_CLASS_TEMPLATE = "templates/localvolume-storageclass.yaml"
LOCAL_PROVISIONER_CONFIG_MAP_TEMPLATE = "templates/local-provisioner-configmap.yaml"
DISK_MAKER_MANAGER_DAEMON_SET_TEMPLATE = "templates/diskmaker-manager-daemonset.yaml"
DISK_MAKER_DISCOVERY_DAEMON_SET_TEMPLATE = "templates/diskmaker-discovery-daemonset.yaml"
METRICS_SERVICE_TEMPLATE = "templates/localmetrics/service.yaml"
METRICS_SERVICE_MONITOR_TEMPLATE = "templates/localmetrics/service-monitor.yaml"

DISK_MAKER_SERVICE_NAME = "local-storage-diskmaker-metrics"
DISCOVERY_SERVICE_NAME = "local-storage-discovery-metrics"
DISK_MAKER_METRICS_SERVING_CERT = "diskmaker-metric-serving-cert"
DISCOVERY_METRICS_SERVING_CERT = "discovery-metric-serving-cert"

LOCAL_VOLUME_PROTECTION_FINALIZER = "storage.openshift.com/local-volume-protection"

LOCAL_VOLUME_OWNER_NAME_FOR_PV = "storage.openshift.com/local-volume-owner-name"
LOCAL_VOLUME_OWNER_NAMESPACE_FOR_PV = "storage.openshift.com/local-volume-owner-namespace"

PV_OWNER_KIND_LABEL = "storage.openshift.com/owner-kind"
PV_OWNER_NAME_LABEL = "storage.openshift.com/owner-name"
PV_OWNER_NAMESPACE_LABEL = "storage.openshift.com/owner-namespace"
PV_DEVICE_NAME_LABEL = "storage.openshift.com/device-name"
PV_DEVICE_ID_LABEL = "storage.openshift.com/device-id"

# These were moved to annotations because their values were not always valid label values.
DEPRECATED_LABELS: tuple[str, ...] = (PV_DEVICE_NAME_LABEL, PV_DEVICE_ID_LABEL)


def _env_or(name: str, default: str) -> str:
    return os.environ.get(name) or default


def get_disk_maker_image() -> str:
    """Return the diskmaker image, overridable by the environment."""
    return _env_or(DISK_MAKER_IMAGE_ENV, DEFAULT_DISK_MAKER_IMAGE)


def get_kube_rbac_proxy_image() -> str:
    """Return the RBAC proxy sidecar image, overridable by the environment."""
    return _env_or(KUBE_RBAC_PROXY_IMAGE_ENV, DEFAULT_KUBE_RBAC_PROXY_IMAGE)


def get_local_disk_location_path() -> str:
    """Return the host directory holding the device symlinks."""
    return _env_or(LOCAL_DISK_LOCATION_ENV, DEFAULT_LOCAL_DISK_LOCATION)


def local_volume_key(lv: LocalVolume) -> str:
    """Return the namespace/name key of a LocalVolume."""
    return f"{lv.metadata.namespace}/{lv.metadata.name}"


def get_provisioned_by_value(node: Node) -> str:
    """Return the provisioned-by annotation value for PVs made on a node."""
    return f"local-volume-provisioner-{node.metadata.name}-{node.metadata.uid}"


def get_pv_owner_selector(lv: LocalVolume) -> dict[str, str]:
    """Return the labels that select the PVs owned by a LocalVolume."""
    return {
        LOCAL_VOLUME_OWNER_NAME_FOR_PV: lv.metadata.name,
        LOCAL_VOLUME_OWNER_NAMESPACE_FOR_PV: lv.metadata.namespace,
    }