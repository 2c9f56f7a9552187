"""Resource model and helpers for provisioning local storage volumes."""

__version__ = "0.1.0"

__all__ = [
    "apis",
    "capacity",
    "core",
    "finalizers",
    "meta",
    "names",
    "owners",
    "predicates",
    "provisioner",
    "v1",
    "v1alpha1",
    "volumes",
]