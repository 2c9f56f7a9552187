import threading

from localstorage.owners import NamespacedName, StorageClassOwnerMap

VALUES = {
    "fast": [
        NamespacedName(name="fastdisks", namespace="local-storage"),
        NamespacedName(name="fastworkerdisks", namespace="local-storage"),
    ],
    "slow": [NamespacedName(name="slowdisks", namespace="local-storage")],
    "large": [NamespacedName(name="largedisks", namespace="local-storage")],
    "small": [
        NamespacedName(name="smallerthanthirty", namespace="local-storage"),
        NamespacedName(name="smallerthanfifty", namespace="local-storage-two"),
    ],
}

REMOVE_VALUES = {
    "fast": [NamespacedName(name="fastdisks", namespace="local-storage")],
    "small": [NamespacedName(name="smallerthanthirty", namespace="local-storage")],
}


def _populated():
    owners = StorageClassOwnerMap()
    for storage_class, names in VALUES.items():
        for name in names:
            owners.register_storage_class_owner(storage_class, name)
    return owners


def test_registered_associations_are_found():
    owners = _populated()
    for storage_class, names in VALUES.items():
        found = owners.get_storage_class_owners(storage_class)
        for name in names:
            assert name in found


def test_deregistered_associations_are_not_found():
    owners = _populated()
    for storage_class, names in REMOVE_VALUES.items():
        for name in names:
            owners.deregister_storage_class_owner(storage_class, name)
    for storage_class, names in REMOVE_VALUES.items():
        found = owners.get_storage_class_owners(storage_class)
        for name in names:
            assert name not in found
    assert owners.get_storage_class_owners("fast") == [
        NamespacedName(name="fastworkerdisks", namespace="local-storage")
    ]


def test_unknown_storage_class_is_empty():
    owners = StorageClassOwnerMap()
    assert owners.get_storage_class_owners("missing") == []
    owners.deregister_storage_class_owner("missing", NamespacedName("ns", "n"))
    assert owners.get_storage_class_owners("missing") == []


def test_register_is_idempotent():
    owners = StorageClassOwnerMap()
    name = NamespacedName(namespace="ns", name="a")
    owners.register_storage_class_owner("sc", name)
    owners.register_storage_class_owner("sc", name)
    assert owners.get_storage_class_owners("sc") == [name]


def test_returned_list_is_a_copy():
    owners = _populated()
    found = owners.get_storage_class_owners("slow")
    found.clear()
    assert len(owners.get_storage_class_owners("slow")) == 1


def test_concurrent_registration():
    owners = StorageClassOwnerMap()

    def register(start):
        for i in range(start, start + 50):
            owners.register_storage_class_owner("sc", NamespacedName("ns", str(i)))

    threads = [threading.Thread(target=register, args=(n * 50,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(owners.get_storage_class_owners("sc")) == 200


def test_namespaced_name_str():
    assert str(NamespacedName(namespace="local-storage", name="fastdisks")) == (
        "local-storage/fastdisks"
    )