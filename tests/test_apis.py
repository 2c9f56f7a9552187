import pytest

from localstorage import v1, v1alpha1
from localstorage.apis import add_to_scheme
from localstorage.meta import Scheme


@pytest.fixture
def scheme():
    s = Scheme()
    add_to_scheme(s)
    return s


def test_v1_kinds_registered(scheme):
    gvk = scheme.kind_for(v1.LocalVolume())
    assert gvk.group == "local.storage.openshift.io"
    assert gvk.version == "v1"
    assert gvk.kind == "LocalVolume"
    assert isinstance(scheme.new(v1.GROUP_VERSION, "LocalVolumeList"), v1.LocalVolumeList)


def test_v1alpha1_kinds_registered(scheme):
    assert scheme.kind_for(v1alpha1.LocalVolumeSet).version == "v1alpha1"
    created = scheme.new(v1alpha1.GROUP_VERSION, "LocalVolumeDiscoveryResult")
    assert isinstance(created, v1alpha1.LocalVolumeDiscoveryResult)


def test_kinds_not_crossed_between_versions(scheme):
    with pytest.raises(KeyError):
        scheme.new(v1.GROUP_VERSION, "LocalVolumeSet")


def test_adding_twice_is_harmless(scheme):
    add_to_scheme(scheme)
    assert scheme.kind_for(v1.LocalVolume).kind == "LocalVolume"