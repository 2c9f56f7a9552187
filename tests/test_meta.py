import pytest

from localstorage.meta import GroupVersion, Scheme, SchemeBuilder


class Widget:
    pass


class Gadget:
    pass


GV = GroupVersion("example.io", "v2")


def test_group_version_string():
    assert str(GV) == "example.io/v2"
    assert str(GroupVersion("", "v1")) == "v1"


def test_with_kind():
    gvk = GV.with_kind("Widget")
    assert (gvk.group, gvk.version, gvk.kind) == ("example.io", "v2", "Widget")
    assert gvk.group_version == GV


def test_scheme_round_trip():
    scheme = Scheme()
    scheme.add_known_type(GV, Widget)
    assert scheme.kind_for(Widget()) == GV.with_kind("Widget")
    assert scheme.kind_for(Widget) == GV.with_kind("Widget")
    assert isinstance(scheme.new(GV, "Widget"), Widget)


def test_repeated_registration_of_same_type_is_allowed():
    scheme = Scheme()
    scheme.add_known_type(GV, Widget)
    scheme.add_known_type(GV, Widget)
    assert scheme.kind_for(Widget) == GV.with_kind("Widget")


def test_double_registration_of_different_types_raises():
    scheme = Scheme()
    scheme.add_known_type(GV, Widget)
    Impostor = type("Widget", (), {})
    with pytest.raises(ValueError):
        scheme.add_known_type(GV, Impostor)


def test_unknown_lookups_raise():
    scheme = Scheme()
    with pytest.raises(KeyError):
        scheme.kind_for(Gadget())
    with pytest.raises(KeyError):
        scheme.new(GV, "Gadget")


def test_builder_adds_registered_types():
    builder = SchemeBuilder(GV).register(Widget, Gadget)
    scheme = Scheme()
    builder.add_to_scheme(scheme)
    assert scheme.kind_for(Gadget).kind == "Gadget"
    assert isinstance(scheme.new(GV, "Widget"), Widget)