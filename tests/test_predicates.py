import pytest

from localstorage.core import Node, ObjectMeta
from localstorage.predicates import (
    NODE_NAME_ENV,
    WATCH_NAMESPACE_ENV,
    Predicate,
    app_label_in,
    enqueue_only_labeled_subcomponents,
    get_node_name_env_var,
    get_watch_namespace,
)


def _labelled(app=None):
    labels = {} if app is None else {"app": app}
    return Node(metadata=ObjectMeta(name="n", labels=labels))


def test_app_label_in():
    assert app_label_in(_labelled("diskmaker"), ["diskmaker", "discovery"])
    assert not app_label_in(_labelled("other"), ["diskmaker"])
    assert not app_label_in(_labelled(), ["diskmaker"])


def test_app_label_in_accepts_metadata():
    assert app_label_in(ObjectMeta(labels={"app": "x"}), ("x",))


def test_predicate_filters_every_event_kind():
    predicate = enqueue_only_labeled_subcomponents("diskmaker", "discovery")
    matching, other = _labelled("discovery"), _labelled("other")
    assert predicate.create(matching) and not predicate.create(other)
    assert predicate.delete(matching) and not predicate.delete(other)
    assert predicate.generic(matching) and not predicate.generic(other)


def test_update_passes_if_either_object_matches():
    predicate = enqueue_only_labeled_subcomponents("diskmaker")
    matching, other = _labelled("diskmaker"), _labelled()
    assert predicate.update(other, matching)
    assert predicate.update(matching, other)
    assert not predicate.update(other, other)


def test_no_components_matches_nothing():
    predicate = enqueue_only_labeled_subcomponents()
    assert not predicate.create(_labelled("diskmaker"))


def test_default_predicate_accepts_everything():
    predicate = Predicate()
    obj = _labelled()
    assert predicate.create(obj) and predicate.update(obj, obj)
    assert predicate.delete(obj) and predicate.generic(obj)


def test_node_name_env(monkeypatch):
    monkeypatch.setenv(NODE_NAME_ENV, "worker-1")
    assert get_node_name_env_var() == "worker-1"
    monkeypatch.delenv(NODE_NAME_ENV)
    assert get_node_name_env_var() == ""


def test_watch_namespace(monkeypatch):
    monkeypatch.setenv(WATCH_NAMESPACE_ENV, "local-storage")
    assert get_watch_namespace() == "local-storage"


def test_watch_namespace_may_be_empty(monkeypatch):
    monkeypatch.setenv(WATCH_NAMESPACE_ENV, "")
    assert get_watch_namespace() == ""


def test_watch_namespace_missing(monkeypatch):
    monkeypatch.delenv(WATCH_NAMESPACE_ENV, raising=False)
    with pytest.raises(LookupError, match=WATCH_NAMESPACE_ENV):
        get_watch_namespace()