"""Event filters for watched objects and the operator's environment settings."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from localstorage.core import ObjectMeta

NODE_NAME_ENV = "MY_NODE_NAME"
WATCH_NAMESPACE_ENV = "WATCH_NAMESPACE"

ObjectFilter = Callable[[object], bool]


@dataclass(frozen=True)
class Predicate:
    """Decides per event kind whether an event is handled; unset filters accept all."""

    create_func: ObjectFilter | None = None
    update_func: Callable[[object, object], bool] | None = None
    delete_func: ObjectFilter | None = None
    generic_func: ObjectFilter | None = None

    def create(self, obj: object) -> bool:
        """Filter a creation event."""
        return self.create_func(obj) if self.create_func else True

    def update(self, old: object, new: object) -> bool:
        """Filter an update event."""
        return self.update_func(old, new) if self.update_func else True

    def delete(self, obj: object) -> bool:
        """Filter a deletion event."""
        return self.delete_func(obj) if self.delete_func else True

    def generic(self, obj: object) -> bool:
        """Filter a generic event."""
        return self.generic_func(obj) if self.generic_func else True


def _metadata(obj: object) -> ObjectMeta:
    return obj if isinstance(obj, ObjectMeta) else obj.metadata  # type: ignore[attr-defined]


def app_label_in(obj: object, components: Iterable[str]) -> bool:
    """Report whether the object's "app" label is one of the components."""
    app_name = _metadata(obj).labels.get("app")
    return app_name is not None and app_name in components


def enqueue_only_labeled_subcomponents(*args: str) -> Predicate:
    """Return a predicate passing only objects whose "app" label is one of the arguments."""
    components = tuple(args)

    def accept(obj: object) -> bool:
        return app_label_in(obj, components)

    return Predicate(
        create_func=accept,
        update_func=lambda old, new: accept(old) or accept(new),
        delete_func=accept,
        generic_func=accept,
    )


def get_node_name_env_var() -> str:
    """Return the node name from the environment, or an empty string."""
    return os.environ.get(NODE_NAME_ENV, "")


def get_watch_namespace() -> str:
    """Return the namespace to watch; raise LookupError if it is not set."""
    try:
        return os.environ[WATCH_NAMESPACE_ENV]
    except KeyError:
        raise LookupError(f"{WATCH_NAMESPACE_ENV} must be set") from None