"""Group versions and the scheme that maps kinds to object types."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class GroupVersionKind:
    """An API group, version and kind."""

    group: str
    version: str
    kind: str

    @property
    def group_version(self) -> GroupVersion:
        return GroupVersion(self.group, self.version)


@dataclass(frozen=True)
class GroupVersion:
    """An API group and version."""

    group: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    def with_kind(self, kind: str) -> GroupVersionKind:
        """Return the group version kind for this group version and a kind."""
        return GroupVersionKind(self.group, self.version, kind)


class Scheme:
    """A registry from group version kinds to the types that represent them."""

    def __init__(self) -> None:
        self._types: dict[GroupVersionKind, type] = {}
        self._kinds: dict[type, list[GroupVersionKind]] = {}

    def add_known_type(self, group_version: GroupVersion, cls: type) -> None:
        """Register a type under its class name as kind in the group version."""
        gvk = group_version.with_kind(cls.__name__)
        existing = self._types.get(gvk)
        if existing is not None and existing is not cls:
            raise ValueError(f"double registration of different types for {gvk}")
        self._types[gvk] = cls
        kinds = self._kinds.setdefault(cls, [])
        if gvk not in kinds:
            kinds.append(gvk)

    def kind_for(self, obj: object) -> GroupVersionKind:
        """Return the first kind registered for an object or a type."""
        cls = obj if isinstance(obj, type) else type(obj)
        kinds = self._kinds.get(cls)
        if not kinds:
            raise KeyError(f"no kind is registered for the type {cls.__name__}")
        return kinds[0]

    def new(self, group_version: GroupVersion, kind: str) -> object:
        """Create an empty object of a registered kind."""
        try:
            cls = self._types[group_version.with_kind(kind)]
        except KeyError:
            raise KeyError(f"no kind {kind!r} is registered for version {group_version}") from None
        return cls()


class SchemeBuilder:
    """Collects types of one group version to add to schemes later."""

    def __init__(self, group_version: GroupVersion) -> None:
        self.group_version = group_version
        self._types: list[type] = []

    def register(self, *args: type) -> SchemeBuilder:
        """Queue types for registration."""
        self._types.extend(args)
        return self

    def add_to_scheme(self, scheme: Scheme) -> None:
        """Register every queued type with the scheme."""
        for cls in self._types:
            scheme.add_known_type(self.group_version, cls)